"""
Criteria template loader for new evaluations.

Templates come from ``config/criteria_templates.json`` when present; the
built-in set below is used otherwise. Callers always receive fresh model
instances with every score at 0.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from web.services.models import Criterion, CriterionGroup, SubType

logger = logging.getLogger(__name__)

# Path to config directory
CONFIG_DIR = Path(__file__).parent.parent.parent / "config"

TEMPLATES_FILENAME = "criteria_templates.json"

# Cached raw templates keyed by source file
_template_cache: Dict[str, Dict[str, Any]] = {}


def load_templates(config_dir: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load the raw template document.

    Args:
        config_dir: Directory holding ``criteria_templates.json``.
                    Defaults to the repository ``config`` directory.

    Returns:
        Dictionary with a ``general`` criteria list and a ``class_session``
        mapping of sub type to group list.
    """
    config_file = Path(config_dir or CONFIG_DIR) / TEMPLATES_FILENAME
    cache_key = str(config_file)

    if cache_key in _template_cache:
        return _template_cache[cache_key]

    if not config_file.exists():
        return _get_fallback_templates()

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            templates = json.load(f)
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning(f"Could not read criteria templates from {config_file}: {exc}")
        return _get_fallback_templates()

    _template_cache[cache_key] = templates
    return templates


def general_template(config_dir: Optional[Path] = None) -> List[Criterion]:
    """Return the general-evaluation criteria with scores reset to 0."""
    raw = load_templates(config_dir).get("general", [])
    return [Criterion.model_validate({**item, "score": 0}) for item in raw]


def class_session_template(
    sub_type: SubType = SubType.BRIEF,
    config_dir: Optional[Path] = None,
) -> List[CriterionGroup]:
    """
    Return deep copies of the class-session groups for ``sub_type``.

    Unknown sub types fall back to the brief template.
    """
    sessions = load_templates(config_dir).get("class_session", {})
    raw_groups = sessions.get(SubType(sub_type).value) or sessions.get(SubType.BRIEF.value, [])
    return [
        CriterionGroup(
            id=group["id"],
            title=group["title"],
            criteria=[Criterion.model_validate({**item, "score": 0}) for item in group.get("criteria", [])],
        )
        for group in raw_groups
    ]


def clear_cache():
    """Clear the template cache to force reload from files."""
    global _template_cache
    _template_cache = {}


def _get_fallback_templates() -> Dict[str, Any]:
    """
    Returns the built-in templates if no config file is available.
    """
    return {
        "general": [
            {"id": "gen-1", "label": "إعداد الخطط الفصلية واليومية"},
            {"id": "gen-2", "label": "التمكن من المادة العلمية"},
            {"id": "gen-3", "label": "تنويع استراتيجيات التدريس"},
            {"id": "gen-4", "label": "توظيف الوسائل والتقنيات التعليمية"},
            {"id": "gen-5", "label": "إدارة الصف وضبط السلوك"},
            {"id": "gen-6", "label": "مراعاة الفروق الفردية بين الطلبة"},
            {"id": "gen-7", "label": "تنويع أساليب التقويم وأدواته"},
            {"id": "gen-8", "label": "متابعة الواجبات والأنشطة وتصحيحها"},
            {"id": "gen-9", "label": "معالجة الضعف ورعاية المتميزين"},
            {"id": "gen-10", "label": "السير في المنهج وفق الخطة الزمنية"},
        ],
        "class_session": {
            "brief": [
                {
                    "id": "brief-planning",
                    "title": "التخطيط للدرس",
                    "criteria": [
                        {"id": "brief-planning-1", "label": "وضوح أهداف الدرس وصياغتها"},
                        {"id": "brief-planning-2", "label": "ملاءمة التهيئة لموضوع الدرس"},
                    ],
                },
                {
                    "id": "brief-delivery",
                    "title": "تنفيذ الدرس",
                    "criteria": [
                        {"id": "brief-delivery-1", "label": "تنويع استراتيجيات التدريس"},
                        {"id": "brief-delivery-2", "label": "توظيف الوسائل التعليمية"},
                        {"id": "brief-delivery-3", "label": "إدارة زمن الحصة"},
                    ],
                },
                {
                    "id": "brief-environment",
                    "title": "البيئة الصفية",
                    "criteria": [
                        {"id": "brief-environment-1", "label": "إدارة الصف وضبطه"},
                        {"id": "brief-environment-2", "label": "تفاعل الطلبة ومشاركتهم"},
                    ],
                },
                {
                    "id": "brief-assessment",
                    "title": "التقويم",
                    "criteria": [
                        {"id": "brief-assessment-1", "label": "التقويم التكويني أثناء الدرس"},
                        {"id": "brief-assessment-2", "label": "غلق الدرس وتلخيصه"},
                    ],
                },
            ],
            "extended": [
                {
                    "id": "extended-planning",
                    "title": "التخطيط للدرس",
                    "criteria": [
                        {"id": "extended-planning-1", "label": "وضوح أهداف الدرس وصياغتها"},
                        {"id": "extended-planning-2", "label": "ملاءمة التهيئة لموضوع الدرس"},
                        {"id": "extended-planning-3", "label": "ربط الدرس بالخبرات السابقة"},
                    ],
                },
                {
                    "id": "extended-delivery",
                    "title": "تنفيذ الدرس",
                    "criteria": [
                        {"id": "extended-delivery-1", "label": "تنويع استراتيجيات التدريس"},
                        {"id": "extended-delivery-2", "label": "توظيف الوسائل التعليمية"},
                        {"id": "extended-delivery-3", "label": "إدارة زمن الحصة"},
                        {"id": "extended-delivery-4", "label": "مراعاة الفروق الفردية"},
                        {"id": "extended-delivery-5", "label": "تنمية مهارات التفكير العليا"},
                    ],
                },
                {
                    "id": "extended-environment",
                    "title": "البيئة الصفية",
                    "criteria": [
                        {"id": "extended-environment-1", "label": "إدارة الصف وضبطه"},
                        {"id": "extended-environment-2", "label": "تفاعل الطلبة ومشاركتهم"},
                        {"id": "extended-environment-3", "label": "توفير بيئة آمنة ومحفزة"},
                    ],
                },
                {
                    "id": "extended-assessment",
                    "title": "التقويم",
                    "criteria": [
                        {"id": "extended-assessment-1", "label": "التقويم التكويني أثناء الدرس"},
                        {"id": "extended-assessment-2", "label": "تقديم التغذية الراجعة"},
                        {"id": "extended-assessment-3", "label": "غلق الدرس وتلخيصه"},
                    ],
                },
            ],
            "subject_specific": [
                {
                    "id": "subject-content",
                    "title": "المحتوى العلمي",
                    "criteria": [
                        {"id": "subject-content-1", "label": "دقة المعلومات العلمية"},
                        {"id": "subject-content-2", "label": "توظيف مهارات المادة"},
                    ],
                },
                {
                    "id": "subject-practice",
                    "title": "التطبيق العملي",
                    "criteria": [
                        {"id": "subject-practice-1", "label": "ربط المادة بالحياة اليومية"},
                        {"id": "subject-practice-2", "label": "توظيف الأنشطة العملية"},
                    ],
                },
            ],
        },
    }
