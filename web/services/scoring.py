from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import List

from web.services.models import (
    MAX_CRITERION_SCORE,
    ClassSessionEvaluationReport,
    Criterion,
    GeneralEvaluationReport,
    Report,
)


def flatten_criteria(report: Report) -> List[Criterion]:
    """Every criterion of the report in display order, whatever its nesting."""
    if isinstance(report, GeneralEvaluationReport):
        return list(report.criteria)
    if isinstance(report, ClassSessionEvaluationReport):
        return [criterion for group in report.criterion_groups for criterion in group.criteria]
    raise TypeError(f"Unsupported report type: {type(report).__name__}")


def flatten_scores(report: Report) -> List[int]:
    return [criterion.score for criterion in flatten_criteria(report)]


def criterion_percentage(score: int, max_score: int = MAX_CRITERION_SCORE) -> float:
    if max_score == 0:
        return 0.0
    return score / max_score * 100.0


def calculate_report_percentage(report: Report) -> float:
    """
    Achieved points over maximum points, as a percentage in [0, 100].

    A report without criteria scores 0.
    """
    scores = flatten_scores(report)
    if not scores:
        return 0.0
    return sum(scores) * 100.0 / (len(scores) * MAX_CRITERION_SCORE)


def format_percentage(value: float, places: int = 2) -> str:
    # Half-up rounding, e.g. 3.125 -> "3.13"
    quantum = Decimal(1).scaleb(-places)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))
