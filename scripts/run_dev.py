"""Run the evaluation reports server for local development."""
from __future__ import annotations

import logging

import uvicorn

from web.config import get_settings

logger = logging.getLogger(__name__)


def main() -> None:
    """Launch uvicorn with settings-aware defaults."""
    settings = get_settings()
    if not settings.pdf_font_path.exists():
        logger.warning(f"PDF font {settings.pdf_font_path} not found; Arabic text in PDFs will not render")
    uvicorn.run(
        "web.app:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info",
    )


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()
