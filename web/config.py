"""Application configuration for the Teacher Evaluation Reports service."""
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings

BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables."""

    STAFF_PASSWORD: str = Field(
        default="supervisor2024", description="Shared staff password for authentication"
    )
    DEBUG: bool = Field(default=False, description="Enable FastAPI debug mode")
    SESSION_DURATION_HOURS: int = Field(default=8, ge=1, description="Session lifetime")
    DATA_FILE: Path = Field(
        default=BASE_DIR / "data" / "evaluations.json",
        description="JSON document holding teachers, reports and custom criteria",
    )
    CONFIG_DIR: Path = Field(
        default=BASE_DIR / "config",
        description="Directory containing the criteria templates",
    )
    ASSETS_DIR: Path = Field(
        default=BASE_DIR / "assets",
        description="Directory containing static assets such as fonts",
    )
    PDF_FONT_FILE: str = Field(
        default="fonts/DejaVuSans.ttf",
        description="Arabic TTF font for PDF exports, relative to ASSETS_DIR",
    )
    SHARE_BASE_URL: str = Field(
        default="https://api.whatsapp.com/send",
        description="Message-compose endpoint used for share links",
    )

    model_config = {
        "env_file": ".env",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
    }

    @property
    def pdf_font_path(self) -> Path:
        return self.ASSETS_DIR / self.PDF_FONT_FILE


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached instance of the application settings."""
    return Settings()
