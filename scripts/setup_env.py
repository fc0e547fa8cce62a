"""Utility script to scaffold a local .env file."""
from __future__ import annotations

import secrets
from pathlib import Path

ENV_TEMPLATE = """# Environment configuration for Teacher Evaluation Reports
STAFF_PASSWORD={password}
DEBUG=true
DATA_FILE=data/evaluations.json
# Arabic TTF font used by PDF exports, relative to ASSETS_DIR
PDF_FONT_FILE=fonts/DejaVuSans.ttf
"""


def main() -> None:
    env_path = Path(".env")
    if env_path.exists():
        print(".env already exists. No changes made.")
        return

    password = secrets.token_urlsafe(12)
    env_path.write_text(ENV_TEMPLATE.format(password=password), encoding="utf-8")
    Path("data").mkdir(exist_ok=True)
    print(f"Created .env with staff password {password}. Please review the file before deployment.")


if __name__ == "__main__":
    main()
