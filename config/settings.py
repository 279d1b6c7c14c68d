from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


load_dotenv()

PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings:
    """Application settings loaded from environment variables.

    Keep all paths, budgets and Google Sheets credentials centralized here.
    Keyword arguments override the environment (used by tests).
    """

    def __init__(
        self,
        app_env: Optional[str] = None,
        data_root: Optional[Path | str] = None,
        token_budget: Optional[int] = None,
        sheets_credentials_path: Optional[str] = None,
        sheets_spreadsheet_id: Optional[str] = None,
        sheets_sheet_name: Optional[str] = None,
        sheets_timeout_seconds: Optional[float] = None,
        port: Optional[int] = None,
    ) -> None:
        self.app_env: str = app_env or os.getenv("APP_ENV", "development")
        self.data_root: Path = Path(
            data_root or os.getenv("DATA_ROOT", str(PROJECT_ROOT / "public"))
        )
        self.token_budget: int = (
            token_budget
            if token_budget is not None
            else int(os.getenv("TOKEN_BUDGET", "800"))
        )
        self.sheets_credentials_path: Optional[str] = (
            sheets_credentials_path or os.getenv("GOOGLE_SHEETS_CREDENTIALS_PATH")
        )
        self.sheets_spreadsheet_id: Optional[str] = (
            sheets_spreadsheet_id or os.getenv("GOOGLE_SHEETS_SPREADSHEET_ID")
        )
        self.sheets_sheet_name: str = sheets_sheet_name or os.getenv(
            "GOOGLE_SHEETS_SHEET_NAME", "Conversation Logs"
        )
        self.sheets_timeout_seconds: float = (
            sheets_timeout_seconds
            if sheets_timeout_seconds is not None
            else float(os.getenv("SHEETS_TIMEOUT_SECONDS", "10"))
        )
        self.port: int = port if port is not None else int(os.getenv("PORT", "3000"))

        if self.token_budget < 1:
            raise ValueError(
                f"TOKEN_BUDGET must be a positive integer, got {self.token_budget}"
            )

    @property
    def is_development(self) -> bool:
        return self.app_env.lower() in {"dev", "development", "local"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
