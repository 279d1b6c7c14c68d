from __future__ import annotations

import logging
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import quote

import httpx
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request as GoogleAuthRequest
from google.oauth2 import service_account
from pydantic import BaseModel, ConfigDict, Field, model_validator

from config.settings import get_settings


logger = logging.getLogger(__name__)

SHEETS_API_URL = "https://sheets.googleapis.com/v4/spreadsheets"
SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
PLACEHOLDER = "N/A"

HEADER_ROW = [
    "Call Time",
    "Phone Number",
    "Call Outcome",
    "Customer Name",
    "Room Name",
    "Check In Date",
    "Check Out Date",
    "Number of Guests",
    "Call Summary",
]


def _number_text(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return value


class ConversationRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    call_time: Optional[str] = Field(None, alias="callTime")
    phone_number: Optional[str] = Field(None, alias="phoneNumber")
    call_outcome: Optional[str] = Field(None, alias="callOutcome")
    customer_name: Optional[str] = Field(None, alias="customerName")
    room_name: Optional[str] = Field(None, alias="roomName")
    check_in_date: Optional[str] = Field(None, alias="checkInDate")
    check_out_date: Optional[str] = Field(None, alias="checkOutDate")
    number_of_guests: Optional[str] = Field(None, alias="numberOfGuests")
    call_summary: Optional[str] = Field(None, alias="callSummary")

    @model_validator(mode="before")
    @classmethod
    def _stringify(cls, values):
        # Callers send guest counts and phone numbers as JSON numbers too.
        if isinstance(values, dict):
            return {key: _number_text(value) for key, value in values.items()}
        return values

    def to_row(self) -> List[str]:
        call_time = self.call_time or datetime.now(timezone.utc).isoformat()
        rest = [
            self.phone_number,
            self.call_outcome,
            self.customer_name,
            self.room_name,
            self.check_in_date,
            self.check_out_date,
            self.number_of_guests,
            self.call_summary,
        ]
        return [call_time] + [value or PLACEHOLDER for value in rest]


def _load_service_account(credentials_path: str):
    return service_account.Credentials.from_service_account_file(
        credentials_path, scopes=SCOPES
    )


class SheetsLogger:
    """Appends conversation records to a Google Sheets tab.

    Authentication and sheet provisioning happen lazily on first use via
    ``ensure_initialized``. Initialization is idempotent, so concurrent first
    calls only cost an extra token round trip.
    """

    def __init__(
        self,
        credentials_path: Optional[str],
        spreadsheet_id: Optional[str],
        sheet_name: str = "Conversation Logs",
        timeout: float = 10.0,
        credentials_loader: Callable[[str], Any] = _load_service_account,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.credentials_path = credentials_path
        self.spreadsheet_id = spreadsheet_id
        self.sheet_name = sheet_name
        self.timeout = timeout
        self._credentials_loader = credentials_loader
        self._transport = transport
        self._credentials = None
        self.initialized = False

    @property
    def _quoted_sheet(self) -> str:
        escaped = self.sheet_name.replace("'", "''")
        return f"'{escaped}'"

    def _values_url(self, cell_range: str) -> str:
        encoded = quote(f"{self._quoted_sheet}!{cell_range}", safe="")
        return f"{SHEETS_API_URL}/{self.spreadsheet_id}/values/{encoded}"

    def _auth_headers(self) -> Dict[str, str]:
        if not self._credentials.valid:
            self._credentials.refresh(GoogleAuthRequest())
        return {"Authorization": f"Bearer {self._credentials.token}"}

    def _request(self, method: str, url: str, **kwargs: Any) -> Dict[str, Any]:
        with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
            response = client.request(method, url, headers=self._auth_headers(), **kwargs)
            response.raise_for_status()
            return response.json() if response.content else {}

    def _ensure_sheet_exists(self) -> None:
        spreadsheet = self._request(
            "GET",
            f"{SHEETS_API_URL}/{self.spreadsheet_id}",
            params={"fields": "sheets.properties.title"},
        )
        titles = {
            sheet.get("properties", {}).get("title")
            for sheet in spreadsheet.get("sheets", [])
        }
        if self.sheet_name in titles:
            return

        try:
            self._request(
                "POST",
                f"{SHEETS_API_URL}/{self.spreadsheet_id}:batchUpdate",
                json={"requests": [{"addSheet": {"properties": {"title": self.sheet_name}}}]},
            )
        except httpx.HTTPStatusError as exc:
            # Another caller created the tab (and writes its header) first.
            if exc.response.status_code == 400 and "already exists" in exc.response.text:
                logger.info('Sheet "%s" was created concurrently', self.sheet_name)
                return
            raise
        self._request(
            "PUT",
            self._values_url("A1:I1"),
            params={"valueInputOption": "USER_ENTERED"},
            json={"values": [HEADER_ROW]},
        )
        logger.info('Sheet "%s" created with headers', self.sheet_name)

    def ensure_initialized(self) -> None:
        """Authenticate and make sure the target sheet exists. Raises on failure."""
        if self.initialized:
            return
        if not self.credentials_path or not self.spreadsheet_id:
            raise RuntimeError(
                "Google Sheets logging is not configured: set "
                "GOOGLE_SHEETS_CREDENTIALS_PATH and GOOGLE_SHEETS_SPREADSHEET_ID"
            )

        if self._credentials is None:
            self._credentials = self._credentials_loader(self.credentials_path)
        self._ensure_sheet_exists()
        self.initialized = True
        logger.info("Google Sheets logger initialized successfully")

    def log_conversation(self, record: ConversationRecord) -> Dict[str, Any]:
        try:
            self.ensure_initialized()
            result = self._request(
                "POST",
                f"{self._values_url('A:I')}:append",
                params={
                    "valueInputOption": "USER_ENTERED",
                    "insertDataOption": "INSERT_ROWS",
                },
                json={"values": [record.to_row()]},
            )
        except (GoogleAuthError, httpx.HTTPError, OSError, RuntimeError, ValueError) as exc:
            logger.error("Error logging to Google Sheets: %s", exc)
            return {"success": False, "error": str(exc)}

        updates = result.get("updates", {})
        logger.info("%s cells updated in Google Sheets", updates.get("updatedCells"))
        return {
            "success": True,
            "updated_cells": updates.get("updatedCells"),
            "updated_range": updates.get("updatedRange"),
        }


@lru_cache(maxsize=1)
def get_sheets_logger() -> SheetsLogger:
    settings = get_settings()
    return SheetsLogger(
        credentials_path=settings.sheets_credentials_path,
        spreadsheet_id=settings.sheets_spreadsheet_id,
        sheet_name=settings.sheets_sheet_name,
        timeout=settings.sheets_timeout_seconds,
    )
