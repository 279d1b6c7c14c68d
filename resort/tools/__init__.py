from resort.tools.sheets_logger import (
    ConversationRecord,
    SheetsLogger,
    get_sheets_logger,
)

__all__ = ["ConversationRecord", "SheetsLogger", "get_sheets_logger"]
