# API module - spreadsheet I/O for bulk form validation

from .excel_io import (
    FormWorkbook,
    SpreadsheetError,
    get_form_columns,
)

__all__ = [
    "FormWorkbook",
    "SpreadsheetError",
    "get_form_columns",
]
