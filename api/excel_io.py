"""
Excel file I/O for bulk form validation.

Admins can fill one row per submission in a spreadsheet (for example, one
employee per row for the Create User form), upload it, and get back the
error map of every row, or the same sheet with the failing cells marked.
"""

import logging
import zipfile
from io import BytesIO
from typing import Any, BinaryIO, Dict, List, Optional

import openpyxl
import pandas as pd
from openpyxl.comments import Comment
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils.exceptions import InvalidFileException

from validation import AVAILABLE_FORMS, get_form_schema, validate_frame

logger = logging.getLogger(__name__)

ERRORS_COLUMN = "errors"

HEADER_FONT = Font(bold=True, color="FFFFFF")
HEADER_FILL = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
HEADER_ALIGNMENT = Alignment(horizontal="center", vertical="center", wrap_text=True)
ERROR_FILL = PatternFill(start_color="F8CBAD", end_color="F8CBAD", fill_type="solid")


class SpreadsheetError(ValueError):
    """The uploaded file cannot be read as a form workbook."""


def get_form_columns(form_name: str, values: Optional[Dict[str, Any]] = None) -> List[str]:
    """Column headers for a form, in schema order."""
    return list(get_form_schema(form_name, values).keys())


class FormWorkbook:
    """Reads and writes one-sheet workbooks holding one form submission per row."""

    def __init__(self, form_name: str, max_rows: Optional[int] = None):
        # Raises UnknownFormError for names outside AVAILABLE_FORMS
        columns = get_form_columns(form_name)
        self.form_name = form_name
        self.max_rows = max_rows
        self.data: pd.DataFrame = pd.DataFrame(columns=columns)

    def load_from_file(self, file_source: BinaryIO) -> pd.DataFrame:
        """Load the first sheet of an Excel file; the first row holds field names."""
        try:
            workbook = openpyxl.load_workbook(file_source, data_only=True)
        except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError, ValueError) as e:
            raise SpreadsheetError(f"Could not read workbook: {e}") from e

        ws = workbook.worksheets[0]
        header_row = next(ws.iter_rows(min_row=1, max_row=1, values_only=True), None)
        if not header_row or not any(header_row):
            raise SpreadsheetError("The first row must contain the form's field names")
        headers = [str(h).strip() if h is not None else None for h in header_row]

        data = []
        for row in ws.iter_rows(min_row=2, values_only=True):
            if any(cell is not None for cell in row):
                row_dict = {}
                for i, header in enumerate(headers):
                    if header and i < len(row):
                        row_dict[header] = row[i]
                data.append(row_dict)

        if self.max_rows is not None and len(data) > self.max_rows:
            raise SpreadsheetError(f"Workbook has {len(data)} rows; the limit is {self.max_rows}")

        df = pd.DataFrame(data)
        for col in get_form_columns(self.form_name):
            if col not in df.columns:
                df[col] = None

        logger.info("Loaded %d %s rows from workbook", len(df), self.form_name)
        self.data = df
        return df

    def validate(self) -> List[Dict[str, str]]:
        """One error map per loaded row."""
        return validate_frame(self.data, lambda values: get_form_schema(self.form_name, values))

    def create_template(self) -> bytes:
        """An empty workbook with the form's field names as headers."""
        return self._save(pd.DataFrame(columns=get_form_columns(self.form_name)), None)

    def build_report(self, row_errors: Optional[List[Dict[str, str]]] = None) -> bytes:
        """The loaded rows with an errors column and failing cells highlighted."""
        if row_errors is None:
            row_errors = self.validate()
        return self._save(self.data, row_errors)

    def _save(self, df: pd.DataFrame, row_errors: Optional[List[Dict[str, str]]]) -> bytes:
        workbook = openpyxl.Workbook()
        ws = workbook.active
        ws.title = AVAILABLE_FORMS[self.form_name]["name"][:31]

        columns = list(df.columns)
        if row_errors is not None:
            columns.append(ERRORS_COLUMN)

        for col_idx, col_name in enumerate(columns, 1):
            cell = ws.cell(row=1, column=col_idx, value=col_name)
            cell.font = HEADER_FONT
            cell.fill = HEADER_FILL
            cell.alignment = HEADER_ALIGNMENT

        for row_idx, row in enumerate(df.itertuples(index=False), 2):
            errors = row_errors[row_idx - 2] if row_errors is not None else {}
            for col_idx, value in enumerate(row, 1):
                if value is not None and pd.isna(value):
                    value = None
                cell = ws.cell(row=row_idx, column=col_idx, value=value)
                field_name = df.columns[col_idx - 1]
                if field_name in errors:
                    cell.fill = ERROR_FILL
                    cell.comment = Comment(str(errors[field_name]), "MindEase")
            if row_errors is not None:
                summary = "; ".join(f"{k}: {v}" for k, v in errors.items())
                ws.cell(row=row_idx, column=len(columns), value=summary or None)

        ws.freeze_panes = "A2"

        output = BytesIO()
        workbook.save(output)
        output.seek(0)
        return output.read()
