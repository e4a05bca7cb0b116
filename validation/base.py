"""
Base validation module with shared types and helper functions.

This module provides the foundation for the validation system:
- ErrorKind enum tagging the category of a field failure
- Data classes for validation results and issues
- Helper functions for emptiness checks and value normalization
"""

from typing import Dict, List, Any, Optional
from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
import pandas as pd


# ============================================================================
# ERROR KINDS
# ============================================================================

class ErrorKind(str, Enum):
    """Category of a field validation failure."""
    REQUIRED = "required"
    FORMAT = "format"
    LENGTH = "length"
    RANGE = "range"
    MISMATCH = "mismatch"
    FUTURE = "future"


# ============================================================================
# DATA CLASSES
# ============================================================================

@dataclass
class ValidationIssue:
    """A single field failure: the message shown to the user plus its tags."""
    field: str
    message: str
    rule: Optional[str] = None
    kind: Optional[ErrorKind] = None

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        if self.kind is not None:
            result["kind"] = self.kind.value
        return {k: v for k, v in result.items() if v is not None}


@dataclass
class ValidationResult:
    """Result of validating a form."""
    is_valid: bool = True
    issues: List[ValidationIssue] = field(default_factory=list)
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    @property
    def errors(self) -> Dict[str, str]:
        """The sparse field -> message map."""
        return {i.field: i.message for i in self.issues}

    @property
    def error_count(self) -> int:
        return len(self.issues)

    def add_issue(self, issue: ValidationIssue):
        self.issues.append(issue)
        self.is_valid = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "error_count": self.error_count,
            "errors": self.errors,
            "issues": [i.to_dict() for i in self.issues],
            "timestamp": self.timestamp
        }


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def is_missing(value: Any) -> bool:
    """Check if value is absent (None, empty string or a pandas NaN/NaT)."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (list, tuple, set, dict)):
        return False
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def is_blank(value: Any) -> bool:
    """Check if value is missing or a whitespace-only string."""
    if is_missing(value):
        return True
    return str(value).strip() == ""


def as_text(value: Any) -> str:
    """Render a field value as text for pattern and length checks."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_bound(bound: Any) -> str:
    """Format a numeric bound the way messages display it (12, not 12.0)."""
    if isinstance(bound, float) and bound.is_integer():
        return str(int(bound))
    return str(bound)


# ============================================================================
# PUBLIC API
# ============================================================================

__all__ = [
    # Enums
    "ErrorKind",

    # Data classes
    "ValidationIssue",
    "ValidationResult",

    # Helper functions
    "is_missing",
    "is_blank",
    "as_text",
    "format_bound",
]
