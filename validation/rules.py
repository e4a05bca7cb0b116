"""
Rule library for form field validation.

Every rule is a pure function ``rule(value, label=None, *params)`` that
returns ``None`` when the value is acceptable, or the message to show next
to the field. Messages are ``RuleMessage`` strings: they compare and render
exactly like plain ``str`` but also carry an ``ErrorKind`` tag.

Rules only ever look at their own arguments. A rule that needs a second
value (``password_match``) receives it as an extra parameter bound by the
caller.
"""

import math
import re
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

import pandas as pd

from .base import ErrorKind, is_blank, is_missing, as_text, format_bound


DEFAULT_LABEL = "This field"

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
NAME_PATTERN = re.compile(r"[a-zA-Z\s]+")
NIC_PATTERN = re.compile(r"[0-9]{9}[Vv]|[0-9]{12}")
PHONE_PATTERN = re.compile(r"(\+94|0)[1-9][0-9]{8}")

PASSWORD_MIN_LENGTH = 8
NAME_MIN_LENGTH = 2


class RuleMessage(str):
    """A field error message tagged with the kind of failure."""

    kind: ErrorKind

    def __new__(cls, message: str, kind: ErrorKind):
        obj = super().__new__(cls, message)
        obj.kind = kind
        return obj


Rule = Callable[..., Optional[str]]


def _label(label: Optional[str]) -> str:
    return label if label else DEFAULT_LABEL


# ============================================================================
# RULES
# ============================================================================

def required(value: Any, label: Optional[str] = None) -> Optional[str]:
    if is_blank(value):
        return RuleMessage(f"{_label(label)} is required", ErrorKind.REQUIRED)
    return None


def email(value: Any, label: Optional[str] = None) -> Optional[str]:
    if is_missing(value):
        return RuleMessage("Email is required", ErrorKind.REQUIRED)
    if not EMAIL_PATTERN.fullmatch(as_text(value)):
        return RuleMessage("Please enter a valid email address", ErrorKind.FORMAT)
    return None


def password(value: Any, label: Optional[str] = None) -> Optional[str]:
    """Password strength; reports only the first unmet condition."""
    if is_missing(value):
        return RuleMessage("Password is required", ErrorKind.REQUIRED)
    text = as_text(value)
    if len(text) < PASSWORD_MIN_LENGTH:
        return RuleMessage(
            f"Password must be at least {PASSWORD_MIN_LENGTH} characters long", ErrorKind.LENGTH
        )
    if not re.search(r"[a-z]", text):
        return RuleMessage("Password must contain at least one lowercase letter", ErrorKind.FORMAT)
    if not re.search(r"[A-Z]", text):
        return RuleMessage("Password must contain at least one uppercase letter", ErrorKind.FORMAT)
    if not re.search(r"[0-9]", text):
        return RuleMessage("Password must contain at least one number", ErrorKind.FORMAT)
    return None


def name(value: Any, label: Optional[str] = None) -> Optional[str]:
    missing = required(value, label)
    if missing:
        return missing
    text = as_text(value)
    if len(text) < NAME_MIN_LENGTH:
        return RuleMessage(
            f"{_label(label)} must be at least {NAME_MIN_LENGTH} characters long", ErrorKind.LENGTH
        )
    if not NAME_PATTERN.fullmatch(text):
        return RuleMessage(f"{_label(label)} can only contain letters and spaces", ErrorKind.FORMAT)
    return None


def nic(value: Any, label: Optional[str] = None) -> Optional[str]:
    """Sri Lankan national identity card number (old or new format)."""
    if is_missing(value):
        return RuleMessage("NIC number is required", ErrorKind.REQUIRED)
    if not NIC_PATTERN.fullmatch(as_text(value)):
        return RuleMessage(
            "Please enter a valid Sri Lankan NIC number (9 digits + V or 12 digits)",
            ErrorKind.FORMAT,
        )
    return None


def phone(value: Any, label: Optional[str] = None) -> Optional[str]:
    # Optional field
    if is_missing(value):
        return None
    if not PHONE_PATTERN.fullmatch(as_text(value)):
        return RuleMessage("Please enter a valid Sri Lankan phone number", ErrorKind.FORMAT)
    return None


def _parse_date(value: Any) -> Optional[datetime]:
    """Parse a field value as a date, or None when it does not read as one."""
    if isinstance(value, bool) or not pd.api.types.is_scalar(value):
        return None
    try:
        parsed = pd.to_datetime(value, errors="coerce")
    except (TypeError, ValueError):
        return None
    if not pd.isna(parsed):
        return parsed.to_pydatetime()
    # pandas cannot hold dates past 2262 and coerces them to NaT
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


def _naive_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


def date(value: Any, label: Optional[str] = None, now: Optional[datetime] = None) -> Optional[str]:
    """
    Dates that must not lie in the future (birthdays, log entries).

    Text that does not parse as a date is left alone, matching how the
    browser forms behave.
    """
    if is_missing(value):
        return RuleMessage(f"{_label(label)} is required", ErrorKind.REQUIRED)

    parsed = _parse_date(value)
    if parsed is None:
        return None

    if now is None:
        current = datetime.now(timezone.utc) if parsed.tzinfo is not None else datetime.now()
    elif isinstance(now, datetime):
        current = now
    else:
        current = pd.Timestamp(now).to_pydatetime()

    if parsed.tzinfo is None and current.tzinfo is not None:
        current = _naive_utc(current)
    elif parsed.tzinfo is not None and current.tzinfo is None:
        current = current.replace(tzinfo=parsed.tzinfo)

    if parsed > current:
        return RuleMessage(f"{_label(label)} cannot be in the future", ErrorKind.FUTURE)
    return None


def number(value: Any, label: Optional[str] = None, min: float = 0, max: Optional[float] = None) -> Optional[str]:
    # Optional field
    if is_missing(value):
        return None
    text = as_text(value)
    try:
        # float() also reads "1_000" and "inf"; neither is a field number
        num = math.nan if "_" in text else float(text)
    except ValueError:
        num = math.nan
    if not math.isfinite(num):
        return RuleMessage(f"{_label(label)} must be a valid number", ErrorKind.FORMAT)
    if num < min:
        return RuleMessage(f"{_label(label)} must be at least {format_bound(min)}", ErrorKind.RANGE)
    if max is not None and num > max:
        return RuleMessage(f"{_label(label)} must be no more than {format_bound(max)}", ErrorKind.RANGE)
    return None


def text_length(value: Any, label: Optional[str] = None, min: int = 0, max: Optional[int] = None) -> Optional[str]:
    # Optional field
    if is_missing(value):
        return None
    length = len(as_text(value))
    if length < min:
        return RuleMessage(
            f"{_label(label)} must be at least {format_bound(min)} characters long", ErrorKind.LENGTH
        )
    if max is not None and length > max:
        return RuleMessage(
            f"{_label(label)} must be no more than {format_bound(max)} characters long", ErrorKind.LENGTH
        )
    return None


def select(value: Any, label: Optional[str] = None) -> Optional[str]:
    if is_missing(value):
        return RuleMessage(f"Please select a {_label(label)}", ErrorKind.REQUIRED)
    return None


def password_match(value: Any, label: Optional[str] = None, other: Any = None) -> Optional[str]:
    """Confirmation field; ``other`` is the password typed in the sibling field."""
    if is_missing(value):
        return RuleMessage("Please confirm your password", ErrorKind.REQUIRED)
    if value != other:
        return RuleMessage("Passwords do not match", ErrorKind.MISMATCH)
    return None


def array(value: Any, label: Optional[str] = None, min: int = 0, max: Optional[int] = None) -> Optional[str]:
    if is_missing(value):
        return RuleMessage(f"{_label(label)} is required", ErrorKind.REQUIRED)
    count = len(value) if hasattr(value, "__len__") else 1
    if count == 0:
        return RuleMessage(f"{_label(label)} is required", ErrorKind.REQUIRED)
    if count < min:
        return RuleMessage(f"{_label(label)} must have at least {format_bound(min)} item(s)", ErrorKind.RANGE)
    if max is not None and count > max:
        return RuleMessage(
            f"{_label(label)} must have no more than {format_bound(max)} item(s)", ErrorKind.RANGE
        )
    return None


# ============================================================================
# RULE TABLE
# ============================================================================

# Public rule names, as used by form schemas sent over the API
RULES: Dict[str, Rule] = {
    "required": required,
    "email": email,
    "password": password,
    "name": name,
    "nic": nic,
    "phone": phone,
    "date": date,
    "number": number,
    "textLength": text_length,
    "select": select,
    "passwordMatch": password_match,
    "array": array,
}

RULE_NAMES: Dict[Rule, str] = {fn: rule_name for rule_name, fn in RULES.items()}


def get_rule(rule_name: str) -> Rule:
    """Look up a rule by its public name."""
    if rule_name not in RULES:
        raise UnknownRuleError(rule_name)
    return RULES[rule_name]


class UnknownRuleError(ValueError):
    """A schema referenced a rule name that is not in the library."""

    def __init__(self, rule_name: str):
        super().__init__(f"Unknown validation rule: {rule_name}")
        self.rule_name = rule_name


__all__ = [
    "RuleMessage",
    "Rule",
    "RULES",
    "RULE_NAMES",
    "get_rule",
    "UnknownRuleError",
    "required",
    "email",
    "password",
    "name",
    "nic",
    "phone",
    "date",
    "number",
    "text_length",
    "select",
    "password_match",
    "array",
]
