"""
Field and form validation.

A schema maps each field name to an ordered list of rules. Rules run in
list order and the first message returned is the field's error; later
rules for that field are never called. Fields without a failure are left
out of the error map entirely.

Usage:
    schema = {
        "email": [email],
        "age": [required, bind(number, 18, 100, label="Age")],
    }
    errors = validate_form(values, schema)
    error = validate_field(values["email"], schema["email"], "email")
"""

from collections.abc import Hashable
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import pandas as pd

from .base import ValidationIssue, ValidationResult, is_blank, is_missing
from .rules import RULE_NAMES, Rule


# ============================================================================
# BOUND RULES
# ============================================================================

@dataclass(frozen=True)
class BoundRule:
    """
    A rule with its extra parameters fixed when the schema is built.

    ``label`` overrides the field name as the text used in messages
    (``"First Name"`` instead of ``"firstName"``).
    """
    rule: Rule
    params: Tuple[Any, ...] = ()
    label: Optional[str] = None

    @property
    def name(self) -> str:
        return rule_name(self.rule)

    def __call__(self, value: Any, label: Optional[str] = None) -> Optional[str]:
        return self.rule(value, self.label or label, *self.params)


@dataclass(frozen=True)
class OptionalRule:
    """Skips the wrapped rule when the value is blank."""
    rule: Callable[..., Optional[str]]

    @property
    def name(self) -> str:
        return rule_name(self.rule)

    def __call__(self, value: Any, label: Optional[str] = None) -> Optional[str]:
        if is_blank(value):
            return None
        return self.rule(value, label)


def bind(rule: Rule, *params: Any, label: Optional[str] = None) -> BoundRule:
    """Bind positional extra parameters (and optionally a label) to a rule."""
    return BoundRule(rule=rule, params=tuple(params), label=label)


def optional(rule: Callable[..., Optional[str]]) -> OptionalRule:
    return OptionalRule(rule=rule)


def rule_name(rule: Callable) -> str:
    """Public name of a rule, falling back to the callable's own name."""
    if isinstance(rule, (BoundRule, OptionalRule)):
        return rule.name
    if isinstance(rule, Hashable) and rule in RULE_NAMES:
        return RULE_NAMES[rule]
    return getattr(rule, "__name__", type(rule).__name__)


Schema = Mapping[str, Sequence[Callable[..., Optional[str]]]]


# ============================================================================
# FIELD VALIDATION
# ============================================================================

def _first_failure(value: Any, rules: Sequence[Callable], label: Optional[str]) -> Tuple[Optional[str], Optional[Callable]]:
    for rule in rules:
        message = rule(value, label)
        if message:
            return message, rule
    return None, None


def validate_field(value: Any, rules: Sequence[Callable], label: Optional[str] = None) -> Optional[str]:
    """
    Validate one value against an ordered rule list (blur-time validation).

    Returns the first failing rule's message, or None.
    """
    message, _ = _first_failure(value, rules or (), label)
    return message


# ============================================================================
# FORM VALIDATION
# ============================================================================

def validate_form(values: Optional[Mapping[str, Any]], schema: Optional[Schema]) -> Dict[str, str]:
    """
    Validate a flat values map against a schema.

    Only fields named in the schema are checked; a field missing from
    ``values`` is validated as None. Returns a sparse field -> message map.
    """
    errors: Dict[str, str] = {}
    if not schema:
        return errors
    values = values or {}

    for field_name, rules in schema.items():
        message = validate_field(values.get(field_name), rules, field_name)
        if message:
            errors[field_name] = message

    return errors


def run_form_validation(values: Optional[Mapping[str, Any]], schema: Optional[Schema]) -> ValidationResult:
    """Same traversal as ``validate_form``, recording which rule failed and why."""
    result = ValidationResult()
    if not schema:
        return result
    values = values or {}

    for field_name, rules in schema.items():
        message, rule = _first_failure(values.get(field_name), rules or (), field_name)
        if message:
            result.add_issue(ValidationIssue(
                field=field_name,
                message=str(message),
                rule=rule_name(rule),
                kind=getattr(message, "kind", None),
            ))

    return result


# ============================================================================
# BATCH VALIDATION
# ============================================================================

def _row_values(row: Mapping[str, Any]) -> Dict[str, Any]:
    """Convert a DataFrame row to a values map, turning NaN cells into None."""
    return {key: (None if is_missing(value) else value) for key, value in row.items()}


def validate_frame(df: pd.DataFrame, schema: Union[Schema, Callable[[Mapping[str, Any]], Schema], None]) -> List[Dict[str, str]]:
    """
    Validate every row of a DataFrame; one error map per row, in row order.

    ``schema`` may also be a builder called with each row's values, for
    forms whose rules depend on what was entered.
    """
    if df is None or df.empty:
        return []

    results = []
    for row in df.to_dict(orient="records"):
        values = _row_values(row)
        row_schema = schema(values) if callable(schema) else schema
        results.append(validate_form(values, row_schema))
    return results


def summarize_frame(df: pd.DataFrame, schema: Union[Schema, Callable[[Mapping[str, Any]], Schema], None]) -> pd.DataFrame:
    """
    Validate every row and return a long-format error table.

    Columns: ``row`` (0-based position), ``field``, ``message``. Rows with
    no failures contribute nothing.
    """
    records = []
    for position, errors in enumerate(validate_frame(df, schema)):
        for field_name, message in errors.items():
            records.append({"row": position, "field": field_name, "message": str(message)})
    return pd.DataFrame(records, columns=["row", "field", "message"])


__all__ = [
    "BoundRule",
    "OptionalRule",
    "bind",
    "optional",
    "rule_name",
    "Schema",
    "validate_field",
    "validate_form",
    "run_form_validation",
    "validate_frame",
    "summarize_frame",
]
