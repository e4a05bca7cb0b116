"""
Form Field Validation for the MindEase wellness dashboard.

Every form validates a flat field -> value map against a schema: an ordered
list of rules per field, where the first failing rule wins.

Usage:
    # Whole form (submit)
    from validation import validate_form, get_form_schema
    errors = validate_form(values, get_form_schema("signin"))

    # Single field (blur)
    from validation import validate_field, RULES
    error = validate_field(value, [RULES["required"], RULES["email"]], "email")

    # Custom schema with bound parameters
    from validation import bind, number, required
    schema = {"age": [required, bind(number, 18, 100, label="Age")]}

Package Structure:
    - base.py: Shared data classes, error kinds and helper functions
    - rules.py: The rule library
    - field_validator.py: Field, form and DataFrame validation
    - schemas.py: Predefined form schemas and JSON schema parsing
    - form_state.py: Touched/error state for a single form
"""

# Base module - data classes, helpers
from .base import (
    ErrorKind,
    ValidationIssue,
    ValidationResult,
    is_missing,
    is_blank,
)

# Rule library
from .rules import (
    RULES,
    RuleMessage,
    UnknownRuleError,
    get_rule,
    required,
    email,
    password,
    name,
    nic,
    phone,
    date,
    number,
    text_length,
    select,
    password_match,
    array,
)

# Engine
from .field_validator import (
    BoundRule,
    OptionalRule,
    bind,
    optional,
    rule_name,
    validate_field,
    validate_form,
    run_form_validation,
    validate_frame,
    summarize_frame,
)

# Schemas
from .schemas import (
    AVAILABLE_FORMS,
    UnknownFormError,
    SchemaError,
    get_form_schema,
    parse_schema,
    describe_schema,
)

from .form_state import FormState


# ============================================================================
# PUBLIC API
# ============================================================================

__all__ = [
    # Base
    "ErrorKind",
    "ValidationIssue",
    "ValidationResult",
    "is_missing",
    "is_blank",

    # Rules
    "RULES",
    "RuleMessage",
    "UnknownRuleError",
    "get_rule",
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

    # Engine
    "BoundRule",
    "OptionalRule",
    "bind",
    "optional",
    "rule_name",
    "validate_field",
    "validate_form",
    "run_form_validation",
    "validate_frame",
    "summarize_frame",

    # Schemas
    "AVAILABLE_FORMS",
    "UnknownFormError",
    "SchemaError",
    "get_form_schema",
    "parse_schema",
    "describe_schema",

    # Form state
    "FormState",
]
