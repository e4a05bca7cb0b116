"""
Form schemas used by the MindEase screens, and the JSON form of a schema.

Each entry in AVAILABLE_FORMS builds a fresh schema. Builders receive the
submitted values because two forms depend on them: sign-up adds fields for
the chosen job role, and admin sign-up checks the confirmation field
against the password that was typed.

JSON form of a schema (used by the HTTP API):

    {
        "name": ["required", {"rule": "textLength", "params": [2, 100], "label": "Team Name"}],
        "contact": [{"rule": "phone", "optional": true}]
    }
"""

import inspect
import math
from typing import Any, Callable, Dict, List, Mapping, Optional

import pandas as pd

from .field_validator import BoundRule, OptionalRule, Schema, bind, optional, rule_name
from .rules import (
    RULES,
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


class UnknownFormError(ValueError):
    """No predefined schema exists under the requested form name."""

    def __init__(self, form_name: str):
        super().__init__(f"Unknown form: {form_name}")
        self.form_name = form_name


class SchemaError(ValueError):
    """A JSON schema description is malformed."""


# ============================================================================
# AUTH FORMS
# ============================================================================

# Job roles offered on the sign-up form
SIGNUP_EMPLOYEE_ID_ROLES = ("Employee", "Supervisor", "HR Manager")
SIGNUP_PLACEMENT_ROLES = ("Employee", "Supervisor")


def _signin_schema(values: Mapping[str, Any]) -> Schema:
    return {
        "username": [email],
        "password": [required],
    }


def _signup_schema(values: Mapping[str, Any]) -> Schema:
    """Registration form; extra fields depend on the selected job role."""
    job_role = values.get("jobRole") or ""

    schema = {
        "firstName": [bind(name, label="First Name")],
        "lastName": [bind(name, label="Last Name")],
        "gender": [bind(select, label="gender")],
        "nic": [nic],
        "birthday": [bind(date, label="Birthday")],
        "contact": [optional(phone)],
        "jobRole": [bind(select, label="job role")],
        "username": [email],
        "password": [password],
    }

    if job_role in SIGNUP_EMPLOYEE_ID_ROLES:
        schema["employeeId"] = [bind(required, label="Employee ID")]

    if job_role in SIGNUP_PLACEMENT_ROLES:
        schema["department"] = [bind(required, label="Department")]
        schema["team"] = [bind(required, label="Team")]

    if job_role == "Employee":
        schema["address"] = [bind(required, label="Address")]
        schema["supervisorName"] = [optional(bind(name, label="Supervisor Name"))]

    if job_role == "Consultant":
        schema["registrationNumber"] = [bind(required, label="Registration Number")]
        schema["hospital"] = [bind(required, label="Hospital")]

    return schema


def _admin_signup_schema(values: Mapping[str, Any]) -> Schema:
    return {
        "username": [required, email],
        "email": [required, email],
        "password": [required, password],
        "confirmPassword": [required, bind(password_match, values.get("password"))],
    }


# ============================================================================
# ACTIVITY FORMS
# ============================================================================

def _contact_schema(values: Mapping[str, Any]) -> Schema:
    return {
        "name": [name],
        "email": [email],
        "subject": [select],
        "message": [required, text_length],
    }


def _stress_tracking_schema(values: Mapping[str, Any]) -> Schema:
    return {
        "date": [required, date],
        "workload": [select],
        "stressLevel": [select],
        "sleepHours": [number],
        "exerciseMinutes": [number],
        "notes": [text_length],
    }


def _ai_chat_schema(values: Mapping[str, Any]) -> Schema:
    return {
        "inputMessage": [required, text_length],
    }


# ============================================================================
# ADMIN FORMS
# ============================================================================

def _create_user_schema(values: Mapping[str, Any]) -> Schema:
    return {
        "username": [required, email],
        "email": [required, email],
        "password": [required, password],
        "name": [required, name],
        "age": [required, bind(number, 18, 100, label="Age")],
        "sex": [select],
    }


def _create_psychiatrist_schema(values: Mapping[str, Any]) -> Schema:
    return {
        "username": [required, email],
        "email": [required, email],
        "password": [required, password],
        "registration_number": [required, bind(text_length, 5, 20, label="Registration Number")],
        "hospital": [required, bind(text_length, 2, 100, label="Hospital")],
        "specialization": [required, bind(text_length, 2, 100, label="Specialization")],
    }


def _department_schema(values: Mapping[str, Any]) -> Schema:
    return {
        "name": [required, bind(text_length, 2, 100, label="Department Name")],
        "description": [bind(text_length, 0, 500, label="Description")],
    }


def _team_schema(values: Mapping[str, Any]) -> Schema:
    return {
        "name": [required, bind(text_length, 2, 100, label="Team Name")],
        "description": [bind(text_length, 0, 500, label="Description")],
        "department_id": [select],
    }


# ============================================================================
# FORM REGISTRY
# ============================================================================

AVAILABLE_FORMS: Dict[str, Dict[str, Any]] = {
    "signin": {
        "name": "Sign In",
        "description": "Email and password sign-in.",
        "builder": _signin_schema,
    },
    "signup": {
        "name": "Sign Up",
        "description": "Self registration; required fields depend on the job role.",
        "builder": _signup_schema,
    },
    "admin_signup": {
        "name": "Admin Sign Up",
        "description": "Administrator registration with password confirmation.",
        "builder": _admin_signup_schema,
    },
    "contact": {
        "name": "Contact",
        "description": "Public contact form.",
        "builder": _contact_schema,
    },
    "stress_tracking": {
        "name": "Stress Tracking",
        "description": "Daily stress, workload, sleep and exercise log.",
        "builder": _stress_tracking_schema,
    },
    "ai_chat": {
        "name": "AI Chat",
        "description": "Chat message box.",
        "builder": _ai_chat_schema,
    },
    "create_user": {
        "name": "Create User",
        "description": "Admin creates an employee account.",
        "builder": _create_user_schema,
    },
    "create_psychiatrist": {
        "name": "Create Psychiatrist",
        "description": "Admin registers a psychiatrist.",
        "builder": _create_psychiatrist_schema,
    },
    "department": {
        "name": "Department",
        "description": "Create or edit a department.",
        "builder": _department_schema,
    },
    "team": {
        "name": "Team",
        "description": "Create or edit a team within a department.",
        "builder": _team_schema,
    },
}


def get_form_schema(form_name: str, values: Optional[Mapping[str, Any]] = None) -> Schema:
    """Build the schema of a predefined form for the given submitted values."""
    if form_name not in AVAILABLE_FORMS:
        raise UnknownFormError(form_name)
    builder: Callable[[Mapping[str, Any]], Schema] = AVAILABLE_FORMS[form_name]["builder"]
    return builder(values or {})


# ============================================================================
# JSON SCHEMAS
# ============================================================================

# Rules whose extra parameters are (min, max) bounds
BOUNDED_RULES = (number, text_length, array)


def _check_params(field_name: str, rule_key: str, rule: Callable, params: List[Any]) -> None:
    try:
        inspect.signature(rule).bind(None, None, *params)
    except TypeError:
        raise SchemaError(f"Field '{field_name}': too many params for rule '{rule_key}'") from None

    if rule in BOUNDED_RULES:
        for position, param in enumerate(params):
            # max may be left open with null, min may not
            if param is None and position == 1:
                continue
            if isinstance(param, bool) or not isinstance(param, (int, float)) or math.isnan(param):
                raise SchemaError(f"Field '{field_name}': params of rule '{rule_key}' must be numbers")

    if rule is date and params:
        now = params[0]
        if not isinstance(now, str) or pd.isna(pd.to_datetime(now, errors="coerce")):
            raise SchemaError(f"Field '{field_name}': params of rule '{rule_key}' must be a date string")


def _parse_rule(field_name: str, entry: Any) -> Callable[..., Optional[str]]:
    if isinstance(entry, str):
        return get_rule(entry)

    if not isinstance(entry, Mapping) or "rule" not in entry:
        raise SchemaError(f"Field '{field_name}': each rule must be a rule name or an object with a 'rule' key")
    if not isinstance(entry["rule"], str):
        raise SchemaError(f"Field '{field_name}': 'rule' must be a rule name")

    rule = get_rule(entry["rule"])
    params = entry.get("params") or []
    if not isinstance(params, (list, tuple)):
        raise SchemaError(f"Field '{field_name}': 'params' must be a list")
    label = entry.get("label")
    if label is not None and not isinstance(label, str):
        raise SchemaError(f"Field '{field_name}': 'label' must be a string")
    _check_params(field_name, entry["rule"], rule, list(params))

    parsed: Callable[..., Optional[str]] = rule
    if params or label:
        parsed = bind(rule, *params, label=label)
    if entry.get("optional"):
        parsed = optional(parsed)
    return parsed


def parse_schema(spec: Mapping[str, Any]) -> Dict[str, List[Callable[..., Optional[str]]]]:
    """
    Build a schema from its JSON description.

    Raises UnknownRuleError for rule names outside the library and
    SchemaError for anything else that is malformed.
    """
    if not isinstance(spec, Mapping):
        raise SchemaError("Schema must be an object mapping field names to rule lists")

    schema = {}
    for field_name, entries in spec.items():
        if not isinstance(entries, (list, tuple)):
            raise SchemaError(f"Field '{field_name}': rules must be a list")
        schema[field_name] = [_parse_rule(field_name, entry) for entry in entries]
    return schema


def _describe_rule(rule: Callable) -> Any:
    if isinstance(rule, OptionalRule):
        inner = _describe_rule(rule.rule)
        if isinstance(inner, str):
            inner = {"rule": inner}
        return {**inner, "optional": True}

    if isinstance(rule, BoundRule):
        described: Dict[str, Any] = {"rule": rule.name}
        if rule.params:
            described["params"] = list(rule.params)
        if rule.label:
            described["label"] = rule.label
        return described

    return rule_name(rule)


def describe_schema(schema: Schema) -> Dict[str, List[Any]]:
    """Render a schema in its JSON form (the inverse of ``parse_schema``)."""
    return {field_name: [_describe_rule(rule) for rule in rules] for field_name, rules in schema.items()}


__all__ = [
    "AVAILABLE_FORMS",
    "UnknownFormError",
    "UnknownRuleError",
    "SchemaError",
    "RULES",
    "get_form_schema",
    "parse_schema",
    "describe_schema",
]
