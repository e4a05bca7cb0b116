"""
Per-form interaction state: values, touched fields and current errors.

Errors are only revealed for fields the user has interacted with (blurred
or submitted). This object calls the validators; nothing in the validators
knows about it.
"""

from typing import Any, Callable, Dict, Mapping, Optional, Set

from .field_validator import Schema, validate_form


class FormState:
    """Mutable state of one form instance, driven by change/blur/submit events."""

    def __init__(self, schema: Schema, values: Optional[Mapping[str, Any]] = None,
                 schema_factory: Optional[Callable[[Mapping[str, Any]], Schema]] = None):
        """
        Args:
            schema: Rules for each field
            values: Initial field values
            schema_factory: Rebuilds the schema from current values before each
                validation (for forms whose rules depend on other fields)
        """
        self._schema = schema
        self._schema_factory = schema_factory
        self.values: Dict[str, Any] = dict(values or {})
        self.touched: Set[str] = set()
        self.errors: Dict[str, str] = {}

    @property
    def schema(self) -> Schema:
        if self._schema_factory is not None:
            return self._schema_factory(self.values)
        return self._schema

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def change(self, field_name: str, value: Any):
        """User typed into a field: store the value and clear its error."""
        self.values[field_name] = value
        self.errors.pop(field_name, None)

    def blur(self, field_name: str) -> Optional[str]:
        """User left a field: mark it touched and validate that field alone."""
        self.touched.add(field_name)
        schema = self.schema
        if field_name not in schema:
            return None

        field_errors = validate_form(
            {field_name: self.values.get(field_name)},
            {field_name: schema[field_name]},
        )
        if field_name in field_errors:
            self.errors[field_name] = field_errors[field_name]
        else:
            self.errors.pop(field_name, None)
        return field_errors.get(field_name)

    def submit(self) -> Dict[str, str]:
        """Mark every field touched and validate the whole form."""
        schema = self.schema
        self.touched.update(schema.keys())
        self.touched.update(self.values.keys())
        self.errors = validate_form(self.values, schema)
        return dict(self.errors)

    def visible_errors(self) -> Dict[str, str]:
        """Errors of touched fields only."""
        return {k: v for k, v in self.errors.items() if k in self.touched}

    def reset(self, values: Optional[Mapping[str, Any]] = None):
        self.values = dict(values or {})
        self.touched = set()
        self.errors = {}
