"""
Validation result models for form input validation.

Composite fields report per-part problems; those are flattened into
``FieldValidationError`` entries named ``field.part``.
"""

from typing import Any

from pydantic import BaseModel, Field


class FieldValidationResult(BaseModel):
    """Validation outcome for one field value."""

    valid: bool = Field(..., description="Whether the value is acceptable")
    error: str | None = Field(default=None, description="Message for the whole field")
    field_errors: dict[str, str] = Field(
        default_factory=dict,
        description="Messages per composite sub-field",
    )

    @classmethod
    def ok(cls) -> "FieldValidationResult":
        return cls(valid=True)

    @classmethod
    def fail(cls, error: str, field_errors: dict[str, str] | None = None) -> "FieldValidationResult":
        return cls(valid=False, error=error, field_errors=field_errors or {})


class FieldValidationError(BaseModel):
    """Validation error for a specific field."""

    field_name: str = Field(..., description="Name of the field with error")
    error_type: str = Field(..., description="Type of validation error")
    message: str = Field(..., description="Human-readable error message")
    received: Any | None = Field(default=None, description="Received value")


class ValidationResult(BaseModel):
    """Result of validating one screen of form data."""

    is_valid: bool = Field(..., description="Whether the form data is valid")
    errors: list[FieldValidationError] = Field(
        default_factory=list, description="List of validation errors"
    )

    @property
    def error_count(self) -> int:
        """Get the number of validation errors."""
        return len(self.errors)

    def get_field_errors(self, field_name: str) -> list[FieldValidationError]:
        """Get all errors for a field, including its composite sub-fields."""
        prefix = f"{field_name}."
        return [
            e for e in self.errors
            if e.field_name == field_name or e.field_name.startswith(prefix)
        ]

    def to_error_dict(self) -> dict[str, list[str]]:
        """Convert errors to a dict mapping field names to error messages."""
        result: dict[str, list[str]] = {}
        for error in self.errors:
            if error.field_name not in result:
                result[error.field_name] = []
            result[error.field_name].append(error.message)
        return result
