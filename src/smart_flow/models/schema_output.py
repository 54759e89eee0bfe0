"""
Output schema models.

The output schema is the JSON-Schema-shaped contract an AI enrichment
step is expected to produce. It is always an object schema whose
properties are named after fields on later screens.
"""

import json
from typing import Any

from pydantic import BaseModel, Field


class SchemaShape(BaseModel):
    """Schema fragment for one field type."""

    type: str = Field(..., description="JSON Schema type")
    enum: list[str] | None = Field(default=None, description="Allowed values of choice fields")
    properties: dict[str, dict[str, Any]] | None = Field(
        default=None,
        description="Part schemas of composite fields",
    )
    required: list[str] | None = Field(default=None, description="Parts a composite value must have")

    def to_json_schema(self) -> dict[str, Any]:
        """Export as JSON Schema dict, leaving out unset keys."""
        return self.model_dump(exclude_none=True)


class OutputSchema(BaseModel):
    """Object schema derived from the fields selected for AI output."""

    properties: dict[str, dict[str, Any]] = Field(
        default_factory=dict,
        description="Property name to property schema",
    )
    required: list[str] = Field(
        default_factory=list,
        description="Property names the AI output must contain",
    )

    @property
    def field_names(self) -> set[str]:
        """Names of all properties in the schema."""
        return set(self.properties)

    def to_json_schema(self) -> dict[str, Any]:
        """Export as JSON Schema dict."""
        return {
            "type": "object",
            "properties": self.properties,
            "required": self.required,
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize exactly as the code-mode editor shows it."""
        return json.dumps(self.to_json_schema(), indent=indent, ensure_ascii=False)


class SchemaValidationResult(BaseModel):
    """Result of structural validation of an output schema."""

    is_valid: bool = Field(..., description="Whether the schema is valid")
    errors: list[str] = Field(
        default_factory=list, description="List of validation errors"
    )
    warnings: list[str] = Field(
        default_factory=list, description="List of warnings"
    )
