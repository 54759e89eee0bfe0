"""
Field definition models for multi-screen templates.

A template is an ordered list of screens; each screen holds the field
configurations an author built in the form builder. The models accept the
camelCase keys the builder stores (``helpText``, ``aiSuggestionKey``, ...)
as well as the snake_case attribute names.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class FieldType(str, Enum):
    """Closed set of field types a form builder can place on a screen."""

    TEXT = "text"
    EMAIL = "email"
    DATE = "date"
    NUMBER = "number"
    CHECKBOX = "checkbox"
    SELECT = "select"
    MULTISELECT = "multiselect"
    TEXTAREA = "textarea"
    PHONE = "phone"
    ADDRESS = "address"
    PARTY = "party"
    CURRENCY = "currency"
    PERCENTAGE = "percentage"
    URL = "url"


class FieldConfig(BaseModel):
    """
    Configuration of a single form field.

    Read-only from the resolver's point of view: the builder creates and
    persists it, renderers only read it.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = Field(default=None, description="Persistent field identifier")
    name: str = Field(..., description="Unique key of the field within its screen")
    label: str = Field(..., description="Label text, may contain {{variables}}")
    type: FieldType = Field(..., description="Field type")
    required: bool = Field(default=False, description="Whether the end user must answer")
    placeholder: str | None = Field(default=None, description="Placeholder text")
    help_text: str | None = Field(default=None, alias="helpText", description="Help text")
    options: list[str] = Field(
        default_factory=list,
        description="Ordered choices for select-like types",
    )
    ai_suggestion_enabled: bool = Field(
        default=False,
        alias="aiSuggestionEnabled",
        description="Whether the field shows AI suggestions",
    )
    ai_suggestion_key: str | None = Field(
        default=None,
        alias="aiSuggestionKey",
        description="Dot-path into the enrichment context",
    )
    conditions: Any | None = Field(
        default=None,
        description="Visibility condition group (object or JSON string)",
    )

    @property
    def suggestion_key(self) -> str | None:
        """The suggestion key, only when suggestions are switched on."""
        if self.ai_suggestion_enabled and self.ai_suggestion_key:
            return self.ai_suggestion_key
        return None


class Screen(BaseModel):
    """One screen (step) of a template."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Screen identifier")
    title: str = Field(default="", description="Screen title")
    order: int = Field(default=0, description="Position of the screen in the flow")
    fields: list[FieldConfig] = Field(default_factory=list)
    ai_prompt: str | None = Field(
        default=None,
        alias="aiPrompt",
        description="Enrichment prompt run after this screen is completed",
    )
    ai_output_schema: str | None = Field(
        default=None,
        alias="aiOutputSchema",
        description="Output schema (JSON text) the enrichment step must produce",
    )
    conditions: Any | None = Field(
        default=None,
        description="Visibility condition group (object or JSON string)",
    )

    def get_field(self, name: str) -> FieldConfig | None:
        """Return the field with the given name, if any."""
        for field in self.fields:
            if field.name == name:
                return field
        return None


def subsequent_screens(screens: list[Screen], current: Screen) -> list[Screen]:
    """Screens that come after ``current`` in flow order."""
    return sorted(
        (s for s in screens if s.order > current.order),
        key=lambda s: s.order,
    )


def coerce_field_type(value: "FieldType | str | None") -> FieldType | None:
    """Return the FieldType for ``value``, or None if it is not a known type."""
    if isinstance(value, FieldType):
        return value
    try:
        return FieldType(value)
    except ValueError:
        return None
