"""AI suggestion state shown next to a field."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class SuggestionStatus(str, Enum):
    """Where a field stands with respect to its AI suggestion."""

    DISABLED = "disabled"        # field has no suggestion key
    WAITING = "waiting"          # no enrichment has run yet
    UNAVAILABLE = "unavailable"  # enrichment ran, nothing for this key
    AVAILABLE = "available"
    APPLIED = "applied"


class SuggestionState(BaseModel):
    """Suggestion status plus what a renderer needs to offer it."""

    status: SuggestionStatus
    suggested_value: Any | None = Field(
        default=None,
        description="Suggested value, decoded for composite fields",
    )
    can_apply_inline: bool = Field(
        default=False,
        description="Whether to offer a one-click apply next to the input",
    )

    @property
    def has_suggestion(self) -> bool:
        return self.status in (SuggestionStatus.AVAILABLE, SuggestionStatus.APPLIED)
