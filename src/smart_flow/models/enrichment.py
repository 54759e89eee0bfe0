"""Run context shared by the enrichment agent and its guardrails."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class EnrichmentRunContext:
    """Per-run state handed to the agent runner as ``context``."""

    screen_id: str
    output_schema: dict[str, Any] = field(default_factory=dict)

    @property
    def required_keys(self) -> list[str]:
        required = self.output_schema.get("required")
        return [key for key in required if isinstance(key, str)] if isinstance(required, list) else []
