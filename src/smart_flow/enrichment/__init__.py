"""
AI enrichment for Smart Flow.

A screen may carry a prompt; once it is answered, the prompt is run and
the JSON answer becomes the enrichment context later screens read.
"""

from smart_flow.enrichment.agent import create_enrichment_agent
from smart_flow.enrichment.orchestrator import (
    EnrichmentOrchestrator,
    build_enrichment_prompt,
    enrich_context,
)

__all__ = [
    "create_enrichment_agent",
    "build_enrichment_prompt",
    "EnrichmentOrchestrator",
    "enrich_context",
]
