"""
Custom exceptions for Smart Flow.

Most of the layer is total and never raises: malformed composite values
decode to their default and unresolved template variables render as
placeholders. These are the failures that do reach a caller.
"""


class SmartFlowError(Exception):
    """Base class for Smart Flow errors."""


class InvalidOutputSchemaError(SmartFlowError, ValueError):
    """Raised when code-mode output schema text cannot be used."""


class EnrichmentError(SmartFlowError, RuntimeError):
    """Raised when the AI enrichment step fails or returns unusable output."""
