"""
Tracing configuration for Smart Flow.

Enrichment runs are traced with the OpenAI Agents SDK's built-in tracing.
Traces go to the OpenAI dashboard by default; during development they can
also be written to the log.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from agents import set_tracing_disabled, trace
from agents.tracing import Span, Trace, TracingProcessor, add_trace_processor

from smart_flow.config import get_config

logger = logging.getLogger(__name__)


class LoggingTracingProcessor(TracingProcessor):
    """
    Tracing processor that writes trace and span boundaries to the log.

    Useful for development and debugging.
    """

    def __init__(self, verbose: bool = False):
        """
        Args:
            verbose: If True, also log span starts and ends.
        """
        self.verbose = verbose

    def on_trace_start(self, trace: Trace) -> None:
        logger.info("Trace start: %s (%s)", trace.name, trace.trace_id)

    def on_trace_end(self, trace: Trace) -> None:
        logger.info("Trace end: %s", trace.name)

    def on_span_start(self, span: Span[object]) -> None:
        if self.verbose:
            logger.debug("Span start: %s", span.span_data)

    def on_span_end(self, span: Span[object]) -> None:
        if self.verbose:
            logger.debug("Span end: %s", span.span_data)

    def shutdown(self) -> None:
        pass

    def force_flush(self) -> None:
        pass


def setup_tracing(
    enabled: bool = True,
    log_traces: bool = False,
    verbose: bool = False,
) -> None:
    """
    Configure tracing for enrichment runs.

    Args:
        enabled: Whether tracing is enabled.
        log_traces: Whether to also write traces to the log.
        verbose: Whether to log span boundaries too.

    Example:
        >>> from smart_flow.tracing import setup_tracing
        >>> setup_tracing(log_traces=True)
    """
    if not enabled:
        set_tracing_disabled(True)
        return

    set_tracing_disabled(False)

    if log_traces:
        add_trace_processor(LoggingTracingProcessor(verbose=verbose))


def disable_tracing() -> None:
    """Disable all tracing."""
    set_tracing_disabled(True)


@contextmanager
def enrichment_trace(screen_id: str) -> Iterator[None]:
    """
    Trace one enrichment run.

    Example:
        >>> with enrichment_trace("screen-1"):
        ...     result = await Runner.run(agent, prompt)
    """
    prefix = get_config().trace_name_prefix
    with trace(f"{prefix}-enrichment", metadata={"screen_id": screen_id}):
        yield
