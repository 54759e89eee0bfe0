"""
Dot-path lookup into nested form answers and enrichment output.

``get_nested_value({"company": {"name": "Acme"}}, "company.name")`` returns
``"Acme"``. A missing path is never an error: the lookup returns the
``default`` (``None`` unless given). Pass ``MISSING`` as the default when a
stored ``None`` has to be told apart from an absent key.
"""

from collections.abc import Mapping, Sequence
from typing import Any


class _Missing:
    """Sentinel type for an absent path."""

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def _step(container: Any, part: str) -> Any:
    if isinstance(container, Mapping):
        return container[part] if part in container else MISSING
    # Arrays are objects too: "items.0" addresses the first element
    if isinstance(container, Sequence) and not isinstance(container, (str, bytes)):
        if part.isdigit() and int(part) < len(container):
            return container[int(part)]
    return MISSING


def get_nested_value(root: Any, key: str, default: Any = None) -> Any:
    """
    Resolve ``key`` (segments separated by ``.``) against ``root``.

    Each step descends only into a mapping (or list) that has the next
    segment as its own key; anything else short-circuits to ``default``.
    """
    current = root
    for part in key.split("."):
        current = _step(current, part)
        if current is MISSING:
            return default
    return current


def has_nested_value(root: Any, key: str) -> bool:
    """Whether ``key`` resolves to anything, ``None`` included."""
    return get_nested_value(root, key, MISSING) is not MISSING
