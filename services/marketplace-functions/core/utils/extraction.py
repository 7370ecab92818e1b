"""
Safe-path extraction for deeply optional capability responses.

SDK responses (proto-plus messages, pydantic models) and plain dicts are both
walked the same way, so callers can write

    get_path(response, ("candidates", 0, "content", "parts", 0, "text"), "fallback")

instead of a ladder of nested checks.
"""

from collections.abc import Mapping
from typing import Any, Iterable, Union

PathStep = Union[str, int]

_MISSING = object()


def _step(current: Any, step: PathStep) -> Any:
    if current is None:
        return _MISSING

    if isinstance(step, int):
        # proto-plus repeated fields index like lists but are not registered Sequences
        if isinstance(current, (str, bytes, Mapping)):
            return _MISSING
        try:
            if 0 <= step < len(current):
                return current[step]
        except TypeError:
            pass
        return _MISSING

    if isinstance(current, Mapping):
        return current.get(step, _MISSING)

    try:
        return getattr(current, step)
    except AttributeError:
        return _MISSING


def get_path(source: Any, path: Iterable[PathStep], default: Any = None) -> Any:
    """
    Resolve `path` against `source`, returning `default` when any step is absent.

    String steps read mapping keys or attributes, integer steps index sequences.
    A final value of None or an empty string also yields the default.
    """
    current = source
    for step in path:
        current = _step(current, step)
        if current is _MISSING:
            return default

    if current is None or current == "":
        return default
    return current
