"""
Response normalization helpers.

Capability results are reduced to a few named fields, each with an explicit
default. The one strict path is listing text, which must contain a JSON object.
"""

import json
import logging
import re
from typing import Any, Dict, Iterable, List

from core.utils.extraction import get_path

from .errors import MalformedCapabilityOutput

logger = logging.getLogger(__name__)

GENERATED_TEXT_PATH = ("candidates", 0, "content", "parts", 0, "text")

LISTING_TEXT_DEFAULTS = {
    "title": "",
    "region": "",
    "description": "",
}

_JSON_FENCE = re.compile(r"```json\n?")
_FENCE = re.compile(r"```\n?")


def extract_text(result: Any, path: Iterable = GENERATED_TEXT_PATH, default: str = "") -> str:
    """First candidate text of a generation result, or `default`."""
    value = get_path(result, path, default)
    return value if isinstance(value, str) else default


def extract_list(result: Any, path: Iterable, item_path: Iterable, item_default: Any = "") -> List[Any]:
    """Project each item of a repeated field; a missing field yields an empty list."""
    items = get_path(result, path, None)
    if items is None:
        return []
    item_path = tuple(item_path)
    return [get_path(item, item_path, item_default) for item in items]


def parse_listing_text(text: str, capability: str = "Text generation") -> Dict[str, Any]:
    """
    Parse generated listing text into a dict.

    The text is cut to the span between the first '{' and the last '}', code
    fence markers are removed, and the remainder must parse as a JSON object.

    Raises:
        MalformedCapabilityOutput: If no JSON object can be parsed
    """
    text = text or ""
    start_idx = text.find("{")
    end_idx = text.rfind("}")
    if start_idx != -1 and end_idx != -1:
        text = text[start_idx:end_idx + 1]

    text = _JSON_FENCE.sub("", text)
    text = _FENCE.sub("", text).strip()

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse listing JSON: {e} - preview: {text[:200]!r}")
        raise MalformedCapabilityOutput(capability, str(e)) from e

    if not isinstance(parsed, dict):
        logger.error(f"Listing JSON is a {type(parsed).__name__}, expected an object")
        raise MalformedCapabilityOutput(capability, f"expected object, got {type(parsed).__name__}")

    return parsed


def normalize_listing_fields(listing: Dict[str, Any]) -> Dict[str, Any]:
    """Fill title/region/description with '' and features with [] when absent or empty."""
    normalized = {key: listing.get(key) or default for key, default in LISTING_TEXT_DEFAULTS.items()}
    normalized["features"] = listing.get("features") or []
    return normalized
