"""
REAXML Value Coercion Utilities

Handles the loosely typed values found in REAXML feeds: yes/no, 1/0 and
true/false flags, numbers with trailing junk, blank strings, area units,
and the two shapes an XML node takes after tree conversion (a bare string,
or a dict holding a ``#text`` payload next to ``@attribute`` keys).

Every extractor in the parser goes through these helpers so call sites
stay uniform.
"""

import math
import re
from typing import Any, List, Optional

from reaxmlfeed.core.constants import (
    AREA_UNIT_ACRE,
    AREA_UNIT_HECTARE,
    AREA_UNIT_SQM,
    AREA_UNIT_SQUARE,
    SQUARE_TO_SQM,
)

TEXT_KEY = "#text"
ATTRIBUTE_PREFIX = "@"

_TRUTHY = {"yes", "1", "true"}

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)")

_AREA_UNITS = {
    "squaremeter": AREA_UNIT_SQM,
    "sqm": AREA_UNIT_SQM,
    "square": AREA_UNIT_SQUARE,
    "acre": AREA_UNIT_ACRE,
    "hectare": AREA_UNIT_HECTARE,
}


def coerce_boolean(value: Any) -> bool:
    """Coerce a REAXML flag to a boolean.

    ``yes``, ``1`` and ``true`` (any case, surrounding whitespace ignored)
    are true. Everything else, including ``None`` and ``""``, is false.

    Example:
        >>> coerce_boolean("Yes")
        True
        >>> coerce_boolean("no")
        False
    """
    if value is None or value == "":
        return False

    if isinstance(value, bool):
        return value

    if isinstance(value, (int, float)):
        return value != 0

    return str(value).strip().lower() in _TRUTHY


def coerce_int(value: Any) -> Optional[int]:
    """Coerce a value to an integer using its leading digits.

    Example:
        >>> coerce_int("4.5")
        4
        >>> coerce_int("abc") is None
        True
    """
    if value is None or value == "" or isinstance(value, bool):
        return None

    if isinstance(value, float):
        return None if math.isnan(value) else int(value)

    if isinstance(value, int):
        return value

    match = _INT_PREFIX.match(str(value))
    return int(match.group(1)) if match else None


def coerce_float(value: Any) -> Optional[float]:
    """Coerce a value to a float using its leading decimal number.

    Example:
        >>> coerce_float("11.2%")
        11.2
    """
    if value is None or value == "" or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        number = float(value)
        return None if math.isnan(number) else number

    match = _FLOAT_PREFIX.match(str(value))
    return float(match.group(1)) if match else None


def coerce_string(value: Any) -> Optional[str]:
    """Coerce a value to a trimmed string, or None when blank."""
    if value is None:
        return None

    text = str(value).strip()
    return text or None


def normalise_area_unit(unit: Optional[str]) -> str:
    """Normalise a REAXML area unit to sqm, square, acre or hectare.

    Unknown or missing units are treated as square metres.
    """
    if not unit:
        return AREA_UNIT_SQM
    return _AREA_UNITS.get(str(unit).strip().lower(), AREA_UNIT_SQM)


def squares_to_sqm(value: float) -> float:
    """Convert Australian squares to square metres, rounded to 2 places."""
    return round(value * SQUARE_TO_SQM, 2)


def extract_text(node: Any) -> Optional[str]:
    """Return the text payload of a converted XML node.

    A bare scalar is its own text; a dict node carries its text under
    ``#text``. Missing nodes and attribute-only nodes give None.
    """
    if node is None:
        return None

    if isinstance(node, dict):
        text = node.get(TEXT_KEY)
        return None if text is None else str(text)

    if isinstance(node, list):
        return None

    return str(node)


def get_attribute(node: Any, name: str) -> Optional[str]:
    """Return attribute ``name`` of a converted XML node, if it has one."""
    if isinstance(node, dict):
        return node.get(ATTRIBUTE_PREFIX + name)
    return None


def has_attribute(node: Any, name: str) -> bool:
    """Whether a converted XML node carries attribute ``name``."""
    return isinstance(node, dict) and (ATTRIBUTE_PREFIX + name) in node


def get_child(node: Any, name: str) -> Any:
    """Return child ``name`` of a converted XML node (None for scalars)."""
    if isinstance(node, dict):
        return node.get(name)
    return None


def as_list(node: Any) -> List[Any]:
    """Normalise an absent, single or repeated node into a list."""
    if node is None:
        return []
    if isinstance(node, list):
        return node
    return [node]
