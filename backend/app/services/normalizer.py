"""
Portfolio Backend — Field Normalizer
======================================

What:  Converts raw request values into their canonical in-memory form.
How:   Pure, total functions. None of them raise; values that cannot be
       coerced come back as an empty list or None.
Who:   Used by the Validator while it builds ProjectCreate / ProjectUpdate.

Examples:
    normalize_tech("a, b ,,c")        → ["a", "b", "c"]
    normalize_tech(["x ", " y"])      → ["x", "y"]
    to_boolean("false")               → False
    to_int("12")                      → 12
    to_int("twelve")                  → None
"""

import re
from typing import Any, List, Optional

# Values treated as "false" by to_boolean; everything else is true
FALSY_STRINGS = {"", "0", "false"}

INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")


def normalize_tech(value: Any) -> List[str]:
    """
    Canonicalize the `tech` field into an ordered list of non-empty strings.

    - list/tuple: each element stringified and trimmed, empties dropped
    - str: split on commas, each segment trimmed, empties dropped
    - anything else: []

    Order and duplicates are preserved. Idempotent on its own output.
    """
    if isinstance(value, (list, tuple)):
        items = [str(item).strip() for item in value]
    elif isinstance(value, str):
        items = [segment.strip() for segment in value.split(",")]
    else:
        return []
    return [item for item in items if item]


def to_boolean(value: Any) -> bool:
    """Loose boolean: "", "0", "false" (any case), False, 0 and None are false."""
    if isinstance(value, str):
        return value.strip().lower() not in FALSY_STRINGS
    return bool(value)


def to_int(value: Any) -> Optional[int]:
    """Coerce ints, integral floats and digit strings; None when not an integer."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str) and INTEGER_PATTERN.match(value.strip()):
        return int(value.strip())
    return None
