"""Centralized canonical JSON serialization.

Used for CLI JSON output so identical documents always
render to identical bytes.
"""

import json
from typing import Any


def canonical_dumps(obj: Any, indent: int | None = None) -> str:
    """
    Canonical JSON serialization.

    Rules:
    - UTF-8 (no ASCII escaping)
    - Sorted keys
    - Stable separators (",", ":") unless ``indent`` is given
    - List order preserved (element order is meaningful in devfiles)

    Args:
        obj: Python object to serialize
        indent: Optional indentation for human-readable output

    Returns:
        Canonical JSON string
    """
    return json.dumps(
        obj,
        sort_keys=True,
        indent=indent,
        separators=(",", ": ") if indent is not None else (",", ":"),
        ensure_ascii=False,
    )
