"""
Header normalisation: turn raw header cells into comparable column keys.
"""

from __future__ import annotations

import re
from typing import Any

from tablesplit.detection.cell_classifier import CellClassifier

_WHITESPACE_RE = re.compile(r"\s+")
_NON_KEY_CHARS_RE = re.compile(r"[^a-z0-9_]")


def normalize_column_name(header: Any) -> str:
    """
    Collapse a header into a key: trimmed, lower-case, whitespace runs
    turned into ``_``, everything outside ``[a-z0-9_]`` removed.

    >>> normalize_column_name("  Unit Price (EGP) ")
    'unit_price_egp'
    """
    text = CellClassifier.cell_to_str(header).lower()
    text = _WHITESPACE_RE.sub("_", text)
    return _NON_KEY_CHARS_RE.sub("", text)
