"""Value normalization helpers used by the ledger and catalog readers."""

from __future__ import annotations

from typing import Any
import json

import numpy as np

from app.config import EVENT_KIND_ALIASES, LIST_CELL_SEPARATOR


def _norm_key(text: str) -> str:
    return str(text).strip().lower().replace(" ", "_").replace("-", "_")


def _to_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, float) and np.isnan(value):
        return None

    text = str(value).strip()
    return text if text != "" else None


def _to_float(value: Any) -> float | None:
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if value == "":
            return None

    try:
        number = float(value)
    except (TypeError, ValueError):
        return None

    if not np.isfinite(number):
        return None
    return number


def _split_list_cell(value: Any) -> list[str]:
    """Split a multi-valued cell: JSON array or ``a|b|c``. Blank parts are dropped."""
    if isinstance(value, (list, tuple, np.ndarray)):
        items = list(value)
    else:
        text = _to_text(value)
        if text is None:
            return []
        if text.startswith("["):
            try:
                parsed = json.loads(text)
            except json.JSONDecodeError:
                parsed = None
            items = parsed if isinstance(parsed, list) else text.split(LIST_CELL_SEPARATOR)
        else:
            items = text.split(LIST_CELL_SEPARATOR)
    out: list[str] = []
    for item in items:
        t = _to_text(item)
        if t is not None:
            out.append(t)
    return out


def _to_float_list(value: Any) -> list[float] | None:
    """Parse a multi-valued numeric cell; None when any part is not a number."""
    parts = _split_list_cell(value)
    out: list[float] = []
    for part in parts:
        number = _to_float(part)
        if number is None:
            return None
        out.append(number)
    return out


def _normalize_event_kind(value: Any) -> str | None:
    text = _to_text(value)
    if text is None:
        return None
    return EVENT_KIND_ALIASES.get(text.lower(), text.upper())
