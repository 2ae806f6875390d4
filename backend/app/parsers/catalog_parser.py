"""Category catalog: canonical display names keyed by normalized code.

The catalog is best-effort. A missing or unreadable file yields an empty
mapping and the statement falls back to observed/inferred names.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pandas as pd

from app.parsers.transforms import _norm_key, _to_text
from engine.core.codes import is_valid_code, normalize_code

_log = logging.getLogger(__name__)

_CODE_HEADERS = {"code", "codigo", "category_code"}
_NAME_HEADERS = {"name", "nome", "display_name", "category_name"}


def _catalog_from_pairs(pairs: list[tuple[Any, Any]]) -> dict[str, str]:
    out: dict[str, str] = {}
    skipped = 0
    for raw_code, raw_name in pairs:
        code = _to_text(raw_code)
        name = _to_text(raw_name)
        if code is None or name is None or not is_valid_code(code):
            skipped += 1
            continue
        out.setdefault(normalize_code(code), name)
    if skipped:
        _log.warning("Catalog: %d entries skipped (invalid code or blank name)", skipped)
    return out


def _read_json_catalog(path: Path) -> dict[str, str]:
    payload = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(payload, dict):
        return _catalog_from_pairs(list(payload.items()))
    if isinstance(payload, list):
        return _catalog_from_pairs([
            (item.get("code"), item.get("name"))
            for item in payload
            if isinstance(item, dict)
        ])
    raise ValueError("Catalog JSON must be an object or a list of {code, name}")


def _read_csv_catalog(path: Path) -> dict[str, str]:
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    lookup = {_norm_key(c): c for c in df.columns}
    code_col = next((lookup[k] for k in _CODE_HEADERS if k in lookup), None)
    name_col = next((lookup[k] for k in _NAME_HEADERS if k in lookup), None)
    if code_col is None or name_col is None:
        raise ValueError(f"Catalog CSV needs code/name columns, got {list(df.columns)}")
    return _catalog_from_pairs(list(zip(df[code_col], df[name_col])))


def load_category_catalog(path: Path | None) -> dict[str, str]:
    """Return ``{normalized_code: display_name}``; empty on any read problem."""
    if path is None or not path.exists():
        return {}
    try:
        if path.suffix.lower() == ".csv":
            return _read_csv_catalog(path)
        return _read_json_catalog(path)
    except (OSError, ValueError) as exc:
        _log.warning("Category catalog %s unreadable, using fallback names: %s", path, exc)
        return {}
