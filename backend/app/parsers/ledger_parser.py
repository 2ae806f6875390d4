"""Ledger store: reads settled ledger entries from a tabular export.

Supported files: CSV, Excel (.xlsx/.xls) and Parquet. Headers are matched
through LEDGER_COLUMN_ALIASES so exports from different tools map onto the
same canonical columns. The date window is applied here, upstream of the
statement engine.
"""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Any

import pandas as pd

from app.config import (
    LEDGER_COLUMN_ALIASES,
    LEDGER_OPTIONAL_COLS,
    LEDGER_REQUIRED_COLS,
    LEDGER_SUFFIXES,
)
from app.parsers.transforms import (
    _norm_key,
    _normalize_event_kind,
    _split_list_cell,
    _to_float,
    _to_float_list,
    _to_text,
)
from engine.services.dfc import LedgerEntry, month_key

_log = logging.getLogger(__name__)


# ── File reading ─────────────────────────────────────────────────────────────

def _read_ledger_frame(path: Path) -> pd.DataFrame:
    """Read the raw export as strings (tags and codes must not be coerced)."""
    if not path.exists():
        raise FileNotFoundError(f"Ledger file not found: {path}")

    suffix = path.suffix.lower()
    if suffix not in LEDGER_SUFFIXES:
        raise ValueError(f"Unsupported ledger file type {suffix!r}; expected one of {sorted(LEDGER_SUFFIXES)}")

    if suffix == ".csv":
        return pd.read_csv(path, dtype=str, keep_default_na=False)
    if suffix == ".parquet":
        return pd.read_parquet(path)
    return pd.read_excel(path, dtype=object)


def _canonicalize_ledger_columns(df: pd.DataFrame) -> pd.DataFrame:
    rename: dict[str, str] = {}
    for col in df.columns:
        canonical = LEDGER_COLUMN_ALIASES.get(_norm_key(col))
        if canonical is not None and canonical not in rename.values():
            rename[col] = canonical
    out = df.rename(columns=rename)

    missing = sorted(LEDGER_REQUIRED_COLS - set(out.columns))
    if missing:
        raise ValueError(f"Ledger export missing required columns: {missing}")

    for col, default in LEDGER_OPTIONAL_COLS.items():
        if col not in out.columns:
            out[col] = default
    return out


# ── Row conversion ───────────────────────────────────────────────────────────

def _row_to_entry(record: dict[str, Any], settled: pd.Timestamp) -> LedgerEntry:
    paid = _to_float(record.get("paid_amount"))
    subs = _to_float_list(record.get("declared_sub_amounts"))
    if subs is None:
        _log.warning("Entry %r has non-numeric sub-amounts; ignoring them", record.get("id"))
        subs = []

    return LedgerEntry(
        id=_to_text(record.get("id")) or "",
        description=_to_text(record.get("description")) or "",
        paid_amount=paid if paid is not None else float("nan"),
        category_tags=tuple(_split_list_cell(record.get("category_tags"))),
        declared_sub_amounts=tuple(subs),
        settlement_month=month_key(settled.date()),
        event_kind=_normalize_event_kind(record.get("event_kind")) or "",
    )


# ── Public API ───────────────────────────────────────────────────────────────

def load_ledger_entries(
    path: Path,
    start: date | None = None,
    end: date | None = None,
) -> list[LedgerEntry]:
    """
    Load entries settled within ``[start, end]`` (inclusive, both optional).

    Rows with an unparseable settlement date are dropped with a warning;
    every other data-quality problem is left for the engine to report.
    """
    df = _canonicalize_ledger_columns(_read_ledger_frame(path))

    settled = pd.to_datetime(df["settlement_date"], errors="coerce")
    bad_dates = settled.isna()
    if bad_dates.any():
        _log.warning(
            "Ledger: %d/%d rows dropped for unparseable settlement_date",
            int(bad_dates.sum()), len(df),
        )

    mask = ~bad_dates
    if start is not None:
        mask &= settled >= pd.Timestamp(start)
    if end is not None:
        mask &= settled <= pd.Timestamp(end)

    scoped = df.loc[mask]
    scoped_dates = settled.loc[mask]
    entries = [
        _row_to_entry(record, ts)
        for record, ts in zip(scoped.to_dict(orient="records"), scoped_dates)
    ]
    _log.debug("Ledger: %d entries in window %s..%s", len(entries), start, end)
    return entries
