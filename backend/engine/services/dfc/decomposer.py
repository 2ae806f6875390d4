"""
Entry Decomposer — turns settled ledger entries into per-category
monthly contributions.

A ledger entry is ONE settled payment that may be tagged with several
statement categories ("06.10 Administrative", "06.11 Technology"). The
statement tree thinks in terms of leaf categories with a value per month.

This module bridges the gap:
  1. parse every tag into (normalized code, raw name),
  2. apportion the paid amount across the tags (declared split,
     else equal split),
  3. drop contributions whose category class contradicts the entry's
     event kind (revenue category on an expense entry, or vice versa),
  4. accumulate per (code, name, month) and keep an audit trail per leaf.

Examples:
    entry = LedgerEntry(id="p1", description="Office", paid_amount=100.0,
                        category_tags=("06.10 Admin", "06.11 Tech"),
                        declared_sub_amounts=(60.0, 40.0),
                        settlement_month="2025-03", event_kind=EventKind.EXPENSE)
    result = decompose_entries([entry])
    # result.totals -> 06.10: {"2025-03": 60.0}, 06.11: {"2025-03": 40.0}
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Iterable, Sequence

from engine.core.codes import is_mapped_prefix, parse_tag, root_for_code
from engine.config.statement import ROOTS_BY_ID

_log = logging.getLogger(__name__)

_MONTH_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")

EXCLUDED_MALFORMED_TAG = "malformed_tag"
EXCLUDED_SIGN_MISMATCH = "sign_mismatch"


# ──────────────────────────────────────────────────────────────────────
# Public types
# ──────────────────────────────────────────────────────────────────────

class EventKind(str, Enum):
    REVENUE = "REVENUE"
    EXPENSE = "EXPENSE"


@dataclass(frozen=True)
class LedgerEntry:
    """One settled ledger entry, as supplied by the ledger store.

    ``declared_sub_amounts`` runs parallel to ``category_tags`` and may be
    empty. ``settlement_month`` is a ``YYYY-MM`` key (see ``month_key``).
    """
    id: str
    description: str
    paid_amount: float
    category_tags: tuple[str, ...]
    declared_sub_amounts: tuple[float, ...] = ()
    settlement_month: str = ""
    event_kind: EventKind | str = EventKind.EXPENSE


@dataclass(frozen=True)
class AuditEntry:
    """The share of one ledger entry that landed on a leaf category."""
    entry_id: str
    description: str
    month: str
    amount: float       # apportioned share
    paid_amount: float  # full settled amount of the entry
    tag: str


@dataclass
class LeafTotals:
    """Accumulated monthly values for one (code, raw name) pair."""
    code: str
    name: str
    values_by_month: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class ExcludedContribution:
    entry_id: str
    tag: str
    amount: float
    reason: str  # EXCLUDED_MALFORMED_TAG | EXCLUDED_SIGN_MISMATCH


@dataclass(frozen=True)
class RejectedEntry:
    entry_id: str
    reason: str


@dataclass
class DecompositionResult:
    totals: list[LeafTotals]
    audit: dict[str, list[AuditEntry]]
    months: list[str]
    excluded: list[ExcludedContribution] = field(default_factory=list)
    rejected: list[RejectedEntry] = field(default_factory=list)
    unmapped_codes: list[str] = field(default_factory=list)


# ──────────────────────────────────────────────────────────────────────
# Helpers
# ──────────────────────────────────────────────────────────────────────

def month_key(value: date | datetime | str) -> str:
    """``date(2025, 3, 14)`` / ``"2025-03-14"`` -> ``"2025-03"``."""
    if isinstance(value, (date, datetime)):
        return f"{value.year:04d}-{value.month:02d}"
    s = str(value).strip()
    if _MONTH_RE.match(s[:7]):
        return s[:7]
    raise ValueError(f"Cannot derive settlement month from {value!r}")


def apportion_amounts(
    paid_amount: float,
    n_tags: int,
    declared_sub_amounts: Sequence[float] = (),
) -> list[float]:
    """
    Split ``paid_amount`` across ``n_tags`` categories.

    - one tag: the full amount
    - several tags with a positive declared total: proportional to the
      declared sub-amounts
    - otherwise (no list, wrong length, non-finite values): equal parts

    The returned shares always sum to ``paid_amount`` (float tolerance).
    """
    if n_tags <= 0:
        return []
    if n_tags == 1:
        return [float(paid_amount)]

    subs = [float(v) for v in declared_sub_amounts] if len(declared_sub_amounts) == n_tags else []
    if not all(math.isfinite(v) for v in subs):
        subs = []
    total = sum(subs) if subs else 0.0
    if total > 0:
        return [float(paid_amount) * v / total for v in subs]
    return [float(paid_amount) / n_tags] * n_tags


def _event_kind(value: EventKind | str) -> EventKind | None:
    if isinstance(value, EventKind):
        return value
    try:
        return EventKind(str(value).strip().upper())
    except ValueError:
        return None


def _rejection_reason(entry: LedgerEntry) -> str | None:
    """Shape checks; None when the entry is usable."""
    if entry.id is None or str(entry.id).strip() == "":
        return "missing id"
    try:
        amount = float(entry.paid_amount)
    except (TypeError, ValueError):
        return "paid amount is not numeric"
    if not math.isfinite(amount):
        return "paid amount is not finite"
    if _event_kind(entry.event_kind) is None:
        return f"unknown event kind {entry.event_kind!r}"
    if not _MONTH_RE.match(str(entry.settlement_month or "")):
        return f"invalid settlement month {entry.settlement_month!r}"
    for value in entry.declared_sub_amounts or ():
        try:
            float(value)
        except (TypeError, ValueError):
            return "declared sub-amounts not numeric"
    return None


# ──────────────────────────────────────────────────────────────────────
# Core decomposition logic
# ──────────────────────────────────────────────────────────────────────

def decompose_entries(entries: Iterable[LedgerEntry]) -> DecompositionResult:
    """Decompose ``entries`` into accumulated leaf totals plus audit trail.

    Pure: no state is kept between calls and the input is not mutated.
    ``months`` holds the settlement month of every accepted entry that has
    tags, including entries whose contributions were all excluded.
    """
    accum: dict[tuple[str, str], LeafTotals] = {}
    audit: dict[str, list[AuditEntry]] = {}
    months: set[str] = set()
    excluded: list[ExcludedContribution] = []
    rejected: list[RejectedEntry] = []
    unmapped: set[str] = set()

    for entry in entries:
        reason = _rejection_reason(entry)
        if reason is not None:
            _log.warning("Rejected ledger entry %r: %s", entry.id, reason)
            rejected.append(RejectedEntry(entry_id=str(entry.id), reason=reason))
            continue

        tags = list(entry.category_tags or ())
        if not tags:
            continue

        entry_id = str(entry.id)
        subs = [float(v) for v in entry.declared_sub_amounts or ()]
        if len(tags) > 1 and subs and len(subs) != len(tags):
            _log.warning(
                "Entry %r declares %d sub-amounts for %d tags; splitting equally",
                entry_id, len(subs), len(tags),
            )
        elif len(tags) > 1 and not all(math.isfinite(v) for v in subs):
            _log.warning("Entry %r has non-finite sub-amounts %s; splitting equally", entry_id, subs)

        kind = _event_kind(entry.event_kind)
        paid = float(entry.paid_amount)
        month = entry.settlement_month
        months.add(month)
        shares = apportion_amounts(paid, len(tags), subs)

        for tag, share in zip(tags, shares):
            parsed = parse_tag(tag)
            if parsed is None:
                _log.warning("Skipping malformed category tag %r on entry %r", tag, entry_id)
                excluded.append(ExcludedContribution(
                    entry_id=entry_id, tag=str(tag), amount=share, reason=EXCLUDED_MALFORMED_TAG,
                ))
                continue

            tag_kind = ROOTS_BY_ID[root_for_code(parsed.code)].event_kind
            if tag_kind != kind.value:
                _log.warning(
                    "Dropping %s category %s on %s entry %r (%.2f)",
                    tag_kind, parsed.code, kind.value, entry_id, share,
                )
                excluded.append(ExcludedContribution(
                    entry_id=entry_id, tag=str(tag), amount=share, reason=EXCLUDED_SIGN_MISMATCH,
                ))
                continue

            if not is_mapped_prefix(parsed.code):
                unmapped.add(parsed.code)

            key = (parsed.code, parsed.name)
            totals = accum.get(key)
            if totals is None:
                totals = accum[key] = LeafTotals(code=parsed.code, name=parsed.name)
            totals.values_by_month[month] = totals.values_by_month.get(month, 0.0) + share

            audit.setdefault(parsed.code, []).append(AuditEntry(
                entry_id=entry_id,
                description=entry.description,
                month=month,
                amount=share,
                paid_amount=paid,
                tag=str(tag),
            ))

    if unmapped:
        _log.warning(
            "Category codes outside the mapped prefix ranges routed to the expense root: %s",
            sorted(unmapped),
        )

    return DecompositionResult(
        totals=list(accum.values()),
        audit=audit,
        months=sorted(months),
        excluded=excluded,
        rejected=rejected,
        unmapped_codes=sorted(unmapped),
    )
