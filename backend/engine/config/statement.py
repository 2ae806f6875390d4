"""
Cash-flow statement (DFC) configuration.

SINGLE SOURCE OF TRUTH for the statement skeleton: the two fixed roots,
which leading code segment belongs to which root, and the standard names
used when neither the catalog nor the ledger provide one.

Everything here is immutable. The hierarchy builder receives the name
table as an argument so tests can inject their own.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class RootDef:
    """One of the two top-level statement buckets."""
    id: str
    label: str
    event_kind: str  # "REVENUE" | "EXPENSE"


# ═════════════════════════════════════════════════════════════════════════════
# ROOTS
# ═════════════════════════════════════════════════════════════════════════════

REVENUE_ROOT = RootDef("REVENUE", "Revenue", "REVENUE")
EXPENSE_ROOT = RootDef("EXPENSES", "Expenses", "EXPENSE")

# Output order of root ids.
ROOT_ORDER: tuple[str, ...] = (REVENUE_ROOT.id, EXPENSE_ROOT.id)

ROOTS_BY_ID: Mapping[str, RootDef] = MappingProxyType({
    REVENUE_ROOT.id: REVENUE_ROOT,
    EXPENSE_ROOT.id: EXPENSE_ROOT,
})

# ═════════════════════════════════════════════════════════════════════════════
# CODE PREFIX → ROOT
# ═════════════════════════════════════════════════════════════════════════════

# Leading (normalized) segment → root id.
PREFIX_ROOT: Mapping[str, str] = MappingProxyType({
    "03": REVENUE_ROOT.id,
    "04": REVENUE_ROOT.id,
    "05": EXPENSE_ROOT.id,
    "06": EXPENSE_ROOT.id,
    "07": EXPENSE_ROOT.id,
    "08": EXPENSE_ROOT.id,
})

# Root used for prefixes outside PREFIX_ROOT.
UNMAPPED_PREFIX_ROOT: str = EXPENSE_ROOT.id

# ═════════════════════════════════════════════════════════════════════════════
# STANDARD STATEMENT LINES (fallback names)
# ═════════════════════════════════════════════════════════════════════════════

STANDARD_CATEGORY_NAMES: Mapping[str, str] = MappingProxyType({
    "03": "Operating Revenue",
    "03.01": "Service Revenue",
    "03.02": "Product Revenue",
    "03.03": "Recurring Revenue",
    "04": "Other Revenue",
    "04.01": "Financial Revenue",
    "04.02": "Non-operating Revenue",
    "05": "Cost of Services",
    "05.01": "Direct Labour",
    "05.02": "Outsourced Services",
    "06": "Operating Expenses",
    "06.01": "Personnel",
    "06.02": "Occupancy",
    "06.10": "Administrative",
    "06.11": "Technology",
    "07": "Financial Expenses",
    "07.01": "Bank Fees",
    "07.02": "Interest",
    "08": "Taxes and Other Expenses",
    "08.01": "Taxes on Revenue",
})

# ═════════════════════════════════════════════════════════════════════════════
# NAME INFERENCE
# ═════════════════════════════════════════════════════════════════════════════

# An inferred name must be strictly longer than this to be accepted.
MIN_INFERRED_NAME_LENGTH: int = 3
