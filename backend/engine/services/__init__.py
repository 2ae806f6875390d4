from .dfc import (
    DfcResult,
    DfcTree,
    LedgerEntry,
    build_dfc,
    build_hierarchy,
    decompose_entries,
)
from .dfc.analytics import (
    StatementKpis,
    best_and_worst_month,
    category_metrics,
    monthly_summary,
    statement_kpis,
    top_categories,
)

__all__ = [
    "DfcResult",
    "DfcTree",
    "LedgerEntry",
    "build_dfc",
    "build_hierarchy",
    "decompose_entries",
    "StatementKpis",
    "best_and_worst_month",
    "category_metrics",
    "monthly_summary",
    "statement_kpis",
    "top_categories",
]
