"""Cash-flow statement (DFC) services.

This package contains the statement engine:
- decomposer: ledger entries -> apportioned leaf contributions + audit trail
- naming: display-name cascade (catalog, observed, inferred, standard, code)
- tree: hierarchy builder with postorder monthly rollup
- analytics: monthly summary, per-category metrics and KPIs over a built tree

``build_dfc`` runs decomposer and builder in sequence. It is a pure
function of its inputs and holds no state between calls.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from engine.config.statement import STANDARD_CATEGORY_NAMES
from .decomposer import (  # noqa: F401
    AuditEntry,
    DecompositionResult,
    EventKind,
    ExcludedContribution,
    LeafTotals,
    LedgerEntry,
    RejectedEntry,
    apportion_amounts,
    decompose_entries,
    month_key,
)
from .tree import CategoryNode, DfcTree, build_hierarchy  # noqa: F401


@dataclass
class DfcResult:
    """Built statement plus what was left out on the way."""
    tree: DfcTree
    excluded: list[ExcludedContribution] = field(default_factory=list)
    rejected: list[RejectedEntry] = field(default_factory=list)
    unmapped_codes: list[str] = field(default_factory=list)

    @property
    def shadowed_codes(self) -> list[str]:
        return self.tree.shadowed_codes


def build_dfc(
    entries: Iterable[LedgerEntry],
    catalog: Mapping[str, str] | None = None,
    *,
    standard_names: Mapping[str, str] = STANDARD_CATEGORY_NAMES,
) -> DfcResult:
    """Decompose ``entries`` and build the statement tree in one call."""
    decomposed = decompose_entries(entries)
    tree = build_hierarchy(
        decomposed.totals,
        decomposed.audit,
        decomposed.months,
        catalog=catalog,
        standard_names=standard_names,
    )
    return DfcResult(
        tree=tree,
        excluded=decomposed.excluded,
        rejected=decomposed.rejected,
        unmapped_codes=decomposed.unmapped_codes,
    )
