"""
Hierarchy Builder — assembles the cash-flow statement tree from flat
leaf totals and rolls monthly values up to the two roots.

Nodes live in a flat arena (``dict`` keyed by normalized code or root id)
and reference each other by id only. Construction steps:

  1. register leaves (one node per normalized code, names kept per code)
  2. collect, for every possible ancestor code, the leaf names below it
  3. synthesize missing ancestors and link each chain up to its root
  4. resolve a display name for every node
  5. sort children by code
  6. postorder aggregation: every node with children is overwritten by
     the sum of its children for every month in the tree
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from engine.config.statement import ROOT_ORDER, ROOTS_BY_ID, STANDARD_CATEGORY_NAMES
from engine.core.codes import ancestor_codes, code_level, is_valid_code, normalize_code, root_for_code
from engine.services.dfc.decomposer import AuditEntry, LeafTotals
from engine.services.dfc.naming import resolve_display_name

_log = logging.getLogger(__name__)


@dataclass
class CategoryNode:
    """One statement line. ``parent_id``/``child_ids`` are node ids, not objects."""
    id: str
    name: str
    level: int
    parent_id: str | None = None
    child_ids: list[str] = field(default_factory=list)
    values_by_month: dict[str, float] = field(default_factory=dict)
    is_leaf: bool = True
    audit_entries: list[AuditEntry] = field(default_factory=list)

    def add_child(self, child_id: str) -> None:
        if child_id not in self.child_ids:
            self.child_ids.append(child_id)

    def total(self) -> float:
        return float(sum(self.values_by_month.values()))

    def as_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "level": self.level,
            "parent_id": self.parent_id,
            "child_ids": list(self.child_ids),
            "values_by_month": {m: self.values_by_month[m] for m in sorted(self.values_by_month)},
            "is_leaf": self.is_leaf,
            "audit_entries": [
                {
                    "entry_id": a.entry_id,
                    "description": a.description,
                    "month": a.month,
                    "amount": a.amount,
                    "paid_amount": a.paid_amount,
                    "tag": a.tag,
                }
                for a in self.audit_entries
            ],
        }


@dataclass
class DfcTree:
    nodes: dict[str, CategoryNode]
    months: list[str]
    root_ids: tuple[str, ...] = ROOT_ORDER
    shadowed_codes: list[str] = field(default_factory=list)

    def node(self, node_id: str) -> CategoryNode:
        return self.nodes[node_id]

    def leaves(self) -> list[CategoryNode]:
        return [n for n in self.ordered_nodes() if n.is_leaf and n.level > 0]

    def ordered_nodes(self) -> list[CategoryNode]:
        """Roots in fixed order, each followed by its subtree (children by code)."""
        return list(iter_preorder(self.nodes, self.root_ids))

    def to_records(self) -> list[dict[str, Any]]:
        return [n.as_record() for n in self.ordered_nodes()]


# ── Traversal ─────────────────────────────────────────────────────────────

def iter_preorder(nodes: Mapping[str, CategoryNode], start_ids: Sequence[str]) -> Iterator[CategoryNode]:
    stack = list(reversed(start_ids))
    while stack:
        node = nodes[stack.pop()]
        yield node
        stack.extend(reversed(node.child_ids))


def aggregate_postorder(nodes: Mapping[str, CategoryNode], node_id: str, months: Sequence[str]) -> None:
    """Overwrite every non-leaf value with the sum of its children, leaves first."""
    node = nodes[node_id]
    for child_id in node.child_ids:
        aggregate_postorder(nodes, child_id, months)
    if not node.child_ids and node.level > 0:
        return
    node.values_by_month = {
        m: float(sum(nodes[c].values_by_month.get(m, 0.0) for c in node.child_ids))
        for m in months
    }


# ── Construction helpers ──────────────────────────────────────────────────

def collect_ancestor_names(leaf_names: Mapping[str, str]) -> dict[str, list[str]]:
    """Map every proper prefix of every leaf code to the leaf names below it.

    Leaves are visited in code order so the "first child" is stable.
    """
    out: dict[str, list[str]] = {}
    for code in sorted(leaf_names):
        for anc in ancestor_codes(code):
            out.setdefault(anc, []).append(leaf_names[code])
    return out


def _normalized_catalog(catalog: Mapping[str, str] | None) -> dict[str, str]:
    if not catalog:
        return {}
    out: dict[str, str] = {}
    for code, name in catalog.items():
        if not is_valid_code(code):
            continue
        out.setdefault(normalize_code(code), name)
    return out


def _new_root_nodes() -> dict[str, CategoryNode]:
    return {
        root_id: CategoryNode(id=root_id, name=ROOTS_BY_ID[root_id].label, level=0, is_leaf=False)
        for root_id in ROOT_ORDER
    }


# ── Public API ────────────────────────────────────────────────────────────

def build_hierarchy(
    totals: Sequence[LeafTotals],
    audit: Mapping[str, Sequence[AuditEntry]] | None = None,
    months: Sequence[str] = (),
    *,
    catalog: Mapping[str, str] | None = None,
    standard_names: Mapping[str, str] = STANDARD_CATEGORY_NAMES,
) -> DfcTree:
    """
    Build the statement tree from decomposed leaf totals.

    Parameters
    ----------
    totals : accumulated (code, name, month) values from the decomposer.
        Several entries may share a code with different raw names; they
        merge into one node and the first name seen is kept.
    audit : code -> contributing ledger shares, attached to leaves.
    months : extra month keys to carry even if no leaf has them.
    catalog : normalized code -> canonical display name (optional).
    standard_names : fallback statement-line names.

    Returns
    -------
    DfcTree with both roots always present.
    """
    audit = audit or {}
    catalog_names = _normalized_catalog(catalog)
    nodes = _new_root_nodes()

    # 1. Leaf registration
    observed: dict[str, str] = {}
    leaf_values: dict[str, dict[str, float]] = {}
    for item in totals:
        code = normalize_code(item.code)
        observed.setdefault(code, item.name)
        values = leaf_values.setdefault(code, {})
        for month, value in item.values_by_month.items():
            values[month] = values.get(month, 0.0) + float(value)

    for code in sorted(leaf_values):
        nodes[code] = CategoryNode(
            id=code,
            name=code,
            level=code_level(code),
            values_by_month=dict(leaf_values[code]),
            is_leaf=True,
            audit_entries=list(audit.get(code, ())),
        )

    all_months = sorted({*months, *(m for v in leaf_values.values() for m in v)})

    # 2. Name collection over every possible ancestor
    ancestor_names = collect_ancestor_names(observed)

    # 3. Ancestor synthesis and linkage
    for code in sorted(leaf_values):
        child_id = code
        for anc in ancestor_codes(code):
            if anc not in nodes:
                nodes[anc] = CategoryNode(id=anc, name=anc, level=code_level(anc), is_leaf=False)
            nodes[anc].add_child(child_id)
            nodes[child_id].parent_id = anc
            child_id = anc
        root_id = root_for_code(child_id)
        nodes[root_id].add_child(child_id)
        nodes[child_id].parent_id = root_id

    shadowed: list[str] = []
    for code in sorted(leaf_values):
        node = nodes[code]
        if node.child_ids:
            shadowed.append(code)
            node.is_leaf = False
            node.audit_entries = []
    if shadowed:
        _log.warning(
            "Direct amounts on parent categories replaced by their children's totals: %s",
            shadowed,
        )

    # 4. Name resolution
    for node_id, node in nodes.items():
        if node.level == 0:
            continue
        node.name = resolve_display_name(
            node_id,
            catalog=catalog_names,
            observed_name=observed.get(node_id),
            child_names=ancestor_names.get(node_id, ()),
            standard_names=standard_names,
        )

    # 5. Deterministic ordering
    for node in nodes.values():
        node.child_ids.sort()
        if node.level > 0:
            node.is_leaf = not node.child_ids

    # 6. Postorder aggregation
    for root_id in ROOT_ORDER:
        aggregate_postorder(nodes, root_id, all_months)

    _log.debug("Built statement tree: %d nodes, %d months", len(nodes), len(all_months))
    return DfcTree(nodes=nodes, months=all_months, root_ids=ROOT_ORDER, shadowed_codes=shadowed)
