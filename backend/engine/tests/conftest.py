"""Shared pytest fixtures for engine and API integration tests.

Provides:
- make_entry: LedgerEntry builder with sensible defaults
- random_entries: seeded synthetic ledger for invariant checks
- ledger_files: temp ledger CSV + catalog JSON wired into app.state
- test_client: FastAPI TestClient with lifespan handling
- SYNTHETIC_*: pre-built ledger/catalog content constants
"""

from __future__ import annotations

import json
from pathlib import Path

import numpy as np
import pandas as pd
import pytest
from starlette.testclient import TestClient

import app.state as state
from app.main import app
from engine.services.dfc import EventKind, LedgerEntry


# ── Entry builders ─────────────────────────────────────────────────────────

def make_entry(**overrides) -> LedgerEntry:
    """Shortcut to build a LedgerEntry with sensible defaults."""
    defaults = dict(
        id="e1",
        description="Test entry",
        paid_amount=1000.0,
        category_tags=("06.10 Administrative",),
        declared_sub_amounts=(),
        settlement_month="2025-01",
        event_kind=EventKind.EXPENSE,
    )
    defaults.update(overrides)
    if isinstance(defaults["category_tags"], list):
        defaults["category_tags"] = tuple(defaults["category_tags"])
    if isinstance(defaults["declared_sub_amounts"], list):
        defaults["declared_sub_amounts"] = tuple(defaults["declared_sub_amounts"])
    return LedgerEntry(**defaults)


_REVENUE_TAGS = (
    "03.01 Service Revenue",
    "03.01.01 Consulting",
    "03.02.01 Licences",
    "04.01 Financial Revenue",
)
_EXPENSE_TAGS = (
    "05.01 Direct Labour",
    "06.10 Administrative",
    "06.11.01 Computers",
    "06.11.02 Computer accessories",
    "06.11.03.01 Cloud hosting",
    "07.01 Bank Fees",
    "08.01 Taxes on Revenue",
    "6.2 Office rent",
)
_MONTHS = ("2025-01", "2025-02", "2025-03", "2025-04", "2025-05", "2025-06")


def random_entries(seed: int, n: int = 200) -> list[LedgerEntry]:
    """Synthetic ledger with multi-tag splits, sign mismatches and bad tags."""
    rng = np.random.default_rng(seed)
    entries: list[LedgerEntry] = []
    for i in range(n):
        is_revenue = bool(rng.random() < 0.4)
        pool = _REVENUE_TAGS if is_revenue else _EXPENSE_TAGS
        n_tags = int(rng.integers(1, 4))
        tags = [str(pool[int(rng.integers(0, len(pool)))]) for _ in range(n_tags)]
        if rng.random() < 0.05:
            tags.append("no-code tag")
        if rng.random() < 0.05:
            other = _EXPENSE_TAGS if is_revenue else _REVENUE_TAGS
            tags.append(str(other[0]))
        subs: tuple[float, ...] = ()
        roll = rng.random()
        if roll < 0.4:
            subs = tuple(float(round(v, 2)) for v in rng.uniform(1, 500, size=len(tags)))
        elif roll < 0.5:
            subs = tuple(0.0 for _ in tags)
        entries.append(LedgerEntry(
            id=f"r{seed}-{i}",
            description=f"synthetic {i}",
            paid_amount=float(round(rng.uniform(10, 10_000), 2)),
            category_tags=tuple(tags),
            declared_sub_amounts=subs,
            settlement_month=str(_MONTHS[int(rng.integers(0, len(_MONTHS)))]),
            event_kind=EventKind.REVENUE if is_revenue else EventKind.EXPENSE,
        ))
    return entries


# ── Synthetic ledger export (CSV) ──────────────────────────────────────────
#
# Headers use aliases on purpose (Descricao, Valor Pago, ...) to exercise
# LEDGER_COLUMN_ALIASES. Multi-valued cells are "|"-separated.

SYNTHETIC_LEDGER_ROWS: list[dict[str, str]] = [
    {"ID": "p1", "Descricao": "Consulting March", "Valor Pago": "5000",
     "Categories": "03.01 Service Revenue", "Sub Amounts": "",
     "Settlement Date": "2025-03-10", "Kind": "revenue"},
    {"ID": "p2", "Descricao": "Office supplies", "Valor Pago": "100",
     "Categories": "06.10 Admin|06.11 Tech", "Sub Amounts": "60|40",
     "Settlement Date": "2025-03-15", "Kind": "expense"},
    {"ID": "p3", "Descricao": "Laptops", "Valor Pago": "3000",
     "Categories": "6.11.1 Computers", "Sub Amounts": "",
     "Settlement Date": "2025-04-02", "Kind": "EXPENSE"},
    {"ID": "p4", "Descricao": "Mouse and keyboard", "Valor Pago": "200",
     "Categories": "6.11.2 Computer accessories", "Sub Amounts": "",
     "Settlement Date": "2025-04-20", "Kind": "EXPENSE"},
    {"ID": "p5", "Descricao": "Wrong sign", "Valor Pago": "700",
     "Categories": "03.01 Service Revenue", "Sub Amounts": "",
     "Settlement Date": "2025-04-21", "Kind": "EXPENSE"},
    {"ID": "p6", "Descricao": "Outside window", "Valor Pago": "999",
     "Categories": "06.10 Admin", "Sub Amounts": "",
     "Settlement Date": "2024-12-31", "Kind": "EXPENSE"},
    {"ID": "p7", "Descricao": "Bad date", "Valor Pago": "50",
     "Categories": "06.10 Admin", "Sub Amounts": "",
     "Settlement Date": "not-a-date", "Kind": "EXPENSE"},
]

SYNTHETIC_CATALOG: dict[str, str] = {
    "3.1": "Services",
    "06": "Operating Expenses",
}


def write_ledger_csv(path: Path, rows: list[dict[str, str]] | None = None) -> Path:
    pd.DataFrame(rows if rows is not None else SYNTHETIC_LEDGER_ROWS).to_csv(path, index=False)
    return path


def write_catalog_json(path: Path, catalog: dict[str, str] | None = None) -> Path:
    path.write_text(json.dumps(catalog if catalog is not None else SYNTHETIC_CATALOG), encoding="utf-8")
    return path


# ── Fixtures ───────────────────────────────────────────────────────────────

@pytest.fixture()
def ledger_files(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> tuple[Path, Path]:
    """Write the synthetic ledger + catalog and point app.state at them."""
    ledger = write_ledger_csv(tmp_path / "ledger.csv")
    catalog = write_catalog_json(tmp_path / "catalog.json")
    monkeypatch.setattr(state, "LEDGER_PATH", ledger)
    monkeypatch.setattr(state, "CATALOG_PATH", catalog)
    return ledger, catalog


@pytest.fixture()
def test_client(ledger_files: tuple[Path, Path]):
    """TestClient over the synthetic files; triggers app lifespan (thread pool)."""
    with TestClient(app) as client:
        yield client
