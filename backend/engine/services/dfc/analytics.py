"""
Statement analytics for reporting and dashboards.

Works only on an already-built ``DfcTree``; nothing here changes node
values. Expense values are reported as absolute amounts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd

from engine.config.statement import EXPENSE_ROOT, REVENUE_ROOT
from engine.services.dfc.tree import DfcTree

TREND_THRESHOLD_PCT = 15.0
ANOMALY_Z_SCORE = 1.5
MIN_MONTHS_FOR_TREND = 3

_MONTHLY_COLUMNS = ["month", "revenue", "expenses", "result", "margin"]
_METRIC_COLUMNS = [
    "category_id", "category_name", "total", "mean_by_month",
    "variance", "trend", "anomalies",
]


@dataclass(frozen=True)
class StatementKpis:
    total_categories: int
    total_months: int
    total_revenue: float
    total_expenses: float
    net_balance: float


def monthly_summary(tree: DfcTree) -> pd.DataFrame:
    """One row per month: revenue, expenses (absolute), result and margin (%)."""
    revenue_node = tree.node(REVENUE_ROOT.id)
    expense_node = tree.node(EXPENSE_ROOT.id)

    rows: list[dict[str, Any]] = []
    for month in tree.months:
        revenue = float(revenue_node.values_by_month.get(month, 0.0))
        expenses = abs(float(expense_node.values_by_month.get(month, 0.0)))
        result = revenue - expenses
        margin = result / revenue * 100.0 if revenue > 0 else 0.0
        rows.append({
            "month": month,
            "revenue": revenue,
            "expenses": expenses,
            "result": result,
            "margin": margin,
        })
    return pd.DataFrame(rows, columns=_MONTHLY_COLUMNS)


def _trend(values: np.ndarray) -> str:
    if len(values) < MIN_MONTHS_FOR_TREND:
        return "stable"
    half = len(values) // 2
    first, second = values[:half].mean(), values[half:].mean()
    if first == 0:
        return "stable"
    change_pct = (second - first) / first * 100.0
    if change_pct > TREND_THRESHOLD_PCT:
        return "rising"
    if change_pct < -TREND_THRESHOLD_PCT:
        return "falling"
    return "stable"


def category_metrics(tree: DfcTree, *, min_level: int = 2) -> pd.DataFrame:
    """
    Per-leaf totals, monthly mean/variance over non-zero months, trend and
    anomalous months (|z| above ANOMALY_Z_SCORE). Leaves with no activity
    are dropped.
    """
    rows: list[dict[str, Any]] = []
    for node in tree.leaves():
        if node.level < min_level:
            continue
        values = np.array(
            [abs(float(node.values_by_month.get(m, 0.0))) for m in tree.months],
            dtype=float,
        )
        non_zero = values[values > 0]
        if non_zero.size == 0:
            continue

        mean = float(non_zero.mean())
        variance = float(non_zero.var())
        std = float(np.sqrt(variance))

        anomalies: list[dict[str, Any]] = []
        if std > 0:
            for month, value in zip(tree.months, values):
                if value <= 0:
                    continue
                z = (value - mean) / std
                if abs(z) > ANOMALY_Z_SCORE:
                    anomalies.append({"month": month, "value": float(value), "z_score": float(z)})

        rows.append({
            "category_id": node.id,
            "category_name": node.name,
            "total": float(non_zero.sum()),
            "mean_by_month": mean,
            "variance": variance,
            "trend": _trend(non_zero),
            "anomalies": anomalies,
        })
    return pd.DataFrame(rows, columns=_METRIC_COLUMNS)


def top_categories(metrics: pd.DataFrame, limit: int = 10) -> pd.DataFrame:
    if metrics.empty:
        return metrics
    return metrics.sort_values("total", ascending=False, kind="mergesort").head(limit).reset_index(drop=True)


def best_and_worst_month(summary: pd.DataFrame) -> tuple[str | None, str | None]:
    """Months with the highest and lowest ``result``; (None, None) when empty."""
    if summary.empty:
        return None, None
    result = summary["result"].astype(float)
    return str(summary.loc[result.idxmax(), "month"]), str(summary.loc[result.idxmin(), "month"])


def statement_kpis(tree: DfcTree) -> StatementKpis:
    summary = monthly_summary(tree)
    total_revenue = float(summary["revenue"].sum()) if not summary.empty else 0.0
    total_expenses = float(summary["expenses"].sum()) if not summary.empty else 0.0
    return StatementKpis(
        total_categories=len(tree.leaves()),
        total_months=len(tree.months),
        total_revenue=total_revenue,
        total_expenses=total_expenses,
        net_balance=total_revenue - total_expenses,
    )
