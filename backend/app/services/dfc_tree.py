"""Statement response construction from engine results."""

from __future__ import annotations

from dataclasses import asdict

from app.config import ANALYSIS_TOP_CATEGORIES
from app.schemas import (
    DfcAnalysisResponse,
    DfcCategoryMetrics,
    DfcDiagnostics,
    DfcExcludedContribution,
    DfcHierarchicalResponse,
    DfcKpis,
    DfcMonthlySummary,
    DfcNode,
    DfcRejectedEntry,
)
from engine.services.dfc import DfcResult, DfcTree
from engine.services.dfc.analytics import (
    best_and_worst_month,
    category_metrics,
    monthly_summary,
    statement_kpis,
    top_categories,
)


def _build_diagnostics(result: DfcResult) -> DfcDiagnostics:
    return DfcDiagnostics(
        excluded_count=len(result.excluded),
        excluded_amount=float(sum(e.amount for e in result.excluded)),
        excluded=[DfcExcludedContribution(**asdict(e)) for e in result.excluded],
        rejected=[DfcRejectedEntry(**asdict(r)) for r in result.rejected],
        unmapped_codes=list(result.unmapped_codes),
        shadowed_codes=list(result.shadowed_codes),
    )


def _build_dfc_response(result: DfcResult) -> DfcHierarchicalResponse:
    tree = result.tree
    return DfcHierarchicalResponse(
        nodes=[DfcNode(**record) for record in tree.to_records()],
        months=list(tree.months),
        root_ids=list(tree.root_ids),
        diagnostics=_build_diagnostics(result),
    )


def _build_analysis_response(tree: DfcTree) -> DfcAnalysisResponse:
    summary = monthly_summary(tree)
    metrics = top_categories(category_metrics(tree), limit=ANALYSIS_TOP_CATEGORIES)
    best, worst = best_and_worst_month(summary)
    return DfcAnalysisResponse(
        monthly=[DfcMonthlySummary(**row) for row in summary.to_dict(orient="records")],
        categories=[DfcCategoryMetrics(**row) for row in metrics.to_dict(orient="records")],
        kpis=DfcKpis(**asdict(statement_kpis(tree))),
        best_month=best,
        worst_month=worst,
    )
