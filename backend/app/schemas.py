"""Pydantic models defining the REST contract between frontend and backend."""

from __future__ import annotations

from pydantic import BaseModel, Field


# ── Statement tree ──────────────────────────────────────────────────────────

class DfcAuditEntry(BaseModel):
    entry_id: str
    description: str
    month: str
    amount: float
    paid_amount: float
    tag: str


class DfcNode(BaseModel):
    id: str
    name: str
    level: int
    parent_id: str | None = None
    child_ids: list[str] = Field(default_factory=list)
    values_by_month: dict[str, float] = Field(default_factory=dict)
    is_leaf: bool
    audit_entries: list[DfcAuditEntry] = Field(default_factory=list)


class DfcExcludedContribution(BaseModel):
    entry_id: str
    tag: str
    amount: float
    reason: str


class DfcRejectedEntry(BaseModel):
    entry_id: str
    reason: str


class DfcDiagnostics(BaseModel):
    excluded_count: int = 0
    excluded_amount: float = 0.0
    excluded: list[DfcExcludedContribution] = Field(default_factory=list)
    rejected: list[DfcRejectedEntry] = Field(default_factory=list)
    unmapped_codes: list[str] = Field(default_factory=list)
    shadowed_codes: list[str] = Field(default_factory=list)


class DfcHierarchicalResponse(BaseModel):
    nodes: list[DfcNode]
    months: list[str]
    root_ids: list[str]
    diagnostics: DfcDiagnostics = Field(default_factory=DfcDiagnostics)


# ── Statement analysis ──────────────────────────────────────────────────────

class DfcMonthlySummary(BaseModel):
    month: str
    revenue: float
    expenses: float
    result: float
    margin: float


class DfcAnomaly(BaseModel):
    month: str
    value: float
    z_score: float


class DfcCategoryMetrics(BaseModel):
    category_id: str
    category_name: str
    total: float
    mean_by_month: float
    variance: float
    trend: str
    anomalies: list[DfcAnomaly] = Field(default_factory=list)


class DfcKpis(BaseModel):
    total_categories: int
    total_months: int
    total_revenue: float
    total_expenses: float
    net_balance: float


class DfcAnalysisResponse(BaseModel):
    monthly: list[DfcMonthlySummary]
    categories: list[DfcCategoryMetrics]
    kpis: DfcKpis
    best_month: str | None = None
    worst_month: str | None = None
