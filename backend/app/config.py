"""Domain constants for ledger ingestion and the statement API."""

from __future__ import annotations

import os

# Columns that MUST exist in every ledger export (canonical names).
LEDGER_REQUIRED_COLS = {
    "id",
    "paid_amount",
    "category_tags",
    "settlement_date",
    "event_kind",
}

# Optional columns filled with a default when absent.
LEDGER_OPTIONAL_COLS = {
    "description": "",
    "declared_sub_amounts": "",
}

# Header aliases → canonical column. Keys are compared after _norm_key().
LEDGER_COLUMN_ALIASES = {
    "id": "id",
    "entry_id": "id",
    "parcela_id": "id",
    "description": "description",
    "descricao": "description",
    "paid_amount": "paid_amount",
    "paid": "paid_amount",
    "valor_pago": "paid_amount",
    "category_tags": "category_tags",
    "categories": "category_tags",
    "categorias": "category_tags",
    "declared_sub_amounts": "declared_sub_amounts",
    "sub_amounts": "declared_sub_amounts",
    "valor_categorias": "declared_sub_amounts",
    "settlement_date": "settlement_date",
    "paid_at": "settlement_date",
    "data_quitacao": "settlement_date",
    "event_kind": "event_kind",
    "kind": "event_kind",
    "tipo_evento": "event_kind",
}

# Event kind spellings → canonical EventKind value.
EVENT_KIND_ALIASES = {
    "revenue": "REVENUE",
    "receita": "REVENUE",
    "income": "REVENUE",
    "expense": "EXPENSE",
    "despesa": "EXPENSE",
    "cost": "EXPENSE",
}

# Multi-valued cells (tags, sub-amounts) are joined with this separator.
LIST_CELL_SEPARATOR = "|"

LEDGER_SUFFIXES = {".csv", ".xlsx", ".xls", ".parquet"}

# Number of top categories returned by the analysis endpoint.
ANALYSIS_TOP_CATEGORIES = 20

# CORS: local dev ports plus anything in DFC_CORS_ORIGINS (comma-separated).
CORS_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:8080",
    "http://127.0.0.1:8080",
    *[o.strip() for o in os.environ.get("DFC_CORS_ORIGINS", "").split(",") if o.strip()],
]
