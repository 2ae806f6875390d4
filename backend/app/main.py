"""
DFC Backend – FastAPI service for the management cash-flow statement.

=== ROLE IN THE SYSTEM ===
Serves the hierarchical cash-flow statement (DFC) built from settled ledger
entries. The frontend never aggregates raw entries; it renders the node
list returned here.

=== WHAT IT DOES ===
1. LEDGER STORE: Reads the ledger export (CSV/Excel/Parquet) configured via
   DFC_LEDGER_PATH and applies the requested date window.
2. CATALOG: Reads canonical category names from DFC_CATALOG_PATH (optional).
3. STATEMENT: Runs the engine (engine.services.dfc) – decomposition,
   hierarchy construction, monthly rollup – and returns the flat node list,
   months and root ids, plus diagnostics about excluded contributions.
4. ANALYSIS: Monthly revenue/expense/result, per-category metrics and KPIs.

Routes live in app/routers/; this module only wires the application.
"""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import app.state as state
from app.config import CORS_ORIGINS
from app.routers.dfc import router as dfc_router


@asynccontextmanager
async def _lifespan(app: FastAPI):
    """
    FastAPI lifespan: create the upstream fetch pool before accepting requests.

    Each statement request reads the ledger and the catalog concurrently on
    this pool; the engine itself runs on the request thread.
    """
    state._executor = ThreadPoolExecutor(max_workers=max(2, min(8, os.cpu_count() or 1)))
    yield
    state._executor.shutdown(wait=True)
    state._executor = None


app = FastAPI(lifespan=_lifespan)

# ---------------------------------------------------------------------------
# CORS: local frontend origins on common Vite/React ports, plus any origins
# listed in DFC_CORS_ORIGINS.
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


app.include_router(dfc_router)
