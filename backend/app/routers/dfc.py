"""Cash-flow statement (DFC) routes."""

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, HTTPException

import app.state as state
from app.parsers.catalog_parser import load_category_catalog
from app.parsers.ledger_parser import load_ledger_entries
from app.schemas import DfcAnalysisResponse, DfcHierarchicalResponse
from app.services.dfc_tree import _build_analysis_response, _build_dfc_response
from engine.services.dfc import DfcResult, build_dfc

_log = logging.getLogger(__name__)

router = APIRouter()


def _parse_window(start: str | None, end: str | None) -> tuple[date | None, date | None]:
    parsed: list[date | None] = []
    for label, raw in (("start", start), ("end", end)):
        if not raw:
            parsed.append(None)
            continue
        try:
            parsed.append(date.fromisoformat(raw))
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Invalid {label} date: {raw}")
    start_d, end_d = parsed
    if start_d and end_d and start_d > end_d:
        raise HTTPException(status_code=400, detail="start must be on or before end")
    return start_d, end_d


def _run_statement(start: str | None, end: str | None) -> DfcResult:
    """Fetch ledger entries and catalog concurrently, then build the statement."""
    start_d, end_d = _parse_window(start, end)

    if state._executor is None:
        raise HTTPException(status_code=503, detail="Worker pool not ready. Server may still be starting.")

    entries_future = state._executor.submit(load_ledger_entries, state.LEDGER_PATH, start_d, end_d)
    catalog_future = state._executor.submit(load_category_catalog, state.CATALOG_PATH)

    try:
        entries = entries_future.result()
    except FileNotFoundError as exc:
        raise HTTPException(status_code=503, detail=f"Ledger source unavailable: {exc}")
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid ledger export: {exc}")
    catalog = catalog_future.result()

    result = build_dfc(entries, catalog)
    if result.excluded or result.rejected:
        _log.info(
            "DFC %s..%s: %d contributions excluded, %d entries rejected",
            start_d, end_d, len(result.excluded), len(result.rejected),
        )
    return result


@router.get("/api/dfc", response_model=DfcHierarchicalResponse)
def get_dfc(start: str | None = None, end: str | None = None) -> DfcHierarchicalResponse:
    return _build_dfc_response(_run_statement(start, end))


@router.get("/api/dfc/analysis", response_model=DfcAnalysisResponse)
def get_dfc_analysis(start: str | None = None, end: str | None = None) -> DfcAnalysisResponse:
    return _build_analysis_response(_run_statement(start, end).tree)
