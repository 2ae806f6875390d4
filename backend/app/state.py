"""
Global mutable state shared across the application.

All modules access these via ``import app.state as state`` and then
``state._executor``, ``state.LEDGER_PATH``, etc. so that rebinding in
the lifespan function (or in tests) is visible everywhere.
"""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

# Upstream fetch pool – created at startup in main._lifespan().
# Ledger entries and the category catalog are read concurrently on it.
_executor: ThreadPoolExecutor | None = None

# Disk paths
BASE_DIR = Path(__file__).resolve().parent.parent  # /backend/

# DFC_DATA_DIR points at the directory holding the ledger export and the
# category catalog. In dev the variable is unset and we fall back to the
# repo-local backend/data/ directory.
_data_root = os.environ.get("DFC_DATA_DIR")
DATA_DIR = Path(_data_root) if _data_root else BASE_DIR / "data"

_ledger_env = os.environ.get("DFC_LEDGER_PATH")
LEDGER_PATH = Path(_ledger_env) if _ledger_env else DATA_DIR / "ledger.csv"

_catalog_env = os.environ.get("DFC_CATALOG_PATH")
CATALOG_PATH = Path(_catalog_env) if _catalog_env else DATA_DIR / "catalog.json"
