"""
DFC backend – standalone entry point.

Used when the service runs outside a dev server (during development
``uvicorn app.main:app --reload`` is used instead).

Startup protocol:
  1. A free OS port is discovered by binding to 127.0.0.1:0, unless
     DFC_PORT is set.
  2. "PORT:{port}" is printed to stdout (flushed) so a wrapping shell can
     read it and know where to poll /api/health.
  3. uvicorn starts the FastAPI app on that port with DFC_LOG_LEVEL
     (default "info").

Environment variables read by the app itself:
  DFC_DATA_DIR / DFC_LEDGER_PATH / DFC_CATALOG_PATH – input files
  DFC_CORS_ORIGINS – extra CORS origins
"""

from __future__ import annotations

import os
import socket

from app.main import app as _fastapi_app


def _find_free_port() -> int:
    """Bind to port 0, let the OS assign a free port, return it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


def main() -> None:
    port = int(os.environ.get("DFC_PORT") or _find_free_port())

    # Signal the wrapping shell with the chosen port before uvicorn blocks.
    print(f"PORT:{port}", flush=True)

    import uvicorn

    uvicorn.run(
        _fastapi_app,
        host="127.0.0.1",
        port=port,
        workers=1,
        log_level=os.environ.get("DFC_LOG_LEVEL", "info").lower(),
        access_log=False,
    )


if __name__ == "__main__":
    main()
