"""
main.py: Server launcher and entry point.

Run this file to start the Roomy matching & availability API:

    python main.py

Interactive API docs are served at http://127.0.0.1:8000/docs

Host, port and hot-reload come from ROOMY_HOST, ROOMY_PORT and ROOMY_RELOAD.
Application wiring lives in app.py.

Direct uvicorn usage:
    uvicorn app:app --reload
"""

from __future__ import annotations

import os

import uvicorn

from backend.utils.config import get_settings


HOST = os.getenv("ROOMY_HOST", "127.0.0.1")
PORT = int(os.getenv("ROOMY_PORT", "8000"))
RELOAD = os.getenv("ROOMY_RELOAD", "true").strip().lower() in {"1", "true", "yes", "on"}


def main() -> None:
    """Start the API server."""
    settings = get_settings()
    print("=" * 60)
    print(f"  {settings.app_name} v{settings.app_version}")
    print("=" * 60)
    print(f"  Server   : http://{HOST}:{PORT}")
    print(f"  API docs : http://{HOST}:{PORT}/docs")
    print(f"  Database : {settings.database_path}")
    print("=" * 60)
    print("  Press CTRL+C to stop\n")

    uvicorn.run(
        "app:app",
        host=HOST,
        port=PORT,
        reload=RELOAD,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
