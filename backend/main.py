"""``healio-api`` console script."""

from __future__ import annotations

import os

import uvicorn

from backend.app.main import app

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8000


def run() -> None:
    """Serve Healio on ``HOST``:``PORT``.

    Uvicorn's own log config is disabled so the app's JSON handlers stay in charge.
    """

    host = os.getenv("HOST") or DEFAULT_HOST
    port = int(os.getenv("PORT") or DEFAULT_PORT)
    uvicorn.run(app, host=host, port=port, log_config=None, proxy_headers=True)


if __name__ == "__main__":
    run()
