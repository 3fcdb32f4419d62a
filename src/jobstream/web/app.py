"""FastAPI application exposing jobs over SSE or batch JSON."""

import logging
import os
from pathlib import Path

from fastapi import FastAPI

from ..core.config import load_config
from .routes import jobs

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"

# Set by `jobstream web --config` so the uvicorn-imported app picks it up
CONFIG_ENV_VAR = "JOBSTREAM_CONFIG"


def configure_logging(level: str = "INFO") -> None:
    """Route jobstream log records to the terminal."""
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT, datefmt="%H:%M:%S")
    logging.getLogger("jobstream").setLevel(level.upper())


def create_app(config: dict | None = None) -> FastAPI:
    """Create the application.

    Without an explicit ``config`` the packaged defaults are used, merged
    with the file named by $JOBSTREAM_CONFIG if set.
    """
    if config is None:
        config_path = os.environ.get(CONFIG_ENV_VAR)
        config = load_config(Path(config_path) if config_path else None)
    configure_logging(config.get("logging", {}).get("level", "INFO"))

    app = FastAPI(title="jobstream", docs_url=None, redoc_url=None)
    app.state.config = config
    app.include_router(jobs.router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()
