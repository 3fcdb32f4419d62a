"""jobstream web: start the HTTP server."""

import os
from pathlib import Path

import typer
from rich.console import Console

from ..core.config import load_config

console = Console()


def web(
    port: int = typer.Option(
        None,
        "--port",
        help="HTTP port (default from config)",
    ),
    host: str = typer.Option(
        None,
        "--host",
        help="Host to bind to (default from config)",
    ),
    config: Path = typer.Option(
        None,
        "--config", "-c",
        help="TOML file merged over the packaged defaults",
    ),
) -> None:
    """Serve the job endpoints (FastAPI + SSE)."""
    import uvicorn

    from ..web.app import CONFIG_ENV_VAR

    settings = load_config(config)
    server = settings.get("server", {})
    host = host or server.get("host", "127.0.0.1")
    port = port or server.get("port", 8000)

    if config is not None:
        os.environ[CONFIG_ENV_VAR] = str(config.resolve())

    console.print("[bold]Starting jobstream server[/bold]")
    console.print(f"URL: http://{host}:{port}")
    console.print()

    uvicorn.run(
        "jobstream.web.app:app",
        host=host,
        port=port,
        reload=False,
    )
