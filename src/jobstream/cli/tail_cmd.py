"""jobstream tail: follow a streaming job endpoint."""

import json

import httpx
import typer
from rich.console import Console

from ..core.constants import STREAM_QUERY_PARAM, STREAM_TRUE_TOKEN
from ..core.errors import StreamParseError
from ..core.parser import is_terminal, iter_records

console = Console()


def tail(
    url: str = typer.Argument(..., help="Job run URL, e.g. http://localhost:8000/jobs/sample/run"),
    timeout: float = typer.Option(
        10.0,
        "--timeout",
        help="Connect timeout in seconds (reads never time out)",
    ),
) -> None:
    """Start a job over HTTP and print each streamed record as JSON."""
    terminal = None
    params = {STREAM_QUERY_PARAM: STREAM_TRUE_TOKEN}
    client_timeout = httpx.Timeout(None, connect=timeout)
    try:
        with httpx.stream("POST", url, params=params, timeout=client_timeout) as response:
            if response.status_code != 200:
                console.print(f"[red]HTTP {response.status_code}[/red] {response.read().decode()}")
                raise typer.Exit(1)
            for record in iter_records(response.iter_text()):
                console.out(json.dumps(record), highlight=False)
                if is_terminal(record):
                    terminal = record
    except httpx.HTTPError as e:
        console.print(f"[red]Connection failed:[/red] {e}")
        raise typer.Exit(1)
    except StreamParseError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if terminal is None:
        console.print("[yellow]Stream ended without a terminal record[/yellow]")
        raise typer.Exit(1)
    if not terminal.get("success"):
        raise typer.Exit(1)
