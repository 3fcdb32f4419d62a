"""jobstream run: run a job locally and print its records."""

import json
from pathlib import Path

import typer
from rich.console import Console

from ..core.batch import BatchCollector
from ..core.config import job_config, load_config
from ..core.errors import TransportClosed, UnknownJobError
from ..core.session import StreamSession
from ..jobs.registry import get_job
from ..web.runner import STATUS_COMPLETED, JobRunner

console = Console()


class ConsoleSink:
    """Sink that prints each SSE frame as it is written."""

    def write(self, frame: bytes) -> None:
        try:
            console.out(frame.decode("utf-8"), end="", highlight=False)
        except OSError as e:
            # stdout closed under us, e.g. piped into `head`
            raise TransportClosed(str(e)) from e

    def close(self) -> None:
        pass


def run(
    name: str = typer.Argument(..., help="Job name (see `jobstream jobs`)"),
    config: Path = typer.Option(
        None,
        "--config", "-c",
        help="TOML file merged over the packaged defaults",
    ),
    stream: bool = typer.Option(
        True,
        "--stream/--batch",
        help="Print SSE frames as they are produced, or one JSON result at the end",
    ),
) -> None:
    """Run a job in this process."""
    settings = load_config(config)
    try:
        job = get_job(name, job_config(settings, name))
    except UnknownJobError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if stream:
        runner = JobRunner(job, StreamSession(ConsoleSink()))
        runner.run()
        if runner.status != STATUS_COMPLETED:
            raise typer.Exit(1)
        return

    collector = BatchCollector()
    JobRunner(job, collector).run()
    console.print_json(json.dumps(collector.result()))
    if not collector.succeeded:
        raise typer.Exit(1)
