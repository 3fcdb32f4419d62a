"""jobstream init-config: write a starter config file."""

from pathlib import Path

import typer
from rich.console import Console

from ..core.config import load_defaults, save_defaults

console = Console()


def init_config(
    path: Path = typer.Argument(..., help="Where to write the TOML file"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
) -> None:
    """Write the default configuration to PATH for editing."""
    if path.exists() and not force:
        console.print(f"[red]{path} already exists[/red] (use --force to overwrite)")
        raise typer.Exit(1)
    path.parent.mkdir(parents=True, exist_ok=True)
    save_defaults(load_defaults(), path)
    console.print(f"[green]Wrote config:[/green] {path}")
