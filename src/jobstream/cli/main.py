"""jobstream CLI: Typer application with subcommands."""

import typer

from .init_cmd import init_config
from .jobs_cmd import jobs
from .run_cmd import run
from .tail_cmd import tail
from .web_cmd import web

app = typer.Typer(
    name="jobstream",
    help="Real-time progress streaming for long-running import jobs.",
    no_args_is_help=True,
)

app.command()(web)
app.command()(jobs)
app.command()(run)
app.command()(tail)
app.command(name="init-config")(init_config)


if __name__ == "__main__":
    app()
