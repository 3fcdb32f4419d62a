"""jobstream jobs: list registered jobs."""

from rich.console import Console
from rich.table import Table

from ..jobs.registry import job_summaries

console = Console()


def jobs() -> None:
    """List the jobs that can be run."""
    table = Table(title="Jobs")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    for name, summary in job_summaries().items():
        table.add_row(name, summary)
    console.print(table)
