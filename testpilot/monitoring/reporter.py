"""
Execution result reporting for TestPilot.

Renders a run's results as a console table and writes the camelCase JSON
report consumed by other tools.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.table import Table

from testpilot.core.types import ExecutionReport, ExecutionStatus

logger = logging.getLogger(__name__)

STATUS_STYLES = {
    ExecutionStatus.PASS: "green",
    ExecutionStatus.FAIL: "red",
    ExecutionStatus.SKIPPED: "yellow",
    ExecutionStatus.PENDING: "dim",
    ExecutionStatus.RUNNING: "cyan",
}


class ResultsReporter:
    """Presents and saves execution reports."""

    def __init__(
        self,
        console: Optional[Console] = None,
        reports_dir: Optional[Union[str, Path]] = None,
    ) -> None:
        self.console = console or Console()
        self.reports_dir = Path(reports_dir) if reports_dir is not None else Path("reports")

    def render(self, report: ExecutionReport, title: str = "Execution Results") -> None:
        """Print the per-step table followed by a summary."""
        if report.results:
            table = Table(title=title, show_lines=True)
            table.add_column("Step", style="cyan", width=6)
            table.add_column("Action", style="green")
            table.add_column("Target", style="yellow")
            table.add_column("Status")
            table.add_column("Details", style="white")

            for i, result in enumerate(report.results, 1):
                style = STATUS_STYLES.get(result.status, "white")
                table.add_row(
                    str(i),
                    result.action,
                    result.target or "-",
                    f"[{style}]{result.status.value}[/{style}]",
                    result.details or "",
                )
            self.console.print(table)
        else:
            self.console.print("[yellow]No step results were produced.[/yellow]")

        self.console.print(
            f"Passed: [green]{report.passed}[/green]  "
            f"Failed: [red]{report.failed}[/red]  "
            f"Skipped: [yellow]{report.skipped}[/yellow]"
        )
        if report.error:
            self.console.print(f"[red]Run error: {report.error}[/red]")

    def save(
        self, report: ExecutionReport, output_path: Optional[Union[str, Path]] = None
    ) -> Path:
        """
        Write the report as JSON.

        Args:
            report: Report to write
            output_path: Target file; defaults to a timestamped file in the
                reports directory

        Returns:
            Path of the written file
        """
        if output_path is None:
            timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
            output_path = self.reports_dir / f"execution_report_{timestamp}.json"
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(report.to_payload(), f, indent=2)

        logger.info(f"Saved execution report to {output_path}")
        return output_path
