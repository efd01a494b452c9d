"""
TestPilot - AI-assisted web test generation and execution.
Main entry point for the application.
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from testpilot import __version__
from testpilot.config.settings import Settings, get_settings
from testpilot.core.plan import TestPlan
from testpilot.error_handling import TestPilotError
from testpilot.execution.executor import StepExecutor
from testpilot.generation.generator import PageScenarioGenerator
from testpilot.monitoring.logger import get_logger, setup_logging
from testpilot.monitoring.reporter import ResultsReporter
from testpilot.storage.plan_store import JsonFilePlanStorage, load_steps_file

console = Console()
logger = get_logger("main")


def create_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        prog="testpilot",
        description=f"TestPilot - AI-assisted web testing v{__version__}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Generate scenarios for a page and save them as the working plan
  testpilot --generate https://example.com

  # Run the active scenario of the saved plan
  testpilot --run

  # Run the second scenario and write a JSON report
  testpilot --run --scenario 2 --output reports/run.json

  # Run hand-written steps against a URL
  testpilot --run --steps steps.json --url https://example.com
        """,
    )

    command_group = parser.add_mutually_exclusive_group()
    command_group.add_argument(
        "-g", "--generate",
        metavar="URL",
        help="Generate test scenarios for a page and save them as the working plan",
    )
    command_group.add_argument(
        "-r", "--run",
        action="store_true",
        help="Execute the active scenario of the saved plan, or a steps file",
    )
    command_group.add_argument(
        "--version",
        action="store_true",
        help="Show version information",
    )

    parser.add_argument(
        "-s", "--scenario",
        type=int,
        help="1-based number of the saved scenario to run (default: active scenario)",
    )
    parser.add_argument(
        "--steps",
        type=Path,
        help="Path to a JSON list of steps to run instead of the saved plan",
    )
    parser.add_argument(
        "-u", "--url",
        help="Start URL (required with --steps, overrides the plan URL otherwise)",
    )
    parser.add_argument(
        "-o", "--output",
        type=Path,
        help="Write the JSON execution report to this file",
    )
    parser.add_argument(
        "--headed",
        action="store_true",
        help="Show the browser window while running",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode with verbose logging",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose structured logging output (JSON)",
    )

    return parser


def show_version() -> int:
    """Show version information."""
    console.print("\n[bold cyan]TestPilot - AI-assisted web testing[/bold cyan]")
    console.print(f"Version: [green]{__version__}[/green]")
    return 0


def _render_plan_table(plan: TestPlan) -> None:
    """Render the scenarios of a plan as a table in the console."""
    table = Table(title=f"Test Plan for {plan.url}", show_lines=True)
    table.add_column("#", style="cyan", width=4)
    table.add_column("Scenario", style="green")
    table.add_column("Steps", justify="right")
    table.add_column("Description", style="white")

    for i, scenario in enumerate(plan.scenarios, 1):
        marker = " *" if i - 1 == plan.active_scenario_index else ""
        table.add_row(
            f"{i}{marker}",
            scenario.name,
            str(len(scenario.test_steps)),
            scenario.description or "",
        )

    console.print(table)


async def generate_plan(url: str, settings: Settings) -> int:
    """Generate scenarios for a URL and store them as the working plan."""
    console.print(f"\n[cyan]Generating scenarios for:[/cyan] {url}")

    generator = PageScenarioGenerator(settings=settings)
    try:
        scenarios = await generator.generate(url)
    except TestPilotError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        return 1

    plan = TestPlan(url=url, scenarios=scenarios)
    storage = JsonFilePlanStorage(settings.plan_file)
    storage.save(plan)

    _render_plan_table(plan)
    console.print(f"[green]Plan saved to:[/green] {storage.path}")
    return 0


def _resolve_run_input(
    parsed_args: argparse.Namespace, settings: Settings
) -> Tuple[str, List[Any], str]:
    """Work out the start URL, steps and a display title for a run."""
    if parsed_args.steps:
        if not parsed_args.url:
            raise TestPilotError("--url is required when running a steps file.")
        return parsed_args.url, load_steps_file(parsed_args.steps), str(parsed_args.steps)

    plan = JsonFilePlanStorage(settings.plan_file).load()
    if plan is None or not plan.scenarios:
        raise TestPilotError(
            "No saved test plan found. Generate one with --generate URL first."
        )

    if parsed_args.scenario is not None:
        try:
            scenario = plan.select(parsed_args.scenario - 1)
        except IndexError:
            raise TestPilotError(
                f"Scenario {parsed_args.scenario} does not exist; "
                f"the plan has {len(plan.scenarios)} scenario(s)."
            )
    else:
        scenario = plan.active_scenario

    return parsed_args.url or plan.url, list(scenario.test_steps), scenario.name


async def run_steps(parsed_args: argparse.Namespace, settings: Settings) -> int:
    """Execute a saved scenario or a steps file and report the results."""
    try:
        url, steps, title = _resolve_run_input(parsed_args, settings)
    except TestPilotError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        return 1

    console.print(Panel.fit(f"[bold]{title}[/bold]\n{url}", title="Running"))

    executor = StepExecutor(settings=settings, headless=settings.browser_headless)
    try:
        report = await executor.execute(url, steps)
    except TestPilotError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        return 1

    reporter = ResultsReporter(console=console, reports_dir=settings.reports_dir)
    reporter.render(report, title=title)

    if parsed_args.output:
        report_path = reporter.save(report, parsed_args.output)
        console.print(f"[green]Report saved to:[/green] {report_path}")

    return 0 if report.succeeded else 1


async def async_main(args: Optional[Sequence[str]] = None) -> int:
    """Async main entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if parsed_args.version:
        return show_version()

    if not parsed_args.generate and not parsed_args.run:
        parser.print_help()
        return 1

    settings = get_settings()

    if parsed_args.debug:
        settings.debug_mode = True
        settings.log_level = "DEBUG"

    settings.log_format = "json" if parsed_args.verbose else "text"

    if parsed_args.headed:
        settings.browser_headless = False

    setup_logging(
        log_level=settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
    )

    if parsed_args.generate:
        return await generate_plan(parsed_args.generate, settings)
    return await run_steps(parsed_args, settings)


def main(args: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point for TestPilot.

    Args:
        args: Command line arguments

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    try:
        return asyncio.run(async_main(args))
    except Exception as e:
        logger.exception("Unhandled error")
        console.print(f"[red]Fatal error: {e}[/red]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
