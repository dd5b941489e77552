"""Entry point: serve the status endpoint or run the checks once."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import uvicorn
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from vigil.config import settings
from vigil.health import default_checker
from vigil.health.catalog import register_checks
from vigil.health.errors import CheckFileError
from vigil.health.serializer import build_report, load_error_catalog

console = Console()
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)


def run_server() -> None:
    """Start the FastAPI server."""
    console.print(Panel("Starting Vigil status server", style="bold green"))
    uvicorn.run(
        "vigil.api.server:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
    )


def run_once(checks_file: Path) -> int:
    """Run every check from ``checks_file`` once and print the report. Returns the exit code."""
    try:
        added = register_checks(default_checker, checks_file)
    except CheckFileError as e:
        console.print(f"[bold red]{e}[/bold red]")
        return 2
    console.print(Panel(f"{added} checks from {checks_file}", title="Vigil", style="bold blue"))

    try:
        context = default_checker.run()
    finally:
        default_checker.close()

    catalog = load_error_catalog(
        Path(settings.error_messages_file) if settings.error_messages_file else None
    )
    report = build_report(context, catalog)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Field")
    table.add_column("Value")
    table.add_row("revision", report.revision)
    table.add_row("time", report.time.isoformat())
    for name, value in (report.messages or {}).items():
        table.add_row(name, str(value))
    console.print(table)

    if report.errors:
        for error in report.errors:
            console.print(f"[bold red]✗[/bold red] {error}")
        return 1
    console.print("[bold green]✓ all checks passed[/bold green]")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Vigil health check aggregator")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("serve", help="Start the status server")

    check_parser = sub.add_parser("check", help="Run the checks once and print the report")
    check_parser.add_argument(
        "--file", default=settings.checks_file, help="YAML check file (default: %(default)s)",
    )

    args = parser.parse_args()

    if args.command == "serve":
        run_server()
    elif args.command == "check":
        sys.exit(run_once(Path(args.file)))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
