"""Command-line interface for the shop ledger."""

import argparse
import json
import sys
from decimal import Decimal
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from shop_ledger import __version__
from shop_ledger.config import Config, ConfigError, DisplayConfig, load_config
from shop_ledger.models.report import DashboardOverview
from shop_ledger.processing.ai import (
    DashboardSummarizer,
    RequestState,
    SummaryRequestStatus,
    SummaryRequestTracker,
)
from shop_ledger.processing.dashboard import build_overview, build_summary_request
from shop_ledger.snapshot import SnapshotError, load_snapshot
from shop_ledger.utils.decimal_utils import format_currency, format_percentage, round_money
from shop_ledger.utils.logging_config import get_logger, setup_logging

# Load environment variables from .env file (if it exists)
load_dotenv()

console = Console()
logger = get_logger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser.

    Returns:
        Configured ArgumentParser.
    """
    parser = argparse.ArgumentParser(
        prog="shop-ledger",
        description="Compute shop dashboard metrics from a store snapshot",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --snapshot data/sample_snapshot.yaml
  %(prog)s -s export.json --ai-summary --start-date "May 2024" --end-date today
  %(prog)s -s export.json --json
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "-s", "--snapshot",
        type=Path,
        default=None,
        help="Snapshot file with orders, capital and users (YAML or JSON)",
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to settings.yaml (default: config/settings.yaml)",
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the metrics as JSON instead of tables",
    )

    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Validate configuration and snapshot files only",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase output verbosity (-v, -vv)",
    )

    ai_group = parser.add_argument_group("AI Summary")
    ai_group.add_argument(
        "--ai-summary",
        action="store_true",
        help="Generate a prose summary of the metrics with AI",
    )
    ai_group.add_argument(
        "--start-date",
        default=None,
        help="Start of the summarized period, free text (default from config)",
    )
    ai_group.add_argument(
        "--end-date",
        default=None,
        help="End of the summarized period, free text (default from config)",
    )

    return parser


def _json_value(value: object) -> object:
    """JSON encoder fallback: amounts become numbers rounded to cents."""
    if isinstance(value, Decimal):
        # NaN and infinity have no JSON number form
        return float(round_money(value)) if value.is_finite() else None
    return str(value)


def get_log_level(verbosity: int) -> str:
    """Convert verbosity count to log level."""
    if verbosity >= 2:
        return "DEBUG"
    elif verbosity >= 1:
        return "INFO"
    else:
        return "WARNING"


def render_overview(
    overview: DashboardOverview,
    display: DisplayConfig,
    output: Console,
) -> None:
    """Print the overview cards, revenue chart data and capital position.

    Args:
        overview: Computed metrics.
        display: Currency display settings.
        output: Rich console to print to.
    """

    def money(amount):
        return format_currency(amount, display.currency, display.locale)

    orders = overview.orders

    cards = Table(title="Overview", show_header=True, header_style="bold")
    cards.add_column("Metric")
    cards.add_column("Value", justify="right")
    cards.add_row("Total Revenue", money(orders.total_revenue))
    cards.add_row("Total Profit", money(orders.total_profit))
    cards.add_row("Profit Margin", format_percentage(orders.profit_margin))
    cards.add_row("Total Orders", f"+{orders.total_orders}")
    output.print(cards)

    if overview.monthly_revenue:
        chart = Table(title="Revenue Overview", show_header=True, header_style="bold")
        chart.add_column("Month")
        chart.add_column("Revenue", justify="right")
        for entry in overview.monthly_revenue:
            chart.add_row(entry.month, money(entry.revenue))
        output.print(chart)
    else:
        output.print("[dim]No revenue data to display. Add some orders to see the chart.[/dim]")

    if overview.skipped_dates:
        output.print(
            f"[yellow]{overview.skipped_dates} order(s) with unreadable dates "
            f"are not shown in the monthly revenue.[/yellow]"
        )

    capital = overview.capital
    ledger = Table(title="Capital", show_header=True, header_style="bold")
    ledger.add_column("Metric")
    ledger.add_column("Value", justify="right")
    ledger.add_row("Total Deposits", money(capital.total_deposits))
    ledger.add_row("Total Withdrawals", money(capital.total_withdrawals))
    ledger.add_row("Net Capital", money(capital.net_capital))
    output.print(ledger)


def run_ai_summary(
    args: argparse.Namespace,
    config: Config,
    overview: DashboardOverview,
    output: Console,
) -> SummaryRequestStatus | None:
    """Request the AI summary and print the outcome.

    Args:
        args: Parsed command-line arguments.
        config: Application configuration.
        overview: Computed metrics.
        output: Rich console to print to.

    Returns:
        Final request status, or None if AI is not configured.
    """
    summarizer = DashboardSummarizer.create(
        api_key_env=config.ai.api_key_env,
        model=config.ai.model,
        max_tokens=config.ai.max_tokens,
        timeout=config.ai.timeout,
    )
    if not summarizer.is_available:
        output.print(
            f"[yellow]AI not available - set {config.ai.api_key_env} environment variable[/yellow]"
        )
        return None

    request = build_summary_request(
        overview,
        start_date=args.start_date or config.summary_period.start_date,
        end_date=args.end_date or config.summary_period.end_date,
    )

    tracker = SummaryRequestTracker(summarizer)
    with output.status("[bold green]Generating summary..."):
        status = tracker.run(request)

    if status.state is RequestState.SUCCEEDED and status.result is not None:
        output.print("\n[bold]AI-Powered Insights[/bold]")
        output.print(status.result.summary)
    else:
        output.print(f"\n[red]{status.error}[/red]")

    return status


def validate_files(args: argparse.Namespace) -> int:
    """Check that the configuration and snapshot files load.

    Args:
        args: Parsed command-line arguments.

    Returns:
        0 if valid, 1 if errors found.
    """
    console.print("[bold]Validating files...[/bold]\n")
    errors: list[str] = []

    try:
        load_config(args.config)
        console.print("[green]✓[/green] Configuration loaded")
    except (ConfigError, FileNotFoundError) as e:
        errors.append(f"Configuration: {e}")

    if args.snapshot is not None:
        try:
            snapshot = load_snapshot(args.snapshot)
            console.print(f"[green]✓[/green] Snapshot: {args.snapshot}")
            console.print(f"  - {len(snapshot.orders)} orders")
            console.print(f"  - {len(snapshot.capital)} capital entries")
            console.print(f"  - {len(snapshot.users)} users")
        except (SnapshotError, FileNotFoundError) as e:
            errors.append(f"Snapshot: {e}")

    if errors:
        console.print("\n[red]Errors:[/red]")
        for err in errors:
            console.print(f"  - {err}")
        return 1

    console.print("\n[green]All files are valid.[/green]")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    log_level = get_log_level(args.verbose)
    setup_logging(level=log_level, log_file="", console_output=args.verbose > 0)

    if args.validate_only:
        return validate_files(args)

    if args.snapshot is None:
        console.print("[red]Error: --snapshot is required[/red]")
        parser.print_usage()
        return 1

    try:
        config = load_config(args.config)
    except ConfigError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    if config.logging.file:
        setup_logging(
            level=log_level if args.verbose else config.logging.level,
            log_file=config.logging.file,
            console_output=args.verbose > 0,
        )

    try:
        snapshot = load_snapshot(args.snapshot)
    except (SnapshotError, FileNotFoundError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    overview = build_overview(snapshot)

    if args.json:
        payload: dict[str, object] = overview.to_dict()
        if args.ai_summary:
            status = run_ai_summary(args, config, overview, Console(stderr=True))
            if status is not None:
                payload["aiSummary"] = status.result.summary if status.result else None
        print(json.dumps(payload, indent=2, default=_json_value))
        return 0

    console.print(f"[bold]Shop Ledger v{__version__}[/bold]\n")
    render_overview(overview, config.display, console)

    if args.ai_summary:
        run_ai_summary(args, config, overview, console)

    return 0


if __name__ == "__main__":
    sys.exit(main())
