"""CLI entry point for Cart Recon."""

import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .analyzer.cart_parser import CartParseError, PriceFormatError, parse_cart_rows, parse_grand_total
from .config import Config, load_config
from .errors import CartActionError, CartReconError, ConfigurationError
from .loader import LoadResult, PurchaseIntentLoader
from .models import ObservedCartRow, ReconciliationReport
from .reporting import Level, build_reporter

console = Console()


@click.group()
@click.version_option(package_name="cart-recon")
@click.option("--config", "-c", "config_path", type=click.Path(exists=True), help="Config file path")
@click.pass_context
def main(ctx: click.Context, config_path: str | None) -> None:
    """Cart Recon - replay a shopping list and reconcile the storefront cart."""
    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = load_config(Path(config_path) if config_path else None)
    except ConfigurationError as e:
        console.print(f"[bold red]✗ {escape(str(e))}[/]")
        sys.exit(1)


@main.command()
@click.option("--items", "-i", "items_path", type=click.Path(), help="Shopping items CSV")
@click.pass_context
def check(ctx: click.Context, items_path: str | None) -> None:
    """Validate the shopping items CSV without touching the storefront."""
    config: Config = ctx.obj["config"]
    source = Path(items_path) if items_path else config.data.items_file

    console.print(f"\n[bold blue]📋 Checking shopping items:[/] {source}\n")

    loader = PurchaseIntentLoader(config.data)
    try:
        result = loader.load_with_report(source)
    except ConfigurationError as e:
        console.print(f"[bold red]✗ {escape(str(e))}[/]\n")
        sys.exit(1)

    _print_intents(result)
    console.print(f"\n[green]✓ {len(result.intents)} products ready[/]", end="")
    if result.skipped:
        console.print(f" [yellow]({len(result.skipped)} rows skipped)[/]")
    else:
        console.print()


@main.command("inspect-cart")
@click.option("--snapshot", "-s", required=True, type=click.Path(exists=True), help="Saved cart HTML")
def inspect_cart(snapshot: str) -> None:
    """Parse a saved cart page and show what the reconciler would observe."""
    html = Path(snapshot).read_text(encoding="utf-8")
    try:
        rows = parse_cart_rows(html)
        total = parse_grand_total(html)
    except (CartParseError, PriceFormatError) as e:
        console.print(f"[bold red]✗ {escape(str(e))}[/]\n")
        sys.exit(1)

    _print_cart(rows)
    console.print(f"\n[bold]Cart total:[/] ${total:,.2f}\n")


@main.command()
@click.option("--items", "-i", "items_path", type=click.Path(), help="Shopping items CSV")
@click.option("--headed", is_flag=True, help="Show the browser window")
@click.option("--name", "run_name", default="AOS_AddToCart_PriceValidation", help="Run name for the log file")
@click.pass_context
def run(ctx: click.Context, items_path: str | None, headed: bool, run_name: str) -> None:
    """Add every item to the storefront cart and reconcile the result."""
    from .gateways.playwright_storefront import PlaywrightStorefront
    from .pipeline import run_reconciliation

    config: Config = ctx.obj["config"]
    if headed:
        config.storefront.launch.headless = False
    source = Path(items_path) if items_path else config.data.items_file

    console.print(f"\n[bold blue]🛒 Reconciling cart:[/] {config.storefront.base_url}")
    console.print(f"[dim]Items: {source} | Browser: {config.storefront.browser}[/]\n")

    reporter = build_reporter(config.reporting, run_name)
    report: ReconciliationReport | None = None
    try:
        with PlaywrightStorefront.launch(config.storefront) as storefront:
            reporter.event("run.navigating", f"Navigating to: {config.storefront.base_url}")
            storefront.open_home()
            report = run_reconciliation(storefront, config, source, reporter)
    except CartActionError as e:
        reporter.event("run.aborted", str(e), level=Level.ERROR, stage=e.stage)
        _fail(f"Cart action failed at '{e.stage}': {e.cause}")
    except CartReconError as e:
        reporter.event("run.aborted", str(e), level=Level.ERROR)
        _fail(str(e))
    except (CartParseError, PriceFormatError, AssertionError) as e:
        # Unreadable cart page, or the storefront title check failed
        reporter.event("run.aborted", str(e), level=Level.ERROR, error=type(e).__name__)
        _fail(f"{type(e).__name__}: {e}")
    finally:
        reporter.close()

    _print_report(report)
    if not report.passed:
        sys.exit(1)
    console.print("\n[bold green]✓ Cart validation passed![/]\n")


def _fail(message: str) -> None:
    console.print(f"\n[bold red]✗ {escape(message)}[/]\n")
    sys.exit(1)


def _print_intents(result: LoadResult) -> None:
    table = Table(title="Purchase Intents")
    table.add_column("Row", style="dim", justify="right")
    table.add_column("Category", style="cyan")
    table.add_column("Model")
    table.add_column("Qty", justify="right")
    table.add_column("Color", style="magenta")

    for intent in result.intents:
        table.add_row(
            str(intent.row_number),
            intent.category.value,
            escape(intent.model),
            str(intent.quantity),
            escape(intent.color),
        )
    console.print(table)

    for skipped in result.skipped:
        console.print(f"[yellow]⚠️ Row {skipped.row_number} skipped: {escape(skipped.reason)}[/]")


def _print_cart(rows: list[ObservedCartRow]) -> None:
    table = Table(title="Shopping Cart")
    table.add_column("Product", style="cyan")
    table.add_column("Color", style="magenta")
    table.add_column("Qty", justify="right")
    table.add_column("Price", justify="right")

    for row in rows:
        table.add_row(escape(row.product_name), escape(row.color), str(row.quantity), f"${row.line_total:,.2f}")
    console.print(table)


def _print_report(report: ReconciliationReport) -> None:
    table = Table(title="Cart Reconciliation")
    table.add_column("Line", style="cyan", max_width=40)
    table.add_column("Expected", justify="right")
    table.add_column("Observed", justify="right")
    table.add_column("Result")

    styles = {"matched": "green", "mismatched": "red", "unmatched": "bold red"}
    for result in report.results:
        label = str(result.key) if result.key else "TOTAL"
        expected = "-" if result.expected_price is None else f"{result.expected_quantity} / ${result.expected_price:,.2f}"
        observed = "-" if result.observed_price is None else f"${result.observed_price:,.2f}"
        if result.observed_quantity is not None:
            observed = f"{result.observed_quantity} / {observed}"
        style = styles[result.outcome.value]
        table.add_row(escape(label), expected, observed, f"[{style}]{result.outcome.value}[/]")

    console.print(table)

    console.print(f"\n[bold]Summary:[/]")
    console.print(f"  • Lines checked: {len(report.rows)}")
    console.print(f"  • Problems: [red]{len(report.failures)}[/]")


if __name__ == "__main__":
    main()
