"""Command-line interface for the sourcing engine."""

import asyncio
import json
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .core.errors import NotFound, SourcingError
from .engine import SourcingEngine, create_engine
from .models import NegotiationReport, RankingReport, RFQAnalysis, get_settings
from .utils import format_price, format_risk_level

app = typer.Typer(
    name="sourcewise",
    help="Supplier matching and RFQ negotiation analysis",
    add_completion=False,
)
console = Console()

TIER_STYLES = {
    "highly_recommended": "bold green",
    "recommended": "green",
    "consider": "yellow",
    "not_suitable": "red",
}


def print_error(message: str):
    """Print an error message."""
    console.print(
        Panel(
            f"[red]{message}[/red]",
            title="[bold red]Error[/bold red]",
            border_style="red",
        )
    )


def load_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        print_error(f"Cannot read {path}: {e}")
        raise typer.Exit(1)


def run_with_engine(work) -> Any:
    """Run an async job against a fresh engine, closing it afterwards."""

    async def runner():
        engine = create_engine()
        try:
            return await work(engine)
        finally:
            await engine.close()

    try:
        return asyncio.run(runner())
    except SourcingError as e:
        print_error(str(e))
        raise typer.Exit(1)


# =============================================================================
# Rendering
# =============================================================================


def print_ranking(report: RankingReport, limit: int):
    table = Table(title=f"Matches for {report.requirement_id}", show_header=True)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Supplier", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Confidence", justify="right")
    table.add_column("Est. Price")
    table.add_column("Delivery")
    table.add_column("Risk")
    table.add_column("Recommendation")

    for position, match in enumerate(report.matches[:limit], start=1):
        tier = match.recommendation.value
        table.add_row(
            str(position),
            f"{match.supplier.name} ({match.supplier_id})",
            f"{match.score:.1f}",
            f"{match.confidence:.0%}",
            match.estimated_price,
            match.estimated_delivery,
            match.risk_level.value,
            f"[{TIER_STYLES[tier]}]{tier.replace('_', ' ')}[/{TIER_STYLES[tier]}]",
        )
    console.print(table)

    if report.skipped:
        console.print(f"\n[yellow]Skipped {len(report.skipped)} invalid supplier(s):[/yellow]")
        for skipped in report.skipped:
            console.print(f"  - {skipped.supplier_id or '?'}: {skipped.field} ({skipped.message})")


def print_analysis(analysis: RFQAnalysis):
    summary = Table(title=f"RFQ {analysis.rfq_id}", show_header=False)
    summary.add_column("Key", style="cyan")
    summary.add_column("Value", style="white")

    if analysis.market_price is not None:
        band = analysis.market_price
        summary.add_row(
            "Market price",
            f"{format_price(band.min)} - {format_price(band.max)} (avg {format_price(band.avg)})",
        )
    else:
        summary.add_row("Market price", "unavailable")

    level, color = format_risk_level(analysis.supplier_risk.score)
    summary.add_row(
        "Supplier risk", f"[{color}]{analysis.supplier_risk.score:.2f} ({level})[/{color}]"
    )
    summary.add_row(
        "Demand",
        f"{analysis.demand_forecast.trend.value} (factor {analysis.demand_forecast.factor:.2f})",
    )
    summary.add_row("Competitor quotes", str(len(analysis.competitor_prices.prices)))
    summary.add_row("Success probability", f"{analysis.success_probability:.0%}")
    console.print(summary)

    for factor in analysis.supplier_risk.factors:
        console.print(f"[red]![/red] {factor}")

    if analysis.negotiation_suggestions:
        console.print(
            Panel(
                "\n".join(f"- {s}" for s in analysis.negotiation_suggestions),
                title="[bold green]Suggestions[/bold green]",
                border_style="green",
            )
        )

    if analysis.diagnostics:
        console.print(f"\n[dim]{len(analysis.diagnostics)} fallback value(s) used:[/dim]")
        for notice in analysis.diagnostics:
            console.print(
                f"[dim]  - {notice.source} [{notice.subject}]: {notice.reason}"
                f" -> {notice.substituted}[/dim]"
            )


def print_report(report: NegotiationReport):
    print_analysis(report.analysis)
    console.print(
        Panel(
            "\n".join(f"{i}. {step}" for i, step in enumerate(report.next_steps, start=1)),
            title="[bold blue]Next Steps[/bold blue]",
            border_style="blue",
        )
    )


# =============================================================================
# Commands
# =============================================================================


@app.command()
def match(
    rfq_id: str = typer.Argument(None, help="Stored requirement id"),
    requirement_file: Path = typer.Option(
        None, "--requirement", "-r", help="Requirement JSON file (instead of an id)"
    ),
    suppliers_file: Path = typer.Option(
        None, "--suppliers", "-s", help="Supplier catalog JSON file (defaults to the directory)"
    ),
    limit: int = typer.Option(10, "--limit", "-n", help="Rows to show"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw report as JSON"),
):
    """Rank suppliers for a requirement."""
    if rfq_id is None and requirement_file is None:
        print_error("Pass a requirement id or --requirement FILE.")
        raise typer.Exit(2)

    suppliers = load_json(suppliers_file) if suppliers_file else None
    requirement = load_json(requirement_file) if requirement_file else None

    async def work(engine: SourcingEngine) -> RankingReport:
        nonlocal requirement
        if requirement is None:
            requirement = await engine.collaborators.rfq_store.get_requirement(rfq_id)
            if requirement is None:
                raise NotFound("requirement", rfq_id)
        return await engine.find_matches(requirement, suppliers)

    report = run_with_engine(work)
    if as_json:
        console.print_json(report.model_dump_json())
    else:
        print_ranking(report, limit)


@app.command()
def analyze(
    rfq_id: str = typer.Argument(None, help="Stored multi-item RFQ id"),
    rfq_file: Path = typer.Option(None, "--file", "-f", help="RFQ JSON file (instead of an id)"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw analysis as JSON"),
):
    """Analyze market, supplier risk and strategy for a multi-item RFQ."""
    if rfq_id is None and rfq_file is None:
        print_error("Pass an RFQ id or --file FILE.")
        raise typer.Exit(2)

    rfq = load_json(rfq_file) if rfq_file else None

    async def work(engine: SourcingEngine) -> RFQAnalysis:
        nonlocal rfq
        if rfq is None:
            rfq = await engine.collaborators.rfq_store.get_complex_rfq(rfq_id)
            if rfq is None:
                raise NotFound("rfq", rfq_id)
        return await engine.analyze_complex_rfq(rfq)

    analysis = run_with_engine(work)
    if as_json:
        console.print_json(analysis.model_dump_json())
    else:
        print_analysis(analysis)


@app.command()
def report(
    rfq_id: str = typer.Argument(..., help="Stored multi-item RFQ id"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw report as JSON"),
):
    """Generate a negotiation report for a stored RFQ."""
    result = run_with_engine(lambda engine: engine.generate_negotiation_report(rfq_id))
    if as_json:
        console.print_json(result.model_dump_json())
    else:
        print_report(result)


@app.command()
def policy():
    """Show the active scoring and negotiation policy."""
    settings = get_settings()
    try:
        config = settings.get_policy()
    except (OSError, ValueError) as e:
        print_error(f"Invalid policy: {e}")
        raise typer.Exit(1)

    table = Table(title="Factor Weights", show_header=True)
    table.add_column("Factor", style="cyan")
    table.add_column("Points", justify="right")
    for name, points in config.matching.weights.model_dump().items():
        table.add_row(name.replace("_", " "), f"{points:g}")
    console.print(table)

    tiers = Table(title="Recommendation Tiers", show_header=True)
    tiers.add_column("Tier", style="cyan")
    tiers.add_column("Min score", justify="right")
    tiers.add_column("Max concerns", justify="right")
    for rule in config.matching.tier_table:
        max_concerns = "-" if rule.max_concerns is None else str(rule.max_concerns)
        tiers.add_row(rule.tier.value, f"{rule.min_score:g}", max_concerns)
    console.print(tiers)

    negotiation = Table(title="Negotiation Policy", show_header=True)
    negotiation.add_column("Setting", style="cyan")
    negotiation.add_column("Value", style="white")
    for name, value in config.negotiation.model_dump().items():
        negotiation.add_row(name, str(value))
    console.print(negotiation)


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Bind address"),
    port: int = typer.Option(8000, help="Port"),
):
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run("sourcewise.api.main:create_app", factory=True, host=host, port=port)


@app.command()
def version():
    """Show version information."""
    from . import __version__

    console.print(f"Sourcewise v{__version__}")


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
