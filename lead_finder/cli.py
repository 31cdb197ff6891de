"""CLI entry point for the lead finder."""

from __future__ import annotations

import asyncio
import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from lead_finder.config import load_config
from lead_finder.models import Lead, SearchFilters
from lead_finder.output.csv_export import default_filename, write_csv
from lead_finder.pipeline import LeadSearchPipeline
from lead_finder.search.query_enhancer import EmptyQueryError, enhance_query

console = Console(force_terminal=True)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False, show_time=False)],
    )


@click.group()
def main() -> None:
    """Find company leads from a free-text query."""


@main.command()
@click.argument("query")
@click.option("--industry", default="", help="Industry filter, e.g. FinTech")
@click.option("--funding-stage", default="", help="Funding stage filter, e.g. Seed")
@click.option("--country", default="", help="Country filter")
@click.option("--icp", default="", help="Company size bucket, e.g. 'SMB (50-199 employees)'")
@click.option("--timeframe", default="", help="24h, 48h, 7d, 30d, 90d, 2024-2025, before-2015...")
@click.option("--company-age", default="", help="new, growing, established or mature")
@click.option(
    "--batches", "-b",
    default=None,
    type=int,
    help="Number of parallel search batches (default: 5)",
)
@click.option(
    "--output", "-o",
    default=None,
    help="Write leads to this CSV file",
)
@click.option("--csv", "write_default_csv", is_flag=True, help="Write CSV with an auto-dated filename")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose debug logging")
def search(
    query: str,
    industry: str,
    funding_stage: str,
    country: str,
    icp: str,
    timeframe: str,
    company_age: str,
    batches: int | None,
    output: str | None,
    write_default_csv: bool,
    verbose: bool,
) -> None:
    """Search for leads matching QUERY and print them as a table.

    Example: lead-finder search "Seed fintech companies" --country Germany -o leads.csv
    """
    _setup_logging(verbose)

    filters = SearchFilters(
        icp=icp,
        funding_stage=funding_stage,
        industry=industry,
        country=country,
        timeframe=timeframe,
        company_age=company_age,
    )

    try:
        enhanced = enhance_query(query, filters)
    except EmptyQueryError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    config = load_config()
    pipeline = LeadSearchPipeline(config)

    console.print(f"\n[bold green]Searching:[/bold green] {enhanced.text}\n")
    with console.status("Running search batches..."):
        leads = asyncio.run(pipeline.run(enhanced, filters, num_batches=batches))

    if not leads:
        console.print("[yellow]No leads found.[/yellow]")
        sys.exit(1)

    console.print(_leads_table(leads))
    console.print(f"\n[bold]{len(leads)} leads[/bold]")

    if write_default_csv and not output:
        output = default_filename()
    if output:
        path = write_csv(leads, output)
        console.print(f"CSV written to [bold]{path}[/bold]")


@main.command()
@click.option("--host", default=None, help="Bind address (default: HOST or 0.0.0.0)")
@click.option("--port", default=None, type=int, help="Port (default: PORT or 3001)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: str | None, port: int | None, reload: bool) -> None:
    """Run the web app and API."""
    import uvicorn

    config = load_config()
    uvicorn.run(
        "lead_finder.web.app:app",
        host=host or config.web_host,
        port=port or config.web_port,
        reload=reload,
        log_level=config.log_level.lower(),
    )


def _leads_table(leads: list[Lead]) -> Table:
    table = Table(show_lines=False)
    table.add_column("Company", style="bold")
    table.add_column("Industry")
    table.add_column("Country")
    table.add_column("Size")
    table.add_column("Funding")
    table.add_column("Signal")
    table.add_column("Score", justify="right")
    table.add_column("Website", style="cyan")

    for lead in leads:
        score_style = "green" if lead.lead_score >= 80 else "yellow" if lead.lead_score >= 60 else "red"
        table.add_row(
            escape(lead.company_name),
            escape(lead.industry),
            escape(lead.country),
            escape(lead.employee_count),
            escape(f"{lead.funding_stage} {lead.funding_amount}".strip()),
            lead.signal_type,
            f"[{score_style}]{lead.lead_score}[/{score_style}]",
            escape(lead.website),
        )
    return table


if __name__ == "__main__":
    main()
