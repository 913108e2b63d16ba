from __future__ import annotations
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from .aggregate import Aggregator
from .log import configure_logging
from .periods import PeriodError, resolve_window
from .providers.base import ProviderError
from .providers.registry import register_all_providers
from .render import OutputFormat, render
from .settings import settings
from .universe import load_symbols

app = typer.Typer(add_completion=False)
err = Console(stderr=True)


@app.command()
def prices(
    symbols: Optional[List[str]] = typer.Argument(None, help="Ticker symbols, e.g. 000001.JJ 600000.SH"),
    output: OutputFormat = typer.Option(OutputFormat.hledger, "--output", "-o", help="format the output"),
    time_period: str = typer.Option(
        "1D", "--time-period", "-p", help="time period: 1D,5D,3M,6M,YTD,1Y,5Y,2021-10-10-2022-10-10"
    ),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", min=1, help="parallel symbol fetches"),
    symbols_file: Optional[Path] = typer.Option(None, "--symbols-file", exists=True, dir_okay=False),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Print historical closing prices as ledger price directives."""
    configure_logging("DEBUG" if verbose else settings.log_level)

    wanted = list(symbols or [])
    if symbols_file is not None:
        try:
            wanted += load_symbols(symbols_file)
        except ValueError as e:
            raise typer.BadParameter(str(e), param_hint="--symbols-file") from e

    try:
        window = resolve_window(time_period)
        aggregator = Aggregator(register_all_providers(), workers=workers or settings.workers)
        report = aggregator.collect(wanted, window)
    except (ProviderError, PeriodError) as e:
        err.print(f"[red]error:[/red] {escape(str(e))}", highlight=False)
        raise typer.Exit(code=1)

    if report.total_skipped:
        for (provider, symbol), n in sorted(report.skipped.items()):
            err.print(f"[yellow]skipped {n} unparseable rows[/yellow] {provider} {escape(symbol)}", highlight=False)

    typer.echo(render(report.records, output, settings.currency), nl=False)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
