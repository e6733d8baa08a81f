from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

import pandas as pd
import typer
from loguru import logger

from dealscope.catalog.resolver import fields_for, flags_for_package, packages_for
from dealscope.domain.fields import field_label, field_name
from dealscope.domain.metrics import MetricFlags
from dealscope.domain.property import PROPERTY_TYPES
from dealscope.services.deal_analyzer import analyze_deal
from dealscope.services.screening import screen_portfolio, summarize_screen

app = typer.Typer(help="dealscope: commercial real estate deal metrics and assessment.")


def _resolve_cli_flags(package: Optional[str], metric: Optional[List[str]]) -> MetricFlags:
    if metric:
        return MetricFlags.of(metric)
    if package:
        return flags_for_package(package)
    raise typer.BadParameter("pass --package or at least one --metric")


@app.command()
def packages(
    property_type: Optional[str] = typer.Argument(
        None, help=f"One of: {', '.join(PROPERTY_TYPES)} (default: all)"
    ),
) -> None:
    """
    List analysis packages per property type.
    """
    types = [property_type] if property_type else list(PROPERTY_TYPES)
    for pt in types:
        pkgs = packages_for(pt)
        typer.echo(f"{pt} ({len(pkgs)} packages)")
        for p in pkgs:
            typer.echo(f"  {p.id:<32} {p.name}  [{', '.join(p.included_metrics)}]")


@app.command()
def fields(package_id: str = typer.Argument(..., help="Package id, e.g. office-basic")) -> None:
    """
    Show required and optional input fields for a package.
    """
    pf = fields_for(package_id)
    if not pf.required and not pf.optional:
        typer.echo(f"Unknown package: {package_id}")
        raise typer.Exit(code=1)
    for title, specs in (("required", pf.required), ("optional", pf.optional)):
        typer.echo(f"{title}:")
        for spec in specs:
            typer.echo(f"  {field_name(spec):<24} {field_label(spec)}")


@app.command()
def analyze(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON file with property inputs"),
    package: Optional[str] = typer.Option(None, help="Package id (overrides selectedPackage in the file)"),
    metric: Optional[List[str]] = typer.Option(None, "--metric", help="Metric id(s) to compute"),
) -> None:
    """
    Analyze one property from a JSON file and print the result as JSON.
    """
    raw = json.loads(path.read_text(encoding="utf-8"))
    flags = MetricFlags.of(metric) if metric else None
    try:
        result = analyze_deal(raw, package_id=package, flags=flags)
    except ValueError as e:
        typer.echo(f"Invalid input: {e}", err=True)
        raise typer.Exit(code=2) from e
    typer.echo(json.dumps(result, indent=2))


@app.command()
def screen(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Portfolio CSV, one property per row"),
    package: Optional[str] = typer.Option(None, help="Package id whose metrics to compute"),
    metric: Optional[List[str]] = typer.Option(None, "--metric", help="Metric id(s) to compute"),
    id_column: Optional[str] = typer.Option(None, help="Column to use as the property id"),
    output: Optional[Path] = typer.Option(None, help="Write screened rows to this CSV"),
) -> None:
    """
    Calculate and assess every property in a portfolio CSV.
    """
    flags = _resolve_cli_flags(package, metric)
    df = pd.read_csv(path)
    logger.info("Loaded {} rows from {}", len(df), path)

    try:
        screened = screen_portfolio(df, flags, id_column=id_column)
    except ValueError as e:
        typer.echo(f"Invalid portfolio: {e}", err=True)
        raise typer.Exit(code=2) from e
    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        screened.to_csv(output, index=False)
        logger.info("Wrote screened portfolio to {}", output)

    typer.echo(json.dumps(summarize_screen(screened), indent=2))


if __name__ == "__main__":
    app()
