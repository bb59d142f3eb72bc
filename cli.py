#!/usr/bin/env python3
"""
Sprout CLI

Command-line interface for child growth charts and WHO percentile analysis.
"""

import json
import sys
from datetime import date
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

console = Console()


def setup_paths():
    """Add the project root to sys.path for imports."""
    root = Path(__file__).parent
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


setup_paths()


def load_growth_file(path: Path) -> dict:
    """
    Load a growth data file.

    The file holds a JSON object with a `child` profile, a `measurements`
    list of growth records and an optional `reference` list of WHO rows.
    A bare list is read as measurements only.
    """
    from sprout.models import ChildProfile, Measurement, ReferenceSample

    raw = json.loads(path.read_text())
    if isinstance(raw, list):
        raw = {"measurements": raw}

    reference = raw.get("reference")
    return {
        "child": ChildProfile.model_validate(raw.get("child") or {}),
        "measurements": [Measurement.from_record(r) for r in raw.get("measurements") or []],
        "reference": [ReferenceSample.from_record(r) for r in reference] if reference is not None else None,
    }


def _assemble(path: str, value_type: str, mode: Optional[str], today: Optional[str] = None):
    from sprout.config import get_config
    from sprout.engines import assemble_growth_chart

    data = load_growth_file(Path(path))
    return data["child"], assemble_growth_chart(
        data["measurements"],
        data["child"],
        value_type,
        mode=mode or get_config().default_mode,
        # No provider offline: without a reference list the curve is synthesized
        reference_samples=data["reference"] if data["reference"] is not None else [],
        today=date.fromisoformat(today) if today else None,
    )


@click.group()
@click.version_option(version="0.1.0", prog_name="sprout")
@click.option("--log-level", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
              help="Override SPROUT_LOG_LEVEL")
def cli(log_level: Optional[str]):
    """
    Sprout - Child Growth Analysis

    Align a child's height and weight history with WHO reference
    curves and classify the latest measurement.
    """
    from sprout.config import configure_logging

    configure_logging(log_level.upper() if log_level else None)


@cli.command()
@click.argument("data_path", type=click.Path(exists=True))
@click.option("--type", "value_type", type=click.Choice(["height", "weight"]), default="weight",
              help="Measure to chart")
@click.option("--mode", type=click.Choice(["yearly", "half-yearly"]), help="Label spacing")
@click.option("--today", type=str, help="Reference date (YYYY-MM-DD) when the birth date is unknown")
def chart(data_path: str, value_type: str, mode: Optional[str], today: Optional[str]):
    """
    Show the aligned chart table for a child.

    Example:

        sprout chart ./child.json --type height --mode half-yearly
    """
    from sprout.models import ReferenceSource

    child, view = _assemble(data_path, value_type, mode, today)
    reference = view.series.reference
    measured = view.series.measured

    table = Table(title=f"{value_type.title()} ({view.summary.unit}) - {view.mode.value}")
    table.add_column("Age", style="cyan")
    table.add_column("WHO mean", justify="right")
    table.add_column("Child", justify="right", style="green")

    for i, label in enumerate(view.series.labels):
        ref = f"{reference.data[i]:.1f}" if reference else "-"
        value = "-"
        if measured and view.axis_min <= measured.data[i] <= view.axis_max:
            value = f"{measured.data[i]:.1f}"
        table.add_row(label, ref, value)

    console.print(table)

    if view.reference_source == ReferenceSource.SYNTHESIZED:
        console.print("[yellow]WHO reference data unavailable, showing approximate curve[/yellow]")
    if view.empty_state:
        console.print(f"[dim]No {value_type} measurements yet. Add one to see the child's curve.[/dim]")


@cli.command()
@click.argument("data_path", type=click.Path(exists=True))
@click.option("--type", "value_type", type=click.Choice(["height", "weight"]), default="weight",
              help="Measure to analyze")
@click.option("--today", type=str, help="Reference date (YYYY-MM-DD) when the birth date is unknown")
def analyze(data_path: str, value_type: str, today: Optional[str]):
    """
    Classify the latest measurement against WHO standards.

    Example:

        sprout analyze ./child.json --type weight
    """
    from sprout.engines import status_label

    child, view = _assemble(data_path, value_type, None, today)

    if view.analysis is None:
        console.print(f"[yellow]No {value_type} measurements to analyze[/yellow]")
        return

    a = view.analysis
    band = a.reference.band(a.value_type)
    color = "green" if a.recommendation is None else "yellow"

    body = (
        f"[bold]{child.name or 'Child'}[/bold]\n"
        f"Age: {a.child_age_in_months} months\n"
        f"{value_type.title()}: {a.child_value:.1f} {view.summary.unit}\n\n"
        f"Percentile: [bold]{a.percentile}th[/bold]\n"
        f"Status: [{color}]{status_label(a.status)}[/{color}]\n"
        f"WHO: {band.minus_2sd:.1f} / {band.mean:.1f} / {band.plus_2sd:.1f} (-2SD / mean / +2SD)"
    )
    if a.estimated_percentile is not None:
        body += f"\n[dim]Estimated: {a.estimated_percentile:.1f} (z = {a.z_score:+.2f})[/dim]"
    if a.recommendation:
        body += f"\n\n{a.recommendation}"

    console.print(Panel(body, title="Growth Analysis", border_style=color))


@cli.command()
@click.option("--measured", required=True, type=str, help="Measurement date (YYYY-MM-DD)")
@click.option("--birth", type=str, help="Birth date (YYYY-MM-DD)")
@click.option("--age-months", type=int, default=0, help="Approximate current age when birth date is unknown")
@click.option("--today", type=str, help="Reference date for the estimate")
def age(measured: str, birth: Optional[str], age_months: int, today: Optional[str]):
    """
    Compute a child's age in months at a measurement date.

    Example:

        sprout age --measured 2024-01-10 --birth 2023-02-15
    """
    from sprout.engines import resolve_age_in_months

    months = resolve_age_in_months(
        date.fromisoformat(measured),
        birth_date=date.fromisoformat(birth) if birth else None,
        fallback_age_in_months=age_months,
        today=date.fromisoformat(today) if today else None,
    )
    console.print(str(months))


@cli.command()
@click.option("--gender", type=click.Choice(["male", "female"]), default="male", help="Child gender")
@click.option("--type", "value_type", type=click.Choice(["height", "weight"]), default="weight",
              help="Measure to show")
def reference(gender: str, value_type: str):
    """
    Show the approximate WHO curve used when real data is unavailable.
    """
    from sprout.engines import synthesize_reference_series
    from sprout.engines.aligner import format_age_label

    unit = "cm" if value_type == "height" else "kg"
    table = Table(title=f"Approximate WHO {value_type} ({unit}), {gender}")
    table.add_column("Age", style="cyan")
    table.add_column("-2SD", justify="right")
    table.add_column("Mean", justify="right", style="green")
    table.add_column("+2SD", justify="right")

    for sample in synthesize_reference_series(gender):
        band = sample.band(value_type)
        table.add_row(
            format_age_label(sample.age_in_months),
            f"{band.minus_2sd:.1f}",
            f"{band.mean:.1f}",
            f"{band.plus_2sd:.1f}",
        )

    console.print(table)


@cli.command()
@click.argument("data_path", type=click.Path(exists=True))
@click.option("--format", "fmt", type=click.Choice(["json", "markdown"]), required=True,
              help="Format to export to")
@click.option("--type", "value_type", type=click.Choice(["height", "weight"]), default="weight",
              help="Measure to export")
@click.option("--mode", type=click.Choice(["yearly", "half-yearly"]), help="Label spacing")
@click.option("--output", "-o", type=click.Path(), help="Output file path")
def export(data_path: str, fmt: str, value_type: str, mode: Optional[str], output: Optional[str]):
    """
    Export a growth chart to JSON or Markdown.

    Example:

        sprout export ./child.json --format markdown -o ./report.md
    """
    from sprout.exporters import export_json, export_markdown

    path = Path(data_path)
    child, view = _assemble(data_path, value_type, mode)

    if output:
        out_path = Path(output)
    else:
        ext_map = {"json": "_chart.json", "markdown": "_report.md"}
        out_path = path.parent / f"{path.stem}_{value_type}{ext_map[fmt]}"

    if fmt == "json":
        export_json(view, out_path)
    elif fmt == "markdown":
        export_markdown(view, out_path, child_name=child.name)

    console.print(f"[green]✓ Exported to {out_path}[/green]")


@cli.command()
def info():
    """
    Show information about Sprout.
    """
    console.print(Panel(
        "[bold]Sprout[/bold]\n\n"
        "Growth tracking for children from birth to 10 years:\n"
        "• Age-aligned height and weight charts\n"
        "• WHO reference curves (-2SD / mean / +2SD)\n"
        "• Percentile status with advisory text\n\n"
        "[dim]Falls back to an approximate curve when WHO data is unavailable.[/dim]",
        title="About",
        border_style="blue",
    ))

    console.print("\n[bold]Quick Start:[/bold]")
    console.print("  sprout chart ./child.json --type weight")
    console.print("  sprout analyze ./child.json --type height")
    console.print("  sprout age --measured 2024-01-10 --birth 2023-02-15")
    console.print("  sprout export ./child.json --format markdown")


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
