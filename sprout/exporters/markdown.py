"""
Markdown exporter for Sprout.

Exports a growth chart view as a human-readable growth report.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from sprout.engines.classifier import status_label
from sprout.models import DatasetRole, GrowthChartView, ReferenceSource


def export_markdown(
    view: GrowthChartView,
    output_path: Path | None = None,
    child_name: str | None = None,
) -> str:
    """
    Export a growth chart view to Markdown format.

    Args:
        view: The assembled chart view
        output_path: Optional path to write the Markdown file
        child_name: Name shown in the report title

    Returns:
        Markdown string representation of the report
    """
    lines = []
    measure = view.value_type.value
    unit = view.summary.unit

    # Header
    title = f"{measure.title()} Growth Report"
    if child_name:
        title += f": {child_name}"
    lines.append(f"# {title}")
    lines.append("")
    lines.append(f"**Generated:** {datetime.now().strftime('%Y-%m-%d %H:%M')}")
    lines.append(f"**Gender:** {view.gender.value.title()}")
    lines.append(f"**Display Mode:** {view.mode.value}")
    lines.append("")

    if view.reference_source == ReferenceSource.SYNTHESIZED:
        lines.append("> WHO reference data was unavailable; the reference curve is an approximation.")
        lines.append("")

    # Summary
    lines.append("## Summary")
    lines.append("")
    if view.summary.latest_value is not None:
        lines.append(f"- **Latest {measure}:** {view.summary.latest_value:.1f} {unit}")
    else:
        lines.append(f"- **Latest {measure}:** -")
    lines.append(f"- **Measurements:** {view.summary.measurement_count}")
    lines.append("")

    # Analysis
    if view.analysis:
        a = view.analysis
        lines.append("## WHO Growth Analysis")
        lines.append("")
        lines.append(f"- **Age:** {_format_age(a.child_age_in_months)}")
        lines.append(f"- **Percentile:** {a.percentile}th")
        lines.append(f"- **Status:** {status_label(a.status)}")
        if a.estimated_percentile is not None:
            lines.append(f"- **Estimated percentile:** {a.estimated_percentile:.1f} (z = {a.z_score:+.2f})")
        band = a.reference.band(a.value_type)
        lines.append(
            f"- **WHO range at {a.reference.age_in_months} months:** "
            f"{band.minus_2sd:.1f} / {band.mean:.1f} / {band.plus_2sd:.1f} {unit} (-2SD / mean / +2SD)"
        )
        if a.recommendation:
            lines.append("")
            lines.append(f"> {a.recommendation}")
        lines.append("")

    # Measurement history
    if view.points:
        lines.append("## Measurement History")
        lines.append("")
        lines.append(f"| Date | Age | {measure.title()} ({unit}) |")
        lines.append("|------|-----|------|")
        for point in view.points:
            lines.append(f"| {point.date.strftime('%Y-%m-%d')} | {_format_age(point.age_in_months)} | {point.value:.1f} |")
        lines.append("")
    else:
        lines.append(f"*No {measure} measurements recorded yet.*")
        lines.append("")

    # Chart table
    reference = view.series.dataset(DatasetRole.REFERENCE)
    measured = view.series.dataset(DatasetRole.MEASURED)
    lines.append("## Chart Data")
    lines.append("")
    lines.append("| Age | WHO mean | Child |")
    lines.append("|-----|----------|-------|")
    for i, label in enumerate(view.series.labels):
        ref = f"{reference.data[i]:.1f}" if reference else "-"
        child = "-"
        if measured and view.axis_min <= measured.data[i] <= view.axis_max:
            child = f"{measured.data[i]:.1f}"
        lines.append(f"| {label} | {ref} | {child} |")
    lines.append("")

    # Footer
    lines.append("---")
    lines.append("")
    lines.append("*Percentiles are approximated from WHO -2SD / mean / +2SD bands.*")

    markdown = "\n".join(lines)

    if output_path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(markdown)

    return markdown


def _format_age(months: int) -> str:
    """Format age in months as a human-readable string."""
    years = months // 12
    remaining = months % 12
    if years == 0:
        return f"{months}mo"
    elif remaining:
        return f"{years}y {remaining}mo"
    else:
        return f"{years}y"
