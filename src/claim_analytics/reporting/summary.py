"""
Analysis Summary Reporting Module.
Renders KPIs and pivot tables as dicts, JSON or plain text.
"""

import json
from typing import Any

from ..core.models import KPIData, PivotDict, PivotTable, TrendSeries, is_total_row
from .formatting import DigitGrouping, format_compact, format_number


class SummaryFormatter:
    """
    Formats an analysis view (KPIs plus pivot tables) for export.
    """

    KPI_LABELS = {
        "total_rows": "Total Claims",
        "sum_claim": "Total Claim Amount",
        "sum_settled": "Total Settled Amount",
        "avg_tat": "Average TAT (days)",
    }

    def __init__(
        self,
        kpis: KPIData,
        pivots: PivotDict,
        trends: dict[str, TrendSeries] | None = None,
        grouping: DigitGrouping = "indian",
    ) -> None:
        self.kpis = kpis
        self.pivots = pivots
        self.trends = trends or {}
        self.grouping = grouping

    def format_cell(self, value: Any) -> str:
        """Display a pivot cell, with at most two decimals for numbers."""
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return str(value)
        if isinstance(value, int) or float(value).is_integer():
            return format_number(value, 0, self.grouping)
        return format_number(value, 2, self.grouping)

    def table_to_text(self, title: str, table: PivotTable) -> list[str]:
        """Render one pivot table as aligned text lines."""
        lines = [title.upper(), "-" * 70]
        if not table:
            lines.append("No data to display.")
            return lines

        headers = list(table[0])
        cells = [[self.format_cell(row.get(h, "")) for h in headers] for row in table]
        widths = [
            max(len(h.replace("_", " ")), *(len(r[i]) for r in cells))
            for i, h in enumerate(headers)
        ]

        lines.append(
            "  ".join(h.replace("_", " ").ljust(w) for h, w in zip(headers, widths))
        )
        for row, rendered in zip(table, cells):
            if is_total_row(row):
                lines.append("  ".join("-" * w for w in widths))
            lines.append(
                "  ".join(
                    cell.ljust(w) if i == 0 else cell.rjust(w)
                    for i, (cell, w) in enumerate(zip(rendered, widths))
                )
            )
        return lines

    def trend_to_text(self, series: TrendSeries) -> list[str]:
        """Render a trend series as a month grid using compact K/L/Cr values."""
        lines = [f"TREND BY {series.category.upper()} ({series.metric.value})", "-" * 70]
        if not series.points:
            lines.append("No dated claims.")
            return lines

        headers = ["Month", *series.keys]
        cells = [
            [point.month, *(format_compact(point.values.get(key, 0)) for key in series.keys)]
            for point in series.points
        ]
        widths = [
            max(len(h), *(len(r[i]) for r in cells)) for i, h in enumerate(headers)
        ]

        lines.append("  ".join(h.ljust(w) for h, w in zip(headers, widths)))
        for rendered in cells:
            lines.append(
                "  ".join(
                    cell.ljust(w) if i == 0 else cell.rjust(w)
                    for i, (cell, w) in enumerate(zip(rendered, widths))
                )
            )
        return lines

    def to_text(self, include_tables: bool = True) -> str:
        """
        Format the view as a plain text report.

        Args:
            include_tables: Whether to include pivot tables and trends

        Returns:
            Formatted text report
        """
        lines: list[str] = []

        lines.append("=" * 70)
        lines.append("CLAIMS ANALYTICS SUMMARY")
        lines.append("=" * 70)
        lines.append("")

        for attr, label in self.KPI_LABELS.items():
            lines.append(f"{label}: {getattr(self.kpis, attr)}")
        lines.append("")

        if include_tables:
            for dimension, table in self.pivots.items():
                lines.extend(self.table_to_text(f"By {dimension}", table))
                lines.append("")
            for series in self.trends.values():
                lines.extend(self.trend_to_text(series))
                lines.append("")

        lines.append("=" * 70)
        lines.append("END OF REPORT")
        lines.append("=" * 70)

        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert the view to a dictionary.

        KPI keys use the camelCase names presentation clients expect.
        """
        return {
            "kpis": self.kpis.model_dump(by_alias=True),
            "pivots": {name: [dict(row) for row in table] for name, table in self.pivots.items()},
            "trends": {
                name: {"keys": series.keys, "data": series.to_rows()}
                for name, series in self.trends.items()
            },
        }

    def to_json(self, indent: int = 2) -> str:
        """
        Convert the view to JSON.

        Args:
            indent: JSON indentation level

        Returns:
            JSON string representation
        """
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def print_full(self) -> None:
        """Print the full report to stdout."""
        print(self.to_text(include_tables=True))
