"""
Table sort adapter.
User-directed sorting of pivot tables with the TOTAL row pinned last.
"""

from collections.abc import Sequence
from typing import Any

from ..config import AnalyticsSettings
from ..core.exceptions import UnknownDimensionError
from ..core.models import PivotTable, SortDirection, SortState, is_total_row
from ..core.normalizer import RecordNormalizer


class TableSorter:
    """
    Stable sort over pivot table rows.

    Numeric columns compare as numbers; everything else compares as
    case-insensitive text. TOTAL rows never take part in the comparison.
    """

    def __init__(
        self,
        settings: AnalyticsSettings | None = None,
        numeric_columns: Sequence[str] | None = None,
    ) -> None:
        self.settings = settings or AnalyticsSettings()
        self.numeric_columns: set[str] = set(
            numeric_columns if numeric_columns is not None else self.settings.numeric_columns
        )
        self._normalizer = RecordNormalizer(self.settings)

    def _sort_key(self, column: str) -> Any:
        if column in self.numeric_columns:
            return lambda row: self._normalizer.coerce_number(row.get(column))
        return lambda row: str(row.get(column, "")).lower()

    def sort(
        self,
        table: PivotTable,
        column: str | None,
        direction: SortDirection | str = SortDirection.DESC,
    ) -> PivotTable:
        """
        Return a reordered copy of ``table``.

        Args:
            table: Pivot table, usually ending with its TOTAL row
            column: Column to sort by (None leaves the order unchanged)
            direction: asc, desc or none

        Raises:
            UnknownDimensionError: If the column is not in the table
        """
        direction = SortDirection(direction)
        if column is None or direction == SortDirection.NONE or not table:
            return list(table)
        if column not in table[0]:
            raise UnknownDimensionError(
                message=f"Unknown sort column: {column}",
                details={"column": column, "columns": list(table[0])},
            )

        body = [row for row in table if not is_total_row(row)]
        totals = [row for row in table if is_total_row(row)]
        ordered = sorted(
            body,
            key=self._sort_key(column),
            reverse=direction == SortDirection.DESC,
        )
        return ordered + totals

    def apply(self, table: PivotTable, state: SortState) -> PivotTable:
        """Sort a table according to a SortState."""
        return self.sort(table, state.column, state.direction)
