"""
Aggregation engine.
Builds one pivot table per dimension plus the headline KPIs.
"""

from collections.abc import Sequence

from ..config import AnalyticsSettings, PivotDimension
from ..core.models import (
    TOTAL_MARKER,
    AggregationResult,
    ClaimRecord,
    KPIData,
    PivotDict,
    PivotRow,
    PivotTable,
)
from ..core.normalizer import RecordNormalizer
from ..reporting.formatting import format_count, format_currency, format_number


class AggregationEngine:
    """
    Groups records by each pivot dimension and rolls up counts and amounts.

    Row order follows the first appearance of each value in the input, and
    every non-empty table ends with a TOTAL row.
    """

    def __init__(self, settings: AnalyticsSettings | None = None) -> None:
        self.settings = settings or AnalyticsSettings()
        self._normalizer = RecordNormalizer(self.settings)

    def pivot(
        self, records: Sequence[ClaimRecord], dimension: PivotDimension | str
    ) -> PivotTable:
        """
        Build the pivot table for a single dimension.

        Args:
            records: Population to group
            dimension: Dimension (or dimension name) to group by

        Returns:
            One row per distinct value followed by the TOTAL row, or an
            empty table for an empty population
        """
        if isinstance(dimension, str):
            dimension = PivotDimension(name=dimension)
        if not records:
            return []

        numeric_columns = ["Claim_Amount", "Settled_Amount", *dimension.extra_columns]
        groups: dict[str, PivotRow] = {}

        for record in records:
            key = record.category(dimension.name)
            row = groups.get(key)
            if row is None:
                row = {dimension.name: key, "Rows": 0}
                row.update({column: 0.0 for column in numeric_columns})
                groups[key] = row

            row["Rows"] += 1
            row["Claim_Amount"] += record.claim_amount
            row["Settled_Amount"] += record.settled_amount
            for field, column in zip(dimension.extra_sums, dimension.extra_columns):
                row[column] += self._normalizer.coerce_number(record.get(field))

        rows = list(groups.values())
        total: PivotRow = {dimension.name: TOTAL_MARKER}
        for column in ["Rows", *numeric_columns]:
            total[column] = sum(row[column] for row in rows)
        rows.append(total)
        return rows

    def pivots(
        self,
        records: Sequence[ClaimRecord],
        dimensions: Sequence[PivotDimension] | None = None,
    ) -> PivotDict:
        """Build pivot tables for every configured dimension."""
        if dimensions is None:
            dimensions = self.settings.pivot_dimensions
        return {dimension.name: self.pivot(records, dimension) for dimension in dimensions}

    def kpis(self, records: Sequence[ClaimRecord]) -> KPIData:
        """
        Compute headline metrics over the whole population.

        The TAT average only counts records whose TAT is a number.
        """
        settings = self.settings
        total_rows = len(records)
        sum_claim = sum(record.claim_amount for record in records)
        sum_settled = sum(record.settled_amount for record in records)

        tats = [record.tat for record in records if record.tat is not None]
        avg_tat = sum(tats) / len(tats) if tats else 0.0

        return KPIData(
            total_rows=format_count(total_rows, settings.digit_grouping),
            sum_claim=format_currency(
                sum_claim, settings.currency_symbol, settings.digit_grouping
            ),
            sum_settled=format_currency(
                sum_settled, settings.currency_symbol, settings.digit_grouping
            ),
            avg_tat=format_number(avg_tat, 1, settings.digit_grouping),
            total_rows_raw=total_rows,
            sum_claim_raw=float(sum_claim),
            sum_settled_raw=float(sum_settled),
            avg_tat_raw=avg_tat,
        )

    def aggregate(
        self,
        records: Sequence[ClaimRecord],
        dimensions: Sequence[PivotDimension] | None = None,
    ) -> AggregationResult:
        """Compute pivots and KPIs for one population."""
        return AggregationResult(
            pivots=self.pivots(records, dimensions),
            kpis=self.kpis(records),
        )
