"""
Trend consolidator.
Month-over-month series per breakdown category, reduced to the top N
values plus an "Other" residual.
"""

from collections.abc import Sequence
from datetime import date

from ..config import AnalyticsSettings
from ..core.models import ClaimRecord, TrendMetric, TrendPoint, TrendSeries


class TrendConsolidator:
    """
    Builds chronological month buckets for a metric broken down by category.

    Records without a parsed intimation date have no month and are left out
    of both the ranking and the series.
    """

    MONTH_LABEL_FORMAT = "%b %Y"

    def __init__(self, settings: AnalyticsSettings | None = None) -> None:
        self.settings = settings or AnalyticsSettings()

    @property
    def top_n(self) -> int:
        return self.settings.top_n

    @property
    def other_label(self) -> str:
        return self.settings.other_label

    def rank_values(self, totals: dict[str, float]) -> list[str]:
        """
        Order category values by total, descending.

        ``totals`` must be in first-seen order; the stable sort keeps that
        order between equal totals.
        """
        return sorted(totals, key=lambda value: totals[value], reverse=True)

    def consolidate(
        self,
        records: Sequence[ClaimRecord],
        metric: TrendMetric | str,
        category: str,
    ) -> TrendSeries:
        """
        Build the series for one breakdown category.

        Args:
            records: Population to chart
            metric: count, claim (sum of Claim Amount) or settled
            category: Field to break the metric down by

        Returns:
            TrendSeries with one point per month present in the data
        """
        metric = TrendMetric(metric)
        monthly: dict[date, dict[str, float]] = {}
        totals: dict[str, float] = {}

        for record in records:
            record_date = record.parsed_claim_intimation_date
            if record_date is None:
                continue
            period = record_date.replace(day=1)
            value = record.category(category)
            amount = record.metric_value(metric)

            month_values = monthly.setdefault(period, {})
            month_values[value] = month_values.get(value, 0) + amount
            totals[value] = totals.get(value, 0) + amount

        retained = self.rank_values(totals)[: self.top_n]
        retained_set = set(retained)
        seen_keys: set[str] = set()
        points: list[TrendPoint] = []

        for period in sorted(monthly):
            values: dict[str, float] = {}
            other = 0
            for value, amount in monthly[period].items():
                if value in retained_set:
                    if amount:
                        values[value] = amount
                else:
                    other += amount

            if other > 0:
                # A real value named like the residual absorbs it
                values[self.other_label] = values.get(self.other_label, 0) + other

            seen_keys.update(values)
            points.append(
                TrendPoint(
                    month=period.strftime(self.MONTH_LABEL_FORMAT),
                    period=period,
                    values=values,
                )
            )

        keys = [value for value in retained if value in seen_keys]
        if self.other_label in seen_keys and self.other_label not in keys:
            keys.append(self.other_label)

        return TrendSeries(category=category, metric=metric, points=points, keys=keys)

    def consolidate_all(
        self,
        records: Sequence[ClaimRecord],
        metric: TrendMetric | str,
        categories: Sequence[str] | None = None,
    ) -> dict[str, TrendSeries]:
        """Build series for every breakdown category, keyed by category name."""
        if categories is None:
            categories = self.settings.trend_categories
        return {
            category: self.consolidate(records, metric, category)
            for category in categories
        }
