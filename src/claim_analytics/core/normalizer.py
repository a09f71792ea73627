"""
Record normalizer.
Turns decoded spreadsheet rows into typed claim records.
"""

import logging
import math
import re
from collections.abc import Iterable, Mapping
from datetime import date, datetime, timedelta
from typing import Any

from ..config import AnalyticsSettings
from .models import ClaimRecord, is_blank

logger = logging.getLogger(__name__)

# Excel stores dates as days since 1899-12-30
EXCEL_EPOCH = date(1899, 12, 30)
EXCEL_MAX_SERIAL = 2958465


class RecordNormalizer:
    """
    Converts raw rows into ClaimRecords.

    Never raises on field content: unparseable numbers become 0 and
    unparseable dates become None.
    """

    THOUSANDS_SEPARATOR: re.Pattern[str] = re.compile(r"[,\s]")
    DECIMAL_NUMBER: re.Pattern[str] = re.compile(
        r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$"
    )

    AGING_BUCKETS: list[tuple[float, str]] = [
        (30, "0-30 Days"),
        (60, "31-60 Days"),
        (90, "61-90 Days"),
        (180, "91-180 Days"),
        (365, "181-365 Days"),
    ]
    AGING_OVERFLOW = ">365 Days"

    TAT_GROUPS: list[tuple[float, str]] = [
        (7, "0-7 Days"),
        (15, "8-15 Days"),
        (30, "16-30 Days"),
    ]
    TAT_OVERFLOW = ">30 Days"

    def __init__(self, settings: AnalyticsSettings | None = None) -> None:
        self.settings = settings or AnalyticsSettings()

    def parse_number(self, value: Any) -> float | None:
        """
        Parse a numeric cell, returning None when it is not a number.

        Thousands separators are stripped before parsing.
        """
        if isinstance(value, bool) or is_blank(value):
            return None
        if isinstance(value, (int, float)):
            try:
                number = float(value)
            except OverflowError:
                return None
            return number if math.isfinite(number) else None

        text = self.THOUSANDS_SEPARATOR.sub("", str(value))
        if not self.DECIMAL_NUMBER.match(text):
            return None
        number = float(text)
        return number if math.isfinite(number) else None

    def coerce_number(self, value: Any) -> float:
        """Parse a numeric cell, degrading anything unparseable to 0."""
        number = self.parse_number(value)
        return 0.0 if number is None else number

    def parse_date(self, value: Any) -> date | None:
        """
        Parse a date cell using the accepted layouts.

        Args:
            value: A string, date/datetime, or a numeric Excel serial day

        Returns:
            The calendar date, or None when no layout matches
        """
        if isinstance(value, bool) or is_blank(value):
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, (int, float)):
            return self._from_excel_serial(value)

        text = str(value).strip()
        for layout in self.settings.date_formats:
            try:
                return datetime.strptime(text, layout).date()
            except ValueError:
                continue

        return None

    def _from_excel_serial(self, serial: float) -> date | None:
        # NaN and out-of-range values, including huge ints, fail the bounds check
        if not 1 <= serial <= EXCEL_MAX_SERIAL:
            return None
        return EXCEL_EPOCH + timedelta(days=int(serial))

    def aging_bucket(self, days: float) -> str:
        """Bucket a claim's age in days."""
        for upper, label in self.AGING_BUCKETS:
            if days <= upper:
                return label
        return self.AGING_OVERFLOW

    def tat_group(self, tat: float) -> str:
        """Group a turnaround time in days."""
        for upper, label in self.TAT_GROUPS:
            if tat <= upper:
                return label
        return self.TAT_OVERFLOW

    def normalize(self, row: Mapping[Any, Any]) -> ClaimRecord:
        """Normalize one raw row. Every key of the row is kept."""
        settings = self.settings
        raw: dict[str, Any] = {str(key): value for key, value in row.items()}

        parsed_date = self.parse_date(raw.get(settings.date_field))
        if parsed_date is None and not is_blank(raw.get(settings.date_field)):
            logger.debug(
                "Unparseable %s value %r", settings.date_field, raw[settings.date_field]
            )

        tat = self.parse_number(raw.get(settings.tat_field))

        # Derived categories only fill gaps; values from the file always win
        if is_blank(raw.get(settings.aging_bucket_field)):
            aging_days = self.parse_number(raw.get(settings.aging_days_field))
            if aging_days is not None:
                raw[settings.aging_bucket_field] = self.aging_bucket(aging_days)
        if is_blank(raw.get(settings.tat_group_field)) and tat is not None:
            raw[settings.tat_group_field] = self.tat_group(tat)

        return ClaimRecord(
            raw=raw,
            parsed_claim_intimation_date=parsed_date,
            claim_amount=self.coerce_number(raw.get(settings.claim_amount_field)),
            settled_amount=self.coerce_number(raw.get(settings.settled_amount_field)),
            tat=tat,
        )

    def normalize_all(self, rows: Iterable[Mapping[Any, Any]]) -> list[ClaimRecord]:
        """Normalize a batch of rows, preserving order."""
        return [self.normalize(row) for row in rows]
