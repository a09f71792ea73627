"""
Tests for the record normalizer.
"""

from datetime import date, datetime

import pytest

from claim_analytics.config import AnalyticsSettings
from claim_analytics.core.normalizer import RecordNormalizer


@pytest.fixture
def normalizer() -> RecordNormalizer:
    """Create a normalizer with default settings."""
    return RecordNormalizer()


class TestNumberCoercion:
    """Tests for numeric field parsing."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("1,000", 1000.0),
            ("1,20,000.50", 120000.5),
            (" 250 ", 250.0),
            ("-42.5", -42.5),
            ("1e3", 1000.0),
            (750, 750.0),
            (12.25, 12.25),
        ],
    )
    def test_parses_numbers(self, normalizer: RecordNormalizer, value, expected) -> None:
        """Test separators are stripped before parsing."""
        assert normalizer.parse_number(value) == expected

    @pytest.mark.parametrize(
        "value",
        ["", "   ", None, "abc", "₹500", "12abc", float("nan"), "inf", True, 10**400],
    )
    def test_unparseable_values(self, normalizer: RecordNormalizer, value) -> None:
        """Test non-numeric input parses to None and coerces to 0."""
        assert normalizer.parse_number(value) is None
        assert normalizer.coerce_number(value) == 0


class TestDateParsing:
    """Tests for date field parsing."""

    @pytest.mark.parametrize(
        "value",
        [
            "2024-01-15",
            "2024-01-15 09:30:00",
            "15/01/2024",
            "15-01-2024",
            "15-Jan-2024",
            "15 Jan 2024",
            datetime(2024, 1, 15, 9, 30),
            date(2024, 1, 15),
            45306,
        ],
    )
    def test_accepted_layouts(self, normalizer: RecordNormalizer, value) -> None:
        """Test every accepted layout resolves to the same date."""
        assert normalizer.parse_date(value) == date(2024, 1, 15)

    def test_day_first_preferred(self, normalizer: RecordNormalizer) -> None:
        """Test ambiguous slashed dates are read day-first."""
        assert normalizer.parse_date("01/02/2024") == date(2024, 2, 1)

    @pytest.mark.parametrize(
        "value", ["", None, "not a date", "31/02/2024", -5, True, 10**400, "2024", "12", "45306"]
    )
    def test_unparseable_dates(self, normalizer: RecordNormalizer, value) -> None:
        """Test failures yield None rather than a default date."""
        assert normalizer.parse_date(value) is None

    def test_custom_layouts(self) -> None:
        """Test date layouts come from settings."""
        normalizer = RecordNormalizer(AnalyticsSettings(date_formats=("%Y%m%d",)))
        assert normalizer.parse_date("20240115") == date(2024, 1, 15)


class TestNormalize:
    """Tests for full record normalization."""

    def test_typed_fields(self, normalizer: RecordNormalizer) -> None:
        """Test derived typed fields on a complete row."""
        record = normalizer.normalize(
            {
                "Claim Intimation Date": "2024-03-10",
                "Claim Amount": "1,000",
                "Settled Amount": "800",
                "TAT": "12",
                "Region": "North",
            }
        )
        assert record.parsed_claim_intimation_date == date(2024, 3, 10)
        assert record.claim_amount == 1000
        assert record.settled_amount == 800
        assert record.tat == 12
        assert record.get("Region") == "North"

    def test_unknown_keys_pass_through(self, normalizer: RecordNormalizer) -> None:
        """Test no raw field is dropped."""
        record = normalizer.normalize({"Broker Code": "BR-7", 42: "numeric key"})
        assert record.get("Broker Code") == "BR-7"
        assert record.get("42") == "numeric key"

    def test_degrades_instead_of_failing(self, normalizer: RecordNormalizer) -> None:
        """Test garbage values degrade to zero and absence."""
        record = normalizer.normalize(
            {
                "Claim Intimation Date": "sometime",
                "Claim Amount": "lots",
                "Settled Amount": None,
                "TAT": "pending",
                "Other": object(),
            }
        )
        assert record.parsed_claim_intimation_date is None
        assert record.claim_amount == 0
        assert record.settled_amount == 0
        assert record.tat is None

    def test_oversized_integers_degrade(self, normalizer: RecordNormalizer) -> None:
        """Test integers beyond float range become 0 and absence."""
        record = normalizer.normalize(
            {"Claim Amount": 10**400, "Claim Intimation Date": 10**400, "TAT": 10**400}
        )
        assert record.claim_amount == 0
        assert record.parsed_claim_intimation_date is None
        assert record.tat is None

    def test_bare_numbers_in_date_column(self, normalizer: RecordNormalizer) -> None:
        """Test numeric text is not mistaken for a serial date."""
        record = normalizer.normalize({"Claim Intimation Date": "2024"})
        assert record.parsed_claim_intimation_date is None

    def test_empty_row(self, normalizer: RecordNormalizer) -> None:
        """Test an empty row still yields a record."""
        record = normalizer.normalize({})
        assert record.raw == {}
        assert record.claim_amount == 0
        assert record.parsed_claim_intimation_date is None

    def test_categories_not_defaulted(self, normalizer: RecordNormalizer) -> None:
        """Test blank categories stay blank until aggregation."""
        record = normalizer.normalize({"Region": ""})
        assert record.get("Region") == ""

    def test_derives_tat_group_and_aging_bucket(self, normalizer: RecordNormalizer) -> None:
        """Test derived categories fill missing columns."""
        record = normalizer.normalize({"TAT": "6", "Aging Days": "75"})
        assert record.get("TAT Group") == "0-7 Days"
        assert record.get("Aging Days Bucketing") == "61-90 Days"

    def test_file_categories_win(self, normalizer: RecordNormalizer) -> None:
        """Test values present in the file are not overwritten."""
        record = normalizer.normalize(
            {"TAT": "6", "TAT Group": "Fast", "Aging Days": "400", "Aging Days Bucketing": "Old"}
        )
        assert record.get("TAT Group") == "Fast"
        assert record.get("Aging Days Bucketing") == "Old"

    @pytest.mark.parametrize(
        "days, bucket",
        [(0, "0-30 Days"), (30, "0-30 Days"), (31, "31-60 Days"), (180, "91-180 Days"), (366, ">365 Days")],
    )
    def test_aging_bucket_edges(self, normalizer: RecordNormalizer, days, bucket) -> None:
        assert normalizer.aging_bucket(days) == bucket

    def test_normalize_all_preserves_order(self, normalizer: RecordNormalizer) -> None:
        """Test batch normalization keeps input order."""
        records = normalizer.normalize_all([{"id": str(i)} for i in range(5)])
        assert [r.get("id") for r in records] == ["0", "1", "2", "3", "4"]

    def test_repeatable(self, normalizer: RecordNormalizer) -> None:
        """Test the same row always normalizes identically."""
        row = {"Claim Amount": "bad", "Claim Intimation Date": "??", "TAT": "3"}
        assert normalizer.normalize(row) == normalizer.normalize(row)
