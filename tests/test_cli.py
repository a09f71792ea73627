"""
Tests for the command-line report.
"""

import argparse
import json

import pytest

from claim_analytics.cli import main, parse_filters

CSV_TEXT = (
    "Region,Registered to Insurer,Claim Intimation Date,Claim Amount,Settled Amount,TAT\n"
    'North,Yes,2024-01-10,"1,000",800,6\n'
    "South,Yes,,500,500,\n"
    "East,,2024-01-11,700,0,3\n"
)


@pytest.fixture
def claims_file(tmp_path):
    path = tmp_path / "claims.csv"
    path.write_text(CSV_TEXT, encoding="utf-8")
    return path


class TestParseFilters:
    """Tests for DIMENSION=VALUE parsing."""

    def test_repeated_dimensions_merge(self) -> None:
        assert parse_filters(["Region=North", "Region=South", "Product = Motor"]) == {
            "Region": frozenset({"North", "South"}),
            "Product": frozenset({"Motor"}),
        }

    def test_rejects_missing_separator(self) -> None:
        with pytest.raises(argparse.ArgumentTypeError):
            parse_filters(["Region"])


class TestMain:
    """Tests for the CLI entry point."""

    def test_json_report(self, claims_file, capsys) -> None:
        """Test JSON output covers registered claims only."""
        assert main([str(claims_file), "--json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["kpis"]["totalRows"] == "2"
        assert data["kpis"]["sumClaim"] == "₹1,500"
        assert data["pivots"]["Region"][-1] == {
            "Region": "TOTAL",
            "Rows": 2,
            "Claim_Amount": 1500.0,
            "Settled_Amount": 1300.0,
        }
        assert data["trends"] == {}

    def test_text_report(self, claims_file, capsys) -> None:
        assert main([str(claims_file)]) == 0
        out = capsys.readouterr().out
        assert "CLAIMS ANALYTICS SUMMARY" in out
        assert "Total Claims: 2" in out

    def test_filters_and_trend(self, claims_file, capsys) -> None:
        """Test date and category filters narrow the view."""
        code = main(
            [
                str(claims_file),
                "--json",
                "--date-from",
                "2024-01-01",
                "--filter",
                "Region=North",
                "--trend",
                "count",
            ]
        )
        assert code == 0

        data = json.loads(capsys.readouterr().out)
        assert data["kpis"]["totalRows"] == "1"
        assert data["trends"]["Region"] == {
            "keys": ["North"],
            "data": [{"month": "Jan 2024", "North": 1.0}],
        }

    def test_settings_file(self, claims_file, tmp_path, capsys) -> None:
        config = tmp_path / "settings.json"
        config.write_text(
            json.dumps({"currency_symbol": "$", "digit_grouping": "international"}),
            encoding="utf-8",
        )
        assert main([str(claims_file), "--json", "--config", str(config)]) == 0
        assert json.loads(capsys.readouterr().out)["kpis"]["sumClaim"] == "$1,500"

    def test_empty_file_fails(self, tmp_path) -> None:
        path = tmp_path / "empty.csv"
        path.write_text("", encoding="utf-8")
        assert main([str(path)]) == 1

    def test_missing_file_fails(self, tmp_path) -> None:
        assert main([str(tmp_path / "missing.csv")]) == 1

    def test_bad_filter_fails(self, claims_file) -> None:
        assert main([str(claims_file), "--filter", "Region"]) == 1

    def test_bad_date_exits(self, claims_file) -> None:
        with pytest.raises(SystemExit):
            main([str(claims_file), "--date-from", "10/01/2024"])
