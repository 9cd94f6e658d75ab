"""Tests for CLI module."""

import json
from unittest.mock import patch

from typer.testing import CliRunner

from sourcewise.cli import app, print_error

runner = CliRunner()


class TestPrintFunctions:
    """Tests for CLI print functions."""

    def test_print_error(self):
        with patch("sourcewise.cli.console") as mock_console:
            print_error("Something went wrong")
            mock_console.print.assert_called_once()


class TestCommands:
    """Tests for CLI commands against the sample data."""

    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "Sourcewise v" in result.output

    def test_match_stored_requirement(self):
        result = runner.invoke(app, ["match", "RFQ-1001", "--limit", "3"])
        assert result.exit_code == 0
        assert "Matches for RFQ-1001" in result.output

    def test_match_json(self):
        result = runner.invoke(app, ["match", "RFQ-1001", "--json"])
        assert result.exit_code == 0
        assert '"requirement_id": "RFQ-1001"' in result.output

    def test_match_requirement_file(self, tmp_path, requirement_record):
        path = tmp_path / "requirement.json"
        path.write_text(json.dumps(requirement_record))
        result = runner.invoke(app, ["match", "--requirement", str(path)])
        assert result.exit_code == 0
        assert "Matches for RFQ-1" in result.output

    def test_match_needs_input(self):
        result = runner.invoke(app, ["match"])
        assert result.exit_code == 2

    def test_match_unknown_requirement(self):
        result = runner.invoke(app, ["match", "RFQ-404"])
        assert result.exit_code == 1
        assert "RFQ-404" in result.output

    def test_analyze_file(self, tmp_path):
        path = tmp_path / "rfq.json"
        path.write_text(
            json.dumps(
                {
                    "id": "CRFQ-FILE",
                    "products": [{"name": "Copper wire", "quantity": 5, "budget": 1_500_000}],
                    "suppliers": ["SUP-001"],
                }
            )
        )
        result = runner.invoke(app, ["analyze", "--file", str(path)])
        assert result.exit_code == 0
        assert "Success probability" in result.output
        assert "bulk discount" in result.output

    def test_analyze_invalid_file(self, tmp_path):
        path = tmp_path / "rfq.json"
        path.write_text(json.dumps({"id": "CRFQ-BAD", "products": []}))
        result = runner.invoke(app, ["analyze", "--file", str(path)])
        assert result.exit_code == 1
        assert "products" in result.output

    def test_report(self):
        result = runner.invoke(app, ["report", "CRFQ-2001"])
        assert result.exit_code == 0
        assert "Next Steps" in result.output

    def test_report_unknown_rfq(self):
        result = runner.invoke(app, ["report", "CRFQ-404"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_policy(self):
        result = runner.invoke(app, ["policy"])
        assert result.exit_code == 0
        assert "Factor Weights" in result.output
        assert "highly_recommended" in result.output
