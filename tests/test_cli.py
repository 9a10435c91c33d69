"""Tests for CLI commands."""

import json

import pytest
from ledgerlens.cli.main import cli


def _invoke(cli_runner, temp_db, *args):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args])


@pytest.fixture
def ingested(cli_runner, temp_db, fixtures_dir):
    result = _invoke(cli_runner, temp_db, "ingest", str(fixtures_dir / "statements.json"))
    assert result.exit_code == 0
    return result


def test_ingest_successful(ingested, temp_db):
    assert "Ingestion complete" in ingested.output
    assert "Processed: 3 reports" in ingested.output
    assert len(temp_db.list_reports()) == 3
    assert temp_db.list_companies()[0].name == "Northwind Traders"


def test_ingest_reports_entry_errors(cli_runner, temp_db, fixtures_dir):
    result = _invoke(
        cli_runner, temp_db, "ingest", str(fixtures_dir / "statements_invalid_period.json")
    )

    assert result.exit_code == 0
    assert "Processed: 2 reports" in result.output
    assert "Errors: 1" in result.output
    assert "Entry 2:" in result.output


def test_ingest_strict_fails_on_entry_errors(cli_runner, temp_db, fixtures_dir):
    result = _invoke(
        cli_runner,
        temp_db,
        "ingest",
        str(fixtures_dir / "statements_invalid_period.json"),
        "--strict",
    )

    assert result.exit_code == 1
    assert len(temp_db.list_reports()) == 2


def test_ingest_json_output(cli_runner, temp_db, fixtures_dir):
    result = _invoke(
        cli_runner,
        temp_db,
        "ingest",
        str(fixtures_dir / "statements_invalid_period.json"),
        "--json",
    )

    assert result.exit_code == 0
    body = json.loads(result.output)
    assert body["success"] is True
    assert body["processedCount"] == 2
    assert len(body["errors"]) == 1


def test_ingest_malformed_payload(cli_runner, temp_db, fixtures_dir):
    result = _invoke(cli_runner, temp_db, "ingest", str(fixtures_dir / "statements_malformed.json"))

    assert result.exit_code == 1
    assert "Error: Payload is not valid JSON" in result.output
    assert temp_db.list_reports() == []


def test_ingest_account_policy_from_environment(cli_runner, temp_db, tmp_path):
    payload = {
        "data": [
            {
                "companyRef": 1,
                "periodId": "a",
                "periodStart": "2024-01-01",
                "periodEnd": "2024-01-31",
                "grossProfit": 10,
                "netProfit": 1,
                "revenue": [{"name": "S", "value": 10, "lineItems": [{"name": "S", "value": 10, "accountRef": "x"}]}],
            },
            {
                "companyRef": 1,
                "periodId": "b",
                "periodStart": "2024-02-01",
                "periodEnd": "2024-02-29",
                "grossProfit": 10,
                "netProfit": 1,
                "otherIncome": [{"name": "O", "value": 10, "lineItems": [{"name": "S", "value": 10, "accountRef": "x"}]}],
            },
        ]
    }
    path = tmp_path / "payload.json"
    path.write_text(json.dumps(payload))

    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "ingest", str(path)],
        env={"LEDGERLENS_ACCOUNT_POLICY": "reject"},
    )

    assert result.exit_code == 0
    assert "Processed: 1 reports" in result.output
    assert "already has category" in result.output


def test_companies(cli_runner, temp_db, ingested):
    result = _invoke(cli_runner, temp_db, "companies")

    assert result.exit_code == 0
    assert "Northwind Traders" in result.output
    assert "1001" in result.output


def test_reports_listing(cli_runner, temp_db, ingested):
    result = _invoke(cli_runner, temp_db, "reports")

    assert result.exit_code == 0
    assert "Found 3 report(s)" in result.output
    assert "Jan 2024" in result.output
    assert "$15,000.00" in result.output
    assert "56.7%" in result.output


def test_reports_listing_hides_empty_periods(cli_runner, temp_db, tmp_path):
    payload = {
        "data": [
            {
                "companyRef": 1,
                "periodId": "full",
                "periodStart": "2024-01-01",
                "periodEnd": "2024-01-31",
                "grossProfit": 10,
                "netProfit": 1,
            },
            {
                "companyRef": 1,
                "periodId": "empty",
                "periodStart": "2024-02-01",
                "periodEnd": "2024-02-29",
                "grossProfit": 0,
                "netProfit": 0,
            },
        ]
    }
    path = tmp_path / "payload.json"
    path.write_text(json.dumps(payload))
    assert _invoke(cli_runner, temp_db, "ingest", str(path)).exit_code == 0

    hidden = _invoke(cli_runner, temp_db, "reports")
    shown = _invoke(cli_runner, temp_db, "reports", "--show-empty")

    assert "Found 1 report(s)" in hidden.output
    assert "Feb 2024" not in hidden.output
    assert "Found 2 report(s)" in shown.output
    assert "Feb 2024" in shown.output


def test_reports_unknown_company(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "reports", "--company", "99")

    assert result.exit_code == 1
    assert "Company 99 not found" in result.output


def test_report_breakdown(cli_runner, temp_db, ingested):
    report_id = temp_db.list_reports()[0].id

    result = _invoke(cli_runner, temp_db, "report", str(report_id))

    assert result.exit_code == 0
    assert "Operating Revenue" in result.output
    assert "Operating Expenses" in result.output
    assert "-$6,500.00" in result.output
    assert "Utilities" not in result.output


def test_report_breakdown_show_zero(cli_runner, temp_db, ingested):
    report_id = temp_db.list_reports()[0].id

    result = _invoke(cli_runner, temp_db, "report", str(report_id), "--show-zero")

    assert "Utilities" in result.output


def test_report_missing(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "report", "42")

    assert result.exit_code == 1
    assert "Report 42 not found" in result.output


def test_dashboard(cli_runner, temp_db, ingested):
    result = _invoke(cli_runner, temp_db, "dashboard")

    assert result.exit_code == 0
    assert "$55,000.00" in result.output
    assert "65.4%" in result.output
    assert "3/3" in result.output
    assert "[SUCCESS] Strong profitability with 80%+ profitable months" in result.output
    assert "[ERROR  ] Revenue growth needs attention" in result.output


def test_dashboard_empty(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "dashboard")

    assert result.exit_code == 0
    assert "No report data available." in result.output
    assert "Profitability needs improvement" in result.output
