"""Shared pytest fixtures for ledgerlens tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
from pathlib import Path
import pytest

from ledgerlens.database.factories import create_sqlite_database
from ledgerlens.domain.dashboard import DashboardService
from ledgerlens.domain.entities import Report
from ledgerlens.domain.ingestion import IngestionService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def ingestion_service(temp_db):
    """Create an IngestionService with a temporary database."""
    return IngestionService(temp_db)


@pytest.fixture
def dashboard_service(temp_db):
    """Create a DashboardService with a temporary database."""
    return DashboardService(temp_db)


def make_statement(period_id, start, end, gross, net, **sections):
    """Build a raw statement entry for company 1001."""
    entry = {
        "companyRef": 1001,
        "periodId": period_id,
        "periodStart": start,
        "periodEnd": end,
        "grossProfit": Decimal(gross),
        "netProfit": Decimal(net),
    }
    entry.update(sections)
    return entry


def section(name, *items):
    """Build a section from (name, value, account_ref) tuples."""
    line_items = [
        {"name": item_name, "value": Decimal(value), "accountRef": account_ref}
        for item_name, value, account_ref in items
    ]
    total = sum((item["value"] for item in line_items), Decimal("0"))
    return {"name": name, "value": total, "lineItems": line_items}


@pytest.fixture
def sample_payload():
    """Three monthly statements for one company."""
    return {
        "data": [
            make_statement(
                "2024-01", "2024-01-01", "2024-01-31", "15000", "8500",
                revenue=[section("Sales", ("Product Sales", "15000.10", "rev-1"))],
                operatingExpenses=[
                    section(
                        "Admin",
                        ("Rent", "-4000.05", "opex-1"),
                        ("Utilities", "0", "opex-2"),
                    )
                ],
            ),
            make_statement(
                "2024-02", "2024-02-01", "2024-02-29", "18000", "12200",
                revenue=[section("Sales", ("Product Sales", "18000", "rev-1"))],
                costOfGoodsSold=[section("Materials", ("Materials", "-2500.5", "cogs-1"))],
            ),
            make_statement(
                "2024-03", "2024-03-01", "2024-03-31", "22000", "15800",
                revenue=[section("Sales", ("Product Sales", "22000", "rev-1"))],
                otherIncome=[section("Interest", ("Interest Income", "12.34", "oi-1"))],
            ),
        ]
    }


def make_report(report_id, start, gross, net, end=None):
    """Build a domain Report without touching the database."""
    return Report(
        id=report_id,
        company_id=1,
        external_report_id=f"R{report_id}",
        period_start=start,
        period_end=end or start,
        gross_profit=Decimal(gross),
        net_profit=Decimal(net),
    )


@pytest.fixture
def quarter_reports():
    """Reports for January to March 2024, deliberately out of order."""
    return [
        make_report(3, date(2024, 3, 1), "22000", "15800"),
        make_report(1, date(2024, 1, 1), "15000", "8500"),
        make_report(2, date(2024, 2, 1), "18000", "12200"),
    ]


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
