"""Tests for the metrics engine."""

from datetime import date
from decimal import Decimal

import pytest

from conftest import make_report
from ledgerlens.domain.entities import MetricsSnapshot
from ledgerlens.domain.metrics import (
    average_margin,
    calculate_metrics,
    cohort_growth,
    valid_reports,
)

TWO_PLACES = Decimal("0.01")


def test_quarter_scenario(quarter_reports):
    """Three growing months produce the documented totals and margins."""
    metrics = calculate_metrics(quarter_reports)

    assert metrics.total_revenue == Decimal("55000")
    assert metrics.total_profit == Decimal("36500")
    assert metrics.profitable_months == 3
    assert metrics.total_months == 3
    assert metrics.average_margin.quantize(TWO_PLACES) == Decimal("65.42")
    assert metrics.best_month.external_report_id == "R3"
    assert metrics.worst_month.external_report_id == "R1"
    # With three reports both cohorts are the same reports
    assert metrics.revenue_growth == 0
    assert metrics.profit_growth == 0


def test_empty_collection_yields_zero_snapshot():
    metrics = calculate_metrics([])

    assert metrics == MetricsSnapshot()
    assert metrics.total_revenue == 0
    assert metrics.average_margin == 0
    assert metrics.best_month is None
    assert metrics.worst_month is None
    assert metrics.profitability_ratio == 0


def test_only_degenerate_reports_yield_zero_snapshot():
    reports = [make_report(1, date(2024, 1, 1), "0", "0"), make_report(2, date(2024, 2, 1), "0.00", "0")]

    assert calculate_metrics(reports) == MetricsSnapshot()


def test_degenerate_report_never_becomes_best_or_worst():
    """A zero report would otherwise win best month against losses."""
    reports = [
        make_report(1, date(2024, 1, 1), "1000", "-100"),
        make_report(2, date(2024, 2, 1), "0", "0"),
        make_report(3, date(2024, 3, 1), "1000", "-200"),
    ]

    metrics = calculate_metrics(reports)

    assert metrics.total_months == 2
    assert metrics.best_month.id == 1
    assert metrics.worst_month.id == 3
    assert metrics.profitable_months == 0


def test_valid_reports_sorted_and_filtered(quarter_reports):
    reports = quarter_reports + [make_report(9, date(2023, 12, 1), "0", "0")]

    result = valid_reports(reports)

    assert [report.id for report in result] == [1, 2, 3]


def test_non_positive_gross_does_not_change_average_margin(quarter_reports):
    baseline = calculate_metrics(quarter_reports).average_margin

    extended = quarter_reports + [
        make_report(4, date(2024, 4, 1), "-500", "300"),
        make_report(5, date(2024, 5, 1), "0", "-250"),
    ]
    metrics = calculate_metrics(extended)

    assert metrics.average_margin == baseline
    assert metrics.total_months == 5
    assert metrics.total_revenue == Decimal("54500")


def test_best_month_tie_resolves_to_earlier_period():
    reports = [
        make_report(2, date(2024, 2, 1), "5000", "900"),
        make_report(1, date(2024, 1, 1), "4000", "900"),
        make_report(3, date(2024, 3, 1), "3000", "100"),
    ]

    metrics = calculate_metrics(reports)

    assert metrics.best_month.id == 1


def test_worst_month_tie_resolves_to_earlier_period():
    reports = [
        make_report(3, date(2024, 3, 1), "3000", "-50"),
        make_report(2, date(2024, 2, 1), "4000", "-50"),
        make_report(1, date(2024, 1, 1), "5000", "700"),
    ]

    metrics = calculate_metrics(reports)

    assert metrics.worst_month.id == 2


def test_growth_compares_first_and_last_cohorts():
    reports = [
        make_report(i, date(2024, i, 1), gross, net)
        for i, (gross, net) in enumerate(
            [("100", "10"), ("100", "10"), ("100", "10"), ("200", "5"), ("200", "5"), ("200", "5")],
            start=1,
        )
    ]

    metrics = calculate_metrics(reports)

    assert metrics.revenue_growth == Decimal("100")
    assert metrics.profit_growth == Decimal("-50")


def test_growth_with_overlapping_cohorts():
    reports = [
        make_report(i, date(2024, i, 1), gross, "1")
        for i, gross in enumerate(["100", "200", "300", "400"], start=1)
    ]

    metrics = calculate_metrics(reports)

    # First cohort mean 200, last cohort mean 300
    assert metrics.revenue_growth == Decimal("50")


def test_growth_requires_two_reports():
    metrics = calculate_metrics([make_report(1, date(2024, 1, 1), "100", "50")])

    assert metrics.revenue_growth == 0
    assert metrics.profit_growth == 0
    assert metrics.best_month is metrics.worst_month


def test_growth_is_zero_when_first_cohort_mean_not_positive():
    reports = [
        make_report(i, date(2024, i, 1), "1000", net)
        for i, net in enumerate(["-100", "-100", "-100", "500"], start=1)
    ]

    assert cohort_growth(valid_reports(reports), lambda report: report.net_profit) == 0


def test_profitability_ratio():
    reports = [
        make_report(i, date(2024, i, 1), "1000", net)
        for i, net in enumerate(["100", "-20", "300", "40"], start=1)
    ]

    metrics = calculate_metrics(reports)

    assert metrics.profitable_months == 3
    assert metrics.profitability_ratio == Decimal("0.75")
    assert metrics.profitability_percent == Decimal("75")


def test_average_margin_ignores_non_positive_gross():
    reports = [
        make_report(1, date(2024, 1, 1), "200", "50"),
        make_report(2, date(2024, 2, 1), "-100", "50"),
    ]

    assert average_margin(reports) == Decimal("25")


def test_metrics_use_exact_decimal_sums():
    reports = [
        make_report(i, date(2024, i, 1), "0.1", "0.1") for i in range(1, 4)
    ]

    metrics = calculate_metrics(reports)

    assert metrics.total_revenue == Decimal("0.3")
    assert metrics.total_profit == Decimal("0.3")


@pytest.mark.parametrize("count", [0, 1, 2, 5])
def test_metrics_are_pure(count, quarter_reports):
    reports = (quarter_reports * 2)[:count]
    snapshot = list(reports)

    first = calculate_metrics(reports)
    second = calculate_metrics(reports)

    assert first == second
    assert reports == snapshot
