"""Portfolio metrics over a collection of reports."""

from decimal import Decimal
from typing import Callable, Iterable, Optional, Sequence

from ledgerlens.domain.entities import MetricsSnapshot, Report

COHORT_SIZE = 3
ZERO = Decimal("0")


def valid_reports(reports: Iterable[Report]) -> list[Report]:
    """Drop degenerate reports and sort the rest by period start.

    The sort is stable, so reports sharing a period start keep their input
    order.
    """
    return sorted(
        (report for report in reports if not report.is_degenerate),
        key=lambda report: report.period_start,
    )


def _mean(values: Sequence[Decimal]) -> Decimal:
    if not values:
        return ZERO
    return sum(values, ZERO) / len(values)


def _pick(reports: Sequence[Report], better: Callable[[Decimal, Decimal], bool]) -> Optional[Report]:
    """Return the report whose net profit is preferred by better(); the earliest wins ties."""
    chosen: Optional[Report] = None
    for report in reports:
        if chosen is None or better(report.net_profit, chosen.net_profit):
            chosen = report
    return chosen


def cohort_growth(reports: Sequence[Report], value: Callable[[Report], Decimal]) -> Decimal:
    """Percentage change between the first and last cohort means.

    Cohorts are the first and last ``min(3, n)`` reports of a chronologically
    sorted sequence and may overlap. Growth is 0 with fewer than two reports
    or when the first cohort mean is not positive.
    """
    if len(reports) < 2:
        return ZERO
    size = min(COHORT_SIZE, len(reports))
    first_mean = _mean([value(report) for report in reports[:size]])
    last_mean = _mean([value(report) for report in reports[-size:]])
    if first_mean <= 0:
        return ZERO
    return (last_mean - first_mean) / first_mean * 100


def average_margin(reports: Iterable[Report]) -> Decimal:
    """Mean net margin over reports with positive gross profit."""
    margins = [report.net_margin for report in reports if report.gross_profit > 0]
    return _mean(margins)


def calculate_metrics(reports: Iterable[Report]) -> MetricsSnapshot:
    """Compute aggregate statistics for a collection of reports.

    Never raises on empty or degenerate input; with no valid reports every
    figure is zero and best/worst months are None.

    Args:
        reports: Reports in any order

    Returns:
        MetricsSnapshot
    """
    valid = valid_reports(reports)
    if not valid:
        return MetricsSnapshot()

    return MetricsSnapshot(
        total_revenue=sum((report.gross_profit for report in valid), ZERO),
        total_profit=sum((report.net_profit for report in valid), ZERO),
        average_margin=average_margin(valid),
        profitable_months=sum(1 for report in valid if report.net_profit > 0),
        total_months=len(valid),
        best_month=_pick(valid, lambda candidate, best: candidate > best),
        worst_month=_pick(valid, lambda candidate, worst: candidate < worst),
        revenue_growth=cohort_growth(valid, lambda report: report.gross_profit),
        profit_growth=cohort_growth(valid, lambda report: report.net_profit),
    )
