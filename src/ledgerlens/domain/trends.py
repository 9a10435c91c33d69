"""Chronological trend series for charting."""

from datetime import date
from decimal import Decimal
from typing import Iterable

from ledgerlens.domain.entities import Report, TrendPoint
from ledgerlens.domain.metrics import valid_reports

MONTH_NAMES = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def month_label(value: date) -> str:
    """Return a locale-independent label such as 'Jan 2024'."""
    return f"{MONTH_NAMES[value.month - 1]} {value.year}"


def format_period(period_start: date, period_end: date) -> str:
    """Human label for a reporting period."""
    start_label = month_label(period_start)
    end_label = month_label(period_end)
    if start_label == end_label:
        return start_label
    return f"{start_label} - {end_label}"


def build_trend(reports: Iterable[Report]) -> list[TrendPoint]:
    """Map valid reports to trend points in chronological order.

    A new list is built on every call.
    """
    return [
        TrendPoint(
            period=month_label(report.period_start),
            gross_profit=report.gross_profit,
            net_profit=report.net_profit,
            margin=report.net_margin if report.net_margin is not None else Decimal("0"),
        )
        for report in valid_reports(reports)
    ]
