"""Read-side dashboard domain service."""

import logging
from typing import Optional

from ledgerlens.database.base import Database
from ledgerlens.domain.categories import group_line_items
from ledgerlens.domain.entities import CategoryGroup, Dashboard, Report
from ledgerlens.domain.errors import NotFoundError, company_not_found, report_not_found
from ledgerlens.domain.insights import generate_insights
from ledgerlens.domain.metrics import calculate_metrics
from ledgerlens.domain.trends import build_trend

logger = logging.getLogger(__name__)


class DashboardService:
    """Service that loads reports and derives dashboard views."""

    def __init__(self, db: Database):
        """Initialize dashboard service.

        Args:
            db: Database instance
        """
        self.db = db

    def list_reports(
        self, company_id: Optional[int] = None, include_empty: bool = True
    ) -> list[Report]:
        """List reports, optionally for a single company.

        Args:
            company_id: Restrict to one company
            include_empty: Keep periods with zero gross and zero net profit

        Raises:
            NotFoundError: If the company does not exist
        """
        if company_id is not None and self.db.get_company(company_id) is None:
            raise NotFoundError(company_not_found(company_id))
        reports = self.db.list_reports(company_id=company_id)
        if include_empty:
            return reports
        return [report for report in reports if not report.is_degenerate]

    def get_report_breakdown(
        self, report_id: int, hide_zero: bool = True
    ) -> tuple[Report, list[CategoryGroup]]:
        """Get a report with its line items grouped by category.

        Raises:
            NotFoundError: If the report does not exist
        """
        report = self.db.get_report(report_id)
        if report is None:
            raise NotFoundError(report_not_found(report_id))
        groups = group_line_items(self.db.list_line_items(report_id), hide_zero=hide_zero)
        return report, groups

    def build_dashboard(self, company_id: Optional[int] = None) -> Dashboard:
        """Compute metrics, trend series and insights for the stored reports."""
        reports = self.list_reports(company_id=company_id)
        metrics = calculate_metrics(reports)
        logger.debug(
            "Dashboard over %d report(s), %d valid", len(reports), metrics.total_months
        )
        return Dashboard(
            metrics=metrics,
            trend=tuple(build_trend(reports)),
            insights=tuple(generate_insights(metrics)),
        )
