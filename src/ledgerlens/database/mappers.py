"""Mapper functions to convert between domain models and SQLAlchemy models."""

from ledgerlens.domain import entities as domain
from ledgerlens.database.models import (
    Account as ORMAccount,
    Company as ORMCompany,
    LineItem as ORMLineItem,
    Report as ORMReport,
)


def company_to_domain(orm_company: ORMCompany) -> domain.Company:
    """Convert SQLAlchemy Company model to domain Company entity."""
    return domain.Company(
        id=orm_company.id,
        external_company_id=orm_company.external_company_id,
        name=orm_company.name,
    )


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        company_id=orm_account.company_id,
        external_account_id=orm_account.external_account_id,
        name=orm_account.name,
        category=domain.Category.from_label(orm_account.category),
    )


def report_to_domain(orm_report: ORMReport) -> domain.Report:
    """Convert SQLAlchemy Report model to domain Report entity."""
    return domain.Report(
        id=orm_report.id,
        company_id=orm_report.company_id,
        external_report_id=orm_report.external_report_id,
        period_start=orm_report.period_start,
        period_end=orm_report.period_end,
        gross_profit=orm_report.gross_profit,
        net_profit=orm_report.net_profit,
    )


def line_item_to_domain(orm_line_item: ORMLineItem) -> domain.LineItem:
    """Convert SQLAlchemy LineItem model to domain LineItem entity."""
    return domain.LineItem(
        id=orm_line_item.id,
        report_id=orm_line_item.report_id,
        account_id=orm_line_item.account_id,
        value=orm_line_item.value,
    )


def line_item_detail_to_domain(orm_line_item: ORMLineItem) -> domain.LineItemDetail:
    """Convert SQLAlchemy LineItem with its account to a LineItemDetail."""
    return domain.LineItemDetail(
        line_item=line_item_to_domain(orm_line_item),
        account=account_to_domain(orm_line_item.account),
    )
