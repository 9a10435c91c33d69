"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from ledgerlens.domain.entities import (
    Account,
    Category,
    Company,
    LineItemDetail,
    Report,
)


class Database(ABC):
    """Abstract database interface for ledgerlens."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Company operations
    @abstractmethod
    def get_or_create_company(
        self, external_company_id: int, name: Optional[str] = None
    ) -> Company:
        """Get company by external ID, creating it on first reference.

        The name is only used on creation; companies are immutable afterwards.
        """
        pass

    @abstractmethod
    def get_company(self, company_id: int) -> Optional[Company]:
        """Get company by ID."""
        pass

    @abstractmethod
    def list_companies(self) -> list[Company]:
        """List all companies."""
        pass

    # Account operations
    @abstractmethod
    def list_accounts(self, company_id: int) -> list[Account]:
        """List all accounts of a company."""
        pass

    @abstractmethod
    def create_account(
        self, company_id: int, external_account_id: str, name: str, category: Category
    ) -> Account:
        """Create an account. Raises ConflictError if it already exists."""
        pass

    @abstractmethod
    def update_account(self, account_id: int, name: str, category: Category) -> Account:
        """Overwrite account name and category."""
        pass

    @abstractmethod
    def rollback(self) -> None:
        """Discard writes not yet committed by save_report.

        Account creation and updates are staged in the current transaction
        and become durable together with the next saved report.
        """
        pass

    # Report operations
    @abstractmethod
    def save_report(
        self,
        company_id: int,
        external_report_id: str,
        period_start: date,
        period_end: date,
        gross_profit: Decimal,
        net_profit: Decimal,
        line_items: Sequence[tuple[int, Decimal]],
    ) -> tuple[Report, bool]:
        """Create or update a report and replace its line items atomically.

        An existing report is matched by (company_id, external_report_id),
        then by (company_id, period_start, period_end).

        Args:
            line_items: (account_id, value) pairs

        Returns:
            Tuple of (saved report, True if it was newly created)
        """
        pass

    @abstractmethod
    def get_report(self, report_id: int) -> Optional[Report]:
        """Get report by ID."""
        pass

    @abstractmethod
    def list_reports(self, company_id: Optional[int] = None) -> list[Report]:
        """List reports, optionally filtered by company."""
        pass

    @abstractmethod
    def delete_report(self, report_id: int) -> None:
        """Delete a report together with its line items."""
        pass

    @abstractmethod
    def list_line_items(self, report_id: int) -> list[LineItemDetail]:
        """List a report's line items with their resolved accounts."""
        pass
