"""Domain model entities for ledgerlens.

These are pure data classes representing the normalized accounting graph and
the views derived from it, independent of database schema.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from ledgerlens.domain.errors import PartialBatchFailure


class Category(str, Enum):
    """Closed set of account categories."""

    OPERATING_REVENUE = "Operating Revenue"
    COST_OF_GOODS_SOLD = "Cost of Goods Sold"
    OPERATING_EXPENSES = "Operating Expenses"
    NON_OPERATING_EXPENSES = "Non Operating Expenses"
    OTHER_INCOME = "Other Income"
    UNCATEGORIZED = "Uncategorized"

    @classmethod
    def from_label(cls, label: Optional[str]) -> "Category":
        """Return the category for a stored label, Uncategorized if unknown."""
        for member in cls:
            if member.value == label:
                return member
        return cls.UNCATEGORIZED


class SectionKind(str, Enum):
    """Statement section kinds accepted in ingestion payloads."""

    REVENUE = "revenue"
    COST_OF_GOODS_SOLD = "cost_of_goods_sold"
    OPERATING_EXPENSES = "operating_expenses"
    NON_OPERATING_EXPENSES = "non_operating_expenses"
    OTHER_INCOME = "other_income"

    @property
    def category(self) -> Category:
        return SECTION_CATEGORIES[self]


SECTION_CATEGORIES = {
    SectionKind.REVENUE: Category.OPERATING_REVENUE,
    SectionKind.COST_OF_GOODS_SOLD: Category.COST_OF_GOODS_SOLD,
    SectionKind.OPERATING_EXPENSES: Category.OPERATING_EXPENSES,
    SectionKind.NON_OPERATING_EXPENSES: Category.NON_OPERATING_EXPENSES,
    SectionKind.OTHER_INCOME: Category.OTHER_INCOME,
}


class AccountConflictPolicy(str, Enum):
    """How to reconcile an existing account with conflicting name/category."""

    FIRST_WRITE_WINS = "first-write-wins"
    LAST_WRITE_WINS = "last-write-wins"
    REJECT = "reject"


class Severity(str, Enum):
    """Insight severity, used by presenters to pick icons and colors."""

    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class InsightCategory(str, Enum):
    """Rule families evaluated by the insight generator, in order."""

    PROFITABILITY = "profitability"
    MARGIN = "margin"
    REVENUE_GROWTH = "revenue_growth"
    PROFIT_GROWTH = "profit_growth"


@dataclass(frozen=True)
class Company:
    """Company domain entity."""

    id: int
    external_company_id: int
    name: str


@dataclass(frozen=True)
class Account:
    """Ledger account domain entity, unique per company and external ID."""

    id: int
    company_id: int
    external_account_id: str
    name: str
    category: Category


@dataclass(frozen=True)
class Report:
    """Per-period financial summary for one company."""

    id: int
    company_id: int
    external_report_id: str
    period_start: date
    period_end: date
    gross_profit: Decimal
    net_profit: Decimal

    @property
    def is_degenerate(self) -> bool:
        """True for "no data" periods with zero gross and zero net profit."""
        return self.gross_profit == 0 and self.net_profit == 0

    @property
    def net_margin(self) -> Optional[Decimal]:
        """Net profit as a percentage of gross profit, None if gross <= 0."""
        if self.gross_profit > 0:
            return self.net_profit / self.gross_profit * 100
        return None


@dataclass(frozen=True)
class LineItem:
    """Single monetary entry tied to an account within a report."""

    id: int
    report_id: int
    account_id: int
    value: Decimal


@dataclass(frozen=True)
class LineItemDetail:
    """Line item together with its resolved account."""

    line_item: LineItem
    account: Account

    @property
    def value(self) -> Decimal:
        return self.line_item.value

    @property
    def category(self) -> Category:
        return self.account.category


@dataclass(frozen=True)
class NormalizedLineItem:
    """Validated line item awaiting account resolution."""

    name: str
    account_ref: str
    value: Decimal
    category: Category


@dataclass(frozen=True)
class NormalizedStatement:
    """Validated period statement awaiting persistence."""

    position: int
    company_ref: int
    period_id: str
    period_start: date
    period_end: date
    gross_profit: Decimal
    net_profit: Decimal
    line_items: tuple[NormalizedLineItem, ...] = ()
    company_name: Optional[str] = None


@dataclass(frozen=True)
class CategoryGroup:
    """Line items of one category with their exact subtotal."""

    category: Category
    items: tuple[LineItemDetail, ...]
    subtotal: Decimal


@dataclass(frozen=True)
class MetricsSnapshot:
    """Aggregate statistics over a collection of reports."""

    total_revenue: Decimal = Decimal("0")
    total_profit: Decimal = Decimal("0")
    average_margin: Decimal = Decimal("0")
    profitable_months: int = 0
    total_months: int = 0
    best_month: Optional[Report] = None
    worst_month: Optional[Report] = None
    revenue_growth: Decimal = Decimal("0")
    profit_growth: Decimal = Decimal("0")

    @property
    def profitability_ratio(self) -> Decimal:
        """Share of profitable months, 0 when there are no months."""
        if self.total_months == 0:
            return Decimal("0")
        return Decimal(self.profitable_months) / Decimal(self.total_months)

    @property
    def profitability_percent(self) -> Decimal:
        return self.profitability_ratio * 100


@dataclass(frozen=True)
class TrendPoint:
    """One period of the chronological trend series."""

    period: str
    gross_profit: Decimal
    net_profit: Decimal
    margin: Decimal


@dataclass(frozen=True)
class Insight:
    """Rule-based insight with a structured severity."""

    category: InsightCategory
    severity: Severity
    text: str


@dataclass(frozen=True)
class Dashboard:
    """Metrics, trend series and insights computed for one query."""

    metrics: MetricsSnapshot
    trend: tuple[TrendPoint, ...]
    insights: tuple[Insight, ...]


@dataclass(frozen=True)
class BatchResult:
    """Outcome of a batch ingestion call."""

    total: int
    processed_count: int
    errors: tuple[str, ...] = field(default_factory=tuple)

    @property
    def failed_count(self) -> int:
        return self.total - self.processed_count

    @property
    def partial_failure(self) -> bool:
        return bool(self.errors) and self.processed_count > 0

    @property
    def success(self) -> bool:
        """False only when a non-empty batch had every entry fail."""
        return self.total == 0 or self.processed_count > 0

    @property
    def message(self) -> str:
        if not self.errors:
            return f"Processed {self.processed_count} report(s)"
        if self.processed_count == 0:
            return f"All {self.total} report(s) failed"
        return (
            f"Processed {self.processed_count} of {self.total} report(s) "
            f"with {len(self.errors)} error(s)"
        )

    def to_response(self) -> dict:
        """Return the batch ingestion response body."""
        return {
            "success": self.success,
            "message": self.message,
            "processedCount": self.processed_count,
            "errors": list(self.errors),
        }

    def raise_for_errors(self) -> None:
        """Raise PartialBatchFailure if any entry failed."""
        if self.errors:
            raise PartialBatchFailure(self)
