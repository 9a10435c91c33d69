"""Category aggregation for report drill-down views."""

from decimal import Decimal
from typing import Iterable, Sequence

from ledgerlens.domain.entities import Category, CategoryGroup, LineItemDetail


def group_line_items(
    items: Iterable[LineItemDetail], hide_zero: bool = True
) -> list[CategoryGroup]:
    """Group a report's line items by account category.

    Groups appear in the order their category is first seen. Subtotals are
    exact Decimal sums. Zero-valued items are dropped from the grouped view
    when ``hide_zero`` is set; a category whose items are all zero still
    yields an empty group so presenters can show it.

    Args:
        items: Line items with resolved accounts
        hide_zero: Exclude zero-valued items from each group's items

    Returns:
        List of category groups
    """
    members: dict[Category, list[LineItemDetail]] = {}
    subtotals: dict[Category, Decimal] = {}

    for item in items:
        category = item.category
        if category not in members:
            members[category] = []
            subtotals[category] = Decimal("0")
        subtotals[category] += item.value
        if hide_zero and item.value == 0:
            continue
        members[category].append(item)

    return [
        CategoryGroup(
            category=category,
            items=tuple(category_items),
            subtotal=subtotals[category],
        )
        for category, category_items in members.items()
    ]


def category_totals(groups: Sequence[CategoryGroup]) -> dict[Category, Decimal]:
    """Map each category to its subtotal."""
    return {group.category: group.subtotal for group in groups}


def grand_total(groups: Sequence[CategoryGroup]) -> Decimal:
    """Sum of all category subtotals."""
    return sum((group.subtotal for group in groups), Decimal("0"))
