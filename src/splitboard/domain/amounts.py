"""Effective amounts, rounding and budget range helpers."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Mapping, Optional

from splitboard.domain.entities import BoardSettings
from splitboard.domain.errors import InvalidCategory, InvalidRange
from splitboard.domain.validation import CategoryLookup


def round2(value: float) -> float:
    """Round half up to two decimal places."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def effective_amount(
    category_id: int,
    allocations: Mapping[int, float],
    category_lookup: CategoryLookup,
    total_budget: float,
) -> float:
    """Absolute share of ``total_budget`` attributable to a category.

    Multiplies ``percentage / 100`` of the category and every ancestor. A
    level with no stored percentage counts as 0, so it zeroes everything
    beneath it.

    Args:
        category_id: Category to compute the amount for
        allocations: Sparse ``category_id -> percentage`` map
        category_lookup: Anything with ``get(category_id) -> Category | None``
        total_budget: Amount the root level splits

    Raises:
        InvalidCategory: If the category or an ancestor is missing, or the
            parent chain contains a cycle
    """
    amount = float(total_budget)
    visited: set[int] = set()
    current_id: Optional[int] = category_id
    while current_id is not None:
        if current_id in visited:
            raise InvalidCategory(category_id, "has a cyclic parent chain")
        visited.add(current_id)
        category = category_lookup.get(current_id)
        if category is None:
            raise InvalidCategory(current_id)
        amount *= allocations.get(current_id, 0) / 100
        current_id = category.parent_id
    return amount


def effective_amounts(
    allocations: Mapping[int, float],
    category_lookup: CategoryLookup,
    total_budget: float,
) -> dict[int, float]:
    """Effective amount of every allocated category in a distribution."""
    return {
        category_id: effective_amount(
            category_id, allocations, category_lookup, total_budget
        )
        for category_id in allocations
    }


def validate_allocation_range(min_allocation: float, max_allocation: float) -> None:
    """Check a board's budget range; 0 means unbounded.

    Raises:
        InvalidRange: If a bound is negative or min exceeds a set max
    """
    if min_allocation < 0 or max_allocation < 0:
        raise InvalidRange("Allocation range values must be non-negative")
    if max_allocation > 0 and min_allocation > max_allocation:
        raise InvalidRange("Minimum allocation cannot exceed maximum allocation")


def clamp_to_allocation_range(allocation_total: float, settings: BoardSettings) -> float:
    """Clamp a participant's total into the board's range."""
    if settings.min_allocation > 0 and allocation_total < settings.min_allocation:
        return settings.min_allocation
    if settings.max_allocation > 0 and allocation_total > settings.max_allocation:
        return settings.max_allocation
    return allocation_total


def check_allocation_total(allocation_total: float, settings: BoardSettings) -> None:
    """Reject a participant total outside the board's range.

    Raises:
        InvalidRange: If the total is negative or out of range
    """
    if allocation_total < 0:
        raise InvalidRange("Allocation total must be non-negative")
    validate_allocation_range(settings.min_allocation, settings.max_allocation)
    if settings.min_allocation > 0 and allocation_total < settings.min_allocation:
        raise InvalidRange(
            f"Allocation total must be at least {settings.min_allocation:g}"
        )
    if settings.max_allocation > 0 and allocation_total > settings.max_allocation:
        raise InvalidRange(
            f"Allocation total must be at most {settings.max_allocation:g}"
        )
