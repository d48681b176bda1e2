"""Pure checks for candidate allocation sets.

Both validators return a ``ValidationResult`` instead of raising so callers
can decide between reporting and raising; services call
``raise_for_error()`` before touching storage.
"""

from collections import defaultdict
from typing import Iterable, Optional, Protocol

from splitboard.domain.entities import (
    ROOT_KEY,
    Allocation,
    Category,
    ParentKey,
    ValidationResult,
)
from splitboard.domain.errors import (
    InvalidAllocationSum,
    InvalidCategory,
    InvalidPercentage,
    ParentMismatch,
)

# Absorbs floating-point drift from repeated slider drags.
SUM_TOLERANCE = 0.01


class CategoryLookup(Protocol):
    def get(self, category_id: int) -> Optional[Category]: ...


def sums_to_hundred(total: float) -> bool:
    """Return True if ``total`` is within tolerance of 100."""
    return abs(total - 100) <= SUM_TOLERANCE


def _check_percentages(allocations: list[Allocation]) -> Optional[Exception]:
    for allocation in allocations:
        if not 0 <= allocation.percentage <= 100:
            return InvalidPercentage(allocation.category_id, allocation.percentage)
    return None


def _resolve(
    allocations: list[Allocation], category_lookup: CategoryLookup
) -> tuple[list[tuple[Allocation, Category]], Optional[Exception]]:
    resolved = []
    for allocation in allocations:
        category = category_lookup.get(allocation.category_id)
        if category is None:
            return [], InvalidCategory(allocation.category_id)
        resolved.append((allocation, category))
    return resolved, None


def _check_sums(resolved: list[tuple[Allocation, Category]]) -> Optional[Exception]:
    sums: dict[ParentKey, float] = defaultdict(float)
    for allocation, category in resolved:
        sums[category.parent_key] += allocation.percentage
    for parent_key, total in sums.items():
        if not sums_to_hundred(total):
            return InvalidAllocationSum(parent_key, total)
    return None


def validate_allocations(
    allocations: Iterable[Allocation], category_lookup: CategoryLookup
) -> ValidationResult:
    """Validate a full distribution.

    Every parent group present (roots grouped under ``"root"``) must sum to
    100 within ``SUM_TOLERANCE``. Levels with no allocations are not checked.
    """
    allocations = list(allocations)
    error = _check_percentages(allocations)
    if error is not None:
        return ValidationResult(error)

    resolved, error = _resolve(allocations, category_lookup)
    if error is not None:
        return ValidationResult(error)

    return ValidationResult(_check_sums(resolved))


def validate_level_allocations(
    allocations: Iterable[Allocation],
    expected_parent_id: Optional[int],
    category_lookup: CategoryLookup,
) -> ValidationResult:
    """Validate allocations for a single level.

    Args:
        allocations: Candidate allocations
        expected_parent_id: Parent of the level being saved, None for roots
        category_lookup: Anything with ``get(category_id) -> Category | None``
    """
    if expected_parent_id == ROOT_KEY:
        expected_parent_id = None

    allocations = list(allocations)
    error = _check_percentages(allocations)
    if error is not None:
        return ValidationResult(error)

    resolved, error = _resolve(allocations, category_lookup)
    if error is not None:
        return ValidationResult(error)

    for allocation, category in resolved:
        if category.parent_id != expected_parent_id:
            return ValidationResult(
                ParentMismatch(
                    allocation.category_id, expected_parent_id, category.parent_id
                )
            )

    if not allocations:
        key = expected_parent_id if expected_parent_id is not None else ROOT_KEY
        return ValidationResult(InvalidAllocationSum(key, 0.0))

    return ValidationResult(_check_sums(resolved))
