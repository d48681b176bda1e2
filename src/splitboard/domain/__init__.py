"""Domain layer for splitboard application.

Services (``splitboard.domain.board`` etc.) depend on the database interface
and are imported from their modules directly.
"""

from splitboard.domain.aggregation import aggregate, response_rate
from splitboard.domain.amounts import effective_amount, effective_amounts, round2
from splitboard.domain.category_tree import CategoryTree
from splitboard.domain.session import AllocationSession, SessionState
from splitboard.domain.validation import (
    validate_allocations,
    validate_level_allocations,
)

__all__ = [
    "aggregate",
    "response_rate",
    "effective_amount",
    "effective_amounts",
    "round2",
    "CategoryTree",
    "AllocationSession",
    "SessionState",
    "validate_allocations",
    "validate_level_allocations",
]
