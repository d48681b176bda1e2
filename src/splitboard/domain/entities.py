"""Domain model entities for splitboard.

These are pure data classes representing business concepts, independent of
database schema. The allocation engine only ever sees these types, so it can be
driven from any storage backend that produces them.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Union

# Group key used for allocations whose category has no parent.
ROOT_KEY = "root"

ParentKey = Union[int, str]


class SymbolPosition(str, Enum):
    """Where a board's currency symbol is rendered."""

    PREFIX = "prefix"
    SUFFIX = "suffix"


@dataclass(frozen=True)
class Category:
    """Category domain entity with hierarchical structure."""

    id: int
    name: str
    parent_id: Optional[int] = None
    depth: int = 0
    order: int = 0
    description: str = ""
    color: str = ""
    board_id: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def parent_key(self) -> ParentKey:
        """Key of the level this category belongs to."""
        return self.parent_id if self.parent_id is not None else ROOT_KEY


@dataclass(frozen=True)
class Allocation:
    """Share of a level assigned to one category, in percent."""

    category_id: int
    percentage: float


@dataclass(frozen=True)
class Distribution:
    """All allocations one user saved on one board."""

    board_id: int
    user_id: str
    allocations: tuple[Allocation, ...] = ()
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def as_map(self) -> dict[int, float]:
        """Return allocations as a sparse ``category_id -> percentage`` map."""
        return {a.category_id: a.percentage for a in self.allocations}


@dataclass(frozen=True)
class BoardSettings:
    """Unit, symbol and budget range of a board."""

    unit: str = "USD"
    symbol: str = "$"
    symbol_position: SymbolPosition = SymbolPosition.PREFIX
    min_allocation: float = 0
    max_allocation: float = 0


@dataclass(frozen=True)
class Board:
    """Board domain entity."""

    id: int
    name: str
    description: str = ""
    settings: BoardSettings = field(default_factory=BoardSettings)
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class AggregateRow:
    """Cross-user statistics for one category."""

    category_id: int
    average_percentage: float
    average_amount: float
    total_amount: float
    total_responses: int


@dataclass(frozen=True)
class StatisticsRow:
    """Aggregate row decorated with display data."""

    category_id: int
    name: str
    color: str
    average_percentage: float
    average_amount: float
    total_amount: float
    total_responses: int
    response_rate: float


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a candidate allocation set."""

    error: Optional[Exception] = None

    @property
    def is_valid(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> None:
        """Raise the captured error, if any."""
        if self.error is not None:
            raise self.error
