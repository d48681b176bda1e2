"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from splitboard.domain.entities import (
    Allocation,
    Board,
    BoardSettings,
    Category,
    Distribution,
)


class Database(ABC):
    """Abstract database interface for splitboard."""

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

    # Board operations
    @abstractmethod
    def create_board(self, name: str, description: str = "", settings: Optional[BoardSettings] = None) -> int:
        """Create a new board. Returns board ID."""
        pass

    @abstractmethod
    def get_board(self, board_id: int) -> Optional[Board]:
        """Get board by ID."""
        pass

    @abstractmethod
    def list_boards(self) -> list[Board]:
        """List all boards."""
        pass

    @abstractmethod
    def delete_board(self, board_id: int) -> None:
        """Delete a board with its categories, distributions and budgets."""
        pass

    @abstractmethod
    def update_board_settings(self, board_id: int, settings: BoardSettings) -> None:
        """Replace a board's settings."""
        pass

    # Participant budget operations
    @abstractmethod
    def get_allocation_total(self, board_id: int, user_id: str) -> Optional[float]:
        """Get a user's stored total budget on a board, or None if never set."""
        pass

    @abstractmethod
    def set_allocation_total(self, board_id: int, user_id: str, allocation_total: float) -> None:
        """Store a user's total budget on a board."""
        pass

    @abstractmethod
    def list_allocation_totals(self, board_id: int) -> dict[str, float]:
        """Map of user ID to stored total budget for a board."""
        pass

    # Category operations
    @abstractmethod
    def create_category(
        self,
        board_id: int,
        name: str,
        parent_id: Optional[int] = None,
        description: str = "",
        color: str = "",
        order: int = 0,
        depth: int = 0,
    ) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def list_categories(self, board_id: int) -> list[Category]:
        """List all categories of a board ordered by depth, then order."""
        pass

    @abstractmethod
    def delete_categories(self, category_ids: set[int]) -> None:
        """Delete categories and every allocation that references them."""
        pass

    # Distribution operations
    @abstractmethod
    def get_distribution(self, board_id: int, user_id: str) -> Optional[Distribution]:
        """Get a user's distribution on a board."""
        pass

    @abstractmethod
    def save_distribution_level(
        self,
        board_id: int,
        user_id: str,
        level_category_ids: set[int],
        allocations: list[Allocation],
    ) -> Distribution:
        """Atomically replace the allocations of one level.

        Stored allocations whose category is in ``level_category_ids`` are
        removed, then the non-zero ``allocations`` are inserted. Allocations
        of other levels are left untouched.
        """
        pass

    @abstractmethod
    def save_distribution(self, board_id: int, user_id: str, allocations: list[Allocation]) -> Distribution:
        """Atomically replace every allocation of a distribution."""
        pass

    @abstractmethod
    def list_distributions(self, board_id: int) -> list[Distribution]:
        """List every distribution saved on a board."""
        pass
