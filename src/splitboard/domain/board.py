"""Board domain service."""

from dataclasses import replace
from typing import Optional

from splitboard.database.base import Database
from splitboard.domain.amounts import (
    check_allocation_total,
    clamp_to_allocation_range,
    validate_allocation_range,
)
from splitboard.domain.entities import Board, BoardSettings, SymbolPosition
from splitboard.domain.errors import NotFoundError, board_not_found

DEFAULT_ALLOCATION_TOTAL = 100.0


class BoardService:
    """Service for managing boards and participant budgets."""

    def __init__(self, db: Database):
        """Initialize board service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_board(
        self, name: str, description: str = "", settings: Optional[BoardSettings] = None
    ) -> int:
        """Create a board.

        Args:
            name: Board name
            description: Optional description
            settings: Unit, symbol and budget range (defaults apply if None)

        Returns:
            Board ID

        Raises:
            InvalidRange: If the budget range is invalid
        """
        settings = settings or BoardSettings()
        validate_allocation_range(settings.min_allocation, settings.max_allocation)
        return self.db.create_board(name=name, description=description, settings=settings)

    def get_board(self, board_id: int) -> Optional[Board]:
        """Get board by ID, or None if not found."""
        return self.db.get_board(board_id)

    def require_board(self, board_id: int) -> Board:
        """Get board by ID.

        Raises:
            NotFoundError: If the board doesn't exist
        """
        board = self.db.get_board(board_id)
        if board is None:
            raise NotFoundError(board_not_found(board_id))
        return board

    def list_boards(self) -> list[Board]:
        return self.db.list_boards()

    def delete_board(self, board_id: int) -> None:
        """Delete a board, its categories, distributions and participant budgets.

        Raises:
            NotFoundError: If the board doesn't exist
        """
        self.require_board(board_id)
        self.db.delete_board(board_id)

    def update_settings(
        self,
        board_id: int,
        unit: Optional[str] = None,
        symbol: Optional[str] = None,
        symbol_position: Optional[SymbolPosition] = None,
        min_allocation: Optional[float] = None,
        max_allocation: Optional[float] = None,
    ) -> BoardSettings:
        """Patch a board's settings.

        Fields left as None keep their current value. Stored participant
        totals are re-clamped into the new range.

        Returns:
            The new settings

        Raises:
            NotFoundError: If the board doesn't exist
            InvalidRange: If the resulting range is invalid
        """
        board = self.require_board(board_id)
        changes = {
            "unit": unit,
            "symbol": symbol,
            "symbol_position": SymbolPosition(symbol_position) if symbol_position else None,
            "min_allocation": min_allocation,
            "max_allocation": max_allocation,
        }
        settings = replace(
            board.settings, **{k: v for k, v in changes.items() if v is not None}
        )
        validate_allocation_range(settings.min_allocation, settings.max_allocation)
        self.db.update_board_settings(board_id, settings)

        for user_id, total in self.db.list_allocation_totals(board_id).items():
            clamped = clamp_to_allocation_range(total, settings)
            if clamped != total:
                self.db.set_allocation_total(board_id, user_id, clamped)

        return settings

    def get_allocation_total(self, board_id: int, user_id: str) -> float:
        """Get a participant's total budget, clamped into the board's range."""
        board = self.require_board(board_id)
        stored = self.db.get_allocation_total(board_id, user_id)
        total = DEFAULT_ALLOCATION_TOTAL if stored is None else stored
        return clamp_to_allocation_range(total, board.settings)

    def set_allocation_total(self, board_id: int, user_id: str, allocation_total: float) -> None:
        """Set a participant's total budget.

        Raises:
            NotFoundError: If the board doesn't exist
            InvalidRange: If the total is negative or outside the board's range
        """
        board = self.require_board(board_id)
        check_allocation_total(allocation_total, board.settings)
        self.db.set_allocation_total(board_id, user_id, allocation_total)

    def list_allocation_totals(self, board_id: int) -> dict[str, float]:
        """Clamped total budget of every participant that set one."""
        board = self.require_board(board_id)
        return {
            user_id: clamp_to_allocation_range(total, board.settings)
            for user_id, total in self.db.list_allocation_totals(board_id).items()
        }

    def default_allocation_total(self, board_id: int) -> float:
        """Budget used for participants that never set one."""
        board = self.require_board(board_id)
        return clamp_to_allocation_range(DEFAULT_ALLOCATION_TOTAL, board.settings)
