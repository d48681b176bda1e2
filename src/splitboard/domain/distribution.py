"""Distribution domain service."""

import logging
from typing import Callable, Iterable, Optional

from splitboard.database.base import Database
from splitboard.domain.amounts import effective_amounts
from splitboard.domain.board import BoardService
from splitboard.domain.category import CategoryService
from splitboard.domain.entities import ROOT_KEY, Allocation, Distribution
from splitboard.domain.errors import InvalidCategory
from splitboard.domain.session import DEFAULT_SAVE_DELAY, AllocationSession, Scheduler
from splitboard.domain.validation import (
    validate_allocations,
    validate_level_allocations,
)

logger = logging.getLogger(__name__)


class DistributionService:
    """Service for reading and saving users' distributions."""

    def __init__(self, db: Database):
        """Initialize distribution service.

        Args:
            db: Database instance
        """
        self.db = db
        self.categories = CategoryService(db)
        self.boards = BoardService(db)

    def get_distribution(self, board_id: int, user_id: str) -> Optional[Distribution]:
        """Get a user's distribution on a board, or None if never saved."""
        return self.db.get_distribution(board_id, user_id)

    def list_distributions(self, board_id: int) -> list[Distribution]:
        return self.db.list_distributions(board_id)

    def save_distribution_level(
        self,
        board_id: int,
        user_id: str,
        parent_id: Optional[int],
        allocations: Iterable[Allocation],
    ) -> Distribution:
        """Replace the allocations of one level, leaving other levels intact.

        Args:
            board_id: Board ID
            user_id: User ID
            parent_id: Parent of the level, None for the root level
            allocations: New allocations of that level; zeros are dropped

        Returns:
            The updated distribution

        Raises:
            InvalidPercentage, InvalidCategory, ParentMismatch,
            InvalidAllocationSum: Before anything is written
        """
        if parent_id == ROOT_KEY:
            parent_id = None
        allocations = list(allocations)
        tree = self.categories.get_tree(board_id)
        if parent_id is not None and parent_id not in tree:
            raise InvalidCategory(parent_id)

        validate_level_allocations(allocations, parent_id, tree).raise_for_error()

        level_ids = {cat.id for cat in tree.children_of(parent_id)}
        distribution = self.db.save_distribution_level(board_id, user_id, level_ids, allocations)
        logger.debug(
            "Saved level %s for board %s user %s",
            parent_id if parent_id is not None else ROOT_KEY,
            board_id,
            user_id,
        )
        return distribution

    def save_distribution(
        self, board_id: int, user_id: str, allocations: Iterable[Allocation]
    ) -> Distribution:
        """Replace a user's whole distribution.

        Raises:
            InvalidPercentage, InvalidCategory, InvalidAllocationSum: Before
                anything is written
        """
        allocations = list(allocations)
        tree = self.categories.get_tree(board_id)
        validate_allocations(allocations, tree).raise_for_error()
        return self.db.save_distribution(board_id, user_id, allocations)

    def effective_amounts(
        self, board_id: int, user_id: str, total_budget: Optional[float] = None
    ) -> dict[int, float]:
        """Effective amount of every category the user allocated to.

        Args:
            board_id: Board ID
            user_id: User ID
            total_budget: Budget to split; defaults to the user's allocation total
        """
        if total_budget is None:
            total_budget = self.boards.get_allocation_total(board_id, user_id)
        distribution = self.get_distribution(board_id, user_id)
        if distribution is None:
            return {}
        tree = self.categories.get_tree(board_id)
        return effective_amounts(distribution.as_map(), tree, total_budget)

    def open_session(
        self,
        board_id: int,
        user_id: str,
        save_delay: float = DEFAULT_SAVE_DELAY,
        scheduler: Optional[Scheduler] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
    ) -> AllocationSession:
        """Create and load an editing session for a board/user pair."""
        self.boards.require_board(board_id)
        session = AllocationSession(
            store=self,
            tree=self.categories.get_tree(board_id),
            board_id=board_id,
            user_id=user_id,
            save_delay=save_delay,
            scheduler=scheduler,
            on_error=on_error,
        )
        session.load()
        return session
