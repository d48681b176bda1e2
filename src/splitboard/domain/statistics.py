"""Statistics domain service."""

from typing import Optional, Union

from splitboard.database.base import Database
from splitboard.domain.aggregation import aggregate, response_rate
from splitboard.domain.board import BoardService
from splitboard.domain.category import CategoryService
from splitboard.domain.entities import AggregateRow, StatisticsRow

SORT_BY_AMOUNT = "amount"
SORT_BY_COVERAGE = "coverage"


class StatisticsService:
    """Service for building cross-user allocation statistics."""

    def __init__(self, db: Database):
        """Initialize statistics service.

        Args:
            db: Database instance
        """
        self.db = db
        self.boards = BoardService(db)
        self.categories = CategoryService(db)

    def get_aggregates(
        self, board_id: int, scope_parent_id: Union[int, str, None] = None
    ) -> list[AggregateRow]:
        """Aggregate every saved distribution of a board.

        Args:
            board_id: Board ID
            scope_parent_id: Restrict to one level (``ROOT_KEY`` for the roots)
        """
        self.boards.require_board(board_id)
        return aggregate(
            self.db.list_distributions(board_id),
            tree=self.categories.get_tree(board_id),
            scope_parent_id=scope_parent_id,
            budgets=self.boards.list_allocation_totals(board_id),
            default_budget=self.boards.default_allocation_total(board_id),
        )

    def participant_count(self, board_id: int) -> int:
        """Number of users who saved a distribution or set a budget."""
        users = {d.user_id for d in self.db.list_distributions(board_id)}
        users.update(self.db.list_allocation_totals(board_id))
        return len(users)

    def build_rows(
        self,
        board_id: int,
        scope_parent_id: Union[int, str, None] = None,
        sort_by: str = SORT_BY_AMOUNT,
        participant_count: Optional[int] = None,
    ) -> list[StatisticsRow]:
        """Build display rows with names, colors and response rates.

        Rows are sorted by average amount, or by response rate when
        ``sort_by`` is ``"coverage"``; ties break on category name.
        """
        if participant_count is None:
            participant_count = self.participant_count(board_id)
        tree = self.categories.get_tree(board_id)

        rows = []
        for agg in self.get_aggregates(board_id, scope_parent_id):
            category = tree.get(agg.category_id)
            rows.append(
                StatisticsRow(
                    category_id=agg.category_id,
                    name=category.name if category else "Unknown",
                    color=category.color if category else "",
                    average_percentage=agg.average_percentage,
                    average_amount=agg.average_amount,
                    total_amount=agg.total_amount,
                    total_responses=agg.total_responses,
                    response_rate=response_rate(agg, participant_count),
                )
            )

        if sort_by == SORT_BY_COVERAGE:
            rows.sort(key=lambda r: (-r.response_rate, r.name))
        else:
            rows.sort(key=lambda r: (-r.average_amount, r.name))
        return rows
