"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic so the allocation engine never sees
ORM objects.
"""

from splitboard.domain import entities as domain
from splitboard.database.models import (
    Board as ORMBoard,
    Category as ORMCategory,
    Distribution as ORMDistribution,
)


def board_to_domain(orm_board: ORMBoard) -> domain.Board:
    """Convert SQLAlchemy Board model to domain Board entity."""
    return domain.Board(
        id=orm_board.id,
        name=orm_board.name,
        description=orm_board.description,
        settings=domain.BoardSettings(
            unit=orm_board.unit,
            symbol=orm_board.symbol,
            symbol_position=domain.SymbolPosition(orm_board.symbol_position),
            min_allocation=orm_board.min_allocation,
            max_allocation=orm_board.max_allocation,
        ),
        created_at=orm_board.created_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        parent_id=orm_category.parent_id,
        depth=orm_category.depth,
        order=orm_category.order,
        description=orm_category.description,
        color=orm_category.color,
        board_id=orm_category.board_id,
        created_at=orm_category.created_at,
    )


def distribution_to_domain(orm_distribution: ORMDistribution) -> domain.Distribution:
    """Convert SQLAlchemy Distribution model to domain Distribution entity."""
    entries = sorted(orm_distribution.allocations, key=lambda e: e.category_id)
    return domain.Distribution(
        board_id=orm_distribution.board_id,
        user_id=orm_distribution.user_id,
        allocations=tuple(
            domain.Allocation(category_id=e.category_id, percentage=e.percentage)
            for e in entries
        ),
        created_at=orm_distribution.created_at,
        updated_at=orm_distribution.updated_at,
    )
