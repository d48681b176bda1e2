"""Category domain service."""

from typing import Optional

from splitboard.database.base import Database
from splitboard.domain.category_tree import CategoryTree
from splitboard.domain.entities import Category
from splitboard.domain.errors import InvalidCategory, NotFoundError, category_path_not_found


class CategoryService:
    """Service for managing a board's categories."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_category(
        self,
        board_id: int,
        name: str,
        parent_id: Optional[int] = None,
        parent_path: Optional[str] = None,
        description: str = "",
        color: str = "",
    ) -> int:
        """Create a category at the end of its level.

        Args:
            board_id: Board ID
            name: Category name
            parent_id: Optional parent category ID
            parent_path: Optional parent category path (e.g., "Healthcare"),
                used when parent_id is None
            description: Optional description
            color: Optional display color

        Returns:
            Category ID

        Raises:
            NotFoundError: If parent_path doesn't resolve
            InvalidCategory: If parent_id is not a category of the board
        """
        tree = self.get_tree(board_id)

        if parent_id is None and parent_path is not None:
            parent = tree.find_by_path(parent_path)
            if parent is None:
                raise NotFoundError(category_path_not_found(parent_path))
            parent_id = parent.id

        depth = 0
        if parent_id is not None:
            parent = tree.get(parent_id)
            if parent is None:
                raise InvalidCategory(parent_id, f"is not a category of board {board_id}")
            depth = parent.depth + 1

        siblings = tree.children_of(parent_id)
        order = max((c.order for c in siblings), default=-1) + 1

        return self.db.create_category(
            board_id=board_id,
            name=name,
            parent_id=parent_id,
            description=description,
            color=color,
            order=order,
            depth=depth,
        )

    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        return self.db.get_category(category_id)

    def list_categories(self, board_id: int) -> list[Category]:
        """List a board's categories ordered by depth, then order."""
        return self.db.list_categories(board_id)

    def get_tree(self, board_id: int) -> CategoryTree:
        """Snapshot of a board's category tree."""
        return CategoryTree(self.db.list_categories(board_id))

    def get_category_by_path(self, board_id: int, path: str) -> Optional[Category]:
        """Get category by path (e.g., "Healthcare > Medicare")."""
        return self.get_tree(board_id).find_by_path(path)

    def delete_category(self, board_id: int, category_id: int) -> set[int]:
        """Delete a category, its subtree and every allocation to them.

        Returns:
            IDs of the deleted categories

        Raises:
            InvalidCategory: If the category is not on the board
        """
        tree = self.get_tree(board_id)
        if category_id not in tree:
            raise InvalidCategory(category_id)
        removed = tree.descendant_ids(category_id)
        self.db.delete_categories(removed)
        return removed
