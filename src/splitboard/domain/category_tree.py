"""Read-only structural queries over a board's category snapshot."""

from typing import Iterable, Iterator, Optional

from splitboard.domain.entities import ROOT_KEY, Category, ParentKey
from splitboard.domain.errors import InvalidCategory


class CategoryTree:
    """Category forest built from a flat list of category records.

    The tree never mutates the records it is given. Parent links are treated
    as untrusted: every upward walk carries a visited set and fails closed on
    a cycle or a dangling parent.
    """

    def __init__(self, categories: Iterable[Category]):
        self._by_id: dict[int, Category] = {}
        self._children: dict[Optional[int], list[Category]] = {}
        for cat in categories:
            self._by_id[cat.id] = cat
        for cat in self._by_id.values():
            self._children.setdefault(cat.parent_id, []).append(cat)
        for siblings in self._children.values():
            siblings.sort(key=lambda c: (c.order, c.id))

    def __contains__(self, category_id: object) -> bool:
        return category_id in self._by_id

    def __iter__(self) -> Iterator[Category]:
        return iter(self._by_id.values())

    def __len__(self) -> int:
        return len(self._by_id)

    def get(self, category_id: int) -> Optional[Category]:
        """Get category by ID, or None."""
        return self._by_id.get(category_id)

    def children_of(self, parent_id: Optional[int]) -> list[Category]:
        """Return direct children sorted by order; ``None`` returns the roots."""
        if parent_id == ROOT_KEY:
            parent_id = None
        return list(self._children.get(parent_id, []))

    def roots(self) -> list[Category]:
        return self.children_of(None)

    def siblings_of(self, category_id: int) -> list[Category]:
        """Return the level a category belongs to, itself included."""
        cat = self._by_id.get(category_id)
        if cat is None:
            return []
        return self.children_of(cat.parent_id)

    def has_children(self, category_id: int) -> bool:
        return bool(self._children.get(category_id))

    def is_leaf(self, category_id: int) -> bool:
        return category_id in self._by_id and not self.has_children(category_id)

    def level_key(self, category_id: int) -> ParentKey:
        """Return the parent ID of a category, or ``ROOT_KEY`` for roots."""
        cat = self._by_id.get(category_id)
        if cat is None:
            raise InvalidCategory(category_id)
        return cat.parent_key

    def ancestry(self, category_id: int) -> list[Category]:
        """Return the chain from ``category_id`` up to its root.

        Raises:
            InvalidCategory: If the category is unknown, a parent link
                dangles, or the chain loops back on itself.
        """
        chain: list[Category] = []
        visited: set[int] = set()
        current_id: Optional[int] = category_id
        while current_id is not None:
            if current_id in visited:
                raise InvalidCategory(category_id, "has a cyclic parent chain")
            visited.add(current_id)
            cat = self._by_id.get(current_id)
            if cat is None:
                if current_id == category_id:
                    raise InvalidCategory(category_id)
                raise InvalidCategory(category_id, f"has missing ancestor {current_id}")
            chain.append(cat)
            current_id = cat.parent_id
        return chain

    def path_to(self, category_id: int) -> list[Category]:
        """Return categories from root to target inclusive.

        Empty when the category is unknown or its ancestry is malformed.
        """
        try:
            chain = self.ancestry(category_id)
        except InvalidCategory:
            return []
        chain.reverse()
        return chain

    def root_of(self, category_id: int) -> int:
        """Return the ID of the top-most ancestor of a category."""
        return self.ancestry(category_id)[-1].id

    def descendant_ids(self, category_id: int) -> set[int]:
        """Return IDs of a category and everything below it."""
        result: set[int] = set()
        stack = [category_id]
        while stack:
            current = stack.pop()
            if current in result:
                continue
            result.add(current)
            stack.extend(child.id for child in self._children.get(current, []))
        return result

    def visible(self, allowed_root_ids: Iterable[int]) -> "CategoryTree":
        """Restrict the tree to the subtrees of the given roots.

        An empty selection means every root is allowed. Categories whose root
        cannot be resolved are dropped.
        """
        allowed = set(allowed_root_ids)
        if not allowed:
            return self

        kept = []
        for cat in self._by_id.values():
            try:
                root_id = self.root_of(cat.id)
            except InvalidCategory:
                continue
            if root_id in allowed:
                kept.append(cat)
        return CategoryTree(kept)

    def format_path(self, category_id: int) -> str:
        """Get full path for a category (e.g., "Healthcare > Medicare")."""
        return " > ".join(cat.name for cat in self.path_to(category_id))

    def find_by_path(self, path: str) -> Optional[Category]:
        """Find a category by path (e.g., 'Healthcare > Medicare')."""
        parts = [p.strip() for p in path.split(">")]
        current: Optional[Category] = None
        for part in parts:
            parent_id = current.id if current is not None else None
            current = next(
                (c for c in self.children_of(parent_id) if c.name == part), None
            )
            if current is None:
                return None
        return current

    def as_nested(self, parent_id: Optional[int] = None) -> list[dict]:
        """Return the forest as nested dicts with 'children' lists."""
        return [
            {
                "id": cat.id,
                "name": cat.name,
                "parent_id": cat.parent_id,
                "depth": cat.depth,
                "order": cat.order,
                "children": self.as_nested(cat.id),
            }
            for cat in self.children_of(parent_id)
        ]
