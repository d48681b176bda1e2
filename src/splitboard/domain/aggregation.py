"""Cross-user aggregation of saved distributions."""

from typing import Iterable, Mapping, Optional, Union

from splitboard.domain.amounts import round2
from splitboard.domain.category_tree import CategoryTree
from splitboard.domain.entities import ROOT_KEY, AggregateRow, Distribution

DEFAULT_BUDGET = 100.0


def scope_category_ids(
    tree: CategoryTree, scope_parent_id: Union[int, str, None]
) -> Optional[set[int]]:
    """Return IDs in scope, or None when every category is in scope."""
    if scope_parent_id is None:
        return None
    parent_id = None if scope_parent_id == ROOT_KEY else scope_parent_id
    return {cat.id for cat in tree.children_of(parent_id)}


def aggregate(
    distributions: Iterable[Distribution],
    tree: Optional[CategoryTree] = None,
    scope_parent_id: Union[int, str, None] = None,
    budgets: Optional[Mapping[str, float]] = None,
    default_budget: float = DEFAULT_BUDGET,
) -> list[AggregateRow]:
    """Combine distributions into per-category statistics.

    Args:
        distributions: Snapshot of saved distributions for one board
        tree: Category tree; required when ``scope_parent_id`` is given
        scope_parent_id: Restrict to the children of this category, to the
            roots for ``ROOT_KEY``, or to nothing in particular for None
        budgets: Per-user total budget used for amounts
        default_budget: Budget for users missing from ``budgets``

    Returns:
        One row per category with at least one response, in first-seen order.
        Categories nobody allocated to are omitted.
    """
    in_scope: Optional[set[int]] = None
    if scope_parent_id is not None:
        if tree is None:
            raise ValueError("A category tree is required to scope aggregation")
        in_scope = scope_category_ids(tree, scope_parent_id)

    budgets = budgets or {}
    buckets: dict[int, dict[str, float]] = {}

    for distribution in distributions:
        budget = budgets.get(distribution.user_id, default_budget)
        for allocation in distribution.allocations:
            if in_scope is not None and allocation.category_id not in in_scope:
                continue
            bucket = buckets.setdefault(
                allocation.category_id, {"sum": 0.0, "count": 0, "amount": 0.0}
            )
            bucket["sum"] += allocation.percentage
            bucket["count"] += 1
            bucket["amount"] += allocation.percentage / 100 * budget

    return [
        AggregateRow(
            category_id=category_id,
            average_percentage=round2(data["sum"] / data["count"]),
            average_amount=round2(data["amount"] / data["count"]),
            total_amount=round2(data["amount"]),
            total_responses=int(data["count"]),
        )
        for category_id, data in buckets.items()
    ]


def response_rate(row: AggregateRow, participant_count: int) -> float:
    """Fraction of participants who allocated to the row's category."""
    if participant_count <= 0:
        return 0.0
    return row.total_responses / participant_count
