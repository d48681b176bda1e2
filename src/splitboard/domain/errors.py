"""Shared domain error messages and error types."""

from typing import Union


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity or path does not exist."""


class InvalidPercentage(ValidationError):
    """Percentage outside of [0, 100]."""

    def __init__(self, category_id: int, percentage: float):
        self.category_id = category_id
        self.percentage = percentage
        super().__init__(
            f"Percentage for category {category_id} must be between 0 and 100, "
            f"got {percentage}"
        )


class InvalidCategory(ValidationError):
    """Dangling or unknown category reference."""

    def __init__(self, category_id: object, reason: str = "not found"):
        self.category_id = category_id
        super().__init__(f"Category {category_id} {reason}")


class InvalidAllocationSum(ValidationError):
    """A level's allocations do not sum to 100%."""

    def __init__(self, parent_key: Union[int, str], observed_sum: float):
        self.parent_key = parent_key
        self.observed_sum = observed_sum
        super().__init__(
            f"Allocations under '{parent_key}' must sum to 100%, got {observed_sum:g}%"
        )


class ParentMismatch(ValidationError):
    """Level-scoped save given a category from another level."""

    def __init__(self, category_id: int, expected_parent_id, actual_parent_id):
        self.category_id = category_id
        self.expected_parent_id = expected_parent_id
        self.actual_parent_id = actual_parent_id
        super().__init__(
            f"Category {category_id} belongs to parent {actual_parent_id}, "
            f"not {expected_parent_id}"
        )


class InvalidRange(ValidationError):
    """Board budget range or participant total out of bounds."""


class SessionClosedError(DomainError):
    """Edit attempted on a session that was torn down."""


def board_not_found(board_id: int) -> str:
    """Return message for missing board."""
    return f"Board {board_id} not found"


def category_path_not_found(path: str) -> str:
    """Return message for missing category by path."""
    return f"Category '{path}' not found"
