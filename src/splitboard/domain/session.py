"""Per-user, per-board editing state with debounced level saves.

An ``AllocationSession`` is the single in-memory source of truth for a user's
unsaved edits on one board. Edits land in a sparse map (absent means 0%).
After ``save_delay`` seconds without further edits, the session saves the
level that was edited last, provided that level sums to 100%.
"""

import logging
import threading
from enum import Enum
from typing import Callable, Iterable, Optional, Protocol

from splitboard.domain.category_tree import CategoryTree
from splitboard.domain.entities import (
    ROOT_KEY,
    Allocation,
    Category,
    Distribution,
    ParentKey,
)
from splitboard.domain.errors import (
    InvalidCategory,
    InvalidPercentage,
    SessionClosedError,
)
from splitboard.domain.validation import SUM_TOLERANCE, sums_to_hundred

logger = logging.getLogger(__name__)

DEFAULT_SAVE_DELAY = 0.3


class Cancellable(Protocol):
    def cancel(self) -> None: ...


Scheduler = Callable[[float, Callable[[], None]], Cancellable]


class DistributionStore(Protocol):
    def get_distribution(self, board_id: int, user_id: str) -> Optional[Distribution]: ...

    def save_distribution_level(
        self,
        board_id: int,
        user_id: str,
        parent_id: Optional[int],
        allocations: list[Allocation],
    ) -> Distribution: ...


class SessionState(str, Enum):
    """Lifecycle of unsaved edits."""

    IDLE = "idle"
    PENDING_SAVE = "pending_save"
    SAVING = "saving"


def thread_timer(delay: float, callback: Callable[[], None]) -> threading.Timer:
    """Run ``callback`` once on a daemon thread after ``delay`` seconds."""
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
    return timer


class AllocationSession:
    """Editing session for one ``(board_id, user_id)`` pair."""

    def __init__(
        self,
        store: DistributionStore,
        tree: CategoryTree,
        board_id: int,
        user_id: str,
        save_delay: float = DEFAULT_SAVE_DELAY,
        scheduler: Optional[Scheduler] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
    ):
        """Initialize an allocation session.

        Args:
            store: Source of the saved distribution and target of level saves
            tree: Category tree of the board
            board_id: Board being edited
            user_id: User editing
            save_delay: Quiescence window in seconds
            scheduler: Factory for cancellable delayed calls (default: threads)
            on_error: Called with the exception when a save fails
        """
        self.store = store
        self.tree = tree
        self.board_id = board_id
        self.user_id = user_id
        self.save_delay = save_delay
        self.on_error = on_error
        self.last_error: Optional[Exception] = None
        self._scheduler = scheduler or thread_timer
        self._lock = threading.RLock()
        self._idle = threading.Condition(self._lock)
        self._allocations: dict[int, float] = {}
        self._timer: Optional[Cancellable] = None
        self._generation = 0
        self._pending_level: Optional[ParentKey] = None
        self._saving = False
        self._saving_thread: Optional[int] = None
        self._queued = False
        self._closed = False
        # Edit counters; equal when the last edit has been saved
        self._edits = 0
        self._saved_edits = 0

    def __enter__(self) -> "AllocationSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def state(self) -> SessionState:
        with self._lock:
            if self._saving:
                return SessionState.SAVING
            if self._timer is not None:
                return SessionState.PENDING_SAVE
            return SessionState.IDLE

    @property
    def allocations(self) -> dict[int, float]:
        """Copy of the current sparse allocation map."""
        with self._lock:
            return dict(self._allocations)

    def get(self, category_id: int) -> float:
        with self._lock:
            return self._allocations.get(category_id, 0.0)

    def load(self) -> None:
        """Rebuild local state from the saved distribution.

        Any pending save is dropped.
        """
        distribution = self.store.get_distribution(self.board_id, self.user_id)
        with self._lock:
            self._cancel_timer()
            self._pending_level = None
            self._allocations = distribution.as_map() if distribution else {}
            self._saved_edits = self._edits
        logger.debug(
            "Loaded %d allocations for board %s user %s",
            len(self._allocations),
            self.board_id,
            self.user_id,
        )

    def reset(self, board_id: int, user_id: str, tree: Optional[CategoryTree] = None) -> None:
        """Switch to another board/user pair without flushing pending edits."""
        with self._lock:
            self._cancel_timer()
            self._pending_level = None
            self._queued = False
            self.board_id = board_id
            self.user_id = user_id
            if tree is not None:
                self.tree = tree
            self._allocations = {}
        self.load()

    def close(self) -> None:
        """Tear down; a pending save is cancelled, never flushed."""
        with self._lock:
            if self._timer is not None:
                logger.debug("Dropping unsaved edits for board %s", self.board_id)
            self._cancel_timer()
            self._pending_level = None
            self._queued = False
            self._closed = True

    def set_allocation(self, category_id: int, value: float) -> None:
        """Record an edit and (re)start the save timer.

        No clamping happens here; callers bound ``value`` with
        ``calculate_max``. A value of 0 removes the category from the map.

        Raises:
            InvalidPercentage: If value is outside [0, 100]
            InvalidCategory: If the category is not on the board
            SessionClosedError: If the session was closed
        """
        if not 0 <= value <= 100:
            raise InvalidPercentage(category_id, value)
        category = self.tree.get(category_id)
        if category is None:
            raise InvalidCategory(category_id)

        with self._lock:
            if self._closed:
                raise SessionClosedError("Allocation session is closed")
            if value == 0:
                self._allocations.pop(category_id, None)
            else:
                self._allocations[category_id] = value
            self._edits += 1
            self._pending_level = category.parent_key
            self._restart_timer()

    def calculate_max(
        self, category_id: int, level_categories: Optional[Iterable[Category]] = None
    ) -> float:
        """Return the most ``category_id`` can take given the rest of its level."""
        if level_categories is None:
            level_categories = self.tree.siblings_of(category_id)
        with self._lock:
            others = sum(
                self._allocations.get(cat.id, 0)
                for cat in level_categories
                if cat.id != category_id
            )
        return 100 - others

    def total_allocated(self, level_categories: Iterable[Category]) -> float:
        """Sum of stored percentages over a level; may exceed 100."""
        with self._lock:
            return sum(self._allocations.get(cat.id, 0) for cat in level_categories)

    def is_fully_allocated(self, level_categories: Iterable[Category]) -> bool:
        return self.total_allocated(level_categories) >= 100 - SUM_TOLERANCE

    def level_allocations(self, parent_id: Optional[int]) -> list[Allocation]:
        """Non-zero allocations of one level, in category order."""
        with self._lock:
            return [
                Allocation(category_id=cat.id, percentage=self._allocations[cat.id])
                for cat in self.tree.children_of(parent_id)
                if self._allocations.get(cat.id, 0) > 0
            ]

    @property
    def is_saved(self) -> bool:
        """True once the latest edit has been persisted."""
        with self._lock:
            return self._saved_edits == self._edits

    def flush(self) -> bool:
        """Run the pending commit now instead of waiting for the timer.

        A save already running on another thread is waited for first, so
        nothing is in flight when this returns.

        Returns:
            True if the latest edit is persisted
        """
        with self._lock:
            self._cancel_timer()
            self._wait_idle()
        self._commit()
        with self._lock:
            self._wait_idle()
            return self._saved_edits == self._edits

    def _wait_idle(self) -> None:
        # A store calling back into the session must not wait on itself
        while self._saving and self._saving_thread != threading.get_ident():
            self._idle.wait()

    def _cancel_timer(self) -> None:
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _restart_timer(self) -> None:
        self._cancel_timer()
        generation = self._generation
        self._timer = self._scheduler(self.save_delay, lambda: self._on_timer(generation))

    def _on_timer(self, generation: int) -> None:
        with self._lock:
            # A cancelled timer may still fire once it is past cancel()
            if generation != self._generation or self._closed:
                return
            self._timer = None
        self._commit()

    def _commit(self) -> bool:
        with self._lock:
            if self._pending_level is None or self._closed:
                return False
            if self._saving:
                self._queued = True
                return False

            level = self._pending_level
            self._pending_level = None
            parent_id = None if level == ROOT_KEY else level
            payload = self.level_allocations(parent_id)
            total = sum(a.percentage for a in payload)
            if not sums_to_hundred(total):
                logger.debug("Level %s sums to %s, not saving", level, total)
                return False
            self._saving = True
            self._saving_thread = threading.get_ident()
            board_id, user_id = self.board_id, self.user_id
            edits = self._edits

        try:
            self.store.save_distribution_level(board_id, user_id, parent_id, payload)
            with self._lock:
                self._saved_edits = max(self._saved_edits, edits)
            logger.info(
                "Saved %d allocations under %s for board %s user %s",
                len(payload),
                level,
                board_id,
                user_id,
            )
        except Exception as e:
            logger.exception("Saving level %s for board %s failed", level, board_id)
            self.last_error = e
            if self.on_error is not None:
                self.on_error(e)
        finally:
            with self._lock:
                self._saving = False
                self._saving_thread = None
                rerun = self._queued and self._timer is None and not self._closed
                self._queued = False
                if not rerun:
                    self._idle.notify_all()

        if rerun:
            self._commit()
            with self._lock:
                self._idle.notify_all()
        return True
