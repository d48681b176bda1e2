"""Shared pytest fixtures for splitboard tests."""

import tempfile
import os
import pytest

from splitboard.database.factories import create_sqlite_database
from splitboard.domain.board import BoardService
from splitboard.domain.category import CategoryService
from splitboard.domain.distribution import DistributionService
from splitboard.domain.statistics import StatisticsService
from splitboard.domain.category_tree import CategoryTree
from splitboard.domain.entities import Category, Distribution


class ManualHandle:
    """Delayed call that only runs when the test fires it."""

    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Scheduler stand-in that lets tests decide when time passes."""

    def __init__(self):
        self.handles = []

    def __call__(self, delay, callback):
        handle = ManualHandle(delay, callback)
        self.handles.append(handle)
        return handle

    @property
    def active(self):
        return [h for h in self.handles if not h.cancelled]

    def fire(self):
        """Run every delayed call that was not cancelled."""
        handles, self.handles = self.handles, []
        for handle in handles:
            if not handle.cancelled:
                handle.callback()


class RecordingStore:
    """In-memory distribution store that records level saves."""

    def __init__(self, distribution=None, error=None):
        self.distribution = distribution
        self.error = error
        self.saves = []

    def get_distribution(self, board_id, user_id):
        return self.distribution

    def save_distribution_level(self, board_id, user_id, parent_id, allocations):
        self.saves.append((board_id, user_id, parent_id, list(allocations)))
        if self.error is not None:
            raise self.error
        return Distribution(board_id=board_id, user_id=user_id, allocations=tuple(allocations))


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def board_service(temp_db):
    """Create a BoardService with a temporary database."""
    return BoardService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def distribution_service(temp_db):
    """Create a DistributionService with a temporary database."""
    return DistributionService(temp_db)


@pytest.fixture
def statistics_service(temp_db):
    """Create a StatisticsService with a temporary database."""
    return StatisticsService(temp_db)


@pytest.fixture
def sample_board(board_service):
    """Create a sample board for testing."""
    board_id = board_service.create_board(name="City Budget", description="Where taxes go")
    return board_service.get_board(board_id)


@pytest.fixture
def sample_categories(category_service, sample_board):
    """Create a small category tree and return IDs by path.

    Healthcare > Medicare, Medicaid
    Education > K-12, Higher Education
    Defense
    """
    ids = {}
    for name in ["Healthcare", "Education", "Defense"]:
        ids[name] = category_service.create_category(board_id=sample_board.id, name=name)
    for parent, children in [
        ("Healthcare", ["Medicare", "Medicaid"]),
        ("Education", ["K-12", "Higher Education"]),
    ]:
        for name in children:
            ids[f"{parent} > {name}"] = category_service.create_category(
                board_id=sample_board.id, name=name, parent_id=ids[parent]
            )
    return ids


@pytest.fixture
def scheduler():
    """Manual scheduler for debounce tests."""
    return ManualScheduler()


@pytest.fixture
def simple_tree():
    """Root A with children C1, C2, plus a second root B."""
    return CategoryTree(
        [
            Category(id=1, name="A", order=0),
            Category(id=2, name="B", order=1),
            Category(id=3, name="C1", parent_id=1, depth=1, order=0),
            Category(id=4, name="C2", parent_id=1, depth=1, order=1),
        ]
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
