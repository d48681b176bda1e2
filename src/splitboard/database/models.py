"""SQLAlchemy models for splitboard database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    Float,
    ForeignKey,
    DateTime,
    UniqueConstraint,
    create_engine,
    event,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(UTC)


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """Enforce foreign keys on SQLite connections."""
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


class Board(Base):
    """Board model holding display and budget range settings."""

    __tablename__ = "boards"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(String, default="", nullable=False)
    unit = Column(String, default="USD", nullable=False)
    symbol = Column(String, default="$", nullable=False)
    symbol_position = Column(String, default="prefix", nullable=False)
    min_allocation = Column(Float, default=0, nullable=False)
    max_allocation = Column(Float, default=0, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    categories = relationship("Category", back_populates="board", cascade="all, delete-orphan")
    distributions = relationship("Distribution", back_populates="board", cascade="all, delete-orphan")
    participants = relationship("Participant", back_populates="board", cascade="all, delete-orphan")


class Participant(Base):
    """Per-user budget preference on a board."""

    __tablename__ = "participants"

    id = Column(Integer, primary_key=True)
    board_id = Column(Integer, ForeignKey("boards.id"), nullable=False)
    user_id = Column(String, nullable=False)
    allocation_total = Column(Float, default=100, nullable=False)

    __table_args__ = (UniqueConstraint("board_id", "user_id", name="uq_participant_board_user"),)

    # Relationships
    board = relationship("Board", back_populates="participants")


class Category(Base):
    """Category model with hierarchical structure."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    board_id = Column(Integer, ForeignKey("boards.id"), nullable=False)
    name = Column(String, nullable=False)
    description = Column(String, default="", nullable=False)
    color = Column(String, default="", nullable=False)
    order = Column("sort_order", Integer, default=0, nullable=False)
    parent_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    depth = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    board = relationship("Board", back_populates="categories")
    parent = relationship("Category", remote_side=[id], backref="children")


class Distribution(Base):
    """One user's saved allocations on one board."""

    __tablename__ = "distributions"

    id = Column(Integer, primary_key=True)
    board_id = Column(Integer, ForeignKey("boards.id"), nullable=False)
    user_id = Column(String, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("board_id", "user_id", name="uq_distribution_board_user"),)

    # Relationships
    board = relationship("Board", back_populates="distributions")
    allocations = relationship(
        "AllocationEntry", back_populates="distribution", cascade="all, delete-orphan"
    )


class AllocationEntry(Base):
    """Single category percentage inside a distribution."""

    __tablename__ = "allocations"

    id = Column(Integer, primary_key=True)
    distribution_id = Column(Integer, ForeignKey("distributions.id"), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    percentage = Column(Float, nullable=False)

    __table_args__ = (
        UniqueConstraint("distribution_id", "category_id", name="uq_distribution_category"),
    )

    # Relationships
    distribution = relationship("Distribution", back_populates="allocations")
    category = relationship("Category")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
