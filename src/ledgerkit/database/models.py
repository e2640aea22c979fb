"""SQLAlchemy models for ledgerkit database."""

from datetime import datetime, UTC
from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    JSON,
    String,
    UniqueConstraint,
    create_engine,
    event as sa_event,
    func,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

from ledgerkit.domain.entities import EventType, ImporterKind, InstrumentKind

Base = declarative_base()


def _enum_column(enum_cls):
    """Store enum values (not names) as plain strings."""
    return Enum(
        enum_cls,
        native_enum=False,
        length=32,
        values_callable=lambda members: [m.value for m in members],
    )


def _now():
    return datetime.now(UTC)


class User(Base):
    """Owner of all scoped data."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_now, nullable=False)

    accounts = relationship("Account", back_populates="user")


class Account(Base):
    """Bank or brokerage account model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    name = Column(String, nullable=False)
    importer = Column(_enum_column(ImporterKind), nullable=False)
    cash_instrument_code = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_now, nullable=False)

    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_accounts_user_name"),)

    user = relationship("User", back_populates="accounts")
    events = relationship("Event", back_populates="account")


class Instrument(Base):
    """Instrument model. ``account_id`` is set for account-scoped instruments."""

    __tablename__ = "instruments"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    code = Column(String, nullable=False)
    kind = Column(_enum_column(InstrumentKind), nullable=False)
    minor_unit = Column(Integer, nullable=False)
    name = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_now, nullable=False)

    # One code per scope. A NULL account_id is the user-wide scope.
    __table_args__ = (
        Index(
            "uq_instruments_scope_code",
            user_id,
            func.coalesce(account_id, 0),
            func.upper(code),
            unique=True,
        ),
    )


class Category(Base):
    """Category model with hierarchical structure."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    name = Column(String, nullable=False)
    parent_id = Column(Integer, ForeignKey("categories.id"), nullable=True)

    parent = relationship("Category", remote_side=[id], backref="children")


class ImportRun(Base):
    """Audit record for one batch import."""

    __tablename__ = "import_runs"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    filename = Column(String, nullable=False)
    imported_count = Column(Integer, default=0, nullable=False)
    skipped_count = Column(Integer, default=0, nullable=False)
    restored_count = Column(Integer, default=0, nullable=False)
    error_count = Column(Integer, default=0, nullable=False)
    skipped_keys = Column(JSON, default=list, nullable=False)
    errors = Column(JSON, default=list, nullable=False)
    restore_deleted = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_now, nullable=False)

    events = relationship("Event", back_populates="import_run")


class Event(Base):
    """Ledger event model."""

    __tablename__ = "events"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    event_type = Column(_enum_column(EventType), nullable=False)
    effective_at = Column(DateTime(timezone=True), nullable=False)
    posted_at = Column(DateTime(timezone=True), nullable=True)
    description = Column(String, nullable=False)
    external_id = Column(String, nullable=True)
    dedupe_key = Column(String, nullable=False)
    import_run_id = Column(Integer, ForeignKey("import_runs.id"), nullable=True, index=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    meta = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_now, nullable=False)

    # Globally unique: the storage layer is the arbiter of duplicate imports
    __table_args__ = (UniqueConstraint("dedupe_key", name="uq_events_dedupe_key"),)

    account = relationship("Account", back_populates="events")
    import_run = relationship("ImportRun", back_populates="events")
    legs = relationship("Leg", back_populates="event", order_by="Leg.id")


class Leg(Base):
    """Signed money movement in minor units."""

    __tablename__ = "legs"

    id = Column(Integer, primary_key=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    instrument_id = Column(Integer, ForeignKey("instruments.id"), nullable=False)
    amount_minor = Column(BigInteger, nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    description = Column(String, nullable=True)

    event = relationship("Event", back_populates="legs")
    instrument = relationship("Instrument")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()


def create_engine_for_url(database_url: str) -> Engine:
    """Create an engine, enforcing foreign keys on SQLite."""
    engine = create_engine(database_url, echo=False)
    if engine.dialect.name == "sqlite":
        sa_event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine_for_url(database_url)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
