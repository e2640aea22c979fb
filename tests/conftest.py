"""Shared pytest fixtures for ledgerkit tests."""

import tempfile
import os
from pathlib import Path
import pytest

from ledgerkit.database.factories import create_sqlite_database
from ledgerkit.domain.account import AccountService
from ledgerkit.domain.balance import BalanceService
from ledgerkit.domain.entities import ImporterKind, InstrumentKind
from ledgerkit.domain.event import EventService
from ledgerkit.domain.importer import ImportService
from ledgerkit.domain.instrument import InstrumentService
from ledgerkit.domain.ledger import LedgerWriter
from ledgerkit.domain.user import UserService


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
def user_service(temp_db):
    """Create a UserService with a temporary database."""
    return UserService(temp_db)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def instrument_service(temp_db):
    """Create an InstrumentService with a temporary database."""
    return InstrumentService(temp_db)


@pytest.fixture
def import_service(temp_db):
    """Create an ImportService with a temporary database."""
    return ImportService(temp_db)


@pytest.fixture
def event_service(temp_db):
    """Create an EventService with a temporary database."""
    return EventService(temp_db)


@pytest.fixture
def balance_service(temp_db):
    """Create a BalanceService with a temporary database."""
    return BalanceService(temp_db)


@pytest.fixture
def ledger_writer(temp_db):
    """Create a LedgerWriter with a temporary database."""
    return LedgerWriter(temp_db)


@pytest.fixture
def sample_user(user_service):
    """Create a sample user for testing."""
    user_id = user_service.create_user("alice")
    return user_service.get_user(user_id)


@pytest.fixture
def other_user(user_service):
    """A second user who must never see alice's data."""
    user_id = user_service.create_user("bob")
    return user_service.get_user(user_id)


@pytest.fixture
def sample_account(account_service, sample_user):
    """Create a sample CommBank account for testing."""
    account_id = account_service.create_account(
        user_id=sample_user.id,
        name="Everyday",
        importer=ImporterKind.COMMBANK_CSV,
        cash_instrument_code="AUD",
    )
    return account_service.get_account(account_id)


@pytest.fixture
def canonical_account(account_service, sample_user):
    """Create an account fed with canonical CSV files."""
    account_id = account_service.create_account(
        user_id=sample_user.id,
        name="Ledger",
        importer=ImporterKind.CANONICAL_CSV,
        cash_instrument_code="AUD",
    )
    return account_service.get_account(account_id)


@pytest.fixture
def sample_instruments(instrument_service, sample_user):
    """Create user-wide AUD, USD and JPY instruments."""
    ids = {
        "AUD": instrument_service.create_instrument(sample_user.id, "AUD", InstrumentKind.FIAT, 2),
        "USD": instrument_service.create_instrument(sample_user.id, "USD", InstrumentKind.FIAT, 2),
        "JPY": instrument_service.create_instrument(sample_user.id, "JPY", InstrumentKind.FIAT, 0),
    }
    return {code: instrument_service.get_instrument(i) for code, i in ids.items()}


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
