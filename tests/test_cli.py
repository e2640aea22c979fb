"""Tests for the command line interface."""

import pytest
from ledgerkit.cli.main import cli


@pytest.fixture
def run_cli(cli_runner, temp_db, monkeypatch):
    """Invoke the CLI against the temporary database as alice."""
    monkeypatch.delenv("LEDGERKIT_USER", raising=False)

    def invoke(*args, user="alice", input=None):
        base = ["--db-path", temp_db.database_path]
        if user is not None:
            base += ["--user", user]
        return cli_runner.invoke(cli, base + list(args), input=input)

    return invoke


@pytest.fixture
def statement(fixtures_dir):
    return str(fixtures_dir / "commbank_statement.csv")


def test_user_create_and_list(run_cli):
    result = run_cli("user", "create", "carol", user=None)
    assert result.exit_code == 0
    assert "Created user 'carol' (ID: 1)" in result.output

    result = run_cli("user", "list", user=None)
    assert result.exit_code == 0
    assert "carol" in result.output


def test_account_create_and_list(run_cli, sample_user):
    result = run_cli("account", "create", "Savings", "--importer", "wise_csv", "--cash-instrument", "aud")
    assert result.exit_code == 0
    assert "Created account 'Savings'" in result.output

    result = run_cli("account", "list")
    assert result.exit_code == 0
    assert "Savings" in result.output
    assert "wise_csv" in result.output


def test_account_create_rejects_unknown_importer(run_cli, sample_user):
    result = run_cli("account", "create", "Savings", "--importer", "ofx")
    assert result.exit_code == 2


def test_command_without_user_fails(run_cli, sample_user):
    result = run_cli("account", "list", user=None)
    assert result.exit_code == 1
    assert "Error: No user selected" in result.output


def test_command_with_unknown_user_fails(run_cli, sample_user):
    result = run_cli("account", "list", user="mallory")
    assert result.exit_code == 1
    assert "Error:" in result.output


def test_instrument_create_list_and_update(run_cli, sample_user):
    result = run_cli("instrument", "create", "jpy", "--minor-unit", "0", "--name", "Yen")
    assert result.exit_code == 0
    assert "Created instrument 'JPY'" in result.output

    result = run_cli("instrument", "create", "JPY", "--minor-unit", "0")
    assert result.exit_code == 1
    assert "Error:" in result.output

    result = run_cli("instrument", "update", "1", "--name", "Japanese yen")
    assert result.exit_code == 0
    assert "Updated instrument 1" in result.output

    result = run_cli("instrument", "list")
    assert result.exit_code == 0
    assert "Japanese yen" in result.output
    assert "all accounts" in result.output


def test_instrument_update_requires_an_option(run_cli, sample_instruments):
    result = run_cli("instrument", "update", "1")
    assert result.exit_code == 1
    assert "Nothing to update" in result.output


def test_import_and_reimport(run_cli, sample_account, sample_instruments, statement):
    result = run_cli("import", statement, "--account", "Everyday")
    assert result.exit_code == 0
    assert "Import complete" in result.output
    assert "Imported: 3" in result.output
    assert "Errors: 0" in result.output

    result = run_cli("import", statement, "--account", "Everyday")
    assert result.exit_code == 0
    assert "Imported: 0" in result.output
    assert "Skipped: 3" in result.output

    result = run_cli("balance")
    assert result.exit_code == 0
    assert "Everyday" in result.output
    assert "458.00" in result.output


def test_import_creates_instrument_from_definition(run_cli, sample_account, statement):
    result = run_cli("import", statement, "--account", "Everyday")
    assert result.exit_code == 0
    assert "Errors: 3" in result.output
    assert "Unknown instrument: AUD" in result.output

    result = run_cli(
        "import", statement, "--account", "Everyday", "--new-instrument", "AUD:fiat:2:Australian dollar"
    )
    assert result.exit_code == 0
    assert "Imported: 3" in result.output

    result = run_cli("instrument", "list")
    assert "Australian dollar" in result.output


def test_import_rejects_malformed_instrument_definition(run_cli, sample_account, statement):
    result = run_cli("import", statement, "--account", "Everyday", "--new-instrument", "AUD:fiat")
    assert result.exit_code == 2
    assert "CODE:KIND:MINOR_UNIT" in result.output


def test_import_into_unknown_account_fails(run_cli, sample_account, statement):
    result = run_cli("import", statement, "--account", "Nope")
    assert result.exit_code == 1
    assert "Error:" in result.output


def test_runs_list_show_and_revert(run_cli, sample_account, sample_instruments, statement):
    run_cli("import", statement, "--account", "Everyday")
    run_cli("import", statement, "--account", "Everyday")

    result = run_cli("runs", "list")
    assert result.exit_code == 0
    assert "commbank_statement.csv" in result.output

    result = run_cli("runs", "show", "2")
    assert result.exit_code == 0
    assert "Skipped: 3" in result.output
    assert "Skipped keys:" in result.output

    result = run_cli("runs", "revert", "1", input="n\n")
    assert "Revert cancelled." in result.output

    result = run_cli("runs", "revert", "1", "--yes")
    assert result.exit_code == 0
    assert "Deleted 3 events from import run 1" in result.output

    result = run_cli("balance")
    assert "No balances found." in result.output

    result = run_cli("import", statement, "--account", "Everyday", "--restore-deleted")
    assert "Restored: 3" in result.output


def test_runs_show_other_users_run_fails(run_cli, sample_account, sample_instruments, other_user, statement):
    run_cli("import", statement, "--account", "Everyday")

    result = run_cli("runs", "show", "1", user="bob")
    assert result.exit_code == 1
    assert "Error:" in result.output


def test_event_list_show_delete_restore(run_cli, sample_account, sample_instruments, statement):
    run_cli("import", statement, "--account", "Everyday")

    result = run_cli("event", "list")
    assert result.exit_code == 0
    assert "CAFE NERO SYDNEY" in result.output

    result = run_cli("event", "show", "1")
    assert result.exit_code == 0
    assert "Event 1:" in result.output
    assert "-37.50 AUD" in result.output
    assert "External ID: 12345678" in result.output

    result = run_cli("event", "delete", "2")
    assert "Deleted event 2" in result.output
    result = run_cli("event", "delete", "2")
    assert "Event 2 is already deleted" in result.output

    result = run_cli("event", "list", "--state", "deleted")
    assert "CAFE NERO SYDNEY" in result.output
    assert "TRANSFER FROM SAVINGS" not in result.output

    result = run_cli("balance", "--account", "Everyday")
    assert "462.50" in result.output

    result = run_cli("event", "restore", "2")
    assert "Restored event 2" in result.output
    result = run_cli("event", "restore", "2")
    assert "Event 2 is not deleted" in result.output


def test_event_show_unknown_event_fails(run_cli, sample_user):
    result = run_cli("event", "show", "99")
    assert result.exit_code == 1
    assert "Error:" in result.output
