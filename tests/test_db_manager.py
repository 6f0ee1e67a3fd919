import sqlite3
import threading

import pytest

from database.db_manager import DatabaseManager
from utils.constants import DEFAULT_ACCOUNTS, DEFAULT_CATEGORIES
from utils.errors import StorageError


def _count(db, table):
    return db.get_connection().execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]


def test_initialize_seeds_defaults_once():
    db = DatabaseManager(":memory:").initialize()

    assert _count(db, "accounts") == len(DEFAULT_ACCOUNTS)
    assert _count(db, "categories") == len(DEFAULT_CATEGORIES)
    assert db.get_setting("default_currency") == "USD"

    db.initialize()
    assert _count(db, "accounts") == len(DEFAULT_ACCOUNTS), "re-initialising must not reseed"
    db.close()


def test_seed_can_be_skipped(db):
    assert _count(db, "accounts") == 0
    assert _count(db, "categories") == 0
    assert db.get_setting("currency_symbol") == "$"


def test_transaction_commits_on_clean_exit(db):
    with db.transaction() as conn:
        conn.execute("INSERT INTO app_settings(key, value) VALUES ('k', 'v')")

    assert db.get_setting("k") == "v"
    assert not db.in_transaction


def test_transaction_rolls_back_on_error(db):
    with pytest.raises(RuntimeError):
        with db.transaction() as conn:
            conn.execute("INSERT INTO app_settings(key, value) VALUES ('k', 'v')")
            raise RuntimeError("boom")

    assert db.get_setting("k", "missing") == "missing"
    assert not db.in_transaction


def test_nested_unit_joins_outer_unit(db):
    with pytest.raises(RuntimeError):
        with db.transaction():
            db.set_setting("inner", "1")
            assert db.in_transaction
            raise RuntimeError("abort outer")

    assert db.get_setting("inner", "missing") == "missing"


def test_sqlite_error_is_wrapped_and_rolled_back(db):
    with pytest.raises(StorageError) as excinfo:
        with db.transaction() as conn:
            conn.execute("INSERT INTO app_settings(key, value) VALUES ('a', '1')")
            conn.execute("INSERT INTO app_settings(key, value) VALUES ('a', '2')")

    assert isinstance(excinfo.value.__cause__, sqlite3.IntegrityError)
    assert db.get_setting("a", "missing") == "missing"


def test_invalid_enum_values_are_rejected_by_schema(db):
    with pytest.raises(StorageError):
        with db.transaction() as conn:
            conn.execute("INSERT INTO accounts(name, type) VALUES ('Odd', 'Savings')")


def test_open_default_creates_file_in_folder(tmp_path):
    folder = tmp_path / "data"
    db = DatabaseManager.open_default(str(folder), seed=False)

    assert (folder / "ledger.db").exists()
    db.set_setting("default_currency", "EUR")
    db.close()

    reopened = DatabaseManager.open_default(str(folder), seed=False)
    assert reopened.get_setting("default_currency") == "EUR"
    reopened.close()


def test_other_thread_waits_for_open_unit(db):
    finished = threading.Event()

    def writer():
        db.set_setting("from_thread", "1")
        finished.set()

    with db.transaction():
        db.set_setting("outer", "1")
        worker = threading.Thread(target=writer)
        worker.start()
        assert not finished.wait(0.2), "second thread must not join the open unit"
        assert db.in_transaction

    worker.join(timeout=5)
    assert finished.is_set()
    assert db.get_setting("outer") == "1"
    assert db.get_setting("from_thread") == "1"
