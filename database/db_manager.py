import logging
import os
import sqlite3
import threading
from contextlib import contextmanager
from typing import Iterator

from models.account import ACCOUNT_TYPES
from models.budget import BudgetPeriod
from models.transaction import TransactionStatus
from utils.constants import DB_FILE, DEFAULT_ACCOUNTS, DEFAULT_CATEGORIES, DEFAULT_SETTINGS
from utils.errors import StorageError

logger = logging.getLogger(__name__)


def _in_list(values) -> str:
    return ", ".join(f"'{v}'" for v in values)


class DatabaseManager:
    def __init__(self, db_path: str | None = None, seed: bool = True):
        self.db_path = db_path or DB_FILE
        self.seed = seed
        self._conn: sqlite3.Connection | None = None
        self._depth = 0
        self._lock = threading.RLock()

    def get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            # Autocommit mode: transaction() issues BEGIN/COMMIT explicitly.
            self._conn = sqlite3.connect(
                self.db_path, check_same_thread=False, isolation_level=None
            )
            self._conn.row_factory = sqlite3.Row
            # SQLite LOWER() only folds ASCII.
            self._conn.create_function("casefold", 1, str.casefold, deterministic=True)
            self._conn.execute("PRAGMA foreign_keys = ON")
            if self.db_path != ":memory:":
                self._conn.execute("PRAGMA journal_mode = WAL")
        return self._conn

    def initialize(self):
        """Create schema and seed defaults. Must run before any other operation."""
        conn = self.get_connection()
        try:
            self._create_schema(conn)
        except sqlite3.Error as exc:
            raise StorageError(f"Could not apply schema to {self.db_path}: {exc}") from exc
        with self.transaction() as conn:
            self._seed_defaults(conn)
        return self

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Atomic multi-statement unit.

        Commits on a clean exit and rolls back on any exception. Nested use
        joins the enclosing unit, so writes made by DAOs inside a caller's
        unit are committed or discarded together with it. Other threads
        block until the outermost unit finishes.
        """
        with self._lock:
            conn = self.get_connection()
            if self._depth:
                self._depth += 1
                try:
                    yield conn
                finally:
                    self._depth -= 1
                return

            try:
                conn.execute("BEGIN IMMEDIATE")
            except sqlite3.Error as exc:
                raise StorageError(f"Could not begin transaction: {exc}") from exc
            self._depth = 1
            try:
                yield conn
                conn.execute("COMMIT")
            except sqlite3.Error as exc:
                self._rollback(conn)
                raise StorageError(str(exc)) from exc
            except BaseException:
                self._rollback(conn)
                raise
            finally:
                self._depth = 0

    @staticmethod
    def _rollback(conn: sqlite3.Connection):
        if conn.in_transaction:
            conn.execute("ROLLBACK")

    @property
    def in_transaction(self) -> bool:
        return self._depth > 0

    def _create_schema(self, conn: sqlite3.Connection):
        conn.executescript(f"""
            CREATE TABLE IF NOT EXISTS accounts (
                id        INTEGER PRIMARY KEY AUTOINCREMENT,
                name      TEXT NOT NULL UNIQUE,
                type      TEXT NOT NULL CHECK(type IN ({_in_list(ACCOUNT_TYPES)})),
                currency  TEXT NOT NULL DEFAULT 'USD'
            );

            CREATE TABLE IF NOT EXISTS categories (
                id         INTEGER PRIMARY KEY AUTOINCREMENT,
                name       TEXT NOT NULL UNIQUE,
                icon       TEXT NOT NULL DEFAULT '',
                color      TEXT NOT NULL DEFAULT '#888888',
                parent_id  INTEGER REFERENCES categories(id)
            );

            CREATE TABLE IF NOT EXISTS transactions (
                id           INTEGER PRIMARY KEY AUTOINCREMENT,
                date         TEXT NOT NULL,
                description  TEXT NOT NULL,
                note         TEXT NOT NULL DEFAULT '',
                status       TEXT NOT NULL DEFAULT 'Pending'
                             CHECK(status IN ({_in_list(s.value for s in TransactionStatus)})),
                created_at   TEXT NOT NULL DEFAULT (datetime('now'))
            );

            CREATE TABLE IF NOT EXISTS splits (
                id              INTEGER PRIMARY KEY AUTOINCREMENT,
                transaction_id  INTEGER NOT NULL REFERENCES transactions(id) ON DELETE CASCADE,
                account_id      INTEGER NOT NULL REFERENCES accounts(id),
                category_id     INTEGER REFERENCES categories(id),
                amount          INTEGER NOT NULL,
                currency        TEXT NOT NULL DEFAULT 'USD',
                exchange_rate   REAL NOT NULL DEFAULT 1.0
            );

            CREATE TABLE IF NOT EXISTS budgets (
                id           INTEGER PRIMARY KEY AUTOINCREMENT,
                category_id  INTEGER NOT NULL REFERENCES categories(id),
                amount       INTEGER NOT NULL CHECK(amount >= 0),
                period       TEXT NOT NULL DEFAULT 'Monthly'
                             CHECK(period IN ({_in_list(p.value for p in BudgetPeriod)}))
            );

            CREATE TABLE IF NOT EXISTS rules (
                id                  INTEGER PRIMARY KEY AUTOINCREMENT,
                pattern             TEXT NOT NULL,
                target_category_id  INTEGER REFERENCES categories(id),
                target_payee        TEXT NOT NULL DEFAULT '',
                target_note         TEXT NOT NULL DEFAULT ''
            );

            CREATE TABLE IF NOT EXISTS app_settings (
                key   TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_transactions_date     ON transactions(date);
            CREATE INDEX IF NOT EXISTS idx_splits_transaction_id ON splits(transaction_id);
            CREATE INDEX IF NOT EXISTS idx_splits_account_id     ON splits(account_id);
            CREATE INDEX IF NOT EXISTS idx_splits_category_id    ON splits(category_id);
        """)

    def _seed_defaults(self, conn: sqlite3.Connection):
        # Runs inside the same unit as the emptiness checks, before the
        # manager is handed to any caller.
        for key, value in DEFAULT_SETTINGS:
            conn.execute(
                "INSERT OR IGNORE INTO app_settings(key, value) VALUES (?, ?)",
                (key, value),
            )
        if not self.seed:
            return

        if conn.execute("SELECT COUNT(*) FROM categories").fetchone()[0] == 0:
            logger.info("Seeding %d default categories", len(DEFAULT_CATEGORIES))
            for cat in DEFAULT_CATEGORIES:
                conn.execute(
                    "INSERT INTO categories(name, icon, color) VALUES (?, ?, ?)",
                    (cat["name"], cat["icon"], cat["color"]),
                )

        if conn.execute("SELECT COUNT(*) FROM accounts").fetchone()[0] == 0:
            logger.info("Seeding %d default accounts", len(DEFAULT_ACCOUNTS))
            currency = self._setting(conn, "default_currency", "USD")
            for acct in DEFAULT_ACCOUNTS:
                conn.execute(
                    "INSERT INTO accounts(name, type, currency) VALUES (?, ?, ?)",
                    (acct["name"], acct["type"], currency),
                )

    @staticmethod
    def _setting(conn: sqlite3.Connection, key: str, default: str) -> str:
        row = conn.execute(
            "SELECT value FROM app_settings WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else default

    def get_setting(self, key: str, default: str = "") -> str:
        return self._setting(self.get_connection(), key, default)

    def set_setting(self, key: str, value: str):
        with self.transaction() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO app_settings(key, value) VALUES (?, ?)",
                (key, value),
            )

    @staticmethod
    def open_default(db_folder: str | None = None, seed: bool = True) -> "DatabaseManager":
        """Startup factory: open (creating if needed) the ledger DB.

        db_folder: if provided, the DB file is stored in that directory instead of CWD.
        """
        if db_folder:
            os.makedirs(db_folder, exist_ok=True)
            path = os.path.join(db_folder, DB_FILE)
        else:
            path = DB_FILE
        db = DatabaseManager(path, seed=seed)
        db.initialize()
        return db

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None
