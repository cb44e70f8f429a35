"""
database.py
-----------
Creates and manages the SQLite database that holds the portal's user
accounts. Defines the canonical ``users`` table, the one-time migration from
the legacy localized ``usuarios`` table, account lookup and initial seeding.
"""

import logging
import os
import sqlite3
from dataclasses import dataclass

logger = logging.getLogger(__name__)

LEGACY_TABLE = "usuarios"

# Checked in order; first column present wins
LEGACY_USERNAME_COLUMNS = ("nombre de usuario", "usuario", "nombre_usuario")
LEGACY_PASSWORD_COLUMNS = ("contraseña", "clave", "contrasena")


class StoreUnavailable(Exception):
    """The account store could not be read or written."""


@dataclass(frozen=True)
class Account:
    """One registered user. ``password`` is stored as plain text and may be empty."""
    id: int
    username: str
    password: str = ""


def get_db(db_path):
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def init_db(db_path):
    """Create the users table and fold in any legacy table. Safe to call on every start."""
    try:
        os.makedirs(os.path.dirname(os.path.abspath(db_path)), exist_ok=True)
    except OSError as e:
        raise StoreUnavailable(f"Could not create directory for {db_path}: {e}") from e

    try:
        conn = get_db(db_path)
        try:
            cursor = conn.cursor()
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    username TEXT NOT NULL UNIQUE,
                    password TEXT NOT NULL DEFAULT ''
                )
            """)
            migrated = migrate_legacy_schema(conn)
            conn.commit()
        finally:
            conn.close()
    except sqlite3.Error as e:
        raise StoreUnavailable(f"Could not initialise {db_path}: {e}") from e

    if migrated:
        logger.info("Migrated %d account(s) from legacy table '%s'", migrated, LEGACY_TABLE)
    return migrated


# ------------------------------------------------------------
# Legacy schema migration
# ------------------------------------------------------------
def _quote(column):
    return '"' + column.replace('"', '""') + '"'


def _pick_column(columns, candidates):
    for name in candidates:
        if name in columns:
            return name
    return None


def migrate_legacy_schema(conn):
    """Copy rows from the legacy ``usuarios`` table into ``users``.

    Older deployments stored accounts under localized column names. Those
    names are resolved here, once, so the lookup path only ever queries the
    canonical columns. Returns the number of rows copied. The caller commits.
    """
    cursor = conn.cursor()
    cursor.execute(
        "SELECT name FROM sqlite_master WHERE type = 'table' AND name = ?",
        (LEGACY_TABLE,),
    )
    if cursor.fetchone() is None:
        return 0

    cursor.execute(f"PRAGMA table_info({LEGACY_TABLE})")
    columns = [row["name"] for row in cursor.fetchall()]

    user_col = _pick_column(columns, LEGACY_USERNAME_COLUMNS)
    pass_col = _pick_column(columns, LEGACY_PASSWORD_COLUMNS)
    if user_col is None:
        logger.warning("Legacy table '%s' has no recognisable username column: %s",
                       LEGACY_TABLE, columns)
        return 0

    password_expr = f"COALESCE({_quote(pass_col)}, '')" if pass_col else "''"
    id_expr = "id" if "id" in columns else "NULL"

    before = conn.total_changes
    cursor.execute(f"""
        INSERT OR IGNORE INTO users (id, username, password)
        SELECT {id_expr}, {_quote(user_col)}, {password_expr}
        FROM {LEGACY_TABLE}
        WHERE {_quote(user_col)} IS NOT NULL AND {_quote(user_col)} != ''
    """)
    return conn.total_changes - before


# ------------------------------------------------------------
# Account Functions
# ------------------------------------------------------------
def find_account(username, db_path):
    """Return the Account with this exact username, or None."""
    try:
        conn = get_db(db_path)
        try:
            cur = conn.cursor()
            cur.execute(
                "SELECT id, username, password FROM users WHERE username = ?",
                (username,),
            )
            row = cur.fetchone()
        finally:
            conn.close()
    except UnicodeEncodeError:
        # Unencodable names (lone surrogates) can never have been stored
        return None
    except sqlite3.Error as e:
        raise StoreUnavailable(f"Account lookup failed: {e}") from e

    if row is None:
        return None
    return Account(id=row["id"], username=row["username"], password=row["password"] or "")


def insert_account_if_absent(username, password, db_path):
    """Insert an account unless the username is taken. Returns True when a row was added."""
    try:
        conn = get_db(db_path)
        try:
            cur = conn.cursor()
            cur.execute(
                "INSERT OR IGNORE INTO users (username, password) VALUES (?, ?)",
                (username, password or ""),
            )
            conn.commit()
            inserted = cur.rowcount == 1
        finally:
            conn.close()
    except sqlite3.Error as e:
        raise StoreUnavailable(f"Account insert failed: {e}") from e

    if inserted:
        logger.info("Created account '%s'", username)
    return inserted


def count_accounts(db_path):
    try:
        conn = get_db(db_path)
        try:
            cur = conn.cursor()
            cur.execute("SELECT COUNT(*) AS total FROM users")
            return cur.fetchone()["total"]
        finally:
            conn.close()
    except sqlite3.Error as e:
        raise StoreUnavailable(f"Account count failed: {e}") from e


def seed_default_account(db_path, username="admin", password=""):
    """Create the initial account when the users table is empty."""
    if not username or count_accounts(db_path) > 0:
        return False
    return insert_account_if_absent(username, password, db_path)
