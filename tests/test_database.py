import sqlite3

import pytest

from login_portal.database import (
    Account,
    StoreUnavailable,
    count_accounts,
    find_account,
    init_db,
    insert_account_if_absent,
    migrate_legacy_schema,
    seed_default_account,
)


def _legacy_db(path, user_col, pass_col, rows):
    conn = sqlite3.connect(path)
    conn.execute(
        f'CREATE TABLE usuarios (id INTEGER PRIMARY KEY, "{user_col}" TEXT, "{pass_col}" TEXT)'
    )
    conn.executemany(
        f'INSERT INTO usuarios (id, "{user_col}", "{pass_col}") VALUES (?, ?, ?)', rows
    )
    conn.commit()
    conn.close()


def test_init_creates_missing_directory(tmp_path):
    path = tmp_path / "nested" / "dir" / "users.db"
    init_db(str(path))
    assert path.exists()
    assert count_accounts(str(path)) == 0


def test_insert_and_find(db_path):
    init_db(db_path)
    assert insert_account_if_absent("admin", "pw", db_path) is True
    assert insert_account_if_absent("admin", "other", db_path) is False

    account = find_account("admin", db_path)
    assert isinstance(account, Account)
    assert (account.username, account.password) == ("admin", "pw")
    assert find_account("ADMIN", db_path) is None
    assert find_account("ghost", db_path) is None


def test_seed_only_when_empty(db_path):
    init_db(db_path)
    assert seed_default_account(db_path, "admin", "") is True
    assert find_account("admin", db_path) == Account(id=1, username="admin", password="")
    assert seed_default_account(db_path, "root", "x") is False
    assert find_account("root", db_path) is None


@pytest.mark.parametrize("user_col,pass_col", [
    ("nombre de usuario", "contraseña"),
    ("usuario", "clave"),
    ("nombre_usuario", "contrasena"),
])
def test_legacy_table_is_migrated(db_path, user_col, pass_col):
    _legacy_db(db_path, user_col, pass_col, [(1, "admin", ""), (5, "maria", "Clave1"), (6, "pepe", None)])

    assert init_db(db_path) == 3
    assert find_account("admin", db_path) == Account(id=1, username="admin", password="")
    assert find_account("maria", db_path) == Account(id=5, username="maria", password="Clave1")
    assert find_account("pepe", db_path).password == ""


def test_migration_runs_once(db_path):
    _legacy_db(db_path, "usuario", "clave", [(1, "admin", "pw")])
    assert init_db(db_path) == 1
    assert init_db(db_path) == 0
    assert count_accounts(db_path) == 1


def test_migration_without_legacy_table(db_path):
    init_db(db_path)
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    try:
        assert migrate_legacy_schema(conn) == 0
    finally:
        conn.close()


def test_sqlite_errors_become_store_unavailable(db_path):
    # No init_db: the users table does not exist
    with pytest.raises(StoreUnavailable):
        find_account("admin", db_path)
    with pytest.raises(StoreUnavailable):
        insert_account_if_absent("admin", "", db_path)


def test_unencodable_username_is_not_found(db_path):
    init_db(db_path)
    assert find_account("\ud800", db_path) is None
