# =============================================================================
# ASSETDESK - DATABASE ACCESS LAYER
# =============================================================================
# One connection per request, parameterized SQL, guaranteed release.
#
# Two dialects share one interface:
# - PostgreSQL through psycopg2 (production)
# - SQLite through the standard library (local development, tests)
#
# SQL is written with '?' placeholders and converted to '%s' for psycopg2.
# =============================================================================

import logging
import sqlite3
from contextlib import contextmanager
from typing import Optional, Dict, Any, List, Iterator, Sequence

import psycopg2
from psycopg2.extras import RealDictCursor

from .config import config
from .exceptions import ConflictError, PersistenceError

logger = logging.getLogger(__name__)

SQLITE = "sqlite"
POSTGRESQL = "postgresql"

_SQLITE_PREFIX = "sqlite:///"


def get_dialect(url: Optional[str] = None) -> str:
    """Dialect name for a DATABASE_URL."""
    url = url if url is not None else config.DATABASE_URL
    return SQLITE if url.startswith("sqlite:") else POSTGRESQL


# =============================================================================
# ERROR TRANSLATION
# =============================================================================

# sqlite3 raises OverflowError for integers beyond 64 bits
_DRIVER_ERRORS = (sqlite3.Error, psycopg2.Error, OverflowError)

# SERIAL and INTEGER columns are 32-bit in PostgreSQL
MAX_ROW_ID = 2 ** 31 - 1


def is_row_id(value: int) -> bool:
    """True when value fits the integer key columns."""
    return -MAX_ROW_ID - 1 <= value <= MAX_ROW_ID


def _is_unique_violation(exc: Exception) -> bool:
    if isinstance(exc, sqlite3.IntegrityError):
        return "UNIQUE constraint failed" in str(exc)
    if isinstance(exc, psycopg2.IntegrityError):
        return getattr(exc, "pgcode", None) == "23505"
    return False


def _translate_error(exc: Exception) -> Exception:
    """Map a driver error onto the application taxonomy."""
    if _is_unique_violation(exc):
        return ConflictError(str(exc))
    return PersistenceError()


# =============================================================================
# CURSOR / CONNECTION WRAPPERS
# =============================================================================

class Cursor:
    """Driver cursor returning rows as plain dicts."""

    def __init__(self, cursor, lastrowid: Optional[int] = None):
        self._cursor = cursor
        self.lastrowid = lastrowid
        self.rowcount = cursor.rowcount

    def fetchone(self) -> Optional[Dict[str, Any]]:
        row = self._cursor.fetchone()
        if row is None:
            return None
        return dict(row)

    def fetchall(self) -> List[Dict[str, Any]]:
        return [dict(row) for row in self._cursor.fetchall()]

    def close(self):
        self._cursor.close()


class Connection:
    """
    Thin wrapper over a DB-API connection.

    Statements run inside an implicit transaction until commit() or
    rollback(); closing without commit discards pending writes.
    """

    def __init__(self, raw, dialect: str):
        self._conn = raw
        self.dialect = dialect

    def _convert_sql(self, sql: str) -> str:
        if self.dialect == POSTGRESQL:
            return sql.replace("?", "%s")
        return sql

    def _new_cursor(self):
        if self.dialect == POSTGRESQL:
            return self._conn.cursor(cursor_factory=RealDictCursor)
        return self._conn.cursor()

    def execute(self, sql: str, params: Sequence[Any] = ()) -> Cursor:
        """
        Execute one parameterized statement.

        For PostgreSQL INSERTs without RETURNING, 'RETURNING *' is appended
        so lastrowid is available as with SQLite.
        """
        sql = self._convert_sql(sql)
        auto_returning = (
            self.dialect == POSTGRESQL
            and sql.lstrip().upper().startswith("INSERT")
            and "RETURNING" not in sql.upper()
        )
        if auto_returning:
            sql = sql.rstrip().rstrip(";") + " RETURNING *"

        cursor = self._new_cursor()
        try:
            cursor.execute(sql, tuple(params))
        except _DRIVER_ERRORS as e:
            cursor.close()
            self.rollback()
            logger.debug("SQL failed: %s (%s)", sql, e)
            raise _translate_error(e) from e

        lastrowid = None
        if auto_returning:
            row = cursor.fetchone()
            if row:
                lastrowid = next(iter(row.values()))
        elif self.dialect == SQLITE:
            lastrowid = cursor.lastrowid

        return Cursor(cursor, lastrowid)

    def executemany(self, sql: str, params_list: List[Sequence[Any]]) -> None:
        """Execute the same statement once per parameter tuple."""
        sql = self._convert_sql(sql)
        cursor = self._new_cursor()
        try:
            cursor.executemany(sql, [tuple(p) for p in params_list])
        except _DRIVER_ERRORS as e:
            self.rollback()
            raise _translate_error(e) from e
        finally:
            cursor.close()

    def executescript(self, script: str) -> None:
        """Run a multi-statement DDL script."""
        try:
            if self.dialect == SQLITE:
                self._conn.executescript(script)
            else:
                cursor = self._conn.cursor()
                try:
                    cursor.execute(script)
                finally:
                    cursor.close()
        except _DRIVER_ERRORS as e:
            self.rollback()
            raise _translate_error(e) from e

    def commit(self):
        self._conn.commit()

    def rollback(self):
        try:
            self._conn.rollback()
        except _DRIVER_ERRORS:
            logger.warning("Rollback failed", exc_info=True)

    def close(self):
        self._conn.close()

    @contextmanager
    def transaction(self) -> Iterator["Connection"]:
        """
        Atomic unit: commit on success, roll back and re-raise on any error.

        Usage:
            with db.transaction():
                db.execute(...)
                db.execute(...)
        """
        try:
            yield self
            self.commit()
        except Exception:
            self.rollback()
            raise


# =============================================================================
# CONNECTION ACQUISITION
# =============================================================================

def connect(url: Optional[str] = None) -> Connection:
    """Open a new connection for DATABASE_URL (no pooling)."""
    url = url if url is not None else config.DATABASE_URL
    dialect = get_dialect(url)
    try:
        if dialect == SQLITE:
            raw = sqlite3.connect(url[len(_SQLITE_PREFIX):], check_same_thread=False)
            raw.row_factory = sqlite3.Row
            raw.execute("PRAGMA foreign_keys = ON")
        else:
            raw = psycopg2.connect(url)
            raw.autocommit = False
    except _DRIVER_ERRORS as e:
        logger.error("Database connection failed: %s", e)
        raise PersistenceError("Database unavailable") from e
    return Connection(raw, dialect)


@contextmanager
def connection(url: Optional[str] = None) -> Iterator[Connection]:
    """Scoped connection: always released, whatever happens inside."""
    db = connect(url)
    try:
        yield db
    finally:
        db.close()


def get_db() -> Iterator[Connection]:
    """FastAPI dependency: one connection per request."""
    with connection() as db:
        yield db


# =============================================================================
# SCHEMA
# =============================================================================

_DDL = """
CREATE TABLE IF NOT EXISTS users (
    id {pk},
    username TEXT NOT NULL UNIQUE,
    password TEXT NOT NULL,
    role TEXT NOT NULL DEFAULT 'user' CHECK (role IN ('admin', 'user')),
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS companies (
    id {pk},
    name TEXT NOT NULL UNIQUE,
    contact_person TEXT,
    contact_email TEXT,
    contact_phone TEXT,
    address TEXT,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS assets (
    id {pk},
    company_id INTEGER NOT NULL REFERENCES companies(id) ON DELETE CASCADE,
    asset_name TEXT NOT NULL,
    description TEXT,
    serial_number TEXT UNIQUE,
    status TEXT NOT NULL DEFAULT 'In Use',
    device_type TEXT,
    owner_location TEXT,
    brand TEXT,
    model TEXT,
    operating_system TEXT,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS tickets (
    id {pk},
    company_id INTEGER NOT NULL REFERENCES companies(id) ON DELETE CASCADE,
    user_id INTEGER NOT NULL REFERENCES users(id),
    assigned_user_id INTEGER REFERENCES users(id) ON DELETE SET NULL,
    title TEXT NOT NULL,
    description TEXT NOT NULL,
    priority TEXT NOT NULL DEFAULT 'Normal',
    status TEXT NOT NULL DEFAULT 'Open',
    customer_email TEXT,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS ticket_updates (
    id {pk},
    ticket_id INTEGER NOT NULL REFERENCES tickets(id) ON DELETE CASCADE,
    user_id INTEGER NOT NULL REFERENCES users(id),
    update_text TEXT NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS ticket_assets (
    ticket_id INTEGER NOT NULL REFERENCES tickets(id) ON DELETE CASCADE,
    asset_id INTEGER NOT NULL REFERENCES assets(id) ON DELETE CASCADE,
    PRIMARY KEY (ticket_id, asset_id)
);

CREATE TABLE IF NOT EXISTS email_log (
    id {pk},
    ticket_id INTEGER REFERENCES tickets(id) ON DELETE SET NULL,
    recipient TEXT NOT NULL,
    subject TEXT NOT NULL,
    email_type TEXT NOT NULL,
    status TEXT NOT NULL,
    error TEXT,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_assets_company ON assets(company_id);
CREATE INDEX IF NOT EXISTS idx_tickets_updated ON tickets(updated_at);
CREATE INDEX IF NOT EXISTS idx_ticket_updates_ticket ON ticket_updates(ticket_id);
"""

_PRIMARY_KEYS = {
    SQLITE: "INTEGER PRIMARY KEY AUTOINCREMENT",
    POSTGRESQL: "SERIAL PRIMARY KEY",
}


def get_ddl_script(dialect: str) -> str:
    """DDL for the whole schema in the given dialect."""
    return _DDL.format(pk=_PRIMARY_KEYS[dialect])


def _ensure_admin_exists(db: Connection) -> None:
    """Create the bootstrap admin when ADMIN_USERNAME/ADMIN_PASSWORD are set."""
    if not (config.ADMIN_USERNAME and config.ADMIN_PASSWORD):
        return

    from .auth.security import hash_password

    existing = db.execute(
        "SELECT id FROM users WHERE username = ?", (config.ADMIN_USERNAME,)
    ).fetchone()
    if existing:
        return

    db.execute(
        "INSERT INTO users (username, password, role) VALUES (?, ?, 'admin')",
        (config.ADMIN_USERNAME, hash_password(config.ADMIN_PASSWORD))
    )
    db.commit()
    logger.info("Bootstrap admin '%s' created", config.ADMIN_USERNAME)


def _check_fallbacks(db: Connection) -> None:
    """Warn when the webhook fallback ids do not reference existing rows."""
    company = db.execute(
        "SELECT id FROM companies WHERE id = ?", (config.FALLBACK_COMPANY_ID,)
    ).fetchone()
    if not company:
        logger.warning("FALLBACK_COMPANY_ID=%s does not exist yet", config.FALLBACK_COMPANY_ID)

    user = db.execute(
        "SELECT id FROM users WHERE id = ?", (config.SYSTEM_USER_ID,)
    ).fetchone()
    if not user:
        logger.warning("SYSTEM_USER_ID=%s does not exist yet", config.SYSTEM_USER_ID)


def init_database(url: Optional[str] = None) -> None:
    """Create missing tables and bootstrap rows."""
    with connection(url) as db:
        db.executescript(get_ddl_script(db.dialect))
        db.commit()
        logger.info("Database schema ready (%s)", db.dialect)
        _ensure_admin_exists(db)
        _check_fallbacks(db)


def get_stats() -> Dict[str, int]:
    """Row counts for the health endpoint."""
    with connection() as db:
        stats = {}
        for table in ("users", "companies", "assets", "tickets"):
            row = db.execute(f"SELECT COUNT(*) AS n FROM {table}").fetchone()
            stats[table] = row["n"]
        return stats
