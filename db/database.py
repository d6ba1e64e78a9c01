import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path

from config import load_config
from .kv_store import KVStore, MemoryStore, SQLiteStore
from .schema import SCHEMA_SQL, SCHEMA_VERSION

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".weekwise"
DB_PATH = CONFIG_DIR / "weekwise.db"

_memory_store = MemoryStore()


def get_db_path() -> Path:
    """Configured database file, falling back to ~/.weekwise/weekwise.db."""
    configured = load_config()["store"].get("db_path")
    return Path(configured).expanduser() if configured else DB_PATH


def init_db():
    """Initialize the database by creating tables if they don't exist."""
    if load_config()["store"]["backend"] == "memory":
        logger.info("Using in-memory store; nothing to initialize")
        return
    db_path = get_db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    with get_conn() as conn:
        conn.executescript(SCHEMA_SQL)
        ensure_schema_version(conn)
        conn.commit()
    logger.info("Store initialized at %s", db_path)


def get_schema_version(conn: sqlite3.Connection) -> int:
    """Read the SQLite schema version from PRAGMA user_version."""
    cursor = conn.cursor()
    cursor.execute("PRAGMA user_version")
    row = cursor.fetchone()
    return int(row[0]) if row else 0


def set_schema_version(conn: sqlite3.Connection, version: int) -> None:
    """Set the SQLite schema version via PRAGMA user_version."""
    conn.execute(f"PRAGMA user_version = {int(version)}")


def ensure_schema_version(conn: sqlite3.Connection) -> None:
    """Ensure the current schema version is written to the database."""
    current = get_schema_version(conn)
    if current != SCHEMA_VERSION:
        set_schema_version(conn, SCHEMA_VERSION)


@contextmanager
def get_conn():
    """Context manager for SQLite connection, using row_factory for dict-like rows."""
    conn = sqlite3.connect(get_db_path(), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()


def get_memory_store() -> MemoryStore:
    return _memory_store


def get_store():
    """FastAPI dependency that yields the configured KV store for one request."""
    if load_config()["store"]["backend"] == "memory":
        yield _memory_store
        return
    with get_conn() as conn:
        yield SQLiteStore(conn)


@contextmanager
def open_store() -> KVStore:
    """Non-dependency variant of get_store for scripts and tests."""
    gen = get_store()
    try:
        yield next(gen)
    finally:
        gen.close()
