"""Local SQLite key/value storage for the calculator state."""
import json
import logging
import os
import sqlite3
from contextlib import closing
from pathlib import Path

from printcalc.models import AppState
from printcalc.snapshots import utc_now_iso

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path(__file__).resolve().parents[1] / "data"
DB_FILENAME = "printcalc.db"

STORAGE_KEY = "printcalc_v1_5"
LEGACY_STORAGE_KEYS: tuple[str, ...] = ("printcalc_v1_4",)
WIPE_ONCE_KEY = "printcalc_v1_5_wiped_once"

STORAGE_ERRORS = (sqlite3.Error, OSError)


def get_db_path() -> Path:
    data_dir = os.getenv("PRINTCALC_DATA_DIR", "").strip()
    return (Path(data_dir) if data_dir else DEFAULT_DATA_DIR) / DB_FILENAME


def get_connection(db_path: Path | None = None) -> sqlite3.Connection:
    target = db_path or get_db_path()
    target.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(target)
    conn.row_factory = sqlite3.Row
    return conn


def init_db(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS app_state (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
        """
    )
    conn.commit()


def read_value(conn: sqlite3.Connection, key: str) -> str | None:
    row = conn.execute("SELECT value FROM app_state WHERE key = ?", (key,)).fetchone()
    return None if row is None else str(row["value"])


def write_value(conn: sqlite3.Connection, key: str, value: str) -> None:
    conn.execute(
        """
        INSERT INTO app_state (key, value, updated_at)
        VALUES (?, ?, ?)
        ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
        """,
        (key, value, utc_now_iso()),
    )
    conn.commit()


def remove_values(conn: sqlite3.Connection, keys: list[str]) -> None:
    placeholders = ",".join("?" for _ in keys)
    conn.execute(f"DELETE FROM app_state WHERE key IN ({placeholders})", keys)
    conn.commit()


def migrate_storage(conn: sqlite3.Connection) -> bool:
    """Remove old and current state once per install. Returns True when the wipe ran."""
    try:
        if read_value(conn, WIPE_ONCE_KEY) == "1":
            return False
        remove_values(conn, [*LEGACY_STORAGE_KEYS, STORAGE_KEY])
        write_value(conn, WIPE_ONCE_KEY, "1")
    except STORAGE_ERRORS as exc:
        logger.warning("Storage migration skipped: %s", exc)
        return False
    logger.info("Cleared stored calculator state for version key %s", STORAGE_KEY)
    return True


def load_app_state(conn: sqlite3.Connection) -> AppState:
    try:
        raw = read_value(conn, STORAGE_KEY)
    except STORAGE_ERRORS as exc:
        logger.warning("Could not read stored state, using defaults: %s", exc)
        return AppState()
    if raw is None:
        return AppState()
    try:
        return AppState.from_record(json.loads(raw))
    except ValueError as exc:
        logger.warning("Stored state is not valid JSON, using defaults: %s", exc)
        return AppState()


def save_app_state(conn: sqlite3.Connection, state: AppState) -> bool:
    try:
        write_value(conn, STORAGE_KEY, json.dumps(state.to_record(), ensure_ascii=False))
    except STORAGE_ERRORS as exc:
        logger.warning("Could not persist calculator state: %s", exc)
        return False
    return True


def clear_app_state(conn: sqlite3.Connection) -> bool:
    try:
        remove_values(conn, [*LEGACY_STORAGE_KEYS, STORAGE_KEY])
    except STORAGE_ERRORS as exc:
        logger.warning("Could not clear stored state: %s", exc)
        return False
    return True


def restore_app_state(db_path: Path | None = None) -> AppState:
    """Open storage, run the one-time migration and load the state; defaults if storage is unusable."""
    try:
        with closing(get_connection(db_path)) as conn:
            init_db(conn)
            migrate_storage(conn)
            return load_app_state(conn)
    except STORAGE_ERRORS as exc:
        logger.warning("Storage unavailable, continuing without it: %s", exc)
        return AppState()


def persist_app_state(state: AppState, db_path: Path | None = None) -> bool:
    try:
        with closing(get_connection(db_path)) as conn:
            init_db(conn)
            return save_app_state(conn, state)
    except STORAGE_ERRORS as exc:
        logger.warning("Storage unavailable, state not saved: %s", exc)
        return False


def reset_storage(db_path: Path | None = None) -> bool:
    try:
        with closing(get_connection(db_path)) as conn:
            init_db(conn)
            return clear_app_state(conn)
    except STORAGE_ERRORS as exc:
        logger.warning("Storage unavailable, nothing to reset: %s", exc)
        return False
