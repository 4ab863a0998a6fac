"""
Database Management Module

Provides SQLite database operation encapsulation for the local music catalog.
"""

import logging
import os
import re
import sqlite3
import sys
import threading
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class DatabaseManager:
    """
    Database Manager

    Provides thread-safe SQLite operation encapsulation. Each thread gets its
    own connection, so catalog reads from the background pool run concurrently.

    Example:
        db = DatabaseManager("catalog.db")

        # Execute query
        songs = db.fetch_all("SELECT * FROM songs WHERE album_id = ?", (album_id,))

        # Writes commit immediately
        db.insert("songs", {"id": 1, "title": "Red"})
    """

    @staticmethod
    def _get_default_db_path() -> str:
        """Get the default database path in the user data directory"""
        if sys.platform == "win32":
            base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        elif sys.platform == "darwin":
            base = Path.home() / "Library" / "Application Support"
        else:
            base = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share"))

        db_dir = base / "wear-media-bridge"
        db_dir.mkdir(parents=True, exist_ok=True)
        return str(db_dir / "music_catalog.db")

    def __init__(self, db_path: Optional[str] = None):
        self._db_path = db_path or self._get_default_db_path()
        self._local = threading.local()
        self._write_lock = threading.RLock()
        self._connections: List[sqlite3.Connection] = []
        self._connections_lock = threading.Lock()
        self._init_schema()

    @property
    def db_path(self) -> str:
        return self._db_path

    @property
    def _conn(self) -> sqlite3.Connection:
        """Get thread-local connection"""
        if getattr(self._local, 'connection', None) is None:
            # Set timeout to 30 seconds to handle concurrent access better
            connection = sqlite3.connect(self._db_path, timeout=30.0, check_same_thread=False)
            connection.row_factory = sqlite3.Row

            # Enable WAL mode for better concurrency
            with self._write_lock:
                connection.execute("PRAGMA journal_mode=WAL")
                connection.execute("PRAGMA synchronous=NORMAL")

            connection.execute("PRAGMA foreign_keys = ON")

            self._local.connection = connection
            with self._connections_lock:
                self._connections.append(connection)
        return self._local.connection

    @staticmethod
    def _is_write_sql(sql: str) -> bool:
        match = re.match(r"\s*([A-Za-z]+)", sql)
        first_keyword = match.group(1).upper() if match else ""
        return first_keyword in ("INSERT", "UPDATE", "DELETE", "REPLACE", "CREATE", "DROP", "ALTER")

    def execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        """Execute SQL statement

        Write operations are committed immediately to release database locks.
        """
        max_retries = 5
        retry_delay = 0.1

        is_write = self._is_write_sql(sql)

        for i in range(max_retries):
            try:
                if is_write:
                    with self._write_lock:
                        cursor = self._conn.execute(sql, params)
                        self._conn.commit()
                else:
                    cursor = self._conn.execute(sql, params)
                return cursor
            except sqlite3.OperationalError as e:
                if "locked" in str(e).lower() and i < max_retries - 1:
                    time.sleep(retry_delay * (i + 1))
                    continue
                raise
        raise sqlite3.OperationalError("database is locked")

    def fetch_one(self, sql: str, params: tuple = ()) -> Optional[Dict[str, Any]]:
        """Fetch single record"""
        cursor = self.execute(sql, params)
        row = cursor.fetchone()
        return dict(row) if row else None

    def fetch_all(self, sql: str, params: tuple = ()) -> List[Dict[str, Any]]:
        """Fetch all records"""
        cursor = self.execute(sql, params)
        return [dict(row) for row in cursor.fetchall()]

    def insert(self, table: str, data: Dict[str, Any]) -> int:
        """
        Insert record

        Args:
            table: Table name
            data: Dictionary of column names and values

        Returns:
            int: ID of the inserted record
        """
        columns = ', '.join(data.keys())
        placeholders = ', '.join(['?' for _ in data])
        sql = f"INSERT INTO {table} ({columns}) VALUES ({placeholders})"

        cursor = self.execute(sql, tuple(data.values()))
        return cursor.lastrowid

    def _init_schema(self) -> None:
        """Initialize database Schema"""
        from core.schema import get_all_schema_statements

        for statement in get_all_schema_statements():
            self.execute(statement.strip())
        self._conn.commit()

    def close(self) -> None:
        """Close every connection opened by this manager"""
        with self._connections_lock:
            connections, self._connections = self._connections, []
        for connection in connections:
            try:
                connection.close()
            except sqlite3.Error as e:
                logger.warning("Failed to close database connection: %s", e)
        self._local = threading.local()
