"""
Database writer layer for the application mutation tools.

Provides schema bootstrap and write access to the applications database with
transaction management. Every writer holds a ``BEGIN IMMEDIATE`` transaction,
so a read-validate-write sequence on one application is serialized against
all other writers of the same database file.
"""

import logging
import sqlite3
from pathlib import Path
from typing import Optional

from config import get_config
from db.applications_reader import load_application
from models.application import JobApplication, StatusHistoryEntry
from models.errors import create_application_not_found_error, create_db_error
from utils.path_resolution import resolve_db_path

logger = logging.getLogger(__name__)


def ensure_parent_dirs(db_path: Path) -> None:
    """
    Ensure parent directories exist for the database file.

    Raises:
        ToolError: If directory creation fails
    """
    try:
        db_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise create_db_error(
            f"Failed to create parent directories: {str(e)}", retryable=False, original_error=e
        ) from e


def bootstrap_schema(conn: sqlite3.Connection) -> None:
    """
    Bootstrap the applications and status_history tables if they don't exist.

    Creates:
    - applications table (one row per application, status = current status)
    - status_history table (one row per ledger entry, ordered by position)
    - idx_applications_status and idx_applications_date_applied indexes

    This operation is idempotent - safe to call on existing databases.

    Raises:
        ToolError: If schema creation fails
    """
    try:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS applications (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                company TEXT NOT NULL,
                role TEXT NOT NULL,
                notes TEXT,
                job_posting_url TEXT,
                date_applied TEXT NOT NULL,
                status TEXT NOT NULL DEFAULT 'Applied',
                updated_at TEXT
            )
        """)

        conn.execute("""
            CREATE TABLE IF NOT EXISTS status_history (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                application_id INTEGER NOT NULL
                    REFERENCES applications(id) ON DELETE CASCADE,
                position INTEGER NOT NULL,
                status TEXT NOT NULL,
                changed_at TEXT NOT NULL,
                UNIQUE (application_id, position)
            )
        """)

        conn.execute("""
            CREATE INDEX IF NOT EXISTS idx_applications_status
            ON applications(status)
        """)

        conn.execute("""
            CREATE INDEX IF NOT EXISTS idx_applications_date_applied
            ON applications(date_applied DESC, id DESC)
        """)

        conn.commit()

    except sqlite3.Error as e:
        raise create_db_error(
            f"Failed to bootstrap schema: {str(e)}", retryable=False, original_error=e
        ) from e


class ApplicationsWriter:
    """
    Context manager for write operations on the applications database.

    Creates the database and schema on first use, holds an immediate
    transaction for its whole lifetime, rolls back on exceptions and always
    closes the connection.

    Usage:
        with ApplicationsWriter(db_path) as writer:
            application = writer.load_application(7)
            entry = apply_transition(application, target, now)
            writer.record_transition(application, entry, now)
            writer.commit()
    """

    def __init__(self, db_path: Optional[str] = None, busy_timeout: Optional[float] = None):
        """
        Initialize writer with database path.

        Args:
            db_path: Optional database path override
            busy_timeout: Seconds to wait for another writer's lock
                (default from APPTRACK_DB_BUSY_TIMEOUT)
        """
        self.db_path = db_path
        self.busy_timeout = get_config().db_busy_timeout if busy_timeout is None else busy_timeout
        self.resolved_path: Optional[Path] = None
        self.conn: Optional[sqlite3.Connection] = None
        self._in_transaction = False

    def __enter__(self):
        """
        Open connection, bootstrap schema and begin an immediate transaction.

        Raises:
            ToolError: If the path is unusable, the connection fails or the
                write lock cannot be acquired within the busy timeout
        """
        self.resolved_path = resolve_db_path(self.db_path)

        if self.resolved_path.exists() and not self.resolved_path.is_file():
            raise create_db_error(
                f"Database path is not a file: {self.resolved_path.name}", retryable=False
            )

        ensure_parent_dirs(self.resolved_path)

        try:
            self.conn = sqlite3.connect(str(self.resolved_path), timeout=self.busy_timeout)
            self.conn.row_factory = sqlite3.Row
            self.conn.execute("PRAGMA foreign_keys = ON")

            bootstrap_schema(self.conn)

            # Reserve the write lock before reading current state
            self.conn.execute("BEGIN IMMEDIATE")
            self._in_transaction = True

            return self

        except sqlite3.OperationalError as e:
            self._close()
            # "database is locked" after the busy timeout is worth retrying
            raise create_db_error(str(e), retryable=True, original_error=e) from e

        except sqlite3.Error as e:
            self._close()
            raise create_db_error(str(e), retryable=False, original_error=e) from e

        except Exception:
            self._close()
            raise

    def __exit__(self, exc_type, exc_val, exc_tb):
        """
        Rollback on exception or uncommitted work, close connection always.

        Returns:
            False to propagate exceptions
        """
        try:
            if self._in_transaction:
                self.rollback()
        finally:
            self._close()

        return False

    def _close(self) -> None:
        if self.conn is not None:
            self.conn.close()
            self.conn = None

    def _require_connection(self) -> sqlite3.Connection:
        if self.conn is None:
            raise create_db_error("Connection not established", retryable=False)
        return self.conn

    def load_application(self, application_id: int) -> JobApplication:
        """
        Read an application inside the current write transaction.

        Raises:
            ToolError: APPLICATION_NOT_FOUND or DB_ERROR
        """
        return load_application(self._require_connection(), application_id)

    def insert_application(self, application: JobApplication) -> int:
        """
        Insert a new application together with its initial history entry.

        Sets ``application.id`` to the generated primary key.

        Returns:
            The new application id

        Raises:
            ToolError: If INSERT execution fails
        """
        conn = self._require_connection()

        try:
            cursor = conn.execute(
                """
                INSERT INTO applications (
                    company, role, notes, job_posting_url, date_applied, status, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    application.company,
                    application.role,
                    application.notes,
                    application.job_posting_url,
                    application.date_applied,
                    application.current_status.value,
                    application.updated_at,
                ),
            )
            application.id = cursor.lastrowid

            for position, entry in enumerate(application.history):
                self._insert_history_entry(application.id, position, entry)

            return application.id

        except sqlite3.Error as e:
            raise create_db_error(str(e), retryable=False, original_error=e) from e

    def _insert_history_entry(
        self, application_id: int, position: int, entry: StatusHistoryEntry
    ) -> None:
        self._require_connection().execute(
            """
            INSERT INTO status_history (application_id, position, status, changed_at)
            VALUES (?, ?, ?, ?)
            """,
            (application_id, position, entry.status.value, entry.changed_at),
        )

    def _update_current_status(self, application: JobApplication, timestamp: str) -> None:
        cursor = self._require_connection().execute(
            """
            UPDATE applications
            SET status = ?,
                updated_at = ?
            WHERE id = ?
            """,
            (application.current_status.value, timestamp, application.id),
        )
        if cursor.rowcount == 0:
            raise create_application_not_found_error(application.id)
        application.updated_at = timestamp

    def record_transition(
        self, application: JobApplication, entry: StatusHistoryEntry, timestamp: str
    ) -> None:
        """
        Persist an entry just appended by ``status_ledger.apply_transition``.

        Writes the new history row at the entry's position and the new
        current status in the same transaction.

        Raises:
            ToolError: If the write fails
        """
        if application.history[-1] is not entry:
            raise create_db_error(
                "Entry to record is not the last history entry", retryable=False
            )

        try:
            self._insert_history_entry(application.id, len(application.history) - 1, entry)
            self._update_current_status(application, timestamp)
        except sqlite3.Error as e:
            raise create_db_error(str(e), retryable=False, original_error=e) from e

    def record_undo(self, application: JobApplication, timestamp: str) -> None:
        """
        Persist an entry just removed by ``status_ledger.undo_last``.

        The removed entry occupied position ``len(history)`` (after the pop).

        Raises:
            ToolError: If the write fails or the history row is missing
        """
        conn = self._require_connection()
        removed_position = len(application.history)

        try:
            cursor = conn.execute(
                "DELETE FROM status_history WHERE application_id = ? AND position = ?",
                (application.id, removed_position),
            )
            if cursor.rowcount != 1:
                raise create_db_error(
                    f"History entry {removed_position} of application {application.id} not found",
                    retryable=False,
                )
            self._update_current_status(application, timestamp)
        except sqlite3.Error as e:
            raise create_db_error(str(e), retryable=False, original_error=e) from e

    def update_notes(self, application_id: int, notes: Optional[str], timestamp: str) -> None:
        """
        Replace the notes of an application; status and history are untouched.

        Raises:
            ToolError: APPLICATION_NOT_FOUND or DB_ERROR
        """
        conn = self._require_connection()
        try:
            cursor = conn.execute(
                "UPDATE applications SET notes = ?, updated_at = ? WHERE id = ?",
                (notes, timestamp, application_id),
            )
        except sqlite3.Error as e:
            raise create_db_error(str(e), retryable=False, original_error=e) from e

        if cursor.rowcount == 0:
            raise create_application_not_found_error(application_id)

    def delete_application(self, application_id: int) -> None:
        """
        Delete an application and its whole status history.

        Raises:
            ToolError: APPLICATION_NOT_FOUND or DB_ERROR
        """
        conn = self._require_connection()
        try:
            conn.execute("DELETE FROM status_history WHERE application_id = ?", (application_id,))
            cursor = conn.execute("DELETE FROM applications WHERE id = ?", (application_id,))
        except sqlite3.Error as e:
            raise create_db_error(str(e), retryable=False, original_error=e) from e

        if cursor.rowcount == 0:
            raise create_application_not_found_error(application_id)

    def commit(self) -> None:
        """
        Commit the transaction.

        Raises:
            ToolError: If commit fails
        """
        conn = self._require_connection()

        if not self._in_transaction:
            return

        try:
            conn.commit()
            self._in_transaction = False
        except sqlite3.Error as e:
            raise create_db_error(
                f"Failed to commit transaction: {str(e)}", retryable=True, original_error=e
            ) from e

    def rollback(self) -> None:
        """
        Rollback the transaction.

        Rollback failures are logged, not raised, since rollback runs during
        error handling.
        """
        if self.conn is None or not self._in_transaction:
            return

        try:
            self.conn.rollback()
        except sqlite3.Error as e:
            logger.warning("Rollback failed: %s", e)
        finally:
            self._in_transaction = False
