"""
Database reader layer for the application read tools.

Provides read-only access to the applications database with connection
management and deterministic query execution.
"""

import sqlite3
from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from models.application import JobApplication, from_rows
from models.errors import (
    create_application_not_found_error,
    create_db_error,
    create_db_not_found_error,
)
from models.status import ApplicationStatus
from utils.path_resolution import resolve_db_path

APPLICATION_COLUMNS = """
    id,
    company,
    role,
    notes,
    job_posting_url,
    date_applied,
    status,
    updated_at
"""


@contextmanager
def get_connection(db_path: Optional[str] = None):
    """
    Context manager for read-only SQLite database connections.

    Every query made on the yielded connection runs inside one read
    transaction, so an application row and its history always come from the
    same committed state. Writers wait for the transaction to end before
    committing. The connection is always closed, even on errors.

    Args:
        db_path: Optional database path override

    Yields:
        sqlite3.Connection: Database connection

    Raises:
        ToolError: If database file doesn't exist or connection fails
    """
    resolved_path = resolve_db_path(db_path)

    if not resolved_path.exists():
        raise create_db_not_found_error(str(resolved_path))

    if not resolved_path.is_file():
        raise create_db_not_found_error(str(resolved_path))

    conn = None
    try:
        # URI mode allows read-only flag
        uri = f"file:{resolved_path}?mode=ro"
        conn = sqlite3.connect(uri, uri=True)
        conn.row_factory = sqlite3.Row
        conn.execute("BEGIN")

        yield conn

    except sqlite3.OperationalError as e:
        error_msg = str(e)
        if "unable to open database" in error_msg.lower():
            raise create_db_not_found_error(str(resolved_path)) from e
        else:
            raise create_db_error(error_msg, retryable=True, original_error=e) from e

    except sqlite3.Error as e:
        raise create_db_error(str(e), retryable=False, original_error=e) from e

    finally:
        if conn is not None:
            if conn.in_transaction:
                conn.rollback()
            conn.close()


def query_history(conn: sqlite3.Connection, application_id: int) -> List[sqlite3.Row]:
    """
    Load the status history of one application in append order.

    Raises:
        ToolError: If query execution fails
    """
    try:
        cursor_obj = conn.execute(
            """
            SELECT status, changed_at
            FROM status_history
            WHERE application_id = ?
            ORDER BY position ASC
            """,
            (application_id,),
        )
        return cursor_obj.fetchall()
    except sqlite3.Error as e:
        raise create_db_error(str(e), retryable=False, original_error=e) from e


def load_application(conn: sqlite3.Connection, application_id: int) -> JobApplication:
    """
    Load one application aggregate (record plus full history) by id.

    Works on both read-only and read-write connections, so the writer uses it
    to read the current state inside its own transaction.

    Raises:
        ToolError: APPLICATION_NOT_FOUND if no record has this id, DB_ERROR on
            query failure
    """
    try:
        row = conn.execute(
            f"SELECT {APPLICATION_COLUMNS} FROM applications WHERE id = ?",
            (application_id,),
        ).fetchone()
    except sqlite3.Error as e:
        raise create_db_error(str(e), retryable=False, original_error=e) from e

    if row is None:
        raise create_application_not_found_error(application_id)

    try:
        return from_rows(row, query_history(conn, application_id))
    except ValidationError as e:
        raise create_db_error(
            f"Stored application {application_id} is inconsistent: {e.errors()[0]['msg']}",
            retryable=False,
            original_error=e,
        ) from e


def query_applications(
    conn: sqlite3.Connection,
    limit: int,
    cursor: Optional[Tuple[str, int]] = None,
    status: Optional[ApplicationStatus] = None,
) -> List[Dict[str, Any]]:
    """
    Query applications in deterministic order.

    Results are ordered by (date_applied DESC, id DESC) so that newest
    applications come first and pagination never repeats or skips a row.

    Args:
        conn: Database connection
        limit: Page size (limit+1 rows are fetched to compute has_more)
        cursor: Optional pagination boundary (date_applied, id)
        status: Optional current-status filter

    Returns:
        List of application rows as dictionaries

    Raises:
        ToolError: If query execution fails
    """
    clauses = []
    params: List[Any] = []

    if status is not None:
        clauses.append("status = ?")
        params.append(status.value)

    if cursor is not None:
        cursor_ts, cursor_id = cursor
        clauses.append("(date_applied < ? OR (date_applied = ? AND id < ?))")
        params.extend([cursor_ts, cursor_ts, cursor_id])

    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    query = f"""
        SELECT {APPLICATION_COLUMNS}
        FROM applications
        {where}
        ORDER BY date_applied DESC, id DESC
        LIMIT ?
    """
    params.append(limit + 1)

    try:
        rows = conn.execute(query, params).fetchall()
        return [dict(row) for row in rows]
    except sqlite3.Error as e:
        raise create_db_error(str(e), retryable=False, original_error=e) from e


def query_histories(
    conn: sqlite3.Connection, application_ids: List[int]
) -> Dict[int, List[Dict[str, Any]]]:
    """
    Load the histories of several applications with a single query.

    Returns:
        Mapping of application id to its history rows in append order

    Raises:
        ToolError: If query execution fails
    """
    histories: Dict[int, List[Dict[str, Any]]] = {app_id: [] for app_id in application_ids}
    if not application_ids:
        return histories

    placeholders = ",".join("?" * len(application_ids))
    query = f"""
        SELECT application_id, status, changed_at
        FROM status_history
        WHERE application_id IN ({placeholders})
        ORDER BY application_id ASC, position ASC
    """
    try:
        for row in conn.execute(query, application_ids).fetchall():
            histories[row["application_id"]].append(
                {"status": row["status"], "changed_at": row["changed_at"]}
            )
        return histories
    except sqlite3.Error as e:
        raise create_db_error(str(e), retryable=False, original_error=e) from e


def build_applications(
    conn: sqlite3.Connection, rows: List[Dict[str, Any]]
) -> List[JobApplication]:
    """
    Turn a page of application rows into aggregates, histories included.

    Raises:
        ToolError: DB_ERROR on query failure or rows violating the history invariants
    """
    histories = query_histories(conn, [row["id"] for row in rows])

    applications = []
    for row in rows:
        try:
            applications.append(from_rows(row, histories[row["id"]]))
        except ValidationError as e:
            raise create_db_error(
                f"Stored application {row['id']} is inconsistent: {e.errors()[0]['msg']}",
                retryable=False,
                original_error=e,
            ) from e
    return applications
