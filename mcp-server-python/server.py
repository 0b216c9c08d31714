#!/usr/bin/env python3
"""
MCP Server entry point for the AppTrack application status engine.

This server exposes tools for tracking job applications through the hiring
pipeline: creating and reading application records, asking which statuses an
application may move to next, committing status changes under the transition
rules, and undoing the most recent change.

The server uses the FastMCP framework to expose the tools to LLM agents via
the Model Context Protocol.

Usage:
    python server.py

The server runs in stdio mode by default, which is the standard transport
for MCP servers that are invoked by LLM agents.
"""

import logging
from mcp.server.fastmcp import FastMCP
from tools.create_application import create_application
from tools.get_application import get_application
from tools.list_applications import list_applications
from tools.get_valid_next_statuses import get_valid_next_statuses
from tools.update_application_status import update_application_status
from tools.undo_status_change import undo_status_change
from tools.update_application_notes import update_application_notes
from tools.delete_application import delete_application
from config import get_config

# Create FastMCP server instance
config = get_config()
mcp = FastMCP(
    name=config.server_name,
    instructions=(
        "This server tracks job applications through the hiring pipeline "
        "(Applied -> Screening Interview -> Mid-stage Interview -> Final Interview -> Offer, "
        "plus Rejected and Ghosted). "
        "\n\n"
        "RECORD TOOLS:\n"
        "Use create_application to log a new application; it always starts in 'Applied'. "
        "Use get_application and list_applications to read records with their full status history. "
        "Use update_application_notes to edit notes and delete_application to remove a record."
        "\n\n"
        "STATUS LIFECYCLE TOOLS:\n"
        "Use get_valid_next_statuses to see which statuses an application may move to next; "
        "this is advisory only. "
        "Use update_application_status to commit a status change; it re-checks the transition "
        "against the stored status and rejects illegal moves with ILLEGAL_TRANSITION. "
        "Use undo_status_change to revert the most recent status change one step at a time; "
        "the initial 'Applied' entry can never be undone (UNDO_NOT_ALLOWED)."
    ),
)


@mcp.tool(
    name="create_application",
    description=(
        "Create a job application record in status 'Applied'. "
        "Returns the record with its single-entry status history."
    ),
)
def create_application_tool(
    company: str,
    role: str,
    job_posting_url: str | None = None,
    notes: str | None = None,
    db_path: str | None = None,
) -> dict:
    """
    Create a job application in the Applied status.

    Args:
        company: Company name (required, non-empty).
        role: Role title (required, non-empty).
        job_posting_url: Optional http(s) URL of the job posting.
        notes: Optional free-text notes.
        db_path: Optional SQLite path override (default: data/apptrack.db).

    Returns:
        {"action": "created", "application": {...}} or {"error": {...}}.
    """
    args = {"company": company, "role": role}

    if job_posting_url is not None:
        args["job_posting_url"] = job_posting_url
    if notes is not None:
        args["notes"] = notes
    if db_path is not None:
        args["db_path"] = db_path

    return create_application(args)


@mcp.tool(
    name="get_application",
    description="Fetch one job application by id, including its full status history.",
)
def get_application_tool(application_id: int, db_path: str | None = None) -> dict:
    """
    Fetch one application by id.

    Args:
        application_id: Application id (positive integer).
        db_path: Optional SQLite path override.

    Returns:
        {"application": {...}} or {"error": {...}} (APPLICATION_NOT_FOUND when missing).
    """
    args = {"application_id": application_id}
    if db_path is not None:
        args["db_path"] = db_path

    return get_application(args)


@mcp.tool(
    name="list_applications",
    description=(
        "List job applications newest first with cursor-based pagination. "
        "Optionally filter by current status."
    ),
)
def list_applications_tool(
    limit: int | None = None,
    cursor: str | None = None,
    status: str | None = None,
    db_path: str | None = None,
) -> dict:
    """
    Page through applications ordered by date_applied (newest first).

    Args:
        limit: Page size, 1-200 (default: 50).
        cursor: Opaque cursor from a previous page's next_cursor.
        status: Only include applications currently in this status.
        db_path: Optional SQLite path override.

    Returns:
        {"applications": [...], "count": int, "has_more": bool, "next_cursor": str|None}
    """
    args = {}

    if limit is not None:
        args["limit"] = limit
    if cursor is not None:
        args["cursor"] = cursor
    if status is not None:
        args["status"] = status
    if db_path is not None:
        args["db_path"] = db_path

    return list_applications(args)


@mcp.tool(
    name="get_valid_next_statuses",
    description=(
        "Advisory: list the statuses an application (by id) or a bare status may move to next, "
        "in pipeline order. The current status is always included."
    ),
)
def get_valid_next_statuses_tool(
    application_id: int | None = None,
    current_status: str | None = None,
    db_path: str | None = None,
) -> dict:
    """
    Return the legal next statuses.

    Args:
        application_id: Look up this application's current status.
        current_status: Evaluate this status directly (use instead of application_id).
        db_path: Optional SQLite path override.

    Returns:
        {"current_status": str, "valid_next_statuses": [str, ...], ...}
    """
    args = {}

    if application_id is not None:
        args["application_id"] = application_id
    if current_status is not None:
        args["current_status"] = current_status
    if db_path is not None:
        args["db_path"] = db_path

    return get_valid_next_statuses(args)


@mcp.tool(
    name="update_application_status",
    description=(
        "Move a job application to a new status. The transition is checked against the stored "
        "status; illegal moves are rejected with ILLEGAL_TRANSITION and the record is unchanged. "
        "Moving to the current status is a no-op."
    ),
)
def update_application_status_tool(
    application_id: int,
    target_status: str,
    dry_run: bool | None = None,
    db_path: str | None = None,
) -> dict:
    """
    Commit a status change.

    Args:
        application_id: Application to update.
        target_status: Desired status. One of: Applied, Screening Interview,
            Mid-stage Interview, Final Interview, Offer, Rejected, Ghosted.
        dry_run: Preview the action without writing (default: false).
        db_path: Optional SQLite path override.

    Returns:
        {"action": "updated" | "noop" | "would_update", "application": {...}, ...}
        or {"error": {...}}.
    """
    args = {"application_id": application_id, "target_status": target_status}

    if dry_run is not None:
        args["dry_run"] = dry_run
    if db_path is not None:
        args["db_path"] = db_path

    return update_application_status(args)


@mcp.tool(
    name="undo_status_change",
    description=(
        "Revert the most recent status change of a job application (one step, no redo). "
        "Fails with UNDO_NOT_ALLOWED when only the initial 'Applied' entry remains."
    ),
)
def undo_status_change_tool(application_id: int, db_path: str | None = None) -> dict:
    """
    Undo the last status change.

    Args:
        application_id: Application to revert.
        db_path: Optional SQLite path override.

    Returns:
        {"previous_status": str, "restored_status": str, "removed_entry": {...},
         "application": {...}} or {"error": {...}}.
    """
    args = {"application_id": application_id}
    if db_path is not None:
        args["db_path"] = db_path

    return undo_status_change(args)


@mcp.tool(
    name="update_application_notes",
    description="Replace the notes of a job application. Status and history are unchanged.",
)
def update_application_notes_tool(
    application_id: int, notes: str | None = None, db_path: str | None = None
) -> dict:
    """
    Replace notes.

    Args:
        application_id: Application to edit.
        notes: New notes (omit or null to clear).
        db_path: Optional SQLite path override.
    """
    args = {"application_id": application_id, "notes": notes}
    if db_path is not None:
        args["db_path"] = db_path

    return update_application_notes(args)


@mcp.tool(
    name="delete_application",
    description="Delete a job application and its status history.",
)
def delete_application_tool(application_id: int, db_path: str | None = None) -> dict:
    """
    Delete an application.

    Args:
        application_id: Application to delete.
        db_path: Optional SQLite path override.
    """
    args = {"application_id": application_id}
    if db_path is not None:
        args["db_path"] = db_path

    return delete_application(args)


def main():
    """
    Main entry point for the MCP server.

    Runs the server in stdio mode, which is the standard transport
    for MCP servers that are invoked by LLM agents.
    """
    config.setup_logging()

    logger = logging.getLogger(__name__)
    logger.info("Starting AppTrack MCP Server")
    logger.info(f"Server name: {config.server_name}")
    logger.info(f"Database path: {config.db_path}")

    warnings = config.validate()
    for warning in warnings:
        logger.warning(warning)

    logger.info("Server starting in stdio mode")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
