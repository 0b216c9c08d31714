"""
Integration tests for MCP server entry point.

Tests that server.py registers every AppTrack tool with proper metadata and
that the wrappers can be invoked directly.
"""

import inspect
import os
import sys
import subprocess
from pathlib import Path

from server import (
    mcp,
    create_application_tool,
    get_application_tool,
    list_applications_tool,
    get_valid_next_statuses_tool,
    update_application_status_tool,
    undo_status_change_tool,
    update_application_notes_tool,
    delete_application_tool,
)

TOOL_NAMES = [
    "create_application",
    "get_application",
    "list_applications",
    "get_valid_next_statuses",
    "update_application_status",
    "undo_status_change",
    "update_application_notes",
    "delete_application",
]


class TestServerIntegration:
    """Integration tests for the MCP server."""

    def test_server_has_correct_name(self):
        """Test that the MCP server has the correct name."""
        assert mcp.name == "apptrack-mcp-server"

    def test_server_name_can_be_overridden_by_env(self):
        """Test that APPTRACK_SERVER_NAME is applied in a fresh process."""
        server_dir = Path(__file__).resolve().parents[1]
        env = os.environ.copy()
        env["APPTRACK_SERVER_NAME"] = "custom-server-name"
        env["PYTHONPATH"] = str(server_dir)

        proc = subprocess.run(
            [sys.executable, "-c", "import server; print(server.mcp.name)"],
            cwd=server_dir,
            env=env,
            capture_output=True,
            text=True,
            check=True,
        )

        assert proc.stdout.strip() == "custom-server-name"

    def test_server_has_instructions(self):
        """Test that the MCP server instructions mention the lifecycle tools."""
        assert mcp.instructions is not None
        assert "update_application_status" in mcp.instructions
        assert "undo_status_change" in mcp.instructions
        assert "ILLEGAL_TRANSITION" in mcp.instructions

    def test_all_tools_registered(self):
        """Test that every tool is registered with a description."""
        for name in TOOL_NAMES:
            assert name in mcp._tool_manager._tools
            assert mcp._tool_manager._tools[name].description

    def test_update_status_signature(self):
        """Test the update_application_status wrapper parameters."""
        params = inspect.signature(update_application_status_tool).parameters
        assert list(params) == ["application_id", "target_status", "dry_run", "db_path"]
        assert params["dry_run"].default is None


class TestServerWrappers:
    """Drive a full lifecycle through the server wrappers."""

    def test_lifecycle_via_wrappers(self, tmp_path):
        db_path = str(tmp_path / "apptrack.db")

        created = create_application_tool(
            company="Acme", role="Data Engineer", notes="via referral", db_path=db_path
        )
        app_id = created["application"]["id"]

        assert get_valid_next_statuses_tool(current_status="Offer")["valid_next_statuses"] == [
            "Offer",
            "Rejected",
        ]

        moved = update_application_status_tool(
            application_id=app_id, target_status="Final Interview", db_path=db_path
        )
        assert moved["action"] == "updated"

        preview = update_application_status_tool(
            application_id=app_id, target_status="Offer", dry_run=True, db_path=db_path
        )
        assert preview["action"] == "would_update"

        rejected = update_application_status_tool(
            application_id=app_id, target_status="Applied", db_path=db_path
        )
        assert rejected["error"]["code"] == "ILLEGAL_TRANSITION"

        undone = undo_status_change_tool(application_id=app_id, db_path=db_path)
        assert undone["restored_status"] == "Applied"

        refused = undo_status_change_tool(application_id=app_id, db_path=db_path)
        assert refused["error"]["code"] == "UNDO_NOT_ALLOWED"

        notes = update_application_notes_tool(application_id=app_id, db_path=db_path)
        assert notes["application"]["notes"] is None

        listing = list_applications_tool(status="Applied", db_path=db_path)
        assert listing["count"] == 1

        fetched = get_application_tool(application_id=app_id, db_path=db_path)
        assert fetched["application"]["can_undo"] is False

        assert delete_application_tool(application_id=app_id, db_path=db_path)["deleted"] is True
        assert list_applications_tool(db_path=db_path)["count"] == 0

    def test_wrapper_returns_error_dict(self, tmp_path):
        """Test that wrappers surface tool errors instead of raising."""
        result = get_application_tool(application_id=1, db_path=str(tmp_path / "missing.db"))
        assert result["error"]["code"] == "DB_NOT_FOUND"
