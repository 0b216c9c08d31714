"""
Integration tests for the get_valid_next_statuses tool.
"""

from unittest.mock import patch

import pytest

from config import get_config
from tools.create_application import create_application
from tools.get_valid_next_statuses import get_valid_next_statuses
from tools.update_application_status import update_application_status


class TestByStatus:
    """Evaluating a bare current_status."""

    @pytest.mark.parametrize(
        "current,expected",
        [
            ("Applied", ["Applied", "Screening Interview", "Mid-stage Interview",
                         "Final Interview", "Offer", "Rejected", "Ghosted"]),
            ("Mid-stage Interview", ["Mid-stage Interview", "Final Interview",
                                     "Offer", "Rejected", "Ghosted"]),
            ("Offer", ["Offer", "Rejected"]),
            ("Rejected", ["Offer", "Rejected"]),
            ("Ghosted", ["Screening Interview", "Mid-stage Interview", "Final Interview",
                         "Offer", "Rejected", "Ghosted"]),
        ],
    )
    def test_rule_table(self, current, expected):
        result = get_valid_next_statuses({"current_status": current})

        assert result == {"current_status": current, "valid_next_statuses": expected}

    def test_unknown_status_fails_open(self):
        with patch.object(get_config(), "strict_status_check", False):
            result = get_valid_next_statuses({"current_status": "Phone Screen"})

        assert result["valid_next_statuses"] == [
            "Applied",
            "Screening Interview",
            "Mid-stage Interview",
            "Final Interview",
            "Offer",
            "Rejected",
            "Ghosted",
        ]

    def test_unknown_status_rejected_in_strict_mode(self):
        with patch.object(get_config(), "strict_status_check", True):
            result = get_valid_next_statuses({"current_status": "Phone Screen"})

        assert result["error"]["code"] == "VALIDATION_ERROR"


class TestByApplication:
    """Looking up an application's stored status."""

    def test_reports_current_status_and_can_undo(self, tmp_path):
        db_path = tmp_path / "apptrack.db"
        app_id = create_application(
            {"company": "Acme", "role": "Engineer", "db_path": str(db_path)}
        )["application"]["id"]

        result = get_valid_next_statuses({"application_id": app_id, "db_path": str(db_path)})
        assert result["current_status"] == "Applied"
        assert result["can_undo"] is False

        update_application_status(
            {"application_id": app_id, "target_status": "Final Interview", "db_path": str(db_path)}
        )

        result = get_valid_next_statuses({"application_id": app_id, "db_path": str(db_path)})
        assert result == {
            "application_id": app_id,
            "current_status": "Final Interview",
            "valid_next_statuses": ["Final Interview", "Offer", "Rejected", "Ghosted"],
            "can_undo": True,
        }

    def test_unknown_application(self, tmp_path):
        db_path = tmp_path / "apptrack.db"
        create_application({"company": "Acme", "role": "Engineer", "db_path": str(db_path)})

        result = get_valid_next_statuses({"application_id": 5, "db_path": str(db_path)})

        assert result["error"]["code"] == "APPLICATION_NOT_FOUND"


class TestRequestValidation:
    """Exactly one lookup source is required."""

    def test_neither_source(self):
        result = get_valid_next_statuses({})
        assert result["error"]["code"] == "VALIDATION_ERROR"
        assert "exactly one" in result["error"]["message"]

    def test_both_sources(self):
        result = get_valid_next_statuses({"application_id": 1, "current_status": "Applied"})
        assert result["error"]["code"] == "VALIDATION_ERROR"
