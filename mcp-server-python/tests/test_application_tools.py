"""
Integration tests for the application record tools.

Covers create_application, get_application, list_applications,
update_application_notes and delete_application against a temporary database.
"""

import threading
from unittest.mock import patch

from db.applications_reader import query_histories as original_query_histories
from db.applications_reader import query_history as original_query_history

from tools.create_application import create_application
from tools.delete_application import delete_application
from tools.get_application import get_application
from tools.list_applications import list_applications
from tools.update_application_notes import update_application_notes
from tools.update_application_status import update_application_status


def create(db_path, company="Acme", role="Backend Engineer", **extra):
    result = create_application(
        {"company": company, "role": role, "db_path": str(db_path), **extra}
    )
    assert "error" not in result, result
    return result["application"]


class TestCreateApplication:
    """Tests for create_application."""

    def test_creates_record_in_applied(self, tmp_path):
        db_path = tmp_path / "apptrack.db"

        result = create_application(
            {
                "company": "  Acme  ",
                "role": "Backend Engineer",
                "job_posting_url": "https://jobs.acme.test/123",
                "notes": "Referred by Kim",
                "db_path": str(db_path),
            }
        )

        assert result["action"] == "created"
        application = result["application"]
        assert application["id"] == 1
        assert application["company"] == "Acme"
        assert application["current_status"] == "Applied"
        assert application["can_undo"] is False
        assert application["history"] == [
            {"status": "Applied", "changed_at": application["date_applied"]}
        ]
        assert application["updated_at"] == application["date_applied"]
        assert application["date_applied"].endswith("Z")

    def test_status_in_request_is_ignored(self, tmp_path):
        application = create(tmp_path / "apptrack.db", status="Offer")
        assert application["current_status"] == "Applied"

    def test_blank_url_stored_as_null(self, tmp_path):
        application = create(tmp_path / "apptrack.db", job_posting_url="   ")
        assert application["job_posting_url"] is None

    def test_empty_company_rejected(self, tmp_path):
        result = create_application(
            {"company": "   ", "role": "Engineer", "db_path": str(tmp_path / "apptrack.db")}
        )
        assert result["error"]["code"] == "VALIDATION_ERROR"
        assert "company" in result["error"]["message"]

    def test_missing_role_rejected(self, tmp_path):
        result = create_application({"company": "Acme", "db_path": str(tmp_path / "a.db")})
        assert result["error"]["code"] == "VALIDATION_ERROR"
        assert "role" in result["error"]["message"]

    def test_non_http_url_rejected(self, tmp_path):
        result = create_application(
            {
                "company": "Acme",
                "role": "Engineer",
                "job_posting_url": "ftp://acme.test",
                "db_path": str(tmp_path / "apptrack.db"),
            }
        )
        assert result["error"]["code"] == "VALIDATION_ERROR"
        assert "job_posting_url" in result["error"]["message"]

    def test_overlong_company_rejected(self, tmp_path):
        result = create_application(
            {"company": "x" * 201, "role": "Engineer", "db_path": str(tmp_path / "a.db")}
        )
        assert result["error"]["code"] == "VALIDATION_ERROR"
        assert "exceeds maximum of 200" in result["error"]["message"]


class TestGetApplication:
    """Tests for get_application."""

    def test_returns_record_with_history(self, tmp_path):
        db_path = tmp_path / "apptrack.db"
        created = create(db_path)
        update_application_status(
            {"application_id": created["id"], "target_status": "Ghosted", "db_path": str(db_path)}
        )

        result = get_application({"application_id": created["id"], "db_path": str(db_path)})

        application = result["application"]
        assert application["current_status"] == "Ghosted"
        assert [h["status"] for h in application["history"]] == ["Applied", "Ghosted"]
        assert application["can_undo"] is True

    def test_unknown_id(self, tmp_path):
        db_path = tmp_path / "apptrack.db"
        create(db_path)

        result = get_application({"application_id": 42, "db_path": str(db_path)})

        assert result["error"]["code"] == "APPLICATION_NOT_FOUND"
        assert result["error"]["details"] == {"application_id": 42}

    def test_missing_database(self, tmp_path):
        result = get_application({"application_id": 1, "db_path": str(tmp_path / "none.db")})
        assert result["error"]["code"] == "DB_NOT_FOUND"

    def test_non_positive_id(self, tmp_path):
        result = get_application({"application_id": 0, "db_path": str(tmp_path / "a.db")})
        assert result["error"]["code"] == "VALIDATION_ERROR"
        assert "application_id" in result["error"]["message"]

    def test_string_id_rejected(self, tmp_path):
        result = get_application({"application_id": "1", "db_path": str(tmp_path / "a.db")})
        assert result["error"]["code"] == "VALIDATION_ERROR"


class TestListApplications:
    """Tests for list_applications."""

    def test_pages_through_all_records_without_repeats(self, tmp_path):
        db_path = tmp_path / "apptrack.db"
        created_ids = [create(db_path, company=f"Company {i}")["id"] for i in range(5)]

        seen = []
        cursor = None
        while True:
            args = {"limit": 2, "db_path": str(db_path)}
            if cursor:
                args["cursor"] = cursor
            result = list_applications(args)
            assert result["count"] == len(result["applications"])
            seen.extend(a["id"] for a in result["applications"])
            if not result["has_more"]:
                assert result["next_cursor"] is None
                break
            cursor = result["next_cursor"]

        assert sorted(seen) == sorted(created_ids)
        assert len(seen) == len(set(seen))

    def test_newest_first(self, tmp_path):
        db_path = tmp_path / "apptrack.db"
        for i in range(3):
            create(db_path, company=f"Company {i}")

        result = list_applications({"db_path": str(db_path)})

        assert [a["id"] for a in result["applications"]] == [3, 2, 1]
        assert result["has_more"] is False

    def test_status_filter(self, tmp_path):
        db_path = tmp_path / "apptrack.db"
        first = create(db_path)
        create(db_path)
        update_application_status(
            {"application_id": first["id"], "target_status": "Rejected", "db_path": str(db_path)}
        )

        result = list_applications({"status": "Rejected", "db_path": str(db_path)})

        assert [a["id"] for a in result["applications"]] == [first["id"]]

    def test_invalid_status_filter(self, tmp_path):
        db_path = tmp_path / "apptrack.db"
        create(db_path)

        result = list_applications({"status": "rejected", "db_path": str(db_path)})

        assert result["error"]["code"] == "VALIDATION_ERROR"
        assert "Allowed values are" in result["error"]["message"]

    def test_limit_out_of_range(self, tmp_path):
        result = list_applications({"limit": 0, "db_path": str(tmp_path / "a.db")})
        assert result["error"]["code"] == "VALIDATION_ERROR"

        result = list_applications({"limit": 201, "db_path": str(tmp_path / "a.db")})
        assert result["error"]["code"] == "VALIDATION_ERROR"

    def test_malformed_cursor(self, tmp_path):
        db_path = tmp_path / "apptrack.db"
        create(db_path)

        result = list_applications({"cursor": "bm90LWpzb24=", "db_path": str(db_path)})

        assert result["error"]["code"] == "VALIDATION_ERROR"
        assert "cursor" in result["error"]["message"]

    def test_empty_database(self, tmp_path):
        db_path = tmp_path / "apptrack.db"
        create(db_path)
        delete_application({"application_id": 1, "db_path": str(db_path)})

        result = list_applications({"db_path": str(db_path)})

        assert result == {
            "applications": [],
            "count": 0,
            "has_more": False,
            "next_cursor": None,
        }


class TestReadConsistency:
    """Reads see one committed state even when a writer commits mid-read."""

    def start_status_change(self, db_path, app_id, results):
        """Start a status change in another thread and give it time to commit."""

        def change():
            results.append(
                update_application_status(
                    {
                        "application_id": app_id,
                        "target_status": "Screening Interview",
                        "db_path": str(db_path),
                    }
                )
            )

        thread = threading.Thread(target=change)
        thread.start()
        thread.join(timeout=0.5)
        return thread

    def test_get_application_during_concurrent_update(self, tmp_path):
        db_path = tmp_path / "apptrack.db"
        app_id = create(db_path)["id"]
        results = []
        threads = []
        started = threading.Event()

        def history_after_write(conn, application_id):
            if not started.is_set():
                started.set()
                threads.append(self.start_status_change(db_path, app_id, results))
            return original_query_history(conn, application_id)

        with patch(
            "db.applications_reader.query_history", side_effect=history_after_write
        ):
            result = get_application({"application_id": app_id, "db_path": str(db_path)})

        threads[0].join(timeout=10)

        assert "error" not in result, result
        application = result["application"]
        assert application["current_status"] == "Applied"
        assert [h["status"] for h in application["history"]] == ["Applied"]

        assert results[0]["action"] == "updated"
        stored = get_application({"application_id": app_id, "db_path": str(db_path)})
        assert stored["application"]["current_status"] == "Screening Interview"

    def test_list_applications_during_concurrent_update(self, tmp_path):
        db_path = tmp_path / "apptrack.db"
        app_id = create(db_path)["id"]
        results = []
        threads = []
        started = threading.Event()

        def histories_after_write(conn, application_ids):
            if not started.is_set():
                started.set()
                threads.append(self.start_status_change(db_path, app_id, results))
            return original_query_histories(conn, application_ids)

        with patch(
            "db.applications_reader.query_histories", side_effect=histories_after_write
        ):
            result = list_applications({"db_path": str(db_path)})

        threads[0].join(timeout=10)

        assert "error" not in result, result
        application = result["applications"][0]
        assert application["current_status"] == "Applied"
        assert [h["status"] for h in application["history"]] == ["Applied"]

        assert results[0]["action"] == "updated"
        listed = list_applications({"db_path": str(db_path)})
        assert listed["applications"][0]["current_status"] == "Screening Interview"


class TestUpdateApplicationNotes:
    """Tests for update_application_notes."""

    def test_replaces_notes_without_touching_history(self, tmp_path):
        db_path = tmp_path / "apptrack.db"
        created = create(db_path, notes="old")

        result = update_application_notes(
            {"application_id": created["id"], "notes": "new", "db_path": str(db_path)}
        )

        application = result["application"]
        assert application["notes"] == "new"
        assert application["history"] == created["history"]
        assert application["current_status"] == "Applied"

    def test_none_clears_notes(self, tmp_path):
        db_path = tmp_path / "apptrack.db"
        created = create(db_path, notes="old")

        result = update_application_notes(
            {"application_id": created["id"], "notes": None, "db_path": str(db_path)}
        )

        assert result["application"]["notes"] is None

    def test_unknown_id(self, tmp_path):
        db_path = tmp_path / "apptrack.db"
        create(db_path)

        result = update_application_notes(
            {"application_id": 9, "notes": "x", "db_path": str(db_path)}
        )

        assert result["error"]["code"] == "APPLICATION_NOT_FOUND"


class TestDeleteApplication:
    """Tests for delete_application."""

    def test_delete_then_get(self, tmp_path):
        db_path = tmp_path / "apptrack.db"
        created = create(db_path)

        result = delete_application({"application_id": created["id"], "db_path": str(db_path)})
        assert result == {"application_id": created["id"], "deleted": True}

        result = get_application({"application_id": created["id"], "db_path": str(db_path)})
        assert result["error"]["code"] == "APPLICATION_NOT_FOUND"

    def test_delete_unknown(self, tmp_path):
        db_path = tmp_path / "apptrack.db"
        create(db_path)

        result = delete_application({"application_id": 2, "db_path": str(db_path)})

        assert result["error"]["code"] == "APPLICATION_NOT_FOUND"
