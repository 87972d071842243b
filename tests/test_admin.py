import re
from datetime import datetime, timedelta, timezone

from evaltrack.core.config import settings
from evaltrack.models import AuditAction, AuditLog
from evaltrack.services.audit_service import AuditService
from tests.conftest import audit_rows, headers_for

SETTINGS = "/api/v1/admin/settings"
AUDIT_LOGS = "/api/v1/admin/audit-logs"
BACKUP = "/api/v1/admin/backup"


class TestSettings:

    def test_defaults_created_on_first_read(self, client, admin):
        response = client.get(SETTINGS, headers=headers_for(admin))

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == "global_settings"
        assert body["appName"] == "EvalTrack"
        assert body["systemTheme"] == "system"
        assert body["maintenanceMode"] is False
        assert body["notificationsEnabled"] is True

    def test_admin_only(self, client, supervisor):
        assert client.get(SETTINGS, headers=headers_for(supervisor)).status_code == 403
        assert client.put(SETTINGS, json={"appName": "X"}, headers=headers_for(supervisor)).status_code == 403

    def test_identical_payload_writes_no_audit(self, client, db, admin):
        current = client.get(SETTINGS, headers=headers_for(admin)).json()
        payload = {key: current[key] for key in ("appName", "systemTheme", "maintenanceMode")}

        response = client.put(SETTINGS, json=payload, headers=headers_for(admin))

        assert response.status_code == 200
        assert audit_rows(db, AuditAction.SYSTEM_SETTINGS_UPDATE) == []

    def test_one_changed_field_audits_only_that_field(self, client, db, admin):
        response = client.put(
            SETTINGS, json={"appName": "EvalTrack", "systemTheme": "dark"}, headers=headers_for(admin),
        )

        assert response.status_code == 200
        assert response.json()["systemTheme"] == "dark"
        rows = audit_rows(db, AuditAction.SYSTEM_SETTINGS_UPDATE)
        assert len(rows) == 1
        assert rows[0].user_id == admin.id
        assert rows[0].target_id == "global_settings"
        assert rows[0].details == {"systemTheme": {"oldValue": "system", "newValue": "dark"}}

    def test_empty_payload_rejected(self, client, admin):
        response = client.put(SETTINGS, json={}, headers=headers_for(admin))
        assert response.status_code == 400
        assert response.json()["message"] == "No settings provided to update."

    def test_settings_saved_even_if_audit_write_fails(self, client, db, admin, monkeypatch):
        def broken(self, *args, **kwargs):
            raise RuntimeError("audit store unavailable")

        monkeypatch.setattr(AuditService, "log_settings_update", broken)

        response = client.put(SETTINGS, json={"systemTheme": "dark"}, headers=headers_for(admin))

        assert response.status_code == 200
        assert client.get(SETTINGS, headers=headers_for(admin)).json()["systemTheme"] == "dark"
        assert audit_rows(db, AuditAction.SYSTEM_SETTINGS_UPDATE) == []


class TestAuditLogs:

    def _add(self, db, action, minutes_ago, user_id=None):
        db.add(AuditLog(
            action=action,
            user_id=user_id,
            timestamp=datetime.now(timezone.utc) - timedelta(minutes=minutes_ago),
        ))
        db.commit()

    def test_admin_only(self, client, employee):
        assert client.get(AUDIT_LOGS, headers=headers_for(employee)).status_code == 403

    def test_newest_first_with_user_summary(self, client, db, admin):
        self._add(db, AuditAction.SYSTEM_STARTUP, minutes_ago=30)
        self._add(db, AuditAction.AUTH_LOGIN_SUCCESS, minutes_ago=5, user_id=admin.id)

        entries = client.get(AUDIT_LOGS, headers=headers_for(admin)).json()

        assert [e["action"] for e in entries] == ["AUTH_LOGIN_SUCCESS", "SYSTEM_STARTUP"]
        assert entries[0]["user"]["name"] == "Ada Admin"
        assert entries[1]["user"] is None

    def test_action_filter(self, client, db, admin):
        self._add(db, AuditAction.SYSTEM_STARTUP, minutes_ago=3)
        self._add(db, AuditAction.DATA_BACKUP_SUCCESS, minutes_ago=2)

        entries = client.get(AUDIT_LOGS, params={"action": "SYSTEM_STARTUP"}, headers=headers_for(admin)).json()

        assert [e["action"] for e in entries] == ["SYSTEM_STARTUP"]

    def test_page_size(self, client, db, admin, monkeypatch):
        monkeypatch.setattr(settings, "AUDIT_LOG_PAGE_SIZE", 2)
        for minutes in (4, 3, 2, 1):
            self._add(db, AuditAction.SYSTEM_STARTUP, minutes_ago=minutes)

        entries = client.get(AUDIT_LOGS, headers=headers_for(admin)).json()

        assert len(entries) == 2

    def test_entries_survive_user_deletion(self, client, db, admin, make_user):
        leaver = make_user()
        leaver_id = leaver.id
        self._add(db, AuditAction.AUTH_LOGIN_SUCCESS, minutes_ago=1, user_id=leaver_id)

        assert client.delete(f"/api/v1/users/{leaver_id}", headers=headers_for(admin)).status_code == 200
        entries = client.get(AUDIT_LOGS, headers=headers_for(admin)).json()

        assert entries[0]["userId"] == leaver_id
        assert entries[0]["user"] is None


class TestBackup:

    def test_admin_only(self, client, supervisor):
        assert client.get(BACKUP, headers=headers_for(supervisor)).status_code == 403

    def test_backup_contains_every_section_but_no_passwords(self, client, db, admin, employee, make_criteria):
        make_criteria()
        stored_hash = employee.password

        response = client.get(BACKUP, headers=headers_for(admin))

        assert response.status_code == 200
        document = response.json()
        for section in (
            "users", "goals", "performanceScores", "evaluationCriteria", "workOutputs",
            "attendanceRecords", "systemSettings", "autoMessageTriggers",
        ):
            assert section in document
        assert len(document["users"]) == 3
        assert all("password" not in user for user in document["users"])
        assert stored_hash not in response.text

    def test_attachment_name_and_audit(self, client, db, admin):
        response = client.get(BACKUP, headers=headers_for(admin))

        disposition = response.headers["content-disposition"]
        match = re.search(r'filename="(evaltrack-backup-\d{8}T\d{6}Z\.json)"', disposition)
        assert disposition.startswith("attachment")
        assert match
        assert response.json()["filename"] == match.group(1)

        rows = audit_rows(db, AuditAction.DATA_BACKUP_SUCCESS)
        assert len(rows) == 1
        assert rows[0].details == {"filename": match.group(1)}

    def test_failure_is_audited(self, client, db, admin, monkeypatch):
        def broken(db, filename):
            raise RuntimeError("disk on fire")

        monkeypatch.setattr("evaltrack.api.v1.admin.build_backup", broken)

        response = client.get(BACKUP, headers=headers_for(admin))

        assert response.status_code == 500
        rows = audit_rows(db, AuditAction.DATA_BACKUP_FAILURE)
        assert len(rows) == 1
        assert rows[0].details == {"error": "disk on fire"}

    def test_failure_response_survives_audit_write_failure(self, client, db, admin, monkeypatch):
        def broken_backup(db, filename):
            raise RuntimeError("disk on fire")

        def broken_audit(self, *args, **kwargs):
            raise RuntimeError("audit store unavailable")

        monkeypatch.setattr("evaltrack.api.v1.admin.build_backup", broken_backup)
        monkeypatch.setattr(AuditService, "log_backup", broken_audit)

        response = client.get(BACKUP, headers=headers_for(admin))

        assert response.status_code == 500
        assert response.json()["message"] == "Failed to generate backup."
        assert response.json()["error"] == "disk on fire"
        assert audit_rows(db, AuditAction.DATA_BACKUP_FAILURE) == []

    def test_success_survives_audit_write_failure(self, client, db, admin, monkeypatch):
        def broken(self, *args, **kwargs):
            raise RuntimeError("audit store unavailable")

        monkeypatch.setattr(AuditService, "log_backup", broken)

        response = client.get(BACKUP, headers=headers_for(admin))

        assert response.status_code == 200
        assert "users" in response.json()
        assert audit_rows(db, AuditAction.DATA_BACKUP_SUCCESS) == []
