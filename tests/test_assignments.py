from evaltrack.core.config import settings
from evaltrack.models import AuditAction, User, UserRole
from tests.conftest import audit_rows, headers_for, notifications_for

UPDATE = "/api/v1/assignments/update"
BATCH = "/api/v1/assignments/batch-update"


def supervisor_of(db, user_id):
    db.expire_all()
    return db.get(User, user_id).supervisor_id


class TestSingleAssignment:

    def test_unassign_notifies(self, client, db, admin, employee):
        response = client.post(
            UPDATE, json={"employeeId": employee.id, "supervisorId": None}, headers=headers_for(admin),
        )

        assert response.status_code == 200
        assert response.json()["supervisorId"] is None
        notifications = notifications_for(db, employee.id)
        assert [n.message for n in notifications] == ["unassigned your supervisor."]
        assert notifications[0].actor_id == admin.id
        assert notifications[0].link == "/my-profile"

    def test_assign_names_new_supervisor(self, client, db, admin, make_user):
        loner = make_user(UserRole.EMPLOYEE)
        new_supervisor = make_user(UserRole.SUPERVISOR, name="Grace Hopper")

        response = client.post(
            UPDATE, json={"employeeId": loner.id, "supervisorId": new_supervisor.id}, headers=headers_for(admin),
        )

        assert response.status_code == 200
        assert response.json()["supervisor"]["name"] == "Grace Hopper"
        messages = [n.message for n in notifications_for(db, loner.id)]
        assert messages == ["assigned Grace Hopper as your supervisor."]

    def test_none_marker_means_no_supervisor(self, client, db, admin, employee):
        response = client.post(
            UPDATE, json={"employeeId": employee.id, "supervisorId": "--NONE--"}, headers=headers_for(admin),
        )
        assert response.status_code == 200
        assert supervisor_of(db, employee.id) is None

    def test_unchanged_supervisor_sends_nothing(self, client, db, admin, employee, supervisor):
        response = client.post(
            UPDATE, json={"employeeId": employee.id, "supervisorId": supervisor.id}, headers=headers_for(admin),
        )
        assert response.status_code == 200
        assert notifications_for(db, employee.id) == []

    def test_unknown_employee(self, client, admin):
        response = client.post(UPDATE, json={"employeeId": "ghost", "supervisorId": None}, headers=headers_for(admin))
        assert response.status_code == 404

    def test_unknown_supervisor(self, client, admin, employee):
        response = client.post(
            UPDATE, json={"employeeId": employee.id, "supervisorId": "ghost"}, headers=headers_for(admin),
        )
        assert response.status_code == 404

    def test_open_to_any_authenticated_caller_by_default(self, client, db, employee, make_user):
        colleague = make_user(UserRole.EMPLOYEE)
        response = client.post(
            UPDATE, json={"employeeId": colleague.id, "supervisorId": None}, headers=headers_for(employee),
        )
        assert response.status_code == 200

    def test_can_be_restricted_to_admin(self, client, employee, make_user, monkeypatch):
        monkeypatch.setattr(settings, "RESTRICT_SINGLE_ASSIGNMENT_TO_ADMIN", True)
        colleague = make_user(UserRole.EMPLOYEE)
        response = client.post(
            UPDATE, json={"employeeId": colleague.id, "supervisorId": None}, headers=headers_for(employee),
        )
        assert response.status_code == 403

    def test_requires_identity(self, client, employee):
        response = client.post(UPDATE, json={"employeeId": employee.id, "supervisorId": None})
        assert response.status_code == 401


class TestBatchAssignment:

    def test_admin_reassigns_all_and_audits_count(self, client, db, admin, make_user):
        target = make_user(UserRole.SUPERVISOR, name="Target Supervisor")
        employees = [make_user(UserRole.EMPLOYEE) for _ in range(3)]
        ids = [e.id for e in employees]

        response = client.post(BATCH, json={"employeeIds": ids, "supervisorId": target.id}, headers=headers_for(admin))

        assert response.status_code == 200
        assert response.json()["count"] == 3
        assert all(supervisor_of(db, employee_id) == target.id for employee_id in ids)

        rows = audit_rows(db, AuditAction.BATCH_ASSIGNMENT_SUCCESS)
        assert len(rows) == 1
        assert rows[0].user_id == admin.id
        assert rows[0].details["count"] == 3
        assert rows[0].details["employeeIds"] == ids
        assert rows[0].details["newSupervisorId"] == target.id

    def test_notifies_only_employees_whose_supervisor_changed(self, client, db, admin, supervisor, employee, make_user):
        unassigned = make_user(UserRole.EMPLOYEE)

        client.post(
            BATCH, json={"employeeIds": [employee.id, unassigned.id], "supervisorId": supervisor.id},
            headers=headers_for(admin),
        )

        assert notifications_for(db, employee.id) == []
        messages = [n.message for n in notifications_for(db, unassigned.id)]
        assert messages == ["assigned Sam Supervisor as your supervisor."]

    def test_requires_admin(self, client, supervisor, employee):
        response = client.post(
            BATCH, json={"employeeIds": [employee.id], "supervisorId": None}, headers=headers_for(supervisor),
        )
        assert response.status_code == 403

    def test_empty_list_rejected(self, client, admin):
        response = client.post(BATCH, json={"employeeIds": [], "supervisorId": None}, headers=headers_for(admin))
        assert response.status_code == 400

    def test_unknown_employee_changes_nothing_and_audits_failure(self, client, db, admin, employee, supervisor):
        response = client.post(
            BATCH, json={"employeeIds": [employee.id, "ghost"], "supervisorId": None}, headers=headers_for(admin),
        )

        assert response.status_code == 400
        assert supervisor_of(db, employee.id) == supervisor.id
        assert audit_rows(db, AuditAction.BATCH_ASSIGNMENT_SUCCESS) == []
        failures = audit_rows(db, AuditAction.BATCH_ASSIGNMENT_FAILURE)
        assert len(failures) == 1
        assert "ghost" in failures[0].details["error"]

    def test_unknown_supervisor_rejected(self, client, db, admin, employee):
        response = client.post(
            BATCH, json={"employeeIds": [employee.id], "supervisorId": "ghost"}, headers=headers_for(admin),
        )
        assert response.status_code == 400
        assert len(audit_rows(db, AuditAction.BATCH_ASSIGNMENT_FAILURE)) == 1
