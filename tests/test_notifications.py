from evaltrack.core.config import settings
from evaltrack.models import AuditAction, Notification
from tests.conftest import audit_rows, headers_for

NOTIFICATIONS = "/api/v1/notifications"


def add_notifications(db, recipient, actor, how_many, is_read=False):
    items = [
        Notification(recipient_id=recipient.id, actor_id=actor.id, message=f"message {i}", is_read=is_read)
        for i in range(how_many)
    ]
    db.add_all(items)
    db.commit()
    return [n.id for n in items]


class TestListNotifications:

    def test_requires_identity(self, client):
        assert client.get(NOTIFICATIONS).status_code == 401

    def test_scoped_to_recipient_with_actor(self, client, db, employee, supervisor):
        add_notifications(db, employee, supervisor, 2)
        add_notifications(db, supervisor, employee, 3)

        body = client.get(NOTIFICATIONS, headers=headers_for(employee)).json()

        assert len(body) == 2
        assert all(n["recipientId"] == employee.id for n in body)
        assert body[0]["actor"]["name"] == "Sam Supervisor"
        assert body[0]["isRead"] is False

    def test_page_size_unless_all(self, client, db, employee, supervisor):
        add_notifications(db, employee, supervisor, settings.NOTIFICATION_PAGE_SIZE + 5)

        page = client.get(NOTIFICATIONS, headers=headers_for(employee)).json()
        everything = client.get(NOTIFICATIONS, params={"all": "true"}, headers=headers_for(employee)).json()

        assert len(page) == settings.NOTIFICATION_PAGE_SIZE
        assert len(everything) == settings.NOTIFICATION_PAGE_SIZE + 5


class TestMarkAsRead:

    def test_marks_all_unread_and_audits_count(self, client, db, employee, supervisor):
        add_notifications(db, employee, supervisor, 3)
        add_notifications(db, employee, supervisor, 1, is_read=True)
        others = add_notifications(db, supervisor, employee, 2)

        response = client.post(f"{NOTIFICATIONS}/mark-as-read", headers=headers_for(employee))

        assert response.status_code == 200
        assert response.json()["count"] == 3
        db.expire_all()
        assert db.query(Notification).filter(
            Notification.recipient_id == employee.id, Notification.is_read.is_(False)
        ).count() == 0
        assert db.query(Notification).filter(
            Notification.id.in_(others), Notification.is_read.is_(False)
        ).count() == 2

        rows = audit_rows(db, AuditAction.NOTIFICATION_READ)
        assert len(rows) == 1
        assert rows[0].user_id == employee.id
        assert rows[0].details["count"] == 3
        assert rows[0].details["markedAllAsRead"] is True

    def test_selected_ids_only_touch_own(self, client, db, employee, supervisor):
        mine = add_notifications(db, employee, supervisor, 3)
        theirs = add_notifications(db, supervisor, employee, 1)

        response = client.post(
            f"{NOTIFICATIONS}/mark-as-read", json={"ids": [mine[0], theirs[0]]}, headers=headers_for(employee),
        )

        assert response.json()["count"] == 1
        db.expire_all()
        assert db.get(Notification, mine[0]).is_read is True
        assert db.get(Notification, mine[1]).is_read is False
        assert db.get(Notification, theirs[0]).is_read is False
