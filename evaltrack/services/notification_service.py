"""
In-app notifications emitted when one user's action affects another.

Notifications are polled by the client; there is no push delivery. Each
qualifying mutation produces exactly one notification, and nothing is sent
when the actor is the recipient.
"""
from typing import Optional

from sqlalchemy.orm import Session

from evaltrack.core.logging_config import get_logger
from evaltrack.models.notification import Notification

logger = get_logger(__name__)

FEEDBACK_REQUEST_PREFIX = "Feedback Request from"
GOAL_TITLE_PREVIEW = 30

GOALS_LINK = "/goals"
PROFILE_LINK = "/my-profile"
EVALUATIONS_LINK = "/my-evaluations"


def is_feedback_request(goal_title: str) -> bool:
    return goal_title.startswith(FEEDBACK_REQUEST_PREFIX)


def goal_message(goal_title: str) -> str:
    if is_feedback_request(goal_title):
        return "sent you a feedback request."
    return f'assigned you a new goal: "{goal_title[:GOAL_TITLE_PREVIEW]}..."'


def supervisor_message(supervisor_name: Optional[str]) -> str:
    if supervisor_name is None:
        return "unassigned your supervisor."
    return f"assigned {supervisor_name} as your supervisor."


def evaluation_message(criteria_name: str) -> str:
    return f'completed an evaluation for you on "{criteria_name}".'


class NotificationService:

    def __init__(self, db: Session):
        self.db = db

    def notify(self, recipient_id: str, actor_id: Optional[str], message: str,
               link: Optional[str] = None) -> Optional[Notification]:
        """Add one notification unless the actor would be notifying themselves."""
        if actor_id is not None and actor_id == recipient_id:
            return None
        notification = Notification(
            recipient_id=recipient_id,
            actor_id=actor_id,
            message=message,
            link=link,
        )
        self.db.add(notification)
        self.db.flush()
        logger.debug(f"Notification {notification.id} queued for user {recipient_id}")
        return notification

    def notify_goal_created(self, employee_id: str, actor_id: str, goal_title: str) -> Optional[Notification]:
        return self.notify(employee_id, actor_id, goal_message(goal_title), GOALS_LINK)

    def notify_supervisor_changed(self, employee_id: str, actor_id: str, previous_supervisor_id: Optional[str],
                                  new_supervisor_id: Optional[str],
                                  new_supervisor_name: Optional[str]) -> Optional[Notification]:
        if previous_supervisor_id == new_supervisor_id:
            return None
        name = None if new_supervisor_id is None else (new_supervisor_name or "a new supervisor")
        return self.notify(employee_id, actor_id, supervisor_message(name), PROFILE_LINK)

    def notify_evaluation_completed(self, employee_id: str, actor_id: str,
                                    criteria_name: str) -> Optional[Notification]:
        return self.notify(employee_id, actor_id, evaluation_message(criteria_name), EVALUATIONS_LINK)
