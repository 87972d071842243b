"""
Post-commit publication of side effects.

Notifications and audit entries are not transactional with the write that
triggers them. A route enqueues them on the request's Outbox while it works
and calls ``publish()`` once its own commit has gone through (or, for
failure audits, once it has rolled back). Each entry then gets its own
small transaction: a failing entry is rolled back and logged, and the rest
still go out.
"""
from typing import Any, Callable, List, Tuple

from fastapi import Depends
from sqlalchemy.orm import Session

from evaltrack.core.database import get_db
from evaltrack.core.logging_config import get_logger

logger = get_logger(__name__)

SideEffect = Callable[[Session], Any]


class Outbox:

    def __init__(self, db: Session):
        self.db = db
        self._pending: List[Tuple[str, SideEffect]] = []

    def enqueue(self, label: str, effect: SideEffect) -> None:
        self._pending.append((label, effect))

    @property
    def pending(self) -> int:
        return len(self._pending)

    def discard(self) -> None:
        """Drop queued effects, e.g. when the primary write failed."""
        self._pending.clear()

    def publish(self) -> int:
        """
        Write every queued effect, each in its own commit.

        Returns:
            Number of effects that were written successfully.
        """
        pending, self._pending = self._pending, []
        written = 0
        for label, effect in pending:
            try:
                effect(self.db)
                self.db.commit()
                written += 1
            except Exception:
                self.db.rollback()
                logger.error(f"Side effect '{label}' failed; primary operation unaffected", exc_info=True)
        return written


def get_outbox(db: Session = Depends(get_db)) -> Outbox:
    return Outbox(db)
