import os

# Must be set before evaltrack is imported: settings and the engine are built at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import date, datetime, timezone
from itertools import count

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from evaltrack.core.database import Base, get_db
from evaltrack.core.security import get_password_hash
from evaltrack.main import app
from evaltrack.models import (
    AuditLog, EvaluationCriteria, Goal, GoalStatus, Notification, User, UserRole,
)

DEFAULT_PASSWORD = "correct-horse-battery"

_sequence = count(1)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    def _make(role=UserRole.EMPLOYEE, supervisor=None, name=None, email=None, password=DEFAULT_PASSWORD):
        n = next(_sequence)
        user = User(
            name=name or f"{role.value.title()} {n}",
            email=email or f"user{n}@example.com",
            password=get_password_hash(password) if password else None,
            department="Engineering",
            position="Engineer",
            hire_date=date(2024, 1, 15),
            role=role,
            supervisor_id=supervisor.id if supervisor else None,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make


@pytest.fixture
def admin(make_user):
    return make_user(UserRole.ADMIN, name="Ada Admin")


@pytest.fixture
def supervisor(make_user):
    return make_user(UserRole.SUPERVISOR, name="Sam Supervisor")


@pytest.fixture
def employee(make_user, supervisor):
    return make_user(UserRole.EMPLOYEE, supervisor=supervisor, name="Eve Employee")


@pytest.fixture
def make_criteria(db):
    def _make(name="Quality of Work", description="Accuracy and reliability", weight=None):
        criteria = EvaluationCriteria(name=name, description=description, weight=weight)
        db.add(criteria)
        db.commit()
        db.refresh(criteria)
        return criteria
    return _make


@pytest.fixture
def make_goal(db):
    def _make(employee, title="Ship the quarterly report", supervisor_id=None, due_date=None):
        goal = Goal(
            title=title,
            status=GoalStatus.NOT_STARTED,
            employee_id=employee.id,
            supervisor_id=supervisor_id if supervisor_id is not None else employee.supervisor_id,
            due_date=due_date or datetime(2026, 12, 31, tzinfo=timezone.utc),
        )
        db.add(goal)
        db.commit()
        db.refresh(goal)
        return goal
    return _make


def headers_for(user):
    return {"X-User-Id": user.id, "X-User-Role": user.role.value}


def audit_rows(db, action=None):
    db.expire_all()
    query = db.query(AuditLog)
    if action is not None:
        query = query.filter(AuditLog.action == action)
    return query.all()


def notifications_for(db, recipient_id):
    db.expire_all()
    return db.query(Notification).filter(Notification.recipient_id == recipient_id).all()
