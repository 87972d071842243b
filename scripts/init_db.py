"""Initialize database: create tables, the settings row and a first administrator

Usage:
  python scripts/init_db.py --email admin@example.com --password 'S3cur3P@ss'
"""
import argparse
import sys
import os
from datetime import date
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from evaltrack.core.config import settings
from evaltrack.core.database import SessionLocal, engine, Base
from evaltrack.core.security import get_password_hash
from evaltrack.models import User, UserRole, EvaluationCriteria
from evaltrack.services.settings_service import get_settings

DEFAULT_CRITERIA = [
    {"name": "Quality of Work", "description": "Accuracy, thoroughness and reliability of output"},
    {"name": "Communication", "description": "Clarity and timeliness when working with others"},
    {"name": "Initiative", "description": "Takes ownership and acts without being asked"},
]

def init_db(email: str, password: str, name: str):
    """Create tables, default criteria and an admin account if none exists"""
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        get_settings(db)

        if db.query(EvaluationCriteria).count() == 0:
            for criteria_data in DEFAULT_CRITERIA:
                db.add(EvaluationCriteria(**criteria_data))

        existing = db.query(User).filter(User.role == UserRole.ADMIN).first()
        if existing:
            print(f"Admin already present: {existing.email}")
        else:
            db.add(User(
                name=name,
                email=email,
                password=get_password_hash(password),
                department="Administration",
                position="Administrator",
                hire_date=date.today(),
                role=UserRole.ADMIN,
            ))
            print(f"Created admin {email}")

        db.commit()
        print("Database initialized successfully!")
    except Exception as e:
        print(f"Error initializing database: {e}")
        db.rollback()
        raise
    finally:
        db.close()

def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Create the EvalTrack schema and a first administrator")
    parser.add_argument("--email", default="admin@example.com", help="Admin login email")
    parser.add_argument("--password", required=True, help="Admin password")
    parser.add_argument("--name", default="Administrator", help="Admin display name")
    args = parser.parse_args(argv)

    if len(args.password) < settings.MIN_PASSWORD_LENGTH:
        print(f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters long.")
        return 1

    init_db(args.email, args.password, args.name)
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
