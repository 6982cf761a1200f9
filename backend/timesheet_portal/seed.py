"""
Seed script: populates essential data on first deploy.

Run: python -m timesheet_portal.seed
"""
import logging
import os
from decimal import Decimal

from timesheet_portal.database import SessionLocal
from timesheet_portal.models.project import Project
from timesheet_portal.models.user import User
from timesheet_portal.services.auth import hash_password

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

ADMIN_USERNAME = os.getenv("SEED_ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.getenv("SEED_ADMIN_PASSWORD", "ChangeMe123!")
DEFAULT_PROJECT_NAME = "General Cabling"
DEFAULT_PROJECT_LOCATION = "London"


def seed_admin(db):
    """Create the admin user if it doesn't exist."""
    user = db.query(User).filter(User.username == ADMIN_USERNAME).first()
    if user:
        logger.info("Admin user already exists, skipping.")
        return user

    user = User(
        username=ADMIN_USERNAME,
        password_hash=hash_password(ADMIN_PASSWORD),
        role="admin",
        active=True,
    )
    db.add(user)
    db.commit()
    logger.info("Created admin: %s", ADMIN_USERNAME)
    logger.info("  >>> CHANGE THIS PASSWORD AFTER FIRST LOGIN <<<")
    return user


def seed_project(db):
    project = db.query(Project).filter(Project.name == DEFAULT_PROJECT_NAME).first()
    if project:
        logger.info("Default project already exists, skipping.")
        return project

    project = Project(
        name=DEFAULT_PROJECT_NAME,
        location=DEFAULT_PROJECT_LOCATION,
        hourly_rate=Decimal("25.00"),
        total_hours=0,
    )
    db.add(project)
    db.commit()
    logger.info("Created project: %s", DEFAULT_PROJECT_NAME)
    return project


def run_seed():
    db = SessionLocal()
    try:
        seed_admin(db)
        seed_project(db)
        logger.info("Seed complete.")
    finally:
        db.close()


if __name__ == "__main__":
    run_seed()
