"""
Pytest configuration: in-memory SQLite database, FastAPI test client and
factories for users, projects and timesheets.
"""

import os

# Point the app at SQLite before anything imports timesheet_portal.database
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET", "test-secret")

from datetime import date
from decimal import Decimal
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from timesheet_portal.database import Base, get_db
from timesheet_portal.models.project import Project
from timesheet_portal.models.timesheet import Timesheet
from timesheet_portal.models.user import User
from timesheet_portal.services.auth import create_access_token, hash_password
from timesheet_portal.services.timesheets import create_timesheet

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

MON_FRI_9_TO_5 = {
    day: {"start": "09:00", "end": "17:00", "notes": ""}
    for day in ("monday", "tuesday", "wednesday", "thursday", "friday")
}


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Fresh schema per test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> Generator[TestClient, None, None]:
    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db: Session):
    def _make_user(
        username: str,
        role: str = "candidate",
        normal_rate: str = "20.00",
        overtime_rate: str = "30.00",
        payment_frequency=None,
        password: str = "secret123",
    ) -> User:
        user = User(
            username=username,
            password_hash=hash_password(password),
            role=role,
            active=True,
            normal_rate=Decimal(normal_rate),
            overtime_rate=Decimal(overtime_rate),
            payment_frequency=payment_frequency,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def admin(make_user) -> User:
    return make_user("admin", role="admin")


@pytest.fixture
def contractor(make_user) -> User:
    return make_user("alice", payment_frequency="weekly")


@pytest.fixture
def project(db: Session) -> Project:
    project = Project(name="Canary Wharf Fit-out", location="London", hourly_rate=Decimal("25.00"), total_hours=0)
    db.add(project)
    db.commit()
    db.refresh(project)
    return project


@pytest.fixture
def make_timesheet(db: Session, project: Project):
    def _make_timesheet(
        owner: User,
        week_starting: date = date(2024, 1, 15),
        status: str = "draft",
        daily_hours=None,
    ) -> Timesheet:
        timesheet = create_timesheet(
            db,
            owner,
            project_id=project.id,
            week_starting=week_starting,
            daily_hours=daily_hours if daily_hours is not None else MON_FRI_9_TO_5,
        )
        if status != "draft":
            timesheet.status = status
            db.commit()
            db.refresh(timesheet)
        return timesheet

    return _make_timesheet


def auth_headers(user: User) -> dict:
    token = create_access_token({"sub": str(user.id), "role": user.role})
    return {"Authorization": f"Bearer {token}"}
