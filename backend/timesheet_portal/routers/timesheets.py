"""Timesheets router.

Static routes (/week) MUST come before /{timesheet_id} or FastAPI tries to
parse "week" as an integer id and answers 422.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from timesheet_portal.database import get_db
from timesheet_portal.dependencies import get_current_user, require_admin
from timesheet_portal.errors import AuthorizationError
from timesheet_portal.models.project import Project
from timesheet_portal.models.timesheet import Timesheet
from timesheet_portal.models.user import User
from timesheet_portal.schemas.timesheet import (
    TimesheetCreate,
    TimesheetListItem,
    TimesheetResponse,
    TimesheetUpdate,
    WeekLookupResponse,
)
from timesheet_portal.services import timesheets as timesheet_service

router = APIRouter(prefix="/api/timesheets", tags=["Timesheets"])
admin_router = APIRouter(prefix="/api/admin/timesheets", tags=["Timesheets"])


def list_items(query) -> list[TimesheetListItem]:
    """Attach project name and username to each timesheet row."""
    rows = (
        query.add_columns(Project.name, User.username)
        .outerjoin(Project, Project.id == Timesheet.project_id)
        .outerjoin(User, User.id == Timesheet.user_id)
        .all()
    )
    items = []
    for ts, project_name, username in rows:
        item = TimesheetListItem.model_validate(ts)
        item.project_name = project_name
        item.username = username
        items.append(item)
    return items


# ── Own timesheets ──


@router.get("", response_model=list[TimesheetListItem])
def list_timesheets(
    status: Optional[str] = Query(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    q = db.query(Timesheet).filter(Timesheet.user_id == user.id)
    if status:
        q = q.filter(Timesheet.status == status)
    return list_items(q.order_by(Timesheet.week_starting.desc()))


@router.post("", response_model=TimesheetResponse, status_code=201)
def create_timesheet(
    body: TimesheetCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return timesheet_service.create_timesheet(
        db,
        user,
        project_id=body.project_id,
        week_starting=body.week_starting,
        daily_hours=body.daily_hours.model_dump(),
        status=body.status,
        notes=body.notes,
    )


@router.get("/week", response_model=WeekLookupResponse)
def week_lookup(
    d: date = Query(..., alias="date"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    existing = timesheet_service.find_for_week(db, user.id, d)
    if not existing:
        return WeekLookupResponse(exists=False)
    return WeekLookupResponse(exists=True, timesheet=TimesheetResponse.model_validate(existing))


# ── Single-timesheet endpoints (must be AFTER all fixed paths) ──


@router.get("/{timesheet_id}", response_model=TimesheetResponse)
def get_timesheet(
    timesheet_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    timesheet = timesheet_service.get_timesheet(db, timesheet_id)
    if timesheet.user_id != user.id and user.role != "admin":
        raise AuthorizationError("Forbidden")
    return timesheet


@router.put("/{timesheet_id}", response_model=TimesheetResponse)
def update_timesheet(
    timesheet_id: int,
    body: TimesheetUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    timesheet = timesheet_service.get_timesheet(db, timesheet_id)
    return timesheet_service.update_timesheet(db, user, timesheet, body.model_dump(exclude_unset=True))


@router.delete("/{timesheet_id}")
def delete_timesheet(
    timesheet_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    timesheet = timesheet_service.get_timesheet(db, timesheet_id)
    timesheet_service.delete_timesheet(db, user, timesheet)
    return {"message": "Timesheet deleted successfully"}


# ── Admin view ──


@admin_router.get("", response_model=list[TimesheetListItem])
def all_timesheets(
    status: Optional[str] = Query(None),
    user_id: Optional[int] = Query(None, alias="userId"),
    _admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    q = db.query(Timesheet)
    if status:
        q = q.filter(Timesheet.status == status)
    if user_id is not None:
        q = q.filter(Timesheet.user_id == user_id)
    return list_items(q.order_by(Timesheet.week_starting.desc()))
