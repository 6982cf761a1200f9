"""Projects router."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from timesheet_portal.database import get_db
from timesheet_portal.dependencies import get_current_user, require_admin
from timesheet_portal.models.project import Project
from timesheet_portal.models.timesheet import Timesheet
from timesheet_portal.models.user import User
from timesheet_portal.schemas.project import ProjectCreate, ProjectResponse

router = APIRouter(prefix="/api/projects", tags=["Projects"])


@router.get("", response_model=list[ProjectResponse])
def list_projects(
    _user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return db.query(Project).order_by(Project.name).all()


@router.post("", response_model=ProjectResponse, status_code=201)
def create_project(
    body: ProjectCreate,
    _admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    project = Project(
        name=body.name.strip(),
        location=body.location.strip(),
        hourly_rate=body.hourly_rate,
        total_hours=0,
    )
    db.add(project)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(409, "A project with that name already exists")
    db.refresh(project)
    return project


@router.delete("/{project_id}")
def delete_project(
    project_id: int,
    _admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    project = db.get(Project, project_id)
    if not project:
        raise HTTPException(404, "Project not found")
    in_use = db.query(Timesheet.id).filter(Timesheet.project_id == project_id).first()
    if in_use:
        raise HTTPException(409, "Project has timesheets and cannot be deleted")
    db.delete(project)
    db.commit()
    return {"message": "Project deleted successfully"}
