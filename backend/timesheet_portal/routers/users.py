"""Users router: admin user management and self-service profile."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from timesheet_portal.database import get_db
from timesheet_portal.dependencies import get_current_user, require_admin
from timesheet_portal.models.user import User
from timesheet_portal.schemas.user import (
    ProfileUpdate,
    UserCreate,
    UserResponse,
    UserSummary,
    UserUpdate,
)
from timesheet_portal.services.audit import log_action
from timesheet_portal.services.auth import hash_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Users"])

NON_NULLABLE_FIELDS = ("username", "role", "active")


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(404, "User not found")
    return user


def _reject_nulls(fields: dict) -> None:
    for field in NON_NULLABLE_FIELDS:
        if field in fields and fields[field] is None:
            raise HTTPException(400, f"{field} cannot be null")


def _apply(user: User, fields: dict) -> None:
    password = fields.pop("password", None)
    if password:
        user.password_hash = hash_password(password)
    for field, val in fields.items():
        # blank strings from forms clear the column
        setattr(user, field, val if val != "" else None)


def _commit_or_409(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(409, "Username, NINO or UTR already in use")


# ── Self-service profile ──


@router.get("/user/profile", response_model=UserResponse)
def get_profile(user: User = Depends(get_current_user)):
    return user


@router.put("/user/profile", response_model=UserResponse)
def update_profile(
    body: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    _apply(user, body.model_dump(exclude_unset=True))
    _commit_or_409(db)
    db.refresh(user)
    return user


# ── Directory ──


@router.get("/users", response_model=list[UserSummary])
def list_users(
    _user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return db.query(User).order_by(User.username).all()


# ── Admin management ──


@router.post("/users", response_model=UserResponse, status_code=201)
def create_user(
    body: UserCreate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    user = User()
    _apply(user, body.model_dump(exclude_none=True))
    db.add(user)
    _commit_or_409(db)
    db.refresh(user)
    log_action(db, user_id=admin.id, action="user.create", resource_type="user", resource_id=user.id)
    db.commit()
    logger.info("User %s (%s) created by %s", user.id, user.role, admin.id)
    return user


@router.get("/users/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    _admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return _get_user_or_404(db, user_id)


@router.put("/users/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    body: UserUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    user = _get_user_or_404(db, user_id)
    fields = body.model_dump(exclude_unset=True)
    _reject_nulls(fields)
    _apply(user, fields)
    log_action(
        db,
        user_id=admin.id,
        action="user.update",
        resource_type="user",
        resource_id=user.id,
        details={"fields": sorted(k for k in fields if k != "password")},
    )
    _commit_or_409(db)
    db.refresh(user)
    return user


@router.delete("/users/{user_id}")
def delete_user(
    user_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    user = _get_user_or_404(db, user_id)
    if user.id == admin.id:
        raise HTTPException(400, "You cannot delete your own account")
    db.delete(user)
    log_action(db, user_id=admin.id, action="user.delete", resource_type="user", resource_id=user_id)
    db.commit()
    return {"message": "User deleted successfully"}
