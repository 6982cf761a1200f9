"""
Authentication router: login and current-user lookup.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from timesheet_portal.database import get_db
from timesheet_portal.dependencies import get_current_user
from timesheet_portal.models.user import User
from timesheet_portal.schemas.user import UserSummary
from timesheet_portal.services.auth import create_access_token, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


# ---------- helpers ----------

def _create_token(user: User) -> str:
    """JWT 'sub' is the integer user id as a string."""
    return create_access_token(data={"sub": str(user.id), "role": user.role})


# ---------- schemas ----------

class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserSummary


class MeResponse(BaseModel):
    user: UserSummary


# ---------- endpoints ----------

@router.post("/login", response_model=LoginResponse)
def login(body: LoginRequest, db: Session = Depends(get_db)):
    username = body.username.strip()
    if not username or not body.password:
        raise HTTPException(status_code=400, detail="Username and password are required")

    user = db.query(User).filter(User.username == username).first()
    if not user or not verify_password(body.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    if user.active is False:
        raise HTTPException(status_code=403, detail="Account disabled")

    logger.info("User %s logged in", user.id)
    return LoginResponse(access_token=_create_token(user), user=UserSummary.model_validate(user))


@router.post("/logout")
def logout():
    # Tokens are stateless; the client discards its copy.
    return {"message": "Logged out"}


@router.get("/user/me", response_model=MeResponse)
def me(user: User = Depends(get_current_user)):
    return MeResponse(user=UserSummary.model_validate(user))
