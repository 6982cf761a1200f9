"""
Authentication and authorization dependencies.

Every protected route takes the acting user from a Bearer JWT
(Authorization header). Roles: admin, client, candidate.
"""

from fastapi import HTTPException, Header, Depends
from sqlalchemy.orm import Session
from typing import Optional

from timesheet_portal.database import get_db
from timesheet_portal.services.auth import decode_access_token
from timesheet_portal.models.user import User


def get_current_user(
    authorization: Optional[str] = Header(default=None),
    db: Session = Depends(get_db),
) -> User:
    """Extract user from Bearer token."""
    if not authorization:
        raise HTTPException(status_code=401, detail="Not authenticated")

    token = authorization.removeprefix("Bearer ").strip()
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    payload = decode_access_token(token)
    if not payload:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    sub = payload.get("sub")
    if not sub:
        raise HTTPException(status_code=401, detail="Invalid token payload")

    try:
        user_id = int(sub)
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token subject (user id)")

    user = db.get(User, user_id)
    if not user or user.active is False:
        raise HTTPException(status_code=401, detail="User not found or disabled")

    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    """Require the admin role. Returns the acting user."""
    if user.role != "admin":
        raise HTTPException(status_code=403, detail="Forbidden")
    return user
