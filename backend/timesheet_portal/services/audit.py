from typing import Any
from sqlalchemy.orm import Session

from timesheet_portal.models.audit_log import AuditLog


def log_action(
    db: Session,
    user_id: Any,
    action: str,
    resource_type: str,
    resource_id: Any = None,
    details: dict | None = None,
):
    """Stage an audit row in the caller's transaction (caller commits)."""
    entry = AuditLog(
        user_id=user_id,
        action=action,
        resource_type=resource_type,
        resource_id=str(resource_id) if resource_id is not None else None,
        details=details.copy() if isinstance(details, dict) else {},
    )
    db.add(entry)
    return entry
