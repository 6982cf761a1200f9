"""
Domain errors raised by the timesheet/invoicing services.

Routers do not catch these; main.py maps each class to an HTTP status.
"""


class PortalError(Exception):
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(PortalError):
    """Malformed or out-of-range input."""
    status_code = 400


class AuthorizationError(PortalError):
    """Role, ownership or edit-lock violation."""
    status_code = 403


class NotFoundError(PortalError):
    status_code = 404


class ConflictError(PortalError):
    """Record changed state underneath the caller (e.g. already invoiced)."""
    status_code = 409


class PersistenceError(PortalError):
    """Underlying store failure. The message shown to clients stays generic."""
    status_code = 500
