from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pathlib import Path
import os
import logging
from dotenv import load_dotenv

load_dotenv(dotenv_path=Path(__file__).parent / ".env", override=True)

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

from timesheet_portal.errors import PersistenceError, PortalError
from timesheet_portal.routers.auth import router as auth_router
from timesheet_portal.routers.users import router as users_router
from timesheet_portal.routers.projects import router as projects_router
from timesheet_portal.routers.timesheets import (
    router as timesheets_router,
    admin_router as admin_timesheets_router,
)
from timesheet_portal.routers.invoicing import (
    router as invoicing_router,
    admin_router as admin_invoices_router,
)

app = FastAPI(title="Timesheet Portal API")

app.include_router(auth_router)
app.include_router(users_router)
app.include_router(projects_router)
app.include_router(timesheets_router)
app.include_router(admin_timesheets_router)
app.include_router(invoicing_router)
app.include_router(admin_invoices_router)


CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in CORS_ORIGINS],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError):
    if isinstance(exc, PersistenceError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse({"detail": "Internal server error"}, status_code=exc.status_code)
    return JSONResponse({"detail": exc.message}, status_code=exc.status_code)


@app.get("/health")
def health():
    return {"ok": True}
