"""FastAPI application entry point for the Teacher Evaluation Reports service."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from web.config import get_settings
from web.store import RecordNotFoundError


logger = logging.getLogger("evaluations.web")
logging.basicConfig(level=logging.INFO)

settings = get_settings()

app = FastAPI(title="Teacher Evaluation Reports", debug=settings.DEBUG)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "X-Skipped-Reports"],
)


@app.on_event("startup")
async def on_startup() -> None:
    """Log when the application starts."""
    logger.info(f"Teacher Evaluation Reports starting up (data file: {settings.DATA_FILE})")


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Simple health check endpoint."""
    return {"status": "healthy", "version": "1.0.0"}


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Custom HTTP exception responses."""
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        detail = exc.detail or "Authentication required."
    elif exc.status_code == status.HTTP_404_NOT_FOUND:
        detail = exc.detail or "The requested resource was not found."
    else:
        detail = exc.detail or "An error occurred while processing the request."
    return JSONResponse({"detail": detail}, status_code=exc.status_code, headers=exc.headers)


@app.exception_handler(RecordNotFoundError)
async def not_found_handler(request: Request, exc: RecordNotFoundError):
    """Unknown teacher or report ids become 404 responses."""
    return JSONResponse({"detail": str(exc)}, status_code=status.HTTP_404_NOT_FOUND)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Catch-all handler for unhandled errors."""
    logger.exception("Unhandled exception: %s", exc)
    return JSONResponse(
        {"detail": "Internal server error. Please try again later."},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


# Import routes after the app is configured to avoid circular imports.
from web.routes import auth as auth_routes  # noqa: E402  pylint: disable=wrong-import-position
from web.routes import criteria as criteria_routes  # noqa: E402  pylint: disable=wrong-import-position
from web.routes import exports as export_routes  # noqa: E402  pylint: disable=wrong-import-position
from web.routes import reports as report_routes  # noqa: E402  pylint: disable=wrong-import-position
from web.routes import teachers as teacher_routes  # noqa: E402  pylint: disable=wrong-import-position

app.include_router(auth_routes.router)
app.include_router(teacher_routes.router)
app.include_router(criteria_routes.router)
app.include_router(report_routes.router, prefix="/reports")
app.include_router(export_routes.router, prefix="/exports")
