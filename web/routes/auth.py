"""Authentication routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from fastapi.responses import JSONResponse

from web.auth import (
    SESSION_COOKIE_NAME,
    cleanup_expired_sessions,
    create_session,
    invalidate_session,
    verify_password,
)
from web.config import Settings
from web.dependencies import get_settings

router = APIRouter()


@router.post("/login")
async def login_submit(
    password: str = Form(...),
    settings: Settings = Depends(get_settings),
):
    """Validate the staff password and set a session cookie."""
    cleanup_expired_sessions()

    if not verify_password(password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid password.")

    token = create_session()
    response = JSONResponse({"status": "ok"})
    max_age = settings.SESSION_DURATION_HOURS * 3600
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        max_age=max_age,
        expires=max_age,
        httponly=True,
        samesite="lax",
        secure=False,
    )
    return response


@router.post("/logout")
async def logout(request: Request):
    """Invalidate the current session."""
    invalidate_session(request.cookies.get(SESSION_COOKIE_NAME))
    response = JSONResponse({"status": "ok"})
    response.delete_cookie(SESSION_COOKIE_NAME)
    return response
