from typing import Optional

from fastapi import APIRouter, Depends, Response

from movie_cms.schemas import MessageResponse
from movie_cms.schemas.auth_schema import AdminIdentity, AdminLogin, AdminMeResponse
from movie_cms.utils.auth.admin_auth import (
    authenticate_admin,
    clear_session_cookie,
    get_current_admin,
    set_session_cookie,
)

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.post("/login", response_model=MessageResponse, summary="Admin login (sets session cookie)")
def login(response: Response, payload: Optional[AdminLogin] = None):
    payload = payload or AdminLogin()
    token = authenticate_admin(payload.email, payload.password)
    set_session_cookie(response, token)
    return MessageResponse(message="Admin logged in successfully")


@router.get("/me", response_model=AdminMeResponse, summary="Current admin identity")
def me(admin: dict = Depends(get_current_admin)):
    return AdminMeResponse(admin=AdminIdentity(**admin))


@router.post("/logout", response_model=MessageResponse, summary="Clear the admin session cookie")
def logout(response: Response, admin: dict = Depends(get_current_admin)):
    clear_session_cookie(response)
    return MessageResponse(message="Admin logged out successfully")
