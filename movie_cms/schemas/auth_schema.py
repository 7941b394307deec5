from __future__ import annotations

from typing import Optional

from . import APIResponse, ORMModel


class AdminLogin(ORMModel):
    email: Optional[str] = None
    password: Optional[str] = None


class AdminIdentity(ORMModel):
    email: Optional[str] = None
    role: str


class AdminMeResponse(APIResponse):
    admin: AdminIdentity
