from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel

from taskapi.services.auth_service import UserService

router = APIRouter(prefix="/api/auth", tags=["auth"])


class SignupRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service


@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def signup(req: SignupRequest, users: UserService = Depends(get_user_service)) -> Dict[str, Any]:
    result = await users.create_user(req.email, req.password, req.name)
    return {"message": "User created successfully", "token": result.token, "user": result.user}


@router.post("/login")
async def login(req: LoginRequest, users: UserService = Depends(get_user_service)) -> Dict[str, Any]:
    result = await users.authenticate(req.email, req.password)
    return {"message": "Login successful", "token": result.token, "user": result.user}
