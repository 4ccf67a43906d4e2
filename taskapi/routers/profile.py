from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from taskapi.routers.auth import get_user_service
from taskapi.services.auth_service import UserService
from taskapi.services.session_service import Identity, current_identity

router = APIRouter(prefix="/api/profile", tags=["profile"])


class ProfileUpdateRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None


@router.get("")
async def read_profile(
    identity: Identity = Depends(current_identity),
    users: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    return {"user": await users.get_profile(identity.id)}


@router.put("")
async def update_profile(
    req: ProfileUpdateRequest,
    identity: Identity = Depends(current_identity),
    users: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    user = await users.update_profile(identity.id, req.model_dump(exclude_unset=True))
    return {"message": "Profile updated successfully", "user": user}
