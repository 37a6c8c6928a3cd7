"""Profile endpoints for the authenticated user."""

from fastapi import APIRouter, Depends
from supabase import Client

from src.auth.dependencies import CurrentUser, get_current_user
from src.db.client import get_db
from src.users import service
from src.users.schemas import UpdateProfileRequest

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("/profile", summary="Get profile", description="Return the authenticated user's public profile.")
async def get_profile(user: CurrentUser = Depends(get_current_user), db: Client = Depends(get_db)):
    return {"status": "success", "data": service.to_public(service.get_user(db, user.id))}


@router.put("/profile", summary="Update profile", description="Update name, email or password. Omitted fields are left unchanged.")
async def update_profile(
    body: UpdateProfileRequest,
    user: CurrentUser = Depends(get_current_user),
    db: Client = Depends(get_db),
):
    updated = service.update_profile(db, user.id, body.model_dump())
    return {"status": "success", "data": service.to_public(updated)}
