"""Auth endpoints: register, login."""

from fastapi import APIRouter, Depends
from supabase import Client

from src.auth.jwt import create_access_token
from src.config.settings import Settings, app_settings
from src.db.client import get_db
from src.users import service as users
from src.users.schemas import LoginRequest, RegisterRequest

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def _auth_payload(user: dict, settings: Settings) -> dict:
    return {
        "user": users.to_public(user),
        "token": create_access_token(str(user["id"]), settings),
    }


@router.post("/register", status_code=201, summary="Register a new user", description="Create a new user account and return a session token.")
async def register(
    body: RegisterRequest,
    db: Client = Depends(get_db),
    settings: Settings = Depends(app_settings),
):
    user = users.register(db, body.email, body.password, body.name)
    return {"status": "success", "data": _auth_payload(user, settings)}


@router.post("/login", summary="Login", description="Authenticate with email and password, returns a session token.")
async def login(
    body: LoginRequest,
    db: Client = Depends(get_db),
    settings: Settings = Depends(app_settings),
):
    user = users.authenticate(db, body.email, body.password)
    return {"status": "success", "data": _auth_payload(user, settings)}
