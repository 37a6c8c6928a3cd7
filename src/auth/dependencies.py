"""Auth dependencies for FastAPI route injection."""

from dataclasses import dataclass

import jwt
from fastapi import Depends, HTTPException, Request

from src.auth.jwt import verify_token
from src.config.settings import Settings, app_settings


@dataclass
class CurrentUser:
    id: str


def _extract_bearer_token(request: Request) -> str | None:
    auth = request.headers.get("Authorization")
    if auth and auth.startswith("Bearer "):
        return auth[7:].strip() or None
    return None


async def get_current_user(request: Request, settings: Settings = Depends(app_settings)) -> CurrentUser:
    """FastAPI dependency: authenticate via Bearer JWT."""
    token = _extract_bearer_token(request)
    if not token:
        raise HTTPException(status_code=401, detail="Missing authentication credentials")

    try:
        payload = verify_token(token, settings)
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token has expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")

    if payload.get("type") != "access" or not isinstance(payload.get("sub"), str):
        raise HTTPException(status_code=401, detail="Invalid token")

    return CurrentUser(id=payload["sub"])
