"""User business logic: registration, credential checks, profile updates."""

import logging

import bcrypt as _bcrypt
from fastapi import HTTPException
from postgrest.exceptions import APIError
from supabase import Client

from src.db.models import UNIQUE_VIOLATION
from src.users import repository
from src.utils.errors import ConflictError, not_found
from src.utils.validators import MAX_PASSWORD_BYTES

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
EMAIL_IN_USE = "Email already in use"


def hash_password(password: str) -> str:
    return _bcrypt.hashpw(password.encode(), _bcrypt.gensalt()).decode()


def password_matches(password: str, password_hash: str) -> bool:
    encoded = password.encode()
    if len(encoded) > MAX_PASSWORD_BYTES:
        return False
    return _bcrypt.checkpw(encoded, password_hash.encode())


def to_public(user: dict) -> dict:
    """Strip everything a client must not see (the password hash above all)."""
    return {
        "id": str(user["id"]),
        "email": user["email"],
        "name": user["name"],
        "project_ids": [str(pid) for pid in (user.get("project_ids") or [])],
        "created_at": user.get("created_at"),
    }


def register(db: Client, email: str, password: str, name: str) -> dict:
    if repository.get_by_email(db, email):
        raise ConflictError(EMAIL_IN_USE)

    try:
        user = repository.create(db, {
            "email": email,
            "password_hash": hash_password(password),
            "name": name,
        })
    except APIError as e:
        # Lost a race with another registration for the same email
        if e.code == UNIQUE_VIOLATION:
            raise ConflictError(EMAIL_IN_USE)
        raise
    logger.info("Registered user %s", user["id"])
    return user


def authenticate(db: Client, email: str, password: str) -> dict:
    user = repository.get_by_email(db, email)
    if not user or not password_matches(password, user["password_hash"]):
        raise HTTPException(status_code=401, detail=INVALID_CREDENTIALS)
    return user


def get_user(db: Client, user_id: str) -> dict:
    user = repository.get_by_id(db, user_id)
    if not user:
        raise not_found("User")
    return user


def update_profile(db: Client, user_id: str, data: dict) -> dict:
    user = get_user(db, user_id)
    update_data = {k: v for k, v in data.items() if v is not None}

    new_email = update_data.get("email")
    if new_email and new_email != user["email"]:
        existing = repository.get_by_email(db, new_email)
        if existing and str(existing["id"]) != str(user_id):
            raise ConflictError(EMAIL_IN_USE)

    if "password" in update_data:
        update_data["password_hash"] = hash_password(update_data.pop("password"))

    if not update_data:
        return user
    try:
        return repository.update(db, user_id, update_data) or user
    except APIError as e:
        if e.code == UNIQUE_VIOLATION:
            raise ConflictError(EMAIL_IN_USE)
        raise
