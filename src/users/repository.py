"""Data access layer for users."""

from datetime import datetime, timezone
from typing import Any

from supabase import Client

from src.db.models import USERS


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def get_by_email(db: Client, email: str) -> dict | None:
    result = db.table(USERS).select("*").eq("email", email).execute()
    return result.data[0] if result.data else None


def get_by_id(db: Client, user_id: str) -> dict | None:
    result = db.table(USERS).select("*").eq("id", user_id).execute()
    return result.data[0] if result.data else None


def create(db: Client, data: dict[str, Any]) -> dict:
    row = {"project_ids": [], **data}
    result = db.table(USERS).insert(row).execute()
    return result.data[0]


def update(db: Client, user_id: str, data: dict[str, Any]) -> dict | None:
    result = db.table(USERS).update({**data, "updated_at": _now()}).eq("id", user_id).execute()
    return result.data[0] if result.data else None


def add_project(db: Client, user_id: str, project_id: str) -> None:
    user = get_by_id(db, user_id)
    if not user:
        return
    project_ids = list(user.get("project_ids") or [])
    if project_id not in project_ids:
        project_ids.append(project_id)
        update(db, user_id, {"project_ids": project_ids})


def remove_project(db: Client, user_id: str, project_id: str) -> None:
    user = get_by_id(db, user_id)
    if not user:
        return
    project_ids = [pid for pid in (user.get("project_ids") or []) if pid != project_id]
    update(db, user_id, {"project_ids": project_ids})
