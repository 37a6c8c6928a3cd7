"""Data access layer for projects."""

from datetime import datetime, timezone
from typing import Any

from supabase import Client

from src.db.models import APPEND_FILE_FN, APPEND_PROMPT_FN, PROJECTS


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def create(db: Client, owner_id: str, data: dict[str, Any]) -> dict:
    row = {"owner_id": owner_id, "prompts": [], "files": [], **data}
    result = db.table(PROJECTS).insert(row).execute()
    return result.data[0]


def list_by_owner(db: Client, owner_id: str) -> list[dict]:
    result = (
        db.table(PROJECTS)
        .select("*")
        .eq("owner_id", owner_id)
        .order("updated_at", desc=True)
        .execute()
    )
    return result.data


def get_by_id(db: Client, project_id: str) -> dict | None:
    result = db.table(PROJECTS).select("*").eq("id", project_id).execute()
    return result.data[0] if result.data else None


def update(db: Client, project_id: str, data: dict[str, Any]) -> dict | None:
    result = db.table(PROJECTS).update({**data, "updated_at": _now()}).eq("id", project_id).execute()
    return result.data[0] if result.data else None


def delete(db: Client, project_id: str) -> bool:
    result = db.table(PROJECTS).delete().eq("id", project_id).execute()
    return bool(result.data)


def _append(db: Client, function: str, project_id: str, owner_id: str, entry: dict[str, Any]) -> dict | None:
    # Single UPDATE in Postgres; the stored array never round-trips through Python
    result = db.rpc(function, {"p_project_id": project_id, "p_owner_id": owner_id, "p_entry": entry}).execute()
    return result.data[0] if result.data else None


def append_prompt(db: Client, project_id: str, owner_id: str, entry: dict[str, Any]) -> dict | None:
    return _append(db, APPEND_PROMPT_FN, project_id, owner_id, entry)


def append_file(db: Client, project_id: str, owner_id: str, entry: dict[str, Any]) -> dict | None:
    return _append(db, APPEND_FILE_FN, project_id, owner_id, entry)
