"""Business logic for projects with ownership verification.

A project that belongs to someone else is reported exactly like a missing
one, so callers cannot probe for other users' project ids.
"""

import logging
from datetime import datetime, timezone

from fastapi import HTTPException
from supabase import Client

from src.llm.client import LLMClient, LLMError
from src.projects import repository
from src.users import repository as users_repository
from src.utils.errors import UpstreamError, not_found

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def verify_ownership(project: dict, user_id: str) -> None:
    if str(project["owner_id"]) != str(user_id):
        raise not_found("Project")


def merge_settings(base: dict | None, overrides: dict | None) -> dict:
    merged = dict(base or {})
    merged.update({k: v for k, v in (overrides or {}).items() if v is not None})
    return merged


def create_project(db: Client, user_id: str, data: dict, defaults: dict) -> dict:
    row = {
        "name": data["name"],
        "description": data.get("description"),
        "settings": merge_settings(defaults, data.get("settings")),
    }
    project = repository.create(db, user_id, row)
    users_repository.add_project(db, user_id, str(project["id"]))
    return project


def list_projects(db: Client, user_id: str) -> list[dict]:
    return repository.list_by_owner(db, user_id)


def get_project(db: Client, project_id: str, user_id: str) -> dict:
    project = repository.get_by_id(db, project_id)
    if not project:
        raise not_found("Project")
    verify_ownership(project, user_id)
    return project


def update_project(db: Client, project_id: str, user_id: str, data: dict) -> dict:
    project = get_project(db, project_id, user_id)
    # Filter out None values
    update_data = {k: v for k, v in data.items() if v is not None}
    if "settings" in update_data:
        update_data["settings"] = merge_settings(project.get("settings"), update_data["settings"])
    if not update_data:
        return project
    return repository.update(db, project_id, update_data) or project


def delete_project(db: Client, project_id: str, user_id: str) -> None:
    get_project(db, project_id, user_id)
    repository.delete(db, project_id)
    users_repository.remove_project(db, user_id, project_id)


def add_prompt(db: Client, project_id: str, user_id: str, role: str, content: str) -> dict:
    get_project(db, project_id, user_id)
    entry = {"role": role, "content": content, "created_at": _now()}
    project = repository.append_prompt(db, project_id, user_id, entry)
    if not project:
        raise not_found("Project")
    return project


async def add_file(db: Client, llm: LLMClient, project_id: str, user_id: str, filename: str, content: bytes) -> dict:
    get_project(db, project_id, user_id)
    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")

    try:
        uploaded = await llm.upload_file(filename, content)
    except LLMError as e:
        raise UpstreamError(f"File upload failed: {e}")

    entry = {"filename": filename, "file_id": uploaded["id"], "uploaded_at": _now()}
    if not repository.append_file(db, project_id, user_id, entry):
        # Deleted while the upload was in flight
        raise not_found("Project")
    logger.info("Uploaded file %s to project %s as %s", filename, project_id, uploaded["id"])
    return {"fileId": uploaded["id"], "filename": filename}
