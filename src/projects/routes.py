"""Project CRUD, prompt and file endpoints."""

import uuid

from fastapi import APIRouter, Depends, File, Response, UploadFile
from supabase import Client

from src.auth.dependencies import CurrentUser, get_current_user
from src.config.settings import Settings, app_settings
from src.db.client import get_db
from src.llm.client import LLMClient, get_llm_client
from src.projects import service
from src.projects.schemas import AddPromptRequest, CreateProjectRequest, UpdateProjectRequest

router = APIRouter(prefix="/api/projects", tags=["Projects"])

DEFAULT_UPLOAD_NAME = "upload"


@router.get("", summary="List projects", description="List the authenticated user's projects, most recently updated first.")
async def list_all(user: CurrentUser = Depends(get_current_user), db: Client = Depends(get_db)):
    return {"status": "success", "data": service.list_projects(db, user.id)}


@router.post("", status_code=201, summary="Create a project", description="Create a project. Settings not given fall back to the configured defaults.")
async def create(
    body: CreateProjectRequest,
    user: CurrentUser = Depends(get_current_user),
    db: Client = Depends(get_db),
    settings: Settings = Depends(app_settings),
):
    project = service.create_project(db, user.id, body.model_dump(), settings.default_project_settings)
    return {"status": "success", "data": project}


@router.get("/{project_id}", summary="Get a project", description="Retrieve a single project with its prompts, files and settings.")
async def get(project_id: uuid.UUID, user: CurrentUser = Depends(get_current_user), db: Client = Depends(get_db)):
    return {"status": "success", "data": service.get_project(db, str(project_id), user.id)}


@router.put("/{project_id}", summary="Update a project", description="Update name, description or settings. Settings are merged key by key.")
async def update(
    project_id: uuid.UUID,
    body: UpdateProjectRequest,
    user: CurrentUser = Depends(get_current_user),
    db: Client = Depends(get_db),
):
    updated = service.update_project(db, str(project_id), user.id, body.model_dump())
    return {"status": "success", "data": updated}


@router.delete("/{project_id}", status_code=204, summary="Delete a project", description="Permanently delete a project.")
async def delete(project_id: uuid.UUID, user: CurrentUser = Depends(get_current_user), db: Client = Depends(get_db)):
    service.delete_project(db, str(project_id), user.id)
    return Response(status_code=204)


@router.post("/{project_id}/prompts", status_code=201, summary="Append a prompt", description="Append a role-tagged prompt to the project's history.")
async def add_prompt(
    project_id: uuid.UUID,
    body: AddPromptRequest,
    user: CurrentUser = Depends(get_current_user),
    db: Client = Depends(get_db),
):
    project = service.add_prompt(db, str(project_id), user.id, body.role, body.content)
    return {"status": "success", "data": project}


@router.post("/{project_id}/files", status_code=201, summary="Upload a file", description="Upload a file to the completion provider and attach its id to the project.")
async def add_file(
    project_id: uuid.UUID,
    file: UploadFile = File(...),
    user: CurrentUser = Depends(get_current_user),
    db: Client = Depends(get_db),
    llm: LLMClient = Depends(get_llm_client),
):
    content = await file.read()
    result = await service.add_file(
        db, llm, str(project_id), user.id,
        file.filename or DEFAULT_UPLOAD_NAME, content,
    )
    return {"status": "success", "data": result}
