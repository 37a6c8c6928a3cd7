"""Chat endpoint."""

import uuid

from fastapi import APIRouter, Depends
from supabase import Client

from src.auth.dependencies import CurrentUser, get_current_user
from src.chat.schemas import SendMessageRequest
from src.chat.service import send_message
from src.config.settings import Settings, app_settings
from src.db.client import get_db
from src.llm.client import LLMClient, get_llm_client

router = APIRouter(prefix="/api/chat", tags=["Chat"])


@router.post("/{project_id}", summary="Send a message", description="Send a message with the project's prompts as history and return the model's reply.")
async def send(
    project_id: uuid.UUID,
    body: SendMessageRequest,
    user: CurrentUser = Depends(get_current_user),
    db: Client = Depends(get_db),
    llm: LLMClient = Depends(get_llm_client),
    settings: Settings = Depends(app_settings),
):
    result = await send_message(db, llm, settings, str(project_id), body.message, user.id)
    return {"status": "success", "data": result}
