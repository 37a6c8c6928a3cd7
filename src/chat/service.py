"""Chat business logic: forward a project's prompts plus a new message to the LLM."""

import logging

from supabase import Client

from src.config.settings import Settings
from src.db.models import ROLE_USER
from src.llm.client import LLMClient, LLMError
from src.projects.service import get_project
from src.utils.cost_tracker import log_usage
from src.utils.errors import UpstreamError

logger = logging.getLogger(__name__)


def build_messages(prompts: list[dict], message: str) -> list[dict]:
    """Stored prompts in insertion order, then the new user message."""
    history = [{"role": p["role"], "content": p["content"]} for p in prompts]
    return history + [{"role": ROLE_USER, "content": message}]


def resolve_model_settings(project_settings: dict | None, settings: Settings) -> tuple[str, float, int]:
    project_settings = project_settings or {}
    model = project_settings.get("model") or settings.DEFAULT_MODEL
    temperature = project_settings.get("temperature")
    if temperature is None:
        temperature = settings.DEFAULT_TEMPERATURE
    max_tokens = project_settings.get("max_tokens") or settings.DEFAULT_MAX_TOKENS
    return model, temperature, max_tokens


async def send_message(
    db: Client,
    llm: LLMClient,
    settings: Settings,
    project_id: str,
    message: str,
    user_id: str,
) -> dict:
    """Call the LLM once with the project's history and return {"reply", "usage"}.

    Neither the message nor the reply is written back to the project.
    """
    project = get_project(db, project_id, user_id)
    messages = build_messages(project.get("prompts") or [], message)
    model, temperature, max_tokens = resolve_model_settings(project.get("settings"), settings)

    try:
        result = await llm.generate(messages, model, temperature, max_tokens)
    except LLMError as e:
        raise UpstreamError(f"Completion service error: {e}")

    usage = result.get("usage") or {}
    log_usage(usage, model, project_id)
    return {"reply": result["content"], "usage": usage}
