"""Pydantic schemas for chat requests."""

from pydantic import BaseModel, field_validator

from src.utils.validators import require_text


class SendMessageRequest(BaseModel):
    message: str

    @field_validator("message")
    @classmethod
    def _message(cls, v: str) -> str:
        return require_text(v, "message")
