"""Pydantic schemas for project requests."""

from pydantic import BaseModel, Field, field_validator

from src.db.models import MAX_TEMPERATURE, MIN_TEMPERATURE, VALID_ROLES
from src.utils.validators import require_text


class ProjectSettings(BaseModel):
    model: str | None = Field(default=None, min_length=1)
    temperature: float | None = Field(default=None, ge=MIN_TEMPERATURE, le=MAX_TEMPERATURE)
    max_tokens: int | None = Field(default=None, ge=1)


class CreateProjectRequest(BaseModel):
    name: str = Field(max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    settings: ProjectSettings | None = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return require_text(v, "name")


class UpdateProjectRequest(BaseModel):
    name: str | None = Field(default=None, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    settings: ProjectSettings | None = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: str | None) -> str | None:
        return require_text(v, "name") if v is not None else v


class AddPromptRequest(BaseModel):
    role: str
    content: str

    @field_validator("role")
    @classmethod
    def _role(cls, v: str) -> str:
        if v not in VALID_ROLES:
            raise ValueError(f"role must be one of {', '.join(sorted(VALID_ROLES))}")
        return v

    @field_validator("content")
    @classmethod
    def _content(cls, v: str) -> str:
        return require_text(v, "content")
