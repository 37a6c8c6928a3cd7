"""Pydantic schemas for user and auth requests."""

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.utils.validators import check_password, normalize_email, require_text


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    name: str = Field(max_length=100)

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        return check_password(v)

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return require_text(v, "name")


class LoginRequest(BaseModel):
    email: EmailStr
    password: str

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return normalize_email(v)


class UpdateProfileRequest(BaseModel):
    email: EmailStr | None = None
    password: str | None = None
    name: str | None = Field(default=None, max_length=100)

    @field_validator("email")
    @classmethod
    def _email(cls, v: str | None) -> str | None:
        return normalize_email(v) if v is not None else v

    @field_validator("password")
    @classmethod
    def _password(cls, v: str | None) -> str | None:
        return check_password(v) if v is not None else v

    @field_validator("name")
    @classmethod
    def _name(cls, v: str | None) -> str | None:
        return require_text(v, "name") if v is not None else v
