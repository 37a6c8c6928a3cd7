"""Shared field validators used by the request schemas."""

MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_BYTES = 72


def normalize_email(value: str) -> str:
    return value.strip().lower()


def require_text(value: str, field: str = "value") -> str:
    """Strip surrounding whitespace and reject blank strings."""
    stripped = value.strip()
    if not stripped:
        raise ValueError(f"{field} must not be blank")
    return stripped


def check_password(value: str) -> str:
    if len(value) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"password must be at least {MIN_PASSWORD_LENGTH} characters")
    # bcrypt only looks at the first 72 bytes
    if len(value.encode()) > MAX_PASSWORD_BYTES:
        raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value
