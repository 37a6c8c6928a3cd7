"""HTTP errors with a specific error type in the response envelope."""

from fastapi import HTTPException


class ConflictError(HTTPException):
    """A unique field (e.g. email) is already taken. Reported as 400."""

    error_type = "conflict"

    def __init__(self, detail: str):
        super().__init__(status_code=400, detail=detail)


class UpstreamError(HTTPException):
    """The completion service failed; the upstream message is kept in the detail."""

    error_type = "upstream_error"

    def __init__(self, detail: str):
        super().__init__(status_code=502, detail=detail)


def not_found(what: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"{what} not found")
