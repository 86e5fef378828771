from fastapi import status
from fastapi.responses import JSONResponse

from botstudio.api.schemas.errors import ErrorResponse

GEMINI_NOT_CONFIGURED = "GEMINI_NOT_CONFIGURED"
IMAGE_EDIT_FAILED = "IMAGE_EDIT_FAILED"
BOT_TOKEN_MISSING = "BOT_TOKEN_MISSING"

ERROR_STATUS_CODES: dict[str, int] = {
    GEMINI_NOT_CONFIGURED: status.HTTP_503_SERVICE_UNAVAILABLE,
    IMAGE_EDIT_FAILED: status.HTTP_502_BAD_GATEWAY,
    BOT_TOKEN_MISSING: status.HTTP_400_BAD_REQUEST,
}


def build_error_response(*, code: str, message: str, status_code: int | None = None) -> JSONResponse:
    """Build the error envelope; the status defaults to the one registered for ``code``."""
    payload = ErrorResponse.model_validate({"error": {"code": code, "message": message}})
    return JSONResponse(
        status_code=status_code or ERROR_STATUS_CODES.get(code, status.HTTP_500_INTERNAL_SERVER_ERROR),
        content=payload.model_dump(mode="json"),
    )
