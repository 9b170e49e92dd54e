from typing import Any
from fastapi import status
from fastapi.responses import ORJSONResponse
import logging

logger = logging.getLogger(__name__)


def error_response(
    message: str,
    code: int = status.HTTP_400_BAD_REQUEST,
    **extra: Any,
) -> ORJSONResponse:
    """Return a ``{"error": message}`` JSON response and log it."""
    level = logging.ERROR if code >= 500 else logging.WARNING
    logger.log(level, "%s %s %s", code, message, extra or "")
    return ORJSONResponse(status_code=code, content={"error": message, **extra})
