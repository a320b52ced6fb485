import logging
from fastapi import HTTPException, status

from app.core.messages import msg

logger = logging.getLogger(__name__)


def store_error(context: str, exc: Exception) -> HTTPException:
    """Log a backing-store failure and return the short user-facing error for it."""
    logger.error(f"{context}: {exc}")
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=msg("service_unavailable"))


def not_found(key: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=msg(key))


def forbidden() -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=msg("access_denied"))


def bad_request(key: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=msg(key))
