"""
Shared HTTP helpers for the archive and mail routers.

Service exceptions are translated into HTTPException with a structured
detail payload: {"detail": <message>, "error_code": <code>}.
"""

import logging

from fastapi import HTTPException, UploadFile

from app.services.errors import (
    ArchiveError,
    CorruptContainerError,
    EmptyInventoryError,
    InvalidInputError,
    MailConfigError,
    MailDeliveryError,
    UnsupportedContentTypeError,
    WriteFailureError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR_CODE = {
    "invalid_recipients": 400,
    "mail_send_failed": 502,
}

_STATUS_BY_ERROR_TYPE = (
    (InvalidInputError, 400),
    (CorruptContainerError, 400),
    (UnsupportedContentTypeError, 415),
    (EmptyInventoryError, 422),
    (WriteFailureError, 500),
    (MailConfigError, 503),
    (MailDeliveryError, 502),
)


def error(status_code: int, message: str, error_code: str) -> HTTPException:
    """Build an HTTPException with a structured detail payload."""
    return HTTPException(
        status_code=status_code,
        detail={"detail": message, "error_code": error_code},
    )


def status_for(exc: ArchiveError) -> int:
    """HTTP status for a service exception."""
    if exc.error_code in _STATUS_BY_ERROR_CODE:
        return _STATUS_BY_ERROR_CODE[exc.error_code]
    for exc_type, status_code in _STATUS_BY_ERROR_TYPE:
        if isinstance(exc, exc_type):
            return status_code
    return 500


def to_http_error(exc: ArchiveError) -> HTTPException:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error("%s (error_code=%s)", exc.message, exc.error_code)
    else:
        logger.warning("%s (error_code=%s)", exc.message, exc.error_code)
    return error(status_code, exc.message, exc.error_code)


async def read_upload(file: UploadFile, max_size: int) -> bytes:
    """
    Read an uploaded file, enforcing ``max_size`` bytes.

    The declared size is checked before reading and the actual length after,
    in case the client did not send one.
    """
    limit_mb = max_size // (1024 * 1024)
    if file.size is not None and file.size > max_size:
        raise error(400, f"File exceeds {limit_mb} MB limit.", "file_too_large")

    content = await file.read()

    if len(content) > max_size:
        raise error(400, f"File exceeds {limit_mb} MB limit.", "file_too_large")
    return content
