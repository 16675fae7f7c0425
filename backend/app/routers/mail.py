"""
Mail router.

Endpoints:
  POST /file  — email an uploaded PDF or .docx file to a list of recipients

Form fields:
  file    the attachment (max MAX_FILE_SIZE bytes)
  emails  comma-separated recipient addresses
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.concurrency import run_in_threadpool

from app.config import Settings, get_settings
from app.models.archive import MailSentResponse
from app.routers.responses import error, read_upload, to_http_error
from app.services.errors import ArchiveError, MailConfigError
from app.services.mail_service import parse_recipients, send_file
from app.services.mailer import Mailer

logger = logging.getLogger(__name__)

router = APIRouter()


def get_mailer(settings: Settings = Depends(get_settings)) -> Mailer:
    """Dependency: an SMTP mailer built from settings (503 if unconfigured)."""
    try:
        return Mailer.from_settings(settings)
    except MailConfigError as e:
        raise to_http_error(e)


@router.post("/file", response_model=MailSentResponse)
async def send_file_by_mail(
    file: UploadFile = File(...),
    emails: Optional[str] = Form(None),
    settings: Settings = Depends(get_settings),
    mailer: Mailer = Depends(get_mailer),
) -> MailSentResponse:
    recipients = parse_recipients(emails)
    if not recipients:
        raise error(400, "emails are required", "emails_required")

    content = await read_upload(file, settings.max_file_size)

    try:
        await run_in_threadpool(
            send_file,
            mailer,
            recipients,
            file.filename or "",
            content,
        )
    except ArchiveError as e:
        raise to_http_error(e)

    return MailSentResponse(message="Emails sent successfully.")
