"""
Mail service: send an uploaded file to a list of recipients.

Only PDF and Word (.docx) attachments are accepted. The content type is
resolved from the filename through the shared FileValidator so the mail
feature follows the same admissibility rules as the archive builder.
"""

import logging
from typing import List, Optional

from app.models.archive import FileRecord
from app.services.errors import UnsupportedContentTypeError
from app.services.mailer import Mailer
from app.services.validation import MAIL_CONTENT_TYPES, FileValidator

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT = "File Attachment"
DEFAULT_BODY = "Please find the attached file."


def mail_validator() -> FileValidator:
    """Validator whose admissible set is restricted to mail attachment types."""
    return FileValidator(allowed_types=MAIL_CONTENT_TYPES)


def parse_recipients(emails: Optional[str]) -> List[str]:
    """Split a comma-separated recipient field, dropping blanks."""
    if not emails:
        return []
    return [e.strip() for e in emails.split(",") if e.strip()]


def send_file(
    mailer: Mailer,
    recipients: List[str],
    filename: str,
    content: bytes,
    content_type: str = "",
    subject: str = DEFAULT_SUBJECT,
    body: str = DEFAULT_BODY,
) -> FileRecord:
    """
    Validate the attachment and send it to every recipient.

    Returns the validated FileRecord that was sent.

    Raises:
        InvalidInputError: empty filename or content
        UnsupportedContentTypeError: type not derivable, or not PDF/.docx
        MailDeliveryError: invalid recipients or SMTP failure
    """
    validator = mail_validator()
    record = FileRecord(name=filename, content=content, content_type=content_type)
    validator.validate_file_record(record)

    if not validator.is_allowed_content_type(record.content_type):
        logger.warning(
            "rejected mail attachment: filename=%r mime_type=%r",
            record.name, record.content_type,
        )
        raise UnsupportedContentTypeError(
            f"invalid file type: {record.content_type}",
            "content_type_not_allowed",
            record.name,
        )

    mailer.send(recipients, subject, body, record, validator=validator)
    return record
