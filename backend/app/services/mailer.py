"""
SMTP mail transport.

Sends a single file as an email attachment to one or more recipients.
Messages are assembled with the standard library ``email`` package and
delivered with ``smtplib`` over STARTTLS.

Environment variables (read through app.config):
  SMTP_HOST, SMTP_PORT, SMTP_USERNAME, SMTP_PASSWORD, SMTP_SENDER
"""

import logging
import re
import smtplib
from email.message import EmailMessage
from typing import List, Optional

from app.config import Settings
from app.models.archive import FileRecord
from app.services.errors import (
    ArchiveError,
    InvalidInputError,
    MailConfigError,
    MailDeliveryError,
)
from app.services.validation import DEFAULT_CONTENT_TYPE, FileValidator

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}\Z")

_SMTP_TIMEOUT_SECONDS = 30


def validate_recipients(emails: List[str]) -> None:
    """Raise MailDeliveryError unless every address looks like an email."""
    if not emails:
        raise MailDeliveryError("no recipients provided", "invalid_recipients")
    for email in emails:
        if not EMAIL_PATTERN.fullmatch(email):
            raise MailDeliveryError(
                f"invalid email format: {email}", "invalid_recipients"
            )


class Mailer:
    """Thin wrapper around an SMTP server account."""

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        sender: Optional[str] = None,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender or username

    @classmethod
    def from_settings(cls, settings: Settings) -> "Mailer":
        mailer = cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_username,
            password=settings.smtp_password,
            sender=settings.smtp_sender,
        )
        mailer.validate_config()
        return mailer

    def validate_config(self) -> None:
        if not self.host:
            raise MailConfigError("invalid SMTP configuration: host is required")
        if not self.port:
            raise MailConfigError("invalid SMTP configuration: port is required")
        if not self.username:
            raise MailConfigError("invalid SMTP configuration: username is required")
        if not self.password:
            raise MailConfigError("invalid SMTP configuration: password is required")

    def build_message(
        self,
        to: List[str],
        subject: str,
        body: str,
        record: FileRecord,
    ) -> EmailMessage:
        """Assemble a multipart message: plain-text body plus one attachment."""
        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = self.sender
        message["To"] = ", ".join(to)
        message.set_content(body)

        maintype, _, subtype = (record.content_type or DEFAULT_CONTENT_TYPE).partition("/")
        message.add_attachment(
            record.content,
            maintype=maintype,
            subtype=subtype.split(";", 1)[0].strip() or "octet-stream",
            filename=record.name,
        )
        return message

    def send(
        self,
        to: List[str],
        subject: str,
        body: str,
        record: FileRecord,
        validator: Optional[FileValidator] = None,
    ) -> None:
        """
        Send ``record`` to every address in ``to``.

        Raises:
            MailDeliveryError: bad recipients (invalid_recipients) or an SMTP
                failure (mail_send_failed)
            InvalidInputError: empty subject or an invalid record
        """
        validate_recipients(to)
        if not subject:
            raise InvalidInputError("subject cannot be empty", "empty_subject")
        if record is None:
            raise InvalidInputError("invalid file data: file is None", "empty_file")
        try:
            (validator or FileValidator()).validate_file_record(record)
        except ArchiveError as e:
            raise type(e)(f"invalid file data: {e.message}", e.error_code, record.name) from e

        message = self.build_message(to, subject, body, record)

        try:
            with smtplib.SMTP(self.host, self.port, timeout=_SMTP_TIMEOUT_SECONDS) as smtp:
                smtp.starttls()
                smtp.login(self.username, self.password)
                smtp.send_message(message, from_addr=self.sender, to_addrs=to)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(
                "failed to send email: host=%s recipients=%d filename=%r error=%s",
                self.host, len(to), record.name, e,
            )
            raise MailDeliveryError(
                f"failed to send email: {e}", "mail_send_failed", record.name
            ) from e

        logger.info("Sent %r to %d recipient(s)", record.name, len(to))
