"""
Exceptions raised by the archive and mail services.

Every exception carries a stable ``error_code`` that the routers return to
clients alongside the human-readable message, plus the offending filename
when one is known.

Categories:
  InvalidInputError            — caller data violates a precondition (400)
  UnsupportedContentTypeError  — well-formed data with a type we refuse (415)
  CorruptContainerError        — bytes are not a readable zip archive (400)
  EmptyInventoryError          — archive parsed but no usable entries (422)
  WriteFailureError            — the zip writer could not finish (500)
  MailDeliveryError            — recipients invalid or SMTP send failed
"""

from typing import Optional


class ArchiveError(Exception):
    """Base class for archive service failures."""

    def __init__(self, message: str, error_code: str, filename: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.filename = filename


class InvalidInputError(ArchiveError):
    """Raised when caller-supplied data is empty or malformed."""


class UnsupportedContentTypeError(ArchiveError):
    """Raised when a content type cannot be resolved or is not admissible."""


class CorruptContainerError(ArchiveError):
    """Raised when the uploaded bytes cannot be parsed as a zip archive."""

    def __init__(self, message: str, filename: Optional[str] = None):
        super().__init__(message, "corrupt_container", filename)


class EmptyInventoryError(ArchiveError):
    """Raised when no file entry survives inspection."""

    def __init__(self, message: str, filename: Optional[str] = None):
        super().__init__(message, "empty_inventory", filename)


class WriteFailureError(ArchiveError):
    """Raised when writing or finalizing the zip container fails."""

    def __init__(self, message: str, filename: Optional[str] = None):
        super().__init__(message, "write_failure", filename)


class MailDeliveryError(ArchiveError):
    """Raised when an email cannot be addressed or delivered."""


class MailConfigError(ArchiveError):
    """Raised when the SMTP transport is not configured."""

    def __init__(self, message: str):
        super().__init__(message, "mail_not_configured")
