"""
Archive building service.

Packs in-memory files into a single zip archive held in memory.

Public API:
  build_archive(records, validator=None)                     -> bytes
  validate_files(records, validator=None)                    -> None
  create_archive(records, archive_name, validator=None)      -> FileRecord

build_archive is all-or-nothing: every record is validated before the first
byte is written, and a failure while writing discards the partial archive.
create_archive additionally restricts records to the admissible content
types and wraps the result in a FileRecord ready to stream back.
"""

import io
import logging
import zipfile
from typing import Optional, Sequence

from app.models.archive import FileRecord
from app.services.errors import (
    ArchiveError,
    InvalidInputError,
    UnsupportedContentTypeError,
    WriteFailureError,
)
from app.services.validation import (
    ZIP_CONTENT_TYPE,
    FileValidator,
    normalize_archive_path,
)

logger = logging.getLogger(__name__)

DEFAULT_ARCHIVE_NAME = "archive.zip"

# Single fixed compression scheme for every entry
_COMPRESSION = zipfile.ZIP_DEFLATED


def _check_records(records: Sequence[FileRecord], validator: FileValidator, op: str) -> None:
    if not records:
        raise InvalidInputError(f"{op}: files list is empty", "empty_file_list")

    for record in records:
        if record is None:
            raise InvalidInputError(f"{op}: file cannot be None", "empty_file")
        try:
            validator.validate_file_record(record)
        except ArchiveError as e:
            raise type(e)(
                f"{op}: invalid file {record.name!r}: {e.message}",
                e.error_code,
                record.name,
            ) from e
        if not normalize_archive_path(record.name):
            raise InvalidInputError(
                f"{op}: invalid file {record.name!r}: file path is required",
                "empty_path",
                record.name,
            )


def build_archive(
    records: Sequence[FileRecord],
    validator: Optional[FileValidator] = None,
) -> bytes:
    """
    Write records into a new zip archive, one entry per record, in order.

    Each entry is stored under the record's normalized name, so inspecting
    the result yields the same paths inspect_archive would report.

    Raises:
        InvalidInputError: empty list, or a record with an empty name,
            empty content or a name that normalizes to nothing
        UnsupportedContentTypeError: a record's content type cannot be derived
        WriteFailureError: the zip writer failed while writing or closing
    """
    op = "build_archive"
    validator = validator or FileValidator()

    _check_records(records, validator, op)

    buf = io.BytesIO()
    current: Optional[str] = None
    try:
        with zipfile.ZipFile(buf, mode="w", compression=_COMPRESSION) as archive:
            for record in records:
                current = record.name
                archive.writestr(normalize_archive_path(record.name), record.content)
            current = None
    except (OSError, ValueError, RuntimeError, zipfile.LargeZipFile) as e:
        if current is None:
            message = f"{op}: failed to finalize archive: {e}"
        else:
            message = f"{op}: failed to add file {current!r}: {e}"
        logger.error(message)
        raise WriteFailureError(message, current) from e

    return buf.getvalue()


def validate_files(
    records: Sequence[FileRecord],
    validator: Optional[FileValidator] = None,
) -> None:
    """
    Validate records for archiving, including the admissible-type gate.

    Raises the same errors as build_archive's validation phase, plus
    UnsupportedContentTypeError (content_type_not_allowed) for a
    well-formed record whose type is not in the validator's allowed set.
    """
    op = "validate_files"
    validator = validator or FileValidator()

    _check_records(records, validator, op)

    for record in records:
        if not validator.is_allowed_content_type(record.content_type):
            logger.warning(
                "invalid mime type detected: op=%s filename=%r mime_type=%r",
                op, record.name, record.content_type,
            )
            raise UnsupportedContentTypeError(
                f"{op}: content type {record.content_type!r} is not allowed "
                f"for {record.name!r}",
                "content_type_not_allowed",
                record.name,
            )


def create_archive(
    records: Sequence[FileRecord],
    archive_name: str = DEFAULT_ARCHIVE_NAME,
    validator: Optional[FileValidator] = None,
) -> FileRecord:
    """
    Validate records, build the zip and return it as a FileRecord.

    archive_name falls back to "archive.zip" when empty.
    """
    validator = validator or FileValidator()

    validate_files(records, validator)

    data = build_archive(records, validator)
    archive = FileRecord(
        name=archive_name or DEFAULT_ARCHIVE_NAME,
        content=data,
        content_type=ZIP_CONTENT_TYPE,
    )
    validator.validate_file_record(archive)

    logger.info(
        "Created archive %r: %d files, %d bytes", archive.name, len(records), archive.size
    )
    return archive
