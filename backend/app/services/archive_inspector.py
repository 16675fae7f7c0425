"""
Archive inspection service.

Reads the central directory of an uploaded zip archive and reports the
files it contains without extracting anything to disk.

Public API:
  inspect_archive(raw_bytes, filename, validator=None) -> ArchiveInfo
"""

import io
import logging
import struct
import zipfile
from typing import List, Optional

from app.models.archive import ArchiveInfo, FileDetails
from app.services.errors import (
    ArchiveError,
    CorruptContainerError,
    InvalidInputError,
)
from app.services.validation import FileValidator, normalize_archive_path

logger = logging.getLogger(__name__)

# Raised by zipfile while parsing a damaged or hostile central directory
_CORRUPT_ZIP_ERRORS = (
    zipfile.BadZipFile,
    zipfile.LargeZipFile,
    EOFError,
    IndexError,
    NotImplementedError,
    ValueError,
    struct.error,
)

# MS-DOS attribute bit marking a directory entry
_MSDOS_DIRECTORY = 0x10


def inspect_archive(
    raw_bytes: bytes,
    filename: str,
    validator: Optional[FileValidator] = None,
) -> ArchiveInfo:
    """
    Build a validated inventory of the files inside a zip archive.

    Directory entries are skipped. Entries that fail validation (for example
    a member name that normalizes to nothing) are logged and dropped rather
    than failing the whole inspection.

    Args:
        raw_bytes: The complete zip archive.
        filename: The archive's original filename, reported back verbatim.
        validator: Optional validator with custom content-type tables.

    Returns:
        ArchiveInfo with totals calculated from the retained entries.

    Raises:
        InvalidInputError: raw_bytes is empty (empty_input) or filename is
            empty (empty_filename)
        CorruptContainerError: the bytes are not a readable zip archive
        EmptyInventoryError: no file entry survived the walk
    """
    op = "inspect_archive"
    validator = validator or FileValidator()

    if not raw_bytes:
        raise InvalidInputError(f"{op}: file is empty", "empty_input", filename)

    try:
        with zipfile.ZipFile(io.BytesIO(raw_bytes)) as archive:
            files = _collect_entries(archive.infolist(), validator)
    except _CORRUPT_ZIP_ERRORS as e:
        logger.warning("%s: failed to read zip %r: %s", op, filename, e)
        raise CorruptContainerError(f"{op}: invalid zip archive: {e}", filename) from e

    info = ArchiveInfo(
        filename=filename,
        archive_size=len(raw_bytes),
        files=files,
    )
    info.calculate_totals()

    validator.validate_archive_info(info)

    logger.debug(
        "%s: %r holds %d files (%d bytes)",
        op, filename, info.total_files, info.total_size,
    )
    return info


def _collect_entries(
    members: List[zipfile.ZipInfo],
    validator: FileValidator,
) -> List[FileDetails]:
    """Convert zip members to FileDetails in directory order, skipping bad ones."""
    files: List[FileDetails] = []
    for member in members:
        if _is_directory(member):
            continue

        file_path = normalize_archive_path(member.filename)
        details = FileDetails(
            file_path=file_path,
            size=member.file_size,
            mimetype=validator.detect_content_type(file_path),
        )

        try:
            validator.validate_file_details(details)
        except ArchiveError as e:
            logger.warning(
                "Skipping invalid file in archive: %r (%s)", member.filename, e.message
            )
            continue

        files.append(details)

    return files


def _is_directory(member: zipfile.ZipInfo) -> bool:
    """Directory entries, including Windows-style ``dir\\`` names and the DOS bit."""
    return (
        member.is_dir()
        or member.filename.endswith("\\")
        or bool(member.external_attr & _MSDOS_DIRECTORY)
    )
