"""
File admissibility rules shared by the archive inspector, the archive
builder and the mailer.

The extension -> content-type table and the admissible content-type set are
injected into FileValidator so tests (and the mailer, which accepts fewer
types) can substitute their own tables. The module-level defaults are
read-only.

Public API:
  normalize_archive_path(name)            -> str
  FileValidator.validate_file_record(rec) -> None   (may fill rec.content_type)
  FileValidator.validate_file_details(e)  -> None
  FileValidator.validate_archive_info(i)  -> None
  FileValidator.is_allowed_content_type(t) -> bool
"""

import posixpath
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from app.models.archive import ArchiveInfo, FileDetails, FileRecord
from app.services.errors import (
    EmptyInventoryError,
    InvalidInputError,
    UnsupportedContentTypeError,
)

# ---------------------------------------------------------------------------
# Content-type tables
# ---------------------------------------------------------------------------

DOCX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DEFAULT_CONTENT_TYPE = "application/octet-stream"
ZIP_CONTENT_TYPE = "application/zip"

DEFAULT_CONTENT_TYPES: Mapping[str, str] = MappingProxyType({
    ".avif": "image/avif",
    ".bmp": "image/bmp",
    ".css": "text/css",
    ".csv": "text/csv",
    ".doc": "application/msword",
    ".docx": DOCX_CONTENT_TYPE,
    ".gif": "image/gif",
    ".gz": "application/gzip",
    ".htm": "text/html",
    ".html": "text/html",
    ".jpeg": "image/jpeg",
    ".jpg": "image/jpeg",
    ".js": "text/javascript",
    ".json": "application/json",
    ".md": "text/markdown",
    ".mjs": "text/javascript",
    ".mp3": "audio/mpeg",
    ".mp4": "video/mp4",
    ".pdf": "application/pdf",
    ".png": "image/png",
    ".pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    ".svg": "image/svg+xml",
    ".tar": "application/x-tar",
    ".txt": "text/plain",
    ".wasm": "application/wasm",
    ".webp": "image/webp",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".xml": "application/xml",
    ".zip": ZIP_CONTENT_TYPE,
})

# Types accepted when building an archive
ALLOWED_CONTENT_TYPES = frozenset({
    DOCX_CONTENT_TYPE,
    "application/xml",
    "image/jpeg",
    "image/png",
    "application/pdf",
})

# Types accepted as mail attachments
MAIL_CONTENT_TYPES = frozenset({
    DOCX_CONTENT_TYPE,
    "application/pdf",
})


# ---------------------------------------------------------------------------
# Path normalization
# ---------------------------------------------------------------------------

def normalize_archive_path(name: str) -> str:
    """
    Canonicalize an archive member name into a path relative to the root.

    Backslashes are treated as separators, ``.`` and ``..`` segments and
    repeated slashes are collapsed, leading slashes are dropped, and ``..``
    segments that would climb above the root are discarded. Returns an
    empty string when nothing is left (e.g. ``"a/.."``).

        >>> normalize_archive_path("docs/./../img//logo.png")
        'img/logo.png'
        >>> normalize_archive_path("../../etc/passwd")
        'etc/passwd'
    """
    if not name:
        return ""

    cleaned = posixpath.normpath(name.replace("\\", "/"))
    parts = [p for p in cleaned.split("/") if p not in ("", ".", "..")]
    return "/".join(parts)


def _extension(name: str) -> str:
    return posixpath.splitext(name.replace("\\", "/"))[1].lower()


def _base_type(content_type: str) -> str:
    """Strip parameters such as ``; charset=utf-8`` and lowercase."""
    return content_type.split(";", 1)[0].strip().lower()


# ---------------------------------------------------------------------------
# Validator
# ---------------------------------------------------------------------------

class FileValidator:
    """Validates files, archive entries and archive inventories."""

    def __init__(
        self,
        content_types: Optional[Mapping[str, str]] = None,
        allowed_types: Optional[Iterable[str]] = None,
        default_type: str = DEFAULT_CONTENT_TYPE,
    ):
        table = DEFAULT_CONTENT_TYPES if content_types is None else content_types
        self.content_types: Mapping[str, str] = MappingProxyType(
            {ext.lower(): ctype for ext, ctype in table.items()}
        )
        self.allowed_types = frozenset(
            _base_type(t)
            for t in (ALLOWED_CONTENT_TYPES if allowed_types is None else allowed_types)
        )
        self.default_type = default_type

    def content_type_for(self, name: str) -> str:
        """Return the content type mapped to the name's extension, or ""."""
        return self.content_types.get(_extension(name), "")

    def detect_content_type(self, name: str) -> str:
        """Like content_type_for but falls back to the generic binary type."""
        return self.content_type_for(name) or self.default_type

    def is_allowed_content_type(self, content_type: str) -> bool:
        if not content_type:
            return False
        return _base_type(content_type) in self.allowed_types

    def validate_file_record(self, record: FileRecord) -> None:
        """
        Check that an in-memory file can be archived or mailed.

        When ``record.content_type`` is empty it is derived from the name's
        extension and written back onto the record. name and content are
        never modified.

        Raises:
            InvalidInputError: empty name (empty_name) or content (empty_content)
            UnsupportedContentTypeError: no type given and none derivable
        """
        if not record.name:
            raise InvalidInputError("filename cannot be empty", "empty_name")
        if len(record.content) == 0:
            raise InvalidInputError(
                "file content is required", "empty_content", record.name
            )
        if not record.content_type:
            derived = self.content_type_for(record.name)
            if not derived:
                raise UnsupportedContentTypeError(
                    f"cannot determine content type for {record.name!r}",
                    "unresolvable_content_type",
                    record.name,
                )
            record.content_type = derived

    def validate_file_details(self, entry: FileDetails) -> None:
        """Check one inspected archive entry."""
        if not entry.file_path:
            raise InvalidInputError("file path is required", "empty_path")
        if entry.size < 0:
            raise InvalidInputError(
                "file size cannot be negative", "negative_size", entry.file_path
            )
        if not entry.mimetype:
            raise UnsupportedContentTypeError(
                "invalid mime type", "unresolvable_content_type", entry.file_path
            )

    def validate_archive_info(self, info: ArchiveInfo) -> None:
        """
        Check a complete inventory. Totals must already be calculated.

        Raises:
            InvalidInputError: empty filename or a negative size/count
            EmptyInventoryError: the inventory lists no files
        """
        if not info.filename:
            raise InvalidInputError("filename cannot be empty", "empty_filename")
        for label, value in (
            ("archive size", info.archive_size),
            ("total size", info.total_size),
            ("total files", info.total_files),
        ):
            if value < 0:
                raise InvalidInputError(
                    f"{label} cannot be negative", "negative_size", info.filename
                )
        if not info.files:
            raise EmptyInventoryError(
                "archive contains no valid files", info.filename
            )
        for entry in info.files:
            self.validate_file_details(entry)
