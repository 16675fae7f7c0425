"""
Pydantic models for archive inspection and archive building.

Models:
  FileRecord   — an in-memory file handed to the archive builder or mailer
  FileDetails  — metadata for one file entry found inside an archive
  ArchiveInfo  — the inspection result returned by POST /api/archive/information
"""

from typing import List

from pydantic import BaseModel


class FileRecord(BaseModel):
    """
    A file held entirely in memory.

    content_type may be left empty by the caller; FileValidator fills it in
    from the filename extension during validation.
    """

    name: str
    content: bytes
    content_type: str = ""

    @property
    def size(self) -> int:
        return len(self.content)


class FileDetails(BaseModel):
    """A single file entry inside an archive (directories are never listed)."""

    file_path: str
    size: int
    mimetype: str


class ArchiveInfo(BaseModel):
    """
    Inventory of a zip archive.

    total_size and total_files are derived from ``files``; call
    calculate_totals() after the file list changes instead of setting them.
    """

    filename: str
    archive_size: int = 0
    total_size: int = 0
    total_files: int = 0
    files: List[FileDetails] = []

    def calculate_totals(self) -> None:
        """Recompute total_size and total_files from the file list."""
        self.total_size = sum(f.size for f in self.files)
        self.total_files = len(self.files)


class MailSentResponse(BaseModel):
    """Response body for POST /api/mail/file."""

    message: str
