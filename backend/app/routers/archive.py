"""
Archive router.

Endpoints:
  POST /information  — list the files inside an uploaded zip archive
  POST /files        — pack uploaded files into a zip archive and return it
"""

import io
import logging
from typing import List

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import StreamingResponse

from app.config import Settings, get_settings
from app.models.archive import ArchiveInfo, FileRecord
from app.routers.responses import error, read_upload, to_http_error
from app.services.archive_builder import DEFAULT_ARCHIVE_NAME, create_archive
from app.services.archive_inspector import inspect_archive
from app.services.errors import ArchiveError
from app.services.validation import FileValidator

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/information", response_model=ArchiveInfo)
async def get_archive_information(
    file: UploadFile = File(...),
    settings: Settings = Depends(get_settings),
) -> ArchiveInfo:
    """
    Inspect a zip archive without extracting it.

    Returns the archive's filename and size, the total uncompressed size and
    count of its files, and path/size/mimetype for each file. Directories
    are not listed.
    """
    content = await read_upload(file, settings.max_file_size)
    filename = file.filename or DEFAULT_ARCHIVE_NAME

    try:
        return inspect_archive(content, filename)
    except ArchiveError as e:
        raise to_http_error(e)


@router.post("/files")
async def create_archive_from_files(
    files: List[UploadFile] = File(..., alias="files[]"),
    settings: Settings = Depends(get_settings),
) -> StreamingResponse:
    """
    Pack the uploaded files into a single zip archive.

    Accepted types: .docx, .xml, .jpg/.jpeg, .png, .pdf. The content type is
    always derived from the filename; the client-declared type is ignored.
    """
    if not files:
        raise error(400, "No files provided.", "empty_file_list")

    validator = FileValidator()
    records: List[FileRecord] = []
    total_size = 0

    for upload in files:
        content = await read_upload(upload, settings.max_file_size)
        total_size += len(content)
        if total_size > settings.max_total_size:
            limit_mb = settings.max_total_size // (1024 * 1024)
            raise error(400, f"Total upload exceeds {limit_mb} MB limit.", "total_too_large")

        name = upload.filename or ""
        records.append(
            FileRecord(
                name=name,
                content=content,
                content_type=validator.content_type_for(name),
            )
        )

    try:
        archive = create_archive(records, DEFAULT_ARCHIVE_NAME, validator)
    except ArchiveError as e:
        raise to_http_error(e)

    return StreamingResponse(
        io.BytesIO(archive.content),
        media_type=archive.content_type,
        headers={
            "Content-Disposition": f'attachment; filename="{archive.name}"',
            "Content-Length": str(archive.size),
        },
    )
