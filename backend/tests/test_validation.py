"""
FileValidator and path normalization tests.

Pure unit tests: no zip files, no HTTP.
"""

import pytest

from app.models.archive import ArchiveInfo, FileDetails, FileRecord
from app.services.errors import (
    EmptyInventoryError,
    InvalidInputError,
    UnsupportedContentTypeError,
)
from app.services.validation import (
    ALLOWED_CONTENT_TYPES,
    DEFAULT_CONTENT_TYPE,
    DOCX_CONTENT_TYPE,
    MAIL_CONTENT_TYPES,
    FileValidator,
    normalize_archive_path,
)


# ---------------------------------------------------------------------------
# normalize_archive_path
# ---------------------------------------------------------------------------

class TestNormalizeArchivePath:

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("report.pdf", "report.pdf"),
            ("docs/report.pdf", "docs/report.pdf"),
            ("docs/./report.pdf", "docs/report.pdf"),
            ("docs//img///logo.png", "docs/img/logo.png"),
            ("docs/old/../report.pdf", "docs/report.pdf"),
            ("/absolute/path.txt", "absolute/path.txt"),
            ("../../etc/passwd", "etc/passwd"),
            ("a/../../b.txt", "b.txt"),
            ("windows\\style\\file.xml", "windows/style/file.xml"),
        ],
    )
    def test_collapses_segments(self, name, expected):
        assert normalize_archive_path(name) == expected

    @pytest.mark.parametrize("name", ["", ".", "./", "a/..", "..", "/"])
    def test_degenerate_paths_become_empty(self, name):
        assert normalize_archive_path(name) == ""


# ---------------------------------------------------------------------------
# Content-type lookup
# ---------------------------------------------------------------------------

class TestContentTypes:

    def test_known_extension(self):
        assert FileValidator().content_type_for("report.pdf") == "application/pdf"

    def test_extension_lookup_is_case_insensitive(self):
        assert FileValidator().content_type_for("PHOTO.JPG") == "image/jpeg"

    def test_unknown_extension_returns_empty(self):
        assert FileValidator().content_type_for("x.unknownext") == ""

    def test_detect_falls_back_to_binary(self):
        assert FileValidator().detect_content_type("x.unknownext") == DEFAULT_CONTENT_TYPE
        assert FileValidator().detect_content_type("Makefile") == DEFAULT_CONTENT_TYPE

    def test_injected_table_replaces_defaults(self):
        validator = FileValidator(content_types={".PDF": "application/x-custom"})
        assert validator.content_type_for("a.pdf") == "application/x-custom"
        assert validator.content_type_for("a.png") == ""


class TestIsAllowedContentType:

    @pytest.mark.parametrize("content_type", sorted(ALLOWED_CONTENT_TYPES))
    def test_allowed_types(self, content_type):
        assert FileValidator().is_allowed_content_type(content_type) is True

    @pytest.mark.parametrize(
        "content_type", ["text/plain", "application/zip", "image/gif", ""]
    )
    def test_other_types_are_rejected(self, content_type):
        assert FileValidator().is_allowed_content_type(content_type) is False

    def test_parameters_are_ignored(self):
        assert FileValidator().is_allowed_content_type("application/XML; charset=utf-8")

    def test_mail_set_is_narrower(self):
        validator = FileValidator(allowed_types=MAIL_CONTENT_TYPES)
        assert validator.is_allowed_content_type("application/pdf")
        assert validator.is_allowed_content_type(DOCX_CONTENT_TYPE)
        assert not validator.is_allowed_content_type("image/png")


# ---------------------------------------------------------------------------
# validate_file_record
# ---------------------------------------------------------------------------

class TestValidateFileRecord:

    def test_valid_record_passes(self):
        record = FileRecord(name="a.png", content=b"\x89PNG", content_type="image/png")
        FileValidator().validate_file_record(record)
        assert record.content_type == "image/png"

    def test_empty_name(self):
        record = FileRecord(name="", content=b"x", content_type="image/png")
        with pytest.raises(InvalidInputError) as exc_info:
            FileValidator().validate_file_record(record)
        assert exc_info.value.error_code == "empty_name"

    def test_empty_content(self):
        record = FileRecord(name="a.png", content=b"", content_type="image/png")
        with pytest.raises(InvalidInputError) as exc_info:
            FileValidator().validate_file_record(record)
        assert exc_info.value.error_code == "empty_content"
        assert exc_info.value.filename == "a.png"

    def test_derives_pdf_content_type_in_place(self):
        """An empty content type is filled in from the extension on the same object."""
        record = FileRecord(name="report.pdf", content=b"%PDF-1.7")
        FileValidator().validate_file_record(record)
        assert record.content_type == "application/pdf"

    def test_unknown_extension_is_unresolvable(self):
        record = FileRecord(name="x.unknownext", content=b"data")
        with pytest.raises(UnsupportedContentTypeError) as exc_info:
            FileValidator().validate_file_record(record)
        assert exc_info.value.error_code == "unresolvable_content_type"
        assert record.content_type == ""

    def test_name_and_content_are_untouched(self):
        record = FileRecord(name="dir/../a.pdf", content=b"bytes")
        FileValidator().validate_file_record(record)
        assert record.name == "dir/../a.pdf"
        assert record.content == b"bytes"

    def test_explicit_content_type_is_kept(self):
        """A caller-supplied type is not overwritten, even if the extension disagrees."""
        record = FileRecord(name="a.pdf", content=b"x", content_type="image/png")
        FileValidator().validate_file_record(record)
        assert record.content_type == "image/png"


# ---------------------------------------------------------------------------
# validate_file_details / validate_archive_info
# ---------------------------------------------------------------------------

class TestValidateFileDetails:

    def test_valid_entry(self):
        FileValidator().validate_file_details(
            FileDetails(file_path="a.txt", size=0, mimetype="text/plain")
        )

    def test_empty_path(self):
        with pytest.raises(InvalidInputError) as exc_info:
            FileValidator().validate_file_details(
                FileDetails(file_path="", size=1, mimetype="text/plain")
            )
        assert exc_info.value.error_code == "empty_path"

    def test_negative_size(self):
        with pytest.raises(InvalidInputError) as exc_info:
            FileValidator().validate_file_details(
                FileDetails(file_path="a.txt", size=-1, mimetype="text/plain")
            )
        assert exc_info.value.error_code == "negative_size"

    def test_empty_mimetype(self):
        with pytest.raises(UnsupportedContentTypeError):
            FileValidator().validate_file_details(
                FileDetails(file_path="a.txt", size=1, mimetype="")
            )


class TestValidateArchiveInfo:

    def _info(self, **overrides) -> ArchiveInfo:
        info = ArchiveInfo(
            filename="archive.zip",
            archive_size=100,
            files=[
                FileDetails(file_path="a.txt", size=3, mimetype="text/plain"),
                FileDetails(file_path="b.png", size=7, mimetype="image/png"),
            ],
        )
        info.calculate_totals()
        return info.model_copy(update=overrides)

    def test_calculate_totals(self):
        info = self._info()
        assert info.total_size == 10
        assert info.total_files == 2

    def test_valid_inventory(self):
        FileValidator().validate_archive_info(self._info())

    def test_empty_filename(self):
        with pytest.raises(InvalidInputError) as exc_info:
            FileValidator().validate_archive_info(self._info(filename=""))
        assert exc_info.value.error_code == "empty_filename"

    @pytest.mark.parametrize("field", ["archive_size", "total_size", "total_files"])
    def test_negative_totals(self, field):
        with pytest.raises(InvalidInputError) as exc_info:
            FileValidator().validate_archive_info(self._info(**{field: -1}))
        assert exc_info.value.error_code == "negative_size"

    def test_no_files_is_empty_inventory(self):
        info = ArchiveInfo(filename="archive.zip", archive_size=22)
        info.calculate_totals()
        with pytest.raises(EmptyInventoryError):
            FileValidator().validate_archive_info(info)

    def test_invalid_entry_fails_inventory(self):
        info = self._info()
        info.files.append(FileDetails(file_path="", size=1, mimetype="text/plain"))
        with pytest.raises(InvalidInputError):
            FileValidator().validate_archive_info(info)
