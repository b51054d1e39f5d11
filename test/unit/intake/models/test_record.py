"""Tests for the FileRecord value object."""

import dataclasses

import orjson
import pytest

from upload_intake.models.category import FileTypeCategory
from upload_intake.models.record import FileRecord, optional_size
from upload_intake.models.upload_error import UploadErrorCode

PNG_DATA_URI = "data:image/png;base64,iVBORw0KGgo="


# -----------------------------------------------------------------------------
# Construction invariants
# -----------------------------------------------------------------------------


class TestConstruction:
    """Tests for invariants enforced on construction."""

    def test_extension_is_lowercased(self) -> None:
        """Verify extension is always stored lowercase without a dot."""
        record = FileRecord(filename="a.JPG", original_name="a.JPG", extension=".JPG")
        assert record.extension == "jpg"

    def test_none_category_becomes_unknown(self) -> None:
        """Verify a None category is stored as UNKNOWN."""
        record = FileRecord(filename="a", original_name="a", extension="", file_type_category=None)
        assert record.file_type_category is FileTypeCategory.UNKNOWN

    def test_both_sources_rejected(self) -> None:
        """Verify a record cannot point at a file and a data URI at once."""
        with pytest.raises(ValueError, match="both"):
            FileRecord(
                filename="a.png",
                original_name="a.png",
                extension="png",
                source_path="/tmp/x",
                data_uri=PNG_DATA_URI,
            )

    def test_record_is_immutable(self) -> None:
        """Verify fields cannot be reassigned."""
        record = FileRecord(filename="a.png", original_name="a.png", extension="png")
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.filename = "b.png"  # type: ignore[misc]

    def test_no_source_record_is_legal(self) -> None:
        """Verify size-only records without a source are allowed."""
        record = FileRecord(filename="a.png", original_name="a.png", extension="png", size=3)
        assert not record.is_upload_from_file()
        assert not record.is_upload_from_data_uri()


# -----------------------------------------------------------------------------
# from_multipart Tests
# -----------------------------------------------------------------------------


class TestFromMultipart:
    """Tests for FileRecord.from_multipart."""

    def test_maps_descriptor_fields(self, multipart_descriptor: dict) -> None:
        """Verify every descriptor field lands on the record."""
        record = FileRecord.from_multipart(multipart_descriptor, "target.jpg")

        assert record.filename == "target.jpg"
        assert record.original_name == "Photo.JPG"
        assert record.extension == "jpg"
        assert record.mime_type == "image/jpeg"
        assert record.source_path == "/tmp/phpA1b2C3"
        assert record.size == 2048
        assert record.upload_error_code == 0
        assert record.data_uri is None

    def test_category_defaults_to_unknown(self, multipart_descriptor: dict) -> None:
        """Verify missing category falls back to UNKNOWN."""
        record = FileRecord.from_multipart(multipart_descriptor, "target.jpg")
        assert record.file_type_category is FileTypeCategory.UNKNOWN

    def test_explicit_category_kept(self, multipart_descriptor: dict) -> None:
        """Verify a supplied category (member or raw string) is stored as given."""
        assert FileRecord.from_multipart(multipart_descriptor, "t", FileTypeCategory.IMAGE).category is FileTypeCategory.IMAGE
        assert FileRecord.from_multipart(multipart_descriptor, "t", "image").file_type_category == "image"

    def test_extension_taken_from_descriptor_name(self, make_descriptor) -> None:
        """Verify the extension comes from the uploaded name, not the target."""
        record = FileRecord.from_multipart(make_descriptor(name="scan.PDF"), "renamed.txt")
        assert record.extension == "pdf"

    def test_name_without_extension(self, make_descriptor) -> None:
        """Verify a name without a dot yields an empty extension."""
        record = FileRecord.from_multipart(make_descriptor(name="README"), "README")
        assert record.extension == ""

    def test_missing_optional_fields_default(self) -> None:
        """Verify optional fields default to None and NO_FILE."""
        record = FileRecord.from_multipart({"name": "a.txt"}, "a.txt")

        assert record.mime_type is None
        assert record.source_path is None
        assert record.size is None
        assert record.upload_error_code == UploadErrorCode.NO_FILE
        assert not record.is_upload_successful()

    def test_path_key_accepted(self) -> None:
        """Verify 'path' is accepted in place of 'tmp_name'."""
        record = FileRecord.from_multipart({"name": "a.txt", "path": "/var/up/a", "error": 0}, "a.txt")
        assert record.source_path == "/var/up/a"
        assert record.is_upload_from_file()

    def test_nonzero_error_surfaced_as_data(self, make_descriptor) -> None:
        """Verify transport failures are stored, not raised."""
        record = FileRecord.from_multipart(make_descriptor(error=1), "file.txt")

        assert record.upload_error_code == 1
        assert record.upload_error is UploadErrorCode.INI_SIZE
        assert not record.is_upload_successful()

    def test_missing_name_is_programmer_error(self) -> None:
        """Verify a descriptor without a name raises KeyError."""
        with pytest.raises(KeyError):
            FileRecord.from_multipart({"tmp_name": "/tmp/x"}, "x")


# -----------------------------------------------------------------------------
# from_data_uri Tests
# -----------------------------------------------------------------------------


class TestFromDataUri:
    """Tests for FileRecord.from_data_uri."""

    def test_extension_from_resolver_when_name_has_none(self, stub_resolver) -> None:
        """Verify the resolver supplies the extension for a bare target name."""
        record = FileRecord.from_data_uri(PNG_DATA_URI, "avatar", stub_resolver)

        assert record.extension == "png"
        assert record.mime_type == "image/png"
        assert ("extension_for_mime_type", "image/png") in stub_resolver.calls

    def test_extension_from_target_name_wins(self, stub_resolver) -> None:
        """Verify the target name's extension is used as-is (lowercased)."""
        record = FileRecord.from_data_uri(PNG_DATA_URI, "Avatar.PNG", stub_resolver)

        assert record.extension == "png"
        assert not any(call[0] == "extension_for_mime_type" for call in stub_resolver.calls)

    def test_category_detected_when_missing(self, stub_resolver) -> None:
        """Verify the category is asked from the resolver using the full URI."""
        record = FileRecord.from_data_uri(PNG_DATA_URI, "a.png", stub_resolver)

        assert record.category is FileTypeCategory.IMAGE
        assert ("category_for_data_uri", PNG_DATA_URI) in stub_resolver.calls

    def test_explicit_category_skips_detection(self, stub_resolver) -> None:
        """Verify a supplied category is not overridden."""
        record = FileRecord.from_data_uri(PNG_DATA_URI, "a.png", stub_resolver, FileTypeCategory.DOCUMENT)

        assert record.category is FileTypeCategory.DOCUMENT
        assert not any(call[0] == "category_for_data_uri" for call in stub_resolver.calls)

    def test_size_left_unset(self, stub_resolver) -> None:
        """Verify this path never decodes the payload."""
        record = FileRecord.from_data_uri(PNG_DATA_URI, "a.png", stub_resolver)

        assert record.size is None
        assert record.data_uri == PNG_DATA_URI
        assert record.original_name == "a.png"
        assert record.is_upload_from_data_uri()
        assert not record.is_upload_from_file()

    def test_unmapped_mime_leaves_extension_empty(self, stub_resolver) -> None:
        """Verify an unknown MIME type with a bare name yields no extension."""
        record = FileRecord.from_data_uri("data:application/x-thing;base64,AAAA", "blob", stub_resolver)
        assert record.extension == ""
        assert record.mime_type == "application/x-thing"

    @pytest.mark.parametrize("data_uri", ["not a data uri", "data:image/png,raw", "data:;base64,AAAA"])
    def test_malformed_prefix_yields_no_mime(self, stub_resolver, data_uri: str) -> None:
        """Verify a malformed header gives a None MIME type without raising."""
        record = FileRecord.from_data_uri(data_uri, "blob", stub_resolver)

        assert record.mime_type is None
        assert record.extension == ""

    def test_with_table_resolver(self, table_resolver) -> None:
        """Verify the shipped table resolves PNG end to end."""
        record = FileRecord.from_data_uri(PNG_DATA_URI, "avatar", table_resolver)

        assert record.extension == "png"
        assert record.category is FileTypeCategory.IMAGE
        assert record.category_label() == "Images"


# -----------------------------------------------------------------------------
# Accessor Tests
# -----------------------------------------------------------------------------


def _record(**overrides) -> FileRecord:
    fields = {"filename": "a.png", "original_name": "a.png", "extension": "png", "source_path": "/tmp/a"}
    fields.update(overrides)
    return FileRecord(**fields)


class TestAccessors:
    """Tests for queries and labels."""

    def test_sources_mutually_exclusive(self) -> None:
        """Verify file and data URI checks are never both true."""
        from_file = _record()
        from_uri = _record(source_path=None, data_uri=PNG_DATA_URI)

        assert from_file.is_upload_from_file() and not from_file.is_upload_from_data_uri()
        assert from_uri.is_upload_from_data_uri() and not from_uri.is_upload_from_file()

    @pytest.mark.parametrize(
        ("category", "label"),
        [
            (FileTypeCategory.IMAGE, "Images"),
            (FileTypeCategory.VIDEO, "Videos"),
            ("document", "Documents"),
            ("AUDIO", "Audio"),
            ("spreadsheet", "Unknown File Type"),
            (FileTypeCategory.UNKNOWN, "Unknown File Type"),
        ],
    )
    def test_category_label(self, category, label: str) -> None:
        """Verify labels for members, raw strings and unrecognized strings."""
        assert _record(file_type_category=category).category_label() == label

    @pytest.mark.parametrize(
        ("category", "extension", "expected"),
        [
            (FileTypeCategory.IMAGE, "heic", True),
            (FileTypeCategory.IMAGE, "HEIF", True),
            ("image", "heic", True),
            (FileTypeCategory.IMAGE, "jpg", False),
            (FileTypeCategory.UNKNOWN, "heic", False),
            (FileTypeCategory.DOCUMENT, "heif", False),
            ("pictures", "heic", False),
        ],
    )
    def test_needs_format_conversion(self, category, extension: str, expected: bool) -> None:
        """Verify only HEIC/HEIF images are flagged for conversion."""
        assert _record(file_type_category=category, extension=extension).needs_format_conversion() is expected

    def test_upload_error_message(self) -> None:
        """Verify known and unknown codes produce messages."""
        assert _record(upload_error_code=4).upload_error_message == "No file was uploaded"
        assert _record(upload_error_code=99).upload_error_message == "Unknown upload error"
        assert _record(upload_error_code=99).upload_error is None

    def test_formatted_size(self) -> None:
        """Verify size formatting is exposed on the record."""
        assert _record(size=1536).formatted_size() == "1.5 KB"
        assert _record(size=None).formatted_size() == "Unknown size"


# -----------------------------------------------------------------------------
# Copy-with-override Tests
# -----------------------------------------------------------------------------


class TestCopies:
    """Tests for with_filename and with_category."""

    def test_with_filename(self) -> None:
        """Verify only the filename changes."""
        original = _record(size=10, mime_type="image/png", file_type_category=FileTypeCategory.IMAGE)
        copy = original.with_filename("a_1.png")

        assert copy.filename == "a_1.png"
        assert copy is not original
        assert original.filename == "a.png"
        assert dataclasses.replace(copy, filename=original.filename) == original

    def test_with_category(self) -> None:
        """Verify only the category changes and raw strings are kept as given."""
        original = _record(size=10)
        copy = original.with_category("video")

        assert copy.file_type_category == "video"
        assert copy.category is FileTypeCategory.VIDEO
        assert dataclasses.replace(copy, file_type_category=original.file_type_category) == original

    def test_copies_are_idempotent(self) -> None:
        """Verify applying the same override twice gives equal records."""
        record = _record()
        assert record.with_filename("b.png").with_filename("b.png") == record.with_filename("b.png")
        assert record.with_category("image").with_category("image") == record.with_category("image")


# -----------------------------------------------------------------------------
# Serialization Tests
# -----------------------------------------------------------------------------


class TestSerialization:
    """Tests for to_dict and to_json."""

    def test_to_json_includes_derived_fields(self) -> None:
        """Verify JSON output carries labels and formatted size."""
        payload = orjson.loads(_record(size=2048, file_type_category="image").to_json())

        assert payload["filename"] == "a.png"
        assert payload["category"] == "image"
        assert payload["category_label"] == "Images"
        assert payload["formatted_size"] == "2 KB"
        assert payload["upload_error_code"] == 0


# -----------------------------------------------------------------------------
# optional_size Tests
# -----------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (10, 10),
        ("42", 42),
        (" 7 ", 7),
        (None, None),
        ("abc", None),
        (True, None),
        (1.5, None),
        ("\u00b2", None),
        ("\u0663", None),
        ("-3", None),
    ],
)
def test_optional_size(value, expected) -> None:
    """Verify descriptor sizes are read leniently."""
    assert optional_size(value) == expected
