"""Immutable record of one normalized upload, whatever its source."""

import re
from collections.abc import Mapping
from dataclasses import asdict, dataclass, replace
from typing import Any

import orjson

from upload_intake.models.category import CategoryLike, FileTypeCategory, category_label, to_category
from upload_intake.models.data_uri import split_data_uri
from upload_intake.models.size import format_size
from upload_intake.models.upload_error import UNKNOWN_UPLOAD_ERROR, UploadErrorCode
from upload_intake.services.resolver import TypeResolver
from upload_intake.services.sanitizer import extension_of

CONVERSION_EXTENSIONS = frozenset({"heic", "heif"})

_DIGITS = re.compile(r"[0-9]+")


def optional_size(value: Any) -> int | None:
    """Read a byte count from untrusted descriptor data."""
    match value:
        case bool() | None:
            return None
        case int():
            return value
        case str() if _DIGITS.fullmatch(value.strip()):
            return int(value)
        case _:
            return None


def source_path_of(descriptor: Mapping[str, Any]) -> str | None:
    return descriptor.get("tmp_name") or descriptor.get("path") or None


@dataclass(frozen=True, slots=True)
class FileRecord:
    """A normalized upload.

    Exactly one of ``source_path`` (multipart origin) and ``data_uri`` (data
    URI origin) is set, or neither for derived copies. The record only holds
    references; it never opens the file behind ``source_path``.
    """

    filename: str
    original_name: str
    extension: str
    mime_type: str | None = None
    file_type_category: CategoryLike = FileTypeCategory.UNKNOWN
    source_path: str | None = None
    data_uri: str | None = None
    size: int | None = None
    upload_error_code: int = UploadErrorCode.OK

    def __post_init__(self) -> None:
        if self.source_path is not None and self.data_uri is not None:
            raise ValueError("FileRecord cannot have both a source path and a data URI")
        object.__setattr__(self, "extension", self.extension.lstrip(".").lower())
        if self.file_type_category is None:
            object.__setattr__(self, "file_type_category", FileTypeCategory.UNKNOWN)

    @classmethod
    def from_multipart(
        cls,
        descriptor: Mapping[str, Any],
        target_filename: str,
        category: CategoryLike | None = None,
    ) -> "FileRecord":
        """Build a record from a single-file multipart descriptor.

        ``descriptor`` carries ``name``, ``tmp_name`` (or ``path``), ``size``,
        ``error`` and optionally ``type``. Only ``name`` is required; the
        extension is taken from it, not from ``target_filename``.
        """
        name = descriptor["name"]
        return cls(
            filename=target_filename,
            original_name=name,
            extension=extension_of(name),
            mime_type=descriptor.get("type") or None,
            file_type_category=category if category is not None else FileTypeCategory.UNKNOWN,
            source_path=source_path_of(descriptor),
            size=optional_size(descriptor.get("size")),
            upload_error_code=UploadErrorCode.coerce(descriptor.get("error", UploadErrorCode.NO_FILE)),
        )

    @classmethod
    def from_data_uri(
        cls,
        data_uri: str,
        target_filename: str,
        resolver: TypeResolver,
        category: CategoryLike | None = None,
    ) -> "FileRecord":
        """Build a record from a data URI, asking ``resolver`` for what the name lacks.

        The size is left unset here; ``parse_data_uri`` is the path that decodes
        the payload.
        """
        parts = split_data_uri(data_uri)
        mime_type = parts.mime_type if parts else None

        extension = extension_of(target_filename)
        if not extension and mime_type:
            extension = resolver.extension_for_mime_type(mime_type) or ""

        if category is None:
            category = resolver.category_for_data_uri(data_uri)

        return cls(
            filename=target_filename,
            original_name=target_filename,
            extension=extension,
            mime_type=mime_type,
            file_type_category=category,
            data_uri=data_uri,
        )

    def is_upload_from_file(self) -> bool:
        return self.source_path is not None

    def is_upload_from_data_uri(self) -> bool:
        return self.data_uri is not None

    def is_upload_successful(self) -> bool:
        return self.upload_error_code == UploadErrorCode.OK

    @property
    def upload_error(self) -> UploadErrorCode | None:
        return UploadErrorCode.from_int(self.upload_error_code)

    @property
    def upload_error_message(self) -> str:
        code = self.upload_error
        return code.message if code is not None else UNKNOWN_UPLOAD_ERROR

    @property
    def category(self) -> FileTypeCategory:
        return to_category(self.file_type_category)

    def category_label(self) -> str:
        return category_label(self.file_type_category)

    def is_image(self) -> bool:
        return self.category is FileTypeCategory.IMAGE

    def needs_format_conversion(self) -> bool:
        """True for HEIC/HEIF images, which a downstream converter should handle."""
        return self.is_image() and self.extension in CONVERSION_EXTENSIONS

    def formatted_size(self) -> str:
        return format_size(self.size)

    def with_filename(self, filename: str) -> "FileRecord":
        return replace(self, filename=filename)

    def with_category(self, category: CategoryLike) -> "FileRecord":
        return replace(self, file_type_category=category)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self) | {
            "category": self.category,
            "category_label": self.category_label(),
            "formatted_size": self.formatted_size(),
        }

    def to_json(self) -> str:
        return orjson.dumps(self.to_dict()).decode()
