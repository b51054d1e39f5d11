"""Static MIME type <-> extension <-> category lookup table."""

from collections.abc import Iterable, Iterator
from pathlib import Path

import orjson
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from upload_intake.core.logger import LogIcon, logger
from upload_intake.models.category import FileTypeCategory


class TypeTableError(Exception):
    """Raised when an external type table cannot be loaded."""


class SupportedFileType(BaseModel):
    """One row of the lookup table."""

    model_config = ConfigDict(frozen=True)

    mime_type: str
    extension: str
    category: FileTypeCategory
    aliases: tuple[str, ...] = ()

    @field_validator("mime_type")
    @classmethod
    def clean_mime_type(cls, value: str) -> str:
        return normalize_mime_type(value)

    @field_validator("extension")
    @classmethod
    def clean_extension(cls, value: str) -> str:
        return value.strip().lstrip(".").lower()

    @field_validator("aliases")
    @classmethod
    def clean_aliases(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(alias.strip().lstrip(".").lower() for alias in value)

    @property
    def extensions(self) -> tuple[str, ...]:
        return (self.extension, *self.aliases)


def normalize_mime_type(mime_type: str) -> str:
    """Lowercase a MIME type and drop parameters such as ``;charset=utf-8``."""
    return mime_type.split(";", 1)[0].strip().lower()


class TypeTable:
    """Read-only table queried by MIME type, extension or category.

    Lookups are first-match: when several MIME types share an extension the
    earliest row wins for extension -> MIME queries.
    """

    __slots__ = ("_types",)

    def __init__(self, types: Iterable[SupportedFileType]) -> None:
        self._types: tuple[SupportedFileType, ...] = tuple(types)

    def __iter__(self) -> Iterator[SupportedFileType]:
        return iter(self._types)

    def __len__(self) -> int:
        return len(self._types)

    def find_by_mime_type(self, mime_type: str) -> SupportedFileType | None:
        wanted = normalize_mime_type(mime_type)
        return next((row for row in self._types if row.mime_type == wanted), None)

    def find_by_extension(self, extension: str) -> SupportedFileType | None:
        wanted = extension.strip().lstrip(".").lower()
        return next((row for row in self._types if wanted in row.extensions), None)

    def types_for_category(self, category: FileTypeCategory) -> list[SupportedFileType]:
        return [row for row in self._types if row.category == category]

    def extensions_for_category(self, category: FileTypeCategory) -> list[str]:
        """Standard extensions for a category, deduplicated in table order."""
        return list(dict.fromkeys(row.extension for row in self.types_for_category(category)))

    def mime_types_for_category(self, category: FileTypeCategory) -> list[str]:
        return [row.mime_type for row in self.types_for_category(category)]

    def mime_type_for_extension(self, extension: str) -> str | None:
        row = self.find_by_extension(extension)
        return row.mime_type if row else None

    def extend(self, types: Iterable[SupportedFileType]) -> "TypeTable":
        """Return a new table with extra rows appended after the existing ones."""
        return TypeTable((*self._types, *types))

    @classmethod
    def from_json(cls, raw: bytes | str) -> "TypeTable":
        """Build a table from a JSON array of row objects."""
        try:
            rows = orjson.loads(raw)
            if not isinstance(rows, list):
                raise TypeTableError("Type table JSON must be an array of rows")
            return cls(SupportedFileType.model_validate(row) for row in rows)
        except orjson.JSONDecodeError as ex:
            raise TypeTableError(f"Invalid type table JSON: {ex}") from ex
        except ValidationError as ex:
            raise TypeTableError(f"Invalid type table row: {ex}") from ex


def _rows(category: FileTypeCategory, *specs: tuple) -> list[SupportedFileType]:
    return [
        SupportedFileType(mime_type=mime, extension=ext, category=category, aliases=tuple(aliases))
        for mime, ext, *aliases in specs
    ]


DEFAULT_FILE_TYPES: tuple[SupportedFileType, ...] = (
    *_rows(
        FileTypeCategory.IMAGE,
        ("image/jpeg", "jpg", "jpeg", "jpe"),
        ("image/png", "png"),
        ("image/gif", "gif"),
        ("image/webp", "webp"),
        ("image/avif", "avif"),
        ("image/jxl", "jxl"),
        ("image/bmp", "bmp"),
        ("image/tiff", "tiff", "tif"),
        ("image/heic", "heic"),
        ("image/heif", "heif"),
        ("image/svg+xml", "svg"),
    ),
    *_rows(
        FileTypeCategory.DOCUMENT,
        ("application/pdf", "pdf"),
        ("application/x-pdf", "pdf"),
        ("application/acrobat", "pdf"),
        ("application/vnd.pdf", "pdf"),
        ("application/msword", "doc"),
        ("application/vnd.openxmlformats-officedocument.wordprocessingml.document", "docx"),
        ("application/vnd.ms-excel", "xls"),
        ("application/vnd.openxmlformats-officedocument.spreadsheetml.sheet", "xlsx"),
        ("application/vnd.ms-powerpoint", "ppt"),
        ("application/vnd.openxmlformats-officedocument.presentationml.presentation", "pptx"),
        ("text/plain", "txt"),
        ("application/rtf", "rtf"),
        ("text/csv", "csv"),
        ("application/xml", "xml"),
        ("application/json", "json"),
        ("application/vnd.oasis.opendocument.text", "odt"),
        ("application/vnd.oasis.opendocument.spreadsheet", "ods"),
        ("application/vnd.oasis.opendocument.presentation", "odp"),
        ("application/dwg", "dwg"),
        ("application/dxf", "dxf"),
        ("application/step", "step", "stp"),
        ("application/iges", "iges", "igs"),
        ("application/stl", "stl"),
    ),
    *_rows(
        FileTypeCategory.VIDEO,
        ("video/mp4", "mp4", "m4v"),
        ("video/webm", "webm"),
        ("video/quicktime", "mov"),
        ("video/x-msvideo", "avi"),
        ("video/x-matroska", "mkv"),
        ("video/mpeg", "mpeg", "mpg"),
    ),
    *_rows(
        FileTypeCategory.AUDIO,
        ("audio/mpeg", "mp3"),
        ("audio/wav", "wav"),
        ("audio/ogg", "ogg", "oga"),
        ("audio/flac", "flac"),
        ("audio/mp4", "m4a"),
        ("audio/aac", "aac"),
    ),
    *_rows(
        FileTypeCategory.ARCHIVE,
        ("application/zip", "zip"),
        ("application/x-rar-compressed", "rar"),
        ("application/x-7z-compressed", "7z"),
        ("application/x-tar", "tar"),
        ("application/gzip", "gz", "tgz"),
    ),
)

DEFAULT_TYPE_TABLE = TypeTable(DEFAULT_FILE_TYPES)


def load_type_table(path: Path | None = None) -> TypeTable:
    """Default table, extended with rows from a JSON file when one is given.

    Meant to run once at process start; the returned table is immutable.
    """
    if path is None:
        return DEFAULT_TYPE_TABLE

    try:
        raw = path.read_bytes()
    except OSError as ex:
        raise TypeTableError(f"Cannot read type table {path}: {ex}") from ex

    extra = TypeTable.from_json(raw)
    logger.info("Type table loaded", icon=LogIcon.CONFIG, path=str(path), extra_rows=len(extra))
    return DEFAULT_TYPE_TABLE.extend(extra)
