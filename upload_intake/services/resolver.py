"""MIME type and category resolution used by the upload producers."""

from pathlib import Path
from typing import Protocol, runtime_checkable

from upload_intake.core.logger import LogIcon, logger
from upload_intake.core.settings import settings as st
from upload_intake.models.category import FileTypeCategory
from upload_intake.models.data_uri import split_data_uri
from upload_intake.services.type_table import DEFAULT_TYPE_TABLE, TypeTable, load_type_table


@runtime_checkable
class TypeResolver(Protocol):
    """Lookup contract the producers depend on. Implementations never raise."""

    def extension_for_mime_type(self, mime_type: str) -> str | None: ...

    def category_for_data_uri(self, data_uri: str) -> FileTypeCategory: ...

    def category_for_extension(self, extension: str) -> FileTypeCategory: ...


class TableTypeResolver:
    """TypeResolver backed by a read-only TypeTable."""

    __slots__ = ("table",)

    def __init__(self, table: TypeTable = DEFAULT_TYPE_TABLE) -> None:
        self.table = table

    def extension_for_mime_type(self, mime_type: str) -> str | None:
        known = self.table.find_by_mime_type(mime_type)
        return known.extension if known else None

    def category_for_mime_type(self, mime_type: str | None) -> FileTypeCategory:
        known = self.table.find_by_mime_type(mime_type) if mime_type else None
        return known.category if known else FileTypeCategory.UNKNOWN

    def category_for_data_uri(self, data_uri: str) -> FileTypeCategory:
        parts = split_data_uri(data_uri)
        mime_type = parts.mime_type if parts else None
        category = self.category_for_mime_type(mime_type)
        if category is FileTypeCategory.UNKNOWN:
            logger.debug("Unmapped data URI type", icon=LogIcon.DETECTION, mime_type=mime_type)
        return category

    def category_for_extension(self, extension: str) -> FileTypeCategory:
        known = self.table.find_by_extension(extension) if extension else None
        return known.category if known else FileTypeCategory.UNKNOWN

    def mime_type_for_extension(self, extension: str) -> str | None:
        return self.table.mime_type_for_extension(extension)


def build_resolver(table_path: Path | None = None) -> TableTypeResolver:
    """Resolver over the default table plus the configured extra rows, if any."""
    return TableTypeResolver(load_type_table(table_path or st.TYPE_TABLE_PATH))
