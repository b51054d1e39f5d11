"""File type categories and their display labels."""

from enum import StrEnum


class FileTypeCategory(StrEnum):
    """Canonical file type categories."""

    IMAGE = "image"
    DOCUMENT = "document"
    VIDEO = "video"
    AUDIO = "audio"
    ARCHIVE = "archive"
    UNKNOWN = "unknown"

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self]


# Known member or a free-form string kept for forward compatibility.
type CategoryLike = FileTypeCategory | str

UNKNOWN_LABEL = "Unknown File Type"

CATEGORY_LABELS: dict[FileTypeCategory, str] = {
    FileTypeCategory.IMAGE: "Images",
    FileTypeCategory.DOCUMENT: "Documents",
    FileTypeCategory.VIDEO: "Videos",
    FileTypeCategory.AUDIO: "Audio",
    FileTypeCategory.ARCHIVE: "Archives",
    FileTypeCategory.UNKNOWN: UNKNOWN_LABEL,
}


def to_category(value: CategoryLike | None) -> FileTypeCategory:
    """Normalize a category member or raw string, falling back to UNKNOWN."""
    match value:
        case FileTypeCategory():
            return value
        case str():
            try:
                return FileTypeCategory(value.strip().lower())
            except ValueError:
                return FileTypeCategory.UNKNOWN
        case _:
            return FileTypeCategory.UNKNOWN


def category_label(value: CategoryLike | None) -> str:
    """Human label for a category; unrecognized values get the unknown label."""
    return CATEGORY_LABELS[to_category(value)]
