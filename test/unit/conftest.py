"""Test fixtures for upload-intake unit tests."""

from dataclasses import dataclass, field

import pytest

from upload_intake.models.category import FileTypeCategory
from upload_intake.services.resolver import TableTypeResolver
from upload_intake.services.type_table import DEFAULT_TYPE_TABLE


# -----------------------------------------------------------------------------
# Test doubles
# -----------------------------------------------------------------------------


@dataclass
class StubResolver:
    """TypeResolver with controlled mappings that records every call."""

    extensions: dict[str, str] = field(default_factory=dict)
    data_uri_category: FileTypeCategory = FileTypeCategory.UNKNOWN
    extension_categories: dict[str, FileTypeCategory] = field(default_factory=dict)
    calls: list[tuple[str, str]] = field(default_factory=list)

    def extension_for_mime_type(self, mime_type: str) -> str | None:
        self.calls.append(("extension_for_mime_type", mime_type))
        return self.extensions.get(mime_type)

    def category_for_data_uri(self, data_uri: str) -> FileTypeCategory:
        self.calls.append(("category_for_data_uri", data_uri))
        return self.data_uri_category

    def category_for_extension(self, extension: str) -> FileTypeCategory:
        self.calls.append(("category_for_extension", extension))
        return self.extension_categories.get(extension, FileTypeCategory.UNKNOWN)


# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def stub_resolver() -> StubResolver:
    """Resolver double mapping PNG only."""
    return StubResolver(
        extensions={"image/png": "png"},
        data_uri_category=FileTypeCategory.IMAGE,
        extension_categories={"png": FileTypeCategory.IMAGE, "exe": FileTypeCategory.UNKNOWN},
    )


@pytest.fixture
def table_resolver() -> TableTypeResolver:
    """Resolver over the shipped default table."""
    return TableTypeResolver(DEFAULT_TYPE_TABLE)


@pytest.fixture
def multipart_descriptor() -> dict:
    """A successful single-file multipart descriptor."""
    return {
        "name": "Photo.JPG",
        "type": "image/jpeg",
        "tmp_name": "/tmp/phpA1b2C3",
        "error": 0,
        "size": 2048,
    }


@pytest.fixture
def make_descriptor():
    """Factory fixture to create multipart descriptors with overrides."""

    def _make(**overrides) -> dict:
        descriptor = {"name": "file.txt", "type": "text/plain", "tmp_name": "/tmp/php123", "error": 0, "size": 10}
        descriptor.update(overrides)
        return descriptor

    return _make
