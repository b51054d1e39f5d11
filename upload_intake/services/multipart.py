"""Adapter from raw multipart upload descriptors to FileRecords."""

from collections.abc import Mapping, Sequence
from typing import Any

from upload_intake.core.logger import LogIcon, logger
from upload_intake.models.category import FileTypeCategory
from upload_intake.models.record import FileRecord, optional_size, source_path_of
from upload_intake.models.upload_error import UploadErrorCode
from upload_intake.services.resolver import TypeResolver
from upload_intake.services.sanitizer import clean_filename, extension_of


def is_multi_file(descriptor: Mapping[str, Any]) -> bool:
    """True for the multi-file shape where each field holds one entry per file."""
    return isinstance(descriptor.get("name"), list | tuple)


def expand_descriptor(descriptor: Mapping[str, Any]) -> list[dict[str, Any]]:
    """Split a multi-file descriptor into single-file descriptors.

    Single-file descriptors come back as a one-element list. Missing ``type``
    and ``size`` entries default to ``""`` and ``0`` like a browser would send.
    """
    if not is_multi_file(descriptor):
        return [dict(descriptor)]

    def pick(field: str, index: int, default: Any = None) -> Any:
        values = descriptor.get(field) or ()
        return values[index] if index < len(values) else default

    return [
        {
            "name": name,
            "type": pick("type", index, ""),
            "tmp_name": pick("tmp_name", index),
            "error": pick("error", index, UploadErrorCode.NO_FILE),
            "size": pick("size", index, 0),
        }
        for index, name in enumerate(descriptor["name"])
    ]


class MultipartAdapter:
    """Turns multipart descriptors into sanitized FileRecords.

    With a resolver configured the category is derived from the sanitized
    filename's extension; the client-sent MIME type is kept but not trusted
    for classification.
    """

    def __init__(self, resolver: TypeResolver | None = None) -> None:
        self.resolver = resolver

    def adapt(self, descriptor: Mapping[str, Any], target_filename: str = "") -> FileRecord:
        original_name = descriptor.get("name")
        original_name = original_name if isinstance(original_name, str) else ""

        filename = clean_filename(target_filename or original_name)
        extension = extension_of(filename)
        category = self.resolver.category_for_extension(extension) if self.resolver else FileTypeCategory.UNKNOWN

        record = FileRecord(
            filename=filename,
            original_name=original_name,
            extension=extension,
            mime_type=descriptor.get("type") or None,
            file_type_category=category,
            source_path=source_path_of(descriptor),
            size=optional_size(descriptor.get("size")),
            upload_error_code=UploadErrorCode.coerce(descriptor.get("error", UploadErrorCode.NO_FILE)),
        )

        if not record.is_upload_successful():
            logger.warning(
                "Upload reported a transport error",
                icon=LogIcon.UPLOAD,
                filename=record.filename,
                code=record.upload_error_code,
                reason=record.upload_error_message,
            )
        return record

    def adapt_all(
        self,
        descriptor: Mapping[str, Any],
        target_filenames: Sequence[str] = (),
    ) -> list[FileRecord]:
        """Adapt every file of a single- or multi-file descriptor.

        ``target_filenames[i]`` names the i-th file; missing entries fall back
        to the uploaded name.
        """
        singles = expand_descriptor(descriptor)
        return [
            self.adapt(single, target_filenames[index] if index < len(target_filenames) else "")
            for index, single in enumerate(singles)
        ]
