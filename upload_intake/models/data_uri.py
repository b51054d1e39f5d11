"""Data URI splitting and the standalone data URI intake path."""

import base64
import binascii
from dataclasses import asdict, dataclass
from typing import Any, NamedTuple

import orjson

from upload_intake.core.logger import LogIcon, logger
from upload_intake.core.settings import settings as st
from upload_intake.models.category import CategoryLike, FileTypeCategory, to_category
from upload_intake.models.size import format_size
from upload_intake.services.sanitizer import clean_filename, extension_of
from upload_intake.services.type_table import DEFAULT_TYPE_TABLE, TypeTable

DATA_URI_SCHEME = "data:"
BASE64_MARKER = "base64"


class DataUriParts(NamedTuple):
    """Pieces of ``data:<media type>[;<params>][,<payload>]``."""

    media_type: str
    params: str | None
    payload: str | None

    @property
    def mime_type(self) -> str | None:
        """MIME type when the header is ``<mime>;...``, else None."""
        if self.params is None or not self.media_type:
            return None
        return self.media_type

    @property
    def is_base64(self) -> bool:
        return self.params == BASE64_MARKER and self.payload is not None

    @property
    def base64_mime_type(self) -> str | None:
        """MIME type only for the strict ``<mime>;base64,`` form."""
        return self.mime_type if self.is_base64 else None

    @property
    def base64_payload(self) -> str | None:
        return self.payload if self.is_base64 else None


def split_data_uri(value: str) -> DataUriParts | None:
    """Split a data URI on its first ``:``, first ``,`` and first ``;``.

    Returns None when the string does not use the ``data:`` scheme.
    """
    if not value.startswith(DATA_URI_SCHEME):
        return None

    header, comma, payload = value[len(DATA_URI_SCHEME):].partition(",")
    media_type, semicolon, params = header.partition(";")
    return DataUriParts(
        media_type=media_type.strip(),
        params=params if semicolon else None,
        payload=payload if comma else None,
    )


def decoded_size(payload: str | None) -> int | None:
    """Byte length of a strictly decoded base64 payload, None if undecodable."""
    if not payload:
        return None
    try:
        return len(base64.b64decode(payload, validate=True))
    except (binascii.Error, ValueError) as ex:
        logger.debug("Data URI payload not decodable", icon=LogIcon.DATA_URI, reason=str(ex))
        return None


def is_valid_data_uri(data_uri: str, max_bytes: int | None = None) -> bool:
    """Strict check: base64 form, non-empty decodable payload within the size limit."""
    parts = split_data_uri(data_uri)
    if parts is None or parts.base64_mime_type is None:
        return False

    size = decoded_size(parts.base64_payload)
    limit = st.MAX_DATA_URI_BYTES if max_bytes is None else max_bytes
    return size is not None and 0 < size <= limit


@dataclass(frozen=True, slots=True)
class DataUriInfo:
    """A data URI upload described without a type resolver."""

    filename: str
    data_uri: str
    extension: str
    mime_type: str | None = None
    file_type_category: CategoryLike | None = None
    size: int | None = None

    @property
    def category(self) -> FileTypeCategory:
        return to_category(self.file_type_category)

    def formatted_size(self) -> str:
        return format_size(self.size)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self) | {"formatted_size": self.formatted_size()}

    def to_json(self) -> str:
        return orjson.dumps(self.to_dict()).decode()


def parse_data_uri(
    data_uri: str,
    target_filename: str = "",
    table: TypeTable = DEFAULT_TYPE_TABLE,
) -> DataUriInfo:
    """Describe a ``data:<mime>;base64,<payload>`` string.

    Without a target filename one is synthesized from the MIME type. The name
    is always sanitized first and the extension read back from the sanitized
    name. The size is the decoded payload length, or None if the payload is
    not valid base64.
    """
    parts = split_data_uri(data_uri)
    mime_type = parts.base64_mime_type if parts else None

    filename = target_filename
    if not filename:
        known = table.find_by_mime_type(mime_type) if mime_type else None
        filename = st.DATA_URI_FILENAME + (f".{known.extension}" if known else "")

    filename = clean_filename(filename)

    return DataUriInfo(
        filename=filename,
        data_uri=data_uri,
        extension=extension_of(filename),
        mime_type=mime_type,
        size=decoded_size(parts.base64_payload) if parts else None,
    )
