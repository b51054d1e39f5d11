"""Transport-level upload error codes reported alongside multipart uploads."""

import re
from enum import IntEnum
from typing import Any

_INTEGER = re.compile(r"-?[0-9]+")


class UploadErrorCode(IntEnum):
    """Conventional multipart upload error codes."""

    OK = 0
    INI_SIZE = 1
    FORM_SIZE = 2
    PARTIAL = 3
    NO_FILE = 4
    NO_TMP_DIR = 6
    CANT_WRITE = 7
    EXTENSION = 8

    @property
    def message(self) -> str:
        return _MESSAGES[self]

    @property
    def is_success(self) -> bool:
        return self is UploadErrorCode.OK

    @classmethod
    def from_int(cls, code: int) -> "UploadErrorCode | None":
        """Look up a code, returning None for values outside the known set."""
        try:
            return cls(code)
        except ValueError:
            return None

    @classmethod
    def coerce(cls, value: Any) -> int:
        """Read an error code from untrusted descriptor data.

        Integers and numeric strings are kept as-is (even unknown codes);
        anything else is treated as NO_FILE.
        """
        match value:
            case bool():
                return int(cls.NO_FILE)
            case int():
                return value
            case str() if _INTEGER.fullmatch(value.strip()):
                return int(value)
            case _:
                return int(cls.NO_FILE)


UNKNOWN_UPLOAD_ERROR = "Unknown upload error"

_MESSAGES: dict[UploadErrorCode, str] = {
    UploadErrorCode.OK: "No error",
    UploadErrorCode.INI_SIZE: "File exceeds the server upload size limit",
    UploadErrorCode.FORM_SIZE: "File exceeds the form upload size limit",
    UploadErrorCode.PARTIAL: "File was only partially uploaded",
    UploadErrorCode.NO_FILE: "No file was uploaded",
    UploadErrorCode.NO_TMP_DIR: "Missing temporary folder",
    UploadErrorCode.CANT_WRITE: "Failed to write file to disk",
    UploadErrorCode.EXTENSION: "File upload stopped by extension",
}
