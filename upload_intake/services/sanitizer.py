"""Filename and path sanitization for untrusted upload names."""

import re
import unicodedata
from collections.abc import Iterable

from beartype import beartype

from upload_intake.core.logger import LogIcon, logger
from upload_intake.core.settings import settings as st

FILENAME_UNSAFE_CHARS = frozenset('\\/:*?"<>|#%&+=;!@$^`~')
PATH_UNSAFE_CHARS = FILENAME_UNSAFE_CHARS - {"\\", "/", ":"}

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f-\x9f]")


def remove_control_characters(text: str) -> str:
    """Drop NUL, C0 and C1 control characters."""
    return _CONTROL_CHARS.sub("", text)


def _strip_chars(text: str, chars: Iterable[str]) -> str:
    unsafe = frozenset(chars)
    return "".join(ch for ch in text if ch not in unsafe)


def _remove_substrings(text: str, substrings: Iterable[str]) -> str:
    for substring in substrings:
        if substring:
            text = text.replace(substring, "")
    return text


def _truncate(filename: str, max_length: int) -> str:
    if len(filename) <= max_length:
        return filename

    base, dot, ext = filename.rpartition(".")
    if not dot or not base:
        return filename[:max_length]

    suffix = f".{ext}"
    return base[: max(max_length - len(suffix), 0)] + suffix


@beartype
def clean_filename(
    filename: str,
    *,
    remove_underscores: bool = False,
    remove_spaces: bool = False,
    remove_chars: Iterable[str] = (),
    max_length: int | None = None,
) -> str:
    """Make a filename safe to use as a single path segment.

    Path separators, shell/URL metacharacters and control characters are
    removed, leading and trailing dots/spaces are trimmed, and the result is
    capped at ``max_length`` characters while keeping the extension. An empty
    result becomes the configured fallback name.
    """
    max_length = st.MAX_FILENAME_LENGTH if max_length is None else max_length
    cleaned = unicodedata.normalize("NFC", filename)

    if remove_underscores:
        cleaned = cleaned.replace("_", "")
    if remove_spaces:
        cleaned = cleaned.replace(" ", "")

    cleaned = _remove_substrings(cleaned, remove_chars)
    cleaned = _strip_chars(cleaned, FILENAME_UNSAFE_CHARS)
    cleaned = remove_control_characters(cleaned).strip(". ")

    if not cleaned:
        cleaned = st.FALLBACK_FILENAME

    cleaned = _truncate(cleaned, max_length)

    if not cleaned.strip() or cleaned == ".":
        cleaned = st.FALLBACK_FILENAME

    if cleaned != filename:
        logger.debug("Filename sanitized", icon=LogIcon.SANITIZE, original=filename, cleaned=cleaned)
    return cleaned


@beartype
def clean_path(path: str) -> str:
    """Sanitize a relative path while keeping directory separators.

    Unlike ``clean_filename`` an empty result stays empty so callers can
    reject it.
    """
    cleaned = remove_control_characters(path)
    cleaned = _strip_chars(cleaned, PATH_UNSAFE_CHARS)
    return cleaned.strip(". ")


def extension_of(filename: str) -> str:
    """Lowercase extension of the last path segment, without the dot."""
    basename = re.split(r"[\\/]", filename)[-1]
    _, dot, ext = basename.rpartition(".")
    return ext.lower() if dot else ""
