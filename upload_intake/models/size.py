"""Human-readable byte sizes."""

from beartype import beartype

UNKNOWN_SIZE = "Unknown size"
SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


@beartype
def format_size(size: int | None) -> str:
    """Format a byte count with binary (1024) scaling, capped at TB.

    The scaled value is rounded to two decimals and trailing zeros are dropped,
    so 1024 renders as "1 KB" and 1536 as "1.5 KB".
    """
    if size is None:
        return UNKNOWN_SIZE

    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(SIZE_UNITS) - 1:
        value /= 1024
        unit += 1

    text = f"{round(value, 2):.2f}".rstrip("0").rstrip(".")
    return f"{text} {SIZE_UNITS[unit]}"
