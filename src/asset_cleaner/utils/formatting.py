"""Human-readable sizes and path helpers shared by the report and script writers."""
import math
from pathlib import PurePosixPath

SIZE_UNITS = ("B", "KB", "MB", "GB")


def format_bytes(num_bytes: int) -> str:
    """Format a byte count with base-1024 units.

    Examples:
        0 -> '0 B', 5 -> '5 B', 1536 -> '1.5 KB'
    """
    if num_bytes <= 0:
        return "0 B"

    magnitude = min(int(math.floor(math.log(num_bytes, 1024))), len(SIZE_UNITS) - 1)
    # log() can land just below an exact power of 1024
    if magnitude + 1 < len(SIZE_UNITS) and num_bytes >= 1024 ** (magnitude + 1):
        magnitude += 1
    value = num_bytes / (1024 ** magnitude)

    if magnitude == 0:
        return f"{value:.0f} {SIZE_UNITS[magnitude]}"
    return f"{value:.1f} {SIZE_UNITS[magnitude]}"


def extension_of(path: str) -> str:
    """Lower-cased extension including the dot, '' when there is none."""
    return PurePosixPath(path).suffix.lower()
