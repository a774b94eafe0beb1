"""
Utility functions for the Creative Compatibility Engine.
"""
import math
import os
import re
from pathlib import PurePosixPath
from typing import Tuple, Optional

# Upload limits
MAX_UPLOAD_SIZE_MB = int(os.getenv("MAX_UPLOAD_MB", "10"))
MAX_UPLOAD_SIZE_BYTES = MAX_UPLOAD_SIZE_MB * 1024 * 1024

# 5% tolerance applied to every size ceiling
SIZE_TOLERANCE = 1.05

IMAGE_EXTENSIONS = ["jpg", "jpeg", "png", "gif", "webp", "avif"]
ARCHIVE_EXTENSIONS = ["zip"]
ZIP_MIME_TYPES = ["application/zip", "application/x-zip-compressed"]

_DIMENSION_PATTERN = re.compile(r"(\d+)x(\d+)", re.IGNORECASE)


def parse_dimensions(dimensions: str) -> Tuple[int, int]:
    """Parse a dimension string like '300x250' into (width, height)."""
    match = re.fullmatch(r"(\d+)x(\d+)", dimensions or "")
    if not match:
        raise ValueError(f"Invalid dimension format: {dimensions}")
    return int(match.group(1)), int(match.group(2))


def format_dimensions(width: int, height: int) -> str:
    """Build the canonical '{width}x{height}' string."""
    return f"{width}x{height}"


def find_dimensions(text: str) -> Optional[str]:
    """Return the first 'digits x digits' token found in text, if any."""
    match = _DIMENSION_PATTERN.search(text or "")
    if match:
        return format_dimensions(int(match.group(1)), int(match.group(2)))
    return None


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def tolerated_size_kb(max_size_kb: int) -> int:
    """Size ceiling after the tolerance multiplier, rounded for display."""
    return round_half_up(max_size_kb * SIZE_TOLERANCE)


def exceeds_tolerance(size_kb: int, max_size_kb: int) -> bool:
    """True when a size is over the tolerated ceiling."""
    return size_kb > max_size_kb * SIZE_TOLERANCE


def bytes_to_kb(size_bytes: int) -> int:
    """Convert a byte count to whole kilobytes."""
    return round_half_up(size_bytes / 1024)


def get_extension(filename: str) -> str:
    """Lowercase extension without the dot ('' when there is none)."""
    suffix = PurePosixPath(filename or "").suffix
    return suffix[1:].lower() if suffix else ""


def normalize_image_format(extension: str) -> str:
    """Map extension spellings onto the registry's format tokens."""
    extension = extension.lower()
    return "jpg" if extension == "jpeg" else extension


def get_file_kind(filename: str, content_type: Optional[str] = None) -> str:
    """Classify an upload as 'image', 'zip' or 'unknown'."""
    extension = get_extension(filename)
    mime_type = (content_type or "").lower()

    if extension in IMAGE_EXTENSIONS or mime_type.startswith("image/"):
        return "image"
    if extension in ARCHIVE_EXTENSIONS or mime_type in ZIP_MIME_TYPES:
        return "zip"
    return "unknown"
