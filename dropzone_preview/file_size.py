"""
Byte-size parsing, formatting and file size checks.

Size limits are written as ``<integer><unit>`` strings (``"500KB"``,
``"2MB"``) using binary multiples.  A malformed or empty limit is treated
as "no constraint" and never raises.
"""

import logging
import math
import re
from collections.abc import Iterable

from dropzone_preview.config import BYTE_SIZES, SIZE_LABELS
from dropzone_preview.models import FileDescriptor

logger = logging.getLogger(__name__)

_SIZE_RE = re.compile(r"^(\d+)([A-Za-z]+)$")
_PLACEHOLDER_RE = re.compile(r"{([a-zA-Z]+)}")


# =============================================================================
# Parsing
# =============================================================================
def parse_size(text: str | int | None) -> int | None:
    """Convert a string like ``"10MB"`` to bytes, or None if absent or malformed."""
    if text is None or isinstance(text, bool):
        return None
    if isinstance(text, int):
        return text if text >= 0 else None
    if not isinstance(text, str) or not text.strip():
        return None

    match = _SIZE_RE.match(text.strip())
    if not match:
        logger.debug("Ignoring malformed size %r", text)
        return None

    unit = match.group(2).upper()
    if unit not in BYTE_SIZES:
        logger.debug("Ignoring size %r with unknown unit %s", text, unit)
        return None
    return int(match.group(1)) * BYTE_SIZES[unit]


def parse_bytes(text: str | int | None) -> int:
    """Like ``parse_size`` but 0 for absent or malformed input."""
    size = parse_size(text)
    return 0 if size is None else size


# =============================================================================
# Checks
# =============================================================================
def is_valid_file_size(size_bytes: int, max_size: str | None = None, min_size: str | None = None) -> bool:
    """Return True if *size_bytes* lies within the (optional) min/max bounds."""
    max_bytes = parse_size(max_size)
    min_bytes = parse_size(min_size)

    if max_bytes is not None and size_bytes > max_bytes:
        return False
    if min_bytes is not None and size_bytes < min_bytes:
        return False
    return True


def total_size(files: Iterable[FileDescriptor]) -> int:
    return sum(f.size_bytes for f in files)


def total_size_within_limit(files: Iterable[FileDescriptor], max_total: str | None) -> bool:
    """Return True if the summed size of all *files* does not exceed *max_total*."""
    limit = parse_size(max_total)
    if limit is None:
        return True
    return total_size(files) <= limit


# =============================================================================
# Formatting
# =============================================================================
def _remove_decimals_when_zero(value: float, decimal_count: int, separator: str) -> str:
    """Format *value* with *decimal_count* decimals, dropping an all-zero fraction."""
    whole, _, fraction = f"{value:.{decimal_count}f}".partition(".")
    if not fraction.strip("0"):
        return whole
    return f"{whole}{separator}{fraction}"


def to_natural_file_size(
    size_bytes: int,
    decimal_separator: str = ".",
    base: int = 1000,
    labels: dict | None = None,
) -> str:
    """Convert a byte count to a human-readable string such as ``"1.5 MB"``.

    *base* is the step between units (1000 by default, as shown by most
    file browsers); *labels* overrides entries of ``SIZE_LABELS``.
    """
    names = dict(SIZE_LABELS)
    if labels:
        names.update(labels)

    value = abs(size_bytes)
    kb = base
    mb = kb * base
    gb = mb * base

    if value < kb:
        return f"{value} {names['bytes']}"
    if value < mb:
        return f"{math.floor(value / kb)} {names['kilobytes']}"
    if value < gb:
        return f"{_remove_decimals_when_zero(value / mb, 1, decimal_separator)} {names['megabytes']}"
    return f"{_remove_decimals_when_zero(value / gb, 2, decimal_separator)} {names['gigabytes']}"


def replace_in_string(template: str, replacements: dict) -> str:
    """Fill ``{key}`` placeholders from *replacements*; unknown keys are left as-is."""
    def _sub(match: re.Match) -> str:
        key = match.group(1)
        if key not in replacements:
            return match.group(0)
        return str(replacements[key])

    return _PLACEHOLDER_RE.sub(_sub, template)
