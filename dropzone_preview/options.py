"""
Options persistence: load, save, and validate drop-zone options.

Runtime options are stored in a JSON file in the user's config directory
(provided by ``config.config_dir()``).  On first launch (or if the file
is missing/corrupt), the file is created from DEFAULT_OPTIONS.  Keys use
the same camelCase names as the widget's configuration surface.

The on-disk format uses a versioned envelope::

    {"version": 1, "options": { ... }}

A stored file may hold any subset of the known keys; missing keys fall
back to the defaults.
"""

import json
import logging
import math
from copy import deepcopy
from pathlib import Path

from dropzone_preview.config import DEFAULT_OPTIONS, PANEL_LAYOUTS, config_dir
from dropzone_preview.crop import parse_aspect_ratio
from dropzone_preview.file_size import parse_size
from dropzone_preview.models import SizeConstraint

logger = logging.getLogger(__name__)

_OPTIONS_FILENAME = "options.json"
_FORMAT_VERSION = 1

_BOOL_KEYS = ("allowMultiple", "allowCrop", "imagePreviewUpscale")
_SIZE_KEYS = ("maxFileSize", "minFileSize", "maxTotalFileSize", "imagePreviewMaxFileSize")
_RATIO_KEYS = ("panelAspectRatio", "itemPanelAspectRatio", "imageCropAspectRatio")
_PIXEL_KEYS = ("imagePreviewMinHeight", "imagePreviewMaxHeight", "imagePreviewHeight")


def _options_path() -> Path:
    """Return the full path to options.json."""
    return config_dir() / _OPTIONS_FILENAME


def _is_positive_number(value: object) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
        and value > 0
    )


# =============================================================================
# Validation
# =============================================================================
def validate_options(data: object) -> list[str]:
    """
    Validate an options mapping.

    Returns a list of error strings (empty means valid).
    """
    errors: list[str] = []

    if not isinstance(data, dict):
        errors.append("Options must be a dict")
        return errors

    unknown = data.keys() - DEFAULT_OPTIONS.keys()
    if unknown:
        errors.append(f"unknown keys: {', '.join(sorted(unknown))}")

    accept = data.get("accept", "")
    if accept is not None and not isinstance(accept, str):
        errors.append(f"accept must be a string, got {accept!r}")

    for key in _BOOL_KEYS:
        if key in data and not isinstance(data[key], bool):
            errors.append(f"{key} must be true or false, got {data[key]!r}")

    # Size limits: absent or "<integer><B|KB|MB|GB>"
    for key in _SIZE_KEYS:
        val = data.get(key)
        if val is not None and parse_size(val) is None:
            errors.append(f"{key} must look like '2MB', got {val!r}")

    # Aspect ratios: absent, "w:h" or a positive number
    for key in _RATIO_KEYS:
        val = data.get(key)
        if val is None:
            continue
        ratio = parse_aspect_ratio(val) if isinstance(val, (str, int, float)) else None
        if not _is_positive_number(ratio):
            errors.append(f"{key} must be a ratio like '16:9', got {val!r}")

    layout = data.get("panelLayout")
    if layout is not None and layout not in PANEL_LAYOUTS:
        errors.append(f"panelLayout must be one of {', '.join(PANEL_LAYOUTS)}, got {layout!r}")

    for key in _PIXEL_KEYS:
        val = data.get(key)
        if val is not None and not _is_positive_number(val):
            errors.append(f"{key} must be a positive number, got {val!r}")

    zoom = data.get("imagePreviewZoomFactor")
    if zoom is not None and not _is_positive_number(zoom):
        errors.append(f"imagePreviewZoomFactor must be a positive number, got {zoom!r}")

    # Preview height bounds must not cross
    min_h = data.get("imagePreviewMinHeight", DEFAULT_OPTIONS["imagePreviewMinHeight"])
    max_h = data.get("imagePreviewMaxHeight", DEFAULT_OPTIONS["imagePreviewMaxHeight"])
    if _is_positive_number(min_h) and _is_positive_number(max_h) and min_h > max_h:
        errors.append(
            f"imagePreviewMinHeight ({min_h}) must not exceed imagePreviewMaxHeight ({max_h})"
        )

    return errors


# =============================================================================
# Load / Save
# =============================================================================
def load_options() -> dict:
    """
    Load options from options.json, merged over the defaults.

    If the file is missing, corrupt, or fails validation, writes the
    defaults and returns them.
    """
    path = _options_path()

    if not path.exists():
        logger.info("options.json not found, creating with defaults at %s", path)
        _write_defaults(path)
        return deepcopy(DEFAULT_OPTIONS)

    try:
        text = path.read_text(encoding="utf-8")
        raw = json.loads(text)
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Failed to read options.json (%s), restoring defaults", exc)
        _write_defaults(path)
        return deepcopy(DEFAULT_OPTIONS)

    # Extract options from version envelope
    if not isinstance(raw, dict) or raw.get("version") != _FORMAT_VERSION or "options" not in raw:
        logger.warning("options.json missing version envelope, restoring defaults")
        _write_defaults(path)
        return deepcopy(DEFAULT_OPTIONS)

    data = raw["options"]
    errors = validate_options(data)
    if errors:
        logger.warning(
            "options.json validation failed:\n  %s\nRestoring defaults.",
            "\n  ".join(errors),
        )
        _write_defaults(path)
        return deepcopy(DEFAULT_OPTIONS)

    return {**deepcopy(DEFAULT_OPTIONS), **data}


def save_options(options: dict) -> None:
    """
    Validate and write options to options.json in versioned envelope.

    Raises ValueError if validation fails.
    Raises OSError if the file cannot be written.
    """
    errors = validate_options(options)
    if errors:
        raise ValueError("Invalid options:\n  " + "\n  ".join(errors))

    envelope = {"version": _FORMAT_VERSION, "options": options}
    path = _options_path()
    path.write_text(json.dumps(envelope, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info("Saved %d option(s) to %s", len(options), path)


def _write_defaults(path: Path) -> None:
    """Write DEFAULT_OPTIONS to the given path in versioned envelope."""
    try:
        envelope = {"version": _FORMAT_VERSION, "options": deepcopy(DEFAULT_OPTIONS)}
        path.write_text(
            json.dumps(envelope, indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
    except OSError as exc:
        logger.error("Could not write default options to %s: %s", path, exc)


# =============================================================================
# Derived settings
# =============================================================================
def size_constraint_from_options(options: dict) -> SizeConstraint:
    return SizeConstraint(
        min=options.get("minFileSize"),
        max=options.get("maxFileSize"),
        max_total=options.get("maxTotalFileSize"),
    )
