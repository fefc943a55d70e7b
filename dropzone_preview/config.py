"""
Application constants and configuration.

DEFAULT_OPTIONS provides the built-in widget options.  Runtime options are
loaded from options.json via the options module.  All other constants control
file validation, crop defaults, preview sizing, and the wording of
validation errors.

The ``config_dir()`` helper returns the platform-appropriate config
directory and is shared by all persistence modules.
"""

import os
import sys
from pathlib import Path

# =============================================================================
# APP IDENTITY & CONFIG DIRECTORY
# =============================================================================
APP_NAME = "dropzone-preview"


def config_dir() -> Path:
    """Return the platform-appropriate config directory, creating it if needed."""
    if sys.platform == "win32":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
    elif sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    else:
        base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    directory = base / APP_NAME
    directory.mkdir(parents=True, exist_ok=True)
    return directory


# =============================================================================
# DEFAULT OPTIONS: built-in fallback when options.json is missing or corrupt
# =============================================================================
DEFAULT_OPTIONS = {
    "accept": "",
    "allowMultiple": True,
    "maxFileSize": None,
    "minFileSize": None,
    "maxTotalFileSize": None,
    "panelLayout": None,
    "panelAspectRatio": None,
    "itemPanelAspectRatio": None,
    "allowCrop": True,
    "imageCropAspectRatio": "1:1",
    "imagePreviewMinHeight": 44,
    "imagePreviewMaxHeight": 256,
    "imagePreviewHeight": None,
    "imagePreviewMaxFileSize": None,
    "imagePreviewZoomFactor": 2,
    "imagePreviewUpscale": False,
}

PANEL_LAYOUTS = ["integrated", "compact", "circle"]

# ---------------------------------------------------------------------------
# File validation
# ---------------------------------------------------------------------------
# Firefox reports this type for every item while dragging over the page
MOZ_FILE_MIME = "application/x-moz-file"

# Binary multiples (1 KB = 1024 B)
BYTE_SIZES = {
    "B": 1,
    "KB": 1024,
    "MB": 1024 * 1024,
    "GB": 1024 * 1024 * 1024,
}

# Labels for human-readable sizes
SIZE_LABELS = {
    "bytes": "bytes",
    "kilobytes": "KB",
    "megabytes": "MB",
    "gigabytes": "GB",
}

# Extension -> MIME fallback for items dropped without a type
IMAGE_EXTENSIONS = ["jpg", "jpeg", "png", "gif", "bmp", "webp", "svg", "tiff"]
TEXT_EXTENSIONS = ["css", "csv", "html", "txt"]
EXTENSION_MIME_MAP = {
    "zip": "application/zip",
    "epub": "application/epub+zip",
}

# Vector formats are never rasterised as bitmaps
VECTOR_IMAGE_TYPES = {"image/svg+xml"}

# Validation messages ({placeholders} are filled by replace_in_string)
LABEL_FILE_TYPE_NOT_ALLOWED = "{name} is not supported. File type must be {accept}."
LABEL_FILE_SIZE_RANGE = "{name} size must be no more than {maxSize} and less than {minSize}"
LABEL_FILE_SIZE_TOO_SMALL = "{name} size must be at least {minSize}"
LABEL_FILE_SIZE_TOO_LARGE = "{name} size must be no more than {maxSize}"
LABEL_TOTAL_SIZE_EXCEEDED = "Total file size {totalSize} must be no more than {maxTotalSize}."

# ---------------------------------------------------------------------------
# Crop & preview
# ---------------------------------------------------------------------------
DEFAULT_CROP_CENTER = (0.5, 0.5)
MIN_CROP_ZOOM = 1.0

# Non-bitmap (or upscaled) previews are measured against this width
PREVIEW_REFERENCE_WIDTH = 2048

# Device pixel ratios are discounted before scaling the preview backing store
PIXEL_DENSITY_DISCOUNT = 0.75
