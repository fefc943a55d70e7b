"""
Qt-free file and image I/O helpers.

Turns files on disk into ``FileDescriptor`` values for the validator and
reads image dimensions (including PSD) for the crop engine without fully
decoding pixel data.  Safe to import in worker processes.
"""

import logging
import mimetypes
from pathlib import Path

from PIL import Image
from psd_tools import PSDImage

from dropzone_preview.models import FileDescriptor, Size
from dropzone_preview.validation import guess_mime_type

logger = logging.getLogger(__name__)

# Allow very large images (Pillow's default limit is ~178MP)
Image.MAX_IMAGE_PIXELS = None

_PSD_MIME = "image/vnd.adobe.photoshop"


def mime_type_for_path(path: Path) -> str:
    """MIME type from the file name, or "" if unknown."""
    if path.suffix.lower() == ".psd":
        return _PSD_MIME
    guessed, _ = mimetypes.guess_type(path.name)
    if guessed:
        return guessed
    return guess_mime_type(path.suffix.lstrip("."))


def describe_path(path: Path) -> FileDescriptor:
    """Build a FileDescriptor for a file on disk."""
    path = Path(path)
    return FileDescriptor(
        name=path.name,
        mime_type=mime_type_for_path(path),
        size_bytes=path.stat().st_size,
    )


def describe_paths(paths) -> list[FileDescriptor]:
    """Describe every regular file in *paths*, skipping directories and missing files."""
    descriptors = []
    for p in paths:
        p = Path(p)
        if not p.is_file():
            logger.debug("Skipping %s: not a regular file", p)
            continue
        descriptors.append(describe_path(p))
    return descriptors


def get_image_size(path: Path) -> Size:
    """Get image dimensions without fully loading/compositing."""
    path = Path(path)
    if path.suffix.lower() == ".psd":
        psd = PSDImage.open(str(path))
        return Size(psd.width, psd.height)
    with Image.open(path) as img:
        width, height = img.size
    return Size(width, height)
