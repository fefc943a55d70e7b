"""
PyQt6 adapters for the drop-zone core.

Converts a drag/drop ``QMimeData`` payload into file descriptors for the
validator, and a ``CropTransform`` into the ``QTransform`` pair a widget
paints with: one for the wrapper layer (translate, scale, rotate about
the crop origin) and one for the inner bitmap (flip about its center).
"""

import logging
from pathlib import Path

from PyQt6.QtCore import QMimeData
from PyQt6.QtGui import QTransform

from dropzone_preview.image_io import describe_paths
from dropzone_preview.models import CropTransform, FileDescriptor, Size

logger = logging.getLogger(__name__)


def file_batch_from_mime_data(mime: QMimeData) -> list[FileDescriptor]:
    """Describe the local files carried by a drag/drop payload."""
    if mime is None or not mime.hasUrls():
        return []

    paths: list[Path] = []
    for url in mime.urls():
        if not url.isLocalFile():
            logger.debug("Skipping non-local URL %s", url.toString())
            continue
        paths.append(Path(url.toLocalFile()))
    return describe_paths(paths)


def wrapper_transform(transform: CropTransform) -> QTransform:
    """QTransform for the image wrapper; operations apply to points last-to-first."""
    ox, oy = transform.origin_point.x, transform.origin_point.y
    qt = QTransform()
    qt.translate(ox + transform.translation.x, oy + transform.translation.y)
    qt.scale(transform.scale, transform.scale)
    qt.rotateRadians(transform.rotation)
    qt.translate(-ox, -oy)
    return qt


def bitmap_transform(transform: CropTransform, image: Size) -> QTransform:
    """QTransform that mirrors the bitmap about its own center."""
    cx, cy = image.width * 0.5, image.height * 0.5
    qt = QTransform()
    qt.translate(cx, cy)
    qt.scale(transform.flip_scale_x, transform.flip_scale_y)
    qt.translate(-cx, -cy)
    return qt
