"""
Data models shared by the validator, the crop geometry engine and the UI.

All models are immutable value types.  ``ValidationError`` is a closed sum
of the three error variants the validator can produce; ``CropState`` is
replaced wholesale by the crop setters rather than mutated, and
``CropTransform`` is the declarative output of ``compute_crop_transform``.
"""

import math
from dataclasses import dataclass, field
from typing import ClassVar, Union


# =============================================================================
# Geometry primitives
# =============================================================================
@dataclass(frozen=True)
class Vector:
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class Size:
    width: float = 0.0
    height: float = 0.0


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in pixel coordinates."""
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)


# =============================================================================
# File validation
# =============================================================================
@dataclass(frozen=True)
class FileDescriptor:
    """A dropped or selected file as seen by the validator."""
    name: str
    mime_type: str = ""
    size_bytes: int = 0


@dataclass(frozen=True)
class SizeConstraint:
    """Size strings such as ``"2MB"``; ``None`` means unconstrained."""
    min: str | None = None
    max: str | None = None
    max_total: str | None = None


@dataclass(frozen=True)
class InvalidFileType:
    code: ClassVar[str] = "INVALID_FILE_TYPE"
    file_name: str
    message: str


@dataclass(frozen=True)
class InvalidFileSize:
    code: ClassVar[str] = "INVALID_FILE_SIZE"
    file_name: str
    message: str


@dataclass(frozen=True)
class TotalSizeExceeded:
    code: ClassVar[str] = "TOTAL_SIZE_EXCEEDED"
    message: str


ValidationError = Union[InvalidFileType, InvalidFileSize, TotalSizeExceeded]


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of classifying one batch; ``accepted`` and ``rejected`` partition ``files``."""
    files: tuple[FileDescriptor, ...] = ()
    accepted: tuple[FileDescriptor, ...] = ()
    rejected: tuple[FileDescriptor, ...] = ()
    errors: tuple[ValidationError, ...] = ()


# =============================================================================
# Crop
# =============================================================================
@dataclass(frozen=True)
class Flip:
    horizontal: bool = False
    vertical: bool = False


@dataclass(frozen=True)
class CropState:
    """Crop parameters for one image.

    ``center`` is normalized to the image (0..1 on both axes) and
    ``aspect_ratio`` is height / width, or ``None`` to follow the image.
    """
    center: Vector = field(default_factory=lambda: Vector(0.5, 0.5))
    zoom: float = 1.0
    rotation: float = 0.0
    aspect_ratio: float | None = None
    flip: Flip = field(default_factory=Flip)
    scale_to_fit: bool = True


@dataclass(frozen=True)
class CropTransform:
    """Placement of an image inside a crop container.

    The wrapper layer is translated, scaled and rotated about
    ``origin_point``; the flip scales apply to the inner bitmap layer only.
    """
    origin_point: Vector
    translation: Vector
    scale: float
    rotation: float
    flip_scale_x: int = 1
    flip_scale_y: int = 1

    def map_point(self, x: float, y: float) -> Vector:
        """Map an untransformed image point to container coordinates."""
        dx = x - self.origin_point.x
        dy = y - self.origin_point.y
        cos_r = math.cos(self.rotation)
        sin_r = math.sin(self.rotation)
        rx = (dx * cos_r - dy * sin_r) * self.scale
        ry = (dx * sin_r + dy * cos_r) * self.scale
        return Vector(
            self.origin_point.x + self.translation.x + rx,
            self.origin_point.y + self.translation.y + ry,
        )
