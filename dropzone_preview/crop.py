"""
Crop geometry engine and crop-state setters.

Given an image's natural size, the size of the container it is shown in
and a ``CropState``, ``compute_crop_transform`` works out the translation,
scale and rotation that place the cropped, correctly oriented image in the
container.  The zoom floor accounts for rotation: a rotated crop window
needs more image to cover it than an upright one.

Aspect ratios are always height / width (``"16:9"`` gives 0.5625).  Degenerate
input (zero ratios, non-finite sizes) propagates ``nan``/``inf`` instead of
raising; callers check finiteness before painting.
"""

import math
from dataclasses import replace

from dropzone_preview.config import DEFAULT_CROP_CENTER, MIN_CROP_ZOOM
from dropzone_preview.models import (
    CropState, CropTransform, FileDescriptor, Flip, Rect, Size, Vector,
)

_HALF_PI = math.pi / 2
_TWO_PI = math.pi * 2


# =============================================================================
# Numeric helpers
# =============================================================================
def safe_div(a: float, b: float) -> float:
    """IEEE-754 division: ``x/0`` is ±inf and ``0/0`` is nan."""
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def _round_half_up(value: float) -> float:
    if not math.isfinite(value):
        return value
    return float(math.floor(value + 0.5))


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and not math.isnan(value)


def normalize_rotation(rotation: float) -> float:
    """Map any angle in radians into [0, 2π)."""
    return (_TWO_PI + rotation) % _TWO_PI


def _distance(a: Vector, b: Vector) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


# =============================================================================
# Aspect ratio
# =============================================================================
def parse_aspect_ratio(value: str | float | None) -> float | None:
    """Convert ``"w:h"`` (or a plain number) to a height / width ratio.

    ``None`` and empty strings pass through as ``None``; unparseable text
    gives ``nan``.
    """
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)

    text = str(value).strip()
    if not text:
        return None
    if ":" in text:
        width, _, height = text.partition(":")
        return safe_div(_parse_float(height), _parse_float(width))
    return _parse_float(text)


def _parse_float(text: str) -> float:
    try:
        return float(text.strip())
    except ValueError:
        return math.nan


# =============================================================================
# Geometry
# =============================================================================
def centered_crop_rect(container: Size, aspect_ratio: float) -> Rect:
    """Largest centered rectangle with *aspect_ratio* that fits in *container*."""
    width = container.width
    height = width * aspect_ratio

    if height > container.height:
        height = container.height
        width = safe_div(height, aspect_ratio)

    x = (container.width - width) * 0.5
    y = (container.height - height) * 0.5
    return Rect(x, y, width, height)


def _offset_point_on_edge(length: float, rotation: float) -> Vector:
    """Offset of an edge's end point after rotating it by *rotation*.

    Law of sines on the right triangle with angles A = π/2, B = rotation and
    C = π/2 - rotation, whose hypotenuse is the edge.
    """
    sin_a = math.sin(_HALF_PI)
    sin_b = math.sin(rotation)
    c = _HALF_PI - rotation
    sin_c = math.sin(c)
    cos_c = math.cos(c)

    ratio = length / sin_a
    return Vector(cos_c * (ratio * sin_b), cos_c * (ratio * sin_c))


def rotated_rect_size(rect: Rect, rotation: float) -> Size:
    """Bounding size of *rect* after rotating it by *rotation* radians."""
    rotation = normalize_rotation(rotation)
    hor = _offset_point_on_edge(rect.width, rotation)
    ver = _offset_point_on_edge(rect.height, rotation)

    top_left = Vector(rect.x + abs(hor.x), rect.y - abs(hor.y))
    top_right = Vector(rect.x + rect.width + abs(ver.y), rect.y + abs(ver.x))
    bottom_left = Vector(rect.x - abs(ver.y), rect.y + rect.height - abs(ver.x))

    return Size(_distance(top_left, top_right), _distance(top_left, bottom_left))


def image_rect_zoom_factor(image: Size, crop_rect: Rect, rotation: float, center: Vector) -> float:
    """Minimum zoom at which the image still covers the rotated crop window.

    An off-center crop can only use the image extent up to the nearest
    edge on each axis, so the available size shrinks to ``min(c, 1 - c) * 2``.
    """
    cx = min(center.x, 1 - center.x)
    cy = min(center.y, 1 - center.y)
    available_width = cx * 2 * image.width
    available_height = cy * 2 * image.height

    rotated = rotated_rect_size(crop_rect, rotation)
    zoom_x = safe_div(rotated.width, available_width)
    zoom_y = safe_div(rotated.height, available_height)
    if math.isnan(zoom_x) or math.isnan(zoom_y):
        return math.nan
    return max(zoom_x, zoom_y)


def compute_crop_transform(container: Size, image: Size, crop: CropState) -> CropTransform:
    """Return the transform that renders *image* cropped by *crop* inside *container*."""
    stage_center = Vector(container.width * 0.5, container.height * 0.5)

    origin = Vector(crop.center.x * image.width, crop.center.y * image.height)
    translation = Vector(
        stage_center.x - image.width * crop.center.x,
        stage_center.y - image.height * crop.center.y,
    )
    rotation = normalize_rotation(crop.rotation)

    aspect_ratio = crop.aspect_ratio
    if aspect_ratio is None:
        aspect_ratio = safe_div(image.height, image.width)

    # Without scale_to_fit the zoom floor ignores panning, so the crop may leave the image
    limit_center = crop.center if crop.scale_to_fit else Vector(0.5, 0.5)

    fit_zoom = image_rect_zoom_factor(
        image,
        centered_crop_rect(container, _round_half_up(aspect_ratio)),
        rotation,
        limit_center,
    )

    return CropTransform(
        origin_point=origin,
        translation=translation,
        scale=crop.zoom * fit_zoom,
        rotation=rotation,
        flip_scale_x=-1 if crop.flip.horizontal else 1,
        flip_scale_y=-1 if crop.flip.vertical else 1,
    )


# =============================================================================
# Crop state
# =============================================================================
def is_image(file: FileDescriptor | None) -> bool:
    return file is not None and file.mime_type.startswith("image")


def crop_allowed(file: FileDescriptor | None, allow_crop: bool) -> bool:
    """Cropping applies only to image files when it is enabled."""
    return bool(allow_crop) and is_image(file)


def load_crop_state(
    file: FileDescriptor | None,
    allow_crop: bool,
    image_crop_aspect_ratio: str | float | None = None,
) -> CropState | None:
    """Fresh crop state for *file*, or None when it cannot be cropped."""
    if not crop_allowed(file, allow_crop):
        return None
    aspect_ratio = parse_aspect_ratio(image_crop_aspect_ratio) if image_crop_aspect_ratio else None
    return CropState(aspect_ratio=aspect_ratio)


class CropEditor:
    """Pure setters for the crop state of one file.

    Every setter takes the current state and returns a new one, or None
    when the input is invalid or the file cannot be cropped.
    """

    def __init__(self, file: FileDescriptor | None, allow_crop: bool):
        self.file = file
        self.allow_crop = allow_crop

    @property
    def enabled(self) -> bool:
        return crop_allowed(self.file, self.allow_crop)

    def set_crop(self, state: CropState, crop: CropState | None) -> CropState | None:
        if not self.enabled or not isinstance(crop, CropState) or not isinstance(crop.center, Vector):
            return None
        return crop

    def set_center(self, state: CropState, center: Vector | None) -> CropState | None:
        if not self.enabled or not isinstance(center, Vector):
            return None
        return replace(state, center=center)

    def set_zoom(self, state: CropState, zoom: float | None) -> CropState | None:
        if not self.enabled or not _is_number(zoom):
            return None
        return replace(state, zoom=max(MIN_CROP_ZOOM, zoom))

    def set_rotation(self, state: CropState, rotation: float | None) -> CropState | None:
        if not self.enabled or not _is_number(rotation):
            return None
        return replace(state, rotation=rotation)

    def set_flip(self, state: CropState, flip: Flip | None) -> CropState | None:
        if not self.enabled or not isinstance(flip, Flip):
            return None
        return replace(state, flip=flip)

    def set_aspect_ratio(self, state: CropState, aspect_ratio: str | float | None) -> CropState | None:
        """Switch ratio and reset center, rotation and zoom; flip is kept."""
        if not self.enabled or aspect_ratio is None:
            return None
        return CropState(
            center=Vector(*DEFAULT_CROP_CENTER),
            zoom=1.0,
            rotation=0.0,
            aspect_ratio=parse_aspect_ratio(aspect_ratio),
            flip=state.flip if state is not None else Flip(),
            scale_to_fit=state.scale_to_fit if state is not None else True,
        )
