"""
Preview panel sizing.

Works out how large a preview item and its crop clip should be, given the
space the surrounding panel offers and the configured height bounds.  Like
the crop engine these are plain functions over numbers; ``nan`` flows
through rather than raising when the inputs are degenerate.
"""

import math

from dropzone_preview.config import (
    DEFAULT_OPTIONS, PIXEL_DENSITY_DISCOUNT, PREVIEW_REFERENCE_WIDTH, VECTOR_IMAGE_TYPES,
)
from dropzone_preview.crop import is_image, parse_aspect_ratio, safe_div
from dropzone_preview.file_size import parse_size
from dropzone_preview.models import CropState, FileDescriptor, Size


def panel_aspect_ratio(panel_layout: str | None, ratio: str | float | None) -> float | None:
    """Height / width of the drop panel; circular panels are always square."""
    if panel_layout and "circle" in panel_layout:
        return 1.0
    return parse_aspect_ratio(ratio)


def preview_aspect_ratio(image: Size, crop: CropState | None = None) -> float:
    """The crop's ratio when one is set, otherwise the image's own."""
    if crop is not None and crop.aspect_ratio:
        return crop.aspect_ratio
    return safe_div(image.height, image.width)


def fit_clip_to_container(
    container: Size,
    aspect_ratio: float,
    min_height: float,
    max_height: float,
    fixed_height: float | None = None,
    panel_ratio: float | None = None,
    allow_multiple: bool = True,
) -> Size:
    """Size of the crop clip inside a preview item.

    The height follows the container width and *aspect_ratio*, bounded by
    *min_height* / *max_height*, unless a fixed height applies.  In
    single-file mode a panel ratio overrides both.  The result is then
    shrunk, keeping the ratio, until it fits *container*.
    """
    if panel_ratio and not allow_multiple:
        fixed_height = container.width * panel_ratio
        aspect_ratio = panel_ratio

    if fixed_height is not None:
        clip_height = fixed_height
    else:
        target = container.width * aspect_ratio
        # min/max drop a nan second argument, so it has to be carried explicitly
        if math.isnan(target):
            clip_height = math.nan
        else:
            clip_height = max(min_height, min(target, max_height))

    if not clip_height:
        clip_height = math.nan

    clip_width = safe_div(clip_height, aspect_ratio)
    if clip_width > container.width:
        clip_width = container.width
        clip_height = clip_width * aspect_ratio

    if clip_height > container.height:
        clip_height = container.height
        clip_width = safe_div(container.height, aspect_ratio)

    return Size(clip_width, clip_height)


def is_bitmap(file: FileDescriptor) -> bool:
    return is_image(file) and file.mime_type not in VECTOR_IMAGE_TYPES


def item_preview_height(
    image: Size,
    container_width: float,
    options: dict | None = None,
    bitmap: bool = True,
) -> float | None:
    """Height of a preview item for an image of natural size *image*.

    Returns None when the height is dictated elsewhere (a panel ratio or
    a fixed preview height) or the image size is unknown.
    """
    opts = {**DEFAULT_OPTIONS, **(options or {})}

    if opts.get("panelAspectRatio") or opts.get("itemPanelAspectRatio") or opts.get("imagePreviewHeight"):
        return None
    if not image.width or not image.height:
        return None

    width, height = image.width, image.height
    if not bitmap or opts.get("imagePreviewUpscale"):
        scalar = PREVIEW_REFERENCE_WIDTH / width
        width *= scalar
        height *= scalar

    crop_ratio = parse_aspect_ratio(opts.get("imageCropAspectRatio"))
    ratio = crop_ratio or height / width

    height_max = max(opts["imagePreviewMinHeight"], min(height, opts["imagePreviewMaxHeight"]))
    return min(container_width * ratio, height_max)


def preview_render_size(image: Size, panel: Size, zoom_factor: float, pixel_ratio: float = 1.0) -> Size:
    """Backing-store size for the preview bitmap.

    Enough pixels for the panel at *zoom_factor* on a screen with
    *pixel_ratio*, but never more than the image itself has.
    """
    scale = zoom_factor * max(1.0, pixel_ratio * PIXEL_DENSITY_DISCOUNT)
    ratio = safe_div(image.height, image.width)

    if ratio > 1:
        width = min(image.width, panel.width * scale)
        height = width * ratio
    else:
        height = min(image.height, panel.height * scale)
        width = safe_div(height, ratio)

    if not (math.isfinite(width) and math.isfinite(height)):
        return Size(width, height)
    return Size(round(width), round(height))


def is_preview_disabled(
    file: FileDescriptor | None,
    max_file_size: str | int | None = None,
    can_decode_large: bool = True,
) -> bool:
    """True when *file* should not get an image preview."""
    if file is None or not is_image(file):
        return True

    limit = parse_size(max_file_size)
    if limit is not None and file.size_bytes > limit and not can_decode_large:
        return True
    return False
