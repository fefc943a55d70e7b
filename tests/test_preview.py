"""Tests for preview panel sizing."""

import math

import pytest

from dropzone_preview.models import CropState, FileDescriptor, Size
from dropzone_preview.preview import (
    fit_clip_to_container, is_bitmap, is_preview_disabled, item_preview_height,
    panel_aspect_ratio, preview_aspect_ratio, preview_render_size,
)


# =============================================================================
# Aspect ratios
# =============================================================================
def test_panel_aspect_ratio():
    assert panel_aspect_ratio("circle", "16:9") == 1
    assert panel_aspect_ratio("integrated", "16:9") == pytest.approx(0.5625)
    assert panel_aspect_ratio(None, None) is None


def test_preview_aspect_ratio_prefers_crop():
    assert preview_aspect_ratio(Size(400, 300)) == pytest.approx(0.75)
    assert preview_aspect_ratio(Size(400, 300), CropState(aspect_ratio=1.0)) == 1.0
    assert preview_aspect_ratio(Size(400, 300), CropState()) == pytest.approx(0.75)


# =============================================================================
# fit_clip_to_container
# =============================================================================
def test_clip_capped_by_max_height():
    assert fit_clip_to_container(Size(300, 400), 1, 44, 256) == Size(256, 256)


def test_clip_follows_container_width():
    assert fit_clip_to_container(Size(300, 400), 0.5, 44, 256) == Size(300, 150)


def test_tall_clip_shrinks_to_container_height():
    assert fit_clip_to_container(Size(300, 200), 2, 44, 256) == Size(100, 200)


def test_wide_clip_shrinks_to_container_width():
    # min height would make it 440 wide; the container wins
    assert fit_clip_to_container(Size(300, 400), 0.1, 44, 256) == Size(300, pytest.approx(30))


def test_fixed_height():
    assert fit_clip_to_container(Size(300, 400), 1, 44, 256, fixed_height=100) == Size(100, 100)


def test_panel_ratio_applies_in_single_file_mode_only():
    single = fit_clip_to_container(Size(300, 400), 1, 44, 256, panel_ratio=0.5, allow_multiple=False)
    multi = fit_clip_to_container(Size(300, 400), 1, 44, 256, panel_ratio=0.5, allow_multiple=True)
    assert single == Size(300, 150)
    assert multi == Size(256, 256)


def test_zero_height_degrades_to_nan():
    clip = fit_clip_to_container(Size(300, 400), 1, 44, 256, fixed_height=0)
    assert math.isnan(clip.width)
    assert math.isnan(clip.height)


def test_nan_container_width_gives_nan_clip():
    clip = fit_clip_to_container(Size(math.nan, 400), 1, 44, 256)
    assert math.isnan(clip.width)
    assert math.isnan(clip.height)


def test_nan_ratio_gives_nan_clip():
    clip = fit_clip_to_container(Size(300, 400), math.nan, 44, 256)
    assert math.isnan(clip.width)
    assert math.isnan(clip.height)


def test_zero_ratio_does_not_raise():
    clip = fit_clip_to_container(Size(300, 400), 0, 44, 256)
    assert clip.width == 300
    assert clip.height == 0


# =============================================================================
# item_preview_height
# =============================================================================
def test_item_height_uses_image_ratio_without_crop_ratio():
    height = item_preview_height(Size(800, 600), 400, {"imageCropAspectRatio": None})
    assert height == 256


def test_item_height_uses_crop_ratio():
    assert item_preview_height(Size(800, 600), 200) == 200


def test_small_image_limits_item_height():
    height = item_preview_height(Size(100, 50), 400, {"imageCropAspectRatio": None})
    assert height == 50


def test_upscale_and_vector_images_use_reference_width():
    opts = {"imageCropAspectRatio": None}
    assert item_preview_height(Size(100, 50), 400, {**opts, "imagePreviewUpscale": True}) == 200
    assert item_preview_height(Size(100, 50), 400, opts, bitmap=False) == 200


def test_item_height_dictated_elsewhere():
    assert item_preview_height(Size(800, 600), 400, {"panelAspectRatio": "1:1"}) is None
    assert item_preview_height(Size(800, 600), 400, {"imagePreviewHeight": 120}) is None
    assert item_preview_height(Size(0, 600), 400) is None


# =============================================================================
# preview_render_size
# =============================================================================
def test_render_size_landscape():
    assert preview_render_size(Size(4000, 3000), Size(400, 300), 2) == Size(800, 600)
    assert preview_render_size(Size(4000, 3000), Size(400, 300), 2, pixel_ratio=2) == Size(1200, 900)


def test_render_size_never_exceeds_image():
    assert preview_render_size(Size(200, 150), Size(400, 300), 2) == Size(200, 150)


def test_render_size_portrait():
    assert preview_render_size(Size(3000, 4000), Size(400, 300), 2) == Size(800, 1067)


def test_render_size_empty_image():
    size = preview_render_size(Size(0, 0), Size(400, 300), 2)
    assert math.isnan(size.width)


# =============================================================================
# Preview gating
# =============================================================================
def test_is_preview_disabled():
    photo = FileDescriptor("p.jpg", "image/jpeg", 10 * 1024 * 1024)
    assert is_preview_disabled(None)
    assert is_preview_disabled(FileDescriptor("a.txt", "text/plain"))
    assert not is_preview_disabled(photo)
    assert is_preview_disabled(photo, "5MB", can_decode_large=False)
    assert not is_preview_disabled(photo, "5MB", can_decode_large=True)


def test_is_bitmap():
    assert is_bitmap(FileDescriptor("p.png", "image/png"))
    assert not is_bitmap(FileDescriptor("v.svg", "image/svg+xml"))
    assert not is_bitmap(FileDescriptor("a.txt", "text/plain"))
