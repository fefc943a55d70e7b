"""Tests for crop-state creation and the immutable crop setters."""

import math

import pytest

from dropzone_preview.crop import CropEditor, crop_allowed, is_image, load_crop_state
from dropzone_preview.models import CropState, FileDescriptor, Flip, Vector

PHOTO = FileDescriptor("photo.jpg", "image/jpeg", 2048)
NOTES = FileDescriptor("notes.txt", "text/plain", 12)


@pytest.fixture
def editor():
    return CropEditor(PHOTO, allow_crop=True)


def test_is_image_and_crop_allowed():
    assert is_image(PHOTO)
    assert not is_image(NOTES)
    assert not is_image(None)
    assert crop_allowed(PHOTO, True)
    assert not crop_allowed(PHOTO, False)
    assert not crop_allowed(NOTES, True)


def test_load_crop_state_defaults():
    state = load_crop_state(PHOTO, True, "16:9")
    assert state.center == Vector(0.5, 0.5)
    assert state.zoom == 1
    assert state.rotation == 0
    assert state.flip == Flip(False, False)
    assert state.scale_to_fit is True
    assert state.aspect_ratio == pytest.approx(9 / 16)


def test_load_crop_state_without_ratio_follows_image():
    assert load_crop_state(PHOTO, True).aspect_ratio is None


def test_load_crop_state_for_non_images():
    assert load_crop_state(NOTES, True, "1:1") is None
    assert load_crop_state(PHOTO, False, "1:1") is None


def test_setters_return_new_state(editor):
    state = CropState()
    moved = editor.set_center(state, Vector(0.2, 0.8))

    assert moved is not state
    assert moved.center == Vector(0.2, 0.8)
    assert state.center == Vector(0.5, 0.5)


def test_zoom_is_clamped_to_one(editor):
    assert editor.set_zoom(CropState(), 0.25).zoom == 1
    assert editor.set_zoom(CropState(), 3).zoom == 3


def test_invalid_input_is_a_no_op(editor):
    state = CropState()
    assert editor.set_zoom(state, math.nan) is None
    assert editor.set_zoom(state, "2") is None
    assert editor.set_rotation(state, None) is None
    assert editor.set_center(state, (0.1, 0.1)) is None
    assert editor.set_flip(state, {"horizontal": True}) is None
    assert editor.set_aspect_ratio(state, None) is None
    assert editor.set_crop(state, None) is None


def test_setters_disabled_for_non_images():
    editor = CropEditor(NOTES, allow_crop=True)
    state = CropState()
    assert not editor.enabled
    assert editor.set_zoom(state, 2) is None
    assert editor.set_rotation(state, 1.0) is None
    assert editor.set_crop(state, CropState(zoom=2)) is None


def test_setters_disabled_when_cropping_off():
    editor = CropEditor(PHOTO, allow_crop=False)
    assert editor.set_center(CropState(), Vector(0.1, 0.1)) is None


def test_rotation_and_flip(editor):
    state = editor.set_rotation(CropState(), -0.5)
    state = editor.set_flip(state, Flip(horizontal=True))
    assert state.rotation == -0.5
    assert state.flip == Flip(True, False)


def test_set_crop_replaces_wholesale(editor):
    replacement = CropState(center=Vector(0.1, 0.9), zoom=2.5)
    assert editor.set_crop(CropState(), replacement) is replacement


def test_set_aspect_ratio_resets_but_keeps_flip(editor):
    state = CropState(
        center=Vector(0.1, 0.2), zoom=3, rotation=1.2,
        flip=Flip(vertical=True), scale_to_fit=False,
    )
    reset = editor.set_aspect_ratio(state, "4:3")

    assert reset.center == Vector(0.5, 0.5)
    assert reset.zoom == 1
    assert reset.rotation == 0
    assert reset.aspect_ratio == pytest.approx(0.75)
    assert reset.flip == Flip(vertical=True)
    assert reset.scale_to_fit is False
