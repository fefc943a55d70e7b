"""Tests for options validation and JSON persistence."""

import json

import pytest

from dropzone_preview import options as options_mod
from dropzone_preview.config import DEFAULT_OPTIONS
from dropzone_preview.models import SizeConstraint
from dropzone_preview.options import (
    load_options, save_options, size_constraint_from_options, validate_options,
)


@pytest.fixture
def options_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(options_mod, "config_dir", lambda: tmp_path)
    return tmp_path


def _stored(path):
    return json.loads((path / "options.json").read_text(encoding="utf-8"))


# =============================================================================
# Validation
# =============================================================================
def test_defaults_are_valid():
    assert validate_options(DEFAULT_OPTIONS) == []


def test_partial_options_are_valid():
    assert validate_options({"accept": "image/*", "maxFileSize": "2MB"}) == []
    assert validate_options({"imageCropAspectRatio": 0.5}) == []


def test_non_dict_is_rejected():
    assert validate_options(["accept"]) == ["Options must be a dict"]


@pytest.mark.parametrize("data", [
    {"bogus": 1},
    {"accept": 5},
    {"allowMultiple": "yes"},
    {"maxFileSize": "2 megabytes"},
    {"imageCropAspectRatio": "wide"},
    {"panelAspectRatio": "0:1"},
    {"panelLayout": "hexagon"},
    {"imagePreviewMaxHeight": -5},
    {"imagePreviewZoomFactor": 0},
    {"imagePreviewMinHeight": 300, "imagePreviewMaxHeight": 200},
])
def test_invalid_options_reported(data):
    assert validate_options(data)


# =============================================================================
# Load / Save
# =============================================================================
def test_missing_file_creates_defaults(options_dir):
    assert load_options() == DEFAULT_OPTIONS
    assert _stored(options_dir) == {"version": 1, "options": DEFAULT_OPTIONS}


def test_corrupt_file_restores_defaults(options_dir):
    (options_dir / "options.json").write_text("{not json", encoding="utf-8")
    assert load_options() == DEFAULT_OPTIONS
    assert _stored(options_dir)["version"] == 1


def test_missing_envelope_restores_defaults(options_dir):
    (options_dir / "options.json").write_text(json.dumps({"accept": "image/*"}), encoding="utf-8")
    assert load_options() == DEFAULT_OPTIONS


def test_invalid_stored_options_restore_defaults(options_dir):
    envelope = {"version": 1, "options": {"panelLayout": "hexagon"}}
    (options_dir / "options.json").write_text(json.dumps(envelope), encoding="utf-8")
    assert load_options() == DEFAULT_OPTIONS


def test_stored_subset_is_merged_over_defaults(options_dir):
    envelope = {"version": 1, "options": {"accept": "image/*", "allowMultiple": False}}
    (options_dir / "options.json").write_text(json.dumps(envelope), encoding="utf-8")

    loaded = load_options()
    assert loaded["accept"] == "image/*"
    assert loaded["allowMultiple"] is False
    assert loaded["imagePreviewMaxHeight"] == DEFAULT_OPTIONS["imagePreviewMaxHeight"]


def test_save_then_load(options_dir):
    save_options({"accept": "image/png", "maxFileSize": "5MB"})
    assert _stored(options_dir)["options"] == {"accept": "image/png", "maxFileSize": "5MB"}
    assert load_options()["maxFileSize"] == "5MB"


def test_save_rejects_invalid_options(options_dir):
    with pytest.raises(ValueError, match="panelLayout"):
        save_options({"panelLayout": "hexagon"})
    assert not (options_dir / "options.json").exists()


def test_size_constraint_from_options():
    constraint = size_constraint_from_options({"maxFileSize": "2MB", "maxTotalFileSize": "10MB"})
    assert constraint == SizeConstraint(min=None, max="2MB", max_total="10MB")
