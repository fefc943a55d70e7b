"""
Command-line entry point.

Usage:
    dropzone-preview check FILE [FILE ...] [--accept image/*] [--max-size 2MB]
    dropzone-preview transform IMAGE --container 400x300 [--ratio 16:9] [--rotation 15]

Unset flags fall back to the stored options (see ``options.load_options``).
"""

import argparse
import logging
import math
import sys
from pathlib import Path

from dropzone_preview.crop import compute_crop_transform, parse_aspect_ratio
from dropzone_preview.drop_zone import DropZone
from dropzone_preview.image_io import describe_paths, get_image_size
from dropzone_preview.models import CropState, Flip, Size, Vector
from dropzone_preview.options import load_options

logger = logging.getLogger(__name__)


def _parse_pair(text: str, sep: str) -> tuple[float, float]:
    try:
        a, b = text.lower().split(sep)
        return float(a), float(b)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected two numbers separated by '{sep}', got {text!r}") from None


def _container(text: str) -> Size:
    return Size(*_parse_pair(text, "x"))


def _center(text: str) -> Vector:
    return Vector(*_parse_pair(text, ","))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dropzone-preview")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check", help="validate files as if they were dropped")
    check.add_argument("files", nargs="+", type=Path)
    check.add_argument("--accept", help="MIME patterns, e.g. 'image/*,application/pdf'")
    check.add_argument("--max-size", dest="maxFileSize")
    check.add_argument("--min-size", dest="minFileSize")
    check.add_argument("--max-total", dest="maxTotalFileSize")
    check.add_argument("--single", action="store_true", help="accept only one file")

    transform = sub.add_parser("transform", help="print the crop transform for an image")
    transform.add_argument("image", type=Path)
    transform.add_argument("--container", type=_container, required=True, help="WIDTHxHEIGHT")
    transform.add_argument("--ratio", help="crop aspect ratio, e.g. 16:9")
    transform.add_argument("--center", type=_center, default=Vector(0.5, 0.5), help="X,Y in 0..1")
    transform.add_argument("--zoom", type=float, default=1.0)
    transform.add_argument("--rotation", type=float, default=0.0, help="degrees")
    transform.add_argument("--flip-h", action="store_true")
    transform.add_argument("--flip-v", action="store_true")
    transform.add_argument("--no-scale-to-fit", action="store_true")
    return parser


def _run_check(args: argparse.Namespace, options: dict) -> int:
    for key in ("accept", "maxFileSize", "minFileSize", "maxTotalFileSize"):
        value = getattr(args, key)
        if value is not None:
            options[key] = value
    if args.single:
        options["allowMultiple"] = False

    outcome = DropZone(options).handle_drop(describe_paths(args.files))

    for f in outcome.accepted:
        print(f"accepted  {f.name}  ({f.mime_type or 'unknown'}, {f.size_bytes} bytes)")
    for f in outcome.rejected:
        print(f"rejected  {f.name}  ({f.mime_type or 'unknown'}, {f.size_bytes} bytes)")
    for error in outcome.errors:
        print(f"{error.code}: {error.message}")
    return 1 if outcome.rejected or outcome.errors else 0


def _run_transform(args: argparse.Namespace, options: dict) -> int:
    ratio = args.ratio if args.ratio is not None else options.get("imageCropAspectRatio")
    crop = CropState(
        center=args.center,
        zoom=max(1.0, args.zoom),
        rotation=math.radians(args.rotation),
        aspect_ratio=parse_aspect_ratio(ratio),
        flip=Flip(args.flip_h, args.flip_v),
        scale_to_fit=not args.no_scale_to_fit,
    )
    image = get_image_size(args.image)
    t = compute_crop_transform(args.container, image, crop)

    print(f"image        {image.width:g} x {image.height:g}")
    print(f"origin       {t.origin_point.x:.3f}, {t.origin_point.y:.3f}")
    print(f"translation  {t.translation.x:.3f}, {t.translation.y:.3f}")
    print(f"scale        {t.scale:.6f}")
    print(f"rotation     {t.rotation:.6f} rad")
    print(f"flip         {t.flip_scale_x}, {t.flip_scale_y}")
    if not math.isfinite(t.scale):
        logger.warning("Transform is degenerate (scale=%s)", t.scale)
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    options = load_options()
    if args.command == "check":
        return _run_check(args, options)
    return _run_transform(args, options)


if __name__ == "__main__":
    sys.exit(main())
