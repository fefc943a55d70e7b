"""
File acceptance and validation.

A batch of dropped or selected files is classified against an ``accept``
pattern (exact MIME types and ``type/*`` wildcards) and optional size
limits.  The result partitions the batch into accepted and rejected files,
in input order, together with the structured errors explaining each
rejection.  Nothing here raises for well-typed input.
"""

import logging
from collections.abc import Iterable, Mapping
from urllib.parse import urlsplit

from dropzone_preview.config import (
    EXTENSION_MIME_MAP, IMAGE_EXTENSIONS, TEXT_EXTENSIONS, MOZ_FILE_MIME,
    LABEL_FILE_TYPE_NOT_ALLOWED, LABEL_FILE_SIZE_RANGE,
    LABEL_FILE_SIZE_TOO_SMALL, LABEL_FILE_SIZE_TOO_LARGE,
    LABEL_TOTAL_SIZE_EXCEEDED,
)
from dropzone_preview.file_size import (
    is_valid_file_size, parse_size, replace_in_string,
    to_natural_file_size, total_size, total_size_within_limit,
)
from dropzone_preview.models import (
    FileDescriptor, InvalidFileSize, InvalidFileType, SizeConstraint,
    TotalSizeExceeded, ValidationError, ValidationOutcome,
)

logger = logging.getLogger(__name__)

FileBatch = tuple[FileDescriptor, ...]


# =============================================================================
# MIME type helpers
# =============================================================================
def guess_mime_type(extension: str = "") -> str:
    """Guess a MIME type from a file extension, or "" if unknown."""
    extension = (extension or "").lower()

    if extension in IMAGE_EXTENSIONS:
        if extension == "jpg":
            return "image/jpeg"
        if extension == "svg":
            return "image/svg+xml"
        return f"image/{extension}"

    if extension in TEXT_EXTENSIONS:
        return f"text/{extension}"

    return EXTENSION_MIME_MAP.get(extension, "")


def _extension_from_filename(filename: str) -> str:
    parts = filename.split(".")
    return parts[-1].lower() if len(parts) > 1 else ""


def _filename_from_url(url: str) -> str:
    return urlsplit(url).path.split("/")[-1]


def item_mime_type(item: FileDescriptor | str) -> str:
    """Return the MIME type of a descriptor, or guess it from a URL's extension."""
    if isinstance(item, FileDescriptor):
        return item.mime_type or ""
    if isinstance(item, str):
        extension = _extension_from_filename(_filename_from_url(item))
        if extension:
            return guess_mime_type(extension)
    return ""


def _accept_entries(accept: str | Iterable[str]) -> list[str]:
    entries = accept.split(",") if isinstance(accept, str) else list(accept)
    return [e.strip() for e in entries if e and e.strip()]


def _format_accept(accept: str | Iterable[str] | None) -> str:
    if accept is None or isinstance(accept, str):
        return accept or ""
    return ",".join(accept)


def _matches_wildcard(mime_type: str, wildcard: str) -> bool:
    """``image/*`` matches any type whose group (the part before ``/``) is ``image``."""
    group = mime_type.split("/", 1)[0]
    return bool(group) and group == wildcard[:-2]


def matches_accept(mime_type: str, accept: str | Iterable[str] | None) -> bool:
    """Return True if *mime_type* satisfies the *accept* pattern.

    An empty or missing pattern accepts everything.  ``application/x-moz-file``
    is always accepted: Firefox reports it for every item while dragging.
    """
    if mime_type == MOZ_FILE_MIME:
        return True

    entries = _accept_entries(accept) if accept else []
    if not entries:
        return True

    for entry in entries:
        if entry.endswith("*"):
            if _matches_wildcard(mime_type, entry):
                return True
        elif entry == mime_type:
            return True
    return False


# =============================================================================
# Batch normalization
# =============================================================================
def file_batch(items: Iterable) -> FileBatch:
    """Normalize dropped items into a tuple of ``FileDescriptor``.

    Accepts descriptors, ``{"name", "type", "size"}`` mappings and URL
    strings (typed by extension, size 0).  Input order is preserved.
    """
    batch = []
    for item in items:
        if isinstance(item, FileDescriptor):
            batch.append(item)
        elif isinstance(item, Mapping):
            batch.append(FileDescriptor(
                name=str(item.get("name", "")),
                mime_type=str(item.get("type") or ""),
                size_bytes=int(item.get("size") or 0),
            ))
        elif isinstance(item, str):
            batch.append(FileDescriptor(
                name=_filename_from_url(item),
                mime_type=item_mime_type(item),
                size_bytes=0,
            ))
        else:
            raise TypeError(f"Unsupported dropped item: {item!r}")
    return tuple(batch)


# =============================================================================
# Classification
# =============================================================================
def _partition(
    files: FileBatch,
    accept: str | Iterable[str] | None,
    constraint: SizeConstraint,
    allow_multiple: bool,
) -> tuple[FileBatch, FileBatch]:
    accepted_idx = [
        i for i, f in enumerate(files)
        if matches_accept(f.mime_type, accept)
        and is_valid_file_size(f.size_bytes, constraint.max, constraint.min)
    ]
    if not allow_multiple:
        accepted_idx = accepted_idx[:1]

    # Partition by position; the same object may be dropped more than once
    keep = set(accepted_idx)
    accepted = [files[i] for i in accepted_idx]
    rejected = [f for i, f in enumerate(files) if i not in keep]
    return tuple(accepted), tuple(rejected)


def build_errors(
    rejected: Iterable[FileDescriptor],
    accept: str | Iterable[str] | None = None,
    constraint: SizeConstraint | None = None,
) -> list[ValidationError]:
    """Explain why each rejected file failed.

    A file can receive both an ``InvalidFileType`` and an ``InvalidFileSize``.
    Files rejected only because a single file is allowed get no error.
    """
    constraint = constraint or SizeConstraint()
    has_min = parse_size(constraint.min) is not None
    has_max = parse_size(constraint.max) is not None
    accept_label = _format_accept(accept)

    errors: list[ValidationError] = []
    for f in rejected:
        fields = {
            "name": f.name,
            "accept": accept_label,
            "minSize": constraint.min,
            "maxSize": constraint.max,
        }

        if not matches_accept(f.mime_type, accept):
            errors.append(InvalidFileType(f.name, replace_in_string(LABEL_FILE_TYPE_NOT_ALLOWED, fields)))

        if not is_valid_file_size(f.size_bytes, constraint.max, constraint.min):
            if has_min and has_max:
                template = LABEL_FILE_SIZE_RANGE
            elif has_min:
                template = LABEL_FILE_SIZE_TOO_SMALL
            else:
                template = LABEL_FILE_SIZE_TOO_LARGE
            errors.append(InvalidFileSize(f.name, replace_in_string(template, fields)))

    return errors


def classify(
    files: Iterable,
    accept: str | Iterable[str] | None = None,
    constraint: SizeConstraint | None = None,
    allow_multiple: bool = True,
) -> ValidationOutcome:
    """Split *files* into accepted and rejected sets and collect errors.

    A file is accepted when its MIME type matches *accept* and its size lies
    within the constraint's min/max.  With *allow_multiple* off only the first
    such file is accepted.  Exceeding ``max_total`` adds a
    ``TotalSizeExceeded`` error but does not move files between the sets.
    """
    constraint = constraint or SizeConstraint()
    batch = file_batch(files)

    accepted, rejected = _partition(batch, accept, constraint, allow_multiple)
    errors = build_errors(rejected, accept, constraint)

    if not total_size_within_limit(batch, constraint.max_total):
        errors.append(TotalSizeExceeded(replace_in_string(LABEL_TOTAL_SIZE_EXCEEDED, {
            "totalSize": to_natural_file_size(total_size(batch)),
            "maxTotalSize": constraint.max_total,
        })))

    logger.debug(
        "Classified %d file(s): %d accepted, %d rejected, %d error(s)",
        len(batch), len(accepted), len(rejected), len(errors),
    )
    return ValidationOutcome(
        files=batch,
        accepted=accepted,
        rejected=rejected,
        errors=tuple(errors),
    )
