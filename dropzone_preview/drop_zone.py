"""
Drop-zone controller (Qt-free).

Runs every drop, drag-enter and file-picker selection through the
validator and reports the outcome to user callbacks.  The widget layer
only has to turn its events into a batch of files and forward them here.
"""

import logging
from collections.abc import Callable, Iterable

from dropzone_preview.config import DEFAULT_OPTIONS
from dropzone_preview.models import ValidationOutcome
from dropzone_preview.options import size_constraint_from_options
from dropzone_preview.preview import panel_aspect_ratio
from dropzone_preview.validation import classify

logger = logging.getLogger(__name__)


class DropZone:
    """Validate dropped files and dispatch the results.

    Callbacks (all optional):

    * ``on_drop(files, accepted, rejected, errors)`` on every drop
    * ``on_drop_accepted(accepted)`` when at least one file was accepted
    * ``on_drop_rejected(rejected)`` when at least one file was rejected
    * ``on_drag_enter()`` / ``on_drag_leave()`` while dragging
    """

    def __init__(
        self,
        options: dict | None = None,
        disabled: bool = False,
        on_drop: Callable | None = None,
        on_drop_accepted: Callable | None = None,
        on_drop_rejected: Callable | None = None,
        on_drag_enter: Callable | None = None,
        on_drag_leave: Callable | None = None,
    ):
        self.options = {**DEFAULT_OPTIONS, **(options or {})}
        self.disabled = disabled
        self.on_drop = on_drop
        self.on_drop_accepted = on_drop_accepted
        self.on_drop_rejected = on_drop_rejected
        self.on_drag_enter = on_drag_enter
        self.on_drag_leave = on_drag_leave

        # Drag feedback state
        self.drag_active = False
        self.has_error = False

    @property
    def panel_aspect_ratio(self) -> float | None:
        return panel_aspect_ratio(self.options.get("panelLayout"), self.options.get("panelAspectRatio"))

    def validate(self, items: Iterable) -> ValidationOutcome:
        """Classify *items* with the current options, without firing callbacks."""
        return classify(
            items,
            accept=self.options.get("accept"),
            constraint=size_constraint_from_options(self.options),
            allow_multiple=self.options.get("allowMultiple", True),
        )

    # --- Events ---

    def handle_drop(self, items: Iterable) -> ValidationOutcome | None:
        """Handle a drop or file-picker selection. Returns None while disabled."""
        if self.disabled:
            return None

        outcome = self.validate(items)
        logger.debug(
            "Drop: %d accepted, %d rejected", len(outcome.accepted), len(outcome.rejected),
        )

        if self.on_drop:
            self.on_drop(
                list(outcome.files), list(outcome.accepted),
                list(outcome.rejected), list(outcome.errors),
            )
        if outcome.accepted and self.on_drop_accepted:
            self.on_drop_accepted(list(outcome.accepted))
        if outcome.rejected and self.on_drop_rejected:
            self.on_drop_rejected(list(outcome.rejected))

        self.drag_active = False
        self.has_error = False
        return outcome

    def handle_drag_enter(self, items: Iterable) -> None:
        """Flag the panel as erroneous while a batch with rejected files hovers over it."""
        if self.disabled:
            return
        outcome = self.validate(items)
        self.drag_active = True
        self.has_error = bool(outcome.rejected)
        if self.on_drag_enter:
            self.on_drag_enter()

    def handle_drag_leave(self) -> None:
        if self.disabled:
            return
        self.drag_active = False
        self.has_error = False
        if self.on_drag_leave:
            self.on_drag_leave()
