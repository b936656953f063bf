"""
Column gesture controllers.

Translate presentation-layer gestures into ``ColumnState`` mutations:

* ``ResizeController`` -- drag of a column's resize handle.
* ``VisibilityController`` -- per-column visibility checkbox.

The only scoped resource in the engine is the drag subscription.  A
``DragSession`` registers its pointer listeners exactly once and releases
them on every exit path: pointer release, explicit ``end()``, leaving a
``with`` block (including by exception), and controller ``teardown()``.

UI errors never raise into the render loop.  Unknown keys, locked columns
drags without a session and non-finite pointer deltas are reported as ``ControlOutcome`` no-ops and
logged.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from enum import Enum
from typing import Any

from statement_kernel.domain.columns import MIN_WIDTH, ColumnState
from statement_kernel.logging_config import get_logger

logger = get_logger("domain.controllers")


class ControlOutcome(str, Enum):
    """Result of a controller request."""

    APPLIED = "applied"
    UNKNOWN_KEY = "unknown_key"
    LOCKED = "locked"
    NO_SESSION = "no_session"
    INVALID_WIDTH = "invalid_width"


# =========================================================================
# Pointer event source
# =========================================================================


class PointerEvents:
    """
    Document-level pointer event hub fed by the presentation layer.

    ``emit_move(delta_px)`` reports horizontal pointer movement since the
    previous move; ``emit_release()`` reports pointer-up.
    """

    MOVE = "move"
    RELEASE = "release"

    def __init__(self) -> None:
        self._listeners: dict[str, list[Callable[..., Any]]] = {
            self.MOVE: [],
            self.RELEASE: [],
        }

    def add_listener(self, event: str, listener: Callable[..., Any]) -> None:
        self._listeners[event].append(listener)

    def remove_listener(self, event: str, listener: Callable[..., Any]) -> None:
        if listener in self._listeners[event]:
            self._listeners[event].remove(listener)

    def listener_count(self, event: str | None = None) -> int:
        if event is not None:
            return len(self._listeners[event])
        return sum(len(v) for v in self._listeners.values())

    def emit_move(self, delta_px: float) -> None:
        for listener in list(self._listeners[self.MOVE]):
            listener(delta_px)

    def emit_release(self) -> None:
        for listener in list(self._listeners[self.RELEASE]):
            listener()


# =========================================================================
# Resize
# =========================================================================


class DragSession:
    """
    One active resize drag for a single column key.

    Listeners are registered in the constructor and removed by ``end()``;
    ``end()`` is idempotent.
    """

    def __init__(self, controller: ResizeController, key: str, events: PointerEvents):
        self.controller = controller
        self.key = key
        self._events = events
        self._active = True
        events.add_listener(PointerEvents.MOVE, self._on_move)
        events.add_listener(PointerEvents.RELEASE, self.end)

    @property
    def active(self) -> bool:
        return self._active

    def _on_move(self, delta_px: float) -> None:
        self.controller.on_drag(self.key, delta_px)

    def end(self) -> None:
        if not self._active:
            return
        self._active = False
        self._events.remove_listener(PointerEvents.MOVE, self._on_move)
        self._events.remove_listener(PointerEvents.RELEASE, self.end)
        self.controller._session_ended(self)
        logger.debug("drag_session_ended", extra={"column_key": self.key})

    def __enter__(self) -> DragSession:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.end()


class ResizeController:
    """
    Resizes columns while a drag session is active.

    ``newWidth = max(MIN_WIDTH, previousWidth + pointerDeltaPx)``; input for
    ``resize_locked`` columns is ignored.
    """

    def __init__(self, state: ColumnState, events: PointerEvents | None = None):
        self.state = state
        self.events = events or PointerEvents()
        self._session: DragSession | None = None

    @property
    def session(self) -> DragSession | None:
        return self._session

    def begin_drag(self, key: str) -> DragSession | None:
        """
        Start a drag session for ``key`` (resize-start gesture).

        Any session already active is ended first, so at most one set of
        listeners is ever registered.  Returns None for unknown or
        resize-locked keys.
        """
        spec = self.state.schema.get(key)
        if spec is None:
            logger.warning("column_resize_ignored", extra={"column_key": key, "reason": "unknown_key"})
            return None
        if spec.resize_locked:
            logger.info("column_resize_ignored", extra={"column_key": key, "reason": "locked"})
            return None
        if self._session is not None:
            self._session.end()
        self._session = DragSession(self, key, self.events)
        logger.debug("drag_session_started", extra={"column_key": key})
        return self._session

    def on_drag(self, key: str, pointer_delta_px: float) -> ControlOutcome:
        """Apply a pointer delta to ``key`` if a session for it is active."""
        if self._session is None or self._session.key != key:
            return ControlOutcome.NO_SESSION
        spec = self.state.schema.get(key)
        if spec is None:
            return ControlOutcome.UNKNOWN_KEY
        if spec.resize_locked:
            return ControlOutcome.LOCKED
        if not math.isfinite(pointer_delta_px):
            logger.warning(
                "column_resize_ignored",
                extra={"column_key": key, "reason": "non_finite_delta"},
            )
            return ControlOutcome.INVALID_WIDTH
        previous = self.state.width_of(key)
        committed = self.state.set_width(key, max(MIN_WIDTH, previous + pointer_delta_px))
        logger.debug(
            "column_resized",
            extra={"column_key": key, "previous_px": previous, "width_px": committed},
        )
        return ControlOutcome.APPLIED

    def teardown(self) -> None:
        """End any active session (component unmount)."""
        if self._session is not None:
            self._session.end()

    def _session_ended(self, session: DragSession) -> None:
        if self._session is session:
            self._session = None


# =========================================================================
# Visibility
# =========================================================================


class VisibilityController:
    """Flips column visibility from checkbox toggles."""

    def __init__(self, state: ColumnState):
        self.state = state

    def toggle(self, key: str) -> ControlOutcome:
        """
        Flip ``visible[key]``.

        A key missing from the visibility map starts from its column
        default.  Unknown keys and toggle-locked columns are no-ops.
        """
        spec = self.state.schema.get(key)
        if spec is None:
            logger.warning("column_toggle_ignored", extra={"column_key": key, "reason": "unknown_key"})
            return ControlOutcome.UNKNOWN_KEY
        if spec.toggle_locked:
            logger.info("column_toggle_ignored", extra={"column_key": key, "reason": "locked"})
            return ControlOutcome.LOCKED

        current = self.state.visible.get(key, spec.default_visible)
        self.state.set_visible(key, not current)
        logger.debug("column_toggled", extra={"column_key": key, "visible": not current})
        return ControlOutcome.APPLIED
