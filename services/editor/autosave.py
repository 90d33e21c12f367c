"""
AutosaveScheduler: turns a burst of edits into one settled save.

Rules:
- notify_mutation() is ignored while the session is bootstrapping.
- Each notification restarts the debounce timer; only the end of a burst saves.
- At most one save is in flight. A burst that settles during a save queues a
  single follow-up, which reads the configuration when it is sent.
- Failures are logged and reported; nothing retries on a timer. The next edit
  saves again.
"""
import asyncio
import logging
from typing import Any, Callable, Dict, Optional, Tuple

import config
from services.editor.errors import CopyFailure, EditorError, SaveFailure, TransportError
from services.editor.session import EditorPhase

logger = logging.getLogger(__name__)

Snapshot = Callable[[], Tuple[Dict[str, Any], Optional[str]]]


class AutosaveScheduler:

    def __init__(
        self,
        controller,
        client,
        snapshot: Snapshot,
        on_rendered: Optional[Callable[[str], None]] = None,
        on_error: Optional[Callable[[EditorError], None]] = None,
        delay: Optional[float] = None,
    ):
        self.controller = controller
        self.client = client
        self.snapshot = snapshot
        self.on_rendered = on_rendered
        self.on_error = on_error
        self.delay = config.AUTOSAVE_DEBOUNCE_SECONDS if delay is None else delay

        self._timer: Optional[asyncio.TimerHandle] = None
        self._task: Optional[asyncio.Task] = None
        self._in_flight = False
        self._follow_up = False
        self._failed = False
        self._stopped = False

        self.last_error: Optional[EditorError] = None
        self.saves_completed = 0

    @property
    def phase(self) -> EditorPhase:
        if self.controller.session.is_initializing:
            return EditorPhase.BOOTSTRAPPING
        if self._in_flight:
            return EditorPhase.SAVE_PENDING
        if self._failed:
            return EditorPhase.SAVE_FAILED
        return EditorPhase.EDITING

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def timer_armed(self) -> bool:
        return self._timer is not None

    # ------------------------------------------------------------------
    # Triggers
    # ------------------------------------------------------------------
    def notify_mutation(self) -> None:
        """Called on every configuration or event-list change. Must run on the event loop."""
        if self._stopped or self.controller.session.is_initializing:
            return
        self._cancel_timer()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.delay, self._on_settled)

    async def flush(self) -> None:
        """Save now instead of waiting for the debounce, then wait for the save chain."""
        if self._stopped or self.controller.session.is_initializing:
            return
        self._cancel_timer()
        self._dispatch()
        await self.wait_idle()

    async def wait_idle(self) -> None:
        while self._task is not None:
            await asyncio.shield(self._task)

    def stop(self) -> None:
        """Teardown: no more saves after the in-flight one (if any) finishes."""
        self._stopped = True
        self._follow_up = False
        self._cancel_timer()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_settled(self) -> None:
        self._timer = None
        self._dispatch()

    def _dispatch(self) -> None:
        if self._in_flight:
            self._follow_up = True
            return
        self._in_flight = True
        self._task = asyncio.get_running_loop().create_task(self._drain())

    async def _drain(self) -> None:
        try:
            while True:
                try:
                    await self._save_once()
                except Exception as e:
                    logger.exception("[Autosave] Unexpected error while saving")
                    self._record_failure(SaveFailure(f"Autosave failed: {e}"))
                if self._stopped or not self._follow_up:
                    break
                self._follow_up = False
        finally:
            self._follow_up = False
            self._in_flight = False
            self._task = None

    async def _save_once(self) -> None:
        try:
            await self.controller.begin_edit()
        except CopyFailure as e:
            self._record_failure(e)
            return

        # Read state at send time, not at the time the save was queued
        configuration, name = self.snapshot()
        session = self.controller.session

        try:
            payload = await self._send(session.calendar_id, configuration, name)
        except SaveFailure as e:
            self._record_failure(e)
            return

        self._failed = False
        self.last_error = None
        self.saves_completed += 1

        svg = payload.get("svg")
        if svg and self.on_rendered is not None:
            self.on_rendered(svg)
        logger.debug("[Autosave] Saved", extra={"calendar_id": self.controller.session.calendar_id})

    async def _send(self, calendar_id: Optional[str], configuration, name) -> Dict[str, Any]:
        try:
            if calendar_id:
                return await asyncio.to_thread(self.client.autosave, calendar_id, configuration, name)

            payload = await asyncio.to_thread(self.client.save, configuration, name)
        except TransportError as e:
            raise SaveFailure(f"Autosave failed: {e}") from e

        new_id = payload.get("id")
        if not new_id:
            raise SaveFailure("First save response has no calendar id")
        self.controller.record_first_save(new_id)
        return payload

    def _record_failure(self, error: EditorError) -> None:
        self._failed = True
        self.last_error = error
        logger.warning(
            f"[Autosave] {error}",
            extra={"calendar_id": self.controller.session.calendar_id},
        )
        if self.on_error is not None:
            self.on_error(error)
