"""
EditorWorkspace: everything one calendar-editing view binds to.

Wires the SessionController, the AutosaveScheduler and the preview geometry
together. Every edit method mutates local state and then notifies the
scheduler; nothing here talks to the backend directly.
"""
from collections import deque
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from constants import DEFAULT_CALENDAR_NAME
from services.editor import events as event_ops
from services.editor.autosave import AutosaveScheduler
from services.editor.client import SessionCalendarClient
from services.editor.controller import SessionController
from services.editor.errors import CopyFailure, EditorError
from services.editor.events import CustomEvent
from services.editor.session import EditSession, EditorPhase
from services.printing.preview import Rulers, clamp_zoom, ruler_ticks, step_zoom, zoom_to_fit
from services.printing.print_layout import wrap_svg_for_print


INITIAL_ZOOM = 0.5
MAX_NOTICES = 20


@dataclass(frozen=True)
class Notice:
    """A transient, non-blocking message for the view (toast)."""
    level: str
    message: str


class EditorWorkspace:

    def __init__(self, client=None, debounce_seconds: Optional[float] = None):
        self.client = client or SessionCalendarClient()
        self.controller = SessionController(self.client)
        self.events: List[CustomEvent] = []
        self.current_svg: Optional[str] = None
        self.zoom_level = clamp_zoom(INITIAL_ZOOM)
        self.notices = deque(maxlen=MAX_NOTICES)
        self.autosave = AutosaveScheduler(
            self.controller,
            self.client,
            snapshot=self.snapshot,
            on_rendered=self._show_svg,
            on_error=self._report_failure,
            delay=debounce_seconds,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    async def open(self, calendar_id: Optional[str] = None, template_id: Optional[str] = None,
                   available_width: Optional[float] = None) -> EditSession:
        if available_width:
            self.reset_zoom(available_width)
        session = await self.controller.start(calendar_id=calendar_id, template_id=template_id)
        self.events = event_ops.events_from_configuration(self.controller.configuration)
        self._show_svg(self.controller.svg)
        if session.is_shared:
            self._push_notice("info", "Viewing a shared calendar. Your first edit saves a copy of your own.")
        return session

    async def close(self) -> None:
        self.autosave.stop()
        await self.autosave.wait_idle()

    # ------------------------------------------------------------------
    # State exposed to the view
    # ------------------------------------------------------------------
    @property
    def session(self) -> EditSession:
        return self.controller.session

    @property
    def phase(self) -> EditorPhase:
        return self.autosave.phase

    @property
    def name(self) -> str:
        return self.controller.name or DEFAULT_CALENDAR_NAME

    @property
    def configuration(self) -> Dict[str, Any]:
        return event_ops.build_configuration(self.controller.configuration, self.events)

    @property
    def rulers(self) -> Rulers:
        return ruler_ticks(self.zoom_level)

    def snapshot(self):
        return self.configuration, self.name

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------
    def update_configuration(self, **changes) -> None:
        derived = event_ops.DERIVED_KEYS.intersection(changes)
        if derived:
            raise ValueError(f"{sorted(derived)} are built from the event list and cannot be set directly")
        self.controller.configuration.update(changes)
        self.autosave.notify_mutation()

    def rename(self, name: str) -> None:
        self.controller.name = name
        self.autosave.notify_mutation()

    def add_event(self, date: str, emoji: str = "", title: str = "", show_title: bool = False,
                  display_settings: Optional[Dict[str, Any]] = None) -> CustomEvent:
        event = CustomEvent(
            date=date,
            emoji=emoji,
            title=title,
            show_title=show_title,
            display_settings=dict(display_settings or {}),
        )
        self.events.append(event)
        self.autosave.notify_mutation()
        return event

    def update_event(self, event_id: str, **changes) -> CustomEvent:
        event = event_ops.update_event(self.events, event_id, **changes)
        self.autosave.notify_mutation()
        return event

    def remove_event(self, event_id: str) -> bool:
        removed = event_ops.remove_event(self.events, event_id)
        if removed:
            self.autosave.notify_mutation()
        return removed

    def add_holiday_set(self, holidays: Iterable[Dict[str, Any]]) -> List[CustomEvent]:
        added = event_ops.merge_holiday_set(self.events, holidays)
        if added:
            self.autosave.notify_mutation()
        return added

    async def save_now(self) -> None:
        await self.autosave.flush()

    # ------------------------------------------------------------------
    # Preview
    # ------------------------------------------------------------------
    def zoom_in(self) -> float:
        self.zoom_level = step_zoom(self.zoom_level, 1)
        return self.zoom_level

    def zoom_out(self) -> float:
        self.zoom_level = step_zoom(self.zoom_level, -1)
        return self.zoom_level

    def reset_zoom(self, available_width: float) -> float:
        self.zoom_level = zoom_to_fit(available_width)
        return self.zoom_level

    # ------------------------------------------------------------------
    # Callbacks
    # ------------------------------------------------------------------
    def _show_svg(self, svg: Optional[str]) -> None:
        if svg:
            self.current_svg = wrap_svg_for_print(svg)

    def _report_failure(self, error: EditorError) -> None:
        if isinstance(error, CopyFailure):
            self._push_notice("error", "Could not copy this calendar for editing. Your next change will try again.")
        else:
            self._push_notice("error", "Changes could not be saved. They will be saved with your next edit.")

    def _push_notice(self, level: str, message: str) -> None:
        self.notices.append(Notice(level=level, message=message))
