"""
Custom events and the configuration maps derived from them.

The event list is the source of truth. `customDates` and `eventTitles` are
rebuilt from it every time a configuration is sent to the renderer and are
never edited by hand.
"""
import copy
import logging
import uuid
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Iterable, List, Optional

from constants import CONFIG_EVENTS_KEY, CONFIG_CUSTOM_DATES_KEY, CONFIG_EVENT_TITLES_KEY

logger = logging.getLogger(__name__)

DERIVED_KEYS = frozenset({CONFIG_EVENTS_KEY, CONFIG_CUSTOM_DATES_KEY, CONFIG_EVENT_TITLES_KEY})


def _new_event_id() -> str:
    return uuid.uuid4().hex


@dataclass
class CustomEvent:
    date: str  # "YYYY-MM-DD"
    emoji: str = ""
    title: str = ""
    show_title: bool = False
    display_settings: Dict[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=_new_event_id)

    def to_dict(self):
        return {
            "id": self.id,
            "date": self.date,
            "emoji": self.emoji,
            "title": self.title,
            "showTitle": self.show_title,
            "displaySettings": copy.deepcopy(self.display_settings),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CustomEvent":
        if not data.get("date"):
            raise ValueError(f"Event is missing a date: {data!r}")
        return cls(
            date=str(data["date"]),
            emoji=data.get("emoji") or "",
            title=data.get("title") or "",
            show_title=bool(data.get("showTitle", False)),
            display_settings=dict(data.get("displaySettings") or {}),
            id=str(data.get("id") or _new_event_id()),
        )


def events_from_configuration(configuration: Optional[Dict[str, Any]]) -> List[CustomEvent]:
    """Events stored in a loaded configuration. Malformed entries are dropped with a warning."""
    events = []
    for item in (configuration or {}).get(CONFIG_EVENTS_KEY) or []:
        try:
            events.append(CustomEvent.from_dict(item))
        except (ValueError, TypeError, AttributeError) as e:
            logger.warning(f"[Events] Skipping malformed event {item!r}: {e}")
    return events


def build_custom_dates(events: Iterable[CustomEvent]) -> Dict[str, Dict[str, Any]]:
    """date -> {emoji, displaySettings}. A later event on the same date wins."""
    return {
        e.date: {"emoji": e.emoji, "displaySettings": copy.deepcopy(e.display_settings)}
        for e in events
    }


def build_event_titles(events: Iterable[CustomEvent]) -> Dict[str, str]:
    """date -> title, only for events that opt into title display."""
    return {e.date: e.title for e in events if e.show_title and e.title}


def build_configuration(base: Optional[Dict[str, Any]], events: List[CustomEvent]) -> Dict[str, Any]:
    """
    Full configuration for a save/render request.
    Returns a new dict; `base` is left untouched.
    """
    configuration = copy.deepcopy(base or {})
    configuration[CONFIG_EVENTS_KEY] = [e.to_dict() for e in events]
    configuration[CONFIG_CUSTOM_DATES_KEY] = build_custom_dates(events)
    configuration[CONFIG_EVENT_TITLES_KEY] = build_event_titles(events)
    return configuration


def find_event(events: List[CustomEvent], event_id: str) -> Optional[CustomEvent]:
    for event in events:
        if event.id == event_id:
            return event
    return None


def update_event(events: List[CustomEvent], event_id: str, **changes) -> CustomEvent:
    """Mutate an event in place. Raises KeyError for an unknown id."""
    event = find_event(events, event_id)
    if event is None:
        raise KeyError(event_id)
    editable = {f.name for f in fields(CustomEvent)} - {"id"}
    for name in changes:
        if name not in editable:
            raise AttributeError(f"CustomEvent has no editable field '{name}'")
    for name, value in changes.items():
        setattr(event, name, value)
    return event


def remove_event(events: List[CustomEvent], event_id: str) -> bool:
    for i, event in enumerate(events):
        if event.id == event_id:
            del events[i]
            return True
    return False


def merge_holiday_set(events: List[CustomEvent], holidays: Iterable[Dict[str, Any]]) -> List[CustomEvent]:
    """
    Append holiday events to `events`, skipping any whose exact (date, title)
    is already present. Duplicates inside `holidays` itself are skipped too.
    The whole set is parsed first; a malformed entry raises ValueError and
    leaves `events` unchanged.

    Returns the events that were added.
    """
    parsed = [CustomEvent.from_dict(item) for item in holidays]

    seen = {(e.date, e.title) for e in events}
    added = []
    for holiday in parsed:
        key = (holiday.date, holiday.title)
        if key in seen:
            continue
        seen.add(key)
        events.append(holiday)
        added.append(holiday)
    return added
