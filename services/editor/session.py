"""
EditSession: who owns the calendar currently being edited.

The session is an immutable value. Every change goes through one of the
transition functions below, which return a new value; callers swap the whole
record in a single assignment, so the ownership fields can never be observed
half-updated.
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional


class Ownership(Enum):
    NONE = "none"
    OWNED = "owned"
    VIEWING_SHARED = "viewing_shared"


class EditorPhase(Enum):
    BOOTSTRAPPING = "bootstrapping"
    EDITING = "editing"
    SAVE_PENDING = "save_pending"
    SAVE_FAILED = "save_failed"


class InvalidSessionState(ValueError):
    pass


@dataclass(frozen=True)
class EditSession:
    calendar_id: Optional[str] = None
    ownership: Ownership = Ownership.NONE
    original_calendar_id: Optional[str] = None
    is_initializing: bool = True

    def __post_init__(self):
        if self.ownership is Ownership.VIEWING_SHARED:
            if self.original_calendar_id is None or self.calendar_id is not None:
                raise InvalidSessionState(
                    "viewing_shared requires original_calendar_id and no calendar_id"
                )
        elif self.original_calendar_id is not None:
            raise InvalidSessionState(
                f"original_calendar_id is only valid while viewing_shared (got {self.ownership.value})"
            )
        if self.ownership is Ownership.OWNED and self.calendar_id is None:
            raise InvalidSessionState("owned session requires calendar_id")

    @property
    def is_shared(self) -> bool:
        return self.ownership is Ownership.VIEWING_SHARED

    def as_dict(self):
        return {
            "calendarId": self.calendar_id,
            "ownership": self.ownership.value,
            "originalCalendarId": self.original_calendar_id,
            "isInitializing": self.is_initializing,
        }


def bootstrapping() -> EditSession:
    return EditSession()


def owned(session: EditSession, calendar_id: str) -> EditSession:
    """The visitor's own record exists (loaded, instantiated from a template, or first saved)."""
    if not calendar_id:
        raise InvalidSessionState("owned session requires calendar_id")
    return replace(
        session,
        calendar_id=str(calendar_id),
        ownership=Ownership.OWNED,
        original_calendar_id=None,
    )


def viewing_shared(session: EditSession, original_calendar_id: str) -> EditSession:
    """Someone else's calendar is loaded read-only until the first edit."""
    if not original_calendar_id:
        raise InvalidSessionState("viewing_shared requires original_calendar_id")
    return replace(
        session,
        calendar_id=None,
        ownership=Ownership.VIEWING_SHARED,
        original_calendar_id=str(original_calendar_id),
    )


def copied(session: EditSession, new_calendar_id: str) -> EditSession:
    """Copy-on-write landed: adopt the copy and drop the reference to the original."""
    if not session.is_shared:
        raise InvalidSessionState(f"cannot copy a session that is {session.ownership.value}")
    return owned(session, new_calendar_id)


def ready(session: EditSession) -> EditSession:
    return replace(session, is_initializing=False)
