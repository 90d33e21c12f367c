"""
Tests for EditSession ownership transitions.
"""
import pytest

from services.editor import session as transitions
from services.editor.session import EditSession, InvalidSessionState, Ownership


def test_new_session_is_bootstrapping_and_unowned():
    s = transitions.bootstrapping()
    assert s.is_initializing is True
    assert s.ownership is Ownership.NONE
    assert s.calendar_id is None
    assert s.original_calendar_id is None


def test_shared_session_keeps_original_and_no_calendar_id():
    s = transitions.viewing_shared(transitions.bootstrapping(), "orig-1")
    assert s.ownership is Ownership.VIEWING_SHARED
    assert s.original_calendar_id == "orig-1"
    assert s.calendar_id is None


def test_copy_on_write_updates_all_ownership_fields_together():
    shared = transitions.viewing_shared(transitions.ready(transitions.bootstrapping()), "orig-1")
    after = transitions.copied(shared, "copy-9")

    assert (after.calendar_id, after.ownership, after.original_calendar_id) == ("copy-9", Ownership.OWNED, None)
    assert after.is_initializing is False
    # The previous value is untouched
    assert shared.ownership is Ownership.VIEWING_SHARED


def test_copy_requires_shared_session():
    owned = transitions.owned(transitions.bootstrapping(), "cal-1")
    with pytest.raises(InvalidSessionState):
        transitions.copied(owned, "copy-9")


@pytest.mark.parametrize("kwargs", [
    {"ownership": Ownership.VIEWING_SHARED},
    {"ownership": Ownership.VIEWING_SHARED, "original_calendar_id": "o", "calendar_id": "c"},
    {"ownership": Ownership.OWNED, "original_calendar_id": "o", "calendar_id": "c"},
    {"ownership": Ownership.OWNED},
    {"ownership": Ownership.NONE, "original_calendar_id": "o"},
])
def test_half_updated_combinations_are_rejected(kwargs):
    with pytest.raises(InvalidSessionState):
        EditSession(**kwargs)


def test_sessions_are_immutable():
    s = transitions.bootstrapping()
    with pytest.raises(AttributeError):
        s.calendar_id = "x"


def test_owned_requires_id():
    with pytest.raises(InvalidSessionState):
        transitions.owned(transitions.bootstrapping(), "")


def test_as_dict():
    s = transitions.ready(transitions.viewing_shared(transitions.bootstrapping(), "orig-1"))
    assert s.as_dict() == {
        "calendarId": None,
        "ownership": "viewing_shared",
        "originalCalendarId": "orig-1",
        "isInitializing": False,
    }
