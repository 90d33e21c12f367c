"""
Pytest fixtures for the calendar editor core.

Provides the Flask app/client and a scripted in-memory stand-in for the
session-calendar backend.
"""
import os
import asyncio
import copy
import threading
import time

import pytest

# Set test environment before importing app/config
os.environ['FLASK_ENV'] = 'testing'
os.environ['APP_STAGE'] = 'test'
os.environ['SECRET_KEY'] = 'test-secret-key'
os.environ['SESSION_CALENDAR_API_URL'] = 'http://backend.test/api'

from services.editor.errors import TransportError  # noqa: E402

SAMPLE_SVG = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<svg xmlns="http://www.w3.org/2000/svg" width="1000" height="700" viewBox="0 0 1000 700">'
    '<rect x="0" y="0" width="1000" height="700" fill="#fafafa"/>'
    '<text x="10" y="20">2026</text>'
    '</svg>'
)


class FakeSessionCalendarClient:
    """
    Behaves like SessionCalendarClient against a scripted backend.

    - `fail`: method names that raise TransportError
    - `gate`: when set to a threading.Event, save/autosave block until it is set
    - `max_active_saves`: highest number of save requests seen at the same time
    """

    def __init__(self):
        self.calls = []
        self.fail = set()
        self.gate = None
        self.calendars = {}
        self.templates = {}
        self.default = {"id": "draft-1", "configuration": {"theme": "default"}, "svg": SAMPLE_SVG}
        self.active_saves = 0
        self.max_active_saves = 0
        self._lock = threading.Lock()
        self._next_id = 100

    # Scripting helpers ------------------------------------------------
    def add_calendar(self, calendar_id, own, configuration=None, name="Family Calendar"):
        self.calendars[calendar_id] = {
            "calendar": {
                "id": calendar_id,
                "name": name,
                "configuration": configuration or {"theme": "shared"},
                "generatedSvg": SAMPLE_SVG,
            },
            "isOwnCalendar": own,
        }

    def calls_named(self, *names):
        with self._lock:
            return [args for name, args in self.calls if name in names]

    def _new_id(self, prefix):
        with self._lock:
            self._next_id += 1
            return f"{prefix}-{self._next_id}"

    def _record(self, call_name, **args):
        with self._lock:
            self.calls.append((call_name, copy.deepcopy(args)))
        if call_name in self.fail:
            raise TransportError(f"{call_name} failed", status_code=503)

    def _saving(self):
        with self._lock:
            self.active_saves += 1
            self.max_active_saves = max(self.max_active_saves, self.active_saves)
        try:
            if self.gate is not None:
                self.gate.wait(timeout=5)
        finally:
            with self._lock:
                self.active_saves -= 1

    # Client surface -----------------------------------------------------
    def create_default(self):
        self._record("create_default")
        return copy.deepcopy(self.default)

    def create_from_template(self, template_id):
        self._record("create_from_template", template_id=template_id)
        if template_id not in self.templates:
            raise TransportError("Template not found", status_code=404)
        return {"id": self._new_id("cal"), "configuration": copy.deepcopy(self.templates[template_id]), "svg": SAMPLE_SVG}

    def get_calendar(self, calendar_id):
        self._record("get_calendar", calendar_id=calendar_id)
        if calendar_id not in self.calendars:
            raise TransportError("Calendar not found", status_code=404)
        return copy.deepcopy(self.calendars[calendar_id])

    def copy_to_session(self, calendar_id):
        self._record("copy_to_session", calendar_id=calendar_id)
        return {"id": self._new_id("copy"), "configuration": {}}

    def save(self, configuration, name):
        self._record("save", configuration=configuration, name=name)
        self._saving()
        return {"id": self._new_id("cal")}

    def autosave(self, calendar_id, configuration, name):
        self._record("autosave", calendar_id=calendar_id, configuration=configuration, name=name)
        self._saving()
        return {"success": True, "id": calendar_id, "svg": SAMPLE_SVG.replace("2026", configuration.get("theme", "2026"))}


@pytest.fixture
def fake_client():
    return FakeSessionCalendarClient()


async def wait_for(predicate, timeout=3.0):
    """Poll `predicate` on the event loop until it holds."""
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError("condition not reached before timeout")
        await asyncio.sleep(0.005)


async def settle(scheduler, timeout=3.0):
    """Wait until no debounce timer is armed and no save is in flight."""
    await wait_for(lambda: not scheduler.timer_armed and not scheduler.in_flight, timeout)


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    from app import create_app
    flask_app = create_app({'TESTING': True, 'RATELIMIT_ENABLED': False})
    return flask_app


@pytest.fixture(scope='function')
def client(app):
    """Create a test client for the app."""
    return app.test_client()
