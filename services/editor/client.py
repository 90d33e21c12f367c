"""Session-calendar backend client.

Endpoints (relative to SESSION_CALENDAR_API_URL):
  POST /session-calendar/new                         -> {id, configuration, svg}
  POST /session-calendar/from-template/<templateId>  -> {id, configuration, svg}
  GET  /session-calendar/<id>                        -> {calendar, isOwnCalendar}
  POST /session-calendar/<id>/copy-to-session        -> {id, ...}
  PUT  /session-calendar/<id>/autosave               -> {svg, ...}
  POST /session-calendar/save                        -> {id}

Auth:
  X-Session-ID: <guest session id>
"""
import logging
import uuid
from typing import Any, Dict, Optional

import requests

import config
from constants import SESSION_HEADER
from services.editor.errors import TransportError

logger = logging.getLogger(__name__)


def new_session_id() -> str:
    return str(uuid.uuid4())


class SessionCalendarClient:
    """
    Blocking HTTP client. The editor calls it off the event loop.
    Every method returns the decoded JSON body or raises TransportError.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        session_id: Optional[str] = None,
        timeout: Optional[float] = None,
        http: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or config.SESSION_CALENDAR_API_URL).strip().rstrip("/")
        self.session_id = session_id or new_session_id()
        self.timeout = config.BACKEND_HTTP_TIMEOUT if timeout is None else timeout
        self.http = http or requests.Session()
        self.http.headers.update({
            SESSION_HEADER: self.session_id,
            "Accept": "application/json",
            "User-Agent": "calendar-editor-core/1.0",
        })

    def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            resp = self.http.request(method, url, json=json, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"{method} {path} failed: {e}") from e

        if resp.status_code >= 400:
            raise TransportError(
                f"{method} {path} returned HTTP {resp.status_code}",
                status_code=resp.status_code,
            )

        if not resp.content:
            return {}
        try:
            payload = resp.json()
        except ValueError as e:
            raise TransportError(f"{method} {path} returned a non-JSON body", status_code=resp.status_code) from e
        if not isinstance(payload, dict):
            raise TransportError(f"{method} {path} returned {type(payload).__name__}, expected an object")
        return payload

    def create_default(self) -> Dict[str, Any]:
        return self._request("POST", "/session-calendar/new")

    def create_from_template(self, template_id: str) -> Dict[str, Any]:
        return self._request("POST", f"/session-calendar/from-template/{template_id}")

    def get_calendar(self, calendar_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/session-calendar/{calendar_id}")

    def copy_to_session(self, calendar_id: str) -> Dict[str, Any]:
        return self._request("POST", f"/session-calendar/{calendar_id}/copy-to-session")

    def autosave(self, calendar_id: str, configuration: Dict[str, Any], name: Optional[str]) -> Dict[str, Any]:
        return self._request(
            "PUT",
            f"/session-calendar/{calendar_id}/autosave",
            json={"configuration": configuration, "name": name},
        )

    def save(self, configuration: Dict[str, Any], name: Optional[str]) -> Dict[str, Any]:
        return self._request(
            "POST",
            "/session-calendar/save",
            json={"configuration": configuration, "name": name},
        )

    def close(self):
        self.http.close()
