"""
Edit-session failures.

None of these are fatal to the editor: each one means a single operation did
not complete and the session is left in a state editing can continue from.
"""
from typing import Optional


class EditorError(Exception):
    """Base class for edit-session failures."""


class TransportError(EditorError):
    """The session-calendar backend could not be reached or answered with an error."""
    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class LoadFailure(EditorError):
    """A calendar/template reference could not be resolved. Recovered by bootstrapping a default."""


class CopyFailure(EditorError):
    """Copy-on-write of a shared calendar failed. The pending save is aborted."""


class SaveFailure(EditorError):
    """An autosave request failed. The next mutation retries."""
