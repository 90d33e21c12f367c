"""
SessionController: resolves how an editing visit starts and gates mutation
behind copy-on-write.

Visit resolution, in order:
1. calendar id -> own calendar (OWNED) or someone else's (VIEWING_SHARED)
2. template id -> new calendar instantiated from the template (OWNED)
3. nothing resolved -> backend-generated default configuration (NONE until first save)

Backend calls are blocking `requests` calls; they run off the event loop via
asyncio.to_thread and are awaited one at a time.
"""
import asyncio
import logging
from typing import Any, Dict, Optional

from services.editor import session as transitions
from services.editor.errors import CopyFailure, LoadFailure, TransportError
from services.editor.session import EditSession

logger = logging.getLogger(__name__)


class SessionController:

    def __init__(self, client):
        self.client = client
        self.session: EditSession = transitions.bootstrapping()
        self.configuration: Dict[str, Any] = {}
        self.name: Optional[str] = None
        self.svg: Optional[str] = None
        self._copy_task: Optional[asyncio.Task] = None

    async def _call(self, fn, *args):
        return await asyncio.to_thread(fn, *args)

    def _adopt_document(self, document: Dict[str, Any]) -> None:
        configuration = document.get("configuration")
        self.configuration = dict(configuration) if isinstance(configuration, dict) else {}
        self.name = document.get("name") or self.name
        self.svg = document.get("svg") or document.get("generatedSvg") or self.svg

    # ------------------------------------------------------------------
    # Bootstrap
    # ------------------------------------------------------------------
    async def load_from_reference(self, calendar_id: Optional[str] = None, template_id: Optional[str] = None) -> bool:
        """
        Resolve a calendar or template reference.
        Returns False when no reference was given; raises LoadFailure when one
        was given but could not be resolved.
        """
        if calendar_id:
            try:
                payload = await self._call(self.client.get_calendar, calendar_id)
            except TransportError as e:
                raise LoadFailure(f"Could not load calendar {calendar_id}: {e}") from e

            calendar = payload.get("calendar")
            if not isinstance(calendar, dict):
                raise LoadFailure(f"Calendar {calendar_id} response has no calendar")

            self._adopt_document(calendar)
            if payload.get("isOwnCalendar"):
                self.session = transitions.owned(self.session, calendar_id)
            else:
                self.session = transitions.viewing_shared(self.session, calendar_id)
            logger.info(
                f"[Session] Loaded calendar as {self.session.ownership.value}",
                extra={"calendar_id": calendar_id},
            )
            return True

        if template_id:
            try:
                payload = await self._call(self.client.create_from_template, template_id)
            except TransportError as e:
                raise LoadFailure(f"Could not instantiate template {template_id}: {e}") from e

            new_id = payload.get("id")
            if not new_id:
                raise LoadFailure(f"Template {template_id} response has no calendar id")

            self._adopt_document(payload)
            self.session = transitions.owned(self.session, new_id)
            logger.info(
                "[Session] Instantiated calendar from template",
                extra={"calendar_id": new_id, "template_id": template_id},
            )
            return True

        return False

    async def initialize_default(self) -> None:
        """Fetch a default configuration and SVG for a brand-new visit."""
        try:
            payload = await self._call(self.client.create_default)
        except TransportError as e:
            raise LoadFailure(f"Could not bootstrap a default calendar: {e}") from e
        self._adopt_document(payload)
        logger.info("[Session] Bootstrapped default calendar")

    async def start(self, calendar_id: Optional[str] = None, template_id: Optional[str] = None) -> EditSession:
        """
        Bootstrap the session, then allow mutations.
        A failed reference falls back to the default; a failed default leaves
        an empty configuration. Neither blocks editing.
        """
        resolved = False
        try:
            resolved = await self.load_from_reference(calendar_id, template_id)
        except LoadFailure as e:
            logger.warning(f"[Session] {e}; falling back to default calendar")

        if not resolved:
            try:
                await self.initialize_default()
            except LoadFailure as e:
                logger.error(f"[Session] {e}; starting with an empty configuration")

        self.session = transitions.ready(self.session)
        return self.session

    # ------------------------------------------------------------------
    # Mutation gate
    # ------------------------------------------------------------------
    async def begin_edit(self) -> EditSession:
        """
        Make sure the session owns what it is about to write.
        Copies a shared calendar into this session first; concurrent callers
        share a single copy request.

        Raises:
            CopyFailure: the copy did not happen; the session is still shared.
        """
        if not self.session.is_shared:
            return self.session

        if self._copy_task is None:
            self._copy_task = asyncio.ensure_future(self._copy_shared())
        task = self._copy_task
        try:
            return await asyncio.shield(task)
        finally:
            if task.done() and self._copy_task is task:
                self._copy_task = None

    async def _copy_shared(self) -> EditSession:
        original_id = self.session.original_calendar_id
        try:
            payload = await self._call(self.client.copy_to_session, original_id)
        except TransportError as e:
            raise CopyFailure(f"Could not copy calendar {original_id}: {e}") from e

        new_id = payload.get("id")
        if not new_id:
            raise CopyFailure(f"Copy of calendar {original_id} returned no id")

        self.session = transitions.copied(self.session, new_id)
        logger.info(
            f"[Session] Copied shared calendar {original_id} into this session",
            extra={"calendar_id": new_id},
        )
        return self.session

    def record_first_save(self, calendar_id: str) -> EditSession:
        """The first save of an unsaved session created the visitor's own record."""
        if self.session.calendar_id is None and not self.session.is_shared:
            self.session = transitions.owned(self.session, calendar_id)
            logger.info("[Session] First save created calendar", extra={"calendar_id": calendar_id})
        return self.session
