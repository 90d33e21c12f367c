"""
Tests for SessionController visit resolution and copy-on-write.
"""
import asyncio

import pytest

from services.editor.controller import SessionController
from services.editor.errors import CopyFailure, LoadFailure
from services.editor.session import Ownership


def run(coro):
    return asyncio.run(coro)


def test_own_calendar_loads_as_owned(fake_client):
    fake_client.add_calendar("cal-1", own=True, configuration={"theme": "mine"})
    controller = SessionController(fake_client)

    session = run(controller.start(calendar_id="cal-1"))

    assert session.ownership is Ownership.OWNED
    assert session.calendar_id == "cal-1"
    assert session.original_calendar_id is None
    assert session.is_initializing is False
    assert controller.configuration == {"theme": "mine"}
    assert controller.svg is not None
    assert fake_client.calls_named("create_default") == []


def test_someone_elses_calendar_loads_read_only(fake_client):
    fake_client.add_calendar("cal-2", own=False)
    controller = SessionController(fake_client)

    session = run(controller.start(calendar_id="cal-2"))

    assert session.ownership is Ownership.VIEWING_SHARED
    assert session.original_calendar_id == "cal-2"
    assert session.calendar_id is None
    assert fake_client.calls_named("copy_to_session") == []


def test_template_instantiation_is_owned_immediately(fake_client):
    fake_client.templates["tpl-1"] = {"theme": "holiday"}
    controller = SessionController(fake_client)

    session = run(controller.start(template_id="tpl-1"))

    assert session.ownership is Ownership.OWNED
    assert session.calendar_id.startswith("cal-")
    assert controller.configuration == {"theme": "holiday"}


def test_no_reference_bootstraps_default(fake_client):
    controller = SessionController(fake_client)

    session = run(controller.start())

    assert session.ownership is Ownership.NONE
    assert session.calendar_id is None
    assert controller.configuration == {"theme": "default"}
    assert len(fake_client.calls_named("create_default")) == 1


def test_load_from_reference_without_reference_resolves_nothing(fake_client):
    controller = SessionController(fake_client)
    assert run(controller.load_from_reference()) is False
    assert controller.session.is_initializing is True
    assert fake_client.calls == []


def test_unresolvable_reference_raises_load_failure(fake_client):
    controller = SessionController(fake_client)
    with pytest.raises(LoadFailure):
        run(controller.load_from_reference(calendar_id="missing"))


def test_failed_reference_falls_back_to_default(fake_client):
    controller = SessionController(fake_client)

    session = run(controller.start(calendar_id="missing"))

    assert session.ownership is Ownership.NONE
    assert session.is_initializing is False
    assert len(fake_client.calls_named("create_default")) == 1


def test_failed_default_still_allows_editing(fake_client):
    fake_client.fail.add("create_default")
    controller = SessionController(fake_client)

    session = run(controller.start())

    assert session.is_initializing is False
    assert controller.configuration == {}


def test_begin_edit_copies_shared_calendar(fake_client):
    fake_client.add_calendar("cal-2", own=False)
    controller = SessionController(fake_client)

    async def scenario():
        await controller.start(calendar_id="cal-2")
        return await controller.begin_edit()

    session = run(scenario())

    assert session.ownership is Ownership.OWNED
    assert session.calendar_id.startswith("copy-")
    assert session.original_calendar_id is None
    assert fake_client.calls_named("copy_to_session") == [{"calendar_id": "cal-2"}]


def test_begin_edit_is_a_no_op_when_owned(fake_client):
    fake_client.add_calendar("cal-1", own=True)
    controller = SessionController(fake_client)

    async def scenario():
        await controller.start(calendar_id="cal-1")
        return await controller.begin_edit()

    assert run(scenario()).calendar_id == "cal-1"
    assert fake_client.calls_named("copy_to_session") == []


def test_concurrent_begin_edit_shares_one_copy(fake_client):
    fake_client.add_calendar("cal-2", own=False)
    controller = SessionController(fake_client)

    async def scenario():
        await controller.start(calendar_id="cal-2")
        return await asyncio.gather(controller.begin_edit(), controller.begin_edit())

    first, second = run(scenario())

    assert first == second
    assert len(fake_client.calls_named("copy_to_session")) == 1


def test_copy_failure_leaves_session_shared(fake_client):
    fake_client.add_calendar("cal-2", own=False)
    fake_client.fail.add("copy_to_session")
    controller = SessionController(fake_client)

    async def scenario():
        await controller.start(calendar_id="cal-2")
        with pytest.raises(CopyFailure):
            await controller.begin_edit()

    run(scenario())

    assert controller.session.ownership is Ownership.VIEWING_SHARED
    assert controller.session.original_calendar_id == "cal-2"
    assert controller.session.calendar_id is None


def test_copy_is_retried_after_failure(fake_client):
    fake_client.add_calendar("cal-2", own=False)
    fake_client.fail.add("copy_to_session")
    controller = SessionController(fake_client)

    async def scenario():
        await controller.start(calendar_id="cal-2")
        with pytest.raises(CopyFailure):
            await controller.begin_edit()
        fake_client.fail.clear()
        return await controller.begin_edit()

    assert run(scenario()).ownership is Ownership.OWNED
    assert len(fake_client.calls_named("copy_to_session")) == 2


def test_record_first_save_adopts_new_id(fake_client):
    controller = SessionController(fake_client)
    run(controller.start())

    session = controller.record_first_save("cal-77")

    assert session.ownership is Ownership.OWNED
    assert session.calendar_id == "cal-77"
    # Later calls do not replace the id
    assert controller.record_first_save("cal-78").calendar_id == "cal-77"
