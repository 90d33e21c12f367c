"""
Tests for the EditorWorkspace surface: edits, derived keys, zoom.

Edits arm the autosave timer on the running loop, so each test runs its
edits inside one event loop and closes the workspace before it ends.
"""
import asyncio

import pytest

from services.editor.workspace import EditorWorkspace


@pytest.fixture
def workspace(fake_client):
    return EditorWorkspace(client=fake_client, debounce_seconds=30)


def run_open(ws, edits):
    async def scenario():
        await ws.open(available_width=1200)
        try:
            return edits(ws)
        finally:
            await ws.close()
    return asyncio.run(scenario())


def test_open_sets_zoom_and_preview(workspace):
    run_open(workspace, lambda ws: None)

    assert workspace.zoom_level == pytest.approx(1200 / 3500)
    assert workspace.current_svg.startswith('<?xml')
    assert 'width="3500"' in workspace.current_svg
    assert workspace.name == "Untitled Calendar"
    assert workspace.session.is_initializing is False


def test_derived_keys_cannot_be_set_directly(workspace):
    def edits(ws):
        with pytest.raises(ValueError):
            ws.update_configuration(customDates={})
        with pytest.raises(ValueError):
            ws.update_configuration(theme="dark", eventTitles={})
        return ws.autosave.timer_armed

    assert run_open(workspace, edits) is False
    assert workspace.configuration["theme"] == "default"


def test_event_edits_flow_into_configuration(workspace):
    snapshots = []

    def edits(ws):
        event = ws.add_event("2026-10-31", emoji="🎃", title="Halloween")
        snapshots.append(ws.configuration)
        ws.update_event(event.id, show_title=True)
        snapshots.append(ws.configuration)
        ws.remove_event(event.id)
        snapshots.append(ws.configuration)

    run_open(workspace, edits)

    added, titled, removed = snapshots
    assert added["eventTitles"] == {}
    assert added["customDates"]["2026-10-31"]["emoji"] == "🎃"
    assert titled["eventTitles"] == {"2026-10-31": "Halloween"}
    assert removed["customDates"] == {}


def test_holiday_set_adds_only_new_dates(workspace):
    holidays = [
        {"date": "2026-01-01", "title": "New Year's Day", "emoji": "🎉"},
        {"date": "2026-12-25", "title": "Christmas", "emoji": "🎄"},
    ]

    first, second = run_open(
        workspace,
        lambda ws: (ws.add_holiday_set(holidays), ws.add_holiday_set(holidays)),
    )

    assert len(first) == 2
    assert second == []
    assert len(workspace.events) == 2


def test_zoom_steps_and_reset(workspace):
    workspace.reset_zoom(1750)
    assert workspace.zoom_level == pytest.approx(0.5)

    assert workspace.zoom_in() == pytest.approx(0.6)
    assert workspace.zoom_out() == pytest.approx(0.5)

    for _ in range(10):
        workspace.zoom_out()
    assert workspace.zoom_level == 0.15
    assert len(workspace.rulers.bottom) == 35
    assert workspace.rulers.bottom[0].length_px == pytest.approx(15)


def test_rejected_holiday_set_adds_nothing_and_schedules_nothing(workspace):
    def edits(ws):
        with pytest.raises(ValueError):
            ws.add_holiday_set([
                {"date": "2026-12-25", "title": "Christmas"},
                {"title": "No date"},
            ])
        return ws.autosave.timer_armed

    assert run_open(workspace, edits) is False
    assert workspace.events == []
