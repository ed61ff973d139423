"""Tests for the EventAdmin "Import schedule from Sessionize" action."""

from unittest.mock import patch

import pytest
from django.contrib.auth import get_user_model
from django.contrib.messages import get_messages
from django.urls import reverse

from django_multitrack.events.models import Event
from django_multitrack.sessionize.exceptions import ScheduleImportError
from django_multitrack.sessionize.sync import ImportResult

_IMPORT = "django_multitrack.events.admin.import_sessionize_data"


def _make_event(name, code, sessionize_id="abc123xy"):
    user, _ = get_user_model().objects.get_or_create(username="owner")
    return Event.objects.create(owner=user, name=name, code=code, sessionize_id=sessionize_id)


def _run_action(client, *events):
    url = reverse("admin:multitrack_events_event_changelist")
    response = client.post(
        url,
        {"action": "import_from_sessionize", "_selected_action": [event.pk for event in events]},
    )
    return response, [(m.level_tag, m.message) for m in get_messages(response.wsgi_request)]


@pytest.mark.django_db
@patch(_IMPORT)
def test_action_imports_selected_events(mock_import, admin_client):
    event = _make_event("PyCon", "pyc1")
    mock_import.return_value = ImportResult(rooms_created=3, sessions_created=12, speakers_created=9)

    response, messages = _run_action(admin_client, event)

    assert response.status_code == 302
    mock_import.assert_called_once_with(event)
    assert messages == [("success", "PyCon: imported 3 rooms, 12 sessions, 9 speakers.")]


@pytest.mark.django_db
@patch(_IMPORT)
def test_action_skips_events_without_sessionize_id(mock_import, admin_client):
    event = _make_event("Meetup", "meet", sessionize_id="")

    _, messages = _run_action(admin_client, event)

    mock_import.assert_not_called()
    assert messages == [("warning", "Meetup: no Sessionize ID configured.")]


@pytest.mark.django_db
@patch(_IMPORT)
def test_action_reports_failure_and_continues(mock_import, admin_client):
    broken = _make_event("Broken", "brk1")
    working = _make_event("Working", "wrk1")

    def fake_import(event):
        if event == broken:
            raise ScheduleImportError("fetch: HTTP 404", stage="fetch")
        return ImportResult(rooms_created=1)

    mock_import.side_effect = fake_import

    _, messages = _run_action(admin_client, broken, working)

    assert mock_import.call_count == 2
    assert set(messages) == {
        ("error", "Broken: import failed at stage 'fetch': fetch: HTTP 404"),
        ("success", "Working: imported 1 rooms, 0 sessions, 0 speakers."),
    }
