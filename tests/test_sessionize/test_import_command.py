"""Tests for the import_sessionize management command."""

from io import StringIO
from unittest.mock import patch

import pytest
from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.core.management.base import CommandError

from django_multitrack.events.models import Event
from django_multitrack.sessionize.exceptions import ImportInProgressError, ScheduleImportError
from django_multitrack.sessionize.sync import ImportResult

_SERVICE = "django_multitrack.sessionize.management.commands.import_sessionize.SessionizeImportService"


def _make_event(code="cmd1", sessionize_id="abc123xy"):
    user = get_user_model().objects.create_user(username=f"owner-{code}")
    return Event.objects.create(owner=user, name="Command Test Event", code=code, sessionize_id=sessionize_id)


# ---------------------------------------------------------------------------
# Error paths
# ---------------------------------------------------------------------------


@pytest.mark.django_db
def test_command_raises_when_event_not_found():
    with pytest.raises(CommandError, match="Event with code 'nope' not found"):
        call_command("import_sessionize", event="nope")


@pytest.mark.django_db
def test_command_raises_when_no_source_id():
    _make_event(sessionize_id="")

    with pytest.raises(CommandError, match="has no sessionize_id configured"):
        call_command("import_sessionize", event="cmd1")


@pytest.mark.django_db
@patch(_SERVICE)
def test_command_reports_failed_stage(mock_service_cls):
    _make_event()
    mock_service_cls.return_value.reconcile.side_effect = ScheduleImportError(
        "create session: disk full", stage="create session"
    )

    with pytest.raises(CommandError, match="failed at stage 'create session'"):
        call_command("import_sessionize", event="cmd1")


@pytest.mark.django_db
@patch(_SERVICE)
def test_command_reports_lock_contention(mock_service_cls):
    _make_event()
    mock_service_cls.return_value.reconcile.side_effect = ImportInProgressError("already running")

    with pytest.raises(CommandError, match="stage 'lock'"):
        call_command("import_sessionize", event="cmd1")


# ---------------------------------------------------------------------------
# Success paths
# ---------------------------------------------------------------------------


@pytest.mark.django_db
@patch(_SERVICE)
def test_command_imports_with_event_source(mock_service_cls):
    event = _make_event()
    mock_service_cls.return_value.reconcile.return_value = ImportResult(
        rooms_created=2, sessions_created=5, speakers_created=4
    )
    out = StringIO()

    call_command("import_sessionize", event="cmd1", stdout=out)

    mock_service_cls.assert_called_once_with(event)
    mock_service_cls.return_value.reconcile.assert_called_once_with(None, atomic=None)
    assert "Imported 2 rooms, 5 sessions, 4 speakers" in out.getvalue()
    assert "skipped" not in out.getvalue()


@pytest.mark.django_db
@patch(_SERVICE)
def test_command_passes_source_id_and_atomic(mock_service_cls):
    _make_event(sessionize_id="")
    mock_service_cls.return_value.reconcile.return_value = ImportResult()

    call_command("import_sessionize", event="cmd1", source_id="jl4ktls0", atomic=True, stdout=StringIO())

    mock_service_cls.return_value.reconcile.assert_called_once_with("jl4ktls0", atomic=True)


@pytest.mark.django_db
@patch(_SERVICE)
def test_command_reports_skips(mock_service_cls):
    _make_event()
    mock_service_cls.return_value.reconcile.return_value = ImportResult(
        rooms_created=1, sessions_created=1, skipped_sessions=2, skipped_speaker_links=1
    )
    out = StringIO()

    call_command("import_sessionize", event="cmd1", stdout=out)

    assert "(2 sessions and 1 speaker links skipped)" in out.getvalue()
