from datetime import UTC, datetime, timedelta

import pytest
from django.contrib.auth import get_user_model

from django_multitrack.events.models import Event
from django_multitrack.schedule.models import Room, Session, SessionSpeaker, Source, Speaker
from django_multitrack.schedule.repositories import ScheduleRepository

_START = datetime(2026, 5, 14, 9, 0, tzinfo=UTC)


def _make_event(code="evt1"):
    user, _ = get_user_model().objects.get_or_create(username="owner")
    return Event.objects.create(owner=user, name="Test Event", code=code)


def _create_session(repository, room, source_session_id="s1"):
    return repository.create_session(
        room.pk,
        source_session_id=source_session_id,
        title="Talk",
        description="",
        start_time=_START,
        end_time=_START + timedelta(hours=1),
    )


@pytest.mark.django_db
def test_create_room_defaults_to_sessionize_source():
    event = _make_event()

    room = ScheduleRepository().create_room(event, name="Hall A", source_room_id=7)

    assert room.event == event
    assert room.source == Source.SESSIONIZE
    assert room.source_room_id == 7


@pytest.mark.django_db
def test_create_session_and_speaker():
    repository = ScheduleRepository()
    event = _make_event()
    room = repository.create_room(event, name="Hall A", source_room_id=7)

    session = _create_session(repository, room)
    speaker = repository.create_speaker(event, source_speaker_id="sp-1", full_name="Ada Lovelace")

    assert session.room == room
    assert session.source == Source.SESSIONIZE
    assert speaker.source == Source.SESSIONIZE
    assert list(repository.list_sessions(event)) == [session]
    assert list(repository.list_speakers(event)) == [speaker]


@pytest.mark.django_db
def test_create_session_speaker_ignores_existing_link():
    repository = ScheduleRepository()
    event = _make_event()
    room = repository.create_room(event, name="Hall A", source_room_id=7)
    session = _create_session(repository, room)
    speaker = repository.create_speaker(event, source_speaker_id="sp-1")

    repository.create_session_speaker(session.pk, speaker.pk)
    repository.create_session_speaker(session.pk, speaker.pk)

    assert SessionSpeaker.objects.filter(session=session, speaker=speaker).count() == 1


@pytest.mark.django_db
def test_delete_rooms_counts_rooms_only_and_cascades():
    repository = ScheduleRepository()
    event = _make_event()
    other = _make_event("evt2")
    room = repository.create_room(event, name="Hall A", source_room_id=7)
    repository.create_room(event, name="Hall B", source_room_id=8)
    repository.create_room(other, name="Hall A", source_room_id=7)
    _create_session(repository, room)

    assert repository.delete_rooms(event) == 2
    assert not repository.list_rooms(event).exists()
    assert not Session.objects.filter(room__event=event).exists()
    assert Room.objects.filter(event=other).count() == 1


@pytest.mark.django_db
def test_delete_speakers_removes_links():
    repository = ScheduleRepository()
    event = _make_event()
    room = repository.create_room(event, name="Hall A", source_room_id=7)
    session = _create_session(repository, room)
    speaker = repository.create_speaker(event, source_speaker_id="sp-1")
    repository.create_session_speaker(session.pk, speaker.pk)

    assert repository.delete_speakers(event) == 1
    assert not Speaker.objects.filter(event=event).exists()
    assert not SessionSpeaker.objects.exists()
    assert Session.objects.filter(pk=session.pk).exists()


@pytest.mark.django_db
def test_delete_on_empty_event_returns_zero():
    repository = ScheduleRepository()
    event = _make_event()

    assert repository.delete_rooms(event) == 0
    assert repository.delete_speakers(event) == 0
