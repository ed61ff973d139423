"""Storage operations used by the schedule import.

:class:`ScheduleRepository` is the single place the import pipeline writes
rooms, sessions, speakers, and session/speaker links through.  Each method
is one unit of work; callers that need atomicity wrap calls in
``transaction.atomic()`` themselves.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from django_multitrack.schedule.models import Room, Session, SessionSpeaker, Source, Speaker

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from django_multitrack.events.models import Event


class ScheduleRepository:
    """Django ORM persistence for rooms, sessions, speakers, and their links."""

    def delete_rooms(self, event: Event) -> int:
        """Delete every room of *event*, cascading to sessions and their links.

        Returns:
            The number of rooms deleted.
        """
        _, per_model = Room.objects.filter(event=event).delete()
        return per_model.get(Room._meta.label, 0)

    def delete_speakers(self, event: Event) -> int:
        """Delete every speaker of *event*.

        Returns:
            The number of speakers deleted.
        """
        _, per_model = Speaker.objects.filter(event=event).delete()
        return per_model.get(Speaker._meta.label, 0)

    def create_room(
        self,
        event: Event,
        *,
        name: str,
        source_room_id: int | None,
        source: str = Source.SESSIONIZE,
    ) -> Room:
        """Insert a room for *event*."""
        return Room.objects.create(
            event=event,
            name=name,
            source_room_id=source_room_id,
            source=source,
        )

    def create_session(
        self,
        room_id: int,
        *,
        source_session_id: str,
        title: str,
        description: str,
        start_time: datetime,
        end_time: datetime,
        source: str = Source.SESSIONIZE,
    ) -> Session:
        """Insert a session into the room with primary key *room_id*."""
        return Session.objects.create(
            room_id=room_id,
            source_session_id=source_session_id,
            source=source,
            title=title,
            description=description,
            start_time=start_time,
            end_time=end_time,
        )

    def create_speaker(
        self,
        event: Event,
        *,
        source_speaker_id: str,
        first_name: str = "",
        last_name: str = "",
        full_name: str = "",
        bio: str = "",
        tag_line: str = "",
        profile_picture: str = "",
        is_top_speaker: bool = False,
        source: str = Source.SESSIONIZE,
    ) -> Speaker:
        """Insert a speaker for *event*."""
        return Speaker.objects.create(
            event=event,
            source_speaker_id=source_speaker_id,
            source=source,
            first_name=first_name,
            last_name=last_name,
            full_name=full_name,
            bio=bio,
            tag_line=tag_line,
            profile_picture=profile_picture,
            is_top_speaker=is_top_speaker,
        )

    def create_session_speaker(self, session_id: int, speaker_id: int) -> None:
        """Link a speaker to a session; a link that already exists is left alone."""
        SessionSpeaker.objects.bulk_create(
            [SessionSpeaker(session_id=session_id, speaker_id=speaker_id)],
            ignore_conflicts=True,
        )

    def list_rooms(self, event: Event) -> QuerySet[Room]:
        """Return the rooms of *event*."""
        return Room.objects.filter(event=event)

    def list_sessions(self, event: Event) -> QuerySet[Session]:
        """Return the sessions held in any room of *event*."""
        return Session.objects.filter(room__event=event).select_related("room")

    def list_speakers(self, event: Event) -> QuerySet[Speaker]:
        """Return the speakers of *event*."""
        return Speaker.objects.filter(event=event)
