"""Schedule import from Sessionize into Django models.

Provides :class:`SessionizeImportService`, which replaces an event's rooms,
sessions, speakers, and session tags with the latest Sessionize snapshot,
and :func:`import_sessionize_data`, the entry point used by the rest of the
project.

The import is a wipe-and-rebuild: every room and speaker of the event is
deleted, then the bundle is recreated in dependency order (rooms, sessions
and their tags, speakers, session/speaker links).  Sessionize identifiers are
translated to database primary keys through an :class:`IdentifierMapper`
that lives only for one import.  Tags are never deleted; they are reused by
name and only relinked.

By default each write is its own unit of work, so a failure part way leaves
a partially rebuilt schedule until the next successful import.  Setting
``DJANGO_MULTITRACK['sessionize']['atomic']`` to ``True`` runs the wipe and
rebuild inside a single transaction instead.
"""

from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any, TypeVar

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.utils import timezone

from django_multitrack.schedule.models import Source
from django_multitrack.schedule.repositories import ScheduleRepository
from django_multitrack.schedule.tags import TagResolver
from django_multitrack.sessionize.client import SessionizeClient
from django_multitrack.sessionize.exceptions import (
    ImportTimeoutError,
    ScheduleImportError,
    SessionizeAPIError,
)
from django_multitrack.sessionize.locks import event_import_lock
from django_multitrack.settings import get_config

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from datetime import datetime

    from django_multitrack.events.models import Event
    from django_multitrack.sessionize.client import (
        ScheduleBundle,
        SessionizeCategory,
        SessionizeSession,
    )

logger = logging.getLogger(__name__)

_T = TypeVar("_T")

# Failures of these kinds inside a persistence step abort the import.
_STEP_ERRORS = (DatabaseError, ValidationError, ValueError)


def build_category_lookup(categories: Iterable[SessionizeCategory]) -> dict[int, str]:
    """Flatten category groups into a category item ID to name mapping.

    When an item ID appears in more than one group the last occurrence wins.
    Items with an empty name are not recorded, so they never hide an earlier
    name for the same ID.

    Args:
        categories: The bundle's category groups, in API order.

    Returns:
        A dict mapping category item IDs to display names.
    """
    lookup: dict[int, str] = {}
    for category in categories:
        for item in category.items:
            if item.name:
                lookup[item.id] = item.name
    return lookup


def derive_tag_names(category_item_ids: Iterable[int], lookup: dict[int, str]) -> list[str]:
    """Resolve a session's category item IDs to tag names.

    Names are deduplicated by exact, case-sensitive comparison and keep the
    order in which they were first seen.  IDs missing from *lookup* are
    dropped.

    Args:
        category_item_ids: The session's category item IDs.
        lookup: Mapping built by :func:`build_category_lookup`.

    Returns:
        The ordered, duplicate-free tag names.
    """
    names: list[str] = []
    seen: set[str] = set()
    for item_id in category_item_ids:
        name = lookup.get(item_id, "")
        if not name or name in seen:
            continue
        seen.add(name)
        names.append(name)
    return names


class IdentifierMapper:
    """Sessionize ID to primary key translation for a single import run.

    Rooms, sessions, and speakers each get an independent map.  Entries are
    recorded as rows are created and looked up by later stages; a missing
    entry means the relationship cannot be resolved and should be skipped.
    """

    def __init__(self) -> None:
        self.rooms: dict[int, int] = {}
        self.sessions: dict[str, int] = {}
        self.speakers: dict[str, int] = {}

    def record_room(self, source_id: int, pk: int) -> None:
        self.rooms[source_id] = pk

    def record_session(self, source_id: str, pk: int) -> None:
        self.sessions[source_id] = pk

    def record_speaker(self, source_id: str, pk: int) -> None:
        self.speakers[source_id] = pk

    def room_for(self, source_id: int | None) -> int | None:
        if source_id is None:
            return None
        return self.rooms.get(source_id)

    def session_for(self, source_id: str) -> int | None:
        return self.sessions.get(source_id)

    def speaker_for(self, source_id: str) -> int | None:
        return self.speakers.get(source_id)


@dataclass(frozen=True, slots=True)
class ImportResult:
    """Outcome of one successful schedule import.

    Attributes:
        rooms_created: Rooms inserted.
        sessions_created: Sessions inserted.
        speakers_created: Speakers inserted.
        tags_linked: Session/tag links written.
        speaker_links_created: Session/speaker links written.
        skipped_sessions: Sessions not imported because their room was
            unknown, their times were unusable, or their ID repeated.
        skipped_speaker_links: Speaker references that named no speaker in
            the bundle.
    """

    rooms_created: int = 0
    sessions_created: int = 0
    speakers_created: int = 0
    tags_linked: int = 0
    speaker_links_created: int = 0
    skipped_sessions: int = 0
    skipped_speaker_links: int = 0

    @property
    def skipped(self) -> int:
        """Total number of entities and relationships that were skipped."""
        return self.skipped_sessions + self.skipped_speaker_links

    def as_dict(self) -> dict[str, int]:
        """Return the counters as a plain dict, including ``skipped``."""
        return {**asdict(self), "skipped": self.skipped}


class _Deadline:
    """Wall-clock budget shared by every blocking call of one import."""

    def __init__(self, seconds: float) -> None:
        self.seconds = seconds
        self._expires_at = time.monotonic() + seconds

    def remaining(self) -> float:
        return max(self._expires_at - time.monotonic(), 0.0)

    def check(self, stage: str) -> None:
        if time.monotonic() < self._expires_at:
            return
        timeout_exc = ImportTimeoutError(f"Import deadline of {self.seconds}s exceeded")
        msg = f"{stage}: {timeout_exc}"
        raise ScheduleImportError(msg, stage=stage) from timeout_exc


class SessionizeImportService:
    """Replaces an event's schedule with the current Sessionize snapshot.

    Builds a :class:`~django_multitrack.sessionize.client.SessionizeClient`
    from the global Sessionize configuration unless one is passed in.  The
    repository and tag resolver can likewise be swapped, which is how tests
    inject failures.

    Args:
        event: The event whose schedule is replaced.
        client: Optional fetcher; defaults to a configured ``SessionizeClient``.
        repository: Optional persistence gateway.
        tag_resolver: Optional tag resolver.
    """

    def __init__(
        self,
        event: Event,
        *,
        client: SessionizeClient | None = None,
        repository: ScheduleRepository | None = None,
        tag_resolver: TagResolver | None = None,
    ) -> None:
        config = get_config().sessionize
        self.event = event
        self.client = client or SessionizeClient(base_url=config.base_url, timeout=config.timeout)
        self.repository = repository or ScheduleRepository()
        self.tag_resolver = tag_resolver or TagResolver()
        self._import_timeout = config.import_timeout
        self._atomic = config.atomic

    def reconcile(self, source_id: str | None = None, *, atomic: bool | None = None) -> ImportResult:
        """Fetch the Sessionize schedule and rebuild the event's schedule from it.

        Args:
            source_id: Sessionize API endpoint ID.  Defaults to the event's
                ``sessionize_id``.
            atomic: Overrides the configured ``atomic`` setting for this call.

        Returns:
            Counts of what was created and skipped.

        Raises:
            ValueError: If neither *source_id* nor ``event.sessionize_id`` is set.
            ImportInProgressError: If another import of this event is running.
            ScheduleImportError: If any stage fails.  ``stage`` names it.
        """
        source_id = source_id or self.event.sessionize_id
        if not source_id:
            msg = f"Event '{self.event.code}' has no sessionize_id configured"
            raise ValueError(msg)
        if atomic is None:
            atomic = self._atomic

        deadline = _Deadline(self._import_timeout)
        with event_import_lock(self.event.pk):
            bundle = self._fetch(source_id, deadline)
            if atomic:
                with transaction.atomic():
                    result = self._rebuild(bundle, deadline)
            else:
                result = self._rebuild(bundle, deadline)

        logger.info(
            "Imported Sessionize schedule %s into event %s: %d rooms, %d sessions, %d speakers (%d skipped)",
            source_id,
            self.event.code,
            result.rooms_created,
            result.sessions_created,
            result.speakers_created,
            result.skipped,
        )
        return result

    def _fetch(self, source_id: str, deadline: _Deadline) -> ScheduleBundle:
        deadline.check("fetch")
        try:
            return self.client.fetch(source_id, timeout=deadline.remaining())
        except SessionizeAPIError as exc:
            msg = f"fetch: {exc}"
            raise ScheduleImportError(msg, stage="fetch") from exc

    def _step(self, stage: str, deadline: _Deadline, func: Callable[..., _T], *args: Any, **kwargs: Any) -> _T:
        """Run one persistence call, translating its failure into ``ScheduleImportError``.

        The call runs in its own savepoint so a failed write leaves any
        enclosing transaction usable.
        """
        deadline.check(stage)
        try:
            with transaction.atomic():
                return func(*args, **kwargs)
        except _STEP_ERRORS as exc:
            msg = f"{stage}: {exc}"
            raise ScheduleImportError(msg, stage=stage) from exc

    def _rebuild(self, bundle: ScheduleBundle, deadline: _Deadline) -> ImportResult:
        self._wipe(deadline)
        mapper = IdentifierMapper()
        rooms_created = self._create_rooms(bundle, mapper, deadline)
        sessions_created, tags_linked, skipped_sessions = self._create_sessions(bundle, mapper, deadline)
        speakers_created = self._create_speakers(bundle, mapper, deadline)
        links_created, skipped_links = self._link_speakers(bundle, mapper, deadline)
        return ImportResult(
            rooms_created=rooms_created,
            sessions_created=sessions_created,
            speakers_created=speakers_created,
            tags_linked=tags_linked,
            speaker_links_created=links_created,
            skipped_sessions=skipped_sessions,
            skipped_speaker_links=skipped_links,
        )

    def _wipe(self, deadline: _Deadline) -> None:
        rooms = self._step("delete rooms", deadline, self.repository.delete_rooms, self.event)
        speakers = self._step("delete speakers", deadline, self.repository.delete_speakers, self.event)
        logger.info("Deleted %d rooms and %d speakers from event %s", rooms, speakers, self.event.code)

    def _create_rooms(self, bundle: ScheduleBundle, mapper: IdentifierMapper, deadline: _Deadline) -> int:
        # One room per Sessionize ID; a repeated ID keeps its first position and last name.
        unique_rooms: dict[int, str] = {}
        for api_room in bundle.rooms:
            unique_rooms[api_room.id] = api_room.name

        for source_room_id, name in unique_rooms.items():
            room = self._step(
                "create room",
                deadline,
                self.repository.create_room,
                self.event,
                name=name,
                source_room_id=source_room_id,
                source=Source.SESSIONIZE,
            )
            mapper.record_room(source_room_id, room.pk)

        logger.info("Imported %d rooms for event %s", len(unique_rooms), self.event.code)
        return len(unique_rooms)

    def _create_sessions(
        self,
        bundle: ScheduleBundle,
        mapper: IdentifierMapper,
        deadline: _Deadline,
    ) -> tuple[int, int, int]:
        lookup = build_category_lookup(bundle.categories)
        created = 0
        tags_linked = 0
        skipped = 0

        for api_session in bundle.sessions:
            room_pk = mapper.room_for(api_session.room_id)
            if room_pk is None:
                logger.debug("Skipping session %s: unknown room %s", api_session.id, api_session.room_id)
                skipped += 1
                continue
            if mapper.session_for(api_session.id) is not None:
                logger.warning("Skipping session %s: repeated session ID", api_session.id)
                skipped += 1
                continue
            times = _session_times(api_session)
            if times is None:
                logger.warning(
                    "Skipping session %s: unusable times %s - %s",
                    api_session.id,
                    api_session.starts_at,
                    api_session.ends_at,
                )
                skipped += 1
                continue

            start_time, end_time = times
            session = self._step(
                "create session",
                deadline,
                self.repository.create_session,
                room_pk,
                source_session_id=api_session.id,
                source=Source.SESSIONIZE,
                title=api_session.title,
                description=api_session.description,
                start_time=start_time,
                end_time=end_time,
            )
            mapper.record_session(api_session.id, session.pk)
            created += 1

            tag_ids = [
                self._step("ensure tag", deadline, self.tag_resolver.ensure_tag_for_event, self.event, name)
                for name in derive_tag_names(api_session.category_items, lookup)
            ]
            self._step("set session tags", deadline, self.tag_resolver.set_session_tags, session.pk, tag_ids)
            tags_linked += len(tag_ids)
            logger.debug("Imported session %s with %d tags", api_session.id, len(tag_ids))

        logger.info("Imported %d sessions for event %s (%d skipped)", created, self.event.code, skipped)
        return created, tags_linked, skipped

    def _create_speakers(self, bundle: ScheduleBundle, mapper: IdentifierMapper, deadline: _Deadline) -> int:
        created = 0
        for api_speaker in bundle.speakers:
            if mapper.speaker_for(api_speaker.id) is not None:
                logger.debug("Ignoring repeated speaker %s", api_speaker.id)
                continue
            speaker = self._step(
                "create speaker",
                deadline,
                self.repository.create_speaker,
                self.event,
                source_speaker_id=api_speaker.id,
                source=Source.SESSIONIZE,
                first_name=api_speaker.first_name,
                last_name=api_speaker.last_name,
                full_name=api_speaker.full_name,
                bio=api_speaker.bio,
                tag_line=api_speaker.tag_line,
                profile_picture=api_speaker.profile_picture,
                is_top_speaker=api_speaker.is_top_speaker,
            )
            mapper.record_speaker(api_speaker.id, speaker.pk)
            created += 1

        logger.info("Imported %d speakers for event %s", created, self.event.code)
        return created

    def _link_speakers(
        self,
        bundle: ScheduleBundle,
        mapper: IdentifierMapper,
        deadline: _Deadline,
    ) -> tuple[int, int]:
        created = 0
        skipped = 0
        for api_session in bundle.sessions:
            session_pk = mapper.session_for(api_session.id)
            if session_pk is None:
                continue
            for speaker_ref in dict.fromkeys(api_session.speakers):
                speaker_pk = mapper.speaker_for(speaker_ref)
                if speaker_pk is None:
                    logger.debug("Skipping unknown speaker %s on session %s", speaker_ref, api_session.id)
                    skipped += 1
                    continue
                self._step(
                    "link session speaker",
                    deadline,
                    self.repository.create_session_speaker,
                    session_pk,
                    speaker_pk,
                )
                created += 1

        logger.info("Linked %d session speakers for event %s", created, self.event.code)
        return created, skipped


def _session_times(api_session: SessionizeSession) -> tuple[datetime, datetime] | None:
    """Return database-ready ``(start, end)`` or ``None`` when unusable.

    With ``USE_TZ`` on, naive Sessionize times are interpreted in the default
    time zone; with it off, aware times are converted to naive local time.
    A session whose end is not after its start is unusable.
    """
    start, end = api_session.starts_at, api_session.ends_at
    if start is None or end is None:
        return None
    if settings.USE_TZ:
        if timezone.is_naive(start):
            start = timezone.make_aware(start)
        if timezone.is_naive(end):
            end = timezone.make_aware(end)
    else:
        if timezone.is_aware(start):
            start = timezone.make_naive(start)
        if timezone.is_aware(end):
            end = timezone.make_naive(end)
    if end <= start:
        return None
    return start, end


def import_sessionize_data(event: Event, source_id: str | None = None) -> ImportResult:
    """Replace *event*'s schedule with the Sessionize schedule *source_id*.

    The caller is responsible for checking that the requesting user may
    manage *event*; no authorization happens here.

    Args:
        event: The event to import into.
        source_id: Sessionize API endpoint ID; defaults to ``event.sessionize_id``.

    Returns:
        Counts of what was created and skipped.
    """
    return SessionizeImportService(event).reconcile(source_id)
