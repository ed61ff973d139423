"""Tag resolution for events and sessions.

Tags are shared rows deduplicated by exact name.  :class:`TagResolver`
creates a tag on first use, links it to the event that uses it, and rewrites
the full tag set of a session.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from django_multitrack.schedule.models import EventTag, SessionTag, Tag

if TYPE_CHECKING:
    from django_multitrack.events.models import Event

logger = logging.getLogger(__name__)


class TagResolver:
    """Resolve tag names to tag IDs and maintain event/session tag links."""

    def ensure_tag_for_event(self, event: Event, tag_name: str) -> int:
        """Return the ID of the tag named *tag_name*, linking it to *event*.

        The tag is created when no tag with that exact name exists.  The
        event link is inserted only when missing, so repeated calls are
        idempotent.

        Args:
            event: The event that uses the tag.
            tag_name: The exact, case-sensitive tag name.

        Returns:
            The primary key of the resolved tag.

        Raises:
            ValueError: If *tag_name* is empty.
        """
        if not tag_name:
            msg = "Tag name must be a non-empty string"
            raise ValueError(msg)

        tag, created = Tag.objects.get_or_create(name=tag_name)
        if created:
            logger.debug("Created tag %r", tag_name)
        EventTag.objects.bulk_create(
            [EventTag(event=event, tag=tag)],
            ignore_conflicts=True,
        )
        return tag.pk

    def set_session_tags(self, session_id: int, tag_ids: Iterable[int]) -> None:
        """Replace every tag link of a session with *tag_ids*.

        Existing links are deleted first, then the new set is inserted.
        Passing an empty iterable clears all of the session's tags.

        Args:
            session_id: Primary key of the session.
            tag_ids: Primary keys of the tags the session should carry.
        """
        SessionTag.objects.filter(session_id=session_id).delete()
        unique_ids = list(dict.fromkeys(tag_ids))
        if unique_ids:
            SessionTag.objects.bulk_create(
                [SessionTag(session_id=session_id, tag_id=tag_id) for tag_id in unique_ids],
                ignore_conflicts=True,
            )
