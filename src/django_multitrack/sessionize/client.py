"""HTTP client for the Sessionize schedule API.

Provides :class:`SessionizeClient` for fetching the "All" view of a
Sessionize event: rooms, sessions, speakers, and category groups in one
document.  The response is decoded into a :class:`ScheduleBundle` of frozen
dataclasses rather than raw dicts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import httpx

from django_multitrack.sessionize.exceptions import SessionizeAPIError

logger = logging.getLogger(__name__)


def _text(value: object) -> str:
    """Return *value* as a string, mapping ``None`` to an empty string."""
    if value is None:
        return ""
    return str(value)


def _optional_int(value: object) -> int | None:
    """Return *value* as an integer, or ``None`` when absent."""
    if value is None or value == "":
        return None
    return int(value)  # type: ignore[arg-type]


def parse_datetime(value: object) -> datetime | None:
    """Parse an ISO 8601 string, returning ``None`` on failure.

    Sessionize sends local wall-clock times without an offset
    (``"2026-05-14T09:00:00"``); those come back as naive datetimes.

    Args:
        value: An ISO 8601 formatted datetime string.

    Returns:
        A ``datetime`` instance, or ``None`` if the value is empty or
        cannot be parsed.
    """
    if not value or not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


@dataclass(frozen=True, slots=True)
class SessionizeRoom:
    """A room record from the Sessionize API."""

    id: int
    name: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> SessionizeRoom:
        """Construct a ``SessionizeRoom`` from a raw ``rooms`` entry."""
        return cls(id=int(data["id"]), name=_text(data.get("name")))


@dataclass(frozen=True, slots=True)
class SessionizeSession:
    """A session record from the Sessionize API.

    Attributes:
        id: Sessionize session identifier (a string, numeric for most events).
        title: Session title.
        description: Session description; empty when Sessionize sends ``null``.
        starts_at: Parsed start time, or ``None`` if missing or unparsable.
        ends_at: Parsed end time, or ``None`` if missing or unparsable.
        room_id: Sessionize room ID, or ``None`` for unscheduled sessions.
        speakers: Sessionize speaker IDs presenting this session.
        category_items: Sessionize category item IDs attached to the session.
    """

    id: str
    title: str
    description: str = ""
    starts_at: datetime | None = None
    ends_at: datetime | None = None
    room_id: int | None = None
    speakers: list[str] = field(default_factory=list)
    category_items: list[int] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> SessionizeSession:
        """Construct a ``SessionizeSession`` from a raw ``sessions`` entry."""
        return cls(
            id=_text(data["id"]),
            title=_text(data.get("title")),
            description=_text(data.get("description")),
            starts_at=parse_datetime(data.get("startsAt")),
            ends_at=parse_datetime(data.get("endsAt")),
            room_id=_optional_int(data.get("roomId")),
            speakers=[_text(s) for s in data.get("speakers") or []],
            category_items=[int(i) for i in data.get("categoryItems") or [] if i is not None],
        )


@dataclass(frozen=True, slots=True)
class SessionizeSpeaker:
    """A speaker record from the Sessionize API."""

    id: str
    first_name: str = ""
    last_name: str = ""
    full_name: str = ""
    bio: str = ""
    tag_line: str = ""
    profile_picture: str = ""
    is_top_speaker: bool = False

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> SessionizeSpeaker:
        """Construct a ``SessionizeSpeaker`` from a raw ``speakers`` entry."""
        return cls(
            id=_text(data["id"]),
            first_name=_text(data.get("firstName")),
            last_name=_text(data.get("lastName")),
            full_name=_text(data.get("fullName")),
            bio=_text(data.get("bio")),
            tag_line=_text(data.get("tagLine")),
            profile_picture=_text(data.get("profilePicture")),
            is_top_speaker=bool(data.get("isTopSpeaker")),
        )


@dataclass(frozen=True, slots=True)
class SessionizeCategoryItem:
    """One selectable value within a category group (a tag candidate)."""

    id: int
    name: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> SessionizeCategoryItem:
        """Construct a ``SessionizeCategoryItem`` from a raw category item."""
        return cls(id=int(data["id"]), name=_text(data.get("name")))


@dataclass(frozen=True, slots=True)
class SessionizeCategory:
    """A category group such as "Track" or "Level" and its ordered items."""

    id: int
    title: str
    items: list[SessionizeCategoryItem] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> SessionizeCategory:
        """Construct a ``SessionizeCategory`` from a raw ``categories`` entry."""
        return cls(
            id=int(data["id"]),
            title=_text(data.get("title")),
            items=[SessionizeCategoryItem.from_api(item) for item in data.get("items") or []],
        )


@dataclass(frozen=True, slots=True)
class ScheduleBundle:
    """Everything one fetch of the Sessionize "All" view returned."""

    rooms: list[SessionizeRoom] = field(default_factory=list)
    sessions: list[SessionizeSession] = field(default_factory=list)
    speakers: list[SessionizeSpeaker] = field(default_factory=list)
    categories: list[SessionizeCategory] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> ScheduleBundle:
        """Construct a ``ScheduleBundle`` from the decoded "All" view document.

        Missing or ``null`` top-level arrays decode as empty lists.

        Raises:
            KeyError: If an entry lacks its ``id``.
            TypeError: If an entry is not an object.
            ValueError: If a numeric ID cannot be converted.
        """
        return cls(
            rooms=[SessionizeRoom.from_api(r) for r in data.get("rooms") or []],
            sessions=[SessionizeSession.from_api(s) for s in data.get("sessions") or []],
            speakers=[SessionizeSpeaker.from_api(s) for s in data.get("speakers") or []],
            categories=[SessionizeCategory.from_api(c) for c in data.get("categories") or []],
        )


class SessionizeClient:
    """HTTP client for the Sessionize "All" view API.

    The endpoint is public; no token is needed.  Each call opens its own
    ``httpx.Client`` and there is no retry: failures are reported to the
    caller as :class:`~django_multitrack.sessionize.exceptions.SessionizeAPIError`.

    Args:
        base_url: Root URL of the Sessionize host.  Defaults to
            ``"https://sessionize.com"``.
        timeout: Default request timeout in seconds.

    Example::

        client = SessionizeClient()
        bundle = client.fetch("abc123xy")
        bundle.rooms, bundle.sessions, bundle.speakers, bundle.categories
    """

    def __init__(self, *, base_url: str = "https://sessionize.com", timeout: float = 30) -> None:
        """Initialize the client.

        Args:
            base_url: Root URL of the Sessionize host.
            timeout: Default request timeout in seconds.
        """
        normalized_base_url = base_url.rstrip("/")
        normalized_base_url = normalized_base_url.removesuffix("/api/v2")
        self.base_url = normalized_base_url
        self.timeout = timeout
        self.headers: dict[str, str] = {"Accept": "application/json"}

    def all_view_url(self, source_id: str) -> str:
        """Return the "All" view URL for a Sessionize event ID."""
        return f"{self.base_url}/api/v2/{source_id}/view/All"

    def fetch(self, source_id: str, *, timeout: float | None = None) -> ScheduleBundle:
        """Fetch and decode the full schedule of a Sessionize event.

        Args:
            source_id: The Sessionize API endpoint ID of the event.
            timeout: Request timeout in seconds.  It never exceeds the client
                default, so callers can only shorten the request.

        Returns:
            The decoded :class:`ScheduleBundle`.

        Raises:
            ValueError: If *source_id* is empty.
            SessionizeAPIError: On a transport error, a non-2xx status, or a
                response body that cannot be decoded.
        """
        if not source_id:
            msg = "Sessionize source ID must be a non-empty string"
            raise ValueError(msg)

        url = self.all_view_url(source_id)
        request_timeout = self.timeout if timeout is None else min(timeout, self.timeout)
        logger.debug("Fetching %s", url)
        with httpx.Client(timeout=request_timeout, headers=self.headers) as client:
            try:
                response = client.get(url)
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                msg = f"Sessionize API request failed: {exc.response.status_code} for URL {exc.request.url}"
                raise SessionizeAPIError(msg) from exc
            except httpx.RequestError as exc:
                msg = f"Sessionize API connection error for URL {url}: {exc}"
                raise SessionizeAPIError(msg) from exc

        try:
            data = response.json()
        except ValueError as exc:
            msg = f"Failed to decode Sessionize response for URL {url}: {exc}"
            raise SessionizeAPIError(msg) from exc
        if not isinstance(data, dict):
            msg = f"Unexpected Sessionize response for URL {url}: expected an object, got {type(data).__name__}"
            raise SessionizeAPIError(msg)

        try:
            bundle = ScheduleBundle.from_api(data)
        except (KeyError, TypeError, ValueError) as exc:
            msg = f"Failed to decode Sessionize response for URL {url}: {exc!r}"
            raise SessionizeAPIError(msg) from exc

        logger.debug(
            "Fetched %d rooms, %d sessions, %d speakers, %d categories from %s",
            len(bundle.rooms),
            len(bundle.sessions),
            len(bundle.speakers),
            len(bundle.categories),
            url,
        )
        return bundle
