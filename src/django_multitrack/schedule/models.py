"""Room, Session, Speaker, Tag, and link models for the event schedule."""

import secrets

from django.core.exceptions import ValidationError
from django.db import models


def manual_source_id() -> str:
    """Return a random source identifier for a row created outside any import."""
    return f"manual-{secrets.token_hex(16)}"


class Source(models.TextChoices):
    """Where a schedule row came from."""

    SESSIONIZE = "sessionize", "Sessionize"
    ADMIN_APP = "admin_app", "Admin app"


class Room(models.Model):
    """A room or track at an event, either imported from Sessionize or created manually.

    Imported rooms are uniquely identified per event by their Sessionize
    integer ID together with the source.  Manually created rooms have
    ``source_room_id=None``.
    """

    event = models.ForeignKey(
        "multitrack_events.Event",
        on_delete=models.CASCADE,
        related_name="rooms",
    )
    name = models.CharField(max_length=255)
    source_room_id = models.IntegerField(null=True, blank=True)
    source = models.CharField(max_length=20, choices=Source.choices, default=Source.ADMIN_APP)
    not_bookable = models.BooleanField(default=False)
    capacity = models.PositiveIntegerField(default=0)
    description = models.TextField(blank=True, default="")
    how_to_get_there = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        constraints = [
            models.UniqueConstraint(
                fields=["event", "source_room_id", "source"],
                condition=~models.Q(source_room_id=None),
                name="unique_room_source_id_per_event",
            ),
        ]

    def __str__(self) -> str:
        return self.name


class Tag(models.Model):
    """A tag name shared by every event and session that uses it.

    Tags are deduplicated globally by exact, case-sensitive name and are
    never deleted by a schedule import; only their links are.
    """

    name = models.CharField(max_length=255, unique=True)
    events = models.ManyToManyField(
        "multitrack_events.Event",
        through="EventTag",
        related_name="tags",
        blank=True,
    )

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class Speaker(models.Model):
    """A speaker at an event, imported from Sessionize or created manually."""

    event = models.ForeignKey(
        "multitrack_events.Event",
        on_delete=models.CASCADE,
        related_name="speakers",
    )
    source_speaker_id = models.CharField(max_length=100)
    source = models.CharField(max_length=20, choices=Source.choices, default=Source.ADMIN_APP)
    first_name = models.CharField(max_length=255, blank=True, default="")
    last_name = models.CharField(max_length=255, blank=True, default="")
    full_name = models.CharField(max_length=500, blank=True, default="")
    bio = models.TextField(blank=True, default="")
    tag_line = models.CharField(max_length=500, blank=True, default="")
    profile_picture = models.URLField(max_length=1000, blank=True, default="")
    is_top_speaker = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["full_name"]
        unique_together = [("event", "source_speaker_id")]

    def __str__(self) -> str:
        return self.full_name or f"{self.first_name} {self.last_name}".strip()

    def save(self, *args: object, **kwargs: object) -> None:
        """Assign a manual source identifier when none is set."""
        if not self.source_speaker_id:
            self.source_speaker_id = manual_source_id()
        super().save(*args, **kwargs)


class Session(models.Model):
    """A talk or other scheduled block held in a room.

    Sessions belong to an event through their room, so deleting a room
    removes its sessions together with their tag and speaker links.
    """

    room = models.ForeignKey(
        Room,
        on_delete=models.CASCADE,
        related_name="sessions",
    )
    source_session_id = models.CharField(max_length=100)
    source = models.CharField(max_length=20, choices=Source.choices, default=Source.ADMIN_APP)
    title = models.CharField(max_length=500)
    description = models.TextField(blank=True, default="")
    start_time = models.DateTimeField()
    end_time = models.DateTimeField()
    tags = models.ManyToManyField(
        Tag,
        through="SessionTag",
        related_name="sessions",
        blank=True,
    )
    speakers = models.ManyToManyField(
        Speaker,
        through="SessionSpeaker",
        related_name="sessions",
        blank=True,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["start_time", "title"]
        constraints = [
            models.UniqueConstraint(
                fields=["room", "source_session_id"],
                name="unique_session_source_id_per_room",
            ),
            models.CheckConstraint(
                condition=models.Q(end_time__gt=models.F("start_time")),
                name="session_end_after_start",
            ),
        ]

    def __str__(self) -> str:
        return self.title

    def save(self, *args: object, **kwargs: object) -> None:
        """Assign a manual source identifier when none is set."""
        if not self.source_session_id:
            self.source_session_id = manual_source_id()
        super().save(*args, **kwargs)

    def clean(self) -> None:
        """Reject sessions whose end time is not after their start time."""
        super().clean()
        if self.start_time and self.end_time and self.end_time <= self.start_time:
            raise ValidationError({"end_time": "End time must be after start time."})


class EventTag(models.Model):
    """Links a tag to an event that uses it."""

    event = models.ForeignKey("multitrack_events.Event", on_delete=models.CASCADE, related_name="event_tags")
    tag = models.ForeignKey(Tag, on_delete=models.CASCADE, related_name="event_tags")

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["event", "tag"], name="unique_event_tag"),
        ]

    def __str__(self) -> str:
        return f"{self.tag} @ {self.event}"


class SessionTag(models.Model):
    """Links a tag to a session."""

    session = models.ForeignKey(Session, on_delete=models.CASCADE, related_name="session_tags")
    tag = models.ForeignKey(Tag, on_delete=models.CASCADE, related_name="session_tags")

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["session", "tag"], name="unique_session_tag"),
        ]

    def __str__(self) -> str:
        return f"{self.tag} on {self.session}"


class SessionSpeaker(models.Model):
    """Links a speaker to a session they present."""

    session = models.ForeignKey(Session, on_delete=models.CASCADE, related_name="session_speakers")
    speaker = models.ForeignKey(Speaker, on_delete=models.CASCADE, related_name="session_speakers")

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["session", "speaker"], name="unique_session_speaker"),
        ]

    def __str__(self) -> str:
        return f"{self.speaker} in {self.session}"
