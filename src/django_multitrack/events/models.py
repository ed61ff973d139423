"""Event model for django-multitrack."""

import secrets
import string

from django.conf import settings
from django.db import models

from django_multitrack.settings import MAX_EVENT_CODE_LENGTH, get_config

_CODE_ALPHABET = string.ascii_lowercase + string.digits
_MAX_CODE_ATTEMPTS = 100


def generate_event_code(length: int | None = None) -> str:
    """Return a random event code that no existing event uses.

    Codes are short and lowercase alphanumeric so attendees can type them on
    a phone.  Retries up to 100 times if a collision is detected.

    Args:
        length: Number of characters.  Defaults to
            ``DJANGO_MULTITRACK['event_code_length']``.

    Returns:
        An unused event code.

    Raises:
        RuntimeError: If a unique code cannot be generated after 100 attempts.
    """
    if length is None:
        length = get_config().event_code_length
    for _ in range(_MAX_CODE_ATTEMPTS):
        code = "".join(secrets.choice(_CODE_ALPHABET) for _ in range(length))
        if not Event.objects.filter(code=code).exists():
            return code
    msg = f"Failed to generate a unique event code of length {length} after {_MAX_CODE_ATTEMPTS} attempts"
    raise RuntimeError(msg)


class Event(models.Model):
    """A conference event owned by a single user.

    The central model that the schedule app references.  The ``code`` is a
    short identifier unique across all events, generated on first save when
    left blank.  ``sessionize_id`` is the default source used when importing
    the schedule from Sessionize.
    """

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="owned_events",
    )
    name = models.CharField(max_length=255)
    code = models.CharField(max_length=MAX_EVENT_CODE_LENGTH, unique=True, blank=True)
    sessionize_id = models.CharField(max_length=100, blank=True, default="")
    date = models.DateTimeField(null=True, blank=True)
    description = models.TextField(blank=True, default="")
    location_lat = models.FloatField(null=True, blank=True)
    location_lng = models.FloatField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.name

    def save(self, *args: object, **kwargs: object) -> None:
        """Assign a generated ``code`` before the first save when none is set."""
        if not self.code:
            self.code = generate_event_code()
        super().save(*args, **kwargs)
