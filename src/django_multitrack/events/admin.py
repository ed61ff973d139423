"""Django admin configuration for the events app."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.contrib import admin, messages

from django_multitrack.events.models import Event
from django_multitrack.sessionize.exceptions import ScheduleImportError
from django_multitrack.sessionize.sync import import_sessionize_data

if TYPE_CHECKING:
    from django.db.models import QuerySet
    from django.http import HttpRequest

logger = logging.getLogger(__name__)


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    """Admin interface for events.

    The ``code`` is generated on first save when left blank.  Events with a
    ``sessionize_id`` can have their schedule re-imported from the change
    list via the "Import schedule from Sessionize" action.
    """

    list_display = ("name", "code", "owner", "sessionize_id", "date", "created_at")
    search_fields = ("name", "code", "sessionize_id")
    raw_id_fields = ("owner",)
    readonly_fields = ("created_at", "updated_at")
    actions = ("import_from_sessionize",)

    @admin.action(description="Import schedule from Sessionize")
    def import_from_sessionize(self, request: HttpRequest, queryset: QuerySet[Event]) -> None:
        """Run a Sessionize import for each selected event and report the outcome.

        Events without a ``sessionize_id`` are skipped with a warning.  A
        failed import does not stop the remaining events from importing.
        """
        for event in queryset:
            if not event.sessionize_id:
                self.message_user(
                    request,
                    f"{event.name}: no Sessionize ID configured.",
                    level=messages.WARNING,
                )
                continue
            try:
                result = import_sessionize_data(event)
            except ScheduleImportError as exc:
                logger.exception("Sessionize import failed for event %s", event.code)
                self.message_user(
                    request,
                    f"{event.name}: import failed at stage '{exc.stage}': {exc}",
                    level=messages.ERROR,
                )
                continue
            self.message_user(
                request,
                f"{event.name}: imported {result.rooms_created} rooms, "
                f"{result.sessions_created} sessions, {result.speakers_created} speakers.",
                level=messages.SUCCESS,
            )
