"""Management command to replace an event's schedule with its Sessionize schedule.

Usage::

    # Import using the event's configured sessionize_id
    manage.py import_sessionize --event ab12

    # Import from an explicit Sessionize endpoint ID
    manage.py import_sessionize --event ab12 --source-id jl4ktls0

    # Roll back to the previous schedule if any step fails
    manage.py import_sessionize --event ab12 --atomic
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.core.management.base import BaseCommand, CommandError

from django_multitrack.events.models import Event
from django_multitrack.sessionize.exceptions import ScheduleImportError
from django_multitrack.sessionize.sync import SessionizeImportService

if TYPE_CHECKING:
    import argparse


class Command(BaseCommand):
    """Import rooms, sessions, speakers, and tags from Sessionize."""

    help = "Replace an event's schedule with the schedule published on Sessionize"

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        """Register command-line arguments.

        Args:
            parser: The argument parser to add arguments to.
        """
        parser.add_argument(
            "--event",
            required=True,
            help="Code of the event to import into.",
        )
        parser.add_argument(
            "--source-id",
            default="",
            help="Sessionize API endpoint ID (defaults to the event's sessionize_id).",
        )
        parser.add_argument(
            "--atomic",
            action="store_true",
            default=False,
            help="Run the wipe and rebuild in one transaction, rolling back on failure.",
        )

    def handle(self, **options: object) -> None:
        """Execute the import.

        Looks up the event by code, resolves the Sessionize source, and runs
        the import.  Any import failure is reported as a ``CommandError``
        naming the stage that failed.
        """
        event_code: str = str(options["event"])
        source_id: str = str(options["source_id"] or "")
        atomic: bool = bool(options["atomic"])

        try:
            event = Event.objects.get(code=event_code)
        except Event.DoesNotExist:
            msg = f"Event with code '{event_code}' not found"
            raise CommandError(msg) from None

        if not (source_id or event.sessionize_id):
            msg = f"Event '{event_code}' has no sessionize_id configured; pass --source-id"
            raise CommandError(msg)

        service = SessionizeImportService(event)
        try:
            result = service.reconcile(source_id or None, atomic=True if atomic else None)
        except ScheduleImportError as exc:
            msg = f"Sessionize import failed at stage '{exc.stage}': {exc}"
            raise CommandError(msg) from exc

        summary = (
            f"Imported {result.rooms_created} rooms, "
            f"{result.sessions_created} sessions, "
            f"{result.speakers_created} speakers"
        )
        if result.skipped:
            summary += f" ({result.skipped_sessions} sessions and {result.skipped_speaker_links} speaker links skipped)"
        self.stdout.write(self.style.SUCCESS(summary))
