"""Django app configuration for the events app."""

from django.apps import AppConfig


class DjangoMultitrackEventsConfig(AppConfig):
    """Configuration for the events app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "django_multitrack.events"
    label = "multitrack_events"
    verbose_name = "Events"
