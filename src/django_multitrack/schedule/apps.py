"""Django app configuration for the schedule app."""

from django.apps import AppConfig


class DjangoMultitrackScheduleConfig(AppConfig):
    """Configuration for the schedule app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "django_multitrack.schedule"
    label = "multitrack_schedule"
    verbose_name = "Schedule"
