"""Django app configuration for the Sessionize integration app."""

from django.apps import AppConfig


class DjangoMultitrackSessionizeConfig(AppConfig):
    """Configuration for the Sessionize integration app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "django_multitrack.sessionize"
    label = "multitrack_sessionize"
    verbose_name = "Sessionize Integration"
