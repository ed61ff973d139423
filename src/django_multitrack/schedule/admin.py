"""Django admin configuration for the schedule app."""

from django.contrib import admin

from django_multitrack.schedule.models import Room, Session, SessionSpeaker, SessionTag, Speaker, Tag


class SessionTagInline(admin.TabularInline):
    """Inline editor for the tags of a session."""

    model = SessionTag
    extra = 0
    raw_id_fields = ("tag",)


class SessionSpeakerInline(admin.TabularInline):
    """Inline editor for the speakers of a session."""

    model = SessionSpeaker
    extra = 0
    raw_id_fields = ("speaker",)


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    """Admin interface for rooms.

    Rooms imported from Sessionize are replaced on every import, so their
    source identifiers are read-only.
    """

    list_display = ("name", "event", "source", "source_room_id", "capacity", "not_bookable")
    list_filter = ("event", "source", "not_bookable")
    search_fields = ("name",)
    readonly_fields = ("source_room_id", "created_at", "updated_at")


@admin.register(Session)
class SessionAdmin(admin.ModelAdmin):
    """Admin interface for sessions."""

    list_display = ("title", "room", "source", "start_time", "end_time")
    list_filter = ("source", "room__event")
    search_fields = ("title", "source_session_id", "description")
    raw_id_fields = ("room",)
    readonly_fields = ("source_session_id", "created_at", "updated_at")
    inlines = (SessionTagInline, SessionSpeakerInline)


@admin.register(Speaker)
class SpeakerAdmin(admin.ModelAdmin):
    """Admin interface for speakers."""

    list_display = ("full_name", "event", "source", "source_speaker_id", "is_top_speaker")
    list_filter = ("event", "source", "is_top_speaker")
    search_fields = ("full_name", "first_name", "last_name", "source_speaker_id")
    readonly_fields = ("source_speaker_id", "created_at", "updated_at")


@admin.register(Tag)
class TagAdmin(admin.ModelAdmin):
    """Admin interface for tags shared across events."""

    list_display = ("name",)
    search_fields = ("name",)
