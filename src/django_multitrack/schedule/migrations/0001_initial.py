import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("multitrack_events", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Room",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("source_room_id", models.IntegerField(blank=True, null=True)),
                (
                    "source",
                    models.CharField(
                        choices=[("sessionize", "Sessionize"), ("admin_app", "Admin app")],
                        default="admin_app",
                        max_length=20,
                    ),
                ),
                ("not_bookable", models.BooleanField(default=False)),
                ("capacity", models.PositiveIntegerField(default=0)),
                ("description", models.TextField(blank=True, default="")),
                ("how_to_get_there", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="rooms",
                        to="multitrack_events.event",
                    ),
                ),
            ],
            options={
                "ordering": ["name"],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("source_room_id", None), _negated=True),
                        fields=("event", "source_room_id", "source"),
                        name="unique_room_source_id_per_event",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Tag",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255, unique=True)),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Speaker",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("source_speaker_id", models.CharField(max_length=100)),
                (
                    "source",
                    models.CharField(
                        choices=[("sessionize", "Sessionize"), ("admin_app", "Admin app")],
                        default="admin_app",
                        max_length=20,
                    ),
                ),
                ("first_name", models.CharField(blank=True, default="", max_length=255)),
                ("last_name", models.CharField(blank=True, default="", max_length=255)),
                ("full_name", models.CharField(blank=True, default="", max_length=500)),
                ("bio", models.TextField(blank=True, default="")),
                ("tag_line", models.CharField(blank=True, default="", max_length=500)),
                ("profile_picture", models.URLField(blank=True, default="", max_length=1000)),
                ("is_top_speaker", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="speakers",
                        to="multitrack_events.event",
                    ),
                ),
            ],
            options={
                "ordering": ["full_name"],
                "unique_together": {("event", "source_speaker_id")},
            },
        ),
        migrations.CreateModel(
            name="Session",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("source_session_id", models.CharField(max_length=100)),
                (
                    "source",
                    models.CharField(
                        choices=[("sessionize", "Sessionize"), ("admin_app", "Admin app")],
                        default="admin_app",
                        max_length=20,
                    ),
                ),
                ("title", models.CharField(max_length=500)),
                ("description", models.TextField(blank=True, default="")),
                ("start_time", models.DateTimeField()),
                ("end_time", models.DateTimeField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "room",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="sessions",
                        to="multitrack_schedule.room",
                    ),
                ),
            ],
            options={
                "ordering": ["start_time", "title"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("room", "source_session_id"),
                        name="unique_session_source_id_per_room",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("end_time__gt", models.F("start_time"))),
                        name="session_end_after_start",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="EventTag",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="event_tags",
                        to="multitrack_events.event",
                    ),
                ),
                (
                    "tag",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="event_tags",
                        to="multitrack_schedule.tag",
                    ),
                ),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(fields=("event", "tag"), name="unique_event_tag"),
                ],
            },
        ),
        migrations.CreateModel(
            name="SessionTag",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "session",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="session_tags",
                        to="multitrack_schedule.session",
                    ),
                ),
                (
                    "tag",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="session_tags",
                        to="multitrack_schedule.tag",
                    ),
                ),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(fields=("session", "tag"), name="unique_session_tag"),
                ],
            },
        ),
        migrations.CreateModel(
            name="SessionSpeaker",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "session",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="session_speakers",
                        to="multitrack_schedule.session",
                    ),
                ),
                (
                    "speaker",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="session_speakers",
                        to="multitrack_schedule.speaker",
                    ),
                ),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(fields=("session", "speaker"), name="unique_session_speaker"),
                ],
            },
        ),
        migrations.AddField(
            model_name="tag",
            name="events",
            field=models.ManyToManyField(
                blank=True,
                related_name="tags",
                through="multitrack_schedule.EventTag",
                to="multitrack_events.event",
            ),
        ),
        migrations.AddField(
            model_name="session",
            name="tags",
            field=models.ManyToManyField(
                blank=True,
                related_name="sessions",
                through="multitrack_schedule.SessionTag",
                to="multitrack_schedule.tag",
            ),
        ),
        migrations.AddField(
            model_name="session",
            name="speakers",
            field=models.ManyToManyField(
                blank=True,
                related_name="sessions",
                through="multitrack_schedule.SessionSpeaker",
                to="multitrack_schedule.speaker",
            ),
        ),
    ]
