from unittest.mock import patch

import pytest
from django.contrib.auth import get_user_model
from django.db import IntegrityError
from django.db.models import ProtectedError

from django_multitrack.events.models import Event, generate_event_code


def _make_user(username="owner"):
    return get_user_model().objects.create_user(username=username)


@pytest.mark.django_db
def test_code_is_generated_on_first_save():
    event = Event.objects.create(owner=_make_user(), name="PyCon")

    assert len(event.code) == 4
    assert event.code.isalnum()
    assert event.code == event.code.lower()


@pytest.mark.django_db
def test_code_length_follows_config(settings):
    settings.DJANGO_MULTITRACK = {"event_code_length": 8}

    event = Event.objects.create(owner=_make_user(), name="PyCon")

    assert len(event.code) == 8


@pytest.mark.django_db
def test_explicit_code_is_kept_and_unique():
    user = _make_user()
    Event.objects.create(owner=user, name="PyCon", code="pyc1")

    with pytest.raises(IntegrityError):
        Event.objects.create(owner=user, name="Other", code="pyc1")


@pytest.mark.django_db
def test_code_is_not_regenerated_on_update():
    event = Event.objects.create(owner=_make_user(), name="PyCon")
    code = event.code

    event.name = "PyCon 2026"
    event.save()

    event.refresh_from_db()
    assert event.code == code


@pytest.mark.django_db
def test_generate_event_code_avoids_existing_codes():
    Event.objects.create(owner=_make_user(), name="PyCon", code="aaaa")

    with patch("django_multitrack.events.models.secrets.choice", side_effect=["a"] * 4 + ["b"] * 4):
        assert generate_event_code() == "bbbb"


@pytest.mark.django_db
def test_generate_event_code_gives_up_after_repeated_collisions():
    Event.objects.create(owner=_make_user(), name="PyCon", code="aaaa")

    with patch("django_multitrack.events.models.secrets.choice", return_value="a"):
        with pytest.raises(RuntimeError, match="after 100 attempts"):
            generate_event_code()


@pytest.mark.django_db
def test_owner_cannot_be_deleted_while_owning_events():
    user = _make_user()
    Event.objects.create(owner=user, name="PyCon")

    with pytest.raises(ProtectedError):
        user.delete()


@pytest.mark.django_db
def test_str_is_name():
    assert str(Event.objects.create(owner=_make_user(), name="PyCon")) == "PyCon"
