import pytest
from django.test import override_settings

from django_multitrack.settings import MultitrackConfig, SessionizeConfig, get_config


def test_get_config_defaults_when_setting_missing() -> None:
    with override_settings(DJANGO_MULTITRACK={}):
        config = get_config()

    assert config == MultitrackConfig()
    assert config.sessionize == SessionizeConfig()
    assert config.sessionize.base_url == "https://sessionize.com"
    assert config.sessionize.atomic is False
    assert config.event_code_length == 4


def test_get_config_reads_nested_sessionize_section() -> None:
    with override_settings(
        DJANGO_MULTITRACK={
            "sessionize": {"base_url": "https://sessionize.example.com", "atomic": True, "import_timeout": 5},
            "event_code_length": 6,
        }
    ):
        config = get_config()

    assert config.sessionize.base_url == "https://sessionize.example.com"
    assert config.sessionize.atomic is True
    assert config.sessionize.import_timeout == 5
    assert config.event_code_length == 6


def test_get_config_rejects_non_mapping_root() -> None:
    with override_settings(DJANGO_MULTITRACK=["bad"]):
        with pytest.raises(TypeError, match="must be a mapping"):
            get_config()


def test_get_config_rejects_non_mapping_sessionize_section() -> None:
    with override_settings(DJANGO_MULTITRACK={"sessionize": ["bad"]}):
        with pytest.raises(TypeError, match=r"DJANGO_MULTITRACK\['sessionize'\] must be a mapping"):
            get_config()


def test_get_config_rejects_unknown_keys() -> None:
    with override_settings(DJANGO_MULTITRACK={"sessionize": {"token": "abc"}}):
        with pytest.raises(TypeError):
            get_config()


def test_get_config_validates_primitive_values() -> None:
    with override_settings(DJANGO_MULTITRACK={"event_code_length": 0}):
        with pytest.raises(ValueError, match="event_code_length"):
            get_config()

    with override_settings(DJANGO_MULTITRACK={"sessionize": {"base_url": " "}}):
        with pytest.raises(ValueError, match="base_url"):
            get_config()

    with override_settings(DJANGO_MULTITRACK={"sessionize": {"timeout": 0}}):
        with pytest.raises(ValueError, match=r"\['timeout'\]"):
            get_config()

    with override_settings(DJANGO_MULTITRACK={"sessionize": {"import_timeout": -1}}):
        with pytest.raises(ValueError, match="import_timeout"):
            get_config()

    with override_settings(DJANGO_MULTITRACK={"sessionize": {"lock_timeout": 0}}):
        with pytest.raises(ValueError, match="lock_timeout"):
            get_config()


def test_get_config_rejects_non_boolean_atomic() -> None:
    with override_settings(DJANGO_MULTITRACK={"sessionize": {"atomic": "yes"}}):
        with pytest.raises(TypeError, match="atomic"):
            get_config()


def test_get_config_cache_clears_on_setting_changed() -> None:
    with override_settings(DJANGO_MULTITRACK={"sessionize": {"timeout": 10}}):
        assert get_config().sessionize.timeout == 10

    with override_settings(DJANGO_MULTITRACK={"sessionize": {"timeout": 20}}):
        assert get_config().sessionize.timeout == 20


def test_get_config_caps_event_code_length_at_column_width() -> None:
    with override_settings(DJANGO_MULTITRACK={"event_code_length": 16}):
        assert get_config().event_code_length == 16

    with override_settings(DJANGO_MULTITRACK={"event_code_length": 17}):
        with pytest.raises(ValueError, match="between 1 and 16"):
            get_config()


def test_get_config_requires_lock_to_outlive_import() -> None:
    with override_settings(DJANGO_MULTITRACK={"sessionize": {"import_timeout": 900, "lock_timeout": 600}}):
        with pytest.raises(ValueError, match="lock_timeout'\\] must be at least"):
            get_config()

    with override_settings(DJANGO_MULTITRACK={"sessionize": {"import_timeout": 600, "lock_timeout": 600}}):
        assert get_config().sessionize.lock_timeout == 600
