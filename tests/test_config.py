import pytest
from pydantic import ValidationError

from route_action_gen.config import Settings


def test_defaults():
    s = Settings(_env_file=None)
    assert s.framework == "auto"
    assert s.generated_dir_name == "_generated"
    assert s.log_level == "INFO"
    assert not s.write_unchanged


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("ROUTE_ACTION_GEN_FRAMEWORK", "flask-views")
    monkeypatch.setenv("ROUTE_ACTION_GEN_LOG_LEVEL", "debug")
    s = Settings(_env_file=None)
    assert s.framework == "flask-views"
    assert s.log_level == "DEBUG"


@pytest.mark.parametrize("value", ["", "gen/out", "../x", "has-dash"])
def test_generated_dir_name_must_be_plain(value):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, generated_dir_name=value)


def test_invalid_log_level():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, log_level="chatty")
