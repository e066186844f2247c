"""
Tests for configuration loading.
"""

from pathlib import Path

import pytest

from freeslots.config import DEFAULT_PROMPT, AppConfig, DefaultsConfig


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(content, encoding="utf-8")
    return path


def test_defaults():
    config = AppConfig()

    assert config.defaults.working_days == [1, 2, 3, 4, 5]
    assert (config.defaults.start_hour, config.defaults.end_hour) == (9, 18)
    assert config.defaults.prompt == DEFAULT_PROMPT
    assert config.lookahead_days == 30
    assert config.assistant.model == "gpt-4o-mini"


def test_load_from_yaml(tmp_path):
    path = _write(
        tmp_path,
        """
defaults:
  working_days: [1, 3, 3, 5]
  start_hour: 10
  end_hour: 24
  timezone: Europe/Berlin
lookahead_days: 14
usage_log:
  enabled: false
""",
    )

    config = AppConfig.load_from_yaml(path)

    assert config.defaults.working_days == [1, 3, 5]
    assert config.defaults.end_hour == 24
    assert config.lookahead_days == 14
    assert not config.usage_log.enabled

    working_hours = config.defaults.working_hours()
    assert working_hours.working_days == frozenset({1, 3, 5})
    assert working_hours.timezone == "Europe/Berlin"


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        AppConfig.load_from_yaml(tmp_path / "missing.yaml")


def test_load_without_file_uses_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    assert AppConfig.load() == AppConfig()


def test_invalid_yaml_raises_value_error(tmp_path):
    path = _write(tmp_path, "defaults: [unclosed")

    with pytest.raises(ValueError, match="Invalid YAML"):
        AppConfig.load_from_yaml(path)


def test_non_mapping_root_rejected(tmp_path):
    path = _write(tmp_path, "- just\n- a list\n")

    with pytest.raises(ValueError, match="mapping"):
        AppConfig.load_from_yaml(path)


@pytest.mark.parametrize(
    "values",
    [
        {"working_days": []},
        {"working_days": [8]},
        {"start_hour": 24},
        {"end_hour": 25},
        {"timezone": "Mars/Olympus"},
    ],
)
def test_invalid_defaults_rejected(values):
    with pytest.raises(ValueError):
        DefaultsConfig(**values)


def test_invalid_lookahead_rejected():
    with pytest.raises(ValueError):
        AppConfig(lookahead_days=0)


def test_api_key_falls_back_to_environment(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-from-env")

    assert AppConfig().assistant.get_api_key() == "sk-from-env"
    assert AppConfig(assistant={"api_key": "sk-from-file"}).assistant.get_api_key() == "sk-from-file"
