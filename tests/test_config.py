from pathlib import Path

import pytest

from arxivnotes.config import DEFAULT_SUMMARY_BASE_URL, load_settings
from arxivnotes.exceptions import ConfigError


ENV_KEYS = [
    "OPENAI_API_KEY",
    "API_KEY",
    "SUMMARY_BASE_URL",
    "SUMMARY_TRANSLATE",
    "SUMMARY_TARGET_LANGUAGE",
    "SUMMARY_MAX_ATTEMPTS",
    "SUMMARY_INITIAL_INTERVAL_SEC",
    "SUMMARY_MAX_INTERVAL_SEC",
    "SUMMARY_INITIAL_DELAY_SEC",
    "HTTP_TIMEOUT_SEC",
    "NETWORK_TRUST_ENV",
    "VAULT_DIR",
    "PAPER_DIR",
    "CREATE_LINKED_NOTES",
    "NOTE_COLLISION_POLICY",
    "LOG_LEVEL",
]


def clear_env(monkeypatch):
    # setenv first so values loaded from .env files are undone on teardown
    for key in ENV_KEYS:
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)


def test_defaults_without_dotenv(tmp_path, monkeypatch):
    clear_env(monkeypatch)

    settings = load_settings(dotenv_path=tmp_path / "missing.env")

    assert settings.summary_api_key is None
    assert settings.summary_base_url == DEFAULT_SUMMARY_BASE_URL
    assert settings.summary_translate is False
    assert settings.summary_target_language == "Korean"
    assert settings.summary_max_attempts == 60
    assert settings.summary_initial_interval_sec == 1.0
    assert settings.summary_max_interval_sec == 10.0
    assert settings.summary_initial_delay_sec == 2.0
    assert settings.http_timeout_sec == 30
    assert settings.network_trust_env is False
    assert settings.vault_dir == Path(".")
    assert settings.paper_dir is None
    assert settings.create_linked_notes is True
    assert settings.note_collision_policy == "skip"
    assert settings.log_level == "INFO"


def test_load_settings_from_dotenv_with_aliases(tmp_path, monkeypatch):
    clear_env(monkeypatch)

    dotenv = tmp_path / ".env"
    dotenv.write_text(
        "\n".join(
            [
                "API_KEY=test-summary-key",
                "SUMMARY_BASE_URL=https://summary.example.com/v1/",
                "SUMMARY_TRANSLATE=true",
                "SUMMARY_TARGET_LANGUAGE=Japanese",
                "SUMMARY_MAX_ATTEMPTS=5",
                "PAPER_DIR=papers",
                "CREATE_LINKED_NOTES=false",
                "NOTE_COLLISION_POLICY=Suffix",
                "LOG_LEVEL=debug",
            ]
        ),
        encoding="utf-8",
    )

    settings = load_settings(dotenv_path=dotenv)

    assert settings.summary_api_key == "test-summary-key"
    assert settings.summary_base_url == "https://summary.example.com/v1"
    assert settings.summary_translate is True
    assert settings.summary_target_language == "Japanese"
    assert settings.summary_max_attempts == 5
    assert settings.paper_dir == Path("papers")
    assert settings.create_linked_notes is False
    assert settings.note_collision_policy == "suffix"
    assert settings.log_level == "DEBUG"


def test_openai_api_key_takes_precedence_over_alias(monkeypatch, tmp_path):
    clear_env(monkeypatch)
    monkeypatch.setenv("OPENAI_API_KEY", "primary")
    monkeypatch.setenv("API_KEY", "alias")

    settings = load_settings(dotenv_path=tmp_path / "missing.env")

    assert settings.summary_api_key == "primary"


def test_missing_api_key_does_not_fail_loading(monkeypatch, tmp_path):
    clear_env(monkeypatch)

    settings = load_settings(dotenv_path=tmp_path / "missing.env")

    assert settings.summary_api_key is None


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("NOTE_COLLISION_POLICY", "rename"),
        ("SUMMARY_MAX_ATTEMPTS", "0"),
        ("SUMMARY_MAX_ATTEMPTS", "many"),
        ("HTTP_TIMEOUT_SEC", "slow"),
        ("SUMMARY_INITIAL_INTERVAL_SEC", "fast"),
    ],
)
def test_invalid_values_raise_config_error(monkeypatch, tmp_path, key, value):
    clear_env(monkeypatch)
    monkeypatch.setenv(key, value)

    with pytest.raises(ConfigError):
        load_settings(dotenv_path=tmp_path / "missing.env")
