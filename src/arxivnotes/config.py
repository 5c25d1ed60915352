"""Environment-based configuration for arxiv-notes."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .exceptions import ConfigError

DEFAULT_SUMMARY_BASE_URL = (
    "https://lqjltyh9ah.execute-api.ap-southeast-2.amazonaws.com/obsidian-summarization-v1"
)
COLLISION_POLICIES = ("skip", "overwrite", "suffix")


@dataclass(frozen=True)
class Settings:
    summary_api_key: str | None
    summary_base_url: str
    summary_translate: bool
    summary_target_language: str
    summary_max_attempts: int
    summary_initial_interval_sec: float
    summary_max_interval_sec: float
    summary_initial_delay_sec: float

    http_timeout_sec: int
    network_trust_env: bool

    vault_dir: Path
    paper_dir: Path | None
    create_linked_notes: bool
    note_collision_policy: str

    log_level: str


_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _read_env(*keys: str, default: str | None = None) -> str | None:
    for key in keys:
        value = os.getenv(key)
        if value is not None and value != "":
            return value
    return default


def _read_bool(*keys: str, default: bool) -> bool:
    raw = _read_env(*keys)
    if raw is None:
        return default
    return raw.strip().lower() not in _FALSE_VALUES


def _read_int(*keys: str, default: int) -> int:
    raw = _read_env(*keys)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"Invalid integer for {keys[0]}: {raw}") from exc


def _read_float(*keys: str, default: float) -> float:
    raw = _read_env(*keys)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"Invalid float for {keys[0]}: {raw}") from exc


def load_settings(dotenv_path: str | Path | None = None) -> Settings:
    """Load project settings from .env and OS env vars."""

    load_dotenv(dotenv_path=dotenv_path, override=False)

    max_attempts = _read_int("SUMMARY_MAX_ATTEMPTS", default=60)
    if max_attempts < 1:
        raise ConfigError(f"SUMMARY_MAX_ATTEMPTS must be positive: {max_attempts}")

    collision_policy = (
        _read_env("NOTE_COLLISION_POLICY", default="skip") or "skip"
    ).strip().lower()
    if collision_policy not in COLLISION_POLICIES:
        joined = ", ".join(COLLISION_POLICIES)
        raise ConfigError(
            f"Invalid NOTE_COLLISION_POLICY: {collision_policy} (expected one of {joined})"
        )

    paper_dir_raw = _read_env("PAPER_DIR")

    return Settings(
        summary_api_key=_read_env("OPENAI_API_KEY", "API_KEY"),
        summary_base_url=(
            _read_env("SUMMARY_BASE_URL", default=DEFAULT_SUMMARY_BASE_URL)
            or DEFAULT_SUMMARY_BASE_URL
        ).rstrip("/"),
        summary_translate=_read_bool("SUMMARY_TRANSLATE", default=False),
        summary_target_language=_read_env("SUMMARY_TARGET_LANGUAGE", default="Korean")
        or "Korean",
        summary_max_attempts=max_attempts,
        summary_initial_interval_sec=_read_float(
            "SUMMARY_INITIAL_INTERVAL_SEC", default=1.0
        ),
        summary_max_interval_sec=_read_float("SUMMARY_MAX_INTERVAL_SEC", default=10.0),
        summary_initial_delay_sec=_read_float("SUMMARY_INITIAL_DELAY_SEC", default=2.0),
        http_timeout_sec=_read_int("HTTP_TIMEOUT_SEC", default=30),
        network_trust_env=_read_bool("NETWORK_TRUST_ENV", default=False),
        vault_dir=Path(_read_env("VAULT_DIR", default=".") or "."),
        paper_dir=Path(paper_dir_raw.strip()) if paper_dir_raw and paper_dir_raw.strip() else None,
        create_linked_notes=_read_bool("CREATE_LINKED_NOTES", default=True),
        note_collision_policy=collision_policy,
        log_level=(_read_env("LOG_LEVEL", default="INFO") or "INFO").upper(),
    )
