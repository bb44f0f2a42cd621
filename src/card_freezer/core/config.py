"""Configuration loader for encryption and logging settings."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

import yaml


@dataclass(frozen=True)
class EncryptionConfig:
    key_env: str
    allow_default_key: bool


@dataclass(frozen=True)
class LoggingConfig:
    level: str


@dataclass(frozen=True)
class AppConfig:
    encryption: EncryptionConfig
    logging: LoggingConfig


DEFAULT_CONFIG_REL_PATH = Path("config/freezer.yaml")
DEFAULT_PASS_KEY_ENV = "CARD_FREEZER_PASSKEY"
CONFIG_PATH_ENV = "CARD_FREEZER_CONFIG_PATH"
RUNTIME_ENV_REL_PATH = Path("config/runtime.env")
LOG_FORMAT = "%(levelname)s | %(name)s | %(message)s"
_RUNTIME_ENV_LOADED = False


def _split_key_value(raw_line: str) -> tuple[str, str] | None:
    """Parse a shell or PowerShell key assignment line."""
    line = raw_line.strip()
    if not line or line.startswith("#"):
        return None

    if line.startswith("$env:"):
        line = line[len("$env:") :]
    elif line.startswith("export "):
        line = line[len("export ") :]

    if "=" not in line:
        return None

    key, value = line.split("=", 1)
    key = key.strip()
    value = value.strip()
    if not key:
        return None

    if (value.startswith("'") and value.endswith("'")) or (
        value.startswith('"') and value.endswith('"')
    ):
        value = value[1:-1]

    return key, value


def _project_root() -> Path:
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[3]


def _iter_env_candidates() -> list[Path]:
    """Return candidate files that may contain the pass key."""
    paths: list[Path] = []
    for root in (Path.cwd(), _project_root()):
        paths.extend(
            [
                root / ".env.local",
                root / ".env.local.ps1",
                root / RUNTIME_ENV_REL_PATH,
            ]
        )

    unique: list[Path] = []
    seen: set[Path] = set()
    for path in paths:
        resolved = path.resolve()
        if resolved in seen:
            continue
        seen.add(resolved)
        unique.append(resolved)
    return unique


def _load_env_from_file(path: Path) -> None:
    """Load KEY=VALUE lines from a local file into process environment."""
    if not path.exists() or not path.is_file():
        return
    with path.open("r", encoding="utf-8") as file:
        for line in file:
            parsed = _split_key_value(line)
            if not parsed:
                continue
            key, value = parsed
            if key not in os.environ:
                os.environ[key] = value


def _ensure_runtime_env_loaded() -> None:
    """Load local env files once per process."""
    global _RUNTIME_ENV_LOADED
    if _RUNTIME_ENV_LOADED:
        return
    for path in _iter_env_candidates():
        _load_env_from_file(path)
    _RUNTIME_ENV_LOADED = True


def resolve_default_config_path() -> Path:
    """Resolve configuration path for source and packaged execution."""
    env_path = os.getenv(CONFIG_PATH_ENV)
    if env_path:
        return Path(env_path)

    candidates = [
        Path.cwd() / DEFAULT_CONFIG_REL_PATH,
        _project_root() / DEFAULT_CONFIG_REL_PATH,
    ]
    for candidate in candidates:
        if candidate.exists():
            return candidate
    return candidates[0]


def default_config() -> AppConfig:
    return AppConfig(
        encryption=EncryptionConfig(key_env=DEFAULT_PASS_KEY_ENV, allow_default_key=False),
        logging=LoggingConfig(level="INFO"),
    )


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load the configuration from YAML, using defaults when no file exists."""
    path = config_path or resolve_default_config_path()
    if config_path is None and not path.exists():
        return default_config()

    with path.open("r", encoding="utf-8") as file:
        raw = yaml.safe_load(file) or {}

    encryption = raw.get("encryption") or {}
    logging_section = raw.get("logging") or {}
    return AppConfig(
        encryption=EncryptionConfig(
            key_env=str(encryption.get("key_env", DEFAULT_PASS_KEY_ENV)),
            allow_default_key=bool(encryption.get("allow_default_key", False)),
        ),
        logging=LoggingConfig(
            level=str(logging_section.get("level", "INFO")).upper(),
        ),
    )


def configure_logging(config: AppConfig) -> None:
    """Apply the configured log level to the root logger."""
    logging.basicConfig(level=config.logging.level, format=LOG_FORMAT)


def get_required_env(name: str) -> str:
    """Return a required environment variable or raise a clear error."""
    _ensure_runtime_env_loaded()
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Required environment variable is missing: {name}")
    return value


def get_pass_key(config: AppConfig) -> str:
    """Return the configured pass key.

    An empty string is returned when no key is set and the development
    fallback is allowed; the store then derives its built-in key.
    """
    try:
        return get_required_env(config.encryption.key_env)
    except RuntimeError:
        if config.encryption.allow_default_key:
            return ""
        raise
