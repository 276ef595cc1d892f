"""YAML-backed loader for provider configuration."""

from __future__ import annotations

from importlib.resources import as_file, files
from pathlib import Path

import yaml
from pydantic import ValidationError

from gh_complete.core.models import ProviderConfig

DEFAULT_CONFIG_FILENAME = "default_github.yaml"


def load_config(path: str | Path) -> ProviderConfig:
    """Load and validate a provider configuration file."""
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        raw_data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Failed to parse YAML config at {config_path}: {exc}") from exc
    except OSError as exc:
        raise OSError(f"Failed to read config file {config_path}: {exc}") from exc

    if raw_data is None:
        raw_data = {}
    if not isinstance(raw_data, dict):
        raise ValueError(f"Invalid config file at {config_path}: root must be a YAML mapping")

    try:
        return ProviderConfig.model_validate(raw_data)
    except ValidationError as exc:
        detail_text = _format_validation_errors(exc)
        raise ValueError(f"Invalid config file at {config_path}:\n{detail_text}") from exc


def load_default_config() -> ProviderConfig:
    """Load the packaged default configuration."""
    resource = files("gh_complete").joinpath(DEFAULT_CONFIG_FILENAME)
    with as_file(resource) as default_path:
        return load_config(default_path)


def _format_validation_errors(exc: ValidationError) -> str:
    details: list[str] = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "<root>"
        details.append(f"{location}: {error['msg']}")
    return "\n".join(f"- {line}" for line in details)
