"""Handles the harness configuration and its optional YAML file."""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

logger = logging.getLogger(__name__)

# YAML keys mirror the command-line option names.
_YAML_KEYS = {
    "cover": "coverage_enabled",
    "coverprofile": "profile_path",
    "verbose": "verbose",
    "debug": "debug",
}


class HarnessConfig(BaseModel):
    """
    Options for a harness run, built once and passed explicitly.

    Setting `profile_path` turns coverage on.
    """

    model_config = ConfigDict(frozen=True)

    coverage_enabled: bool = False
    profile_path: Path | None = None
    verbose: bool = False
    debug: bool = False

    @model_validator(mode="before")
    @classmethod
    def _profile_implies_coverage(cls, data: Any) -> Any:  # noqa: ANN401
        if not isinstance(data, dict):
            return data
        if data.get("profile_path") == "":
            data = {**data, "profile_path": None}
        if data.get("profile_path"):
            data = {**data, "coverage_enabled": True}
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HarnessConfig":
        """
        Create a HarnessConfig from a mapping that uses the YAML key names.

        Raises:
            ValueError: If a key is unknown or a value has the wrong type.

        """
        unknown = sorted(set(data) - set(_YAML_KEYS))
        if unknown:
            msg = f"Unknown configuration key(s): {', '.join(unknown)}"
            raise ValueError(msg)
        try:
            return cls(**{_YAML_KEYS[key]: value for key, value in data.items()})
        except ValidationError as e:
            msg = f"Invalid configuration: {e}"
            raise ValueError(msg) from e

    def merged(self, **overrides: Any) -> "HarnessConfig":  # noqa: ANN401
        """Return a copy with the given non-None values replacing the current ones."""
        values = self.model_dump()
        values.update({key: value for key, value in overrides.items() if value is not None})
        return HarnessConfig(**values)


def load_config(config_path: str | Path) -> HarnessConfig:
    """
    Load and validate a YAML configuration file.

    Args:
        config_path: The path to the YAML file.

    Returns:
        The validated HarnessConfig.

    Raises:
        FileNotFoundError: If the file does not exist.
        yaml.YAMLError: If the file is not valid YAML.
        ValueError: If the content is not a valid configuration.

    """
    path = Path(config_path)
    if not path.is_file():
        msg = f"Configuration file not found at: {config_path}"
        raise FileNotFoundError(msg)

    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        msg = f"Error parsing YAML config file: {e}"
        raise yaml.YAMLError(msg) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        msg = "Config file must be a YAML mapping (dictionary)."
        raise ValueError(msg)

    config = HarnessConfig.from_dict(data)
    logger.debug("Loaded configuration from %s: %s", path, config)
    return config
