"""YAML configuration loader."""
from pathlib import Path

import yaml
from pydantic import ValidationError

from .schemas import OutputConfig


def load_config(config_path: str | Path) -> OutputConfig:
    """
    Load and validate output configuration from YAML file.

    The file may hold the settings at top level or under an ``output`` key.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated OutputConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config is empty or invalid
        yaml.YAMLError: If YAML parsing fails
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        config_dict = yaml.safe_load(f)

    if config_dict is None:
        raise ValueError(f"Empty configuration file: {config_path}")

    if isinstance(config_dict, dict) and "output" in config_dict:
        config_dict = config_dict["output"]

    try:
        config = OutputConfig.from_dict(config_dict)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e

    return config
