"""Configuration module for simulation output."""
from pydantic import ValidationError

from .loader import load_config
from .schemas import DEFAULT_STORE_SETTINGS, OutputConfig, OutputMode

__all__ = [
    "DEFAULT_STORE_SETTINGS",
    "OutputConfig",
    "OutputMode",
    "ValidationError",
    "load_config",
]
