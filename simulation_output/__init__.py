"""Simulation output persistence: record a building-energy run into DuckDB."""

from .building import BuildingModel
from .config import OutputConfig, OutputMode, load_config
from .persistence import (
    OutputDatabaseError,
    OutputRecorder,
    OutputWriter,
    ReportingFrequency,
    StringType,
)

__all__ = [
    "BuildingModel",
    "OutputConfig",
    "OutputDatabaseError",
    "OutputMode",
    "OutputRecorder",
    "OutputWriter",
    "ReportingFrequency",
    "StringType",
    "load_config",
]
