"""Pydantic schemas for output configuration."""
from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

# Single writer, relaxed durability: the output file is disposable if the
# run aborts. There is no exclusive-locking or journal/sync setting here:
# a read-write DuckDB connection already holds the file lock exclusively,
# and DuckDB's write-ahead log cannot be disabled. A high checkpoint
# threshold defers checkpoints to close instead.
DEFAULT_STORE_SETTINGS: dict[str, str | int | bool] = {
    "threads": 1,
    "checkpoint_threshold": "1GB",
}

_SETTING_NAME = re.compile(r"^[a-z_][a-z0-9_]*$")


class OutputMode(str, Enum):
    """What the recorder writes.

    Values are matched case-insensitively, so "simpleandtabular" and
    "SimpleAndTabular" are the same mode.
    """
    DISABLED = "disabled"
    SIMPLE = "Simple"
    SIMPLE_AND_TABULAR = "SimpleAndTabular"

    @classmethod
    def _missing_(cls, value: object) -> OutputMode | None:
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.lower():
                    return member
        return None


class OutputConfig(BaseModel):
    """Output database configuration.

    Example YAML:
        mode: SimpleAndTabular
        database_path: out/eplusout.db
        diagnostic_log_path: out/eplusout.err
        store_settings:
          threads: 1
    """
    mode: OutputMode = Field(OutputMode.DISABLED, description="What to write")
    database_path: Path = Field(
        Path("simulation_output.db"), description="Output database file, or :memory:"
    )
    diagnostic_log_path: Path = Field(
        Path("simulation_output.err"), description="Plain-text diagnostic log (appended)"
    )
    store_settings: dict[str, str | int | bool] = Field(
        default_factory=lambda: dict(DEFAULT_STORE_SETTINGS),
        description="DuckDB settings applied when the database is opened",
    )

    @field_validator("store_settings")
    @classmethod
    def validate_setting_names(cls, v: dict[str, str | int | bool]) -> dict[str, str | int | bool]:
        """Validate setting names are plain identifiers."""
        for name in v:
            if not _SETTING_NAME.match(name):
                raise ValueError(f"Invalid store setting name: {name!r}")
        return v

    @property
    def writes_output(self) -> bool:
        return self.mode != OutputMode.DISABLED

    @property
    def writes_tabular(self) -> bool:
        return self.mode == OutputMode.SIMPLE_AND_TABULAR

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> OutputConfig:
        """Create config from a plain dict (e.g. parsed YAML)."""
        return cls.model_validate(config_dict)
