"""
Persistence layer for simulation output.

Provides DuckDB-based storage for time-series results, model metadata,
sizing results, daylighting maps, tabular reports and run bookkeeping.
"""

from .connection import DatabaseManager, OutputDatabaseError
from .models import (
    ReportingFrequency,
    StorageType,
    StringType,
    TableRecord,
    TimestepType,
)
from .recorder import OutputRecorder, OutputWriter

__all__ = [
    "DatabaseManager",
    "OutputDatabaseError",
    "OutputRecorder",
    "OutputWriter",
    "ReportingFrequency",
    "StorageType",
    "StringType",
    "TableRecord",
    "TimestepType",
]
