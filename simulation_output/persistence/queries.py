"""
Output Query Interface

Read-side helpers for inspecting an output database after (or during) a
run. All functions return Polars DataFrames.
"""

from typing import Any

import duckdb
import polars as pl

from .models import REPORTING_FREQUENCY_NAMES, ReportingFrequency


# ============================================================================
# Time-Series Queries
# ============================================================================


def list_report_variables(conn: duckdb.DuckDBPyConnection) -> pl.DataFrame:
    """List every registered series with its number of recorded values.

    Returns:
        Polars DataFrame with columns:
        - ReportDataDictionaryIndex, IsMeter, KeyValue, Name,
          ReportingFrequency, Units
        - value_count: Number of ReportData rows for the series

    Examples:
        >>> df = list_report_variables(conn)
        >>> df["Name"].to_list()
        ['Electricity:Facility', 'Zone Mean Air Temperature']
    """
    query = """
        SELECT
            rdd."ReportDataDictionaryIndex",
            rdd."IsMeter",
            rdd."KeyValue",
            rdd."Name",
            rdd."ReportingFrequency",
            rdd."Units",
            COUNT(rd."ReportDataIndex") AS value_count
        FROM "ReportDataDictionary" rdd
        LEFT JOIN "ReportData" rd
            ON rd."ReportDataDictionaryIndex" = rdd."ReportDataDictionaryIndex"
        GROUP BY ALL
        ORDER BY rdd."ReportDataDictionaryIndex"
    """
    return conn.execute(query).pl()


def get_report_variable_series(
    conn: duckdb.DuckDBPyConnection,
    name: str,
    key_value: str | None = None,
    frequency: ReportingFrequency | int | None = None,
) -> pl.DataFrame:
    """Get the values of one series in time order.

    Args:
        conn: DuckDB connection
        name: Series name (e.g. "Zone Mean Air Temperature")
        key_value: Restrict to one key (e.g. a zone name)
        frequency: Restrict to one ReportingFrequency

    Returns:
        Polars DataFrame with columns:
        - TimeIndex, Month, Day, Hour, Minute, Interval, KeyValue
        - Value: Reported value
        - MinValue, MaxValue: Extremes (null unless aggregated)
    """
    query = """
        SELECT
            "TimeIndex",
            "Month",
            "Day",
            "Hour",
            "Minute",
            "Interval",
            "KeyValue",
            "Value",
            "MinValue",
            "MaxValue"
        FROM "ReportVariableWithTime"
        WHERE "Name" = ?
    """
    params: list[Any] = [name]
    if key_value is not None:
        query += ' AND "KeyValue" = ?'
        params.append(key_value)
    if frequency is not None:
        query += ' AND "ReportingFrequency" = ?'
        params.append(REPORTING_FREQUENCY_NAMES[ReportingFrequency(frequency)])
    query += ' ORDER BY "TimeIndex", "KeyValue"'

    return conn.execute(query, params).pl()


def get_time_index(
    conn: duckdb.DuckDBPyConnection,
    environment_period_index: int | None = None,
) -> pl.DataFrame:
    """Get the Time table, optionally for one environment period."""
    query = 'SELECT * FROM "Time"'
    params: list[Any] = []
    if environment_period_index is not None:
        query += ' WHERE "EnvironmentPeriodIndex" = ?'
        params.append(environment_period_index)
    query += ' ORDER BY "TimeIndex"'
    return conn.execute(query, params).pl()


# ============================================================================
# Tabular Report Queries
# ============================================================================


def get_tabular_report(
    conn: duckdb.DuckDBPyConnection,
    report_name: str,
    table_name: str | None = None,
) -> pl.DataFrame:
    """Get the cells of one tabular report with their labels resolved.

    Only available in databases written with tabular output enabled.

    Returns:
        Polars DataFrame with columns ReportName, ReportForString,
        TableName, RowName, ColumnName, Units, RowId, ColumnId, Value
    """
    query = """
        SELECT
            "ReportName",
            "ReportForString",
            "TableName",
            "RowName",
            "ColumnName",
            "Units",
            "RowId",
            "ColumnId",
            "Value"
        FROM "TabularDataWithStrings"
        WHERE "ReportName" = ?
    """
    params: list[Any] = [report_name]
    if table_name is not None:
        query += ' AND "TableName" = ?'
        params.append(table_name)
    query += ' ORDER BY "TableName", "RowId", "ColumnId"'
    return conn.execute(query, params).pl()


# ============================================================================
# Run Bookkeeping Queries
# ============================================================================


def get_errors(
    conn: duckdb.DuckDBPyConnection, simulation_index: int | None = None
) -> pl.DataFrame:
    """Get recorded error messages in the order they were raised."""
    query = 'SELECT * FROM "Errors"'
    params: list[Any] = []
    if simulation_index is not None:
        query += ' WHERE "SimulationIndex" = ?'
        params.append(simulation_index)
    query += ' ORDER BY "ErrorIndex"'
    return conn.execute(query, params).pl()


def get_simulations(conn: duckdb.DuckDBPyConnection) -> pl.DataFrame:
    return conn.execute('SELECT * FROM "Simulations" ORDER BY "SimulationIndex"').pl()
