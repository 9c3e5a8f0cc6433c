"""
DDL Generation from Pydantic Models

Generates CREATE TABLE, CREATE INDEX and CREATE VIEW statements from the
record models. This keeps the on-disk schema in sync with the models the
writers bind against.

Every identifier is double-quoted: several column names (``Time``,
``Interval``, ``Value``) are reserved words in the store's SQL dialect.
"""

import inspect
from enum import Enum
from typing import Any, get_args, get_origin

import duckdb
from pydantic import BaseModel

from .models import CORE_RECORDS, STRING_TYPE_NAMES, TABULAR_RECORDS, StringType


# ============================================================================
# Type Mapping
# ============================================================================

PYTHON_TO_SQL_TYPE_MAP = {
    str: "VARCHAR",
    int: "BIGINT",
    float: "DOUBLE",
    # logical flags are stored as 0/1
    bool: "INTEGER",
}


def quote_identifier(name: str) -> str:
    """Quote a table or column name for use in SQL.

    Examples:
        >>> quote_identifier("Time")
        '"Time"'
    """
    return '"' + name.replace('"', '""') + '"'


def python_type_to_sql_type(py_type: Any) -> str:
    """Convert Python type annotation to SQL type.

    Args:
        py_type: Python type annotation (can be Optional, Enum, etc.)

    Returns:
        SQL type string (VARCHAR, BIGINT, etc.)

    Examples:
        >>> python_type_to_sql_type(str)
        'VARCHAR'
        >>> python_type_to_sql_type(int | None)
        'BIGINT'
        >>> python_type_to_sql_type(bool)
        'INTEGER'
    """
    origin = get_origin(py_type)
    if origin is not None:
        # Optional[X] / X | None: use the first non-None member
        for arg in get_args(py_type):
            if arg is not type(None):
                py_type = arg
                break

    # IntEnum must be checked before Enum
    if inspect.isclass(py_type) and issubclass(py_type, int) and issubclass(py_type, Enum):
        return "BIGINT"
    if inspect.isclass(py_type) and issubclass(py_type, Enum):
        return "VARCHAR"

    return PYTHON_TO_SQL_TYPE_MAP.get(py_type, "VARCHAR")


# ============================================================================
# DDL Generation
# ============================================================================


def _table_name(model: type[BaseModel]) -> str:
    config = model.model_config
    if "table_name" not in config:
        raise ValueError(f"Model {model.__name__} missing model_config['table_name']")
    return config["table_name"]  # type: ignore[typeddict-item]


def generate_create_table_ddl(model: type[BaseModel]) -> str:
    """Generate CREATE TABLE DDL from a record model.

    Column names are the field aliases, in declaration order.

    Args:
        model: Record model class with model_config["table_name"]

    Returns:
        SQL CREATE TABLE statement

    Raises:
        ValueError: If model is missing required configuration

    Examples:
        >>> from simulation_output.persistence.models import TimeRecord
        >>> ddl = generate_create_table_ddl(TimeRecord)
        >>> 'CREATE TABLE IF NOT EXISTS "Time"' in ddl
        True
    """
    table_name = _table_name(model)
    config = model.model_config
    primary_key = config.get("primary_key", [])
    unique = config.get("unique", [])

    columns = []
    for field_name, field_info in model.model_fields.items():
        py_type = field_info.annotation
        sql_type = python_type_to_sql_type(py_type)
        null_constraint = "" if _is_field_optional(py_type, field_info) else " NOT NULL"
        column = quote_identifier(field_info.alias or field_name)
        columns.append(f"    {column} {sql_type}{null_constraint}")

    if primary_key:
        pk_cols = ", ".join(quote_identifier(c) for c in primary_key)
        columns.append(f"    PRIMARY KEY ({pk_cols})")

    for unique_cols in unique:
        cols = ", ".join(quote_identifier(c) for c in unique_cols)
        columns.append(f"    UNIQUE ({cols})")

    ddl = f"CREATE TABLE IF NOT EXISTS {quote_identifier(table_name)} (\n"
    ddl += ",\n".join(columns)
    ddl += "\n)"

    return ddl


def generate_create_indexes_ddl(model: type[BaseModel]) -> list[str]:
    """Generate CREATE INDEX statements from a record model.

    Args:
        model: Record model class with model_config["indexes"]

    Returns:
        List of SQL CREATE INDEX statements (empty if the model has none)
    """
    config = model.model_config
    indexes = config.get("indexes")
    if not indexes:
        return []

    table_name = quote_identifier(_table_name(model))

    ddl_statements = []
    for index_name, columns in indexes:
        cols = ", ".join(quote_identifier(c) for c in columns)
        ddl_statements.append(
            f"CREATE INDEX IF NOT EXISTS {quote_identifier(index_name)} ON {table_name} ({cols})"
        )

    return ddl_statements


# ============================================================================
# Views
# ============================================================================

REPORT_VARIABLE_WITH_TIME_VIEW = """CREATE OR REPLACE VIEW "ReportVariableWithTime" AS
SELECT
    rd."ReportDataIndex",
    rd."TimeIndex",
    rd."ReportDataDictionaryIndex",
    rd."Value",
    t."Month",
    t."Day",
    t."Hour",
    t."Minute",
    t."Dst",
    t."Interval",
    t."IntervalType",
    t."SimulationDays",
    t."DayType",
    t."EnvironmentPeriodIndex",
    t."WarmupFlag",
    rdd."IsMeter",
    rdd."Type",
    rdd."IndexGroup",
    rdd."TimestepType",
    rdd."KeyValue",
    rdd."Name",
    rdd."ReportingFrequency",
    rdd."ScheduleName",
    rdd."Units",
    red."ReportExtendedDataIndex",
    red."MaxValue",
    red."MaxMonth",
    red."MaxDay",
    red."MaxHour",
    red."MaxStartMinute",
    red."MaxMinute",
    red."MinValue",
    red."MinMonth",
    red."MinDay",
    red."MinHour",
    red."MinStartMinute",
    red."MinMinute"
FROM "ReportData" rd
INNER JOIN "Time" t ON t."TimeIndex" = rd."TimeIndex"
INNER JOIN "ReportDataDictionary" rdd
    ON rdd."ReportDataDictionaryIndex" = rd."ReportDataDictionaryIndex"
LEFT OUTER JOIN "ReportExtendedData" red ON red."ReportDataIndex" = rd."ReportDataIndex"
"""


def _tabular_view_ddl() -> str:
    joins = [
        ("reportn", "ReportNameIndex", "ReportName", StringType.REPORT_NAME),
        ("fs", "ReportForStringIndex", "ReportForString", StringType.REPORT_FOR_STRING),
        ("tn", "TableNameIndex", "TableName", StringType.TABLE_NAME),
        ("rn", "RowNameIndex", "RowName", StringType.ROW_NAME),
        ("cn", "ColumnNameIndex", "ColumnName", StringType.COLUMN_NAME),
        ("u", "UnitsIndex", "Units", StringType.UNITS),
    ]
    select = ['    td."Value" AS "Value"']
    select += [f'    {alias}."Value" AS "{label}"' for alias, _, label, _ in joins]
    select += ['    td."RowId" AS "RowId"', '    td."ColumnId" AS "ColumnId"']

    lines = ['CREATE OR REPLACE VIEW "TabularDataWithStrings" AS', "SELECT"]
    lines.append(",\n".join(select))
    lines.append('FROM "TabularData" td')
    for alias, column, _, string_type in joins:
        lines.append(
            f'INNER JOIN "Strings" {alias} ON {alias}."StringIndex" = td."{column}"'
            f' AND {alias}."StringTypeIndex" = {int(string_type)}'
        )
    return "\n".join(lines)


TABULAR_DATA_WITH_STRINGS_VIEW = _tabular_view_ddl()


def generate_view_ddl(tabular: bool = False) -> list[str]:
    """CREATE VIEW statements; run after the tables they join."""
    views = [REPORT_VARIABLE_WITH_TIME_VIEW]
    if tabular:
        views.append(TABULAR_DATA_WITH_STRINGS_VIEW)
    return views


def generate_string_types_seed_ddl() -> list[str]:
    """Seed rows for the StringTypes lookup table."""
    return [
        f'INSERT INTO "StringTypes" VALUES ({int(t)}, \'{name}\') ON CONFLICT DO NOTHING'
        for t, name in STRING_TYPE_NAMES.items()
    ]


def generate_full_schema_ddl(tabular: bool = False) -> list[str]:
    """Generate the complete ordered statement list for a fresh output file.

    Tables come first (each followed by its indexes), then the StringTypes
    seed rows when ``tabular`` is set, then the views.

    Args:
        tabular: Include the tabular-report tables and view

    Returns:
        List of SQL statements, one per element, in execution order

    Examples:
        >>> ddl = generate_full_schema_ddl()
        >>> any('"ReportVariableWithTime"' in s for s in ddl)
        True
        >>> any('"Strings"' in s for s in ddl)
        False
    """
    statements: list[str] = []

    models = CORE_RECORDS + (TABULAR_RECORDS if tabular else [])
    for model in models:
        statements.append(generate_create_table_ddl(model))
        statements.extend(generate_create_indexes_ddl(model))

    if tabular:
        statements.extend(generate_string_types_seed_ddl())

    statements.extend(generate_view_ddl(tabular=tabular))

    return statements


# ============================================================================
# Helper Functions
# ============================================================================


def _is_field_optional(py_type: Any, field_info: Any) -> bool:
    """Check if a field is optional (nullable).

    Args:
        py_type: Field type annotation
        field_info: Pydantic FieldInfo object

    Returns:
        True if field can be None
    """
    origin = get_origin(py_type)
    if origin is not None and type(None) in get_args(py_type):
        return True

    return field_info.default is None


# ============================================================================
# Schema Validation
# ============================================================================


def validate_table_schema(conn: Any, model: type[BaseModel]) -> tuple[bool, list[str]]:
    """Validate that a live table matches its record model.

    Args:
        conn: DuckDB connection
        model: Record model to validate against

    Returns:
        Tuple of (is_valid, list of error messages)

    Examples:
        >>> import duckdb
        >>> from simulation_output.persistence.models import ErrorRecord
        >>> conn = duckdb.connect(":memory:")
        >>> _ = conn.execute(generate_create_table_ddl(ErrorRecord))
        >>> validate_table_schema(conn, ErrorRecord)
        (True, [])
    """
    try:
        table_name = _table_name(model)
    except ValueError as e:
        return False, [str(e)]

    try:
        # DESCRIBE returns: column_name, column_type, null, key, default, extra
        result = conn.execute(f"DESCRIBE {quote_identifier(table_name)}").fetchall()
        db_columns = {row[0]: row[1] for row in result}
    except duckdb.Error as e:
        return False, [f"Table {table_name} does not exist: {e}"]

    errors = []
    model_columns = {
        (info.alias or name): python_type_to_sql_type(info.annotation)
        for name, info in model.model_fields.items()
    }

    for col in sorted(set(model_columns) - set(db_columns)):
        errors.append(f"Column '{col}' missing from table {table_name}")

    extra_columns = set(db_columns) - set(model_columns)
    if extra_columns:
        errors.append(f"Unexpected columns in {table_name}: {sorted(extra_columns)}")

    for col in sorted(set(model_columns) & set(db_columns)):
        if db_columns[col] != model_columns[col]:
            errors.append(
                f"Column '{col}' in {table_name} has type {db_columns[col]}, "
                f"expected {model_columns[col]}"
            )

    return len(errors) == 0, errors

