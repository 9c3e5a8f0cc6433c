"""
DuckDB Connection Manager

Owns the output database file: the exclusivity probe, the connection and
its settings, schema creation, the prepared-statement cache and orderly
teardown.
"""

import logging
import os
from pathlib import Path
from typing import Any

import duckdb

from ..config.schemas import DEFAULT_STORE_SETTINGS
from .models import (
    CORE_RECORDS,
    TABULAR_RECORDS,
    ErrorRecord,
    SimulationRecord,
    StringRecord,
    TabularDataRecord,
)
from .schema_generator import (
    generate_full_schema_ddl,
    quote_identifier,
    validate_table_schema,
)
from .statements import PreparedStatement, StatementCache, TransactionLog

logger = logging.getLogger(__name__)

MEMORY_DATABASE = ":memory:"

# Cache keys for statements that are not plain full-row inserts
UPDATE_SIMULATION = "UpdateSimulation"
UPDATE_ERROR = "UpdateError"
INSERT_STRING = "InsertString"
LOOKUP_STRING = "LookupString"


class OutputDatabaseError(RuntimeError):
    """The output database could not be created or opened."""


def _sql_literal(value: str | int | bool) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return "'" + str(value).replace("'", "''") + "'"


class DatabaseManager:
    """Manages the DuckDB connection, schema and statements of one output file.

    Responsibilities:
    - Verify the target file can be created and used exclusively
    - Open the connection and apply store settings
    - Create the schema from the record models
    - Prepare and own the statements the writers use
    - Finalize statements and close the connection on teardown

    Usage:
        with DatabaseManager("simulation_output.db") as manager:
            manager.initialize_schema(tabular=True)
            statements = manager.prepare_statements(tabular=True)
            ...

    Raises:
        OutputDatabaseError: From the constructor, if the probe or the
            connection fails
    """

    def __init__(
        self,
        db_path: str | Path = "simulation_output.db",
        diagnostic_log_path: str | Path | None = None,
        store_settings: dict[str, str | int | bool] | None = None,
    ):
        """Probe the target, then open it read-write.

        Args:
            db_path: Output database file, or ":memory:"
            diagnostic_log_path: Diagnostic log that must be writable (optional)
            store_settings: DuckDB settings applied after connecting
                (defaults to DEFAULT_STORE_SETTINGS)
        """
        self.db_path = db_path if str(db_path) == MEMORY_DATABASE else Path(db_path)
        self.diagnostic_log_path = (
            Path(diagnostic_log_path) if diagnostic_log_path is not None else None
        )
        self.store_settings = (
            dict(DEFAULT_STORE_SETTINGS) if store_settings is None else dict(store_settings)
        )
        self.statements = StatementCache()
        self._closed = False

        self._probe()

        try:
            self.conn = duckdb.connect(str(self.db_path))
        except duckdb.Error as e:
            raise OutputDatabaseError(f"Cannot open output database {self.db_path}: {e}") from e
        self.transaction = TransactionLog(self.conn)

        logger.info("Output database %s opened", self.db_path)
        self.apply_settings()

    @property
    def is_memory(self) -> bool:
        return str(self.db_path) == MEMORY_DATABASE

    @property
    def in_transaction(self) -> bool:
        return self.transaction.active

    # ------------------------------------------------------------------
    # Probe and settings
    # ------------------------------------------------------------------

    def _probe(self) -> None:
        """Check that the diagnostic log and the target file are usable.

        Order: the diagnostic log is opened for append; the target file is
        created fresh (truncating any previous output) and removed; then a
        scratch database is opened at the target path, a test table is
        created, and the file is removed again.
        """
        if self.diagnostic_log_path is not None:
            try:
                with open(self.diagnostic_log_path, "a", encoding="utf-8") as log:
                    log.write(f"Output database {self.db_path} open for processing\n")
            except OSError as e:
                raise OutputDatabaseError(
                    f"Cannot open diagnostic log {self.diagnostic_log_path}: {e}"
                ) from e

        if self.is_memory:
            return

        try:
            with open(self.db_path, "w"):
                pass
            os.remove(self.db_path)
        except OSError as e:
            raise OutputDatabaseError(f"Cannot create output database {self.db_path}: {e}") from e

        try:
            probe = duckdb.connect(str(self.db_path))
            try:
                probe.execute('CREATE TABLE "Test" ("Id" INTEGER)')
            finally:
                probe.close()
            self._remove_database_files()
        except (duckdb.Error, OSError) as e:
            raise OutputDatabaseError(
                f"Output database {self.db_path} is not usable (is it open elsewhere?): {e}"
            ) from e

    def _remove_database_files(self) -> None:
        for path in (Path(self.db_path), Path(f"{self.db_path}.wal")):
            if path.exists():
                os.remove(path)

    def apply_settings(self) -> bool:
        """Apply store settings. A failing setting is logged and skipped.

        Returns:
            True if every setting was applied
        """
        all_applied = True
        for name, value in self.store_settings.items():
            try:
                self.conn.execute(f"SET {name} = {_sql_literal(value)}")
            except duckdb.Error as e:
                all_applied = False
                logger.error("Cannot apply setting %s = %r: %s", name, value, e)
        return all_applied

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------

    def initialize_schema(self, tabular: bool = False) -> bool:
        """Create all tables, indexes and views.

        Each statement runs on its own; a failing statement is logged and
        the remaining statements still run.

        Args:
            tabular: Also create the tabular-report tables and view

        Returns:
            True if every statement succeeded
        """
        all_ok = True
        for statement in generate_full_schema_ddl(tabular=tabular):
            try:
                self.conn.execute(statement)
            except duckdb.Error as e:
                all_ok = False
                logger.error("Schema statement failed: %s\n%s", e, statement)

        logger.info("Schema initialized (tabular=%s)", tabular)
        return all_ok

    def validate_schema(self, tabular: bool = False) -> bool:
        """Check every table against its record model and log mismatches.

        Returns:
            True if all tables match
        """
        models = CORE_RECORDS + (TABULAR_RECORDS if tabular else [])

        all_valid = True
        for model in models:
            is_valid, errors = validate_table_schema(self.conn, model)
            if not is_valid:
                all_valid = False
                for error in errors:
                    logger.error("Schema mismatch: %s", error)
        return all_valid

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def prepare_statements(self, tabular: bool = False) -> StatementCache:
        """Register every statement the writers use.

        One insert per table (keyed by table name), plus the amendment
        statements and, in tabular mode, the interning statements. A
        statement whose table does not match its model is still registered;
        the mismatch is logged now and each failing write is logged later.

        Returns:
            The populated statement cache
        """
        for model in CORE_RECORDS:
            self._check_table(model)
            self.statements.register(
                PreparedStatement.insert(self.conn, model, transaction=self.transaction)
            )

        self.statements.register(
            PreparedStatement(
                self.conn,
                UPDATE_SIMULATION,
                f"UPDATE {quote_identifier(SimulationRecord.table_name())} "
                'SET "Completed" = ?, "CompletedSuccessfully" = ? '
                'WHERE "SimulationIndex" = ?',
                ["completed", "completed_successfully", "simulation_index"],
                self.transaction,
            )
        )
        self.statements.register(
            PreparedStatement(
                self.conn,
                UPDATE_ERROR,
                f"UPDATE {quote_identifier(ErrorRecord.table_name())} "
                'SET "ErrorMessage" = "ErrorMessage" || ? '
                'WHERE "ErrorIndex" = ?',
                ["error_message", "error_index"],
                self.transaction,
            )
        )

        if tabular:
            for model in TABULAR_RECORDS:
                self._check_table(model)
            self.statements.register(
                PreparedStatement.insert(
                    self.conn, TabularDataRecord, transaction=self.transaction
                )
            )
            self.statements.register(
                PreparedStatement.insert(
                    self.conn,
                    StringRecord,
                    name=INSERT_STRING,
                    suffix='ON CONFLICT DO NOTHING RETURNING "StringIndex"',
                    transaction=self.transaction,
                )
            )
            self.statements.register(
                PreparedStatement(
                    self.conn,
                    LOOKUP_STRING,
                    'SELECT "StringIndex" FROM "Strings" '
                    'WHERE "StringTypeIndex" = ? AND "Value" = ?',
                    ["string_type_index", "value"],
                    self.transaction,
                )
            )

        logger.info("Prepared %d statements", len(self.statements))
        return self.statements

    def _check_table(self, model: Any) -> None:
        is_valid, errors = validate_table_schema(self.conn, model)
        if not is_valid:
            for error in errors:
                logger.error("Cannot prepare insert for %s: %s", model.table_name(), error)

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def begin(self) -> None:
        """Open an explicit transaction. Nested calls are logged and ignored.

        A statement rejected inside the transaction loses only its own row;
        see :class:`TransactionLog`.
        """
        if self.in_transaction:
            logger.warning("begin() called inside an open transaction; ignored")
            return
        try:
            self.transaction.begin()
        except duckdb.Error as e:
            logger.error("BEGIN TRANSACTION failed: %s", e)

    def commit(self) -> None:
        """Commit the open transaction."""
        if not self.in_transaction:
            logger.warning("commit() called without an open transaction; ignored")
            return
        try:
            self.transaction.commit()
        except duckdb.Error as e:
            logger.error("COMMIT failed: %s", e)

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Finalize every statement, then close the connection.

        An open transaction is committed first. Safe to call more than once.
        """
        if self._closed:
            return
        if self.in_transaction:
            logger.warning("Closing with an open transaction; committing")
            self.commit()
        self.statements.finalize_all()
        self.conn.close()
        self._closed = True
        logger.info("Output database %s closed", self.db_path)

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
