"""
Prepared Statements

A ``PreparedStatement`` pairs one SQL text with an ordered parameter list and
runs the bind -> step -> reset cycle used by every writer. Failures never
raise: they are logged to the diagnostic log together with the offending
value, and the call returns ``False`` so the writer can continue.

``StatementCache`` owns every statement for the lifetime of an open output
database and finalizes them all at teardown.

``TransactionLog`` wraps the explicit transaction of a connection. DuckDB
aborts the whole open transaction when one statement fails; the log keeps
every operation that succeeded since ``BEGIN`` and, after a failure, rolls
back, reopens the transaction and runs them again. Only the failing row is
lost.
"""

import logging
from collections.abc import Callable
from typing import Any

import duckdb

from .models import TableRecord
from .schema_generator import quote_identifier

logger = logging.getLogger(__name__)


class TransactionLog:
    """Explicit transaction that survives a failed statement.

    Outside a transaction, operations run directly (autocommit).

    Example:
        >>> transaction = TransactionLog(conn)
        >>> transaction.begin()
        >>> transaction.execute(lambda: conn.execute(sql, values))
        >>> transaction.commit()
    """

    def __init__(self, conn: duckdb.DuckDBPyConnection):
        self.conn = conn
        self.active = False
        self._operations: list[Callable[[], Any]] = []

    def begin(self) -> None:
        self.conn.execute("BEGIN TRANSACTION")
        self.active = True
        self._operations = []

    def commit(self) -> None:
        self.active = False
        self._operations = []
        self.conn.execute("COMMIT")

    def __len__(self) -> int:
        return len(self._operations)

    def execute(self, operation: Callable[[], Any], replay: bool = True) -> Any:
        """Run one store operation.

        Args:
            operation: Zero-argument callable issuing the statement(s)
            replay: Keep the operation for replay (False for reads)

        Returns:
            Whatever the operation returns

        Raises:
            duckdb.Error: The operation failed. Inside a transaction, the
                earlier operations have already been restored.
        """
        try:
            result = operation()
        except duckdb.Error:
            if self.active:
                self._restore()
            raise
        if self.active and replay:
            self._operations.append(operation)
        return result

    def _restore(self) -> None:
        try:
            self.conn.execute("ROLLBACK")
            self.conn.execute("BEGIN TRANSACTION")
            for operation in self._operations:
                operation()
        except duckdb.Error as e:
            logger.error(
                "Open transaction could not be restored, %d earlier statements lost: %s",
                len(self._operations),
                e,
            )
            self.active = False
            self._operations = []
            try:
                self.conn.execute("ROLLBACK")
            except duckdb.Error as rollback_error:
                logger.debug("Nothing to roll back: %s", rollback_error)
            return
        logger.warning(
            "Transaction restored after a failed statement (%d statements replayed)",
            len(self._operations),
        )


class PreparedStatement:
    """One reusable parameterized statement.

    Parameters are addressed either by 1-based position (``bind_int(2, 7)``)
    or by field name (``bind_fields(time_index=7)``); field names are the
    snake_case record-model fields the statement was built from.

    Example:
        >>> stmt = PreparedStatement.insert(conn, ErrorRecord)
        >>> stmt.bind_fields(error_index=1, simulation_index=1, error_type=0,
        ...                  error_message="boom", count=1)
        True
        >>> stmt.step()
        True
        >>> stmt.reset()
    """

    def __init__(
        self,
        conn: duckdb.DuckDBPyConnection,
        name: str,
        sql: str,
        fields: list[str],
        transaction: TransactionLog | None = None,
    ):
        self.conn = conn
        self.name = name
        self.sql = sql
        self.fields = list(fields)
        self.transaction = transaction
        self.read_only = sql.lstrip().upper().startswith("SELECT")
        self._positions = {field: i for i, field in enumerate(self.fields)}
        self._values: list[Any] = [None] * len(self.fields)
        self._rows: list[tuple] = []
        self.finalized = False

    @classmethod
    def insert(
        cls,
        conn: duckdb.DuckDBPyConnection,
        model: type[TableRecord],
        name: str | None = None,
        suffix: str = "",
        transaction: TransactionLog | None = None,
    ) -> "PreparedStatement":
        """Build an INSERT covering every column of a record model.

        Args:
            conn: DuckDB connection
            model: Record model describing the target table
            name: Cache key (defaults to the table name)
            suffix: Extra SQL appended after VALUES (e.g. ON CONFLICT clause)
            transaction: Transaction log of the connection, if any
        """
        columns = ", ".join(quote_identifier(c) for c in model.column_names())
        placeholders = ", ".join("?" for _ in model.model_fields)
        sql = (
            f"INSERT INTO {quote_identifier(model.table_name())} ({columns}) "
            f"VALUES ({placeholders})"
        )
        if suffix:
            sql = f"{sql} {suffix}"
        return cls(conn, name or model.table_name(), sql, model.field_names(), transaction)

    # ------------------------------------------------------------------
    # Binding
    # ------------------------------------------------------------------

    def _bind(self, position: int, value: Any) -> bool:
        if self.finalized:
            logger.error("Statement %s used after finalize", self.name)
            return False
        if not 1 <= position <= len(self._values):
            logger.error(
                "Bind position %d out of range for %s (%d parameters), value: %r",
                position,
                self.name,
                len(self._values),
                value,
            )
            return False
        self._values[position - 1] = value
        return True

    def bind_text(self, position: int, value: str) -> bool:
        if not isinstance(value, str):
            logger.error("Expected text at position %d of %s, got: %r", position, self.name, value)
            return False
        return self._bind(position, value)

    def bind_int(self, position: int, value: int) -> bool:
        if not isinstance(value, int):
            logger.error(
                "Expected integer at position %d of %s, got: %r", position, self.name, value
            )
            return False
        return self._bind(position, int(value))

    def bind_double(self, position: int, value: float) -> bool:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            logger.error("Expected real at position %d of %s, got: %r", position, self.name, value)
            return False
        return self._bind(position, float(value))

    def bind_logical(self, position: int, value: bool) -> bool:
        """Bind a flag, stored as 1 (true) or 0 (false)."""
        return self._bind(position, 1 if value else 0)

    def bind_null(self, position: int) -> bool:
        return self._bind(position, None)

    def bind_fields(self, **values: Any) -> bool:
        """Bind parameters by record-model field name.

        Flags (``bool``) are converted to 0/1. Unknown names are logged and
        skipped; the remaining values are still bound.
        """
        ok = True
        for field, value in values.items():
            position = self._positions.get(field)
            if position is None:
                logger.error("Unknown field %r for statement %s, value: %r", field, self.name, value)
                ok = False
                continue
            if isinstance(value, bool):
                value = int(value)
            ok = self._bind(position + 1, value) and ok
        return ok

    def bind_record(self, record: TableRecord) -> bool:
        """Bind every parameter from a validated record."""
        if type(record).field_names() != self.fields:
            logger.error(
                "Record %s does not match statement %s", type(record).__name__, self.name
            )
            return False
        row = record.to_row()
        return all(self._bind(i + 1, value) for i, value in enumerate(row))

    def clear_bindings(self) -> None:
        self._values = [None] * len(self.fields)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def step(self) -> bool:
        """Execute with the current bindings.

        A rejected statement inside an explicit transaction leaves the rows
        written before it in place.

        Returns:
            True on success, False if the store rejected the statement
        """
        if self.finalized:
            logger.error("Statement %s used after finalize", self.name)
            return False

        conn, sql, values = self.conn, self.sql, list(self._values)

        def run() -> list[tuple]:
            return conn.execute(sql, values).fetchall()

        try:
            if self.transaction is None:
                self._rows = run()
            else:
                self._rows = self.transaction.execute(run, replay=not self.read_only)
        except duckdb.Error as e:
            self._rows = []
            logger.error("Statement %s failed: %s (values: %r)", self.name, e, values)
            return False
        return True

    @property
    def rows(self) -> list[tuple]:
        """Rows produced by the last step (SELECT or RETURNING results)."""
        return self._rows

    def reset(self) -> None:
        """Make the statement ready for the next step. Bindings are kept."""
        self._rows = []

    def execute(self, *values: Any) -> bool:
        """Bind all parameters positionally, step, reset and clear."""
        if len(values) != len(self.fields):
            logger.error(
                "Statement %s expects %d values, got %d: %r",
                self.name,
                len(self.fields),
                len(values),
                values,
            )
            return False
        for i, value in enumerate(values):
            if isinstance(value, bool):
                value = int(value)
            self._bind(i + 1, value)
        ok = self.step()
        self.reset()
        self.clear_bindings()
        return ok

    def finalize(self) -> None:
        self.finalized = True
        self._rows = []
        self._values = [None] * len(self.fields)

    def __repr__(self) -> str:
        return f"PreparedStatement({self.name!r})"


class StatementCache:
    """Named statements for one open output database."""

    def __init__(self):
        self._statements: dict[str, PreparedStatement] = {}

    def register(self, statement: PreparedStatement) -> PreparedStatement:
        if statement.name in self._statements:
            logger.warning("Replacing prepared statement %s", statement.name)
        self._statements[statement.name] = statement
        return statement

    def __getitem__(self, name: str) -> PreparedStatement:
        return self._statements[name]

    def get(self, name: str) -> PreparedStatement | None:
        return self._statements.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._statements

    def __len__(self) -> int:
        return len(self._statements)

    def names(self) -> list[str]:
        return list(self._statements)

    def finalize_all(self) -> None:
        """Finalize every statement. Safe to call more than once."""
        for statement in self._statements.values():
            statement.finalize()
        self._statements.clear()
