"""
Tabular Report Writer

Stores the summary tables the simulation prints at the end of a run. Each
cell becomes one TabularData row; its labels are interned so the repeated
report, table, row, column and unit names are stored once.
"""

import logging

from .allocator import StringInterner
from .models import StringType
from .statements import PreparedStatement

logger = logging.getLogger(__name__)


def parse_units_and_description(label: str) -> tuple[str, str]:
    """Split a "Description [units]" label.

    Units are the text between the first ``[`` and the first ``]`` when
    the ``[`` comes first; the description is the text before the ``[``.
    Labels without a bracket pair have no units.

    Returns:
        (units, description)

    Examples:
        >>> parse_units_and_description("Electricity Rate [W]")
        ('W', 'Electricity Rate')
        >>> parse_units_and_description("Zone Temperature")
        ('', 'Zone Temperature')
    """
    left = label.find("[")
    right = label.find("]")
    if left != -1 and right != -1 and left < right:
        return label[left + 1 : right], label[:left].rstrip()
    return "", label


def write_tabular_data(
    statement: PreparedStatement,
    interner: StringInterner,
    body: list[list[str]],
    row_labels: list[str],
    column_labels: list[str],
    report_name: str,
    report_for_string: str,
    table_name: str,
    simulation_index: int = 1,
) -> int:
    """Write every cell of one report table.

    Units come from the column label, or from the row label when the
    column label has none. RowId and ColumnId are 0-based.

    Args:
        statement: Prepared TabularData insert
        interner: String interner of the open output database
        body: Cell text indexed [row][column]
        row_labels: One label per body row
        column_labels: One label per body column
        report_name: Report the table belongs to
        report_for_string: Scope of the report (e.g. "Entire Facility")
        table_name: Table title
        simulation_index: Simulation the report belongs to

    Returns:
        Number of cells written
    """
    if len(body) < len(row_labels) or any(len(row) < len(column_labels) for row in body):
        logger.error(
            "Table %r of report %r: body smaller than %d x %d labels; skipped",
            table_name,
            report_name,
            len(row_labels),
            len(column_labels),
        )
        return 0

    columns = [parse_units_and_description(label) for label in column_labels]

    written = 0
    for row_id, row_label in enumerate(row_labels):
        row_units, row_description = parse_units_and_description(row_label)

        for column_id, (column_units, column_description) in enumerate(columns):
            units = column_units or row_units

            indexes = {
                "report_name_index": interner.intern(report_name, StringType.REPORT_NAME),
                "report_for_string_index": interner.intern(
                    report_for_string, StringType.REPORT_FOR_STRING
                ),
                "table_name_index": interner.intern(table_name, StringType.TABLE_NAME),
                "row_name_index": interner.intern(row_description, StringType.ROW_NAME),
                "column_name_index": interner.intern(column_description, StringType.COLUMN_NAME),
                "units_index": interner.intern(units, StringType.UNITS),
            }
            if None in indexes.values():
                logger.error(
                    "Cell (%d, %d) of table %r not written: label could not be interned",
                    row_id,
                    column_id,
                    table_name,
                )
                continue

            statement.bind_fields(
                simulation_index=simulation_index,
                row_id=row_id,
                column_id=column_id,
                value=body[row_id][column_id],
                **indexes,
            )
            if statement.step():
                written += 1
            statement.reset()
            statement.clear_bindings()

    return written
