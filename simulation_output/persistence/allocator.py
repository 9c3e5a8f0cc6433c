"""
Identity Allocation

Process-local counters that become primary keys, and the string interner
that maps tabular-report labels onto them.

Counters are owned by one ``IdentityAllocator`` per open output database.
They are never persisted and never reset while the database is open.
"""

import logging

from .models import StringType
from .statements import PreparedStatement

logger = logging.getLogger(__name__)


class IdentityAllocator:
    """Monotonic key counters.

    Counters that pre-increment start at 0 and hand out 1 first; the string
    and hourly-map counters hold the next value to hand out and start at 1.
    """

    def __init__(self):
        self.time_index = 0
        self.data_index = 0
        self.extended_data_index = 0
        self.string_index = 1
        self.error_index = 0
        self.hourly_report_index = 1

    def next_time_index(self) -> int:
        self.time_index += 1
        return self.time_index

    def next_data_index(self) -> int:
        self.data_index += 1
        return self.data_index

    def next_extended_data_index(self) -> int:
        self.extended_data_index += 1
        return self.extended_data_index

    def rollback_extended_data_index(self) -> None:
        """Give back the extended-data index taken for a rejected row."""
        self.extended_data_index -= 1

    def next_error_index(self) -> int:
        self.error_index += 1
        return self.error_index

    def next_hourly_report_index(self) -> int:
        index = self.hourly_report_index
        self.hourly_report_index += 1
        return index

    def advance_string_index(self) -> None:
        self.string_index += 1


class StringInterner:
    """Assign one stable index per (string type, value) pair.

    The in-memory map answers repeat lookups. A new pair is inserted with
    the next candidate index; the candidate is consumed only if the row was
    actually inserted. A pair that is already stored but not yet cached is
    looked up and cached.
    """

    def __init__(
        self,
        allocator: IdentityAllocator,
        insert_statement: PreparedStatement,
        lookup_statement: PreparedStatement,
    ):
        self.allocator = allocator
        self.insert_statement = insert_statement
        self.lookup_statement = lookup_statement
        self._indexes: dict[tuple[int, str], int] = {}

    def __len__(self) -> int:
        return len(self._indexes)

    def intern(self, value: str, string_type: StringType | int) -> int | None:
        """Return the index for ``value`` in role ``string_type``.

        Returns:
            The assigned StringIndex, or None if the store rejected the row
        """
        key = (int(string_type), value)
        index = self._indexes.get(key)
        if index is not None:
            return index

        candidate = self.allocator.string_index
        stmt = self.insert_statement
        stmt.bind_fields(string_index=candidate, string_type_index=key[0], value=value)
        ok = stmt.step()
        inserted = bool(stmt.rows)
        stmt.reset()
        stmt.clear_bindings()
        if not ok:
            return None

        if inserted:
            self.allocator.advance_string_index()
            self._indexes[key] = candidate
            return candidate

        existing = self._lookup(key)
        if existing is None:
            # the candidate index itself is taken by an unrelated row
            logger.error("StringIndex %d already in use, skipping %r", candidate, value)
            self.allocator.advance_string_index()
            return None

        self._indexes[key] = existing
        return existing

    def _lookup(self, key: tuple[int, str]) -> int | None:
        stmt = self.lookup_statement
        stmt.bind_fields(string_type_index=key[0], value=key[1])
        stmt.step()
        rows = stmt.rows
        stmt.reset()
        stmt.clear_bindings()
        return rows[0][0] if rows else None
