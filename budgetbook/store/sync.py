"""Row diffing for full-replace-by-diff ledger syncs.

A sync receives the complete collection for a user. Rows missing from it
are deleted, new ids are inserted and changed ids are updated in place.
Unchanged rows are left alone so repeating a sync is a no-op.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

Row = tuple[Any, ...]


@dataclass(frozen=True)
class RowDiff:
    """Immutable set of writes needed to reach an incoming collection."""

    deleted: list[str]
    inserted: list[Row]
    updated: list[Row]

    @property
    def is_empty(self) -> bool:
        return not (self.deleted or self.inserted or self.updated)


def diff_rows(stored: Mapping[str, Row], incoming: Sequence[Row]) -> RowDiff:
    """Compare stored rows with an incoming collection.

    Args:
        stored: Stored rows keyed by id. Each row starts with its id.
        incoming: Incoming rows, each starting with its id.

    Returns:
        RowDiff with ids to delete and rows to insert or update.

    Raises:
        ValueError: If the incoming collection repeats an id.
    """
    incoming_ids: set[str] = set()
    inserted: list[Row] = []
    updated: list[Row] = []

    for row in incoming:
        row_id = row[0]
        if row_id in incoming_ids:
            raise ValueError(f"Duplicate id '{row_id}' in incoming rows")
        incoming_ids.add(row_id)

        existing = stored.get(row_id)
        if existing is None:
            inserted.append(row)
        elif existing != row:
            updated.append(row)

    deleted = [row_id for row_id in stored if row_id not in incoming_ids]
    return RowDiff(deleted=deleted, inserted=inserted, updated=updated)
