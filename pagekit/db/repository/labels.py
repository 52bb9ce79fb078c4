"""Repository primitives for label entities."""

from __future__ import annotations

from sqlalchemy import func
from sqlalchemy import select
from sqlalchemy import update
from sqlalchemy.orm import Session

from pagekit.core.errors import RowsAffectedError
from pagekit.db.models.label import LabelRow
from pagekit.types.nullable import NullEmptyString


def create_label(session: Session, *, label: NullEmptyString) -> LabelRow:
    """Create and return a label row."""
    row = LabelRow(label=label)
    session.add(row)
    session.flush()
    session.refresh(row)
    return row


def get_label(session: Session, label_id: int) -> LabelRow | None:
    """Fetch a label by id."""
    return session.get(LabelRow, label_id)


def count_labels(session: Session) -> int:
    """Return the number of stored labels."""
    return session.scalar(select(func.count()).select_from(LabelRow)) or 0


def list_labels(session: Session, *, offset: int, limit: int) -> list[LabelRow]:
    """List one page of labels ordered by id."""
    stmt = select(LabelRow).order_by(LabelRow.id.asc()).offset(offset).limit(limit)
    return list(session.scalars(stmt))


def update_label(session: Session, label_id: int, *, label: NullEmptyString) -> None:
    """Overwrite the label text of exactly one row.

    Raises:
        RowsAffectedError: if the update did not touch exactly one row.
    """
    result = session.execute(
        update(LabelRow).where(LabelRow.id == label_id).values(label=label),
        execution_options={"synchronize_session": False},
    )
    if result.rowcount != 1:
        raise RowsAffectedError("update label", affected_rows=result.rowcount, expected_rows=1)
