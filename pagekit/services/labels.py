"""Service helpers for label API operations."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pagekit.core.errors import NotFoundError
from pagekit.core.errors import RepositoryError
from pagekit.core.errors import RowsAffectedError
from pagekit.db.models.label import LabelRow
from pagekit.db.repository.labels import count_labels
from pagekit.db.repository.labels import create_label
from pagekit.db.repository.labels import get_label
from pagekit.db.repository.labels import list_labels
from pagekit.db.repository.labels import update_label
from pagekit.schemas.label import Label
from pagekit.schemas.label import LabelRead
from pagekit.schemas.pagination import Pageable
from pagekit.schemas.pagination import Pagination
from pagekit.services.pagination import build_pageable

logger = logging.getLogger(__name__)


def create_label_service(session: Session, payload: Label) -> LabelRow:
    """Create and persist a new label."""
    try:
        row = create_label(session, label=payload.label)
        session.commit()
        return row
    except SQLAlchemyError as exc:
        session.rollback()
        raise RepositoryError("create label", exc) from exc


def list_labels_service(session: Session, page: Pagination) -> Pageable[list[LabelRead]]:
    """Return one page of labels together with the total label count."""
    try:
        total = count_labels(session)
        rows = list_labels(session, offset=page.offset, limit=page.limit)
    except SQLAlchemyError as exc:
        raise RepositoryError("list labels", exc) from exc
    logger.debug("Listed %d of %d labels with %s", len(rows), total, page)
    return build_pageable(page, total, [LabelRead.model_validate(row) for row in rows])


def get_label_service(session: Session, label_id: int) -> LabelRow:
    """Fetch a label or raise not found."""
    try:
        row = get_label(session, label_id)
    except SQLAlchemyError as exc:
        raise RepositoryError("get label", exc) from exc
    if row is None:
        raise NotFoundError(LabelRow)
    return row


def update_label_service(session: Session, label_id: int, payload: Label) -> LabelRow:
    """Overwrite the text of an existing label."""
    row = get_label_service(session, label_id)
    try:
        update_label(session, label_id, label=payload.label)
        session.commit()
    except RowsAffectedError:
        session.rollback()
        raise
    except SQLAlchemyError as exc:
        session.rollback()
        raise RepositoryError("update label", exc) from exc
    session.refresh(row)
    return row
