"""Label API routes."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi import Depends
from sqlalchemy.orm import Session

from pagekit.api.deps import get_pagination
from pagekit.db.base import get_db_session
from pagekit.schemas.label import Label
from pagekit.schemas.label import LabelRead
from pagekit.schemas.pagination import Pageable
from pagekit.schemas.pagination import Pagination
from pagekit.services.labels import create_label_service
from pagekit.services.labels import get_label_service
from pagekit.services.labels import list_labels_service
from pagekit.services.labels import update_label_service

router = APIRouter(prefix="/api/v1", tags=["labels"])


@router.get("/labels", response_model=Pageable[list[LabelRead]])
def list_labels_endpoint(
    page: Pagination = Depends(get_pagination),
    session: Session = Depends(get_db_session),
) -> Pageable[list[LabelRead]]:
    """List one page of labels."""
    return list_labels_service(session, page)


@router.post("/labels", response_model=LabelRead, status_code=201)
def create_label_endpoint(
    payload: Label,
    session: Session = Depends(get_db_session),
) -> LabelRead:
    """Create a label."""
    return create_label_service(session, payload)


@router.get("/labels/{label_id}", response_model=LabelRead)
def get_label_endpoint(
    label_id: int,
    session: Session = Depends(get_db_session),
) -> LabelRead:
    """Get a single label by id."""
    return get_label_service(session, label_id)


@router.put("/labels/{label_id}", response_model=LabelRead)
def update_label_endpoint(
    label_id: int,
    payload: Label,
    session: Session = Depends(get_db_session),
) -> LabelRead:
    """Replace the text of a label."""
    return update_label_service(session, label_id, payload)
