"""SQLAlchemy model for labels."""

from __future__ import annotations

from sqlalchemy import Integer
from sqlalchemy import PrimaryKeyConstraint
from sqlalchemy.orm import Mapped
from sqlalchemy.orm import mapped_column

from pagekit.db.base import Base
from pagekit.db.types import NullEmptyStringType
from pagekit.types.nullable import NullEmptyString


class LabelRow(Base):
    """Label row as scanned from the database."""

    __tablename__ = "labels"
    __table_args__ = (PrimaryKeyConstraint("id", name="pk_labels"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    label: Mapped[NullEmptyString] = mapped_column(NullEmptyStringType(), nullable=True)
