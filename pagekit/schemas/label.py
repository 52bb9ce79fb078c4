"""Pydantic schemas for label API payloads."""

from __future__ import annotations

from pydantic import BaseModel
from pydantic import ConfigDict

from pagekit.types.nullable import NullEmptyString


class Label(BaseModel):
    """Label payload; an absent label is rendered as an empty string."""

    model_config = ConfigDict(from_attributes=True)

    label: NullEmptyString = NullEmptyString()


class LabelRead(Label):
    """Label response payload including its id."""

    id: int
