"""Model module imports for SQLAlchemy metadata registration."""

from pagekit.db.models.label import LabelRow

__all__ = [
    "LabelRow",
]
