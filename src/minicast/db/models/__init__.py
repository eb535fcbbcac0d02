"""SQLAlchemy ORM models - import all to register with Base.metadata."""

from minicast.db.models.developer import DeveloperRow
from minicast.db.models.app import AppRow
from minicast.db.models.points import PointsTransactionRow, UserPointsRow

__all__ = [
    "DeveloperRow",
    "AppRow",
    "PointsTransactionRow",
    "UserPointsRow",
]
