"""Points ledger tables."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from minicast.db.base import Base, TimestampMixin


class UserPointsRow(Base, TimestampMixin):
    __tablename__ = "user_points"

    identity: Mapped[str] = mapped_column(String(200), primary_key=True)
    total_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class PointsTransactionRow(Base, TimestampMixin):
    __tablename__ = "points_transactions"

    transaction_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    identity: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    points: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    reference_id: Mapped[str | None] = mapped_column(String(128), nullable=True, index=True)
