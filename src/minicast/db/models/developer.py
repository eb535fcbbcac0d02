"""Developer table."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from minicast.db.base import Base, TimestampMixin


class DeveloperRow(Base, TimestampMixin):
    __tablename__ = "developers"

    developer_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    identity: Mapped[str] = mapped_column(String(200), unique=True, nullable=False, index=True)
    name: Mapped[str | None] = mapped_column(String(200), nullable=True)

    verification_status: Mapped[str] = mapped_column(String(32), nullable=False, default="unverified")
    wallet_proven: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    domain_proven: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    verified_via: Mapped[str | None] = mapped_column(String(32), nullable=True)
    verified_by: Mapped[str | None] = mapped_column(String(200), nullable=True)
    verified_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    verified_domain: Mapped[str | None] = mapped_column(String(500), nullable=True)

    admin_role: Mapped[str | None] = mapped_column(String(32), nullable=True)

    # Pending domain challenge; all three are null when none is live
    challenge_domain: Mapped[str | None] = mapped_column(String(500), nullable=True)
    challenge_token: Mapped[str | None] = mapped_column(String(128), nullable=True)
    challenge_issued_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
