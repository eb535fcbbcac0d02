"""Mini app listing table."""

from sqlalchemy import JSON, Boolean, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from minicast.db.base import Base, TimestampMixin


class AppRow(Base, TimestampMixin):
    __tablename__ = "apps"

    app_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    url: Mapped[str] = mapped_column(String(2048), unique=True, nullable=False, index=True)
    developer_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("developers.developer_id"), nullable=False, index=True
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    icon_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    header_image_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    base_mini_app_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    farcaster_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    developer_tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    screenshots: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    review_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes_to_admin: Mapped[str | None] = mapped_column(Text, nullable=True)
    support_email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    twitter_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    status: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    contract_address: Mapped[str | None] = mapped_column(String(42), nullable=True)
    contract_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    manifest_snapshot: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
