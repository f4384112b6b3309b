from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from companion.db.base import Base


class AppContent(Base):
    """Editor-managed text blocks, e.g. ``fajr_overlay``. Read-only for the API."""

    __tablename__ = "app_content"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    en: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    ar: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
