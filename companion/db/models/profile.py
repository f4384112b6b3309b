from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, DateTime, Float, String
from sqlalchemy.orm import Mapped, mapped_column

from companion.db.base import Base

# Remote document field name -> column
DOCUMENT_FIELDS = {
    "uid": "uid",
    "email": "email",
    "displayName": "display_name",
    "photoURL": "photo_url",
    "city": "city",
    "country": "country",
    "latitude": "latitude",
    "longitude": "longitude",
    "language": "language",
    "theme": "theme",
    "notifications": "notifications",
    "preferences": "preferences",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}


class UserProfileRecord(Base):
    """One document per signed-in user; never hard-deleted."""

    __tablename__ = "user_profiles"

    uid: Mapped[str] = mapped_column(String(128), primary_key=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False, default="")
    display_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    photo_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    language: Mapped[str] = mapped_column(String(8), nullable=False, default="en")
    theme: Mapped[str] = mapped_column(String(8), nullable=False, default="light")
    notifications: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    preferences: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def to_document(self) -> dict[str, Any]:
        """Camel-cased document view; unset optional fields are left out."""
        document = {}
        for field, column in DOCUMENT_FIELDS.items():
            value = getattr(self, column)
            if value is None:
                continue
            document[field] = value
        return document
