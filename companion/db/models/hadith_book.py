from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from companion.db.base import Base


class HadithBook(Base):
    __tablename__ = "hadith_books"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)  # "<lang>:<edition>"
    lang: Mapped[str] = mapped_column(String(8), nullable=False, index=True)
    edition: Mapped[str] = mapped_column(String(32), nullable=False)
    saved_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
