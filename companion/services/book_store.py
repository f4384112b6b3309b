from datetime import datetime, timezone
from typing import Any, Callable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker

from companion.db.models.hadith_book import HadithBook


def book_id(lang: str, edition: str) -> str:
    return f"{lang}:{edition}"


class BookStore:
    """Durable copies of downloaded hadith editions for offline reading."""

    def __init__(
        self,
        session_factory: async_sessionmaker,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self._session_factory = session_factory
        self._clock = clock

    async def put(self, lang: str, edition: str, data: dict[str, Any]):
        async with self._session_factory() as session:
            await session.merge(
                HadithBook(
                    id=book_id(lang, edition),
                    lang=lang,
                    edition=edition,
                    saved_at=self._clock(),
                    data=data,
                )
            )
            await session.commit()

    async def get(self, lang: str, edition: str) -> Optional[dict[str, Any]]:
        async with self._session_factory() as session:
            book = await session.get(HadithBook, book_id(lang, edition))
            return book.data if book else None

    async def delete(self, lang: str, edition: str):
        async with self._session_factory() as session:
            book = await session.get(HadithBook, book_id(lang, edition))
            if book is not None:
                await session.delete(book)
                await session.commit()

    async def list(self) -> list[dict[str, Any]]:
        async with self._session_factory() as session:
            result = await session.execute(select(HadithBook).order_by(HadithBook.id))
            return [
                {
                    "id": book.id,
                    "lang": book.lang,
                    "edition": book.edition,
                    "savedAt": book.saved_at,
                }
                for book in result.scalars()
            ]
