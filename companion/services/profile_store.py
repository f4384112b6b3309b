from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from companion.core.exceptions.errors import (
    InvalidProfileUpdateError,
    ProfileNotFoundError,
)
from companion.db.models.profile import DOCUMENT_FIELDS, UserProfileRecord
from companion.db.schemas.profile import AuthenticatedUser
from companion.utils.logging import get_logger

logger = get_logger()

READ_ONLY_FIELDS = {"uid", "createdAt"}


class _ServerTimestamp:
    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


# Placeholder resolved to the store's clock at write time
SERVER_TIMESTAMP = _ServerTimestamp()


@dataclass
class ProfileSnapshot:
    uid: str
    exists: bool
    data: dict[str, Any] = field(default_factory=dict)


SnapshotListener = Callable[[ProfileSnapshot], Any]
ErrorListener = Callable[[Exception], Any]


class _Listener:
    def __init__(self, on_snapshot: SnapshotListener, on_error: Optional[ErrorListener]):
        self.on_snapshot = on_snapshot
        self.on_error = on_error


class ProfileStore:
    """
    Authoritative user-profile documents with real-time change notification.

    Every successful write is followed by a full snapshot pushed to the
    listeners subscribed to that uid. Documents are merged field by field and
    never deleted.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self._session_factory = session_factory
        self._clock = clock
        self._listeners: dict[str, list[_Listener]] = {}

    async def get(self, uid: str) -> ProfileSnapshot:
        async with self._session_factory() as session:
            record = await session.get(UserProfileRecord, uid)
            return self._snapshot(uid, record)

    async def get_or_create(self, user: AuthenticatedUser) -> ProfileSnapshot:
        created = False
        async with self._session_factory() as session:
            record = await session.get(UserProfileRecord, user.uid)
            if record is None:
                now = self._clock()
                record = UserProfileRecord(
                    uid=user.uid,
                    email=user.email,
                    display_name=user.displayName,
                    photo_url=user.photoURL,
                    language="en",
                    theme="light",
                    notifications={"prayerReminders": True, "adhanSound": True},
                    created_at=now,
                    updated_at=now,
                )
                session.add(record)
                await session.commit()
                created = True
                logger.info(f"Created profile for user {user.uid}")
            snapshot = self._snapshot(user.uid, record)

        if created:
            self._notify(snapshot)
        return snapshot

    async def update(self, uid: str, fields: dict[str, Any]) -> ProfileSnapshot:
        values = {
            name: self._clock() if value is SERVER_TIMESTAMP else value
            for name, value in fields.items()
        }
        for name in values:
            if name not in DOCUMENT_FIELDS or name in READ_ONLY_FIELDS:
                raise InvalidProfileUpdateError(
                    f"Unknown or read-only profile field: {name}"
                )

        async with self._session_factory() as session:
            record = await session.get(UserProfileRecord, uid)
            if record is None:
                raise ProfileNotFoundError(uid)
            for name, value in values.items():
                setattr(record, DOCUMENT_FIELDS[name], value)
            if "updatedAt" not in values:
                record.updated_at = self._clock()
            try:
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                logger.warning(f"Rejected profile write for {uid}: {exc.orig}")
                raise InvalidProfileUpdateError(
                    f"Profile update violates a constraint: {exc.orig}"
                ) from exc
            snapshot = self._snapshot(uid, record)

        self._notify(snapshot)
        return snapshot

    async def subscribe(
        self,
        uid: str,
        on_snapshot: SnapshotListener,
        on_error: Optional[ErrorListener] = None,
    ) -> Callable[[], None]:
        """Register for snapshots of ``uid``; the current one is delivered first."""
        listener = _Listener(on_snapshot, on_error)
        self._listeners.setdefault(uid, []).append(listener)

        def unsubscribe():
            listeners = self._listeners.get(uid, [])
            if listener in listeners:
                listeners.remove(listener)
            if not listeners:
                self._listeners.pop(uid, None)

        try:
            snapshot = await self.get(uid)
        except SQLAlchemyError as exc:
            logger.error(f"Profile subscription for {uid} failed: {exc}")
            if on_error:
                on_error(exc)
            return unsubscribe

        self._deliver(listener, snapshot)
        return unsubscribe

    def listener_count(self, uid: str) -> int:
        return len(self._listeners.get(uid, []))

    def _notify(self, snapshot: ProfileSnapshot):
        for listener in list(self._listeners.get(snapshot.uid, [])):
            self._deliver(listener, snapshot)

    def _deliver(self, listener: _Listener, snapshot: ProfileSnapshot):
        try:
            listener.on_snapshot(snapshot)
        except Exception as exc:
            logger.error(f"Profile listener for {snapshot.uid} raised: {exc}")
            if listener.on_error:
                listener.on_error(exc)

    @staticmethod
    def _snapshot(uid: str, record: Optional[UserProfileRecord]) -> ProfileSnapshot:
        if record is None:
            return ProfileSnapshot(uid=uid, exists=False)
        return ProfileSnapshot(uid=uid, exists=True, data=record.to_document())
