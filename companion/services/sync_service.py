from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from pydantic import ValidationError
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from companion.core.exceptions.errors import (
    InvalidProfileUpdateError,
    OfflineError,
    ProfileNotFoundError,
    SyncError,
)
from companion.db.schemas.profile import (
    AuthenticatedUser,
    Location,
    ProfilePreferences,
    ProfileUpdate,
    UserProfile,
)
from companion.services.local_store import MemoryLocalStore
from companion.services.profile_store import (
    SERVER_TIMESTAMP,
    ProfileSnapshot,
    ProfileStore,
)
from companion.services.sync_events import (
    EventChannel,
    LanguageUpdated,
    LocationUpdated,
    PreferencesUpdated,
    ProfileUpdated,
    SyncErrorEvent,
    ThemeUpdated,
)
from companion.utils.logging import get_logger

logger = get_logger()

LOCATION_FIELDS = ("city", "country", "latitude", "longitude")
THEMES = ("light", "dark")
LANGUAGES = ("en", "ar")

# Store failures worth replaying later; anything else is dropped or raised
TRANSIENT_STORE_ERRORS = (OperationalError, InterfaceError, PoolTimeoutError, ConnectionError)
REJECTED_WRITES = (InvalidProfileUpdateError, ProfileNotFoundError)


@dataclass
class SyncCallbacks:
    on_profile_update: Optional[Callable[[UserProfile], Any]] = None
    on_location_update: Optional[Callable[[Location], Any]] = None
    on_preferences_update: Optional[Callable[[Optional[ProfilePreferences]], Any]] = None
    on_theme_update: Optional[Callable[[str], Any]] = None
    on_language_update: Optional[Callable[[str], Any]] = None
    on_error: Optional[Callable[[Exception], Any]] = None


class ProfileSyncService:
    """
    Keeps a local view of one user's profile in step with the remote document.

    Lifecycle: ``initialize`` subscribes to the document, ``cleanup`` drops the
    subscription, the handlers and the pending queue. Connectivity is an
    orthogonal online/offline flag driven by ``handle_online`` and
    ``handle_offline``.

    Writes made while offline are kept in a pending map with one slot per
    category (``profile``, ``location``, ``preferences``, ``theme``,
    ``language``); a newer write to the same category replaces the queued one.
    The queue is flushed in insertion order when connectivity comes back or
    on ``force_sync_pending_updates``, never on a timer.
    """

    def __init__(
        self,
        store: ProfileStore,
        local_store: Optional[MemoryLocalStore] = None,
        online: bool = True,
    ):
        self._store = store
        self._local_store = local_store if local_store is not None else MemoryLocalStore()
        self.events = EventChannel()
        self._user: Optional[AuthenticatedUser] = None
        self._unsubscribers: dict[str, Callable[[], None]] = {}
        self._online = online
        self._pending: dict[str, dict[str, Any]] = {}

    @property
    def current_user(self) -> Optional[AuthenticatedUser]:
        return self._user

    @property
    def is_listening(self) -> bool:
        return self._user is not None

    @property
    def is_online(self) -> bool:
        return self._online

    @property
    def pending_updates_count(self) -> int:
        return len(self._pending)

    @property
    def pending_updates(self) -> dict[str, dict[str, Any]]:
        return dict(self._pending)

    async def initialize(
        self, user: AuthenticatedUser, callbacks: Optional[SyncCallbacks] = None
    ):
        if self._user is not None:
            self.cleanup()
        self._user = user
        if callbacks:
            self._register(callbacks)

        unsubscribe = await self._store.subscribe(
            user.uid, self._handle_snapshot, self._handle_subscription_error
        )
        self._unsubscribers["userProfile"] = unsubscribe
        logger.info(f"Profile sync listening for user {user.uid}")

    def cleanup(self):
        for unsubscribe in self._unsubscribers.values():
            unsubscribe()
        self._unsubscribers.clear()
        if self._user is not None:
            logger.info(f"Profile sync stopped for user {self._user.uid}")
        self._user = None
        self.events.clear()
        self._pending.clear()

    def _register(self, callbacks: SyncCallbacks):
        events = self.events
        if callbacks.on_profile_update:
            handler = callbacks.on_profile_update
            events.add_handler(ProfileUpdated, lambda e: handler(e.profile))
        if callbacks.on_location_update:
            location_handler = callbacks.on_location_update
            events.add_handler(LocationUpdated, lambda e: location_handler(e.location))
        if callbacks.on_preferences_update:
            preferences_handler = callbacks.on_preferences_update
            events.add_handler(
                PreferencesUpdated, lambda e: preferences_handler(e.preferences)
            )
        if callbacks.on_theme_update:
            theme_handler = callbacks.on_theme_update
            events.add_handler(ThemeUpdated, lambda e: theme_handler(e.theme))
        if callbacks.on_language_update:
            language_handler = callbacks.on_language_update
            events.add_handler(LanguageUpdated, lambda e: language_handler(e.language))
        if callbacks.on_error:
            error_handler = callbacks.on_error
            events.add_handler(SyncErrorEvent, lambda e: error_handler(e.error))

    def _handle_snapshot(self, snapshot: ProfileSnapshot):
        if not snapshot.exists:
            return
        data = snapshot.data
        try:
            profile = UserProfile.model_validate(data)
        except ValidationError as exc:
            self._handle_subscription_error(exc)
            return

        uid = snapshot.uid
        self.events.emit(ProfileUpdated(uid=uid, profile=profile))

        if any(data.get(name) is not None for name in LOCATION_FIELDS):
            location = Location(
                city=profile.city,
                country=profile.country,
                latitude=profile.latitude,
                longitude=profile.longitude,
            )
            self.events.emit(LocationUpdated(uid=uid, location=location))

        if data.get("preferences") is not None:
            self.events.emit(PreferencesUpdated(uid=uid, preferences=profile.preferences))

        if data.get("theme"):
            self.events.emit(ThemeUpdated(uid=uid, theme=profile.theme))

        if data.get("language"):
            self.events.emit(LanguageUpdated(uid=uid, language=profile.language))

    def _handle_subscription_error(self, exc: Exception):
        logger.error(f"Real-time sync error: {exc}")
        uid = self._user.uid if self._user else ""
        self.events.emit(SyncErrorEvent(uid=uid, error=exc))

    async def update_profile(
        self, updates: Union[dict[str, Any], ProfileUpdate], key: str = "profile"
    ):
        """
        Merge ``updates`` into the remote profile.

        The payload is validated as a :class:`ProfileUpdate` first, so a
        rejected update is never queued. Offline, the payload is queued under
        ``key`` and :class:`OfflineError` is raised. Online, a transient store
        failure queues it the same way and re-raises; other failures are
        raised without queueing.
        """
        if self._user is None:
            raise SyncError("No authenticated user")

        if not isinstance(updates, ProfileUpdate):
            updates = ProfileUpdate.model_validate(updates)
        updates = updates.to_fields()
        update_data = {**updates, "updatedAt": SERVER_TIMESTAMP}

        if not self._online:
            self._pending[key] = update_data
            logger.info(f"Offline: queued '{key}' update ({len(self._pending)} pending)")
            raise OfflineError()

        try:
            await self._store.update(self._user.uid, update_data)
        except TRANSIENT_STORE_ERRORS as exc:
            self._pending[key] = update_data
            logger.error(f"Profile update '{key}' failed, queued for retry: {exc}")
            raise
        self._pending.pop(key, None)

    async def update_location(
        self,
        city: str,
        country: str,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ):
        location: dict[str, Any] = {"city": city, "country": country}
        if latitude is not None:
            location["latitude"] = latitude
        if longitude is not None:
            location["longitude"] = longitude
        await self.update_profile(location, key="location")

    async def update_preferences(
        self, preferences: Union[ProfilePreferences, dict[str, Any]]
    ):
        if isinstance(preferences, ProfilePreferences):
            preferences = preferences.model_dump(exclude_none=True)
        await self.update_profile({"preferences": preferences}, key="preferences")

    async def update_theme(self, theme: str):
        if theme not in THEMES:
            raise ValueError(f"Unsupported theme: {theme}")
        self._local_store.set("theme", theme)
        await self.update_profile({"theme": theme}, key="theme")

    async def update_language(self, language: str):
        if language not in LANGUAGES:
            raise ValueError(f"Unsupported language: {language}")
        self._local_store.set("language", language)
        await self.update_profile({"language": language}, key="language")

    async def handle_online(self) -> int:
        was_offline = not self._online
        self._online = True
        if was_offline:
            logger.info("Connectivity restored, flushing pending profile updates")
            return await self.sync_pending_updates()
        return 0

    def handle_offline(self):
        self._online = False

    async def sync_pending_updates(self) -> int:
        """Replay queued writes; returns how many were committed."""
        if self._user is None or not self._pending:
            return 0

        uid = self._user.uid
        synced = 0
        for key, update_data in list(self._pending.items()):
            try:
                await self._store.update(
                    uid, {**update_data, "updatedAt": SERVER_TIMESTAMP}
                )
            except TRANSIENT_STORE_ERRORS as exc:
                logger.error(f"Failed to sync pending update for {key}: {exc}")
                continue
            except REJECTED_WRITES as exc:
                logger.error(f"Dropping pending update for {key}: {exc}")
                if self._pending.get(key) is update_data:
                    del self._pending[key]
                continue
            # Keep a payload queued for this key while the write was in flight
            if self._pending.get(key) is update_data:
                del self._pending[key]
            synced += 1
        return synced

    async def force_sync_pending_updates(self) -> int:
        return await self.sync_pending_updates()
