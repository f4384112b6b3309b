"""
Typed profile-change events.

A profile snapshot is split into one event per category so consumers register
a handler for exactly the part of the profile they render:

    channel = EventChannel()

    @channel.on(ThemeUpdated)
    def apply_theme(event: ThemeUpdated):
        ui.set_theme(event.theme)
"""

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

from companion.db.schemas.profile import Location, ProfilePreferences, UserProfile
from companion.utils.logging import get_logger

logger = get_logger()


@dataclass
class SyncEvent:
    uid: str = ""
    timestamp: float = field(default_factory=time.time)

    # Wire name used by the WebSocket stream
    kind = "event"

    def payload(self) -> Any:
        return None


@dataclass
class ProfileUpdated(SyncEvent):
    profile: Optional[UserProfile] = None
    kind = "profile"

    def payload(self) -> Any:
        return self.profile.model_dump(mode="json") if self.profile else None


@dataclass
class LocationUpdated(SyncEvent):
    location: Location = field(default_factory=Location)
    kind = "location"

    def payload(self) -> Any:
        return self.location.model_dump()


@dataclass
class PreferencesUpdated(SyncEvent):
    preferences: Optional[ProfilePreferences] = None
    kind = "preferences"

    def payload(self) -> Any:
        return self.preferences.model_dump(exclude_none=True) if self.preferences else None


@dataclass
class ThemeUpdated(SyncEvent):
    theme: str = "light"
    kind = "theme"

    def payload(self) -> Any:
        return self.theme


@dataclass
class LanguageUpdated(SyncEvent):
    language: str = "en"
    kind = "language"

    def payload(self) -> Any:
        return self.language


@dataclass
class SyncErrorEvent(SyncEvent):
    error: Optional[Exception] = None
    kind = "error"

    def payload(self) -> Any:
        return {"error": str(self.error) if self.error else "Unknown sync error"}


E = TypeVar("E", bound=SyncEvent)


class EventChannel:
    """Per-category pub/sub. Handlers run in registration order."""

    def __init__(self) -> None:
        self._handlers: Dict[Type[SyncEvent], List[Callable[..., None]]] = {}

    def on(self, event_type: Type[E]) -> Callable[[Callable[[E], None]], Callable[[E], None]]:
        def decorator(func: Callable[[E], None]) -> Callable[[E], None]:
            self.add_handler(event_type, func)
            return func

        return decorator

    def add_handler(self, event_type: Type[E], handler: Callable[[E], None]) -> None:
        self._handlers.setdefault(event_type, []).append(handler)

    def emit(self, event: SyncEvent) -> None:
        for handler in list(self._handlers.get(type(event), [])):
            try:
                handler(event)
            except Exception as exc:
                logger.error(f"{type(event).__name__} handler raised: {exc}")

    def handler_count(self, event_type: Optional[Type[SyncEvent]] = None) -> int:
        if event_type is not None:
            return len(self._handlers.get(event_type, []))
        return sum(len(handlers) for handlers in self._handlers.values())

    def clear(self) -> None:
        self._handlers.clear()
