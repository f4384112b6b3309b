import asyncio
import time
from typing import Any

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect, status
from jwt.exceptions import InvalidTokenError

from companion.core.dependencies import ProfileStoreDependency
from companion.core.exceptions.errors import ProfileNotFoundError, SyncError
from companion.core.responses import send_error
from companion.core.security import CurrentUser, decode_identity_token
from companion.db.schemas.profile import (
    Location,
    ProfilePreferences,
    ProfileUpdate,
    UserProfile,
)
from companion.services.profile_store import SERVER_TIMESTAMP
from companion.services.sync_events import (
    LanguageUpdated,
    LocationUpdated,
    PreferencesUpdated,
    ProfileUpdated,
    SyncErrorEvent,
    SyncEvent,
    ThemeUpdated,
)
from companion.services.sync_service import ProfileSyncService
from companion.utils.logging import get_logger

router = APIRouter(prefix="/profile", tags=["profile"])

logger = get_logger()

STREAMED_EVENTS = (
    ProfileUpdated,
    LocationUpdated,
    PreferencesUpdated,
    ThemeUpdated,
    LanguageUpdated,
    SyncErrorEvent,
)


@router.get("/me", response_model=UserProfile)
async def read_profile(current_user: CurrentUser, store: ProfileStoreDependency):
    snapshot = await store.get_or_create(current_user)
    return UserProfile.model_validate(snapshot.data)


@router.patch("/me", response_model=UserProfile)
async def update_profile(
    update: ProfileUpdate, current_user: CurrentUser, store: ProfileStoreDependency
):
    fields = update.to_fields()
    if not fields:
        return send_error("No profile fields to update")

    await store.get_or_create(current_user)
    snapshot = await store.update(
        current_user.uid, {**fields, "updatedAt": SERVER_TIMESTAMP}
    )
    logger.info(f"Profile {current_user.uid} updated: {sorted(fields)}")
    return UserProfile.model_validate(snapshot.data)


async def _apply_update(sync: ProfileSyncService, category: str, data: Any):
    if category == "theme":
        await sync.update_theme(data)
    elif category == "language":
        await sync.update_language(data)
    elif category == "location":
        location = Location.model_validate(data)
        await sync.update_location(
            location.city or "",
            location.country or "",
            location.latitude,
            location.longitude,
        )
    elif category == "preferences":
        await sync.update_preferences(ProfilePreferences.model_validate(data))
    elif category == "profile":
        await sync.update_profile(ProfileUpdate.model_validate(data))
    else:
        raise ValueError(f"Unknown update category: {category}")


async def _handle_message(
    sync: ProfileSyncService, outbox: asyncio.Queue, message: Any
):
    if not isinstance(message, dict):
        outbox.put_nowait({"type": "error", "data": {"error": "Malformed message"}})
        return

    message_type = message.get("type")
    if message_type == "ping":
        outbox.put_nowait({"type": "pong", "data": {"ts": time.time()}})
    elif message_type == "update":
        category = message.get("category", "profile")
        try:
            await _apply_update(sync, category, message.get("data"))
        except (ValueError, SyncError, ProfileNotFoundError) as exc:
            outbox.put_nowait(
                {"type": "error", "data": {"error": str(exc), "category": category}}
            )
            return
        outbox.put_nowait({"type": "ack", "data": {"category": category}})
    else:
        outbox.put_nowait(
            {"type": "error", "data": {"error": f"Unknown message type: {message_type}"}}
        )


async def _pump(websocket: WebSocket, outbox: asyncio.Queue):
    while True:
        message = await outbox.get()
        await websocket.send_json(message)


@router.websocket("/ws")
async def profile_stream(
    websocket: WebSocket,
    store: ProfileStoreDependency,
    token: str = Query(""),
):
    """
    Real-time profile stream.

    Server -> client: ``{"type": <profile|location|preferences|theme|language|error>,
    "data": ...}`` for every snapshot, plus ``ack``/``pong`` replies.
    Client -> server: ``{"type": "update", "category": ..., "data": ...}`` or
    ``{"type": "ping"}``.
    """
    try:
        user = decode_identity_token(token)
    except InvalidTokenError:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    await store.get_or_create(user)

    outbox: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
    sync = ProfileSyncService(store)

    def forward(event: SyncEvent):
        outbox.put_nowait({"type": event.kind, "data": event.payload()})

    for event_type in STREAMED_EVENTS:
        sync.events.add_handler(event_type, forward)
    await sync.initialize(user)

    sender = asyncio.create_task(_pump(websocket, outbox))
    try:
        while True:
            try:
                message = await websocket.receive_json()
            except ValueError:
                # Not JSON; answered as a malformed message
                message = None
            await _handle_message(sync, outbox, message)
    except WebSocketDisconnect:
        logger.info(f"Profile stream closed for user {user.uid}")
    finally:
        sender.cancel()
        (outcome,) = await asyncio.gather(sender, return_exceptions=True)
        if isinstance(outcome, Exception):
            logger.error(f"Profile stream sender for user {user.uid} failed: {outcome!r}")
        sync.cleanup()
