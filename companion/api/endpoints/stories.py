from datetime import datetime

from fastapi import APIRouter, status

from companion.core.dependencies import CachesDependency
from companion.core.responses import FEATURED_CACHE, Envelope, send_cached, send_envelope
from companion.services.stories import date_key, get_featured_story, get_stories, get_story_by_id

router = APIRouter(prefix="/stories", tags=["stories"])


@router.get("")
async def list_stories():
    stories = get_stories()
    return send_envelope(
        data={
            "stories": [story.model_dump(exclude_none=True) for story in stories],
            "total": len(stories),
        }
    )


@router.get("/featured")
async def featured_story(caches: CachesDependency):
    now = datetime.now().astimezone()
    cache_key = f"featured:{date_key(now)}"
    cached = await caches.featured.get(cache_key)
    if cached is not None:
        return send_cached(cached, FEATURED_CACHE)

    envelope = Envelope(data=get_featured_story(now))
    payload = envelope.model_dump(mode="json", exclude_none=True)
    await caches.featured.set(cache_key, payload)
    return send_cached(payload, FEATURED_CACHE)


@router.get("/{story_id}")
async def story_detail(story_id: str):
    story_id = story_id.strip()
    if not story_id:
        return send_envelope(
            code=status.HTTP_400_BAD_REQUEST,
            status_text="Bad Request",
            error="Missing story id",
        )

    story = get_story_by_id(story_id)
    if story is None:
        return send_envelope(
            code=status.HTTP_404_NOT_FOUND,
            status_text="Not Found",
            error="Story not found",
        )
    return send_envelope(data={"story": story.model_dump(exclude_none=True)})
