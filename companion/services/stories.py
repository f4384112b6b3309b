from datetime import datetime, timedelta
from typing import Optional

from companion.db.schemas.story import FeaturedStory, IslamicStory
from companion.services.story_data import STORIES

ISLAMIC_STORIES: list[IslamicStory] = [IslamicStory.model_validate(s) for s in STORIES]
STORY_IDS: list[str] = [story.id for story in ISLAMIC_STORIES]


def date_key(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%d")


def index_for_date(key: str, length: int) -> int:
    # 31-multiplier string hash kept in unsigned 32-bit range
    value = 0
    for char in key:
        value = (value * 31 + ord(char)) & 0xFFFFFFFF
    return value % max(1, length)


def get_featured_story(moment: Optional[datetime] = None) -> FeaturedStory:
    """Story of the day; rotates deterministically at local midnight."""
    moment = moment or datetime.now().astimezone()
    key = date_key(moment)
    story = ISLAMIC_STORIES[index_for_date(key, len(ISLAMIC_STORIES))]
    next_midnight = (moment + timedelta(days=1)).replace(
        hour=0, minute=0, second=0, microsecond=0
    )
    return FeaturedStory(
        story=story,
        featuredDateISO=key,
        nextRotationTs=int(next_midnight.timestamp() * 1000),
        totalStories=len(ISLAMIC_STORIES),
    )


def get_story_by_id(story_id: str) -> Optional[IslamicStory]:
    return next((story for story in ISLAMIC_STORIES if story.id == story_id), None)


def get_stories() -> list[IslamicStory]:
    return list(ISLAMIC_STORIES)


def get_story_ids() -> list[str]:
    return list(STORY_IDS)
