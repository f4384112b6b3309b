from typing import Optional

from pydantic import BaseModel


class StorySource(BaseModel):
    citation: str
    url: Optional[str] = None


class IslamicStory(BaseModel):
    id: str
    title_en: str
    title_ar: str
    content_en: str
    content_ar: str
    source: StorySource


class FeaturedStory(BaseModel):
    story: IslamicStory
    featuredDateISO: str
    nextRotationTs: int  # epoch ms of the next local midnight
    totalStories: int
