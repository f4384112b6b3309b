from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class OverlayContent(BaseModel):
    en: str
    ar: str
    updatedAt: Optional[datetime] = None
