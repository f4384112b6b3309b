from fastapi import APIRouter

from companion.core.dependencies import OverlayServiceDependency
from companion.core.responses import send_error
from companion.db.schemas.content import OverlayContent
from companion.services.overlays import PRAYERS

router = APIRouter(prefix="/overlays", tags=["overlays"])


@router.get(
    "/{prayer}",
    response_model=OverlayContent,
    response_model_exclude_none=True,
)
async def overlay_content(prayer: str, overlays: OverlayServiceDependency):
    """Bilingual text shown over the prayer-time screen for ``prayer``."""
    prayer = prayer.lower()
    if prayer not in PRAYERS:
        return send_error("Invalid prayer", details={"allowed": list(PRAYERS)})
    return await overlays.get(prayer)
