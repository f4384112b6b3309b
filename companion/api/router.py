from fastapi import APIRouter

from companion.api.endpoints.adhkar import router as adhkar_router
from companion.api.endpoints.aladhan import router as aladhan_router
from companion.api.endpoints.hadith import router as hadith_router
from companion.api.endpoints.overlays import router as overlays_router
from companion.api.endpoints.profile import router as profile_router
from companion.api.endpoints.quran import router as quran_router
from companion.api.endpoints.stories import router as stories_router
from companion.api.endpoints.tafsir import router as tafsir_router

router = APIRouter(prefix="/api")
router.include_router(aladhan_router)
router.include_router(hadith_router)
router.include_router(tafsir_router)
router.include_router(quran_router)
router.include_router(adhkar_router)
router.include_router(stories_router)
router.include_router(overlays_router)
router.include_router(profile_router)
