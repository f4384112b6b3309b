from datetime import datetime, timezone

import pytest

from companion.db.models.content import AppContent
from companion.services.overlays import DEFAULT_CONTENT, PRAYERS


async def test_defaults_when_no_content_row(overlay_service):
    content = await overlay_service.get("fajr")
    assert content == DEFAULT_CONTENT["fajr"]


async def test_stored_content_overrides_defaults_per_field(overlay_service, session_factory):
    async with session_factory() as session:
        session.add(
            AppContent(
                id="asr_overlay",
                en="Custom Asr text",
                ar=None,
                updated_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
            )
        )
        await session.commit()

    content = await overlay_service.get("asr")

    assert content.en == "Custom Asr text"
    assert content.ar == DEFAULT_CONTENT["asr"].ar
    assert content.updatedAt is not None


async def test_unknown_prayer_is_rejected(overlay_service):
    with pytest.raises(ValueError, match="witr"):
        await overlay_service.get("witr")


def test_every_prayer_has_both_languages():
    assert PRAYERS == ("fajr", "sunrise", "dhuhr", "asr", "maghrib", "isha")
    for prayer in PRAYERS:
        assert DEFAULT_CONTENT[prayer].en
        assert DEFAULT_CONTENT[prayer].ar


def test_overlay_route(client):
    response = client.get("/api/overlays/Maghrib")
    assert response.status_code == 200
    assert response.json() == {
        "en": DEFAULT_CONTENT["maghrib"].en,
        "ar": DEFAULT_CONTENT["maghrib"].ar,
    }


def test_overlay_route_rejects_unknown_prayer(client):
    response = client.get("/api/overlays/witr")
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid prayer"
