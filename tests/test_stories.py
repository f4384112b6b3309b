from datetime import datetime, timedelta

from companion.services.stories import (
    ISLAMIC_STORIES,
    STORY_IDS,
    date_key,
    get_featured_story,
    get_story_by_id,
    index_for_date,
)


def test_story_ids_are_unique():
    assert len(STORY_IDS) == len(set(STORY_IDS)) == len(ISLAMIC_STORIES)


def test_featured_story_is_stable_within_a_day():
    morning = datetime(2024, 3, 15, 6, 0).astimezone()
    evening = datetime(2024, 3, 15, 23, 59).astimezone()

    assert get_featured_story(morning).story.id == get_featured_story(evening).story.id


def test_featured_story_reports_next_local_midnight():
    moment = datetime(2024, 3, 15, 10, 30).astimezone()
    featured = get_featured_story(moment)

    midnight = datetime(2024, 3, 16).astimezone()
    assert featured.featuredDateISO == "2024-03-15"
    assert featured.nextRotationTs == int(midnight.timestamp() * 1000)
    assert featured.totalStories == len(ISLAMIC_STORIES)


def test_index_for_date_matches_hash_rotation():
    key = date_key(datetime(2024, 1, 1))
    value = 0
    for char in key:
        value = (value * 31 + ord(char)) & 0xFFFFFFFF
    assert index_for_date(key, 10) == value % 10


def test_featured_story_rotates_across_stories():
    start = datetime(2024, 1, 1).astimezone()
    seen = {get_featured_story(start + timedelta(days=n)).story.id for n in range(60)}
    assert len(seen) > 1


def test_lookup_by_id():
    assert get_story_by_id("hijrah").title_en.startswith("The Hijrah")
    assert get_story_by_id("missing") is None


def test_story_detail_envelope(client):
    response = client.get("/api/stories/hijrah")

    assert response.status_code == 200
    body = response.json()
    assert body["code"] == 200
    assert body["status"] == "OK"
    assert body["data"]["story"]["id"] == "hijrah"


def test_story_detail_not_found(client):
    response = client.get("/api/stories/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"code": 404, "status": "Not Found", "error": "Story not found"}


def test_story_list(client):
    response = client.get("/api/stories")

    body = response.json()
    assert body["data"]["total"] == len(ISLAMIC_STORIES)
    assert [s["id"] for s in body["data"]["stories"]] == STORY_IDS


def test_featured_endpoint_is_cached(client):
    response = client.get("/api/stories/featured")

    assert response.status_code == 200
    assert response.headers["cache-control"] == "public, max-age=1800"
    body = response.json()
    assert body["code"] == 200
    assert body["data"]["story"]["id"] in STORY_IDS
    assert body["data"]["totalStories"] == len(ISLAMIC_STORIES)
    assert client.get("/api/stories/featured").json() == body
