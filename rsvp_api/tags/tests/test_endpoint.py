import re

import pytest

from rsvp_api.tags import urls


@pytest.mark.asyncio
async def test_tag_lifecycle(client, occasion):
    tags_url = urls.OCCASION_TAGS_URL.format(occasion_id=occasion.id)

    created = await client.post(tags_url, json={"name": "Family"})
    assert created.status_code == 201
    tag = created.json()
    assert re.fullmatch(r"#[0-9a-fA-F]{6}", tag["color"])

    duplicate = await client.post(tags_url, json={"name": "Family"})
    assert duplicate.status_code == 409

    renamed = await client.patch(urls.TAG_URL.format(tag_id=tag["id"]), json={"color": "#112233"})
    assert renamed.status_code == 200
    assert renamed.json()["color"] == "#112233"
    assert renamed.json()["name"] == "Family"

    listed = await client.get(tags_url)
    assert [t["name"] for t in listed.json()] == ["Family"]

    deleted = await client.delete(urls.TAG_URL.format(tag_id=tag["id"]))
    assert deleted.status_code == 204
    assert (await client.get(tags_url)).json() == []


@pytest.mark.asyncio
async def test_tag_color_must_be_hex(client, occasion):
    response = await client.post(
        urls.OCCASION_TAGS_URL.format(occasion_id=occasion.id), json={"name": "Friends", "color": "red"}
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_unknown_tag(client):
    assert (await client.patch(urls.TAG_URL.format(tag_id="missing"), json={"name": "X"})).status_code == 404
    assert (await client.delete(urls.TAG_URL.format(tag_id="missing"))).status_code == 404
