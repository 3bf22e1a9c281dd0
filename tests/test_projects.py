"""
Project store tests: slugs, listing, mutations and view counters
"""
import asyncio
import re
import uuid

import pytest

from conftest import API
from portfolio.domains.projects.entities import slugify
from portfolio.domains.projects.services import ProjectService


def project_payload(title="AI Portfolio Generator", **overrides):
    payload = {
        "title": title,
        "description": "A portfolio built with AI assistance",
        "technologies": ["Python", "FastAPI"],
        "category": "ai-generated",
        "images": {"thumbnail": "/img/thumb.png", "gallery": ["/img/1.png"]},
        "liveUrl": "https://example.com",
        "githubUrl": "",
        "aiPrompts": ["Build me a portfolio"],
    }
    payload.update(overrides)
    return payload


async def create_project(client, auth_headers, **kwargs):
    response = await client.post(f"{API}/projects", json=project_payload(**kwargs), headers=auth_headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]["project"]


@pytest.mark.parametrize("title", [
    "Hello World",
    "  --Already-slugged--  ",
    "C++ & Rust: A Tale!!",
    "Ünïcödé Prøject 2024",
])
def test_slugify_properties(title):
    slug = slugify(title)

    assert slug == slug.lower()
    assert re.fullmatch(r"[a-z0-9-]*", slug)
    assert not slug.startswith("-") and not slug.endswith("-")
    assert "--" not in slug
    assert slugify(slug) == slug


def test_slugify_examples():
    assert slugify("Hello World") == "hello-world"
    assert slugify("C++ & Rust: A Tale!!") == "c-rust-a-tale"


async def test_create_requires_admin(client, admin_user):
    response = await client.post(f"{API}/projects", json=project_payload())

    assert response.status_code == 401


async def test_create_and_get_by_slug(client, auth_headers):
    project = await create_project(client, auth_headers)

    assert project["slug"] == "ai-portfolio-generator"
    assert project["viewCount"] == 0
    assert project["aiPrompts"] == ["Build me a portfolio"]

    response = await client.get(f"{API}/projects/ai-portfolio-generator")

    assert response.status_code == 200
    fetched = response.json()["data"]["project"]
    assert fetched["id"] == project["id"]
    assert fetched["images"]["gallery"] == ["/img/1.png"]


async def test_unknown_slug_is_not_found(client):
    response = await client.get(f"{API}/projects/missing")

    assert response.status_code == 404
    assert response.json()["message"] == "Project not found"


async def test_duplicate_slug_is_rejected(client, auth_headers):
    await create_project(client, auth_headers, title="Same Title")

    response = await client.post(f"{API}/projects", json=project_payload(title="same title!"), headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["status"] == "fail"


async def test_create_validates_fields(client, auth_headers):
    response = await client.post(f"{API}/projects", json=project_payload(
        title="x" * 101, category="unknown", liveUrl="ftp://example.com"
    ), headers=auth_headers)

    assert response.status_code == 400
    fields = {error["field"] for error in response.json()["errors"]}
    assert {"title", "category", "liveUrl"} <= fields


async def test_title_without_slug_characters_is_rejected(client, auth_headers):
    response = await client.post(f"{API}/projects", json=project_payload(title="!!!"), headers=auth_headers)

    assert response.status_code == 400


async def test_list_filters_by_category_and_paginates(client, auth_headers):
    for i in range(3):
        await create_project(client, auth_headers, title=f"Generated {i}", category="ai-generated")
    await create_project(client, auth_headers, title="Handmade", category="manual")

    response = await client.get(f"{API}/projects", params={"category": "ai-generated", "limit": 2, "page": 1})

    assert response.status_code == 200
    data = response.json()["data"]
    assert len(data["projects"]) == 2
    assert all(p["category"] == "ai-generated" for p in data["projects"])
    assert data["pagination"] == {"page": 1, "limit": 2, "total": 3, "totalPages": 2}


async def test_list_search_matches_title_description_and_technologies(client, auth_headers):
    await create_project(client, auth_headers, title="Weather App", technologies=["Django"])
    await create_project(client, auth_headers, title="Chat Bot", description="Talks using websockets")
    await create_project(client, auth_headers, title="Blog", technologies=["Next.js"])

    by_tech = await client.get(f"{API}/projects", params={"search": "django"})
    by_description = await client.get(f"{API}/projects", params={"search": "WEBSOCKET"})
    wildcard = await client.get(f"{API}/projects", params={"search": "%"})

    assert [p["title"] for p in by_tech.json()["data"]["projects"]] == ["Weather App"]
    assert [p["title"] for p in by_description.json()["data"]["projects"]] == ["Chat Bot"]
    assert wildcard.json()["data"]["projects"] == []


async def test_search_matches_non_ascii_technology_tag(client, auth_headers):
    await create_project(client, auth_headers, title="Dicionário", technologies=["Português", "Vue"])

    response = await client.get(f"{API}/projects", params={"search": "português"})

    assert [p["title"] for p in response.json()["data"]["projects"]] == ["Dicionário"]


async def test_search_does_not_match_across_technology_tags(client, auth_headers):
    await create_project(client, auth_headers, title="Web Stack", technologies=["React", "Vue"])

    for term in ('", "', "React, Vue", "[", '"'):
        response = await client.get(f"{API}/projects", params={"search": term})
        assert response.json()["data"]["projects"] == [], term


async def test_list_featured_filter_and_sort(client, auth_headers):
    await create_project(client, auth_headers, title="Beta", featured=True)
    await create_project(client, auth_headers, title="Alpha", featured=True)
    await create_project(client, auth_headers, title="Gamma", featured=False)

    response = await client.get(f"{API}/projects", params={"featured": "true", "sort": "title"})

    titles = [p["title"] for p in response.json()["data"]["projects"]]
    assert titles == ["Alpha", "Beta"]


async def test_unknown_sort_field_is_rejected(client):
    response = await client.get(f"{API}/projects", params={"sort": "-password"})

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "sort"


async def test_update_rederives_slug_and_ignores_protected_fields(client, auth_headers):
    project = await create_project(client, auth_headers, title="Old Name")

    response = await client.put(f"{API}/projects/{project['id']}", json={
        "title": "New Name",
        "viewCount": 999,
        "slug": "hijacked",
        "githubUrl": "https://github.com/example/new-name",
    }, headers=auth_headers)

    assert response.status_code == 200
    updated = response.json()["data"]["project"]
    assert updated["slug"] == "new-name"
    assert updated["viewCount"] == 0
    assert updated["githubUrl"] == "https://github.com/example/new-name"
    assert updated["description"] == project["description"]


async def test_update_and_delete_missing_project(client, auth_headers):
    missing = uuid.uuid4()

    update = await client.put(f"{API}/projects/{missing}", json={"title": "X"}, headers=auth_headers)
    delete = await client.delete(f"{API}/projects/{missing}", headers=auth_headers)

    assert update.status_code == 404
    assert delete.status_code == 404
    assert delete.json()["message"] == "Project not found"


async def test_delete_project(client, auth_headers):
    project = await create_project(client, auth_headers)

    response = await client.delete(f"{API}/projects/{project['id']}", headers=auth_headers)

    assert response.status_code == 200
    assert (await client.get(f"{API}/projects/{project['slug']}")).status_code == 404


async def test_view_increment_for_missing_project_succeeds(client):
    response = await client.post(f"{API}/projects/{uuid.uuid4()}/view")

    assert response.status_code == 200
    assert response.json()["message"] == "View count incremented"


async def test_concurrent_view_increments_are_not_lost(client, auth_headers, database):
    project = await create_project(client, auth_headers)
    project_id = uuid.UUID(project["id"])

    async def increment():
        async with database.session_factory() as session:
            await ProjectService(session).increment_view(project_id)

    await asyncio.gather(*(increment() for _ in range(10)))

    response = await client.get(f"{API}/projects/{project['slug']}")
    assert response.json()["data"]["project"]["viewCount"] == 10
