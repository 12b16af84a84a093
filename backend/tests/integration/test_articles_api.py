"""End-to-end tests for the /api/articles endpoints against an in-memory database."""

import pytest
from httpx import ASGITransport, AsyncClient

from app.infrastructure.database.repositories import SQLAlchemyArticleRepository
from app.infrastructure.dependencies import get_article_service
from app.main import app


async def _create(client: AsyncClient, title: str, content: str = "<p>Body</p>",
                  keywords: str | None = None) -> dict:
    response = await client.post(
        "/api/articles", json={"title": title, "content": content, "keywords": keywords}
    )
    assert response.status_code == 201, response.text
    return response.json()


# ── Create / read ────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_create_article_returns_201(client):
    data = await _create(client, "Getting Started", keywords="onboarding")

    assert data["id"] > 0
    assert data["title"] == "Getting Started"
    assert data["keywords"] == "onboarding"
    assert data["views"] == 0
    assert "created_at" in data and "updated_at" in data


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"title": "", "content": "c"},
        {"title": "   ", "content": "c"},
        {"title": "t", "content": ""},
        {"content": "no title"},
        {"title": "no content"},
    ],
)
async def test_create_rejects_blank_fields_with_400(client, body):
    response = await client.post("/api/articles", json=body)
    assert response.status_code == 400

    listing = await client.get("/api/articles")
    assert listing.json()["total"] == 0


@pytest.mark.asyncio
async def test_create_ignores_client_supplied_views(client):
    response = await client.post(
        "/api/articles", json={"title": "T", "content": "C", "views": 99, "id": 123}
    )
    assert response.status_code == 201
    assert response.json()["views"] == 0
    assert response.json()["id"] != 123


@pytest.mark.asyncio
async def test_get_article_increments_views(client):
    created = await _create(client, "Counted")

    first = await client.get(f"/api/articles/{created['id']}")
    second = await client.get(f"/api/articles/{created['id']}")

    assert first.status_code == 200
    assert first.json()["views"] == 1
    assert second.json()["views"] == 2


@pytest.mark.asyncio
async def test_get_missing_article_returns_404(client):
    response = await client.get("/api/articles/9999")
    assert response.status_code == 404


# ── Update / history ─────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_update_records_previous_content(client):
    created = await _create(client, "Doc", content="v0")
    article_id = created["id"]

    for version in ("v1", "v2"):
        response = await client.put(
            f"/api/articles/{article_id}",
            json={"title": "Doc", "content": version, "keywords": "k"},
        )
        assert response.status_code == 200
        assert response.json()["content"] == version

    history = await client.get(f"/api/articles/{article_id}/history")
    assert history.status_code == 200
    assert [h["content"] for h in history.json()] == ["v1", "v0", "v0"]
    assert all(h["article_id"] == article_id for h in history.json())


@pytest.mark.asyncio
async def test_update_does_not_change_views(client):
    created = await _create(client, "Doc")
    await client.get(f"/api/articles/{created['id']}")

    response = await client.put(
        f"/api/articles/{created['id']}",
        json={"title": "Doc 2", "content": "C", "views": 0},
    )
    assert response.json()["views"] == 1
    assert response.json()["created_at"] == created["created_at"]


@pytest.mark.asyncio
async def test_update_missing_article_returns_404(client):
    response = await client.put("/api/articles/77", json={"title": "T", "content": "C"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_with_blank_title_returns_400_and_writes_nothing(client):
    created = await _create(client, "Doc", content="original")

    response = await client.put(
        f"/api/articles/{created['id']}", json={"title": " ", "content": "changed"}
    )
    assert response.status_code == 400

    history = await client.get(f"/api/articles/{created['id']}/history")
    assert len(history.json()) == 1


@pytest.mark.asyncio
async def test_history_of_missing_article_returns_404(client):
    response = await client.get("/api/articles/5/history")
    assert response.status_code == 404


# ── Delete ───────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_delete_article_removes_article_and_history(client):
    created = await _create(client, "Temp")
    await client.put(f"/api/articles/{created['id']}", json={"title": "Temp", "content": "x"})

    response = await client.delete(f"/api/articles/{created['id']}")
    assert response.status_code == 200
    assert response.json() == {"message": "Article successfully deleted", "id": created["id"]}

    assert (await client.get(f"/api/articles/{created['id']}")).status_code == 404
    assert (await client.get(f"/api/articles/{created['id']}/history")).status_code == 404


@pytest.mark.asyncio
async def test_delete_missing_article_returns_404(client):
    response = await client.delete("/api/articles/404")
    assert response.status_code == 404


class _FailingArticleService:
    """Stand-in service whose every operation fails with an unexpected error."""

    def __init__(self, message: str):
        self._message = message

    async def create_article(self, data):
        raise RuntimeError(self._message)

    async def update_article(self, article_id, data):
        raise RuntimeError(self._message)

    async def delete_article(self, article_id: int) -> bool:
        raise RuntimeError(self._message)

    async def get_article_history(self, article_id: int):
        raise RuntimeError(self._message)


async def _call_failing(message: str, method: str, url: str, **kwargs):
    app.dependency_overrides[get_article_service] = lambda: _FailingArticleService(message)
    try:
        # The catch-all handler re-raises after responding; keep the response.
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            return await client.request(method, url, **kwargs)
    finally:
        app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_delete_failure_returns_500():
    response = await _call_failing("disk unavailable", "DELETE", "/api/articles/1")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to delete article", "message": "disk unavailable"}


@pytest.mark.asyncio
async def test_delete_failure_is_rolled_back(client, monkeypatch):
    created = await _create(client, "Survivor")
    await client.put(f"/api/articles/{created['id']}", json={"title": "Survivor", "content": "v1"})

    async def broken_delete(self, article_id: int) -> bool:
        raise RuntimeError("constraint violated")

    monkeypatch.setattr(SQLAlchemyArticleRepository, "delete", broken_delete)
    response = await client.delete(f"/api/articles/{created['id']}")
    monkeypatch.undo()

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to delete article"
    history = await client.get(f"/api/articles/{created['id']}/history")
    assert len(history.json()) == 2


@pytest.mark.asyncio
async def test_unexpected_error_returns_500_with_message():
    response = await _call_failing("kaboom", "GET", "/api/articles/1/history")

    assert response.status_code == 500
    assert response.json() == {"error": "kaboom"}


@pytest.mark.asyncio
async def test_create_failure_returns_400():
    response = await _call_failing(
        "write refused", "POST", "/api/articles", json={"title": "T", "content": "C"}
    )

    assert response.status_code == 400
    assert "write refused" in response.json()["detail"]


@pytest.mark.asyncio
async def test_update_failure_returns_400():
    response = await _call_failing(
        "write refused", "PUT", "/api/articles/1", json={"title": "T", "content": "C"}
    )

    assert response.status_code == 400
    assert "write refused" in response.json()["detail"]


# ── Listing / search ─────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_list_articles_is_paginated_and_sorted(client):
    for title in ("Bravo", "Alpha", "Charlie"):
        await _create(client, title)

    response = await client.get(
        "/api/articles", params={"page": 0, "size": 2, "sortBy": "title", "direction": "asc"}
    )
    assert response.status_code == 200
    data = response.json()
    assert [a["title"] for a in data["items"]] == ["Alpha", "Bravo"]
    assert data["total"] == 3
    assert data["total_pages"] == 2
    assert data["page"] == 0
    assert data["size"] == 2


@pytest.mark.asyncio
async def test_list_articles_rejects_unknown_sort_field(client):
    response = await client.get("/api/articles", params={"sortBy": "secret"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_search_without_filters_matches_listing(client):
    for title in ("One", "Two", "Three"):
        await _create(client, title)

    searched = (await client.get("/api/articles/search")).json()
    listed = (await client.get("/api/articles")).json()

    assert searched["total"] == listed["total"] == 3
    assert {a["id"] for a in searched["items"]} == {a["id"] for a in listed["items"]}


@pytest.mark.asyncio
async def test_search_by_min_views(client):
    popular = await _create(client, "Popular")
    quiet = await _create(client, "Quiet")
    for _ in range(5):
        await client.get(f"/api/articles/{popular['id']}")
    for _ in range(4):
        await client.get(f"/api/articles/{quiet['id']}")

    response = await client.get("/api/articles/search", params={"minViews": 5})
    assert [a["title"] for a in response.json()["items"]] == ["Popular"]

    response = await client.get("/api/articles/search", params={"minViews": 0})
    assert response.json()["total"] == 2


@pytest.mark.asyncio
async def test_search_by_tags_matches_any(client):
    await _create(client, "X", keywords="x-ray, imaging")
    await _create(client, "Y", keywords="yaml")
    await _create(client, "Z", keywords="zebra")

    repeated = await client.get("/api/articles/search", params=[("tags", "x-ray"), ("tags", "yaml")])
    assert {a["title"] for a in repeated.json()["items"]} == {"X", "Y"}

    comma = await client.get("/api/articles/search", params={"tags": "x-ray,yaml"})
    assert {a["title"] for a in comma.json()["items"]} == {"X", "Y"}

    brackets = await client.get("/api/articles/search", params=[("tags[]", "zebra")])
    assert {a["title"] for a in brackets.json()["items"]} == {"Z"}


@pytest.mark.asyncio
async def test_search_by_keyword_and_date_range(client):
    await _create(client, "Deploying Kafka", keywords="ops")
    await _create(client, "Other", content="nothing relevant")

    response = await client.get(
        "/api/articles/search",
        params={"keyword": "kafka", "fromDate": "2000-01-01T00:00:00"},
    )
    assert [a["title"] for a in response.json()["items"]] == ["Deploying Kafka"]

    response = await client.get(
        "/api/articles/search",
        params={"keyword": "kafka", "toDate": "2000-01-01T00:00:00"},
    )
    assert response.json()["total"] == 0


@pytest.mark.asyncio
async def test_search_with_malformed_date_returns_400(client):
    response = await client.get("/api/articles/search", params={"fromDate": "yesterday"})
    assert response.status_code == 400
    assert "error" in response.json()


@pytest.mark.asyncio
async def test_recent_popular_and_by_keyword(client):
    first = await _create(client, "First", keywords="Python, web")
    second = await _create(client, "Second", keywords="go")
    await client.get(f"/api/articles/{first['id']}")

    recent = (await client.get("/api/articles/recent")).json()
    assert [a["id"] for a in recent["items"]] == [second["id"], first["id"]]

    popular = (await client.get("/api/articles/popular")).json()
    assert popular["items"][0]["id"] == first["id"]

    tagged = (await client.get("/api/articles/by-keyword", params={"keyword": "python"})).json()
    assert [a["id"] for a in tagged["items"]] == [first["id"]]


@pytest.mark.asyncio
async def test_by_keyword_with_blank_keyword_skips_untagged_articles(client):
    tagged = await _create(client, "Tagged", keywords="ops")
    await _create(client, "Untagged")

    response = await client.get("/api/articles/by-keyword", params={"keyword": " "})
    assert response.status_code == 200
    assert [a["id"] for a in response.json()["items"]] == [tagged["id"]]


# ── Export ───────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_export_returns_markdown_attachment(client):
    created = await _create(
        client, "Guide", content="<h2>Setup</h2><p>Run <strong>it</strong></p>", keywords="docs"
    )

    response = await client.get(f"/api/articles/{created['id']}/export")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/markdown")
    assert (
        response.headers["content-disposition"]
        == f'attachment; filename="article-{created["id"]}.md"'
    )
    body = response.text
    assert body.startswith("# Guide\n\n")
    assert "## Setup" in body
    assert "**it**" in body
    assert "\n\n---\nKeywords: docs\nCreated: " in body
    assert "\nLast Updated: " in body
    assert body.endswith("\nViews: 0\n")


@pytest.mark.asyncio
async def test_export_missing_article_returns_404(client):
    response = await client.get("/api/articles/31/export")
    assert response.status_code == 404
