"""
Tests for the blocks controller

Exercises library bridging end to end: the owning library of a block decides
which model handles it, which access rules apply and which templates render.
"""

import pytest

from minerva.models import Block


@pytest.fixture
async def blocks(store):
    """A gallery-owned block and a core block."""
    gallery = Block(url="gallery-home", library="gallery", title="Gallery Home", extra={"images": ["a.jpg"]})
    sidebar = Block(url="sidebar", title="Sidebar", content="<p>Hi</p>", block_type="menu", extra={})
    for record in (gallery, sidebar):
        assert await store.save(record)
    return {"gallery": gallery, "sidebar": sidebar}


class TestIndex:
    async def test_anonymous_redirected_to_login(self, client):
        response = await client.get("/blocks")
        assert response.status_code == 303
        assert response.headers["location"] == "/users/login"

    async def test_manager_lists_blocks(self, client, login, blocks):
        login("manager")
        response = await client.get("/blocks")
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert {document["url"] for document in data["documents"]} == {"gallery-home", "sidebar"}

    async def test_filter_and_paging(self, client, login, blocks):
        login("manager")
        response = await client.get("/blocks", params={"block_type": "menu", "limit": 1, "page": 1})
        data = response.json()
        assert data["total"] == 1
        assert data["documents"][0]["url"] == "sidebar"
        assert data["limit"] == 1

    async def test_library_index_uses_library_policy(self, client, login, blocks):
        login("user")
        response = await client.get("/blocks/index/gallery")
        assert response.status_code == 303


class TestRead:
    async def test_gallery_block(self, client, blocks):
        response = await client.get("/blocks/read/gallery-home")
        assert response.status_code == 200
        record = response.json()["record"]
        assert record["library"] == "gallery"
        assert record["images"] == ["a.jpg"]

    async def test_core_block(self, client, blocks):
        record = (await client.get("/blocks/read/sidebar")).json()["record"]
        assert record["library"] is None
        assert "images" not in record

    async def test_missing_block(self, client):
        response = await client.get("/blocks/read/nope")
        assert response.status_code == 404
        assert response.json()["error"]["error_code"] == "RECORD_NOT_FOUND"


class TestCreate:
    async def test_user_may_open_gallery_form(self, client, login):
        login("user")
        response = await client.get("/blocks/create/gallery")
        assert response.status_code == 200
        assert "New Gallery Block" in response.text
        assert "Minerva CMS" in response.text

    async def test_user_may_not_open_core_form(self, client, login):
        login("user")
        response = await client.get("/blocks/create")
        assert response.status_code == 303
        assert response.headers["location"] == "/users/login"

    async def test_manager_gets_core_form(self, client, login):
        login("manager")
        response = await client.get("/blocks/create", params={"block_type": "menu"})
        assert response.status_code == 200
        assert "Create Block" in response.text
        assert 'value="menu"' in response.text

    async def test_library_without_templates_uses_core_form(self, client, login):
        login("manager")
        response = await client.get("/blocks/create/blog")
        assert response.status_code == 200
        assert "Create Block" in response.text
        assert 'action="/blocks/create/blog"' in response.text

    async def test_malformed_library_falls_back_to_core(self, client, login):
        login("manager")
        response = await client.get("/blocks/create/Gallery!")
        assert response.status_code == 200
        assert "Create Block" in response.text

    async def test_user_creates_gallery_block(self, client, login, store):
        login("user")
        response = await client.post("/blocks/create/gallery", json={"title": "Summer Trip", "images": "a.jpg\nb.jpg"})
        assert response.status_code == 303
        assert response.headers["location"] == "/blocks"
        record = await store.find_one("Block", {"url": "summer-trip"})
        assert record.library == "gallery"
        assert record.extra["images"] == ["a.jpg", "b.jpg"]

    async def test_body_cannot_choose_library(self, client, login, store):
        login("manager")
        await client.post("/blocks/create", json={"title": "Footer", "library": "gallery"})
        record = await store.find_one("Block", {"url": "footer"})
        assert record.library is None

    async def test_duplicate_url(self, client, login, blocks):
        login("manager")
        response = await client.post("/blocks/create", json={"title": "Another", "url": "sidebar"})
        assert response.status_code == 400
        assert response.json()["error"]["error_code"] == "RECORD_SAVE_FAILED"


class TestUpdate:
    async def test_user_may_edit_gallery_block(self, client, login, blocks, store):
        login("user")
        response = await client.post("/blocks/update/gallery-home", json={"images": "c.jpg"})
        assert response.status_code == 303
        record = await store.find_one("Block", {"url": "gallery-home"})
        await store.db.refresh(record)
        assert record.extra["images"] == ["c.jpg"]

    async def test_user_may_not_edit_core_block(self, client, login, blocks):
        login("user")
        response = await client.post("/blocks/update/sidebar", json={"title": "Hacked"})
        assert response.status_code == 303
        assert response.headers["location"] == "/users/login"

    async def test_update_form(self, client, login, blocks):
        login("manager")
        response = await client.get("/blocks/update/sidebar")
        assert response.status_code == 200
        assert "Edit Block" in response.text
        assert 'value="Sidebar"' in response.text

    async def test_update_missing(self, client, login):
        login("manager")
        response = await client.post("/blocks/update/nope", json={"title": "x"})
        assert response.status_code == 404


class TestDelete:
    async def test_manager_deletes_gallery_block(self, client, login, blocks, store):
        login("manager")
        response = await client.post("/blocks/delete/gallery-home")
        assert response.status_code == 303
        assert response.headers["location"] == "/blocks"
        assert await store.count("Block", {"url": "gallery-home"}) == 0

    async def test_user_may_not_delete_gallery_block(self, client, login, blocks, store):
        login("user")
        response = await client.post("/blocks/delete/gallery-home")
        assert response.headers["location"] == "/users/login"
        assert await store.count("Block", {"url": "gallery-home"}) == 1


class TestView:
    async def test_default_static_block(self, client):
        response = await client.get("/blocks/view")
        assert response.status_code == 200
        assert "This is an example static block" in response.text
        assert "<html>" not in response.text

    async def test_hidden_path_rejected(self, client):
        response = await client.get("/blocks/view/.secret")
        assert response.status_code == 400
        assert response.json()["error"]["error_code"] == "VALIDATION_FAILED"

    async def test_missing_static_block(self, client):
        response = await client.get("/blocks/view/nope")
        assert response.status_code == 500
        assert response.json()["error"]["error_code"] == "TEMPLATE_NOT_FOUND"
