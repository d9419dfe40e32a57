"""
Post endpoint tests: creation against active users, the newest-first feed
with its deletion filters, ownership-checked updates and soft deletes.
"""
import pytest
from httpx import AsyncClient

from conftest import create_post, create_user


# ---------------------------------------------------------------------------
# Create post
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_post(async_client: AsyncClient):
    user = await create_user(async_client, "poster")
    resp = await async_client.post("/posts", json={"content": "hi", "userId": user["id"]})
    assert resp.status_code == 201
    post = resp.json()["data"]
    assert post["content"] == "hi"
    assert post["userId"] == user["id"]
    assert post["deletedAt"] is None
    assert "id" in post


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [
    {"content": "no author"},
    {"userId": 1},
    {"content": "", "userId": 1},
])
async def test_create_post_missing_fields(async_client: AsyncClient, payload: dict):
    await create_user(async_client, "poster")
    resp = await async_client.post("/posts", json=payload)
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "Content and userId are required"}


@pytest.mark.asyncio
async def test_create_post_unknown_user(async_client: AsyncClient):
    resp = await async_client.post("/posts", json={"content": "orphan", "userId": 999})
    assert resp.status_code == 404
    assert resp.json()["message"] == "User not found"


@pytest.mark.asyncio
async def test_create_post_deleted_user(async_client: AsyncClient):
    user = await create_user(async_client, "ghost")
    await async_client.delete(f"/users/{user['id']}")
    resp = await async_client.post("/posts", json={"content": "boo", "userId": user["id"]})
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_create_post_wrong_type_is_bad_request(async_client: AsyncClient):
    resp = await async_client.post("/posts", json={"content": "x", "userId": "not-a-number"})
    assert resp.status_code == 400
    assert resp.json()["success"] is False


# ---------------------------------------------------------------------------
# List / get posts
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_list_posts_newest_first(async_client: AsyncClient):
    user = await create_user(async_client, "feeder")
    ids = [(await create_post(async_client, user["id"], f"post {i}"))["id"] for i in range(3)]

    resp = await async_client.get("/posts")
    assert resp.status_code == 200
    assert [p["id"] for p in resp.json()["data"]] == list(reversed(ids))


@pytest.mark.asyncio
async def test_list_posts_filters(async_client: AsyncClient):
    user = await create_user(async_client, "feeder")
    kept = await create_post(async_client, user["id"], "kept")
    dropped = await create_post(async_client, user["id"], "dropped")
    await async_client.request("DELETE", f"/posts/{dropped['id']}", json={"userId": user["id"]})

    active = (await async_client.get("/posts")).json()["data"]
    assert [p["id"] for p in active] == [kept["id"]]

    everything = (await async_client.get("/posts?includeDeleted=true")).json()["data"]
    assert {p["id"] for p in everything} == {kept["id"], dropped["id"]}

    deleted = (await async_client.get("/posts?onlyDeleted=true")).json()["data"]
    assert [p["id"] for p in deleted] == [dropped["id"]]


@pytest.mark.asyncio
async def test_get_post(async_client: AsyncClient):
    user = await create_user(async_client, "reader")
    post = await create_post(async_client, user["id"], "read me")
    resp = await async_client.get(f"/posts/{post['id']}")
    assert resp.status_code == 200
    assert resp.json()["data"]["content"] == "read me"


@pytest.mark.asyncio
async def test_get_post_not_found(async_client: AsyncClient):
    resp = await async_client.get("/posts/31337")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Post not found"}


# ---------------------------------------------------------------------------
# Update post
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_update_post_by_owner(async_client: AsyncClient):
    user = await create_user(async_client, "owner")
    post = await create_post(async_client, user["id"], "draft")
    resp = await async_client.put(f"/posts/{post['id']}", json={"content": "final", "userId": user["id"]})
    assert resp.status_code == 200
    assert resp.json()["data"]["content"] == "final"
    assert (await async_client.get(f"/posts/{post['id']}")).json()["data"]["content"] == "final"


@pytest.mark.asyncio
async def test_update_post_without_content_keeps_it(async_client: AsyncClient):
    user = await create_user(async_client, "owner")
    post = await create_post(async_client, user["id"], "unchanged")
    resp = await async_client.put(f"/posts/{post['id']}", json={"userId": user["id"]})
    assert resp.status_code == 200
    assert resp.json()["data"]["content"] == "unchanged"


@pytest.mark.asyncio
async def test_update_post_by_other_user_forbidden(async_client: AsyncClient):
    owner = await create_user(async_client, "owner")
    other = await create_user(async_client, "other")
    post = await create_post(async_client, owner["id"], "mine")

    resp = await async_client.put(f"/posts/{post['id']}", json={"content": "yours", "userId": other["id"]})
    assert resp.status_code == 403
    assert resp.json() == {"success": False, "message": "You can only update your own posts"}
    assert (await async_client.get(f"/posts/{post['id']}")).json()["data"]["content"] == "mine"


@pytest.mark.asyncio
async def test_update_post_without_user_forbidden(async_client: AsyncClient):
    owner = await create_user(async_client, "owner")
    post = await create_post(async_client, owner["id"])
    resp = await async_client.put(f"/posts/{post['id']}", json={"content": "anon"})
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_update_post_with_string_user_id_rejected(async_client: AsyncClient):
    owner = await create_user(async_client, "owner")
    post = await create_post(async_client, owner["id"], "mine")

    resp = await async_client.put(f"/posts/{post['id']}", json={"content": "x", "userId": str(owner["id"])})
    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert (await async_client.get(f"/posts/{post['id']}")).json()["data"]["content"] == "mine"


@pytest.mark.asyncio
async def test_delete_post_with_string_user_id_rejected(async_client: AsyncClient):
    owner = await create_user(async_client, "owner")
    post = await create_post(async_client, owner["id"])

    resp = await async_client.request("DELETE", f"/posts/{post['id']}", json={"userId": str(owner["id"])})
    assert resp.status_code == 400
    assert (await async_client.get(f"/posts/{post['id']}")).status_code == 200


@pytest.mark.asyncio
async def test_update_missing_post(async_client: AsyncClient):
    user = await create_user(async_client, "owner")
    resp = await async_client.put("/posts/404", json={"content": "x", "userId": user["id"]})
    assert resp.status_code == 404


# ---------------------------------------------------------------------------
# Delete post
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_delete_post_by_owner(async_client: AsyncClient):
    user = await create_user(async_client, "owner")
    post = await create_post(async_client, user["id"])
    resp = await async_client.request("DELETE", f"/posts/{post['id']}", json={"userId": user["id"]})
    assert resp.status_code == 200
    assert resp.json()["data"]["deletedAt"] is not None
    assert (await async_client.get(f"/posts/{post['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_delete_post_by_other_user_forbidden(async_client: AsyncClient):
    owner = await create_user(async_client, "owner")
    other = await create_user(async_client, "other")
    post = await create_post(async_client, owner["id"])

    resp = await async_client.request("DELETE", f"/posts/{post['id']}", json={"userId": other["id"]})
    assert resp.status_code == 403
    assert resp.json()["message"] == "You can only delete your own posts"
    assert (await async_client.get(f"/posts/{post['id']}")).status_code == 200


@pytest.mark.asyncio
async def test_delete_post_without_body_forbidden(async_client: AsyncClient):
    owner = await create_user(async_client, "owner")
    post = await create_post(async_client, owner["id"])
    resp = await async_client.delete(f"/posts/{post['id']}")
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_delete_post_twice(async_client: AsyncClient):
    user = await create_user(async_client, "owner")
    post = await create_post(async_client, user["id"])
    await async_client.request("DELETE", f"/posts/{post['id']}", json={"userId": user["id"]})
    resp = await async_client.request("DELETE", f"/posts/{post['id']}", json={"userId": user["id"]})
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_deleted_post_cannot_be_updated(async_client: AsyncClient):
    user = await create_user(async_client, "owner")
    post = await create_post(async_client, user["id"])
    await async_client.request("DELETE", f"/posts/{post['id']}", json={"userId": user["id"]})
    resp = await async_client.put(f"/posts/{post['id']}", json={"content": "zombie", "userId": user["id"]})
    assert resp.status_code == 404
