import pytest
from datetime import datetime, timedelta
from unittest.mock import AsyncMock, patch
from httpx import AsyncClient, ASGITransport
from bson import ObjectId

from main import app
from app.core.auth import get_current_user
from app.schemas.comment import LikeTarget

COMMENTS = "app.api.api_v1.endpoints.comments"

POST_ID = str(ObjectId())

author = {
    "_id": ObjectId(),
    "email": "keisha@crownside.app",
    "fullName": "Keisha Hart",
    "role": "CLIENT",
    "mutedUntil": None,
    "createdAt": datetime(2024, 1, 1),
    "isActive": True,
}
author["id"] = str(author["_id"])

stranger = {**author, "_id": ObjectId(), "fullName": "Someone Else"}
stranger["id"] = str(stranger["_id"])

moderator = {**stranger, "role": "ADMIN"}

post = {"_id": ObjectId(POST_ID), "id": POST_ID, "title": "Wash day", "content": "Tips?", "authorId": stranger["id"]}


def _comment(**overrides):
    comment = {
        "_id": ObjectId(),
        "postId": POST_ID,
        "authorId": author["id"],
        "content": "Deep condition first",
        "parentId": None,
        "depth": 0,
        "isRemoved": False,
        "createdAt": datetime(2024, 5, 6, 12, 0),
    }
    comment.update(overrides)
    comment["id"] = str(comment["_id"])
    return comment


@pytest.fixture
def login_as():
    def _login(user):
        app.dependency_overrides[get_current_user] = lambda: user
    yield _login
    app.dependency_overrides.clear()


def api_client():
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.mark.asyncio
async def test_blank_comment_is_rejected(login_as):
    login_as(author)
    async with api_client() as client:
        response = await client.post(f"/api/v1/comments/{POST_ID}", json={"content": "   "})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_muted_user_cannot_comment(login_as):
    login_as({**author, "mutedUntil": datetime.utcnow() + timedelta(days=1)})
    with patch(f"{COMMENTS}.create_comment", new_callable=AsyncMock) as create:
        async with api_client() as client:
            response = await client.post(f"/api/v1/comments/{POST_ID}", json={"content": "Hello"})
    assert response.status_code == 403
    create.assert_not_awaited()


@pytest.mark.asyncio
async def test_expired_mute_allows_comment(login_as):
    user = {**author, "mutedUntil": datetime.utcnow() - timedelta(minutes=1)}
    login_as(user)
    with patch(f"{COMMENTS}.get_post", new_callable=AsyncMock, return_value=post), \
         patch(f"{COMMENTS}.create_comment", new_callable=AsyncMock, return_value=_comment()) as create:
        async with api_client() as client:
            response = await client.post(
                f"/api/v1/comments/{POST_ID}",
                json={"content": "Deep condition first", "parentId": None},
            )
    assert response.status_code == 201, response.text
    assert response.json()["content"] == "Deep condition first"
    post_arg, comment_in, user_arg = create.call_args.args
    assert post_arg["id"] == POST_ID
    assert comment_in.content == "Deep condition first"
    assert user_arg["id"] == author["id"]


@pytest.mark.asyncio
async def test_comment_on_missing_post(login_as):
    login_as(author)
    with patch(f"{COMMENTS}.get_post", new_callable=AsyncMock, return_value=None):
        async with api_client() as client:
            response = await client.post(f"/api/v1/comments/{POST_ID}", json={"content": "Hi"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_list_comments_anonymously():
    page = {"comments": [_comment(likeCount=2, replyCount=1)], "nextCursor": None}
    with patch(f"{COMMENTS}.list_comments", new_callable=AsyncMock, return_value=page) as list_mock:
        async with api_client() as client:
            response = await client.get(f"/api/v1/comments/{POST_ID}", params={"limit": 10})

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["nextCursor"] is None
    assert body["comments"][0]["likeCount"] == 2
    assert body["comments"][0]["isLiked"] is False
    list_mock.assert_awaited_once_with(POST_ID, parent_id=None, limit=10, cursor=None, viewer_id=None)


@pytest.mark.asyncio
async def test_list_replies_with_cursor():
    page = {"comments": [], "nextCursor": None}
    with patch(f"{COMMENTS}.list_comments", new_callable=AsyncMock, return_value=page) as list_mock:
        async with api_client() as client:
            response = await client.get(
                f"/api/v1/comments/{POST_ID}",
                params={"parentId": "parent-1", "limit": 2, "cursor": "c9"},
            )
    assert response.status_code == 200
    list_mock.assert_awaited_once_with(POST_ID, parent_id="parent-1", limit=2, cursor="c9", viewer_id=None)


@pytest.mark.asyncio
async def test_like_with_invalid_type(login_as):
    login_as(author)
    async with api_client() as client:
        response = await client.post("/api/v1/comments/like", json={"type": "STORY", "id": "x"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_like_comment(login_as):
    login_as(author)
    comment = _comment()
    with patch(f"{COMMENTS}.get_comment_by_id", new_callable=AsyncMock, return_value=comment), \
         patch(f"{COMMENTS}.toggle_like", new_callable=AsyncMock, return_value=True) as toggle:
        async with api_client() as client:
            response = await client.post("/api/v1/comments/like", json={"type": "COMMENT", "id": comment["id"]})

    assert response.status_code == 200, response.text
    assert response.json() == {"liked": True}
    toggle.assert_awaited_once_with(author["id"], LikeTarget.COMMENT, comment["id"])


@pytest.mark.asyncio
async def test_like_missing_post(login_as):
    login_as(author)
    with patch(f"{COMMENTS}.get_post", new_callable=AsyncMock, return_value=None):
        async with api_client() as client:
            response = await client.post("/api/v1/comments/like", json={"type": "POST", "id": POST_ID})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_only_author_deletes(login_as):
    login_as(stranger)
    with patch(f"{COMMENTS}.get_comment_by_id", new_callable=AsyncMock, return_value=_comment()), \
         patch(f"{COMMENTS}.soft_delete_comment", new_callable=AsyncMock) as soft_delete:
        async with api_client() as client:
            response = await client.delete(f"/api/v1/comments/{ObjectId()}")
    assert response.status_code == 403
    soft_delete.assert_not_awaited()


@pytest.mark.asyncio
async def test_delete_unknown_comment(login_as):
    login_as(author)
    with patch(f"{COMMENTS}.get_comment_by_id", new_callable=AsyncMock, return_value=None):
        async with api_client() as client:
            response = await client.delete(f"/api/v1/comments/{ObjectId()}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_author_soft_deletes(login_as):
    login_as(author)
    comment = _comment()
    removed = {**comment, "isRemoved": True, "removedBy": author["id"],
               "removedReason": "User deleted", "removedAt": datetime(2024, 5, 7)}
    with patch(f"{COMMENTS}.get_comment_by_id", new_callable=AsyncMock, return_value=comment), \
         patch(f"{COMMENTS}.soft_delete_comment", new_callable=AsyncMock, return_value=removed) as soft_delete:
        async with api_client() as client:
            response = await client.delete(f"/api/v1/comments/{comment['id']}")

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["isRemoved"] is True
    assert body["content"] == "This comment was deleted by its author."
    soft_delete.assert_awaited_once_with(comment["id"], author["id"], "User deleted")


@pytest.mark.asyncio
async def test_moderator_removal(login_as):
    login_as(moderator)
    comment = _comment()
    removed = {**comment, "isRemoved": True, "removedBy": moderator["id"], "removedReason": "Removed by Moderator"}
    with patch(f"{COMMENTS}.get_comment_by_id", new_callable=AsyncMock, return_value=comment), \
         patch(f"{COMMENTS}.soft_delete_comment", new_callable=AsyncMock, return_value=removed):
        async with api_client() as client:
            response = await client.delete(f"/api/v1/comments/{comment['id']}")

    assert response.status_code == 200, response.text
    assert response.json()["content"] == "Comment removed by moderator."
