import pytest
from datetime import date, datetime
from unittest.mock import AsyncMock, MagicMock, patch
from bson import ObjectId

from app.schemas.availability import DateException
from app.schemas.comment import CommentCreate
from app.schemas.notification import NotificationType
from app.services.availability_service import get_schedule, upsert_exception
from app.services.comment_service import create_comment, list_comments

DB = "app.db.mongodb.db.db"

STYLIST_ID = str(ObjectId())
POST_ID = str(ObjectId())


def _cursor(documents):
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.limit.return_value = cursor
    cursor.to_list = AsyncMock(return_value=documents)
    return cursor


def _aggregate(rows):
    result = MagicMock()
    result.to_list = AsyncMock(return_value=rows)
    return result


@pytest.mark.asyncio
async def test_reposting_exception_upserts_same_date():
    fake_db = MagicMock()
    exceptions = fake_db.availability_exceptions
    exceptions.update_one = AsyncMock()
    exceptions.find_one = AsyncMock(side_effect=lambda query: {
        "_id": ObjectId(), **query, "isOff": True, "reason": "Hair show",
    })

    with patch(DB, fake_db):
        await upsert_exception(STYLIST_ID, DateException(date=date(2024, 5, 7), isOff=True))
        saved = await upsert_exception(STYLIST_ID, DateException(
            date=date(2024, 5, 7), isOff=False, startTime="12:00", endTime="16:00",
        ))

    assert exceptions.update_one.await_count == 2
    for call in exceptions.update_one.await_args_list:
        assert call.args[0] == {"stylistId": STYLIST_ID, "date": "2024-05-07"}
        assert call.kwargs["upsert"] is True
    last_set = exceptions.update_one.await_args_list[-1].args[1]["$set"]
    assert (last_set["isOff"], last_set["startTime"], last_set["endTime"]) == (False, "12:00", "16:00")
    assert last_set["date"] == "2024-05-07"
    assert saved["date"] == "2024-05-07"
    assert "id" in saved and "_id" not in saved


@pytest.mark.asyncio
async def test_partial_schedule_is_filled_from_defaults():
    fake_db = MagicMock()
    fake_db.availability_schedules.find.return_value = _cursor([{
        "_id": ObjectId(),
        "stylistId": STYLIST_ID,
        "dayOfWeek": 6,
        "isWorkingDay": True,
        "startTime": "10:00",
        "endTime": "14:00",
    }])

    with patch(DB, fake_db):
        schedule = await get_schedule(STYLIST_ID)

    assert [entry["dayOfWeek"] for entry in schedule] == list(range(7))
    assert schedule[6] == {"dayOfWeek": 6, "isWorkingDay": True, "startTime": "10:00", "endTime": "14:00"}
    assert schedule[0]["isWorkingDay"] is False
    assert (schedule[1]["startTime"], schedule[1]["endTime"]) == ("09:00", "17:00")
    fake_db.availability_schedules.find.assert_called_once_with({"stylistId": STYLIST_ID})


def _stored_comment(minute, author_id=None):
    return {
        "_id": ObjectId(),
        "postId": POST_ID,
        "authorId": author_id or str(ObjectId()),
        "content": f"comment at {minute}",
        "parentId": None,
        "depth": 0,
        "isRemoved": False,
        "createdAt": datetime(2024, 5, 6, 12, minute),
    }


def _comments_db(page, reply_rows=()):
    fake_db = MagicMock()
    fake_db.comments.find.return_value = _cursor(page)
    fake_db.comments.aggregate.return_value = _aggregate(list(reply_rows))
    fake_db.likes.aggregate.return_value = _aggregate([])
    fake_db.likes.find.return_value = _cursor([])
    fake_db.users.find.return_value = _cursor([])
    return fake_db


@pytest.mark.asyncio
async def test_full_page_sets_next_cursor():
    page = [_stored_comment(0), _stored_comment(1)]
    fake_db = _comments_db(page, reply_rows=[{"_id": str(page[0]["_id"]), "count": 2}])

    with patch(DB, fake_db):
        result = await list_comments(POST_ID, limit=2)

    assert result["nextCursor"] == str(page[1]["_id"])
    assert [comment["replyCount"] for comment in result["comments"]] == [2, 0]
    query = fake_db.comments.find.call_args.args[0]
    assert query == {"postId": POST_ID, "parentId": None}


@pytest.mark.asyncio
async def test_short_page_ends_thread_and_cursor_filters_after_anchor():
    anchor = _stored_comment(0)
    fake_db = _comments_db([_stored_comment(5)])
    fake_db.comments.find_one = AsyncMock(return_value=dict(anchor))

    with patch(DB, fake_db):
        result = await list_comments(POST_ID, parent_id="p1", limit=2, cursor=str(anchor["_id"]))

    assert result["nextCursor"] is None
    assert len(result["comments"]) == 1
    query = fake_db.comments.find.call_args.args[0]
    assert query["parentId"] == "p1"
    assert query["$or"] == [
        {"createdAt": {"$gt": anchor["createdAt"]}},
        {"createdAt": anchor["createdAt"], "_id": {"$gt": anchor["_id"]}},
    ]


@pytest.mark.asyncio
async def test_reply_past_max_depth_is_stored_under_grandparent():
    grandparent_id = str(ObjectId())
    parent = {
        "_id": ObjectId(),
        "postId": POST_ID,
        "authorId": "parent-author",
        "parentId": grandparent_id,
        "depth": 3,
        "createdAt": datetime(2024, 5, 6, 12, 0),
    }
    new_id = ObjectId()
    author = {"_id": ObjectId(), "fullName": "Keisha Hart", "role": "CLIENT"}
    author["id"] = str(author["_id"])
    post = {"id": POST_ID, "authorId": "post-author"}

    fake_db = MagicMock()
    fake_db.comments.insert_one = AsyncMock(return_value=MagicMock(inserted_id=new_id))
    fake_db.comments.find_one = AsyncMock(side_effect=[
        dict(parent),
        {"_id": new_id, "postId": POST_ID, "authorId": author["id"], "content": "Same here",
         "parentId": grandparent_id, "depth": 3, "isRemoved": False, "createdAt": datetime(2024, 5, 6, 13, 0)},
    ])
    fake_db.forum_posts.update_one = AsyncMock()
    fake_db.notifications.insert_many = AsyncMock(return_value=MagicMock(inserted_ids=[1, 2]))

    with patch(DB, fake_db):
        created = await create_comment(
            post, CommentCreate(content="Same here", parentId=str(parent["_id"])), author,
        )

    stored = fake_db.comments.insert_one.await_args.args[0]
    assert (stored["parentId"], stored["depth"]) == (grandparent_id, 3)
    assert created["id"] == str(new_id)
    fake_db.forum_posts.update_one.assert_awaited_once()

    documents = fake_db.notifications.insert_many.await_args.args[0]
    assert [(doc["userId"], doc["type"]) for doc in documents] == [
        ("parent-author", NotificationType.REPLY),
        ("post-author", NotificationType.NEW_COMMENT),
    ]
