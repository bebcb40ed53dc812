from bson import ObjectId

from app.schemas.notification import NotificationType
from app.services.comment_service import (
    AUTHOR_DELETED_TEXT, MODERATOR_REMOVED_TEXT,
    plan_notifications, removed_placeholder, resolve_placement
)

MAX_DEPTH = 3


def _comment(depth, parent_id=None):
    return {"_id": ObjectId(), "depth": depth, "parentId": parent_id, "authorId": "someone"}


def test_root_comment():
    assert resolve_placement(None, MAX_DEPTH) == (None, 0)


def test_reply_nests_one_level_deeper():
    parent = _comment(0)
    assert resolve_placement(parent, MAX_DEPTH) == (str(parent["_id"]), 1)

    parent = _comment(2, parent_id="p1")
    assert resolve_placement(parent, MAX_DEPTH) == (str(parent["_id"]), 3)


def test_reply_to_deepest_comment_becomes_its_sibling():
    parent = _comment(3, parent_id="grandparent")
    assert resolve_placement(parent, MAX_DEPTH) == ("grandparent", 3)


def test_depth_never_exceeds_limit():
    parent = None
    for _ in range(10):
        parent_id, depth = resolve_placement(parent, MAX_DEPTH)
        assert depth <= MAX_DEPTH
        parent = {"_id": ObjectId(), "depth": depth, "parentId": parent_id}


def test_notification_priority():
    planned = plan_notifications(
        author_id="me", post_id="post", comment_id="c1",
        post_author_id="op", parent_author_id="replied-to", mentioned_user_id="friend",
    )
    assert [(n.userId, n.type) for n in planned] == [
        ("replied-to", NotificationType.REPLY),
        ("op", NotificationType.NEW_COMMENT),
        ("friend", NotificationType.MENTION),
    ]
    assert all(n.senderId == "me" and n.commentId == "c1" for n in planned)


def test_each_user_notified_once_with_highest_priority():
    planned = plan_notifications(
        author_id="me", post_id="post", comment_id="c1",
        post_author_id="op", parent_author_id="op", mentioned_user_id="op",
    )
    assert [(n.userId, n.type) for n in planned] == [("op", NotificationType.REPLY)]


def test_author_is_never_notified():
    planned = plan_notifications(
        author_id="me", post_id="post", comment_id="c1",
        post_author_id="me", parent_author_id="me", mentioned_user_id="me",
    )
    assert planned == []


def test_top_level_comment_notifies_post_author_only():
    planned = plan_notifications(author_id="me", post_id="post", comment_id="c1", post_author_id="op")
    assert [(n.userId, n.type) for n in planned] == [("op", NotificationType.NEW_COMMENT)]


def test_removed_placeholder():
    assert removed_placeholder({"authorId": "a", "removedBy": "a"}) == AUTHOR_DELETED_TEXT
    assert removed_placeholder({"authorId": "a", "removedBy": "admin"}) == MODERATOR_REMOVED_TEXT
