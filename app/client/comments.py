"""
Lazily loaded comment threads.

A CommentThread holds the comments directly under one parent (or the root
comments of a post) and pages through them with the server's cursor.
Replies, likes and removals update local state first and are rolled back
through app.utils.optimistic when the request fails.
"""

import logging
from typing import Any, Dict, List, Optional

from app.client.api import CrownSideClient
from app.utils.optimistic import Delta, apply_optimistically, like_delta, reply_delta

logger = logging.getLogger(__name__)

ROOT_PAGE_LIMIT = 10
REPLY_PAGE_LIMIT = 2


class CommentThread:
    def __init__(
        self,
        client: CrownSideClient,
        post_id: str,
        parent: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None,
    ):
        self.client = client
        self.post_id = post_id
        # The parent comment's state as shown in the enclosing thread
        self.parent = parent
        self.parent_id = parent["id"] if parent else None
        self.limit = limit or (REPLY_PAGE_LIMIT if parent else ROOT_PAGE_LIMIT)

        self.comments: List[Dict[str, Any]] = []
        self.next_cursor: Optional[str] = None
        self.loaded = False
        self._replies: Dict[str, "CommentThread"] = {}

    @property
    def has_more(self) -> bool:
        return not self.loaded or self.next_cursor is not None

    def find(self, comment_id: str) -> Optional[Dict[str, Any]]:
        for comment in self.comments:
            if comment["id"] == comment_id:
                return comment
        return None

    def _merge(self, comments: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Append comments not already present; returns the ones added."""
        added = []
        for comment in comments:
            if self.find(comment["id"]) is None:
                self.comments.append(comment)
                added.append(comment)
        return added

    async def load_more(self) -> List[Dict[str, Any]]:
        if not self.has_more:
            return []
        page = await self.client.get_comments(
            self.post_id,
            parent_id=self.parent_id,
            limit=self.limit,
            cursor=self.next_cursor,
        )
        self.loaded = True
        self.next_cursor = page.get("nextCursor")
        return self._merge(page["comments"])

    def replies(self, comment: Dict[str, Any]) -> "CommentThread":
        """The (cached) thread of replies under one of this thread's comments."""
        if comment["id"] not in self._replies:
            self._replies[comment["id"]] = CommentThread(self.client, self.post_id, parent=comment)
        return self._replies[comment["id"]]

    async def reply(self, content: str, mentioned_user_id: Optional[str] = None) -> Dict[str, Any]:
        """Post a comment in this thread, bumping the parent's replyCount up front.

        Past the nesting limit the server files the reply under the parent's
        own parent. Such a reply is returned without being added here, and
        the parent's count is put back, so the caller can place it in the
        thread it actually belongs to.
        """
        async def send():
            return await self.client.create_comment(
                self.post_id, content,
                parent_id=self.parent_id,
                mentioned_user_id=mentioned_user_id,
            )

        delta = reply_delta()
        if self.parent is not None:
            created = await apply_optimistically(self.parent, delta, send)
        else:
            created = await send()

        if created.get("parentId") != self.parent_id:
            logger.info(f"Reply {created['id']} was filed under {created.get('parentId')}, not {self.parent_id}")
            if self.parent is not None:
                self.parent.update(delta.inverse().apply(self.parent))
            return created

        self._merge([created])
        return created

    async def toggle_like(self, comment: Dict[str, Any]) -> bool:
        delta = like_delta(comment.get("isLiked", False))
        result = await apply_optimistically(
            comment, delta,
            lambda: self.client.toggle_like("COMMENT", comment["id"]),
        )
        if result["liked"] != comment["isLiked"]:
            # Another session toggled it meanwhile; follow the server
            logger.info(f"Like state of {comment['id']} differs from server, resyncing")
            comment.update(like_delta(comment["isLiked"]).apply(comment))
        return result["liked"]

    async def remove(self, comment: Dict[str, Any]) -> Dict[str, Any]:
        if comment.get("isRemoved"):
            return comment
        removed = await apply_optimistically(
            comment, Delta(flips=frozenset({"isRemoved"})),
            lambda: self.client.delete_comment(comment["id"]),
        )
        comment["content"] = removed["content"]
        return comment
