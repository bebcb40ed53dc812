"""
Compensable local updates.

Client state (like counts, reply counts, liked flags) is changed before the
server confirms. A Delta describes the change; its inverse is derived from
the delta alone, so rolling back after a failed request restores exactly the
pre-action values no matter what else touched the state in between.
"""

from typing import Any, Awaitable, Callable, Dict, FrozenSet, TypeVar
import logging

from pydantic import BaseModel

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Delta(BaseModel):
    counters: Dict[str, int] = {}
    flips: FrozenSet[str] = frozenset()

    class Config:
        frozen = True

    def inverse(self) -> "Delta":
        # Negated counters; a flip undoes itself
        return Delta(
            counters={field: -amount for field, amount in self.counters.items()},
            flips=self.flips,
        )

    def apply(self, state: Dict[str, Any]) -> Dict[str, Any]:
        """Return a copy of state with the delta applied."""
        updated = dict(state)
        for field, amount in self.counters.items():
            updated[field] = updated.get(field, 0) + amount
        for field in self.flips:
            updated[field] = not updated.get(field, False)
        return updated


def like_delta(currently_liked: bool) -> Delta:
    return Delta(counters={"likeCount": -1 if currently_liked else 1}, flips=frozenset({"isLiked"}))


def reply_delta() -> Delta:
    return Delta(counters={"replyCount": 1})


async def apply_optimistically(
    state: Dict[str, Any],
    delta: Delta,
    request: Callable[[], Awaitable[T]],
) -> T:
    """Apply delta to state in place, run request, roll back if it raises."""
    state.update(delta.apply(state))
    try:
        return await request()
    except Exception:
        logger.warning(f"Rolling back optimistic update {delta.counters} {sorted(delta.flips)}")
        state.update(delta.inverse().apply(state))
        raise
