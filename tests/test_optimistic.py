import pytest

from app.utils.optimistic import Delta, apply_optimistically, like_delta, reply_delta


def test_inverse_undoes_delta():
    state = {"likeCount": 4, "replyCount": 2, "isLiked": False}
    delta = Delta(counters={"likeCount": 1, "replyCount": 1}, flips=frozenset({"isLiked"}))

    changed = delta.apply(state)
    assert changed == {"likeCount": 5, "replyCount": 3, "isLiked": True}
    assert delta.inverse().apply(changed) == state
    # apply returns a copy
    assert state["likeCount"] == 4


def test_like_delta_depends_on_current_state():
    assert like_delta(False).apply({"likeCount": 0, "isLiked": False}) == {"likeCount": 1, "isLiked": True}
    assert like_delta(True).apply({"likeCount": 1, "isLiked": True}) == {"likeCount": 0, "isLiked": False}


def test_apply_to_missing_counter_starts_at_zero():
    assert reply_delta().apply({}) == {"replyCount": 1}


@pytest.mark.asyncio
async def test_success_keeps_the_change():
    state = {"likeCount": 3, "isLiked": False}

    async def request():
        assert state == {"likeCount": 4, "isLiked": True}
        return {"liked": True}

    result = await apply_optimistically(state, like_delta(False), request)

    assert result == {"liked": True}
    assert state == {"likeCount": 4, "isLiked": True}


@pytest.mark.asyncio
async def test_failure_restores_exact_previous_values():
    state = {"likeCount": 3, "isLiked": False, "replyCount": 7}

    async def request():
        # Something else touches an unrelated counter while in flight
        state["replyCount"] += 1
        raise RuntimeError("network down")

    with pytest.raises(RuntimeError):
        await apply_optimistically(state, like_delta(False), request)

    assert state["likeCount"] == 3
    assert state["isLiked"] is False
    assert state["replyCount"] == 8
