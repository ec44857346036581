"""
Request session tests - commit/rollback boundary and post-commit cache invalidation.
"""

import pytest

from app.cache.redis_client import STALE_KEYS, invalidate_on_commit, profile_key
from app.db import session as db_session


@pytest.mark.asyncio
async def test_commit_drops_profile_recached_mid_transaction(session_maker, monkeypatch, fake_redis):
    monkeypatch.setattr(db_session, "async_session_maker", session_maker)
    key = profile_key(7)
    fake_redis.store[key] = '{"trust_score": 10}'

    request = db_session.get_db()
    session = await request.__anext__()
    await invalidate_on_commit(session, key)
    assert key not in fake_redis.store

    # A concurrent profile read stores the pre-commit counters again
    fake_redis.store[key] = '{"trust_score": 10}'
    with pytest.raises(StopAsyncIteration):
        await request.__anext__()

    assert key not in fake_redis.store
    assert STALE_KEYS not in session.info


@pytest.mark.asyncio
async def test_rollback_forgets_pending_invalidations(session_maker, monkeypatch, fake_redis):
    monkeypatch.setattr(db_session, "async_session_maker", session_maker)
    key = profile_key(8)

    request = db_session.get_db()
    session = await request.__anext__()
    await invalidate_on_commit(session, key)
    fake_redis.store[key] = '{"trust_score": 10}'

    with pytest.raises(ValueError):
        await request.athrow(ValueError("handler failed"))

    # Nothing was committed, so the cached profile is still accurate
    assert key in fake_redis.store
    assert STALE_KEYS not in session.info
