from datetime import timedelta

import pytest
from sqlalchemy import select

from halolight.auth.tasks import sweep_expired_refresh_tokens
from halolight.celery_app import celery_app
from halolight.database.models import RefreshToken
from halolight.utils.datetime import utcnow


@pytest.mark.asyncio
async def test_sweep_removes_only_expired_tokens(client, register_user, session_factory):
    alice = await register_user()

    async with session_factory() as session:
        session.add(
            RefreshToken(
                user_id=alice["user"]["id"],
                token="expired-token",
                expires_at=utcnow() - timedelta(minutes=1),
            )
        )
        await session.commit()

    removed = await sweep_expired_refresh_tokens(session_factory)
    assert removed == 1

    async with session_factory() as session:
        tokens = (await session.execute(select(RefreshToken.token))).scalars().all()
    assert tokens == [alice["refreshToken"]]


@pytest.mark.asyncio
async def test_expired_stored_token_cannot_refresh(client, register_user, session_factory):
    alice = await register_user()

    async with session_factory() as session:
        stored = (await session.execute(select(RefreshToken))).scalar_one()
        stored.expires_at = utcnow() - timedelta(seconds=1)
        await session.commit()

    response = await client.post("/api/auth/refresh", json={"refreshToken": alice["refreshToken"]})
    assert response.status_code == 401


def test_sweep_is_scheduled():
    schedule = celery_app.conf.beat_schedule["sweep-expired-refresh-tokens"]
    assert schedule["task"] == "halolight.auth.tasks.cleanup_expired_refresh_tokens"
    assert schedule["schedule"] == 3600
