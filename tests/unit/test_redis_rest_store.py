"""Unit tests for RedisRestFeedbackStore against a fake Upstash endpoint."""

from __future__ import annotations

import json

import httpx
import pytest

from feedpulse.models.feedback import Sentiment
from feedpulse.providers.store.redis_rest_store import RedisRestFeedbackStore
from feedpulse.utils.errors import BackendUnavailableError

UPSTASH_URL = "https://test-db.upstash.io"


@pytest.mark.asyncio
async def test_initialize_pings(redis_store: RedisRestFeedbackStore, fake_upstash) -> None:
    await redis_store.initialize()
    assert fake_upstash.commands == [["PING"]]


@pytest.mark.asyncio
async def test_missing_key_lists_nothing(redis_store: RedisRestFeedbackStore) -> None:
    assert await redis_store.list_all() == []


@pytest.mark.asyncio
async def test_insert_writes_json_blob(
    redis_store: RedisRestFeedbackStore, fake_upstash
) -> None:
    record = await redis_store.insert("great product", Sentiment.POSITIVE, 0.6)

    assert record.id == 1
    blob = json.loads(fake_upstash.data["feedback:all"])
    assert blob[0]["id"] == 1
    assert blob[0]["text"] == "great product"
    assert blob[0]["sentiment"] == "positive"
    assert blob[0]["confidence"] == 0.6
    assert isinstance(blob[0]["created_at"], str)
    assert fake_upstash.data["feedback:all:last_id"] == "1"


@pytest.mark.asyncio
async def test_list_all_round_trip(redis_store: RedisRestFeedbackStore) -> None:
    await redis_store.insert("first row")
    await redis_store.insert("second row", Sentiment.NEGATIVE, 0.7)

    records = await redis_store.list_all()
    assert [(r.id, r.text) for r in records] == [(1, "first row"), (2, "second row")]
    assert records[1].sentiment == Sentiment.NEGATIVE


@pytest.mark.asyncio
async def test_ids_not_reused_after_delete(redis_store: RedisRestFeedbackStore) -> None:
    await redis_store.insert("first row")
    second = await redis_store.insert("second row")
    assert await redis_store.delete_by_id(second.id) is True
    assert (await redis_store.insert("third row")).id == 3


@pytest.mark.asyncio
async def test_delete_missing_returns_false(redis_store: RedisRestFeedbackStore) -> None:
    await redis_store.insert("only row")
    assert await redis_store.delete_by_id(42) is False


@pytest.mark.asyncio
async def test_clear_all_deletes_both_keys(
    redis_store: RedisRestFeedbackStore, fake_upstash
) -> None:
    await redis_store.insert("first row")
    await redis_store.clear_all()

    assert fake_upstash.data == {}
    assert fake_upstash.commands[-1] == ["DEL", "feedback:all", "feedback:all:last_id"]
    assert (await redis_store.insert("after clear")).id == 1


@pytest.mark.asyncio
async def test_reads_legacy_blob_without_last_id(
    redis_store: RedisRestFeedbackStore, fake_upstash
) -> None:
    fake_upstash.data["feedback:all"] = json.dumps([
        {"id": 4, "text": "legacy row", "created_at": "2024-01-05T10:00:00Z"},
    ])
    records = await redis_store.list_all()
    assert records[0].id == 4
    assert records[0].sentiment is None
    assert (await redis_store.insert("new row")).id == 5


@pytest.mark.asyncio
async def test_sends_bearer_token(upstash_client: httpx.AsyncClient, fake_upstash) -> None:
    store = RedisRestFeedbackStore(
        base_url=UPSTASH_URL, token="wrong-token", http_client=upstash_client
    )
    with pytest.raises(BackendUnavailableError, match="Unauthorized"):
        await store.list_all()


@pytest.mark.asyncio
async def test_http_failure_raises_backend_unavailable(
    redis_store: RedisRestFeedbackStore, fake_upstash
) -> None:
    fake_upstash.fail = True
    with pytest.raises(BackendUnavailableError) as exc_info:
        await redis_store.insert("will fail")
    assert exc_info.value.provider_name == "upstash_redis"


@pytest.mark.asyncio
async def test_upstash_error_body_raises(
    redis_store: RedisRestFeedbackStore, fake_upstash
) -> None:
    fake_upstash.error = "WRONGTYPE Operation against a key holding the wrong kind of value"
    with pytest.raises(BackendUnavailableError, match="WRONGTYPE"):
        await redis_store.list_all()


@pytest.mark.asyncio
async def test_transport_error_raises_backend_unavailable() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(refuse)) as client:
        store = RedisRestFeedbackStore(base_url=UPSTASH_URL, token="t", http_client=client)
        with pytest.raises(BackendUnavailableError, match="connection refused"):
            await store.initialize()


@pytest.mark.asyncio
async def test_corrupt_blob_raises_backend_unavailable(
    redis_store: RedisRestFeedbackStore, fake_upstash
) -> None:
    fake_upstash.data["feedback:all"] = "not json"
    with pytest.raises(BackendUnavailableError, match="unreadable"):
        await redis_store.list_all()
