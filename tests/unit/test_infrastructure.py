"""Unit tests for the infrastructure layer (email, HTTP client, session stores)."""

import json
import os
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from config import EmailSettings
from infrastructure.email import zeptomail
from infrastructure.email.zeptomail import ZeptoMailProvider
from infrastructure.http_client import HttpClient
from infrastructure.redis_client import _display_host, create_redis_client
from infrastructure.session.mongo_store import MongoSessionStore
from infrastructure.session.protocol import SessionData
from infrastructure.session.redis_store import RedisSessionStore


# ── Helpers ───────────────────────────────────────────────────────────────────


def _fake_redis(get_returns=None):
    """Return a mock async Redis client."""
    r = AsyncMock()
    r.get.return_value = get_returns
    r.setex.return_value = True
    r.delete.return_value = 1
    return r


def _fake_collection(find_returns=None):
    col = MagicMock()
    col.insert_one = AsyncMock()
    col.find_one = AsyncMock(return_value=find_returns)
    col.delete_one = AsyncMock()
    col.create_index = AsyncMock()
    return col


# ── HttpClient ────────────────────────────────────────────────────────────────


class TestHttpClient:
    async def test_post_json_sends_payload(self, mocker):
        client = HttpClient()
        fake_resp = MagicMock(status_code=200)
        post = mocker.patch.object(client._client, "post", return_value=fake_resp)
        resp = await client.post_json(
            "http://mail.invalid", {"a": 1}, headers={"Authorization": "x"}
        )
        assert resp.status_code == 200
        post.assert_awaited_once_with(
            "http://mail.invalid", json={"a": 1}, headers={"Authorization": "x"}
        )
        await client.aclose()

    async def test_post_json_propagates_transport_error(self, mocker):
        client = HttpClient()
        mocker.patch.object(
            client._client, "post", side_effect=httpx.ConnectTimeout("timeout")
        )
        with pytest.raises(httpx.ConnectTimeout):
            await client.post_json("http://mail.invalid", {})
        await client.aclose()

    async def test_context_manager_closes(self):
        async with HttpClient() as client:
            inner = client._client
        assert inner.is_closed


# ── create_redis_client ───────────────────────────────────────────────────────


class TestCreateRedisClient:
    async def test_returns_client_when_ping_succeeds(self, mocker):
        fake = _fake_redis()
        mocker.patch("redis.asyncio.from_url", return_value=fake)
        assert await create_redis_client("redis://localhost:6379/0") is fake

    async def test_returns_none_when_unreachable(self, mocker):
        fake = _fake_redis()
        fake.ping.side_effect = RedisConnectionError("refused")
        mocker.patch("redis.asyncio.from_url", return_value=fake)
        assert await create_redis_client("redis://user:pw@localhost:6379") is None
        fake.aclose.assert_awaited_once()

    def test_display_host_hides_credentials(self):
        assert _display_host("redis://user:pw@cache:6379/0") == "cache:6379"


# ── RedisSessionStore ─────────────────────────────────────────────────────────


class TestRedisSessionStore:
    async def test_create_stores_json_with_ttl(self):
        r = _fake_redis()
        store = RedisSessionStore(r, ttl_seconds=120)
        session_id = await store.create(SessionData(id="abc", name="Ana"))
        key, ttl, payload = r.setex.call_args[0]
        assert key == f"session:{session_id}"
        assert ttl == 120
        assert json.loads(payload) == {"id": "abc", "name": "Ana"}

    async def test_create_returns_distinct_ids(self):
        store = RedisSessionStore(_fake_redis())
        a = await store.create(SessionData(id="1", name="A"))
        b = await store.create(SessionData(id="1", name="A"))
        assert a != b

    async def test_get_hit(self):
        r = _fake_redis(get_returns=json.dumps({"id": "abc", "name": "Ana"}))
        session = await RedisSessionStore(r).get("sid")
        r.get.assert_awaited_once_with("session:sid")
        assert session == SessionData(id="abc", name="Ana")

    async def test_get_miss(self):
        assert await RedisSessionStore(_fake_redis()).get("sid") is None

    async def test_destroy_deletes_key(self):
        r = _fake_redis()
        await RedisSessionStore(r).destroy("sid")
        r.delete.assert_awaited_once_with("session:sid")

    async def test_destroy_propagates_backend_error(self):
        r = _fake_redis()
        r.delete.side_effect = ConnectionError("redis down")
        with pytest.raises(ConnectionError):
            await RedisSessionStore(r).destroy("sid")


# ── MongoSessionStore ─────────────────────────────────────────────────────────


class TestMongoSessionStore:
    async def test_ensure_indexes_creates_ttl_index(self):
        col = _fake_collection()
        await MongoSessionStore(col).ensure_indexes()
        _, kwargs = col.create_index.call_args
        assert kwargs["expireAfterSeconds"] == 0

    async def test_create_inserts_document(self):
        col = _fake_collection()
        store = MongoSessionStore(col, ttl_seconds=60)
        session_id = await store.create(SessionData(id="abc", name="Ana"))
        doc = col.insert_one.call_args[0][0]
        assert doc["_id"] == session_id
        assert doc["data"] == {"id": "abc", "name": "Ana"}
        remaining = doc["expires_at"] - datetime.now(timezone.utc)
        assert timedelta(seconds=50) < remaining <= timedelta(seconds=60)

    async def test_get_live_session(self):
        col = _fake_collection(
            {
                "_id": "sid",
                "data": {"id": "abc", "name": "Ana"},
                "expires_at": datetime.now(timezone.utc) + timedelta(minutes=1),
            }
        )
        assert await MongoSessionStore(col).get("sid") == SessionData(id="abc", name="Ana")

    async def test_get_expired_session_is_none(self):
        # Naive datetimes come back from clients created without tz_aware
        col = _fake_collection(
            {
                "_id": "sid",
                "data": {"id": "abc", "name": "Ana"},
                "expires_at": datetime.utcnow() - timedelta(minutes=1),
            }
        )
        assert await MongoSessionStore(col).get("sid") is None

    async def test_get_missing(self):
        assert await MongoSessionStore(_fake_collection()).get("sid") is None

    async def test_destroy(self):
        col = _fake_collection()
        await MongoSessionStore(col).destroy("sid")
        col.delete_one.assert_awaited_once_with({"_id": "sid"})


# ── ZeptoMailProvider ─────────────────────────────────────────────────────────


class TestZeptoMailProvider:
    def _make(self, token="test-token"):
        settings = EmailSettings(
            zepto_api_token=token,
            zepto_from_email="noreply@restaurant.example",
            zepto_from_name="Restaurant Reservations",
        )
        http = MagicMock()
        provider = ZeptoMailProvider(settings=settings, http_client=http)
        return provider, http

    async def test_send_verification_makes_post(self):
        provider, http = self._make()
        http.post_json = AsyncMock(return_value=MagicMock(status_code=200))
        result = await provider.send_verification_email(
            "ana@x.com", "Ana", "123456", 5
        )
        assert result is True
        http.post_json.assert_awaited_once()

    async def test_verification_body_contains_code_and_expiry(self):
        provider, http = self._make()
        http.post_json = AsyncMock(return_value=MagicMock(status_code=201))
        await provider.send_verification_email("ana@x.com", "Ana", "654321", 5)
        payload = http.post_json.call_args.args[1]
        assert payload["to"][0]["email_address"]["address"] == "ana@x.com"
        assert "654321" in payload["htmlbody"]
        assert "654321" in payload["textbody"]
        assert "5 minutes" in payload["textbody"]

    async def test_welcome_email_renders_template(self):
        provider, http = self._make()
        http.post_json = AsyncMock(return_value=MagicMock(status_code=202))
        assert await provider.send_welcome_email("ana@x.com", "Ana") is True
        assert "Ana" in http.post_json.call_args.args[1]["htmlbody"]

    async def test_returns_false_when_token_empty(self):
        provider, http = self._make(token="")
        http.post_json = AsyncMock()
        assert await provider.send_verification_email("a@x.com", "A", "000000", 5) is False
        http.post_json.assert_not_awaited()

    async def test_returns_false_on_non_2xx(self):
        provider, http = self._make()
        http.post_json = AsyncMock(return_value=MagicMock(status_code=500, text="error"))
        assert await provider.send_verification_email("a@x.com", "A", "000000", 5) is False

    async def test_returns_false_on_exception(self):
        provider, http = self._make()
        http.post_json = AsyncMock(side_effect=Exception("network"))
        assert await provider.send_verification_email("a@x.com", "A", "000000", 5) is False

    async def test_auth_header_prepends_prefix(self):
        provider, http = self._make(token="raw-token")
        http.post_json = AsyncMock(return_value=MagicMock(status_code=200))
        await provider.send_verification_email("a@x.com", "A", "000000", 5)
        headers = http.post_json.call_args.kwargs["headers"]
        assert headers["Authorization"] == "Zoho-enczapikey raw-token"

    async def test_auth_header_not_double_prefixed(self):
        provider, http = self._make(token="Zoho-enczapikey already")
        http.post_json = AsyncMock(return_value=MagicMock(status_code=200))
        await provider.send_verification_email("a@x.com", "A", "000000", 5)
        headers = http.post_json.call_args.kwargs["headers"]
        assert headers["Authorization"] == "Zoho-enczapikey already"

    async def test_returns_false_when_template_missing(self, tmp_path):
        settings = EmailSettings(zepto_api_token="test-token")
        http = MagicMock()
        http.post_json = AsyncMock()
        provider = ZeptoMailProvider(
            settings=settings, http_client=http, template_dir=str(tmp_path)
        )
        assert await provider.send_welcome_email("ana@x.com", "Ana") is False
        assert await provider.send_verification_email("ana@x.com", "Ana", "123456", 5) is False
        http.post_json.assert_not_awaited()

    def test_default_templates_live_in_the_package(self):
        template_dir = os.path.join(os.path.dirname(zeptomail.__file__), "templates")
        assert os.path.isfile(os.path.join(template_dir, "verification.html"))
        assert os.path.isfile(os.path.join(template_dir, "welcome.html"))
