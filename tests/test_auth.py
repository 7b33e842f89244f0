"""Tests for Whop access verification."""

from __future__ import annotations

import asyncio

import httpx

from trading_signals.auth import AccessVerification, WhopClient
from trading_signals.auth.whop import classify_memberships


def _client(handler) -> WhopClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return WhopClient(api_key="sk_test", company_id="biz_1", http=http)


class TestClassifyMemberships:
    def test_no_memberships(self):
        v = classify_memberships("user_1", [])
        assert v == AccessVerification(user_id="user_1", has_access=False, access_level="no_access")

    def test_inactive_only(self):
        v = classify_memberships("user_1", [{"status": "expired", "role": "owner"}])
        assert v.has_access is False
        assert v.is_admin is False

    def test_active_customer(self):
        v = classify_memberships("user_1", [
            {"status": "canceled"},
            {"status": "active", "role": "member", "user": {"username": "trader42"}},
        ])
        assert v.has_access is True
        assert v.access_level == "customer"
        assert v.name == "trader42"
        assert v.is_admin is False

    def test_active_owner_is_admin(self):
        v = classify_memberships("user_1", [{"status": "active", "role": "owner"}])
        assert v.access_level == "admin"
        assert v.is_admin is True


class TestWhopClient:
    def test_default_url(self):
        c = WhopClient(api_key="k", company_id="c")
        assert c.base_url == "https://api.whop.com"

    def test_custom_url_trailing_slash(self):
        c = WhopClient(api_key="k", company_id="c", base_url="https://whop.test/")
        assert c.base_url == "https://whop.test"

    def test_verify_sends_credentials_and_filters(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["params"] = dict(request.url.params)
            seen["auth"] = request.headers["authorization"]
            return httpx.Response(200, json={"data": [{"status": "active", "role": "admin"}]})

        client = _client(handler)
        v = asyncio.run(client.verify("user_9", "exp_1"))

        assert v.is_admin
        assert seen["path"] == "/api/v2/memberships"
        assert seen["params"] == {"user_id": "user_9", "company_id": "biz_1"}
        assert seen["auth"] == "Bearer sk_test"

    def test_verify_http_error_denies(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"error": "boom"})

        v = asyncio.run(_client(handler).verify("user_9", "exp_1"))
        assert v.has_access is False
        assert v.access_level == "no_access"

    def test_verify_empty_user_skips_request(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        v = asyncio.run(_client(handler).verify("", "exp_1"))
        assert v.has_access is False

    def test_close(self):
        client = _client(lambda r: httpx.Response(200, json={"data": []}))

        async def run():
            await client.verify("user_1", "exp")
            await client.close()
            return client._http.is_closed

        assert asyncio.run(run()) is True
