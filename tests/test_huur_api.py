"""Tests for the Huur API ingestion client."""
import json
from decimal import Decimal

import httpx
import pytest

from huur_violations.parse.models import ParkingViolation, PaymentStatus
from huur_violations.store.huur_api import HuurApiClient

VIOLATION = ParkingViolation(
    citation_number="C1",
    tag="ABC123",
    state="FL",
    amount=Decimal("50.00"),
    payment_status=PaymentStatus.NEW,
    is_active=True,
)


@pytest.mark.asyncio
async def test_create_posts_camel_case_json():
    """Test the body, URL and API key header."""
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        seen["key"] = request.headers.get("X-API-Key")
        seen["accept"] = request.headers.get("Accept")
        return httpx.Response(201, json={"id": 1})

    async with HuurApiClient("https://huur.example/", api_key="secret", transport=httpx.MockTransport(handler)) as client:
        assert await client.create_violation(VIOLATION) is True

    assert seen["url"] == "https://huur.example/api/violations"
    assert seen["body"]["citationNumber"] == "C1"
    assert seen["body"]["amount"] == 50.0
    assert seen["body"]["paymentStatus"] == 1
    assert seen["key"] == "secret"
    assert seen["accept"] == "application/json"


@pytest.mark.asyncio
async def test_no_api_key_header_when_unset():
    """Test the header is omitted without a key."""
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["key"] = request.headers.get("X-API-Key")
        return httpx.Response(200)

    async with HuurApiClient("https://huur.example", transport=httpx.MockTransport(handler)) as client:
        await client.create_violation(VIOLATION)
    assert seen["key"] is None


@pytest.mark.asyncio
async def test_create_failures_return_false():
    """Test rejected and unreachable creates return False."""
    def rejected(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="boom")

    def unreachable(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("down", request=request)

    async with HuurApiClient("https://huur.example", transport=httpx.MockTransport(rejected)) as client:
        assert await client.create_violation(VIOLATION) is False
    async with HuurApiClient("https://huur.example", transport=httpx.MockTransport(unreachable)) as client:
        assert await client.create_violation(VIOLATION) is False


@pytest.mark.asyncio
async def test_list_violations():
    """Test listing parses records and skips malformed ones."""
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        return httpx.Response(200, json=[
            {"citationNumber": "C1", "amount": 50, "paymentStatus": 1},
            {"citationNumber": "C2", "paymentStatus": 7},
        ])

    async with HuurApiClient("https://huur.example", transport=httpx.MockTransport(handler)) as client:
        violations = await client.list_violations()

    assert [v.citation_number for v in violations] == ["C1"]


@pytest.mark.asyncio
async def test_list_failures_return_empty():
    """Test HTTP errors and odd payloads yield an empty list."""
    def error(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503)

    def not_a_list(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"items": []})

    for handler in (error, not_a_list):
        async with HuurApiClient("https://huur.example", transport=httpx.MockTransport(handler)) as client:
            assert await client.list_violations() == []
