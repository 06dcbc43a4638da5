"""Supporter Feed Client - tests for HTTP outcome -> FeedError mapping.

Tests cover:
    - 2xx JSON list -> ranked supporters, invalid records dropped
    - 404 -> FeedNotFoundError, 5xx -> FeedServerError
    - Transport failure -> FeedNetworkError
    - Non-JSON body and non-list JSON -> FeedFormatError
"""

import httpx
import pytest

from tipjar.core.domain_types import FeedErrorKind
from tipjar.core.errors import FeedError
from tipjar.infrastructure.feed_client import SupporterFeedClient

URL = "https://feed.example/donate/supporters.json"


def _make_client(handler) -> SupporterFeedClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SupporterFeedClient(http, URL)


async def test_success_returns_ranked_supporters():
    payload = [
        {"name": "A", "amount": 5},
        {"name": "B", "amount": 10},
        {"name": "bad"},
        {"name": "C", "amount": 5},
    ]
    client = _make_client(lambda request: httpx.Response(200, json=payload))
    result = await client.fetch()
    assert [(s.name, s.amount) for s in result] == [("B", 10.0), ("A", 5.0), ("C", 5.0)]


async def test_requests_configured_url():
    seen = []

    def handler(request):
        seen.append(str(request.url))
        return httpx.Response(200, json=[])

    assert await _make_client(handler).fetch() == ()
    assert seen == [URL]


@pytest.mark.parametrize("status,kind", [
    (404, FeedErrorKind.NOT_FOUND),
    (500, FeedErrorKind.SERVER_ERROR),
    (503, FeedErrorKind.SERVER_ERROR),
    (403, FeedErrorKind.SERVER_ERROR),
])
async def test_http_errors_map_to_kind(status, kind):
    client = _make_client(lambda request: httpx.Response(status))
    with pytest.raises(FeedError) as exc_info:
        await client.fetch()
    assert exc_info.value.kind is kind
    assert exc_info.value.context.status_code == status


async def test_transport_error_is_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(FeedError) as exc_info:
        await _make_client(handler).fetch()
    assert exc_info.value.kind is FeedErrorKind.NETWORK_ERROR


async def test_non_json_body_is_format_error():
    client = _make_client(lambda request: httpx.Response(200, text="<html>oops</html>"))
    with pytest.raises(FeedError) as exc_info:
        await client.fetch()
    assert exc_info.value.kind is FeedErrorKind.FORMAT_ERROR


async def test_json_object_is_format_error():
    client = _make_client(lambda request: httpx.Response(200, json={"supporters": []}))
    with pytest.raises(FeedError) as exc_info:
        await client.fetch()
    assert exc_info.value.kind is FeedErrorKind.FORMAT_ERROR
    assert exc_info.value.code == "FEED_FORMAT_ERROR"
