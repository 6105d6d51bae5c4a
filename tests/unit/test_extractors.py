"""
Unit tests for the directory API extractor and pagination
"""

import httpx
import pytest
from unittest.mock import AsyncMock
from ingestion.extractors.university_api import UniversityAPIExtractor
from core.exceptions import UpstreamUnavailable
from tests.helpers import ScriptedSource, make_raw

API_URL = "http://universities.example.com/search"


def make_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def make_extractor(client, **kwargs) -> UniversityAPIExtractor:
    params = {
        "api_url": API_URL,
        "country": "United+States",
        "page_size": 2,
        "max_retries": 3,
        "retry_delay": 0.1,
        "client": client,
        "sleep": AsyncMock(),
    }
    params.update(kwargs)
    return UniversityAPIExtractor(**params)


class TestUniversityAPIExtractor:
    """Test single-page fetching and retry behaviour"""

    @pytest.mark.asyncio
    async def test_fetch_page_success(self, mock_api_data):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json=mock_api_data)

        async with make_client(handler) as client:
            extractor = make_extractor(client)
            result = await extractor.fetch_page(0, 10)

        assert result == mock_api_data
        assert len(requests) == 1
        assert str(requests[0].url) == f"{API_URL}?offset=0&limit=10&country=United+States"

    def test_build_url_encodes_spaces_as_plus(self):
        extractor = UniversityAPIExtractor(api_url=API_URL, country="New Zealand")

        url = extractor.build_url(500, 500)

        assert url == f"{API_URL}?offset=500&limit=500&country=New+Zealand"

    def test_uses_settings_defaults(self):
        extractor = UniversityAPIExtractor()

        assert extractor.page_size == 500
        assert extractor.country == "United+States"
        assert extractor.max_retries == 3
        assert extractor.api_url == "http://universities.hipolabs.com/search"

    @pytest.mark.asyncio
    async def test_retries_server_error_then_succeeds(self, mock_api_data):
        calls = {"count": 0}

        def handler(request):
            calls["count"] += 1
            if calls["count"] == 1:
                return httpx.Response(500, text="oops")
            return httpx.Response(200, json=mock_api_data)

        sleep = AsyncMock()
        async with make_client(handler) as client:
            extractor = make_extractor(client, sleep=sleep)
            result = await extractor.fetch_page(0, 2)

        assert result == mock_api_data
        assert calls["count"] == 2
        sleep.assert_awaited_once_with(0.1)

    @pytest.mark.asyncio
    async def test_raises_upstream_unavailable_after_max_retries(self):
        calls = {"count": 0}

        def handler(request):
            calls["count"] += 1
            return httpx.Response(503, text="maintenance")

        sleep = AsyncMock()
        async with make_client(handler) as client:
            extractor = make_extractor(client, sleep=sleep)
            with pytest.raises(UpstreamUnavailable) as exc_info:
                await extractor.fetch_page(0, 2)

        assert calls["count"] == 3
        assert [c.args[0] for c in sleep.await_args_list] == [0.1, 0.2]
        assert exc_info.value.context["status_code"] == 503
        assert exc_info.value.context["offset"] == 0

    @pytest.mark.asyncio
    async def test_network_error_is_upstream_unavailable(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with make_client(handler) as client:
            extractor = make_extractor(client, max_retries=2)
            with pytest.raises(UpstreamUnavailable) as exc_info:
                await extractor.fetch_page(0, 2)

        assert isinstance(exc_info.value.original_exception, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_non_array_body_is_upstream_unavailable(self):
        def handler(request):
            return httpx.Response(200, json={"error": "unexpected"})

        async with make_client(handler) as client:
            extractor = make_extractor(client, max_retries=1)
            with pytest.raises(UpstreamUnavailable):
                await extractor.fetch_page(0, 2)

    @pytest.mark.asyncio
    async def test_invalid_json_is_upstream_unavailable(self):
        def handler(request):
            return httpx.Response(200, text="<html>not json</html>")

        async with make_client(handler) as client:
            extractor = make_extractor(client, max_retries=1)
            with pytest.raises(UpstreamUnavailable):
                await extractor.fetch_page(0, 2)

    @pytest.mark.asyncio
    async def test_fetch_all_advances_offset_by_records_received(self):
        pages = {
            0: [make_raw("A"), make_raw("B")],
            2: [make_raw("C")],
            3: [],
        }
        offsets = []

        def handler(request):
            offset = int(request.url.params["offset"])
            offsets.append(offset)
            return httpx.Response(200, json=pages[offset])

        async with make_client(handler) as client:
            extractor = make_extractor(client, page_size=2)
            result = await extractor.fetch_all()

        assert [r["name"] for r in result] == ["A", "B", "C"]
        assert offsets == [0, 2, 3]

    @pytest.mark.asyncio
    async def test_rejects_invalid_page_arguments(self):
        extractor = make_extractor(client=None)

        with pytest.raises(ValueError):
            await extractor.fetch_page(-1, 10)
        with pytest.raises(ValueError):
            await extractor.fetch_page(0, 0)


class TestPagination:
    """Test PagedSource.fetch_all termination rules"""

    @pytest.mark.asyncio
    async def test_stops_on_empty_page(self):
        pages = [
            [make_raw(f"U{i}") for i in range(5)],
            [make_raw(f"U{i}") for i in range(5, 10)],
            [],
        ]
        source = ScriptedSource(pages, page_size=5)

        result = await source.fetch_all()

        assert len(result) == 10
        assert source.calls == [(0, 5), (5, 5), (10, 5)]

    @pytest.mark.asyncio
    async def test_first_page_empty_makes_one_call(self):
        source = ScriptedSource([[]], page_size=5)

        result = await source.fetch_all()

        assert result == []
        assert source.calls == [(0, 5)]

    @pytest.mark.asyncio
    async def test_short_page_does_not_terminate(self):
        pages = [
            [make_raw(f"U{i}") for i in range(5)],
            [make_raw(f"U{i}") for i in range(5, 8)],
            [],
        ]
        source = ScriptedSource(pages, page_size=5)

        result = await source.fetch_all()

        assert len(result) == 8
        assert [offset for offset, _ in source.calls] == [0, 5, 8]

    @pytest.mark.asyncio
    async def test_propagates_terminal_fetch_failure(self):
        error = UpstreamUnavailable("down", context={"offset": 5})
        source = ScriptedSource([[make_raw(f"U{i}") for i in range(5)], error], page_size=5)

        with pytest.raises(UpstreamUnavailable):
            await source.fetch_all()

        assert len(source.calls) == 2

    def test_rejects_non_positive_page_size(self):
        with pytest.raises(ValueError):
            ScriptedSource([], page_size=0)
