# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Tests for document resolvers and WsdlCatalog.from_url().

HTTP traffic goes through httpx.MockTransport, no network is needed.
"""

import asyncio

import httpx
import pytest

from genro_wsdl import WsdlCatalog
from genro_wsdl.resolver import DocumentResolver
from genro_wsdl.resolvers import FileDocumentResolver, UrlDocumentResolver


WSDL_URL = 'http://example.com/users?wsdl'


class CountingHandler:
    """MockTransport handler serving the sample WSDL and counting requests."""

    def __init__(self, content=b'', status_code=200):
        self.content = content
        self.status_code = status_code
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        return httpx.Response(self.status_code, content=self.content)


@pytest.fixture
def handler(wsdl_text):
    return CountingHandler(wsdl_text.encode('utf-8'))


@pytest.fixture
def transport(handler):
    return httpx.MockTransport(handler)


# =============================================================================
# Base class
# =============================================================================


class TestDocumentResolver:
    def test_positional_and_keyword_parameters(self):
        resolver = FileDocumentResolver('service.wsdl', cache_time=-1, extra=1)
        assert resolver._kw == {'path': 'service.wsdl', 'cache_time': -1, 'extra': 1}
        assert repr(resolver) == "FileDocumentResolver('service.wsdl')"

    def test_too_many_positional(self):
        with pytest.raises(TypeError):
            FileDocumentResolver('a', 'b')

    def test_load_must_be_overridden(self):
        with pytest.raises(NotImplementedError):
            DocumentResolver()()

    def test_infinite_cache_never_expires(self):
        resolver = FileDocumentResolver('service.wsdl', cache_time=-1)
        assert resolver.expired
        resolver.on_result(b'<a/>')
        assert not resolver.expired
        resolver.reset()
        assert resolver.expired


# =============================================================================
# FileDocumentResolver
# =============================================================================


class TestFileDocumentResolver:
    def test_reads_bytes(self, wsdl_file, wsdl_text):
        resolver = FileDocumentResolver(str(wsdl_file))
        assert resolver() == wsdl_text.encode('utf-8')

    def test_cached_until_reset(self, wsdl_file):
        resolver = FileDocumentResolver(str(wsdl_file))
        first = resolver()
        wsdl_file.write_text('<changed/>')
        assert resolver() == first
        resolver.reset()
        assert resolver() == b'<changed/>'

    def test_no_cache(self, wsdl_file):
        resolver = FileDocumentResolver(str(wsdl_file), cache_time=0)
        resolver()
        wsdl_file.write_text('<changed/>')
        assert resolver() == b'<changed/>'

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            FileDocumentResolver(str(tmp_path / 'missing.wsdl'))()


# =============================================================================
# UrlDocumentResolver
# =============================================================================


class TestUrlDocumentResolver:
    def test_defaults(self):
        resolver = UrlDocumentResolver(WSDL_URL)
        assert resolver.cache_time == 300
        assert resolver._kw['timeout'] == 30
        assert resolver._kw['url'] == WSDL_URL

    def test_sync_fetch(self, transport, handler):
        resolver = UrlDocumentResolver(WSDL_URL, transport=transport)
        result = resolver()
        assert isinstance(result, bytes)
        assert b'wsdl:definitions' in result
        assert str(handler.requests[0].url) == WSDL_URL

    def test_sync_fetch_is_cached(self, transport, handler):
        resolver = UrlDocumentResolver(WSDL_URL, transport=transport)
        resolver()
        resolver()
        assert len(handler.requests) == 1

    def test_headers_are_sent(self, transport, handler):
        resolver = UrlDocumentResolver(
            WSDL_URL, transport=transport, headers={'Authorization': 'Basic abc'}
        )
        resolver()
        assert handler.requests[0].headers['Authorization'] == 'Basic abc'

    def test_error_status(self):
        transport = httpx.MockTransport(CountingHandler(status_code=404))
        resolver = UrlDocumentResolver(WSDL_URL, transport=transport)
        with pytest.raises(httpx.HTTPStatusError):
            resolver()

    @pytest.mark.asyncio
    async def test_async_fetch(self, transport, handler):
        resolver = UrlDocumentResolver(WSDL_URL, transport=transport)
        result = await resolver()
        assert isinstance(result, bytes)
        # cached value is still awaitable in async context
        assert await resolver() == result
        assert len(handler.requests) == 1

    @pytest.mark.asyncio
    async def test_concurrent_fetches(self, transport, handler):
        first = UrlDocumentResolver(WSDL_URL, transport=transport)
        second = UrlDocumentResolver(WSDL_URL, transport=transport)
        results = await asyncio.gather(first(), second())
        assert results[0] == results[1]
        assert len(handler.requests) == 2


# =============================================================================
# WsdlCatalog.from_url()
# =============================================================================


class TestCatalogFromUrl:
    def test_sync(self, transport):
        catalog = WsdlCatalog.from_url(WSDL_URL, transport=transport)
        assert catalog.list_operations() == ['GetUser', 'ListUsers', 'Login', 'Ping']

    @pytest.mark.asyncio
    async def test_async(self, transport):
        catalog = await WsdlCatalog.from_url(WSDL_URL, transport=transport)
        assert 'GetUser' in catalog.list_operations()

    def test_error_status(self):
        transport = httpx.MockTransport(CountingHandler(status_code=500))
        with pytest.raises(httpx.HTTPStatusError):
            WsdlCatalog.from_url(WSDL_URL, transport=transport)
