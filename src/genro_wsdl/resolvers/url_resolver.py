# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""UrlDocumentResolver - resolver that fetches a document from an HTTP URL."""

from __future__ import annotations

from typing import Any

import httpx
from genro_toolbox import smartasync

from ..resolver import DocumentResolver


class UrlDocumentResolver(DocumentResolver):
    """Resolver that fetches a document from an HTTP URL.

    Works in sync and async contexts: load() is wrapped by @smartasync, so
    resolver() returns bytes in sync code and an awaitable in async code.

    Parameters (class_args):
        url: The URL to fetch.

    Parameters (class_kwargs):
        cache_time: Cache duration in seconds. Default 300.
        timeout: Request timeout in seconds. Default 30.
        headers: Extra request headers. Default None.
        transport: httpx transport, e.g. httpx.MockTransport. Default None.
    """

    class_kwargs = {
        'cache_time': 300,
        'timeout': 30,
        'headers': None,
        'transport': None,
    }
    class_args = ['url']
    asynchronous = True

    @smartasync
    async def load(self) -> Any:
        """Fetch URL content (bytes in sync code, awaitable in async code)."""
        return await self.fetch()

    async def fetch(self) -> bytes:
        """Fetch URL content as a plain coroutine.

        Raises:
            httpx.HTTPStatusError: If the server answers with an error status.
            httpx.HTTPError: If the request fails.
        """
        async with httpx.AsyncClient(transport=self._kw['transport']) as client:
            response = await client.get(
                self._kw['url'],
                headers=self._kw['headers'],
                timeout=self._kw['timeout'],
            )
            response.raise_for_status()
        return self.on_result(response.content)
