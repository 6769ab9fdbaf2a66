# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""DocumentResolver module - cached loading of WSDL document bytes.

A DocumentResolver is a callable byte source: resolver() returns the raw
document, loading it on the first call and again whenever the cache has
expired. Concrete resolvers live in genro_wsdl.resolvers.

Caching Semantics:
    - cache_time = 0  -> NO cache, load() called ALWAYS
    - cache_time > 0  -> cache for N seconds (TTL)
    - cache_time < 0  -> INFINITE cache (until manual reset())
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Any

logger = logging.getLogger(__name__)


class DocumentResolver:
    """Abstract base for document byte sources.

    Class Attributes:
        class_kwargs: dict of {param_name: default_value}
            Parameters with defaults, passable as keyword args.
        class_args: list of positional parameter names
            Required parameters, passable as positional args.
        asynchronous: True when load() is a coroutine wrapped by smartasync.

    Example:
        class FileDocumentResolver(DocumentResolver):
            class_kwargs = {'cache_time': 500}
            class_args = ['path']

            def load(self):
                with open(self._kw['path'], 'rb') as f:
                    return self.on_result(f.read())

        resolver = FileDocumentResolver('service.wsdl', cache_time=-1)
        # resolver._kw['path'] = 'service.wsdl'
        # resolver._kw['cache_time'] = -1 (overrides default 500)
    """

    class_kwargs: dict[str, Any] = {'cache_time': 0}
    class_args: list[str] = []
    asynchronous = False

    __slots__ = (
        '_kw',  # dict: all parameters from class_kwargs/class_args
        '_cached',  # bytes | None: last loaded content
        '_cache_last_update',  # datetime | None: last load() timestamp
    )

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        """Map positional args to class_args, keyword args over class_kwargs.

        Extra kwargs are kept in _kw as well.
        """
        if len(args) > len(self.class_args):
            raise TypeError(
                f'{self.__class__.__name__} takes {len(self.class_args)} positional arguments'
            )
        self._cached: Any = None
        self._cache_last_update: datetime | None = None
        self._kw: dict[str, Any] = {}

        class_kwargs_copy = dict(self.class_kwargs)
        for parname, arg in zip(self.class_args, args):
            self._kw[parname] = arg
            class_kwargs_copy.pop(parname, None)
            kwargs.pop(parname, None)

        for parname, dflt in class_kwargs_copy.items():
            self._kw[parname] = kwargs.pop(parname, dflt)

        self._kw.update(kwargs)

    def __repr__(self) -> str:
        args = ', '.join(repr(self._kw.get(name)) for name in self.class_args)
        return f'{self.__class__.__name__}({args})'

    # =========================================================================
    # CACHE MANAGEMENT
    # =========================================================================

    @property
    def cache_time(self) -> int:
        """Get cache time in seconds."""
        return self._kw.get('cache_time', 0)  # type: ignore[no-any-return]

    def reset(self) -> None:
        """Invalidate cache, forcing reload on next call."""
        self._cache_last_update = None
        self._cached = None

    @property
    def expired(self) -> bool:
        """Check if cache has expired."""
        cache_time = self.cache_time
        if cache_time == 0 or self._cache_last_update is None:
            return True
        if cache_time < 0:
            return False
        elapsed = datetime.now() - self._cache_last_update
        return elapsed > timedelta(seconds=cache_time)

    @property
    def in_async_context(self) -> bool:
        """Whether there is a running event loop."""
        try:
            asyncio.get_running_loop()
            return True
        except RuntimeError:
            return False

    # =========================================================================
    # __call__ - MAIN ENTRY POINT
    # =========================================================================

    def __call__(self) -> Any:
        """Return the document bytes, or an awaitable in async context."""
        if not self.expired:
            if self.asynchronous and self.in_async_context:
                return self._cached_result()
            return self._cached
        return self.load()

    async def _cached_result(self) -> Any:
        return self._cached

    def on_result(self, result: Any) -> Any:
        """Store result in the cache. Subclasses call it at the end of load()."""
        self._cached = result
        self._cache_last_update = datetime.now()
        logger.debug('%r loaded %d bytes', self, len(result))
        return result

    def load(self) -> Any:
        """Load and return the document bytes.

        MUST be overridden in subclasses.
        """
        raise NotImplementedError('Subclasses must implement load()')
