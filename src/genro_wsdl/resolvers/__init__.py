# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Concrete DocumentResolver implementations.

This module provides ready-to-use resolver implementations:

- FileDocumentResolver: Loads a WSDL document from disk
- UrlDocumentResolver: Fetches a WSDL document over HTTP

Example:
    from genro_wsdl import WsdlCatalog
    from genro_wsdl.resolvers import FileDocumentResolver

    resolver = FileDocumentResolver('/path/to/service.wsdl', cache_time=-1)
    catalog = WsdlCatalog(resolver())
"""

from .file_resolver import FileDocumentResolver
from .url_resolver import UrlDocumentResolver

__all__ = [
    'FileDocumentResolver',
    'UrlDocumentResolver',
]
