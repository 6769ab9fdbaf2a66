# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""FileDocumentResolver - loads document bytes from disk."""

from __future__ import annotations

from ..resolver import DocumentResolver


class FileDocumentResolver(DocumentResolver):
    class_kwargs = {'cache_time': 500}
    class_args = ['path']

    def load(self) -> bytes:
        with open(self._kw['path'], mode='rb') as f:
            result = f.read()
        return self.on_result(result)
