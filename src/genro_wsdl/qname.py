# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Qualified-name helpers.

Names in a WSDL document keep their raw prefixes ('tns:GetUser',
'xs:string'). These helpers split them without consulting any namespace
map: the prefix is whatever precedes the first colon.

Example:
    >>> split_name('tns:GetUser')
    QualifiedName(prefix='tns', local='GetUser')
    >>> namespace_of('tns:GetUser', with_suffix=True)
    'tns:'
"""

from __future__ import annotations

from typing import NamedTuple


class QualifiedName(NamedTuple):
    prefix: str
    local: str

    def __str__(self) -> str:
        if self.prefix:
            return f'{self.prefix}:{self.local}'
        return self.local


def split_name(raw: str) -> QualifiedName:
    """Split a raw name on its first colon. No colon means empty prefix."""
    prefix, sep, local = raw.partition(':')
    if not sep:
        return QualifiedName('', raw)
    return QualifiedName(prefix, local)


def local_name(raw: str) -> str:
    """Return the raw name without its prefix."""
    return split_name(raw).local


def namespace_of(raw: str, with_suffix: bool = False) -> str:
    """Return the prefix of a raw name, '' if it has none.

    Args:
        raw: Raw qualified name.
        with_suffix: If True, append ':' to a non-empty prefix.
    """
    prefix = split_name(raw).prefix
    if prefix and with_suffix:
        return f'{prefix}:'
    return prefix


def qualify(prefix: str | None, name: str) -> str:
    """Join a prefix and a local name, skipping an empty prefix."""
    return f'{prefix}:{name}' if prefix else name
