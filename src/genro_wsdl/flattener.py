# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Schema-free conversion of XML into nested dicts and lists.

Rules:
    - Each element becomes {local_name: content}.
    - Children are collected by name. A name seen once keeps its value, a
      name seen again is promoted to a list (see accumulate()).
    - Text is cleaned of control characters and stripped. An element with
      only text becomes that text; with attributes or children the text
      goes under the 'value' key. Mixed content (text beside child
      elements, no attributes) uses 'value' too: the children dict has no
      other slot for the text.
    - Attributes sit beside child content and are combined with it by
      deep_merge().

Example:
    >>> flatten_xml('<a x="1"><b>1</b><b>2</b><c>t</c></a>')
    {'a': {'b': ['1', '2'], 'c': 't', 'x': '1'}}
"""

from __future__ import annotations

import re
from typing import Any

from .exceptions import UnresolvedElement
from .xml_node import XmlNode, XmlNodeParser

_CONTROL_CHARS = re.compile(r'[\x00-\x1f\x7f]')


def accumulate(target: dict[str, Any], key: str, value: Any) -> dict[str, Any]:
    """Store value under key, promoting to a list on the second occurrence.

    Args:
        target: Dict updated in place.
        key: Destination key.
        value: Value to add.

    Returns:
        target, for chaining.
    """
    if key not in target:
        target[key] = value
    elif isinstance(target[key], list):
        target[key].append(value)
    else:
        target[key] = [target[key], value]
    return target


def deep_merge(base: dict[str, Any], other: dict[str, Any]) -> dict[str, Any]:
    """Merge other into a copy of base.

    Dicts under the same key merge recursively; any other collision keeps
    both values, following the accumulate() rule.
    """
    result = dict(base)
    for key, value in other.items():
        if key not in result:
            result[key] = value
        elif isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        elif isinstance(result[key], list):
            result[key] = [*result[key], value]
        else:
            result[key] = [result[key], value]
    return result


def clean_text(text: str) -> str:
    """Drop control characters (newlines and tabs included) and strip."""
    return _CONTROL_CHARS.sub('', text).strip()


class XmlFlattener:
    """Flatten XmlNode trees.

    Args:
        keep_prefixes: Use raw 'prefix:name' keys instead of local names.
        value_key: Key holding text next to attributes or children.
        keep_namespace_declarations: Keep 'xmlns' attributes as data.
    """

    def __init__(
        self,
        keep_prefixes: bool = False,
        value_key: str = 'value',
        keep_namespace_declarations: bool = False,
    ):
        self.keep_prefixes = keep_prefixes
        self.value_key = value_key
        self.keep_namespace_declarations = keep_namespace_declarations

    def flatten(self, node: XmlNode) -> dict[str, Any]:
        """Return {name: content} for node.

        Raises:
            UnresolvedElement: If node or a descendant has no local name.
        """
        if not node.local_name:
            raise UnresolvedElement(f'element {node.name!r} has no local name')
        key = node.name if self.keep_prefixes else node.local_name
        return {key: self._content(node)}

    def _content(self, node: XmlNode) -> Any:
        children: dict[str, Any] = {}
        for child in node:
            for key, value in self.flatten(child).items():
                accumulate(children, key, value)

        attributes = self._attributes(node)
        text = clean_text(node.text)
        if not children and not attributes:
            return text

        own = dict(attributes)
        if text:
            own[self.value_key] = text
        return deep_merge(children, own)

    def _attributes(self, node: XmlNode) -> dict[str, str]:
        if self.keep_namespace_declarations:
            return dict(node.attr)
        return {
            key: value for key, value in node.attr.items()
            if key != 'xmlns' and not key.startswith('xmlns:')
        }


def flatten_xml(source: str | bytes, **kwargs: Any) -> dict[str, Any]:
    """Parse XML text and flatten its root element.

    Args:
        source: XML text or bytes.
        **kwargs: XmlFlattener options.
    """
    return XmlFlattener(**kwargs).flatten(XmlNodeParser.parse(source))
