# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Generic XML node tree.

WSDL processing works on raw qualified names ('wsdl:operation') and needs
the 'xmlns:*' declarations as plain attributes. ElementTree rewrites both
into Clark notation, so this module builds its own light tree with a SAX
handler running without namespace processing.

Classes:
    XmlNode - element with name, attributes, text and ordered children
    XmlNodeParser - SAX handler building an XmlNode tree

Example:
    >>> root = XmlNodeParser.parse('<a:root x="1"><a:item>v</a:item></a:root>')
    >>> root.name, root.attr
    ('a:root', {'x': '1'})
    >>> root.child_named('a:item').value
    'v'
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any
from xml import sax

from .qname import local_name


class XmlNode:
    """One XML element.

    Attributes:
        name: Raw tag name, prefix included.
        attr: Attribute dict in document order, 'xmlns:*' included.
        children: Child elements in document order.
        text: Concatenated character data directly inside the element.
    """

    __slots__ = ('name', 'attr', 'children', 'text')

    def __init__(
        self,
        name: str,
        attr: dict[str, str] | None = None,
        children: list[XmlNode] | None = None,
        text: str = '',
    ):
        self.name = name
        self.attr: dict[str, str] = dict(attr or {})
        self.children: list[XmlNode] = list(children or [])
        self.text = text

    def __repr__(self) -> str:
        return f'<XmlNode {self.name} attrs={len(self.attr)} children={len(self.children)}>'

    def __iter__(self) -> Iterator[XmlNode]:
        return iter(self.children)

    def __len__(self) -> int:
        return len(self.children)

    @property
    def local_name(self) -> str:
        """Tag name without prefix."""
        return local_name(self.name)

    @property
    def value(self) -> str:
        """Trimmed text content."""
        return self.text.strip()

    def get(self, attr_name: str, default: Any = None) -> Any:
        return self.attr.get(attr_name, default)

    def child_named(self, name: str) -> XmlNode | None:
        """First child whose raw name equals name."""
        for child in self.children:
            if child.name == name:
                return child
        return None

    def children_named(self, name: str) -> list[XmlNode]:
        """All children whose raw name equals name."""
        return [child for child in self.children if child.name == name]

    def child_with_attribute(self, attr_name: str, attr_value: str) -> XmlNode | None:
        """First child carrying attr_name=attr_value."""
        for child in self.children:
            if child.attr.get(attr_name) == attr_value:
                return child
        return None

    def child_local_named(self, name: str) -> XmlNode | None:
        """First child whose local name equals name, whatever its prefix."""
        for child in self.children:
            if child.local_name == name:
                return child
        return None


class XmlNodeParser(sax.handler.ContentHandler):
    """SAX handler building an XmlNode tree.

    Namespace processing stays off, so tag and attribute names arrive
    exactly as written in the source.
    """

    @classmethod
    def parse(cls, source: str | bytes) -> XmlNode:
        """Parse XML text to its root XmlNode.

        Raises:
            xml.sax.SAXParseException: If source is not well-formed.
        """
        if isinstance(source, str):
            source = source.encode('utf-8')
        handler = cls()
        sax.parseString(source, handler)
        return handler.root

    def startDocument(self) -> None:
        self.root: XmlNode | None = None
        self.stack: list[tuple[XmlNode, list[str]]] = []

    def startElement(self, name: str, attrs: Any) -> None:
        node = XmlNode(name, {str(k): v for k, v in attrs.items()})
        if self.stack:
            self.stack[-1][0].children.append(node)
        else:
            self.root = node
        self.stack.append((node, []))

    def characters(self, content: str) -> None:
        if self.stack:
            self.stack[-1][1].append(content)

    def endElement(self, name: str) -> None:
        node, chunks = self.stack.pop()
        node.text = ''.join(chunks)
