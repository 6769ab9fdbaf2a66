# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Operation catalog of a WSDL document.

WsdlCatalog reads a WSDL 1.1 document and exposes:
- the operation names of its bindings
- each operation's request/response message parts, with their schema types
  expanded into TypeNode trees
- the namespace prefixes declared on the root element

Usage:
    # List operations
    python -m genro_wsdl.catalog service.wsdl

    # Dump one operation as JSON
    python -m genro_wsdl.catalog service.wsdl --operation GetUser

    # From URL
    python -m genro_wsdl.catalog --url https://example.com/service?wsdl
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any
from xml import sax

from genro_toolbox import smartasync

from .envelope import EnvelopeParser, EnvelopeSerializer
from .exceptions import MalformedDocument, OperationNotFound
from .qname import local_name, namespace_of, split_name
from .resolvers import FileDocumentResolver, UrlDocumentResolver
from .schema_types import MessagePart, OneOrMany, OperationSpec, one_or_many
from .type_resolver import TypeResolver
from .xml_node import XmlNode, XmlNodeParser

logger = logging.getLogger(__name__)


class WsdlCatalog:
    """Operations and message types of one WSDL document.

    Args:
        source: WSDL text, bytes, or an already parsed XmlNode root.
        max_depth: Maximum type nesting, see TypeResolver.

    Raises:
        MalformedDocument: If source is not well-formed XML.
    """

    def __init__(self, source: str | bytes | XmlNode, max_depth: int = 64):
        if isinstance(source, XmlNode):
            root = source
        else:
            try:
                root = XmlNodeParser.parse(source)
            except sax.SAXParseException as exc:
                raise MalformedDocument(f'WSDL is not well-formed XML: {exc}') from exc
        self.root = root
        self.wsdl_prefix = namespace_of(root.name, with_suffix=True)
        self.max_depth = max_depth
        self._type_resolver: TypeResolver | None = None

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    @classmethod
    def from_file(cls, path: str | Path, max_depth: int = 64) -> WsdlCatalog:
        """Load a catalog from a WSDL file."""
        return cls(FileDocumentResolver(str(path))(), max_depth=max_depth)

    @classmethod
    @smartasync
    async def from_url(
        cls,
        url: str,
        timeout: int = 30,
        transport: Any = None,
        max_depth: int = 64,
    ) -> WsdlCatalog:
        """Load a catalog from a URL (async-capable).

        Works in both sync and async contexts via @smartasync.

        Raises:
            httpx.HTTPError: If the request fails.
        """
        resolver = UrlDocumentResolver(url, timeout=timeout, transport=transport)
        content = await resolver.fetch()
        return cls(content, max_depth=max_depth)

    # -------------------------------------------------------------------------
    # Structure helpers
    # -------------------------------------------------------------------------

    def _children(self, parent: XmlNode, name: str) -> list[XmlNode]:
        """Children named with the WSDL prefix, or 'wsdl:', or any prefix."""
        for candidate in (self.wsdl_prefix + name, 'wsdl:' + name):
            found = parent.children_named(candidate)
            if found:
                return found
        return [child for child in parent if child.local_name == name]

    def _required(self, parent: XmlNode, name: str) -> list[XmlNode]:
        found = self._children(parent, name)
        if not found:
            raise MalformedDocument(f'<{parent.name}> has no <{self.wsdl_prefix}{name}>')
        return found

    @property
    def schema(self) -> XmlNode:
        """The schema of <types>. Several schemas are joined into one node."""
        types = self._required(self.root, 'types')[0]
        schemas = [child for child in types if child.local_name == 'schema']
        if not schemas:
            raise MalformedDocument('<types> holds no schema')
        if len(schemas) == 1:
            return schemas[0]
        children = [child for schema in schemas for child in schema]
        return XmlNode(schemas[0].name, schemas[0].attr, children)

    @property
    def type_resolver(self) -> TypeResolver:
        if self._type_resolver is None:
            self._type_resolver = TypeResolver(self.schema, max_depth=self.max_depth)
        return self._type_resolver

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def namespaces(self) -> dict[str, str]:
        """Prefix to URI map of the 'xmlns:*' declarations on the root."""
        return {
            key[6:]: value for key, value in self.root.attr.items()
            if key.startswith('xmlns:')
        }

    def list_operations(self) -> list[str]:
        """Operation names of all bindings, sorted and without duplicates."""
        names = set()
        for binding in self._required(self.root, 'binding'):
            for operation in self._children(binding, 'operation'):
                if operation.get('name'):
                    names.add(operation.get('name'))
        return sorted(names)

    def resolve_operation(self, name: str) -> OperationSpec:
        """Resolve an operation's request and response parts.

        A message with one part gives the bare MessagePart, a message with
        several parts a tuple, a missing input or output an empty tuple.

        Raises:
            OperationNotFound: If no portType declares the operation.
            MalformedDocument: If portType or a referenced message is missing.
        """
        operation = None
        for port_type in self._required(self.root, 'portType'):
            operation = port_type.child_with_attribute('name', name)
            if operation is not None:
                break
        if operation is None:
            raise OperationNotFound(name)

        logger.debug('resolving operation %s', name)
        return OperationSpec(
            name=name,
            request=self._message_parts(operation, 'input'),
            response=self._message_parts(operation, 'output'),
        )

    def _message_parts(self, operation: XmlNode, direction: str) -> OneOrMany[MessagePart]:
        refs = self._children(operation, direction)
        if not refs or not refs[0].get('message'):
            return ()
        message_name = local_name(refs[0].get('message'))
        for message in self._required(self.root, 'message'):
            if message.get('name') == message_name:
                return one_or_many(
                    self._part(part) for part in message if part.local_name == 'part'
                )
        raise MalformedDocument(f'message "{message_name}" is not declared')

    def _part(self, node: XmlNode) -> MessagePart:
        kind = 'element' if node.get('element') else 'type'
        reference = node.get('element') or node.get('type')
        if reference is None:
            return MessagePart(name=node.get('name'))
        qname = split_name(reference)
        # rpc accessors (type=) are unqualified, only element= carries a namespace
        namespace = (qname.prefix or None) if kind == 'element' else None
        return MessagePart(
            name=node.get('name'),
            namespace=namespace,
            declared_type=qname,
            type_def=self.type_resolver.resolve_type(qname.local, kind=kind),
        )

    # -------------------------------------------------------------------------
    # Codec shortcuts
    # -------------------------------------------------------------------------

    def build_request(self, operation_name: str, value: Any, track_namespaces: bool = True) -> str:
        """Render the request envelope of an operation.

        Multi-part requests are wrapped in an element named after the
        operation.
        """
        operation = self.resolve_operation(operation_name)
        serializer = EnvelopeSerializer(
            namespaces=self.namespaces(), track_namespaces=track_namespaces
        )
        return serializer.serialize(operation.request, value, wrapper=operation_name)

    def parse_response(self, operation_name: str, source: str | bytes) -> Any:
        """Parse the response envelope of an operation."""
        operation = self.resolve_operation(operation_name)
        return EnvelopeParser.parse_envelope(operation.response, source)


# =============================================================================
# CLI
# =============================================================================


def main(argv: list[str] | None = None) -> int:
    """Command-line interface: list operations or dump one as JSON."""
    parser = argparse.ArgumentParser(
        description='Inspect the operations of a WSDL document',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        'input',
        nargs='?',
        type=Path,
        help='Input WSDL file path',
    )
    parser.add_argument(
        '--url',
        type=str,
        help='URL to download WSDL from',
    )
    parser.add_argument(
        '--operation',
        type=str,
        help='Operation to resolve and print as JSON',
    )
    parser.add_argument(
        '-v',
        '--verbose',
        action='store_true',
        help='Print diagnostic info',
    )

    args = parser.parse_args(argv)

    if not args.input and not args.url:
        parser.error('Either input file or --url is required')

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    if args.url:
        catalog = WsdlCatalog.from_url(args.url)
    else:
        if not args.input.exists():
            print(f'ERROR: Input file not found: {args.input}')
            return 1
        catalog = WsdlCatalog.from_file(args.input)

    if args.operation:
        operation = catalog.resolve_operation(args.operation)
        print(json.dumps(operation.to_dict(), indent=2))
    else:
        for name in catalog.list_operations():
            print(name)
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
