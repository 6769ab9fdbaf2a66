# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""SOAP envelope codec driven by resolved message parts.

Classes:
    EnvelopeSerializer - render data into a SOAP 1.1 envelope
    EnvelopeParser - read a SOAP envelope back into data

Tags:
    A spec whose TypeNode is named (a global element) is written with the
    TypeNode's name and namespace. Anonymous and referenced complex types
    take the enclosing element's name, so the same tag rule applies on both
    sides (see MessagePart.wire_tag).

Example:
    >>> catalog = WsdlCatalog(wsdl_text)
    >>> operation = catalog.resolve_operation('GetUser')
    >>> serializer = EnvelopeSerializer(namespaces=catalog.namespaces())
    >>> xml = serializer.serialize(operation.request, {'id': '42'})
    >>> EnvelopeParser.parse_envelope(operation.response, response_text)
    {'GetUserResponse': {'user': {...}}}
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any
from xml import sax
from xml.sax import saxutils

from .exceptions import MalformedEnvelope, SoapFault
from .flattener import XmlFlattener, accumulate
from .qname import qualify
from .schema_types import Complex, ElementSpec, MessagePart, OneOrMany, TypeNode, as_many
from .xml_node import XmlNode, XmlNodeParser

logger = logging.getLogger(__name__)

SOAP_ENV_NS = 'http://schemas.xmlsoap.org/soap/envelope/'

# Keys of the generic parsed element
ATTRIBUTES_KEY = '$'
TEXT_KEY = '_'

Spec = ElementSpec | MessagePart


# =============================================================================
# SERIALIZER
# =============================================================================


class EnvelopeSerializer:
    """Render data objects as SOAP envelopes.

    Args:
        namespaces: Prefix to URI map, usually WsdlCatalog.namespaces().
        track_namespaces: Collect the prefixes used by the body and declare
            them on the Envelope tag. If False no declaration is emitted.
        envelope_prefix: Prefix bound to the SOAP envelope namespace.
    """

    def __init__(
        self,
        namespaces: Mapping[str, str] | None = None,
        track_namespaces: bool = True,
        envelope_prefix: str = 'soapenv',
    ):
        self.namespaces = dict(namespaces or {})
        self.track_namespaces = track_namespaces
        self.envelope_prefix = envelope_prefix

    def serialize(
        self,
        message: OneOrMany[MessagePart],
        value: Any,
        wrapper: str | None = None,
    ) -> str:
        """Render a whole envelope.

        Args:
            message: Request or response of an OperationSpec. A tuple of
                parts takes each part's value from value[part.name].
            value: Data object for the message.
            wrapper: Tag enclosing the parts of a tuple message (rpc style,
                usually the operation name). Without it the parts are
                written as siblings inside Body.

        Returns:
            The envelope as text.
        """
        used_namespaces: list[str] | None = [] if self.track_namespaces else None
        if not isinstance(message, tuple):
            body = self.render(message, value, 0, used_namespaces)
            return self.envelope(body, used_namespaces)

        values = value or {}
        depth = 1 if wrapper else 0
        bodies = [
            self.render(part, values.get(part.name), depth, used_namespaces)
            for part in message
        ]
        if not wrapper:
            return self.envelope('\n\t\t'.join(bodies), used_namespaces)
        if not bodies:
            return self.envelope(f'<{wrapper}/>', used_namespaces)
        content = ''.join(f'\n\t\t\t{body}' for body in bodies)
        return self.envelope(f'<{wrapper}>{content}\n\t\t</{wrapper}>', used_namespaces)

    def envelope(self, body: str, used_namespaces: list[str] | None = None) -> str:
        """Wrap a rendered body in the XML declaration and Envelope/Body."""
        prefix = self.envelope_prefix
        declarations = self._declarations(used_namespaces or [])
        return (
            "<?xml version='1.0' encoding='utf-8'?>\n"
            f"<{prefix}:Envelope xmlns:{prefix}='{SOAP_ENV_NS}'{declarations}>\n"
            f"\t<{prefix}:Body>\n"
            f"\t\t{body}\n"
            f"\t</{prefix}:Body>\n"
            f"</{prefix}:Envelope>"
        )

    def render(
        self,
        spec: Spec,
        value: Any,
        depth: int = 0,
        used_namespaces: list[str] | None = None,
    ) -> str:
        """Render one spec and its value.

        Args:
            spec: ElementSpec or MessagePart.
            value: Mapping for complex specs, scalar for leaves. None gives
                a self-closing tag.
            depth: Nesting level below the Body's first child.
            used_namespaces: Ordered list collecting prefixes, or None to
                disable tracking.
        """
        wire_tag = spec.wire_tag
        self._record(wire_tag.prefix, used_namespaces)
        tag = qualify(wire_tag.prefix, wire_tag.local)

        shape = spec.shape
        if isinstance(shape, Complex):
            return self._render_complex(tag, shape.type_node, value, depth, used_namespaces)

        if value is None:
            return f'<{tag}/>'
        return f'<{tag}>{saxutils.escape(self._text(value))}</{tag}>'

    def _render_complex(
        self,
        tag: str,
        type_node: TypeNode,
        value: Any,
        depth: int,
        used_namespaces: list[str] | None,
    ) -> str:
        if value is not None and not isinstance(value, Mapping):
            raise TypeError(f'<{tag}> expects a mapping, got {type(value).__name__}')

        attributes = []
        children = []
        for key, item in (value or {}).items():
            if type_node.attribute(key) is not None:
                if item is not None:
                    # written verbatim: callers sanitize attribute values
                    attributes.append(f' {key}="{self._text(item)}"')
                continue
            element = type_node.element(key)
            if element is None:
                logger.warning('<%s> does not declare %r, value dropped', tag, key)
                continue
            items = item if isinstance(item, (list, tuple)) else [item]
            for entry in items:
                children.append(self.render(element, entry, depth + 1, used_namespaces))

        opening = f'<{tag}{"".join(attributes)}'
        if not children:
            return f'{opening}/>'
        child_indent = '\t' * (3 + depth)
        close_indent = '\t' * (2 + depth)
        content = ''.join(f'\n{child_indent}{child}' for child in children)
        return f'{opening}>{content}\n{close_indent}</{tag}>'

    @staticmethod
    def _text(value: Any) -> str:
        if isinstance(value, bool):
            return 'true' if value else 'false'
        return str(value)

    @staticmethod
    def _record(prefix: str, used_namespaces: list[str] | None) -> None:
        if used_namespaces is not None and prefix and prefix not in used_namespaces:
            used_namespaces.append(prefix)

    def _declarations(self, used_namespaces: list[str]) -> str:
        parts = []
        for prefix in used_namespaces:
            uri = self.namespaces.get(prefix)
            if uri is None:
                logger.warning('namespace prefix %r is not declared in the WSDL', prefix)
                continue
            parts.append(f' xmlns:{prefix}="{uri}"')
        return ''.join(parts)


# =============================================================================
# PARSER
# =============================================================================


class EnvelopeParser:
    """Read SOAP envelopes into data objects.

    Parsing goes through a generic parsed element (see to_mapping()):
    children keyed by local name, attributes under '$', text under '_'.
    """

    @classmethod
    def to_mapping(cls, node: XmlNode) -> Any:
        """Convert an XmlNode to the generic parsed element form.

        A node with neither children nor attributes is its trimmed text.
        Repeated children become lists. Namespace declarations are dropped.
        """
        attributes = {
            key: value for key, value in node.attr.items()
            if key != 'xmlns' and not key.startswith('xmlns:')
        }
        if not node.children and not attributes:
            return node.value

        result: dict[str, Any] = {}
        if attributes:
            result[ATTRIBUTES_KEY] = attributes
        if node.value:
            result[TEXT_KEY] = node.value
        for child in node:
            accumulate(result, child.local_name, cls.to_mapping(child))
        return result

    @classmethod
    def parse(cls, spec: Spec, node: Any) -> Any:
        """Convert a generic parsed element according to spec.

        Leaves return node unchanged. Complex specs return a dict of the
        declared elements and attributes found, nested under the TypeNode's
        name when it has one.
        """
        result = cls._parse_value(spec, node)
        shape = spec.shape
        if isinstance(shape, Complex) and shape.type_node.name:
            return {shape.type_node.name: result}
        return result

    @classmethod
    def _parse_value(cls, spec: Spec, node: Any) -> Any:
        shape = spec.shape
        if not isinstance(shape, Complex):
            return node
        type_node = shape.type_node
        result: dict[str, Any] = {}
        if not isinstance(node, Mapping):
            return result

        for key, value in node.items():
            if key in (ATTRIBUTES_KEY, TEXT_KEY):
                continue
            element = cls._element_for_tag(type_node, key)
            if element is None:
                logger.debug('ignoring undeclared element %r', key)
                continue
            if isinstance(value, list) or element.unbounded:
                items = value if isinstance(value, list) else [value]
                result[element.name] = [cls._parse_value(element, item) for item in items]
            else:
                result[element.name] = cls._parse_value(element, value)

        for key, value in node.get(ATTRIBUTES_KEY, {}).items():
            if type_node.attribute(key) is not None:
                result[key] = value
        return result

    @staticmethod
    def _element_for_tag(type_node: TypeNode, tag: str) -> ElementSpec | None:
        for element in type_node.elements:
            if element.wire_tag.local == tag:
                return element
        return None

    @classmethod
    def parse_envelope(cls, message: OneOrMany[MessagePart], source: str | bytes) -> Any:
        """Parse envelope text for a request or response message.

        A tuple of parts reads each part from the single Body child by the
        part's tag, keyed by part name in the result.

        Raises:
            MalformedEnvelope: If the text is not an Envelope with a Body
                holding exactly one element.
            SoapFault: If the Body holds a Fault.
        """
        payload = cls.body_payload(source)
        mapping = cls.to_mapping(payload)

        if isinstance(message, tuple):
            result = {}
            for part in as_many(message):
                tag = part.wire_tag.local
                if isinstance(mapping, Mapping) and tag in mapping:
                    result[part.name] = cls.parse(part, mapping[tag])
            return result
        return cls.parse(message, mapping)

    @classmethod
    def body_payload(cls, source: str | bytes) -> XmlNode:
        """Return the single element inside the envelope Body."""
        try:
            root = XmlNodeParser.parse(source)
        except sax.SAXParseException as exc:
            raise MalformedEnvelope(f'envelope is not well-formed XML: {exc}') from exc

        if root.local_name != 'Envelope':
            raise MalformedEnvelope(f'expected an Envelope, found <{root.name}>')
        body = root.child_local_named('Body')
        if body is None:
            raise MalformedEnvelope('envelope has no Body')
        if len(body.children) != 1:
            raise MalformedEnvelope(
                f'expected exactly one element in Body, found {len(body.children)}'
            )

        payload = body.children[0]
        if payload.local_name == 'Fault':
            raise cls._fault(payload)
        return payload

    @staticmethod
    def _fault(node: XmlNode) -> SoapFault:
        def text_of(*path: str) -> str | None:
            current = node
            for name in path:
                current = current.child_local_named(name)
                if current is None:
                    return None
            return current.value

        # SOAP 1.1 faultcode/faultstring, SOAP 1.2 Code/Reason
        faultcode = text_of('faultcode') or text_of('Code', 'Value')
        faultstring = text_of('faultstring') or text_of('Reason', 'Text')
        detail_node = node.child_local_named('detail')
        if detail_node is None:
            detail_node = node.child_local_named('Detail')
        detail = None
        if detail_node is not None:
            detail = XmlFlattener().flatten(detail_node)[detail_node.local_name]
        return SoapFault(faultcode, faultstring, detail)
