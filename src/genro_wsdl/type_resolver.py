# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Expand schema type names into TypeNode trees.

TypeResolver walks the top-level declarations of an embedded XML schema
and expands a name into its elements (recursively), attributes and
attribute groups. Names are matched on local names, so 'xs:', 'xsd:' and
default-namespace schemas behave the same.

Lookup rules:
    - A declaration without children is a simple alias. If it has a 'type'
      attribute, the aliased complexType is expanded (or the alias chased
      one more hop); otherwise it is a terminal simple type.
    - Otherwise the complexType nested in the declaration, or the top-level
      complexType with the same name, is expanded.
    - A name declared nowhere yields an empty TypeNode: built-in types such
      as xs:string are never declared locally.

Recursive types are rejected with CyclicSchema: the resolver keeps the
chain of declarations being expanded (tag and name, so an element and its
same-named type are distinct) and refuses to re-enter one of them.

Example:
    >>> resolver = TypeResolver.from_xml(xsd_text)
    >>> node = resolver.resolve_type('GetUser')
    >>> [e.name for e in node.elements]
    ['id']
"""

from __future__ import annotations

import logging

from .exceptions import CyclicSchema, MalformedDocument
from .qname import QualifiedName, split_name
from .schema_types import UNBOUNDED, AttributeSpec, ElementSpec, Occurs, TypeNode
from .xml_node import XmlNode, XmlNodeParser

logger = logging.getLogger(__name__)

# Declaration tags searched first for each kind of lookup
ANCHOR_KINDS = {
    'type': ('complexType', 'simpleType'),
    'element': ('element',),
    'attribute': ('attribute',),
    'attributeGroup': ('attributeGroup',),
}


class TypeResolver:
    """Resolve type names against one schema node.

    Args:
        schema: The <xs:schema> node (or any node whose children are the
            top-level declarations).
        max_depth: Maximum nesting of type expansions before giving up.
    """

    def __init__(self, schema: XmlNode, max_depth: int = 64):
        self.schema = schema
        self.max_depth = max_depth
        self._cache: dict[tuple[str, str | None], TypeNode] = {}
        self._chain: list[tuple[str | None, str]] = []

    @classmethod
    def from_xml(cls, source: str | bytes, max_depth: int = 64) -> TypeResolver:
        """Build a resolver from standalone XSD text."""
        return cls(XmlNodeParser.parse(source), max_depth=max_depth)

    # -------------------------------------------------------------------------
    # Lookup helpers
    # -------------------------------------------------------------------------

    def _declarations(self, tag: str) -> list[XmlNode]:
        return [child for child in self.schema if child.local_name == tag]

    def _complex_type_named(self, name: str) -> XmlNode | None:
        for node in self._declarations('complexType'):
            if node.get('name') == name:
                return node
        return None

    def find_anchor(self, name: str, kind: str | None = None) -> XmlNode | None:
        """Return the top-level declaration named name.

        With kind set, declarations of that kind win over same-named ones
        of other kinds (an element and its type often share a name).
        """
        candidates = [child for child in self.schema if child.get('name') == name]
        if not candidates:
            return None
        if kind is not None:
            for child in candidates:
                if child.local_name in ANCHOR_KINDS[kind]:
                    return child
        return candidates[0]

    def _occurs(self, node: XmlNode, attr_name: str) -> Occurs:
        raw = node.get(attr_name)
        if raw is None:
            return 1
        if raw == UNBOUNDED:
            return UNBOUNDED
        try:
            return int(raw)
        except ValueError as exc:
            raise MalformedDocument(
                f'invalid {attr_name}="{raw}" on element {node.get("name") or node.get("ref")}'
            ) from exc

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def resolve_type(self, type_name: str, kind: str | None = None) -> TypeNode:
        """Expand type_name into a TypeNode.

        Args:
            type_name: Declaration name, optionally prefixed. The prefix is
                only used as the namespace of a global element anchor.
            kind: 'type', 'element', 'attribute' or 'attributeGroup' to
                prefer declarations of that kind, None for the first match.

        Raises:
            CyclicSchema: If the expansion re-enters a name being expanded
                or nests deeper than max_depth.
        """
        key = (type_name, kind)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        qname = split_name(type_name)
        anchor = self.find_anchor(qname.local, kind)
        # an element and a type may share a name: the chain holds the declaration tag too
        link = (anchor.local_name if anchor is not None else None, qname.local)
        if link in self._chain:
            start = self._chain.index(link)
            raise CyclicSchema([local for _, local in self._chain[start:]] + [qname.local])
        if len(self._chain) >= self.max_depth:
            raise CyclicSchema([local for _, local in self._chain] + [qname.local], reason='depth')

        self._chain.append(link)
        try:
            result = self._resolve(qname, anchor)
        finally:
            self._chain.pop()

        logger.debug(
            'resolved %s: %d elements, %d attributes',
            type_name, len(result.elements), len(result.attributes),
        )
        self._cache[key] = result
        return result

    # -------------------------------------------------------------------------
    # Expansion
    # -------------------------------------------------------------------------

    def _resolve(self, qname: QualifiedName, anchor: XmlNode | None) -> TypeNode:
        complex_type = None
        name = namespace = None

        if anchor is not None:
            if anchor.local_name == 'element':
                name = anchor.get('name')
                namespace = qname.prefix or None

            alias = anchor.get('type')
            inline = anchor.child_local_named('complexType')
            if alias is None and not anchor.children:
                # terminal simple type
                return TypeNode(name=name, namespace=namespace)
            if alias is not None and inline is None:
                alias_name = split_name(alias).local
                complex_type = self._complex_type_named(alias_name)
                if complex_type is None:
                    inner = self.resolve_type(alias_name, kind='type')
                    return TypeNode(
                        name=name,
                        namespace=namespace,
                        type_name=alias_name,
                        elements=inner.elements,
                        attributes=inner.attributes,
                    )
                return self._expand(complex_type, name, namespace, type_name=alias_name)

            complex_type = inline
            if complex_type is None:
                simple_type = anchor if anchor.local_name == 'simpleType' else anchor.child_local_named('simpleType')
                if simple_type is not None:
                    return TypeNode(
                        name=name,
                        namespace=namespace,
                        type_name=self._restriction_base(simple_type),
                    )

        if complex_type is None:
            complex_type = self._complex_type_named(qname.local)
        if complex_type is None:
            return TypeNode()
        return self._expand(complex_type, name, namespace)

    def _expand(
        self,
        complex_type: XmlNode,
        name: str | None,
        namespace: str | None,
        type_name: str | None = None,
    ) -> TypeNode:
        attributes = self._attributes(complex_type) + self._attribute_groups(complex_type)
        return TypeNode(
            name=name,
            namespace=namespace,
            type_name=type_name,
            elements=tuple(self._sequence(complex_type)),
            attributes=tuple(attributes),
        )

    def _restriction_base(self, simple_type: XmlNode) -> str | None:
        restriction = simple_type.child_local_named('restriction')
        if restriction is None or restriction.get('base') is None:
            return None
        return split_name(restriction.get('base')).local

    def _sequence(self, complex_type: XmlNode) -> list[ElementSpec]:
        group = complex_type.child_local_named('sequence')
        if group is None:
            group = complex_type.child_local_named('all')
        if group is None:
            return []
        return [self._element(child) for child in group if child.local_name == 'element']

    def _element(self, node: XmlNode) -> ElementSpec:
        name = node.get('name')
        declared_type = split_name(node.get('type')) if node.get('type') else None
        ref = split_name(node.get('ref')) if node.get('ref') else None
        namespace = None
        type_def = None

        if ref is not None:
            namespace = ref.prefix or None
            referent = self.find_anchor(ref.local, 'element')
            if referent is not None:
                name = name or referent.get('name')
                if declared_type is None and referent.get('type'):
                    declared_type = split_name(referent.get('type'))
                type_def = self.resolve_type(str(ref), kind='element')
            name = name or ref.local
        elif declared_type is not None:
            type_def = self.resolve_type(declared_type.local, kind='type')
        elif node.child_local_named('complexType') is not None:
            type_def = self._expand(node.child_local_named('complexType'), None, None)

        if type_def is not None and not type_def.is_complex:
            type_def = None

        return ElementSpec(
            name=name,
            declared_type=declared_type,
            ref=ref,
            min_occurs=self._occurs(node, 'minOccurs'),
            max_occurs=self._occurs(node, 'maxOccurs'),
            namespace=namespace,
            type_def=type_def,
        )

    def _attributes(self, node: XmlNode) -> list[AttributeSpec]:
        result = []
        for child in node:
            if child.local_name != 'attribute':
                continue
            name = child.get('name')
            ref = split_name(child.get('ref')) if child.get('ref') else None
            if name is None and ref is None:
                continue
            declared_type = split_name(child.get('type')) if child.get('type') else None
            use = child.get('use')
            if ref is not None:
                referent = self.find_anchor(ref.local, 'attribute')
                if referent is not None:
                    name = name or referent.get('name')
                    if declared_type is None and referent.get('type'):
                        declared_type = split_name(referent.get('type'))
                    use = use or referent.get('use')
            namespace = None
            if ref is not None:
                name = name or ref.local
                namespace = ref.prefix or None
            result.append(AttributeSpec(
                name=name,
                declared_type=declared_type,
                ref=ref,
                namespace=namespace,
                use=use,
            ))
        return result

    def _attribute_groups(self, node: XmlNode, seen: set[str] | None = None) -> list[AttributeSpec]:
        seen = set() if seen is None else seen
        result = []
        for child in node:
            if child.local_name != 'attributeGroup' or not child.get('ref'):
                continue
            group_name = split_name(child.get('ref')).local
            if group_name in seen:
                continue
            seen.add(group_name)
            group = self.find_anchor(group_name, 'attributeGroup')
            if group is None:
                continue
            result.extend(self._attributes(group))
            result.extend(self._attribute_groups(group, seen))
        return result
