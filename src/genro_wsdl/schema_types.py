# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Type model for resolved WSDL schemas.

Every tree built by TypeResolver and WsdlCatalog is made of the frozen
dataclasses below. They hold no back references, so two resolutions of the
same name compare equal.

Shapes:
    A spec (ElementSpec or MessagePart) is either a Leaf, carrying only a
    primitive hint such as 'string', or Complex, wrapping the TypeNode with
    its elements and attributes. Codecs dispatch on spec.shape instead of
    probing for empty structures.

OneOrMany:
    A message with a single part is exposed as the bare MessagePart, a
    message with several parts as a tuple. Use as_many() to always get a
    tuple, or match on the value:

        match operation.request:
            case MessagePart():
                ...
            case tuple():
                ...
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, TypeVar, Union

from .qname import QualifiedName

UNBOUNDED = 'unbounded'

T = TypeVar('T')

OneOrMany = Union[T, tuple[T, ...]]

Occurs = Union[int, str]


# =============================================================================
# Shapes
# =============================================================================


@dataclass(frozen=True)
class Leaf:
    """Simple value. primitive_hint is the declared type's local name, if any."""

    primitive_hint: str | None = None


@dataclass(frozen=True)
class Complex:
    """Structured value described by a TypeNode."""

    type_node: TypeNode


TypeShape = Union[Leaf, Complex]


class _Shaped:
    """Mixin computing the shape of a spec from declared_type and type_def."""

    @property
    def shape(self) -> TypeShape:
        type_def = self.type_def
        if type_def is not None and type_def.is_complex:
            return Complex(type_def)
        if self.declared_type is not None:
            return Leaf(self.declared_type.local)
        if type_def is not None and type_def.type_name:
            return Leaf(type_def.type_name)
        return Leaf()

    @property
    def wire_tag(self) -> QualifiedName:
        """Tag written on the wire.

        A named TypeNode (global element anchor) names its own tag; anything
        else takes the element's or part's own name and namespace.
        """
        type_def = self.type_def
        if type_def is not None and type_def.name:
            return QualifiedName(type_def.namespace or '', type_def.name)
        return QualifiedName(self.namespace or '', self.name)


# =============================================================================
# Specs
# =============================================================================


@dataclass(frozen=True)
class AttributeSpec:
    """An xs:attribute declaration, ref already overlaid."""

    name: str
    declared_type: QualifiedName | None = None
    ref: QualifiedName | None = None
    namespace: str | None = None
    use: str | None = None


@dataclass(frozen=True)
class ElementSpec(_Shaped):
    """An element of a sequence, ref already overlaid."""

    name: str
    declared_type: QualifiedName | None = None
    ref: QualifiedName | None = None
    min_occurs: Occurs = 1
    max_occurs: Occurs = 1
    namespace: str | None = None
    type_def: TypeNode | None = None

    @property
    def unbounded(self) -> bool:
        return self.max_occurs == UNBOUNDED


@dataclass(frozen=True)
class TypeNode:
    """Expanded structure of a schema type.

    Attributes:
        name: Wire tag of a global element anchor. None for anonymous and
            referenced complex types: the enclosing spec names the tag.
        namespace: Prefix for name, when the caller resolved a prefixed name.
        type_name: Aliased type of a simple-alias anchor.
        elements: Sequence elements in declaration order.
        attributes: Direct attributes followed by attribute-group members.
    """

    name: str | None = None
    namespace: str | None = None
    type_name: str | None = None
    elements: tuple[ElementSpec, ...] = ()
    attributes: tuple[AttributeSpec, ...] = ()

    @property
    def is_complex(self) -> bool:
        return bool(self.elements or self.attributes)

    def element(self, name: str) -> ElementSpec | None:
        for element in self.elements:
            if element.name == name:
                return element
        return None

    def attribute(self, name: str) -> AttributeSpec | None:
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute
        return None


@dataclass(frozen=True)
class MessagePart(_Shaped):
    """One part of a WSDL message."""

    name: str
    namespace: str | None = None
    declared_type: QualifiedName | None = None
    type_def: TypeNode | None = None


@dataclass(frozen=True)
class OperationSpec:
    name: str
    request: OneOrMany[MessagePart]
    response: OneOrMany[MessagePart]

    def to_dict(self) -> dict[str, Any]:
        """Plain dict form, JSON serializable."""
        return spec_to_dict(self)


# =============================================================================
# Helpers
# =============================================================================


def one_or_many(items: Iterable[T]) -> OneOrMany[T]:
    """Collapse a single item to itself, keep several as a tuple."""
    items = tuple(items)
    if len(items) == 1:
        return items[0]
    return items


def as_many(value: OneOrMany[T]) -> tuple[T, ...]:
    """Inverse of one_or_many: always a tuple."""
    if isinstance(value, tuple):
        return value
    return (value,)


def spec_to_dict(obj: Any) -> Any:
    """Convert a spec tree to dicts/lists/strings, dropping None fields."""
    if isinstance(obj, QualifiedName):
        return str(obj)
    if isinstance(obj, tuple):
        return [spec_to_dict(item) for item in obj]
    if hasattr(obj, '__dataclass_fields__'):
        result = {}
        for field_name in obj.__dataclass_fields__:
            value = getattr(obj, field_name)
            if value is None or value == ():
                continue
            result[field_name] = spec_to_dict(value)
        return result
    return obj
