# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Exceptions raised by genro_wsdl.

Hierarchy:
    WsdlException
    ├── MalformedDocument   - unparsable WSDL or missing structural nodes
    ├── OperationNotFound   - operation name absent from portType
    ├── CyclicSchema        - type expansion re-enters itself
    ├── MalformedEnvelope   - SOAP Body without exactly one child
    ├── SoapFault           - SOAP Body carrying a Fault
    └── UnresolvedElement   - flattener node without a local name

A type, attribute or group that cannot be found while resolving is NOT an
error: it yields an empty structure (built-in primitives are never declared
locally).
"""

from __future__ import annotations

from typing import Any


class WsdlException(Exception):
    """Base class for all genro_wsdl errors."""
    pass


class MalformedDocument(WsdlException):
    """The WSDL document cannot be parsed or lacks a required node.

    Example:
        - a document without <wsdl:portType>
        - text that is not well-formed XML
    """
    pass


class OperationNotFound(WsdlException):
    """The requested operation is not declared in the portType."""

    def __init__(self, operation: str):
        super().__init__(f'method ("{operation}") not exists in wsdl')
        self.operation = operation


class CyclicSchema(WsdlException):
    """Type expansion re-entered a type already being expanded."""

    def __init__(self, chain: list[str], reason: str = 'cycle'):
        self.chain = list(chain)
        if reason == 'depth':
            message = f'type nesting too deep: {" -> ".join(chain)}'
        else:
            message = f'cyclic type reference: {" -> ".join(chain)}'
        super().__init__(message)


class MalformedEnvelope(WsdlException):
    """A SOAP envelope whose Body does not hold exactly one element."""
    pass


class SoapFault(WsdlException):
    """A SOAP envelope whose Body carries a Fault.

    Attributes:
        faultcode: Content of <faultcode>, or None.
        faultstring: Content of <faultstring>, or None.
        detail: Flattened <detail> content, or None.
    """

    def __init__(self, faultcode: str | None, faultstring: str | None, detail: Any = None):
        super().__init__(f'{faultcode}: {faultstring}')
        self.faultcode = faultcode
        self.faultstring = faultstring
        self.detail = detail


class UnresolvedElement(WsdlException):
    """An XML node without a usable local name reached the flattener."""
    pass
