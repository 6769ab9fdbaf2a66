# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""genro_wsdl - WSDL driven SOAP envelope codec.

Reads a WSDL document, expands the types of its operations and converts
between SOAP envelopes and plain Python data.

Example:
    >>> from genro_wsdl import WsdlCatalog
    >>> catalog = WsdlCatalog.from_file('service.wsdl')
    >>> catalog.list_operations()
    ['GetUser', 'ListUsers']
    >>> xml = catalog.build_request('GetUser', {'id': '42'})
    >>> catalog.parse_response('GetUser', response_text)
    {'GetUserResponse': {'user': {'name': 'Ada'}}}
"""

from .catalog import WsdlCatalog
from .envelope import EnvelopeParser, EnvelopeSerializer
from .exceptions import (
    CyclicSchema,
    MalformedDocument,
    MalformedEnvelope,
    OperationNotFound,
    SoapFault,
    UnresolvedElement,
    WsdlException,
)
from .flattener import XmlFlattener, accumulate, deep_merge, flatten_xml
from .qname import QualifiedName, local_name, namespace_of, split_name
from .schema_types import (
    AttributeSpec,
    Complex,
    ElementSpec,
    Leaf,
    MessagePart,
    OperationSpec,
    TypeNode,
    as_many,
    one_or_many,
)
from .type_resolver import TypeResolver
from .xml_node import XmlNode, XmlNodeParser

__version__ = '0.1.0'

__all__ = [
    'AttributeSpec',
    'Complex',
    'CyclicSchema',
    'ElementSpec',
    'EnvelopeParser',
    'EnvelopeSerializer',
    'Leaf',
    'MalformedDocument',
    'MalformedEnvelope',
    'MessagePart',
    'OperationNotFound',
    'OperationSpec',
    'QualifiedName',
    'SoapFault',
    'TypeNode',
    'TypeResolver',
    'UnresolvedElement',
    'WsdlCatalog',
    'WsdlException',
    'XmlFlattener',
    'XmlNode',
    'XmlNodeParser',
    'accumulate',
    'as_many',
    'deep_merge',
    'flatten_xml',
    'local_name',
    'namespace_of',
    'one_or_many',
    'split_name',
]
