from ldpstore.errors import (
    ConfigError,
    ParseError,
    RequestError,
    SerializeError,
    StatusCodeError,
    StoreError,
)
from ldpstore.formats import FormatRegistry, default_parsers, default_serializers, serialize_sparql_update
from ldpstore.graph import LdpGraph
from ldpstore.store import Store
from ldpstore.transport import DefaultTransport, LocalFileTransport, RequestsTransport, Response

__all__ = [
    'ConfigError',
    'DefaultTransport',
    'FormatRegistry',
    'LdpGraph',
    'LocalFileTransport',
    'ParseError',
    'RequestError',
    'RequestsTransport',
    'Response',
    'SerializeError',
    'StatusCodeError',
    'Store',
    'StoreError',
    'default_parsers',
    'default_serializers',
    'serialize_sparql_update',
]
