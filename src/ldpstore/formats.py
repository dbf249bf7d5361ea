"""Registries of RDF parsers and serializers, keyed by media type."""
import logging
from collections.abc import Mapping
from typing import Any, Awaitable, Callable, Iterator, Optional, Union

from rdflib import Graph

from ldpstore.graph import LdpGraph

logger = logging.getLogger(__name__)

ParseFunction = Callable[[bytes, str], Union[Graph, Awaitable[Graph]]]
SerializeFunction = Callable[[Graph], Union[bytes, Awaitable[bytes]]]

SPARQL_UPDATE = 'application/sparql-update'


class FormatRegistry(Mapping):
    """Read-only mapping from media type (e.g., "text/turtle") to a parse
    or serialize function. Iterating over the registry yields the media
    types in the order they were given.

    Use `lookup()` to check for a media type; it returns `None` instead of
    raising a `KeyError` when there is no function registered:

    ```pycon
    >>> registry = FormatRegistry({'text/turtle': parse_turtle})
    >>> registry.lookup('text/turtle') is parse_turtle
    True
    >>> registry.lookup('text/html') is None
    True
    ```
    """

    def __init__(self, functions: Optional[Mapping[str, Callable]] = None):
        self._functions: dict[str, Callable] = dict(functions or {})

    def __getitem__(self, media_type: str) -> Callable:
        return self._functions[media_type]

    def __iter__(self) -> Iterator[str]:
        return iter(self._functions)

    def __len__(self) -> int:
        return len(self._functions)

    def __repr__(self):
        return f'{self.__class__.__name__}({list(self._functions)!r})'

    def lookup(self, media_type: Optional[str]) -> Optional[Callable]:
        """Return the function registered for `media_type`, or `None`."""
        if media_type is None:
            return None
        return self._functions.get(media_type)


def media_type(content_type: Optional[str]) -> Optional[str]:
    """Strip any parameters from a `Content-Type` header value.

    ```pycon
    >>> media_type('text/turtle; charset=utf-8')
    'text/turtle'
    ```
    """
    if content_type is None:
        return None
    return content_type.split(';')[0].strip() or None


def rdflib_parser(rdflib_format: str) -> ParseFunction:
    """Build a parse function that uses the named rdflib parser plugin,
    resolving relative IRIs against the base IRI."""
    def _parse(body: bytes, base_iri: str) -> LdpGraph:
        return LdpGraph().parse(data=body, format=rdflib_format, publicID=base_iri)

    _parse.__name__ = f'parse_{rdflib_format.replace("-", "")}'
    return _parse


def rdflib_serializer(rdflib_format: str, **kwargs: Any) -> SerializeFunction:
    """Build a serialize function that uses the named rdflib serializer
    plugin and returns UTF-8 encoded bytes."""
    def _serialize(graph: Graph) -> bytes:
        return graph.serialize(format=rdflib_format, encoding='utf-8', **kwargs)

    _serialize.__name__ = f'serialize_{rdflib_format.replace("-", "")}'
    return _serialize


parse_jsonld = rdflib_parser('json-ld')
parse_ntriples = rdflib_parser('nt')
parse_turtle = rdflib_parser('turtle')

serialize_jsonld = rdflib_serializer('json-ld')
serialize_ntriples = rdflib_serializer('nt')
serialize_turtle = rdflib_serializer('turtle')


def serialize_sparql_update(graph: Graph) -> bytes:
    """Serialize `graph` as a SPARQL Update `INSERT DATA { ... }` statement.
    This can only express additions; there is no corresponding form for
    removing triples."""
    triples = graph.serialize(format='nt').strip()
    update = f'INSERT DATA {{ {triples} }}'
    logger.debug(update)
    return update.encode('utf-8')


def default_parsers() -> FormatRegistry:
    return FormatRegistry({
        'application/ld+json': parse_jsonld,
        'application/n-triples': parse_ntriples,
        'text/turtle': parse_turtle,
    })


def default_serializers() -> FormatRegistry:
    return FormatRegistry({
        'application/ld+json': serialize_jsonld,
        'application/n-triples': serialize_ntriples,
        SPARQL_UPDATE: serialize_sparql_update,
        'text/turtle': serialize_turtle,
    })
