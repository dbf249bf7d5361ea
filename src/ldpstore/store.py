import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional

from rdflib import Graph
from rdflib.term import Node
from requests.structures import CaseInsensitiveDict

from ldpstore.errors import ConfigError, ParseError, RequestError, SerializeError, StatusCodeError
from ldpstore.formats import (
    FormatRegistry,
    SPARQL_UPDATE,
    default_parsers,
    default_serializers,
    media_type,
    serialize_sparql_update,
)
from ldpstore.transport import DefaultTransport, Response, Transport

logger = logging.getLogger(__name__)


def is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


async def resolve(value: Any) -> Any:
    """Await `value` if it is awaitable; format functions may be either
    plain functions or coroutine functions."""
    if inspect.isawaitable(value):
        return await value
    return value


@dataclass(frozen=True)
class Store:
    """Reads and writes RDF graphs from Linked Data Platform resources.

    Each operation is a coroutine that makes exactly one request through
    the `transport`, and at most one call to a parse or serialize function.
    A `Store` has no mutable state, so operations may run concurrently.

    ```python
    store = Store()
    graph = await store.read('http://localhost:8080/rest/foo', use_revision_tag=True)
    graph.add((subject, dcterms.title, Literal('Foo')))
    await store.write('http://localhost:8080/rest/foo', graph, use_revision_tag=True)
    ```
    """

    parsers: FormatRegistry = field(default_factory=default_parsers)
    """Parse functions, by media type. Every key is sent in the `Accept`
    header on reads."""
    serializers: FormatRegistry = field(default_factory=default_serializers)
    """Serialize functions, by media type"""
    default_read_format: str = 'text/turtle'
    """Parse as this media type if the response type is missing or unknown"""
    default_write_format: str = 'text/turtle'
    """Media type of request bodies for `write()`"""
    default_patch_format: Optional[str] = None
    """Media type of request bodies for `merge()`; `default_write_format`
    when not set"""
    transport: Transport = field(default_factory=DefaultTransport)
    """Async callable that performs the actual request"""
    allow_status_zero: bool = True
    """Treat status code 0 on a read as success. Local loads, which have
    no HTTP exchange, report 0."""

    def __post_init__(self):
        # accept plain mappings, but always hold read-only registries
        for name in ('parsers', 'serializers'):
            registry = getattr(self, name)
            if not isinstance(registry, FormatRegistry):
                object.__setattr__(self, name, FormatRegistry(registry))
        if self.default_patch_format is None:
            object.__setattr__(self, 'default_patch_format', self.default_write_format)

        if self.parsers.lookup(self.default_read_format) is None:
            raise ConfigError(f'No parser registered for default read format "{self.default_read_format}"')
        if self.serializers.lookup(self.default_write_format) is None:
            raise ConfigError(f'No serializer registered for default write format "{self.default_write_format}"')

    @property
    def accept(self) -> str:
        """Value of the `Accept` header sent on reads."""
        return ', '.join(self.parsers)

    def select_read_format(self, response: Response, forced_content_type: Optional[str] = None) -> str:
        """Choose the media type to parse `response` as. The first registered
        candidate wins: `forced_content_type`, then the media type of the
        response's `Content-Type` header. If neither is registered, returns
        `default_read_format`."""
        candidates = (
            forced_content_type,
            media_type(response.headers.get('Content-Type')),
        )
        for candidate in candidates:
            if self.parsers.lookup(candidate) is not None:
                return candidate
        return self.default_read_format

    def select_patch_format(self) -> tuple[str, Callable]:
        serializer = self.serializers.lookup(self.default_patch_format)
        if serializer is not None:
            return self.default_patch_format, serializer
        logger.debug(f'No serializer for "{self.default_patch_format}", falling back to {SPARQL_UPDATE}')
        return SPARQL_UPDATE, serialize_sparql_update

    async def request(
            self,
            method: str,
            iri: str,
            headers: Mapping[str, str],
            body: Optional[bytes] = None,
            allow_status_zero: bool = False,
    ) -> Response:
        """Send a request through the `transport`. Raises a `RequestError`
        if the transport fails, and a `StatusCodeError` if the status code
        is not 2xx (or 0, when `allow_status_zero` is true). The returned
        response's headers are case-insensitive."""
        logger.debug(f'{method} {iri} {dict(headers)}')
        try:
            response = await self.transport(method, iri, headers, body)
        except Exception as e:
            logger.debug(f'{method} {iri} failed: {e}')
            raise RequestError(e) from e

        status_code = response.status_code
        if not is_success(status_code) and not (allow_status_zero and status_code == 0):
            error = StatusCodeError(status_code, response.reason)
            logger.debug(f'{method} {iri} returned {error}')
            raise error
        # transports may return header names in any case
        return response._replace(headers=CaseInsensitiveDict(response.headers or {}))

    async def read(self, iri: str, forced_content_type: str = None, use_revision_tag: bool = False) -> Graph:
        """Retrieve the graph at `iri`.

        The response body is parsed according to `select_read_format()`,
        using `iri` as the base IRI. If `use_revision_tag` is true and the
        response has an `ETag` header, its value is stored as the graph's
        `revision_tag`.

        Raises a `RequestError`, `StatusCodeError`, or `ParseError`."""
        response = await self.request(
            'GET', iri,
            headers={'Accept': self.accept},
            allow_status_zero=self.allow_status_zero,
        )

        content_type = self.select_read_format(response, forced_content_type)
        logger.debug(f'Parsing {iri} as {content_type}')
        parse = self.parsers.lookup(content_type)
        try:
            graph = await resolve(parse(response.body or b'', iri))
        except Exception as e:
            logger.debug(f'Unable to parse {iri} as {content_type}: {e}')
            raise ParseError(e, content_type) from e

        if use_revision_tag:
            revision_tag = response.headers.get('ETag')
            if revision_tag is not None:
                graph.revision_tag = revision_tag

        return graph

    async def match(
            self,
            iri: str,
            subject: Optional[Node] = None,
            predicate: Optional[Node] = None,
            obj: Optional[Node] = None,
            limit: Optional[int] = None,
    ) -> list[tuple[Node, Node, Node]]:
        """Read the graph at `iri` and return the triples that match the
        given pattern, via the graph's `match()` method."""
        graph = await self.read(iri)
        return graph.match(subject, predicate, obj, limit)

    async def write(
            self,
            iri: str,
            graph: Graph,
            method: str = None,
            etag: str = None,
            use_revision_tag: bool = False,
    ) -> Graph:
        """Replace (or create) the resource at `iri` with the contents of
        `graph`, serialized as `default_write_format`. The request method is
        `PUT` unless `method` is given. Returns `graph` itself.

        Raises a `SerializeError` (before sending anything), `RequestError`,
        or `StatusCodeError`."""
        content_type = self.default_write_format
        return await self.send_graph(
            method or 'PUT', iri, graph,
            content_type=content_type,
            serialize=self.serializers.lookup(content_type),
            etag=etag,
            use_revision_tag=use_revision_tag,
        )

    async def merge(self, iri: str, graph: Graph, etag: str = None, use_revision_tag: bool = False) -> Graph:
        """Send the contents of `graph` as a `PATCH` to `iri`, serialized as
        `default_patch_format` (or as a SPARQL Update `INSERT DATA` if that
        format has no registered serializer). Returns `graph` itself.

        Raises a `SerializeError` (before sending anything), `RequestError`,
        or `StatusCodeError`."""
        content_type, serialize = self.select_patch_format()
        return await self.send_graph(
            'PATCH', iri, graph,
            content_type=content_type,
            serialize=serialize,
            etag=etag,
            use_revision_tag=use_revision_tag,
        )

    async def send_graph(
            self,
            method: str,
            iri: str,
            graph: Graph,
            content_type: str,
            serialize: Callable,
            etag: str = None,
            use_revision_tag: bool = False,
    ) -> Graph:
        headers = {'Content-Type': content_type}
        if_match = conditional_tag(graph, etag, use_revision_tag)
        if if_match is not None:
            headers['If-Match'] = if_match

        try:
            body = await resolve(serialize(graph))
        except Exception as e:
            logger.debug(f'Unable to serialize graph for {iri} as {content_type}: {e}')
            raise SerializeError(e, content_type) from e

        await self.request(method, iri, headers=headers, body=body)
        return graph

    async def delete(self, iri: str) -> None:
        """Delete the resource at `iri`. Raises a `RequestError` or
        `StatusCodeError`."""
        await self.request('DELETE', iri, headers={})

    async def remove(self, iri: str, graph: Graph) -> None:
        """Remove the triples in `graph` from the resource at `iri`.

        Not implemented: there is no registered patch format that can
        express deletions."""
        raise NotImplementedError('remove() is not implemented')

    async def remove_matches(
            self,
            iri: str,
            subject: Optional[Node] = None,
            predicate: Optional[Node] = None,
            obj: Optional[Node] = None,
    ) -> None:
        """Remove all triples matching the pattern from the resource at `iri`.

        Not implemented, for the same reason as `remove()`."""
        raise NotImplementedError('remove_matches() is not implemented')


def conditional_tag(graph: Graph, etag: Optional[str] = None, use_revision_tag: bool = False) -> Optional[str]:
    """Return the value for the `If-Match` header, if any. An explicit
    `etag` takes precedence over the revision tag carried by `graph`."""
    candidates = (
        etag,
        getattr(graph, 'revision_tag', None) if use_revision_tag else None,
    )
    return next((tag for tag in candidates if tag is not None), None)
