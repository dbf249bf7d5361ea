import asyncio
import logging
from http import HTTPStatus
from pathlib import Path
from typing import Awaitable, Callable, Mapping, NamedTuple, Optional
from urllib.parse import unquote

from requests import Session
from requests.auth import AuthBase
from requests.exceptions import ConnectionError
from requests.structures import CaseInsensitiveDict
from urlobject import URLObject

logger = logging.getLogger(__name__)

# media types for local files, by file suffix
SUFFIX_MEDIA_TYPES = {
    '.json': 'application/ld+json',
    '.jsonld': 'application/ld+json',
    '.nt': 'application/n-triples',
    '.ttl': 'text/turtle',
}


class Response(NamedTuple):
    """What a transport hands back to the `Store` once a request completes."""

    status_code: int
    """Numeric status code. Local, non-network transports use 0."""

    headers: CaseInsensitiveDict
    """Response headers, looked up without regard to case"""

    body: Optional[bytes] = None
    """Raw response body"""

    reason: str = ''
    """Reason phrase (e.g., "Not Found"), if the transport has one"""


Transport = Callable[[str, str, Mapping[str, str], Optional[bytes]], Awaitable[Response]]
"""Async callable taking `(method, iri, headers, body)` and returning a
`Response`. Transport-level failures are raised as exceptions."""


class SessionHeaderAttribute:
    """Descriptor that maps an attribute to a session header name. Requires
    the instance to have a `session` attribute with a `headers` attribute whose
    value is a mapping that supports the methods `get()` and `update()`, plus
    the `del` operator. Setting the attribute to `None` leaves the header
    untouched."""

    def __init__(self, header_name: str):
        self.header_name = header_name
        """The HTTP header name"""

    def __set_name__(self, owner, name):
        self.name = name

    def __get__(self, instance, owner):
        if instance is None:
            return self
        return instance.session.headers.get(self.header_name, None)

    def __set__(self, instance, value):
        if value is not None:
            instance.session.headers.update({self.header_name: str(value)})

    def __delete__(self, instance):
        try:
            del instance.session.headers[self.header_name]
        except KeyError:
            pass


class RequestsTransport:
    """HTTP transport backed by a Requests `Session`. The blocking request
    runs in a worker thread so the calling coroutine only suspends."""
    ua_string = SessionHeaderAttribute('User-Agent')
    """`User-Agent` header value"""
    delegated_user = SessionHeaderAttribute('On-Behalf-Of')
    """`On-Behalf-Of` header value"""
    session: Session
    """Underlying Requests library Session object, or a subclass thereof"""

    def __init__(
        self,
        auth: AuthBase = None,
        server_cert: str = None,
        ua_string: str = None,
        on_behalf_of: str = None,
        session: Session = None,
    ):
        self.session = session if session is not None else Session()
        if auth is not None:
            self.session.auth = auth
        if server_cert is not None:
            self.session.verify = server_cert

        self.ua_string = ua_string
        self.delegated_user = on_behalf_of

    def send(self, method: str, iri: str, headers: Mapping[str, str], body: Optional[bytes] = None) -> Response:
        """Send the request synchronously."""
        logger.debug(f'{method} {iri}')
        try:
            response = self.session.request(method, iri, headers=dict(headers), data=body)
        except ConnectionError as e:
            message = ' '.join(str(arg) for arg in e.args)
            logger.error(message)
            raise
        reason = response.reason or _phrase(response.status_code)
        logger.debug(f'{response.status_code} {reason}')
        return Response(
            status_code=response.status_code,
            headers=CaseInsensitiveDict(response.headers),
            body=response.content,
            reason=reason,
        )

    async def __call__(self, method: str, iri: str, headers: Mapping[str, str], body: Optional[bytes] = None) -> Response:
        return await asyncio.to_thread(self.send, method, iri, headers, body)


class LocalFileTransport:
    """Read-only transport for `file://` IRIs. There is no HTTP exchange
    for a local load, so every response has status code 0."""

    def send(self, method: str, iri: str, headers: Mapping[str, str], body: Optional[bytes] = None) -> Response:
        if method != 'GET':
            raise ValueError(f'Method {method} is not supported for local resource {iri}')
        path = Path(unquote(str(URLObject(iri).path)))
        logger.debug(f'Loading {path}')
        response_headers = CaseInsensitiveDict()
        suffix_type = SUFFIX_MEDIA_TYPES.get(path.suffix.lower())
        if suffix_type is not None:
            response_headers['Content-Type'] = suffix_type
        return Response(status_code=0, headers=response_headers, body=path.read_bytes())

    async def __call__(self, method: str, iri: str, headers: Mapping[str, str], body: Optional[bytes] = None) -> Response:
        return await asyncio.to_thread(self.send, method, iri, headers, body)


class DefaultTransport:
    """Sends `file://` IRIs to a `LocalFileTransport`, and everything else
    to a `RequestsTransport`. Keyword arguments are passed through to the
    `RequestsTransport` constructor."""

    def __init__(self, http: RequestsTransport = None, local: LocalFileTransport = None, **kwargs):
        self.http = http if http is not None else RequestsTransport(**kwargs)
        self.local = local if local is not None else LocalFileTransport()

    def select(self, iri: str) -> Transport:
        if URLObject(iri).scheme == 'file':
            return self.local
        return self.http

    async def __call__(self, method: str, iri: str, headers: Mapping[str, str], body: Optional[bytes] = None) -> Response:
        return await self.select(iri)(method, iri, headers, body)


def _phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return ''
