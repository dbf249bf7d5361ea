"""Common test fixtures"""
from typing import Callable, Mapping, Optional

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from ldpstore.transport import Response

TURTLE = b'''
@prefix dcterms: <http://purl.org/dc/terms/> .

<> dcterms:title "Moonpig" ;
   dcterms:identifier "mp-1" .
<#part> dcterms:title "Moonpig, part 1" .
'''


class MockTransport:
    """Transport that records each request and answers it with a `Response`
    built by `respond`, or raises `error`."""

    def __init__(
            self,
            status_code: int = 200,
            headers: Mapping[str, str] = None,
            body: bytes = b'',
            error: Exception = None,
            respond: Callable = None,
    ):
        self.status_code = status_code
        self.headers = headers or {}
        self.body = body
        self.error = error
        self.respond = respond
        self.requests = []

    @property
    def last_request(self) -> dict:
        return self.requests[-1]

    async def __call__(self, method: str, iri: str, headers: Mapping[str, str], body: Optional[bytes] = None):
        self.requests.append({'method': method, 'iri': iri, 'headers': dict(headers), 'body': body})
        if self.error is not None:
            raise self.error
        if self.respond is not None:
            return self.respond(method, iri, headers, body)
        return Response(
            status_code=self.status_code,
            headers=CaseInsensitiveDict(self.headers),
            body=self.body,
        )


class RecordingParser:
    """Parse function that remembers its arguments, and returns a fixed
    graph or raises a fixed error."""

    def __init__(self, graph=None, error: Exception = None):
        self.graph = graph
        self.error = error
        self.calls = []

    def __call__(self, body: bytes, base_iri: str):
        self.calls.append((body, base_iri))
        if self.error is not None:
            raise self.error
        return self.graph

    @property
    def called(self) -> bool:
        return len(self.calls) > 0


@pytest.fixture
def mock_transport():
    return MockTransport


@pytest.fixture
def turtle_document():
    return TURTLE


@pytest.fixture
def monkeypatch_request(monkeypatch):
    def _monkeypatch_request(response):
        if isinstance(response, type):
            response = response()
        monkeypatch.setattr(requests.Session, 'request', lambda *args, **kwargs: response)
    return _monkeypatch_request


@pytest.fixture
def recording_parser():
    return RecordingParser
