"""Adapter for callers that still pass `(error, result)` callbacks instead
of awaiting the operation. The returned task is always the authoritative
result; the callback is only notified once the task is done."""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from rdflib import Graph
from rdflib.term import Node

from ldpstore.store import Store

logger = logging.getLogger(__name__)

Callback = Callable[[Optional[BaseException], Any], Any]


def with_callback(awaitable: Awaitable, callback: Optional[Callback] = None) -> asyncio.Future:
    """Schedule `awaitable` on the running event loop. If `callback` is
    given, it is called with `(error, None)` if the operation raised an
    exception, or `(None, result)` if it succeeded. A cancelled operation
    does not invoke the callback."""
    future = asyncio.ensure_future(awaitable)
    if callback is None:
        return future

    def _done(f: asyncio.Future):
        if f.cancelled():
            logger.debug('Operation cancelled; not invoking callback')
            return
        error = f.exception()
        if error is not None:
            callback(error, None)
        else:
            callback(None, f.result())

    future.add_done_callback(_done)
    return future


class CallbackStore:
    """Wraps a `Store` with callback-style methods. Each method must be
    called while an event loop is running, and returns the scheduled task."""

    def __init__(self, store: Store):
        self.store = store

    def graph(self, iri: str, callback: Callback = None, **options) -> asyncio.Future:
        return with_callback(self.store.read(iri, **options), callback)

    def match(
            self,
            iri: str,
            subject: Node = None,
            predicate: Node = None,
            obj: Node = None,
            callback: Callback = None,
            limit: int = None,
    ) -> asyncio.Future:
        return with_callback(self.store.match(iri, subject, predicate, obj, limit), callback)

    def add(self, iri: str, graph: Graph, callback: Callback = None, **options) -> asyncio.Future:
        return with_callback(self.store.write(iri, graph, **options), callback)

    def merge(self, iri: str, graph: Graph, callback: Callback = None, **options) -> asyncio.Future:
        return with_callback(self.store.merge(iri, graph, **options), callback)

    def delete(self, iri: str, callback: Callback = None) -> asyncio.Future:
        return with_callback(self.store.delete(iri), callback)
