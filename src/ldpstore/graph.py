from itertools import islice
from typing import Optional

from rdflib import Graph
from rdflib.term import Node


class LdpGraph(Graph):
    """An RDF graph that can remember the revision tag (HTTP entity tag) of
    the representation it was parsed from."""
    def __init__(self, revision_tag: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self.revision_tag: Optional[str] = revision_tag
        """Opaque version identifier, sent back as `If-Match` when a write
        or merge is made with `use_revision_tag=True`"""

    def match(
            self,
            subject: Optional[Node] = None,
            predicate: Optional[Node] = None,
            obj: Optional[Node] = None,
            limit: Optional[int] = None,
    ) -> list[tuple[Node, Node, Node]]:
        """Return the triples matching the given pattern. Any of `subject`,
        `predicate`, or `obj` that is `None` acts as a wildcard. If `limit`
        is given, at most that many triples are returned.

        ```pycon
        >>> from rdflib import URIRef, Literal
        >>> graph = LdpGraph()
        >>> s = URIRef('http://example.com/foo')
        >>> title = URIRef('http://purl.org/dc/terms/title')
        >>> _ = graph.add((s, title, Literal('Foo')))
        >>> graph.match(predicate=title)
        [(rdflib.term.URIRef('http://example.com/foo'), rdflib.term.URIRef('http://purl.org/dc/terms/title'), rdflib.term.Literal('Foo'))]
        ```
        """
        return list(islice(self.triples((subject, predicate, obj)), limit))
