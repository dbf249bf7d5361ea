import pytest
from rdflib import Literal, Namespace, URIRef

from ldpstore import LdpGraph

dcterms = Namespace('http://purl.org/dc/terms/')
EX = Namespace('http://example.com/')


@pytest.fixture
def graph():
    graph = LdpGraph()
    graph.add((EX.foo, dcterms.title, Literal('Foo')))
    graph.add((EX.foo, dcterms.identifier, Literal('foo-1')))
    graph.add((EX.bar, dcterms.title, Literal('Bar')))
    return graph


def test_no_revision_tag_by_default(graph):
    assert graph.revision_tag is None


def test_revision_tag():
    assert LdpGraph(revision_tag='"abc"').revision_tag == '"abc"'


def test_match_all(graph):
    assert len(graph.match()) == 3


def test_match_subject(graph):
    assert set(graph.match(subject=EX.foo)) == {
        (EX.foo, dcterms.title, Literal('Foo')),
        (EX.foo, dcterms.identifier, Literal('foo-1')),
    }


def test_match_predicate_and_object(graph):
    assert graph.match(predicate=dcterms.title, obj=Literal('Bar')) == [(EX.bar, dcterms.title, Literal('Bar'))]


def test_match_no_results(graph):
    assert graph.match(subject=URIRef('http://example.com/baz')) == []


@pytest.mark.parametrize(('limit', 'expected'), [(0, 0), (1, 1), (2, 2), (10, 3)])
def test_match_limit(graph, limit, expected):
    assert len(graph.match(limit=limit)) == expected
