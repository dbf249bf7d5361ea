import pytest

from ldpstore import ConfigError, FormatRegistry, Store
from ldpstore.store import conditional_tag, is_success
from ldpstore.transport import DefaultTransport


def test_default_store():
    store = Store()
    assert isinstance(store.parsers, FormatRegistry)
    assert isinstance(store.serializers, FormatRegistry)
    assert isinstance(store.transport, DefaultTransport)
    assert store.default_read_format == 'text/turtle'
    assert store.default_write_format == 'text/turtle'
    assert store.default_patch_format == 'text/turtle'
    assert store.allow_status_zero is True
    assert store.accept == 'application/ld+json, application/n-triples, text/turtle'


def test_store_is_immutable():
    store = Store()
    with pytest.raises(AttributeError):
        store.default_read_format = 'application/ld+json'  # noqa


def test_store_wraps_plain_mappings():
    def parse(body, base_iri):
        pass

    def serialize(graph):
        pass

    store = Store(parsers={'text/turtle': parse}, serializers={'text/turtle': serialize})
    assert isinstance(store.parsers, FormatRegistry)
    assert store.parsers.lookup('text/turtle') is parse
    assert store.serializers.lookup('text/turtle') is serialize


def test_patch_format_defaults_to_write_format():
    store = Store(default_write_format='application/n-triples')
    assert store.default_patch_format == 'application/n-triples'


def test_unregistered_default_read_format():
    with pytest.raises(ConfigError):
        Store(default_read_format='text/html')


def test_unregistered_default_write_format():
    with pytest.raises(ConfigError):
        Store(default_write_format='text/html')


def test_unregistered_patch_format_is_allowed():
    store = Store(default_patch_format='application/x-patch')
    assert store.select_patch_format()[0] == 'application/sparql-update'


@pytest.mark.parametrize(
    ('status_code', 'expected'),
    [
        (0, False),
        (199, False),
        (200, True),
        (204, True),
        (299, True),
        (300, False),
        (404, False),
    ]
)
def test_is_success(status_code, expected):
    assert is_success(status_code) is expected


class TaggedGraph:
    revision_tag = 'from-graph'


def test_conditional_tag():
    graph = TaggedGraph()
    assert conditional_tag(graph) is None
    assert conditional_tag(graph, etag='v1') == 'v1'
    assert conditional_tag(graph, use_revision_tag=True) == 'from-graph'
    assert conditional_tag(graph, etag='v1', use_revision_tag=True) == 'v1'
    assert conditional_tag(object(), use_revision_tag=True) is None
