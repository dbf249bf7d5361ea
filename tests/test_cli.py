import logging

import pytest
from rdflib import Graph

from ldpstore import LdpGraph, StatusCodeError
from ldpstore import cli

IRI = 'http://example.com/repo/moonpig'


class MockStore:
    def __init__(self, graph=None, error=None):
        self.graph = graph
        self.error = error
        self.calls = []

    async def _call(self, name, *args, **kwargs):
        self.calls.append((name, args, kwargs))
        if self.error is not None:
            raise self.error
        return self.graph

    async def read(self, *args, **kwargs):
        return await self._call('read', *args, **kwargs)

    async def write(self, *args, **kwargs):
        return await self._call('write', *args, **kwargs)

    async def merge(self, *args, **kwargs):
        return await self._call('merge', *args, **kwargs)

    async def delete(self, *args, **kwargs):
        return await self._call('delete', *args, **kwargs)


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    # main() points these loggers at the captured stderr of the current test
    for name in ('__main__', 'ldpstore'):
        logger = logging.getLogger(name)
        logger.handlers.clear()
        logger.propagate = True


@pytest.fixture
def use_store(monkeypatch):
    def _use_store(store):
        monkeypatch.setattr(cli, 'store_from_config', lambda config: store)
        return store
    return _use_store


@pytest.fixture
def turtle_file(tmp_path, turtle_document):
    path = tmp_path / 'moonpig.ttl'
    path.write_bytes(turtle_document)
    return path


def test_no_command(capsys):
    with pytest.raises(SystemExit) as e:
        cli.main([])
    assert e.value.code == 0
    assert 'usage: ldpstore' in capsys.readouterr().out


def test_get(use_store, capsys, turtle_document):
    graph = LdpGraph(revision_tag='"3"').parse(data=turtle_document, format='turtle', publicID=IRI)
    store = use_store(MockStore(graph=graph))

    cli.main(['get', IRI, '--etag', '--format', 'nt'])

    assert store.calls == [('read', (IRI,), {'forced_content_type': None, 'use_revision_tag': True})]
    out, err = capsys.readouterr()
    assert len(Graph().parse(data=out, format='nt')) == 3
    assert 'ETag: "3"' in err


def test_put(use_store, turtle_file):
    store = use_store(MockStore())

    cli.main(['put', IRI, str(turtle_file), '--etag', 'v1'])

    name, args, kwargs = store.calls[0]
    assert name == 'write'
    assert args[0] == IRI
    assert len(args[1]) == 3
    assert kwargs == {'method': None, 'etag': 'v1'}


def test_patch(use_store, turtle_file):
    store = use_store(MockStore())

    cli.main(['patch', IRI, str(turtle_file)])

    name, args, kwargs = store.calls[0]
    assert name == 'merge'
    assert len(args[1]) == 3
    assert kwargs == {'etag': None}


def test_delete(use_store):
    store = use_store(MockStore())
    cli.main(['-q', 'delete', IRI])
    assert store.calls == [('delete', (IRI,), {})]


def test_store_error_exits_nonzero(use_store):
    use_store(MockStore(error=StatusCodeError(404)))
    with pytest.raises(SystemExit) as e:
        cli.main(['delete', IRI])
    assert e.value.code == 1


def test_config_file(tmp_path, monkeypatch):
    config_file = tmp_path / 'config.yml'
    config_file.write_text('STORE:\n  USER_AGENT: ldpstore/test\n')
    configs = []

    def _store_from_config(config):
        configs.append(config)
        return MockStore()

    monkeypatch.setattr(cli, 'store_from_config', _store_from_config)
    cli.main(['-c', str(config_file), 'delete', IRI])
    assert configs == [{'STORE': {'USER_AGENT': 'ldpstore/test'}}]


def test_get_etag_without_revision_tag(use_store, capsys, turtle_document):
    graph = LdpGraph().parse(data=turtle_document, format='turtle', publicID=IRI)
    use_store(MockStore(graph=graph))

    cli.main(['get', IRI, '--etag'])

    _, err = capsys.readouterr()
    assert 'ETag' not in err


def test_patch_etag(use_store, turtle_file):
    store = use_store(MockStore())

    cli.main(['patch', IRI, str(turtle_file), '--etag', 'v2'])

    name, _, kwargs = store.calls[0]
    assert name == 'merge'
    assert kwargs == {'etag': 'v2'}
