#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import asyncio
import importlib.metadata
import logging
import logging.config
import sys
from argparse import ArgumentParser, FileType, Namespace
from datetime import datetime

from rdflib import Graph
from rdflib.util import guess_format

from ldpstore.config import load_config, logging_options, store_from_config
from ldpstore.errors import ConfigError, StoreError
from ldpstore.graph import LdpGraph
from ldpstore.store import Store

logger = logging.getLogger(__name__)
now = datetime.utcnow().strftime('%Y%m%d%H%M%S')
version = importlib.metadata.version('ldp-store')


def read_graph(file, base_iri: str) -> Graph:
    rdf_format = guess_format(file.name) or 'turtle'
    logger.debug(f'Reading {file.name} as {rdf_format}')
    return LdpGraph().parse(file, format=rdf_format, publicID=base_iri)


async def get(store: Store, args: Namespace):
    graph = await store.read(args.iri, forced_content_type=args.content_type, use_revision_tag=args.etag)
    logger.info(f'Retrieved {len(graph)} triple(s) from {args.iri}')
    if args.etag and graph.revision_tag is not None:
        print(f'ETag: {graph.revision_tag}', file=sys.stderr)
    print(graph.serialize(format=args.format))


async def put(store: Store, args: Namespace):
    graph = read_graph(args.file, args.iri)
    await store.write(args.iri, graph, method=args.method, etag=args.etag)
    logger.info(f'Wrote {len(graph)} triple(s) to {args.iri}')


async def patch(store: Store, args: Namespace):
    graph = read_graph(args.file, args.iri)
    await store.merge(args.iri, graph, etag=args.etag)
    logger.info(f'Merged {len(graph)} triple(s) into {args.iri}')


async def delete(store: Store, args: Namespace):
    await store.delete(args.iri)
    logger.info(f'Deleted {args.iri}')


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog='ldpstore',
        description='Read and write RDF graphs in Linked Data Platform resources.'
    )
    parser.set_defaults(cmd_name=None)
    parser.add_argument(
        '-c', '--config',
        help='Path to configuration file.',
        action='store',
        dest='config_file',
        type=FileType('r')
    )
    parser.add_argument(
        '-V', '--version',
        help='Print version and exit.',
        action='version',
        version=version
    )
    parser.add_argument(
        '-v', '--verbose',
        help='increase the verbosity of the status output',
        action='store_true'
    )
    parser.add_argument(
        '-q', '--quiet',
        help='decrease the verbosity of the status output',
        action='store_true'
    )

    subparsers = parser.add_subparsers(title='commands')

    get_parser = subparsers.add_parser('get', help='retrieve a resource and print its graph')
    get_parser.add_argument('iri', help='resource to retrieve')
    get_parser.add_argument(
        '--content-type',
        help='parse the response as this media type, if it is supported',
        dest='content_type',
    )
    get_parser.add_argument(
        '--format',
        help='rdflib output format (default: turtle)',
        default='turtle',
    )
    get_parser.add_argument(
        '--etag',
        help='print the ETag of the resource to stderr',
        action='store_true',
    )
    get_parser.set_defaults(cmd_name='get', cmd=get)

    put_parser = subparsers.add_parser('put', help='replace a resource with the contents of an RDF file')
    put_parser.add_argument('iri', help='resource to replace')
    put_parser.add_argument('file', help='RDF file to send', type=FileType('rb'))
    put_parser.add_argument('--method', help='HTTP method to use instead of PUT')
    put_parser.add_argument('--etag', help='only replace if the resource has this ETag', metavar='TAG')
    put_parser.set_defaults(cmd_name='put', cmd=put)

    patch_parser = subparsers.add_parser('patch', help='add the contents of an RDF file to a resource')
    patch_parser.add_argument('iri', help='resource to update')
    patch_parser.add_argument('file', help='RDF file to send', type=FileType('rb'))
    patch_parser.add_argument('--etag', help='only update if the resource has this ETag', metavar='TAG')
    patch_parser.set_defaults(cmd_name='patch', cmd=patch)

    delete_parser = subparsers.add_parser('delete', help='delete a resource')
    delete_parser.add_argument('iri', help='resource to delete')
    delete_parser.set_defaults(cmd_name='delete', cmd=delete)

    return parser


def main(argv=None):
    """Parse args and handle options."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # if no subcommand was selected, display the help
    if args.cmd_name is None:
        parser.print_help()
        sys.exit(0)

    try:
        config = load_config(args.config_file) if args.config_file is not None else {}
    except ConfigError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)

    options = logging_options(config, log_filename=f'ldpstore.{args.cmd_name}.{now}.log')
    # manipulate console verbosity
    console = options.get('handlers', {}).get('console')
    if console is not None:
        if args.verbose:
            console['level'] = 'DEBUG'
        elif args.quiet:
            console['level'] = 'WARNING'
    logging.config.dictConfig(options)

    try:
        store = store_from_config(config)
        asyncio.run(args.cmd(store, args))
    except StoreError as e:
        # something failed, exit with non-zero status
        logger.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        # aborted due to Ctrl+C
        sys.exit(2)


if __name__ == "__main__":
    main()
