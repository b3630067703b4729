# -*- coding: utf-8 -*-
#
# Copyright (c) 2026~2999 - Cologler <skyoflw@gmail.com>
# ----------
#
# ----------

import argparse
import logging
import os
import sqlite3
import sys
from functools import partial

from pydantic import ValidationError

from . import __version__
from .cache import RssCache
from .cfg import ConfigError, ConfigHelper
from .controller import Controller
from .core import configure_logger, fetch_feed, get_logger
from .opml import OpmlError, load_document
from .settings import Settings
from .stores import StoreError
from .subscriptions import SubscriptionList
from .view import ConsoleView

PROGRAM_NAME = 'rssreader'


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=PROGRAM_NAME, description=f'{PROGRAM_NAME} {__version__}')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('-i', dest='importfile', metavar='FILE', help='import OPML file')
    group.add_argument('-e', dest='export', action='store_true', help='export OPML feed to stdout')
    parser.add_argument('-u', dest='url_file', metavar='URLFILE', help='read RSS feed URLs from URLFILE')
    parser.add_argument('-c', dest='cache_file', metavar='CACHEFILE', help='use CACHEFILE as cache file')
    parser.add_argument('-r', '--reload', action='store_true', help='reload all feeds on startup')
    parser.add_argument('-v', '--verbose', action='store_true', help='verbose logging')
    return parser

def _load_config_helper(args: argparse.Namespace) -> ConfigHelper:
    # paths given on the command line are relative to the working directory
    overrides = {
        k: os.path.abspath(v) for k, v in (('url_file', args.url_file), ('cache_file', args.cache_file)) if v
    }
    try:
        settings = Settings(**overrides)
    except ValidationError as e:
        raise ConfigError(str(e)) from e
    config_helper = ConfigHelper(settings)
    config_helper.ensure_config_dir()
    return config_helper

def import_opml(subscriptions: SubscriptionList, path: str) -> int:
    try:
        document = load_document(path)
    except OpmlError as error:
        print(f'Error: {error}', file=sys.stderr)
        return 1
    added = subscriptions.import_opml(document)
    print(f'Import of {path} finished, {len(added)} new feeds.')
    return 0

def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logger(logging.INFO if args.verbose else logging.WARNING)

    try:
        config_helper = _load_config_helper(args)
        subscriptions = SubscriptionList(config_helper.load_urls(), persister=config_helper.write_urls)

        if args.importfile:
            return import_opml(subscriptions, args.importfile)

        if not len(subscriptions):
            print(
                f'Error: no URLs configured. Please fill the file {config_helper.url_path} '
                'with RSS feed URLs or import an OPML file.\n',
                file=sys.stderr
            )
            parser.print_usage(sys.stderr)
            return 1

        options = config_helper.options
        if not args.export:
            print(f'Starting {PROGRAM_NAME} {__version__}...')
            print('Loading articles from cache...', end='', flush=True)

        config_helper.init_store()
        with config_helper.open_store() as store:
            cache = RssCache(store, kept_count=options.kept_count)
            controller = Controller(
                subscriptions, cache, ConsoleView(),
                fetcher=partial(fetch_feed, options=options)
            )
            controller.load_feeds()

            if args.export:
                sys.stdout.write(controller.export_opml())
                return 0

            print('done.')
            if args.reload:
                controller.reload_all()
            controller.run()
    except (ConfigError, StoreError, sqlite3.Error, OSError) as error:
        get_logger().debug('fatal error', exc_info=True)
        print(f'Fatal error: {error}', file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print('User cancel.')
        return 1
    return 0

if __name__ == '__main__':
    exit(main() or 0)
