# -*- coding: utf-8 -*-
#
# Copyright (c) 2026~2999 - Cologler <skyoflw@gmail.com>
# ----------
#
# ----------

import logging
import xml.etree.ElementTree as et
from functools import cache
from urllib.parse import urlparse

import requests

from ._utils import compute_item_identity, local_name, utcnow_iso
from .cfg import Options
from .models import Feed, Item


class FeedError(Exception):
    pass


class FetchError(FeedError):
    pass


class ParseError(FeedError):
    pass


@cache
def get_logger() -> logging.Logger:
    return logging.getLogger('rssreader')

def _find_child(el: et.Element, name: str) -> et.Element | None:
    for child in el:
        if local_name(child.tag) == name:
            return child
    return None

def _read_element_text(el: et.Element, *names: str) -> str:
    '''
    Read text from the first child which matches one of `names`.
    '''
    for name in names:
        for child in el:
            if local_name(child.tag) == name and child.text and child.text.strip():
                return child.text.strip()
    return ''

def _read_atom_link(el: et.Element) -> str:
    for child in el:
        if local_name(child.tag) == 'link' and child.get('rel', 'alternate') == 'alternate':
            return child.get('href', '').strip()
    return ''

def _element_to_item(feed_url: str, el: et.Element, *, is_atom: bool) -> Item:
    title = _read_element_text(el, 'title')
    if is_atom:
        guid = _read_element_text(el, 'id')
        link = _read_atom_link(el)
        body = _read_element_text(el, 'content', 'summary')
        publish_time = _read_element_text(el, 'published', 'updated')
    else:
        guid = _read_element_text(el, 'guid')
        link = _read_element_text(el, 'link')
        body = _read_element_text(el, 'encoded', 'description')
        publish_time = _read_element_text(el, 'pubDate', 'date')
    return Item(
        identity=compute_item_identity(guid, link, title, publish_time),
        feed_url=feed_url,
        title=title,
        body=body,
        link=link,
        publish_time=publish_time,
        unread=True,
    )

def parse_feed(feed_url: str, content: str | bytes) -> Feed:
    '''
    Parse a RSS 2.0, RSS 1.0 or Atom document into a `Feed`.
    '''
    try:
        root = et.fromstring(content)
    except et.ParseError as error:
        raise ParseError(f'invalid xml: {error}') from error

    root_name = local_name(root.tag)
    if root_name == 'feed':
        channel, is_atom = root, True
        item_els = [x for x in root if local_name(x.tag) == 'entry']
    elif root_name in ('rss', 'RDF'):
        channel, is_atom = _find_child(root, 'channel'), False
        if channel is None:
            raise ParseError('no channel found')
        # RSS 1.0 puts the items beside the channel
        container = channel if root_name == 'rss' else root
        item_els = [x for x in container if local_name(x.tag) == 'item']
    else:
        raise ParseError(f'unknown feed format: {root_name}')

    return Feed(
        url=feed_url,
        title=_read_element_text(channel, 'title'),
        items=[_element_to_item(feed_url, x, is_atom=is_atom) for x in item_els],
        last_fetched=utcnow_iso(),
    )

def _resolve_proxies(url: str, options: Options) -> dict[str, str] | None:
    proxies = options.proxies
    if proxies is None:
        proxy = options.proxy
        if proxy:
            scheme = urlparse(proxy).scheme
            if not scheme:
                scheme = urlparse(url).scheme or 'http'
                proxy = scheme + '://' + proxy
            proxies = {}
            proxies[scheme] = proxy
    return proxies

def fetch_feed(url: str, options: Options | None = None) -> Feed:
    options = options or Options()
    logger = get_logger().getChild(url)

    proxies = _resolve_proxies(url, options)
    if proxies:
        logger.info('use proxies: %s', proxies)

    headers = {'User-Agent': options.user_agent} if options.user_agent else None
    try:
        r = requests.get(url, proxies=proxies, headers=headers, timeout=(5, options.timeout))
        r.raise_for_status()
    except requests.HTTPError as error:
        logger.error('raised %s: %s', type(error).__name__, error)
        raise FetchError(str(error)) from error
    except requests.RequestException as error:
        logger.info('fetch %r failure with %s', url, error, exc_info=False)
        raise FetchError(str(error)) from error

    try:
        feed = parse_feed(url, r.content)
    except ParseError:
        logger.error('invalid feed.')
        raise
    logger.info('total found %s items', len(feed.items))
    return feed

def configure_logger(level: int = logging.WARNING) -> None:
    logging.basicConfig(
        format='%(asctime)s [%(levelname)s] - %(name)s: %(message)s',
        datefmt='%m/%d/%Y %I:%M:%S %p',
        level=level
    )
    get_logger().setLevel(level)
