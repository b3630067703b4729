# -*- coding: utf-8 -*-
#
# Copyright (c) 2026~2999 - Cologler <skyoflw@gmail.com>
# ----------
#
# ----------

import xml.etree.ElementTree as et

import pytest

from rssreader.controller import Controller
from rssreader.core import FetchError, ParseError
from rssreader.models import Feed, Item
from rssreader.subscriptions import SubscriptionList
from rssreader.view import OpenFeed, OpenItem, Quit, ReloadAll, ReloadFeed


class FakeView:
    def __init__(self, events=()) -> None:
        self.events = list(events)
        self.feedlists = []
        self.statuses = []
        self.errors = []
        self.itemlists = []
        self.shown_items = []

    def set_feedlist(self, feeds):
        self.feedlists.append(list(feeds))

    def feedlist_status(self, msg):
        self.statuses.append(msg)

    def feedlist_error(self, msg):
        self.errors.append(msg)

    def show_itemlist(self, feed):
        self.itemlists.append(feed)

    def show_item(self, item):
        self.shown_items.append(item)

    def next_event(self):
        return self.events.pop(0) if self.events else Quit()


class FakeFetcher:
    def __init__(self) -> None:
        self.contents: dict[str, list[str] | Exception] = {}
        self.calls: list[str] = []

    def __call__(self, url: str) -> Feed:
        self.calls.append(url)
        content = self.contents[url]
        if isinstance(content, Exception):
            raise content
        return Feed(url=url, title=f'title of {url}', items=[
            Item(identity=x, feed_url=url, title=x) for x in content
        ])


@pytest.fixture
def fetcher():
    return FakeFetcher()

@pytest.fixture
def view():
    return FakeView()

def _controller(cache, view, fetcher, urls=('http://a', 'http://b', 'http://c')) -> Controller:
    controller = Controller(SubscriptionList(urls), cache, view, fetcher=fetcher)
    controller.load_feeds()
    return controller

def _identities(feed: Feed) -> list[tuple[str, bool]]:
    return [(x.identity, x.unread) for x in feed.items]

def test_load_feeds_keeps_subscription_order_and_purges(cache, store, view, fetcher):
    cache.externalize(Feed('http://old', 'Old', [Item(identity='x')]))
    cache.externalize(Feed('http://b', 'B', [Item(identity='b1')]))

    controller = _controller(cache, view, fetcher)
    assert [x.url for x in controller.feeds] == ['http://a', 'http://b', 'http://c']
    assert controller.feeds[1].title == 'B'
    assert controller.feeds[0].items == []
    assert store.get_feed('http://old') is None
    assert view.feedlists == []

def test_reload_merges_and_reloads_canonical_state(cache, view, fetcher):
    fetcher.contents['http://a'] = ['a1', 'a2']
    controller = _controller(cache, view, fetcher)
    assert controller.reload(0)
    assert controller.feeds[0].title == 'title of http://a'

    controller.open_item(0, 0)
    assert view.shown_items[0].identity == 'a1'

    fetcher.contents['http://a'] = ['a0', 'a1', 'a2']
    assert controller.reload(0)
    assert _identities(controller.feeds[0]) == [('a0', True), ('a1', False), ('a2', True)]
    assert view.feedlists[-1][0] is controller.feeds[0]

def test_reload_all_isolates_failures(cache, store, view, fetcher):
    fetcher.contents = {'http://a': ['a1'], 'http://b': ['b1', 'b2'], 'http://c': ['c1']}
    controller = _controller(cache, view, fetcher)
    assert controller.reload_all() == 0
    controller.open_item(1, 1)
    before = _identities(controller.feeds[1])

    fetcher.contents = {
        'http://a': ['a2', 'a1'],
        'http://b': FetchError('connection refused'),
        'http://c': ['c2', 'c1'],
    }
    assert controller.reload_all() == 1
    assert fetcher.calls[-3:] == ['http://a', 'http://b', 'http://c']

    assert _identities(controller.feeds[0]) == [('a2', True), ('a1', True)]
    assert _identities(controller.feeds[1]) == before == [('b1', True), ('b2', False)]
    assert _identities(controller.feeds[2]) == [('c2', True), ('c1', True)]
    assert [(x['identity'], x['unread']) for x in store.get_items('http://b')] == [('b1', 1), ('b2', 0)]
    assert len(view.errors) == 1
    assert 'http://b' in view.errors[0]

def test_reload_parse_error_keeps_cache(cache, view, fetcher):
    fetcher.contents['http://a'] = ParseError('invalid xml')
    controller = _controller(cache, view, fetcher)
    assert not controller.reload(0)
    assert controller.feeds[0].items == []

def test_invalid_selection(cache, view, fetcher):
    controller = _controller(cache, view, fetcher)
    assert not controller.reload(3)
    controller.open_feed(-1)
    controller.open_item(0, 0)
    assert view.errors == ['Error: invalid feed!', 'Error: invalid feed!', 'Error: invalid item!']
    assert fetcher.calls == []

def test_open_empty_feed(cache, view, fetcher):
    controller = _controller(cache, view, fetcher)
    controller.open_feed(0)
    assert view.errors == ['Error: feed contains no items!']
    assert view.itemlists == []

def test_open_item_marks_read_immediately(cache, store, view, fetcher):
    fetcher.contents['http://a'] = ['a1', 'a2']
    controller = _controller(cache, view, fetcher)
    controller.reload(0)
    controller.open_feed(0)
    assert view.itemlists == [controller.feeds[0]]

    controller.open_item(0, 1)
    assert _identities(controller.feeds[0]) == [('a1', True), ('a2', False)]
    assert [(x['identity'], x['unread']) for x in store.get_items('http://a')] == [('a1', 1), ('a2', 0)]

def test_dispatch_events(cache, fetcher):
    fetcher.contents = {'http://a': ['a1'], 'http://b': ['b1'], 'http://c': ['c1']}
    view = FakeView([ReloadAll(), ReloadFeed(0), OpenFeed(0), OpenItem(0, 0)])
    controller = _controller(cache, view, fetcher)
    controller.run()

    assert fetcher.calls == ['http://a', 'http://b', 'http://c', 'http://a']
    assert [x.identity for x in view.shown_items] == ['a1']
    assert not controller.feeds[0].items[0].unread
    assert not controller.dispatch(Quit())

def test_export_opml(cache, view, fetcher):
    fetcher.contents = {'http://a': ['a1'], 'http://b': ['b1'], 'http://c': ['c1']}
    controller = _controller(cache, view, fetcher)
    controller.reload_all()
    outlines = et.fromstring(controller.export_opml()).findall('body/outline')
    assert [(x.get('xmlUrl'), x.get('title')) for x in outlines] == [
        ('http://a', 'title of http://a'),
        ('http://b', 'title of http://b'),
        ('http://c', 'title of http://c'),
    ]
