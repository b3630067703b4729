# -*- coding: utf-8 -*-
#
# Copyright (c) 2026~2999 - Cologler <skyoflw@gmail.com>
# ----------
#
# ----------

from collections.abc import Callable

from .cache import RssCache
from .core import FeedError, fetch_feed, get_logger
from .models import Feed
from .opml import export_opml
from .subscriptions import SubscriptionList
from .view import Event, OpenFeed, OpenItem, Quit, ReloadAll, ReloadFeed, View


class Controller:
    def __init__(self, subscriptions: SubscriptionList, cache: RssCache, view: View, *,
                 fetcher: Callable[[str], Feed] = fetch_feed) -> None:
        self._subscriptions = subscriptions
        self._cache = cache
        self._view = view
        self._fetcher = fetcher
        self._feeds: list[Feed] = []

    @property
    def feeds(self) -> list[Feed]:
        return list(self._feeds)

    def load_feeds(self) -> list[Feed]:
        '''
        Load every subscribed feed from the cache, then purge the unsubscribed ones.
        '''
        feeds = [self._cache.internalize(Feed(url)) for url in self._subscriptions.urls()]
        purged = self._cache.cleanup(feeds)
        if purged:
            get_logger().info('Purged %d unsubscribed feeds from cache', len(purged))
        self._feeds = feeds
        return self.feeds

    def run(self) -> None:
        self._view.set_feedlist(self.feeds)
        while self.dispatch(self._view.next_event()):
            pass

    def dispatch(self, event: Event) -> bool:
        match event:
            case OpenFeed(pos):
                self.open_feed(pos)
            case OpenItem(feed_pos, item_pos):
                self.open_item(feed_pos, item_pos)
            case ReloadFeed(pos):
                self.reload(pos)
            case ReloadAll():
                self.reload_all()
            case Quit():
                return False
        return True

    def _get_feed(self, pos: int) -> Feed | None:
        if 0 <= pos < len(self._feeds):
            return self._feeds[pos]
        self._view.feedlist_error('Error: invalid feed!')
        return None

    def open_feed(self, pos: int) -> None:
        if (feed := self._get_feed(pos)) is None:
            return
        if not feed.items:
            self._view.feedlist_error('Error: feed contains no items!')
            return
        self._view.show_itemlist(feed)

    def open_item(self, feed_pos: int, item_pos: int) -> None:
        if (feed := self._get_feed(feed_pos)) is None:
            return
        if not 0 <= item_pos < len(feed.items):
            self._view.feedlist_error('Error: invalid item!')
            return
        item = feed.items[item_pos]
        self._view.show_item(item)
        if item.unread:
            self._cache.mark_read(feed, item)
            self._view.set_feedlist(self.feeds)

    def reload(self, pos: int) -> bool:
        if (feed := self._get_feed(pos)) is None:
            return False

        self._view.feedlist_status(f'Loading {feed.url}...')
        try:
            fresh = self._fetcher(feed.url)
        except FeedError as error:
            get_logger().error('reload %r failure with %s', feed.url, error)
            self._view.feedlist_error(f'Error: unable load {feed.url}: {error}')
            return False

        fresh.url = feed.url
        self._cache.externalize(fresh)
        self._feeds[pos] = self._cache.internalize(Feed(feed.url))
        self._view.feedlist_status('')
        self._view.set_feedlist(self.feeds)
        return True

    def reload_all(self) -> int:
        '''
        Reload the feeds one by one, return the count of failures.
        '''
        failures = 0
        for pos in range(len(self._feeds)):
            if not self.reload(pos):
                failures += 1
        return failures

    def export_opml(self) -> str:
        return export_opml(self._feeds)
