# -*- coding: utf-8 -*-
#
# Copyright (c) 2026~2999 - Cologler <skyoflw@gmail.com>
# ----------
#
# ----------

from collections.abc import Iterable
from logging import getLogger

from .models import Feed, Item
from .stores import SqliteRssStore

logger = getLogger(__name__)


class RssCache:
    '''
    Keeps the in-memory feeds and the store consistent.

    The cache is the only writer of the store it holds.
    '''

    def __init__(self, store: SqliteRssStore, *, kept_count: int | None = None) -> None:
        self._store = store
        self._kept_count = kept_count

    def internalize(self, feed: Feed) -> Feed:
        '''
        Load the cached title and items into `feed` (in place) and return it.

        A feed that was never cached is left untouched.
        '''
        row = self._store.get_feed(feed.url)
        if row is None:
            logger.debug('%s is not cached yet', feed.url)
            return feed
        feed.title = row['title'] or ''
        feed.last_fetched = row['last_fetched']
        feed.items = [Item.from_row(x) for x in self._store.get_items(feed.url)]
        return feed

    def externalize(self, feed: Feed) -> int:
        '''
        Merge `feed` into the store, return the count of new items.
        '''
        store = self._store
        store.put_feed(feed.url, feed.title, feed.last_fetched)
        fetch_seq = store.next_fetch_seq(feed.url)
        added_count = 0
        for position, item in enumerate(feed.items):
            if store.upsert_item(feed.url, item, fetch_seq=fetch_seq, position=position):
                added_count += 1

        kept_count = self._kept_count
        if isinstance(kept_count, int) and kept_count >= 10: # hard limit
            removed_count = store.remove_old_items(feed.url, kept_count, keep=(x.identity for x in feed.items))
            if removed_count:
                logger.info('removed %d outdated items from %s', removed_count, feed.url)

        store.commit()
        logger.info('%s: total added %d items', feed.url, added_count)
        return added_count

    def mark_read(self, feed: Feed, item: Item) -> None:
        item.unread = False
        self._store.set_unread(feed.url, item.identity, False)
        self._store.commit()

    def cleanup(self, configured_feeds: Iterable[Feed]) -> list[str]:
        '''
        Purge every cached feed which is not in `configured_feeds`,
        return the purged urls.
        '''
        configured_urls = {x.url for x in configured_feeds}
        purged = [x for x in self._store.iter_feed_urls() if x not in configured_urls]
        for url in purged:
            removed_count = self._store.delete_feed(url)
            logger.info('purged %s with %d items', url, removed_count)
        self._store.commit()
        return purged
