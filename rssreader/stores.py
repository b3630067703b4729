# -*- coding: utf-8 -*-
#
# Copyright (c) 2026~2999 - Cologler <skyoflw@gmail.com>
# ----------
#
# ----------

import sqlite3
from collections.abc import Iterable, Iterator

from ._utils import utcnow_iso
from .models import FeedRowRecord, Item, ItemRowRecord


class StoreError(Exception):
    pass


class RssStore:
    COLUMN_NAME_FEED_URL = 'feed_url'
    COLUMN_NAME_IDENTITY = 'identity'
    COLUMN_NAME_TITLE = 'title'
    COLUMN_NAME_BODY = 'body'
    COLUMN_NAME_LINK = 'link'
    COLUMN_NAME_PUBLISH_TIME = 'publish_time'
    COLUMN_NAME_UNREAD = 'unread'
    COLUMN_NAME_LAST_MODIFIED = 'last_modified'
    COLUMN_NAME_FETCH_SEQ = 'fetch_seq'
    COLUMN_NAME_POSITION = 'position'

    COLUMN_NAMES = (
        COLUMN_NAME_FEED_URL,
        COLUMN_NAME_IDENTITY,
        COLUMN_NAME_TITLE,
        COLUMN_NAME_BODY,
        COLUMN_NAME_LINK,
        COLUMN_NAME_PUBLISH_TIME,
        COLUMN_NAME_UNREAD,
        COLUMN_NAME_LAST_MODIFIED,
        COLUMN_NAME_FETCH_SEQ,
        COLUMN_NAME_POSITION,
    )

    # fields refreshed when a known item is fetched again
    CONTENT_COLUMN_NAMES = (
        COLUMN_NAME_TITLE,
        COLUMN_NAME_BODY,
        COLUMN_NAME_LINK,
        COLUMN_NAME_PUBLISH_TIME,
    )


class SqliteRssStore(RssStore):
    FEEDS_TABLE_NAME = 'feeds'
    ITEMS_TABLE_NAME = 'items'

    def __init__(self, conn_str: str) -> None:
        self.__conn_str = conn_str
        self.__conn: sqlite3.Connection | None = None
        self.__cur: sqlite3.Cursor | None = None

    def __enter__(self):
        try:
            self.__conn = sqlite3.connect(self.__conn_str)
        except sqlite3.Error as error:
            raise StoreError(f'Unable open cache {self.__conn_str!r}: {error}') from error
        self.__conn.row_factory = sqlite3.Row
        self.__cur = self.__conn.cursor()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if cur := self.__cur:
            cur.close()
        self.__cur = None

        if conn := self.__conn:
            conn.close()
        self.__conn = None

    @property
    def _conn(self):
        if conn := self.__conn:
            return conn
        raise RuntimeError("Connection is not initialized")

    @property
    def _cur(self):
        if cur := self.__cur:
            return cur
        raise RuntimeError("Cursor is not initialized")

    def init_store(self):
        DEF_FEED_COL = ', '.join([
            'url TEXT NOT NULL PRIMARY KEY',
            'title TEXT',
            'last_fetched TEXT',
        ])
        DEF_ITEM_COL = ', '.join([
            self.COLUMN_NAME_FEED_URL       + ' TEXT NOT NULL',
            self.COLUMN_NAME_IDENTITY       + ' TEXT NOT NULL',
            self.COLUMN_NAME_TITLE          + ' TEXT',
            self.COLUMN_NAME_BODY           + ' TEXT',
            self.COLUMN_NAME_LINK           + ' TEXT',
            self.COLUMN_NAME_PUBLISH_TIME   + ' TEXT',
            self.COLUMN_NAME_UNREAD         + ' INTEGER NOT NULL DEFAULT 1',
            self.COLUMN_NAME_LAST_MODIFIED  + ' TEXT',
            self.COLUMN_NAME_FETCH_SEQ      + ' INTEGER NOT NULL DEFAULT 0',
            self.COLUMN_NAME_POSITION       + ' INTEGER NOT NULL DEFAULT 0',
            'PRIMARY KEY ({}, {})'.format(self.COLUMN_NAME_FEED_URL, self.COLUMN_NAME_IDENTITY),
        ])
        try:
            self._cur.execute('CREATE TABLE IF NOT EXISTS {} ({});'.format(self.FEEDS_TABLE_NAME, DEF_FEED_COL))
            self._cur.execute('CREATE TABLE IF NOT EXISTS {} ({});'.format(self.ITEMS_TABLE_NAME, DEF_ITEM_COL))
        except sqlite3.DatabaseError as error:
            raise StoreError(f'Unable init cache {self.__conn_str!r}: {error}') from error

    def get_feed(self, url: str) -> FeedRowRecord | None:
        row = self._cur.execute(
            'SELECT url, title, last_fetched FROM {} WHERE url = ?'.format(self.FEEDS_TABLE_NAME),
            (url, )
        ).fetchone()
        if row is not None:
            return FeedRowRecord(url=row['url'], title=row['title'], last_fetched=row['last_fetched'])
        return None

    def put_feed(self, url: str, title: str | None, last_fetched: str | None = None) -> None:
        self._cur.execute(
            '''
            INSERT INTO {0} (url, title, last_fetched) VALUES (?, ?, ?)
            ON CONFLICT(url) DO UPDATE SET
                title = excluded.title,
                last_fetched = COALESCE(excluded.last_fetched, {0}.last_fetched)
            '''.format(self.FEEDS_TABLE_NAME),
            (url, title, last_fetched)
        )

    def iter_feed_urls(self) -> Iterator[str]:
        rows = self._cur.execute('SELECT url FROM {}'.format(self.FEEDS_TABLE_NAME)).fetchall()
        for row in rows:
            yield row['url']

    def get_items(self, feed_url: str) -> list[ItemRowRecord]:
        sql = 'SELECT {} FROM {} WHERE feed_url = ? ORDER BY fetch_seq DESC, position ASC'.format(
            ', '.join(self.COLUMN_NAMES), self.ITEMS_TABLE_NAME
        )
        return [dict(x) for x in self._cur.execute(sql, (feed_url, )).fetchall()] # type: ignore

    def get_item_count(self, feed_url: str | None = None) -> int:
        if feed_url is None:
            sql, params = 'SELECT COUNT(*) FROM {}'.format(self.ITEMS_TABLE_NAME), ()
        else:
            sql, params = 'SELECT COUNT(*) FROM {} WHERE feed_url = ?'.format(self.ITEMS_TABLE_NAME), (feed_url, )
        return self._cur.execute(sql, params).fetchone()[0]

    def next_fetch_seq(self, feed_url: str) -> int:
        sql = 'SELECT COALESCE(MAX(fetch_seq), 0) + 1 FROM {} WHERE feed_url = ?'.format(self.ITEMS_TABLE_NAME)
        return self._cur.execute(sql, (feed_url, )).fetchone()[0]

    def upsert_item(self, feed_url: str, item: Item, *, fetch_seq: int = 0, position: int = 0) -> bool:
        '''
        Merge an item into the store, return `True` if the item was inserted.

        A new identity always starts unread. For a known identity the content
        is refreshed and the stored flag is kept unless the incoming item is read:
        a read mark is never undone by a refetch.
        '''
        content = tuple(getattr(item, x) for x in self.CONTENT_COLUMN_NAMES)
        existing = self._cur.execute(
            'SELECT {}, unread FROM {} WHERE feed_url = ? AND identity = ?'.format(
                ', '.join(self.CONTENT_COLUMN_NAMES), self.ITEMS_TABLE_NAME
            ),
            (feed_url, item.identity)
        ).fetchone()

        if existing is None:
            row = (feed_url, item.identity, *content, 1, utcnow_iso(), fetch_seq, position)
            self._cur.execute(
                'INSERT INTO {} ({}) VALUES ({})'.format(
                    self.ITEMS_TABLE_NAME, ', '.join(self.COLUMN_NAMES), ','.join('?' for _ in self.COLUMN_NAMES)
                ),
                row
            )
            return True

        unread = int(bool(existing['unread']) and item.unread)
        if tuple(existing[x] for x in self.CONTENT_COLUMN_NAMES) != content:
            self._cur.execute(
                'UPDATE {} SET {}, unread = ?, last_modified = ? WHERE feed_url = ? AND identity = ?'.format(
                    self.ITEMS_TABLE_NAME, ', '.join(f'{x} = ?' for x in self.CONTENT_COLUMN_NAMES)
                ),
                (*content, unread, utcnow_iso(), feed_url, item.identity)
            )
        elif unread != existing['unread']:
            self.set_unread(feed_url, item.identity, bool(unread))
        return False

    def set_unread(self, feed_url: str, identity: str, unread: bool) -> None:
        self._cur.execute(
            'UPDATE {} SET unread = ? WHERE feed_url = ? AND identity = ?'.format(self.ITEMS_TABLE_NAME),
            (int(unread), feed_url, identity)
        )

    def delete_feed(self, url: str) -> int:
        '''
        Remove the feed and all of its items, return the count of removed items.
        '''
        cur = self._cur.execute('DELETE FROM {} WHERE feed_url = ?'.format(self.ITEMS_TABLE_NAME), (url, ))
        removed_count = cur.rowcount
        self._cur.execute('DELETE FROM {} WHERE url = ?'.format(self.FEEDS_TABLE_NAME), (url, ))
        return removed_count

    def remove_old_items(self, feed_url: str, kept_count: int, keep: Iterable[str] = ()) -> int:
        '''
        Remove the read items past `kept_count`, except the identities in `keep`.

        Items still served by the feed must be passed as `keep`, otherwise the
        next refetch would insert them again as unread.
        '''
        assert isinstance(kept_count, int) and kept_count > 0 # hard limit

        rows = self._cur.execute(
            '''
            SELECT identity FROM {0} WHERE feed_url = ? AND unread = 0 AND identity NOT IN (
                SELECT identity FROM {0} WHERE feed_url = ?
                ORDER BY fetch_seq DESC, position ASC LIMIT ?
            )
            '''.format(self.ITEMS_TABLE_NAME),
            (feed_url, feed_url, kept_count)
        ).fetchall()
        kept = set(keep)
        removed = [(feed_url, row['identity']) for row in rows if row['identity'] not in kept]
        self._cur.executemany(
            'DELETE FROM {} WHERE feed_url = ? AND identity = ?'.format(self.ITEMS_TABLE_NAME),
            removed
        )
        return len(removed)

    def commit(self):
        self._conn.commit()


def open_store(conn_str: str):
    return SqliteRssStore(conn_str)
