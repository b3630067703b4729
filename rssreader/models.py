# -*- coding: utf-8 -*-
#
# Copyright (c) 2026~2999 - Cologler <skyoflw@gmail.com>
# ----------
#
# ----------

from dataclasses import dataclass, field
from typing import TypedDict


class FeedRowRecord(TypedDict):
    url: str
    title: str | None
    last_fetched: str | None


class ItemRowRecord(TypedDict):
    feed_url: str
    identity: str
    title: str | None
    body: str | None
    link: str | None
    publish_time: str | None
    unread: int
    last_modified: str | None
    fetch_seq: int
    position: int


@dataclass
class Item:
    identity: str
    feed_url: str = ''
    title: str = ''
    body: str = ''
    link: str = ''
    publish_time: str = ''
    unread: bool = True
    last_modified: str | None = None

    @classmethod
    def from_row(cls, row: ItemRowRecord) -> 'Item':
        return cls(
            identity=row['identity'],
            feed_url=row['feed_url'],
            title=row['title'] or '',
            body=row['body'] or '',
            link=row['link'] or '',
            publish_time=row['publish_time'] or '',
            unread=bool(row['unread']),
            last_modified=row['last_modified'],
        )


@dataclass
class Feed:
    url: str
    title: str = ''
    items: list[Item] = field(default_factory=list)
    last_fetched: str | None = None

    @property
    def unread_count(self) -> int:
        return sum(1 for item in self.items if item.unread)
