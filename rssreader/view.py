# -*- coding: utf-8 -*-
#
# Copyright (c) 2026~2999 - Cologler <skyoflw@gmail.com>
# ----------
#
# ----------

import sys
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, TextIO, TypeAlias

from .models import Feed, Item


@dataclass(frozen=True)
class OpenFeed:
    pos: int


@dataclass(frozen=True)
class OpenItem:
    feed_pos: int
    item_pos: int


@dataclass(frozen=True)
class ReloadFeed:
    pos: int


@dataclass(frozen=True)
class ReloadAll:
    pass


@dataclass(frozen=True)
class Quit:
    pass


Event: TypeAlias = OpenFeed | OpenItem | ReloadFeed | ReloadAll | Quit


class View(Protocol):
    def set_feedlist(self, feeds: Sequence[Feed]) -> None: ...

    def feedlist_status(self, msg: str) -> None: ...

    def feedlist_error(self, msg: str) -> None: ...

    def show_itemlist(self, feed: Feed) -> None: ...

    def show_item(self, item: Item) -> None: ...

    def next_event(self) -> Event: ...


HELP = '''\
commands:
  l          list feeds
  o N        open feed N
  v N M      view item M of feed N
  r N        reload feed N
  R          reload all feeds
  q          quit'''


class ConsoleView:
    '''
    A line based view, numbers shown to the user start from 1.
    '''

    def __init__(self, stdin: TextIO | None = None, stdout: TextIO | None = None) -> None:
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout
        self._feeds: Sequence[Feed] = ()
        self._dirty = False

    def _print(self, *lines: str) -> None:
        for line in lines:
            self._stdout.write(line + '\n')
        self._stdout.flush()

    def set_feedlist(self, feeds: Sequence[Feed]) -> None:
        self._feeds = feeds
        self._dirty = True

    def render_feedlist(self) -> None:
        self._dirty = False
        for index, feed in enumerate(self._feeds, 1):
            flag = 'N' if feed.unread_count else ' '
            self._print(f'{index:4} {flag} ({feed.unread_count}/{len(feed.items)}) {feed.title or feed.url}')

    def feedlist_status(self, msg: str) -> None:
        if msg:
            self._print(msg)

    def feedlist_error(self, msg: str) -> None:
        self._print(msg)

    def show_itemlist(self, feed: Feed) -> None:
        self._print(f'== {feed.title or feed.url}')
        for index, item in enumerate(feed.items, 1):
            flag = 'N' if item.unread else ' '
            self._print(f'{index:4} {flag} {item.publish_time:32} {item.title}')

    def show_item(self, item: Item) -> None:
        self._print(
            f'Title: {item.title}',
            f'Link: {item.link}',
            f'Date: {item.publish_time}',
            '',
            item.body,
            '',
        )

    def next_event(self) -> Event:
        while True:
            if self._dirty:
                self.render_feedlist()
            self._stdout.write('> ')
            self._stdout.flush()
            line = self._stdin.readline()
            if not line:
                return Quit()
            if (event := self._parse_command(line.split())) is not None:
                return event

    def _parse_command(self, args: list[str]) -> Event | None:
        if not args:
            return None
        command, numbers = args[0], args[1:]
        try:
            positions = [int(x) - 1 for x in numbers]
        except ValueError:
            positions = None

        match command, positions:
            case 'q', []:
                return Quit()
            case 'R', []:
                return ReloadAll()
            case 'o', [pos]:
                return OpenFeed(pos)
            case 'r', [pos]:
                return ReloadFeed(pos)
            case 'v', [feed_pos, item_pos]:
                return OpenItem(feed_pos, item_pos)
            case 'l', []:
                self.render_feedlist()
                return None
        self._print(HELP)
        return None
