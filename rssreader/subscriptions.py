# -*- coding: utf-8 -*-
#
# Copyright (c) 2026~2999 - Cologler <skyoflw@gmail.com>
# ----------
#
# ----------

from collections.abc import Callable, Iterable
from logging import getLogger

from .opml import ElementNode, Node, is_rss_outline, walk

logger = getLogger(__name__)


class SubscriptionList:
    '''
    The ordered list of subscribed feed urls, without duplicates.
    '''

    def __init__(self, urls: Iterable[str] = (), *,
                 persister: Callable[[list[str]], None] | None = None) -> None:
        self._urls: list[str] = []
        self._persister = persister
        for url in urls:
            self.add(url)

    def __len__(self) -> int:
        return len(self._urls)

    def __contains__(self, url: str) -> bool:
        return url in self._urls

    def urls(self) -> list[str]:
        return list(self._urls)

    def add(self, url: str) -> bool:
        if url in self._urls:
            return False
        self._urls.append(url)
        return True

    def persist(self) -> None:
        if self._persister is None:
            logger.warning('no persister, skip persist %d urls', len(self._urls))
            return
        self._persister(self.urls())

    def import_opml(self, document: ElementNode) -> list[str]:
        '''
        Add the url of every rss outline in `document`, then persist the list once.

        Return the urls which were not subscribed before.
        '''
        added: list[str] = []

        def visit(node: Node) -> None:
            if is_rss_outline(node):
                assert isinstance(node, ElementNode)
                url = node.attributes['xmlUrl']
                if self.add(url):
                    added.append(url)

        walk(document, visit)
        logger.info('imported %d new urls', len(added))
        self.persist()
        return added
