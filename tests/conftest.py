# -*- coding: utf-8 -*-
#
# Copyright (c) 2026~2999 - Cologler <skyoflw@gmail.com>
# ----------
#
# ----------

import pytest

from rssreader.cache import RssCache
from rssreader.stores import open_store


@pytest.fixture
def store():
    with open_store(':memory:') as store:
        store.init_store()
        yield store

@pytest.fixture
def cache(store):
    return RssCache(store)
