# -*- coding: utf-8 -*-
#
# Copyright (c) 2026~2999 - Cologler <skyoflw@gmail.com>
# ----------
#
# ----------

import pytest

from rssreader.opml import OpmlError, parse_document
from rssreader.subscriptions import SubscriptionList

DOCUMENT = '''<?xml version="1.0"?>
<opml version="1.0">
  <head><title>subs</title></head>
  <body>
    <outline text="news">
      <outline type="rss" xmlUrl="http://b" title="B" />
      <outline type="rss" xmlUrl="http://c" title="C" />
    </outline>
    <outline type="rss" xmlUrl="http://c" title="C again" />
    <outline type="rss" xmlUrl="http://a" title="A" />
    <outline type="link" xmlUrl="http://not-rss" />
    <outline type="rss" xmlUrl="" />
    <outline type="rss" title="no url" />
  </body>
</opml>
'''

def test_add_dedups():
    subscriptions = SubscriptionList(['http://a', 'http://a', 'http://b'])
    assert subscriptions.urls() == ['http://a', 'http://b']
    assert subscriptions.add('http://c')
    assert not subscriptions.add('http://a')
    assert subscriptions.add('HTTP://A')
    assert subscriptions.urls() == ['http://a', 'http://b', 'http://c', 'HTTP://A']

def test_urls_is_a_copy():
    subscriptions = SubscriptionList(['http://a'])
    subscriptions.urls().append('http://b')
    assert subscriptions.urls() == ['http://a']

def test_import_opml_dedups_and_persists_once():
    persisted = []
    subscriptions = SubscriptionList(['http://a'], persister=persisted.append)

    added = subscriptions.import_opml(parse_document(DOCUMENT))

    assert added == ['http://b', 'http://c']
    assert subscriptions.urls() == ['http://a', 'http://b', 'http://c']
    assert persisted == [['http://a', 'http://b', 'http://c']]

def test_import_opml_duplicate_outlines_add_one_entry():
    document = '''<opml version="1.0"><body>
        <outline type="rss" xmlUrl="http://x" />
        <outline type="rss" xmlUrl="http://x" />
        <outline type="rss" xmlUrl="http://a" />
    </body></opml>'''
    persisted = []
    subscriptions = SubscriptionList(['http://a', 'http://b'], persister=persisted.append)
    assert subscriptions.import_opml(parse_document(document)) == ['http://x']
    assert subscriptions.urls() == ['http://a', 'http://b', 'http://x']
    assert len(persisted) == 1

def test_import_opml_malformed_is_not_persisted():
    persisted = []
    subscriptions = SubscriptionList(['http://a'], persister=persisted.append)
    with pytest.raises(OpmlError):
        subscriptions.import_opml(parse_document('<opml><body><outline type="rss" xmlUrl="http://b">'))
    assert subscriptions.urls() == ['http://a']
    assert persisted == []
