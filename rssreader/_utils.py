# -*- coding: utf-8 -*-
#
# Copyright (c) 2026~2999 - Cologler <skyoflw@gmail.com>
# ----------
#
# ----------

import re
from datetime import datetime, timezone
from hashlib import sha1

_WHITESPACE = re.compile(r'\s+')


def create_unique_id(content: str) -> str:
    '''
    Create unique identifier.
    '''
    hashed = sha1(content.encode('utf-8', errors='ignore')).hexdigest()
    return f'sha1:{hashed}'

def normalize_title(title: str | None) -> str:
    return _WHITESPACE.sub(' ', title or '').strip().casefold()

def compute_item_identity(guid: str | None, link: str | None,
                          title: str | None, publish_time: str | None) -> str:
    '''
    Compute the identity of an item inside its feed.

    The guid wins, then the link; items with neither are fingerprinted
    from the normalized title and the publish time. Two different items
    with the same title and publish time share one identity.
    '''
    for candidate in (guid, link):
        if candidate and (candidate := candidate.strip()):
            return candidate
    return create_unique_id(normalize_title(title) + '\n' + (publish_time or '').strip())

def local_name(tag: str) -> str:
    '''
    Strip the `{namespace}` prefix which ElementTree puts on a tag.
    '''
    return tag.rsplit('}', 1)[-1]

def utcnow_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()
