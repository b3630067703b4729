# -*- coding: utf-8 -*-
#
# Copyright (c) 2026~2999 - Cologler <skyoflw@gmail.com>
# ----------
#
# ----------

import xml.etree.ElementTree as et
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import TypeAlias
from xml.sax.saxutils import escape, quoteattr

from ._utils import local_name
from .models import Feed


class OpmlError(Exception):
    pass


@dataclass
class TextNode:
    text: str


@dataclass
class ElementNode:
    name: str
    attributes: dict[str, str] = field(default_factory=dict)
    children: list['ElementNode | TextNode'] = field(default_factory=list)


Node: TypeAlias = ElementNode | TextNode


def _to_node(el: et.Element) -> ElementNode:
    node = ElementNode(local_name(el.tag), dict(el.attrib))
    if el.text and el.text.strip():
        node.children.append(TextNode(el.text))
    for child in el:
        node.children.append(_to_node(child))
        if child.tail and child.tail.strip():
            node.children.append(TextNode(child.tail))
    return node

def parse_document(content: str | bytes) -> ElementNode:
    try:
        root = et.fromstring(content)
    except et.ParseError as error:
        raise OpmlError(f'invalid OPML document: {error}') from error
    return _to_node(root)

def load_document(path: str) -> ElementNode:
    try:
        with open(path, mode='rb') as fp:
            content = fp.read()
    except OSError as error:
        raise OpmlError(f'unable read {path}: {error}') from error
    return parse_document(content)

def walk(node: Node, visitor: Callable[[Node], None]) -> None:
    '''
    Visit `node` and all of its descendants, depth-first in document order.
    '''
    stack: list[Node] = [node]
    while stack:
        current = stack.pop()
        visitor(current)
        if isinstance(current, ElementNode):
            stack.extend(reversed(current.children))

def is_rss_outline(node: Node) -> bool:
    return (
        isinstance(node, ElementNode)
        and node.name == 'outline'
        and node.attributes.get('type') == 'rss'
        and bool(node.attributes.get('xmlUrl'))
    )

def export_opml(feeds: Iterable[Feed], title: str = 'rssreader - Exported Feeds') -> str:
    lines = [
        '<?xml version="1.0"?>',
        '<opml version="1.0">',
        '\t<head>',
        f'\t\t<title>{escape(title)}</title>',
        '\t</head>',
        '\t<body>',
    ]
    for feed in feeds:
        lines.append(f'\t\t<outline type="rss" xmlUrl={quoteattr(feed.url)} title={quoteattr(feed.title)} />')
    lines.append('\t</body>')
    lines.append('</opml>')
    return '\n'.join(lines) + '\n'