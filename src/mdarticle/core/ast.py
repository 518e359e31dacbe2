"""Typed syntax tree produced by the parser and consumed by the HTML lowerer.

Every node kind is a frozen dataclass carrying only the fields it needs.
Children are tuples, so a tree can be shared freely once built.
"""

from dataclasses import dataclass
from typing import Optional, Union


# --- inline ---

@dataclass(frozen=True)
class Text:
    content: str


@dataclass(frozen=True)
class SoftBreak:
    pass


@dataclass(frozen=True)
class HardBreak:
    pass


@dataclass(frozen=True)
class Code:
    content: str


@dataclass(frozen=True)
class RawHtml:
    content: str


@dataclass(frozen=True)
class Emphasis:
    children: tuple['Inline', ...] = ()


@dataclass(frozen=True)
class Strong:
    children: tuple['Inline', ...] = ()


@dataclass(frozen=True)
class Strikethrough:
    children: tuple['Inline', ...] = ()


@dataclass(frozen=True)
class Link:
    url:      str
    title:    Optional[str] = None
    children: tuple['Inline', ...] = ()


@dataclass(frozen=True)
class Image:
    url:     str
    alt:     str = ''
    title:   Optional[str] = None
    caption: Optional[str] = None     # set only for the captioned form


@dataclass(frozen=True)
class Spoiler:
    children: tuple['Inline', ...] = ()


Inline = Union[Text, SoftBreak, HardBreak, Code, RawHtml, Emphasis, Strong,
               Strikethrough, Link, Image, Spoiler]


# --- block ---

@dataclass(frozen=True)
class Paragraph:
    children: tuple[Inline, ...] = ()


@dataclass(frozen=True)
class Heading:
    level:    int
    children: tuple[Inline, ...] = ()


@dataclass(frozen=True)
class BlockQuote:
    children: tuple['Block', ...] = ()


@dataclass(frozen=True)
class ListItem:
    children: tuple['Block', ...] = ()


@dataclass(frozen=True)
class BulletList:
    items: tuple[ListItem, ...] = ()
    tight: bool = True


@dataclass(frozen=True)
class OrderedList:
    items: tuple[ListItem, ...] = ()
    start: int = 1
    tight: bool = True


@dataclass(frozen=True)
class CodeBlock:
    content: str
    info:    str = ''       # fence info string, '' for indented code


@dataclass(frozen=True)
class HtmlBlock:
    content: str


@dataclass(frozen=True)
class ThematicBreak:
    pass


@dataclass(frozen=True)
class TableCell:
    children: tuple[Inline, ...] = ()
    header:   bool = False
    align:    Optional[str] = None   # 'left' | 'center' | 'right'


@dataclass(frozen=True)
class TableRow:
    cells: tuple[TableCell, ...] = ()


@dataclass(frozen=True)
class Table:
    header: TableRow
    body:   tuple[TableRow, ...] = ()


Block = Union[Paragraph, Heading, BlockQuote, BulletList, OrderedList, ListItem,
              CodeBlock, HtmlBlock, ThematicBreak, Table]


@dataclass(frozen=True)
class Root:
    children: tuple[Block, ...] = ()
