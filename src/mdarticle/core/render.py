"""Syntax tree to HTML lowering.

Standard node kinds produce the same markup as markdown-it's default renderer
for the commonmark/gfm-like presets (XHTML void tags, hidden paragraphs in
tight lists). Captioned images become <figure>, spoilers a masked <del>.
"""

from typing import Callable, Optional

from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml
from mdurl import encode as normalize_url

from mdarticle.core import ast
from mdarticle.core.parse import parse


CAPTION_STYLE = 'text-align: center; margin: 1em auto;'
SPOILER_CLASS = 'spoiler'
SPOILER_STYLE = 'filter: invert(25%);'
LANG_PREFIX = 'language-'

_CAPTION_ESCAPES = str.maketrans({'<': '&lt;', '>': '&gt;', "'": '&#39;', '"': '&#34;'})


def escape_caption(text: str) -> str:
    """Escape <, >, ' and " for caption text; '&' is left as written."""
    return text.translate(_CAPTION_ESCAPES)


def _attrs(*pairs: tuple[str, Optional[str]]) -> str:
    return ''.join(f' {name}="{escapeHtml(str(value))}"' for name, value in pairs if value is not None)


def _children(nodes) -> str:
    return ''.join(to_html(n) for n in nodes)


# --- blocks ---

def _root(node: ast.Root) -> str:
    return _children(node.children)


def _paragraph(node: ast.Paragraph) -> str:
    return f"<p>{_children(node.children)}</p>\n"


def _heading(node: ast.Heading) -> str:
    return f"<h{node.level}>{_children(node.children)}</h{node.level}>\n"


def _blockquote(node: ast.BlockQuote) -> str:
    if not node.children:
        return "<blockquote></blockquote>\n"
    return f"<blockquote>\n{_children(node.children)}</blockquote>\n"


def _list_item(node: ast.ListItem, tight: bool = False) -> str:
    out = '<li>'
    after_hidden = False
    for i, child in enumerate(node.children):
        if tight and isinstance(child, ast.Paragraph):
            out += _children(child.children)
            after_hidden = True
            continue
        if i == 0 or after_hidden:
            out += '\n'
        out += to_html(child)
        after_hidden = False
    return out + '</li>\n'


def _bullet_list(node: ast.BulletList) -> str:
    items = ''.join(_list_item(item, node.tight) for item in node.items)
    return f"<ul>\n{items}</ul>\n"


def _ordered_list(node: ast.OrderedList) -> str:
    start = str(node.start) if node.start != 1 else None
    items = ''.join(_list_item(item, node.tight) for item in node.items)
    return f"<ol{_attrs(('start', start))}>\n{items}</ol>\n"


def _code_block(node: ast.CodeBlock) -> str:
    lang = node.info.split(maxsplit=1)[0] if node.info else None
    cls = LANG_PREFIX + lang if lang else None
    return f"<pre><code{_attrs(('class', cls))}>{escapeHtml(node.content)}</code></pre>\n"


def _html_block(node: ast.HtmlBlock) -> str:
    return node.content


def _thematic_break(node: ast.ThematicBreak) -> str:
    return "<hr />\n"


def _table_cell(node: ast.TableCell) -> str:
    tag = 'th' if node.header else 'td'
    style = f"text-align:{node.align}" if node.align else None
    return f"<{tag}{_attrs(('style', style))}>{_children(node.children)}</{tag}>\n"


def _table_row(node: ast.TableRow) -> str:
    return f"<tr>\n{_children(node.cells)}</tr>\n"


def _table(node: ast.Table) -> str:
    out = f"<table>\n<thead>\n{_table_row(node.header)}</thead>\n"
    if node.body:
        out += f"<tbody>\n{_children(node.body)}</tbody>\n"
    return out + "</table>\n"


# --- inlines ---

def _text(node: ast.Text) -> str:
    return escapeHtml(node.content)


def _softbreak(node: ast.SoftBreak) -> str:
    return "\n"


def _hardbreak(node: ast.HardBreak) -> str:
    return "<br />\n"


def _code(node: ast.Code) -> str:
    return f"<code>{escapeHtml(node.content)}</code>"


def _raw_html(node: ast.RawHtml) -> str:
    return node.content


def _wrap(tag: str) -> Callable:
    def lower(node) -> str:
        return f"<{tag}>{_children(node.children)}</{tag}>"
    return lower


def _link(node: ast.Link) -> str:
    return f"<a{_attrs(('href', node.url), ('title', node.title))}>{_children(node.children)}</a>"


def _image(node: ast.Image) -> str:
    src = normalize_url(node.url)
    if node.caption is None:
        return f"<img{_attrs(('src', src), ('alt', node.alt), ('title', node.title))} />"
    # Caption is emitted as escaped raw text, never re-parsed as markdown.
    return (
        f"<figure><img{_attrs(('src', src))}>"
        f"<figcaption style=\"{CAPTION_STYLE}\">{escape_caption(node.caption)}</figcaption>"
        "</figure>"
    )


def _spoiler(node: ast.Spoiler) -> str:
    attrs = _attrs(('class', SPOILER_CLASS), ('style', SPOILER_STYLE))
    return f"<del{attrs}>{_children(node.children)}</del>"


_LOWERERS: dict[type, Callable] = {
    ast.Root:          _root,
    ast.Paragraph:     _paragraph,
    ast.Heading:       _heading,
    ast.BlockQuote:    _blockquote,
    ast.BulletList:    _bullet_list,
    ast.OrderedList:   _ordered_list,
    ast.ListItem:      _list_item,
    ast.CodeBlock:     _code_block,
    ast.HtmlBlock:     _html_block,
    ast.ThematicBreak: _thematic_break,
    ast.Table:         _table,
    ast.TableRow:      _table_row,
    ast.TableCell:     _table_cell,
    ast.Text:          _text,
    ast.SoftBreak:     _softbreak,
    ast.HardBreak:     _hardbreak,
    ast.Code:          _code,
    ast.RawHtml:       _raw_html,
    ast.Emphasis:      _wrap('em'),
    ast.Strong:        _wrap('strong'),
    ast.Strikethrough: _wrap('s'),
    ast.Link:          _link,
    ast.Image:         _image,
    ast.Spoiler:       _spoiler,
}


def to_html(node) -> str:
    """Lower any syntax tree node (usually a Root) to an HTML fragment."""
    lower = _LOWERERS.get(type(node))
    if lower is None:
        raise TypeError(f"No HTML lowering for node type {type(node).__name__}")
    return lower(node)


def render(text: str, md: Optional[MarkdownIt] = None) -> str:
    """Render markdown text to an HTML fragment."""
    return to_html(parse(text, md))
