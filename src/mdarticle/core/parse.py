"""markdown-it parsing into the typed syntax tree"""

from functools import lru_cache
from typing import Optional

from markdown_it import MarkdownIt
from markdown_it.common.utils import unescapeAll
from markdown_it.renderer import RendererHTML
from markdown_it.tree import SyntaxTreeNode

from mdarticle.core import ast
from mdarticle.core.extensions import CAPTION_MARKERS, captioned_image_plugin, spoiler_plugin


_TEXT_RENDERER = RendererHTML()


def make_parser(
    preset: str = 'gfm-like',
    allow_html: bool = True,
    caption_markers: str = CAPTION_MARKERS,
    ) -> MarkdownIt:
    """Build a MarkdownIt instance for the preset with both extension rules registered."""
    md = MarkdownIt(preset, options_update={"linkify": False, "html": allow_html})
    return md.use(spoiler_plugin).use(captioned_image_plugin, markers=caption_markers)


@lru_cache(maxsize=8)
def cached_parser(
    preset: str = 'gfm-like',
    allow_html: bool = True,
    caption_markers: str = CAPTION_MARKERS,
    ) -> MarkdownIt:
    """Shared parser per configuration; MarkdownIt is not mutated by parse()."""
    return make_parser(preset, allow_html, caption_markers)


def parse(text: str, md: Optional[MarkdownIt] = None) -> ast.Root:
    """Parse markdown text into a Root node. Never fails."""
    md = md or cached_parser()
    tree = SyntaxTreeNode(md.parse(text))
    return ast.Root(children=_blocks(tree.children))


# --- blocks ---

def _blocks(nodes) -> tuple:
    return tuple(_block(n) for n in nodes)


def _inline_content(node) -> tuple:
    """Inline children of a paragraph/heading/cell, which wrap a single 'inline' node."""
    if node.children and node.children[0].type == 'inline':
        return _inlines(node.children[0].children)
    return ()


def _is_tight(node) -> bool:
    """A list is tight when markdown-it hid every paragraph directly inside its items."""
    return not any(
        child.type == 'paragraph' and not child.hidden
        for item in node.children
        for child in item.children
    )


def _align(node) -> Optional[str]:
    style = node.attrs.get('style', '')
    if isinstance(style, str) and style.startswith('text-align:'):
        return style.split(':', 1)[1]
    return None


def _row(node, header: bool) -> ast.TableRow:
    return ast.TableRow(cells=tuple(
        ast.TableCell(children=_inline_content(cell), header=header, align=_align(cell))
        for cell in node.children
    ))


def _table(node) -> ast.Table:
    header = ast.TableRow()
    body = ()
    for section in node.children:
        if section.type == 'thead' and section.children:
            header = _row(section.children[0], header=True)
        elif section.type == 'tbody':
            body = tuple(_row(tr, header=False) for tr in section.children)
    return ast.Table(header=header, body=body)


def _block(node):
    t = node.type
    if t == 'paragraph':
        return ast.Paragraph(children=_inline_content(node))
    if t == 'heading':
        return ast.Heading(level=int(node.tag[1:]), children=_inline_content(node))
    if t == 'blockquote':
        return ast.BlockQuote(children=_blocks(node.children))
    if t == 'bullet_list':
        return ast.BulletList(items=_items(node), tight=_is_tight(node))
    if t == 'ordered_list':
        start = int(node.attrs.get('start', 1))
        return ast.OrderedList(items=_items(node), start=start, tight=_is_tight(node))
    if t == 'list_item':
        return ast.ListItem(children=_blocks(node.children))
    if t == 'fence':
        info = unescapeAll(node.info).strip() if node.info else ''
        return ast.CodeBlock(content=node.content, info=info)
    if t == 'code_block':
        return ast.CodeBlock(content=node.content)
    if t == 'html_block':
        return ast.HtmlBlock(content=node.content)
    if t == 'hr':
        return ast.ThematicBreak()
    if t == 'table':
        return _table(node)
    # Unknown block kinds degrade to a paragraph of their raw text.
    return ast.Paragraph(children=(ast.Text(node.content),) if node.content else ())


def _items(node) -> tuple:
    return tuple(ast.ListItem(children=_blocks(item.children)) for item in node.children)


# --- inlines ---

def _inlines(nodes) -> tuple:
    # Emphasis post-processing leaves empty text tokens behind.
    return tuple(_inline(n) for n in nodes if not (n.type == 'text' and not n.content))


def _alt_text(node) -> str:
    """Image alt text, built exactly as markdown-it's renderer builds the alt attribute."""
    return _TEXT_RENDERER.renderInlineAsText(node.token.children or [], {}, {})


def _inline(node):
    t = node.type
    if t == 'text':
        return ast.Text(node.content)
    if t == 'softbreak':
        return ast.SoftBreak()
    if t == 'hardbreak':
        return ast.HardBreak()
    if t == 'code_inline':
        return ast.Code(node.content)
    if t == 'html_inline':
        return ast.RawHtml(node.content)
    if t == 'em':
        return ast.Emphasis(children=_inlines(node.children))
    if t == 'strong':
        return ast.Strong(children=_inlines(node.children))
    if t == 's':
        return ast.Strikethrough(children=_inlines(node.children))
    if t == 'spoiler':
        return ast.Spoiler(children=_inlines(node.children))
    if t == 'link':
        return ast.Link(
            url=node.attrs.get('href', ''),
            title=node.attrs.get('title'),
            children=_inlines(node.children),
        )
    if t == 'image':
        return ast.Image(
            url=node.attrs.get('src', ''),
            alt=_alt_text(node),
            title=node.attrs.get('title'),
            caption=node.meta.get('caption'),
        )
    return ast.Text(node.content)
