"""markdown-it inline rules for captioned images and spoilers.

Both rules follow the markdown-it contract: on a match they push tokens and
advance ``state.pos``; otherwise they return False with state untouched and
the base grammar takes over. They never raise.
"""

from markdown_it import MarkdownIt
from markdown_it.rules_inline import StateInline
from markdown_it.rules_inline.image import image


CAPTION_MARKERS = '!¡'
SPOILER_MARKUP = '!!'


def _make_captioned_image(markers: str):
    prefixes = tuple(f"![{m}" for m in markers)

    def captioned_image(state: StateInline, silent: bool) -> bool:
        """![<marker>caption](url): a base image whose label becomes a visible caption."""
        if not state.src.startswith(prefixes, state.pos):
            return False
        if not image(state, silent):
            return False
        if not silent:
            token = state.tokens[-1]
            caption = token.content[1:]
            if caption:
                token.meta['caption'] = caption
        return True

    return captioned_image


def spoiler(state: StateInline, silent: bool) -> bool:
    """!!content!!: masked inline content, parsed recursively."""
    # Silent mode only runs while scanning link labels; declining there keeps
    # spoilers from binding tighter than link brackets, like emphasis.
    start = state.pos
    if silent or not state.src.startswith(SPOILER_MARKUP, start):
        return False

    content_start = start + len(SPOILER_MARKUP)
    end = state.src.find(SPOILER_MARKUP, content_start, state.posMax)
    if end < 0 or not state.src[content_start:end].strip():
        return False

    old_max = state.posMax
    state.pos = content_start
    state.posMax = end

    token = state.push('spoiler_open', 'del', 1)
    token.markup = SPOILER_MARKUP
    state.md.inline.tokenize(state)
    token = state.push('spoiler_close', 'del', -1)
    token.markup = SPOILER_MARKUP

    state.posMax = old_max

    state.pos = end + len(SPOILER_MARKUP)
    return True


def captioned_image_plugin(md: MarkdownIt, markers: str = CAPTION_MARKERS) -> None:
    """Register the captioned image rule ahead of the base image rule."""
    md.inline.ruler.before('image', 'captioned_image', _make_captioned_image(markers))


def spoiler_plugin(md: MarkdownIt) -> None:
    """Register the spoiler rule ahead of image parsing so '!!' wins over '!['."""
    md.inline.ruler.before('image', 'spoiler', spoiler)
