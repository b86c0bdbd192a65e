"""markdown-it inline rule for [[target]] and [[target|label]] wiki links"""

import re

from markdown_it import MarkdownIt
from markdown_it.rules_inline import StateInline


WIKILINK_RE = re.compile(r'\[\[([^\[\]|\n]+)(?:\|([^\[\]\n]+))?\]\]')


def wikilinks_plugin(md: MarkdownIt) -> None:
    """Register the `wikilink` inline rule ahead of regular links."""
    md.inline.ruler.before("link", "wikilink", _wikilink)


def _wikilink(state: StateInline, silent: bool) -> bool:
    if not state.src.startswith("[[", state.pos):
        return False
    m = WIKILINK_RE.match(state.src, state.pos, state.posMax)
    if m is None or not m.group(1).strip():
        return False

    if not silent:
        label = 2 if m.group(2) is not None else 1
        token = state.push("wikilink", "", 0)
        token.content = m.group(label)
        token.markup = m.group(0)
        # label position relative to the start of the markup
        token.meta = {
            "target": m.group(1).strip(),
            "label_span": (m.start(label) - m.start(), m.end(label) - m.start()),
        }
    state.pos = m.end()
    return True
