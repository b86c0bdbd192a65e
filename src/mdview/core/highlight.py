"""Syntax highlighting for fenced code blocks"""

import logging
from typing import Optional

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.styles import get_all_styles
from pygments.util import ClassNotFound


logger = logging.getLogger(__name__)


def available_themes() -> set[str]:
    return set(get_all_styles())


def highlight_code(code: str, language: Optional[str], theme: str) -> Optional[str]:
    """Return `code` as inline-styled HTML, or None when the language is unknown."""
    if not language:
        return None
    try:
        lexer = get_lexer_by_name(language)
    except ClassNotFound:
        logger.debug("No lexer for language %r", language)
        return None
    return highlight(code, lexer, HtmlFormatter(style=theme, noclasses=True))
