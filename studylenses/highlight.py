"""Terminal syntax highlighting for virtual file content.

Uses Pygments with a lexer picked from the file name and neutralizes
terminal control bytes before anything is printed.
"""

from __future__ import annotations

import re

from pygments import highlight as pygments_highlight
from pygments.formatters import TerminalFormatter
from pygments.lexer import Lexer
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from .config import DEFAULT_STYLE

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")

_FORMATTERS: dict[str, TerminalFormatter] = {}
_VALID_STYLES: set[str] = set()
_INVALID_STYLES: set[str] = set()


def _escape_control(match: re.Match[str]) -> str:
    return f"\\x{ord(match.group()):02x}"


def sanitize_terminal_text(source: str) -> str:
    """Render C0/C1 control characters (except tab and newlines) as ``\\xNN``."""
    return _CONTROL_RE.sub(_escape_control, source)


def normalize_style(style: str) -> str:
    """Validate a requested style name, falling back to the default."""
    if style in _VALID_STYLES:
        return style
    if style in _INVALID_STYLES:
        return DEFAULT_STYLE
    try:
        get_style_by_name(style)
    except ClassNotFound:
        _INVALID_STYLES.add(style)
        return DEFAULT_STYLE
    _VALID_STYLES.add(style)
    return style


def _formatter_for_style(style: str) -> TerminalFormatter:
    formatter = _FORMATTERS.get(style)
    if formatter is None:
        formatter = TerminalFormatter(style=style)
        _FORMATTERS[style] = formatter
    return formatter


def lexer_for(filename: str, source: str = "") -> Lexer:
    """Pick a lexer from ``filename``; plain text when nothing matches."""
    try:
        return get_lexer_for_filename(filename, source)
    except ClassNotFound:
        return TextLexer()


def language_name(filename: str) -> str:
    """Human-readable language name for ``filename`` (``Text only`` when unknown)."""
    return lexer_for(filename).name


def highlight_source(source: str, filename: str, style: str = DEFAULT_STYLE) -> str:
    """Return ``source`` sanitized and colorized for a terminal."""
    safe = sanitize_terminal_text(source)
    formatter = _formatter_for_style(normalize_style(style))
    return pygments_highlight(safe, lexer_for(filename, safe), formatter)


__all__ = [
    "sanitize_terminal_text",
    "normalize_style",
    "lexer_for",
    "language_name",
    "highlight_source",
]
