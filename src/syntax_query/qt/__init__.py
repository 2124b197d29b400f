"""Qt rendering for syntax query highlights."""

from syntax_query.qt.syntax_query_char_format import colour_for, style_to_char_format
from syntax_query.qt.syntax_query_highlighter import SyntaxQueryHighlighter

__all__ = [
    "SyntaxQueryHighlighter",
    "colour_for",
    "style_to_char_format",
]
