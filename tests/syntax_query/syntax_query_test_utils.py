"""
Utility functions for syntax query tests.
"""
from typing import List, Tuple

from syntax_query.syntax_query_token import SyntaxQueryToken


def word_tokens(source: str) -> List[SyntaxQueryToken]:
    """
    Build one token per space separated word, using the word as its kind.

    Args:
        source: Words separated by single spaces

    Returns:
        The sibling tokens
    """
    tokens = []
    position = 0
    for word in source.split(" "):
        tokens.append(SyntaxQueryToken(position, position + len(word), word))
        position += len(word) + 1

    return tokens


def span_tuples(spans) -> List[Tuple[int, int, str]]:
    """Reduce spans to (start, finish, style) for easy comparison."""
    return [(span.start, span.finish, span.style) for span in spans]
