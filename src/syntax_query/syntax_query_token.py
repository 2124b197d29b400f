"""Token tree consumed by the syntax query engine."""

from dataclasses import dataclass
from typing import Any, List, Sequence, Tuple


@dataclass(frozen=True)
class SyntaxQueryToken:
    """
    A node in the token tree produced by parsing a command buffer.

    Attributes:
        start: Offset of the first character of the token in the buffer
        finish: Offset one past the last character of the token
        kind: Kind tag assigned by the parser
        nested: Child tokens ordered by start offset, or None for a leaf
    """
    start: int
    finish: int
    kind: str
    nested: Tuple["SyntaxQueryToken", ...] | None = None

    def text(self, source: str) -> str:
        """
        Get the text this token covers.

        Args:
            source: The buffer the token was parsed from

        Returns:
            The token's substring of the buffer
        """
        return source[self.start:self.finish]


SyntaxQueryTokens = Sequence[SyntaxQueryToken]


def debug_tokens(tokens: SyntaxQueryTokens, source: str) -> List[List[Any]]:
    """
    Build a nested, printable representation of a token tree.

    Each token becomes `[text, kind]`, with a third element holding its
    children when it has any.

    Args:
        tokens: Sibling tokens to describe
        source: The buffer the tokens were parsed from

    Returns:
        List of token descriptions
    """
    result: List[List[Any]] = []
    for token in tokens:
        entry: List[Any] = [token.text(source), token.kind]
        if token.nested:
            entry.append(debug_tokens(token.nested, source))

        result.append(entry)

    return result
