"""Reference shell tokenizer producing syntax query token trees."""

from syntax_query.shell.shell_lexer import ShellLexer

__all__ = [
    "ShellLexer",
]
