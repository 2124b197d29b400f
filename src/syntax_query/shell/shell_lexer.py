"""
Shell command line lexer producing a token tree.

Words that contain quoting or expansions carry their parts as nested tokens,
and command substitutions carry the tokens of the command inside them, so
highlighting rules can look inside strings and substitutions.
"""

import re
from typing import ClassVar, Dict, List, Set, Tuple

from syntax_query.syntax_query_token import SyntaxQueryToken


class ShellLexer:
    """
    Lexer for interactive shell command lines.

    Token kinds follow zsh's naming: STRING for words, SEPER/BAR/DAMPER and
    friends for separators, upper case reserved words, and Dnull/Snull/Bnull
    for quoting inside words.
    """

    _WHITESPACE_CHARS: ClassVar[Set[str]] = set(" \t\r\v\f")
    _WORD_BREAK_CHARS: ClassVar[Set[str]] = set(" \t\r\v\f\n;|&()<>")
    _NAME_START_CHARS: ClassVar[Set[str]] = set("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_")
    _NAME_CHARS: ClassVar[Set[str]] = set("0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_")
    _SPECIAL_PARAM_CHARS: ClassVar[Set[str]] = set("0123456789?!#$*@-")
    _DIGIT_CHARS: ClassVar[Set[str]] = set("0123456789")

    _OPERATORS: ClassVar[Dict[str, str]] = {
        "&&": "DAMPER",
        "||": "DBAR",
        "|&": "BARAMP",
        "&!": "AMPERBANG",
        "&|": "AMPERBANG",
        ";;": "DSEMI",
        ";&": "SEMIAMP",
        ";|": "SEMIBAR",
        "|": "BAR",
        "&": "AMPER",
        ";": "SEPER",
        "(": "INPAR",
        ")": "OUTPAR",
    }

    _REDIRECTS: ClassVar[Dict[str, str]] = {
        "&>>": "DOUTANGAMP",
        "&>": "AMPOUTANG",
        ">>": "DOUTANG",
        ">|": "OUTANGBANG",
        ">&": "OUTANGAMP",
        ">": "OUTANG",
        "<<<": "TRINANG",
        "<<-": "DINANGDASH",
        "<<": "DINANG",
        "<&": "INANGAMP",
        "<>": "INOUTANG",
        "<": "INANG",
    }

    _RESERVED_WORDS: ClassVar[Dict[str, str]] = {
        "if": "IF",
        "then": "THEN",
        "else": "ELSE",
        "elif": "ELIF",
        "fi": "FI",
        "for": "FOR",
        "foreach": "FOREACH",
        "while": "WHILE",
        "until": "UNTIL",
        "do": "DOLOOP",
        "done": "DONE",
        "case": "CASE",
        "esac": "ESAC",
        "function": "FUNC",
        "select": "SELECT",
        "repeat": "REPEAT",
        "time": "TIME",
        "coproc": "COPROC",
        "nocorrect": "NOCORRECT",
        "typeset": "TYPESET",
        "{": "INBRACE",
        "[[": "DINBRACK",
    }

    # Reserved words that only count as such when they close an open block
    _CLOSING_WORDS: ClassVar[Dict[str, str]] = {
        "}": "OUTBRACE",
        "]]": "DOUTBRACK",
        "end": "ZEND",
    }

    _BLOCK_CLOSERS: ClassVar[Dict[str, str]] = {
        "IF": "FI",
        "CASE": "ESAC",
        "DOLOOP": "DONE",
        "FOREACH": "ZEND",
        "INBRACE": "OUTBRACE",
        "DINBRACK": "DOUTBRACK",
        "INPAR": "OUTPAR",
    }

    # Kinds after which the next word is a command name
    _COMMAND_START_KINDS: ClassVar[Set[str]] = {
        "SEPER", "BAR", "DBAR", "AMPER", "DAMPER", "BARAMP", "AMPERBANG", "DSEMI", "SEMIAMP",
        "SEMIBAR", "INPAR", "IF", "THEN", "ELSE", "ELIF", "DOLOOP", "WHILE", "UNTIL", "TIME",
        "COPROC", "NOCORRECT", "INBRACE",
    }

    # Kinds that leave a command line waiting for more input
    _CONTINUATION_KINDS: ClassVar[Set[str]] = {"BAR", "DBAR", "DAMPER", "BARAMP"}

    _ASSIGNMENT = re.compile(r"[A-Za-z_][A-Za-z0-9_]*(?:\[[^\]]*\])?\+?=")

    def __init__(self) -> None:
        self._input: str = ""
        self._input_len: int = 0
        self._position: int = 0
        self._complete: bool = True
        self._pending_heredocs: List[Tuple[str, bool]] = []
        self._blocks: List[str] = []

    def parse(self, input_str: str) -> Tuple[bool, List[SyntaxQueryToken]]:
        """
        Tokenize a command line.

        Args:
            input_str: The command buffer

        Returns:
            Tuple of (complete, tokens), where complete is False if the buffer
            ends inside a quote, substitution, heredoc or open block
        """
        self._input = input_str
        self._input_len = len(input_str)
        self._position = 0
        self._complete = True
        self._pending_heredocs = []
        self._blocks = []

        tokens = self._read_list("")

        complete = self._complete and not self._pending_heredocs and not self._blocks
        if tokens and tokens[-1].kind in self._CONTINUATION_KINDS:
            complete = False

        return complete, tokens

    def _read_list(self, terminator: str) -> List[SyntaxQueryToken]:
        """
        Read tokens until the terminator or the end of the input.

        Args:
            terminator: ")" inside `$(...)`, "`" inside backticks, "" at the top level

        Returns:
            The tokens read, with function definitions grouped
        """
        tokens: List[SyntaxQueryToken] = []
        command_position = True
        paren_depth = 0

        while self._position < self._input_len:
            ch = self._input[self._position]

            if ch in self._WHITESPACE_CHARS:
                self._position += 1
                continue

            if ch == '\\' and self._peek(1) in ("\n", ""):
                # Line continuation
                if self._position + 1 >= self._input_len:
                    self._complete = False

                self._position = min(self._position + 2, self._input_len)
                continue

            if terminator == '`' and ch == '`':
                return self._group_functions(tokens)

            if terminator == ')' and ch == ')' and paren_depth == 0:
                return self._group_functions(tokens)

            if ch == '\n':
                tokens.append(SyntaxQueryToken(self._position, self._position + 1, "SEPER"))
                self._position += 1
                tokens.extend(self._read_heredoc_bodies())
                command_position = True
                continue

            if ch == '#':
                tokens.append(self._read_comment())
                continue

            if self._at_redirect():
                tokens.append(self._read_redirect(terminator))
                continue

            operator = self._match(self._OPERATORS)
            if operator:
                kind = self._OPERATORS[operator]
                tokens.append(SyntaxQueryToken(self._position, self._position + len(operator), kind))
                self._position += len(operator)
                if kind == "INPAR":
                    paren_depth += 1
                    self._blocks.append("INPAR")

                elif kind == "OUTPAR":
                    paren_depth -= 1
                    self._close_block("OUTPAR")

                command_position = kind in self._COMMAND_START_KINDS
                continue

            token = self._read_word(terminator, command_position)
            tokens.append(token)
            if token.kind in ("STRING", "ENVSTRING"):
                command_position = token.kind == "ENVSTRING"

            else:
                command_position = token.kind in self._COMMAND_START_KINDS

        if terminator:
            self._complete = False

        return self._group_functions(tokens)

    def _peek(self, offset: int) -> str:
        """Get the character `offset` positions ahead, or "" past the end."""
        index = self._position + offset
        return self._input[index] if index < self._input_len else ""

    def _match(self, table: Dict[str, str]) -> str:
        """Find the longest entry of an operator table at the current position."""
        for length in (3, 2, 1):
            candidate = self._input[self._position:self._position + length]
            if len(candidate) == length and candidate in table:
                return candidate

        return ""

    def _at_redirect(self) -> bool:
        """Check for a redirection operator, optionally preceded by a file descriptor."""
        index = self._position
        while index < self._input_len and self._input[index] in self._DIGIT_CHARS:
            index += 1

        if index >= self._input_len:
            return False

        ch = self._input[index]
        if ch in "<>":
            return True

        return index == self._position and ch == '&' and self._peek(1) == '>'

    def _read_comment(self) -> SyntaxQueryToken:
        """Read a comment up to the end of the line."""
        start = self._position
        end = self._input.find('\n', start)
        self._position = self._input_len if end < 0 else end
        return SyntaxQueryToken(start, self._position, "comment")

    def _read_redirect(self, terminator: str) -> SyntaxQueryToken:
        """
        Read a redirection and its target.

        Heredoc operators register their tag so the body can be read after
        the next newline.
        """
        start = self._position
        while self._input[self._position] in self._DIGIT_CHARS:
            self._position += 1

        operator = self._match(self._REDIRECTS)
        self._position += len(operator)
        nested = [SyntaxQueryToken(start, self._position, self._REDIRECTS[operator])]

        while self._position < self._input_len and self._input[self._position] in self._WHITESPACE_CHARS:
            self._position += 1

        if self._position >= self._input_len or self._input[self._position] in self._WORD_BREAK_CHARS:
            # Nothing to redirect to yet
            self._complete = False
            return SyntaxQueryToken(start, nested[0].finish, "redirect", tuple(nested))

        target = self._read_word(terminator, False)
        if operator in ("<<", "<<-"):
            tag = "".join(ch for ch in target.text(self._input) if ch not in "\"'\\")
            self._pending_heredocs.append((tag, operator == "<<-"))
            target = SyntaxQueryToken(target.start, target.finish, "heredoc_open_tag", target.nested)

        nested.append(target)
        return SyntaxQueryToken(start, target.finish, "redirect", tuple(nested))

    def _read_heredoc_bodies(self) -> List[SyntaxQueryToken]:
        """Read the bodies of any heredocs started on the line just ended."""
        tokens: List[SyntaxQueryToken] = []
        pending = self._pending_heredocs
        self._pending_heredocs = []

        for tag, strip_tabs in pending:
            if self._position >= self._input_len:
                # Heredocs still waiting for a body
                self._complete = False
                break

            body_start = self._position
            while True:
                line_end = self._input.find('\n', self._position)
                if line_end < 0:
                    line_end = self._input_len

                line = self._input[self._position:line_end]
                check = line.lstrip('\t') if strip_tabs else line
                if check == tag:
                    if self._position > body_start:
                        tokens.append(SyntaxQueryToken(body_start, self._position, "heredoc_body"))

                    tag_start = self._position + len(line) - len(check)
                    tokens.append(SyntaxQueryToken(tag_start, line_end, "heredoc_close_tag"))
                    self._position = min(line_end + 1, self._input_len)
                    break

                if line_end >= self._input_len:
                    # Heredoc still open at the end of the buffer
                    self._complete = False
                    self._position = self._input_len
                    if self._position > body_start:
                        tokens.append(SyntaxQueryToken(body_start, self._position, "heredoc_body"))

                    break

                self._position = line_end + 1

        return tokens

    def _read_word(self, terminator: str, command_position: bool) -> SyntaxQueryToken:
        """
        Read a word and classify it.

        Args:
            terminator: Current list terminator; a backtick ends words inside backticks
            command_position: True if the word would be a command name

        Returns:
            The word token, with nested parts if it has quoting or expansions
        """
        start = self._position
        parts: List[SyntaxQueryToken] = []
        text_start = self._position

        while self._position < self._input_len:
            ch = self._input[self._position]
            if ch in self._WORD_BREAK_CHARS or (ch == '`' and terminator == '`'):
                break

            if ch not in "\\'\"$`":
                self._position += 1
                continue

            self._add_text(parts, text_start, self._position)
            if ch == '\\':
                parts.append(self._read_escape())

            elif ch == "'":
                parts.extend(self._read_single_quoted())

            elif ch == '"':
                parts.extend(self._read_double_quoted())

            elif ch == '$':
                parts.extend(self._read_dollar("String"))

            else:
                parts.append(self._read_backticks())

            text_start = self._position

        self._add_text(parts, text_start, self._position)
        text = self._input[start:self._position]
        plain = len(parts) == 1 and parts[0].kind == "text"
        nested = None if plain or not parts else tuple(parts)

        kind = "STRING"
        if nested is None:
            kind = self._classify_plain_word(text, command_position)

        elif command_position and self._ASSIGNMENT.match(text):
            kind = "ENVSTRING"

        return SyntaxQueryToken(start, self._position, kind, nested)

    def _classify_plain_word(self, text: str, command_position: bool) -> str:
        """Work out whether an unquoted word is a reserved word, an assignment or a plain word."""
        closer = self._CLOSING_WORDS.get(text)
        if closer is not None and self._blocks and self._BLOCK_CLOSERS[self._blocks[-1]] == closer:
            self._blocks.pop()
            return closer

        if not command_position:
            return "STRING"

        reserved = self._RESERVED_WORDS.get(text)
        if reserved is not None:
            if reserved in self._BLOCK_CLOSERS:
                self._blocks.append(reserved)

            else:
                self._close_block(reserved)

            return reserved

        if self._ASSIGNMENT.match(text):
            return "ENVSTRING"

        return "STRING"

    def _close_block(self, kind: str) -> None:
        """Pop the innermost open block if `kind` closes it."""
        if self._blocks and self._BLOCK_CLOSERS[self._blocks[-1]] == kind:
            self._blocks.pop()

    def _add_text(self, parts: List[SyntaxQueryToken], start: int, finish: int) -> None:
        """Append a text part if the range is not empty."""
        if finish > start:
            parts.append(SyntaxQueryToken(start, finish, "text"))

    def _read_escape(self) -> SyntaxQueryToken:
        """Read a backslash and the character it escapes."""
        start = self._position
        if self._position + 1 >= self._input_len:
            self._complete = False
            self._position += 1

        else:
            self._position += 2

        return SyntaxQueryToken(start, self._position, "Bnull")

    def _read_single_quoted(self) -> List[SyntaxQueryToken]:
        """Read a single quoted string; nothing inside is special."""
        parts = [SyntaxQueryToken(self._position, self._position + 1, "Snull")]
        self._position += 1
        end = self._input.find("'", self._position)
        if end < 0:
            self._complete = False
            self._add_text(parts, self._position, self._input_len)
            self._position = self._input_len
            return parts

        self._add_text(parts, self._position, end)
        parts.append(SyntaxQueryToken(end, end + 1, "Snull"))
        self._position = end + 1
        return parts

    def _read_double_quoted(self) -> List[SyntaxQueryToken]:
        """Read a double quoted string, including expansions inside it."""
        parts = [SyntaxQueryToken(self._position, self._position + 1, "Dnull")]
        self._position += 1
        text_start = self._position

        while self._position < self._input_len:
            ch = self._input[self._position]
            if ch == '"':
                self._add_text(parts, text_start, self._position)
                parts.append(SyntaxQueryToken(self._position, self._position + 1, "Dnull"))
                self._position += 1
                return parts

            if ch == '\\' and self._peek(1) in ('$', '`', '"', '\\', '\n'):
                self._add_text(parts, text_start, self._position)
                parts.append(self._read_escape())
                text_start = self._position
                continue

            if ch == '$':
                self._add_text(parts, text_start, self._position)
                parts.extend(self._read_dollar("Qstring"))
                text_start = self._position
                continue

            if ch == '`':
                self._add_text(parts, text_start, self._position)
                parts.append(self._read_backticks())
                text_start = self._position
                continue

            self._position += 1

        self._complete = False
        self._add_text(parts, text_start, self._position)
        return parts

    def _read_dollar(self, dollar_kind: str) -> List[SyntaxQueryToken]:
        """
        Read an expansion starting with `$`.

        Args:
            dollar_kind: Kind for the `$` itself: "Qstring" inside double quotes, else "String"

        Returns:
            The tokens making up the expansion
        """
        start = self._position
        next_ch = self._peek(1)

        if next_ch == '(' and self._peek(2) == '(':
            return [self._read_arithmetic()]

        if next_ch == '(':
            self._position += 2
            inner = self._read_list(")")
            if self._position < self._input_len:
                self._position += 1

            return [SyntaxQueryToken(start, self._position, "substitution", tuple(inner) or None)]

        if next_ch == '{':
            parts = [
                SyntaxQueryToken(start, start + 1, dollar_kind),
                SyntaxQueryToken(start + 1, start + 2, "Inbrace"),
            ]
            self._position += 2
            end = self._input.find('}', self._position)
            if end < 0:
                self._complete = False
                self._add_text(parts, self._position, self._input_len)
                self._position = self._input_len
                return parts

            self._add_text(parts, self._position, end)
            parts.append(SyntaxQueryToken(end, end + 1, "Outbrace"))
            self._position = end + 1
            return parts

        if next_ch and next_ch in self._NAME_START_CHARS:
            self._position += 2
            while self._position < self._input_len and self._input[self._position] in self._NAME_CHARS:
                self._position += 1

            return [
                SyntaxQueryToken(start, start + 1, dollar_kind),
                SyntaxQueryToken(start + 1, self._position, "text"),
            ]

        if next_ch and next_ch in self._SPECIAL_PARAM_CHARS:
            self._position += 2
            return [
                SyntaxQueryToken(start, start + 1, dollar_kind),
                SyntaxQueryToken(start + 1, start + 2, "text"),
            ]

        # A lone dollar is just text
        self._position += 1
        return [SyntaxQueryToken(start, self._position, "text")]

    def _read_arithmetic(self) -> SyntaxQueryToken:
        """Read a `$((...))` arithmetic expansion."""
        start = self._position
        self._position += 3
        depth = 2
        while self._position < self._input_len and depth > 0:
            ch = self._input[self._position]
            if ch == '(':
                depth += 1

            elif ch == ')':
                depth -= 1

            self._position += 1

        if depth > 0:
            self._complete = False

        return SyntaxQueryToken(start, self._position, "arithmetic")

    def _read_backticks(self) -> SyntaxQueryToken:
        """Read a backtick command substitution."""
        start = self._position
        self._position += 1
        inner = self._read_list("`")
        if self._position < self._input_len:
            self._position += 1

        return SyntaxQueryToken(start, self._position, "substitution", tuple(inner) or None)

    def _group_functions(self, tokens: List[SyntaxQueryToken]) -> List[SyntaxQueryToken]:
        """
        Wrap function definition headers in `function` tokens.

        Handles `function name [()]` and `name ()` where the name is in
        command position.
        """
        grouped: List[SyntaxQueryToken] = []
        i = 0
        while i < len(tokens):
            token = tokens[i]
            following = [t.kind for t in tokens[i + 1:i + 4]]

            if token.kind == "FUNC" and following[:1] == ["STRING"]:
                size = 4 if following[1:3] == ["INPAR", "OUTPAR"] else 2
                grouped.append(self._function_token(tokens[i:i + size]))
                i += size
                continue

            previous = grouped[-1].kind if grouped else "SEPER"
            if (token.kind == "STRING" and following[:2] == ["INPAR", "OUTPAR"] and
                    previous in self._COMMAND_START_KINDS):
                grouped.append(self._function_token(tokens[i:i + 3]))
                i += 3
                continue

            grouped.append(token)
            i += 1

        return grouped

    def _function_token(self, parts: List[SyntaxQueryToken]) -> SyntaxQueryToken:
        """Build a `function` token around its header tokens."""
        return SyntaxQueryToken(parts[0].start, parts[-1].finish, "function", tuple(parts))
