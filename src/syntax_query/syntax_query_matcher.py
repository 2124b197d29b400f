"""Matchers: the single-token predicates that make up a rule."""

from dataclasses import dataclass
from enum import Enum
import re
from typing import Iterable, List, Sequence, Tuple

from syntax_query.syntax_query_exceptions import SyntaxQueryConfigError
from syntax_query.syntax_query_token import SyntaxQueryToken


class SyntaxQueryQuantifier(Enum):
    """How many sibling tokens a matcher may consume."""
    ONE = ""
    OPTIONAL = "?"
    LAZY_OPTIONAL = "??"
    STAR = "*"
    LAZY_STAR = "*?"
    PLUS = "+"
    LAZY_PLUS = "+?"
    START = "^"
    END = "$"

    @classmethod
    def from_mod(cls, mod: str | None) -> "SyntaxQueryQuantifier":
        """
        Convert a rule `mod` string into a quantifier.

        Args:
            mod: The modifier string, or None for exactly-one

        Returns:
            The matching quantifier

        Raises:
            SyntaxQueryConfigError: If the modifier is not recognised
        """
        if mod is None:
            return cls.ONE

        try:
            return cls(mod)

        except ValueError as e:
            raise SyntaxQueryConfigError(
                f"Unknown quantifier: {mod!r}",
                {"mod": mod, "allowed": [q.value for q in cls if q.value]}
            ) from e

    def is_optional(self) -> bool:
        """True if the matcher may be skipped before trying to consume a token."""
        return self in _OPTIONAL_QUANTIFIERS

    def is_lazy(self) -> bool:
        """True if the quantifier prefers consuming fewer tokens."""
        return self in _LAZY_QUANTIFIERS

    def is_anchor(self) -> bool:
        """True for the zero-width start and end anchors."""
        return self in (SyntaxQueryQuantifier.START, SyntaxQueryQuantifier.END)


_OPTIONAL_QUANTIFIERS = frozenset({
    SyntaxQueryQuantifier.OPTIONAL,
    SyntaxQueryQuantifier.LAZY_OPTIONAL,
    SyntaxQueryQuantifier.STAR,
    SyntaxQueryQuantifier.LAZY_STAR,
})

_LAZY_QUANTIFIERS = frozenset({
    SyntaxQueryQuantifier.LAZY_OPTIONAL,
    SyntaxQueryQuantifier.LAZY_STAR,
    SyntaxQueryQuantifier.LAZY_PLUS,
})


def compile_pattern(field: str, pattern: str | Sequence[str] | None) -> re.Pattern[str] | None:
    """
    Compile a matcher regex.

    A list of patterns is treated as a set of alternatives.

    Args:
        field: Name of the matcher field, used in error reports
        pattern: The pattern, a list of alternative patterns, or None

    Returns:
        The compiled pattern, or None if no pattern was given

    Raises:
        SyntaxQueryConfigError: If the pattern is not a valid regex
    """
    if pattern is None:
        return None

    if not isinstance(pattern, str):
        alternatives = list(pattern)
        if not alternatives or not all(isinstance(p, str) for p in alternatives):
            raise SyntaxQueryConfigError(
                f"Matcher field '{field}' must be a string or a non-empty list of strings",
                {"field": field, "value": pattern}
            )

        pattern = "|".join(f"(?:{p})" for p in alternatives)

    try:
        return re.compile(pattern)

    except re.error as e:
        raise SyntaxQueryConfigError(
            f"Invalid regex in matcher field '{field}': {e}",
            {"field": field, "pattern": pattern}
        ) from e


@dataclass(frozen=True, eq=False)
class SyntaxQueryMatcher:
    """
    One element of a rule.

    All regexes are compiled up front; use `create` to build a matcher from
    pattern strings.

    Attributes:
        kind: Must full-match the token kind
        not_kind: Must not full-match the token kind
        regex: Must be found in the token text
        not_regex: Must not be found in the token text
        contains: Sequence scanned over the token's nested children
        hl: Style name applied to matched tokens
        hlregex: Restricts highlighting to the regex's matches within the token
        mod: Quantifier for this element
    """
    kind: re.Pattern[str] | None = None
    not_kind: re.Pattern[str] | None = None
    regex: re.Pattern[str] | None = None
    not_regex: re.Pattern[str] | None = None
    contains: Tuple["SyntaxQueryMatcher", ...] | None = None
    hl: str | None = None
    hlregex: re.Pattern[str] | None = None
    mod: SyntaxQueryQuantifier = SyntaxQueryQuantifier.ONE

    @classmethod
    def create(
        cls,
        kind: str | Sequence[str] | None = None,
        not_kind: str | Sequence[str] | None = None,
        regex: str | Sequence[str] | None = None,
        not_regex: str | Sequence[str] | None = None,
        contains: Iterable["SyntaxQueryMatcher"] | None = None,
        hl: str | None = None,
        hlregex: str | None = None,
        mod: str | SyntaxQueryQuantifier | None = None
    ) -> "SyntaxQueryMatcher":
        """
        Build and validate a matcher from pattern strings.

        Raises:
            SyntaxQueryConfigError: If any pattern is invalid or the fields are inconsistent
        """
        quantifier = mod if isinstance(mod, SyntaxQueryQuantifier) else SyntaxQueryQuantifier.from_mod(mod)

        nested: Tuple[SyntaxQueryMatcher, ...] | None = None
        if contains is not None:
            nested = tuple(contains)
            if not nested:
                raise SyntaxQueryConfigError("Matcher 'contains' must hold at least one matcher")

        if hlregex is not None and hl is None:
            raise SyntaxQueryConfigError(
                "Matcher has 'hlregex' but no 'hl' style", {"hlregex": hlregex}
            )

        if quantifier.is_anchor():
            extra = [
                name for name, value in (
                    ("kind", kind), ("not_kind", not_kind), ("regex", regex),
                    ("not_regex", not_regex), ("contains", contains), ("hl", hl), ("hlregex", hlregex)
                ) if value is not None
            ]
            if extra:
                raise SyntaxQueryConfigError(
                    f"Anchor '{quantifier.value}' cannot carry {', '.join(extra)}",
                    {"mod": quantifier.value, "fields": extra}
                )

        return cls(
            kind=compile_pattern("kind", kind),
            not_kind=compile_pattern("not_kind", not_kind),
            regex=compile_pattern("regex", regex),
            not_regex=compile_pattern("not_regex", not_regex),
            contains=nested,
            hl=hl,
            hlregex=compile_pattern("hlregex", hlregex),
            mod=quantifier
        )

    def matches_token(self, token: SyntaxQueryToken, source: str) -> bool:
        """
        Check the matcher's own predicates against a token.

        Nested `contains` sequences are not evaluated here; that is the
        sequence engine's job.

        Args:
            token: Token to test
            source: The buffer the token was parsed from

        Returns:
            True if the token passes every kind and regex predicate
        """
        if self.contains is not None and not token.nested:
            return False

        if self.kind is not None and self.kind.fullmatch(token.kind) is None:
            return False

        if self.not_kind is not None and self.not_kind.fullmatch(token.kind) is not None:
            return False

        if self.regex is not None or self.not_regex is not None:
            text = token.text(source)
            if self.regex is not None and self.regex.search(text) is None:
                return False

            if self.not_regex is not None and self.not_regex.search(text) is not None:
                return False

        return True

    def highlight_ranges(self, token: SyntaxQueryToken, source: str) -> List[Tuple[int, int]]:
        """
        Get the absolute ranges this matcher highlights within a token.

        Without `hlregex` this is the whole token.  With it, each non-empty
        match contributes its first capture group (when the regex has groups
        and the group took part in the match) or otherwise the whole match.

        Args:
            token: The matched token
            source: The buffer the token was parsed from

        Returns:
            List of (start, finish) ranges in buffer coordinates
        """
        if self.hlregex is None:
            return [(token.start, token.finish)]

        ranges: List[Tuple[int, int]] = []
        text = token.text(source)
        use_group = self.hlregex.groups > 0
        for match in self.hlregex.finditer(text):
            start, finish = match.span(1) if use_group else match.span()
            if start < 0 or finish <= start:
                continue

            ranges.append((token.start + start, token.start + finish))

        return ranges
