"""
Sequence engine: aligns a list of quantified matchers with a run of sibling tokens.

This works like a backtracking regex engine whose alphabet is tokens rather
than characters.  Optional elements first try the rest of the sequence
without consuming anything; lazy quantifiers take that result straight away,
while greedy ones keep it as a fallback and try to consume more.  Whenever a
mandatory step fails the most recent fallback is returned.
"""

from dataclasses import dataclass
from typing import Iterator, List, Sequence, Tuple

from syntax_query.syntax_query_matcher import SyntaxQueryMatcher, SyntaxQueryQuantifier
from syntax_query.syntax_query_token import SyntaxQueryToken, SyntaxQueryTokens


@dataclass(frozen=True)
class SyntaxQueryHit:
    """A token that satisfied a matcher."""
    matcher: SyntaxQueryMatcher
    token: SyntaxQueryToken


SyntaxQueryMatch = Tuple[int, List[SyntaxQueryHit]]


def evaluate(matcher: SyntaxQueryMatcher, token: SyntaxQueryToken, source: str) -> List[SyntaxQueryHit] | None:
    """
    Evaluate one matcher against one token.

    Args:
        matcher: The matcher to apply
        token: The candidate token
        source: The buffer the token was parsed from

    Returns:
        The matcher's own hit followed by any hits from its `contains`
        sequence, or None if the token does not match
    """
    if not matcher.matches_token(token, source):
        return None

    hits = [SyntaxQueryHit(matcher, token)]
    if matcher.contains is not None:
        assert token.nested is not None

        found = False
        for nested_hits in scan(matcher.contains, token.nested, source):
            found = True
            hits.extend(nested_hits)

        if not found:
            return None

    return hits


def match_at(
    matchers: Sequence[SyntaxQueryMatcher],
    seq_index: int,
    siblings: SyntaxQueryTokens,
    token_index: int,
    source: str
) -> SyntaxQueryMatch | None:
    """
    Try to align `matchers[seq_index:]` with `siblings[token_index:]`.

    Args:
        matchers: The rule's matchers
        seq_index: First matcher to apply
        siblings: The sibling token list being matched
        token_index: Index of the first token to consume
        source: The buffer the tokens were parsed from

    Returns:
        Tuple of (index one past the last consumed token, hits), or None if
        the sequence cannot be matched here
    """
    hits: List[SyntaxQueryHit] = []
    fallback: SyntaxQueryMatch | None = None
    num_matchers = len(matchers)
    num_tokens = len(siblings)

    matcher = matchers[seq_index] if seq_index < num_matchers else None
    quantifier = matcher.mod if matcher is not None else SyntaxQueryQuantifier.ONE

    while matcher is not None:
        if quantifier.is_optional():
            skipped = match_at(matchers, seq_index + 1, siblings, token_index, source)
            if skipped is not None:
                candidate = (skipped[0], hits + skipped[1])
                if quantifier.is_lazy():
                    return candidate

                fallback = candidate

        next_matcher = False
        if quantifier is SyntaxQueryQuantifier.END:
            if token_index < num_tokens:
                return fallback

            next_matcher = True

        elif quantifier is SyntaxQueryQuantifier.START:
            if token_index != 0:
                return fallback

            next_matcher = True

        elif token_index >= num_tokens:
            # Out of tokens with matchers still to apply
            return fallback

        else:
            matched = evaluate(matcher, siblings[token_index], source)
            if matched is not None:
                hits.extend(matched)
                token_index += 1

            if quantifier in (SyntaxQueryQuantifier.STAR, SyntaxQueryQuantifier.LAZY_STAR):
                next_matcher = matched is None

            elif quantifier in (SyntaxQueryQuantifier.PLUS, SyntaxQueryQuantifier.LAZY_PLUS):
                if matched is None:
                    return fallback

                # One mandatory match done, the rest is zero-or-more
                quantifier = (
                    SyntaxQueryQuantifier.LAZY_STAR if quantifier.is_lazy() else SyntaxQueryQuantifier.STAR
                )

            elif matched is not None:
                next_matcher = True

            else:
                return fallback

        if next_matcher:
            seq_index += 1
            matcher = matchers[seq_index] if seq_index < num_matchers else None
            quantifier = matcher.mod if matcher is not None else SyntaxQueryQuantifier.ONE

    return token_index, hits


def scan(
    matchers: Sequence[SyntaxQueryMatcher],
    siblings: SyntaxQueryTokens,
    source: str
) -> Iterator[List[SyntaxQueryHit]]:
    """
    Find successive non-overlapping matches of a sequence in a sibling list.

    Matching is attempted at each index from the left.  After a match the
    scan resumes at the match's end; a zero-width match still moves on by
    one token.

    Args:
        matchers: The rule's matchers
        siblings: The sibling token list to scan
        source: The buffer the tokens were parsed from

    Yields:
        The hits of each match, in order
    """
    token_index = 0
    while token_index < len(siblings):
        result = match_at(matchers, 0, siblings, token_index, source)
        if result is None:
            token_index += 1
            continue

        end_index, hits = result
        yield hits
        token_index = max(end_index, token_index + 1)
