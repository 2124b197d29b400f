"""Rules and the tree walk that applies them at every depth of a token tree."""

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from syntax_query.syntax_query_exceptions import SyntaxQueryConfigError
from syntax_query.syntax_query_matcher import SyntaxQueryMatcher
from syntax_query.syntax_query_sequence import SyntaxQueryHit, scan
from syntax_query.syntax_query_token import SyntaxQueryTokens


@dataclass(frozen=True, eq=False)
class SyntaxQueryRule:
    """
    An ordered sequence of matchers applied to sibling token lists.

    Attributes:
        matchers: The matchers, applied left to right
        priority: Higher priorities paint over lower ones
        name: Optional label used in log messages
    """
    matchers: Tuple[SyntaxQueryMatcher, ...]
    priority: int = 0
    name: str | None = None

    @classmethod
    def create(
        cls,
        matchers: Iterable[SyntaxQueryMatcher],
        priority: int = 0,
        name: str | None = None
    ) -> "SyntaxQueryRule":
        """
        Build and validate a rule.

        Raises:
            SyntaxQueryConfigError: If the rule has no matchers or a bad priority
        """
        matcher_tuple = tuple(matchers)
        if not matcher_tuple:
            raise SyntaxQueryConfigError("Rule must have at least one matcher", {"name": name})

        if isinstance(priority, bool) or not isinstance(priority, int):
            raise SyntaxQueryConfigError(
                f"Rule priority must be an integer, got {priority!r}", {"name": name}
            )

        return cls(matchers=matcher_tuple, priority=priority, name=name)


@dataclass(frozen=True)
class SyntaxQueryRuleHit:
    """
    A matcher hit tagged with where it came from.

    Attributes:
        hit: The matcher and token that matched
        priority: Declared priority of the rule that produced the hit
        rule_index: Position of that rule in the rule list
        depth: Nesting depth of the sibling list the rule matched at
        index: Emission index across the whole tree walk
    """
    hit: SyntaxQueryHit
    priority: int
    rule_index: int
    depth: int
    index: int

    def sort_key(self) -> Tuple[int, int, int, int]:
        """Paint order: priority, then rule order, then depth, then emission order."""
        return (self.priority, self.rule_index, self.depth, self.index)


def apply_rules(
    rules: Sequence[SyntaxQueryRule],
    tokens: SyntaxQueryTokens,
    source: str
) -> List[SyntaxQueryRuleHit]:
    """
    Apply every rule to every sibling list in a token tree.

    Each sibling list is scanned with the full rule set, whether or not any
    rule matched the token that owns it.  Outer lists are visited before the
    lists nested inside them.

    Args:
        rules: The rules to apply, in declaration order
        tokens: The root sibling list
        source: The buffer the tokens were parsed from

    Returns:
        All hits, in emission order
    """
    return [
        SyntaxQueryRuleHit(
            hit=hit,
            priority=rules[rule_index].priority,
            rule_index=rule_index,
            depth=depth,
            index=index
        )
        for index, (rule_index, depth, hit) in enumerate(_apply_rules_at_depth(rules, tokens, source, 0))
    ]


def _apply_rules_at_depth(
    rules: Sequence[SyntaxQueryRule],
    tokens: SyntaxQueryTokens,
    source: str,
    depth: int
) -> List[Tuple[int, int, SyntaxQueryHit]]:
    """Collect (rule index, depth, hit) triples for one sibling list and everything below it."""
    found = [
        (rule_index, depth, hit)
        for rule_index, rule in enumerate(rules)
        for hits in scan(rule.matchers, tokens, source)
        for hit in hits
    ]

    for token in tokens:
        if token.nested:
            found.extend(_apply_rules_at_depth(rules, token.nested, source, depth + 1))

    return found
