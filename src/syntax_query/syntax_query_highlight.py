"""Turns rule hits into an ordered list of highlight spans."""

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from syntax_query.syntax_query_rules import SyntaxQueryRuleHit


@dataclass(frozen=True)
class SyntaxQueryHighlightSpan:
    """
    A styled range of the buffer.

    Spans are applied in `order`; where they overlap, later spans win.

    Attributes:
        start: First character offset covered
        finish: Offset one past the last character covered
        style: Name of the style to apply
        priority: Declared priority of the rule that produced the span
        order: Position of the span in the resolved list
    """
    start: int
    finish: int
    style: str
    priority: int
    order: int


def resolve(rule_hits: Sequence[SyntaxQueryRuleHit], source: str) -> List[SyntaxQueryHighlightSpan]:
    """
    Convert rule hits into highlight spans in paint order.

    Hits whose matcher has no `hl` style contribute nothing.  Spans are
    sorted by rule priority, then rule order, then nesting depth, then the
    order the hits were found in.

    Args:
        rule_hits: Hits produced by `apply_rules`
        source: The buffer the tokens were parsed from

    Returns:
        The spans, numbered in paint order
    """
    pending: List[Tuple[Tuple[int, int, int, int], int, int, int, str]] = []
    for rule_hit in rule_hits:
        matcher = rule_hit.hit.matcher
        if matcher.hl is None:
            continue

        key = rule_hit.sort_key()
        for sub_index, (start, finish) in enumerate(matcher.highlight_ranges(rule_hit.hit.token, source)):
            pending.append((key, sub_index, start, finish, matcher.hl))

    pending.sort(key=lambda p: (p[0], p[1]))

    return [
        SyntaxQueryHighlightSpan(start=start, finish=finish, style=style, priority=key[0], order=order)
        for order, (key, _sub_index, start, finish, style) in enumerate(pending)
    ]
