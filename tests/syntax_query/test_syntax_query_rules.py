"""Tests for rules and the tree walk."""

import pytest

from syntax_query.syntax_query_exceptions import SyntaxQueryConfigError
from syntax_query.syntax_query_matcher import SyntaxQueryMatcher
from syntax_query.syntax_query_rules import SyntaxQueryRule, apply_rules
from syntax_query.syntax_query_token import SyntaxQueryToken

from syntax_query_test_utils import word_tokens


class TestSyntaxQueryRuleCreate:
    """Test rule construction."""

    def test_create(self):
        """Test building a rule."""
        matcher = SyntaxQueryMatcher.create(kind="a")

        rule = SyntaxQueryRule.create([matcher], priority=3, name="letters")

        assert rule.matchers == (matcher,)
        assert rule.priority == 3
        assert rule.name == "letters"

    def test_no_matchers(self):
        """Test that a rule needs at least one matcher."""
        with pytest.raises(SyntaxQueryConfigError):
            SyntaxQueryRule.create([])

    @pytest.mark.parametrize("priority", ["1", 1.5, True, None])
    def test_priority_must_be_int(self, priority):
        """Test that non-integer priorities are rejected."""
        with pytest.raises(SyntaxQueryConfigError):
            SyntaxQueryRule.create([SyntaxQueryMatcher.create()], priority=priority)


class TestApplyRules:
    """Test applying rules across a token tree."""

    def test_no_rules(self):
        """Test that no rules produce no hits."""
        assert apply_rules([], word_tokens("a b"), "a b") == []

    def test_empty_tree(self):
        """Test that an empty tree produces no hits."""
        rule = SyntaxQueryRule.create([SyntaxQueryMatcher.create(hl="x")])

        assert apply_rules([rule], [], "") == []

    def test_hits_tagged_with_rule(self):
        """Test that hits carry their rule's priority and index."""
        rules = [
            SyntaxQueryRule.create([SyntaxQueryMatcher.create(kind="a")], priority=2),
            SyntaxQueryRule.create([SyntaxQueryMatcher.create(kind="b")], priority=1),
        ]

        hits = apply_rules(rules, word_tokens("a b"), "a b")

        assert [(h.hit.token.kind, h.priority, h.rule_index, h.depth) for h in hits] == [
            ("a", 2, 0, 0),
            ("b", 1, 1, 0),
        ]
        assert [h.index for h in hits] == [0, 1]

    def test_rule_major_order(self):
        """Test that each rule scans the whole list before the next rule."""
        rules = [
            SyntaxQueryRule.create([SyntaxQueryMatcher.create(kind="a")]),
            SyntaxQueryRule.create([SyntaxQueryMatcher.create(kind="b")]),
        ]

        hits = apply_rules(rules, word_tokens("a b a b"), "a b a b")

        assert [h.hit.token.start for h in hits] == [0, 4, 2, 6]

    def test_nested_lists_are_visited(self):
        """Test that rules apply inside nested token lists."""
        source = "xy"
        inner = (SyntaxQueryToken(0, 1, "x"), SyntaxQueryToken(1, 2, "y"))
        tokens = [SyntaxQueryToken(0, 2, "word", inner)]
        rule = SyntaxQueryRule.create([SyntaxQueryMatcher.create(kind="y")])

        hits = apply_rules([rule], tokens, source)

        assert len(hits) == 1
        assert hits[0].hit.token is inner[1]
        assert hits[0].depth == 1

    def test_nested_lists_visited_without_parent_match(self):
        """Test that nested lists are scanned whether or not their parent matched."""
        source = "x y"
        tokens = [
            SyntaxQueryToken(0, 1, "outer", (SyntaxQueryToken(0, 1, "x"),)),
            SyntaxQueryToken(2, 3, "other", (SyntaxQueryToken(2, 3, "x"),)),
        ]
        rule = SyntaxQueryRule.create([SyntaxQueryMatcher.create(kind="x")])

        hits = apply_rules([rule], tokens, source)

        assert [h.hit.token.start for h in hits] == [0, 2]

    def test_parent_before_children(self):
        """Test that a list's own hits come before hits nested inside it."""
        source = "ab"
        child = SyntaxQueryToken(1, 2, "t")
        tokens = [SyntaxQueryToken(0, 2, "t", (SyntaxQueryToken(0, 1, "leaf"), child))]
        rule = SyntaxQueryRule.create([SyntaxQueryMatcher.create(kind="t")])

        hits = apply_rules([rule], tokens, source)

        assert [(h.hit.token, h.depth) for h in hits] == [(tokens[0], 0), (child, 1)]

    def test_deep_nesting(self):
        """Test depth tracking through several levels."""
        source = "z"
        leaf = SyntaxQueryToken(0, 1, "z")
        tokens = [SyntaxQueryToken(0, 1, "a", (SyntaxQueryToken(0, 1, "b", (leaf,)),))]
        rule = SyntaxQueryRule.create([SyntaxQueryMatcher.create(kind="z")])

        hits = apply_rules([rule], tokens, source)

        assert [(h.hit.token, h.depth) for h in hits] == [(leaf, 2)]

    def test_pure(self):
        """Test that applying rules twice gives the same result."""
        rule = SyntaxQueryRule.create([SyntaxQueryMatcher.create(kind="a", hl="x")])
        tokens = word_tokens("a b a")

        first = apply_rules([rule], tokens, "a b a")
        second = apply_rules([rule], tokens, "a b a")

        assert first == second

    def test_sort_key(self):
        """Test the paint order key."""
        rule = SyntaxQueryRule.create([SyntaxQueryMatcher.create(kind="a")], priority=4)

        hits = apply_rules([rule], word_tokens("a"), "a")

        assert hits[0].sort_key() == (4, 0, 0, 0)
