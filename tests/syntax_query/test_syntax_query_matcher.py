"""Tests for matchers."""

import pytest

from syntax_query.syntax_query_exceptions import SyntaxQueryConfigError
from syntax_query.syntax_query_matcher import SyntaxQueryMatcher, SyntaxQueryQuantifier, compile_pattern
from syntax_query.syntax_query_sequence import evaluate
from syntax_query.syntax_query_token import SyntaxQueryToken


class TestSyntaxQueryQuantifier:
    """Test quantifier parsing and classification."""

    @pytest.mark.parametrize("mod,expected", [
        (None, SyntaxQueryQuantifier.ONE),
        ("?", SyntaxQueryQuantifier.OPTIONAL),
        ("??", SyntaxQueryQuantifier.LAZY_OPTIONAL),
        ("*", SyntaxQueryQuantifier.STAR),
        ("*?", SyntaxQueryQuantifier.LAZY_STAR),
        ("+", SyntaxQueryQuantifier.PLUS),
        ("+?", SyntaxQueryQuantifier.LAZY_PLUS),
        ("^", SyntaxQueryQuantifier.START),
        ("$", SyntaxQueryQuantifier.END),
    ])
    def test_from_mod(self, mod, expected):
        """Test converting modifier strings."""
        assert SyntaxQueryQuantifier.from_mod(mod) is expected

    def test_unknown_mod_raises(self):
        """Test that an unknown modifier is a configuration error."""
        with pytest.raises(SyntaxQueryConfigError) as exc_info:
            SyntaxQueryQuantifier.from_mod("{2}")

        assert exc_info.value.error_details["mod"] == "{2}"

    def test_optional_quantifiers(self):
        """Test which quantifiers try skipping before consuming."""
        optional = {q for q in SyntaxQueryQuantifier if q.is_optional()}

        assert optional == {
            SyntaxQueryQuantifier.OPTIONAL,
            SyntaxQueryQuantifier.LAZY_OPTIONAL,
            SyntaxQueryQuantifier.STAR,
            SyntaxQueryQuantifier.LAZY_STAR,
        }

    def test_lazy_quantifiers(self):
        """Test which quantifiers are lazy."""
        lazy = {q for q in SyntaxQueryQuantifier if q.is_lazy()}

        assert lazy == {
            SyntaxQueryQuantifier.LAZY_OPTIONAL,
            SyntaxQueryQuantifier.LAZY_STAR,
            SyntaxQueryQuantifier.LAZY_PLUS,
        }

    def test_anchors(self):
        """Test anchor classification."""
        assert SyntaxQueryQuantifier.START.is_anchor()
        assert SyntaxQueryQuantifier.END.is_anchor()
        assert not SyntaxQueryQuantifier.ONE.is_anchor()


class TestCompilePattern:
    """Test regex compilation for matcher fields."""

    def test_none_is_none(self):
        """Test that a missing pattern compiles to None."""
        assert compile_pattern("kind", None) is None

    def test_list_becomes_alternation(self):
        """Test that a list of patterns matches any of them."""
        pattern = compile_pattern("kind", ["Dnull", "Snull"])

        assert pattern.fullmatch("Dnull")
        assert pattern.fullmatch("Snull")
        assert not pattern.fullmatch("DnullSnull")

    def test_invalid_regex_raises(self):
        """Test that a malformed regex is reported at compile time."""
        with pytest.raises(SyntaxQueryConfigError) as exc_info:
            compile_pattern("regex", "(unclosed")

        assert exc_info.value.error_details == {"field": "regex", "pattern": "(unclosed"}

    def test_empty_list_raises(self):
        """Test that an empty alternative list is rejected."""
        with pytest.raises(SyntaxQueryConfigError):
            compile_pattern("kind", [])


class TestSyntaxQueryMatcherCreate:
    """Test matcher construction and validation."""

    def test_patterns_are_compiled(self):
        """Test that pattern strings are compiled up front."""
        matcher = SyntaxQueryMatcher.create(kind="STRING", regex="^-", hl="flag", hlregex="=(.*)")

        assert matcher.kind.pattern == "STRING"
        assert matcher.regex.pattern == "^-"
        assert matcher.hlregex.pattern == "=(.*)"
        assert matcher.mod is SyntaxQueryQuantifier.ONE

    def test_empty_contains_raises(self):
        """Test that contains must hold matchers."""
        with pytest.raises(SyntaxQueryConfigError):
            SyntaxQueryMatcher.create(kind="STRING", contains=[])

    def test_hlregex_without_hl_raises(self):
        """Test that hlregex needs a style to apply."""
        with pytest.raises(SyntaxQueryConfigError):
            SyntaxQueryMatcher.create(hlregex="x")

    def test_anchor_with_predicate_raises(self):
        """Test that anchors cannot carry predicates or styles."""
        with pytest.raises(SyntaxQueryConfigError) as exc_info:
            SyntaxQueryMatcher.create(mod="^", kind="STRING", hl="x")

        assert exc_info.value.error_details["fields"] == ["kind", "hl"]

    def test_quantifier_instance_accepted(self):
        """Test that a quantifier can be passed directly."""
        matcher = SyntaxQueryMatcher.create(mod=SyntaxQueryQuantifier.STAR)

        assert matcher.mod is SyntaxQueryQuantifier.STAR


class TestSyntaxQueryMatcherPredicates:
    """Test single token predicates."""

    @pytest.mark.parametrize("kind,expected", [
        ("FOO", True),
        ("FOOD", False),
        ("XFOO", False),
        ("foo", False),
        ("", False),
    ])
    def test_kind_full_match(self, kind, expected):
        """Test that kind only matches the whole kind string."""
        matcher = SyntaxQueryMatcher.create(kind="^FOO$")
        token = SyntaxQueryToken(0, 3, kind)

        assert matcher.matches_token(token, "abc") is expected

    def test_kind_ignores_text(self):
        """Test that kind matching does not depend on the token text."""
        matcher = SyntaxQueryMatcher.create(kind="FOO")

        assert matcher.matches_token(SyntaxQueryToken(0, 3, "FOO"), "xyz")
        assert matcher.matches_token(SyntaxQueryToken(0, 3, "FOO"), "FOO")
        assert not matcher.matches_token(SyntaxQueryToken(0, 3, "BAR"), "FOO")

    def test_not_kind(self):
        """Test kind exclusion."""
        matcher = SyntaxQueryMatcher.create(not_kind=["SEPER", "BAR"])

        assert matcher.matches_token(SyntaxQueryToken(0, 1, "STRING"), "a")
        assert not matcher.matches_token(SyntaxQueryToken(0, 1, "BAR"), "|")

    def test_regex_searches_text(self):
        """Test that regex is searched within the token text."""
        matcher = SyntaxQueryMatcher.create(regex="=")
        source = "ls --color=auto"

        assert matcher.matches_token(SyntaxQueryToken(3, 15, "STRING"), source)
        assert not matcher.matches_token(SyntaxQueryToken(0, 2, "STRING"), source)

    def test_not_regex(self):
        """Test text exclusion."""
        matcher = SyntaxQueryMatcher.create(not_regex=r"\)")
        source = "( a )"

        assert matcher.matches_token(SyntaxQueryToken(2, 3, "STRING"), source)
        assert not matcher.matches_token(SyntaxQueryToken(4, 5, "OUTPAR"), source)

    def test_wildcard_matches_anything(self):
        """Test that a matcher without predicates matches any token."""
        matcher = SyntaxQueryMatcher.create(hl="variable")

        assert matcher.matches_token(SyntaxQueryToken(0, 0, ""), "")

    def test_contains_requires_nested(self):
        """Test that a contains matcher fails on a leaf token."""
        matcher = SyntaxQueryMatcher.create(contains=[SyntaxQueryMatcher.create()])

        assert not matcher.matches_token(SyntaxQueryToken(0, 1, "STRING"), "a")


class TestEvaluate:
    """Test full matcher evaluation, including nested sequences."""

    def test_simple_hit(self):
        """Test that a match produces a single hit."""
        matcher = SyntaxQueryMatcher.create(kind="STRING", hl="command")
        token = SyntaxQueryToken(0, 2, "STRING")

        hits = evaluate(matcher, token, "ls")

        assert len(hits) == 1
        assert hits[0].matcher is matcher
        assert hits[0].token is token

    def test_no_match_is_none(self):
        """Test that a failed predicate yields None."""
        matcher = SyntaxQueryMatcher.create(kind="STRING")

        assert evaluate(matcher, SyntaxQueryToken(0, 1, "BAR"), "|") is None

    def test_contains_hits_follow_outer_hit(self):
        """Test that nested hits are recorded after the outer hit."""
        inner = SyntaxQueryMatcher.create(kind="substitution", hl="normal")
        outer = SyntaxQueryMatcher.create(kind="STRING", contains=[inner])
        source = '"a$(ls)b"'
        substitution = SyntaxQueryToken(2, 7, "substitution")
        token = SyntaxQueryToken(0, 9, "STRING", (
            SyntaxQueryToken(0, 1, "Dnull"),
            SyntaxQueryToken(1, 2, "text"),
            substitution,
            SyntaxQueryToken(7, 8, "text"),
            SyntaxQueryToken(8, 9, "Dnull"),
        ))

        hits = evaluate(outer, token, source)

        assert [(h.matcher, h.token) for h in hits] == [(outer, token), (inner, substitution)]

    def test_contains_without_inner_match_fails(self):
        """Test that contains fails when the nested sequence never matches."""
        inner = SyntaxQueryMatcher.create(kind="substitution")
        outer = SyntaxQueryMatcher.create(kind="STRING", contains=[inner])
        token = SyntaxQueryToken(0, 3, "STRING", (
            SyntaxQueryToken(0, 1, "Dnull"),
            SyntaxQueryToken(1, 2, "text"),
            SyntaxQueryToken(2, 3, "Dnull"),
        ))

        assert evaluate(outer, token, '"a"') is None

    def test_contains_collects_every_nested_match(self):
        """Test that every match of the nested sequence contributes hits."""
        inner = SyntaxQueryMatcher.create(kind="x", hl="mark")
        outer = SyntaxQueryMatcher.create(contains=[inner])
        children = (SyntaxQueryToken(0, 1, "x"), SyntaxQueryToken(1, 2, "y"), SyntaxQueryToken(2, 3, "x"))
        token = SyntaxQueryToken(0, 3, "word", children)

        hits = evaluate(outer, token, "xyx")

        assert [h.token for h in hits] == [token, children[0], children[2]]

    def test_contains_with_anchors_requires_whole_list(self):
        """Test that anchors let a nested sequence demand the whole child list."""
        inner = [
            SyntaxQueryMatcher.create(mod="^"),
            SyntaxQueryMatcher.create(kind="x", mod="+"),
            SyntaxQueryMatcher.create(mod="$"),
        ]
        outer = SyntaxQueryMatcher.create(contains=inner)
        all_x = SyntaxQueryToken(0, 2, "word", (SyntaxQueryToken(0, 1, "x"), SyntaxQueryToken(1, 2, "x")))
        mixed = SyntaxQueryToken(0, 2, "word", (SyntaxQueryToken(0, 1, "x"), SyntaxQueryToken(1, 2, "y")))

        assert evaluate(outer, all_x, "xx") is not None
        assert evaluate(outer, mixed, "xy") is None


class TestHighlightRanges:
    """Test the ranges a matcher highlights within a token."""

    def test_whole_token_without_hlregex(self):
        """Test that the whole token is highlighted by default."""
        matcher = SyntaxQueryMatcher.create(hl="flag")

        assert matcher.highlight_ranges(SyntaxQueryToken(3, 11, "STRING"), "ls -x=value") == [(3, 11)]

    def test_hlregex_whole_match(self):
        """Test highlighting the whole regex match, shifted to buffer offsets."""
        matcher = SyntaxQueryMatcher.create(hl="flag", hlregex="^-[^=]*")

        assert matcher.highlight_ranges(SyntaxQueryToken(3, 11, "STRING"), "ls -x=value") == [(3, 5)]

    def test_hlregex_first_group(self):
        """Test that the first capture group is used when present."""
        matcher = SyntaxQueryMatcher.create(hl="flag_value", hlregex="=(.+)")

        assert matcher.highlight_ranges(SyntaxQueryToken(3, 11, "STRING"), "ls -x=value") == [(6, 11)]

    def test_hlregex_every_occurrence(self):
        """Test that each match occurrence is highlighted."""
        matcher = SyntaxQueryMatcher.create(hl="mark", hlregex=",")

        assert matcher.highlight_ranges(SyntaxQueryToken(0, 5, "STRING"), "a,b,c") == [(1, 2), (3, 4)]

    def test_hlregex_skips_empty_matches(self):
        """Test that zero-width matches produce no range."""
        matcher = SyntaxQueryMatcher.create(hl="mark", hlregex="x*")

        assert matcher.highlight_ranges(SyntaxQueryToken(0, 3, "STRING"), "axx") == [(1, 3)]

    def test_hlregex_unmatched_group_skipped(self):
        """Test that a match whose group did not participate is skipped."""
        matcher = SyntaxQueryMatcher.create(hl="mark", hlregex="a(b)?")

        assert matcher.highlight_ranges(SyntaxQueryToken(0, 4, "STRING"), "abac") == [(1, 2)]
