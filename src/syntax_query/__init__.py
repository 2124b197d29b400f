"""
Declarative syntax highlighting for command line buffers.

Rules made of quantified token matchers are applied to every level of a
token tree; their hits are resolved into ordered highlight spans that a
renderer paints over the buffer.
"""

from syntax_query.syntax_query_config import SyntaxQueryConfig
from syntax_query.syntax_query_engine import SyntaxQueryEngine
from syntax_query.syntax_query_exceptions import SyntaxQueryConfigError, SyntaxQueryError
from syntax_query.syntax_query_highlight import SyntaxQueryHighlightSpan, resolve
from syntax_query.syntax_query_matcher import SyntaxQueryMatcher, SyntaxQueryQuantifier
from syntax_query.syntax_query_renderer import (
    SyntaxQueryAnsiRenderer,
    SyntaxQueryMemoryRenderer,
    SyntaxQueryRenderer,
)
from syntax_query.syntax_query_rules import SyntaxQueryRule, SyntaxQueryRuleHit, apply_rules
from syntax_query.syntax_query_sequence import SyntaxQueryHit, evaluate, match_at, scan
from syntax_query.syntax_query_style import STYLE_RESET, SyntaxQueryStyle, SyntaxQueryStyleRegistry
from syntax_query.syntax_query_token import SyntaxQueryToken, debug_tokens

__all__ = [
    # Exceptions
    'SyntaxQueryError',
    'SyntaxQueryConfigError',
    # Types
    'SyntaxQueryToken',
    'SyntaxQueryMatcher',
    'SyntaxQueryQuantifier',
    'SyntaxQueryRule',
    'SyntaxQueryHit',
    'SyntaxQueryRuleHit',
    'SyntaxQueryHighlightSpan',
    'SyntaxQueryStyle',
    'SyntaxQueryStyleRegistry',
    'STYLE_RESET',
    # Core operations
    'debug_tokens',
    'evaluate',
    'match_at',
    'scan',
    'apply_rules',
    'resolve',
    # Configuration, engine and renderers
    'SyntaxQueryConfig',
    'SyntaxQueryEngine',
    'SyntaxQueryRenderer',
    'SyntaxQueryMemoryRenderer',
    'SyntaxQueryAnsiRenderer',
]
