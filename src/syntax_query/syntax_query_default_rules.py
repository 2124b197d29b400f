"""
Built-in styles and rules for highlighting shell command lines.

These are plain data in the same shape as a JSON configuration file, and are
compiled by SyntaxQueryConfig.  Token kinds are the ones produced by
ShellLexer.  Rules later in the list paint over earlier ones.
"""

from typing import Any, Dict, List


_QUOTES = ["Dnull", "Snull"]

_DOLLARS = ["Qstring", "String"]

_SEPARATORS = [
    "SEPER", "BAR", "DBAR", "AMPER", "DAMPER", "BARAMP", "AMPERBANG",
    "SEMIAMP", "SEMIBAR", "DSEMI", "INPAR", "OUTPAR", "INBRACE", "OUTBRACE",
]

_KEYWORDS = [
    "CASE", "COPROC", "DOLOOP", "DONE", "ELIF", "ELSE", "ZEND", "ESAC", "FI", "FOR", "FOREACH",
    "FUNC", "IF", "NOCORRECT", "REPEAT", "SELECT", "THEN", "TIME", "UNTIL", "WHILE", "TYPESET",
]


DEFAULT_STYLES: Dict[str, Dict[str, Any]] = {
    "normal": {
        "fg": "reset",
        "bg": "reset",
        "bold": False,
        "dim": False,
        "italic": False,
        "underline": False,
        "strikethrough": False,
        "reversed": False,
        "blink": False,
    },
    "flag": {"fg": "#ffaaaa"},
    "escape": {"fg": "#ffaaaa"},
    "escape_space": {"extends": "escape", "bg": "#442222"},
    "string": {"fg": "#ffffaa", "bg": "#333300"},
    "heredoc_tag": {"fg": "lightblue", "bold": True},
    "variable": {"fg": "lightmagenta"},
    "command": {"fg": "#aaffaa", "bold": True},
    "func": {"fg": "yellow"},
    "keyword": {"fg": "red"},
    "punctuation": {"fg": "cyan"},
    "comment": {"fg": "grey"},
    "env_var_key": {"fg": "#aa77ff"},
    "env_var_value": {"fg": "#77aaff"},
    "error": {"bg": "red"},
}


DEFAULT_RULES: List[Any] = [
    {"name": "comment", "matchers": [{"hl": "comment", "kind": "comment"}]},
    {"name": "punctuation", "matchers": [{"hl": "punctuation", "regex": r"^\W+$"}]},
    {"name": "flag", "matchers": [{"hl": "flag", "kind": "STRING", "regex": r"^-"}]},
    {"name": "env_var_key", "matchers": [{"hl": "env_var_key", "kind": "ENVSTRING", "hlregex": r"^[^=]+"}]},
    {"name": "env_var_value", "matchers": [{"hl": "env_var_value", "kind": "ENVSTRING", "hlregex": r"=(.+)"}]},
    {"name": "escape", "matchers": [{"hl": "escape", "kind": "Bnull"}]},
    {"name": "escape_space", "matchers": [{"hl": "escape_space", "kind": "Bnull", "regex": r"^\\\s"}]},
    {
        "name": "string",
        "matchers": [
            {"hl": "string", "kind": _QUOTES},
            {"hl": "string", "not_kind": _QUOTES, "mod": "*"},
            {"hl": "string", "kind": _QUOTES, "mod": "?"},
        ],
    },
    {"name": "heredoc_body", "matchers": [{"hl": "string", "kind": "heredoc_body"}]},
    {"name": "heredoc_tag", "matchers": [{"hl": "heredoc_tag", "kind": ["heredoc_open_tag", "heredoc_close_tag"]}]},
    # Substitutions inside strings are commands, not string text
    {
        "name": "string_substitution",
        "matchers": [{"kind": ["STRING", "ENVSTRING"], "contains": [{"hl": "normal", "kind": "substitution"}]}],
    },
    {
        "name": "braced_variable",
        "matchers": [
            {"hl": "variable", "kind": _DOLLARS},
            {"hl": "variable", "kind": "Inbrace"},
            {"hl": "variable", "mod": "*?"},
            {"hl": "variable", "kind": "Outbrace"},
        ],
    },
    {
        "name": "variable",
        "matchers": [
            {"hl": "variable", "kind": _DOLLARS},
            {"hl": "variable", "kind": "text", "regex": r"^(?:[A-Za-z_][A-Za-z0-9_]*|[0-9?!#$*@-])$"},
        ],
    },
    # The first word is the command; the rest of the simple command is consumed unhighlighted
    {
        "name": "command",
        "matchers": [
            {"hl": "command", "kind": "STRING"},
            {"not_kind": _SEPARATORS, "mod": "*"},
        ],
    },
    {"name": "redirect_target", "matchers": [{"kind": "redirect", "contains": [{"hl": "normal", "kind": "STRING"}]}]},
    {
        "name": "function_keyword",
        "matchers": [{"kind": "function", "contains": [{"hl": "func", "kind": "FUNC"}, {"hl": "func", "kind": "STRING", "mod": "?"}]}],
    },
    {
        "name": "function_name",
        "matchers": [{"kind": "function", "contains": [{"mod": "^"}, {"hl": "func", "kind": "STRING"}]}],
    },
    {"name": "keyword", "matchers": [{"hl": "keyword", "kind": _KEYWORDS}]},
    {
        "name": "unmatched_paren",
        "matchers": [{"hl": "error", "regex": r"^\($"}, {"not_regex": r"\)", "mod": "*"}, {"mod": "$"}],
    },
    {
        "name": "unmatched_brace",
        "matchers": [{"hl": "error", "regex": r"^\{$"}, {"not_regex": r"\}", "mod": "*"}, {"mod": "$"}],
    },
]
