"""
Command-line interface for trying out highlight rules.
"""

import argparse
import json
import logging
import sys
from typing import List

from syntax_query.shell.shell_lexer import ShellLexer
from syntax_query.syntax_query_config import SyntaxQueryConfig
from syntax_query.syntax_query_engine import SyntaxQueryEngine
from syntax_query.syntax_query_exceptions import SyntaxQueryConfigError
from syntax_query.syntax_query_renderer import SyntaxQueryAnsiRenderer
from syntax_query.syntax_query_token import debug_tokens


def main(argv: List[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="syntax_query",
        description="Highlight a shell command line",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s 'echo "hello $USER"'              # Print the command with colours
  %(prog)s --tokens 'ls | grep foo'          # Show the token tree
  %(prog)s --config rules.json --spans 'ls'  # Use custom rules, list spans
        """
    )
    parser.add_argument('text', nargs='+', help='Command text; multiple arguments are joined with spaces')
    parser.add_argument('--config', '-c', help='JSON file with styles and rules')
    parser.add_argument('--tokens', action='store_true', help='Print the token tree as JSON')
    parser.add_argument('--spans', action='store_true', help='Print the resolved highlight spans')
    parser.add_argument('--log-level', default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'], help='Logging level')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        config = SyntaxQueryConfig.load(args.config) if args.config else SyntaxQueryConfig.default()

    except SyntaxQueryConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    text = " ".join(args.text)
    renderer = SyntaxQueryAnsiRenderer()
    engine = SyntaxQueryEngine(config, ShellLexer().parse, renderer)
    engine.buffer_changed(text)

    if args.tokens:
        tokens, _buffer = engine.parse_buffer(text)
        print(json.dumps(debug_tokens(tokens, text), indent=2))

    if args.spans:
        for span in engine.spans():
            print(f"{span.order:3d} [{span.start}, {span.finish}) {span.style} "
                  f"priority={span.priority} {text[span.start:span.finish]!r}")

    print(renderer.render(text, engine.namespace()))
    return 0


if __name__ == '__main__':
    sys.exit(main())
