"""Qt syntax highlighter driven by the syntax query engine."""

import logging
from typing import Dict, List

from PySide6.QtCore import QTimer
from PySide6.QtGui import QSyntaxHighlighter, QTextCharFormat, QTextDocument

from syntax_query.qt.syntax_query_char_format import style_to_char_format
from syntax_query.shell.shell_lexer import ShellLexer
from syntax_query.syntax_query_config import SyntaxQueryConfig
from syntax_query.syntax_query_engine import SyntaxQueryEngine, SyntaxQueryParseFunction
from syntax_query.syntax_query_highlight import SyntaxQueryHighlightSpan
from syntax_query.syntax_query_renderer import SyntaxQueryMemoryRenderer
from syntax_query.syntax_query_style import SyntaxQueryStyle


class SyntaxQueryHighlighter(QSyntaxHighlighter):
    """
    Syntax highlighter for command line input.

    The whole document is treated as one command buffer.  Spans resolved by
    the engine are composed per character and then applied block by block.
    """

    def __init__(
        self,
        parent: QTextDocument,
        config: SyntaxQueryConfig | None = None,
        parse: SyntaxQueryParseFunction | None = None
    ) -> None:
        """
        Initialize the highlighter.

        Args:
            parent: Document to highlight
            config: Styles and rules, defaulting to the built-in shell rules
            parse: Parser for the buffer, defaulting to ShellLexer
        """
        super().__init__(parent)

        self._logger = logging.getLogger("SyntaxQueryHighlighter")
        self._renderer = SyntaxQueryMemoryRenderer()
        self._engine = SyntaxQueryEngine(
            config or SyntaxQueryConfig.default(),
            parse or ShellLexer().parse,
            self._renderer
        )
        self._evaluated_text: str | None = None
        self._formats: List[QTextCharFormat | None] = []
        self._format_cache: Dict[SyntaxQueryStyle, QTextCharFormat] = {}

    def engine(self) -> SyntaxQueryEngine:
        """Get the engine driving this highlighter."""
        return self._engine

    def spans(self) -> List[SyntaxQueryHighlightSpan]:
        """Get the spans currently applied to the document."""
        return [span for span, _style in self._renderer.highlights(self._engine.namespace())]

    def highlightBlock(self, text: str) -> None:
        """Apply highlighting to the given block of text."""
        try:
            current_block = self.currentBlock()
            full_text = self.document().toPlainText()
            if full_text != self._evaluated_text:
                self._evaluate(full_text)

                # Blocks before this one were painted with the old spans
                if current_block.blockNumber() > 0:
                    QTimer.singleShot(0, self.rehighlight)

            block_start = current_block.position()
            run_start = 0
            for i in range(1, len(text) + 1):
                if i < len(text) and self._format_at(block_start + i) is self._format_at(block_start + run_start):
                    continue

                char_format = self._format_at(block_start + run_start)
                if char_format is not None:
                    self.setFormat(run_start, i - run_start, char_format)

                run_start = i

        except Exception:
            self._logger.exception("highlighting exception")

    def _evaluate(self, full_text: str) -> None:
        """Run the engine over the document and compose per-character formats."""
        self._engine.buffer_changed(full_text)
        self._evaluated_text = full_text

        styles = self._renderer.styles_at(len(full_text), self._engine.namespace())
        self._formats = [None if style.is_empty() else self._char_format(style) for style in styles]

    def _char_format(self, style: SyntaxQueryStyle) -> QTextCharFormat:
        """Get the character format for a composed style, creating it once."""
        char_format = self._format_cache.get(style)
        if char_format is None:
            char_format = style_to_char_format(style)
            self._format_cache[style] = char_format

        return char_format

    def _format_at(self, position: int) -> QTextCharFormat | None:
        """Get the format for a document position, if it has one."""
        if position < len(self._formats):
            return self._formats[position]

        return None
