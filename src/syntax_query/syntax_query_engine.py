"""
Reactive highlighting engine.

The engine is driven by buffer change notifications.  Each change re-parses
the buffer, applies the configured rules to the token tree, resolves the hits
into highlight spans and replaces the renderer's namespace with them.  When
the only change since a complete parse is trailing whitespace, the previous
result is kept as it is.
"""

import logging
from typing import Callable, List, Tuple

from syntax_query.syntax_query_config import SyntaxQueryConfig
from syntax_query.syntax_query_highlight import SyntaxQueryHighlightSpan, resolve
from syntax_query.syntax_query_renderer import SyntaxQueryRenderer
from syntax_query.syntax_query_rules import apply_rules
from syntax_query.syntax_query_token import SyntaxQueryToken, SyntaxQueryTokens, debug_tokens


SyntaxQueryParseFunction = Callable[[str], Tuple[bool, List[SyntaxQueryToken]]]
SyntaxQueryBufferCallback = Callable[[SyntaxQueryTokens, str], bool]


class SyntaxQueryEngine:
    """Re-highlights a command buffer each time it changes."""

    DEFAULT_NAMESPACE = "syntax_query"

    def __init__(
        self,
        config: SyntaxQueryConfig,
        parse: SyntaxQueryParseFunction,
        renderer: SyntaxQueryRenderer | None = None,
        namespace: str = DEFAULT_NAMESPACE
    ) -> None:
        """
        Initialize the engine.

        Args:
            config: Styles and rules to highlight with
            parse: Function turning buffer text into (complete, tokens)
            renderer: Where resolved spans are sent, if anywhere
            namespace: Renderer namespace owned by this engine
        """
        self._config = config
        self._parse = parse
        self._renderer = renderer
        self._namespace = namespace
        self._callbacks: List[SyntaxQueryBufferCallback] = []
        self._logger = logging.getLogger("SyntaxQueryEngine")

        self._prev_buffer: str | None = None
        self._prev_complete = False
        self._prev_tokens: List[SyntaxQueryToken] = []
        self._prev_spans: List[SyntaxQueryHighlightSpan] = []
        self._spans_buffer: str | None = None

    def config(self) -> SyntaxQueryConfig:
        """Get the engine's configuration."""
        return self._config

    def namespace(self) -> str:
        """Get the renderer namespace owned by this engine."""
        return self._namespace

    def spans(self) -> List[SyntaxQueryHighlightSpan]:
        """Get the spans from the most recent evaluation."""
        return list(self._prev_spans)

    def add_buffer_callback(self, callback: SyntaxQueryBufferCallback) -> None:
        """
        Register a function to be called with each new token tree.

        The callback receives the tokens and the buffer text after every
        re-parse triggered by `buffer_changed`.  Returning True removes it.

        Args:
            callback: The function to call
        """
        self._callbacks.append(callback)

    def can_reuse(self, text: str) -> bool:
        """
        Check whether the previous result still applies to a buffer.

        This holds when the previous parse was complete and the buffer only
        gained trailing whitespace since then.

        Args:
            text: The new buffer text

        Returns:
            True if re-parsing can be skipped
        """
        if not self._prev_complete or self._prev_buffer is None:
            return False

        if not text.startswith(self._prev_buffer):
            return False

        return not text[len(self._prev_buffer):].strip()

    def parse_buffer(self, text: str) -> Tuple[List[SyntaxQueryToken], str]:
        """
        Get the token tree for a buffer, re-parsing only when needed.

        Args:
            text: The buffer text

        Returns:
            Tuple of (tokens, the buffer text they were parsed from)
        """
        self._reparse(text)
        assert self._prev_buffer is not None
        return self._prev_tokens, self._prev_buffer

    def buffer_changed(self, text: str) -> bool:
        """
        Handle a buffer change notification.

        Args:
            text: The new buffer text

        Returns:
            True if the buffer was re-evaluated, False if the previous result was kept
        """
        if not self._reparse(text) and self._spans_buffer == self._prev_buffer:
            self._logger.debug("Buffer only gained trailing whitespace; keeping previous highlights")
            return False

        assert self._prev_buffer is not None
        self._prev_spans = resolve(apply_rules(self._config.rules, self._prev_tokens, self._prev_buffer), self._prev_buffer)
        self._spans_buffer = self._prev_buffer
        self._logger.debug("Resolved %d highlight spans", len(self._prev_spans))

        self._notify_callbacks()
        self._emit()
        return True

    def highlight(self, text: str) -> List[SyntaxQueryHighlightSpan]:
        """
        Parse and highlight a buffer without touching any cached state.

        Args:
            text: The buffer text

        Returns:
            The resolved spans, in paint order
        """
        _complete, tokens = self._parse(text)
        return resolve(apply_rules(self._config.rules, tokens, text), text)

    def _reparse(self, text: str) -> bool:
        """Parse the buffer unless the previous parse can be reused; True if it parsed."""
        if self.can_reuse(text):
            return False

        complete, tokens = self._parse(text)
        if self._logger.isEnabledFor(logging.DEBUG):
            self._logger.debug("Parsed buffer (complete=%s): %r", complete, debug_tokens(tokens, text))

        self._prev_buffer = text
        self._prev_complete = complete
        self._prev_tokens = tokens
        return True

    def _notify_callbacks(self) -> None:
        """Call every buffer callback, dropping those that ask to be removed."""
        if not self._callbacks:
            return

        assert self._prev_buffer is not None
        called = list(self._callbacks)
        remaining: List[SyntaxQueryBufferCallback] = []
        for callback in called:
            try:
                if callback(self._prev_tokens, self._prev_buffer):
                    continue

            except Exception:
                self._logger.exception("Buffer callback %r failed", callback)

            remaining.append(callback)

        # Keep anything registered while the callbacks were running
        self._callbacks = remaining + self._callbacks[len(called):]

    def _emit(self) -> None:
        """Replace the renderer's namespace with the current spans."""
        if self._renderer is None:
            return

        self._renderer.clear_namespace(self._namespace)
        for span in self._prev_spans:
            self._renderer.add_highlight(span, self._config.styles.require(span.style), self._namespace)

        self._renderer.request_redraw()
