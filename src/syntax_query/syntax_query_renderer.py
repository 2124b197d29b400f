"""Renderers that receive resolved highlight spans from the engine."""

from abc import ABC, abstractmethod
import logging
from typing import Dict, List, Tuple

from syntax_query.syntax_query_highlight import SyntaxQueryHighlightSpan
from syntax_query.syntax_query_style import STYLE_RESET, SyntaxQueryStyle


class SyntaxQueryRenderer(ABC):
    """
    Abstract base class for anything that can display highlight spans.

    The engine clears its namespace, adds every span in paint order, then
    asks for a redraw.  Renderers must let later spans override earlier ones
    where they overlap.
    """

    @abstractmethod
    def clear_namespace(self, namespace: str) -> None:
        """
        Remove every span previously added to a namespace.

        Args:
            namespace: The namespace to clear
        """

    @abstractmethod
    def add_highlight(self, span: SyntaxQueryHighlightSpan, style: SyntaxQueryStyle, namespace: str) -> None:
        """
        Add a span to a namespace.

        Args:
            span: The range to highlight
            style: The resolved style for the span
            namespace: The namespace the span belongs to
        """

    @abstractmethod
    def request_redraw(self) -> None:
        """Ask for the highlighted buffer to be redrawn."""


class SyntaxQueryMemoryRenderer(SyntaxQueryRenderer):
    """Renderer that keeps spans in memory, grouped by namespace."""

    def __init__(self) -> None:
        self._namespaces: Dict[str, List[Tuple[SyntaxQueryHighlightSpan, SyntaxQueryStyle]]] = {}
        self.redraw_count = 0

    def clear_namespace(self, namespace: str) -> None:
        self._namespaces[namespace] = []

    def add_highlight(self, span: SyntaxQueryHighlightSpan, style: SyntaxQueryStyle, namespace: str) -> None:
        self._namespaces.setdefault(namespace, []).append((span, style))

    def request_redraw(self) -> None:
        self.redraw_count += 1

    def highlights(self, namespace: str | None = None) -> List[Tuple[SyntaxQueryHighlightSpan, SyntaxQueryStyle]]:
        """
        Get the spans added so far.

        Args:
            namespace: Namespace to read, or None for all namespaces in creation order

        Returns:
            List of (span, style) pairs in the order they were added
        """
        if namespace is not None:
            return list(self._namespaces.get(namespace, []))

        return [entry for entries in self._namespaces.values() for entry in entries]

    def styles_at(self, length: int, namespace: str | None = None) -> List[SyntaxQueryStyle]:
        """
        Compose the style of each character of a buffer.

        Spans are painted in order; attributes set by a later span replace
        those underneath, and attributes it leaves unset show through.

        Args:
            length: Length of the buffer
            namespace: Namespace to compose, or None for all namespaces

        Returns:
            One composed style per character
        """
        painted = [SyntaxQueryStyle() for _ in range(length)]
        for span, style in self.highlights(namespace):
            for i in range(max(span.start, 0), min(span.finish, length)):
                painted[i] = painted[i].merged(style)

        return painted


class SyntaxQueryAnsiRenderer(SyntaxQueryMemoryRenderer):
    """Renderer that paints a buffer with ANSI SGR escape sequences."""

    _COLOURS: Dict[str, int] = {
        "black": 0,
        "red": 1,
        "green": 2,
        "yellow": 3,
        "blue": 4,
        "magenta": 5,
        "cyan": 6,
        "white": 7,
    }

    _FLAGS: List[Tuple[str, int]] = [
        ("bold", 1),
        ("dim", 2),
        ("italic", 3),
        ("underline", 4),
        ("blink", 5),
        ("reversed", 7),
        ("strikethrough", 9),
    ]

    _RESET = "\x1b[0m"

    def __init__(self) -> None:
        super().__init__()
        self._logger = logging.getLogger("SyntaxQueryAnsiRenderer")

    def render(self, text: str, namespace: str | None = None) -> str:
        """
        Produce the buffer text with escape sequences for the current spans.

        Args:
            text: The buffer the spans were resolved against
            namespace: Namespace to render, or None for all namespaces

        Returns:
            The escaped text
        """
        styles = self.styles_at(len(text), namespace)
        pieces: List[str] = []
        run_start = 0
        for i in range(1, len(text) + 1):
            if i < len(text) and styles[i] == styles[run_start]:
                continue

            codes = self.sgr_codes(styles[run_start])
            chunk = text[run_start:i]
            if codes:
                pieces.append(f"\x1b[{';'.join(codes)}m{chunk}{self._RESET}")

            else:
                pieces.append(chunk)

            run_start = i

        return "".join(pieces)

    def sgr_codes(self, style: SyntaxQueryStyle) -> List[str]:
        """
        Convert a composed style into SGR parameters.

        Reset colours and disabled flags need no codes because every run is
        started from the terminal default.

        Args:
            style: The style to convert

        Returns:
            List of SGR parameter strings
        """
        codes: List[str] = []
        for attribute, code in self._FLAGS:
            if getattr(style, attribute):
                codes.append(str(code))

        if style.fg is not None:
            codes.extend(self._colour_codes(style.fg, 30))

        if style.bg is not None:
            codes.extend(self._colour_codes(style.bg, 40))

        return codes

    def _colour_codes(self, colour: str, base: int) -> List[str]:
        """Convert a colour name or #rrggbb value to SGR parameters."""
        colour = colour.lower()
        if colour == STYLE_RESET:
            return []

        if colour.startswith("#") and len(colour) == 7:
            try:
                r, g, b = (int(colour[i:i + 2], 16) for i in (1, 3, 5))

            except ValueError:
                self._logger.debug("Ignoring malformed colour %r", colour)
                return []

            return [str(base + 8), "2", str(r), str(g), str(b)]

        if colour in ("grey", "gray", "darkgrey", "darkgray"):
            return [str(base + 60)]

        if colour.startswith("light") and colour[5:] in self._COLOURS:
            return [str(base + 60 + self._COLOURS[colour[5:]])]

        if colour in self._COLOURS:
            return [str(base + self._COLOURS[colour])]

        self._logger.debug("Ignoring unknown colour %r", colour)
        return []
