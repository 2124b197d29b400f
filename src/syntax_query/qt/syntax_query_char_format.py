"""Conversion of highlight styles into Qt character formats."""

from typing import Dict

from PySide6.QtGui import QBrush, QColor, QFont, QTextCharFormat

from syntax_query.syntax_query_style import STYLE_RESET, SyntaxQueryStyle


# Terminal colour names that are not SVG colour names, or mean something different there
_TERMINAL_COLOURS: Dict[str, str] = {
    "black": "#000000",
    "red": "#cd0000",
    "green": "#00cd00",
    "yellow": "#cdcd00",
    "blue": "#0000ee",
    "magenta": "#cd00cd",
    "cyan": "#00cdcd",
    "white": "#e5e5e5",
    "grey": "#7f7f7f",
    "gray": "#7f7f7f",
    "lightblack": "#7f7f7f",
    "lightred": "#ff0000",
    "lightgreen": "#00ff00",
    "lightyellow": "#ffff00",
    "lightblue": "#5c5cff",
    "lightmagenta": "#ff00ff",
    "lightcyan": "#00ffff",
    "lightwhite": "#ffffff",
}

_DIM_ALPHA = 160


def colour_for(name: str) -> QColor | None:
    """
    Convert a style colour to a QColor.

    Args:
        name: Terminal colour name, SVG colour name or #rrggbb value

    Returns:
        The colour, or None if the name is not recognised
    """
    colour = QColor(_TERMINAL_COLOURS.get(name.lower(), name))
    if not colour.isValid():
        return None

    return colour


def style_to_char_format(style: SyntaxQueryStyle) -> QTextCharFormat:
    """
    Build a character format for a composed style.

    Reset colours clear the corresponding brush so the widget's own palette
    shows through.  Blink has no equivalent and is ignored.

    Args:
        style: The style to convert

    Returns:
        The character format
    """
    char_format = QTextCharFormat()

    foreground = colour_for(style.fg) if style.fg not in (None, STYLE_RESET) else None
    background = colour_for(style.bg) if style.bg not in (None, STYLE_RESET) else None

    if foreground is not None and style.dim:
        foreground.setAlpha(_DIM_ALPHA)

    if style.reversed and foreground is not None and background is not None:
        foreground, background = background, foreground

    if foreground is not None:
        char_format.setForeground(QBrush(foreground))

    elif style.fg == STYLE_RESET:
        char_format.clearForeground()

    if background is not None:
        char_format.setBackground(QBrush(background))

    elif style.bg == STYLE_RESET:
        char_format.clearBackground()

    if style.bold is not None:
        char_format.setFontWeight(QFont.Weight.Bold if style.bold else QFont.Weight.Normal)

    if style.italic is not None:
        char_format.setFontItalic(style.italic)

    if style.underline is not None:
        char_format.setFontUnderline(style.underline)

    if style.strikethrough is not None:
        char_format.setFontStrikeOut(style.strikethrough)

    return char_format
