"""Named text styles and the registry used to look them up."""

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Iterator, Mapping

from syntax_query.syntax_query_exceptions import SyntaxQueryConfigError


STYLE_RESET = "reset"


@dataclass(frozen=True)
class SyntaxQueryStyle:
    """
    Text attributes applied to a highlight span.

    Colours are names (`red`, `lightblue`, `grey`, ...), `#rrggbb` values,
    or STYLE_RESET for the terminal default.  Flags are True/False, and any
    attribute left as None leaves whatever is underneath unchanged.
    """
    fg: str | None = None
    bg: str | None = None
    bold: bool | None = None
    dim: bool | None = None
    italic: bool | None = None
    underline: bool | None = None
    strikethrough: bool | None = None
    reversed: bool | None = None
    blink: bool | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SyntaxQueryStyle":
        """
        Build a style from a dictionary of attributes.

        Raises:
            SyntaxQueryConfigError: If an attribute is unknown or has the wrong type
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise SyntaxQueryConfigError(
                f"Unknown style attributes: {', '.join(unknown)}", {"attributes": unknown}
            )

        for key, value in data.items():
            if value is None:
                continue

            if key in ("fg", "bg"):
                if not isinstance(value, str):
                    raise SyntaxQueryConfigError(
                        f"Style colour '{key}' must be a string, got {value!r}", {"attribute": key}
                    )

            elif not isinstance(value, bool):
                raise SyntaxQueryConfigError(
                    f"Style flag '{key}' must be true or false, got {value!r}", {"attribute": key}
                )

        return cls(**dict(data))

    @classmethod
    def reset(cls) -> "SyntaxQueryStyle":
        """A style that returns every attribute to the terminal default."""
        return cls(
            fg=STYLE_RESET,
            bg=STYLE_RESET,
            bold=False,
            dim=False,
            italic=False,
            underline=False,
            strikethrough=False,
            reversed=False,
            blink=False
        )

    def merged(self, other: "SyntaxQueryStyle") -> "SyntaxQueryStyle":
        """
        Combine two styles, with attributes set in `other` taking precedence.

        Args:
            other: Style layered on top of this one

        Returns:
            The combined style
        """
        changes = {f.name: getattr(other, f.name) for f in fields(other) if getattr(other, f.name) is not None}
        return replace(self, **changes)

    def is_empty(self) -> bool:
        """True if the style sets no attributes at all."""
        return all(getattr(self, f.name) is None for f in fields(self))


class SyntaxQueryStyleRegistry:
    """Mapping from style names to styles."""

    def __init__(self, styles: Mapping[str, SyntaxQueryStyle] | None = None) -> None:
        self._styles: Dict[str, SyntaxQueryStyle] = dict(styles or {})

    def register(self, name: str, style: SyntaxQueryStyle) -> None:
        """Add or replace a named style."""
        self._styles[name] = style

    def get(self, name: str) -> SyntaxQueryStyle | None:
        """Look up a style by name, returning None if it is not registered."""
        return self._styles.get(name)

    def require(self, name: str) -> SyntaxQueryStyle:
        """
        Look up a style that must exist.

        Raises:
            SyntaxQueryConfigError: If no style has that name
        """
        style = self._styles.get(name)
        if style is None:
            raise SyntaxQueryConfigError(
                f"Unknown highlight style: {name!r}", {"style": name, "known": sorted(self._styles)}
            )

        return style

    def __contains__(self, name: object) -> bool:
        return name in self._styles

    def __iter__(self) -> Iterator[str]:
        return iter(self._styles)

    def __len__(self) -> int:
        return len(self._styles)
