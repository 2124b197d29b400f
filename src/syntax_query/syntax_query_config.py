"""Loading and validation of highlight styles and rules."""

from dataclasses import dataclass
import json
import logging
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from syntax_query.syntax_query_default_rules import DEFAULT_RULES, DEFAULT_STYLES
from syntax_query.syntax_query_exceptions import SyntaxQueryConfigError
from syntax_query.syntax_query_matcher import SyntaxQueryMatcher
from syntax_query.syntax_query_rules import SyntaxQueryRule
from syntax_query.syntax_query_style import SyntaxQueryStyle, SyntaxQueryStyleRegistry


_MATCHER_KEYS = frozenset({"kind", "not_kind", "regex", "not_regex", "contains", "hl", "hlregex", "mod"})
_RULE_KEYS = frozenset({"name", "priority", "matchers"})


@dataclass
class SyntaxQueryConfig:
    """
    Styles and compiled rules for the highlighting engine.

    Configuration is plain data: `{"styles": {...}, "rules": [...]}`.  A
    rule is either a list of matcher objects or an object with `matchers`,
    and optionally `name` and `priority`.  Setting `extendDefaults` layers
    the styles and rules on top of the built-in shell configuration.
    """
    styles: SyntaxQueryStyleRegistry
    rules: Tuple[SyntaxQueryRule, ...]

    _logger = logging.getLogger("SyntaxQueryConfig")

    @classmethod
    def default(cls) -> "SyntaxQueryConfig":
        """Create the built-in shell highlighting configuration."""
        return cls.from_dict({"styles": DEFAULT_STYLES, "rules": DEFAULT_RULES})

    @classmethod
    def load(cls, path: str) -> "SyntaxQueryConfig":
        """
        Load configuration from a JSON file.

        Args:
            path: Path to the JSON configuration file

        Returns:
            The validated configuration

        Raises:
            SyntaxQueryConfigError: If the file cannot be read or is invalid
        """
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)

        except OSError as e:
            raise SyntaxQueryConfigError(f"Cannot read highlight config {path}: {e}", {"path": path}) from e

        except json.JSONDecodeError as e:
            raise SyntaxQueryConfigError(
                f"Invalid JSON in highlight config {path}: {e}",
                {"path": path, "line": e.lineno, "column": e.colno}
            ) from e

        cls._logger.debug("Loaded highlight config from %s", path)
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SyntaxQueryConfig":
        """
        Build configuration from plain data.

        Args:
            data: Dictionary with `styles`, `rules` and optional `extendDefaults`

        Returns:
            The validated configuration

        Raises:
            SyntaxQueryConfigError: If any style or rule is invalid
        """
        if not isinstance(data, Mapping):
            raise SyntaxQueryConfigError("Highlight config must be an object")

        style_data: Dict[str, Any] = {}
        rule_data: List[Any] = []
        if data.get("extendDefaults", False):
            style_data.update(DEFAULT_STYLES)
            rule_data.extend(DEFAULT_RULES)

        styles = data.get("styles", {})
        if not isinstance(styles, Mapping):
            raise SyntaxQueryConfigError("Highlight config 'styles' must be an object")

        rules = data.get("rules", [])
        if not isinstance(rules, list):
            raise SyntaxQueryConfigError("Highlight config 'rules' must be a list")

        style_data.update(styles)
        rule_data.extend(rules)

        registry = cls._build_styles(style_data)
        compiled = tuple(cls._build_rule(rule, index, registry) for index, rule in enumerate(rule_data))

        cls._logger.debug("Compiled %d highlight rules using %d styles", len(compiled), len(registry))
        return cls(styles=registry, rules=compiled)

    @classmethod
    def _build_styles(cls, style_data: Mapping[str, Any]) -> SyntaxQueryStyleRegistry:
        """Build the style registry, resolving `extends` references."""
        registry = SyntaxQueryStyleRegistry()
        resolving: List[str] = []

        def build(name: str) -> SyntaxQueryStyle:
            existing = registry.get(name)
            if existing is not None:
                return existing

            if name not in style_data:
                raise SyntaxQueryConfigError(f"Unknown highlight style: {name!r}", {"style": name})

            if name in resolving:
                raise SyntaxQueryConfigError(
                    f"Style {name!r} extends itself", {"chain": resolving + [name]}
                )

            attributes = style_data[name]
            if not isinstance(attributes, Mapping):
                raise SyntaxQueryConfigError(f"Style {name!r} must be an object", {"style": name})

            attributes = dict(attributes)
            base_name = attributes.pop("extends", None)
            resolving.append(name)
            try:
                base = build(base_name) if base_name is not None else SyntaxQueryStyle()
                style = base.merged(SyntaxQueryStyle.from_dict(attributes))

            except SyntaxQueryConfigError as e:
                details = dict(e.error_details or {})
                details.setdefault("style", name)
                raise SyntaxQueryConfigError(str(e), details) from e

            finally:
                resolving.pop()

            registry.register(name, style)
            return style

        for style_name in style_data:
            build(style_name)

        return registry

    @classmethod
    def _build_rule(cls, rule: Any, index: int, registry: SyntaxQueryStyleRegistry) -> SyntaxQueryRule:
        """Compile one rule from plain data."""
        if isinstance(rule, list):
            rule = {"matchers": rule}

        if not isinstance(rule, Mapping):
            raise SyntaxQueryConfigError(f"Rule {index} must be a list or an object", {"rule": index})

        unknown = sorted(set(rule) - _RULE_KEYS)
        if unknown:
            raise SyntaxQueryConfigError(
                f"Rule {index} has unknown keys: {', '.join(unknown)}", {"rule": index, "keys": unknown}
            )

        name = rule.get("name")
        try:
            matchers = rule.get("matchers")
            if not isinstance(matchers, list):
                raise SyntaxQueryConfigError("Rule 'matchers' must be a list")

            return SyntaxQueryRule.create(
                (cls._build_matcher(m, registry) for m in matchers),
                priority=rule.get("priority", 0),
                name=name
            )

        except SyntaxQueryConfigError as e:
            details = dict(e.error_details or {})
            details["rule"] = name if name is not None else index
            raise SyntaxQueryConfigError(f"Rule {name or index}: {e}", details) from e

    @classmethod
    def _build_matcher(cls, data: Any, registry: SyntaxQueryStyleRegistry) -> SyntaxQueryMatcher:
        """Compile one matcher from plain data, checking its style exists."""
        if not isinstance(data, Mapping):
            raise SyntaxQueryConfigError(f"Matcher must be an object, got {data!r}")

        unknown = sorted(set(data) - _MATCHER_KEYS)
        if unknown:
            raise SyntaxQueryConfigError(f"Matcher has unknown keys: {', '.join(unknown)}", {"keys": unknown})

        hl = data.get("hl")
        if hl is not None:
            registry.require(hl)

        contains: Sequence[Any] | None = data.get("contains")
        nested = None
        if contains is not None:
            if not isinstance(contains, list):
                raise SyntaxQueryConfigError("Matcher 'contains' must be a list of matchers")

            nested = [cls._build_matcher(m, registry) for m in contains]

        return SyntaxQueryMatcher.create(
            kind=data.get("kind"),
            not_kind=data.get("not_kind"),
            regex=data.get("regex"),
            not_regex=data.get("not_regex"),
            contains=nested,
            hl=hl,
            hlregex=data.get("hlregex"),
            mod=data.get("mod")
        )
