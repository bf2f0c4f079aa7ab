from __future__ import annotations

from typing import Optional


class SensitizeError(Exception):
    """Base exception for redaction engine errors."""
    pass


class ParseError(SensitizeError, ValueError):
    """Input text is not well-formed JSON."""
    pass


class ConfigError(SensitizeError, ValueError):
    """A single rule (or one of its parameters) could not be loaded.

    Raised while parsing rule configuration and collected as a diagnostic on the
    resulting RuleSet; the offending rule or parameter is dropped, the rest of
    the configuration still loads.
    """

    def __init__(
        self,
        reason: str,
        *,
        rule: str = "",
        key: Optional[str] = None,
        code: str = "invalid_rule",
    ):
        msg = reason
        if rule:
            msg += f" (rule={rule!r}" + (f", key={key}" if key else "") + ")"
        super().__init__(msg)
        self.reason = reason
        self.rule = rule
        self.key = key
        self.code = code


class StrategyMismatchError(SensitizeError, LookupError):
    """Requested strategy has no masking handler."""
    pass


__all__ = [
    "SensitizeError",
    "ParseError",
    "ConfigError",
    "StrategyMismatchError",
]
