# path: libs/sensitize_core/sensitize/__init__.py
"""
sensitize core package.

Exports the field-path redaction engine: masking strategies, path patterns,
rule sets and the document walker, plus the text-level entry points.
"""
from .errors import ConfigError, ParseError, SensitizeError, StrategyMismatchError
from .masking import MaskParams, StrategyKind, apply_strategy, mask, mask_value
from .paths import PatternPath, format_path, normalize, parse_pattern
from .rules import RedactionRule, RuleSet, field_config, load_rules, parse_rules, rules_from_mapping
from .redaction import extract_field_values, iter_masked_paths, redact_tree
from .jsonutil import format_json, is_valid_json
from .settings import SensitizeSettings
from .desensitizer import Desensitizer, redact_json

__all__ = [
    "ConfigError",
    "ParseError",
    "SensitizeError",
    "StrategyMismatchError",
    "MaskParams",
    "StrategyKind",
    "apply_strategy",
    "mask",
    "mask_value",
    "PatternPath",
    "format_path",
    "normalize",
    "parse_pattern",
    "RedactionRule",
    "RuleSet",
    "field_config",
    "load_rules",
    "parse_rules",
    "rules_from_mapping",
    "extract_field_values",
    "iter_masked_paths",
    "redact_tree",
    "format_json",
    "is_valid_json",
    "SensitizeSettings",
    "Desensitizer",
    "redact_json",
]
