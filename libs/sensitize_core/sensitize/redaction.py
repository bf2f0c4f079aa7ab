"""
Rule-driven redaction of nested JSON-like objects.

The walker rebuilds every container it visits; the input object is never
mutated. Each scalar is looked up in the RuleSet by its concrete path
(array positions normalize to "[*]"), and a matching rule replaces the value
with its masked text form. Numbers and booleans therefore come back as
strings when masked. None is never masked.

Examples (rules parsed from "user.phone:PHONE;items[*].email:EMAIL"):
- {"user": {"phone": "13812345678"}} => {"user": {"phone": "138****5678"}}
- {"items": [{"email": "zhangsan@x.com"}]} => {"items": [{"email": "z*******@x.com"}]}
- ["13812345678"] => unchanged (rules only address members of a root object)
"""
from __future__ import annotations

import logging
from typing import Any, List, Optional, Tuple

from .errors import StrategyMismatchError
from .jsonutil import scalar_text
from .masking import MaskParams, apply_strategy
from .metrics import MET_FIELDS_MASKED
from .paths import ConcretePath, Index, Key, contains, format_path, matches, parse_pattern
from .rules import RuleSet

_log = logging.getLogger(__name__)


def redact_tree(obj: Any, rules: RuleSet, mask_char: Optional[str] = None) -> Any:
    if not isinstance(obj, dict) or not len(rules):
        return obj
    default_mask = mask_char or rules.mask_char

    def _mask(node: Any, path: ConcretePath) -> Any:
        if node is None:
            return node
        rule = rules.resolve(path)
        if rule is None:
            return node
        try:
            start, end, ch = (rule.params or MaskParams()).resolve(rule.strategy, default_mask)
            out = apply_strategy(rule.strategy, scalar_text(node), start, end, ch)
        except StrategyMismatchError as e:
            _log.warning("left %s unredacted: %s", format_path(path), e)
            return node
        MET_FIELDS_MASKED.labels(strategy=rule.strategy.value).inc()
        return out

    def _visit(node: Any, path: ConcretePath) -> Any:
        if isinstance(node, dict):
            return {k: _visit(v, path + (Key(k),)) for k, v in node.items()}
        if isinstance(node, list):
            # Index segments normalize to the "[*]" wildcard for rule lookup
            return [_visit(v, path + (Index(i),)) for i, v in enumerate(node)]
        return _mask(node, path)

    return _visit(obj, ())


def extract_field_values(obj: Any, field_path: str) -> List[str]:
    """Text of every non-null scalar at `field_path` or below it, in document order."""
    pattern = parse_pattern(field_path)
    found: List[str] = []

    def _walk(node: Any, path: ConcretePath) -> None:
        if isinstance(node, dict):
            for k, v in node.items():
                _walk(v, path + (Key(k),))
        elif isinstance(node, list):
            for i, v in enumerate(node):
                _walk(v, path + (Index(i),))
        elif node is not None and (matches(pattern, path) or contains(pattern, path)):
            found.append(scalar_text(node))

    _walk(obj, ())
    return found


def iter_masked_paths(obj: Any, rules: RuleSet) -> List[Tuple[str, str]]:
    """(path, strategy) for every scalar `redact_tree` would mask; values are not included."""
    hits: List[Tuple[str, str]] = []
    if not isinstance(obj, dict):
        return hits

    def _walk(node: Any, path: ConcretePath) -> None:
        if isinstance(node, dict):
            for k, v in node.items():
                _walk(v, path + (Key(k),))
        elif isinstance(node, list):
            for i, v in enumerate(node):
                _walk(v, path + (Index(i),))
        elif node is not None:
            rule = rules.resolve(path)
            if rule is not None:
                hits.append((format_path(path), rule.strategy.value))

    _walk(obj, ())
    return hits


__all__ = ["redact_tree", "extract_field_values", "iter_masked_paths"]
