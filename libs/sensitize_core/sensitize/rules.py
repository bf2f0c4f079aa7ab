from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

import orjson
import yaml

from .constants import (
    DEFAULT_MASK_CHAR,
    DEFAULT_RULE_DELIMITER,
    KEY_VALUE_SEPARATOR,
    MAX_KEEP,
    MIN_KEEP,
    PARAM_END_KEEP,
    PARAM_MASK_CHAR,
    PARAM_SEPARATOR,
    PARAM_START_KEEP,
)
from .errors import ConfigError, StrategyMismatchError
from .masking import MaskParams, StrategyKind
from .metrics import MET_RULE_ERRORS
from .paths import PatternPath, Segment, normalize, parse_pattern

log = logging.getLogger("sensitize.rules")


@dataclass(frozen=True)
class RedactionRule:
    pattern: PatternPath
    strategy: StrategyKind
    params: Optional[MaskParams] = None
    source: str = ""


class RuleSet:
    """Normalized pattern -> rule table, read-only once built.

    Registering a pattern that is already present replaces the earlier rule and
    moves it to the end of the registration order.
    """

    def __init__(
        self,
        rules: Iterable[RedactionRule] = (),
        *,
        mask_char: str = DEFAULT_MASK_CHAR,
        diagnostics: Iterable[ConfigError] = (),
    ) -> None:
        table: Dict[PatternPath, RedactionRule] = {}
        for rule in rules:
            table.pop(rule.pattern, None)
            table[rule.pattern] = rule
        self._rules = table
        self._mask_char = mask_char
        self._diagnostics = tuple(diagnostics)

    @property
    def mask_char(self) -> str:
        return self._mask_char

    @property
    def diagnostics(self) -> Tuple[ConfigError, ...]:
        return self._diagnostics

    @property
    def rules(self) -> Tuple[RedactionRule, ...]:
        return tuple(self._rules.values())

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[RedactionRule]:
        return iter(tuple(self._rules.values()))

    def __contains__(self, pattern: object) -> bool:
        return pattern in self._rules

    def __repr__(self) -> str:
        pats = ", ".join(f"{r.pattern}:{r.strategy.value}" for r in self._rules.values())
        return f"RuleSet([{pats}], mask_char={self._mask_char!r})"

    def get(self, pattern: Union[str, PatternPath]) -> Optional[RedactionRule]:
        if isinstance(pattern, str):
            pattern = parse_pattern(pattern)
        return self._rules.get(pattern)

    def resolve(self, path: Sequence[Segment]) -> Optional[RedactionRule]:
        """Rule for a concrete path: exact match first, then the longest containing pattern."""
        norm = normalize(path)
        rule = self._rules.get(norm)
        if rule is not None:
            return rule
        segs = norm.segments
        for k in range(len(segs) - 1, 0, -1):
            rule = self._rules.get(PatternPath(segs[:k]))
            if rule is not None:
                return rule
        return None


def _record(diag: ConfigError, diagnostics: List[ConfigError]) -> None:
    log.warning("sensitize rule config: %s", diag)
    MET_RULE_ERRORS.labels(reason=diag.code).inc()
    diagnostics.append(diag)


def _parse_keep(key: str, raw: str, rule_text: str, diagnostics: List[ConfigError]) -> Optional[int]:
    try:
        value = int(raw.strip())
    except ValueError:
        _record(ConfigError(f"{key} must be an integer, using default", rule=rule_text, key=key, code="param_invalid"), diagnostics)
        return None
    if value < MIN_KEEP or value > MAX_KEEP:
        _record(
            ConfigError(
                f"{key}={value} outside [{MIN_KEEP}, {MAX_KEEP}], using default",
                rule=rule_text,
                key=key,
                code="param_out_of_range",
            ),
            diagnostics,
        )
        return None
    return value


def parse_params(text: str, *, rule_text: str = "", diagnostics: Optional[List[ConfigError]] = None) -> Optional[MaskParams]:
    """Parse `startKeep:2,endKeep:4,maskChar:#`; rejected keys are reported and left unset."""
    diags = diagnostics if diagnostics is not None else []
    start_keep: Optional[int] = None
    end_keep: Optional[int] = None
    mask_char: Optional[str] = None
    for pair in (text or "").split(PARAM_SEPARATOR):
        if not pair.strip():
            continue
        key, sep, raw = pair.partition(KEY_VALUE_SEPARATOR)
        key = key.strip()
        if not sep:
            _record(ConfigError("parameter is not key:value", rule=rule_text, key=key, code="param_invalid"), diags)
            continue
        if key == PARAM_START_KEEP:
            start_keep = _parse_keep(key, raw, rule_text, diags)
        elif key == PARAM_END_KEEP:
            end_keep = _parse_keep(key, raw, rule_text, diags)
        elif key == PARAM_MASK_CHAR:
            ch = raw if len(raw) == 1 else raw.strip()
            if len(ch) != 1:
                _record(ConfigError("maskChar must be exactly one character, using default", rule=rule_text, key=key, code="param_invalid"), diags)
            else:
                mask_char = ch
        else:
            _record(ConfigError("unknown parameter ignored", rule=rule_text, key=key, code="unknown_param"), diags)
    params = MaskParams(start_keep=start_keep, end_keep=end_keep, mask_char=mask_char)
    return None if params.is_empty() else params


def parse_rule(text: str, *, diagnostics: Optional[List[ConfigError]] = None) -> RedactionRule:
    """Parse one `fieldPath:STRATEGY[:paramList]` rule.

    Raises ConfigError when the rule cannot be used at all. Parameter problems
    do not raise; they are appended to `diagnostics` and the parameter is left
    at its default.
    """
    source = (text or "").strip()
    parts = source.split(KEY_VALUE_SEPARATOR, 2)
    if len(parts) < 2 or not parts[0].strip() or not parts[1].strip():
        raise ConfigError("expected fieldPath:STRATEGY[:params]", rule=source, code="malformed_rule")
    pattern = parse_pattern(parts[0])
    try:
        strategy = StrategyKind.parse(parts[1])
    except StrategyMismatchError:
        raise ConfigError(f"unknown strategy {parts[1].strip()!r}", rule=source, code="unknown_strategy") from None
    params = parse_params(parts[2], rule_text=source, diagnostics=diagnostics) if len(parts) > 2 else None
    return RedactionRule(pattern=pattern, strategy=strategy, params=params, source=source)


def parse_rules(
    config: Union[str, Iterable[str], None],
    *,
    delimiter: str = DEFAULT_RULE_DELIMITER,
    mask_char: str = DEFAULT_MASK_CHAR,
) -> RuleSet:
    """Build a RuleSet from `a.b:PHONE;c[*].d:CUSTOM:startKeep:1,endKeep:2`.

    An iterable is taken as one rule per item. Rules that fail to parse are
    skipped and reported through `RuleSet.diagnostics`; the rest still load.
    """
    if config is None:
        items: Iterable[str] = ()
    elif isinstance(config, str):
        items = config.split(delimiter)
    else:
        items = config

    rules: List[RedactionRule] = []
    diagnostics: List[ConfigError] = []
    for item in items:
        if not item or not item.strip():
            continue
        try:
            rules.append(parse_rule(item, diagnostics=diagnostics))
        except ConfigError as e:
            _record(e, diagnostics)
    rs = RuleSet(rules, mask_char=mask_char, diagnostics=diagnostics)
    log.debug("loaded %d redaction rules (%d diagnostics)", len(rs), len(diagnostics))
    return rs


def field_config(path: str, strategy: Union[StrategyKind, str], params: Union[str, Mapping[str, Any], None] = None) -> str:
    """Render a single rule, e.g. field_config("user.phone", "PHONE", {"maskChar": "#"})."""
    name = strategy.value if isinstance(strategy, StrategyKind) else str(strategy)
    out = f"{path}{KEY_VALUE_SEPARATOR}{name}"
    if isinstance(params, Mapping):
        params = PARAM_SEPARATOR.join(f"{k}{KEY_VALUE_SEPARATOR}{v}" for k, v in params.items() if v is not None)
    if params:
        out += f"{KEY_VALUE_SEPARATOR}{params}"
    return out


def join_field_configs(configs: Iterable[str], delimiter: str = DEFAULT_RULE_DELIMITER) -> str:
    return delimiter.join(c for c in configs if c)


def _entry_to_text(entry: Any) -> str:
    if isinstance(entry, str):
        return entry
    if isinstance(entry, Mapping):
        path = entry.get("path") or entry.get("fieldPath")
        strategy = entry.get("strategy") or entry.get("type")
        if not path or not strategy:
            raise ConfigError("rule object requires 'path' and 'strategy'", rule=str(dict(entry)), code="malformed_rule")
        params = {k: entry.get(k) for k in (PARAM_START_KEEP, PARAM_END_KEEP, PARAM_MASK_CHAR)}
        return field_config(str(path), str(strategy), params)
    raise ConfigError(f"unsupported rule entry of type {type(entry).__name__}", rule=repr(entry), code="malformed_rule")


def rules_from_mapping(
    obj: Any,
    *,
    mask_char: Optional[str] = None,
    delimiter: str = DEFAULT_RULE_DELIMITER,
) -> RuleSet:
    """
    Build a RuleSet from already-parsed rule data.

    Accepted shapes:
      - {"maskChar": "#", "rules": [...]}   (maskChar optional)
      - [...]                                (list of rules)
      - "a.b:PHONE;c:EMAIL"                  (rule string)
    where each rule is either a rule string or
    {"path": "items[*].phone", "strategy": "PHONE", "startKeep": 3, "endKeep": 4, "maskChar": "#"}.
    """
    if isinstance(obj, str):
        return parse_rules(obj, delimiter=delimiter, mask_char=mask_char or DEFAULT_MASK_CHAR)
    if isinstance(obj, Mapping):
        mask_char = mask_char or obj.get("maskChar") or obj.get("defaultMask")
        entries = obj.get("rules") or []
    elif isinstance(obj, list):
        entries = obj
    else:
        raise ConfigError(f"rule data must be an object, list or string, got {type(obj).__name__}", code="malformed_rule")
    if not isinstance(entries, list):
        raise ConfigError("'rules' must be a list", code="malformed_rule")

    texts: List[str] = []
    diagnostics: List[ConfigError] = []
    if mask_char is not None and (not isinstance(mask_char, str) or len(mask_char) != 1):
        _record(ConfigError("maskChar must be exactly one character, using default", key=PARAM_MASK_CHAR, code="param_invalid"), diagnostics)
        mask_char = None
    for entry in entries:
        try:
            texts.append(_entry_to_text(entry))
        except ConfigError as e:
            _record(e, diagnostics)
    rs = parse_rules(texts, delimiter=delimiter, mask_char=mask_char or DEFAULT_MASK_CHAR)
    if not diagnostics:
        return rs
    return RuleSet(rs.rules, mask_char=rs.mask_char, diagnostics=diagnostics + list(rs.diagnostics))


def parse_yaml_or_json(text: str) -> Any:
    s = text.strip()
    if s.startswith("{") or s.startswith("["):
        return orjson.loads(text)
    return yaml.safe_load(text)


def load_rules(path: Union[str, Path], *, mask_char: Optional[str] = None) -> RuleSet:
    """Load a RuleSet from a JSON or YAML rule file."""
    text = Path(path).read_text(encoding="utf-8")
    return rules_from_mapping(parse_yaml_or_json(text), mask_char=mask_char)


__all__ = [
    "RedactionRule",
    "RuleSet",
    "parse_params",
    "parse_rule",
    "parse_rules",
    "field_config",
    "join_field_configs",
    "rules_from_mapping",
    "parse_yaml_or_json",
    "load_rules",
]
