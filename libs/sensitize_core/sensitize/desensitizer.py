"""
Text-level entry points for a serialization hook.

A binding layer hands over the JSON text it is about to emit plus the rule
configuration declared for the field; anything that cannot be redacted
(redaction switched off, invalid JSON, non-object root, no usable rules) is
returned exactly as given.

Note: a rule that fails to load leaves its field unredacted rather than masking
everything. Check `RuleSet.diagnostics` (or the sensitize_rule_errors_total
counter) when rule configuration changes.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Union

from .constants import DEFAULT_MASK_CHAR, DEFAULT_RULE_DELIMITER
from .errors import ParseError
from .jsonutil import dumps_json, loads_json
from .metrics import MET_DOCUMENTS
from .redaction import redact_tree
from .rules import RuleSet, parse_rules
from .settings import SensitizeSettings

_log = logging.getLogger(__name__)

RuleConfig = Union[RuleSet, str, Iterable[str], None]


class Desensitizer:
    """Applies one RuleSet to any number of documents; safe to share across threads.

    Default mask character, highest precedence first: the `mask_char` argument,
    then the mask character of a prebuilt RuleSet, then `settings.default_mask`.
    A prebuilt RuleSet already carries its own default (a rule file maskChar or
    the one given to parse_rules), so settings only apply to rules parsed here.
    Per-rule maskChar parameters always win.
    """

    def __init__(
        self,
        rules: RuleConfig = None,
        *,
        settings: Optional[SensitizeSettings] = None,
        mask_char: Optional[str] = None,
    ) -> None:
        self.settings = settings if settings is not None else SensitizeSettings.from_env()
        if isinstance(rules, RuleSet):
            self.rules = rules
        else:
            self.rules = parse_rules(
                rules,
                delimiter=self.settings.rule_delimiter,
                mask_char=mask_char or self.settings.default_mask,
            )
        self.mask_char = mask_char or self.rules.mask_char

    def _skip_outcome(self) -> Optional[str]:
        if not self.settings.active:
            return "disabled"
        if not len(self.rules):
            return "no_rules"
        return None

    def redact(self, text: str) -> str:
        skip = self._skip_outcome()
        if skip:
            MET_DOCUMENTS.labels(outcome=skip).inc()
            return text
        try:
            doc = loads_json(text)
        except ParseError as e:
            _log.debug("skipping redaction, input is not JSON: %s", e)
            MET_DOCUMENTS.labels(outcome="invalid_json").inc()
            return text
        if not isinstance(doc, dict):
            MET_DOCUMENTS.labels(outcome="non_object").inc()
            return text
        out = redact_tree(doc, self.rules, self.mask_char)
        MET_DOCUMENTS.labels(outcome="redacted").inc()
        return dumps_json(out)

    def redact_document(self, obj: Any) -> Any:
        skip = self._skip_outcome()
        if skip:
            MET_DOCUMENTS.labels(outcome=skip).inc()
            return obj
        if not isinstance(obj, dict):
            MET_DOCUMENTS.labels(outcome="non_object").inc()
            return obj
        out = redact_tree(obj, self.rules, self.mask_char)
        MET_DOCUMENTS.labels(outcome="redacted").inc()
        return out


def redact_json(
    text: str,
    field_configs: RuleConfig,
    mask_char: Optional[str] = None,
    *,
    delimiter: Optional[str] = None,
) -> str:
    """One-shot redaction of JSON text, e.g.
    redact_json(body, "user.phone:PHONE;items[*].secret:PASSWORD:maskChar:#")."""
    settings = SensitizeSettings(
        default_mask=mask_char or DEFAULT_MASK_CHAR,
        rule_delimiter=delimiter or DEFAULT_RULE_DELIMITER,
    )
    return Desensitizer(field_configs, settings=settings).redact(text)


__all__ = ["Desensitizer", "redact_json"]
