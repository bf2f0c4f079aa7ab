"""
Masking primitives for single scalar values.

Every strategy works on the code-point sequence of the value and keeps its
length, except EMAIL with a one-character local part (always three mask
characters, so the real length is not revealed).

Examples:
- mask("13812345678", 3, 4, "*") => "138****5678"
- mask("abc", 3, 4, "*") => "a*c"  (too short for the keep counts: reveal first/last only)
- apply_strategy(StrategyKind.PHONE, "1234567", 3, 4, "*") => "*******"
- mask_email("a@b.com", "*") => "***@b.com"
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from .constants import DEFAULT_MASK_CHAR
from .errors import StrategyMismatchError
from .jsonutil import scalar_text


class StrategyKind(str, Enum):
    USERNAME = "USERNAME"
    ID_CARD = "ID_CARD"
    PHONE = "PHONE"
    EMAIL = "EMAIL"
    BANK_CARD = "BANK_CARD"
    CHINESE_NAME = "CHINESE_NAME"
    PASSWORD = "PASSWORD"
    ADDRESS = "ADDRESS"
    CUSTOM = "CUSTOM"

    @classmethod
    def parse(cls, name: str) -> "StrategyKind":
        """Case-insensitive lookup; `ID_CARD`, `IdCard` and `idcard` all resolve."""
        key = (name or "").strip().upper()
        try:
            return cls[key]
        except KeyError:
            pass
        compact = key.replace("_", "").replace("-", "")
        for kind in cls:
            if kind.value.replace("_", "") == compact:
                return kind
        raise StrategyMismatchError(f"unknown strategy: {name!r}")


# (start_keep, end_keep) used when a rule does not override them
_DEFAULT_KEEPS: Dict[StrategyKind, Tuple[int, int]] = {
    StrategyKind.USERNAME: (0, 1),
    StrategyKind.CHINESE_NAME: (0, 1),
    StrategyKind.ID_CARD: (6, 4),
    StrategyKind.PHONE: (3, 4),
    StrategyKind.BANK_CARD: (0, 4),
    StrategyKind.ADDRESS: (6, 4),
    StrategyKind.PASSWORD: (0, 0),
    StrategyKind.EMAIL: (1, 0),
    StrategyKind.CUSTOM: (2, 2),
}

# values of this length or shorter are masked entirely, whatever the keep counts
_FULL_MASK_THRESHOLDS: Dict[StrategyKind, int] = {
    StrategyKind.ID_CARD: 10,
    StrategyKind.PHONE: 7,
    StrategyKind.BANK_CARD: 4,
    StrategyKind.ADDRESS: 10,
}


def default_keeps(kind: StrategyKind) -> Tuple[int, int]:
    try:
        return _DEFAULT_KEEPS[kind]
    except KeyError:
        raise StrategyMismatchError(f"no defaults for strategy: {kind!r}") from None


@dataclass(frozen=True)
class MaskParams:
    """Per-rule overrides; a None member falls back to the strategy/rule-set default."""

    start_keep: Optional[int] = None
    end_keep: Optional[int] = None
    mask_char: Optional[str] = None

    def is_empty(self) -> bool:
        return self.start_keep is None and self.end_keep is None and self.mask_char is None

    def resolve(self, kind: StrategyKind, default_mask: str = DEFAULT_MASK_CHAR) -> Tuple[int, int, str]:
        start, end = default_keeps(kind)
        return (
            start if self.start_keep is None else self.start_keep,
            end if self.end_keep is None else self.end_keep,
            default_mask if self.mask_char is None else self.mask_char,
        )


def _repeat(mask_char: str, count: int) -> str:
    if count <= 0:
        return ""
    return mask_char * count


def mask(value: str, start_keep: int, end_keep: int, mask_char: str = DEFAULT_MASK_CHAR) -> str:
    if not value:
        return value
    n = len(value)
    if n <= start_keep + end_keep:
        if n <= 2:
            return _repeat(mask_char, n)
        return value[0] + _repeat(mask_char, n - 2) + value[-1]
    start = min(max(start_keep, 0), n)
    end = min(max(end_keep, 0), n - start)
    return value[:start] + _repeat(mask_char, n - start - end) + value[n - end:]


def mask_threshold(
    value: str,
    start_keep: int,
    end_keep: int,
    mask_char: str = DEFAULT_MASK_CHAR,
    threshold: Optional[int] = None,
) -> str:
    """Like `mask`, but short values are masked entirely.

    A value is short when it is no longer than `threshold` or than
    start_keep + end_keep, so keep counts can never reveal a whole value.
    """
    if not value:
        return value
    n = len(value)
    limit = start_keep + end_keep
    if threshold is not None:
        limit = max(limit, threshold)
    if n <= limit:
        return _repeat(mask_char, n)
    start = min(max(start_keep, 0), n)
    end = min(max(end_keep, 0), n - start)
    return value[:start] + _repeat(mask_char, n - start - end) + value[n - end:]


def mask_password(value: str, mask_char: str = DEFAULT_MASK_CHAR) -> str:
    if not value:
        return value
    return _repeat(mask_char, len(value))


def mask_email(value: str, mask_char: str = DEFAULT_MASK_CHAR) -> str:
    if not value:
        return value
    at = value.find("@")
    if at <= 0:
        return value
    local, domain = value[:at], value[at:]
    if len(local) <= 1:
        return _repeat(mask_char, max(len(local), 3)) + domain
    return local[0] + _repeat(mask_char, len(local) - 1) + domain


def apply_strategy(
    kind: StrategyKind,
    value: str,
    start_keep: int,
    end_keep: int,
    mask_char: str = DEFAULT_MASK_CHAR,
) -> str:
    if kind in (StrategyKind.USERNAME, StrategyKind.CHINESE_NAME, StrategyKind.CUSTOM):
        return mask(value, start_keep, end_keep, mask_char)
    if kind in (StrategyKind.ID_CARD, StrategyKind.PHONE, StrategyKind.BANK_CARD, StrategyKind.ADDRESS):
        return mask_threshold(value, start_keep, end_keep, mask_char, _FULL_MASK_THRESHOLDS[kind])
    if kind is StrategyKind.PASSWORD:
        return mask_password(value, mask_char)
    if kind is StrategyKind.EMAIL:
        return mask_email(value, mask_char)
    raise StrategyMismatchError(f"no masking handler for strategy: {kind!r}")


def mask_value(
    value: Any,
    strategy: Union[StrategyKind, str],
    params: Optional[MaskParams] = None,
    mask_char: str = DEFAULT_MASK_CHAR,
) -> Any:
    """Mask one scalar outside of a document walk.

    None is returned as-is; numbers and booleans are masked in their JSON text
    form and come back as strings.
    """
    if value is None:
        return None
    kind = strategy if isinstance(strategy, StrategyKind) else StrategyKind.parse(strategy)
    start, end, ch = (params or MaskParams()).resolve(kind, mask_char)
    return apply_strategy(kind, scalar_text(value), start, end, ch)


__all__ = [
    "StrategyKind",
    "MaskParams",
    "default_keeps",
    "mask",
    "mask_threshold",
    "mask_password",
    "mask_email",
    "apply_strategy",
    "mask_value",
]
