from __future__ import annotations

import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field, field_validator

from .constants import (
    DEFAULT_MASK_CHAR,
    DEFAULT_RULE_DELIMITER,
    ENV_DEFAULT_MASK,
    ENV_ENABLED,
    ENV_GLOBAL_ENABLED,
    ENV_RULE_DELIMITER,
)

_TRUTHY = ("1", "true", "yes", "on")


def _flag(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUTHY


class SensitizeSettings(BaseModel):
    enabled: bool = Field(True, description="Redaction switch for this engine instance")
    global_enabled: bool = Field(True, description="Process-wide kill switch")
    default_mask: str = Field(DEFAULT_MASK_CHAR, description="Mask character when a rule sets none")
    rule_delimiter: str = Field(DEFAULT_RULE_DELIMITER, description="Separator between rules in a config string")

    @field_validator("default_mask")
    @classmethod
    def _one_char(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError("default_mask must be exactly one character")
        return v

    @field_validator("rule_delimiter")
    @classmethod
    def _delimiter(cls, v: str) -> str:
        if not v or v in (",", ":"):
            raise ValueError("rule_delimiter must be non-empty and not ',' or ':'")
        return v

    @property
    def active(self) -> bool:
        return self.enabled and self.global_enabled

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "SensitizeSettings":
        env = os.environ if env is None else env
        return cls(
            enabled=_flag(env, ENV_ENABLED, True),
            global_enabled=_flag(env, ENV_GLOBAL_ENABLED, True),
            default_mask=env.get(ENV_DEFAULT_MASK) or DEFAULT_MASK_CHAR,
            rule_delimiter=env.get(ENV_RULE_DELIMITER) or DEFAULT_RULE_DELIMITER,
        )


__all__ = ["SensitizeSettings"]
