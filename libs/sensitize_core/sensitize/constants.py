from __future__ import annotations

from typing import Final

# Masking defaults
DEFAULT_MASK_CHAR: Final[str] = "*"
DEFAULT_RULE_DELIMITER: Final[str] = ";"

# Rule grammar
PARAM_SEPARATOR: Final[str] = ","
KEY_VALUE_SEPARATOR: Final[str] = ":"
PARAM_START_KEEP: Final[str] = "startKeep"
PARAM_END_KEEP: Final[str] = "endKeep"
PARAM_MASK_CHAR: Final[str] = "maskChar"
MIN_KEEP: Final[int] = 0
MAX_KEEP: Final[int] = 1000

# Environment variables controlling the engine
ENV_ENABLED: Final[str] = "SENSITIZE_ENABLED"                  # default: 1
ENV_GLOBAL_ENABLED: Final[str] = "SENSITIZE_GLOBAL_ENABLED"    # default: 1
ENV_DEFAULT_MASK: Final[str] = "SENSITIZE_DEFAULT_MASK"        # single character
ENV_RULE_DELIMITER: Final[str] = "SENSITIZE_RULE_DELIMITER"    # default: ";"

__all__ = [
    "DEFAULT_MASK_CHAR",
    "DEFAULT_RULE_DELIMITER",
    "PARAM_SEPARATOR",
    "KEY_VALUE_SEPARATOR",
    "PARAM_START_KEEP",
    "PARAM_END_KEEP",
    "PARAM_MASK_CHAR",
    "MIN_KEEP",
    "MAX_KEEP",
    "ENV_ENABLED",
    "ENV_GLOBAL_ENABLED",
    "ENV_DEFAULT_MASK",
    "ENV_RULE_DELIMITER",
]
