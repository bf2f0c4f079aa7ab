from __future__ import annotations

import json
import re

import orjson
from typing import Any, Tuple

from .errors import ParseError

# orjson handles integers in [-2**63, 2**64 - 1]; wider literals go through json
_INT_MIN = -(2**63)
_INT_MAX = 2**64 - 1
_LONG_DIGITS_RE = re.compile(r"\d{19}")
_TOKEN_RE = re.compile(r'"(?:[^"\\]|\\.)*"|-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?')


def _blank(text: Any) -> bool:
    if isinstance(text, (str, bytes, bytearray)):
        return not text.strip()
    return True


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant: {name}")


def has_wide_integers(text: str | bytes) -> bool:
    """True when `text` holds an integer literal outside the 64-bit range (string contents ignored)."""
    if isinstance(text, (bytes, bytearray)):
        text = text.decode("utf-8", errors="replace")
    if not _LONG_DIGITS_RE.search(text):
        return False
    for m in _TOKEN_RE.finditer(text):
        tok = m.group(0)
        if tok[0] == '"' or "." in tok or "e" in tok or "E" in tok:
            continue
        if not _INT_MIN <= int(tok) <= _INT_MAX:
            return True
    return False


def try_parse_json(text: str | bytes) -> Tuple[Any | None, str | None]:
    """Parse JSON string, returning (obj, None) on success, or (None, error) on failure.

    Integers beyond 64 bits keep their exact value.
    """
    try:
        if has_wide_integers(text):
            return json.loads(text, parse_constant=_reject_constant), None
        return orjson.loads(text), None
    except (orjson.JSONDecodeError, ValueError) as e:
        return None, str(e)


def loads_json(text: str | bytes) -> Any:
    """Parse JSON text; raises ParseError for blank or malformed input."""
    if _blank(text):
        raise ParseError("input is empty")
    obj, err = try_parse_json(text)
    if err is not None:
        raise ParseError(err)
    return obj


def is_valid_json(text: str | bytes | None) -> bool:
    """True when `text` is a non-blank, well-formed JSON document."""
    if _blank(text):
        return False
    _, err = try_parse_json(text)  # type: ignore[arg-type]
    return err is None


def dumps_json(obj: Any) -> str:
    """Compact JSON text; member order is kept as inserted, non-ASCII is not escaped."""
    try:
        return orjson.dumps(obj).decode("utf-8")
    except orjson.JSONEncodeError:
        # integers wider than 64 bits
        return json.dumps(obj, ensure_ascii=False, separators=(",", ":"))


def format_json(text: str) -> str:
    """Pretty-print JSON text with a 2-space indent; invalid text is returned unchanged."""
    try:
        obj = loads_json(text)
    except ParseError:
        return text
    try:
        return orjson.dumps(obj, option=orjson.OPT_INDENT_2).decode("utf-8")
    except orjson.JSONEncodeError:
        return json.dumps(obj, ensure_ascii=False, indent=2)


def scalar_text(value: Any) -> str:
    """Text form of a JSON scalar: strings as-is, others as their JSON literal (true, 42, 1.5)."""
    if isinstance(value, str):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return orjson.dumps(value).decode("utf-8")
