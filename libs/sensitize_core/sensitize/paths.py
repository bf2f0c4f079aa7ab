"""
Field-path patterns.

Pattern syntax:
- Dot-separated member names, e.g. "user.email".
- A member may carry trailing "[*]" or "[N]" suffixes, one per array level, e.g.
  "items[*].phone" or "matrix[0][*]". Numeric indices are treated exactly like
  "[*]": a rule applies to every element of the array.

While walking a document the concrete path uses Index segments; `normalize`
turns them into Wildcard segments so a concrete path can be looked up directly
in a rule table keyed by PatternPath.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple, Union

from .errors import ConfigError


@dataclass(frozen=True)
class Key:
    name: str


@dataclass(frozen=True)
class Index:
    position: int


@dataclass(frozen=True)
class Wildcard:
    pass


WILDCARD = Wildcard()

Segment = Union[Key, Index, Wildcard]
ConcretePath = Tuple[Union[Key, Index], ...]

_PART_RE = re.compile(r"^([^\[\]]*)((?:\[(?:\d+|\*)\])*)$")


@dataclass(frozen=True)
class PatternPath:
    segments: Tuple[Union[Key, Wildcard], ...]

    def __len__(self) -> int:
        return len(self.segments)

    def __str__(self) -> str:
        return format_path(self.segments)


def parse_pattern(text: str) -> PatternPath:
    segs: list[Union[Key, Wildcard]] = []
    for part in (text or "").strip().split("."):
        part = part.strip()
        if not part:
            continue
        m = _PART_RE.match(part)
        if not m:
            raise ConfigError("malformed field path segment", rule=text, key=part, code="bad_path")
        name, suffix = m.group(1), m.group(2)
        if name:
            segs.append(Key(name))
        segs.extend(WILDCARD for _ in range(suffix.count("[")))
    if not segs:
        raise ConfigError("empty field path", rule=text, code="bad_path")
    return PatternPath(tuple(segs))


def normalize(path: Iterable[Segment]) -> PatternPath:
    return PatternPath(tuple(WILDCARD if isinstance(s, (Index, Wildcard)) else s for s in path))


def _segment_matches(pat: Segment, seg: Segment) -> bool:
    if isinstance(pat, Wildcard):
        return isinstance(seg, (Index, Wildcard))
    return isinstance(seg, Key) and seg.name == pat.name


def _segments(path: Union[PatternPath, Sequence[Segment]]) -> Sequence[Segment]:
    return path.segments if isinstance(path, PatternPath) else path


def matches(pattern: Union[PatternPath, Sequence[Segment]], path: Union[PatternPath, Sequence[Segment]]) -> bool:
    """Exact match: same length and every segment matches."""
    p, c = _segments(pattern), _segments(path)
    if len(p) != len(c):
        return False
    return all(_segment_matches(a, b) for a, b in zip(p, c))


def contains(pattern: Union[PatternPath, Sequence[Segment]], path: Union[PatternPath, Sequence[Segment]]) -> bool:
    """Prefix containment: `pattern` addresses a container that `path` lies below."""
    p, c = _segments(pattern), _segments(path)
    if not p or len(p) >= len(c):
        return False
    return all(_segment_matches(a, b) for a, b in zip(p, c))


def format_path(path: Iterable[Segment]) -> str:
    out = ""
    for seg in path:
        if isinstance(seg, Key):
            out = f"{out}.{seg.name}" if out else seg.name
        elif isinstance(seg, Index):
            out += f"[{seg.position}]"
        else:
            out += "[*]"
    return out


__all__ = [
    "Key",
    "Index",
    "Wildcard",
    "WILDCARD",
    "Segment",
    "ConcretePath",
    "PatternPath",
    "parse_pattern",
    "normalize",
    "matches",
    "contains",
    "format_path",
]
