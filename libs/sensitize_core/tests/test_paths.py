from __future__ import annotations

import pytest

from sensitize.errors import ConfigError
from sensitize.paths import (
    WILDCARD,
    Index,
    Key,
    PatternPath,
    contains,
    format_path,
    matches,
    normalize,
    parse_pattern,
)


def test_parse_dotted_path():
    p = parse_pattern("user.profile.phone")
    assert p.segments == (Key("user"), Key("profile"), Key("phone"))
    assert len(p) == 3


def test_numeric_index_is_treated_as_wildcard():
    assert parse_pattern("items[3].phone") == parse_pattern("items[*].phone")
    assert parse_pattern("items[*].phone").segments == (Key("items"), WILDCARD, Key("phone"))


def test_nested_array_suffixes():
    assert parse_pattern("matrix[0][*]").segments == (Key("matrix"), WILDCARD, WILDCARD)


def test_empty_segments_are_skipped():
    assert parse_pattern(" a..b ") == parse_pattern("a.b")


@pytest.mark.parametrize("text", ["", "  ", ".", "a[x]", "a[", "a]b", "a[1]b"])
def test_malformed_patterns_rejected(text):
    with pytest.raises(ConfigError):
        parse_pattern(text)


def test_normalize_maps_indices_to_wildcards():
    concrete = (Key("items"), Index(3), Key("phone"))
    assert normalize(concrete) == parse_pattern("items[*].phone")
    assert normalize(()) == PatternPath(())


def test_exact_match():
    pat = parse_pattern("items[*].phone")
    assert matches(pat, (Key("items"), Index(0), Key("phone")))
    assert matches(pat, (Key("items"), Index(7), Key("phone")))
    assert matches(pat, parse_pattern("items[1].phone"))
    assert not matches(pat, (Key("items"), Index(0)))
    assert not matches(pat, (Key("items"), Key("0"), Key("phone")))
    assert not matches(parse_pattern("a.b"), (Key("a"), Key("c")))


def test_prefix_containment():
    pat = parse_pattern("user.contact")
    assert contains(pat, (Key("user"), Key("contact"), Key("phone")))
    assert contains(pat, (Key("user"), Key("contact"), Index(2)))
    assert not contains(pat, (Key("user"), Key("contact")))
    assert not contains(pat, (Key("user"), Key("contacts"), Key("phone")))
    assert not contains(parse_pattern("items[*]"), (Key("items"), Key("x"), Key("y")))
    assert contains(parse_pattern("items[*]"), (Key("items"), Index(1), Key("y")))


def test_format_path():
    assert format_path((Key("user"), Key("contacts"), Index(2), Key("phone"))) == "user.contacts[2].phone"
    assert str(parse_pattern("items[5].tags[*]")) == "items[*].tags[*]"
    assert format_path(()) == ""
