from __future__ import annotations

import pytest
from pydantic import ValidationError

from sensitize.settings import SensitizeSettings


def test_defaults():
    s = SensitizeSettings()
    assert s.enabled and s.global_enabled and s.active
    assert s.default_mask == "*"
    assert s.rule_delimiter == ";"


def test_from_env(monkeypatch):
    monkeypatch.setenv("SENSITIZE_ENABLED", "yes")
    monkeypatch.setenv("SENSITIZE_GLOBAL_ENABLED", "0")
    monkeypatch.setenv("SENSITIZE_DEFAULT_MASK", "#")
    monkeypatch.setenv("SENSITIZE_RULE_DELIMITER", "|")
    s = SensitizeSettings.from_env()
    assert s.enabled is True
    assert s.global_enabled is False
    assert not s.active
    assert s.default_mask == "#"
    assert s.rule_delimiter == "|"


def test_from_env_blank_values_use_defaults(monkeypatch):
    monkeypatch.setenv("SENSITIZE_ENABLED", "")
    monkeypatch.delenv("SENSITIZE_GLOBAL_ENABLED", raising=False)
    monkeypatch.delenv("SENSITIZE_DEFAULT_MASK", raising=False)
    monkeypatch.delenv("SENSITIZE_RULE_DELIMITER", raising=False)
    s = SensitizeSettings.from_env()
    assert s.active
    assert s.default_mask == "*"


def test_from_explicit_mapping():
    s = SensitizeSettings.from_env({"SENSITIZE_ENABLED": "false"})
    assert s.enabled is False


@pytest.mark.parametrize("mask", ["", "##"])
def test_default_mask_must_be_one_character(mask):
    with pytest.raises(ValidationError):
        SensitizeSettings(default_mask=mask)


@pytest.mark.parametrize("delim", [",", ":"])
def test_delimiter_cannot_collide_with_param_grammar(delim):
    with pytest.raises(ValidationError):
        SensitizeSettings(rule_delimiter=delim)
