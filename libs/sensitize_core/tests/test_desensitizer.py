from __future__ import annotations

import pytest

from sensitize.desensitizer import Desensitizer, redact_json
from sensitize.metrics import REG, metrics_text
from sensitize.rules import parse_rules
from sensitize.settings import SensitizeSettings


def _count(name: str, labels: dict) -> float:
    return REG.get_sample_value(name, labels) or 0.0


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "SENSITIZE_ENABLED",
        "SENSITIZE_GLOBAL_ENABLED",
        "SENSITIZE_DEFAULT_MASK",
        "SENSITIZE_RULE_DELIMITER",
    ):
        monkeypatch.delenv(name, raising=False)


def test_redact_json_wildcard_document():
    text = '{"items":[{"phone":"13812345678"},{"phone":"13900001111"}]}'
    out = redact_json(text, "items[*].phone:PHONE")
    assert out == '{"items":[{"phone":"138****5678"},{"phone":"139****1111"}]}'


def test_redact_json_short_phone_and_email():
    text = '{"phone":"1234567","email":"a@b.com"}'
    out = redact_json(text, "phone:PHONE;email:EMAIL")
    assert out == '{"phone":"*******","email":"***@b.com"}'


def test_redact_json_keeps_order_types_and_unicode():
    text = '{"z":1,"name":"欧阳修","ok":true,"n":null,"list":[1.5,"x"],"a":{"pw":"secret"}}'
    out = redact_json(text, "name:CHINESE_NAME;a.pw:PASSWORD", mask_char="#")
    assert out == '{"z":1,"name":"##修","ok":true,"n":null,"list":[1.5,"x"],"a":{"pw":"######"}}'


def test_unmatched_document_round_trips():
    text = '{"password":"p@ss","user":{"name":"ok"}}'
    assert redact_json(text, "user.phone:PHONE") == text


def test_invalid_json_passes_through():
    before = _count("sensitize_documents_total", {"outcome": "invalid_json"})
    assert redact_json("{not json", "a:PHONE") == "{not json"
    assert _count("sensitize_documents_total", {"outcome": "invalid_json"}) == before + 1


def test_non_object_root_passes_through():
    text = '[{"phone": "13812345678"}]'
    assert redact_json(text, "phone:PHONE;[*].phone:PHONE") == text


def test_no_usable_rules_passes_through():
    text = '{"phone": "13812345678"}'
    assert redact_json(text, "phone:NOT_A_STRATEGY") == text
    assert redact_json(text, "") == text


def test_bad_rule_does_not_block_the_others():
    text = '{"a":"13812345678","b":"13812345678","c":"13812345678"}'
    out = redact_json(text, "a:PHONE;b:NOPE;c:CUSTOM:startKeep:5000,endKeep:2")
    assert out == '{"a":"138****5678","b":"13812345678","c":"13*******78"}'


def test_custom_delimiter():
    text = '{"a":"abcdef","b":"abcdef"}'
    assert redact_json(text, "a:PASSWORD|b:USERNAME", delimiter="|") == '{"a":"******","b":"*****f"}'


def test_desensitizer_reuses_rule_set():
    rules = parse_rules("user.phone:PHONE")
    d = Desensitizer(rules, settings=SensitizeSettings())
    assert d.redact('{"user":{"phone":"13812345678"}}') == '{"user":{"phone":"138****5678"}}'
    assert d.redact('{"user":{"phone":"13900001111"}}') == '{"user":{"phone":"139****1111"}}'
    assert d.redact_document({"user": {"phone": "13812345678"}}) == {"user": {"phone": "138****5678"}}


def test_disabled_by_env(monkeypatch):
    monkeypatch.setenv("SENSITIZE_ENABLED", "0")
    d = Desensitizer("phone:PHONE")
    text = '{"phone":"13812345678"}'
    assert d.redact(text) == text
    doc = {"phone": "13812345678"}
    assert d.redact_document(doc) is doc


def test_global_switch_by_env(monkeypatch):
    monkeypatch.setenv("SENSITIZE_GLOBAL_ENABLED", "false")
    assert Desensitizer("phone:PHONE").redact('{"phone":"13812345678"}') == '{"phone":"13812345678"}'


def test_env_mask_and_delimiter(monkeypatch):
    monkeypatch.setenv("SENSITIZE_DEFAULT_MASK", "#")
    monkeypatch.setenv("SENSITIZE_RULE_DELIMITER", "|")
    d = Desensitizer("a:PHONE|b:PASSWORD")
    assert len(d.rules) == 2
    assert d.redact('{"a":"13812345678","b":"xy"}') == '{"a":"138####5678","b":"##"}'


def test_explicit_mask_char_wins():
    d = Desensitizer("a:PHONE", settings=SensitizeSettings(default_mask="#"), mask_char="x")
    assert d.redact('{"a":"13812345678"}') == '{"a":"138xxxx5678"}'


def test_metrics_are_exported():
    before = _count("sensitize_fields_masked_total", {"strategy": "PHONE"})
    redact_json('{"a":"13812345678","b":null}', "a:PHONE;b:PHONE")
    assert _count("sensitize_fields_masked_total", {"strategy": "PHONE"}) == before + 1
    payload, content_type = metrics_text()
    assert b"sensitize_documents_total" in payload
    assert content_type.startswith("text/plain")


def test_rule_errors_are_counted():
    before = _count("sensitize_rule_errors_total", {"reason": "unknown_strategy"})
    parse_rules("a:WHAT")
    assert _count("sensitize_rule_errors_total", {"reason": "unknown_strategy"}) == before + 1


def test_wide_integer_next_to_masked_field_is_preserved():
    text = '{"id": 123456789012345678901234567890, "phone": "13812345678"}'
    out = redact_json(text, "phone:PHONE")
    assert out == '{"id":123456789012345678901234567890,"phone":"138****5678"}'


def test_wide_integer_can_be_masked():
    out = redact_json('{"acct":123456789012345678901234567890}', "acct:BANK_CARD")
    assert out == '{"acct":"' + "*" * 26 + '7890"}'


def test_prebuilt_rule_set_keeps_its_own_mask_char():
    rules = parse_rules("a:PHONE", mask_char="#")
    d = Desensitizer(rules, settings=SensitizeSettings(default_mask="x"))
    assert d.redact('{"a":"13812345678"}') == '{"a":"138####5678"}'
    parsed_here = Desensitizer("a:PHONE", settings=SensitizeSettings(default_mask="x"))
    assert parsed_here.redact('{"a":"13812345678"}') == '{"a":"138xxxx5678"}'


def test_redact_document_counts_outcomes():
    d = Desensitizer("phone:PHONE", settings=SensitizeSettings())
    labels = ("redacted", "non_object", "disabled")
    before = {o: _count("sensitize_documents_total", {"outcome": o}) for o in labels}
    assert d.redact_document({"phone": "13812345678"}) == {"phone": "138****5678"}
    doc = [{"phone": "13812345678"}]
    assert d.redact_document(doc) is doc
    off = Desensitizer("phone:PHONE", settings=SensitizeSettings(enabled=False))
    off.redact_document({"phone": "13812345678"})
    for o in labels:
        assert _count("sensitize_documents_total", {"outcome": o}) == before[o] + 1
