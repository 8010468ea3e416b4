import json

import pytest
import requests

from packages.net import (
    ConfigurationError, FatalHttpError, NetworkError, ParseError, ResilientFetcher,
)
from packages.translate import GeminiTranslator, build_payload, extract_rule_text, DEFAULT_MODEL
from fakes import FakeResponse, FakeSession

RULES = "O at 3\nA in word\nno S, T, R, E\nLENGTH: 5"


def _gemini_result(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def _translator(session, sleeps, key="k3y"):
    return GeminiTranslator(key, session=session,
                            fetcher=ResilientFetcher(name="Gemini API", sleep=sleeps))


def test_payload_shape():
    p = build_payload("O is third")
    assert p["contents"][0]["parts"][0]["text"].endswith("Constraints: O is third")
    assert "Wordle Rule Translator" in p["systemInstruction"]["parts"][0]["text"]
    schema = p["generationConfig"]["responseSchema"]
    assert schema["properties"] == {"dsl_rules": {"type": "STRING"}}


def test_extract_rule_text():
    assert extract_rule_text(_gemini_result(json.dumps({"dsl_rules": RULES}))) == RULES


@pytest.mark.parametrize("result", [
    {},
    {"candidates": []},
    _gemini_result(""),
    _gemini_result("not json"),
    _gemini_result(json.dumps({"rules": RULES})),
    _gemini_result(json.dumps(["O at 3"])),
])
def test_extract_rule_text_rejects_bad_payloads(result):
    with pytest.raises(ParseError):
        extract_rule_text(result)


def test_translate_posts_with_key_and_returns_rules(sleeps):
    s = FakeSession([FakeResponse(200, json_data=_gemini_result(json.dumps({"dsl_rules": RULES})))])
    assert _translator(s, sleeps).translate("  O is the third letter ") == RULES
    method, url, kw = s.calls[0]
    assert method == "POST"
    assert DEFAULT_MODEL in url and url.endswith(":generateContent")
    assert kw["headers"] == {"x-goog-api-key": "k3y"}
    assert "k3y" not in url and "params" not in kw
    assert kw["json"]["contents"][0]["parts"][0]["text"].endswith("O is the third letter")


def test_translate_retries_rate_limit(sleeps):
    ok = FakeResponse(200, json_data=_gemini_result(json.dumps({"dsl_rules": RULES})))
    s = FakeSession([FakeResponse(429), ok])
    assert _translator(s, sleeps).translate("x") == RULES
    assert sleeps.delays == [1.0]


def test_translate_fatal_carries_server_message(sleeps):
    bad = FakeResponse(400, json_data={"error": {"message": "API key not valid"}})
    with pytest.raises(FatalHttpError) as ei:
        _translator(FakeSession([bad]), sleeps).translate("x")
    assert "400" in str(ei.value) and "API key not valid" in str(ei.value)


def test_translate_non_json_body_is_parse_error(sleeps):
    with pytest.raises(ParseError):
        _translator(FakeSession([FakeResponse(200, text="<html>")]), sleeps).translate("x")


@pytest.mark.parametrize("key,prompt", [(None, "x"), ("", "x"), ("k", ""), ("k", "   ")])
def test_translate_configuration_errors(sleeps, key, prompt):
    s = FakeSession([])
    with pytest.raises(ConfigurationError):
        _translator(s, sleeps, key=key).translate(prompt)
    assert s.calls == []


def test_connection_failure_message_has_no_key(sleeps):
    leak = requests.ConnectionError(
        "Max retries exceeded with url: /v1beta/models/m:generateContent?key=SECRET-KEY-123"
    )
    s = FakeSession([leak])
    translator = GeminiTranslator("SECRET-KEY-123", session=s,
                                  fetcher=ResilientFetcher(name="Gemini API", max_attempts=1,
                                                           sleep=sleeps))
    with pytest.raises(NetworkError) as ei:
        translator.translate("O is third")
    assert "SECRET-KEY-123" not in str(ei.value)
    assert "key=***" in str(ei.value)
