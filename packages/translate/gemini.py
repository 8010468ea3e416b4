"""
Natural language -> rule language, via the Gemini generateContent API.

The model is asked for a JSON object with a single key:

    {"dsl_rules": "O at 3\\nA in word\\nno S, T, R, E\\nLENGTH: 5"}

Only the `dsl_rules` string is kept; compiling it is the engine's job.
"""

from __future__ import annotations

import json
import logging
from typing import Dict, Optional

import requests

from packages.net import ConfigurationError, ParseError, ResilientFetcher

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash-preview-09-2025"
API_URL_TEMPLATE = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

SYSTEM_PROMPT = """You are a Wordle Rule Translator. You must output a single JSON object with only 'dsl_rules'.
If length is not specified, assume LENGTH: 5.
STRICTLY use the following DSL format with each rule on a separate line (separated by \\n):
- Exact position (Green): [LETTER] at [POSITION] (e.g., O at 3)
- Present in word (Yellow): [LETTER] in word (e.g., A in word)
- Present but not at some positions (Yellow): [LETTER] in word, not at [POSITIONS, comma-separated] (e.g., A in word, not at 1, 2)
- Absent (Gray): no [LETTERS, comma-separated] (e.g., no S, T, R, E)
- Length: LENGTH: [NUMBER] (e.g., LENGTH: 5)

Example output:
{"dsl_rules": "O at 3\\nA in word\\nno S, T, R, E\\nLENGTH: 5"}"""


def build_prompt(constraints: str) -> str:
    return (
        "Convert the following Wordle constraints into a strict DSL format.\n\n"
        "Output ONLY a JSON object with one key:\n"
        "- 'dsl_rules': a string containing the DSL rules separated by newlines (\\n).\n\n"
        "Each rule must be on its own line. For example:\n"
        '"O at 3\\nA in word\\nno S, T, R, E\\nLENGTH: 5"\n\n'
        f"Constraints: {constraints}"
    )


def build_payload(constraints: str) -> Dict:
    """Request body for generateContent with a JSON response schema."""
    return {
        "contents": [{"parts": [{"text": build_prompt(constraints)}]}],
        "systemInstruction": {"parts": [{"text": SYSTEM_PROMPT}]},
        "generationConfig": {
            "responseMimeType": "application/json",
            "responseSchema": {
                "type": "OBJECT",
                "properties": {"dsl_rules": {"type": "STRING"}},
            },
        },
    }


def extract_rule_text(result: Dict) -> str:
    """
    Pull the rule text out of a generateContent result.

    Raises ParseError if the result does not carry a JSON object with a
    string `dsl_rules` field.
    """
    try:
        text = result["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as e:
        raise ParseError("Could not generate DSL: response has no candidate text.") from e
    if not text:
        raise ParseError("Could not generate DSL: candidate text is empty.")

    try:
        parsed = json.loads(text)
    except ValueError as e:
        raise ParseError(f"Could not generate DSL: candidate text is not JSON ({e}).") from e

    rules = parsed.get("dsl_rules") if isinstance(parsed, dict) else None
    if not isinstance(rules, str):
        raise ParseError("Could not generate DSL: JSON payload has no 'dsl_rules' string.")
    return rules


def _json_body(resp: requests.Response) -> Dict:
    try:
        return resp.json()
    except ValueError as e:
        raise ParseError(f"Gemini API returned a non-JSON body: {e}") from e


class GeminiTranslator:
    """Translate free-text constraints into rule-language text."""

    def __init__(
            self,
            api_key: Optional[str],
            *,
            model: str = DEFAULT_MODEL,
            session: Optional[requests.Session] = None,
            fetcher: Optional[ResilientFetcher] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.session = session or requests.Session()
        self.fetcher = fetcher or ResilientFetcher(name="Gemini API")

    @property
    def url(self) -> str:
        return API_URL_TEMPLATE.format(model=self.model)

    def translate(self, constraints: str) -> str:
        """
        Return rule-language text for `constraints`.

        Raises:
          ConfigurationError if the API key or the constraint text is missing,
          ParseError if the answer cannot be decoded, and whatever the
          fetcher raises once its retries are spent.
        """
        if not self.api_key:
            raise ConfigurationError("API Key is required.")
        if not constraints or not constraints.strip():
            raise ConfigurationError("Please enter a rule description.")

        payload = build_payload(constraints.strip())
        logger.info("translating constraints with %s", self.model)

        def send(token):
            return self.session.post(
                self.url,
                headers={"x-goog-api-key": self.api_key},
                json=payload,
                timeout=token.remaining(),
            )

        result = self.fetcher.request(send, parse=_json_body)
        rules = extract_rule_text(result)
        logger.debug("generated rules: %r", rules)
        return rules
