#!/usr/bin/env python3
"""Translate UI strings via an OpenAI-compatible chat completions API.

Two calls are exposed to the repair job:
  - `translate_batch(texts, target_language)` -> one result per text, in order
    (`None` for a text the model did not return);
  - `translate_one(text, target_language)` -> translated text, raising on failure.

Examples:
    python translation_client.py --target-language es "Hello" "Good morning"
"""

from __future__ import annotations

import argparse
import itertools
import json
import os
import re
import time
import urllib.error
import urllib.request

PLACEHOLDER_RE = re.compile(
    r"(\{\{\s*[A-Za-z_][A-Za-z0-9_.-]*\s*\}\}|\{[A-Za-z_][A-Za-z0-9_]*(?::[^{}]+)?\}|\$\{[A-Za-z_][A-Za-z0-9_]*\}|%\(\w+\)[#0\-+]?\d*(?:\.\d+)?[a-zA-Z]|%[#0\-+]?\d*(?:\.\d+)?[a-zA-Z])"
)
TRANSIENT_HTTP_CODES = {408, 425, 429, 500, 502, 503, 504}


class OpenAICompatClient:
    def __init__(
        self,
        api_base: str,
        api_key: str,
        model: str,
        timeout_sec: int = 120,
        retries: int = 3,
    ) -> None:
        self.api_base = normalize_api_base(api_base)
        self.api_keys = parse_api_keys(api_key)
        if not self.api_keys:
            raise ValueError("At least one API key is required")
        self.model = model
        self.timeout_sec = timeout_sec
        self.retries = retries

    def chat_json(
        self,
        messages: list[dict[str, str]],
        temperature: float = 0.0,
        key_offset: int = 0,
    ) -> dict:
        url = f"{self.api_base}/v1/chat/completions"
        payload = {
            "model": self.model,
            "messages": messages,
            "stream": False,
            "temperature": temperature,
        }
        body = json.dumps(payload).encode("utf-8")

        last_error: Exception | None = None
        max_attempts = (self.retries + 1) * len(self.api_keys)
        for attempt in range(max_attempts):
            api_key = self.api_keys[(key_offset + attempt) % len(self.api_keys)]
            request = urllib.request.Request(
                url=url,
                data=body,
                method="POST",
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {api_key}",
                },
            )
            try:
                with urllib.request.urlopen(  # noqa: S310 - user-provided endpoint by design
                    request,
                    timeout=self.timeout_sec,
                ) as response:
                    data = response.read().decode("utf-8")
                return json.loads(data)
            except (urllib.error.HTTPError, urllib.error.URLError, TimeoutError) as exc:
                last_error = exc
                if attempt >= max_attempts - 1:
                    break

                # Rotate to the next key right away on auth and client errors.
                if isinstance(exc, urllib.error.HTTPError) and exc.code not in TRANSIENT_HTTP_CODES:
                    continue
                time.sleep(min(8, 2 ** min(attempt, self.retries)))

        if last_error is None:
            raise RuntimeError("Chat request failed without explicit exception")
        raise RuntimeError(f"Chat request failed: {last_error}") from last_error


class ChatTranslator:
    """Translation service backed by a chat model.

    Each request carries the texts with integer ids; the model answers with
    `{"translations": [{"id": <int>, "translated": <string>}, ...]}`.
    """

    def __init__(self, client: OpenAICompatClient, source_language: str) -> None:
        self.client = client
        self.source_language = source_language
        self._calls = itertools.count()

    def translate_batch(self, texts: list[str], target_language: str) -> list[str | None]:
        if not texts:
            return []
        messages = build_messages(self.source_language, target_language, texts)
        response = self.client.chat_json(messages, key_offset=next(self._calls))
        content = chat_content_from_response(response)
        mapping = parse_translations(content, set(range(len(texts))))
        if not mapping:
            raise ValueError("Model returned no valid translations for this batch")
        return [mapping.get(idx) for idx in range(len(texts))]

    def translate_one(self, text: str, target_language: str) -> str:
        translated = self.translate_batch([text], target_language)[0]
        if not translated:
            raise ValueError("Model returned an empty translation")
        return translated


def parse_api_keys(raw: str | None) -> list[str]:
    if raw is None:
        return []
    return [key.strip() for key in raw.split(",") if key.strip()]


def normalize_api_base(raw: str) -> str:
    api_base = raw.strip().rstrip("/")
    suffix = "/v1/chat/completions"
    if api_base.endswith(suffix):
        return api_base[: -len(suffix)]
    return api_base


def build_messages(
    source_language: str,
    target_language: str,
    texts: list[str],
) -> list[dict[str, str]]:
    system_prompt = (
        "You are a software localization assistant for a web application's UI strings. "
        "Translate each text from the source language into the target language. "
        "Return JSON only. Do not add commentary.\n"
        "Rules:\n"
        "1) Keep all placeholders unchanged, e.g. {{name}}, {name}, ${value}, %s, %(name)s.\n"
        "2) Keep URLs, HTML tags, and markdown syntax unchanged.\n"
        "3) Keep brand and product names unchanged.\n"
        "4) Use a warm, plain register suitable for older adults.\n"
        '5) Output format: {"translations": [{"id": <int>, "translated": <string>}, ...]}.\n'
    )
    user_payload = {
        "source_language": source_language,
        "target_language": target_language,
        "items": [{"id": idx, "text": text} for idx, text in enumerate(texts)],
    }
    return [
        {"role": "system", "content": system_prompt},
        {
            "role": "user",
            "content": json.dumps(user_payload, ensure_ascii=False),
        },
    ]


def extract_json_text(content: str) -> str:
    content = content.strip()
    if content.startswith("```"):
        fence_match = re.search(r"```(?:json)?\s*(.*?)\s*```", content, re.DOTALL)
        if fence_match:
            return fence_match.group(1).strip()

    # Fallback: locate first '{' and last '}'.
    first = content.find("{")
    last = content.rfind("}")
    if first != -1 and last != -1 and first < last:
        return content[first : last + 1]
    return content


def parse_translations(content: str, expected_ids: set[int]) -> dict[int, str]:
    payload = json.loads(extract_json_text(content))

    rows = payload.get("translations", []) if isinstance(payload, dict) else []
    if not isinstance(rows, list):
        raise ValueError("Invalid translation payload: translations must be a list")

    result: dict[int, str] = {}
    for row in rows:
        if not isinstance(row, dict):
            continue
        item_id = row.get("id")
        translated = row.get("translated")
        if not isinstance(item_id, int) or item_id not in expected_ids:
            continue
        if not isinstance(translated, str) or not translated.strip():
            continue
        result[item_id] = translated
    return result


def chat_content_from_response(data: dict) -> str:
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        raise ValueError("Invalid response: choices is empty")
    first = choices[0]
    if not isinstance(first, dict):
        raise ValueError("Invalid response: choices[0] is not an object")
    message = first.get("message")
    if not isinstance(message, dict):
        raise ValueError("Invalid response: choices[0].message is missing")
    content = message.get("content")
    if not isinstance(content, str):
        raise ValueError("Invalid response: message.content is not string")
    return content


def placeholders(text: str) -> set[str]:
    return {re.sub(r"\s+", "", token) for token in PLACEHOLDER_RE.findall(text)}


def placeholders_preserved(source: str, translated: str) -> bool:
    return placeholders(source).issubset(placeholders(translated))


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Translate strings with an OpenAI-compatible API (smoke test)."
    )
    parser.add_argument("texts", nargs="+")
    parser.add_argument("--source-language", default="en")
    parser.add_argument("--target-language", required=True)
    parser.add_argument("--model", default=None)
    parser.add_argument("--api-base", default=None)
    parser.add_argument("--api-key", default=None)
    parser.add_argument("--timeout-sec", type=int, default=120)
    parser.add_argument("--retries", type=int, default=3)
    args = parser.parse_args()

    api_base = args.api_base or os.getenv("OPENAI_BASE_URL")
    api_key = args.api_key or os.getenv("OPENAI_API_KEY")
    if not api_base or not parse_api_keys(api_key):
        raise ValueError(
            "Missing API config. Provide --api-base/--api-key, or set "
            "OPENAI_BASE_URL/OPENAI_API_KEY."
        )

    client = OpenAICompatClient(
        api_base=api_base,
        api_key=api_key,
        model=args.model or os.getenv("OPENAI_MODEL") or "gpt-4o-mini",
        timeout_sec=args.timeout_sec,
        retries=args.retries,
    )
    translator = ChatTranslator(client, args.source_language)
    for text, translated in zip(
        args.texts, translator.translate_batch(args.texts, args.target_language)
    ):
        print(f"{text} -> {translated}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
