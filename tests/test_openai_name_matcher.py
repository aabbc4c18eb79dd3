"""Tests for the OpenAI-backed name matcher."""

import asyncio

from dish_nutrition.adapters.openai_name_matcher import (
    OpenAINameMatcher,
    build_match_prompt,
)


class _FakeResponses:
    def __init__(self, output_text: str) -> None:
        self.output_text = output_text
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        return type("Resp", (), {"output_text": self.output_text})()


class _FakeOpenAI:
    def __init__(self, output_text: str = "") -> None:
        self.responses = _FakeResponses(output_text)
        self.closed = False

    async def close(self) -> None:
        self.closed = True


def test_build_match_prompt_lists_candidates() -> None:
    prompt = build_match_prompt("kasuri methi", ["spinach", "mint_leaves"])

    assert '"kasuri methi"' in prompt
    assert "spinach, mint_leaves" in prompt
    assert '"None"' in prompt


def test_match_sends_prompt_and_strips_quotes() -> None:
    client = _FakeOpenAI(' "spinach"\n')
    matcher = OpenAINameMatcher(client=client, model="gpt-4.1-mini")

    answer = asyncio.run(matcher.match("palak leaves", ["spinach", "tomato"]))

    assert answer == "spinach"
    payload = client.responses.last_payload
    assert payload is not None
    assert payload["model"] == "gpt-4.1-mini"
    assert payload["store"] is False
    assert payload["max_output_tokens"] == 50
    assert "spinach, tomato" in str(payload["input"])


def test_match_empty_output_means_none() -> None:
    matcher = OpenAINameMatcher(client=_FakeOpenAI(""), model="gpt-4.1-mini")

    assert asyncio.run(matcher.match("xyz", ["onion"])) == "none"


def test_close_closes_client() -> None:
    client = _FakeOpenAI()
    matcher = OpenAINameMatcher(client=client, model="gpt-4.1-mini")

    asyncio.run(matcher.close())

    assert client.closed
