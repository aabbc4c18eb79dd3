"""OpenAI Responses API client for assisted ingredient matching."""

from collections.abc import Sequence
from dataclasses import dataclass

import httpx
from openai import AsyncOpenAI

from dish_nutrition.services.resolver import NameMatcher


def build_match_prompt(raw_name: str, candidates: Sequence[str]) -> str:
    """Return the instruction asking for the single best candidate name."""
    return (
        f'Given the ingredient phrase: "{raw_name}" and the following possible '
        "standardized ingredient names from my database: "
        f"{', '.join(candidates)}. Which database name is the BEST match? "
        "Respond with ONLY the best matching name from the list, "
        'or "None" if no good match exists.'
    )


@dataclass
class OpenAINameMatcher(NameMatcher):
    """Name matcher backed by the OpenAI Responses API."""

    client: AsyncOpenAI
    model: str
    max_output_tokens: int = 50

    @classmethod
    def create(
        cls, api_key: str, model: str, timeout_seconds: float
    ) -> "OpenAINameMatcher":
        """Create a matcher with a managed httpx session."""
        http_client = httpx.AsyncClient(timeout=httpx.Timeout(timeout_seconds))
        return cls(
            client=AsyncOpenAI(api_key=api_key, http_client=http_client),
            model=model,
        )

    async def match(self, raw_name: str, candidates: Sequence[str]) -> str:
        """Ask the model to pick a candidate; returns "none" on empty output."""
        response = await self.client.responses.create(
            model=self.model,
            input=build_match_prompt(raw_name, candidates),
            max_output_tokens=self.max_output_tokens,
            store=False,
        )
        output_text = response.output_text
        if not output_text:
            return "none"
        return output_text.strip().strip('"').strip()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
