"""OpenAI Chat Completions client for label questions."""

from collections.abc import AsyncIterator
from dataclasses import dataclass

from openai import AsyncOpenAI

from label_assistant.services.chat import CompletionClient


@dataclass
class OpenAICompletionClient(CompletionClient):
    """Completion client backed by OpenAI Chat Completions."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAICompletionClient":
        """Create an OpenAI completion client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def stream(  # noqa: PLR0913
        self,
        *,
        model: str,
        messages: list[dict[str, str]],
        temperature: float,
        max_tokens: int,
        presence_penalty: float,
        frequency_penalty: float,
    ) -> AsyncIterator[str]:
        """Yield content deltas from a streamed completion."""
        stream = await self.client.chat.completions.create(
            model=model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
            presence_penalty=presence_penalty,
            frequency_penalty=frequency_penalty,
            stream=True,
        )
        async for chunk in stream:
            if not chunk.choices:
                continue
            content = chunk.choices[0].delta.content
            if content:
                yield content

    async def complete(  # noqa: PLR0913
        self,
        *,
        model: str,
        messages: list[dict[str, str]],
        temperature: float,
        max_tokens: int,
        presence_penalty: float,
        frequency_penalty: float,
    ) -> str:
        """Return the message content of a completion."""
        completion = await self.client.chat.completions.create(
            model=model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
            presence_penalty=presence_penalty,
            frequency_penalty=frequency_penalty,
            stream=False,
        )
        if not completion.choices:
            return ""
        return completion.choices[0].message.content or ""
