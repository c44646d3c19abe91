"""Question answering about nutrition labels using LLMs."""

import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Protocol

_logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a knowledgeable nutritionist analyzing food labels.
IMPORTANT: Your response MUST be formatted in Markdown.

Follow this structure:
1. Start with a level-2 heading (##) for the main topic
2. Use level-3 headings (###) for subtopics
3. ALWAYS present nutritional data in tables
4. Use bullet lists for benefits or considerations
5. Use **bold** for important values

Example format:
## Nutritional Analysis

### Key Nutrients
| Nutrient | Amount | Daily Value |
|----------|---------|-------------|
| Protein  | 20g     | 40%        |

### Health Considerations
* Benefit one
* Benefit two

Keep responses concise and focused on the question asked."""

APOLOGY_MESSAGE = (
    "Sorry, I encountered an error while analyzing the nutrition information. "
    "Please try again."
)
EMPTY_ANSWER_MESSAGE = (
    "I couldn't analyze the nutrition information. Please try again."
)


class CompletionClient(Protocol):
    """Interface for LLM chat completions."""

    def stream(  # noqa: PLR0913
        self,
        *,
        model: str,
        messages: list[dict[str, str]],
        temperature: float,
        max_tokens: int,
        presence_penalty: float,
        frequency_penalty: float,
    ) -> AsyncIterator[str]:
        """Yield content deltas of a streamed completion."""

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
        """Return the full content of a completion."""


@dataclass
class ChatService:
    """Service that builds nutrition prompts and relays model answers."""

    client: CompletionClient
    model: str = "gpt-4"
    temperature: float = 0.7
    max_tokens: int = 500
    presence_penalty: float = 0.1
    frequency_penalty: float = 0.1

    async def stream_answer(
        self, nutrition_text: str, question: str
    ) -> AsyncIterator[str]:
        """Yield answer fragments in arrival order.

        Failures are logged and replaced by a single apology fragment, so a
        consumer always receives something displayable. Cancellation is not
        swallowed.
        """
        messages = build_messages(nutrition_text, question)
        try:
            async for fragment in self.client.stream(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                presence_penalty=self.presence_penalty,
                frequency_penalty=self.frequency_penalty,
            ):
                if fragment:
                    yield fragment
        except Exception:
            _logger.exception("Chat completion stream failed")
            yield APOLOGY_MESSAGE

    async def answer(self, nutrition_text: str, question: str) -> str:
        """Return a complete answer without streaming."""
        messages = build_messages(nutrition_text, question)
        try:
            content = await self.client.complete(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                presence_penalty=self.presence_penalty,
                frequency_penalty=self.frequency_penalty,
            )
        except Exception:
            _logger.exception("Chat completion failed")
            return APOLOGY_MESSAGE
        return content or EMPTY_ANSWER_MESSAGE


def build_messages(nutrition_text: str, question: str) -> list[dict[str, str]]:
    """Build the system and user messages for a label question."""
    if not question.strip():
        raise ValueError("Question must not be blank")
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {
            "role": "user",
            "content": (
                f"Here are the nutrition facts:\n{nutrition_text}\n\n"
                f"User's question: {question}"
            ),
        },
    ]
