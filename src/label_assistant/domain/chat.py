"""Chat conversation models."""

from dataclasses import dataclass
from typing import Literal

ChatRole = Literal["user", "assistant"]


@dataclass
class ChatMessage:
    """A chat message; assistant content grows while an answer streams."""

    role: ChatRole
    content: str = ""

    def append(self, fragment: str) -> None:
        self.content += fragment
