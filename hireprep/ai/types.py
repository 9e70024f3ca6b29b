from dataclasses import dataclass
from typing import AsyncGenerator, Literal, Protocol, Sequence


Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str


class AIClient(Protocol):
    def stream(
        self, messages: Sequence[ChatMessage], *, temperature: float
    ) -> AsyncGenerator[str, None]: ...

    async def complete(
        self, messages: Sequence[ChatMessage], *, temperature: float
    ) -> str: ...
