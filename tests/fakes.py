from __future__ import annotations

import json
from typing import Any, Sequence

from hireprep.ai.types import ChatMessage


def question_payload(text: str, **overrides: Any) -> dict[str, Any]:
    payload = {
        "question": text,
        "difficulty": "Hard",
        "category": "Kubernetes Networking",
        "modelAnswer": "Services get a stable virtual IP and kube-proxy programs the routing rules.",
        "keyPoints": ["ClusterIP", "kube-proxy"],
        "followUps": ["How does a headless service differ?"],
    }
    payload.update(overrides)
    return payload


def generation_payload(count: int = 12) -> dict[str, Any]:
    return {
        "questions": [question_payload(f"Kubernetes question {i}?") for i in range(1, count + 1)],
        "prepPlan": {
            "topicsToRevise": ["Kubernetes scheduling", "PostgreSQL indexing"],
            "timeline": "**Week 1:** Kubernetes. **Week 2:** PostgreSQL.",
            "resources": ["kubernetes.io/docs"],
        },
        "skillGapAnalysis": {
            "strengths": ["Python services"],
            "gaps": ["Kubernetes operators"],
            "recommendations": "Build a small operator.",
        },
    }


class FakeAIClient:
    """Stands in for the provider; records every call it receives."""

    def __init__(
        self,
        content: str | dict[str, Any] = "",
        *,
        chunk_size: int = 7,
        error: Exception | None = None,
        fail_after_chunks: int = 0,
    ) -> None:
        self.content = content if isinstance(content, str) else json.dumps(content)
        self.chunk_size = chunk_size
        self.error = error
        self.fail_after_chunks = fail_after_chunks
        self.calls: list[dict[str, Any]] = []

    async def stream(self, messages: Sequence[ChatMessage], *, temperature: float):
        self.calls.append({"mode": "stream", "messages": list(messages), "temperature": temperature})
        sent = 0
        for start in range(0, len(self.content), self.chunk_size):
            if self.error is not None and sent >= self.fail_after_chunks:
                raise self.error
            yield self.content[start : start + self.chunk_size]
            sent += 1
        if self.error is not None:
            raise self.error

    async def complete(self, messages: Sequence[ChatMessage], *, temperature: float) -> str:
        self.calls.append({"mode": "complete", "messages": list(messages), "temperature": temperature})
        if self.error is not None:
            raise self.error
        return self.content
