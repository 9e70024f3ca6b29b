import os
from dataclasses import dataclass


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str
    stream: bool


def load_ai_config() -> AIConfig:
    provider = os.getenv("AI_PROVIDER", "openai").strip().lower()
    model = os.getenv("AI_MODEL", "gpt-4o").strip()
    stream = os.getenv("AI_STREAM", "true").strip().lower() in {"1", "true", "yes", "y", "on"}
    return AIConfig(provider=provider, model=model, stream=stream)
