from hireprep.ai.config import load_ai_config
from hireprep.ai.types import AIClient
from hireprep.ai.providers.openai_provider import OpenAIProvider
from hireprep.core.errors import ConfigurationError


def get_ai_client() -> AIClient:
    cfg = load_ai_config()

    if cfg.provider == "openai":
        return OpenAIProvider(model=cfg.model)

    raise ConfigurationError(f"Unsupported AI_PROVIDER='{cfg.provider}'", code="unsupported_provider")
