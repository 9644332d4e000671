from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from shaid.core.configs import (
    API_KEY_ENV,
    DEFAULT_MODELS,
    Configuration,
    ModelSettings,
    ProviderKind,
)

ModelBuilder = Callable[[Configuration, ModelSettings], Any]


# Vendor SDKs are imported on first use
def _build_openai(config: Configuration, settings: ModelSettings):
    from shaid.providers.openai import build_openai_model

    return build_openai_model(config, settings)


def _build_claude(config: Configuration, settings: ModelSettings):
    from shaid.providers.claude import build_claude_model

    return build_claude_model(config, settings)


def _build_gemini(config: Configuration, settings: ModelSettings):
    from shaid.providers.gemini import build_gemini_model

    return build_gemini_model(config, settings)


@dataclass(frozen=True)
class ProviderBackend:
    name: str
    builder: ModelBuilder
    env_var: str
    default_model: str
    # None means any non-empty model id is accepted
    model_prefixes: Optional[Tuple[str, ...]]
    requires_api_key: bool = True
    example_models: Tuple[str, ...] = ()


BACKENDS: Dict[ProviderKind, ProviderBackend] = {
    ProviderKind.OPENAI: ProviderBackend(
        name="OpenAI",
        builder=_build_openai,
        env_var=API_KEY_ENV[ProviderKind.OPENAI],
        default_model=DEFAULT_MODELS[ProviderKind.OPENAI],
        model_prefixes=("gpt-", "chatgpt-", "o1", "o3", "o4", "codex-"),
        example_models=("gpt-4o", "gpt-4o-mini", "gpt-4.1", "o4-mini"),
    ),
    ProviderKind.CLAUDE: ProviderBackend(
        name="Claude",
        builder=_build_claude,
        env_var=API_KEY_ENV[ProviderKind.CLAUDE],
        default_model=DEFAULT_MODELS[ProviderKind.CLAUDE],
        model_prefixes=("claude-",),
        example_models=(
            "claude-3-5-sonnet-20241022",
            "claude-3-5-haiku-latest",
            "claude-sonnet-4-0",
        ),
    ),
    ProviderKind.GEMINI: ProviderBackend(
        name="Gemini",
        builder=_build_gemini,
        env_var=API_KEY_ENV[ProviderKind.GEMINI],
        default_model=DEFAULT_MODELS[ProviderKind.GEMINI],
        model_prefixes=("gemini-", "gemma-"),
        example_models=("gemini-1.5-pro", "gemini-2.0-flash", "gemini-2.5-flash"),
    ),
    ProviderKind.CUSTOM: ProviderBackend(
        name="Custom",
        builder=_build_openai,
        env_var=API_KEY_ENV[ProviderKind.CUSTOM],
        default_model=DEFAULT_MODELS[ProviderKind.CUSTOM],
        model_prefixes=None,
        requires_api_key=False,
        example_models=("any model served at baseUrl",),
    ),
}


class LLMFactory:
    """
    Factory class to create LangChain chat models based on provider and model.
    Supports OpenAI, Claude, Gemini and Custom (OpenAI-compatible) endpoints.
    """

    def __init__(self, backends: Optional[Dict[ProviderKind, ProviderBackend]] = None):
        """Initialize the factory with the provider table (BACKENDS by default)."""
        self.backends = dict(BACKENDS if backends is None else backends)

    def get_backend(self, provider: ProviderKind) -> ProviderBackend:
        if provider not in self.backends:
            raise ValueError(
                f"Provider {provider.value} not supported. Available providers: "
                f"{', '.join(p.value for p in self.backends)}"
            )
        return self.backends[provider]

    def is_servable(self, provider: ProviderKind, model: str) -> bool:
        """Check the static compatibility table for a provider/model pair."""
        if provider not in self.backends or not model or not model.strip():
            return False

        prefixes = self.backends[provider].model_prefixes
        if prefixes is None:
            return True
        return model.strip().lower().startswith(prefixes)

    def create_llm(self, config: Configuration, settings: Optional[ModelSettings] = None):
        """
        Create and return a chat model for the configuration.

        Args:
            config: Resolved configuration
            settings: Per-call tuning (defaults if None)

        Returns:
            A LangChain chat model instance
        """
        backend = self.get_backend(config.provider)
        return backend.builder(config, settings or ModelSettings())

    def get_available_providers(self) -> List[str]:
        """Return a list of available LLM providers"""
        return [provider.value for provider in self.backends]

    def get_available_models(self, provider: ProviderKind) -> List[str]:
        """Return example models for a given provider"""
        return list(self.get_backend(provider).example_models)
