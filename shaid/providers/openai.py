"""OpenAI provider implementation.

Factory function for building OpenAI chat models via LangChain.
Also serves the Custom provider: any OpenAI-compatible endpoint
reachable at ``base_url``.
"""

from langchain_openai import ChatOpenAI

from shaid.core.configs import Configuration, ModelSettings

# The OpenAI client refuses to start without a key; local
# OpenAI-compatible servers usually ignore it.
PLACEHOLDER_API_KEY = "not-needed"


def build_openai_model(config: Configuration, settings: ModelSettings) -> ChatOpenAI:
    """Return a configured ChatOpenAI model."""
    kwargs = {}
    if config.base_url:
        kwargs["base_url"] = config.base_url

    return ChatOpenAI(
        model=config.model,
        api_key=config.api_key or PLACEHOLDER_API_KEY,
        temperature=settings.temperature,
        max_tokens=settings.max_tokens,
        timeout=settings.timeout,
        max_retries=settings.max_retries,
        **kwargs,
    )
