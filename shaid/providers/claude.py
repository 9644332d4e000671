"""Claude provider implementation via LangChain's Anthropic integration."""

from langchain_anthropic import ChatAnthropic

from shaid.core.configs import Configuration, ModelSettings


def build_claude_model(config: Configuration, settings: ModelSettings) -> ChatAnthropic:
    """Return a configured ChatAnthropic model."""
    kwargs = {}
    if config.base_url:
        kwargs["base_url"] = config.base_url

    return ChatAnthropic(
        model=config.model,
        api_key=config.api_key,
        temperature=settings.temperature,
        max_tokens=settings.max_tokens,
        timeout=settings.timeout,
        max_retries=settings.max_retries,
        **kwargs,
    )
