"""Gemini provider implementation.

Factory function for building Gemini models via LangChain.
"""

from langchain_google_genai import ChatGoogleGenerativeAI

from shaid.core.configs import Configuration, ModelSettings


def build_gemini_model(
    config: Configuration, settings: ModelSettings
) -> ChatGoogleGenerativeAI:
    """
    Return a configured Gemini model.

    Note: the Google client has no base URL override, so ``config.base_url``
    is ignored for this provider.
    """
    return ChatGoogleGenerativeAI(
        model=config.model,
        google_api_key=config.api_key,
        temperature=settings.temperature,
        max_output_tokens=settings.max_tokens,
        timeout=settings.timeout,
        max_retries=settings.max_retries,
    )
