"""Provider dispatch: send one prompt, get one command back.

Retries, timeouts and connection handling belong to the LangChain client.
Every failure here is terminal for the invocation: there is no
cross-provider fallback.
"""

import logging
import re
from typing import Iterator, Optional

from langchain_core.messages import HumanMessage, SystemMessage

from shaid.core.configs import Configuration, ModelSettings, get_model_settings
from shaid.core.response_parser import extract_command
from shaid.errors import (
    AuthError,
    DispatchError,
    NetworkError,
    NoCommandExtractedError,
    UnavailableError,
)
from shaid.llmfactory import LLMFactory
from shaid.prompts.assembler import Prompt

logger = logging.getLogger(__name__)

_AUTH_NAMES = {
    "AuthenticationError",
    "PermissionDeniedError",
    "Unauthenticated",
    "PermissionDenied",
    "Unauthorized",
}
_UNAVAILABLE_NAMES = {
    "NotFoundError",
    "NotFound",
    "RateLimitError",
    "ResourceExhausted",
    "TooManyRequests",
    "ServiceUnavailable",
    "OverloadedError",
}
_NETWORK_NAMES = {
    "APIConnectionError",
    "APITimeoutError",
    "ConnectError",
    "ConnectTimeout",
    "ReadTimeout",
    "ReadError",
    "WriteError",
    "TimeoutException",
    "TransportError",
    "NetworkError",
    "RemoteProtocolError",
    "DeadlineExceeded",
    "RetryError",
}
_UNAVAILABLE_STATUS = {404, 429, 503, 529}

_AUTH_MESSAGE = re.compile(
    r"api[ _-]?key|unauthori[sz]ed|unauthenticated|permission[ _]denied|authenticat",
    re.IGNORECASE,
)
_MODEL_MESSAGE = re.compile(
    r"model.*(not found|not supported|does not exist|is not available)",
    re.IGNORECASE,
)


def _error_chain(exc: BaseException) -> Iterator[BaseException]:
    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def _status_code(exc: BaseException) -> Optional[int]:
    for candidate in (
        getattr(exc, "status_code", None),
        getattr(getattr(exc, "response", None), "status_code", None),
        getattr(exc, "code", None),
    ):
        if isinstance(candidate, int) and 100 <= candidate < 600:
            return candidate
    return None


def classify_provider_error(exc: BaseException) -> DispatchError:
    """
    Map a vendor SDK exception onto the dispatch error taxonomy.

    Looks at HTTP status codes, exception class names (whole MRO, whole
    cause chain) and finally the message text.
    """
    message = str(exc) or type(exc).__name__

    for err in _error_chain(exc):
        status = _status_code(err)
        if status in (401, 403):
            return AuthError(f"Authentication failed: {message}")
        if status in _UNAVAILABLE_STATUS:
            return UnavailableError(f"Provider cannot serve this request ({status}): {message}")
        if status is not None and status >= 500:
            return NetworkError(f"Provider server error ({status}): {message}")

        names = {cls.__name__ for cls in type(err).__mro__}
        if names & _AUTH_NAMES:
            return AuthError(f"Authentication failed: {message}")
        if names & _UNAVAILABLE_NAMES:
            return UnavailableError(f"Provider cannot serve this request: {message}")
        if names & _NETWORK_NAMES or isinstance(err, (ConnectionError, TimeoutError, OSError)):
            return NetworkError(f"Could not reach provider: {message}")

    if _AUTH_MESSAGE.search(message):
        return AuthError(f"Authentication failed: {message}")
    if _MODEL_MESSAGE.search(message):
        return UnavailableError(f"Model not available: {message}")

    return UnavailableError(f"Provider request failed: {message}")


def reply_text(reply) -> str:
    """Flatten a chat model reply (AIMessage, str, or content blocks) to text."""
    content = getattr(reply, "content", reply)

    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, dict):
                if part.get("type", "text") == "text":
                    parts.append(str(part.get("text", "")))
            else:
                parts.append(str(part))
        return "\n".join(parts).strip()

    return ("" if content is None else str(content)).strip()


def send(
    config: Configuration,
    prompt: Prompt,
    factory: Optional[LLMFactory] = None,
    settings: Optional[ModelSettings] = None,
) -> str:
    """
    Send the prompt to the configured provider and return the raw reply text.

    Raises:
        ConfigInvalidError: If the configuration values are unusable.
        UnavailableError: If the provider/model pairing is not servable.
        AuthError: If no API key is available or the provider rejects it.
        NetworkError: On transport failures.
    """
    factory = factory or LLMFactory()
    settings = settings or get_model_settings()

    config.validate()

    backend = factory.get_backend(config.provider)
    if not factory.is_servable(config.provider, config.model):
        raise UnavailableError(
            f"Model '{config.model}' is not served by provider {config.provider.value}"
        )

    if backend.requires_api_key and not config.api_key:
        raise AuthError(
            f"API key not found. Add it to your config file or set {backend.env_var}."
        )

    logger.debug("Dispatching to %s (%s)", backend.name, config.model)
    try:
        llm = factory.create_llm(config, settings)
        reply = llm.invoke(
            [SystemMessage(content=prompt.system), HumanMessage(content=prompt.request)]
        )
    except DispatchError:
        raise
    except Exception as e:
        error = classify_provider_error(e)
        logger.debug("Provider call failed (%s): %r", error.category, e)
        raise error from e

    text = reply_text(reply)
    logger.debug("Provider replied with %d characters", len(text))
    return text


def dispatch(
    config: Configuration,
    prompt: Prompt,
    factory: Optional[LLMFactory] = None,
    settings: Optional[ModelSettings] = None,
) -> str:
    """
    Send the prompt and return exactly one command line.

    Raises:
        DispatchError: See send().
        NoCommandExtractedError: If the reply holds no usable command line.
    """
    text = send(config, prompt, factory=factory, settings=settings)
    command = extract_command(text)
    if command is None:
        raise NoCommandExtractedError(text)
    return command
