"""Configuration management for shaid.

Loads user settings from the platform config directory
(e.g. ~/.config/shaid/config.json on Linux). Provides Configuration
(provider selection) and ModelSettings (per-call tuning).
"""

import json
import logging
import os
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import typer
from dotenv import dotenv_values

from shaid.errors import (
    ConfigInvalidError,
    ConfigMalformedError,
    ConfigUnwritableError,
)

logger = logging.getLogger(__name__)

APP_NAME = "shaid"
CONFIG_FILENAME = "config.json"
CONFIG_PATH_ENV = "SHAID_CONFIG"
TIMEOUT_ENV = "SHAID_TIMEOUT_S"


class ProviderKind(str, Enum):
    OPENAI = "OpenAI"
    CLAUDE = "Claude"
    GEMINI = "Gemini"
    CUSTOM = "Custom"

    @classmethod
    def parse(cls, value: str) -> "ProviderKind":
        """Parse a provider name, ignoring case."""
        wanted = (value or "").strip().lower()
        for kind in cls:
            if kind.value.lower() == wanted:
                return kind
        supported = ", ".join(kind.value for kind in cls)
        raise ValueError(f"Unknown provider '{value}'. Supported: {supported}.")


# One environment variable per provider kind
API_KEY_ENV = {
    ProviderKind.OPENAI: "OPENAI_API_KEY",
    ProviderKind.CUSTOM: "OPENAI_API_KEY",
    ProviderKind.CLAUDE: "ANTHROPIC_API_KEY",
    ProviderKind.GEMINI: "GOOGLE_API_KEY",
}

DEFAULT_MODELS = {
    ProviderKind.OPENAI: "gpt-4o",
    ProviderKind.CUSTOM: "gpt-4o",
    ProviderKind.CLAUDE: "claude-3-5-sonnet-20241022",
    ProviderKind.GEMINI: "gemini-1.5-pro",
}

DEFAULT_PROVIDER = ProviderKind.OPENAI


@dataclass(frozen=True)
class Configuration:
    provider: ProviderKind = DEFAULT_PROVIDER
    model: str = DEFAULT_MODELS[DEFAULT_PROVIDER]
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    api_key_source: Optional[str] = field(default=None, compare=False)

    def validate(self) -> None:
        """
        Check that the values can be used for dispatch.

        The API key is not checked here: a missing key is reported by the
        dispatcher as an authentication failure.

        Raises:
            ConfigInvalidError: If the model, base URL or provider settings are unusable.
        """
        if not self.model or not self.model.strip():
            raise ConfigInvalidError("Model name cannot be empty")

        if self.base_url and not self.base_url.startswith(("http://", "https://")):
            raise ConfigInvalidError("Base URL must start with http:// or https://")

        if self.provider is ProviderKind.CUSTOM and not self.base_url:
            raise ConfigInvalidError("The Custom provider requires a baseUrl")

    def masked_api_key(self) -> str:
        """Return the API key with everything but the last four characters hidden."""
        if not self.api_key:
            return ""
        if len(self.api_key) <= 4:
            return "*" * len(self.api_key)
        return "*" * 8 + self.api_key[-4:]


@dataclass
class ModelSettings:
    temperature: float = 0.0
    max_tokens: int = 1024
    timeout: int = 30
    max_retries: int = 2


def get_model_settings(environ: Optional[Mapping[str, str]] = None) -> ModelSettings:
    """Build ModelSettings, honouring the SHAID_TIMEOUT_S override."""
    environ = os.environ if environ is None else environ
    settings = ModelSettings()

    timeout_env = environ.get(TIMEOUT_ENV)
    if timeout_env is not None and str(timeout_env).strip() != "":
        try:
            timeout = int(float(timeout_env))
        except (ValueError, OverflowError):
            timeout = 0
        if timeout > 0:
            settings.timeout = timeout
        else:
            logger.warning("Ignoring invalid %s=%r", TIMEOUT_ENV, timeout_env)

    return settings


def default_config_path(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Return the platform-conventional config file path."""
    environ = os.environ if environ is None else environ
    override = environ.get(CONFIG_PATH_ENV)
    if override:
        return Path(override).expanduser()
    return Path(typer.get_app_dir(APP_NAME)) / CONFIG_FILENAME


def dump_config(config: Configuration) -> str:
    """Serialise a configuration in the on-disk JSON format."""
    document = {
        "type": config.provider.value,
        "apiKey": config.api_key or "",
        "model": config.model,
        "baseUrl": config.base_url,
    }
    return json.dumps(document, indent=2) + "\n"


def load_file(path: Path) -> Dict[str, Any]:
    """
    Read and parse the config file.

    A zero-byte or whitespace-only file is treated as an empty object.

    Raises:
        ConfigMalformedError: If the file cannot be read or is not a JSON object.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigMalformedError(f"Failed to read config file {path}: {e}") from e

    if not content.strip():
        return {}

    try:
        document = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigMalformedError(
            f"Failed to parse config file {path}: {e}. Please ensure it is valid JSON."
        ) from e

    if not isinstance(document, dict):
        raise ConfigMalformedError(
            f"Config file {path} must contain a JSON object, got {type(document).__name__}"
        )

    return document


def _optional_str(document: Dict[str, Any], key: str, path: Path) -> Optional[str]:
    value = document.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigMalformedError(
            f"Config file {path}: '{key}' must be a string, got {type(value).__name__}"
        )
    return value.strip() or None


def parse_config(document: Dict[str, Any], path: Path) -> Configuration:
    """Convert a parsed JSON document into a Configuration (no key resolution)."""
    raw_type = document.get("type", DEFAULT_PROVIDER.value)
    if not isinstance(raw_type, str):
        raise ConfigMalformedError(f"Config file {path}: 'type' must be a string")
    try:
        provider = ProviderKind.parse(raw_type)
    except ValueError as e:
        raise ConfigMalformedError(f"Config file {path}: {e}") from e

    model = _optional_str(document, "model", path) or DEFAULT_MODELS[provider]
    api_key = _optional_str(document, "apiKey", path)
    base_url = _optional_str(document, "baseUrl", path)

    return Configuration(
        provider=provider,
        model=model,
        api_key=api_key,
        base_url=base_url,
        api_key_source="file" if api_key else None,
    )


def create_default(path: Path) -> Configuration:
    """
    Write the default configuration (empty API key) to ``path``.

    Raises:
        ConfigUnwritableError: If the directory or file cannot be written.
    """
    config = Configuration()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dump_config(config), encoding="utf-8")
    except OSError as e:
        raise ConfigUnwritableError(
            f"Failed to create config file {path}: {e}. Please check your permissions."
        ) from e

    logger.info("Created default config at %s", path)
    return config


def _lookup_env_key(
    provider: ProviderKind, environ: Mapping[str, str], config_dir: Path
):
    """Return (api_key, source) from the environment, then from a .env beside the config."""
    name = API_KEY_ENV[provider]

    value = (environ.get(name) or "").strip()
    if value:
        return value, "environment"

    env_file = config_dir / ".env"
    if env_file.is_file():
        try:
            dotenv_value = (dotenv_values(env_file).get(name) or "").strip()
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Could not read %s: %s", env_file, e)
            dotenv_value = ""
        if dotenv_value:
            return dotenv_value, "dotenv"

    return None, None


def resolve(
    path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
    api_key: Optional[str] = None,
    provider: Optional[str] = None,
    model: Optional[str] = None,
    base_url: Optional[str] = None,
) -> Configuration:
    """
    Load the configuration, creating a default file when none exists.

    API key precedence: explicit ``api_key`` argument, non-empty file value,
    the provider's environment variable, then a ``.env`` file next to the
    config file. ``provider``, ``model`` and ``base_url`` override the file
    for this run only.

    Args:
        path: Config file path (platform default if None)
        environ: Environment mapping (os.environ if None)
        api_key: Explicit API key
        provider: Provider override
        model: Model override
        base_url: Endpoint override

    Returns:
        The resolved, immutable Configuration

    Raises:
        ConfigMalformedError: If an existing file cannot be parsed.
        ConfigInvalidError: If the provider override is unknown.
    """
    environ = os.environ if environ is None else environ
    path = default_config_path(environ) if path is None else Path(path)

    if path.exists():
        logger.debug("Loading config from %s", path)
        config = parse_config(load_file(path), path)
    else:
        try:
            config = create_default(path)
        except ConfigUnwritableError as e:
            # A key can still come from the environment, so keep going
            logger.warning("%s Using built-in defaults.", e)
            config = Configuration()

    if provider:
        try:
            kind = ProviderKind.parse(provider)
        except ValueError as e:
            raise ConfigInvalidError(str(e)) from e
        if kind is not config.provider:
            # Stored key, model and endpoint belong to the stored provider
            config = Configuration(provider=kind, model=DEFAULT_MODELS[kind])

    if model:
        config = replace(config, model=model.strip())

    if base_url and base_url.strip():
        config = replace(config, base_url=base_url.strip())

    if api_key and api_key.strip():
        config = replace(config, api_key=api_key.strip(), api_key_source="argument")
    elif not config.api_key:
        env_key, source = _lookup_env_key(config.provider, environ, path.parent)
        config = replace(config, api_key=env_key, api_key_source=source)

    logger.debug(
        "Resolved provider=%s model=%s key_source=%s",
        config.provider.value,
        config.model,
        config.api_key_source or "none",
    )
    return config
