"""Exception hierarchy for shaid.

Every error carries a ``category`` (used in diagnostics) and an
``exit_code`` (used by the CLI). Context gathering has no error type:
it degrades silently instead.
"""

from typing import Optional


class ShaidError(Exception):
    """Base exception for shaid failures."""

    category = "error"
    exit_code = 1


# ----------------------------------------------------------------------------
# Configuration
# ----------------------------------------------------------------------------

class ConfigError(ShaidError):
    """Configuration could not be loaded, written or validated."""

    category = "config"
    exit_code = 3


class ConfigMalformedError(ConfigError):
    """The config file exists but is not the expected JSON document."""


class ConfigUnwritableError(ConfigError):
    """A default config file could not be persisted."""


class ConfigInvalidError(ConfigError):
    """The configuration parsed but its values cannot be used."""


# ----------------------------------------------------------------------------
# Dispatch
# ----------------------------------------------------------------------------

class DispatchError(ShaidError):
    """The provider could not be reached or refused the request."""

    category = "dispatch"
    exit_code = 1


class AuthError(DispatchError):
    """API key absent or rejected by the provider."""

    category = "auth"
    exit_code = 4


class NetworkError(DispatchError):
    """Transport-level failure talking to the provider."""

    category = "network"
    exit_code = 5


class UnavailableError(DispatchError):
    """The provider/model pairing cannot be served."""

    category = "unavailable"
    exit_code = 6


# ----------------------------------------------------------------------------
# Generation
# ----------------------------------------------------------------------------

class GenerationError(ShaidError):
    """
    Top-level failure of a generation run.

    Wraps a ConfigError or DispatchError as ``cause`` and reports the
    cause's category and exit code, so callers only need to catch this.
    """

    def __init__(self, message: str, cause: Optional[ShaidError] = None):
        super().__init__(message)
        self.cause = cause

    @property
    def category(self) -> str:
        if self.cause is not None:
            return self.cause.category
        return "generation"

    @property
    def exit_code(self) -> int:
        if self.cause is not None:
            return self.cause.exit_code
        return 1

    @classmethod
    def wrap(cls, error: ShaidError) -> "GenerationError":
        if isinstance(error, GenerationError):
            return error
        return cls(str(error), cause=error)


class NoCommandExtractedError(GenerationError):
    """The provider answered, but no command line could be isolated."""

    def __init__(self, reply: str):
        super().__init__(
            "The provider answered, but no usable command could be extracted from its reply."
        )
        self.reply = reply

    category = "no_command"
    exit_code = 7


class EmptyRequestError(GenerationError):
    """The natural-language description was empty."""

    category = "usage"
    exit_code = 2
