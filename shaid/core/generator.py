"""Generation pipeline: resolve + collect -> assemble -> dispatch.

Configuration resolution and context collection have no data dependency,
so they run side by side; both finish before assembly starts.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping, Optional, Tuple

from shaid.context.system import collect
from shaid.core.configs import Configuration, resolve
from shaid.errors import EmptyRequestError, GenerationError, ShaidError
from shaid.prompts.assembler import Prompt, assemble, normalize_whitespace
from shaid.providers.dispatcher import dispatch

logger = logging.getLogger(__name__)

Dispatcher = Callable[[Configuration, Prompt], str]


@dataclass(frozen=True)
class Generation:
    command: str
    prompt: Prompt
    config: Configuration


def prepare(
    user_text: str,
    path: Optional[Path] = None,
    api_key: Optional[str] = None,
    provider: Optional[str] = None,
    model: Optional[str] = None,
    base_url: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    cwd: Optional[str] = None,
) -> Tuple[Configuration, Prompt]:
    """
    Resolve configuration and collect context concurrently, then assemble.

    Raises:
        EmptyRequestError: If the description is empty after normalisation.
        GenerationError: Wrapping any ConfigError.
    """
    if not normalize_whitespace(user_text):
        raise EmptyRequestError("Describe the command you want, e.g. shaid list files by size")

    with ThreadPoolExecutor(max_workers=2, thread_name_prefix="shaid") as pool:
        config_future = pool.submit(
            resolve,
            path=path,
            environ=environ,
            api_key=api_key,
            provider=provider,
            model=model,
            base_url=base_url,
        )
        context_future = pool.submit(collect, cwd)

        try:
            config = config_future.result()
        except ShaidError as e:
            raise GenerationError.wrap(e) from e
        context = context_future.result()

    return config, assemble(user_text, context)


def complete(
    config: Configuration, prompt: Prompt, dispatcher: Optional[Dispatcher] = None
) -> str:
    """
    Dispatch an assembled prompt and return the command.

    Raises:
        GenerationError: Wrapping any config or dispatch failure.
    """
    dispatcher = dispatcher or dispatch
    try:
        command = dispatcher(config, prompt)
    except ShaidError as e:
        raise GenerationError.wrap(e) from e

    logger.debug("Generated command: %s", command)
    return command


def generate_command(
    user_text: str,
    path: Optional[Path] = None,
    api_key: Optional[str] = None,
    provider: Optional[str] = None,
    model: Optional[str] = None,
    base_url: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    cwd: Optional[str] = None,
    dispatcher: Optional[Dispatcher] = None,
) -> Generation:
    """
    Run the full pipeline for one natural-language description.

    Returns:
        Generation with the command, the prompt that produced it and the config

    Raises:
        GenerationError: For every failure; ``category``/``exit_code``
            reflect the underlying config or dispatch error.
    """
    config, prompt = prepare(
        user_text,
        path=path,
        api_key=api_key,
        provider=provider,
        model=model,
        base_url=base_url,
        environ=environ,
        cwd=cwd,
    )
    command = complete(config, prompt, dispatcher=dispatcher)
    return Generation(command=command, prompt=prompt, config=config)
