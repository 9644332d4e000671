"""Main CLI entry point - one command, a few config flags."""

import logging
import sys
from typing import List, Optional

import typer

from shaid.core.generator import complete, prepare
from shaid.errors import NoCommandExtractedError, ShaidError
from shaid.ui.output import DiagnosticWriter

logger = logging.getLogger(__name__)

app = typer.Typer(
    add_completion=False,
    help="shaid - turn a natural-language description into one shell command.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _configure_logging(verbose: bool) -> None:
    # Without --verbose, Python's last-resort handler still shows warnings on stderr
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            stream=sys.stderr,
            force=True,
        )


def _handle_config_flags(
    config_path: bool, show_config: bool, init_config: bool, force: bool, list_models: bool
) -> bool:
    """
    Run config-management flags. Returns True if any was handled.

    config_commands (and with it Rich) is imported only when a flag needs it.
    """
    if not (config_path or show_config or init_config or list_models):
        return False

    from shaid.ui import config_commands

    if config_path:
        config_commands.show_config_path()
    if init_config:
        config_commands.init_config(force=force)
    if show_config:
        config_commands.show_config()
    if list_models:
        config_commands.list_models()
    return True


def _fail(ui: DiagnosticWriter, error: ShaidError) -> None:
    ui.error(f"Error ({error.category}): {error}")
    if isinstance(error, NoCommandExtractedError):
        logger.debug("Unusable reply: %r", error.reply)
    raise typer.Exit(error.exit_code)


@app.command()
def generate(
    prompt: Optional[List[str]] = typer.Argument(
        None, help="What the command should do, in plain words."
    ),
    provider: Optional[str] = typer.Option(
        None, "--provider", "-p", help="Provider for this run: OpenAI, Claude, Gemini or Custom."
    ),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Model for this run."),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="Endpoint for this run (required by the Custom provider)."
    ),
    api_key: Optional[str] = typer.Option(
        None, "--api-key", help="API key (overrides config file and environment)."
    ),
    show_prompt: bool = typer.Option(
        False, "--show-prompt", help="Print the assembled prompt to stderr before sending."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Print the assembled prompt and exit without calling a provider."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr."),
    config_path: bool = typer.Option(False, "--config-path", help="Print the config file path."),
    show_config: bool = typer.Option(False, "--show-config", help="Show the resolved configuration."),
    init_config: bool = typer.Option(False, "--init-config", help="Write a default config file."),
    force: bool = typer.Option(False, "--force", help="Allow --init-config to overwrite."),
    list_models: bool = typer.Option(
        False, "--list-models", help="List providers and accepted models."
    ),
) -> None:
    """
    Generate one shell command from a description.

    Example: shaid list all files modified in the last 7 days
    """
    _configure_logging(verbose)
    ui = DiagnosticWriter()

    try:
        if _handle_config_flags(config_path, show_config, init_config, force, list_models):
            return

        user_text = " ".join(prompt or [])
        config, assembled = prepare(
            user_text, api_key=api_key, provider=provider, model=model, base_url=base_url
        )

        if dry_run:
            typer.echo(assembled.text)
            return

        if show_prompt:
            ui.note(assembled.text)

        typer.echo(complete(config, assembled))
    except ShaidError as e:
        _fail(ui, e)
    except KeyboardInterrupt:
        ui.warning("Interrupted by user")
        raise typer.Exit(130)


def run() -> None:
    """Entry point for console script mapping."""
    app()


if __name__ == "__main__":
    run()
