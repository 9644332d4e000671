"""
Configuration Commands

Show, locate and initialise the shaid config file, and list the
provider/model compatibility table.
This module is lazy-loaded only when config flags are used;
Rich is isolated here to keep the generation path light.
"""

from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table

from shaid.core.configs import ProviderKind, create_default, default_config_path, resolve
from shaid.llmfactory import LLMFactory

console = Console()


def show_config_path(path: Optional[Path] = None) -> None:
    """Print the config file location."""
    console.print(str(path or default_config_path()), soft_wrap=True)


def show_config(path: Optional[Path] = None) -> None:
    """Display the resolved configuration with the API key masked."""
    path = path or default_config_path()
    config = resolve(path=path)

    table = Table(title="shaid configuration", show_header=False)
    table.add_column("Setting", style="bold")
    table.add_column("Value")

    table.add_row("Config file", str(path))
    table.add_row("Provider", config.provider.value)
    table.add_row("Model", config.model)
    table.add_row("Base URL", config.base_url or "[dim](default)[/dim]")
    table.add_row(
        "API key",
        f"{config.masked_api_key()} [dim]({config.api_key_source})[/dim]"
        if config.api_key
        else "[red]not set[/red]",
    )

    console.print(table)


def init_config(path: Optional[Path] = None, force: bool = False) -> bool:
    """
    Write a default config file.

    Returns:
        True if written, False if a file exists and ``force`` is not set.

    Raises:
        ConfigUnwritableError: If the file cannot be written.
    """
    path = path or default_config_path()
    if path.exists() and not force:
        console.print(
            f"[yellow]Config already exists at {path}. Use --force to overwrite.[/yellow]"
        )
        return False

    create_default(path)
    console.print(f"[green]Default config written to {path}[/green]")
    console.print("Set your API key in the file or via the provider's environment variable.")
    return True


def list_models(factory: Optional[LLMFactory] = None) -> None:
    """Print the provider/model compatibility table."""
    factory = factory or LLMFactory()

    table = Table(title="Providers and models")
    table.add_column("Provider", style="bold")
    table.add_column("Accepted models")
    table.add_column("Examples")
    table.add_column("API key variable")

    for name in factory.get_available_providers():
        provider = ProviderKind.parse(name)
        backend = factory.get_backend(provider)
        accepted = (
            ", ".join(f"{prefix}*" for prefix in backend.model_prefixes)
            if backend.model_prefixes
            else "any (requires baseUrl)"
        )
        table.add_row(
            backend.name,
            accepted,
            "\n".join(factory.get_available_models(provider)),
            backend.env_var,
        )

    console.print(table)
