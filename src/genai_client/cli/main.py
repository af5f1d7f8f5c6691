from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from genai_client.api.client import Client
from genai_client.api.errors import GenAIError
from genai_client.api.types import GenerateContentConfig
from genai_client.config.loader import load_settings
from genai_client.config.settings import Settings

console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


def _create_client(settings: Settings) -> Client:
    """Create a client for the loaded settings."""
    return Client.from_settings(settings)


async def _load() -> Settings:
    return await load_settings(project_dir=Path.cwd(), user_dir=Path.home())


async def run_generate(
    prompt: str,
    model: str | None = None,
    system_instruction: str | None = None,
    stream: bool = False,
    temperature: float | None = None,
    verbose: bool = False,
) -> int:
    """Run the generate command.  Returns the process exit code."""
    try:
        settings = await _load()
    except ValueError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        return 1
    _configure_logging(verbose or settings.verbose)

    config = GenerateContentConfig(temperature=temperature)
    model_id = model or settings.models.default

    try:
        async with _create_client(settings) as client:
            if stream:
                async with client.generate_content_stream(
                    model_id, prompt, config, system_instruction,
                ) as chunks:
                    async for chunk in chunks:
                        print(chunk.text, end="", flush=True)
                print()
            else:
                response = await client.generate_content(
                    model_id, prompt, config, system_instruction,
                )
                print(response.text)
    except GenAIError as e:
        err_console.print(f"[red]{escape(e.format())}[/red]")
        return 1
    return 0


async def run_show_config() -> int:
    """Print the effective settings.  Returns the process exit code."""
    try:
        settings = await _load()
    except ValueError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        return 1

    table = Table(title="Settings")
    table.add_column("Key", style="cyan")
    table.add_column("Value")

    for section, values in settings.model_dump().items():
        if isinstance(values, dict):
            for key, value in values.items():
                table.add_row(f"{section}.{key}", str(value))
        else:
            table.add_row(section, str(values))

    console.print(table)
    return 0


def main() -> None:
    """CLI entry point."""
    from genai_client.cli.args import cli
    cli()


if __name__ == "__main__":
    main()
