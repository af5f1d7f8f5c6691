from __future__ import annotations

import asyncio

import click

from genai_client import __version__


@click.group()
@click.version_option(version=__version__, prog_name="genai")
def cli() -> None:
    """genai — Generative Language API client."""


@cli.command()
@click.argument("prompt")
@click.option("--model", "-m", help="Model to use (defaults to settings).")
@click.option("--system", "-s", "system_instruction", help="System instruction.")
@click.option("--stream", is_flag=True, help="Stream the response as it arrives.")
@click.option("--temperature", type=float, default=None, help="Sampling temperature.")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output.")
def generate(
    prompt: str,
    model: str | None = None,
    system_instruction: str | None = None,
    stream: bool = False,
    temperature: float | None = None,
    verbose: bool = False,
) -> None:
    """Generate a response for PROMPT."""
    from genai_client.cli.main import run_generate

    code = asyncio.run(run_generate(
        prompt=prompt,
        model=model,
        system_instruction=system_instruction,
        stream=stream,
        temperature=temperature,
        verbose=verbose,
    ))
    if code:
        raise SystemExit(code)


@cli.command()
def config() -> None:
    """Show the effective settings."""
    from genai_client.cli.main import run_show_config
    code = asyncio.run(run_show_config())
    if code:
        raise SystemExit(code)
