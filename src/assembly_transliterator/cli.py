"""
CLI for assembly-transliterator.

Provides commands for transliterating assemblies and creating a config file.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from assembly_transliterator.config import Settings, create_default_config, load_config
from assembly_transliterator.errors import TransliterationError
from assembly_transliterator.languages import TargetLanguage, parse_languages
from assembly_transliterator.logging import configure_logging
from assembly_transliterator.transliterate import TransliterateOptions, transliterate_assembly

app = typer.Typer(
    name="transliterate-assembly",
    help="Transliterate documentation examples of assemblies into other languages.",
    add_completion=False,
)

console = Console()


def _display_config(
    settings: Settings,
    config_path: Path | None,
    languages: list[TargetLanguage],
    options: TransliterateOptions,
) -> None:
    """Display the configuration being used."""
    config_source = str(config_path) if config_path else "default (transliterate.yaml or built-in)"

    config_table = Table(show_header=False, box=None, padding=(0, 2))
    config_table.add_column("Key", style="cyan")
    config_table.add_column("Value", style="green")

    config_table.add_row("Config file", config_source)
    config_table.add_row("Assembly file", settings.transliteration.assembly_file_name)
    config_table.add_row("Languages", ", ".join(lang.value for lang in languages))
    config_table.add_row("Loose", str(options.loose))
    config_table.add_row("Strict", str(options.strict))
    config_table.add_row("Tablet", str(options.tablet) if options.tablet else "[dim]none[/dim]")

    console.print(
        Panel(config_table, title="[bold blue]transliterate-assembly[/bold blue]", border_style="blue")
    )


def get_settings(config_path: Path | None = None) -> Settings:
    """Load settings from config file or defaults."""
    if config_path and config_path.exists():
        return load_config(config_path)
    return load_config()


@app.command()
def transliterate(
    directories: list[Path] = typer.Argument(
        None, help="Directories containing assemblies (defaults to current directory)"
    ),
    language: list[str] = typer.Option(
        None, "--language", "-l", help="Target language (repeatable; defaults to all)"
    ),
    loose: bool = typer.Option(
        False, "--loose", help="Ignore missing fixtures instead of failing"
    ),
    strict: bool = typer.Option(
        False, "--strict", help="Fail if any example failed compilation"
    ),
    tablet: Path | None = typer.Option(None, "--tablet", "-t", help="Pre-built translation tablet"),
    config: Path | None = typer.Option(None, "--config", "-c", help="Config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Write a transliterated copy of each assembly for each target language."""
    settings = get_settings(config)
    configure_logging(settings.logging, verbose=verbose)

    run_config = settings.transliteration
    try:
        languages = parse_languages(language or [lang.value for lang in run_config.languages])
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None

    options = TransliterateOptions(
        loose=loose or run_config.loose,
        strict=strict or run_config.strict,
        tablet=tablet or run_config.tablet,
    )
    targets = directories or [Path.cwd()]

    _display_config(settings, config, languages, options)

    try:
        written = asyncio.run(
            transliterate_assembly(
                targets,
                languages,
                options,
                console=console,
                assembly_file_name=run_config.assembly_file_name,
            )
        )
    except TransliterationError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None

    console.print(f"\n[green]Transliterated {len(written)} assembly copies[/green]")


@app.command("init-config")
def init_config(
    path: Path = typer.Argument(Path("transliterate.yaml"), help="Where to write the config"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
) -> None:
    """Create a default configuration file."""
    if path.exists() and not force:
        console.print(f"[yellow]{path} already exists (use --force to overwrite)[/yellow]")
        raise typer.Exit(1)
    create_default_config(path)
    console.print(f"[green]Created {path}[/green]")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
