"""CLI commands using Typer."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.logging import RichHandler

from pathkit import __version__, context
from pathkit.console import ConsoleOutput
from pathkit.errors import PathkitError
from pathkit.path import Path

app = typer.Typer(
    name="pathkit",
    help="Path utilities with buffered file transfers",
    no_args_is_help=True,
)

output = ConsoleOutput()

BufferSizeOption = Annotated[
    int | None,
    typer.Option("--buffer-size", "-b", help="Transfer buffer size in bytes"),
]


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        output.console.print(f"pathkit v{__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Send pathkit debug logging to the terminal when verbose."""
    if not verbose:
        return
    package_logger = logging.getLogger("pathkit")
    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        package_logger.addHandler(RichHandler(console=output.console, show_path=False))
    package_logger.setLevel(logging.DEBUG)


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log transfers as they happen")
    ] = False,
) -> None:
    """Path utilities with buffered file transfers."""
    configure_logging(verbose)


def _fail(message: str, error: Exception) -> typer.Exit:
    output.show_error(f"{message}: {error}")
    return typer.Exit(1)


@app.command("copy")
def copy(
    source: Annotated[str, typer.Argument(help="File to copy")],
    destination: Annotated[str, typer.Argument(help="Destination file or directory")],
    buffer_size: BufferSizeOption = None,
    into_directory: Annotated[
        bool,
        typer.Option("--into-directory", "-d", help="Treat DESTINATION as a directory"),
    ] = False,
) -> None:
    """Copy a file through a fixed-size buffer."""
    try:
        if into_directory:
            result = Path(source).copy_to_directory(destination, buffer_size)
            target, copied = result.destination, result.copied
        else:
            target = Path(destination)
            copied = Path(source).copy_to_file(target, buffer_size)
    except (PathkitError, OSError, ValidationError) as e:
        raise _fail("Copy failed", e) from e

    output.show_success(f"Copied {copied} bytes to {target}")


@app.command("append")
def append(
    file: Annotated[str, typer.Argument(help="File to append to")],
    text: Annotated[str, typer.Argument(help="Text to append")],
    buffer_size: BufferSizeOption = None,
) -> None:
    """Append text to a file, creating it if needed."""
    try:
        appended = Path(file).append_file(text, buffer_size)
    except (PathkitError, OSError, ValidationError) as e:
        raise _fail("Append failed", e) from e

    output.show_success(f"Appended {appended} bytes to {file}")


@app.command("cat")
def cat(
    file: Annotated[str, typer.Argument(help="File to print")],
    buffer_size: BufferSizeOption = None,
) -> None:
    """Print a file's contents."""
    path = Path(file)
    try:
        # buffered reads create missing files; refuse instead
        if not path.is_exist():
            output.show_error(f"File not found: {file}")
            raise typer.Exit(1)
        data = path.buffered_read_file(buffer_size)
    except (PathkitError, OSError, ValidationError) as e:
        raise _fail("Read failed", e) from e

    output.show_text(data.decode("utf-8", errors="replace"))


@app.command("ls")
def ls(
    directory: Annotated[str, typer.Argument(help="Directory to search")] = ".",
    patterns: Annotated[
        list[str] | None,
        typer.Option("--pattern", "-p", help="Glob pattern elements joined onto DIRECTORY"),
    ] = None,
) -> None:
    """List paths one level below the subdirectories of DIRECTORY, or glob patterns."""
    path = Path(directory)
    try:
        found = path.glob(*patterns) if patterns else path.list()
    except (PathkitError, OSError) as e:
        raise _fail("Listing failed", e) from e

    output.show_paths(found, title=str(path))


@app.command("rel")
def rel(
    base: Annotated[str, typer.Argument(help="Starting path")],
    target: Annotated[str, typer.Argument(help="Path to reach")],
) -> None:
    """Print the relative path from BASE to TARGET."""
    try:
        relative = Path(base).rel(target)
    except PathkitError as e:
        raise _fail("No relative path", e) from e

    output.show_text(f"{relative}\n")


def _describe(lookup: Callable[[], Path]) -> str | None:
    try:
        return str(lookup())
    except (PathkitError, OSError):
        return None


@app.command("env")
def env(
    _lookups=None,
) -> None:
    """Show the working directory, executable and per-user directories."""
    lookups = _lookups or {
        "Working directory": context.current_working_directory,
        "Executable": context.current_executable_path,
        "Temporary": context.temp_dir,
        "Home": context.user_home_dir,
        "Cache": context.user_cache_dir,
        "Config": context.user_config_dir,
    }
    output.show_locations({name: _describe(lookup) for name, lookup in lookups.items()})
