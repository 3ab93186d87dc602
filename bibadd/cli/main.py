"""Main CLI entry point and application setup."""

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import click
from click.exceptions import Exit
from rich.console import Console
from rich.markup import escape

from bibadd import __version__
from bibadd.api.client import DEFAULT_USER_AGENT, Client, HttpClient
from bibadd.cli.commands import add, entry
from bibadd.cli.config import load_config
from bibadd.cli.interact import user_resolve_collection
from bibadd.core.bibtex import BibtexFormat
from bibadd.core.collection import Collection, CollectionResolver
from bibadd.storage.files import FormatFile, open_or_create
from bibadd.storage.sources import read_collection, write_collection

logger = logging.getLogger(__name__)


@dataclass
class Context:
    """CLI context that holds shared resources.

    The bibliography file is opened on first use so that help and version
    output never touch the file system.
    """

    console: Console
    config: dict[str, Any] = field(default_factory=dict)
    file: Path | None = None
    interact: bool = False
    debug: bool = False
    _client: Client | None = None
    _format_file: FormatFile | None = None
    _collection: Collection | None = None

    @property
    def client(self) -> Client:
        if self._client is None:
            http = self.config.get("http") or {}
            self._client = HttpClient(
                timeout=float(http.get("timeout") or 10.0),
                user_agent=http.get("user_agent") or DEFAULT_USER_AGENT,
            )
        return self._client

    @property
    def collection(self) -> Collection:
        """The bibliography, resolved before any command works on it."""
        if self._collection is None:
            self._format_file = open_or_create(self.file, BibtexFormat)
            result = read_collection(self._format_file, BibtexFormat)
            if isinstance(result, CollectionResolver):
                if not self.interact:
                    raise click.ClickException(str(result))
                result = user_resolve_collection(result, self.console)
            self._collection = result
        return self._collection

    def save(self) -> bool:
        """Write the bibliography back if it changed."""
        if self._collection is None or self._format_file is None:
            return False
        if not self._collection.dirty():
            return False
        logger.debug("Updating the bibliography file %s", self._format_file.path)
        write_collection(self._format_file, self._collection, BibtexFormat)
        return True

    def close(self) -> None:
        """Release the HTTP client if one was built."""
        if isinstance(self._client, HttpClient):
            self._client.close()
        self._client = None


def setup_logging(
    verbose: bool = False, quiet: bool = False, debug: bool = False
) -> None:
    """Configure logging based on CLI flags."""
    if quiet:
        level = logging.WARNING
    elif verbose or debug:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s"
        if not debug
        else "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_console(no_color: bool = False, width: int | None = None) -> Console:
    """Create Rich console with appropriate settings."""
    return Console(
        no_color=no_color,
        width=width or 120,
        highlight=not no_color,
        color_system=None if no_color else "auto",
    )


class BibaddGroup(click.Group):
    """Custom group that handles KeyboardInterrupt and reports errors."""

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except KeyboardInterrupt:
            console = getattr(ctx.obj, "console", None) if ctx.obj else None
            if console:
                console.print("[yellow]Interrupted[/yellow]")
            ctx.exit(130)
        except (click.ClickException, click.Abort, Exit, SystemExit):
            # Let Click exceptions and exits propagate with their exit codes
            raise
        except Exception as e:
            debug = getattr(ctx.obj, "debug", False) if ctx.obj else False
            if debug:
                raise
            console = getattr(ctx.obj, "console", None) if ctx.obj else None
            if console:
                console.print(f"[red]Error:[/red] {escape(str(e))}")
            else:
                click.echo(f"Error: {e}", err=True)
            ctx.exit(1)


@click.group(cls=BibaddGroup)
@click.option(
    "--file",
    "-f",
    "file_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="The bibliography file to work on",
)
@click.option(
    "--interact",
    "-i",
    is_flag=True,
    help="Prompt for missing fields and selections",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-error output")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option("--debug", is_flag=True, help="Enable debug mode with full tracebacks")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.version_option(
    version=__version__, prog_name="bibadd", message="bibadd version %(version)s"
)
@click.pass_context
def cli(
    ctx: click.Context,
    file_path: Path | None,
    interact: bool,
    verbose: bool,
    quiet: bool,
    no_color: bool,
    debug: bool,
    config: Path | None,
) -> None:
    """Search and add bibliographic entries to a BibTeX file.

    Entries missing required fields can be completed interactively with
    -i / --interact.
    """
    setup_logging(verbose=verbose, quiet=quiet, debug=debug)

    try:
        config_data = load_config(config)
    except ValueError as e:
        if debug:
            raise
        click.echo(f"Error loading config file: {e}", err=True)
        ctx.exit(1)

    interact = interact or bool(config_data.get("interact"))
    # Quiet mode cannot prompt
    if quiet and interact:
        interact = False
    if interact:
        logger.debug("Interact mode enabled")

    if file_path is None and config_data.get("file"):
        file_path = Path(config_data["file"])

    ctx.obj = Context(
        console=create_console(no_color=no_color),
        config=config_data,
        file=file_path,
        interact=interact,
        debug=debug,
    )
    ctx.call_on_close(ctx.obj.close)


@cli.result_callback()
@click.pass_context
def finish(ctx: click.Context, message: str | None, **kwargs: Any) -> None:
    """Write back a changed bibliography and print the command's message."""
    ctx.obj.save()
    if message:
        ctx.obj.console.print(message, markup=False, highlight=False)


cli.add_command(add.add)
cli.add_command(entry.check)
cli.add_command(entry.derive)
cli.add_command(entry.new)
cli.add_command(entry.rm)


def main() -> None:
    """Main entry point for the CLI application."""
    try:
        cli()
    except KeyboardInterrupt:
        sys.exit(130)
    except Exception as e:
        if "--debug" in sys.argv:
            raise
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
