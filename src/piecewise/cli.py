"""Piecewise CLI

Usage:
    piecewise compile page             # print generated Python for page.pwp
    piecewise compile page -o page.py  # write it to a file
    piecewise render page -d data.yaml # render page.pwp with YAML/JSON data
    piecewise check page nav footer    # report syntax errors
    piecewise -r site/templates ...    # use another template directory
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, List, NoReturn, Optional

import typer
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from piecewise._version import __version__
from piecewise.compiler import Compiler
from piecewise.config import PiecewiseConfig, find_config_file
from piecewise.exceptions import PiecewiseError, TemplateSyntaxError
from piecewise.loader import DirectoryLoader
from piecewise.template import Template

log = logging.getLogger(__name__)

console = Console(stderr=True)

typer_app = typer.Typer(
    help="Compile {{ }} templates into Python render functions.",
    no_args_is_help=True,
)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the piecewise package.

    Log levels:
    - Normal: only warnings/errors
    - Verbose (-v): INFO
    - Debug (PIECEWISE_DEBUG=1): DEBUG, including every template loaded
      and every recursive template extracted
    """
    debug = bool(os.environ.get("PIECEWISE_DEBUG"))
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=console,
        show_time=verbose,
        show_path=debug,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("piecewise")
    logger.setLevel(level)
    logger.handlers = [handler]
    logger.propagate = False


def fail(error: Exception) -> NoReturn:
    console.print(f"[red]Error:[/red] {escape(str(error))}", highlight=False)
    raise typer.Exit(code=1)


def get_config(ctx: typer.Context) -> PiecewiseConfig:
    return ctx.obj


def write_output(text: str, output: Optional[Path]) -> None:
    if output is None:
        typer.echo(text, nl=False)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    log.info("Wrote %s", output)


def load_data(path: Optional[Path]) -> Any:
    """Read render data from a YAML or JSON file."""
    if path is None:
        return {}
    if not path.exists():
        raise PiecewiseError(f"Data file not found: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise PiecewiseError(f"Invalid data file {path}: {e}") from e
    return {} if data is None else data


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"piecewise {__version__}")
        raise typer.Exit()


@typer_app.callback()
def main(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(
        None, "-c", "--config", help="Path to piecewise.yaml."
    ),
    root: Optional[Path] = typer.Option(
        None, "-r", "--root", help="Template directory (overrides config)."
    ),
    extension: Optional[str] = typer.Option(
        None, "-e", "--ext", help="Template file suffix (overrides config)."
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose output."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Compile {{ }} templates into Python render functions."""
    setup_logging(verbose)

    try:
        config = PiecewiseConfig.load(config_path or find_config_file())
        overrides: dict[str, Any] = {}
        if root is not None:
            overrides["root"] = root
        if extension is not None:
            overrides["extension"] = extension
        if overrides:
            config = PiecewiseConfig(**{**config.model_dump(), **overrides})
    except (PiecewiseError, ValueError) as e:
        fail(e)

    log.debug("Using templates from %s (*%s)", config.root, config.extension)
    ctx.obj = config


@typer_app.command("compile")
def compile_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Template name (without suffix)."),
    output: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Write generated source to a file."
    ),
) -> None:
    """Print the Python source generated for a template."""
    config = get_config(ctx)
    loader = DirectoryLoader.from_config(config)

    try:
        code = Compiler(loader, lexer=loader.lexer).compile(name, config.data_variable)
    except PiecewiseError as e:
        fail(e)

    write_output(code, output)


@typer_app.command("render")
def render_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Template name (without suffix)."),
    data_file: Optional[Path] = typer.Option(
        None, "-d", "--data", help="YAML or JSON file with the render data."
    ),
    output: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Write rendered text to a file."
    ),
) -> None:
    """Render a template with data from a file."""
    config = get_config(ctx)
    loader = DirectoryLoader.from_config(config)

    try:
        data = load_data(data_file)
        template: Template = loader.get_template(
            name, data_variable=config.data_variable
        )
        text = template.render(data)
    except PiecewiseError as e:
        fail(e)

    write_output(text, output)


@typer_app.command("check")
def check_command(
    ctx: typer.Context,
    names: List[str] = typer.Argument(..., help="Template names to check."),
) -> None:
    """Compile templates and report every syntax error found."""
    config = get_config(ctx)
    loader = DirectoryLoader.from_config(config)
    compiler = Compiler(loader, lexer=loader.lexer)

    table = Table(title="Template errors")
    table.add_column("Template", style="cyan")
    table.add_column("Line", justify="right")
    table.add_column("Column", justify="right")
    table.add_column("Message")

    failed = 0
    for name in names:
        try:
            compiler.compile(name, config.data_variable)
        except TemplateSyntaxError as e:
            failed += 1
            for error in e.errors:
                table.add_row(
                    e.name or name,
                    str(error.line),
                    str(error.column),
                    escape(error.message),
                )
        except PiecewiseError as e:
            failed += 1
            table.add_row(name, "-", "-", escape(str(e)))
        else:
            console.print(f"[green]OK[/green] {name}")

    if failed:
        console.print(table)
        raise typer.Exit(code=1)


def app() -> None:
    """Entry point for the `piecewise` console script."""
    typer_app()


if __name__ == "__main__":
    app()
