"""Folio CLI interface.

Commands:
- render: Render a template to stdout or a file
- check: Report whether a template exists and where it resolves
- init: Write a default folio.yaml

Global options:
- --config: Path to configuration file
- --verbose: Enable verbose output with timestamps
- --quiet: Suppress info messages
- --ci: JSON log output
- --version: Show version and exit
"""

import json
import logging
from pathlib import Path
from typing import Annotated, Any

import typer
import yaml

from folio import __version__
from folio.config import FolioConfig, create_default_config, load_config
from folio.engine import Engine
from folio.errors import FolioError, TemplateNotFoundError
from folio.utils.logging import configure_from_cli, get_logger

app = typer.Typer(
    name="folio",
    help="Render native Python templates with sections and layouts",
    add_completion=False,
    no_args_is_help=True,
)

# Global state
_config: FolioConfig | None = None
_logger = get_logger()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"folio {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output with timestamps"),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress info messages (warnings and errors only)"),
    ] = False,
    ci: Annotated[
        bool,
        typer.Option("--ci", help="Enable CI mode with JSON output"),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """Folio - native Python templates with sections and layouts."""
    global _config

    configure_from_cli(verbose=verbose, quiet=quiet, ci=ci)

    try:
        _config = load_config(config_path=config)
        if _config.config_path:
            _logger.debug(f"Loaded config from: {_config.config_path}")
    except FileNotFoundError as e:
        _logger.error(str(e))
        raise typer.Exit(1)
    except Exception as e:
        _logger.error(f"Failed to load config: {e}")
        raise typer.Exit(1)


def _build_engine(directory: Path | None) -> Engine:
    config = _config or FolioConfig()
    if directory is not None:
        config.directory = str(directory)
    try:
        return Engine.from_config(config)
    except FolioError as e:
        _logger.error(str(e))
        raise typer.Exit(1)


def _parse_data(pairs: list[str], data_file: Path | None) -> dict[str, Any]:
    data: dict[str, Any] = {}

    if data_file is not None:
        loaded = yaml.safe_load(data_file.read_text(encoding="utf-8")) or {}
        if not isinstance(loaded, dict):
            raise typer.BadParameter("Data file must contain a mapping", param_hint="--data-file")
        data.update(loaded)

    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected key=value, got '{pair}'", param_hint="--data")
        # YAML scalars: "3" -> 3, "true" -> True, anything else stays a string
        data[key] = yaml.safe_load(value) if value else ""

    return data


# =============================================================================
# render command
# =============================================================================


@app.command()
def render(
    name: Annotated[str, typer.Argument(help="Template name, e.g. 'profile' or 'emails::welcome'")],
    data: Annotated[
        list[str] | None,
        typer.Option("--data", "-d", help="Template data as key=value (repeatable)"),
    ] = None,
    data_file: Annotated[
        Path | None,
        typer.Option("--data-file", help="YAML file with template data", exists=True, dir_okay=False),
    ] = None,
    layout: Annotated[
        str | None,
        typer.Option("--layout", "-l", help="Layout to wrap the template in"),
    ] = None,
    directory: Annotated[
        Path | None,
        typer.Option("--directory", help="Template directory (overrides config)", exists=True, file_okay=False),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write output to this file instead of stdout"),
    ] = None,
) -> None:
    """Render a template.

    Exit codes:
        0: Rendered successfully
        1: Template not found or rendering failed
    """
    engine = _build_engine(directory)
    template_data = _parse_data(data or [], data_file)

    try:
        content = engine.render(name, template_data, layout_name=layout)
    except TemplateNotFoundError as e:
        _logger.error(str(e))
        raise typer.Exit(1)
    except Exception as e:
        _logger.error(f"Rendering {name} failed: {type(e).__name__}: {e}")
        raise typer.Exit(1)

    if output is None:
        typer.echo(content, nl=False)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(content, encoding="utf-8")
    _logger.structured(
        logging.INFO,
        f"Wrote {name} to {output}",
        template=name,
        output=str(output),
        characters=len(content),
    )


# =============================================================================
# check command
# =============================================================================


@app.command()
def check(
    name: Annotated[str, typer.Argument(help="Template name")],
    directory: Annotated[
        Path | None,
        typer.Option("--directory", help="Template directory (overrides config)", exists=True, file_okay=False),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output result as JSON"),
    ] = False,
) -> None:
    """Check whether a template exists.

    Exit codes:
        0: Template found
        1: Template missing or name invalid
    """
    engine = _build_engine(directory)

    try:
        template = engine.make(name)
        found = template.exists()
        path = template.path()
    except FolioError as e:
        _logger.error(str(e))
        raise typer.Exit(1)

    if json_output:
        typer.echo(json.dumps({"name": name, "exists": found, "path": path}, indent=2))
    elif found:
        typer.echo(f"✅ {name} -> {path}")
    else:
        typer.echo(f"❌ {name} not found (expected at {path})")

    if not found:
        raise typer.Exit(1)


# =============================================================================
# init command
# =============================================================================


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing folio.yaml"),
    ] = False,
) -> None:
    """Write a default folio.yaml in the current directory."""
    config_file = Path.cwd() / "folio.yaml"

    if config_file.exists() and not force:
        _logger.error(f"{config_file} already exists (use --force to overwrite)")
        raise typer.Exit(1)

    config_file.write_text(create_default_config(), encoding="utf-8")
    typer.echo(f"Created {config_file}")


if __name__ == "__main__":
    app()
