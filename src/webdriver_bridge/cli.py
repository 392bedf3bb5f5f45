"""Command line interface for webdriver-bridge."""

from __future__ import annotations

import json
import logging
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from pathlib import Path
from typing import Annotated, List, Optional

import typer

from .capabilities.chrome import ChromeOptions, chrome_options
from .config import load_config
from .errors import WebDriverError
from .events import ConsoleEventSink
from .factory import build_capabilities, open_session
from .models import Dialect
from .wire.requests import GetTitle, NavigateTo, Status
from .wire.transport import WireTransport

app = typer.Typer(help="Drive WebDriver endpoints over the W3C or legacy wire protocol")


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Configure logging before executing any command."""

    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@app.command()
def version() -> None:
    """Print the package version."""

    try:
        typer.echo(get_version("webdriver-bridge"))
    except PackageNotFoundError:  # pragma: no cover - when running from source tree
        typer.echo("0.0.0")


@app.command()
def status(
    endpoint: Annotated[str, typer.Option("--endpoint", "-e", help="Driver base URL.")],
    dialect: Annotated[
        Dialect,
        typer.Option("--dialect", help="Wire dialect spoken by the driver."),
    ],
    timeout: Annotated[float, typer.Option("--timeout", help="Request timeout in seconds.")] = 5.0,
) -> None:
    """Query a driver's status endpoint."""

    with WireTransport(endpoint, dialect, timeout=timeout) as transport:
        try:
            info = transport.send(Status())
        except WebDriverError as exc:
            typer.echo(f"Driver at {endpoint} is not available: {exc}", err=True)
            raise typer.Exit(code=1)
    typer.echo(json.dumps(info.model_dump(exclude_none=True), indent=2))


@app.command()
def capabilities(
    preset: Annotated[
        str,
        typer.Option("--preset", help="Capability preset: standard, headless or none."),
    ] = "standard",
    arg: Annotated[
        Optional[List[str]],
        typer.Option("--arg", help="Extra Chrome argument (repeatable)."),
    ] = None,
) -> None:
    """Print the encoded capability document."""

    try:
        document = build_capabilities(preset)
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2)
    if arg:
        options = chrome_options(document) or ChromeOptions()
        for item in arg:
            options.add_argument(item)
        document.set_extension(ChromeOptions.vendor_key, options)
    typer.echo(json.dumps(document.to_wire(), indent=2))


@app.command()
def run(
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to YAML configuration."),
    ] = None,
    env_file: Annotated[
        Optional[Path],
        typer.Option("--env-file", help="Path to an .env file with default configuration values."),
    ] = None,
    executable: Annotated[
        Optional[Path],
        typer.Option("--executable", help="Driver executable to spawn."),
    ] = None,
    port: Annotated[Optional[int], typer.Option("--port", help="Driver port.")] = None,
    dialect: Annotated[
        Optional[Dialect],
        typer.Option("--dialect", help="Wire dialect spoken by the driver."),
    ] = None,
    endpoint: Annotated[
        Optional[str],
        typer.Option("--endpoint", help="Attach to a running driver at this URL."),
    ] = None,
    preset: Annotated[
        Optional[str],
        typer.Option("--preset", help="Capability preset: standard, headless or none."),
    ] = None,
    url: Annotated[
        Optional[str],
        typer.Option("--url", help="Navigate to this URL and print the page title."),
    ] = None,
    events: Annotated[
        bool,
        typer.Option("--events/--no-events", help="Print driver events to stderr."),
    ] = False,
) -> None:
    """Open a session, optionally visit a page, then close it."""

    config = load_config(
        config_path,
        env_file=env_file,
        driver={"executable": executable, "port": port},
        transport={"dialect": dialect.value if dialect else None, "endpoint": endpoint},
        preset=preset,
    )
    sink = ConsoleEventSink() if events else None

    try:
        session = open_session(config, events=sink)
    except WebDriverError as exc:
        typer.echo(f"Failed to open session: {exc}", err=True)
        raise typer.Exit(code=1)

    with session:
        typer.echo(f"Session {session.session_id} ({session.dialect.value})")
        if url:
            try:
                session.send(NavigateTo(url=url))
                title = session.send(GetTitle())
            except WebDriverError as exc:
                typer.echo(f"Navigation failed: {exc}", err=True)
                raise typer.Exit(code=1)
            typer.echo(f"Title: {title}")


if __name__ == "__main__":
    app()
