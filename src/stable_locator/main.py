"""
Stable Locator - CLI Entry Point.

Configuration Priority:
    1. CLI arguments (--visible, --verbose)
    2. Environment variables (STABLE_LOCATOR__LOCATOR__PER_FRAME_TIMEOUT_MS, etc.)
    3. Config file (stable-locator.yaml)

Usage:
    stable-locator locate https://example.com --role button --name "Sign in"
    stable-locator find https://example.com --role link --name "Docs"
    stable-locator find-text https://example.com "Welcome back" --match contains
"""

import asyncio
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from stable_locator import __version__
from stable_locator.browsers import PlaywrightBrowser, PlaywrightPageCapability
from stable_locator.config import get_settings, load_config
from stable_locator.config.settings import Settings
from stable_locator.engine import (
    CandidateSelector,
    ElementReference,
    FrameSearchReport,
    LocatorEngine,
    ResolvedElement,
    SearchOutcome,
    TextMatchType,
)
from stable_locator.exceptions import StableLocatorError
from stable_locator.utils.logging import setup_logging_from_settings

# Create the CLI app
app = typer.Typer(
    name="stable-locator",
    help="Resolve elements across iframes and synthesize stable selectors",
    add_completion=False,
)

console = Console()


def _settings(config: Optional[str], visible: bool, verbose: bool) -> Settings:
    """Load settings and apply command line overrides."""
    settings = load_config(config_path=config) if config else get_settings()
    overrides = {}
    if visible:
        overrides["browser"] = {"headless": False}
    if verbose:
        overrides["logging"] = {"level": "DEBUG"}
    if overrides:
        settings = settings.merge_with(overrides)

    setup_logging_from_settings(settings.logging)
    return settings


def _selector_table(resolved: ResolvedElement, selectors: List[CandidateSelector]) -> Table:
    table = Table(
        title=escape(f"Frame: {resolved.frame.path} ({resolved.strategy.value})"),
        show_header=True,
        header_style="bold cyan",
        box=None,
    )
    table.add_column("#", width=3)
    table.add_column("Priority", width=8)
    table.add_column("Kind", style="dim")
    table.add_column("Selector")

    for i, selector in enumerate(selectors, 1):
        table.add_row(str(i), str(selector.priority), selector.kind.value, escape(selector.selector))
    return table


def _report_table(report: FrameSearchReport) -> Table:
    table = Table(title=escape(report.description), show_header=True, header_style="bold cyan", box=None)
    table.add_column("Frame")
    table.add_column("Depth", width=5)
    table.add_column("Found", width=6)
    table.add_column("Count", width=6)

    for result in report.results:
        found = "[green]yes[/green]" if result.found else "[dim]no[/dim]"
        count = "" if result.count is None else str(result.count)
        table.add_row(escape(result.frame), str(result.depth), found, count)
    return table


async def _with_engine(settings: Settings, url: str, action):
    """Open the page, build an engine for it and run ``action(engine)``."""
    async with PlaywrightBrowser(settings.browser) as browser:
        page = await browser.new_page(url)
        capability = PlaywrightPageCapability(
            page,
            frame_timeout_ms=settings.locator.per_frame_timeout_ms,
        )
        return await action(LocatorEngine(capability, settings.locator))


def _run(coro) -> object:
    try:
        return asyncio.run(coro)
    except StableLocatorError as e:
        console.print(f"\n[red]✗ {escape(e.message)}[/red]")
        if e.details:
            for key, value in e.details.items():
                if value:
                    console.print(f"  [dim]{key}:[/dim] {escape(str(value))}")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("[dim]Interrupted[/dim]")
        raise typer.Exit(130)


@app.command()
def locate(
    url: str = typer.Argument(..., help="Page to open"),
    role: Optional[str] = typer.Option(None, "--role", "-r", help="ARIA role of the element"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Accessible name of the element"),
    ref: Optional[str] = typer.Option(None, "--ref", help="Snapshot ref to try first"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to config file"),
    visible: bool = typer.Option(False, "--visible", "-v", help="Run with visible browser"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose output"),
):
    """
    Resolve an element and print its stable selectors.

    Examples:
        stable-locator locate https://example.com --role button --name "Sign in"
        stable-locator locate https://example.com --ref e12 --role textbox --name Email
    """
    if not role and not ref:
        console.print("[red]Error: give --role (with --name) or --ref.[/red]")
        raise typer.Exit(2)

    settings = _settings(config, visible, verbose)
    reference = ElementReference(ref=ref, role=role, accessible_name=name)

    console.print(Panel.fit(
        f"[bold blue]Stable Locator[/bold blue]\n"
        f"[dim]URL:[/dim] {url}\n"
        f"[dim]Element:[/dim] {escape(reference.describe())}",
        border_style="blue",
    ))

    resolved, selectors = _run(_with_engine(
        settings, url, lambda engine: engine.locate_and_synthesize(reference)
    ))

    console.print(_selector_table(resolved, selectors))
    if not resolved.visible:
        console.print("[yellow]Element was found but is not visible[/yellow]")


@app.command()
def find(
    url: str = typer.Argument(..., help="Page to open"),
    role: str = typer.Option(..., "--role", "-r", help="ARIA role of the element"),
    name: str = typer.Option(..., "--name", "-n", help="Accessible name of the element"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to config file"),
    visible: bool = typer.Option(False, "--visible", "-v", help="Run with visible browser"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose output"),
):
    """Check in which frames a visible role + name match exists."""
    settings = _settings(config, visible, verbose)

    report = _run(_with_engine(
        settings, url, lambda engine: engine.find_across_frames(role, name)
    ))

    console.print(_report_table(report))
    console.print(f"Outcome: [bold]{report.outcome.value}[/bold]")
    if report.outcome != SearchOutcome.UNIQUE:
        raise typer.Exit(1)


@app.command("find-text")
def find_text(
    url: str = typer.Argument(..., help="Page to open"),
    text: str = typer.Argument(..., help="Text to look for"),
    match: str = typer.Option("contains", "--match", "-m", help="exact, contains or not-contains"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to config file"),
    visible: bool = typer.Option(False, "--visible", "-v", help="Run with visible browser"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose output"),
):
    """
    Look for text in every frame.

    Returns on the first frame containing the text. With --match not-contains
    the command fails when the text is found.
    """
    try:
        match_type = TextMatchType(match)
    except ValueError:
        console.print(f"[red]Error: unknown match type {match!r}[/red]")
        raise typer.Exit(2)

    settings = _settings(config, visible, verbose)

    report = _run(_with_engine(
        settings, url, lambda engine: engine.search_text_across_frames(text, match_type)
    ))

    console.print(_report_table(report))
    found = bool(report.matches)
    passed = not found if match_type == TextMatchType.NOT_CONTAINS else found
    if passed:
        console.print("[green]✓ Passed[/green]")
    else:
        console.print("[red]✗ Failed[/red]")
        raise typer.Exit(1)


@app.command()
def version():
    """Show version information."""
    console.print(f"[bold]Stable Locator[/bold] v{__version__}")


if __name__ == "__main__":
    app()
