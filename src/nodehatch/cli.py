"""
nodehatch.cli - Command Line Interface
======================================

This module provides the command-line interface for nodehatch using Typer.

Architecture
------------
The CLI is structured around Typer's app pattern:

    app (main entry point)
    ├── new          - Scaffold a project into a directory
    └── check-exact  - Verify every dependency is pinned exactly

``new`` is interactive (questionary prompts) when no feature flag is given,
and fully scriptable otherwise. ``--yes`` skips all prompts.

Usage Examples
--------------
Interactive mode:
    $ nodehatch new

Non-interactive mode:
    $ nodehatch new --nextjs --typescript --jest --npm --yes

From a config file:
    $ nodehatch new --config nodehatch.toml

See Also
--------
- generator.py: Scaffolding orchestration
- models.py: Configuration data models
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

import questionary
import typer
from rich import print as rprint
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from nodehatch import __version__
from nodehatch.errors import NodehatchError
from nodehatch.generator import create_project
from nodehatch.manifest import MANIFEST_NAME, find_unlocked_dependencies, read_manifest
from nodehatch.models import FALLBACK_NODE_VERSION, Feature, Packager, ScaffoldConfig


# =============================================================================
# CLI Application Setup
# =============================================================================

app = typer.Typer(
    name="nodehatch",
    help="Scaffold Node.js projects with pinned, compatible dependencies.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=True,
)

# Console for rich output
console = Console()


# =============================================================================
# Version Callback
# =============================================================================

def version_callback(value: bool) -> None:
    """Display version information and exit."""
    if value:
        console.print(Panel(
            f"[bold green]nodehatch[/] version [cyan]{__version__}[/]\n\n"
            f"[dim]Node.js project scaffolder[/]",
            border_style="green",
        ))
        raise typer.Exit()


# =============================================================================
# Interactive Prompts
# =============================================================================

def prompt_features() -> set[Feature]:
    """
    Interactively prompt for optional features.

    Returns
    -------
    set[Feature]
        The selected features.
    """
    result = questionary.checkbox(
        "Include optional features:",
        choices=[
            questionary.Choice(title=feature.description, value=feature)
            for feature in Feature
        ],
    ).ask()

    if result is None:
        raise typer.Abort()

    return set(result)


def prompt_packager() -> Packager:
    """Interactively prompt for the package manager."""
    result = questionary.select(
        "Package manager?",
        choices=[questionary.Choice(title=p.value, value=p) for p in Packager],
        default=Packager.YARN,
    ).ask()

    if result is None:
        raise typer.Abort()

    return result


def prompt_node_version() -> str:
    """Prompt for the Node version (X.Y.Z)."""
    result = questionary.text(
        "Node version:",
        default=FALLBACK_NODE_VERSION,
    ).ask()

    if result is None:
        raise typer.Abort()

    return result


def prompt_legacy_browsers() -> bool:
    """Ask whether IE11 must keep working (affects the Tailwind version)."""
    result = questionary.confirm(
        "Keep IE11 support? (Tailwind CSS v1)",
        default=True,
    ).ask()

    if result is None:
        raise typer.Abort()

    return result


# =============================================================================
# Main Application Callback
# =============================================================================

@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """
    [bold]nodehatch[/] - Node.js project scaffolder.

    [bold]Quick Start:[/]

        nodehatch new

    [bold]Non-interactive:[/]

        nodehatch new --react --jest --yes
    """


# =============================================================================
# New Command - Scaffold a Project
# =============================================================================

@app.command()
def new(
    # Features
    react: Annotated[bool, typer.Option("--react", help="Add React")] = False,
    nextjs: Annotated[
        bool, typer.Option("--nextjs", help="Add Next.js (implies --react)")
    ] = False,
    tailwind: Annotated[bool, typer.Option("--tailwind", help="Add Tailwind CSS")] = False,
    docker: Annotated[bool, typer.Option("--docker", help="Add Docker configuration")] = False,
    jest: Annotated[bool, typer.Option("--jest", help="Add Jest")] = False,
    typescript: Annotated[
        bool, typer.Option("--typescript", help="Add TypeScript")
    ] = False,
    github_ci: Annotated[
        bool, typer.Option("--github-ci", help="Add GitHub Actions workflow")
    ] = False,
    vscode: Annotated[bool, typer.Option("--vscode", help="Add VS Code settings")] = False,
    # Meta options
    node: Annotated[
        str | None,
        typer.Option("--node", help=f"Node version, X.Y.Z (default: {FALLBACK_NODE_VERSION})"),
    ] = None,
    npm: Annotated[
        bool, typer.Option("--npm", help="Use npm instead of yarn")
    ] = False,
    drop_ie11: Annotated[
        bool, typer.Option("--drop-ie11", help="Drop IE11 support (allows Tailwind CSS v2+)")
    ] = False,
    no_install: Annotated[
        bool,
        typer.Option("--no-install", help="Don't install dependencies or format the codebase"),
    ] = False,
    config_file: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Load options from a TOML file; flags override it",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    output_dir: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Directory to scaffold into (default: current directory)",
        ),
    ] = None,
    # Testing only
    ci_environment: Annotated[
        bool,
        typer.Option("--dangerously-enable-ci-environment", hidden=True),
    ] = False,
    ci_branch: Annotated[
        str | None,
        typer.Option("--dangerously-set-github-ci-branch", hidden=True),
    ] = None,
    # Interactive mode control
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip all prompts, use defaults"),
    ] = False,
    interactive: Annotated[
        bool,
        typer.Option("--interactive", "-i", help="Force interactive mode even with options"),
    ] = False,
) -> None:
    """
    Scaffold a Node.js project.

    Emits config files for the selected features, writes pinned
    dependencies into [cyan]package.json[/], installs them and formats
    the codebase.

    [bold]Examples:[/]

        # Interactive mode
        nodehatch new

        # Next.js + TypeScript with npm
        nodehatch new --nextjs --typescript --npm

        # Generate files only
        nodehatch new --jest --no-install --yes
    """
    flags = {
        Feature.REACT: react,
        Feature.NEXTJS: nextjs,
        Feature.TAILWIND: tailwind,
        Feature.DOCKER: docker,
        Feature.JEST: jest,
        Feature.TYPESCRIPT: typescript,
        Feature.GITHUB_CI: github_ci,
        Feature.VSCODE: vscode,
    }
    selected = {feature for feature, enabled in flags.items() if enabled}

    should_prompt = interactive or (not yes and not selected and config_file is None)

    overrides: dict[str, Any] = {}

    if selected:
        overrides["features"] = selected
    elif should_prompt:
        overrides["features"] = prompt_features()

    if npm:
        overrides["packager"] = Packager.NPM
    elif should_prompt:
        overrides["packager"] = prompt_packager()

    if node:
        overrides["node_version"] = node
    elif should_prompt:
        overrides["node_version"] = prompt_node_version()

    if drop_ie11:
        overrides["legacy_browser_support"] = False
    elif should_prompt and Feature.TAILWIND in overrides.get("features", set()):
        overrides["legacy_browser_support"] = prompt_legacy_browsers()

    if no_install:
        overrides["no_install"] = True
    if ci_environment:
        overrides["ci_mode"] = True
    if ci_branch:
        overrides["ci_branch"] = ci_branch
    if output_dir is not None:
        overrides["output_dir"] = output_dir

    # Build the configuration
    try:
        if config_file is not None:
            config = ScaffoldConfig.from_toml(config_file, **overrides)
        else:
            config = ScaffoldConfig(**overrides)
    except ValueError as e:
        rprint(f"[red]Error:[/] {e}")
        raise typer.Exit(1)

    # Show configuration summary if in interactive mode
    if should_prompt:
        console.print()
        table = Table(title="Project Configuration", show_header=False)
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="green")

        table.add_row("Directory", str(config.output_dir))
        table.add_row("Node", config.node_version)
        table.add_row("Packager", config.packager.value)
        table.add_row("IE11 support", "yes" if config.legacy_browser_support else "no")
        table.add_row(
            "Features",
            ", ".join(f.value for f in config.enabled_features()) or "none",
        )

        console.print(table)
        console.print()

        if not questionary.confirm("Scaffold project with these settings?", default=True).ask():
            raise typer.Abort()

    # Scaffold; create_project reports its own errors
    try:
        create_project(config, verbose=True)
    except (NodehatchError, OSError, ValueError):
        raise typer.Exit(1)


# =============================================================================
# Check-Exact Command
# =============================================================================

@app.command("check-exact")
def check_exact(
    path: Annotated[
        Path,
        typer.Argument(
            help="Project directory containing package.json",
            exists=True,
            file_okay=False,
            dir_okay=True,
        ),
    ] = Path("."),
) -> None:
    """
    Check that every dependency is pinned to an exact version.

    Fails when any entry in dependencies, devDependencies,
    peerDependencies or optionalDependencies uses a range.

    [bold]Example:[/]

        nodehatch check-exact ./myproject
    """
    if not (path / MANIFEST_NAME).exists():
        rprint(f"[red]Error:[/] No {MANIFEST_NAME} found at {path}")
        raise typer.Exit(1)

    try:
        manifest = read_manifest(path)
    except ValueError as e:
        rprint(f"[red]Error:[/] {e}")
        raise typer.Exit(1)

    unlocked = find_unlocked_dependencies(manifest)

    if not unlocked:
        console.print("[green]✓[/] All dependencies are pinned exactly")
        return

    table = Table(title="Unlocked Dependencies", show_header=True)
    table.add_column("Package", style="cyan")
    table.add_column("Version", style="red")
    for name, version in unlocked:
        table.add_row(name, str(version))

    console.print("[red]All dependencies must be installed with the --exact flag.[/]")
    console.print(table)
    raise typer.Exit(1)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    app()
