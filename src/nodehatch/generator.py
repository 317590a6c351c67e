"""
nodehatch.generator - Scaffolding Orchestration
===============================================

This module contains the top-level logic for scaffolding a Node project.
It runs the resolution pipeline, writes ``package.json`` and then hands
off to the package manager.

Architecture
------------
The generator follows a pipeline pattern:

    1. Emit template files and collect feature patches
    2. Merge patches and resolve dependency versions
    3. Write package.json (only if step 2 fully succeeded)
    4. Write .gitignore
    5. Install dependencies (npm i / yarn install)
    6. Format the codebase (<packager> run lint --fix)

Steps 5 and 6 are skipped when ``config.no_install`` is set.

Unlike a fresh-directory generator, nodehatch scaffolds *into* an existing
directory: an existing ``package.json`` is read and updated in place.

Usage Example
-------------
>>> from nodehatch.generator import create_project
>>> from nodehatch.models import Feature, ScaffoldConfig
>>>
>>> config = ScaffoldConfig(features={Feature.JEST}, no_install=True)
>>> result = create_project(config)
>>> result.manifest["devDependencies"]["jest"]
'26.6.3'

See Also
--------
- pipeline.py: Feature resolution and version negotiation
- features.py: Per-feature resolvers
- templates/: Jinja2 template files
"""

from __future__ import annotations

import asyncio
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.panel import Panel

from nodehatch.emitter import TemplateEmitter
from nodehatch.errors import CommandError
from nodehatch.manifest import read_manifest, write_manifest
from nodehatch.merger import apply_patch
from nodehatch.models import ResolvedManifestPatch, ScaffoldConfig
from nodehatch.pipeline import ScaffoldPipeline
from nodehatch.registry import NpmRegistryClient, VersionResolver


if TYPE_CHECKING:
    from collections.abc import Sequence

    from nodehatch.models import Feature


# =============================================================================
# Module-Level Configuration
# =============================================================================

# Console for rich output
console = Console()


# =============================================================================
# Result Data Classes
# =============================================================================

@dataclass
class GenerationResult:
    """
    Result of a scaffolding run.

    Attributes
    ----------
    success : bool
        Whether every step completed.

    project_path : Path
        Directory that was scaffolded.

    patch : ResolvedManifestPatch | None
        Resolved scripts and dependency versions.

    manifest : dict[str, Any]
        The package.json contents that were written.

    files_created : list[Path]
        Every file written, package.json included.

    installed : bool
        Whether dependencies were installed and the codebase formatted.

    errors : list[str]
        Errors that occurred (only populated if success=False).
    """

    success: bool
    project_path: Path
    patch: ResolvedManifestPatch | None = None
    manifest: dict[str, Any] = field(default_factory=dict)
    files_created: list[Path] = field(default_factory=list)
    installed: bool = False
    errors: list[str] = field(default_factory=list)


# =============================================================================
# File Writing
# =============================================================================

def write_gitignore(emitter: TemplateEmitter) -> Path:
    """Write the Node .gitignore into the project root."""
    path = emitter.project_dir / ".gitignore"
    path.write_text(emitter.render_string("gitignore.j2"), encoding="utf-8")
    return path


# =============================================================================
# Package Manager Commands
# =============================================================================

def run_command(command: list[str], cwd: Path) -> None:
    """
    Run a package-manager command, streaming its output to the terminal.

    Raises
    ------
    CommandError
        If the command exits non-zero or the executable is missing.
    """
    try:
        completed = subprocess.run(command, cwd=cwd, check=False)
    except FileNotFoundError as e:
        raise CommandError(command, None) from e

    if completed.returncode != 0:
        raise CommandError(command, completed.returncode)


def install_dependencies(config: ScaffoldConfig) -> None:
    """Install dependencies with the configured packager."""
    run_command(config.packager.install_command, config.output_dir)


def format_codebase(config: ScaffoldConfig) -> None:
    """Auto-fix the generated files with the project's own lint script."""
    run_command(config.packager.run_command("lint", "--fix"), config.output_dir)


# =============================================================================
# Main Generation Function
# =============================================================================

async def resolve_project(
    config: ScaffoldConfig,
    emitter: TemplateEmitter,
    registry: VersionResolver | None = None,
    order: Sequence[Feature] | None = None,
) -> ResolvedManifestPatch:
    """Emit feature files and resolve the manifest patch."""
    if registry is None:
        registry = VersionResolver(NpmRegistryClient(), timeout=config.registry_timeout)

    pipeline = ScaffoldPipeline(config, registry)
    return await pipeline.run(emitter, order)


def create_project(
    config: ScaffoldConfig,
    *,
    registry: VersionResolver | None = None,
    order: Sequence[Feature] | None = None,
    verbose: bool = True,
) -> GenerationResult:
    """
    Scaffold a Node project into ``config.output_dir``.

    Parameters
    ----------
    config : ScaffoldConfig
        Complete run configuration.

    registry : VersionResolver | None
        Version source; defaults to ``npm view`` with the configured timeout.

    order : Sequence[Feature] | None
        Order in which enabled features are resolved. Does not affect the
        output, which is always sorted.

    verbose : bool, default=True
        If True, display progress information to the console.

    Returns
    -------
    GenerationResult
        Result object containing the written manifest and created files.

    Raises
    ------
    NodehatchError
        If resolution, version negotiation or a package-manager command
        fails. When resolution fails, package.json is left untouched.

    Notes
    -----
    Files emitted by feature resolvers before a failure are not removed.
    """
    project_dir = config.output_dir
    result = GenerationResult(success=False, project_path=project_dir)

    try:
        if verbose:
            features = ", ".join(f.value for f in config.enabled_features()) or "none"
            console.print()
            console.print(
                Panel(
                    f"[bold blue]Scaffolding into:[/] [green]{project_dir}[/]\n"
                    f"[dim]Node: {config.node_version} | "
                    f"Packager: {config.packager.value} | "
                    f"Features: {features}[/]",
                    title="[bold]nodehatch[/]",
                    border_style="blue",
                )
            )
            console.print()

        project_dir.mkdir(parents=True, exist_ok=True)
        emitter = TemplateEmitter(project_dir, config)

        # Step 1-2: Emit files, merge patches, resolve versions
        if verbose:
            console.print("[bold]📝 Creating files and resolving dependencies...[/]")

        patch = asyncio.run(resolve_project(config, emitter, registry, order))
        result.patch = patch
        result.files_created.extend(emitter.files_created)

        if verbose:
            for path in emitter.files_created:
                console.print(f"  Created {path.relative_to(project_dir)}")
            pinned = len(patch.dependencies) + len(patch.dev_dependencies)
            console.print(f"  [green]✓[/] Resolved {pinned} dependencies")

        # Step 3: Update package.json
        if verbose:
            console.print()
            console.print("[bold]💾 Writing package.json...[/]")

        manifest = apply_patch(
            read_manifest(project_dir),
            patch,
            config,
            default_name=project_dir.resolve().name,
        )
        result.manifest = manifest
        result.files_created.append(write_manifest(project_dir, manifest))

        # Step 4: .gitignore
        result.files_created.append(write_gitignore(emitter))

        # Step 5-6: Install and format
        if config.no_install:
            if verbose:
                console.print("  [yellow]⚠[/] Skipping install and format (--no-install)")
        else:
            if verbose:
                console.print()
                console.print("[bold]📦 Installing dependencies...[/]")
            install_dependencies(config)

            if verbose:
                console.print()
                console.print("[bold]✨ Formatting codebase...[/]")
            format_codebase(config)
            result.installed = True

        result.success = True

        if verbose:
            console.print()
            console.print(
                Panel(
                    f"[bold green]✨ Project scaffolded successfully![/]\n\n"
                    f"[dim]Location:[/] {project_dir}\n\n"
                    f"[bold]Next steps:[/]\n"
                    f"  {' '.join(config.packager.run_command('lint'))}",
                    title="[bold green]Success[/]",
                    border_style="green",
                )
            )

    except Exception as e:
        result.errors.append(str(e))
        if verbose:
            console.print(f"\n[bold red]Error:[/] {e}")
        raise

    return result
