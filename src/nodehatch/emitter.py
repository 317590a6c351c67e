"""
nodehatch.emitter - Template Rendering and File Emission
========================================================

Feature resolvers don't touch the filesystem directly; they go through a
``TemplateEmitter`` bound to the project directory. The emitter renders
Jinja2 templates from ``nodehatch/templates`` and writes them off the event
loop with ``asyncio.to_thread`` so resolvers can be gathered concurrently.

Template Context
----------------
Every template receives:

    - config: The ScaffoldConfig snapshot
    - Feature: The Feature enum, for ``config.uses(Feature.X)`` checks
    - toolkit_package: Name of the companion npm package
    - nodehatch_version: Version of nodehatch for attribution
    - year: Current year

plus any keyword arguments passed to ``render``.
"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from pathlib import Path

from jinja2 import Environment, PackageLoader, select_autoescape

from nodehatch import __version__
from nodehatch.models import TOOLKIT_PACKAGE, Feature, ScaffoldConfig


# =============================================================================
# Template Engine Setup
# =============================================================================

def create_jinja_env() -> Environment:
    """
    Create and configure the Jinja2 template environment.

    Autoescaping is disabled because we generate JavaScript, JSON and YAML,
    not HTML.
    """
    return Environment(
        loader=PackageLoader("nodehatch", "templates"),
        autoescape=select_autoescape([]),  # Disable for code generation
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


# =============================================================================
# Emitter
# =============================================================================

class TemplateEmitter:
    """
    Writes rendered templates into a project directory.

    Parameters
    ----------
    project_dir : Path
        Root of the project being scaffolded.

    config : ScaffoldConfig
        Configuration snapshot exposed to templates.

    env : Environment | None
        Jinja2 environment; a default one is created when omitted.

    Attributes
    ----------
    files_created : list[Path]
        Absolute paths of every file written so far, in write order.
    """

    def __init__(
        self,
        project_dir: Path,
        config: ScaffoldConfig,
        env: Environment | None = None,
    ) -> None:
        self.project_dir = project_dir
        self.config = config
        self.env = env or create_jinja_env()
        self.files_created: list[Path] = []

    def context(self, **extra: object) -> dict[str, object]:
        return {
            "config": self.config,
            "Feature": Feature,
            "toolkit_package": TOOLKIT_PACKAGE,
            "nodehatch_version": __version__,
            "year": datetime.now(UTC).year,
            **extra,
        }

    def render_string(self, template_name: str, **extra: object) -> str:
        """
        Render a template without writing it.

        Raises
        ------
        jinja2.TemplateNotFound
            If the template file doesn't exist.
        """
        template = self.env.get_template(template_name)
        return template.render(**self.context(**extra))

    async def write(self, relative_path: str | Path, content: str) -> Path:
        """Write ``content`` to ``relative_path``, creating parent directories."""
        full_path = self.project_dir / relative_path
        await asyncio.to_thread(_write_text, full_path, content)
        self.files_created.append(full_path)
        return full_path

    async def render(
        self,
        template_name: str,
        relative_path: str | Path,
        **extra: object,
    ) -> Path:
        """Render ``template_name`` and write it to ``relative_path``."""
        content = self.render_string(template_name, **extra)
        return await self.write(relative_path, content)

    async def reexport(self, module: str, relative_path: str | Path) -> Path:
        """Write a CommonJS stub re-exporting ``<toolkit>/<module>``."""
        return await self.render("reexport.js.j2", relative_path, module=module)


def _write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
