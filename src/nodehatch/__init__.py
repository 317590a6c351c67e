"""
nodehatch - Node.js Project Scaffolder
======================================

A CLI tool that scaffolds Node.js projects with a batteries-included lint,
format and git-hook setup, plus optional React, Next.js, Tailwind, Jest,
TypeScript, Docker, GitHub Actions and VS Code support.

Features
--------
- **Composable features**: Each feature contributes files, scripts and
  dependencies; nodehatch merges them into one package.json
- **Pinned versions**: Every dependency is pinned to an exact version
  resolved from the npm registry
- **Compatibility constraints**: Packages with breaking releases are held
  back to a compatible major version
- **npm or yarn**: Generated scripts and install commands follow your choice

Quick Start
-----------
```bash
# Install nodehatch
pip install nodehatch

# Scaffold into the current directory interactively
nodehatch new

# Or with options
nodehatch new --nextjs --typescript --jest --node 14.15.4
```

Example
-------
>>> from nodehatch import Feature, ScaffoldConfig, create_project
>>> create_project(ScaffoldConfig(features={Feature.JEST}))

Architecture
------------
The package is organized into these main modules:

- ``cli``: Typer-based command line interface
- ``generator``: Whole-run orchestration, install and format
- ``pipeline``: Feature resolution and version negotiation
- ``features``: One resolver per feature
- ``constraints``: Version constraint table
- ``registry``: npm registry queries
- ``merger``: Patch and manifest merging
- ``manifest``: package.json I/O
- ``models``: Pydantic models for configuration

License
-------
MIT License.
"""

# =============================================================================
# Package Metadata
# =============================================================================
__version__ = "0.1.0"
__license__ = "MIT"

# =============================================================================
# Public API Exports
# =============================================================================

from nodehatch.errors import (
    NodehatchError,
    RegistryError,
    ResolverSideEffectFailure,
    UnsatisfiableConstraint,
)
from nodehatch.generator import create_project
from nodehatch.models import Feature, Packager, ScaffoldConfig
from nodehatch.pipeline import ScaffoldPipeline


__all__ = [
    # Configuration models
    "Feature",
    # Errors
    "NodehatchError",
    "Packager",
    "RegistryError",
    "ResolverSideEffectFailure",
    "ScaffoldConfig",
    "ScaffoldPipeline",
    "UnsatisfiableConstraint",
    # Version info
    "__version__",
    # Core functions
    "create_project",
]
