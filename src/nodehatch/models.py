"""
nodehatch.models - Pydantic Models for Scaffolding Configuration
================================================================

This module defines the data models used throughout nodehatch. We use Pydantic
for several key benefits:

1. **Validation**: Automatic validation of user input with clear error messages
2. **Immutability**: Frozen models guarantee the config snapshot and feature
   patches are never mutated once created, only merged
3. **Serialization**: Easy loading from TOML files and dumping to JSON

Architecture Notes
------------------
The models are organized like this:

    ScaffoldConfig (configuration snapshot, threaded through everything)
    ├── features: frozenset[Feature]
    ├── node_version: str
    ├── packager: Packager (enum)
    └── flags (legacy_browser_support, ci_mode, no_install, ...)

    FeatureConfig (one patch per enabled feature, pre-resolution)
    ResolvedManifestPatch (merged and version-pinned, post-resolution)

Usage Example
-------------
>>> from nodehatch.models import Feature, ScaffoldConfig
>>> config = ScaffoldConfig(features={Feature.NEXTJS}, node_version="14.15.4")
>>> config.uses(Feature.REACT)
True
>>> config.node_version_major
'14'
"""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# Constants
# =============================================================================

FALLBACK_NODE_VERSION = "12.20.1"

# Companion npm package that generated config stubs re-export from.
TOOLKIT_PACKAGE = "@nodehatch/toolkit"

_NODE_VERSION_PATTERN = re.compile(r"^(\d+)\.(\d+)\.(\d+)$")


# =============================================================================
# Enumerations
# =============================================================================

class Feature(str, Enum):
    """
    Optional, user-selectable units of scaffolding.

    Each member has exactly one resolver in ``nodehatch.features``; the
    resolver table is checked for completeness when that module is imported.

    Attributes
    ----------
    REACT : str
        React with a few starter components and React lint rules.

    TAILWIND : str
        Tailwind CSS with its build script.

    DOCKER : str
        Dockerfile and .dockerignore pinned to the selected Node version.

    JEST : str
        Jest test runner and its lint plugin.

    TYPESCRIPT : str
        TypeScript compiler, typings and tsconfig files.

    GITHUB_CI : str
        GitHub Actions workflow.

    VSCODE : str
        VS Code workspace settings.

    NEXTJS : str
        Next.js pages and config. Implies REACT.
    """

    REACT = "react"
    TAILWIND = "tailwind"
    DOCKER = "docker"
    JEST = "jest"
    TYPESCRIPT = "typescript"
    GITHUB_CI = "github-ci"
    VSCODE = "vscode"
    NEXTJS = "nextjs"

    @property
    def description(self) -> str:
        """Human-readable description for CLI prompts."""
        descriptions = {
            Feature.REACT: "React with starter components",
            Feature.TAILWIND: "Tailwind CSS",
            Feature.DOCKER: "Docker configuration",
            Feature.JEST: "Jest test runner",
            Feature.TYPESCRIPT: "TypeScript",
            Feature.GITHUB_CI: "GitHub Actions CI workflow",
            Feature.VSCODE: "VS Code settings",
            Feature.NEXTJS: "Next.js (includes React)",
        }
        return descriptions[self]


class Packager(str, Enum):
    """
    Package manager used for installing and running scripts.

    Registry queries always go through ``npm view`` regardless of this
    choice; the packager only affects generated scripts and the install
    and format commands.
    """

    NPM = "npm"
    YARN = "yarn"

    @property
    def install_command(self) -> list[str]:
        """Command that installs the dependencies listed in package.json."""
        if self is Packager.NPM:
            return ["npm", "i"]
        return ["yarn", "install"]

    def run_command(self, script: str, *args: str) -> list[str]:
        """Command that runs a package.json script."""
        return [self.value, "run", script, *args]


# =============================================================================
# Configuration Snapshot
# =============================================================================

class ScaffoldConfig(BaseModel):
    """
    Complete, immutable configuration for one scaffolding run.

    Built once at process start (from CLI flags, prompts or a TOML file)
    and passed explicitly to every feature resolver and to the pipeline
    driver. Nothing reads ambient process state after this point.

    Attributes
    ----------
    features : frozenset[Feature]
        Enabled optional features. ``nextjs`` automatically adds ``react``.

    node_version : str
        Node version in strict ``X.Y.Z`` form.

    packager : Packager
        npm or yarn.

    legacy_browser_support : bool
        Keep IE11 support. Pins tailwindcss below v2.

    ci_mode : bool
        Reference the toolkit package as a local tarball instead of a
        published version. Used by nodehatch's own end-to-end tests.

    ci_branch : str
        Branch name written into the GitHub Actions workflow.

    no_install : bool
        Skip the dependency install and format steps.

    registry_timeout : float
        Seconds allowed for each registry query before it fails.

    output_dir : Path
        Directory the project is scaffolded into.

    Examples
    --------
    >>> config = ScaffoldConfig(features=["jest"], packager="npm")
    >>> config.packager
    <Packager.NPM: 'npm'>
    """

    model_config = ConfigDict(frozen=True)

    features: frozenset[Feature] = Field(
        default_factory=frozenset,
        description="Enabled optional features",
    )
    node_version: str = Field(
        default=FALLBACK_NODE_VERSION,
        description="Node version (X.Y.Z)",
    )
    packager: Packager = Field(
        default=Packager.YARN,
        description="Package manager used for install and scripts",
    )
    legacy_browser_support: bool = Field(
        default=True,
        description="Keep IE11 support (tailwindcss < 2)",
    )
    ci_mode: bool = Field(
        default=False,
        description="Use a local tarball for the toolkit package",
    )
    ci_branch: str = Field(
        default="main",
        min_length=1,
        description="Branch that triggers the CI workflow",
    )
    no_install: bool = Field(
        default=False,
        description="Skip install and format steps",
    )
    registry_timeout: float = Field(
        default=60.0,
        gt=0,
        description="Timeout in seconds for each registry query",
    )
    output_dir: Path = Field(
        default_factory=Path.cwd,
        description="Directory to scaffold into",
    )

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------

    @field_validator("features")
    @classmethod
    def add_implied_features(cls, v: frozenset[Feature]) -> frozenset[Feature]:
        """Next.js is a React framework, so it always brings React along."""
        if Feature.NEXTJS in v:
            return v | {Feature.REACT}
        return v

    @field_validator("node_version")
    @classmethod
    def validate_node_version(cls, v: str) -> str:
        """
        Require a plain ``major.minor.patch`` Node version.

        Raises
        ------
        ValueError
            If the version is not semver-compliant.
        """
        v = v.strip()
        if not _NODE_VERSION_PATTERN.match(v):
            msg = f"Expected Node version to be semver-compliant, got '{v}'"
            raise ValueError(msg)
        return v

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def node_version_major(self) -> str:
        """Major component of ``node_version``, e.g. ``'12'``."""
        return self.node_version.split(".", 1)[0]

    def uses(self, feature: Feature) -> bool:
        """Whether ``feature`` is enabled."""
        return feature in self.features

    def enabled_features(self) -> list[Feature]:
        """Enabled features in declaration order."""
        return [feature for feature in Feature if feature in self.features]

    # -------------------------------------------------------------------------
    # Serialization Methods
    # -------------------------------------------------------------------------

    @classmethod
    def from_toml(cls, path: Path, **overrides: object) -> ScaffoldConfig:
        """
        Load configuration from a TOML file.

        Keys in the file mirror the model fields; ``features`` is a list of
        feature names. Keyword ``overrides`` take precedence over the file.

        Raises
        ------
        FileNotFoundError
            If the config file doesn't exist.
        ValidationError
            If the config file has invalid values.
        """
        import tomli

        with open(path, "rb") as f:
            data = tomli.load(f)

        data.update(overrides)
        return cls(**data)


# =============================================================================
# Feature Patches
# =============================================================================

class FeatureConfig(BaseModel):
    """
    Declarative output of a single feature resolver.

    Holds scripts to add plus runtime and development dependency *names*.
    Versions are resolved later, once per run, for the union of all names.

    Examples
    --------
    >>> patch = FeatureConfig(scripts={"test": "jest"}, dev_deps={"jest"})
    >>> sorted(patch.dev_deps)
    ['jest']
    """

    model_config = ConfigDict(frozen=True)

    scripts: dict[str, str] = Field(default_factory=dict)
    deps: frozenset[str] = Field(default_factory=frozenset)
    dev_deps: frozenset[str] = Field(default_factory=frozenset)

    @property
    def all_packages(self) -> frozenset[str]:
        """Every package name this patch requests, runtime or dev."""
        return self.deps | self.dev_deps


class ResolvedManifestPatch(BaseModel):
    """
    Final merged patch with a pinned version for every dependency.

    All three mappings are kept in lexicographic key order so that repeated
    runs produce byte-identical manifests.
    """

    model_config = ConfigDict(frozen=True)

    scripts: dict[str, str] = Field(default_factory=dict)
    dependencies: dict[str, str] = Field(default_factory=dict)
    dev_dependencies: dict[str, str] = Field(default_factory=dict)
