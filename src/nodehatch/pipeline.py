"""
nodehatch.pipeline - Feature Resolution and Version Negotiation
===============================================================

The pipeline turns a ``ScaffoldConfig`` into a ``ResolvedManifestPatch``.

Architecture
------------
The driver is a small state machine that stops at the first failure:

    COLLECTING  run the common resolver and every enabled feature resolver
                (gathered, all awaited before moving on)
         │
    MERGING     merge the patches, union the dependency names
         │
    RESOLVING   pin one version per distinct package name (one concurrent
                batch, one registry query per name)
         │
    DONE        hand the patch to the manifest writer

Any exception moves the driver to FAILED and is re-raised unchanged, so
``package.json`` is never written from a partial result. Nothing is
retried. Files already emitted by resolvers are not rolled back.

Usage Example
-------------
>>> pipeline = ScaffoldPipeline(config, registry=VersionResolver(NpmRegistryClient()))
>>> patch = asyncio.run(pipeline.run(emitter))
>>> patch.dev_dependencies["husky"]
'4.3.8'
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping, Sequence
from enum import Enum

from jinja2 import TemplateError

from nodehatch import __version__
from nodehatch.constraints import Constraint, build_constraint_table
from nodehatch.emitter import TemplateEmitter
from nodehatch.errors import ResolverSideEffectFailure, UnsatisfiableConstraint
from nodehatch.features import FEATURE_RESOLVERS, FeatureResolver, resolve_common
from nodehatch.merger import merge, sort_keys
from nodehatch.models import (
    TOOLKIT_PACKAGE,
    Feature,
    FeatureConfig,
    ResolvedManifestPatch,
    ScaffoldConfig,
)
from nodehatch.registry import VersionResolver


class PipelineState(str, Enum):
    """Stages of a pipeline run."""

    PENDING = "pending"
    COLLECTING = "collecting"
    MERGING = "merging"
    RESOLVING = "resolving"
    DONE = "done"
    FAILED = "failed"


def toolkit_version(config: ScaffoldConfig) -> str:
    """
    Version reference used for nodehatch's own npm package.

    In CI mode this points at the tarball ``npm pack`` produces next to the
    generated project, so end-to-end tests exercise unreleased code.
    """
    if config.ci_mode:
        return f"file:./nodehatch-toolkit-{__version__}.tgz"
    return __version__


class ScaffoldPipeline:
    """
    Drives one scaffolding run from config snapshot to resolved patch.

    Parameters
    ----------
    config : ScaffoldConfig
        Configuration snapshot shared by all resolvers.

    registry : VersionResolver
        Version source for every package except nodehatch's own.

    constraints : Mapping[str, Constraint | None] | None
        Constraint table; built from ``config`` when omitted.

    Attributes
    ----------
    state : PipelineState
        Current stage; FAILED once any stage raised.
    """

    def __init__(
        self,
        config: ScaffoldConfig,
        registry: VersionResolver,
        constraints: Mapping[str, Constraint | None] | None = None,
    ) -> None:
        self.config = config
        self.registry = registry
        self.constraints = (
            constraints if constraints is not None else build_constraint_table(config)
        )
        self.state = PipelineState.PENDING

    # -------------------------------------------------------------------------
    # Stages
    # -------------------------------------------------------------------------

    async def collect(
        self,
        emitter: TemplateEmitter,
        order: Sequence[Feature] | None = None,
    ) -> tuple[FeatureConfig, list[FeatureConfig]]:
        """
        Run the common resolver and the enabled feature resolvers.

        Parameters
        ----------
        emitter : TemplateEmitter
            Destination for emitted files.

        order : Sequence[Feature] | None
            Order in which enabled features are visited. It must list every
            enabled feature; features not enabled in the config are skipped
            and repeats are visited once. Defaults to declaration order of
            ``Feature``.

        Returns
        -------
        tuple[FeatureConfig, list[FeatureConfig]]
            The common patch and the feature patches, in ``order``.

        Raises
        ------
        ValueError
            If ``order`` leaves out an enabled feature.
        """
        if order is None:
            order = list(Feature)

        missing = self.config.features - set(order)
        if missing:
            raise ValueError(
                "Feature order is missing enabled features: "
                + ", ".join(sorted(feature.value for feature in missing))
            )

        features = [
            feature for feature in dict.fromkeys(order) if self.config.uses(feature)
        ]

        results = await asyncio.gather(
            self._run_resolver("common", resolve_common, emitter),
            *(
                self._run_resolver(feature.value, FEATURE_RESOLVERS[feature], emitter)
                for feature in features
            ),
        )
        return results[0], list(results[1:])

    async def _run_resolver(
        self,
        name: str,
        resolver: FeatureResolver,
        emitter: TemplateEmitter,
    ) -> FeatureConfig:
        try:
            return await resolver(self.config, emitter)
        except (OSError, TemplateError) as e:
            raise ResolverSideEffectFailure(name, str(e)) from e

    async def resolve_version(self, package: str) -> str:
        """
        Pick the version to pin for a single package.

        Raises
        ------
        RegistryError
            If the registry lookup fails.
        UnsatisfiableConstraint
            If a constrained package has no allowed version.
        """
        if package == TOOLKIT_PACKAGE:
            return toolkit_version(self.config)

        constraint = self.constraints.get(package)
        if constraint is None:
            return await self.registry.latest(package)

        versions = await self.registry.versions(package, exclude_prerelease=True)
        version = constraint(versions)
        if version is None:
            raise UnsatisfiableConstraint(package, versions)
        return version

    async def resolve_versions(self, packages: Iterable[str]) -> dict[str, str]:
        """
        Resolve a batch of package names concurrently.

        Each distinct name is resolved exactly once. If any lookup fails the
        whole batch fails and no partial mapping is returned.
        """
        names = sorted(set(packages))
        versions = await asyncio.gather(*(self.resolve_version(n) for n in names))
        return dict(zip(names, versions, strict=True))

    # -------------------------------------------------------------------------
    # Driver
    # -------------------------------------------------------------------------

    async def run(
        self,
        emitter: TemplateEmitter,
        order: Sequence[Feature] | None = None,
    ) -> ResolvedManifestPatch:
        """
        Execute every stage and return the resolved manifest patch.

        Raises
        ------
        NodehatchError
            Whatever stage failed; ``state`` is FAILED afterwards.
        """
        try:
            self.state = PipelineState.COLLECTING
            base, patches = await self.collect(emitter, order)

            self.state = PipelineState.MERGING
            merged = merge(base, patches)

            self.state = PipelineState.RESOLVING
            pinned = await self.resolve_versions(merged.all_packages)

            patch = ResolvedManifestPatch(
                scripts=sort_keys(merged.scripts),
                dependencies={name: pinned[name] for name in sorted(merged.deps)},
                dev_dependencies={name: pinned[name] for name in sorted(merged.dev_deps)},
            )
        except BaseException:
            self.state = PipelineState.FAILED
            raise

        self.state = PipelineState.DONE
        return patch
