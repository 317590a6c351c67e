"""
nodehatch.merger - Manifest Merging
===================================

Combines feature patches into one, and folds the final resolved patch into
an existing ``package.json`` mapping.

Merge rules
-----------
- Scripts: union, last writer wins on key collision (not an error).
- Dependency names: set union, so merging the same patch twice is a no-op.
- Into an existing manifest: newly computed scripts and versions win over
  the values already present.
- Every mapping that ends up in the manifest is sorted by key.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from copy import deepcopy
from typing import Any, TypeVar

from nodehatch.models import FeatureConfig, ResolvedManifestPatch, ScaffoldConfig


V = TypeVar("V")


def sort_keys(mapping: Mapping[str, V]) -> dict[str, V]:
    """Copy of ``mapping`` with keys in lexicographic order."""
    return {key: mapping[key] for key in sorted(mapping)}


def merge(base: FeatureConfig, patches: Iterable[FeatureConfig]) -> FeatureConfig:
    """
    Merge feature patches onto the base patch.

    Parameters
    ----------
    base : FeatureConfig
        Output of the common resolver; the starting accumulator.

    patches : Iterable[FeatureConfig]
        Feature outputs in the order the driver supplies them.

    Returns
    -------
    FeatureConfig
        A new patch. Neither ``base`` nor any of ``patches`` is modified.
    """
    scripts = dict(base.scripts)
    deps = set(base.deps)
    dev_deps = set(base.dev_deps)

    for patch in patches:
        scripts.update(patch.scripts)
        deps |= patch.deps
        dev_deps |= patch.dev_deps

    return FeatureConfig(
        scripts=scripts,
        deps=frozenset(deps),
        dev_deps=frozenset(dev_deps),
    )


def apply_patch(
    manifest: Mapping[str, Any],
    patch: ResolvedManifestPatch,
    config: ScaffoldConfig,
    *,
    default_name: str,
) -> dict[str, Any]:
    """
    Fold a resolved patch into an existing ``package.json`` mapping.

    Fills in the fields ``npm init -y`` would (name, license, version),
    pins ``engines.node`` to the selected major version and merges scripts
    and dependencies with the new values taking precedence.

    Parameters
    ----------
    manifest : Mapping[str, Any]
        Current manifest contents (``{}`` for a fresh project). Not modified.

    patch : ResolvedManifestPatch
        Output of the pipeline.

    config : ScaffoldConfig
        Run configuration.

    default_name : str
        Package name to use when the manifest has none.

    Returns
    -------
    dict[str, Any]
        The updated manifest.
    """
    result: dict[str, Any] = deepcopy(dict(manifest))

    result["name"] = result.get("name") or default_name
    result["license"] = result.get("license") or "UNLICENSED"
    result["version"] = result.get("version") or "0.0.0"

    result["scripts"] = sort_keys({**result.get("scripts", {}), **patch.scripts})

    result["engines"] = {
        **result.get("engines", {}),
        "node": f"^{config.node_version_major}",
    }

    if patch.dependencies:
        result["dependencies"] = sort_keys(
            {**result.get("dependencies", {}), **patch.dependencies}
        )

    result["devDependencies"] = sort_keys(
        {**result.get("devDependencies", {}), **patch.dev_dependencies}
    )

    return result
