"""
nodehatch.manifest - package.json I/O
=====================================

Reading and writing the project manifest, plus the exact-pin check used by
``nodehatch check-exact``.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any


MANIFEST_NAME = "package.json"

DEPENDENCY_FIELDS = (
    "dependencies",
    "devDependencies",
    "peerDependencies",
    "optionalDependencies",
)

# exact pins ("4.3.8") and references ("file:...", "npm:...") start with an
# alphanumeric character; ranges start with ^, ~, >, < or *
_EXACT_PIN = re.compile(r"^[\da-z]", re.IGNORECASE)


def read_manifest(project_dir: Path) -> dict[str, Any]:
    """
    Load ``package.json`` from ``project_dir``.

    Returns
    -------
    dict[str, Any]
        Parsed manifest, or an empty dict when the file doesn't exist.

    Raises
    ------
    ValueError
        If the file exists but isn't a JSON object.
    """
    path = project_dir / MANIFEST_NAME
    if not path.exists():
        return {}

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid {MANIFEST_NAME} at {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Invalid {MANIFEST_NAME} at {path}: expected an object")
    return data


def write_manifest(project_dir: Path, manifest: Mapping[str, Any]) -> Path:
    """Write ``manifest`` as two-space indented JSON and return its path."""
    path = project_dir / MANIFEST_NAME
    path.write_text(json.dumps(manifest, indent=2) + "\n", encoding="utf-8")
    return path


def find_unlocked_dependencies(manifest: Mapping[str, Any]) -> list[tuple[str, str]]:
    """
    List dependencies that aren't pinned to an exact version.

    Later fields win when a package appears in several dependency fields,
    matching how npm itself flattens them.

    Examples
    --------
    >>> find_unlocked_dependencies({"dependencies": {"next": "^10.0.5"}})
    [('next', '^10.0.5')]
    """
    merged: dict[str, str] = {}
    for field in DEPENDENCY_FIELDS:
        merged.update(manifest.get(field) or {})

    return [
        (name, version)
        for name, version in merged.items()
        if not _EXACT_PIN.match(str(version))
    ]
