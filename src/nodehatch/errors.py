"""
nodehatch.errors - Exception Hierarchy
======================================

Every failure the scaffolding pipeline can surface derives from
``NodehatchError`` so the CLI can report it with a single clear message
instead of a stack trace.

Hierarchy
---------
    NodehatchError
    ├── RegistryError              - registry unreachable / package unknown
    ├── UnsatisfiableConstraint    - no published version fits a constraint
    ├── ResolverSideEffectFailure  - a feature resolver failed to emit files
    └── CommandError               - install/format command exited non-zero

None of these are retried or recovered locally. They propagate to the
pipeline driver, which aborts the run before ``package.json`` is written.
"""

from __future__ import annotations

from collections.abc import Sequence


class NodehatchError(Exception):
    """Base class for all nodehatch failures."""


class RegistryError(NodehatchError):
    """
    The package registry could not answer a version query.

    Raised when the package name is unknown, the registry is unreachable,
    the ``npm`` executable is missing, the output can't be parsed or the
    query timed out.

    Attributes
    ----------
    package : str
        Name of the package whose lookup failed.

    reason : str
        Short description of what went wrong.
    """

    def __init__(self, package: str, reason: str) -> None:
        self.package = package
        self.reason = reason
        super().__init__(f"Registry lookup failed for '{package}': {reason}")


class UnsatisfiableConstraint(NodehatchError):
    """
    A constrained package has no published version matching its constraint.

    Attributes
    ----------
    package : str
        Name of the constrained package.

    versions : tuple[str, ...]
        The versions that were offered to the constraint.
    """

    def __init__(self, package: str, versions: Sequence[str] = ()) -> None:
        self.package = package
        self.versions = tuple(versions)
        super().__init__(
            f"Unsatisfiable constraint for '{package}': none of the "
            f"{len(self.versions)} published version(s) is allowed"
        )


class ResolverSideEffectFailure(NodehatchError):
    """A feature resolver failed while emitting its files."""

    def __init__(self, feature: str, reason: str) -> None:
        self.feature = feature
        self.reason = reason
        super().__init__(f"Feature '{feature}' failed to emit files: {reason}")


class CommandError(NodehatchError):
    """An external package-manager command exited with a non-zero status."""

    def __init__(self, command: Sequence[str], returncode: int | None) -> None:
        self.command = tuple(command)
        self.returncode = returncode
        super().__init__(
            f"Command failed (exit {returncode}): {' '.join(self.command)}"
        )
