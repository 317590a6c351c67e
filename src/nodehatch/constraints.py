"""
nodehatch.constraints - Version Constraint Table
================================================

Some packages can't simply be installed at their latest version. The
constraint table maps those package names to a function that picks the best
allowed version out of the published ones, or returns ``None`` when nothing
qualifies.

Current constraints
-------------------
- ``husky``: stay below v5 (v5 was only free for open source projects).
- ``tailwindcss``: stay below v2 while IE11 support is kept (v2 dropped it).

The table is built once per run from the configuration snapshot and never
changes afterwards.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from functools import partial
from types import MappingProxyType

from packaging.specifiers import SpecifierSet
from packaging.version import InvalidVersion, Version

from nodehatch.models import ScaffoldConfig


Constraint = Callable[[Sequence[str]], "str | None"]


def max_satisfying(versions: Sequence[str], spec: str) -> str | None:
    """
    Highest version in ``versions`` that satisfies ``spec``.

    Versions that can't be parsed are ignored. The returned string is the
    original registry spelling, not a normalized form.

    Parameters
    ----------
    versions : Sequence[str]
        Candidate versions in any order.

    spec : str
        A specifier such as ``"<5"`` or ``">=1.2,<2"``.

    Returns
    -------
    str | None
        The best match, or None when no version satisfies ``spec``.

    Examples
    --------
    >>> max_satisfying(["4.0.0", "4.9.0", "5.0.0", "5.1.0"], "<5")
    '4.9.0'
    >>> max_satisfying(["5.0.0", "5.1.0"], "<5") is None
    True
    """
    specifier = SpecifierSet(spec)
    best: tuple[Version, str] | None = None

    for raw in versions:
        try:
            parsed = Version(raw)
        except InvalidVersion:
            continue
        if parsed not in specifier:
            continue
        if best is None or parsed > best[0]:
            best = (parsed, raw)

    return best[1] if best else None


def below_major(major: int) -> Constraint:
    """Constraint that keeps the highest version strictly below ``major``."""
    return partial(max_satisfying, spec=f"<{major}")


def build_constraint_table(config: ScaffoldConfig) -> Mapping[str, Constraint | None]:
    """
    Build the read-only constraint table for one run.

    A ``None`` entry means "known package, no constraint" and behaves the
    same as a missing entry.
    """
    table: dict[str, Constraint | None] = {
        "husky": below_major(5),
        "tailwindcss": below_major(2) if config.legacy_browser_support else None,
    }
    return MappingProxyType(table)
