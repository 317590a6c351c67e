"""
nodehatch.registry - Package Registry Queries
=============================================

Two layers live here:

``NpmRegistryClient``
    The raw registry collaborator. It shells out to ``npm view`` (the same
    way the generated project would resolve versions) and returns whatever
    the registry reports.

``VersionResolver``
    What the pipeline talks to. It applies the per-call timeout, drops
    pre-release and tagged versions on request and turns every failure into
    a ``RegistryError`` naming the package.

Failures are never retried: a misconfigured registry mirror should fail
fast and visibly.

Usage Example
-------------
>>> resolver = VersionResolver(NpmRegistryClient(), timeout=30)
>>> asyncio.run(resolver.versions("husky"))
['0.1.0', ..., '4.3.8', '5.0.0', ...]
"""

from __future__ import annotations

import asyncio
import json
import re
from typing import Protocol

from nodehatch.errors import RegistryError


_PLAIN_VERSION = re.compile(r"^\d+\.\d+\.\d+$")


def is_plain_version(version: str) -> bool:
    """True for ``X.Y.Z`` versions without pre-release or build tags."""
    return bool(_PLAIN_VERSION.match(version))


class RegistryClient(Protocol):
    """Interface of the external package registry."""

    async def query_versions(self, name: str) -> list[str]:
        """All published versions of ``name``, oldest first."""
        ...

    async def query_latest(self, name: str) -> str:
        """Version the registry tags as ``latest`` for ``name``."""
        ...


# =============================================================================
# npm Client
# =============================================================================

class NpmRegistryClient:
    """
    Registry client backed by the ``npm view`` command.

    Parameters
    ----------
    npm : str
        npm executable to invoke.
    """

    def __init__(self, npm: str = "npm") -> None:
        self.npm = npm

    async def _view(self, name: str, *fields: str) -> str:
        cmd = [self.npm, "view", name, *fields, "--json"]

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise RegistryError(name, f"'{self.npm}' executable not found") from e

        try:
            stdout_bytes, stderr_bytes = await process.communicate()
        except asyncio.CancelledError:
            # wait_for() expiry lands here; don't leave npm running
            if process.returncode is None:
                process.kill()
                await asyncio.shield(process.wait())
            raise

        if process.returncode != 0:
            stderr = stderr_bytes.decode("utf-8", errors="replace").strip()
            detail = stderr.splitlines()[0] if stderr else "no output"
            raise RegistryError(
                name, f"npm view exited with {process.returncode}: {detail}"
            )

        return stdout_bytes.decode("utf-8", errors="replace").strip()

    async def query_versions(self, name: str) -> list[str]:
        raw = await self._view(name, "versions")
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise RegistryError(name, f"unparseable version list: {e}") from e

        # npm prints a bare string when only one version was ever published
        if isinstance(data, str):
            return [data]
        if not isinstance(data, list) or not all(isinstance(v, str) for v in data):
            raise RegistryError(name, "unexpected version list format")
        return data

    async def query_latest(self, name: str) -> str:
        raw = await self._view(name, "version")
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise RegistryError(name, f"unparseable version: {e}") from e

        if not isinstance(data, str) or not data:
            raise RegistryError(name, "registry returned no latest version")
        return data


# =============================================================================
# Version Resolver
# =============================================================================

class VersionResolver:
    """
    Timeout-bounded, error-normalizing front end to a ``RegistryClient``.

    Version lists keep the order the registry reports (oldest to newest);
    they are never re-sorted here.

    Parameters
    ----------
    client : RegistryClient
        Registry to query.

    timeout : float | None
        Seconds allowed per query. ``None`` disables the limit.
    """

    def __init__(self, client: RegistryClient, timeout: float | None = 60.0) -> None:
        self.client = client
        self.timeout = timeout

    async def _bounded(self, name: str, coro):
        try:
            return await asyncio.wait_for(coro, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise RegistryError(name, f"timed out after {self.timeout}s") from e
        except RegistryError:
            raise
        except OSError as e:
            raise RegistryError(name, str(e)) from e

    async def versions(self, name: str, exclude_prerelease: bool = True) -> list[str]:
        """
        Published versions of ``name`` in registry order.

        Parameters
        ----------
        name : str
            Package name.

        exclude_prerelease : bool, default=True
            Drop anything that is not a plain ``X.Y.Z`` version
            (``1.0.0-beta.1``, ``2.0.0-next.3``, ...).

        Raises
        ------
        RegistryError
            If the package is unknown, the registry unreachable or the
            query timed out.
        """
        versions = await self._bounded(name, self.client.query_versions(name))
        if exclude_prerelease:
            return [v for v in versions if is_plain_version(v)]
        return list(versions)

    async def latest(self, name: str) -> str:
        """The registry's ``latest`` version of ``name``."""
        return await self._bounded(name, self.client.query_latest(name))
