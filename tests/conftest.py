"""
pytest configuration and shared fixtures for nodehatch tests.

Fixtures defined here are automatically available to all tests.

Fixtures
--------
project_dir : Path
    An empty directory to scaffold into.

fake_client : FakeRegistryClient
    In-memory registry that records every query.

registry : VersionResolver
    Resolver wrapping ``fake_client``.

make_config : Callable[..., ScaffoldConfig]
    Builds a config pointing at ``project_dir``.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from nodehatch.emitter import TemplateEmitter
from nodehatch.errors import RegistryError
from nodehatch.models import TOOLKIT_PACKAGE, ScaffoldConfig
from nodehatch.registry import VersionResolver


# =============================================================================
# Fake Registry
# =============================================================================

GENERIC_VERSIONS = ["1.0.0", "1.1.0-beta.0", "1.2.3"]

REGISTRY_DATA: dict[str, list[str]] = {
    name: GENERIC_VERSIONS
    for name in [
        "@types/node",
        "@types/react",
        "@types/react-dom",
        "@typescript-eslint/eslint-plugin",
        "@typescript-eslint/parser",
        "autoprefixer",
        "babel-plugin-inline-react-svg",
        "babel-plugin-module-resolver",
        "envalid",
        "eslint",
        "eslint-config-airbnb",
        "eslint-config-airbnb-base",
        "eslint-config-airbnb-typescript",
        "eslint-config-prettier",
        "eslint-import-resolver-alias",
        "eslint-plugin-import",
        "eslint-plugin-jest",
        "eslint-plugin-jsx-a11y",
        "eslint-plugin-prettier",
        "eslint-plugin-react",
        "eslint-plugin-react-hooks",
        "jest",
        "lint-staged",
        "next",
        "postcss",
        "prettier",
        "prettier-plugin-package",
        "react",
        "react-dom",
        "typescript",
    ]
}
REGISTRY_DATA["husky"] = ["4.0.0", "4.3.8", "5.0.0-beta.1", "5.0.0", "5.1.0"]
REGISTRY_DATA["tailwindcss"] = ["1.9.5", "1.9.6", "2.0.0", "2.0.2"]


class FakeRegistryClient:
    """
    Registry client serving versions from a dict.

    ``latest`` is the last listed version. Unknown packages raise
    ``RegistryError`` like a 404 from npm would.
    """

    def __init__(self, data: dict[str, list[str]] | None = None) -> None:
        self.data = dict(REGISTRY_DATA if data is None else data)
        self.calls: list[tuple[str, str]] = []

    def _lookup(self, name: str) -> list[str]:
        if name == TOOLKIT_PACKAGE:
            raise AssertionError("the toolkit package must never be queried")
        if name not in self.data:
            raise RegistryError(name, "E404 Not Found")
        return self.data[name]

    async def query_versions(self, name: str) -> list[str]:
        self.calls.append(("versions", name))
        return list(self._lookup(name))

    async def query_latest(self, name: str) -> str:
        self.calls.append(("latest", name))
        return self._lookup(name)[-1]

    def queried(self, name: str) -> int:
        """Number of queries of any kind made for ``name``."""
        return sum(1 for _, called in self.calls if called == name)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Empty directory to scaffold into."""
    path = tmp_path / "my-app"
    path.mkdir()
    return path


@pytest.fixture
def fake_client() -> FakeRegistryClient:
    """In-memory registry client."""
    return FakeRegistryClient()


@pytest.fixture
def make_client() -> type[FakeRegistryClient]:
    """The fake client class, for tests that need custom registry data."""
    return FakeRegistryClient


@pytest.fixture
def registry(fake_client: FakeRegistryClient) -> VersionResolver:
    """Version resolver backed by the fake registry."""
    return VersionResolver(fake_client, timeout=5)


@pytest.fixture
def make_config(project_dir: Path) -> Callable[..., ScaffoldConfig]:
    """Factory for configs that scaffold into ``project_dir``."""

    def factory(**kwargs: object) -> ScaffoldConfig:
        kwargs.setdefault("output_dir", project_dir)
        kwargs.setdefault("no_install", True)
        return ScaffoldConfig(**kwargs)

    return factory


@pytest.fixture
def make_emitter(project_dir: Path) -> Callable[[ScaffoldConfig], TemplateEmitter]:
    """Factory for emitters writing into ``project_dir``."""

    def factory(config: ScaffoldConfig) -> TemplateEmitter:
        return TemplateEmitter(project_dir, config)

    return factory


# =============================================================================
# pytest Configuration
# =============================================================================

def pytest_configure(config: pytest.Config) -> None:
    """
    Configure pytest with custom markers.

    This function is called by pytest during startup to register
    custom markers used in our test suite.
    """
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests requiring external resources"
    )
