"""
nodehatch.features - Feature Resolvers
======================================

One coroutine per ``Feature`` plus the ``common`` resolver that always runs
first. Each resolver emits its files through the ``TemplateEmitter`` and
returns a ``FeatureConfig`` describing the scripts and dependency names the
feature needs.

Rules every resolver follows:

- The return value depends only on the ``ScaffoldConfig`` snapshot.
- Conditions on other features (e.g. typed React props when TypeScript is
  on) are read from ``config``, never from another resolver's output, so
  resolvers can run in any order or concurrently.
- No shared state is mutated.

``FEATURE_RESOLVERS`` is checked against the ``Feature`` enum when this
module is imported; adding a feature without a resolver fails immediately.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Callable, Mapping
from types import MappingProxyType

from nodehatch.emitter import TemplateEmitter
from nodehatch.models import TOOLKIT_PACKAGE, Feature, FeatureConfig, ScaffoldConfig
from nodehatch.tsconfig import create_tsconfig


FeatureResolver = Callable[[ScaffoldConfig, TemplateEmitter], Awaitable[FeatureConfig]]

REACT_COMPONENTS = ("Checkbox", "Input", "Spinner")


# =============================================================================
# Common (always enabled)
# =============================================================================

def eslint_extensions(config: ScaffoldConfig) -> list[str]:
    """File extensions eslint should lint for this project."""
    extensions = [".js"]
    if config.uses(Feature.REACT):
        extensions.append(".jsx")
    if config.uses(Feature.TYPESCRIPT):
        extensions.append(".ts")
        if config.uses(Feature.REACT):
            extensions.append(".tsx")
    return extensions


def airbnb_config(config: ScaffoldConfig) -> str:
    """Flavor of the airbnb eslint config matching the enabled features."""
    if config.uses(Feature.TYPESCRIPT):
        return "eslint-config-airbnb-typescript"
    if config.uses(Feature.REACT):
        return "eslint-config-airbnb"
    return "eslint-config-airbnb-base"


async def resolve_common(config: ScaffoldConfig, emitter: TemplateEmitter) -> FeatureConfig:
    """Lint, format and git hook setup shared by every project."""
    await asyncio.gather(
        emitter.render("gitattributes.j2", ".gitattributes"),
        emitter.render("npmrc.j2", ".npmrc"),
        emitter.render("nvmrc.j2", ".nvmrc"),
        emitter.reexport("husky", ".huskyrc.js"),
        emitter.reexport("lintstaged", ".lintstagedrc.js"),
        emitter.reexport("eslint", ".eslintrc.js"),
        emitter.reexport("prettier", ".prettierrc.js"),
    )

    extensions = ",".join(eslint_extensions(config))
    return FeatureConfig(
        scripts={
            "eslint": f"eslint --ext '{extensions}' --ignore-pattern '!.*.js'",
            "lint": " ".join(config.packager.run_command("eslint", ".")),
        },
        deps={TOOLKIT_PACKAGE},
        dev_deps={
            airbnb_config(config),
            "eslint-config-prettier",
            "eslint-import-resolver-alias",
            "eslint-plugin-import",
            "eslint-plugin-prettier",
            "eslint",
            "husky",
            "lint-staged",
            "prettier",
            "prettier-plugin-package",
        },
    )


# =============================================================================
# Optional Features
# =============================================================================

async def resolve_react(config: ScaffoldConfig, emitter: TemplateEmitter) -> FeatureConfig:
    typescript = config.uses(Feature.TYPESCRIPT)
    component_ext = "tsx" if typescript else "jsx"
    index_ext = "ts" if typescript else "js"

    writes = []
    for name in REACT_COMPONENTS:
        folder = f"src/components/{name}"
        writes.append(emitter.render(f"react/{name}.j2", f"{folder}/{name}.{component_ext}"))
        writes.append(
            emitter.render("reexport_esm.j2", f"{folder}/index.{index_ext}", specifier=name)
        )
    await asyncio.gather(*writes)

    dev_deps = {
        "eslint-plugin-jsx-a11y",
        "eslint-plugin-react",
        "eslint-plugin-react-hooks",
    }
    if typescript:
        dev_deps |= {"@types/react", "@types/react-dom"}

    return FeatureConfig(deps={"react", "react-dom"}, dev_deps=dev_deps)


async def resolve_tailwind(config: ScaffoldConfig, emitter: TemplateEmitter) -> FeatureConfig:
    await emitter.render("tailwind.css.j2", "src/assets/css/tailwind.css")
    await emitter.render("tailwind.config.js.j2", "tailwind.config.js")

    # tailwind v1 (kept for IE11) doesn't use the toolkit's postcss setup
    if not config.legacy_browser_support:
        await emitter.reexport("postcss", "postcss.config.js")

    return FeatureConfig(
        scripts={
            "build:tailwind": (
                "tailwind build src/assets/css/tailwind.css "
                "--output public/css/tailwind.out.css"
            ),
        },
        deps={"tailwindcss", "autoprefixer", "postcss"},
    )


async def resolve_docker(config: ScaffoldConfig, emitter: TemplateEmitter) -> FeatureConfig:
    await asyncio.gather(
        emitter.render("dockerignore.j2", ".dockerignore"),
        emitter.render("Dockerfile.j2", "Dockerfile"),
        emitter.render("rewrite-pkg-json.js.j2", "scripts/rewrite-pkg-json.js"),
    )
    return FeatureConfig()


async def resolve_jest(config: ScaffoldConfig, emitter: TemplateEmitter) -> FeatureConfig:
    return FeatureConfig(
        scripts={"test": "NODE_ENV=test jest"},
        dev_deps={"jest", "eslint-plugin-jest"},
    )


async def resolve_typescript(config: ScaffoldConfig, emitter: TemplateEmitter) -> FeatureConfig:
    tsconfig = create_tsconfig(
        has_react=config.uses(Feature.REACT),
        has_next=config.uses(Feature.NEXTJS),
    )
    await asyncio.gather(
        emitter.render("tsconfig.eslint.json.j2", "tsconfig.eslint.json"),
        emitter.write("tsconfig.json", json.dumps(tsconfig, indent=2) + "\n"),
    )
    return FeatureConfig(
        scripts={"typecheck": "tsc --noEmit"},
        dev_deps={
            "typescript",
            "@types/node",
            "@typescript-eslint/eslint-plugin",
            "@typescript-eslint/parser",
        },
    )


async def resolve_github_ci(config: ScaffoldConfig, emitter: TemplateEmitter) -> FeatureConfig:
    await emitter.render("github_ci.yml.j2", ".github/workflows/ci.yml")
    return FeatureConfig()


async def resolve_vscode(config: ScaffoldConfig, emitter: TemplateEmitter) -> FeatureConfig:
    await asyncio.gather(
        emitter.render("vscode_settings.json.j2", ".vscode/settings.json"),
        emitter.render("vscode_extensions.json.j2", ".vscode/extensions.json"),
    )
    return FeatureConfig()


async def resolve_nextjs(config: ScaffoldConfig, emitter: TemplateEmitter) -> FeatureConfig:
    typescript = config.uses(Feature.TYPESCRIPT)
    page_ext = "tsx" if typescript else "jsx"

    writes = [
        emitter.render("env.example.j2", ".env.example"),
        emitter.render("env.example.j2", ".env"),
        emitter.render("next.config.js.j2", "next.config.js"),
        emitter.render("babelrc.js.j2", ".babelrc.js"),
        emitter.render("next_index.j2", f"pages/index.{page_ext}"),
        emitter.render("next_app.j2", f"pages/_app.{page_ext}"),
    ]
    if typescript:
        writes.append(emitter.render("env.d.ts.j2", "dts/env.d.ts"))
        writes.append(emitter.render("babel-plugins.d.ts.j2", "dts/babel-plugins.d.ts"))
    await asyncio.gather(*writes)

    return FeatureConfig(
        scripts={
            "build": "NODE_ENV=production next build",
            "dev": "NODE_ENV=development next -p 3001",
            "start": "NODE_ENV=production next start",
        },
        deps={"envalid", "next"},
        dev_deps={
            "babel-plugin-module-resolver",
            "babel-plugin-inline-react-svg",
        },
    )


# =============================================================================
# Resolver Table
# =============================================================================

FEATURE_RESOLVERS: Mapping[Feature, FeatureResolver] = MappingProxyType({
    Feature.REACT: resolve_react,
    Feature.TAILWIND: resolve_tailwind,
    Feature.DOCKER: resolve_docker,
    Feature.JEST: resolve_jest,
    Feature.TYPESCRIPT: resolve_typescript,
    Feature.GITHUB_CI: resolve_github_ci,
    Feature.VSCODE: resolve_vscode,
    Feature.NEXTJS: resolve_nextjs,
})

_missing = set(Feature) - set(FEATURE_RESOLVERS)
if _missing:
    raise RuntimeError(
        "Features without a resolver: "
        + ", ".join(sorted(feature.value for feature in _missing))
    )
