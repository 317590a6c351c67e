"""
nodehatch.tsconfig - tsconfig.json Builder
==========================================

Builds the ``tsconfig.json`` written by the typescript feature. The base
config is strict and targets plain Node; React and Next.js projects get DOM
typings, JSX handling and an ``@/`` import alias matching the babel module
resolver the Next.js feature installs.
"""

from __future__ import annotations

import copy
from typing import Any


DEFAULT_TSCONFIG: dict[str, Any] = {
    "compilerOptions": {
        "allowJs": True,
        "allowSyntheticDefaultImports": True,
        "esModuleInterop": True,
        "forceConsistentCasingInFileNames": True,
        "isolatedModules": True,  # required by next
        "lib": ["esnext"],
        "module": "esnext",
        "moduleResolution": "node",
        "noImplicitAny": True,
        "noImplicitThis": True,
        "noUncheckedIndexedAccess": True,
        "noUnusedLocals": False,  # reported by eslint
        "noUnusedParameters": False,  # reported by eslint
        "resolveJsonModule": True,
        "skipLibCheck": True,
        "strict": True,
        "target": "es5",
        "typeRoots": ["node_modules/@types"],
        "types": ["types.d.ts"],
    },
    "include": ["src"],
    "exclude": ["node_modules"],
}


def create_tsconfig(*, has_react: bool, has_next: bool) -> dict[str, Any]:
    """
    Build a tsconfig mapping for the given frameworks.

    Parameters
    ----------
    has_react : bool
        Project uses React.

    has_next : bool
        Project uses Next.js.

    Returns
    -------
    dict[str, Any]
        A fresh mapping; callers may mutate it freely.

    Examples
    --------
    >>> create_tsconfig(has_react=True, has_next=True)["compilerOptions"]["jsx"]
    'preserve'
    """
    config = copy.deepcopy(DEFAULT_TSCONFIG)

    if has_react or has_next:
        options = config["compilerOptions"]
        # emitting is left to the bundler
        options["noEmit"] = True
        options["lib"].insert(0, "dom")
        options["jsx"] = "preserve" if has_next else "react"
        options["baseUrl"] = "."
        options["paths"] = {"@/*": ["./src/*"]}

        if has_next:
            config["include"].append("pages")

    return config
