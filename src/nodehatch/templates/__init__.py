"""
nodehatch.templates - Jinja2 Template Files
===========================================

This package contains the Jinja2 templates feature resolvers emit into the
scaffolded project. Templates use the .j2 extension; the destination path is
chosen by the resolver, not derived from the template name.

Available Templates
-------------------
Common:
    - gitattributes.j2, npmrc.j2, nvmrc.j2, gitignore.j2
    - reexport.js.j2: CommonJS stub re-exporting a toolkit module
      (.eslintrc.js, .prettierrc.js, .huskyrc.js, .lintstagedrc.js,
      postcss.config.js)

React:
    - react/Checkbox.j2, react/Input.j2, react/Spinner.j2
    - reexport_esm.j2: component index file

Tailwind:
    - tailwind.css.j2, tailwind.config.js.j2

Docker:
    - Dockerfile.j2, dockerignore.j2, rewrite-pkg-json.js.j2

TypeScript:
    - tsconfig.eslint.json.j2 (tsconfig.json is built in nodehatch.tsconfig)

Next.js:
    - next.config.js.j2, babelrc.js.j2, env.example.j2
    - next_index.j2, next_app.j2
    - env.d.ts.j2, babel-plugins.d.ts.j2 (TypeScript only)

Other:
    - github_ci.yml.j2
    - vscode_settings.json.j2, vscode_extensions.json.j2

Template Context
----------------
See ``nodehatch.emitter.TemplateEmitter.context``.
"""

# This file intentionally left mostly empty.
# Templates are loaded dynamically by Jinja2's PackageLoader.
