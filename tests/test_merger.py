"""Tests for nodehatch.merger module."""

from pathlib import Path

from nodehatch.merger import apply_patch, merge, sort_keys
from nodehatch.models import FeatureConfig, ResolvedManifestPatch, ScaffoldConfig


BASE = FeatureConfig(
    scripts={"lint": "yarn run eslint .", "eslint": "eslint ."},
    deps={"@nodehatch/toolkit"},
    dev_deps={"eslint", "prettier"},
)

JEST = FeatureConfig(
    scripts={"test": "NODE_ENV=test jest"},
    dev_deps={"jest", "eslint-plugin-jest"},
)


class TestSortKeys:
    """Tests for sort_keys function."""

    def test_lexicographic(self) -> None:
        result = sort_keys({"b": 1, "a": 2, "@types/node": 3})
        assert list(result) == ["@types/node", "a", "b"]


class TestMerge:
    """Tests for merge function."""

    def test_unions_dependencies(self) -> None:
        """Test dependency sets are unioned."""
        merged = merge(BASE, [JEST])

        assert merged.deps == {"@nodehatch/toolkit"}
        assert merged.dev_deps == {"eslint", "prettier", "jest", "eslint-plugin-jest"}
        assert merged.scripts["test"] == "NODE_ENV=test jest"

    def test_no_patches(self) -> None:
        """Test base alone is returned unchanged in content."""
        assert merge(BASE, []) == BASE

    def test_idempotent(self) -> None:
        """Test merging a patch twice equals merging it once."""
        assert merge(BASE, [JEST, JEST]) == merge(BASE, [JEST])
        assert merge(merge(BASE, [JEST]), [JEST]) == merge(BASE, [JEST])

    def test_last_writer_wins(self) -> None:
        """Test script key collisions resolve to the later patch."""
        first = FeatureConfig(scripts={"build": "first"})
        second = FeatureConfig(scripts={"build": "second"})

        assert merge(BASE, [first, second]).scripts["build"] == "second"
        assert merge(BASE, [second, first]).scripts["build"] == "first"

    def test_inputs_untouched(self) -> None:
        """Test neither base nor patches are mutated."""
        merge(BASE, [JEST])

        assert "test" not in BASE.scripts
        assert "jest" not in BASE.dev_deps


class TestApplyPatch:
    """Tests for apply_patch function."""

    PATCH = ResolvedManifestPatch(
        scripts={"lint": "yarn run eslint .", "build": "next build"},
        dependencies={"next": "10.0.5", "react": "17.0.1"},
        dev_dependencies={"eslint": "7.18.0", "husky": "4.3.8"},
    )

    def config(self) -> ScaffoldConfig:
        return ScaffoldConfig(node_version="14.15.4", output_dir=Path("/tmp"))

    def test_fresh_manifest_defaults(self) -> None:
        """Test npm-init style defaults on an empty manifest."""
        result = apply_patch({}, self.PATCH, self.config(), default_name="my-app")

        assert result["name"] == "my-app"
        assert result["license"] == "UNLICENSED"
        assert result["version"] == "0.0.0"
        assert result["engines"] == {"node": "^14"}

    def test_existing_fields_kept(self) -> None:
        """Test existing name/license/version are preserved."""
        manifest = {"name": "keep-me", "license": "MIT", "version": "1.2.3"}

        result = apply_patch(manifest, self.PATCH, self.config(), default_name="x")

        assert result["name"] == "keep-me"
        assert result["license"] == "MIT"
        assert result["version"] == "1.2.3"

    def test_new_values_win(self) -> None:
        """Test computed scripts and versions override existing ones."""
        manifest = {
            "scripts": {"lint": "old lint", "custom": "echo hi"},
            "dependencies": {"react": "16.0.0", "lodash": "4.17.20"},
            "devDependencies": {"husky": "5.0.0"},
        }

        result = apply_patch(manifest, self.PATCH, self.config(), default_name="x")

        assert result["scripts"]["lint"] == "yarn run eslint ."
        assert result["scripts"]["custom"] == "echo hi"
        assert result["dependencies"]["react"] == "17.0.1"
        assert result["dependencies"]["lodash"] == "4.17.20"
        assert result["devDependencies"]["husky"] == "4.3.8"

    def test_sorted_output(self) -> None:
        """Test merged mappings are sorted lexicographically."""
        manifest = {"dependencies": {"zod": "3.0.0"}, "scripts": {"zzz": "z"}}

        result = apply_patch(manifest, self.PATCH, self.config(), default_name="x")

        assert list(result["scripts"]) == sorted(result["scripts"])
        assert list(result["dependencies"]) == ["next", "react", "zod"]
        assert list(result["devDependencies"]) == ["eslint", "husky"]

    def test_engines_merged(self) -> None:
        """Test other engines entries survive."""
        manifest = {"engines": {"node": "^10", "yarn": "^1.22"}}

        result = apply_patch(manifest, self.PATCH, self.config(), default_name="x")

        assert result["engines"] == {"node": "^14", "yarn": "^1.22"}

    def test_no_dependencies_key_without_runtime_deps(self) -> None:
        """Test dependencies is only written when the patch has some."""
        patch = ResolvedManifestPatch(dev_dependencies={"eslint": "7.18.0"})

        result = apply_patch({}, patch, self.config(), default_name="x")

        assert "dependencies" not in result
        assert result["devDependencies"] == {"eslint": "7.18.0"}

    def test_input_not_mutated(self) -> None:
        """Test the prior manifest is left as it was."""
        manifest = {"scripts": {"custom": "echo hi"}, "engines": {"yarn": "^1"}}

        apply_patch(manifest, self.PATCH, self.config(), default_name="x")

        assert manifest == {"scripts": {"custom": "echo hi"}, "engines": {"yarn": "^1"}}
