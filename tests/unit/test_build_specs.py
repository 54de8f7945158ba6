"""Tests for the CodeBuild buildspec documents."""

from pathlib import Path

from site_pipeline.build_specs import (
  invalidation_build_spec,
  invalidation_command,
  site_build_spec,
)
from site_pipeline.config import BuildConfig, Config


class TestSiteBuildSpec:
  """Test the site generator buildspec."""

  def test_default_shape(self) -> None:
    assert site_build_spec(BuildConfig()) == {
      "version": "0.2",
      "phases": {
        "install": {
          "runtime-versions": {"nodejs": "latest"},
          "commands": [
            "npm update -g",
            "npm install -g gatsby-cli",
            "npm install -g yarn",
            "yarn",
          ],
        },
        "build": {"commands": ["gatsby build"]},
      },
      "artifacts": {"base-directory": "./public", "files": ["**/*"]},
    }

  def test_install_command_order_preserved(self) -> None:
    commands = ["c", "a", "b"]
    spec = site_build_spec(BuildConfig(install_commands=commands))
    assert spec["phases"]["install"]["commands"] == ["c", "a", "b"]

  def test_artifacts_section_unchanged(self) -> None:
    spec = site_build_spec(BuildConfig(base_directory="./dist", files=["*.html", "assets/**/*"]))
    assert spec["artifacts"] == {"base-directory": "./dist", "files": ["*.html", "assets/**/*"]}

  def test_runtime_versions_omitted_when_empty(self) -> None:
    spec = site_build_spec(BuildConfig(runtime_versions={}))
    assert "runtime-versions" not in spec["phases"]["install"]

  def test_does_not_alias_config_lists(self) -> None:
    build = BuildConfig()
    spec = site_build_spec(build)
    spec["phases"]["build"]["commands"].append("rm -rf /")
    assert build.build_commands == ["gatsby build"]


class TestInvalidationBuildSpec:
  """Test the cache invalidation buildspec."""

  def test_default_command(self) -> None:
    assert invalidation_command(["/*"]) == (
      'aws cloudfront create-invalidation --distribution-id ${CLOUDFRONT_ID} --paths "/*"'
    )

  def test_multiple_paths(self) -> None:
    command = invalidation_command(["/index.html", "/blog/*"])
    assert command.endswith('--paths "/index.html" "/blog/*"')

  def test_single_build_phase(self) -> None:
    spec = invalidation_build_spec(["/*"])
    assert spec["version"] == "0.2"
    assert list(spec["phases"]) == ["build"]
    assert len(spec["phases"]["build"]["commands"]) == 1
    assert "artifacts" not in spec


class TestBuildSpecFromYaml:
  """Glob patterns from YAML reach the artifacts section unchanged."""

  def test_quoted_glob_list_unchanged(self, tmp_path: Path) -> None:
    config_path = tmp_path / "pipelines.yaml"
    config_path.write_text("""
pipelines:
  - name: site
    source: {owner: X, repo: Y}
    build:
      base_directory: ./public
      files: ["**/*"]
""")

    build = Config.from_yaml(config_path).pipelines[0].build

    assert site_build_spec(build)["artifacts"] == {
      "base-directory": "./public",
      "files": ["**/*"],
    }
