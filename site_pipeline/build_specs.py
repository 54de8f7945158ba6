"""Buildspec documents for the CodeBuild projects used by the pipeline."""

from typing import Any

from site_pipeline.config import BuildConfig

BUILDSPEC_VERSION = "0.2"
DISTRIBUTION_ID_VARIABLE = "CLOUDFRONT_ID"


def site_build_spec(build: BuildConfig) -> dict[str, Any]:
  """Buildspec that installs the site generator and builds the site.

  Install commands are emitted in the configured order, unchanged.
  """
  install: dict[str, Any] = {"commands": list(build.install_commands)}
  if build.runtime_versions:
    install = {"runtime-versions": dict(build.runtime_versions), **install}

  return {
    "version": BUILDSPEC_VERSION,
    "phases": {
      "install": install,
      "build": {"commands": list(build.build_commands)},
    },
    "artifacts": {
      "base-directory": build.base_directory,
      "files": list(build.files),
    },
  }


def invalidation_command(paths: list[str]) -> str:
  """CLI call that invalidates the given paths on the bound distribution."""
  quoted = " ".join(f'"{path}"' for path in paths)
  return (
    f"aws cloudfront create-invalidation "
    f"--distribution-id ${{{DISTRIBUTION_ID_VARIABLE}}} --paths {quoted}"
  )


def invalidation_build_spec(paths: list[str]) -> dict[str, Any]:
  """Buildspec that issues a single CloudFront invalidation request."""
  return {
    "version": BUILDSPEC_VERSION,
    "phases": {
      "build": {"commands": [invalidation_command(paths)]},
    },
  }
