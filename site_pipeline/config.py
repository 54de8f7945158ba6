"""Configuration loader for static-site delivery pipelines."""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from aws_cdk import RemovalPolicy

REMOVAL_POLICIES = {
  "retain": RemovalPolicy.RETAIN,
  "destroy": RemovalPolicy.DESTROY,
}
SOURCE_TRIGGERS = ("webhook", "poll", "none")
POLICY_SCOPES = ("distribution", "wildcard")
BUILD_IMAGES = ("STANDARD_5_0", "STANDARD_6_0", "STANDARD_7_0", "AMAZON_LINUX_2_5")
# Pipeline names become part of stack, bucket and project names
PIPELINE_NAME = re.compile(r"^[a-z][a-z0-9-]{0,29}$")
# Characters that are special inside the double-quoted invalidation command
UNSAFE_PATH_CHARS = re.compile(r'["$`\\\s]')


class ConfigError(ValueError):
  """Raised when a pipeline configuration is invalid."""


def _check_str_list(name: str, value: Any) -> None:
  if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
    raise ConfigError(f"{name} must be a list of strings, got {value!r}")


def _default_install_commands() -> list[str]:
  # Order matters: the generator CLI must exist before the build phase runs it
  return [
    "npm update -g",
    "npm install -g gatsby-cli",
    "npm install -g yarn",
    "yarn",
  ]


@dataclass
class SourceConfig:
  """GitHub repository checked out by the Source stage."""

  owner: str
  repo: str
  branch: str = "master"
  oauth_secret_name: str = "GITHUB_TOKEN_FOR_AWS"  # Secrets Manager secret name
  trigger: str = "webhook"

  def __post_init__(self) -> None:
    for name in ("owner", "repo", "branch", "oauth_secret_name"):
      if not getattr(self, name):
        raise ConfigError(f"source.{name} must not be empty")
    if self.trigger not in SOURCE_TRIGGERS:
      raise ConfigError(
        f"source.trigger must be one of {', '.join(SOURCE_TRIGGERS)}, got {self.trigger!r}"
      )


@dataclass
class BuildConfig:
  """Site generator build executed by the Build stage."""

  runtime_versions: dict[str, str] = field(default_factory=lambda: {"nodejs": "latest"})
  install_commands: list[str] = field(default_factory=_default_install_commands)
  build_commands: list[str] = field(default_factory=lambda: ["gatsby build"])
  base_directory: str = "./public"
  files: list[str] = field(default_factory=lambda: ["**/*"])
  build_image: str = "STANDARD_7_0"

  def __post_init__(self) -> None:
    if not isinstance(self.runtime_versions, dict) or not all(
      isinstance(key, str)
      and isinstance(value, (str, int, float))
      and not isinstance(value, bool)
      for key, value in self.runtime_versions.items()
    ):
      raise ConfigError(
        f"build.runtime_versions must map runtimes to versions, "
        f"got {self.runtime_versions!r}"
      )
    # YAML reads unquoted versions such as 18 as numbers
    self.runtime_versions = {
      key: str(value) for key, value in self.runtime_versions.items()
    }
    for name in ("install_commands", "build_commands", "files"):
      _check_str_list(f"build.{name}", getattr(self, name))
    if not isinstance(self.base_directory, str) or not self.base_directory:
      raise ConfigError("build.base_directory must be a non-empty string")
    if not self.build_commands:
      raise ConfigError("build.build_commands must contain at least one command")
    if not self.files:
      raise ConfigError("build.files must contain at least one pattern")
    if self.build_image not in BUILD_IMAGES:
      raise ConfigError(
        f"build.build_image must be one of {', '.join(BUILD_IMAGES)}, got {self.build_image!r}"
      )


@dataclass
class InvalidationConfig:
  """CloudFront invalidation run by the CacheInvalidation stage."""

  paths: list[str] = field(default_factory=lambda: ["/*"])
  policy_scope: str = "distribution"  # "wildcard" grants on all resources

  def __post_init__(self) -> None:
    _check_str_list("invalidation.paths", self.paths)
    if not self.paths:
      raise ConfigError("invalidation.paths must contain at least one path")
    for path in self.paths:
      if not path.startswith("/"):
        raise ConfigError(f"invalidation path must start with '/': {path!r}")
      if UNSAFE_PATH_CHARS.search(path):
        raise ConfigError(f"invalidation path contains shell metacharacters: {path!r}")
    if self.policy_scope not in POLICY_SCOPES:
      raise ConfigError(
        f"invalidation.policy_scope must be one of {', '.join(POLICY_SCOPES)}, "
        f"got {self.policy_scope!r}"
      )


@dataclass
class PipelineConfig:
  """Configuration for a single site delivery pipeline."""

  name: str
  source: SourceConfig
  build: BuildConfig = field(default_factory=BuildConfig)
  invalidation: InvalidationConfig = field(default_factory=InvalidationConfig)
  region: str = "us-east-1"
  removal_policy: RemovalPolicy = RemovalPolicy.DESTROY
  restart_execution_on_update: bool = True


@dataclass
class Config:
  """Multi-pipeline configuration."""

  pipelines: list[PipelineConfig] = field(default_factory=list)

  @classmethod
  def from_yaml(cls, path: Path | str = "pipelines.yaml") -> "Config":
    """Load configuration from YAML file."""
    with open(path) as f:
      data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
      raise ConfigError(f"Configuration must be a mapping, got {type(data).__name__}")

    defaults = data.get("defaults") or {}
    if not isinstance(defaults, dict):
      raise ConfigError("'defaults' must be a mapping")
    pipeline_entries = data.get("pipelines") or []
    if not isinstance(pipeline_entries, list):
      raise ConfigError("'pipelines' must be a list")

    pipelines: list[PipelineConfig] = []
    seen: set[str] = set()

    for pipeline_data in pipeline_entries:
      if not isinstance(pipeline_data, dict):
        raise ConfigError(f"Pipeline entry must be a mapping, got {pipeline_data!r}")
      pipeline = parse_pipeline(_merge(defaults, pipeline_data))
      if pipeline.name in seen:
        raise ConfigError(f"Duplicate pipeline name: {pipeline.name}")
      seen.add(pipeline.name)
      pipelines.append(pipeline)

    return cls(pipelines=pipelines)


def _merge(defaults: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
  """Merge pipeline settings over defaults, one level deep for nested sections."""
  merged = {**defaults, **overrides}
  for section in ("source", "build", "invalidation"):
    if isinstance(defaults.get(section), dict) and isinstance(overrides.get(section), dict):
      merged[section] = {**defaults[section], **overrides[section]}
  return merged


def parse_pipeline(data: dict[str, Any]) -> PipelineConfig:
  """Build a PipelineConfig from a merged YAML mapping."""
  if "name" not in data:
    raise ConfigError("Pipeline entry is missing 'name'")
  if not PIPELINE_NAME.match(str(data["name"])):
    raise ConfigError(
      f"Pipeline name must be lowercase letters, digits and hyphens: {data['name']!r}"
    )
  source_data = data.get("source")
  if not isinstance(source_data, dict):
    raise ConfigError(f"Pipeline {data['name']!r} is missing a 'source' section")

  build_data = data.get("build") or {}
  invalidation_data = data.get("invalidation") or {}
  for section, value in (("build", build_data), ("invalidation", invalidation_data)):
    if not isinstance(value, dict):
      raise ConfigError(f"Pipeline {data['name']!r}: '{section}' must be a mapping")

  try:
    source = SourceConfig(**source_data)
    build = BuildConfig(**build_data)
    invalidation = InvalidationConfig(**invalidation_data)
  except TypeError as e:
    # Unknown or missing keys in a section
    raise ConfigError(f"Pipeline {data['name']!r}: {e}") from e

  # Convert removal_policy string to enum
  removal_policy_str = str(data.get("removal_policy", "destroy")).lower()
  if removal_policy_str not in REMOVAL_POLICIES:
    # S3 buckets have no snapshot deletion policy
    raise ConfigError(
      f"removal_policy must be one of {', '.join(REMOVAL_POLICIES)}, got {removal_policy_str!r}"
    )

  return PipelineConfig(
    name=data["name"],
    source=source,
    build=build,
    invalidation=invalidation,
    region=data.get("region", "us-east-1"),
    removal_policy=REMOVAL_POLICIES[removal_policy_str],
    restart_execution_on_update=data.get("restart_execution_on_update", True),
  )
