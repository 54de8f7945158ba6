"""Stage and action layout of the site delivery pipeline.

The pipeline is a fixed, linear sequence of single-action stages. Actions
belong to a closed set of kinds; artifacts are referenced by name and must be
produced by a strictly earlier stage than the one consuming them.
"""

import enum
from dataclasses import dataclass

SOURCE_ARTIFACT = "Source"
BUILD_OUTPUT_ARTIFACT = "BuildOutput"


class ActionKind(enum.Enum):
  """Kinds of work a pipeline action can perform."""

  CHECKOUT = "source-checkout"
  BUILD = "build"
  DEPLOY = "deploy"
  INVALIDATE = "custom-build"


class WiringError(ValueError):
  """Raised when stages reference artifacts that are not available to them."""


@dataclass(frozen=True)
class ActionPlan:
  """A single action with its artifact bindings."""

  kind: ActionKind
  name: str
  inputs: tuple[str, ...] = ()
  outputs: tuple[str, ...] = ()
  run_order: int = 1


@dataclass(frozen=True)
class StagePlan:
  """A named stage and the actions it runs."""

  name: str
  actions: tuple[ActionPlan, ...]


def delivery_plan() -> tuple[StagePlan, ...]:
  """Return the Source -> Build -> Deploy -> CacheInvalidation layout."""
  return (
    StagePlan(
      "Source",
      (ActionPlan(ActionKind.CHECKOUT, "Checkout", outputs=(SOURCE_ARTIFACT,)),),
    ),
    StagePlan(
      "Build",
      (
        ActionPlan(
          ActionKind.BUILD,
          "Build-Site",
          inputs=(SOURCE_ARTIFACT,),
          outputs=(BUILD_OUTPUT_ARTIFACT,),
        ),
      ),
    ),
    StagePlan(
      "Deploy",
      (ActionPlan(ActionKind.DEPLOY, "DeployWebsite", inputs=(BUILD_OUTPUT_ARTIFACT,)),),
    ),
    StagePlan(
      "CacheInvalidation",
      # Build output is only a completion signal here, its files are not read
      (
        ActionPlan(
          ActionKind.INVALIDATE, "Invalidate-Cache", inputs=(BUILD_OUTPUT_ARTIFACT,)
        ),
      ),
    ),
  )


def stage_names(stages: tuple[StagePlan, ...]) -> list[str]:
  """Return stage names in execution order."""
  return [stage.name for stage in stages]


def check_wiring(stages: tuple[StagePlan, ...]) -> None:
  """Verify every consumed artifact was produced by a strictly earlier stage.

  Raises:
    WiringError: On empty or duplicate stages, forward or self references,
      or an artifact produced more than once.
  """
  if not stages:
    raise WiringError("Pipeline has no stages")

  available: set[str] = set()
  names: set[str] = set()

  for stage in stages:
    if stage.name in names:
      raise WiringError(f"Duplicate stage name: {stage.name}")
    names.add(stage.name)
    if not stage.actions:
      raise WiringError(f"Stage {stage.name} has no actions")

    produced: set[str] = set()
    for action in stage.actions:
      if action.run_order < 1:
        raise WiringError(f"Action {action.name} has run order {action.run_order}")
      for artifact in action.inputs:
        if artifact not in available:
          raise WiringError(
            f"Action {action.name} in stage {stage.name} consumes {artifact!r}, "
            "which no earlier stage produces"
          )
      for artifact in action.outputs:
        if artifact in available or artifact in produced:
          raise WiringError(f"Artifact {artifact!r} is produced more than once")
        produced.add(artifact)

    # Outputs only become visible to later stages
    available |= produced
