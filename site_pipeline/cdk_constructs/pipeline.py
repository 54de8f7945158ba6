"""CodePipeline wiring checkout, build, deploy and cache invalidation."""

from collections.abc import Callable

from aws_cdk import SecretValue
from aws_cdk import aws_codebuild as codebuild
from aws_cdk import aws_codepipeline as codepipeline
from aws_cdk import aws_codepipeline_actions as cp_actions
from aws_cdk import aws_s3 as s3
from constructs import Construct

from site_pipeline.config import SourceConfig
from site_pipeline.topology import (
  ActionKind,
  ActionPlan,
  StagePlan,
  check_wiring,
  delivery_plan,
)

TRIGGERS = {
  "webhook": cp_actions.GitHubTrigger.WEBHOOK,
  "poll": cp_actions.GitHubTrigger.POLL,
  "none": cp_actions.GitHubTrigger.NONE,
}


class DeliveryPipeline(Construct):
  """Linear pipeline rendered from a stage plan.

  Stages run in plan order and each consumes only artifacts produced by an
  earlier stage. The plan is checked before any CDK resource is created.
  """

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    source: SourceConfig,
    bucket: s3.IBucket,
    build_project: codebuild.IProject,
    invalidation_project: codebuild.IProject,
    stages: tuple[StagePlan, ...] | None = None,
    restart_execution_on_update: bool = True,
    resource_prefix: str = "",
  ) -> None:
    super().__init__(scope, id)

    self.stages = stages if stages is not None else delivery_plan()
    check_wiring(self.stages)

    self._source = source
    self._bucket = bucket
    self._build_project = build_project
    self._invalidation_project = invalidation_project

    self.artifacts: dict[str, codepipeline.Artifact] = {
      name: codepipeline.Artifact(name)
      for stage in self.stages
      for action in stage.actions
      for name in action.outputs
    }

    self.pipeline = codepipeline.Pipeline(
      self,
      "Pipeline",
      pipeline_name=f"{resource_prefix}-pipeline" if resource_prefix else None,
      pipeline_type=codepipeline.PipelineType.V1,
      # No KMS key for the artifact bucket, the pipeline never crosses accounts
      cross_account_keys=False,
      restart_execution_on_update=restart_execution_on_update,
    )

    renderers: dict[ActionKind, Callable[[ActionPlan], codepipeline.IAction]] = {
      ActionKind.CHECKOUT: self._checkout,
      ActionKind.BUILD: self._build,
      ActionKind.DEPLOY: self._deploy,
      ActionKind.INVALIDATE: self._invalidate,
    }
    for stage in self.stages:
      self.pipeline.add_stage(
        stage_name=stage.name,
        actions=[renderers[action.kind](action) for action in stage.actions],
      )

  def _input(self, action: ActionPlan) -> codepipeline.Artifact:
    return self.artifacts[action.inputs[0]]

  def _outputs(self, action: ActionPlan) -> list[codepipeline.Artifact]:
    return [self.artifacts[name] for name in action.outputs]

  def _checkout(self, action: ActionPlan) -> codepipeline.IAction:
    return cp_actions.GitHubSourceAction(
      action_name=action.name,
      owner=self._source.owner,
      repo=self._source.repo,
      branch=self._source.branch,
      oauth_token=SecretValue.secrets_manager(self._source.oauth_secret_name),
      output=self._outputs(action)[0],
      trigger=TRIGGERS[self._source.trigger],
      run_order=action.run_order,
    )

  def _build(self, action: ActionPlan) -> codepipeline.IAction:
    return cp_actions.CodeBuildAction(
      action_name=action.name,
      project=self._build_project,
      input=self._input(action),
      outputs=self._outputs(action),
      run_order=action.run_order,
    )

  def _deploy(self, action: ActionPlan) -> codepipeline.IAction:
    return cp_actions.S3DeployAction(
      action_name=action.name,
      input=self._input(action),
      bucket=self._bucket,
      run_order=action.run_order,
    )

  def _invalidate(self, action: ActionPlan) -> codepipeline.IAction:
    return cp_actions.CodeBuildAction(
      action_name=action.name,
      project=self._invalidation_project,
      input=self._input(action),
      run_order=action.run_order,
    )
