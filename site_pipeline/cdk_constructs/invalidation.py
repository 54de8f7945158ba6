"""CodeBuild project that invalidates the CloudFront cache after a deploy."""

from aws_cdk import Annotations, Stack
from aws_cdk import aws_cloudfront as cloudfront
from aws_cdk import aws_codebuild as codebuild
from aws_cdk import aws_iam as iam
from constructs import Construct

from site_pipeline.build_specs import DISTRIBUTION_ID_VARIABLE, invalidation_build_spec
from site_pipeline.config import InvalidationConfig

# Actions that accept a distribution ARN as resource
DISTRIBUTION_ACTIONS = [
  "cloudfront:CreateInvalidation",
  "cloudfront:GetDistribution*",
  "cloudfront:GetInvalidation",
  "cloudfront:ListInvalidations",
]
# No resource-level permissions exist for this action
LIST_ACTIONS = ["cloudfront:ListDistributions"]


class CacheInvalidationProject(Construct):
  """Pipeline project issuing one invalidation request against the distribution.

  The distribution id is bound as an environment variable. By default the
  role may only touch that distribution; ``policy_scope="wildcard"`` grants
  the same actions on every resource and records a warning.
  """

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    distribution: cloudfront.IDistribution,
    invalidation: InvalidationConfig,
    resource_prefix: str = "",
  ) -> None:
    super().__init__(scope, id)

    self.project = codebuild.PipelineProject(
      self,
      "Project",
      project_name=f"{resource_prefix}-cache-invalidation" if resource_prefix else None,
      build_spec=codebuild.BuildSpec.from_object(
        invalidation_build_spec(invalidation.paths)
      ),
      environment_variables={
        DISTRIBUTION_ID_VARIABLE: codebuild.BuildEnvironmentVariable(
          value=distribution.distribution_id
        ),
      },
    )

    if invalidation.policy_scope == "wildcard":
      self.project.add_to_role_policy(
        iam.PolicyStatement(
          effect=iam.Effect.ALLOW,
          actions=DISTRIBUTION_ACTIONS + LIST_ACTIONS,
          resources=["*"],
        )
      )
      Annotations.of(self).add_warning_v2(
        "site-pipeline:wildcard-invalidation-policy",
        "Cache invalidation role is granted CloudFront actions on all resources; "
        "use policy_scope 'distribution' to limit it to this distribution",
      )
      return

    distribution_arn = Stack.of(self).format_arn(
      service="cloudfront",
      region="",
      resource="distribution",
      resource_name=distribution.distribution_id,
    )
    self.project.add_to_role_policy(
      iam.PolicyStatement(
        effect=iam.Effect.ALLOW,
        actions=DISTRIBUTION_ACTIONS,
        resources=[distribution_arn],
      )
    )
    self.project.add_to_role_policy(
      iam.PolicyStatement(
        effect=iam.Effect.ALLOW,
        actions=LIST_ACTIONS,
        resources=["*"],
      )
    )
