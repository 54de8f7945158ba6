"""Composite construct for a continuously delivered static website."""

from aws_cdk import CfnOutput, Stack
from constructs import Construct

from site_pipeline.config import PipelineConfig

from .distribution import CloudFrontDistribution
from .invalidation import CacheInvalidationProject
from .pipeline import DeliveryPipeline
from .site_build import SiteBuildProject
from .storage import WebsiteBucket


class StaticSitePipelineConstruct(Construct):
  """Static website plus the pipeline that publishes it.

  Creates:
  - S3 bucket for the generated site (public website hosting)
  - CloudFront distribution using the bucket as origin
  - CodeBuild project running the site generator
  - CodeBuild project invalidating the CloudFront cache
  - CodePipeline: Source -> Build -> Deploy -> CacheInvalidation
  """

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    pipeline_config: PipelineConfig,
  ) -> None:
    super().__init__(scope, id)

    # Get the stack name for resource prefixing
    stack_name = Stack.of(self).stack_name

    self.bucket = WebsiteBucket(
      self,
      f"{stack_name}-website-bucket",
      bucket_name=f"{stack_name}-website-bucket",
      removal_policy=pipeline_config.removal_policy,
    )

    self.distribution = CloudFrontDistribution(
      self,
      f"{stack_name}-distribution",
      bucket=self.bucket.bucket,
    )

    self.site_build = SiteBuildProject(
      self,
      f"{stack_name}-site-build",
      build=pipeline_config.build,
      resource_prefix=stack_name,
    )

    self.invalidation = CacheInvalidationProject(
      self,
      f"{stack_name}-cache-invalidation",
      distribution=self.distribution.distribution,
      invalidation=pipeline_config.invalidation,
      resource_prefix=stack_name,
    )

    self.pipeline = DeliveryPipeline(
      self,
      f"{stack_name}-pipeline",
      source=pipeline_config.source,
      bucket=self.bucket.bucket,
      build_project=self.site_build.project,
      invalidation_project=self.invalidation.project,
      restart_execution_on_update=pipeline_config.restart_execution_on_update,
      resource_prefix=stack_name,
    )

    # Outputs
    CfnOutput(
      self,
      "BucketWebsiteURL",
      value=self.bucket.bucket.bucket_website_url,
      description="Bucket Website URL",
    )
    CfnOutput(
      self,
      "CloudFrontURL",
      value=self.distribution.distribution.distribution_domain_name,
      description="CloudFront URL",
    )
