"""CDK stack for a single static site and its delivery pipeline."""

from typing import Any

import aws_cdk as cdk
from constructs import Construct

from site_pipeline.cdk_constructs import StaticSitePipelineConstruct
from site_pipeline.config import PipelineConfig


class SitePipelineStack(cdk.Stack):
  """Stack for a static site delivered by CodePipeline.

  Without a pipeline configuration the stack is an empty scaffold.
  """

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    pipeline_config: PipelineConfig | None = None,
    **kwargs: Any,
  ) -> None:
    super().__init__(scope, id, **kwargs)

    self.site: StaticSitePipelineConstruct | None = None
    if pipeline_config is None:
      return

    self.site = StaticSitePipelineConstruct(
      self,
      "Site",
      pipeline_config=pipeline_config,
    )

    # Tag resources with source info
    cdk.Tags.of(self).add("Project", "static-site-pipelines")
    cdk.Tags.of(self).add("Pipeline", pipeline_config.name)
    cdk.Tags.of(self).add(
      "SourceRepository", f"{pipeline_config.source.owner}/{pipeline_config.source.repo}"
    )
