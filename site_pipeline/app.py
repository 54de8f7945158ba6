#!/usr/bin/env python3
"""CDK application entry point for static site delivery pipelines."""

import sys
from pathlib import Path

# Add the project root to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

import aws_cdk as cdk
import boto3

from site_pipeline.config import Config
from site_pipeline.stacks import SitePipelineStack


def get_account_id() -> str:
  """Get AWS account ID from current credentials."""
  sts = boto3.client("sts")
  return str(sts.get_caller_identity()["Account"])


def main() -> None:
  """Create CDK app with a stack for each configured pipeline."""
  app = cdk.App()

  # Load configuration
  config_path = app.node.try_get_context("config") or "pipelines.yaml"
  config = Config.from_yaml(Path(config_path))

  # Get account ID from credentials
  account_id = get_account_id()

  for pipeline in config.pipelines:
    SitePipelineStack(
      app,
      f"SitePipeline-{pipeline.name}",
      pipeline_config=pipeline,
      env=cdk.Environment(
        account=account_id,
        region=pipeline.region,
      ),
      description=(
        f"Delivery pipeline for {pipeline.source.owner}/{pipeline.source.repo}"
        f" ({pipeline.source.branch})"
      ),
    )

  app.synth()


if __name__ == "__main__":
  main()
