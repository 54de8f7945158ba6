#!/usr/bin/env python3
"""Inspect, start, or recover a static site delivery pipeline."""

import argparse
import sys
import time
from typing import Any

import boto3
from botocore.exceptions import ClientError


def stage_states(pipeline_name: str, codepipeline: Any) -> list[tuple[str, str]]:
  """Return (stage name, latest status) pairs in pipeline order."""
  response = codepipeline.get_pipeline_state(name=pipeline_name)
  return [
    (
      stage["stageName"],
      stage.get("latestExecution", {}).get("status", "NotStarted"),
    )
    for stage in response.get("stageStates", [])
  ]


def in_progress_execution(pipeline_name: str, codepipeline: Any) -> str | None:
  """Return the id of an execution still running, if any."""
  response = codepipeline.list_pipeline_executions(
    pipelineName=pipeline_name,
    maxResults=10,
  )
  for summary in response.get("pipelineExecutionSummaries", []):
    if summary.get("status") == "InProgress":
      return str(summary["pipelineExecutionId"])
  return None


def start_execution(pipeline_name: str, codepipeline: Any) -> str:
  """Start a new execution unless one is already running.

  Only one execution per pipeline is started at a time, so two releases
  never publish to the shared bucket concurrently.

  Args:
    pipeline_name: CodePipeline pipeline name
    codepipeline: boto3 CodePipeline client

  Returns:
    The new pipeline execution id

  Raises:
    RuntimeError: If an execution is already in progress
  """
  running = in_progress_execution(pipeline_name, codepipeline)
  if running:
    raise RuntimeError(f"Execution {running} is still in progress for {pipeline_name}")

  response = codepipeline.start_pipeline_execution(name=pipeline_name)
  return str(response["pipelineExecutionId"])


def invalidate(distribution_id: str, paths: list[str], cloudfront: Any) -> str:
  """Issue a CloudFront invalidation and return its id."""
  response = cloudfront.create_invalidation(
    DistributionId=distribution_id,
    InvalidationBatch={
      "Paths": {"Quantity": len(paths), "Items": paths},
      "CallerReference": str(time.time()),
    },
  )
  return str(response["Invalidation"]["Id"])


def main() -> None:
  """Main entry point."""
  parser = argparse.ArgumentParser(description="Operate a static site delivery pipeline")
  parser.add_argument(
    "--region",
    default="us-east-1",
    help="AWS region (default: us-east-1)",
  )
  subparsers = parser.add_subparsers(dest="command", required=True)

  status_parser = subparsers.add_parser("status", help="Show the latest status of each stage")
  status_parser.add_argument("pipeline_name", help="Pipeline name (e.g., SitePipeline-blog-pipeline)")

  start_parser = subparsers.add_parser("start", help="Start an execution if none is running")
  start_parser.add_argument("pipeline_name", help="Pipeline name (e.g., SitePipeline-blog-pipeline)")

  invalidate_parser = subparsers.add_parser("invalidate", help="Invalidate the CloudFront cache")
  invalidate_parser.add_argument("distribution_id", help="CloudFront distribution ID")
  invalidate_parser.add_argument(
    "--path",
    action="append",
    dest="paths",
    help="Path to invalidate (repeatable, default: /*)",
  )

  args = parser.parse_args()

  try:
    if args.command == "status":
      codepipeline = boto3.client("codepipeline", region_name=args.region)
      for stage_name, status in stage_states(args.pipeline_name, codepipeline):
        print(f"{stage_name:<20} {status}")
    elif args.command == "start":
      codepipeline = boto3.client("codepipeline", region_name=args.region)
      execution_id = start_execution(args.pipeline_name, codepipeline)
      print(f"✓ Started execution {execution_id}")
    else:
      cloudfront = boto3.client("cloudfront")
      invalidation_id = invalidate(args.distribution_id, args.paths or ["/*"], cloudfront)
      print(f"✓ Created invalidation {invalidation_id}")
  except (ClientError, RuntimeError) as e:
    print(f"Error: {e}", file=sys.stderr)
    sys.exit(1)


if __name__ == "__main__":
  main()
