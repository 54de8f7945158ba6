"""Unit tests for the pipeline operator script."""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add scripts to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "scripts"))

from pipeline_runs import (  # noqa: E402
  in_progress_execution,
  invalidate,
  stage_states,
  start_execution,
)


@pytest.fixture
def codepipeline() -> MagicMock:
  """Create a mock CodePipeline client with no running executions."""
  client = MagicMock()
  client.list_pipeline_executions.return_value = {
    "pipelineExecutionSummaries": [
      {"pipelineExecutionId": "exec-2", "status": "Succeeded"},
      {"pipelineExecutionId": "exec-1", "status": "Failed"},
    ]
  }
  client.start_pipeline_execution.return_value = {"pipelineExecutionId": "exec-3"}
  return client


class TestStageStates:
  """Tests for stage_states."""

  def test_reports_stages_in_order(self, codepipeline: MagicMock) -> None:
    codepipeline.get_pipeline_state.return_value = {
      "stageStates": [
        {"stageName": "Source", "latestExecution": {"status": "Succeeded"}},
        {"stageName": "Build", "latestExecution": {"status": "Failed"}},
        {"stageName": "Deploy"},
        {"stageName": "CacheInvalidation"},
      ]
    }

    states = stage_states("site-pipeline", codepipeline)

    codepipeline.get_pipeline_state.assert_called_once_with(name="site-pipeline")
    assert states == [
      ("Source", "Succeeded"),
      ("Build", "Failed"),
      ("Deploy", "NotStarted"),
      ("CacheInvalidation", "NotStarted"),
    ]


class TestStartExecution:
  """Tests for single-flight execution starts."""

  def test_starts_when_idle(self, codepipeline: MagicMock) -> None:
    execution_id = start_execution("site-pipeline", codepipeline)

    assert execution_id == "exec-3"
    codepipeline.start_pipeline_execution.assert_called_once_with(name="site-pipeline")

  def test_refuses_while_running(self, codepipeline: MagicMock) -> None:
    codepipeline.list_pipeline_executions.return_value = {
      "pipelineExecutionSummaries": [
        {"pipelineExecutionId": "exec-2", "status": "InProgress"},
      ]
    }

    with pytest.raises(RuntimeError, match="exec-2"):
      start_execution("site-pipeline", codepipeline)

    codepipeline.start_pipeline_execution.assert_not_called()

  def test_no_history(self, codepipeline: MagicMock) -> None:
    codepipeline.list_pipeline_executions.return_value = {}
    assert in_progress_execution("site-pipeline", codepipeline) is None


class TestInvalidate:
  """Tests for manual cache invalidation."""

  def test_creates_invalidation(self) -> None:
    cloudfront = MagicMock()
    cloudfront.create_invalidation.return_value = {"Invalidation": {"Id": "I123"}}

    invalidation_id = invalidate("E1ABC", ["/*"], cloudfront)

    assert invalidation_id == "I123"
    kwargs = cloudfront.create_invalidation.call_args.kwargs
    assert kwargs["DistributionId"] == "E1ABC"
    assert kwargs["InvalidationBatch"]["Paths"] == {"Quantity": 1, "Items": ["/*"]}
    assert kwargs["InvalidationBatch"]["CallerReference"]
