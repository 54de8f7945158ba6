"""CDK stacks for static site delivery."""

from .pipeline_stack import SitePipelineStack

__all__ = ["SitePipelineStack"]
