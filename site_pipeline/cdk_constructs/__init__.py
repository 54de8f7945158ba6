"""CDK constructs for the static site delivery pipeline."""

from .distribution import CloudFrontDistribution
from .invalidation import CacheInvalidationProject
from .pipeline import DeliveryPipeline
from .site_build import SiteBuildProject
from .static_site import StaticSitePipelineConstruct
from .storage import WebsiteBucket

__all__ = [
  "CacheInvalidationProject",
  "CloudFrontDistribution",
  "DeliveryPipeline",
  "SiteBuildProject",
  "StaticSitePipelineConstruct",
  "WebsiteBucket",
]
