"""CloudFront distribution in front of the website bucket."""

from aws_cdk import aws_cloudfront as cloudfront
from aws_cdk import aws_cloudfront_origins as origins
from aws_cdk import aws_s3 as s3
from constructs import Construct


class CloudFrontDistribution(Construct):
  """CloudFront distribution with the bucket's static website endpoint as origin."""

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    bucket: s3.IBucket,
  ) -> None:
    super().__init__(scope, id)

    self.distribution = cloudfront.Distribution(
      self,
      "Distribution",
      default_behavior=cloudfront.BehaviorOptions(
        origin=origins.S3StaticWebsiteOrigin(bucket),
        viewer_protocol_policy=cloudfront.ViewerProtocolPolicy.REDIRECT_TO_HTTPS,
        origin_request_policy=cloudfront.OriginRequestPolicy.ALL_VIEWER,
      ),
    )
