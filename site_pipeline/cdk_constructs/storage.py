"""S3 bucket serving the generated site."""

from aws_cdk import RemovalPolicy
from aws_cdk import aws_s3 as s3
from constructs import Construct


class WebsiteBucket(Construct):
  """Publicly readable S3 bucket configured for static website hosting."""

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    bucket_name: str,
    removal_policy: RemovalPolicy = RemovalPolicy.DESTROY,
  ) -> None:
    super().__init__(scope, id)

    self.bucket = s3.Bucket(
      self,
      "Bucket",
      bucket_name=bucket_name.lower(),
      website_index_document="index.html",
      website_error_document="error.html",
      public_read_access=True,
      block_public_access=s3.BlockPublicAccess(
        block_public_acls=False,
        ignore_public_acls=False,
        block_public_policy=False,
        restrict_public_buckets=False,
      ),
      removal_policy=removal_policy,
      auto_delete_objects=removal_policy == RemovalPolicy.DESTROY,
    )
