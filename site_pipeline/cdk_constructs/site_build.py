"""CodeBuild project that runs the static site generator."""

from aws_cdk import aws_codebuild as codebuild
from constructs import Construct

from site_pipeline.build_specs import site_build_spec
from site_pipeline.config import BuildConfig


class SiteBuildProject(Construct):
  """Pipeline project that installs the generator toolchain and builds the site."""

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    build: BuildConfig,
    resource_prefix: str = "",
  ) -> None:
    super().__init__(scope, id)

    self.project = codebuild.PipelineProject(
      self,
      "Project",
      project_name=f"{resource_prefix}-site-build" if resource_prefix else None,
      build_spec=codebuild.BuildSpec.from_object(site_build_spec(build)),
      environment=codebuild.BuildEnvironment(
        build_image=getattr(codebuild.LinuxBuildImage, build.build_image),
      ),
    )
