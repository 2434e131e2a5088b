import logging
import time
from dataclasses import replace
from typing import Any, Callable, Mapping, Optional, Union

from ..build.context import copy_npmrc, copy_package_lockfile, pack_and_extract_package
from ..build.dockerfile import DockerfileSource, describe_source, resolve_dockerfile_source, write_dockerfile
from ..build.options import validate_options
from ..build.plan import BuildPlan, create_build_plan, split_expression
from ..build.staging import StagingArea
from ..common.command_runner import CommandRunner
from ..common.concurrency import run_phase
from ..common.formatting import format_bytes, format_duration
from ..common.models import BuildRequest, BuildResult, PackageDescriptor
from ..config import DockerizeConfig
from ..package.introspect import describe_package
from ..package.node_versions import get_node_lts_version
from ..runtime.docker import DockerImageBuilder


class Dockerizer:
    """
    Build a Docker image for a Node.js package.

    Pipeline:
        validate options -> introspect package -> compute build plan ->
        [node version | .npmrc | lockfile] -> choose Dockerfile ->
        [npm pack | write Dockerfile] -> docker build ->
        [image size | remove staging area] -> docker push (optional)

    Steps in brackets run concurrently. The staging area is removed on every
    exit path once it has been created.
    """

    def __init__(
        self,
        config: Optional[DockerizeConfig] = None,
        command_runner: Optional[CommandRunner] = None,
        logger: Optional[logging.Logger] = None,
        node_lts_lookup: Optional[Callable[[], str]] = None,
    ):
        self.config = config or DockerizeConfig()
        self.logger = logger or logging.getLogger(__name__)
        self.command_runner = command_runner or CommandRunner(logger=self.logger)
        self.docker = DockerImageBuilder(
            self.command_runner,
            docker_binary=self.config.docker_binary,
            logger=self.logger,
            tail_lines=self.config.stderr_tail_lines,
        )
        self.node_lts_lookup = node_lts_lookup or self._lookup_node_lts

    @property
    def verbose(self) -> bool:
        """Whether tool output should be streamed to the log."""
        return self.logger.isEnabledFor(logging.DEBUG)

    def run(self, options: Union[BuildRequest, Mapping[str, Any]]) -> BuildResult:
        """
        Run the full pipeline for one set of options.

        Args:
            options: A BuildRequest or a mapping of its fields

        Returns:
            BuildResult describing the built (and optionally pushed) image

        Raises:
            ValidationError: Malformed options or an invalid image name
            NotFoundError: Missing package.json, custom Dockerfile, entry point or docker
            ExternalToolError: npm or docker failed
            PushError: docker push failed
            OSError: Filesystem failures while staging
        """
        started = time.time()

        # [1] Validate options and introspect the host package.
        request = validate_options(options)
        self.docker.ensure_available()
        package = describe_package(request.cwd)

        # [2] Compute tag and labels. Invalid tags fail here, before any process runs.
        plan = create_build_plan(request, package, self.config)

        self.logger.info("🐳 Dockerizing package %s.", package.name)
        self.logger.debug("- Package Root: %s", package.root)

        with StagingArea(base_dir=self.config.staging_dir_base, logger=self.logger) as staging:
            self.logger.debug("- Staging Directory: %s", staging.path)

            # [3] Resolve node version, copy .npmrc and lockfile.
            # These two files are not included by `npm pack`, so they are copied explicitly.
            prepared = run_phase(
                "prepare",
                {
                    "node_version": lambda: request.node_version or self.node_lts_lookup(),
                    "npmrc": lambda: copy_npmrc(request.npmrc, request.cwd, staging.npmrc_path),
                    "lockfile": lambda: copy_package_lockfile(package.root, staging.package_dir),
                },
                self.logger,
            )
            has_npmrc = prepared["npmrc"]
            has_lockfile = prepared["lockfile"]
            plan = plan.with_node_version(prepared["node_version"])

            # [4] Decide on a Dockerfile.
            source = resolve_dockerfile_source(
                request.dockerfile,
                request.cwd,
                self.config.template_path,
                lambda: plan.template_data(package.entry, has_lockfile=has_lockfile, has_npmrc=has_npmrc),
            )
            plan = plan.with_dockerfile(staging.dockerfile_path)
            self._log_build_metadata(package, plan, source, has_lockfile)

            # [5] Stage the package files and the Dockerfile.
            run_phase(
                "assemble",
                {
                    "package": lambda: pack_and_extract_package(
                        self.command_runner,
                        package.root,
                        staging.path,
                        npm_binary=self.config.npm_binary,
                        timeout=self.config.pack_timeout,
                        tail_lines=self.config.stderr_tail_lines,
                    ),
                    "dockerfile": lambda: write_dockerfile(source, staging.dockerfile_path),
                },
                self.logger,
            )

            # [6] Build.
            self.logger.info("Building image %s...", plan.tag)
            self.docker.build(
                context_dir=staging.path,
                build_args=plan.build_args(),
                stream_output=self.verbose,
                timeout=self.config.build_timeout,
            )

            # [7] Compute image size and clean up.
            finished = run_phase(
                "finalize",
                {
                    "image_size": lambda: self.docker.image_size(plan.tag, timeout=self.config.inspect_timeout),
                    "cleanup": staging.release,
                },
                self.logger,
            )

        image_size = finished["image_size"]
        build_duration = time.time() - started
        result = BuildResult(
            tag=plan.tag,
            image_size=image_size,
            image_size_display=format_bytes(image_size),
            build_duration=build_duration,
            duration_display=format_duration(build_duration),
            dockerfile_source=source.kind,
            has_lockfile=has_lockfile,
            has_npmrc=has_npmrc,
        )
        self.logger.info("🏁 Built image %s (%s) in %s.", result.tag, result.image_size_display, result.duration_display)

        # [8] Optionally push.
        if not request.push:
            return result

        return self._push(result)

    def _push(self, result: BuildResult) -> BuildResult:
        push_started = time.time()
        self.logger.info("Pushing image %s...", result.tag)
        self.docker.push(result.tag, stream_output=self.verbose, timeout=self.config.push_timeout)
        push_duration = time.time() - push_started
        self.logger.info("🚀 Pushed image %s in %s.", result.tag, format_duration(push_duration))

        return replace(result, pushed=True, push_duration=push_duration)

    def _lookup_node_lts(self) -> str:
        return get_node_lts_version(self.config.node_dist_index_url, timeout=self.config.http_timeout)

    def _log_build_metadata(
        self,
        package: PackageDescriptor,
        plan: BuildPlan,
        source: DockerfileSource,
        has_lockfile: bool,
    ) -> None:
        if plan.extra_args:
            self.logger.debug("- Extra Docker Args: %s", plan.extra_args)
        self.logger.debug(
            '- Docker Command: "%s"',
            " ".join(self.docker.build_command(plan.dockerfile_path.parent, plan.build_args())),
        )

        self.logger.info("- Dockerfile: %s", describe_source(source))
        self.logger.info("- Entrypoint: %s", package.entry)
        self.logger.info("- Node Version: %s", plan.node_version)
        self.logger.info("- Lockfile: %s", str(has_lockfile).lower())

        if plan.env_vars:
            self.logger.info("- Environment Variables:")
            for expression in plan.env_vars:
                key, value = split_expression(expression)
                self.logger.info("  - %s=%s", key, value)

        if plan.labels:
            self.logger.info("- Labels:")
            for expression in plan.labels:
                key, value = split_expression(expression)
                self.logger.info("  - %s: %s", key, value)
