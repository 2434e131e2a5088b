"""Command-line interface for Dockerize."""
import argparse
import os
import sys
from typing import List, Optional

from dotenv import load_dotenv

from .common.models import NEAREST_NPMRC
from .config import DockerizeConfig
from .core.dockerizer import Dockerizer
from .errors import DockerizeError
from .log import setup_logging

# Options that have no effect when a custom Dockerfile is used.
DOCKERFILE_CONFLICTS = ("node_version", "ubuntu_version", "env", "npmrc")


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the `dockerize` command."""
    parser = argparse.ArgumentParser(
        prog="dockerize",
        description="Build a Docker image for the Node.js package in a directory.",
        epilog=(
            "examples:\n"
            "  dockerize\n"
            "      Dockerize the project in the current directory using default options.\n"
            '  dockerize --label="foo=bar" --label="baz=qux" --extra-args="--squash"\n'
            "      Apply two labels and pass --squash to docker build."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "cwd",
        nargs="?",
        default=None,
        help="Directory of the project to Dockerize. [Default: current directory]",
    )

    optional = parser.add_argument_group("optional arguments")
    optional.add_argument("--tag", help="Tag to use for the image. [Default: <scope>/<name>:<version>]")
    optional.add_argument("--node-version", help="Node version to install in the image. [Default: LTS]")
    optional.add_argument("--ubuntu-version", help="Ubuntu version to use as a base image.")
    optional.add_argument(
        "--label",
        action="append",
        dest="labels",
        metavar="KEY=VALUE",
        help="Label to apply to the image. May be used multiple times.",
    )
    optional.add_argument(
        "--env",
        action="append",
        metavar="KEY=VALUE",
        help="Environment variable to set in the image. May be used multiple times.",
    )
    optional.add_argument(
        "--extra-args",
        help='Extra arguments to pass to "docker build". Treated as a single string and should be quoted.',
    )
    optional.add_argument(
        "--npmrc",
        help=f"Path to an .npmrc file to use when installing packages, or '{NEAREST_NPMRC}' to use the closest one.",
    )
    optional.add_argument(
        "--push",
        action="store_true",
        default=False,
        help="Run `docker push` after building the image.",
    )
    optional.add_argument(
        "--verbosity",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        default=None,
        help="Set logging level. DEBUG also streams docker output. [Default: $LOG_LEVEL or INFO]",
    )

    advanced = parser.add_argument_group("advanced")
    advanced.add_argument(
        "--dockerfile",
        help="Path to a custom Dockerfile to use. --node-version, --ubuntu-version, --env and --npmrc are moot with this option.",
    )

    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments and reject conflicting options."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.dockerfile:
        conflicting = [name for name in DOCKERFILE_CONFLICTS if getattr(args, name)]
        if conflicting:
            flags = ", ".join("--" + name.replace("_", "-") for name in conflicting)
            parser.error(f"--dockerfile cannot be combined with {flags}")

    return args


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the CLI."""
    load_dotenv()
    args = parse_args(argv)

    config = DockerizeConfig()
    if args.verbosity:
        config = config.model_copy(update={"log_level": args.verbosity})
    logger = setup_logging(config.log_level)

    options = {
        "cwd": args.cwd or os.getcwd(),
        "tag": args.tag,
        "node_version": args.node_version,
        "ubuntu_version": args.ubuntu_version,
        "labels": args.labels,
        "env": args.env,
        "extra_args": args.extra_args,
        "dockerfile": args.dockerfile,
        "npmrc": args.npmrc,
        "push": args.push,
    }

    try:
        Dockerizer(config=config, logger=logger).run(options)
    except KeyboardInterrupt:
        logger.warning("⚠️  Interrupted by user")
        return 130
    except (DockerizeError, OSError) as e:
        logger.error(str(e))
        stderr_tail = getattr(e, "stderr_tail", "")
        if stderr_tail:
            logger.error(stderr_tail)
        logger.debug("Error details:", exc_info=True)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
