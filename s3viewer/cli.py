"""Command line interface for s3viewer."""

import argparse
import logging
import sys
from collections.abc import Sequence

from s3viewer._errors import ConfigError, S3ViewerError
from s3viewer.config import BACKENDS, S3ViewerConfig, build_env, load_config
from s3viewer.discovery import list_containers, list_keys
from s3viewer.orchestrator import RetrievalState, Retriever, on_startup
from s3viewer.store import get_store


def _apply_overrides(args: argparse.Namespace, config: S3ViewerConfig) -> None:
    """Apply command line overrides to config."""
    if args.profile:
        config.aws.profile = args.profile
    if args.region:
        config.aws.region = args.region
    if args.backend:
        config.aws.backend = args.backend
    if args.log_level:
        config.logging.level = args.log_level


def _load_config(args: argparse.Namespace) -> S3ViewerConfig:
    """Load configuration and apply command line overrides."""
    try:
        config = load_config()
    except ConfigError as e:
        print(f"Error: Failed to load configuration: {e}", file=sys.stderr)
        sys.exit(1)

    _apply_overrides(args, config)
    return config


def _handle_open(args: argparse.Namespace, config: S3ViewerConfig) -> None:
    """Handle the 'open' command."""
    try:
        retriever = Retriever(config)
    except S3ViewerError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    result = retriever.retrieve(locator=args.locator, discover=args.discover)
    if result.state is RetrievalState.FAILED:
        sys.exit(1)


def _handle_buckets(args: argparse.Namespace, config: S3ViewerConfig) -> None:
    """Handle the 'buckets' command."""
    try:
        names = list_containers(build_env(config), get_store(config))
    except S3ViewerError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    for name in names:
        print(name)


def _handle_keys(args: argparse.Namespace, config: S3ViewerConfig) -> None:
    """Handle the 'keys' command."""
    try:
        keys = list_keys(args.bucket, build_env(config), get_store(config))
    except S3ViewerError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if not keys:
        print(f"No objects found in {args.bucket}.", file=sys.stderr)
    for key in keys:
        print(key)


def _handle_startup(args: argparse.Namespace) -> None:
    """Handle the 'startup' command.

    Nothing is reported and the exit status is 0 whatever happens, including
    unreadable configuration.
    """
    try:
        config = load_config()
        _apply_overrides(args, config)
        on_startup(Retriever(config))
    except Exception as e:
        logging.getLogger("s3viewer").debug(f"Startup hook failed: {e}")


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point for s3viewer."""
    parser = argparse.ArgumentParser(
        prog="s3viewer",
        description="Download an S3 object and open it in a viewer",
    )
    parser.add_argument("--profile", default=None, help="AWS profile to use")
    parser.add_argument("--region", default=None, help="AWS region to use")
    parser.add_argument(
        "--backend",
        choices=BACKENDS,
        default=None,
        help="Use the AWS CLI ('cli') or boto3 ('sdk')",
    )
    parser.add_argument(
        "--log-level", default=None, help="Log level (default: WARNING)"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # open parser
    open_parser = subparsers.add_parser("open", help="Download and open an S3 object")
    open_parser.add_argument(
        "locator", nargs="?", default=None, help="Object URL, e.g. s3://bucket/key"
    )
    open_parser.add_argument(
        "--discover",
        action="store_true",
        help="Pick the bucket and key interactively",
    )

    # buckets parser
    subparsers.add_parser("buckets", help="List buckets")

    # keys parser
    keys_parser = subparsers.add_parser("keys", help="List keys in a bucket")
    keys_parser.add_argument("bucket", help="Bucket name")

    # startup parser
    subparsers.add_parser(
        "startup",
        help="Open the default object if auto_run_on_startup is enabled",
    )

    args = parser.parse_args(argv)
    command = args.command
    if command == "startup":
        _handle_startup(args)
        return

    config = _load_config(args)

    if command == "open":
        _handle_open(args, config)
    elif command == "buckets":
        _handle_buckets(args, config)
    elif command == "keys":
        _handle_keys(args, config)
    else:
        parser.print_help()
        sys.exit(1)
