"""AWS CLI backed object store."""

from __future__ import annotations

import json
import shlex
import sys
from collections.abc import Mapping, Sequence
from typing import Any, BinaryIO

from s3viewer import process
from s3viewer._errors import ConfigError, DiscoveryError, ProcessError
from s3viewer.locator import Locator
from s3viewer.store.protocol import ObjectStore


def aws_command_name() -> str:
    """Return the AWS CLI executable name for this platform."""
    return "aws.exe" if sys.platform == "win32" else "aws"


class AwsCliStore(ObjectStore):
    """Object store that runs the ``aws`` command line tool.

    ``command`` may be a shell-style string or an argv prefix, e.g.
    ``"aws-vault exec dev -- aws"``.
    """

    def __init__(self, command: str | Sequence[str] | None = None) -> None:
        if not command:
            self.command = [aws_command_name()]
        elif isinstance(command, str):
            try:
                self.command = shlex.split(command)
            except ValueError as e:
                raise ConfigError(f"Invalid AWS CLI command {command!r}: {e}") from e
        else:
            self.command = list(command)

    def _query(self, args: list[str], env: Mapping[str, str]) -> Any:
        try:
            raw = process.run(self.command, args, env)
        except ProcessError as e:
            if e.spawn_failure:
                raise
            raise DiscoveryError(f"AWS CLI error: {e.stderr_text or e}") from e

        text = raw.decode("utf-8", errors="replace").strip()
        if not text:
            return {}
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise DiscoveryError(f"Could not decode AWS CLI response: {e}") from e

    def list_buckets(self, env: Mapping[str, str]) -> Any:
        return self._query(["s3api", "list-buckets", "--output", "json"], env)

    def list_objects(self, bucket: str, env: Mapping[str, str]) -> Any:
        return self._query(
            [
                "s3api",
                "list-objects-v2",
                "--bucket",
                bucket,
                "--no-paginate",
                "--output",
                "json",
            ],
            env,
        )

    def stream_object(
        self, locator: Locator, sink: BinaryIO, env: Mapping[str, str]
    ) -> int:
        args = ["s3", "cp", locator.uri, "-", "--no-progress", "--only-show-errors"]
        return process.stream(self.command, args, env, sink)
