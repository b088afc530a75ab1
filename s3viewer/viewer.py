"""Hand downloaded files over to a viewer."""

from __future__ import annotations

import mimetypes
import os
import shlex
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, TextIO

from s3viewer._errors import ViewerError
from s3viewer.locator import Locator

CONTENT_TYPE_ENV = "S3VIEWER_CONTENT_TYPE"

# mimetypes does not know .tsv everywhere and maps .csv inconsistently
_TABULAR_TYPES = {
    ".csv": "text/csv",
    ".tsv": "text/tab-separated-values",
}


def content_type_for(locator: Locator) -> str:
    """Guess the content type of an object from its key."""
    suffix = Path(locator.basename).suffix.lower()
    if suffix in _TABULAR_TYPES:
        return _TABULAR_TYPES[suffix]
    guessed, _ = mimetypes.guess_type(locator.basename)
    return guessed or "text/plain"


@dataclass
class ViewHandle:
    """An opened view of a downloaded file."""

    path: Path
    content_type: str
    pid: int | None = None


class Viewer(Protocol):
    def open(self, path: Path, content_type: str) -> ViewHandle: ...


class CommandViewer:
    """Launches a command with the file path as its last argument.

    The command is not waited on. The content type is exported as
    S3VIEWER_CONTENT_TYPE for viewers that cannot sniff it.
    """

    def __init__(self, command: str) -> None:
        try:
            self.argv = shlex.split(command)
        except ValueError as e:
            raise ViewerError(f"Invalid viewer command {command!r}: {e}") from e
        if not self.argv:
            raise ViewerError("Viewer command is empty")

    def open(self, path: Path, content_type: str) -> ViewHandle:
        env = dict(os.environ)
        env[CONTENT_TYPE_ENV] = content_type
        try:
            proc = subprocess.Popen([*self.argv, str(path)], env=env)
        except OSError as e:
            raise ViewerError(f"Failed to start viewer '{self.argv[0]}': {e}") from e
        return ViewHandle(path=path, content_type=content_type, pid=proc.pid)


class PathViewer:
    """Prints where the file was saved; used when no viewer is configured."""

    def __init__(self, stdout: TextIO | None = None) -> None:
        self.stdout = stdout or sys.stdout

    def open(self, path: Path, content_type: str) -> ViewHandle:
        self.stdout.write(f"{path} ({content_type})\n")
        self.stdout.flush()
        return ViewHandle(path=path, content_type=content_type)


def get_viewer(command: str) -> Viewer:
    """Return a CommandViewer for command, or a PathViewer if it is blank."""
    if command.strip():
        return CommandViewer(command)
    return PathViewer()
