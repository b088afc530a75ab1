"""Shared test utilities."""

import os
import stat
import sys
import textwrap
from pathlib import Path

import pytest

from s3viewer.viewer import ViewHandle

FAKE_AWS_SCRIPT = textwrap.dedent(
    '''
    """Stand-in for the aws CLI driven by FAKE_AWS_* environment variables."""
    import json
    import os
    import sys

    args = sys.argv[1:]
    log = os.environ.get("FAKE_AWS_LOG")
    if log:
        with open(log, "a") as f:
            record = {
                "args": args,
                "profile": os.environ.get("AWS_PROFILE"),
                "region": os.environ.get("AWS_REGION"),
            }
            f.write(json.dumps(record) + "\\n")

    if args[:2] == ["s3", "cp"]:
        sys.stdout.buffer.write(os.environ.get("FAKE_AWS_BODY", "").encode())
        sys.stdout.flush()
        sys.stderr.write(os.environ.get("FAKE_AWS_STDERR", ""))
        sys.exit(int(os.environ.get("FAKE_AWS_EXIT", "0")))

    if args[:2] == ["s3api", "list-buckets"]:
        sys.stdout.write(os.environ.get("FAKE_AWS_BUCKETS", '{"Buckets": []}'))
        sys.exit(0)

    if args[:2] == ["s3api", "list-objects-v2"]:
        bucket = args[args.index("--bucket") + 1]
        listing = json.loads(os.environ.get("FAKE_AWS_OBJECTS", "{}"))
        if bucket not in listing:
            sys.stderr.write("An error occurred (NoSuchBucket)")
            sys.exit(254)
        sys.stdout.write(json.dumps(listing[bucket]))
        sys.exit(0)

    sys.stderr.write("unknown command")
    sys.exit(252)
    '''
)


@pytest.fixture(autouse=True)
def clean_aws_env():
    """Remove AWS_ENDPOINT_URL to prevent tests from hitting LocalStack."""
    original = os.environ.get("AWS_ENDPOINT_URL")
    os.environ.pop("AWS_ENDPOINT_URL", None)
    yield
    if original:
        os.environ["AWS_ENDPOINT_URL"] = original


@pytest.fixture
def fake_aws(tmp_path: Path) -> list[str]:
    """Command prefix that runs a scripted aws CLI stand-in."""
    script = tmp_path / "fake_aws.py"
    script.write_text(FAKE_AWS_SCRIPT)
    script.chmod(script.stat().st_mode | stat.S_IEXEC)
    return [sys.executable, str(script)]


class FakeStore:
    """In-memory ObjectStore recording its calls."""

    def __init__(
        self,
        buckets=None,
        objects=None,
        chunks=(),
        error: Exception | None = None,
    ) -> None:
        self.buckets = buckets if buckets is not None else {"Buckets": []}
        self.objects = objects or {}
        self.chunks = list(chunks)
        self.error = error
        self.list_objects_calls: list[str] = []
        self.stream_calls: list[tuple] = []

    def list_buckets(self, env):
        return self.buckets

    def list_objects(self, bucket, env):
        self.list_objects_calls.append(bucket)
        return self.objects.get(bucket, {})

    def stream_object(self, locator, sink, env):
        self.stream_calls.append((locator, dict(env)))
        written = 0
        for chunk in self.chunks:
            sink.write(chunk)
            sink.flush()
            written += len(chunk)
        sink.close()
        if self.error is not None:
            raise self.error
        return written


class FakePrompter:
    """Prompter with scripted answers."""

    def __init__(self, picks=(), answers=()) -> None:
        self.picks = list(picks)
        self.answers = list(answers)
        self.pick_calls: list[tuple[list[str], str]] = []
        self.asked: list[str] = []
        self.infos: list[str] = []
        self.errors: list[str] = []

    def pick(self, options, placeholder):
        self.pick_calls.append((list(options), placeholder))
        return self.picks.pop(0) if self.picks else None

    def ask(self, message):
        self.asked.append(message)
        return self.answers.pop(0) if self.answers else None

    def info(self, message):
        self.infos.append(message)

    def error(self, message):
        self.errors.append(message)


class FakeViewer:
    """Viewer recording what it was asked to open."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.opened: list[tuple[Path, str, bytes]] = []

    def open(self, path, content_type):
        if self.error is not None:
            raise self.error
        self.opened.append((path, content_type, Path(path).read_bytes()))
        return ViewHandle(path=path, content_type=content_type)
