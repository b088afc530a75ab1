"""Unit tests for the subprocess runner."""

import sys
from pathlib import Path

import pytest

from s3viewer._errors import ProcessError, TransferError
from s3viewer.process import run, stream

PYTHON = [sys.executable, "-c"]


class FailingSink:
    """Sink whose writes always fail."""

    def __init__(self) -> None:
        self.closed = False
        self.writes = 0

    def write(self, data: bytes) -> int:
        self.writes += 1
        raise OSError(28, "No space left on device")

    def close(self) -> None:
        self.closed = True


class TestRun:
    """Tests for run function."""

    def test_returns_stdout(self) -> None:
        out = run(PYTHON, ["import sys; sys.stdout.write('{\"a\": 1}')"])
        assert out == b'{"a": 1}'

    def test_non_zero_exit(self) -> None:
        code = "import sys; sys.stderr.write('Access Denied'); sys.exit(3)"
        with pytest.raises(ProcessError, match="Access Denied") as exc_info:
            run(PYTHON, [code])
        assert exc_info.value.exit_status == 3
        assert exc_info.value.stderr_text == "Access Denied"
        assert exc_info.value.spawn_failure is False

    def test_env_override_wins(self, monkeypatch) -> None:
        monkeypatch.setenv("S3VIEWER_TEST_VAR", "host")
        monkeypatch.setenv("S3VIEWER_TEST_KEEP", "kept")
        code = (
            "import os, sys; "
            "sys.stdout.write(os.environ['S3VIEWER_TEST_VAR'] + ' ' + "
            "os.environ['S3VIEWER_TEST_KEEP'])"
        )
        out = run(PYTHON, [code], {"S3VIEWER_TEST_VAR": "override"})
        assert out == b"override kept"

    def test_missing_binary(self, tmp_path: Path) -> None:
        missing = str(tmp_path / "no-such-aws")
        with pytest.raises(ProcessError, match="Failed to start") as exc_info:
            run(missing, ["s3api", "list-buckets"])
        assert exc_info.value.spawn_failure is True
        assert exc_info.value.exit_status is None


class TestStream:
    """Tests for stream function."""

    def test_writes_stdout_to_sink(self, tmp_path: Path) -> None:
        dest = tmp_path / "out.csv"
        code = "import sys; sys.stdout.buffer.write(b'a,b\\n1,2\\n')"
        with dest.open("wb") as sink:
            written = stream(PYTHON, [code], None, sink)
            assert sink.closed
        assert written == 8
        assert dest.read_bytes() == b"a,b\n1,2\n"

    def test_preserves_order_across_chunks(self, tmp_path: Path) -> None:
        dest = tmp_path / "big.bin"
        code = "import sys; sys.stdout.buffer.write(bytes(range(256)) * 8192)"
        with dest.open("wb") as sink:
            written = stream(PYTHON, [code], None, sink)
        assert written == 256 * 8192
        assert dest.read_bytes() == bytes(range(256)) * 8192

    def test_large_stderr_does_not_block(self, tmp_path: Path) -> None:
        dest = tmp_path / "out.bin"
        code = (
            "import sys; "
            "sys.stderr.write('w' * 1_000_000); "
            "sys.stdout.buffer.write(b'x' * 1_000_000)"
        )
        with dest.open("wb") as sink:
            written = stream(PYTHON, [code], None, sink)
        assert written == 1_000_000

    def test_non_zero_exit_after_partial_write(self, tmp_path: Path) -> None:
        dest = tmp_path / "partial.csv"
        code = (
            "import sys; sys.stdout.buffer.write(b'a,b\\n'); sys.stdout.flush(); "
            "sys.stderr.write('Access Denied'); sys.exit(2)"
        )
        with dest.open("wb") as sink:
            with pytest.raises(TransferError, match="Access Denied") as exc_info:
                stream(PYTHON, [code], None, sink)
            assert sink.closed
        assert exc_info.value.exit_status == 2
        assert exc_info.value.stderr_text == "Access Denied"

    def test_sink_failure_kills_process(self) -> None:
        sink = FailingSink()
        code = "import sys\nwhile True:\n    sys.stdout.buffer.write(b'x' * 65536)"
        with pytest.raises(TransferError, match="No space left") as exc_info:
            stream(PYTHON, [code], None, sink)
        assert isinstance(exc_info.value.__cause__, OSError)
        assert exc_info.value.exit_status != 0
        assert sink.writes == 1
        assert sink.closed

    def test_missing_binary_closes_sink(self, tmp_path: Path) -> None:
        sink = FailingSink()
        with pytest.raises(ProcessError) as exc_info:
            stream(str(tmp_path / "no-such-aws"), ["s3", "cp"], None, sink)
        assert exc_info.value.spawn_failure is True
        assert sink.closed
        assert sink.writes == 0

    def test_env_overrides_reach_child(self, tmp_path: Path) -> None:
        dest = tmp_path / "env.txt"
        code = "import os, sys; sys.stdout.write(os.environ['AWS_PROFILE'])"
        with dest.open("wb") as sink:
            stream(PYTHON, [code], {"AWS_PROFILE": "analytics"}, sink)
        assert dest.read_text() == "analytics"
