"""Subprocess helpers for running the AWS CLI.

Two shapes are supported: ``run`` buffers stdout in memory and is meant for
small JSON responses, ``stream`` copies stdout chunk by chunk into a sink and
is meant for object payloads.
"""

from __future__ import annotations

import os
import subprocess
import threading
from collections.abc import Mapping, Sequence
from typing import IO, BinaryIO

from s3viewer._errors import ProcessError, TransferError

CHUNK_SIZE = 64 * 1024


def _argv(command: str | Sequence[str], args: Sequence[str]) -> list[str]:
    prefix = [command] if isinstance(command, str) else list(command)
    return [*prefix, *args]


def _merged_env(env_overrides: Mapping[str, str] | None) -> dict[str, str]:
    """Current environment with overrides applied on top."""
    env = dict(os.environ)
    if env_overrides:
        env.update(env_overrides)
    return env


def _decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace").strip()


def _spawn_error(argv: list[str], error: OSError) -> ProcessError:
    return ProcessError(
        f"Failed to start '{argv[0]}': {error}",
        stderr_text=str(error),
        spawn_failure=True,
    )


def run(
    command: str | Sequence[str],
    args: Sequence[str],
    env_overrides: Mapping[str, str] | None = None,
) -> bytes:
    """Run a command to completion and return its stdout.

    Raises:
        ProcessError: If the command cannot be started or exits non-zero.
    """
    argv = _argv(command, args)
    try:
        result = subprocess.run(
            argv,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            env=_merged_env(env_overrides),
        )
    except OSError as e:
        raise _spawn_error(argv, e) from e

    if result.returncode != 0:
        stderr_text = _decode(result.stderr)
        raise ProcessError(
            f"'{argv[0]}' exited with code {result.returncode}: {stderr_text}",
            exit_status=result.returncode,
            stderr_text=stderr_text,
        )
    return result.stdout


def _drain(pipe: IO[bytes], chunks: list[bytes]) -> None:
    with pipe:
        chunks.append(pipe.read())


def stream(
    command: str | Sequence[str],
    args: Sequence[str],
    env_overrides: Mapping[str, str] | None,
    sink: BinaryIO,
) -> int:
    """Run a command and copy its stdout into sink, returning the byte count.

    Each chunk is written before the next one is read, so a slow sink stalls
    the child on its stdout pipe. stderr is collected on a helper thread. The
    sink is closed before returning, whatever the outcome.

    Raises:
        ProcessError: If the command cannot be started.
        TransferError: If the sink fails (the child is killed) or the command
            exits non-zero, even after some bytes reached the sink.
    """
    argv = _argv(command, args)
    try:
        proc = subprocess.Popen(
            argv,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            env=_merged_env(env_overrides),
        )
    except OSError as e:
        sink.close()
        raise _spawn_error(argv, e) from e

    assert proc.stdout is not None and proc.stderr is not None
    stderr_chunks: list[bytes] = []
    reader = threading.Thread(
        target=_drain, args=(proc.stderr, stderr_chunks), daemon=True
    )
    reader.start()

    written = 0
    sink_error: OSError | None = None
    try:
        while chunk := proc.stdout.read1(CHUNK_SIZE):
            try:
                sink.write(chunk)
            except OSError as e:
                sink_error = e
                proc.kill()
                break
            written += len(chunk)
    except BaseException:
        proc.kill()
        raise
    finally:
        proc.stdout.close()
        exit_status = proc.wait()
        reader.join()

    stderr_text = _decode(b"".join(stderr_chunks))
    try:
        sink.close()
    except OSError as e:
        sink_error = sink_error or e

    if sink_error is not None:
        raise TransferError(
            f"Failed to write downloaded data: {sink_error}",
            exit_status=exit_status,
            stderr_text=stderr_text,
        ) from sink_error
    if exit_status != 0:
        raise TransferError(
            f"'{argv[0]}' exited with code {exit_status}: {stderr_text}",
            exit_status=exit_status,
            stderr_text=stderr_text,
        )
    return written
