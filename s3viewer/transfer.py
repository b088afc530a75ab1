"""Download one S3 object into a local file."""

from __future__ import annotations

import logging
import tempfile
import time
import uuid
from collections.abc import Mapping
from pathlib import Path

from s3viewer._errors import TransferError
from s3viewer.locator import Locator, validate
from s3viewer.logging import TransferLogger
from s3viewer.store.protocol import ObjectStore

TEMP_PREFIX = "s3viewer"

logger = logging.getLogger("s3viewer")


def temp_path_for(locator: Locator, temp_dir: str | Path | None = None) -> Path:
    """Return a fresh download path named after the object's basename.

    The millisecond timestamp and random hex keep concurrent downloads of the
    same key apart.
    """
    base_dir = Path(temp_dir) if temp_dir else Path(tempfile.gettempdir())
    name = locator.basename
    if name in ("", ".", ".."):
        name = "object"
    stamp = int(time.time() * 1000)
    return base_dir / f"{TEMP_PREFIX}-{stamp}-{uuid.uuid4().hex[:8]}-{name}"


def _discard(path: Path) -> None:
    """Remove a partial download, ignoring failures."""
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.debug(f"Could not remove partial download {path}: {e}")


def fetch(
    locator: Locator,
    destination: Path,
    env: Mapping[str, str],
    store: ObjectStore,
) -> int:
    """Stream locator into destination and return the number of bytes written.

    On failure the destination is removed before the original error is
    re-raised, even if some bytes were already written. A destination that
    cannot be created is a TransferError.
    """
    transfer_log = TransferLogger(locator.uri, logger)
    transfer_log.start(str(destination))
    try:
        sink = destination.open("wb")
    except OSError as e:
        error = TransferError(f"Cannot create download file {destination}: {e}")
        transfer_log.fail(error)
        raise error from e

    try:
        with sink:
            nbytes = store.stream_object(locator, sink, env)
    except BaseException as e:
        _discard(destination)
        transfer_log.fail(e)
        raise
    transfer_log.complete(nbytes)
    return nbytes


def fetch_to_temp(
    raw_locator: str,
    env: Mapping[str, str],
    store: ObjectStore,
    temp_dir: str | Path | None = None,
) -> Path:
    """Validate raw_locator, download it to a unique temp file and return the path.

    Raises:
        ValidationError: If raw_locator is malformed; nothing is spawned.
        ProcessError: If the AWS CLI cannot be started.
        TransferError: If the download fails.
    """
    locator = validate(raw_locator)
    destination = temp_path_for(locator, temp_dir)
    fetch(locator, destination, env, store)
    return destination
