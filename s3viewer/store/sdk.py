"""boto3 backed object store."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, BinaryIO

from botocore.exceptions import BotoCoreError, ClientError

from s3viewer._aws import get_s3_client
from s3viewer._errors import DiscoveryError, TransferError
from s3viewer.locator import Locator
from s3viewer.process import CHUNK_SIZE
from s3viewer.store.protocol import ObjectStore


class Boto3Store(ObjectStore):
    """Object store that talks to S3 through boto3.

    A fresh client is built for every call from the transfer environment.
    """

    def __init__(self, chunk_size: int = CHUNK_SIZE) -> None:
        self.chunk_size = chunk_size

    def list_buckets(self, env: Mapping[str, str]) -> Any:
        try:
            return get_s3_client(env).list_buckets()
        except (ClientError, BotoCoreError) as e:
            raise DiscoveryError(f"AWS error: {e}") from e

    def list_objects(self, bucket: str, env: Mapping[str, str]) -> Any:
        try:
            return get_s3_client(env).list_objects_v2(Bucket=bucket)
        except (ClientError, BotoCoreError) as e:
            raise DiscoveryError(f"AWS error: {e}") from e

    def stream_object(
        self, locator: Locator, sink: BinaryIO, env: Mapping[str, str]
    ) -> int:
        written = 0
        try:
            response = get_s3_client(env).get_object(
                Bucket=locator.bucket, Key=locator.key
            )
            for chunk in response["Body"].iter_chunks(self.chunk_size):
                sink.write(chunk)
                written += len(chunk)
        except (ClientError, BotoCoreError) as e:
            self._close_after_error(sink)
            raise TransferError(f"AWS error: {e}", stderr_text=str(e)) from e
        except OSError as e:
            self._close_after_error(sink)
            raise TransferError(f"Failed to write downloaded data: {e}") from e
        except BaseException:
            self._close_after_error(sink)
            raise

        try:
            sink.close()
        except OSError as e:
            raise TransferError(f"Failed to write downloaded data: {e}") from e
        return written

    @staticmethod
    def _close_after_error(sink: BinaryIO) -> None:
        """Close sink while another error is propagating; that error wins."""
        try:
            sink.close()
        except OSError:
            pass
