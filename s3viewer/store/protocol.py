"""ObjectStore protocol definition."""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, BinaryIO, Protocol

if TYPE_CHECKING:
    from s3viewer.locator import Locator


class ObjectStore(Protocol):
    """Protocol for the backends that talk to S3.

    AwsCliStore shells out to the AWS CLI, Boto3Store uses the SDK. Both take
    the transfer environment (AWS_PROFILE, AWS_REGION, AWS_ENDPOINT_URL) per
    call so nothing is cached between invocations.
    """

    def list_buckets(self, env: Mapping[str, str]) -> Any:
        """Return the decoded ListBuckets response."""
        ...

    def list_objects(self, bucket: str, env: Mapping[str, str]) -> Any:
        """Return the decoded first page of ListObjectsV2 for bucket."""
        ...

    def stream_object(
        self, locator: "Locator", sink: BinaryIO, env: Mapping[str, str]
    ) -> int:
        """Copy the object's bytes into sink, close it and return the byte count."""
        ...
