"""Store backends for listing buckets and downloading objects.

- AwsCliStore: shells out to the AWS CLI (default)
- Boto3Store: uses boto3 directly
"""

from s3viewer.config import S3ViewerConfig
from s3viewer.store.cli import AwsCliStore
from s3viewer.store.protocol import ObjectStore
from s3viewer.store.sdk import Boto3Store

__all__ = ["ObjectStore", "AwsCliStore", "Boto3Store", "get_store"]


def get_store(config: S3ViewerConfig) -> ObjectStore:
    """Return the backend selected by config.aws.backend."""
    if config.aws.backend == "sdk":
        return Boto3Store()
    return AwsCliStore(config.aws.cli or None)
