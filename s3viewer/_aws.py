"""AWS client factory functions for s3viewer."""

import os
from collections.abc import Mapping
from typing import Any

import boto3


def get_s3_client(env: Mapping[str, str] | None = None) -> Any:
    """Get S3 client for the profile/region/endpoint in env.

    Falls back to AWS_ENDPOINT_URL from the process environment.
    """
    env = env or {}
    session = boto3.session.Session(
        profile_name=env.get("AWS_PROFILE") or None,
        region_name=env.get("AWS_REGION") or None,
    )
    kwargs: dict[str, str] = {}
    if endpoint := env.get("AWS_ENDPOINT_URL") or os.environ.get("AWS_ENDPOINT_URL"):
        kwargs["endpoint_url"] = endpoint
    return session.client("s3", **kwargs)
