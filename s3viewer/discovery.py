"""Interactive bucket and key discovery."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from s3viewer._errors import CancelledByUser, DiscoveryError
from s3viewer.locator import Locator
from s3viewer.prompt import Prompter
from s3viewer.store.protocol import ObjectStore


def _names(response: Any, list_field: str, name_field: str) -> list[str]:
    """Pull name_field out of every entry of response[list_field]."""
    if not isinstance(response, dict):
        raise DiscoveryError(
            "Unexpected listing response: expected an object, "
            f"got {type(response).__name__}"
        )
    entries = response.get(list_field)
    if entries is None:
        return []
    if not isinstance(entries, list):
        raise DiscoveryError(
            f"Unexpected listing response: '{list_field}' is not a list"
        )

    names: list[str] = []
    for entry in entries:
        if not isinstance(entry, dict) or not isinstance(entry.get(name_field), str):
            raise DiscoveryError(
                f"Unexpected listing response: entry without '{name_field}'"
            )
        names.append(entry[name_field])
    return names


def list_containers(env: Mapping[str, str], store: ObjectStore) -> list[str]:
    """Return bucket names in the order S3 lists them.

    Raises:
        DiscoveryError: If the query fails or the response has no bucket list.
    """
    response = store.list_buckets(env)
    if isinstance(response, dict) and "Buckets" not in response:
        raise DiscoveryError("Unexpected listing response: no 'Buckets' field")
    return _names(response, "Buckets", "Name")


def list_keys(container: str, env: Mapping[str, str], store: ObjectStore) -> list[str]:
    """Return object keys of the first listing page of container.

    An empty bucket gives an empty list.
    """
    return _names(store.list_objects(container, env), "Contents", "Key")


def discover(
    prompter: Prompter, env: Mapping[str, str], store: ObjectStore
) -> Locator:
    """Let the user pick a bucket and then a key.

    Raises:
        CancelledByUser: If either pick is dismissed or the bucket is empty.
        DiscoveryError: If a listing fails.
    """
    buckets = list_containers(env, store)
    bucket = prompter.pick(buckets, "Select an S3 bucket")
    if not bucket:
        raise CancelledByUser()

    keys = list_keys(bucket, env, store)
    if not keys:
        prompter.info(f"No objects found in {bucket}")
        raise CancelledByUser()

    key = prompter.pick(keys, f"Select file from {bucket}")
    if not key:
        raise CancelledByUser()
    return Locator.build(bucket, key)
