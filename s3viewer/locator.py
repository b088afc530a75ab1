"""S3 object locators and their validation."""

from __future__ import annotations

from dataclasses import dataclass

from s3viewer._errors import ValidationError

SCHEME = "s3://"


@dataclass(frozen=True)
class Locator:
    """A validated s3://bucket/key reference to one object."""

    bucket: str
    key: str

    @classmethod
    def build(cls, bucket: str, key: str) -> "Locator":
        return cls(bucket=bucket, key=key)

    @property
    def uri(self) -> str:
        return f"{SCHEME}{self.bucket}/{self.key}"

    @property
    def basename(self) -> str:
        """Trailing path segment of the key (empty for keys ending in '/')."""
        return self.key.rsplit("/", 1)[-1]

    def __str__(self) -> str:
        return self.uri


def validate(value: str | None) -> Locator:
    """Check that value is an s3://bucket/key URL and parse it.

    Purely syntactic: the object is not looked up.

    Raises:
        ValidationError: If the value is empty or malformed.
    """
    text = (value or "").strip()
    if not text:
        raise ValidationError("No S3 URL given")
    if not text.startswith(SCHEME):
        raise ValidationError(f"Invalid S3 URL: {text}. Must start with '{SCHEME}'")

    parts = text[len(SCHEME) :].split("/", 1)
    bucket = parts[0]
    if not bucket:
        raise ValidationError(f"Invalid S3 URL: {text}. Missing bucket")
    key = parts[1] if len(parts) > 1 else ""
    if not key:
        raise ValidationError(f"Invalid S3 URL: {text}. Missing object key")
    return Locator(bucket=bucket, key=key)
