"""Configuration loading and management for s3viewer.

Configuration is loaded from TOML files with environment variable overrides.

Configuration precedence (highest to lowest):
1. Command line flags (applied by the CLI)
2. Environment variables
3. Local config (./s3viewer.toml)
4. Global config (~/.s3viewer/s3viewer.toml)
5. Default values
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from s3viewer._errors import ConfigError
from s3viewer.logging import LoggingConfig

GLOBAL_CONFIG_PATH = Path.home() / ".s3viewer" / "s3viewer.toml"
LOCAL_CONFIG_PATH = Path.cwd() / "s3viewer.toml"

BACKENDS = ("cli", "sdk")
_TRUE_VALUES = ("true", "1", "yes", "on")
_FALSE_VALUES = ("false", "0", "no", "off", "")


def _load_toml(path: Path) -> dict[str, Any]:
    """Load a TOML file, returning empty dict if not found."""
    if path.exists():
        try:
            with path.open("rb") as f:
                return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid configuration file {path}: {e}") from e
    return {}


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge override into base.

    Lists and scalars are replaced; dicts are merged recursively.
    """
    result = base.copy()
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, dict | list):
        raise ConfigError(f"Expected a string, got {type(value).__name__}: {value!r}")
    return str(value).strip()


def _bool(d: dict[str, Any], name: str, default: bool) -> bool:
    """Read a boolean setting; 'true'/'false' style strings are accepted."""
    value = d.get(name, default)
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lower = value.strip().lower()
        if lower in _TRUE_VALUES:
            return True
        if lower in _FALSE_VALUES:
            return False
    raise ConfigError(f"Invalid boolean value for '{name}': {value!r}")


def _table(d: dict[str, Any], name: str) -> dict[str, Any]:
    value = d.get(name, {})
    if not isinstance(value, dict):
        raise ConfigError(f"'{name}' must be a table, got {value!r}")
    return value


@dataclass
class AwsConfig:
    """AWS access configuration.

    Attributes:
        profile: Credential profile exported as AWS_PROFILE.
        region: Region exported as AWS_REGION.
        endpoint: Endpoint override (e.g., LocalStack) exported as AWS_ENDPOINT_URL.
        backend: "cli" to shell out to the AWS CLI, "sdk" to use boto3.
        cli: AWS CLI command line; empty means the platform default.
    """

    profile: str = ""
    region: str = ""
    endpoint: str = ""
    backend: str = "cli"
    cli: str = ""


@dataclass
class S3ViewerConfig:
    """Main s3viewer configuration.

    Attributes:
        default_locator: Object opened without prompting when set.
        auto_run_on_startup: Run the open command once from the startup hook.
        discover_by_default: Use bucket/key pickers instead of a text prompt.
        viewer_command: Command used to open downloaded files.
        temp_dir: Directory for downloads; empty means the system temp dir.
        aws: AWS access configuration.
        logging: Logging configuration.
    """

    default_locator: str = ""
    auto_run_on_startup: bool = False
    discover_by_default: bool = False
    viewer_command: str = ""
    temp_dir: str = ""
    aws: AwsConfig = field(default_factory=AwsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "S3ViewerConfig":
        """Create an S3ViewerConfig from a dictionary."""
        aws_config = _table(d, "aws")
        logging_config = _table(d, "logging")

        backend = _str(aws_config.get("backend", "cli")) or "cli"
        if backend not in BACKENDS:
            raise ConfigError(
                f"Unknown backend '{backend}'. Expected one of: {', '.join(BACKENDS)}"
            )

        aws_cfg = AwsConfig(
            profile=_str(aws_config.get("profile")),
            region=_str(aws_config.get("region")),
            endpoint=_str(aws_config.get("endpoint")),
            backend=backend,
            cli=_str(aws_config.get("cli")),
        )
        logging_cfg = LoggingConfig(
            level=_str(logging_config.get("level", "WARNING")) or "WARNING",
            format=_str(logging_config.get("format", "human")) or "human",
            show_timestamps=_bool(logging_config, "show_timestamps", True),
        )
        return cls(
            default_locator=_str(d.get("default_locator")),
            auto_run_on_startup=_bool(d, "auto_run_on_startup", False),
            discover_by_default=_bool(d, "discover_by_default", False),
            viewer_command=_str(d.get("viewer_command")),
            temp_dir=_str(d.get("temp_dir")),
            aws=aws_cfg,
            logging=logging_cfg,
        )


def load_config() -> S3ViewerConfig:
    """Load and merge configuration from global and local TOML files.

    Applies environment variable overrides.
    """
    global_cfg = _load_toml(GLOBAL_CONFIG_PATH)
    local_cfg = _load_toml(LOCAL_CONFIG_PATH)
    merged = _deep_merge(global_cfg, local_cfg)

    config = S3ViewerConfig.from_dict(merged)

    if env_locator := os.environ.get("S3VIEWER_DEFAULT_LOCATOR"):
        config.default_locator = env_locator.strip()
    if env_profile := os.environ.get("S3VIEWER_AWS_PROFILE"):
        config.aws.profile = env_profile.strip()
    if env_region := os.environ.get("S3VIEWER_AWS_REGION"):
        config.aws.region = env_region.strip()
    if env_endpoint := os.environ.get("S3VIEWER_AWS_ENDPOINT"):
        config.aws.endpoint = env_endpoint.strip()
    if env_backend := os.environ.get("S3VIEWER_BACKEND"):
        if env_backend not in BACKENDS:
            raise ConfigError(f"Unknown backend '{env_backend}' in S3VIEWER_BACKEND")
        config.aws.backend = env_backend
    if env_viewer := os.environ.get("S3VIEWER_VIEWER"):
        config.viewer_command = env_viewer
    if env_log_level := os.environ.get("S3VIEWER_LOG_LEVEL"):
        config.logging.level = env_log_level
    if env_auto_run := os.environ.get("S3VIEWER_AUTO_RUN"):
        config.auto_run_on_startup = env_auto_run.lower() in _TRUE_VALUES

    return config


def build_env(config: S3ViewerConfig) -> dict[str, str]:
    """Build the environment overlay passed to the AWS CLI or boto3 session.

    Blank settings are left out so the inherited environment still applies.
    """
    env: dict[str, str] = {}
    if config.aws.profile:
        env["AWS_PROFILE"] = config.aws.profile
    if config.aws.region:
        env["AWS_REGION"] = config.aws.region
    if config.aws.endpoint:
        env["AWS_ENDPOINT_URL"] = config.aws.endpoint
    return env
