"""
Server configuration.

Values come from command-line flags first, then environment variables.

Environment Variables:
    GOOGLE_PLAY_KEY_FILE            - Service account JSON key for the Play Console
    GOOGLE_APPLICATION_CREDENTIALS  - Fallback key file location
    PLAY_CONSOLE_MCP_TIMEOUT        - Per-request API timeout in seconds (default 30)
    PLAY_CONSOLE_MCP_LOG_LEVEL      - Logging level (default INFO)

A missing or unreadable key file is fatal at startup:
    $ play-console-mcp
    error: no service account key file configured ...
"""

import argparse
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Sequence

SERVER_NAME = "google-play"
SERVER_VERSION = "0.1.0"

KEY_FILE_ENV_VARS = ("GOOGLE_PLAY_KEY_FILE", "GOOGLE_APPLICATION_CREDENTIALS")
TIMEOUT_ENV_VAR = "PLAY_CONSOLE_MCP_TIMEOUT"
LOG_LEVEL_ENV_VAR = "PLAY_CONSOLE_MCP_LOG_LEVEL"

DEFAULT_TIMEOUT = 30.0
DEFAULT_LOG_LEVEL = "INFO"


class SettingsError(Exception):
    """Configuration is missing or invalid."""
    pass


@dataclass(frozen=True)
class Settings:
    """Resolved server settings."""
    key_file: Path
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL


def build_parser() -> argparse.ArgumentParser:
    """Command-line flags for the server entry point."""
    parser = argparse.ArgumentParser(
        prog="play-console-mcp",
        description="MCP server for the Google Play Console"
    )
    parser.add_argument(
        "--key-file",
        help="Path to a service account JSON key "
             f"(default: ${KEY_FILE_ENV_VARS[0]} or ${KEY_FILE_ENV_VARS[1]})"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help=f"Per-request API timeout in seconds (default: ${TIMEOUT_ENV_VAR} or {DEFAULT_TIMEOUT:g})"
    )
    parser.add_argument(
        "--log-level",
        help=f"Logging level (default: ${LOG_LEVEL_ENV_VAR} or {DEFAULT_LOG_LEVEL})"
    )
    return parser


def resolve_key_file(
    cli_value: Optional[str],
    environ: Optional[Mapping[str, str]] = None
) -> Path:
    """
    Locate the service account key file.

    Args:
        cli_value: Value of --key-file, if given
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Path to an existing, readable key file

    Raises:
        SettingsError: If no key file is configured or it cannot be read

    Example:
        >>> resolve_key_file(None, {"GOOGLE_PLAY_KEY_FILE": "/keys/play.json"})
        PosixPath('/keys/play.json')
    """
    environ = os.environ if environ is None else environ

    value = cli_value
    if not value:
        for name in KEY_FILE_ENV_VARS:
            if environ.get(name):
                value = environ[name]
                break

    if not value:
        names = ", ".join(KEY_FILE_ENV_VARS)
        raise SettingsError(
            f"No service account key file configured. "
            f"Pass --key-file or set one of: {names}"
        )

    path = Path(value).expanduser()
    if not path.is_file():
        raise SettingsError(f"Key file not found: {path}")
    if not os.access(path, os.R_OK):
        raise SettingsError(f"Key file is not readable: {path}")

    return path


def load_settings(
    argv: Optional[Sequence[str]] = None,
    environ: Optional[Mapping[str, str]] = None
) -> Settings:
    """
    Resolve settings from command-line arguments and environment.

    Args:
        argv: Arguments without the program name (defaults to sys.argv[1:])
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Settings

    Raises:
        SettingsError: If the key file is missing or the timeout is invalid
    """
    environ = os.environ if environ is None else environ
    args = build_parser().parse_args(argv)

    key_file = resolve_key_file(args.key_file, environ)

    timeout = args.timeout
    if timeout is None:
        raw = environ.get(TIMEOUT_ENV_VAR)
        try:
            timeout = float(raw) if raw else DEFAULT_TIMEOUT
        except ValueError:
            raise SettingsError(f"{TIMEOUT_ENV_VAR} must be a number, got {raw!r}")
    if timeout <= 0:
        raise SettingsError(f"Timeout must be positive, got {timeout}")

    log_level = (args.log_level or environ.get(LOG_LEVEL_ENV_VAR) or DEFAULT_LOG_LEVEL).upper()

    return Settings(key_file=key_file, timeout=timeout, log_level=log_level)
