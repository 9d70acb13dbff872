"""Credential resolution for the Play Developer API."""

import logging
from pathlib import Path
from typing import Any, Optional, Union

import google.auth
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account

logger = logging.getLogger(__name__)

ANDROID_PUBLISHER_SCOPE = "https://www.googleapis.com/auth/androidpublisher"


class CredentialError(Exception):
    """Credentials could not be obtained."""
    pass


def resolve_credentials(key_file: Optional[Union[str, Path]] = None) -> Any:
    """
    Load credentials scoped to the androidpublisher API.

    Args:
        key_file: Path to a service-account JSON key. When omitted, ambient
            application-default credentials are used.

    Returns:
        google.auth credentials object

    Raises:
        CredentialError: If the key file is inaccessible or invalid, or no
            ambient credentials are available
    """
    if key_file is None:
        try:
            credentials, project = google.auth.default(scopes=[ANDROID_PUBLISHER_SCOPE])
        except GoogleAuthError as e:
            raise CredentialError(f"No application default credentials: {e}") from e
        logger.info(f"Using application default credentials (project: {project})")
        return credentials

    path = Path(key_file).expanduser()
    try:
        credentials = service_account.Credentials.from_service_account_file(
            str(path), scopes=[ANDROID_PUBLISHER_SCOPE]
        )
    except OSError as e:
        raise CredentialError(f"Cannot read key file {path}: {e}") from e
    except (ValueError, KeyError) as e:
        raise CredentialError(f"Invalid service account key file {path}: {e}") from e

    logger.info(f"Loaded service account credentials from {path}")
    return credentials


class CredentialProvider:
    """Process-wide credential cache handed to each tool invocation.

    The first successful load is reused; a failed load is retried on the
    next invocation.
    """

    def __init__(self, key_file: Optional[Union[str, Path]] = None):
        self.key_file = key_file
        self._credentials: Optional[Any] = None

    def get(self) -> Any:
        if self._credentials is None:
            self._credentials = resolve_credentials(self.key_file)
        return self._credentials
