"""Async adapter over the Google Play Developer API (androidpublisher v3).

googleapiclient requests are blocking, so every ``execute()`` runs in a
worker thread and is bounded by a per-call timeout. httplib2 connections are
not thread-safe, and a timed-out request keeps its thread, so each request
gets its own authorized transport.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import httplib2
from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from ..config.settings import DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

API_NAME = "androidpublisher"
API_VERSION = "v3"


class PublisherAPIError(Exception):
    """A Play Developer API call failed."""

    def __init__(self, operation: str, message: str, status: Optional[int] = None):
        self.operation = operation
        self.status = status
        self.message = message
        prefix = f"{operation} failed"
        if status is not None:
            prefix += f" (HTTP {status})"
        super().__init__(f"{prefix}: {message}")


class PublisherTimeoutError(PublisherAPIError):
    """A Play Developer API call did not answer within the timeout."""

    def __init__(self, operation: str, timeout: float):
        self.timeout = timeout
        super().__init__(operation, f"no response after {timeout:g}s")


def build_service(credentials: Any) -> Any:
    """Build the androidpublisher v3 resource using the bundled discovery document."""
    return build(API_NAME, API_VERSION, credentials=credentials, cache_discovery=False)


class PublisherClient:
    """Play Developer API operations used by the tools.

    Edit-scoped calls take the ``edit_id`` issued by :meth:`insert_edit`;
    reviews are not edit-scoped.
    """

    def __init__(
        self,
        service: Any,
        timeout: float = DEFAULT_TIMEOUT,
        credentials: Optional[Any] = None
    ):
        self.service = service
        self.timeout = timeout
        self.credentials = credentials

    @classmethod
    def from_credentials(cls, credentials: Any, timeout: float = DEFAULT_TIMEOUT) -> "PublisherClient":
        return cls(build_service(credentials), timeout=timeout, credentials=credentials)

    # Edits

    async def insert_edit(self, package_name: str) -> str:
        request = self.service.edits().insert(packageName=package_name, body={})
        response = await self._execute("edits.insert", request)
        return response["id"]

    async def commit_edit(self, package_name: str, edit_id: str) -> Dict[str, Any]:
        request = self.service.edits().commit(packageName=package_name, editId=edit_id)
        return await self._execute("edits.commit", request)

    async def delete_edit(self, package_name: str, edit_id: str) -> None:
        request = self.service.edits().delete(packageName=package_name, editId=edit_id)
        await self._execute("edits.delete", request)

    async def get_details(self, package_name: str, edit_id: str) -> Dict[str, Any]:
        request = self.service.edits().details().get(
            packageName=package_name, editId=edit_id
        )
        return await self._execute("edits.details.get", request)

    async def get_track(self, package_name: str, edit_id: str, track: str) -> Dict[str, Any]:
        request = self.service.edits().tracks().get(
            packageName=package_name, editId=edit_id, track=track
        )
        return await self._execute("edits.tracks.get", request)

    async def update_track(
        self,
        package_name: str,
        edit_id: str,
        track: str,
        releases: List[Dict[str, Any]]
    ) -> Dict[str, Any]:
        request = self.service.edits().tracks().update(
            packageName=package_name,
            editId=edit_id,
            track=track,
            body={"track": track, "releases": releases},
        )
        return await self._execute("edits.tracks.update", request)

    async def get_listing(self, package_name: str, edit_id: str, language: str) -> Dict[str, Any]:
        request = self.service.edits().listings().get(
            packageName=package_name, editId=edit_id, language=language
        )
        return await self._execute("edits.listings.get", request)

    async def update_listing(
        self,
        package_name: str,
        edit_id: str,
        language: str,
        fields: Dict[str, str]
    ) -> Dict[str, Any]:
        """Patch a listing; fields not in ``fields`` keep their current values."""
        request = self.service.edits().listings().patch(
            packageName=package_name,
            editId=edit_id,
            language=language,
            body=dict(fields),
        )
        return await self._execute("edits.listings.patch", request)

    # Reviews

    async def list_reviews(self, package_name: str, max_results: int) -> Dict[str, Any]:
        request = self.service.reviews().list(
            packageName=package_name, maxResults=max_results
        )
        return await self._execute("reviews.list", request)

    async def reply_to_review(self, package_name: str, review_id: str, text: str) -> Dict[str, Any]:
        request = self.service.reviews().reply(
            packageName=package_name,
            reviewId=review_id,
            body={"replyText": text},
        )
        return await self._execute("reviews.reply", request)

    async def _execute(self, operation: str, request: Any) -> Any:
        logger.debug(f"Calling {operation}")
        try:
            response = await asyncio.wait_for(
                asyncio.to_thread(self._send, request), timeout=self.timeout
            )
        except asyncio.TimeoutError as e:
            logger.error(f"{operation} timed out after {self.timeout}s")
            raise PublisherTimeoutError(operation, self.timeout) from e
        except HttpError as e:
            status = getattr(e.resp, "status", None)
            raise PublisherAPIError(operation, _http_error_message(e), status) from e
        # edits.delete answers with an empty body
        return response if response is not None else {}

    def _send(self, request: Any) -> Any:
        """Execute a request on a transport no other request shares."""
        if self.credentials is None:
            return request.execute()
        http = AuthorizedHttp(self.credentials, http=httplib2.Http(timeout=self.timeout))
        return request.execute(http=http)


def _http_error_message(error: HttpError) -> str:
    """Best-effort human message from an HttpError."""
    reason = getattr(error, "reason", None)
    if reason:
        return str(reason)
    return str(error)
