"""Shared fixtures: a recording fake of the Play Developer API client."""

import itertools
from typing import Any, Dict, List, Optional, Tuple

import pytest

from play_console_mcp.api.publisher_client import PublisherAPIError
from play_console_mcp.context import ToolContext
from play_console_mcp.tools.play_tools import PlayConsoleTools


class FakePublisher:
    """Stands in for PublisherClient, recording every call in order.

    Set ``fail[operation] = exception`` to make an operation raise.
    """

    def __init__(self):
        self.calls: List[Tuple[str, tuple]] = []
        self.fail: Dict[str, Exception] = {}
        self._edit_ids = (f"edit-{n}" for n in itertools.count(1))
        self.details = {"defaultLanguage": "en-US", "contactEmail": "dev@example.com"}
        self.reviews = {"reviews": [{"reviewId": "r1", "authorName": "Ana"}]}

    def _record(self, operation: str, *args: Any) -> None:
        self.calls.append((operation, args))
        if operation in self.fail:
            raise self.fail[operation]

    def operations(self) -> List[str]:
        return [operation for operation, _ in self.calls]

    def call(self, operation: str) -> Optional[tuple]:
        for name, args in self.calls:
            if name == operation:
                return args
        return None

    async def insert_edit(self, package_name):
        self._record("insert_edit", package_name)
        return next(self._edit_ids)

    async def commit_edit(self, package_name, edit_id):
        self._record("commit_edit", package_name, edit_id)
        return {"id": edit_id}

    async def delete_edit(self, package_name, edit_id):
        self._record("delete_edit", package_name, edit_id)

    async def get_details(self, package_name, edit_id):
        self._record("get_details", package_name, edit_id)
        return self.details

    async def get_track(self, package_name, edit_id, track):
        self._record("get_track", package_name, edit_id, track)
        return {"track": track, "releases": [{"versionCodes": ["41"], "status": "completed"}]}

    async def update_track(self, package_name, edit_id, track, releases):
        self._record("update_track", package_name, edit_id, track, releases)
        return {"track": track, "releases": releases}

    async def get_listing(self, package_name, edit_id, language):
        self._record("get_listing", package_name, edit_id, language)
        return {"language": language, "title": "Example"}

    async def update_listing(self, package_name, edit_id, language, fields):
        self._record("update_listing", package_name, edit_id, language, fields)
        return dict(fields, language=language)

    async def list_reviews(self, package_name, max_results):
        self._record("list_reviews", package_name, max_results)
        return self.reviews

    async def reply_to_review(self, package_name, review_id, text):
        self._record("reply_to_review", package_name, review_id, text)
        return {"result": {"replyText": text}}


def make_api_error(operation: str = "edits.details.get", status: int = 500) -> PublisherAPIError:
    return PublisherAPIError(operation, "backend error", status)


@pytest.fixture
def api_error():
    """Builds PublisherAPIError instances for failure injection."""
    return make_api_error


@pytest.fixture
def publisher():
    """Fresh recording fake publisher."""
    return FakePublisher()


@pytest.fixture
def contexts(publisher):
    """Every ToolContext handed out by the tools' context factory."""
    return []


@pytest.fixture
def play_tools(publisher, contexts):
    """PlayConsoleTools wired to the fake publisher."""
    def factory():
        context = ToolContext(credentials=object(), publisher=publisher)
        contexts.append(context)
        return context

    return PlayConsoleTools(factory)
