"""Per-invocation context threaded into every tool call."""

from dataclasses import dataclass, field
from typing import Any, Callable

from .api.publisher_client import PublisherClient
from .auth.credentials import CredentialProvider
from .config.settings import DEFAULT_TIMEOUT
from .managers.edit_session_manager import EditSessionManager


@dataclass
class ToolContext:
    """Credential, API client and session manager for one tool invocation."""
    credentials: Any
    publisher: Any
    sessions: EditSessionManager = field(init=False)

    def __post_init__(self):
        self.sessions = EditSessionManager(self.publisher)


ContextFactory = Callable[[], ToolContext]


def make_context_factory(
    provider: CredentialProvider,
    timeout: float = DEFAULT_TIMEOUT
) -> ContextFactory:
    """
    Build a factory producing a fresh ToolContext per invocation.

    The credential comes from the shared provider; the API client and
    session manager are new each time so invocations stay independent.

    Args:
        provider: Credential source (raises CredentialError on failure)
        timeout: Per-call timeout in seconds for API requests

    Returns:
        Zero-argument callable returning a ToolContext
    """
    def factory() -> ToolContext:
        credentials = provider.get()
        publisher = PublisherClient.from_credentials(credentials, timeout=timeout)
        return ToolContext(credentials=credentials, publisher=publisher)

    return factory
