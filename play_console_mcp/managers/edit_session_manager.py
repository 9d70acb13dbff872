"""
EditSessionManager - open/use/resolve discipline for Play Console edits.

The Play Developer API stages almost every change (and some reads) inside an
"edit": a server-side transaction that is opened with edits.insert and must be
resolved with either edits.commit or edits.delete. This module owns that
protocol for one edit per tool invocation.

Resolution policy:
- Body succeeded: apply the requested resolution (commit or discard).
- Body failed or was cancelled: always discard, whatever was requested.
- Open failed: body never runs, nothing to resolve.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

logger = logging.getLogger(__name__)

R = TypeVar("R")

SessionBody = Callable[[str], Awaitable[R]]


# ============================================================================
# Enums
# ============================================================================

class Resolution(Enum):
    """How an edit session is resolved once its body has run."""
    COMMIT = "commit"      # Persist staged changes
    DISCARD = "discard"    # Abandon (read-only inspection or failure)


class SessionStatus(Enum):
    """Edit session lifecycle states."""
    OPEN = "open"
    COMMITTED = "committed"
    DISCARDED = "discarded"
    FAILED = "failed"


# ============================================================================
# Data Classes
# ============================================================================

@dataclass
class EditSession:
    """One open remote edit for a package."""
    package_name: str
    edit_id: str
    requested_resolution: Resolution
    opened_at: datetime
    status: SessionStatus = SessionStatus.OPEN
    resolved_with: Optional[Resolution] = None


# ============================================================================
# Exceptions
# ============================================================================

class EditSessionError(Exception):
    """Base exception for edit session errors."""
    pass


class EditOpenError(EditSessionError):
    """Opening the edit failed; nothing ran and nothing needs resolving."""

    def __init__(self, package_name: str, cause: BaseException):
        self.package_name = package_name
        self.cause = cause
        super().__init__(f"Could not open edit for {package_name}: {cause}")


class EditBodyError(EditSessionError):
    """The work inside the edit failed; the edit was discarded, not committed."""

    def __init__(
        self,
        session: EditSession,
        cause: BaseException,
        discard_error: Optional[BaseException] = None
    ):
        self.session = session
        self.cause = cause
        self.discard_error = discard_error
        message = f"{cause}"
        if discard_error is not None:
            message += (
                f" (discarding edit {session.edit_id} also failed: {discard_error})"
            )
        super().__init__(message)


class EditResolutionError(EditSessionError):
    """The body succeeded but resolving the edit failed."""

    resolution: Resolution = Resolution.DISCARD

    def __init__(self, session: EditSession, cause: BaseException):
        self.session = session
        self.cause = cause
        super().__init__(self._describe(session, cause))

    def _describe(self, session: EditSession, cause: BaseException) -> str:
        return f"Could not resolve edit {session.edit_id} for {session.package_name}: {cause}"


class EditCommitError(EditResolutionError):
    """Commit failed: the change may or may not have been applied."""

    resolution = Resolution.COMMIT

    def _describe(self, session: EditSession, cause: BaseException) -> str:
        return (
            f"Commit of edit {session.edit_id} for {session.package_name} failed; "
            f"the change may or may not have been applied: {cause}"
        )


class EditDiscardError(EditResolutionError):
    """Discard failed after a successful read; the edit may be left open remotely."""

    resolution = Resolution.DISCARD

    def _describe(self, session: EditSession, cause: BaseException) -> str:
        return (
            f"Discard of edit {session.edit_id} for {session.package_name} failed; "
            f"the edit may still be open on the Play Console: {cause}"
        )


# ============================================================================
# EditSessionManager
# ============================================================================

class EditSessionManager:
    """
    Runs units of work inside Play Console edit sessions.

    Usage:
        sessions = EditSessionManager(publisher)

        details = await sessions.run_in_edit_session(
            "com.example.app",
            lambda edit_id: publisher.get_details("com.example.app", edit_id),
            Resolution.DISCARD,
        )

    The publisher only needs insert_edit, commit_edit and delete_edit; see
    api.publisher_client.PublisherClient.
    """

    def __init__(self, publisher: Any):
        """
        Initialize the session manager.

        Args:
            publisher: API client used to open and resolve edits
        """
        self.publisher = publisher
        self.sessions: Dict[str, EditSession] = {}

    # ========================================================================
    # Public API
    # ========================================================================

    async def run_in_edit_session(
        self,
        package_name: str,
        body: SessionBody,
        resolution: Resolution = Resolution.DISCARD
    ) -> R:
        """
        Open an edit, run body(edit_id) inside it, then resolve it.

        Args:
            package_name: Target app package
            body: Coroutine function receiving the edit id
            resolution: COMMIT to persist, DISCARD for read-only work

        Returns:
            Whatever body returned

        Raises:
            EditOpenError: If the edit could not be opened (body not run)
            EditBodyError: If body failed (edit discarded)
            EditCommitError: If body succeeded but commit failed
            EditDiscardError: If body succeeded but discard failed
            asyncio.CancelledError: Re-raised after the edit is discarded
        """
        session = await self._open(package_name, resolution)

        try:
            result = await body(session.edit_id)
        except asyncio.CancelledError:
            # Cancelled work is never committed; the discard outlives the cancel
            logger.warning(
                f"Edit {session.edit_id} for {package_name} cancelled; discarding"
            )
            await asyncio.shield(self._resolve_quietly(session, Resolution.DISCARD))
            session.status = SessionStatus.FAILED
            raise
        except Exception as body_error:
            # Failed work is never committed
            logger.warning(
                f"Edit {session.edit_id} for {package_name} failed "
                f"({type(body_error).__name__}: {body_error}); discarding"
            )
            discard_error = await self._resolve_quietly(session, Resolution.DISCARD)
            session.status = SessionStatus.FAILED
            raise EditBodyError(session, body_error, discard_error) from body_error

        await self._resolve(session, resolution)
        return result

    def get_status(self, edit_id: str) -> Dict[str, Any]:
        """
        Get status of an open session.

        Args:
            edit_id: Edit identifier issued by the API

        Returns:
            Session status information

        Raises:
            KeyError: If no open session has this id
        """
        session = self.sessions[edit_id]
        return {
            "edit_id": session.edit_id,
            "package_name": session.package_name,
            "status": session.status.value,
            "requested_resolution": session.requested_resolution.value,
            "opened_at": session.opened_at.isoformat(),
        }

    @property
    def open_sessions(self) -> Dict[str, EditSession]:
        """Sessions opened but not yet resolved."""
        return dict(self.sessions)

    # ========================================================================
    # Internal Helpers
    # ========================================================================

    async def _open(self, package_name: str, resolution: Resolution) -> EditSession:
        """Open an edit and register the session."""
        try:
            edit_id = await self.publisher.insert_edit(package_name)
        except Exception as e:
            logger.error(f"Failed to open edit for {package_name}: {e}")
            raise EditOpenError(package_name, e) from e

        session = EditSession(
            package_name=package_name,
            edit_id=edit_id,
            requested_resolution=resolution,
            opened_at=datetime.now(timezone.utc),
        )
        self.sessions[edit_id] = session

        logger.info(
            f"Edit {edit_id} opened for {package_name} "
            f"(resolution: {resolution.value})"
        )
        return session

    async def _resolve(self, session: EditSession, resolution: Resolution) -> None:
        """Resolve a session after a successful body, raising on failure."""
        try:
            await self._send_resolution(session, resolution)
        except Exception as e:
            session.status = SessionStatus.FAILED
            logger.error(
                f"Failed to {resolution.value} edit {session.edit_id} "
                f"for {session.package_name}: {e}"
            )
            if resolution == Resolution.COMMIT:
                raise EditCommitError(session, e) from e
            raise EditDiscardError(session, e) from e
        finally:
            self._cleanup_session(session.edit_id)

    async def _resolve_quietly(
        self,
        session: EditSession,
        resolution: Resolution
    ) -> Optional[Exception]:
        """Resolve a session on a failure path, returning the error instead of raising."""
        try:
            await self._send_resolution(session, resolution)
        except Exception as e:
            logger.error(
                f"Failed to {resolution.value} edit {session.edit_id} "
                f"for {session.package_name}: {e}"
            )
            return e
        finally:
            self._cleanup_session(session.edit_id)
        return None

    async def _send_resolution(self, session: EditSession, resolution: Resolution) -> None:
        """Issue the commit or delete call for a session."""
        session.resolved_with = resolution

        if resolution == Resolution.COMMIT:
            await self.publisher.commit_edit(session.package_name, session.edit_id)
            session.status = SessionStatus.COMMITTED
        else:
            await self.publisher.delete_edit(session.package_name, session.edit_id)
            session.status = SessionStatus.DISCARDED

        logger.info(
            f"Edit {session.edit_id} for {session.package_name} "
            f"{session.status.value}"
        )

    def _cleanup_session(self, edit_id: str) -> None:
        """Forget a resolved session."""
        if edit_id in self.sessions:
            del self.sessions[edit_id]
