"""
Manager components for play-console-mcp.
"""

from .edit_session_manager import (
    EditSessionManager,
    EditSession,
    Resolution,
    SessionStatus,
    # Exceptions
    EditSessionError,
    EditOpenError,
    EditBodyError,
    EditResolutionError,
    EditCommitError,
    EditDiscardError,
)

__all__ = [
    'EditSessionManager',
    'EditSession',
    'Resolution',
    'SessionStatus',
    # Exceptions
    'EditSessionError',
    'EditOpenError',
    'EditBodyError',
    'EditResolutionError',
    'EditCommitError',
    'EditDiscardError',
]
