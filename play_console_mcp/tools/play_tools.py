"""Play Console tools.

Provides the MCP tool catalog and dispatcher for managing an app on the
Google Play Console:
- App details, tracks and store listings (read inside a discarded edit)
- Listing updates and releases (written inside a committed edit)
- Reviews and replies (no edit needed)
"""

import logging
from typing import Awaitable, Callable, Dict, List, Tuple, Type

from mcp import Tool
from pydantic import ValidationError

from ..auth.credentials import CredentialError
from ..context import ContextFactory, ToolContext
from ..managers.edit_session_manager import (
    EditBodyError,
    EditResolutionError,
    EditSessionError,
    Resolution,
)
from ..api.publisher_client import PublisherAPIError
from ..models.tool_args import (
    CreateReleaseArgs,
    GetAppInfoArgs,
    GetListingArgs,
    GetReviewsArgs,
    GetStatisticsArgs,
    ListAppsArgs,
    ListReleasesArgs,
    ReplyToReviewArgs,
    ToolArgs,
    UpdateListingArgs,
)
from ..utils.response import data_response, error_response, exception_to_error_code

logger = logging.getLogger(__name__)

LIST_APPS_ADVISORY = (
    "To list apps, you need to provide package names. "
    "The Play Developer API requires knowing package names in advance."
)

Handler = Callable[[ToolContext, ToolArgs], Awaitable[str]]


class PlayConsoleTools:
    """Tool catalog and dispatch for the Play Console."""

    def __init__(self, context_factory: ContextFactory):
        """Initialize with a context factory.

        Args:
            context_factory: Produces the credential/API client context used
                by one tool invocation
        """
        self.context_factory = context_factory
        self._catalog: Dict[str, Tuple[str, Type[ToolArgs], Handler]] = {
            "list_apps": (
                "List all apps in your Google Play Console",
                ListAppsArgs,
                self._list_apps,
            ),
            "get_app_info": (
                "Get detailed information about a specific app",
                GetAppInfoArgs,
                self._get_app_info,
            ),
            "list_releases": (
                "List releases for an app in a specific track",
                ListReleasesArgs,
                self._list_releases,
            ),
            "get_listing": (
                "Get the store listing of an app for a language",
                GetListingArgs,
                self._get_listing,
            ),
            "update_listing": (
                "Update store listing text for a language; only the given fields change",
                UpdateListingArgs,
                self._update_listing,
            ),
            "create_release": (
                "Release a version code to a track, optionally as a staged rollout",
                CreateReleaseArgs,
                self._create_release,
            ),
            "get_statistics": (
                "Get app statistics (ratings, installs or crashes)",
                GetStatisticsArgs,
                self._get_statistics,
            ),
            "get_reviews": (
                "Get recent reviews for an app",
                GetReviewsArgs,
                self._get_reviews,
            ),
            "reply_to_review": (
                "Reply to a user review",
                ReplyToReviewArgs,
                self._reply_to_review,
            ),
        }

    def get_tools(self) -> List[Tool]:
        """Return the Play Console tools."""
        return [
            Tool(name=name, description=description, inputSchema=args_model.input_schema())
            for name, (description, args_model, _) in self._catalog.items()
        ]

    async def handle_tool(self, name: str, arguments: dict) -> str:
        """Validate arguments, build a context and run the tool.

        Args:
            name: Tool name
            arguments: Raw tool arguments

        Returns:
            Result text; failures come back as error text, never raised
        """
        entry = self._catalog.get(name)
        if not entry:
            return error_response(f"Unknown tool: {name}", "UNKNOWN_TOOL")
        _, args_model, handler = entry

        try:
            args = args_model.model_validate(arguments or {})
        except ValidationError as e:
            logger.info(f"Rejected arguments for {name}: {e.error_count()} error(s)")
            return error_response(_format_validation_error(e), "VALIDATION_ERROR")

        try:
            context = self.context_factory()
        except CredentialError as e:
            logger.error(f"Could not obtain credentials for {name}: {e}")
            return error_response(str(e), "CREDENTIAL_ERROR")

        try:
            return await handler(context, args)
        except EditBodyError as e:
            # Report the API failure that happened inside the edit
            logger.error(f"{name} failed inside edit {e.session.edit_id}: {e}")
            return error_response(str(e), exception_to_error_code(e.cause))
        except (EditSessionError, PublisherAPIError) as e:
            if isinstance(e, EditResolutionError):
                logger.error(f"{name} could not resolve its edit: {e}")
            else:
                logger.error(f"{name} failed: {e}")
            return error_response(str(e), exception_to_error_code(e))
        except Exception as e:
            logger.exception(f"Error in {name}")
            return error_response(str(e), "TOOL_EXECUTION_ERROR")

    # ========== Transaction-free tools ==========

    async def _list_apps(self, context: ToolContext, args: ListAppsArgs) -> str:
        return LIST_APPS_ADVISORY

    async def _get_reviews(self, context: ToolContext, args: GetReviewsArgs) -> str:
        reviews = await context.publisher.list_reviews(args.package_name, args.max_results)
        return data_response(reviews)

    async def _reply_to_review(self, context: ToolContext, args: ReplyToReviewArgs) -> str:
        await context.publisher.reply_to_review(
            args.package_name, args.review_id, args.reply_text
        )
        return f"Successfully replied to review {args.review_id} for {args.package_name}"

    # ========== Read-only edit tools (always discarded) ==========

    async def _get_app_info(self, context: ToolContext, args: GetAppInfoArgs) -> str:
        details = await context.sessions.run_in_edit_session(
            args.package_name,
            lambda edit_id: context.publisher.get_details(args.package_name, edit_id),
            Resolution.DISCARD,
        )
        return data_response(details)

    async def _list_releases(self, context: ToolContext, args: ListReleasesArgs) -> str:
        track_info = await context.sessions.run_in_edit_session(
            args.package_name,
            lambda edit_id: context.publisher.get_track(args.package_name, edit_id, args.track),
            Resolution.DISCARD,
        )
        return data_response(track_info)

    async def _get_listing(self, context: ToolContext, args: GetListingArgs) -> str:
        listing = await context.sessions.run_in_edit_session(
            args.package_name,
            lambda edit_id: context.publisher.get_listing(
                args.package_name, edit_id, args.language
            ),
            Resolution.DISCARD,
        )
        return data_response(listing)

    async def _get_statistics(self, context: ToolContext, args: GetStatisticsArgs) -> str:
        if args.metric == "ratings":
            details = await context.sessions.run_in_edit_session(
                args.package_name,
                lambda edit_id: context.publisher.get_details(args.package_name, edit_id),
                Resolution.DISCARD,
            )
            return data_response(details)

        # TODO: read installs/crashes from the Play Developer Reporting API
        return (
            f"Statistics for '{args.metric}' are not implemented: they require the "
            f"Play Developer Reporting API, which this server does not call. "
            f"See the Statistics section of the Play Console for {args.package_name}."
        )

    # ========== Write tools (committed on success) ==========

    async def _update_listing(self, context: ToolContext, args: UpdateListingArgs) -> str:
        fields = args.listing_fields()
        await context.sessions.run_in_edit_session(
            args.package_name,
            lambda edit_id: context.publisher.update_listing(
                args.package_name, edit_id, args.language, fields
            ),
            Resolution.COMMIT,
        )
        return (
            f"Successfully updated {args.language} listing for {args.package_name} "
            f"({', '.join(sorted(fields))})"
        )

    async def _create_release(self, context: ToolContext, args: CreateReleaseArgs) -> str:
        release = args.release()
        await context.sessions.run_in_edit_session(
            args.package_name,
            lambda edit_id: context.publisher.update_track(
                args.package_name, edit_id, args.track, [release]
            ),
            Resolution.COMMIT,
        )
        message = (
            f"Successfully created release for version {args.version_code} "
            f"on {args.track} track (status: {release['status']}"
        )
        if args.is_staged:
            message += f", rollout: {args.user_fraction:.0%}"
        return message + ")"


def _format_validation_error(error: ValidationError) -> str:
    """One line per invalid field, e.g. ``track: Input should be 'internal', ...``."""
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "arguments"
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)
