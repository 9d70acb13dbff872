"""Main MCP server implementation for the Google Play Console."""

import asyncio
import logging
import sys
from typing import Optional, Sequence

from mcp import Tool
from mcp.server import Server, NotificationOptions
from mcp.server.models import InitializationOptions
from mcp.types import TextContent

from .auth.credentials import CredentialError, CredentialProvider
from .config.settings import SERVER_NAME, SERVER_VERSION, SettingsError, load_settings
from .context import ContextFactory, make_context_factory
from .tools.play_tools import PlayConsoleTools

logger = logging.getLogger(__name__)


class PlayConsoleMCPServer:
    """MCP Server exposing Play Console tools."""

    def __init__(self, context_factory: ContextFactory):
        """Initialize the MCP server.

        Args:
            context_factory: Builds the credential/API client context for
                each tool invocation
        """
        self.play_tools = PlayConsoleTools(context_factory)

        # Create MCP server instance
        self.server = Server(SERVER_NAME)

        # Register handlers
        self._register_handlers()

    def _register_handlers(self):
        """Register all MCP handlers."""

        @self.server.list_tools()
        async def handle_list_tools() -> list[Tool]:
            """List all available tools."""
            return self.play_tools.get_tools()

        # Arguments are validated by the tool models, which report VALIDATION_ERROR
        @self.server.call_tool(validate_input=False)
        async def handle_call_tool(name: str, arguments: dict) -> list[TextContent]:
            """Run one tool invocation to completion."""
            logger.info(f"Tool call: {name}")
            text = await self.play_tools.handle_tool(name, arguments)
            return [TextContent(type="text", text=text)]

    async def run(self):
        """Run the MCP server over stdio."""
        from mcp.server.stdio import stdio_server

        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                InitializationOptions(
                    server_name=SERVER_NAME,
                    server_version=SERVER_VERSION,
                    capabilities=self.server.get_capabilities(
                        notification_options=NotificationOptions(),
                        experimental_capabilities={}
                    )
                )
            )


def main(argv: Optional[Sequence[str]] = None):
    """Main entry point for the MCP server."""
    try:
        settings = load_settings(argv)
    except SettingsError as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)

    # Logs go to stderr; stdout carries the MCP stream
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    provider = CredentialProvider(settings.key_file)
    try:
        provider.get()
    except CredentialError as e:
        logger.error(f"Startup failed: {e}")
        sys.exit(1)

    server = PlayConsoleMCPServer(make_context_factory(provider, timeout=settings.timeout))
    logger.info(f"Serving {SERVER_NAME} {SERVER_VERSION} on stdio")
    asyncio.run(server.run())


if __name__ == "__main__":
    main()
