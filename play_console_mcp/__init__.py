"""MCP server for managing Android apps on the Google Play Console."""

__version__ = "0.1.0"
