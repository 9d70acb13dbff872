"""Configuration for play-console-mcp."""
