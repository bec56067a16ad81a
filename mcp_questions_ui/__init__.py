"""MCP entry point for questions-ui."""
