"""Owner Pay MCP server."""
