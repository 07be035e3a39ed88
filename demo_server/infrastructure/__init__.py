"""Infrastructure Layer — logging setup and the MCP stdio binding."""
