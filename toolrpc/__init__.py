"""toolrpc - an MCP tool server: JSON-RPC dispatch over a registry of tools."""

__version__ = "1.0.0"
