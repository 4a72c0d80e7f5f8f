"""Client for the maestro knowledge MCP server.

Tools are addressed by name over plain HTTP POST; the client hides that
convention and the server's response encoding from callers.
"""

from maestro_k.config import resolve_server_uri
from maestro_k.errors import EncodingError, ParseError, TransportError
from maestro_k.mcp.models import DatabaseInfo
from maestro_k.mcp.normalizer import normalize_databases
from maestro_k.mcp.transport import DEFAULT_TIMEOUT, post_tool

LIST_DATABASES_TOOL = "list_databases"


class McpClient:
    """Stateless wrapper around MCP tool calls for one server."""

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT):
        self.base_url = base_url
        self.timeout = timeout

    @classmethod
    def from_env(cls, explicit: str | None = None, timeout: float = DEFAULT_TIMEOUT) -> "McpClient":
        """Create a client for the explicit URI, the environment's, or the default."""
        return cls(resolve_server_uri(explicit), timeout=timeout)

    def call_tool(self, tool_name: str, params: dict | None = None) -> bytes:
        """Invoke a tool and return its raw response body."""
        return post_tool(self.base_url, tool_name, params or {}, timeout=self.timeout)

    def list_databases(self) -> list[DatabaseInfo]:
        """Return the vector databases known to the server, in server order."""
        try:
            body = self.call_tool(LIST_DATABASES_TOOL)
            return normalize_databases(body)
        except (EncodingError, TransportError, ParseError) as e:
            e.operation = LIST_DATABASES_TOOL
            raise
