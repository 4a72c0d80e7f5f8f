"""MCP server endpoint resolution.

Priority: explicit value (``--mcp-server-uri``) > environment variable > default.
"""

import os

from dotenv import load_dotenv

DEFAULT_SERVER_URI = "http://localhost:8000"
SERVER_URI_ENV = "MAESTRO_KNOWLEDGE_MCP_SERVER_URI"


def load_env_file() -> bool:
    """Load ``.env`` from the working directory if present.

    Existing environment variables win over values in the file.
    Returns True if a file was loaded.
    """
    return load_dotenv(dotenv_path=os.path.join(os.getcwd(), ".env"), override=False)


def resolve_server_uri(explicit: str | None = None) -> str:
    if explicit:
        return explicit

    env_uri = os.getenv(SERVER_URI_ENV)
    if env_uri:
        return env_uri

    return DEFAULT_SERVER_URI
