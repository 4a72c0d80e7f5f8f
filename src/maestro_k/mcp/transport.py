"""HTTP transport for MCP tool calls.

A tool is invoked with ``POST {base_url}/mcp/tools/{tool_name}`` and a JSON
body holding its parameters. The response body is returned untouched.

``timeout`` bounds the whole call, body included, not just each socket read.
"""

import json
import time
from urllib.parse import quote, urljoin

import requests
from urllib3.exceptions import ReadTimeoutError

from maestro_k.errors import EncodingError, TransportError

DEFAULT_TIMEOUT = 30.0
BODY_SNIPPET_LIMIT = 1024
# A larger read blocks until the whole chunk has arrived, which would let a
# slow sender hold the call past the deadline.
BODY_CHUNK_SIZE = 1


def tool_url(base_url: str, tool_name: str) -> str:
    """Build the tool address, keeping any path prefix on ``base_url``."""
    base = base_url if base_url.endswith("/") else base_url + "/"
    return urljoin(base, "mcp/tools/" + quote(tool_name, safe=""))


def post_tool(base_url: str, tool_name: str, params: dict | None = None, timeout: float = DEFAULT_TIMEOUT) -> bytes:
    """Call a tool once and return the raw 2xx response body."""
    url = tool_url(base_url, tool_name)

    try:
        payload = json.dumps(params if params is not None else {})
    except (TypeError, ValueError) as e:
        raise EncodingError(f"failed to marshal request for {tool_name}: {e}") from e

    deadline = time.monotonic() + timeout
    try:
        resp = requests.post(
            url,
            data=payload.encode("utf-8"),
            headers={"Content-Type": "application/json"},
            timeout=timeout,
            stream=True,
        )
    except requests.Timeout as e:
        raise TransportError(TransportError.TIMEOUT, url, detail=str(e)) from e
    except requests.RequestException as e:
        raise TransportError(TransportError.NETWORK, url, detail=str(e)) from e

    try:
        if not 200 <= resp.status_code < 300:
            raise TransportError(
                TransportError.HTTP_STATUS,
                url,
                status_code=resp.status_code,
                body=_body_snippet(resp, url, deadline),
            )
        return _read_body(resp, url, deadline)
    finally:
        resp.close()


def _read_body(resp: requests.Response, url: str, deadline: float, limit: int | None = None) -> bytes:
    """Read the body until EOF, ``limit`` bytes, or the deadline."""
    if time.monotonic() > deadline:
        raise TransportError(TransportError.TIMEOUT, url, detail="no response body before the deadline")

    body = bytearray()
    try:
        for chunk in resp.iter_content(chunk_size=BODY_CHUNK_SIZE):
            body += chunk
            if limit is not None and len(body) >= limit:
                break
            if time.monotonic() > deadline:
                raise TransportError(
                    TransportError.TIMEOUT,
                    url,
                    detail=f"response body not complete before the deadline ({len(body)} bytes read)",
                )
    except requests.ConnectionError as e:
        # requests reports a read timeout while streaming as a ConnectionError.
        cause = e.args[0] if e.args else None
        if isinstance(cause, ReadTimeoutError):
            raise TransportError(TransportError.TIMEOUT, url, detail=str(e)) from e
        raise TransportError(TransportError.NETWORK, url, detail=str(e)) from e
    except requests.RequestException as e:
        raise TransportError(TransportError.NETWORK, url, detail=str(e)) from e
    return bytes(body)


def _body_snippet(resp: requests.Response, url: str, deadline: float) -> str:
    # The error body usually carries the server's diagnostic; losing it is not fatal.
    try:
        raw = _read_body(resp, url, deadline, limit=BODY_SNIPPET_LIMIT)
    except TransportError:
        return ""
    return raw[:BODY_SNIPPET_LIMIT].decode("utf-8", errors="replace")
