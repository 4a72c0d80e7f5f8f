import json
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest


class FakeMcpServer:
    """Minimal HTTP server that answers tool calls with canned responses."""

    def __init__(self):
        self.status = 200
        self.body = b""
        self.delay = 0.0
        self.trickle = 0.0
        self.requests = []
        self._httpd = ThreadingHTTPServer(("127.0.0.1", 0), self._handler())
        self._httpd.daemon_threads = True
        self._thread = threading.Thread(target=self._httpd.serve_forever, daemon=True)

    @property
    def url(self) -> str:
        host, port = self._httpd.server_address[:2]
        return f"http://{host}:{port}"

    def respond(self, body, status: int = 200, delay: float = 0.0, trickle: float = 0.0):
        """Queue the next response. ``trickle`` sends the body one byte per interval."""
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.body = body
        self.status = status
        self.delay = delay
        self.trickle = trickle

    def start(self):
        self._thread.start()

    def stop(self):
        self._httpd.shutdown()
        self._httpd.server_close()

    def _handler(self):
        server = self

        class Handler(BaseHTTPRequestHandler):
            def do_POST(self):
                length = int(self.headers.get("Content-Length", 0))
                server.requests.append({
                    "path": self.path,
                    "content_type": self.headers.get("Content-Type"),
                    "body": json.loads(self.rfile.read(length) or b"null"),
                })
                if server.delay:
                    time.sleep(server.delay)
                try:
                    self.send_response(server.status)
                    self.send_header("Content-Type", "text/plain")
                    self.send_header("Content-Length", str(len(server.body)))
                    self.end_headers()
                    if server.trickle:
                        for i in range(len(server.body)):
                            self.wfile.write(server.body[i:i + 1])
                            time.sleep(server.trickle)
                    else:
                        self.wfile.write(server.body)
                except (BrokenPipeError, ConnectionResetError):
                    pass

            def log_message(self, format, *args):
                pass

        return Handler


@pytest.fixture
def mcp_server():
    server = FakeMcpServer()
    server.start()
    yield server
    server.stop()
