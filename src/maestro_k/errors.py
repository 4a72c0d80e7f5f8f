"""Error types raised by the MCP client and the validation pipeline.

Every error derives from MaestroError so the CLI can report them in one place.
"""

from pathlib import Path


class MaestroError(Exception):
    """Base class for all maestro-k errors.

    ``operation`` names the client call that was running when the error was
    raised. It is prepended to the message once set.
    """

    operation: str | None = None

    def __str__(self) -> str:
        message = super().__str__()
        if self.operation:
            return f"{self.operation}: {message}"
        return message


class EncodingError(MaestroError):
    """A value could not be serialized to JSON."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"encoding error: {detail}")


class TransportError(MaestroError):
    """The HTTP request failed, timed out, or returned a non-2xx status."""

    TIMEOUT = "timeout"
    NETWORK = "network"
    HTTP_STATUS = "http_status"

    def __init__(self, cause: str, url: str, status_code: int | None = None, body: str = "", detail: str = ""):
        self.cause = cause
        self.url = url
        self.status_code = status_code
        self.body = body
        self.detail = detail
        super().__init__(self._describe())

    def _describe(self) -> str:
        if self.cause == self.HTTP_STATUS:
            return f"HTTP error {self.status_code} from {self.url}: {self.body}"
        if self.cause == self.TIMEOUT:
            return f"request to {self.url} timed out: {self.detail}"
        return f"failed to make HTTP request to {self.url}: {self.detail}"


class ParseError(MaestroError):
    """The server answered but the payload could not be understood."""

    def __init__(self, raw: bytes, detail: str = ""):
        self.raw = raw
        self.detail = detail
        text = raw.decode("utf-8", errors="replace")
        super().__init__(f"failed to parse database list: {detail} (payload: {text!r})")


class NotFoundError(MaestroError):
    def __init__(self, path: Path | str, kind: str = "YAML"):
        self.path = Path(path)
        self.kind = kind
        super().__init__(f"{kind} file not found: {path}")


class FileReadError(MaestroError):
    """An input path exists but cannot be read as a file."""

    def __init__(self, path: Path | str, detail: str):
        self.path = Path(path)
        self.detail = detail
        super().__init__(f"failed to read {path}: {detail}")


class YamlSyntaxError(MaestroError):
    def __init__(self, path: Path | str, detail: str):
        self.path = Path(path)
        self.detail = detail
        super().__init__(f"invalid YAML format in {path}: {detail}")


class SchemaLoadError(MaestroError):
    """The schema file is unreadable, not JSON, or not a valid JSON Schema."""

    def __init__(self, path: Path | str, detail: str):
        self.path = Path(path)
        self.detail = detail
        super().__init__(f"schema error in {path}: {detail}")


class SchemaViolation(MaestroError):
    """The document does not conform to the schema.

    ``findings`` holds every violation in the order the validator reported them.
    """

    def __init__(self, findings: list):
        self.findings = list(findings)
        super().__init__(f"validation failed with {self.count} errors")

    @property
    def count(self) -> int:
        return len(self.findings)
