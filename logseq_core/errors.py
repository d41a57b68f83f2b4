# =============================================================================
# logseq_core/errors.py  —  Error Taxonomy
# =============================================================================
#
# Every failure the bridge can hit falls into one of these buckets.  The
# dispatcher turns all of them (except ConfigError) into an error ToolResult,
# so the MCP caller always gets a readable message instead of a crash.
#
#   ValidationError  — bad tool arguments, caught before any HTTP request
#   AuthError        — Logseq rejected the token (HTTP 401/403)
#   RemoteError      — any other non-2xx status, or an unreadable body
#   TransportError   — connection refused, DNS failure, timeout
#   ConfigError      — missing/invalid settings at startup (fatal)
# =============================================================================


class BridgeError(Exception):
    """Base class for every error raised by logseq_core."""


class ConfigError(BridgeError):
    """Startup configuration is missing or invalid."""


class ValidationError(BridgeError):
    """Tool arguments do not match the tool's parameter schema."""


class AuthError(BridgeError):
    """The Logseq API rejected the bearer token."""

    def __init__(self, status: int, body: str = ""):
        self.status = status
        self.body = body
        super().__init__(
            f"Logseq rejected the API token (HTTP {status}). "
            "Check that LOGSEQ_API_TOKEN matches the token configured in "
            "Logseq's HTTP API server settings."
        )


class RemoteError(BridgeError):
    """The Logseq API answered with a non-success status."""

    def __init__(self, status: int, body: str = ""):
        self.status = status
        self.body = body
        super().__init__(f"Logseq API error (HTTP {status}): {_truncate(body)}")


class TransportError(BridgeError):
    """The request never produced an HTTP response."""

    def __init__(self, cause: str):
        self.cause = cause
        super().__init__(f"could not reach Logseq API: {cause}")


def _truncate(text: str, limit: int = 500) -> str:
    text = text.strip()
    if len(text) <= limit:
        return text or "<empty body>"
    return text[:limit] + "..."
