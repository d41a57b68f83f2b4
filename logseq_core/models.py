# =============================================================================
# logseq_core/models.py  —  Data Models (the "nouns" of the bridge)
# =============================================================================
#
# These dataclasses define the shape of everything that flows between the
# MCP front-end, the dispatcher, and the Logseq HTTP API.
#
# TWO KINDS OF MODELS LIVE HERE:
#   1. Envelope models (ToolDescriptor, ToolCall, RemoteRequest, ToolResult,
#      Settings) — the same for every tool.
#   2. Per-tool argument structs (PageRef, CreateBlockArgs, ...) — what the
#      dispatcher turns a loose JSON arguments object into after validation.
#      Nothing past the dispatcher boundary ever sees an unvalidated dict.
#
# Logseq's own payloads (pages, blocks, graph info) are NOT modelled: the API
# is schema-less, so we pass its JSON through untouched.
# =============================================================================

import json
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional


# -----------------------------------------------------------------------------
# Settings — process-wide connection settings
# -----------------------------------------------------------------------------
# Built once at startup by config.load_settings() and shared (read-only) by
# every API call.  Frozen, so nothing can rewrite the token at runtime.
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class Settings:
    """Where the Logseq API lives and how to authenticate against it."""

    token: str                                  # Bearer token from Logseq's API server
    base_url: str = "http://localhost:12315"    # Logseq's default HTTP API address
    timeout_seconds: float = 30.0               # Upper bound for one API request
    log_level: str = "INFO"

    @property
    def api_url(self) -> str:
        return f"{self.base_url}/api"

    def __repr__(self) -> str:
        # Keep the token out of logs and tracebacks.
        return (
            f"Settings(base_url={self.base_url!r}, token='***', "
            f"timeout_seconds={self.timeout_seconds!r}, log_level={self.log_level!r})"
        )


# -----------------------------------------------------------------------------
# ToolDescriptor — one entry of the tool catalog
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ToolDescriptor:
    """A tool as advertised to MCP callers on tools/list."""

    name: str                                   # Stable identifier, e.g. "get_page"
    description: str                            # What the LLM reads to decide when to call it
    parameter_schema: dict[str, Any]            # JSON schema of the arguments object

    @property
    def required(self) -> list[str]:
        return list(self.parameter_schema.get("required", []))

    @property
    def properties(self) -> list[str]:
        return list(self.parameter_schema.get("properties", {}).keys())


# -----------------------------------------------------------------------------
# ToolCall — one incoming invocation
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ToolCall:
    """A tool name plus the caller's (unvalidated) arguments."""

    name: str
    arguments: Optional[Mapping[str, Any]] = None


# -----------------------------------------------------------------------------
# RemoteRequest — one outgoing Logseq API call
# -----------------------------------------------------------------------------
# Logseq's API has no named parameters: `args` is positional and its order
# must match the method's signature in the Logseq plugin API exactly.
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class RemoteRequest:
    """A dot-qualified Logseq method and its positional arguments."""

    method: str                                 # e.g. "logseq.Editor.getPage"
    args: list[Any] = field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        return {"method": self.method, "args": list(self.args)}


# -----------------------------------------------------------------------------
# ToolResult — what every tool call produces, success or failure
# -----------------------------------------------------------------------------
@dataclass
class ToolResult:
    """MCP-style result envelope: content blocks plus an error flag."""

    content: list[dict[str, Any]] = field(default_factory=list)
    is_error: bool = False

    @classmethod
    def success(cls, data: Any = None, text: Optional[str] = None) -> "ToolResult":
        """Build a success result.

        If `text` is omitted, `data` is rendered as pretty-printed JSON.
        """
        if text is None:
            text = to_json_text(data)
        return cls(content=[{"type": "text", "text": text}], is_error=False)

    @classmethod
    def failure(cls, message: str) -> "ToolResult":
        return cls(content=[{"type": "text", "text": message}], is_error=True)

    @property
    def text(self) -> str:
        return "\n".join(
            block["text"] for block in self.content if block.get("type") == "text"
        )


def to_json_text(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


# =============================================================================
# Per-tool argument structs
# =============================================================================
# Produced by dispatcher validation.  Optional fields are None when the caller
# left them out.
# =============================================================================
@dataclass(frozen=True)
class NoArgs:
    """Arguments of tools that take none (list_pages, get_current_page, ...)."""


@dataclass(frozen=True)
class PageRef:
    name_or_uuid: str                           # Page name (as shown in Logseq) or page UUID


@dataclass(frozen=True)
class BlockRef:
    uuid: str


@dataclass(frozen=True)
class CreatePageArgs:
    name: str
    properties: Optional[dict[str, Any]] = None  # e.g. {"tags": ["project"]}


@dataclass(frozen=True)
class CreateBlockArgs:
    parent: str                                 # Page name or block UUID
    content: str
    position: str = "child"                     # "child", "sibling" or "before"
    properties: Optional[dict[str, Any]] = None


@dataclass(frozen=True)
class UpdateBlockArgs:
    uuid: str
    content: str
    properties: Optional[dict[str, Any]] = None


@dataclass(frozen=True)
class QueryArgs:
    query: str


@dataclass(frozen=True)
class StateKeyArgs:
    key: str                                    # e.g. "ui/theme"
