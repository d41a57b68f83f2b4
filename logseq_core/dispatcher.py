# =============================================================================
# logseq_core/dispatcher.py  —  The Tool Dispatcher
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Given a ToolCall (tool name + loose JSON arguments) it:
#     1. Looks the tool up (unknown name → error result, no HTTP)
#     2. Validates the arguments into a typed struct (bad → error, no HTTP)
#     3. Makes exactly ONE Logseq API call with positional args in the
#        order the Logseq plugin API documents
#     4. Shapes the response into a ToolResult
#
# dispatch() NEVER RAISES.  Every failure, including ones we did not
# anticipate, comes back as a ToolResult with is_error=True.
#
# NULL MEANS DIFFERENT THINGS:
#   Logseq answers `null` both for "that entity does not exist" and for
#   "nothing is selected right now".  Per tool:
#     - get_page, get_block, get_page_content (explicit identifier)
#           null → error result ("... not found")
#     - get_current_page/_block/_graph, get_state_from_store
#           null → SUCCESS result saying nothing is active / stored
# =============================================================================

import logging
import re
from typing import Any, Awaitable, Callable, Mapping, Optional, Protocol, Sequence

from logseq_core.catalog import TOOL_CATALOG
from logseq_core.errors import BridgeError, RemoteError, ValidationError
from logseq_core.formatting import (
    INCOMPLETE_TODOS_QUERY,
    format_blocks_as_markdown,
    format_todos,
    search_matches,
    search_query,
    todo_items,
)
from logseq_core.models import (
    BlockRef,
    CreateBlockArgs,
    CreatePageArgs,
    NoArgs,
    PageRef,
    QueryArgs,
    StateKeyArgs,
    ToolCall,
    ToolResult,
    UpdateBlockArgs,
)

logger = logging.getLogger(__name__)

_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)

POSITIONS = ("child", "sibling", "before")


class RemoteCaller(Protocol):
    """Anything that can perform a Logseq API call (LogseqClient, test fakes)."""

    async def call(self, method: str, args: Sequence[Any] = ()) -> Any: ...


def is_uuid(value: str) -> bool:
    return bool(_UUID_RE.match(value))


# =============================================================================
# Argument validation
# =============================================================================
# Small readers that pull one field out of the arguments object and check its
# JSON type.  Each tool's parser below composes them, then _reject_unknown()
# enforces the catalog's additionalProperties: false.
# =============================================================================
def _require_str(args: Mapping[str, Any], key: str, allow_blank: bool = False) -> str:
    if key not in args or args[key] is None:
        raise ValidationError(f"missing required parameter: {key}")
    value = args[key]
    if not isinstance(value, str):
        raise ValidationError(
            f"parameter '{key}' must be a string, got {_json_type(value)}"
        )
    if not allow_blank and not value.strip():
        raise ValidationError(f"parameter '{key}' must not be empty")
    return value


def _optional_str(args: Mapping[str, Any], key: str) -> Optional[str]:
    if args.get(key) is None:
        return None
    return _require_str(args, key)


def _optional_object(args: Mapping[str, Any], key: str) -> Optional[dict[str, Any]]:
    value = args.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ValidationError(
            f"parameter '{key}' must be an object, got {_json_type(value)}"
        )
    return dict(value)


def _reject_unknown(args: Mapping[str, Any], allowed: Sequence[str]) -> None:
    unknown = sorted(set(args) - set(allowed))
    if unknown:
        raise ValidationError(f"unexpected parameter(s): {', '.join(unknown)}")


def _json_type(value: Any) -> str:
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _parse_none(args: Mapping[str, Any]) -> NoArgs:
    _reject_unknown(args, ())
    return NoArgs()


def _parse_page_ref(args: Mapping[str, Any]) -> PageRef:
    _reject_unknown(args, ("name_or_uuid",))
    return PageRef(name_or_uuid=_require_str(args, "name_or_uuid"))


def _parse_block_ref(args: Mapping[str, Any]) -> BlockRef:
    _reject_unknown(args, ("uuid",))
    return BlockRef(uuid=_require_str(args, "uuid"))


def _parse_create_page(args: Mapping[str, Any]) -> CreatePageArgs:
    _reject_unknown(args, ("name", "properties"))
    return CreatePageArgs(
        name=_require_str(args, "name"),
        properties=_optional_object(args, "properties"),
    )


def _parse_create_block(args: Mapping[str, Any]) -> CreateBlockArgs:
    _reject_unknown(args, ("parent", "content", "position", "properties"))
    parent = _require_str(args, "parent")
    content = _require_str(args, "content", allow_blank=True)
    position = _optional_str(args, "position") or "child"
    if position not in POSITIONS:
        raise ValidationError(
            f"parameter 'position' must be one of {', '.join(POSITIONS)}, got {position!r}"
        )
    if position != "child" and not is_uuid(parent):
        raise ValidationError(
            f"position '{position}' needs a block UUID as parent, got page name {parent!r}"
        )
    return CreateBlockArgs(
        parent=parent,
        content=content,
        position=position,
        properties=_optional_object(args, "properties"),
    )


def _parse_update_block(args: Mapping[str, Any]) -> UpdateBlockArgs:
    _reject_unknown(args, ("uuid", "content", "properties"))
    return UpdateBlockArgs(
        uuid=_require_str(args, "uuid"),
        content=_require_str(args, "content", allow_blank=True),
        properties=_optional_object(args, "properties"),
    )


def _parse_query(args: Mapping[str, Any]) -> QueryArgs:
    _reject_unknown(args, ("query",))
    return QueryArgs(query=_require_str(args, "query"))


def _parse_state_key(args: Mapping[str, Any]) -> StateKeyArgs:
    _reject_unknown(args, ("key",))
    return StateKeyArgs(key=_require_str(args, "key"))


# =============================================================================
# The dispatcher
# =============================================================================
Handler = Callable[[Any], Awaitable[ToolResult]]


class ToolDispatcher:
    """Routes ToolCalls to Logseq API calls and shapes the responses.

    Stateless apart from the shared client, so one instance can serve any
    number of concurrent dispatch() calls.
    """

    def __init__(self, client: RemoteCaller):
        self._client = client
        # tool name → (argument parser, handler)
        self._routes: dict[str, tuple[Callable[[Mapping[str, Any]], Any], Handler]] = {
            "list_pages": (_parse_none, self._list_pages),
            "get_page": (_parse_page_ref, self._get_page),
            "get_page_content": (_parse_page_ref, self._get_page_content),
            "create_page": (_parse_create_page, self._create_page),
            "get_block": (_parse_block_ref, self._get_block),
            "create_block": (_parse_create_block, self._create_block),
            "update_block": (_parse_update_block, self._update_block),
            "search": (_parse_query, self._search),
            "datascript_query": (_parse_query, self._datascript_query),
            "get_current_page": (_parse_none, self._get_current_page),
            "get_current_block": (_parse_none, self._get_current_block),
            "get_current_graph": (_parse_none, self._get_current_graph),
            "get_user_configs": (_parse_none, self._get_user_configs),
            "get_state_from_store": (_parse_state_key, self._get_state_from_store),
            "find_incomplete_todos": (_parse_none, self._find_incomplete_todos),
        }
        missing = {d.name for d in TOOL_CATALOG} ^ set(self._routes)
        if missing:
            raise RuntimeError(f"catalog and dispatcher disagree on tools: {sorted(missing)}")

    @property
    def tool_names(self) -> list[str]:
        return list(self._routes)

    async def dispatch(self, call: ToolCall) -> ToolResult:
        """Run one tool call.  Never raises."""
        route = self._routes.get(call.name)
        if route is None:
            logger.info(f"Rejected call to unknown tool {call.name!r}")
            return ToolResult.failure(f"unknown tool: {call.name}")
        parse, handler = route

        try:
            arguments = call.arguments if call.arguments is not None else {}
            if not isinstance(arguments, Mapping):
                raise ValidationError(
                    f"arguments must be an object, got {_json_type(arguments)}"
                )
            parsed = parse(arguments)
            return await handler(parsed)
        except ValidationError as e:
            logger.info(f"{call.name}: invalid arguments: {e}")
            return ToolResult.failure(f"invalid arguments for {call.name}: {e}")
        except BridgeError as e:
            logger.warning(f"{call.name}: {e}")
            return ToolResult.failure(str(e))
        except Exception as e:
            logger.exception(f"{call.name}: unexpected failure")
            return ToolResult.failure(f"internal error while running {call.name}: {e}")

    # -------------------------------------------------------------------------
    # Pages
    # -------------------------------------------------------------------------
    async def _list_pages(self, _: NoArgs) -> ToolResult:
        pages = await self._client.call("logseq.Editor.getAllPages", [])
        return ToolResult.success(pages if pages is not None else [])

    async def _get_page(self, args: PageRef) -> ToolResult:
        page = await self._client.call("logseq.Editor.getPage", [args.name_or_uuid])
        if page is None:
            return ToolResult.failure(f"page not found: {args.name_or_uuid}")
        return ToolResult.success(page)

    async def _get_page_content(self, args: PageRef) -> ToolResult:
        blocks = await self._client.call(
            "logseq.Editor.getPageBlocksTree", [args.name_or_uuid]
        )
        if blocks is None:
            return ToolResult.failure(f"page not found: {args.name_or_uuid}")
        if not isinstance(blocks, list):
            raise RemoteError(200, f"expected a block list, got: {blocks!r}")
        if not blocks:
            return ToolResult.success(text=f"Page '{args.name_or_uuid}' has no blocks.")
        return ToolResult.success(text=format_blocks_as_markdown(blocks))

    async def _create_page(self, args: CreatePageArgs) -> ToolResult:
        page = await self._client.call(
            "logseq.Editor.createPage", [args.name, args.properties]
        )
        if page is None:
            return ToolResult.failure(
                f"Logseq did not create page {args.name!r} (it may already exist)"
            )
        return ToolResult.success(page)

    # -------------------------------------------------------------------------
    # Blocks
    # -------------------------------------------------------------------------
    async def _get_block(self, args: BlockRef) -> ToolResult:
        block = await self._client.call("logseq.Editor.getBlock", [args.uuid])
        if block is None:
            return ToolResult.failure(f"block not found: {args.uuid}")
        return ToolResult.success(block)

    async def _create_block(self, args: CreateBlockArgs) -> ToolResult:
        opts: dict[str, Any] = {"sibling": args.position in ("sibling", "before")}
        if args.position == "before":
            opts["before"] = True
        if not is_uuid(args.parent):
            opts["isPageBlock"] = True
        if args.properties:
            opts["properties"] = args.properties

        block = await self._client.call(
            "logseq.Editor.insertBlock", [args.parent, args.content, opts]
        )
        if block is None:
            return ToolResult.failure(
                f"Logseq did not create the block (does parent {args.parent!r} exist?)"
            )
        return ToolResult.success(block)

    async def _update_block(self, args: UpdateBlockArgs) -> ToolResult:
        remote_args: list[Any] = [args.uuid, args.content]
        if args.properties:
            remote_args.append({"properties": args.properties})
        await self._client.call("logseq.Editor.updateBlock", remote_args)
        # updateBlock returns no body, so confirm with what was sent.
        return ToolResult.success(
            {"uuid": args.uuid, "content": args.content, "updated": True}
        )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------
    async def _search(self, args: QueryArgs) -> ToolResult:
        result = await self._client.call(
            "logseq.DB.datascriptQuery", [search_query(args.query)]
        )
        _raise_embedded_error(result)
        return ToolResult.success(search_matches(result))

    async def _datascript_query(self, args: QueryArgs) -> ToolResult:
        result = await self._client.call("logseq.DB.datascriptQuery", [args.query])
        _raise_embedded_error(result)
        return ToolResult.success(result)

    async def _find_incomplete_todos(self, _: NoArgs) -> ToolResult:
        result = await self._client.call(
            "logseq.DB.datascriptQuery", [INCOMPLETE_TODOS_QUERY]
        )
        _raise_embedded_error(result)
        return ToolResult.success(text=format_todos(todo_items(result)))

    # -------------------------------------------------------------------------
    # Current selection and app state (null is a normal answer here)
    # -------------------------------------------------------------------------
    async def _get_current_page(self, _: NoArgs) -> ToolResult:
        page = await self._client.call("logseq.Editor.getCurrentPage", [])
        if page is None:
            return ToolResult.success(text="No page is currently open.")
        return ToolResult.success(page)

    async def _get_current_block(self, _: NoArgs) -> ToolResult:
        block = await self._client.call("logseq.Editor.getCurrentBlock", [])
        if block is None:
            return ToolResult.success(text="No block is currently being edited.")
        return ToolResult.success(block)

    async def _get_current_graph(self, _: NoArgs) -> ToolResult:
        graph = await self._client.call("logseq.App.getCurrentGraph", [])
        if graph is None:
            return ToolResult.success(text="No graph is currently open.")
        return ToolResult.success(graph)

    async def _get_user_configs(self, _: NoArgs) -> ToolResult:
        configs = await self._client.call("logseq.App.getUserConfigs", [])
        return ToolResult.success(configs)

    async def _get_state_from_store(self, args: StateKeyArgs) -> ToolResult:
        value = await self._client.call("logseq.App.getStateFromStore", [args.key])
        if value is None:
            return ToolResult.success(text=f"No value stored for key '{args.key}'.")
        return ToolResult.success(value)


def _raise_embedded_error(result: Any) -> None:
    """Some query failures come back as HTTP 200 with {"error": "..."}."""
    if isinstance(result, dict) and result.get("error"):
        raise RemoteError(200, str(result["error"]))
