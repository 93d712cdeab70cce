# =============================================================================
# tools/registry.py  —  Operation Registry & Dispatcher
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Holds the name → OperationSpec map and runs every tool call through the
#   same pipeline:
#
#     1. look up the operation        (unknown name    → error result)
#     2. validate raw arguments       (pydantic errors → error result,
#                                      no network call is made)
#     3. call the handler             (AbuseIPDBError  → error result,
#                                      anything else   → logged + error result)
#     4. token budget guard           (guarded operations only;
#                                      a denial is advisory text, not an error)
#
#   dispatch() never raises.  The MCP layer decides how to surface an
#   error result to the host.
#
# LIFECYCLE:
#   Operations are registered once at startup (tools/operations.py).
#   After that the map is only read.  Registering a name twice is a
#   startup error.
# =============================================================================

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from pydantic import BaseModel, ValidationError

from core.errors import AbuseIPDBError
from core.token_budget import DEFAULT_MAX_TOKENS, check_token_budget

logger = logging.getLogger(__name__)

Handler = Callable[[BaseModel], str]


@dataclass(frozen=True)
class OperationSpec:
    """A callable operation: name, contract, and the code behind it."""

    name: str
    description: str
    schema: type[BaseModel]
    handler: Handler
    guarded: bool = False


@dataclass(frozen=True)
class ToolResult:
    """Text for the host, plus whether it describes a failure."""

    text: str
    is_error: bool = False


def format_validation_error(name: str, error: ValidationError) -> str:
    """List every failing field and why, one per line."""
    lines = [f"Invalid arguments for {name}:"]
    for item in error.errors():
        field = ".".join(str(part) for part in item["loc"]) or "(arguments)"
        lines.append(f"  - {field}: {item['msg']}")
    return "\n".join(lines)


class ToolRegistry:
    """Name-indexed operations plus the dispatch pipeline."""

    def __init__(self, max_tokens: int = DEFAULT_MAX_TOKENS) -> None:
        self.max_tokens = max_tokens
        self._operations: dict[str, OperationSpec] = {}

    def register(
        self,
        name: str,
        description: str,
        schema: type[BaseModel],
        handler: Handler,
        guarded: bool = False,
    ) -> OperationSpec:
        if name in self._operations:
            raise ValueError(f"Operation {name!r} is already registered")
        spec = OperationSpec(name, description, schema, handler, guarded)
        self._operations[name] = spec
        return spec

    def get(self, name: str) -> Optional[OperationSpec]:
        return self._operations.get(name)

    def operations(self) -> list[OperationSpec]:
        return list(self._operations.values())

    def __contains__(self, name: object) -> bool:
        return name in self._operations

    def dispatch(self, name: str, raw_arguments: Optional[Mapping[str, Any]] = None) -> ToolResult:
        spec = self._operations.get(name)
        if spec is None:
            return ToolResult(f"Unknown operation: {name}", is_error=True)

        if raw_arguments is None:
            raw_arguments = {}
        if not isinstance(raw_arguments, Mapping):
            return ToolResult(
                f"Invalid arguments for {name}: expected an object of named "
                f"arguments, got {type(raw_arguments).__name__}",
                is_error=True,
            )

        try:
            args = spec.schema.model_validate(dict(raw_arguments))
        except ValidationError as e:
            return ToolResult(format_validation_error(name, e), is_error=True)

        try:
            text = spec.handler(args)
        except AbuseIPDBError as e:
            logger.warning("%s failed: %s", name, e)
            return ToolResult(f"Error in {name}: {e}", is_error=True)
        except Exception as e:
            logger.exception("Unexpected error in %s", name)
            return ToolResult(
                f"Unexpected error in {name}: {type(e).__name__}: {e}", is_error=True
            )

        if spec.guarded:
            decision = check_token_budget(
                text,
                self.max_tokens,
                override=bool(getattr(args, "break_token_rule", False)),
            )
            if not decision.allowed:
                logger.info(
                    "%s response withheld: ~%d tokens > %d",
                    name, decision.estimated_tokens, decision.max_tokens,
                )
                return ToolResult(decision.error or "")

        return ToolResult(text)
