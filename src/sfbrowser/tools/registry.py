"""Registration of control-protocol operations."""

from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..automation.types import ToolResult
from ..core.errors import ErrorCode


class ToolArgs(BaseModel):
    """Base for argument records; accepts camelCase keys on the wire and snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NoArgs(ToolArgs):
    pass


Handler = Callable[..., Awaitable[ToolResult]]


@dataclass
class ToolSpec:
    name: str
    args_model: Type[ToolArgs]
    handler: Handler
    description: str
    group: str
    action: str
    timeout_code: Optional[ErrorCode] = None

    def describe(self) -> Dict:
        return {
            "name": self.name,
            "description": self.description,
            "group": self.group,
            "inputSchema": self.args_model.model_json_schema(by_alias=True),
        }


# Dictionary of registered operations, in registration order
TOOLS: Dict[str, ToolSpec] = {}


def tool(
    name: str,
    args_model: Type[ToolArgs] = NoArgs,
    *,
    description: str,
    group: str,
    action: str,
    timeout_code: Optional[ErrorCode] = None,
):
    """Decorator to register an operation handler ``async (toolbox, args) -> ToolResult``."""
    def decorator(handler: Handler) -> Handler:
        TOOLS[name] = ToolSpec(
            name=name,
            args_model=args_model,
            handler=handler,
            description=description,
            group=group,
            action=action,
            timeout_code=timeout_code,
        )
        return handler
    return decorator


def list_tools(group: Optional[str] = None) -> List[ToolSpec]:
    return [spec for spec in TOOLS.values() if group is None or spec.group == group]
