import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ..automation.patterns import LightningPatterns
from ..automation.session import SessionManager
from ..automation.types import ToolResult
from ..automation.waits import LightningWaits
from ..core.errors import ErrorCode, SalesforceError
from .registry import TOOLS

logger = logging.getLogger(__name__)


def _format_validation_error(e: ValidationError) -> str:
    problems = []
    for error in e.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "arguments"
        problems.append(f"{location}: {error.get('msg', 'invalid')}")
    return "; ".join(problems)


class Toolbox:
    """Dispatches named operations against one session.

    ``call`` never raises: bad arguments, unknown names and every failure
    inside a handler come back as a failed ``ToolResult``.
    """

    def __init__(self, session: SessionManager):
        self.session = session

    @property
    def config(self):
        return self.session.config

    async def page(self):
        return await self.session.ensure_session()

    def waits(self, page) -> LightningWaits:
        return LightningWaits(page, self.config)

    def patterns(self, page) -> LightningPatterns:
        return LightningPatterns(page, self.waits(page))

    def describe(self) -> List[Dict[str, Any]]:
        return [spec.describe() for spec in TOOLS.values()]

    async def call(self, name: str, args: Optional[Dict[str, Any]] = None) -> ToolResult:
        spec = TOOLS.get(name)
        if spec is None:
            return ToolResult.fail(ErrorCode.INVALID_ARGUMENTS, f"Unknown tool: {name}")

        try:
            parsed = spec.args_model.model_validate(args or {})
        except ValidationError as e:
            return ToolResult.fail(
                ErrorCode.INVALID_ARGUMENTS,
                f"Invalid arguments for {name}: {_format_validation_error(e)}",
            )

        logger.debug(f"Calling {name}")
        try:
            return await spec.handler(self, parsed)
        except SalesforceError as e:
            logger.warning(f"{name} failed: {e.message}")
            return ToolResult.from_exception(e, spec.action, spec.timeout_code)
        except Exception as e:
            logger.exception(f"{name} failed")
            return ToolResult.from_exception(e, spec.action, spec.timeout_code)
