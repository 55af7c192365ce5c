from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any


@dataclass
class Tool:
    """
    A named async action the agentic pipeline can take during TOOL_EXECUTION.
    """
    name: str
    description: str
    func: Callable[..., Awaitable[Any]]
    parameters: dict[str, Any]  # JSON Schema for arguments

    async def __call__(self, **arguments: Any) -> Any:
        missing = [k for k in self.parameters.get("required", []) if k not in arguments]
        if missing:
            raise TypeError(f"Tool {self.name} missing required arguments: {missing}")
        return await self.func(**arguments)
