from .search_tool import create_search_tool
from .tool import Tool

__all__ = [
    "Tool",
    "create_search_tool",
]
