from .base import BaseCallbackHandler
from .manager import CallbackManager
from .std_out import StdOutCallbackHandler

__all__ = ["BaseCallbackHandler", "CallbackManager", "StdOutCallbackHandler"]
