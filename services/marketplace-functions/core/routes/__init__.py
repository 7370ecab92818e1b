"""
Route handlers for the marketplace functions.
"""

from .handlers import CALLABLE, HTTP, OperationDispatcher, handle_options

__all__ = [
    "CALLABLE",
    "HTTP",
    "OperationDispatcher",
    "handle_options",
]
