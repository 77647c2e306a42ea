"""
Handlers - Request handling for the Blockman API.

Each handler validates its input, works with the store and the node
client, and returns a JSON-ready dict. Failures are raised as
BlockmanError subclasses carrying their HTTP status.
"""

from .abi import describe_function, list_abis, list_functions, remove_abi, upload_abi
from .call import call_function, convert_argument

__all__ = [
    "call_function",
    "convert_argument",
    "describe_function",
    "list_abis",
    "list_functions",
    "remove_abi",
    "upload_abi",
]
