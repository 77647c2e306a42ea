__version__ = "0.3.0"

__all__ = [
    "__version__",
    # Errors
    "BlockmanError",
    "ConfigError",
    "InvalidRequestError",
    "InvalidAbiError",
    "AbiNotFoundError",
    "ArgumentError",
    "EncodingError",
    "DecodeError",
    "RpcError",
    # ABI
    "AbiFunction",
    "AbiParameter",
    "ContractAbi",
    "parse_abi",
    "load_abi_file",
    "encode_call",
    "decode_result",
    # Node access
    "EthClient",
    # Store
    "AbiRecord",
    "AbiStore",
    "Sweeper",
    # Config
    "Settings",
]

from .errors import (
    AbiNotFoundError,
    ArgumentError,
    BlockmanError,
    ConfigError,
    DecodeError,
    EncodingError,
    InvalidAbiError,
    InvalidRequestError,
    RpcError,
)
from .chain.abi import (
    AbiFunction,
    AbiParameter,
    ContractAbi,
    decode_result,
    encode_call,
    load_abi_file,
    parse_abi,
)
from .chain.rpc import EthClient
from .store.abi_store import AbiRecord, AbiStore
from .store.sweeper import Sweeper
from .config import Settings
