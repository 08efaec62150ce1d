"""
pullsafe - Pull Authorization Verifier

Read-only verification of an on-chain token pull authorization: derives the
authorization status (TOO_SOON, EXPIRED, REVOKED, LIVE) and the amount a
spender can currently pull, from three contract reads and the
authorization's time window.

Main Components:
- ABI codec: call data encoding and uint256 result decoding
- Contract readers: the ContractReader protocol and a JSON-RPC implementation
- Evaluator: status state machine and reachable-amount computation
"""

from .core.abi_codec import decode_uint256, encode_call
from .core.evaluator import AuthorizationEvaluator, evaluate
from .core.protocols import ContractReader
from .core.pull_exceptions import (
    ConfigurationError,
    DecodingError,
    EncodingError,
    PullSafeError,
    ReadError,
)
from .core.rpc_reader import JsonRpcContractReader
from .core.types import (
    Address,
    AuthorizationConfig,
    EvaluationResult,
    Hash32,
    Status,
)

__version__ = "0.1.0"
__author__ = "pullsafe Development Team"

__all__ = [
    "Address",
    "AuthorizationConfig",
    "AuthorizationEvaluator",
    "ConfigurationError",
    "ContractReader",
    "DecodingError",
    "EncodingError",
    "EvaluationResult",
    "Hash32",
    "JsonRpcContractReader",
    "PullSafeError",
    "ReadError",
    "Status",
    "decode_uint256",
    "encode_call",
    "evaluate",
]
