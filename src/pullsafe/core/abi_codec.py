"""
Minimal ABI codec for the three fixed read calls.

Only static, single-word arguments are supported: addresses, bytes32 values
and uint256 integers. Selectors are hardcoded rather than derived from an ABI
schema. ``function_selector`` derives a selector from a canonical signature
for the standard ERC-20 functions.
"""

from __future__ import annotations

from typing import Optional, Sequence, Union

from eth_utils import keccak

from .pull_exceptions import DecodingError, EncodingError
from .types import HEX_DIGITS, UINT256_MAX, Address, Hash32

WORD_HEX_LENGTH = 64

# Fixed by the deployed revocation registry; not keccak256("isRevoked(bytes32)")[:4]
IS_REVOKED_SELECTOR = "0x3b4da69f"

# First 4 bytes of keccak256 of the ERC-20 function signature
BALANCE_OF_SELECTOR = "0x70a08231"  # balanceOf(address)
ALLOWANCE_SELECTOR = "0xdd62ed3e"  # allowance(address,address)

AbiArg = Union[Address, Hash32, int, str]


def _strip_prefix(value: str) -> str:
    if value.startswith(("0x", "0X")):
        return value[2:]
    return value


def function_selector(signature: str) -> str:
    """Return the 0x-prefixed 4-byte selector for a canonical signature."""
    return "0x" + keccak(text=signature)[:4].hex()


def encode_uint256(value: int) -> str:
    """Encode an unsigned integer as a 64-digit big-endian hex word."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodingError(f"Expected int, got {type(value).__name__}")
    if value < 0 or value > UINT256_MAX:
        raise EncodingError(f"Integer does not fit in uint256: {value}")
    return format(value, "064x")


def encode_word(arg: AbiArg) -> str:
    """
    Encode a single argument as a left-zero-padded 32-byte word.

    Args:
        arg: Address, Hash32, uint256 int, or a raw hex string of at most 32 bytes

    Returns:
        64 lowercase hex digits, without prefix

    Raises:
        EncodingError: If the argument is not hex or exceeds 32 bytes
    """
    if isinstance(arg, (Address, Hash32)):
        return _strip_prefix(arg.value).rjust(WORD_HEX_LENGTH, "0")
    if isinstance(arg, int) and not isinstance(arg, bool):
        return encode_uint256(arg)
    if isinstance(arg, str):
        hex_part = _strip_prefix(arg)
        if not all(c in HEX_DIGITS for c in hex_part):
            raise EncodingError(f"Argument is not hex: {arg!r}")
        if len(hex_part) > WORD_HEX_LENGTH:
            raise EncodingError(
                f"Argument exceeds 32 bytes: {len(hex_part)} hex digits",
                details={"hex_digits": len(hex_part)},
            )
        return hex_part.lower().rjust(WORD_HEX_LENGTH, "0")
    raise EncodingError(f"Unsupported ABI argument type: {type(arg).__name__}")


def encode_call(selector: str, args: Sequence[AbiArg]) -> str:
    """Build call data: ``selector ++ word(arg0) ++ word(arg1) ...``."""
    if not isinstance(selector, str):
        raise EncodingError(f"Selector must be a string, got {type(selector).__name__}")
    selector_hex = _strip_prefix(selector)
    if len(selector_hex) != 8 or not all(c in HEX_DIGITS for c in selector_hex):
        raise EncodingError(f"Selector must be 4 bytes of hex: {selector!r}")
    return "0x" + selector_hex.lower() + "".join(encode_word(arg) for arg in args)


def decode_uint256(result: Optional[str]) -> int:
    """
    Decode a raw eth_call result as a big-endian unsigned integer.

    An empty or missing result decodes to 0. When the payload holds more than
    one word, only the first 32-byte word is read.

    Raises:
        DecodingError: If the payload contains non-hex characters
    """
    if result is None:
        return 0
    if not isinstance(result, str):
        raise DecodingError(f"Expected hex string result, got {type(result).__name__}")
    hex_part = _strip_prefix(result)
    if not hex_part:
        return 0
    # int(x, 16) tolerates whitespace and underscores; a node result must not.
    if not all(c in HEX_DIGITS for c in hex_part):
        raise DecodingError(f"Result is not hex: {result[:80]!r}")
    return int(hex_part[:WORD_HEX_LENGTH], 16)
