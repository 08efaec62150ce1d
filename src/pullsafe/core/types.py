"""
Value types for pull-authorization verification.

All types are immutable. Addresses and hashes are normalized to lowercase on
construction so equal values compare and hash equal regardless of input case.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from eth_utils import is_checksum_address, is_hex_address, to_checksum_address

from .pull_exceptions import ValidationError

HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
UINT256_MAX = 2**256 - 1


def to_uint256(value: Any, name: str = "value") -> int:
    """Validate that ``value`` is an integer in ``[0, 2**256 - 1]``."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(
            f"{name} must be an integer, got {type(value).__name__}",
            details={"field": name},
        )
    if value < 0 or value > UINT256_MAX:
        raise ValidationError(
            f"{name} out of uint256 range: {value}",
            details={"field": name},
        )
    return value


def _to_timestamp(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer unix timestamp", details={"field": name})
    if value < 0:
        raise ValidationError(f"{name} must not be negative: {value}", details={"field": name})
    return value


@dataclass(frozen=True)
class Address:
    """20-byte account or contract address, stored as lowercase ``0x`` + 40 hex."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise ValidationError(f"Address must be a string, got {type(self.value).__name__}")
        if not self.value.startswith(("0x", "0X")) or not is_hex_address(self.value):
            raise ValidationError(f"Invalid address {self.value!r}: expected 0x + 40 hex digits")
        hex_part = self.value[2:]
        # Mixed case carries an EIP-55 checksum; single case carries none.
        mixed_case = hex_part != hex_part.lower() and hex_part != hex_part.upper()
        normalized = "0x" + hex_part.lower()
        if mixed_case and not is_checksum_address("0x" + hex_part):
            raise ValidationError(
                f"Invalid address {self.value!r}: bad checksum, "
                f"did you mean {to_checksum_address(normalized)}?"
            )
        object.__setattr__(self, "value", normalized)

    @classmethod
    def parse(cls, value: Union[str, Address]) -> Address:
        if isinstance(value, Address):
            return value
        return cls(value)

    @property
    def checksummed(self) -> str:
        return to_checksum_address(self.value)

    def to_bytes(self) -> bytes:
        return bytes.fromhex(self.value[2:])

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Hash32:
    """32-byte value: an authorization identifier or a raw ABI word."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise ValidationError(f"Hash32 must be a string, got {type(self.value).__name__}")
        if not self.value.startswith(("0x", "0X")):
            raise ValidationError(f"Hash32 must be 0x-prefixed: {self.value!r}")
        hex_part = self.value[2:]
        if len(hex_part) != 64 or not all(c in HEX_DIGITS for c in hex_part):
            raise ValidationError(f"Hash32 must be 64 hex digits: {self.value!r}")
        object.__setattr__(self, "value", "0x" + hex_part.lower())

    @classmethod
    def parse(cls, value: Union[str, Hash32]) -> Hash32:
        if isinstance(value, Hash32):
            return value
        return cls(value)

    def to_bytes(self) -> bytes:
        return bytes.fromhex(self.value[2:])

    def __str__(self) -> str:
        return self.value


class Status(Enum):
    """Authorization status, listed in evaluation precedence order."""

    TOO_SOON = "TOO_SOON"
    EXPIRED = "EXPIRED"
    REVOKED = "REVOKED"
    LIVE = "LIVE"


@dataclass(frozen=True)
class AuthorizationConfig:
    """
    Fixed description of one pull authorization.

    Built once at startup from deployment configuration and shared read-only
    between evaluations. String addresses and hashes are coerced to their
    value types on construction.

    Attributes:
        token_address: ERC-20 token contract
        registry_address: Revocation registry contract
        spender_address: Contract allowed to pull tokens
        owner_address: Signer whose tokens are pulled
        authorization_hash: Authorization identifier checked for revocation
        max_per_pull: Protocol-level cap on a single pull
        valid_after: First unix second at which the authorization is usable
        valid_before: Last unix second at which the authorization is usable
    """

    token_address: Address
    registry_address: Address
    spender_address: Address
    owner_address: Address
    authorization_hash: Hash32
    max_per_pull: int
    valid_after: int
    valid_before: int

    def __post_init__(self) -> None:
        for name in ("token_address", "registry_address", "spender_address", "owner_address"):
            object.__setattr__(self, name, Address.parse(getattr(self, name)))
        object.__setattr__(self, "authorization_hash", Hash32.parse(self.authorization_hash))
        to_uint256(self.max_per_pull, "max_per_pull")
        _to_timestamp(self.valid_after, "valid_after")
        _to_timestamp(self.valid_before, "valid_before")

    @property
    def window_is_empty(self) -> bool:
        return self.valid_after > self.valid_before


@dataclass(frozen=True)
class ContractCall:
    """One named read-only call against a contract."""

    name: str
    contract: Address
    call_data: str


@dataclass(frozen=True)
class EvaluationResult:
    """Outcome of a single evaluation. Created fresh for every call."""

    status: Status
    reachable_amount: int
    balance: int
    allowance: int
    evaluated_at: int

    @property
    def is_live(self) -> bool:
        return self.status is Status.LIVE

    def to_dict(self) -> dict[str, Any]:
        # Amounts can exceed 2**53, so they are rendered as decimal strings.
        return {
            "status": self.status.value,
            "reachable_amount": str(self.reachable_amount),
            "balance": str(self.balance),
            "allowance": str(self.allowance),
            "evaluated_at": self.evaluated_at,
        }
