"""
Protocol interfaces for pullsafe collaborators.

Using Protocol (from typing) allows structural subtyping, so a JSON-RPC
client, a local node binding or an in-memory test double can all be injected
into the evaluator without sharing a base class.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .types import Address


@runtime_checkable
class ContractReader(Protocol):
    """
    Read-only contract call capability.

    Concurrency: the evaluator issues several reads at once, so
    implementations must tolerate concurrent calls.
    """

    async def read(self, contract: Address, call_data: str) -> str:
        """
        Evaluate a read-only call against the latest chain state.

        Args:
            contract: Contract to call
            call_data: 0x-prefixed ABI call data

        Returns:
            Raw 0x-prefixed hex result

        Raises:
            Any exception on transport or node failure; the evaluator
            reports it as a failed read.
        """
        ...
