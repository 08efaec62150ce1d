"""
JSON-RPC contract reader

Implements the ContractReader capability with ``eth_call`` requests against
an Ethereum-compatible HTTP endpoint. Handles the request envelope, HTTP
status and JSON-RPC error mapping. No retries: a failed call surfaces
immediately and the caller decides what to do.
"""

import itertools
import logging
from typing import Any, Dict, Optional

import httpx

from .pull_exceptions import RpcResponseError, RpcTimeoutError, TransportError
from .types import Address

logger = logging.getLogger(__name__)

DEFAULT_BLOCK_TAG = "latest"


class JsonRpcContractReader:
    """
    Contract reader backed by a JSON-RPC node.

    Example:
        >>> async with JsonRpcContractReader("https://sepolia.base.org") as reader:
        ...     raw = await reader.read(token, call_data)
    """

    def __init__(
        self,
        rpc_url: str,
        timeout: float = 30.0,
        block_tag: str = DEFAULT_BLOCK_TAG,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """
        Initialize the reader.

        Args:
            rpc_url: JSON-RPC endpoint URL
            timeout: Per-request timeout in seconds
            block_tag: Block tag the calls are evaluated against
            client: Pre-built client (tests inject one with a mock transport)
        """
        self.rpc_url = rpc_url
        self.timeout = timeout
        self.block_tag = block_tag
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            headers={"Content-Type": "application/json", "User-Agent": "pullsafe/1.0"},
        )
        self._ids = itertools.count(1)

    async def _rpc(self, method: str, params: list) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }

        try:
            response = await self._client.post(self.rpc_url, json=payload, timeout=self.timeout)
            logger.debug(f"POST {self.rpc_url} {method} - Status: {response.status_code}")
        except httpx.TimeoutException as e:
            logger.error(f"RPC timeout: {e}")
            raise RpcTimeoutError(
                f"{method} timed out after {self.timeout}s",
                details={"method": method},
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"RPC connection error: {e}")
            raise TransportError(f"Connection error: {e}", details={"method": method}) from e

        if not 200 <= response.status_code < 300:
            raise TransportError(
                f"RPC HTTP {response.status_code}: {response.text[:200]}",
                details={"method": method, "status_code": response.status_code},
            )

        try:
            data = response.json()
        except ValueError as e:
            raise RpcResponseError(f"Malformed JSON-RPC response: {response.text[:200]}") from e
        if not isinstance(data, dict):
            raise RpcResponseError(f"Unexpected JSON-RPC response: {str(data)[:200]}")

        error = data.get("error")
        if error:
            code = error.get("code") if isinstance(error, dict) else None
            message = error.get("message", "Unknown error") if isinstance(error, dict) else str(error)
            raise RpcResponseError(
                f"RPC error {code}: {message}",
                code=code,
                details={"method": method},
            )

        return data.get("result")

    async def read(self, contract: Address, call_data: str) -> str:
        """Run ``eth_call`` and return the raw hex result."""
        call: Dict[str, str] = {"to": str(contract), "data": call_data}
        result = await self._rpc("eth_call", [call, self.block_tag])
        if result is None:
            return "0x"
        if not isinstance(result, str):
            raise RpcResponseError(f"eth_call result is not a string: {result!r}")
        return result

    async def aclose(self) -> None:
        """Close the underlying client if this reader created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "JsonRpcContractReader":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
