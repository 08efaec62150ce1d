"""
Authorization evaluator.

Combines three read-only contract calls (revocation flag, owner balance,
spender allowance) with the authorization's time window to derive a status
and the amount currently pullable.

Status precedence: TOO_SOON, then EXPIRED, then REVOKED, then LIVE. The time
window is checked first so that the two time-based statuses depend only on
the clock and the config. The reachable amount is
``min(balance, allowance, max_per_pull)`` when LIVE and 0 otherwise.

The three reads are independent and are issued concurrently. They are not
guaranteed to observe the same block.
"""

from __future__ import annotations

import asyncio
import logging
import math
import time
from typing import Callable, List, Optional, Tuple, Union

from .abi_codec import (
    ALLOWANCE_SELECTOR,
    BALANCE_OF_SELECTOR,
    IS_REVOKED_SELECTOR,
    decode_uint256,
    encode_call,
)
from .metrics import EvaluatorMetrics
from .protocols import ContractReader
from .pull_exceptions import DecodingError, ReadError, get_error_context
from .types import AuthorizationConfig, ContractCall, EvaluationResult, Status

logger = logging.getLogger(__name__)

IS_REVOKED = "isRevoked"
BALANCE_OF = "balanceOf"
ALLOWANCE = "allowance"

Timestamp = Union[int, float]


def build_read_calls(config: AuthorizationConfig) -> Tuple[ContractCall, ContractCall, ContractCall]:
    """Encode the revocation, balance and allowance calls for ``config``."""
    return (
        ContractCall(
            IS_REVOKED,
            config.registry_address,
            encode_call(IS_REVOKED_SELECTOR, [config.authorization_hash]),
        ),
        ContractCall(
            BALANCE_OF,
            config.token_address,
            encode_call(BALANCE_OF_SELECTOR, [config.owner_address]),
        ),
        ContractCall(
            ALLOWANCE,
            config.token_address,
            encode_call(ALLOWANCE_SELECTOR, [config.owner_address, config.spender_address]),
        ),
    )


def derive_status(now: int, valid_after: int, valid_before: int, revoked_flag: int) -> Status:
    """Pure status state machine; both window bounds are inclusive."""
    if now < valid_after:
        return Status.TOO_SOON
    if now > valid_before:
        return Status.EXPIRED
    if revoked_flag != 0:
        return Status.REVOKED
    return Status.LIVE


def reachable_amount(status: Status, balance: int, allowance: int, max_per_pull: int) -> int:
    if status is not Status.LIVE:
        return 0
    return min(balance, allowance, max_per_pull)


def _to_unix_seconds(now: Timestamp) -> int:
    return int(math.floor(now))


class AuthorizationEvaluator:
    """
    Evaluates one AuthorizationConfig against live chain state.

    Holds no per-evaluation state, so a single instance may serve
    concurrent evaluations.
    """

    def __init__(
        self,
        reader: ContractReader,
        timeout: Optional[float] = None,
        clock: Callable[[], float] = time.time,
        metrics: Optional[EvaluatorMetrics] = None,
    ) -> None:
        """
        Args:
            reader: Contract read capability
            timeout: Upper bound in seconds for the join of all three reads
            clock: Source of the current unix time when ``now`` is not given
            metrics: Optional Prometheus collector
        """
        self.reader = reader
        self.timeout = timeout
        self.clock = clock
        self.metrics = metrics

    async def _read_one(self, call: ContractCall) -> str:
        return await self.reader.read(call.contract, call.call_data)

    async def _read_all(self, calls: Tuple[ContractCall, ...]) -> List[str]:
        # A reader that raises before returning an awaitable still fails only its own read.
        gathered = asyncio.gather(
            *(self._read_one(call) for call in calls),
            return_exceptions=True,
        )
        try:
            if self.timeout is None:
                results = await gathered
            else:
                results = await asyncio.wait_for(gathered, timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            names = [call.name for call in calls]
            for name in names:
                self._record_read_failure(name)
            logger.error(
                "Contract reads timed out after %ss",
                self.timeout,
                extra={"event": "evaluator.read_timeout", "reads": names},
            )
            raise ReadError(
                f"Contract reads timed out after {self.timeout}s",
                failed_reads=names,
                details={"timeout": self.timeout},
            ) from exc

        failures = [
            (call.name, result)
            for call, result in zip(calls, results)
            if isinstance(result, BaseException)
        ]
        if failures:
            for name, error in failures:
                self._record_read_failure(name)
                logger.warning(
                    "Contract read %s failed: %s",
                    name,
                    error,
                    extra={"event": "evaluator.read_failed", "read": name, **get_error_context(error)},
                )
            names = [name for name, _ in failures]
            raise ReadError(
                f"Contract read(s) failed: {', '.join(names)}",
                failed_reads=names,
                details={name: str(error) for name, error in failures},
            ) from failures[0][1]

        return list(results)

    def _record_read_failure(self, name: str) -> None:
        if self.metrics is not None:
            self.metrics.record_read_failure(name)

    @staticmethod
    def _decode(call: ContractCall, raw: str) -> int:
        try:
            return decode_uint256(raw)
        except DecodingError as exc:
            raise DecodingError(
                f"{call.name} returned malformed data: {exc.message}",
                details={"read": call.name, "contract": str(call.contract)},
            ) from exc

    async def evaluate(
        self, config: AuthorizationConfig, now: Optional[Timestamp] = None
    ) -> EvaluationResult:
        """
        Read chain state and derive the authorization status.

        Args:
            config: Authorization to evaluate
            now: Evaluation time in unix seconds; defaults to the clock

        Returns:
            A fresh EvaluationResult

        Raises:
            ReadError: If any read failed or the reads timed out
            DecodingError: If a read returned non-hex data
        """
        started = time.perf_counter()
        evaluated_at = _to_unix_seconds(self.clock() if now is None else now)
        calls = build_read_calls(config)

        raw_results = await self._read_all(calls)
        revoked_flag, balance, allowance = (
            self._decode(call, raw) for call, raw in zip(calls, raw_results)
        )

        status = derive_status(evaluated_at, config.valid_after, config.valid_before, revoked_flag)
        result = EvaluationResult(
            status=status,
            reachable_amount=reachable_amount(status, balance, allowance, config.max_per_pull),
            balance=balance,
            allowance=allowance,
            evaluated_at=evaluated_at,
        )

        if self.metrics is not None:
            self.metrics.record_evaluation(status, time.perf_counter() - started)
        logger.info(
            "Authorization %s evaluated as %s",
            config.authorization_hash,
            status.value,
            extra={
                "event": "evaluator.evaluated",
                "status": status.value,
                "owner": config.owner_address.checksummed,
                "spender": config.spender_address.checksummed,
                "reachable_amount": str(result.reachable_amount),
                "evaluated_at": evaluated_at,
            },
        )
        return result


async def evaluate(
    config: AuthorizationConfig,
    now: Timestamp,
    reader: ContractReader,
    timeout: Optional[float] = None,
) -> EvaluationResult:
    """Evaluate ``config`` at time ``now`` using ``reader``."""
    return await AuthorizationEvaluator(reader, timeout=timeout).evaluate(config, now)
