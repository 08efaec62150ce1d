"""
Runtime wiring for embedding applications.

Loads configuration once, configures logging, and builds the JSON-RPC
reader and evaluator that every subsequent evaluation shares.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from .config import ReaderSettings, load_authorization_config, load_reader_settings
from .evaluator import AuthorizationEvaluator
from .logging_config import setup_logging
from .metrics import EvaluatorMetrics
from .rpc_reader import JsonRpcContractReader
from .types import AuthorizationConfig, EvaluationResult

logger = logging.getLogger(__name__)


@dataclass
class PullSafeRuntime:
    config: AuthorizationConfig
    settings: ReaderSettings
    reader: JsonRpcContractReader
    evaluator: AuthorizationEvaluator
    metrics: Optional[EvaluatorMetrics] = None

    async def evaluate_now(self) -> EvaluationResult:
        return await self.evaluator.evaluate(self.config)

    def export_metrics(self) -> bytes:
        """Prometheus text exposition of the evaluator metrics, empty when disabled."""
        if self.metrics is None:
            return b""
        return self.metrics.export()

    async def aclose(self) -> None:
        await self.reader.aclose()

    async def __aenter__(self) -> "PullSafeRuntime":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()


def build_runtime(
    environ: Optional[Mapping[str, str]] = None,
    metrics: Optional[EvaluatorMetrics] = None,
    configure_logging: bool = True,
) -> PullSafeRuntime:
    """
    Build a ready-to-use runtime from PULLSAFE_* environment variables.

    Raises:
        ConfigurationError: If configuration is missing or invalid
    """
    settings = load_reader_settings(environ)
    if configure_logging:
        setup_logging(
            name="pullsafe",
            log_file=settings.log_file,
            level=settings.log_level,
            environment=settings.environment,
        )

    config = load_authorization_config(environ)
    reader = JsonRpcContractReader(settings.rpc_url, timeout=settings.rpc_timeout)
    evaluator = AuthorizationEvaluator(
        reader,
        timeout=settings.evaluation_timeout,
        metrics=metrics,
    )
    logger.info(
        "pullsafe runtime ready",
        extra={"event": "runtime.ready", "rpc_url": settings.rpc_url},
    )
    return PullSafeRuntime(
        config=config,
        settings=settings,
        reader=reader,
        evaluator=evaluator,
        metrics=metrics,
    )
