"""
Sync retry executor for Plant Care Application.
Runs mutating push/pull operations (including record deletions) with bounded
exponential backoff, tracks in-flight operations, and classifies backend
conflict resolutions.
"""

import asyncio
import random
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from functools import lru_cache
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, TypeVar, Union

from pydantic import BaseModel
from tenacity import AsyncRetrying, RetryCallState, retry_if_exception_type, stop_after_attempt

from app.shared.config.settings import Settings, get_settings
from app.shared.utils.logging import get_logger

from .clock import Clock, system_clock
from .exceptions import DuplicateOperationError

logger = get_logger(__name__)

T = TypeVar('T')

JITTER_RATIO = 0.1


class SyncKind(str, Enum):
    """Direction of a synchronization operation."""
    PULL = "pull"
    PUSH = "push"


class ConflictAction(str, Enum):
    """Actions the backend reconciliation can report for a record."""
    KEEP_MODIFIED = "keep_modified"
    DELETE_RECORD = "delete_record"
    NO_CONFLICT = "no_conflict"


@dataclass(frozen=True)
class RetryConfig:
    """Retry policy for one execute_with_retry call. Delays are in seconds."""
    max_retries: int = 5
    base_delay: float = 1.0
    max_delay: float = 30.0
    backoff_multiplier: float = 2.0
    jitter: bool = True
    attempt_timeout: Optional[float] = None

    def __post_init__(self):
        if self.max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        if self.base_delay < 0 or self.max_delay < 0:
            raise ValueError("delays must be non-negative")
        if self.backoff_multiplier < 1:
            raise ValueError("backoff_multiplier must be at least 1")

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetryConfig":
        return cls(
            max_retries=settings.SYNC_RETRY_MAX_RETRIES,
            base_delay=settings.SYNC_RETRY_BASE_DELAY,
            max_delay=settings.SYNC_RETRY_MAX_DELAY,
            backoff_multiplier=settings.SYNC_RETRY_BACKOFF_MULTIPLIER,
            jitter=settings.SYNC_RETRY_JITTER,
            attempt_timeout=settings.SYNC_RETRY_ATTEMPT_TIMEOUT,
        )

    def merged(self, **overrides: Any) -> "RetryConfig":
        """Return a copy with the given non-None fields replaced."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes) if changes else self

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "max_retries": self.max_retries,
            "base_delay": self.base_delay,
            "max_delay": self.max_delay,
            "backoff_multiplier": self.backoff_multiplier,
            "jitter": self.jitter,
            "attempt_timeout": self.attempt_timeout,
        }


@dataclass
class RetryableOperation:
    """
    Bookkeeping for one in-flight operation.

    Created when execute_with_retry starts, mutated on each failed attempt,
    removed when the operation settles.
    """
    id: str
    kind: SyncKind
    started_at: datetime
    attempt: int = 0
    last_error: Optional[BaseException] = field(default=None, repr=False)


class ConflictResolution(BaseModel):
    """A per-record reconciliation verdict returned by the backend during push/pull."""
    action: str
    reason: str = ""
    record_id: str
    table: str


@dataclass
class ConflictClassification:
    """Resolutions partitioned by action. `conflicts` need an external decision."""
    kept: List[ConflictResolution] = field(default_factory=list)
    deleted: List[ConflictResolution] = field(default_factory=list)
    conflicts: List[ConflictResolution] = field(default_factory=list)

    @property
    def has_unresolved(self) -> bool:
        return bool(self.conflicts)


SleepFunc = Callable[[float], Awaitable[None]]


class SyncRetryService:
    """
    Bounded-retry executor with exponential backoff and jitter.

    State machine per operation id:
        pending(0) -> attempt(n) -> success | pending(n+1) | failed

    The active-operation registry is owned by the instance. Each entry is
    written only by the call that registered it and is always removed when
    that call settles.
    """

    def __init__(
        self,
        default_config: Optional[RetryConfig] = None,
        clock: Clock = system_clock,
        sleep: SleepFunc = asyncio.sleep,
        rng: Optional[random.Random] = None,
    ):
        self.default_config = default_config or RetryConfig()
        self._clock = clock
        self._sleep = sleep
        self._rng = rng or random.Random()
        self._active_operations: Dict[str, RetryableOperation] = {}

    # =========================================================================
    # EXECUTION
    # =========================================================================

    def calculate_delay(self, attempt: int, config: RetryConfig) -> float:
        """Backoff delay (seconds) to wait after the given failed attempt (1-based)."""
        delay = config.base_delay * (config.backoff_multiplier ** (attempt - 1))
        delay = min(delay, config.max_delay)
        if config.jitter:
            delay += self._rng.uniform(-JITTER_RATIO, JITTER_RATIO) * delay
        return max(delay, 0.0)

    async def execute_with_retry(
        self,
        operation_id: str,
        operation: Callable[[], Awaitable[T]],
        kind: Union[SyncKind, str],
        config: Optional[RetryConfig] = None,
        **overrides: Any,
    ) -> T:
        """
        Run `operation` until it succeeds or `max_retries` attempts have failed.

        Args:
            operation_id: Caller-supplied id, unique per logical operation
            operation: Zero-argument coroutine factory, invoked once per attempt
            kind: pull or push
            config: Full policy to use instead of the service default
            **overrides: Individual RetryConfig fields to override

        Returns:
            Whatever the successful attempt returned

        Raises:
            DuplicateOperationError: If operation_id is already active
            Exception: The last attempt's error once retries are exhausted
        """
        cfg = (config or self.default_config).merged(**overrides)

        if operation_id in self._active_operations:
            raise DuplicateOperationError(operation_id)

        sync_op = RetryableOperation(
            id=operation_id,
            kind=SyncKind(kind),
            started_at=self._clock.now(),
        )
        self._active_operations[operation_id] = sync_op

        try:
            retrying = AsyncRetrying(
                stop=stop_after_attempt(cfg.max_retries),
                wait=lambda state: self.calculate_delay(state.attempt_number, cfg),
                retry=retry_if_exception_type(Exception),
                sleep=self._sleep,
                before_sleep=lambda state: self._log_retry(sync_op, cfg, state),
                reraise=True,
            )

            try:
                async for attempt in retrying:
                    with attempt:
                        result = await self._run_attempt(sync_op, operation, cfg)
            except Exception as e:
                logger.error(
                    f"Sync operation {operation_id} failed after {sync_op.attempt} attempts: {e}",
                    extra={
                        'operation_id': operation_id,
                        'kind': sync_op.kind.value,
                        'attempts': sync_op.attempt,
                        'error': str(e),
                    }
                )
                raise

            if sync_op.attempt > 0:
                logger.warning(
                    f"Sync operation {operation_id} succeeded after {sync_op.attempt} retries",
                    extra={'operation_id': operation_id, 'attempts': sync_op.attempt}
                )
            return result

        finally:
            self._active_operations.pop(operation_id, None)

    async def _run_attempt(
        self,
        sync_op: RetryableOperation,
        operation: Callable[[], Awaitable[T]],
        cfg: RetryConfig,
    ) -> T:
        try:
            if cfg.attempt_timeout:
                return await asyncio.wait_for(operation(), timeout=cfg.attempt_timeout)
            return await operation()
        except Exception as e:
            sync_op.attempt += 1
            sync_op.last_error = e
            raise

    def _log_retry(self, sync_op: RetryableOperation, cfg: RetryConfig, state: RetryCallState) -> None:
        delay = state.next_action.sleep if state.next_action else 0.0
        logger.warning(
            f"Sync operation {sync_op.id} failed (attempt {sync_op.attempt}/{cfg.max_retries}), "
            f"retrying in {delay:.2f}s: {sync_op.last_error}",
            extra={
                'operation_id': sync_op.id,
                'kind': sync_op.kind.value,
                'attempt': sync_op.attempt,
                'delay_seconds': delay,
            }
        )

    # =========================================================================
    # CONFLICT CLASSIFICATION
    # =========================================================================

    def process_conflict_resolutions(
        self,
        resolutions: Iterable[Union[ConflictResolution, Dict[str, Any]]],
    ) -> ConflictClassification:
        """
        Partition reconciliation results by action.

        keep_modified and delete_record are resolved automatically, no_conflict
        is dropped, and anything else is returned in `conflicts`.
        """
        classification = ConflictClassification()

        for item in resolutions:
            resolution = (
                item if isinstance(item, ConflictResolution)
                else ConflictResolution.model_validate(item)
            )
            if resolution.action == ConflictAction.KEEP_MODIFIED.value:
                classification.kept.append(resolution)
            elif resolution.action == ConflictAction.DELETE_RECORD.value:
                classification.deleted.append(resolution)
            elif resolution.action == ConflictAction.NO_CONFLICT.value:
                continue
            else:
                classification.conflicts.append(resolution)

        if classification.conflicts:
            logger.warning(
                f"{len(classification.conflicts)} unresolved sync conflicts",
                extra={
                    'conflicts': [
                        {'table': c.table, 'record_id': c.record_id, 'action': c.action}
                        for c in classification.conflicts
                    ]
                }
            )

        return classification

    # =========================================================================
    # MONITORING
    # =========================================================================

    def get_active_operations(self) -> Dict[str, RetryableOperation]:
        """Snapshot of the registry."""
        return dict(self._active_operations)

    def is_operation_active(self, operation_id: str) -> bool:
        return operation_id in self._active_operations

    def get_retry_stats(self) -> Dict[str, Any]:
        """Get retry statistics for monitoring."""
        now = self._clock.now()
        return {
            "active_operations": len(self._active_operations),
            "operation_details": {
                op_id: {
                    "kind": op.kind.value,
                    "attempts": op.attempt,
                    "duration_seconds": (now - op.started_at).total_seconds(),
                    "last_error": str(op.last_error) if op.last_error else None,
                }
                for op_id, op in self._active_operations.items()
            },
        }


@lru_cache()
def get_sync_retry_service() -> SyncRetryService:
    """
    Get the process-wide retry executor.

    Returns:
        SyncRetryService: Executor configured from settings
    """
    return SyncRetryService(default_config=RetryConfig.from_settings(get_settings()))
