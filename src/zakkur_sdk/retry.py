"""Retry state machine driving a single request through its attempts.

A request moves through four phases::

    ATTEMPTING --2xx--------------------------> SUCCESS
    ATTEMPTING --429/503, budget left---------> BACKOFF_WAIT (2**n * 1000 ms)
    ATTEMPTING --transport error, budget left-> BACKOFF_WAIT (1000 ms)
    ATTEMPTING --anything else----------------> FAILED
    BACKOFF_WAIT --sleep elapsed--------------> ATTEMPTING

``attempt_count`` only grows on the way into BACKOFF_WAIT and only while it is
below ``max_retries``, so a request makes at most ``max_retries + 1`` attempts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Union

from .errors import DEFAULT_UPSTREAM_MESSAGE, NET_ERROR, TIMEOUT, UPSTREAM_ERROR, ZakkurError
from .models import parse_error_body

RETRYABLE_STATUSES = frozenset({429, 503})
TRANSPORT_RETRY_DELAY_MS = 1000


def overload_backoff_ms(attempt: int) -> int:
    return (2 ** attempt) * 1000


class Phase(str, Enum):
    ATTEMPTING = "attempting"
    BACKOFF_WAIT = "backoff_wait"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class ResponseOutcome:
    status_code: int
    body: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


@dataclass(frozen=True)
class TimeoutOutcome:
    pass


@dataclass(frozen=True)
class TransportFailure:
    reason: str


Outcome = Union[ResponseOutcome, TimeoutOutcome, TransportFailure]


class InvalidTransition(RuntimeError):
    pass


@dataclass
class AttemptState:
    max_retries: int
    attempt_count: int = 0
    phase: Phase = Phase.ATTEMPTING
    backoff_schedule_ms: List[int] = field(default_factory=list)
    result: Any = None
    error: Optional[ZakkurError] = None

    @property
    def attempts_made(self) -> int:
        """Attempts issued so far, counting the one in flight."""
        return self.attempt_count + 1

    @property
    def can_retry(self) -> bool:
        return self.attempt_count < self.max_retries

    @property
    def terminal(self) -> bool:
        return self.phase in (Phase.SUCCESS, Phase.FAILED)

    @property
    def pending_delay_ms(self) -> int:
        if self.phase is not Phase.BACKOFF_WAIT:
            return 0
        return self.backoff_schedule_ms[-1]

    def _require(self, phase: Phase) -> None:
        if self.phase is not phase:
            raise InvalidTransition(f"expected phase {phase.value}, currently {self.phase.value}")

    def succeed(self, result: Any) -> None:
        self._require(Phase.ATTEMPTING)
        self.result = result
        self.phase = Phase.SUCCESS

    def fail(self, error: ZakkurError) -> None:
        self._require(Phase.ATTEMPTING)
        self.error = error
        self.phase = Phase.FAILED

    def schedule_retry(self, delay_ms: int) -> None:
        self._require(Phase.ATTEMPTING)
        if not self.can_retry:
            raise InvalidTransition("retry budget exhausted")
        self.attempt_count += 1
        self.backoff_schedule_ms.append(delay_ms)
        self.phase = Phase.BACKOFF_WAIT

    def resume(self) -> None:
        self._require(Phase.BACKOFF_WAIT)
        self.phase = Phase.ATTEMPTING

    def unwrap(self) -> Any:
        """Return the result of a successful request or raise its error."""
        if self.phase is Phase.SUCCESS:
            return self.result
        if self.phase is Phase.FAILED and self.error is not None:
            raise self.error
        raise InvalidTransition(f"request not finished, currently {self.phase.value}")


def upstream_error(outcome: ResponseOutcome) -> ZakkurError:
    envelope = parse_error_body(outcome.body)
    return ZakkurError(
        envelope.message or DEFAULT_UPSTREAM_MESSAGE,
        outcome.status_code,
        envelope.code or UPSTREAM_ERROR,
        envelope.errors,
    )


def advance(state: AttemptState, outcome: Outcome) -> AttemptState:
    """Apply the outcome of the attempt in flight to ``state``."""
    if isinstance(outcome, ResponseOutcome):
        if outcome.ok:
            state.succeed(outcome.body)
        elif outcome.status_code in RETRYABLE_STATUSES and state.can_retry:
            state.schedule_retry(overload_backoff_ms(state.attempt_count + 1))
        else:
            state.fail(upstream_error(outcome))
    elif isinstance(outcome, TimeoutOutcome):
        state.fail(ZakkurError("Request Timeout", 408, TIMEOUT))
    elif isinstance(outcome, TransportFailure):
        if state.can_retry:
            state.schedule_retry(TRANSPORT_RETRY_DELAY_MS)
        else:
            state.fail(ZakkurError(outcome.reason, 500, NET_ERROR))
    else:
        raise TypeError(f"unsupported outcome: {outcome!r}")
    return state


__all__ = [
    "AttemptState",
    "InvalidTransition",
    "Outcome",
    "Phase",
    "RETRYABLE_STATUSES",
    "ResponseOutcome",
    "TRANSPORT_RETRY_DELAY_MS",
    "TimeoutOutcome",
    "TransportFailure",
    "advance",
    "overload_backoff_ms",
    "upstream_error",
]
