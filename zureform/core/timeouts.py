"""
Operation timeouts for resource lifecycle calls.

Every lifecycle call runs under a deadline derived from the resource's
timeouts and is aborted early when the host signals a stop.
"""

import asyncio
import logging
import re
from dataclasses import dataclass, replace
from enum import Enum
from functools import wraps
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from ..exceptions import OperationTimeoutError

logger = logging.getLogger(__name__)

_DURATION_PART = re.compile(r'(\d+(?:\.\d+)?)(h|m|s)')
_UNIT_SECONDS = {"h": 3600.0, "m": 60.0, "s": 1.0}


class TimeoutKind(str, Enum):
    """Lifecycle operations that carry their own timeout."""
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class ResourceTimeouts:
    """Per-operation timeouts in seconds."""
    create: float = 30 * 60
    read: float = 5 * 60
    update: float = 30 * 60
    delete: float = 30 * 60

    def get(self, kind: TimeoutKind) -> float:
        return getattr(self, TimeoutKind(kind).value)

    def with_overrides(self, overrides: Optional[Dict[str, Union[str, int, float]]]) -> "ResourceTimeouts":
        """Return a copy with values from a resource ``timeouts`` block applied.

        Raises:
            ValueError: On unknown operations or malformed durations
        """
        if not overrides:
            return self
        changes: Dict[str, float] = {}
        for key, value in overrides.items():
            if key not in {k.value for k in TimeoutKind}:
                raise ValueError(f"Unknown timeout {key!r}")
            changes[key] = parse_duration(value)
        return replace(self, **changes)


def parse_duration(value: Union[str, int, float]) -> float:
    """
    Parse a duration into seconds.

    Accepts plain numbers (seconds) or strings such as "90s", "30m", "1h30m".
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        seconds = float(value)
    else:
        text = value.strip().lower()
        try:
            seconds = float(text)
        except ValueError:
            parts = _DURATION_PART.findall(text)
            if not parts or "".join(n + u for n, u in parts) != text:
                raise ValueError(f"Invalid duration: {value!r}")
            seconds = sum(float(n) * _UNIT_SECONDS[u] for n, u in parts)
    if seconds <= 0:
        raise ValueError(f"Duration must be positive: {value!r}")
    return seconds


async def run_with_deadline(
    awaitable: Awaitable[Any],
    timeout: float,
    operation: str,
    stop_event: Optional[asyncio.Event] = None,
) -> Any:
    """
    Await ``awaitable`` until it finishes, ``timeout`` elapses or ``stop_event`` is set.

    Raises:
        OperationTimeoutError: If the deadline passed or the host stopped the call
    """
    if stop_event is not None and stop_event.is_set():
        # Never start work the host has already abandoned
        if asyncio.iscoroutine(awaitable):
            awaitable.close()
        logger.error(f"Operation stopped before start: {operation}")
        raise OperationTimeoutError(operation, timeout, stopped=True)

    task = asyncio.ensure_future(awaitable)
    waiters = {task}
    stopper = None
    if stop_event is not None:
        stopper = asyncio.ensure_future(stop_event.wait())
        waiters.add(stopper)

    try:
        done, _ = await asyncio.wait(waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        task.cancel()
        raise
    finally:
        if stopper is not None:
            stopper.cancel()

    if task in done:
        return task.result()

    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass

    stopped = stop_event is not None and stop_event.is_set()
    logger.error(f"Operation {'stopped' if stopped else 'timed out'}: {operation} ({timeout:g}s)")
    raise OperationTimeoutError(operation, timeout, stopped=stopped)


def with_timeout(kind: Optional[TimeoutKind] = None) -> Callable[..., Any]:
    """
    Decorator bounding a lifecycle function ``func(d, meta)`` by its timeout.

    Args:
        kind: Timeout to apply. None picks create or update depending on
            whether the resource is new.

    Usage:
        @with_timeout(TimeoutKind.READ)
        async def read(d, meta):
            ...
    """
    def decorator(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Any]]:
        @wraps(func)
        async def wrapper(d: Any, meta: Any) -> Any:
            if kind is None:
                operation = TimeoutKind.CREATE if d.is_new_resource() else TimeoutKind.UPDATE
            else:
                operation = kind
            timeout = d.timeout(operation)
            return await run_with_deadline(
                func(d, meta),
                timeout,
                f"{func.__name__}/{operation.value}",
                getattr(meta, "stop_event", None),
            )

        return wrapper
    return decorator
