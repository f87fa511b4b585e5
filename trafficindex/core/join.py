"""
Join strategies for fanning out upstream calls

Two policies are used side by side:
- SETTLE_ALL runs every call concurrently and waits for all of them,
  returning exceptions in place of results (one failure never aborts others).
- FAIL_FAST runs calls one at a time and re-raises the first failure,
  leaving the remaining calls unstarted.
"""

import asyncio
from enum import Enum
from typing import Awaitable, Callable, List, TypeVar, Union

T = TypeVar("T")

CallFactory = Callable[[], Awaitable[T]]


class JoinStrategy(str, Enum):
    """How a batch of upstream calls is executed and joined"""

    SETTLE_ALL = "settle_all"
    FAIL_FAST = "fail_fast"


async def run_settled(factories: List[CallFactory]) -> List[Union[T, BaseException]]:
    """Run all calls concurrently; each slot holds a result or its exception"""
    if not factories:
        return []
    return await asyncio.gather(*(factory() for factory in factories), return_exceptions=True)


async def run_fail_fast(factories: List[CallFactory]) -> List[T]:
    """Run calls sequentially, propagating the first exception"""
    results = []
    for factory in factories:
        results.append(await factory())
    return results


async def join(factories: List[CallFactory], strategy: JoinStrategy) -> List:
    if strategy == JoinStrategy.SETTLE_ALL:
        return await run_settled(factories)
    if strategy == JoinStrategy.FAIL_FAST:
        return await run_fail_fast(factories)
    raise ValueError(f"Unknown join strategy: {strategy}")
