"""Helpers that simulate slow or flaky backends for streaming UIs."""

import asyncio
import random
from typing import TypeVar

T = TypeVar("T")


class SimulatedFailure(RuntimeError):
    pass


async def simulate_slow_response(response: T, delay_ms: int = 2000) -> T:
    await asyncio.sleep(delay_ms / 1000)
    return response


async def simulate_random_delay(response: T, min_delay_ms: int = 1000, max_delay_ms: int = 3000) -> T:
    delay = random.uniform(min_delay_ms, max_delay_ms)
    await asyncio.sleep(delay / 1000)
    return response


async def simulate_occasional_failure(response: T, failure_rate: float = 0.1) -> T:
    if random.random() < failure_rate:
        raise SimulatedFailure("Simulated API failure")
    return response
