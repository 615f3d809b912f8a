import asyncio
from collections.abc import Callable
from typing import Any

from curvekit.constants import DELEGATED_COMPUTATION_TIMEOUT
from curvekit.exceptions.worker import DelegatedComputationTimeout
from curvekit.logging import logger


async def run_delegated[T](
    func: Callable[..., T],
    *args: Any,
    timeout: float = DELEGATED_COMPUTATION_TIMEOUT,
) -> T:
    """
    Run a CPU-bound function in a worker thread so the event loop keeps serving I/O.

    Raises `DelegatedComputationTimeout` when the result is not ready within `timeout` seconds. The
    thread itself cannot be interrupted and is left to finish in the background.
    """

    task_name = getattr(func, "__name__", repr(func))
    try:
        return await asyncio.wait_for(asyncio.to_thread(func, *args), timeout=timeout)
    except TimeoutError:
        logger.warning(f"{task_name} timed out after {timeout} seconds")
        raise DelegatedComputationTimeout(task_name, timeout) from None
