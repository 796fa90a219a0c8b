"""
Batch Runner

Bounded-concurrency task runner used for league-wide fan-out. Items are
processed in fixed-size batches on a thread pool; each batch is awaited in
full before the next one starts, with a short pause between batches.
"""

import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Hashable, Iterable, TypeVar

from loguru import logger

T = TypeVar("T", bound=Hashable)
R = TypeVar("R")


class BatchRunner:
    """
    Run a task per item in batches of at most ``batch_size``.

    A failed item is logged and yields ``None``; the other items in its
    batch are unaffected.
    """

    def __init__(
        self,
        batch_size: int = 8,
        delay_seconds: float = 0.05,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")
        self.batch_size = batch_size
        self.delay_seconds = delay_seconds
        self._sleep = sleep

    def batches(self, items: list[T]) -> list[list[T]]:
        """Split items into consecutive batches."""
        return [items[i : i + self.batch_size] for i in range(0, len(items), self.batch_size)]

    def run(self, items: Iterable[T], task: Callable[[T], R]) -> dict[T, R | None]:
        """
        Run ``task`` for every item.

        Args:
            items: Items to process (order is preserved in the result)
            task: Callable invoked once per item

        Returns:
            Mapping of item to its result, or None where the task raised
        """
        item_list = list(items)
        results: dict[T, R | None] = {}
        batches = self.batches(item_list)

        for index, batch in enumerate(batches):
            with ThreadPoolExecutor(max_workers=len(batch)) as executor:
                futures = {item: executor.submit(task, item) for item in batch}

                for item, future in futures.items():
                    try:
                        results[item] = future.result()
                    except Exception as e:
                        logger.warning(f"Task failed for {item}: {e}")
                        results[item] = None

            if index < len(batches) - 1 and self.delay_seconds > 0:
                self._sleep(self.delay_seconds)

        failed = sum(1 for value in results.values() if value is None)
        logger.info(f"Batch run complete: {len(item_list)} items, {len(batches)} batches, {failed} failed")
        return results
