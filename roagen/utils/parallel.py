"""
Parallel Processing Utilities for roagen

Provides thread pool execution that keeps results in submission order, so a
parallel run assembles exactly the same ROA sequence as a sequential one.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence

logger = logging.getLogger(__name__)


@dataclass
class ParallelResult:
    """Result from parallel execution"""
    item: Any
    success: bool
    result: Optional[Any] = None
    error: Optional[str] = None
    exception: Optional[BaseException] = None
    duration: float = 0.0


class ParallelExecutor:
    """Execute tasks on a thread pool and return results in input order"""

    def __init__(self, max_workers: int = 4):
        """
        Initialize parallel executor

        Args:
            max_workers: Maximum concurrent threads; 1 runs inline
        """
        self.max_workers = max(1, max_workers)
        self.logger = logging.getLogger(self.__class__.__name__)

    def execute_ordered(self,
                        items: Sequence[Any],
                        task_func: Callable,
                        task_name: str = "Processing",
                        **kwargs) -> List[ParallelResult]:
        """
        Execute task function on items, preserving input order

        Args:
            items: Items to process
            task_func: Function to execute for each item
            task_name: Description for log output
            **kwargs: Additional arguments for task_func

        Returns:
            List of ParallelResult objects, one per item, in input order
        """
        total = len(items)
        self.logger.debug(f"{task_name} {total} items with {self.max_workers} workers")

        if self.max_workers == 1 or total <= 1:
            results = [self._execute_task(task_func, item, **kwargs) for item in items]
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = [
                    executor.submit(self._execute_task, task_func, item, **kwargs)
                    for item in items
                ]
                results = [future.result() for future in futures]

        failed = sum(1 for r in results if not r.success)
        if failed:
            self.logger.warning(f"{task_name}: {failed}/{total} tasks raised unexpected errors")

        return results

    def _execute_task(self, task_func: Callable, item: Any, **kwargs) -> ParallelResult:
        """
        Execute single task with error capture

        Args:
            task_func: Function to execute
            item: Item to process
            **kwargs: Additional arguments for task_func

        Returns:
            ParallelResult with execution details
        """
        start_time = time.time()

        try:
            result = task_func(item, **kwargs)
            return ParallelResult(
                item=item,
                success=True,
                result=result,
                duration=time.time() - start_time
            )

        except Exception as e:
            self.logger.error(f"Task failed for {item}: {e}")
            return ParallelResult(
                item=item,
                success=False,
                error=str(e),
                exception=e,
                duration=time.time() - start_time
            )
