# geofilt/simulation/parallel.py

"""
Map a function over independent items (arcs) on a pool of workers.

Results are gathered in the order of the items. An error in one item aborts
the run and is re-raised as :class:`ProcessingError` carrying the item
number; the original exception is chained.
"""

import concurrent.futures
import logging
from typing import Callable, List, Optional, Sequence, TypeVar

from geofilt.core.config import get_config
from geofilt.core.exceptions import ProcessingError

logger = logging.getLogger("geofilt.simulation.parallel")

T = TypeVar("T")
R = TypeVar("R")


def for_each(items: Sequence[T],
             func: Callable[[T], R],
             max_workers: Optional[int] = None,
             use_processes: Optional[bool] = None,
             operation: str = "for_each") -> List[R]:
    """
    Apply ``func`` to every item independently.

    Args:
        items: Items to process
        func: Function applied to each item; must be picklable when
            processes are used
        max_workers: Number of workers, defaults to ``parallel.max_workers``;
            1 runs sequentially in the calling thread
        use_processes: Use a process pool instead of threads, defaults to
            ``parallel.use_processes``
        operation: Name of the operation for error reports

    Returns:
        List of results in the order of ``items``

    Raises:
        ProcessingError: If ``func`` fails for an item
    """
    if max_workers is None:
        max_workers = get_config("parallel", "max_workers")
    if use_processes is None:
        use_processes = get_config("parallel", "use_processes")

    items = list(items)
    if max_workers == 1 or len(items) <= 1:
        logger.debug(f"{operation}: processing {len(items)} items sequentially")
        results = []
        for number, item in enumerate(items):
            try:
                results.append(func(item))
            except Exception as e:
                raise ProcessingError(
                    f"{operation} failed for arc {number}: {e}",
                    operation=operation,
                    arc=number
                ) from e
        return results

    executor_class = (concurrent.futures.ProcessPoolExecutor if use_processes
                      else concurrent.futures.ThreadPoolExecutor)
    logger.debug(f"{operation}: processing {len(items)} items with {executor_class.__name__} "
                 f"(max_workers={max_workers})")

    with executor_class(max_workers=max_workers) as executor:
        futures = [executor.submit(func, item) for item in items]
        results = []
        for number, future in enumerate(futures):
            try:
                results.append(future.result())
            except Exception as e:
                for pending in futures[number + 1:]:
                    pending.cancel()
                raise ProcessingError(
                    f"{operation} failed for arc {number}: {e}",
                    operation=operation,
                    arc=number
                ) from e
    return results
