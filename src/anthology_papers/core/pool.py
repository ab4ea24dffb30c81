"""
Bounded worker pools

Each phase of a crawl runs its tasks through its own ThreadPoolExecutor whose
max_workers is the phase's concurrency cap, so no more than 'limit' tasks are
ever in flight at once.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Iterable, List, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')
R = TypeVar('R')


def map_bounded(func: Callable[[T], R], items: Iterable[T], limit: int) -> List[R]:
    """
    Apply 'func' to every item with at most 'limit' calls in flight

    Fail-fast: the first exception cancels every task that has not started
    yet and is re-raised once running tasks have finished.

    Args:
        func: Function to apply
        items: Inputs
        limit: Maximum concurrent calls

    Returns:
        Results in the same order as 'items'
    """
    items = list(items)
    results: List[R] = [None] * len(items)  # type: ignore[list-item]
    if not items:
        return results

    with ThreadPoolExecutor(max_workers=limit) as executor:
        futures = {executor.submit(func, item): i for i, item in enumerate(items)}
        try:
            for future in as_completed(futures):
                results[futures[future]] = future.result()
        except BaseException:
            for future in futures:
                future.cancel()
            raise

    return results


def run_bounded(func: Callable[[T], object], items: Iterable[T], limit: int) -> List[Exception]:
    """
    Call 'func' on every item with at most 'limit' calls in flight

    A failing call does not stop the batch; its exception is collected.

    Args:
        func: Function to call
        items: Inputs
        limit: Maximum concurrent calls

    Returns:
        Exceptions raised by individual calls (empty if all succeeded)
    """
    items = list(items)
    errors: List[Exception] = []
    if not items:
        return errors

    with ThreadPoolExecutor(max_workers=limit) as executor:
        futures = [executor.submit(func, item) for item in items]
        for future in as_completed(futures):
            try:
                future.result()
            except Exception as e:
                logger.error(f"Task error: {e}")
                errors.append(e)

    return errors
