"""
Memo tables: state -> result caches with insert-once semantics.

A MemoTable lives exactly as long as one search. Sharing one across searches is
allowed, but must be explicit (pass the table in), and any sub-problem
discriminator must be part of the state.
"""
from functools import wraps
from typing import Callable, Generic, Hashable, TypeVar

from memosearch.search.errors import MemoCollisionError, MemoMissError

Key = TypeVar("Key", bound=Hashable)
Result = TypeVar("Result")


class MemoTable(Generic[Key, Result]):
    """
    >>> memo = MemoTable()
    >>> memo.insert((0, 1), 5)
    >>> memo.insert((0, 1), 5)
    >>> memo.try_get((0, 1))
    (True, 5)
    >>> memo.try_get((1, 1))
    (False, None)
    >>> memo.insert((0, 1), 6)
    Traceback (most recent call last):
      ...
    memosearch.search.errors.MemoCollisionError: State (0, 1) already memoized as 5, refusing 6.
    """

    def __init__(self) -> None:
        self._results: dict[Key, Result] = {}
        self.hits = 0
        self.misses = 0

    def try_get(self, key: Key) -> tuple[bool, Result | None]:
        if key in self._results:
            self.hits += 1
            return True, self._results[key]

        self.misses += 1
        return False, None

    def get(self, key: Key, default: Result | None = None) -> Result | None:
        return self._results.get(key, default)

    def insert(self, key: Key, result: Result) -> None:
        if key in self._results:
            if self._results[key] != result:
                raise MemoCollisionError(
                    f"State {key!r} already memoized as {self._results[key]!r}, "
                    + f"refusing {result!r}."
                )
            return

        self._results[key] = result

    def reset(self) -> None:
        self._results.clear()
        self.hits = 0
        self.misses = 0

    def __contains__(self, key: object) -> bool:
        return key in self._results

    def __len__(self) -> int:
        return len(self._results)

    def __repr__(self) -> str:
        return f"MemoTable(size={len(self)}, hits={self.hits}, misses={self.misses})"


def memoized(memo: MemoTable | None = None):
    """
    Cache a function's results in a MemoTable keyed on its positional arguments.

    Recursive helpers decorated this way share the table for one run; build the
    decorated function inside the solving function to get a fresh table per run.

    >>> @memoized()
    ... def fib(n):
    ...     return n if n < 2 else fib(n - 1) + fib(n - 2)
    >>> fib(80)
    23416728348467685
    >>> fib(80, assert_cached=True)
    23416728348467685
    >>> fib(81, assert_cached=True)
    Traceback (most recent call last):
      ...
    memosearch.search.errors.MemoMissError: Expected fib to have cached result for (81,).
    """

    def decorator(func: Callable[..., Result]) -> Callable[..., Result]:
        table: MemoTable = MemoTable() if memo is None else memo

        @wraps(func)
        def wrapper(*args, assert_cached: bool = False):
            hit, result = table.try_get(args)
            if hit:
                return result

            if assert_cached:
                raise MemoMissError(
                    f"Expected {func.__name__} to have cached result for {args}."
                )

            result = func(*args)
            table.insert(args, result)
            return result

        wrapper.memo = table  # type: ignore
        return wrapper

    return decorator
