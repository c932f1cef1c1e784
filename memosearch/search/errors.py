"""Search error types."""


class SearchError(Exception):
    """Any search-related problem."""


class NoSolutionError(SearchError):
    """The problem has no solution at all."""


class SearchTimeoutError(SearchError):
    """We couldn't find a solution within the step budget."""


class MemoCollisionError(SearchError):
    """A memoized state was re-inserted with a different result.

    Almost always a state key equality/hash bug: two different states compare equal.
    """


class MemoMissError(SearchError):
    "Expected result to be cached, but it was not."


class NonDeterministicTransitionError(SearchError):
    """A repeated state produced a different successor than its first occurrence."""


class NotWellFoundedError(SearchError):
    """A memoized search re-entered a state it was still expanding."""
