"""
Lanternfish: count an exponentially growing population without simulating each fish.

Each fish has a timer. Every day it counts down; a fish at 0 resets to 6 and
spawns a new fish at 8. The number of fish one fish becomes depends only on
(days_left, timer), so that's the memoized state.
"""
from typing import Iterable

from memosearch.search.dp_search import MemoizedSearch
from memosearch.search.memo import MemoTable
from memosearch.search.problem import TransitionProblem

FishState = tuple[int, int]  # (days_left, timer)

RESET_TIMER = 6
NEWBORN_TIMER = 8


def parse_timers(text: str) -> list[int]:
    """
    >>> parse_timers("3,4,3,1,2\\n")
    [3, 4, 3, 1, 2]
    """
    return [int(timer) for timer in text.strip().split(",")]


def fish_transitions(
    state: FishState,
    timers: tuple[int, int],
) -> list[tuple[FishState, float]]:
    days_left, timer = state
    reset_timer, newborn_timer = timers
    if timer == 0:
        return [((days_left - 1, reset_timer), 1), ((days_left - 1, newborn_timer), 1)]

    return [((days_left - 1, timer - 1), 1)]


def fish_count(timers: Iterable[int], days: int, memo: MemoTable | None = None) -> int:
    """
    >>> fish_count([3, 4, 3, 1, 2], days=18)
    26
    """
    search: MemoizedSearch[FishState] = MemoizedSearch(
        problem=TransitionProblem(
            initial=(days, 0),
            transition=fish_transitions,
            context=(RESET_TIMER, NEWBORN_TIMER),
            is_goal=lambda state: state[0] == 0,
        ),
        combination="count",
        memo=MemoTable() if memo is None else memo,
    )
    # Every fish in one run shares the memo: the state carries everything that matters.
    return sum(search.solve((days, timer)) for timer in timers)
