"""
Frontiers: the ordering policy for not-yet-expanded search steps.

- FifoFrontier: breadth-first. On unweighted graphs, the first time a state is
  dequeued it has its shortest distance.
- PriorityFrontier: min-heap on step priority (accumulated cost plus any A*
  heuristic). Gives the same guarantee on non-negative edge costs.

Pairing FIFO with weighted edges, or either with negative edges, is a programming
error that is not detected here.
"""
from abc import ABCMeta, abstractmethod
from collections import deque
from dataclasses import dataclass
from heapq import heappop, heappush
from itertools import count
from typing import Generic, Literal, Optional, TypeVar

State = TypeVar("State")


@dataclass
class Step(Generic[State]):
    parent_step: Optional["Step"]
    state: State
    cost: float
    min_cost: float

    def state_sequence(self) -> list[State]:
        sequence = []
        step: Step | None = self
        while step is not None:
            sequence.append(step.state)
            step = step.parent_step

        return list(reversed(sequence))

    @staticmethod
    def initial_step(state: State, min_cost: float = 0) -> "Step":
        return Step(
            parent_step=None,
            state=state,
            cost=0,
            min_cost=min_cost,
        )


class Frontier(Generic[State], metaclass=ABCMeta):
    @abstractmethod
    def push(self, step: Step[State]) -> None:
        pass

    @abstractmethod
    def pop(self) -> Step[State]:
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass


class FifoFrontier(Frontier[State]):
    """
    >>> frontier = FifoFrontier()
    >>> for state, cost in [("a", 3), ("b", 1)]:
    ...     frontier.push(Step(None, state, cost, cost))
    >>> frontier.pop().state, frontier.pop().state
    ('a', 'b')
    """

    def __init__(self) -> None:
        self._steps: deque[Step[State]] = deque()

    def push(self, step: Step[State]) -> None:
        self._steps.append(step)

    def pop(self) -> Step[State]:
        return self._steps.popleft()

    def __len__(self) -> int:
        return len(self._steps)


class PriorityFrontier(Frontier[State]):
    """
    Ties are broken by insertion order, so states never need to be comparable.

    >>> frontier = PriorityFrontier()
    >>> for state, cost in [("a", 3), ("b", 1), ("c", 1)]:
    ...     frontier.push(Step(None, state, cost, cost))
    >>> [frontier.pop().state for _ in range(len(frontier))]
    ['b', 'c', 'a']
    """

    def __init__(self) -> None:
        self._heap: list[tuple[float, int, Step[State]]] = []
        self._sequence = count()

    def push(self, step: Step[State]) -> None:
        heappush(self._heap, (step.min_cost, next(self._sequence), step))

    def pop(self) -> Step[State]:
        _min_cost, _sequence, step = heappop(self._heap)
        return step

    def __len__(self) -> int:
        return len(self._heap)


FrontierName = Literal["fifo", "priority"]

frontier_types: dict[FrontierName, type[Frontier]] = {
    "fifo": FifoFrontier,
    "priority": PriorityFrontier,
}


def new_frontier(frontier: "FrontierName | Frontier") -> Frontier:
    if isinstance(frontier, Frontier):
        if len(frontier) != 0:
            raise ValueError("Frontiers are owned by one search; got a non-empty one.")
        return frontier

    if frontier not in frontier_types:
        raise ValueError(
            f"Unknown frontier {frontier!r}; expected one of {sorted(frontier_types)}."
        )

    return frontier_types[frontier]()
