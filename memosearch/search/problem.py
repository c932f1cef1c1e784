"""
Search problems: the adapter-facing side of the search engines.

A problem supplies initial state(s), a transition producing (next_state, cost)
pairs, and a goal predicate. States must be immutable and hashable; two equal
states must produce identical transitions.

Problems are specified either by subclassing SearchProblem, or by wrapping plain
functions in a TransitionProblem:

>>> problem = TransitionProblem(
...     initial=0,
...     transition=lambda n, step: [(n + step, 1)] if n < 10 else [],
...     context=3,
...     is_goal=lambda n: n == 9,
... )
>>> list(problem.transitions(3))
[(6, 1)]
>>> problem.is_goal_state(9)
True
"""
from abc import ABCMeta, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Iterable, Literal, Optional, TypeVar

State = TypeVar("State")
Context = TypeVar("Context")

Transition = Callable[[State, Context], Iterable[tuple[State, float]]]
GoalPredicate = Callable[[State], bool]


class SearchProblem(Generic[State], metaclass=ABCMeta):
    @abstractmethod
    def initial_state(self) -> State:
        pass

    @abstractmethod
    def transitions(self, state: State) -> Iterable[tuple[State, float]]:
        pass

    @abstractmethod
    def is_goal_state(self, state: State) -> bool:
        pass

    def initial_states(self) -> list[State]:
        return [self.initial_state()]

    def goal_value(self, state: State) -> Optional[float]:
        """Value a goal state contributes; None means the combination's default."""
        return None

    def min_cost(self, state: State) -> float:
        """Admissible cost-to-goal estimate (A* heuristic). Zero means plain Dijkstra."""
        return 0

    def expanding_state(self, state: State, cost: float) -> None:
        pass


def _never_goal(state: Any) -> bool:
    return False


@dataclass(frozen=True)
class TransitionProblem(SearchProblem[State]):
    """A SearchProblem built from plain functions and a read-only context."""

    initial: State
    transition: Transition
    context: Any = None
    is_goal: GoalPredicate = _never_goal
    goal_value_func: Callable[[State], float] | None = None
    heuristic: Callable[[State], float] | None = None
    extra_initial: tuple = ()

    def initial_state(self) -> State:
        return self.initial

    def initial_states(self) -> list[State]:
        return [self.initial, *self.extra_initial]

    def transitions(self, state: State) -> Iterable[tuple[State, float]]:
        return self.transition(state, self.context)

    def is_goal_state(self, state: State) -> bool:
        return self.is_goal(state)

    def goal_value(self, state: State) -> Optional[float]:
        if self.goal_value_func is None:
            return None
        return self.goal_value_func(state)

    def min_cost(self, state: State) -> float:
        if self.heuristic is None:
            return 0
        return self.heuristic(state)


AlgoAction = Literal[
    "initial_states",
    "transitions",
    "is_goal_state",
    "goal_value",
    "min_cost",
    "expanding_state",
]


@dataclass
class AlgoTraceStep(Generic[State]):
    algo_action: AlgoAction
    state: State | None = None
    cost: float | None = None


@dataclass
class TracedSearchProblem(SearchProblem[State]):
    """
    Record the algorithmic steps taken by a search algorithm for analysis.
    """

    problem: SearchProblem[State]
    algo_steps: list[AlgoTraceStep[State]] = field(default_factory=list)

    def initial_state(self) -> State:
        return self.problem.initial_state()

    def initial_states(self) -> list[State]:
        self.algo_steps.append(AlgoTraceStep("initial_states"))
        return self.problem.initial_states()

    def transitions(self, state: State) -> Iterable[tuple[State, float]]:
        self.algo_steps.append(AlgoTraceStep("transitions", state))
        return self.problem.transitions(state)

    def is_goal_state(self, state: State) -> bool:
        self.algo_steps.append(AlgoTraceStep("is_goal_state", state))
        return self.problem.is_goal_state(state)

    def goal_value(self, state: State) -> Optional[float]:
        self.algo_steps.append(AlgoTraceStep("goal_value", state))
        return self.problem.goal_value(state)

    def min_cost(self, state: State) -> float:
        self.algo_steps.append(AlgoTraceStep("min_cost", state))
        return self.problem.min_cost(state)

    def expanding_state(self, state: State, cost: float) -> None:
        self.algo_steps.append(AlgoTraceStep("expanding_state", state, cost))

    def action_count(self, algo_action: AlgoAction) -> int:
        return sum(1 for step in self.algo_steps if step.algo_action == algo_action)
