"""
Memoized search: top-down dynamic programming over a problem's state space.

The value of a state is
- its goal value, if it is a goal state,
- otherwise the combination of (edge_cost, value(next_state)) over every
  transition, or the combination's explicit failure value if there are none.

Combinations:
- "min": min(edge_cost + value). Failure is +inf. ("minimum energy to finish")
- "max": max(edge_cost + value). Failure is -inf. ("most pressure released")
- "sum": sum(edge_cost * value), edge_cost being a multiplicity. Failure is 0.
  ("universes won", where each roll total happens in several universes)
- "count": sum(value), ignoring edge costs. Failure is 0. ("number of paths")

Each state's transitions are evaluated exactly once per memo table.

Termination is the problem's responsibility: every transition must strictly
reduce some well-founded measure (time remaining, steps left along a DAG).
States are evaluated with an explicit stack, so deep recursions don't hit the
interpreter's recursion limit; re-entering a state that's still being expanded
raises NotWellFoundedError.

>>> paths = TransitionProblem(
...     initial=(0, 0),
...     transition=lambda pos, size: [
...         (next_pos, 1)
...         for next_pos in [(pos[0] + 1, pos[1]), (pos[0], pos[1] + 1)]
...         if max(next_pos) < size
...     ],
...     context=3,
...     is_goal=lambda pos: pos == (2, 2),
... )
>>> memoized_search_value(paths, "count")
6
>>> memoized_search_value(paths, "min")
4
"""
from dataclasses import dataclass, field
from logging import getLogger
from math import inf
from typing import Callable, Generic, Literal, TypeVar

from memosearch.search.errors import NotWellFoundedError
from memosearch.search.memo import MemoTable
from memosearch.search.problem import SearchProblem

logger = getLogger(__name__)

State = TypeVar("State")


@dataclass(frozen=True)
class Combination:
    name: str
    edge_value: Callable[[float, float], float]
    combine: Callable[[list[float]], float]
    failure_value: float
    goal_value: float


CombinationName = Literal["min", "max", "sum", "count"]

combinations: dict[CombinationName, Combination] = {
    "min": Combination("min", lambda cost, value: cost + value, min, inf, 0),
    "max": Combination("max", lambda cost, value: cost + value, max, -inf, 0),
    "sum": Combination("sum", lambda cost, value: cost * value, sum, 0, 1),
    "count": Combination("count", lambda cost, value: value, sum, 0, 1),
}


def _combination(combination: "CombinationName | Combination") -> Combination:
    if isinstance(combination, Combination):
        return combination

    if combination not in combinations:
        raise ValueError(
            f"Unknown combination {combination!r}; "
            + f"expected one of {sorted(combinations)}."
        )

    return combinations[combination]


_initial_state = object()


@dataclass
class MemoizedSearch(Generic[State]):
    """
    A memoized search whose memo table survives between solve() calls.

    Only share one across logically distinct searches when the state itself
    says which sub-problem it belongs to.
    """

    problem: SearchProblem[State]
    combination: CombinationName | Combination = "min"
    memo: MemoTable = field(default_factory=MemoTable)

    def _goal_value(self, state: State, combination: Combination) -> float:
        goal_value = self.problem.goal_value(state)
        return combination.goal_value if goal_value is None else goal_value

    def solve(self, state=_initial_state) -> float:
        if state is _initial_state:
            state = self.problem.initial_state()

        hit, value = self.memo.try_get(state)
        if hit:
            return value

        combination = _combination(self.combination)
        memo = self.memo
        problem = self.problem

        # States expanded but not yet combined. These always form the chain of
        # ancestors of the top of the stack.
        expanding: dict[State, list[tuple[State, float]]] = {}
        stack: list[State] = [state]
        while stack:
            current = stack[-1]
            if current in memo:
                stack.pop()
                continue

            if current not in expanding:
                if problem.is_goal_state(current):
                    memo.insert(current, self._goal_value(current, combination))
                    stack.pop()
                    continue

                problem.expanding_state(current, 0)  # Just for debugging.
                next_pairs = list(problem.transitions(current))
                expanding[current] = next_pairs

                pending = [
                    next_state for next_state, _cost in next_pairs
                    if next_state not in memo
                ]
                for next_state in pending:
                    if next_state in expanding:
                        raise NotWellFoundedError(
                            f"State {next_state!r} is reachable from itself; "
                            + "memoized search needs a strictly decreasing measure."
                        )
                if pending:
                    stack.extend(reversed(pending))
                    continue

            next_pairs = expanding.pop(current)
            stack.pop()
            if next_pairs:
                value = combination.combine(
                    [
                        combination.edge_value(cost, memo.get(next_state))
                        for next_state, cost in next_pairs
                    ]
                )
            else:
                value = combination.failure_value
            memo.insert(current, value)

        logger.debug(f"Solved {state!r} with {len(memo)} memoized states.")
        return memo.get(state)


def memoized_search_value(
    problem: SearchProblem[State],
    combination: CombinationName | Combination = "min",
    memo: MemoTable | None = None,
) -> float:
    """Solve the problem's initial state with a fresh (or explicitly shared) memo."""
    return MemoizedSearch(
        problem=problem,
        combination=combination,
        memo=MemoTable() if memo is None else memo,
    ).solve()
