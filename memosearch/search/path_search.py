"""
Path search: use graph search algorithms (BFS, Dijkstra, A*) to find the cheapest
route from a problem's initial state(s) to a goal state.

Problems are specified by subclassing SearchProblem or wrapping functions in a
TransitionProblem (see memosearch.search.problem).

We provide two entry points:
- shortest_path
    Expand states in frontier order until a goal is dequeued, and return a
    PathResult. With the "fifo" frontier this is breadth-first search (unit
    costs); with the "priority" frontier it is Dijkstra, or A* when the problem
    supplies an admissible min_cost() estimate.
    An unreachable goal is not an error: the result has cost=inf and found=False.

- reachable_distances
    Exhaust the frontier and return the distance to every reachable state.
    Useful for precomputing distance tables between points of interest.

Both raise SearchTimeoutError when max_steps expansions are exceeded.
"""
from dataclasses import dataclass
from logging import getLogger
from math import inf
from typing import Generator, Generic, TypeVar

from memosearch.search.errors import SearchTimeoutError
from memosearch.search.frontier import Frontier, FrontierName, Step, new_frontier
from memosearch.search.problem import SearchProblem

logger = getLogger(__name__)

State = TypeVar("State")


@dataclass
class PathResult(Generic[State]):
    cost: float
    goal_step: Step[State] | None
    expanded_states: int

    @property
    def found(self) -> bool:
        return self.goal_step is not None

    @property
    def goal_state(self) -> State | None:
        return None if self.goal_step is None else self.goal_step.state

    def path(self) -> list[State]:
        """States from the initial state to the goal, inclusive. Empty if not found."""
        if self.goal_step is None:
            return []
        return self.goal_step.state_sequence()


def _settled_steps(
    problem: SearchProblem[State],
    frontier: Frontier[State],
    distances: dict[State, float],
    max_steps: int | None,
) -> Generator[Step[State], None, None]:
    """
    Yield each non-stale step as it is dequeued, then expand it.

    distances holds the best known cost per state, and is updated in place.
    """
    for state in problem.initial_states():
        if distances.get(state, inf) > 0:
            distances[state] = 0
            frontier.push(Step.initial_step(state, problem.min_cost(state)))

    remaining_steps = max_steps
    while len(frontier) > 0:
        step = frontier.pop()
        if step.cost > distances.get(step.state, inf):
            continue  # Stale; a cheaper route was found after this was queued.

        yield step

        if remaining_steps is not None:
            if remaining_steps == 0:
                raise SearchTimeoutError(
                    f"Could not finish searching in {max_steps} steps."
                )
            remaining_steps -= 1

        problem.expanding_state(step.state, step.cost)  # Just for debugging.
        for next_state, edge_cost in problem.transitions(step.state):
            next_cost = step.cost + edge_cost
            if next_cost < distances.get(next_state, inf):
                distances[next_state] = next_cost
                frontier.push(
                    Step(
                        parent_step=step,
                        state=next_state,
                        cost=next_cost,
                        min_cost=next_cost + problem.min_cost(next_state),
                    )
                )


def shortest_path(
    problem: SearchProblem[State],
    frontier: FrontierName | Frontier = "priority",
    max_steps: int | None = None,
) -> PathResult[State]:
    """
    Early exit on the first dequeued goal is only valid for non-negative edge
    costs (and, for A*, a consistent min_cost estimate).
    """
    distances: dict[State, float] = {}
    expanded_states = 0
    for step in _settled_steps(problem, new_frontier(frontier), distances, max_steps):
        if problem.is_goal_state(step.state):
            logger.debug(
                f"Found goal {step.state!r} at cost {step.cost} "
                + f"after expanding {expanded_states} states."
            )
            return PathResult(step.cost, step, expanded_states)

        expanded_states += 1

    logger.debug(f"Exhausted the frontier after expanding {expanded_states} states.")
    return PathResult(inf, None, expanded_states)


def shortest_path_cost(
    problem: SearchProblem[State],
    frontier: FrontierName | Frontier = "priority",
    max_steps: int | None = None,
) -> float:
    return shortest_path(problem, frontier, max_steps).cost


def reachable_distances(
    problem: SearchProblem[State],
    frontier: FrontierName | Frontier = "fifo",
    max_steps: int | None = None,
) -> dict[State, float]:
    distances: dict[State, float] = {}
    for _step in _settled_steps(problem, new_frontier(frontier), distances, max_steps):
        pass

    return distances
