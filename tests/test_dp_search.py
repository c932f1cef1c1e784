from itertools import product
from math import inf, prod

from pytest import mark, raises

from memosearch.search.dp_search import (
    Combination,
    MemoizedSearch,
    memoized_search_value,
)
from memosearch.search.errors import NotWellFoundedError
from memosearch.search.memo import MemoTable
from memosearch.search.problem import TracedSearchProblem, TransitionProblem

DEPTH = 4

# node -> (cost to node + 1, cost to node + 2), both modulo 3.
edge_costs = {0: (1, 5), 1: (2, 3), 2: (7, 1)}


def dag_transitions(state, costs):
    time, node = state
    if time == DEPTH:
        return []

    first_cost, second_cost = costs[node]
    return [
        ((time + 1, (node + 1) % 3), first_cost),
        ((time + 1, (node + 2) % 3), second_cost),
    ]


dag_problem = TransitionProblem(
    initial=(0, 0),
    transition=dag_transitions,
    context=edge_costs,
    is_goal=lambda state: state[0] == DEPTH,
)


def brute_force_path_costs() -> list[list[int]]:
    """Every root-to-leaf path's edge costs, enumerated by its 2^DEPTH choices."""
    all_path_costs = []
    for choices in product([0, 1], repeat=DEPTH):
        node = 0
        path_costs = []
        for choice in choices:
            path_costs.append(edge_costs[node][choice])
            node = (node + 1 + choice) % 3
        all_path_costs.append(path_costs)
    return all_path_costs


def test_well_founded_dag_matches_brute_force():
    path_costs = brute_force_path_costs()
    assert len(path_costs) == 16

    assert memoized_search_value(dag_problem, "min") == min(map(sum, path_costs))
    assert memoized_search_value(dag_problem, "max") == max(map(sum, path_costs))
    assert memoized_search_value(dag_problem, "count") == 16
    assert memoized_search_value(dag_problem, "sum") == sum(map(prod, path_costs))


def test_second_solve_is_memoized():
    traced_problem = TracedSearchProblem(dag_problem)
    search = MemoizedSearch(traced_problem, "min")

    first_value = search.solve()
    transition_calls = traced_problem.action_count("transitions")
    second_value = search.solve()

    assert first_value == second_value
    assert traced_problem.action_count("transitions") == transition_calls
    assert search.memo.hits >= 1


def test_each_state_transitioned_once():
    traced_problem = TracedSearchProblem(dag_problem)
    memoized_search_value(traced_problem, "count")

    transitioned_states = [
        step.state
        for step in traced_problem.algo_steps
        if step.algo_action == "transitions"
    ]
    assert len(transitioned_states) == len(set(transitioned_states))
    # The root, two nodes at time 1, then all three nodes at times 2 and 3.
    assert len(transitioned_states) == 9


@mark.parametrize(
    "combination,failure_value",
    [("min", inf), ("max", -inf), ("sum", 0), ("count", 0)],
)
def test_dead_end_yields_explicit_failure(combination, failure_value):
    dead_end = TransitionProblem(
        initial="start",
        transition=lambda state, context: [],
    )

    assert memoized_search_value(dead_end, combination) == failure_value


def test_dead_end_branches_are_ignored():
    graph = {
        "start": [("dead end", 1), ("detour", 4)],
        "dead end": [],
        "detour": [("goal", 4)],
    }
    problem = TransitionProblem(
        initial="start",
        transition=lambda node, graph: graph[node],
        context=graph,
        is_goal=lambda node: node == "goal",
    )

    assert memoized_search_value(problem, "min") == 8
    assert memoized_search_value(problem, "count") == 1


def test_goal_values():
    problem = TransitionProblem(
        initial=0,
        transition=lambda n, context: [(n + 1, 1), (n + 2, 1)],
        is_goal=lambda n: n >= 3,
        goal_value_func=lambda n: 10 * n,
    )

    # 0 -> 1 -> 2 -> 4 scores 40 + 3 edges.
    assert memoized_search_value(problem, "max") == 43
    # 0 -> 1 -> 2 -> 3 scores 30 + 3 edges, 0 -> 2 -> 3 scores 30 + 2 edges.
    assert memoized_search_value(problem, "min") == 32


def test_custom_combination():
    reachable = Combination(
        name="any",
        edge_value=lambda cost, value: value,
        combine=any,
        failure_value=False,
        goal_value=True,
    )

    assert memoized_search_value(dag_problem, reachable) is True


def test_deep_recursion():
    countdown = TransitionProblem(
        initial=20_000,
        transition=lambda n, context: [(n - 1, 1)],
        is_goal=lambda n: n == 0,
    )

    assert memoized_search_value(countdown, "min") == 20_000


def test_cycle_is_not_well_founded():
    loop = TransitionProblem(
        initial=0,
        transition=lambda n, context: [((n + 1) % 3, 1)],
    )

    with raises(NotWellFoundedError):
        memoized_search_value(loop, "min")


def test_explicitly_shared_memo():
    memo = MemoTable()
    memoized_search_value(dag_problem, "count", memo=memo)
    states_solved = len(memo)

    search = MemoizedSearch(dag_problem, "count", memo)
    assert search.solve((1, 2)) == 8
    assert len(memo) == states_solved


def test_unknown_combination():
    with raises(ValueError):
        memoized_search_value(dag_problem, "median")  # type: ignore
