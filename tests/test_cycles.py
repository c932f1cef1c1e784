from pytest import mark, raises

from memosearch.search.cycles import Cycle, detect_cycle, state_after
from memosearch.search.errors import NonDeterministicTransitionError, SearchTimeoutError


def rho_step(n: int) -> int:
    """0, 1, then 2 3 4 5 6 repeating: offset 2, period 5."""
    return n + 1 if n < 6 else 2


def simulated(initial_state, step, steps):
    state = initial_state
    for _ in range(steps):
        state = step(state)
    return state


def test_detect_cycle():
    cycle = detect_cycle(0, rho_step)

    assert (cycle.offset, cycle.period) == (2, 5)
    assert cycle.history == (0, 1, 2, 3, 4, 5, 6)
    assert cycle.repeat_state == 2


@mark.parametrize("steps", range(60))
def test_matches_brute_force(steps):
    assert state_after(0, rho_step, steps) == simulated(0, rho_step, steps)
    assert detect_cycle(0, rho_step).state_at(steps) == simulated(0, rho_step, steps)


def test_large_step_count():
    # (1_000_003 - 2) % 5 == 1, so this lands one step into the cycle.
    assert state_after(0, rho_step, 1_000_003) == 3
    assert state_after(0, rho_step, 1_000_003) == simulated(0, rho_step, 13)


def accumulating_step(state: tuple[int, int]) -> tuple[int, int]:
    position, total = state
    return (3 * position + 1) % 11, total + position


def position_key(state: tuple[int, int]) -> int:
    return state[0]


@mark.parametrize("steps", [0, 1, 5, 17, 40, 199])
def test_value_extrapolation(steps):
    cycle = detect_cycle((2, 0), accumulating_step, key=position_key)
    brute_force_state = simulated((2, 0), accumulating_step, steps)

    assert cycle.value_at(steps, lambda state: state[1]) == brute_force_state[1]
    assert position_key(cycle.state_at(steps)) == position_key(brute_force_state)


def test_verify_determinism_passes_for_deterministic_process():
    cycle = detect_cycle(0, rho_step, verify_determinism=True)
    assert cycle.period == 5

    single_state_cycle = detect_cycle(5, lambda n: 5, verify_determinism=True)
    assert (single_state_cycle.offset, single_state_cycle.period) == (0, 1)


def test_verify_determinism_catches_hidden_state():
    # Keys 0, 1, 0 look like a period-2 cycle, but 2 steps to 4 (key 0), not key 1.
    def step(n: int) -> int:
        return n + 1 if n < 2 else n + 2

    def parity(n: int) -> int:
        return n % 2

    assert detect_cycle(0, step, key=parity).period == 2
    with raises(NonDeterministicTransitionError):
        detect_cycle(0, step, key=parity, verify_determinism=True)
    with raises(NonDeterministicTransitionError):
        state_after(0, step, 100, key=parity, verify_determinism=True)


def test_no_cycle_within_budget():
    with raises(SearchTimeoutError):
        detect_cycle(0, lambda n: n + 1, max_steps=10)


def test_state_after_without_cycle():
    assert state_after(0, lambda n: n + 1, 25) == 25
    assert state_after("x", lambda s: s + "x", 0) == "x"


def test_negative_steps():
    with raises(ValueError):
        state_after(0, rho_step, -1)
    with raises(ValueError):
        Cycle(offset=0, period=1, history=(0,), repeat_state=0).state_at(-1)


def test_progressbar():
    assert detect_cycle(0, rho_step, show_progressbar=True).period == 5
