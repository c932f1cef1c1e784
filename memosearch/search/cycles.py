"""
Cycle detection: skip forward through a deterministic process by finding the
point where it starts repeating.

The process is a step function from state to next state. States are recorded
by key (the state itself, by default) against the step index they first
appeared at. On the first repeat:

    offset = first step index of the repeated key
    period = current step index - offset

Any later step n maps back to offset + (n - offset) % period.

The step function must depend on the key alone. If it doesn't, extrapolation
silently gives wrong answers; verify_determinism=True catches the common case
where the repeated state's successor differs from the first occurrence's.

>>> cycle = detect_cycle(0, lambda n: n + 1 if n < 6 else 2)
>>> cycle.offset, cycle.period
(2, 5)
>>> cycle.state_at(1_000_003)
3
"""
from dataclasses import dataclass
from logging import getLogger
from typing import Any, Callable, Generic, Hashable, TypeVar

from tqdm import tqdm

from memosearch.search.errors import NonDeterministicTransitionError, SearchTimeoutError

logger = getLogger(__name__)

State = TypeVar("State")


def _identity(state: Any) -> Any:
    return state


@dataclass(frozen=True)
class Cycle(Generic[State]):
    """
    history holds the states at steps 0 .. offset + period - 1.
    repeat_state is the state at step offset + period, whose key matches
    history[offset]; it may differ from history[offset] outside its key (e.g. an
    accumulated score).
    """

    offset: int
    period: int
    history: tuple[State, ...]
    repeat_state: State

    def step_index(self, step: int) -> int:
        """Index into history of a state with the same key as the state at step."""
        if step < 0:
            raise ValueError(f"Steps must be non-negative, got {step}.")

        if step < len(self.history):
            return step

        return self.offset + (step - self.offset) % self.period

    def state_at(self, step: int) -> State:
        return self.history[self.step_index(step)]

    def value_at(self, step: int, value: Callable[[State], int]) -> int:
        """
        Extrapolate a quantity that grows by the same amount every period.

        >>> cycle = Cycle(offset=1, period=2, history=((0, 0), (1, 5), (2, 7)),
        ...               repeat_state=(1, 10))
        >>> cycle.value_at(6, lambda state: state[1])
        17
        """
        if step < len(self.history):
            return value(self.history[step])

        full_periods, remainder = divmod(step - self.offset, self.period)
        period_gain = value(self.repeat_state) - value(self.history[self.offset])
        return value(self.history[self.offset + remainder]) + full_periods * period_gain


def _verify_successor(
    cycle: Cycle[State],
    step: Callable[[State], State],
    key: Callable[[State], Hashable],
) -> None:
    expected_index = cycle.offset + 1
    if expected_index < len(cycle.history):
        expected_key = key(cycle.history[expected_index])
    else:
        expected_key = key(cycle.repeat_state)

    actual_key = key(step(cycle.repeat_state))
    if actual_key != expected_key:
        raise NonDeterministicTransitionError(
            f"State {key(cycle.repeat_state)!r} first stepped to {expected_key!r}, "
            + f"but repeated it stepped to {actual_key!r}."
        )


def _walk(
    initial_state: State,
    step: Callable[[State], State],
    key: Callable[[State], Hashable],
    max_steps: int | None,
    show_progressbar: bool,
) -> tuple[list[State], State, int | None]:
    """
    Step forward until a key repeats or max_steps states are recorded.

    Returns the recorded history, the next (unrecorded) state, and the history
    index of the repeated key (None if the budget ran out first).
    """
    first_seen: dict[Hashable, int] = {}
    history: list[State] = []

    state = initial_state
    with tqdm(total=max_steps, disable=not show_progressbar) as progress:
        while (state_key := key(state)) not in first_seen:
            if max_steps is not None and len(history) >= max_steps:
                return history, state, None

            first_seen[state_key] = len(history)
            history.append(state)
            state = step(state)
            progress.update()

    return history, state, first_seen[state_key]


def detect_cycle(
    initial_state: State,
    step: Callable[[State], State],
    key: Callable[[State], Hashable] | None = None,
    max_steps: int | None = None,
    verify_determinism: bool = False,
    show_progressbar: bool = False,
) -> Cycle[State]:
    key_func = _identity if key is None else key
    history, state, offset = _walk(
        initial_state, step, key_func, max_steps, show_progressbar
    )
    if offset is None:
        raise SearchTimeoutError(f"No cycle found within {max_steps} steps.")

    cycle = Cycle(
        offset=offset,
        period=len(history) - offset,
        history=tuple(history),
        repeat_state=state,
    )
    logger.debug(f"Found cycle of period {cycle.period} at offset {cycle.offset}.")

    if verify_determinism:
        _verify_successor(cycle, step, key_func)

    return cycle


def state_after(
    initial_state: State,
    step: Callable[[State], State],
    steps: int,
    key: Callable[[State], Hashable] | None = None,
    verify_determinism: bool = False,
    show_progressbar: bool = False,
) -> State:
    """
    The state after the given number of steps, skipping whole cycles if the
    process repeats before then.

    Past the first repeat, a custom key means the returned state only matches
    the true state on its key.

    >>> state_after(0, lambda n: (n + 3) % 7, 1_000_000_000)
    4
    >>> state_after(0, lambda n: n + 1, 12)
    12
    """
    if steps < 0:
        raise ValueError(f"Steps must be non-negative, got {steps}.")

    key_func = _identity if key is None else key
    history, state, offset = _walk(
        initial_state, step, key_func, steps + 1, show_progressbar
    )
    if offset is None:
        return history[steps]

    cycle = Cycle(
        offset=offset,
        period=len(history) - offset,
        history=tuple(history),
        repeat_state=state,
    )
    if verify_determinism:
        _verify_successor(cycle, step, key_func)

    if steps == len(history):
        return cycle.repeat_state

    return cycle.state_at(steps)
