"""
Valves: release as much pressure as possible from a network of valves and tunnels.

Moving through a tunnel takes a minute, and so does opening a valve. An opened
valve releases its flow rate every remaining minute, so opening it with m minutes
left is worth flow_rate * m up front. Only valves with a positive flow rate are
worth visiting; travel times between them come from a BFS over the tunnels.

With an elephant, we plan our own route first, then hand the remaining closed
valves to the elephant, which starts fresh from the start valve.

The search state is (position, minutes_left, opened, elephant_minutes), where
elephant_minutes is how long the elephant gets once we hand over (0 for no
elephant). The state carries everything its value depends on, so one memo can be
shared across runs with different time limits, with or without the elephant.
"""
import re
from dataclasses import dataclass
from functools import cached_property

from frozendict import frozendict

from memosearch.search.dp_search import MemoizedSearch
from memosearch.search.memo import MemoTable
from memosearch.search.path_search import reachable_distances
from memosearch.search.problem import TransitionProblem

ValveState = tuple[str, int, frozenset[str], int]

# Nothing more to do: stop moving and let the opened valves run.
STOPPED: ValveState = ("", 0, frozenset(), 0)

valve_pattern = re.compile(
    r"Valve (\w+) has flow rate=(\d+); tunnels? leads? to valves? ([\w, ]+)"
)


def _tunnel_transitions(valve: str, tunnels: frozendict[str, tuple[str, ...]]):
    return [(next_valve, 1) for next_valve in tunnels[valve]]


@dataclass(frozen=True)
class ValveNetwork:
    """
    >>> network = ValveNetwork.from_str(
    ...     "Valve AA has flow rate=0; tunnels lead to valves BB, CC\\n"
    ...     "Valve BB has flow rate=5; tunnel leads to valve AA\\n"
    ...     "Valve CC has flow rate=2; tunnels lead to valves AA, DD\\n"
    ...     "Valve DD has flow rate=9; tunnel leads to valve CC"
    ... )
    >>> network.working_valves
    ('BB', 'CC', 'DD')
    >>> network.travel_times[("BB", "DD")]
    3
    """

    flow_rates: frozendict[str, int]
    tunnels: frozendict[str, tuple[str, ...]]
    start: str = "AA"

    @staticmethod
    def from_str(text: str, start: str = "AA") -> "ValveNetwork":
        flow_rates = {}
        tunnels = {}
        for line in text.strip().splitlines():
            match = valve_pattern.fullmatch(line.strip())
            if match is None:
                raise ValueError(f"Can't parse valve line {line!r}.")

            valve, flow_rate, next_valves = match.groups()
            flow_rates[valve] = int(flow_rate)
            tunnels[valve] = tuple(name.strip() for name in next_valves.split(","))

        if start not in flow_rates:
            raise ValueError(f"Start valve {start!r} isn't in the network.")

        return ValveNetwork(frozendict(flow_rates), frozendict(tunnels), start)

    @cached_property
    def working_valves(self) -> tuple[str, ...]:
        return tuple(
            sorted(valve for valve, rate in self.flow_rates.items() if rate > 0)
        )

    @cached_property
    def travel_times(self) -> frozendict[tuple[str, str], int]:
        """Minutes to walk between the start and working valves, where reachable."""
        travel_times = {}
        for source in {self.start, *self.working_valves}:
            distances = reachable_distances(
                TransitionProblem(
                    initial=source,
                    transition=_tunnel_transitions,
                    context=self.tunnels,
                )
            )
            for target in self.working_valves:
                if target in distances:
                    travel_times[(source, target)] = int(distances[target])

        return frozendict(travel_times)


def valve_transitions(
    state: ValveState,
    network: ValveNetwork,
) -> list[tuple[ValveState, float]]:
    position, minutes_left, opened, elephant_minutes = state

    transitions: list[tuple[ValveState, float]] = []
    for valve in network.working_valves:
        if valve in opened or (position, valve) not in network.travel_times:
            continue

        open_minutes = minutes_left - network.travel_times[(position, valve)] - 1
        if open_minutes <= 0:
            continue

        next_state = (valve, open_minutes, opened | {valve}, elephant_minutes)
        transitions.append((next_state, network.flow_rates[valve] * open_minutes))

    if elephant_minutes > 0:
        transitions.append(((network.start, elephant_minutes, opened, 0), 0))
    else:
        transitions.append((STOPPED, 0))

    return transitions


def most_pressure_released(
    network: ValveNetwork,
    minutes: int = 30,
    with_elephant: bool = False,
    memo: MemoTable | None = None,
) -> int:
    """
    Pass the same memo to several calls to reuse the states they have in common.
    """
    elephant_minutes = minutes if with_elephant else 0
    search: MemoizedSearch[ValveState] = MemoizedSearch(
        problem=TransitionProblem(
            initial=(network.start, minutes, frozenset(), elephant_minutes),
            transition=valve_transitions,
            context=network,
            is_goal=lambda state: state == STOPPED,
        ),
        combination="max",
        memo=MemoTable() if memo is None else memo,
    )
    return int(search.solve())
