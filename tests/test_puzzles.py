from math import inf

from pytest import mark, raises

from memosearch.misc.ops import Op, evaluate, op_from_token
from memosearch.puzzles.circuit import parse_circuit, wire_signal, wire_signals
from memosearch.puzzles.dirac_dice import (
    deterministic_game_result,
    parse_starting_positions,
    universes_won,
)
from memosearch.puzzles.grid import (
    GridMaze,
    WeightedGrid,
    fewest_climbing_steps,
    lowest_total_cost,
    shortest_steps,
)
from memosearch.puzzles.lanternfish import fish_count, parse_timers
from memosearch.puzzles.rock_tilt import (
    load_after_spins,
    load_after_tilt,
    parse_platform,
    spun,
)
from memosearch.puzzles.valves import ValveNetwork, most_pressure_released
from memosearch.search.errors import NoSolutionError
from memosearch.search.memo import MemoTable

example_maze = "\n".join(["S..", ".#.", "..E"])

example_weighted_grid = """
1163751742
1381373672
2136511328
3694931569
7463417111
1319128137
1359912421
3125421639
1293138521
2311944581
"""

example_height_map = """
Sabqponm
abcryxxl
accszExk
acctuvwj
abdefghi
"""

example_platform = """
O....#....
O.OO#....#
.....##...
OO.#O....O
.O.....O#.
O.#..O.#.#
..O..#O..O
.......O..
#....###..
#OO..#....
"""

example_circuit = """
123 -> x
456 -> y
x AND y -> d
x OR y -> e
x LSHIFT 2 -> f
y RSHIFT 2 -> g
NOT x -> h
NOT y -> i
"""


def test_maze():
    assert shortest_steps(GridMaze.from_str(example_maze)) == 4
    assert shortest_steps(GridMaze.from_str("S#E")) == inf


@mark.parametrize("bad_maze", ["S..\n..", "S.X\n..E", "...\n..E"])
def test_bad_maze(bad_maze):
    with raises(ValueError):
        GridMaze.from_str(bad_maze)


def test_weighted_grid():
    grid = WeightedGrid.from_str(example_weighted_grid)

    assert lowest_total_cost(grid) == 40
    assert lowest_total_cost(grid.tiled(5)) == 315


def test_height_map():
    assert fewest_climbing_steps(example_height_map) == 31
    assert fewest_climbing_steps(example_height_map, from_any_lowest=True) == 29


@mark.parametrize("days,expected_count", [(18, 26), (80, 5934), (256, 26984457539)])
def test_lanternfish(days, expected_count):
    assert fish_count(parse_timers("3,4,3,1,2"), days) == expected_count


def test_lanternfish_memo_is_per_run():
    memo = MemoTable()
    fish_count([3, 4, 3, 1, 2], 80, memo=memo)
    solved_states = len(memo)

    # Same states, so nothing new is solved.
    assert fish_count([3, 4, 3, 1, 2], 80, memo=memo) == 5934
    assert len(memo) == solved_states


def test_dirac_dice():
    starts = parse_starting_positions(
        "Player 1 starting position: 4\nPlayer 2 starting position: 8\n"
    )

    assert deterministic_game_result(*starts) == 739785
    assert universes_won(*starts) == (444356092776315, 341960390180808)


def test_rock_tilt():
    assert load_after_tilt(example_platform) == 136
    assert load_after_spins(example_platform) == 64


def test_spin_cycle():
    platform = parse_platform(example_platform)
    once = spun(platform)

    assert once[0] == ".....#...."
    assert once[1] == "....#...O#"
    assert sum(row.count("O") for row in once) == sum(
        row.count("O") for row in platform
    )


def test_circuit():
    circuit = parse_circuit(example_circuit)

    assert wire_signals(circuit) == {
        "d": 72,
        "e": 507,
        "f": 492,
        "g": 114,
        "h": 65412,
        "i": 65079,
        "x": 123,
        "y": 456,
    }
    assert wire_signal(circuit, "h", overrides={"x": 0}) == 65535


def test_circuit_missing_driver():
    with raises(KeyError):
        wire_signal(parse_circuit("a AND b -> c\n1 -> a"), "c")


@mark.parametrize(
    "op,a,b,expected",
    [
        (Op.ADD, 2, 3, 5),
        (Op.MUL, -2, 3, -6),
        (Op.DIV, 7, -2, -3),
        (Op.MOD, 7, 3, 1),
        (Op.EQL, 1, 2, 0),
        (Op.AND, 0b1100, 0b1010, 0b1000),
        (Op.OR, 0b1100, 0b1010, 0b1110),
        (Op.RSHIFT, 456, 2, 114),
    ],
)
def test_evaluate(op, a, b, expected):
    assert evaluate(op, a, b) == expected


def test_evaluate_needs_operands():
    with raises(ValueError):
        evaluate(op_from_token("AND"), 1)


example_valves = """
Valve AA has flow rate=0; tunnels lead to valves DD, II, BB
Valve BB has flow rate=13; tunnels lead to valves CC, AA
Valve CC has flow rate=2; tunnels lead to valves DD, BB
Valve DD has flow rate=20; tunnels lead to valves CC, AA, EE
Valve EE has flow rate=3; tunnels lead to valves FF, DD
Valve FF has flow rate=0; tunnels lead to valves EE, GG
Valve GG has flow rate=0; tunnels lead to valves FF, HH
Valve HH has flow rate=22; tunnel leads to valve GG
Valve II has flow rate=0; tunnels lead to valves AA, JJ
Valve JJ has flow rate=21; tunnel leads to valve II
"""


def test_valves():
    network = ValveNetwork.from_str(example_valves)

    assert network.working_valves == ("BB", "CC", "DD", "EE", "HH", "JJ")
    assert most_pressure_released(network, minutes=30) == 1651
    assert most_pressure_released(network, minutes=26, with_elephant=True) == 1707


def test_valves_shared_memo():
    network = ValveNetwork.from_str(example_valves)
    memo = MemoTable()

    assert (
        most_pressure_released(network, minutes=26, with_elephant=True, memo=memo)
        == 1707
    )
    assert most_pressure_released(network, minutes=30, memo=memo) == 1651
    solved_states = len(memo)

    # Both runs' states are already memoized, so re-solving adds nothing.
    assert (
        most_pressure_released(network, minutes=26, with_elephant=True, memo=memo)
        == 1707
    )
    assert most_pressure_released(network, minutes=30, memo=memo) == 1651
    assert len(memo) == solved_states


def test_valves_out_of_time():
    network = ValveNetwork.from_str(example_valves)

    # DD is one tunnel away; opening it with a minute to spare takes both minutes.
    assert most_pressure_released(network, minutes=2) == 0
    assert most_pressure_released(network, minutes=3) == 20


def test_bad_valves():
    with raises(ValueError):
        ValveNetwork.from_str("Valve AA has flow rate=0; tunnels lead to valves")
    with raises(ValueError):
        ValveNetwork.from_str("Valve BB has flow rate=3; tunnel leads to valve BB")


@mark.parametrize("bad_grid", ["009\n990\n101\n000", "123\n4x6", "12\n345"])
def test_bad_weighted_grid(bad_grid):
    with raises(ValueError):
        WeightedGrid.from_str(bad_grid)


def test_zero_cost_cells_rejected():
    with raises(ValueError):
        WeightedGrid(((1, 0), (2, 3)))


def test_height_map_unreachable():
    with raises(NoSolutionError):
        fewest_climbing_steps("SaE")
