#!/usr/bin/env python

from argparse import ArgumentParser
from logging import DEBUG, basicConfig
from pathlib import Path
from typing import Callable

from memosearch.puzzles.circuit import parse_circuit, wire_signal
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
from memosearch.puzzles.rock_tilt import load_after_spins, load_after_tilt
from memosearch.puzzles.valves import ValveNetwork, most_pressure_released
from memosearch.search.memo import MemoTable


def _circuit_answers(text: str) -> list[int]:
    circuit = parse_circuit(text)
    first = wire_signal(circuit, "a")
    return [first, wire_signal(circuit, "a", overrides={"b": first})]


def _dice_answers(text: str) -> list[int]:
    starts = parse_starting_positions(text)
    return [deterministic_game_result(*starts), max(universes_won(*starts))]


def _valve_answers(text: str) -> list[int]:
    network = ValveNetwork.from_str(text)
    memo = MemoTable()
    return [
        most_pressure_released(network, minutes=30, memo=memo),
        most_pressure_released(network, minutes=26, with_elephant=True, memo=memo),
    ]


def _weighted_grid_answers(text: str) -> list[float]:
    grid = WeightedGrid.from_str(text)
    return [lowest_total_cost(grid), lowest_total_cost(grid.tiled(5))]


puzzle_solvers: dict[str, Callable[[str], list]] = {
    "maze": lambda text: [shortest_steps(GridMaze.from_str(text))],
    "weighted-grid": _weighted_grid_answers,
    "height-map": lambda text: [
        fewest_climbing_steps(text),
        fewest_climbing_steps(text, from_any_lowest=True),
    ],
    "lanternfish": lambda text: [
        fish_count(parse_timers(text), days=80),
        fish_count(parse_timers(text), days=256),
    ],
    "dirac-dice": _dice_answers,
    "rock-tilt": lambda text: [load_after_tilt(text), load_after_spins(text)],
    "circuit": _circuit_answers,
    "valves": _valve_answers,
}


def arg_parser() -> ArgumentParser:
    parser = ArgumentParser(
        description="Solve a puzzle input with the memoized search engines.",
    )
    parser.add_argument(
        "puzzle",
        choices=sorted(puzzle_solvers),
        help="the puzzle adapter to run",
    )
    parser.add_argument(
        "input_path",
        type=Path,
        help="path to the puzzle's input text",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="log search progress",
    )
    return parser


def main():
    args = arg_parser().parse_args()
    if args.debug:
        basicConfig(level=DEBUG)

    text = args.input_path.read_text()
    for part, answer in enumerate(puzzle_solvers[args.puzzle](text), start=1):
        print(f"Part {part}: {answer}")


if __name__ == "__main__":
    main()
