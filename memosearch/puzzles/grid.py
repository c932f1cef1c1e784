"""
Grid puzzles: 2d text maps searched with 4-directional moves.

- GridMaze: S(tart), E(nd), # walls, . floor; unit cost moves (BFS).
- WeightedGrid: every cell holds a digit, the cost of entering it (Dijkstra/A*).
- HeightMap: a..z elevations with S (a) and E (z); moves may climb at most one
  level, and may drop any amount (BFS, optionally from every lowest cell).

Positions are (row, col) tuples.
"""
from dataclasses import dataclass
from typing import Iterable

from frozendict import frozendict

from memosearch.search.errors import NoSolutionError
from memosearch.search.path_search import shortest_path
from memosearch.search.problem import SearchProblem

Pos = tuple[int, int]

unit_steps: tuple[Pos, ...] = ((-1, 0), (0, 1), (1, 0), (0, -1))


def _grid_lines(text: str) -> list[str]:
    lines = [line.strip() for line in text.strip().splitlines()]
    if not lines or any(len(line) != len(lines[0]) for line in lines):
        raise ValueError("Grids must be non-empty and rectangular.")
    return lines


def neighbor_poses(pos: Pos) -> list[Pos]:
    """
    >>> neighbor_poses((0, 0))
    [(-1, 0), (0, 1), (1, 0), (0, -1)]
    """
    row, col = pos
    return [(row + d_row, col + d_col) for d_row, d_col in unit_steps]


def manhattan_distance(a: Pos, b: Pos) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


@dataclass(frozen=True)
class GridMaze(SearchProblem[Pos]):
    """
    >>> maze = GridMaze.from_str("S..\\n.#.\\n..E")
    >>> maze.start, maze.end
    ((0, 0), (2, 2))
    >>> sorted(maze.transitions((0, 1)))
    [((0, 0), 1), ((0, 2), 1)]
    """

    floor_poses: frozenset[Pos]
    start: Pos
    end: Pos

    @staticmethod
    def from_str(text: str) -> "GridMaze":
        start = None
        end = None
        floor_poses = set()
        for row, line in enumerate(_grid_lines(text)):
            for col, cell_char in enumerate(line):
                pos = (row, col)
                if cell_char == "#":
                    continue
                elif cell_char == "S":
                    start = pos
                elif cell_char == "E":
                    end = pos
                elif cell_char != ".":
                    raise ValueError(f"Unexpected maze cell {cell_char!r} at {pos}.")
                floor_poses.add(pos)

        if start is None or end is None:
            raise ValueError("Mazes need exactly one S and one E.")

        return GridMaze(floor_poses=frozenset(floor_poses), start=start, end=end)

    def initial_state(self) -> Pos:
        return self.start

    def transitions(self, state: Pos) -> Iterable[tuple[Pos, float]]:
        return [
            (next_pos, 1)
            for next_pos in neighbor_poses(state)
            if next_pos in self.floor_poses
        ]

    def is_goal_state(self, state: Pos) -> bool:
        return state == self.end

    def min_cost(self, state: Pos) -> float:
        return manhattan_distance(state, self.end)


def shortest_steps(maze: GridMaze) -> float:
    """
    Fewest moves from S to E, not the number of cells passed through between
    them.

    inf if E can't be reached.
    """
    return shortest_path(maze, frontier="fifo").cost


@dataclass(frozen=True)
class WeightedGrid(SearchProblem[Pos]):
    """Travel from the top left to the bottom right, paying each entered cell's digit."""

    cell_costs: tuple[tuple[int, ...], ...]

    @staticmethod
    def from_str(text: str) -> "WeightedGrid":
        try:
            cell_costs = tuple(
                tuple(int(char) for char in line) for line in _grid_lines(text)
            )
        except ValueError as e:
            raise ValueError(f"Weighted grids may only contain digits: {e}") from e

        return WeightedGrid(cell_costs)

    def __post_init__(self):
        # min_cost() is only admissible when every cell costs at least 1.
        if any(not (1 <= cost <= 9) for row in self.cell_costs for cost in row):
            raise ValueError("Weighted grids may only contain digits 1-9.")

    @property
    def height(self) -> int:
        return len(self.cell_costs)

    @property
    def width(self) -> int:
        return len(self.cell_costs[0])

    @property
    def end(self) -> Pos:
        return (self.height - 1, self.width - 1)

    def tiled(self, times: int) -> "WeightedGrid":
        """
        Repeat the grid times x times, adding one per tile step right or down and
        wrapping 9 back around to 1.

        >>> WeightedGrid(((8,),)).tiled(3).cell_costs
        ((8, 9, 1), (9, 1, 2), (1, 2, 3))
        """
        return WeightedGrid(
            tuple(
                tuple(
                    (cost + tile_row + tile_col - 1) % 9 + 1
                    for tile_col in range(times)
                    for cost in row_costs
                )
                for tile_row in range(times)
                for row_costs in self.cell_costs
            )
        )

    def initial_state(self) -> Pos:
        return (0, 0)

    def transitions(self, state: Pos) -> Iterable[tuple[Pos, float]]:
        return [
            (next_pos, self.cell_costs[next_pos[0]][next_pos[1]])
            for next_pos in neighbor_poses(state)
            if 0 <= next_pos[0] < self.height and 0 <= next_pos[1] < self.width
        ]

    def is_goal_state(self, state: Pos) -> bool:
        return state == self.end

    def min_cost(self, state: Pos) -> float:
        # Every cell costs at least 1.
        return manhattan_distance(state, self.end)


def lowest_total_cost(grid: WeightedGrid) -> float:
    return shortest_path(grid, frontier="priority").cost


@dataclass(frozen=True)
class HeightMap(SearchProblem[Pos]):
    elevations: frozendict[Pos, int]
    starts: tuple[Pos, ...]
    end: Pos

    @staticmethod
    def from_str(text: str, from_any_lowest: bool = False) -> "HeightMap":
        elevations = {}
        starts = []
        end = None
        for row, line in enumerate(_grid_lines(text)):
            for col, cell_char in enumerate(line):
                pos = (row, col)
                if cell_char == "S":
                    starts.insert(0, pos)
                    cell_char = "a"
                elif cell_char == "E":
                    end = pos
                    cell_char = "z"
                elif not ("a" <= cell_char <= "z"):
                    raise ValueError(f"Unexpected elevation {cell_char!r} at {pos}.")
                elif from_any_lowest and cell_char == "a":
                    starts.append(pos)

                elevations[pos] = ord(cell_char) - ord("a")

        if not starts or end is None:
            raise ValueError("Height maps need an S and an E.")

        return HeightMap(frozendict(elevations), tuple(starts), end)

    def initial_state(self) -> Pos:
        return self.starts[0]

    def initial_states(self) -> list[Pos]:
        return list(self.starts)

    def transitions(self, state: Pos) -> Iterable[tuple[Pos, float]]:
        max_elevation = self.elevations[state] + 1
        return [
            (next_pos, 1)
            for next_pos in neighbor_poses(state)
            if self.elevations.get(next_pos, max_elevation + 1) <= max_elevation
        ]

    def is_goal_state(self, state: Pos) -> bool:
        return state == self.end


def fewest_climbing_steps(text: str, from_any_lowest: bool = False) -> int:
    result = shortest_path(HeightMap.from_str(text, from_any_lowest), "fifo")
    if not result.found:
        raise NoSolutionError("E can't be reached from any start.")

    return int(result.cost)
